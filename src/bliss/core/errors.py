"""Error kinds raised by the composition engine."""


class BlissError(Exception):
    """Base class for engine errors."""


class LoadError(BlissError):
    """The gloss dataset is unreachable or malformed."""


class NotFoundError(BlissError, LookupError):
    """A label or BCI AV id has no match in the gloss index."""


class MalformedSequenceError(BlissError, ValueError):
    """A token sequence violates the atom/operator rules."""

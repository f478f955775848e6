"""
Token sequences for (possibly compound) Bliss symbols.

A Bliss symbol is identified by its BCI AV id. A compound symbol is written
as a sequence of atoms (BCI AV ids) joined by operators:

    12335                       simple: one atom
    [12335, "/", 8499]          "/" combines two symbols side by side
    [14133, ";", 9004]          ";" puts an indicator on the symbol before it

Well-formed sequences are never empty, never start or end with an
operator, and never have two operators next to each other.

The external (JSON) form of a simple sequence is the bare integer; every
other sequence is a list of integers and operator strings.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Union

from .errors import MalformedSequenceError


class Operator(str, Enum):
    """Marker tokens that combine atoms."""
    COMBINE = "/"
    INDICATOR = ";"

    def __str__(self) -> str:
        return self.value


Atom = int
Token = Union[Atom, Operator]

_OPERATORS = {op.value: op for op in Operator}


def is_atom(token) -> bool:
    """True for a non-negative int (bools excluded)."""
    return isinstance(token, int) and not isinstance(token, bool) and token >= 0


def parse_token(raw) -> Token:
    """Normalize one raw element (int, numeric str, operator str)."""
    if isinstance(raw, Operator):
        return raw
    if isinstance(raw, bool):
        raise MalformedSequenceError(f"Not a token: {raw!r}")
    if isinstance(raw, int):
        if raw < 0:
            raise MalformedSequenceError(f"BCI AV id must be non-negative, got {raw}")
        return raw
    if isinstance(raw, str):
        text = raw.strip()
        if text in _OPERATORS:
            return _OPERATORS[text]
        if text.isdigit():
            return int(text)
    raise MalformedSequenceError(f"Not a token: {raw!r}")


@dataclass(frozen=True, slots=True)
class TokenSequence:
    """Immutable ordered sequence of atoms and operators.

    Equality is element by element, so the order in which modifiers were
    appended or prepended is part of a sequence's identity.
    """
    tokens: tuple[Token, ...]

    def __post_init__(self) -> None:
        if not self.tokens:
            raise MalformedSequenceError("Token sequence must not be empty")
        for token in self.tokens:
            if not (is_atom(token) or isinstance(token, Operator)):
                raise MalformedSequenceError(f"Not a token: {token!r}")
        if isinstance(self.tokens[0], Operator):
            raise MalformedSequenceError(
                f"Token sequence cannot start with operator {self.tokens[0]}")
        if isinstance(self.tokens[-1], Operator):
            raise MalformedSequenceError(
                f"Token sequence cannot end with operator {self.tokens[-1]}")
        for left, right in zip(self.tokens, self.tokens[1:]):
            if isinstance(left, Operator) and isinstance(right, Operator):
                raise MalformedSequenceError(
                    f"Adjacent operators {left}{right} in {self.to_bci_av_id()!r}")

    # ---- Construction ----

    @classmethod
    def atom(cls, bci_av_id: int) -> TokenSequence:
        """The simple form of a single BCI AV id."""
        return cls((parse_token(bci_av_id),))

    @classmethod
    def parse(cls, value) -> TokenSequence:
        """Normalize an external BCI AV id value.

        Accepts a TokenSequence, an int, a numeric string, or a list/tuple
        mixing ints, numeric strings and operator strings.
        """
        if isinstance(value, TokenSequence):
            return value
        if isinstance(value, (list, tuple)):
            return cls(tuple(parse_token(v) for v in value))
        return cls((parse_token(value),))

    # ---- Inspection ----

    @property
    def is_simple(self) -> bool:
        """Exactly one atom."""
        return len(self.tokens) == 1

    def atoms(self) -> list[int]:
        """The atoms in order, operators dropped."""
        return [t for t in self.tokens if not isinstance(t, Operator)]

    def contains_atom(self, bci_av_id: int) -> bool:
        return bci_av_id in self.atoms()

    def __len__(self) -> int:
        return len(self.tokens)

    def __iter__(self) -> Iterator[Token]:
        return iter(self.tokens)

    def __getitem__(self, index):
        return self.tokens[index]

    # ---- Derivation ----

    def joined(self, other: TokenSequence, operator: Operator = Operator.COMBINE) -> TokenSequence:
        """``self ++ [operator] ++ other``."""
        return TokenSequence(self.tokens + (operator,) + other.tokens)

    def without(self, start: int, stop: int) -> TokenSequence:
        """Drop elements ``start`` up to (not including) ``stop``."""
        return TokenSequence(self.tokens[:start] + self.tokens[stop:])

    def replaced(self, start: int, stop: int, tokens: Iterable[Token]) -> TokenSequence:
        """Replace elements ``start:stop`` with ``tokens``."""
        return TokenSequence(self.tokens[:start] + tuple(tokens) + self.tokens[stop:])

    # ---- External form ----

    def to_bci_av_id(self) -> int | list:
        """Bare int for a simple sequence, list of ints and strings otherwise."""
        if self.is_simple:
            return self.tokens[0]
        return [t.value if isinstance(t, Operator) else t for t in self.tokens]

    def __str__(self) -> str:
        return "".join(str(t) for t in self.tokens)

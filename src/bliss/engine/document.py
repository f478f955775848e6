"""Encoding document: the symbols being composed and the caret.

One EncodingDocument is owned by the caller and passed into every editing
operation. Edits are read → compute → write; ``editing()`` holds the
document lock for that span so a multi-threaded host sees them atomically.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field

from bliss.core.tokens import TokenSequence


@dataclass(frozen=True, slots=True)
class ModifierRecord:
    """One modifier applied to a symbol."""
    modifier_tokens: TokenSequence
    modifier_gloss: str
    is_prepended: bool

    def to_dict(self) -> dict:
        return {
            "modifierId": self.modifier_tokens.to_bci_av_id(),
            "modifierGloss": self.modifier_gloss,
            "isPrepended": self.is_prepended,
        }


@dataclass
class ResolvedSymbol:
    """A symbol in the document.

    ``modifier_info`` is oldest first. ``head_span`` is the ``(start, stop)``
    slice of ``tokens`` holding the symbol the modifiers were applied to;
    None means the whole sequence.
    """
    id: str
    label: str
    tokens: TokenSequence
    modifier_info: list[ModifierRecord] = field(default_factory=list)
    head_span: tuple[int, int] | None = None

    def to_payload(self) -> dict:
        """Renderer-facing form, keyed by bciAvId and label."""
        return {
            "id": self.id,
            "label": self.label,
            "bciAvId": self.tokens.to_bci_av_id(),
            "modifierInfo": [m.to_dict() for m in self.modifier_info],
        }


class EncodingDocument:
    """Ordered resolved symbols plus a caret (-1 when there is none)."""

    def __init__(self):
        self.payloads: list[ResolvedSymbol] = []
        self.caret_position = -1
        self._lock = threading.RLock()

    @contextmanager
    def editing(self):
        """Hold the document for one read-compute-write edit."""
        with self._lock:
            yield self

    def caret_symbol(self) -> ResolvedSymbol | None:
        """Symbol at the caret, or None if the caret is unset or out of range."""
        if 0 <= self.caret_position < len(self.payloads):
            return self.payloads[self.caret_position]
        return None

    def insert(self, symbol: ResolvedSymbol) -> int:
        """Insert after the caret and move the caret onto the new symbol."""
        with self._lock:
            position = self.caret_position + 1
            if position > len(self.payloads) or position < 0:
                position = len(self.payloads)
            self.payloads.insert(position, symbol)
            self.caret_position = position
            return position

    def replace_at_caret(self, symbol: ResolvedSymbol) -> None:
        """Overwrite the caret slot. The caret does not move."""
        with self._lock:
            if self.caret_symbol() is None:
                raise IndexError(f"No symbol at caret position {self.caret_position}")
            self.payloads[self.caret_position] = symbol

    def move_caret(self, position: int) -> None:
        with self._lock:
            if not -1 <= position < len(self.payloads):
                raise IndexError(
                    f"Caret position must be -1..{len(self.payloads) - 1}, got {position}")
            self.caret_position = position

    def clear(self) -> None:
        with self._lock:
            self.payloads = []
            self.caret_position = -1

    def snapshot(self) -> dict:
        with self._lock:
            return {
                "payloads": [s.to_payload() for s in self.payloads],
                "caretPosition": self.caret_position,
            }

    def __len__(self):
        return len(self.payloads)

    @property
    def is_empty(self) -> bool:
        return not self.payloads

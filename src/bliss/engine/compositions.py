"""Composition index: which compositions use a given BCI AV id.

Backs the numeric search: typing "14133" lists every known symbol whose
token sequence contains atom 14133, simple or compound.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass

from bliss import config
from bliss.core.tokens import TokenSequence


@dataclass(frozen=True, slots=True)
class GlossMatch:
    """A candidate token sequence for a search, with its gloss."""
    tokens: TokenSequence
    description: str

    def to_dict(self) -> dict:
        return {"bciAvId": self.tokens.to_bci_av_id(), "label": self.description}


class CompositionIndex:
    """Atom → compositions that reference it, in registration order.

    Seeded compositions (gloss entries, special encodings) are permanent.
    Compositions registered from edits are kept up to ``history`` at a
    time; the oldest is forgotten first.
    """

    def __init__(self, history=config.COMPOSITION_HISTORY):
        self.history = history
        self._compositions: dict[TokenSequence, str] = {}
        self._by_atom: dict[int, list[TokenSequence]] = {}
        self._recent: OrderedDict[TokenSequence, None] = OrderedDict()

    @classmethod
    def seeded(cls, gloss_index, special_encodings=None, history=config.COMPOSITION_HISTORY):
        """Index every gloss entry and every special encoding."""
        index = cls(history)
        for entry in gloss_index:
            index.register(TokenSequence.atom(entry.id), entry.description, pinned=True)
        for label, value in (special_encodings or {}).items():
            for tokens in special_sequences(value):
                index.register(tokens, label, pinned=True)
        return index

    def register(self, tokens: TokenSequence, label: str, pinned: bool = False) -> bool:
        """Record a composition. Returns False if it was already known."""
        if tokens in self._compositions:
            if tokens in self._recent:
                self._recent.move_to_end(tokens)
            return False
        self._compositions[tokens] = label
        for atom in dict.fromkeys(tokens.atoms()):
            self._by_atom.setdefault(atom, []).append(tokens)
        if not pinned:
            self._recent[tokens] = None
            while len(self._recent) > self.history:
                oldest, _ = self._recent.popitem(last=False)
                self._forget(oldest)
        return True

    def _forget(self, tokens):
        del self._compositions[tokens]
        for atom in dict.fromkeys(tokens.atoms()):
            users = self._by_atom[atom]
            users.remove(tokens)
            if not users:
                del self._by_atom[atom]

    def find_using(self, bci_av_id: int) -> list[GlossMatch]:
        return [GlossMatch(tokens, self._compositions[tokens])
                for tokens in self._by_atom.get(bci_av_id, [])]

    def __len__(self):
        return len(self._compositions)

    def __contains__(self, tokens):
        return tokens in self._compositions


def special_sequences(value) -> list[TokenSequence]:
    """Normalize a special-encoding value to a list of token sequences.

    A value is one BCI AV id value (int or flat list) or a list of them
    (list of lists).
    """
    if isinstance(value, TokenSequence):
        return [value]
    if isinstance(value, (list, tuple)) and value and all(
            isinstance(v, (list, tuple, TokenSequence)) for v in value):
        return [TokenSequence.parse(v) for v in value]
    return [TokenSequence.parse(value)]

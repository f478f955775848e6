"""
Gloss resolver: search text → candidate token sequences.

Resolution order for a label:
  1. Special encodings (hand-authored label → sequence table), no index scan
  2. Gloss index scan in load order: exact description match, or the label
     as a whole word inside the description (case-sensitive)

All matches are returned; the first one is the caller's default. A bare
number in the search box is an id query over known compositions instead.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

import structlog

from bliss.core.errors import NotFoundError
from bliss.core.tokens import TokenSequence
from .compositions import CompositionIndex, GlossMatch, special_sequences
from .gloss_index import GlossEntry

logger = structlog.get_logger(__name__)

_NUMERIC_PATTERN = re.compile(r"\d+")


@dataclass(frozen=True)
class SearchTerm:
    """A classified search box entry."""
    text: str
    is_empty: bool
    is_numeric: bool

    @property
    def bci_av_id(self) -> int | None:
        return int(self.text) if self.is_numeric else None


@dataclass
class SearchResult:
    """Outcome of a search.

    ``no_search_term`` separates "nothing typed" from "typed, no hits".
    """
    term: str
    no_search_term: bool
    is_numeric: bool = False
    matches: list[GlossMatch] = field(default_factory=list)


def parse_search_term(term: str) -> SearchTerm:
    text = (term or "").strip()
    return SearchTerm(
        text=text,
        is_empty=not text,
        is_numeric=bool(_NUMERIC_PATTERN.fullmatch(text)),
    )


def word_pattern(label: str) -> re.Pattern:
    """Whole-word, case-sensitive pattern for a label."""
    return re.compile(r"\b" + re.escape(label) + r"\b")


class GlossResolver:
    """Resolve labels and ids against a gloss index."""

    def __init__(self, gloss_index, special_encodings=None, compositions=None):
        self.index = gloss_index
        self.special_encodings = {
            label: special_sequences(value)
            for label, value in (special_encodings or {}).items()
        }
        if compositions is None:
            compositions = CompositionIndex.seeded(gloss_index, special_encodings)
        self.compositions = compositions

    def resolve_by_label(self, label: str) -> list[GlossMatch]:
        """All index entries matching ``label``, in index order.

        Raises NotFoundError if there are none.
        """
        if label in self.special_encodings:
            return [GlossMatch(tokens, label) for tokens in self.special_encodings[label]]

        matches = []
        pattern = word_pattern(label)
        for entry in self.index:
            if label == entry.description or pattern.search(entry.description):
                matches.append(GlossMatch(TokenSequence.atom(entry.id), entry.description))
                logger.debug("gloss_match", label=label,
                             description=entry.description, bci_av_id=entry.id)

        if not matches:
            raise NotFoundError(f"BciAvId not found for label: {label}")
        return matches

    def resolve_by_id(self, bci_av_id: int) -> GlossEntry:
        entry = self.index.get(bci_av_id)
        if entry is None:
            raise NotFoundError(f"BciAvId not found for BCI AV ID: {bci_av_id}")
        return entry

    def find_compositions_using(self, bci_av_id: int) -> list[GlossMatch]:
        return self.compositions.find_using(bci_av_id)

    def search(self, term: str) -> SearchResult:
        """Interactive search. Never raises NotFoundError."""
        parsed = parse_search_term(term)
        if parsed.is_empty:
            result = SearchResult(term=parsed.text, no_search_term=True)
        elif parsed.is_numeric:
            result = SearchResult(
                term=parsed.text, no_search_term=False, is_numeric=True,
                matches=self.find_compositions_using(parsed.bci_av_id),
            )
        else:
            try:
                matches = self.resolve_by_label(parsed.text)
            except NotFoundError:
                matches = []
            result = SearchResult(term=parsed.text, no_search_term=False, matches=matches)

        logger.debug("gloss_search", term=parsed.text,
                     no_search_term=result.no_search_term, matches=len(result.matches))
        return result

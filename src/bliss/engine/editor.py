"""Composition editor: applies composition rules to the encoding document.

Each edit takes the symbol at the caret, computes its replacement, and
writes it back into the same slot. The caret does not move. A completed
edit registers the new composition (so numeric searches find it) and
announces the new label. With no symbol at the caret, or nothing to
change, an edit is a no-op returning None.
"""

from __future__ import annotations

import uuid

import structlog

from bliss.core.tokens import TokenSequence
from . import composition
from .document import EncodingDocument, ResolvedSymbol
from .speech import safe_speak

logger = structlog.get_logger(__name__)

CLEAR_LABEL = "clear"


class CompositionEditor:
    """Editing commands bound to one EncodingDocument."""

    def __init__(self, document: EncodingDocument, speaker=None,
                 compositions=None, indicator_ids=None):
        self.document = document
        self.speaker = speaker
        self.compositions = compositions
        self.indicator_ids = indicator_ids

    # ---- Inserting symbols ----

    def insert_symbol(self, tokens, label: str, symbol_id: str | None = None) -> ResolvedSymbol:
        """Add a resolved symbol after the caret and move the caret to it."""
        symbol = ResolvedSymbol(
            id=symbol_id or uuid.uuid4().hex,
            label=label,
            tokens=TokenSequence.parse(tokens),
        )
        self.document.insert(symbol)
        self._register(symbol)
        safe_speak(self.speaker, symbol.label)
        return symbol

    def insert_match(self, match, symbol_id: str | None = None) -> ResolvedSymbol:
        """Insert a resolver GlossMatch."""
        return self.insert_symbol(match.tokens, match.description, symbol_id)

    # ---- Modifiers ----

    def append_modifier(self, modifier_tokens, modifier_gloss: str,
                        source_id: str = "") -> ResolvedSymbol | None:
        return self._edit("append_modifier", lambda symbol: composition.append_modifier(
            symbol, TokenSequence.parse(modifier_tokens), modifier_gloss, source_id))

    def prepend_modifier(self, modifier_tokens, modifier_gloss: str,
                         source_id: str = "") -> ResolvedSymbol | None:
        return self._edit("prepend_modifier", lambda symbol: composition.prepend_modifier(
            symbol, TokenSequence.parse(modifier_tokens), modifier_gloss, source_id))

    # ---- Indicators ----

    def caret_indicator_position(self) -> int:
        """Index of the indicator remove_indicator() would drop, or -1."""
        symbol = self.document.caret_symbol()
        if symbol is None:
            return -1
        return composition.removable_indicator_position(symbol.tokens, self.indicator_ids)

    def can_remove_indicator(self) -> bool:
        return self.caret_indicator_position() != -1

    def remove_indicator(self, source_id: str = "") -> ResolvedSymbol | None:
        return self._edit("remove_indicator", lambda symbol: composition.remove_indicator(
            symbol, source_id, self.indicator_ids))

    def apply_indicator(self, indicator_tokens, source_id: str = "") -> ResolvedSymbol | None:
        return self._edit("apply_indicator", lambda symbol: composition.apply_indicator(
            symbol, TokenSequence.parse(indicator_tokens), source_id, self.indicator_ids))

    # ---- Commands ----

    def clear(self, label: str = CLEAR_LABEL) -> None:
        """Reset the document to empty with no caret."""
        self.document.clear()
        safe_speak(self.speaker, label)

    # ---- Internals ----

    def _edit(self, operation, transform) -> ResolvedSymbol | None:
        with self.document.editing() as document:
            symbol = document.caret_symbol()
            if symbol is None:
                logger.debug("edit_without_caret_symbol", operation=operation,
                             caret_position=document.caret_position)
                return None
            updated = transform(symbol)
            if updated is None:
                logger.debug("edit_noop", operation=operation, symbol_id=symbol.id)
                return None
            document.replace_at_caret(updated)
            self._register(updated)

        logger.debug("edit_applied", operation=operation, label=updated.label,
                     bci_av_id=updated.tokens.to_bci_av_id())
        safe_speak(self.speaker, updated.label)
        return updated

    def _register(self, symbol):
        if self.compositions is not None:
            self.compositions.register(symbol.tokens, symbol.label)

"""Composition rules for modifiers and indicators.

Every function takes a ResolvedSymbol and returns a new one; the input is
left untouched. Token order follows where the modifier goes (appended
after, prepended before), but the spoken label always puts the modifier
gloss first:

    append "PLURAL" to CAT  →  [cat, "/", plural]     "PLURAL CAT"
    prepend "BIG" to CAT    →  [big, "/", cat]        "BIG CAT"

Indicators sit after an INDICATOR operator: [14133, ";", 9004]. Removing
one drops the operator in front of it together with the indicator.

Each result carries the token span of its head (the symbol the modifiers
were applied to), shifted by every edit, so indicator edits target the
head and never a modifier.
"""

from __future__ import annotations

import structlog

from bliss import config
from bliss.core.tokens import Operator, TokenSequence
from .document import ModifierRecord, ResolvedSymbol

logger = structlog.get_logger(__name__)


def find_indicator_positions(tokens: TokenSequence, indicator_ids=None) -> list[int]:
    """Indices of indicator atoms, left to right."""
    indicator_ids = config.INDICATOR_IDS if indicator_ids is None else indicator_ids
    return [i for i, token in enumerate(tokens)
            if not isinstance(token, Operator) and token in indicator_ids]


def removable_indicator_position(tokens: TokenSequence, indicator_ids=None,
                                 start: int = 0, stop: int | None = None) -> int:
    """First indicator in ``tokens[start:stop]`` that sits after ";", or -1.

    An indicator atom without an INDICATOR operator in front of it is a
    symbol in its own right (e.g. a bare indicator gloss) and is skipped.
    """
    stop = len(tokens) if stop is None else stop
    for i in find_indicator_positions(tokens, indicator_ids):
        if start < i < stop and tokens[i - 1] is Operator.INDICATOR:
            return i
    return -1


def head_span(symbol: ResolvedSymbol) -> tuple[int, int]:
    """``(start, stop)`` of the head symbol inside ``symbol.tokens``."""
    if symbol.head_span is None:
        return 0, len(symbol.tokens)
    return symbol.head_span


def head_position(symbol: ResolvedSymbol) -> int:
    """Index of the first atom of the head symbol."""
    return head_span(symbol)[0]


def append_modifier(symbol: ResolvedSymbol, modifier_tokens: TokenSequence,
                    modifier_gloss: str, source_id: str = "") -> ResolvedSymbol:
    """Add a modifier after the symbol ("post" modifier)."""
    modifier_tokens = TokenSequence.parse(modifier_tokens)
    return ResolvedSymbol(
        id=symbol.id + source_id,
        label=f"{modifier_gloss} {symbol.label}",
        tokens=symbol.tokens.joined(modifier_tokens, Operator.COMBINE),
        modifier_info=symbol.modifier_info + [
            ModifierRecord(modifier_tokens, modifier_gloss, is_prepended=False)
        ],
        head_span=head_span(symbol),
    )


def prepend_modifier(symbol: ResolvedSymbol, modifier_tokens: TokenSequence,
                     modifier_gloss: str, source_id: str = "") -> ResolvedSymbol:
    """Add a modifier in front of the symbol ("pre" modifier)."""
    modifier_tokens = TokenSequence.parse(modifier_tokens)
    start, stop = head_span(symbol)
    shift = len(modifier_tokens) + 1
    return ResolvedSymbol(
        id=symbol.id + source_id,
        label=f"{modifier_gloss} {symbol.label}",
        tokens=modifier_tokens.joined(symbol.tokens, Operator.COMBINE),
        modifier_info=symbol.modifier_info + [
            ModifierRecord(modifier_tokens, modifier_gloss, is_prepended=True)
        ],
        head_span=(start + shift, stop + shift),
    )


def remove_indicator(symbol: ResolvedSymbol, source_id: str = "",
                     indicator_ids=None) -> ResolvedSymbol | None:
    """Drop the first indicator and the ";" in front of it.

    Returns None when there is nothing to remove. Indicator atoms without a
    ";" in front of them are left alone.
    """
    index = removable_indicator_position(symbol.tokens, indicator_ids)
    if index == -1:
        if find_indicator_positions(symbol.tokens, indicator_ids):
            logger.warning("indicator_without_operator", symbol_id=symbol.id,
                           bci_av_id=symbol.tokens.to_bci_av_id())
        return None

    start, stop = head_span(symbol)
    if index < start:
        start, stop = start - 2, stop - 2
    elif index < stop:
        stop -= 2

    return ResolvedSymbol(
        id=symbol.id + source_id,
        label=symbol.label,
        tokens=symbol.tokens.without(index - 1, index + 1),
        modifier_info=list(symbol.modifier_info),
        head_span=(start, stop),
    )


def apply_indicator(symbol: ResolvedSymbol, indicator_tokens: TokenSequence,
                    source_id: str = "", indicator_ids=None) -> ResolvedSymbol:
    """Put an indicator on the head symbol, replacing the one it has.

    Without an existing indicator, ``;indicator`` goes right after the
    head's first atom. Indicators inside modifiers are not touched.
    """
    indicator_tokens = TokenSequence.parse(indicator_tokens)
    start, stop = head_span(symbol)
    index = removable_indicator_position(symbol.tokens, indicator_ids, start, stop)
    if index != -1:
        tokens = symbol.tokens.replaced(index, index + 1, indicator_tokens)
        stop += len(indicator_tokens) - 1
    else:
        tokens = symbol.tokens.replaced(
            start + 1, start + 1, (Operator.INDICATOR,) + indicator_tokens.tokens)
        stop += len(indicator_tokens) + 1

    return ResolvedSymbol(
        id=symbol.id + source_id,
        label=symbol.label,
        tokens=tokens,
        modifier_info=list(symbol.modifier_info),
        head_span=(start, stop),
    )

"""Palette builder: 2-D label layout to palette JSON.

Each label in the layout becomes one grid cell:

    "BLANK"   no cell (the position is still used up)
    "12335"   a BCI AV id: looked up, the gloss description becomes the label
    "cat"     a gloss: resolved by label, the first match is used

Every label is resolved on its own. A failure never stops the batch: the
cell is still emitted, with " NOT FOUND" appended to its label and the
"not found" composition as its symbol, and the message goes to ``errors``.
Ambiguous gloss matches are collected in ``matches`` for manual review.
"""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, field

import structlog

from bliss import config
from bliss.core.errors import BlissError
from bliss.core.tokens import TokenSequence

logger = structlog.get_logger(__name__)

_INTEGER_PATTERN = re.compile(r"\s*\d+\s*")


@dataclass
class PaletteCell:
    """One cell of a palette grid."""
    type: str
    label: str
    bci_av_id: TokenSequence
    row_start: int
    column_start: int
    row_span: int = 1
    column_span: int = 1

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "options": {
                "label": self.label,
                "bciAvId": self.bci_av_id.to_bci_av_id(),
                "rowStart": self.row_start,
                "rowSpan": self.row_span,
                "columnStart": self.column_start,
                "columnSpan": self.column_span,
            },
        }


@dataclass
class CellResolution:
    """Result of resolving one label: a cell, and an error if it failed."""
    key: str
    cell: PaletteCell
    error: str | None = None
    matches: list | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class PaletteBuildResult:
    palette_json: dict
    matches: list[dict] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


def is_bci_av_id_label(label: str) -> bool:
    return bool(_INTEGER_PATTERN.fullmatch(label))


def resolve_cell(label, row, column, resolver, cell_type=config.CELL_TYPE) -> CellResolution:
    """Resolve one label into a cell. Never raises for a missing gloss or id."""
    cell = PaletteCell(
        type=cell_type,
        label=label,
        bci_av_id=TokenSequence.parse(config.NOT_FOUND_BCI_AV_ID),
        row_start=row,
        column_start=column,
    )
    key = f"{label}-{uuid.uuid4()}"

    try:
        if is_bci_av_id_label(label):
            bci_av_id = int(label)
            entry = resolver.resolve_by_id(bci_av_id)
            cell.bci_av_id = TokenSequence.atom(bci_av_id)
            cell.label = entry.description
            return CellResolution(key, cell)

        matches = resolver.resolve_by_label(label)
        cell.bci_av_id = matches[0].tokens
        return CellResolution(key, cell, matches=matches)
    except BlissError as e:
        cell.label = label + config.NOT_FOUND_SUFFIX
        cell.bci_av_id = TokenSequence.parse(config.NOT_FOUND_BCI_AV_ID)
        return CellResolution(key, cell, error=str(e))


def build_palette(labels, resolver, start_row=config.START_ROW,
                  start_column=config.START_COLUMN, cell_type=config.CELL_TYPE,
                  palette_name=config.PALETTE_NAME) -> PaletteBuildResult:
    """Build a palette from rows of labels.

    Args:
        labels: list of rows, each a list of label strings
        resolver: GlossResolver over a loaded gloss index
        start_row: grid row of the first layout row
        start_column: grid column of the first layout column
        cell_type: cell component type written into every cell
        palette_name: value of the palette's "name"

    Returns:
        PaletteBuildResult with the palette JSON, the ambiguity list
        ({label: [{"bciAvId", "label"}, ...]} per gloss label) and the
        error messages in layout order.
    """
    result = PaletteBuildResult(palette_json={"name": palette_name, "cells": {}})

    for row_index, row in enumerate(labels):
        for col_index, label in enumerate(row):
            if label == config.BLANK_CELL_LABEL:
                continue

            resolution = resolve_cell(
                label, start_row + row_index, start_column + col_index,
                resolver, cell_type,
            )
            if resolution.matches is not None:
                result.matches.append(
                    {label: [m.to_dict() for m in resolution.matches]})
            if not resolution.ok:
                result.errors.append(resolution.error)
                logger.info("palette_label_not_found", label=label, error=resolution.error)
            result.palette_json["cells"][resolution.key] = resolution.cell.to_dict()

    logger.info("palette_built", name=palette_name,
                cells=len(result.palette_json["cells"]), errors=len(result.errors))
    return result

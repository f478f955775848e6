"""Palette JSON generator.

Builds a palette from the configured label layout and writes it out as
JSON:

    {
      "name": "<palette name>",
      "cells": {
        "<label>-<uuid>": {
          "type": "<type>",
          "options": {"label", "bciAvId", "rowStart", "rowSpan",
                      "columnStart", "columnSpan"}
        },
        ...
      }
    }

Layout, start row/column, cell type and special encodings come from
bliss.config, not from the command line.
"""

import json
from pathlib import Path

from bliss import config
from .builder import build_palette


def write_palette(output_path, palette_json):
    """Write palette JSON, creating parent directories."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(palette_json, indent=2) + "\n", encoding="utf-8")
    return output_path


def generate_palette_file(output_path, resolver, labels=None,
                          start_row=config.START_ROW,
                          start_column=config.START_COLUMN,
                          cell_type=config.CELL_TYPE,
                          palette_name=config.PALETTE_NAME):
    """Build the palette and write it to ``output_path``.

    Returns the PaletteBuildResult so the caller can report matches and
    errors.
    """
    result = build_palette(
        config.PALETTE_LABELS if labels is None else labels,
        resolver,
        start_row=start_row,
        start_column=start_column,
        cell_type=cell_type,
        palette_name=palette_name,
    )
    write_palette(output_path, result.palette_json)
    return result


def format_report(result):
    """Console report: ambiguous matches, then errors."""
    lines = []
    for label_matches in result.matches:
        for label, matches in label_matches.items():
            lines.append(f"For label {label}:")
            for match in matches:
                lines.append(f"\tFound match: {match['label']}, bci-av-id: {match['bciAvId']}")
            lines.append("")
    if result.errors:
        lines.append(f"{len(result.errors)} label(s) not resolved:")
        for error in result.errors:
            lines.append(f"\t{error}")
    return "\n".join(lines)

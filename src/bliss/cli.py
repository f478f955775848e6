"""Bliss composer: command line for the composition engine.

Usage:
    bliss <command> [args...]

Commands:
    search <term>        Look up a gloss (or, for a number, compositions using that id)
    compose <label>      Resolve a label and apply modifiers/indicators to it
    palette <output>     Generate a palette JSON file from the configured layout

Environment:
    BLISS_GLOSS_SOURCE   Gloss dataset URL or path
    BLISS_GLOSS_CACHE    LMDB cache directory ("" disables the cache)
    BLISS_LOG_LEVEL      Log level (default: WARNING)
    BLISS_LOG_FORMAT     console | json
"""

import argparse
import json
import os
import sys

import lmdb

from bliss import config
from bliss.cache.gloss_cache import GlossDatasetCache
from bliss.core.errors import BlissError
from bliss.core.log_config import configure_logging
from bliss.engine.document import EncodingDocument
from bliss.engine.editor import CompositionEditor
from bliss.engine.gloss_index import load_gloss_index
from bliss.engine.resolver import GlossResolver
from bliss.engine.speech import LoggingSpeaker
from bliss.palette.generator import format_report, generate_palette_file


# ---- Setup ----

def open_cache(path):
    """Open the dataset cache, or None when disabled or unusable."""
    if not path:
        return None
    try:
        os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
        return GlossDatasetCache(path)
    except (lmdb.Error, OSError) as e:
        print(f"WARNING: gloss cache disabled ({e})", file=sys.stderr)
        return None


def build_resolver(args):
    cache = open_cache(args.cache)
    try:
        index = load_gloss_index(args.gloss, cache=cache)
    finally:
        if cache is not None:
            cache.close()
    if len(index) == 0:
        print(f"WARNING: gloss index is empty (source: {index.source})", file=sys.stderr)
    return GlossResolver(index, special_encodings=config.SPECIAL_ENCODINGS)


def format_bci_av_id(value):
    return json.dumps(value) if isinstance(value, list) else str(value)


# ---- Commands ----

def cmd_search(args):
    resolver = build_resolver(args)
    result = resolver.search(args.term)

    if args.json:
        print(json.dumps({
            "term": result.term,
            "noSearchTerm": result.no_search_term,
            "isNumeric": result.is_numeric,
            "matches": [m.to_dict() for m in result.matches],
        }, indent=2))
        return 0

    if result.no_search_term:
        print("No search term.")
        return 0
    if not result.matches:
        print(f"No matches for {result.term!r}.")
        return 1
    print(f"{len(result.matches)} match(es) for {result.term!r}:")
    for match in result.matches:
        print(f"  {format_bci_av_id(match.tokens.to_bci_av_id()):<40} {match.description}")
    return 0


def _resolve_one(resolver, label):
    """First match for a label or a bare id."""
    term = label.strip()
    if term.isdigit():
        entry = resolver.resolve_by_id(int(term))
        return int(term), entry.description
    match = resolver.resolve_by_label(term)[0]
    return match.tokens, match.description


def cmd_compose(args):
    resolver = build_resolver(args)
    speaker = LoggingSpeaker()
    document = EncodingDocument()
    editor = CompositionEditor(document, speaker=speaker,
                               compositions=resolver.compositions)

    try:
        tokens, description = _resolve_one(resolver, args.label)
        editor.insert_symbol(tokens, description)
        for gloss in args.pre or []:
            tokens, description = _resolve_one(resolver, gloss)
            editor.prepend_modifier(tokens, description)
        for gloss in args.post or []:
            tokens, description = _resolve_one(resolver, gloss)
            editor.append_modifier(tokens, description)
        if args.indicator is not None:
            editor.apply_indicator(args.indicator)
        if args.remove_indicator and editor.remove_indicator() is None:
            print("No indicator to remove.", file=sys.stderr)
    except BlissError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    symbol = document.caret_symbol()
    if args.json:
        print(json.dumps(symbol.to_payload(), indent=2))
    else:
        print(f"label:    {symbol.label}")
        print(f"bciAvId:  {format_bci_av_id(symbol.tokens.to_bci_av_id())}")
        for record in symbol.modifier_info:
            side = "pre " if record.is_prepended else "post"
            print(f"  {side} {record.modifier_gloss} "
                  f"({format_bci_av_id(record.modifier_tokens.to_bci_av_id())})")
    return 0


def cmd_palette(args):
    resolver = build_resolver(args)
    result = generate_palette_file(args.output, resolver)

    report = format_report(result)
    if report:
        print(report)
    print(f"Wrote {len(result.palette_json['cells'])} cells to {args.output}")
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="bliss",
        description="Compose Bliss symbols from glosses",
    )
    parser.add_argument("--gloss", default=config.GLOSS_SOURCE,
                        help="Gloss dataset URL or path")
    parser.add_argument("--cache", default=config.GLOSS_CACHE_PATH,
                        help="LMDB cache directory ('' disables)")
    parser.add_argument("--json", action="store_true", help="Machine-readable JSON output")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"])

    sub = parser.add_subparsers(dest="command", required=True)

    p_search = sub.add_parser("search", help="Search glosses")
    p_search.add_argument("term", help="Gloss text or BCI AV id")

    p_compose = sub.add_parser("compose", help="Compose a symbol")
    p_compose.add_argument("label", help="Gloss or BCI AV id of the base symbol")
    p_compose.add_argument("--pre", action="append", metavar="GLOSS",
                           help="Prepend a modifier (repeatable)")
    p_compose.add_argument("--post", action="append", metavar="GLOSS",
                           help="Append a modifier (repeatable)")
    p_compose.add_argument("--indicator", type=int, metavar="ID",
                           help="Put this indicator on the symbol")
    p_compose.add_argument("--remove-indicator", action="store_true",
                           help="Remove the symbol's first indicator")

    p_palette = sub.add_parser("palette", help="Generate a palette JSON file")
    p_palette.add_argument("output", help="Path of the palette JSON file to write")

    args = parser.parse_args(argv)
    configure_logging(level=args.log_level)

    commands = {
        "search": cmd_search,
        "compose": cmd_compose,
        "palette": cmd_palette,
    }
    return commands[args.command](args)


if __name__ == "__main__":
    sys.exit(main())

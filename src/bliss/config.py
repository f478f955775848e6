"""Static configuration for the Bliss composition engine.

Defaults live here as module constants. A few can be overridden from the
environment:

    BLISS_GLOSS_SOURCE   URL or path of the gloss dataset
    BLISS_GLOSS_CACHE    LMDB directory for the dataset cache ("" disables)
    BLISS_LMDB_MAP_SIZE  LMDB map size in bytes
    BLISS_COMPOSITION_HISTORY  compositions kept from edits
"""

import os

# Gloss dataset: JSON array of {"id": number|string, "description": string}
DEFAULT_GLOSS_SOURCE = (
    "https://raw.githubusercontent.com/cindyli/baby-bliss-bot/"
    "refs/heads/feat/bmw/data/bliss_symbol_explanations.json"
)
GLOSS_SOURCE = os.environ.get("BLISS_GLOSS_SOURCE", DEFAULT_GLOSS_SOURCE)
GLOSS_CACHE_PATH = os.environ.get(
    "BLISS_GLOSS_CACHE",
    os.path.join(os.path.expanduser("~"), ".cache", "bliss", "gloss.lmdb"),
)
LMDB_MAP_SIZE = int(os.environ.get("BLISS_LMDB_MAP_SIZE", str(64 * 1024 * 1024)))
HTTP_TIMEOUT = 30  # seconds

# Session bounds: announcements kept by the default speaker, and
# compositions remembered from edits (gloss entries are always kept).
SPEECH_HISTORY = 100
COMPOSITION_HISTORY = int(os.environ.get("BLISS_COMPOSITION_HISTORY", "1000"))

# BCI AV ids of the Bliss indicators (grammatical markers that sit on top
# of a classifier, introduced by ";" in a composition).
INDICATOR_IDS = frozenset(
    list(range(8993, 9012))       # action, past/future action, plural, thing, ...
    + list(range(24665, 24680))   # revised indicator set
    + [28043, 28044, 28045, 28046]
)

# "not found": not + eye;past action + hidden thing
NOT_FOUND_BCI_AV_ID = [15733, "/", 14133, ";", 9004, "/", 25570]

# ---- Palette generator ----

BLANK_CELL_LABEL = "BLANK"
NOT_FOUND_SUFFIX = " NOT FOUND"
PALETTE_NAME = "No name Palette"
CELL_TYPE = "ActionBmwCodeCell"
START_ROW = 2
START_COLUMN = 1

# Layout of labels, one list per row. Integers-as-strings are BCI AV ids.
PALETTE_LABELS = [
    ["I", "you", "he", "she", "we", "they"],
    ["want", "like", "go", "eat", "drink", "help"],
    ["yes", "no", "more", "BLANK", "stop", "finished"],
]

# Labels that don't follow the standard mapping in the gloss dataset.
#   "label": 12345
#   "label": [12345, "/", 23456]
SPECIAL_ENCODINGS = {}

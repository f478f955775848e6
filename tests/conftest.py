"""Shared fixtures for the Bliss composition engine tests."""

import json

import pytest

from bliss.engine.document import EncodingDocument
from bliss.engine.editor import CompositionEditor
from bliss.engine.gloss_index import GlossIndex
from bliss.engine.resolver import GlossResolver

GLOSSES = [
    {"id": 5, "description": "cat"},
    {"id": "14133", "description": "eye"},
    {"id": 15733, "description": "not"},
    {"id": "25570", "description": "hidden thing"},
    {"id": 9004, "description": "indicator (past action)"},
    {"id": "8993", "description": "indicator (action)"},
    {"id": 8499, "description": "plural"},
    {"id": 12335, "description": "verb"},
    {"id": 24000, "description": "the cat sat"},
    {"id": 24001, "description": "category"},
    {"id": 24002, "description": "big"},
]


class RecordingSpeaker:
    """Speaker that remembers what it was asked to say."""

    def __init__(self):
        self.spoken = []

    def __call__(self, text):
        self.spoken.append(text)


@pytest.fixture
def gloss_index():
    return GlossIndex.from_entries(GLOSSES)


@pytest.fixture
def gloss_file(tmp_path):
    path = tmp_path / "glosses.json"
    path.write_text(json.dumps(GLOSSES), encoding="utf-8")
    return path


@pytest.fixture
def resolver(gloss_index):
    return GlossResolver(gloss_index, special_encodings={
        "not found": [15733, "/", 14133, ";", 9004, "/", 25570],
        "verb+s": [12335, "/", 8499],
    })


@pytest.fixture
def speaker():
    return RecordingSpeaker()


@pytest.fixture
def document():
    return EncodingDocument()


@pytest.fixture
def editor(document, speaker, resolver):
    return CompositionEditor(document, speaker=speaker,
                             compositions=resolver.compositions)

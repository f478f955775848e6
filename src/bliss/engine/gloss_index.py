"""Gloss index: in-memory table of Bliss glosses.

Loads the gloss dataset (a JSON array of {"id", "description"}) once and
keeps:
  - entries: GlossEntry list in load order (label scans walk this)
  - id_to_entry: BCI AV id → GlossEntry
  - description_to_entries: description → [GlossEntry, ...]

The source is an http(s) URL or a local file path. With a
GlossDatasetCache attached, a good fetch is written through and a failed
fetch falls back to the cached copy.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

import requests
import structlog

from bliss import config
from bliss.core.errors import LoadError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class GlossEntry:
    """One row of the gloss dataset."""
    id: int
    description: str


def parse_entries(raw) -> list[GlossEntry]:
    """Validate a decoded dataset and normalize ids to int."""
    if not isinstance(raw, list):
        raise LoadError(f"Gloss dataset must be a JSON array, got {type(raw).__name__}")
    entries = []
    for position, item in enumerate(raw):
        if not isinstance(item, dict):
            raise LoadError(f"Gloss entry {position} is not an object: {item!r}")
        raw_id = item.get("id")
        description = item.get("description")
        if isinstance(raw_id, bool):
            raw_id = None
        elif isinstance(raw_id, float) and raw_id.is_integer():
            raw_id = int(raw_id)
        try:
            bci_av_id = int(str(raw_id).strip())
        except ValueError:
            raise LoadError(f"Gloss entry {position} has a bad id: {raw_id!r}") from None
        if bci_av_id < 0:
            raise LoadError(f"Gloss entry {position} has a negative id: {bci_av_id}")
        if not isinstance(description, str):
            raise LoadError(
                f"Gloss entry {position} (id {bci_av_id}) has no description")
        entries.append(GlossEntry(bci_av_id, description))
    return entries


class GlossIndex:
    """Gloss lookup by BCI AV id and by description."""

    def __init__(self, source=None, cache=None, timeout=config.HTTP_TIMEOUT):
        self.source = source if source is not None else config.GLOSS_SOURCE
        self.cache = cache
        self.timeout = timeout

        self.entries: list[GlossEntry] = []
        self.id_to_entry: dict[int, GlossEntry] = {}
        self.description_to_entries: dict[str, list[GlossEntry]] = {}
        self.loaded = False

    @classmethod
    def from_entries(cls, entries) -> GlossIndex:
        """Build an already-loaded index from GlossEntry objects or raw dicts."""
        index = cls(source="<memory>")
        raw = [e if isinstance(e, dict) else {"id": e.id, "description": e.description}
               for e in entries]
        index._populate(parse_entries(raw))
        return index

    # ---- Loading ----

    def load(self) -> dict[int, GlossEntry]:
        """Load the dataset (once) and return the id → entry mapping.

        Raises LoadError when the source is unreachable or malformed and
        no cached copy is available.
        """
        if self.loaded:
            return self.id_to_entry

        try:
            raw = self._read_source()
            entries = parse_entries(raw)
        except LoadError as e:
            cached = self.cache.get(self.source) if self.cache is not None else None
            if cached is None:
                raise
            logger.warning("gloss_source_failed_using_cache",
                           source=self.source, error=str(e))
            entries = parse_entries(cached)
        else:
            if self.cache is not None:
                self.cache.put(self.source, raw)

        self._populate(entries)
        logger.info("gloss_index_loaded", source=self.source, entries=len(self.entries))
        return self.id_to_entry

    def _read_source(self):
        source = str(self.source)
        if source.startswith(("http://", "https://")):
            try:
                response = requests.get(source, timeout=self.timeout)
                response.raise_for_status()
                return response.json()
            except requests.RequestException as e:
                raise LoadError(f"Error fetching gloss dataset {source}: {e}") from e
            except ValueError as e:
                raise LoadError(f"Gloss dataset {source} is not valid JSON: {e}") from e
        try:
            return json.loads(Path(source).read_text(encoding="utf-8"))
        except OSError as e:
            raise LoadError(f"Error reading gloss dataset {source}: {e}") from e
        except ValueError as e:
            raise LoadError(f"Gloss dataset {source} is not valid JSON: {e}") from e

    def _populate(self, entries):
        self.entries = list(entries)
        self.id_to_entry = {}
        self.description_to_entries = {}
        for entry in self.entries:
            # First occurrence wins for duplicate ids
            self.id_to_entry.setdefault(entry.id, entry)
            self.description_to_entries.setdefault(entry.description, []).append(entry)
        self.loaded = True

    # ---- Lookup ----

    def get(self, bci_av_id: int) -> GlossEntry | None:
        return self.id_to_entry.get(bci_av_id)

    def by_description(self, description: str) -> list[GlossEntry]:
        """Entries whose description is exactly ``description``."""
        return list(self.description_to_entries.get(description, []))

    def __iter__(self):
        return iter(self.entries)

    def __len__(self):
        return len(self.entries)

    def __contains__(self, bci_av_id):
        return bci_av_id in self.id_to_entry


def load_gloss_index(source=None, cache=None) -> GlossIndex:
    """Load an index, degrading to an empty one on LoadError.

    Resolution against the empty index always fails with NotFoundError.
    """
    index = GlossIndex(source=source, cache=cache)
    try:
        index.load()
    except LoadError as e:
        logger.error("gloss_index_unavailable", source=index.source, error=str(e))
        index._populate([])
    return index

"""Gloss dataset cache: LMDB copy of the last good fetch.

Keyed by dataset source (URL or path). Values are msgpack-encoded:
{"e": [[id, description], ...]}. Ids are stored as they arrived so the
index applies the same normalization on a cache hit as on a fetch.
"""

import lmdb
import msgpack
import structlog

from bliss import config

logger = structlog.get_logger(__name__)


class GlossDatasetCache:
    """Persists raw gloss datasets between runs."""

    def __init__(self, lmdb_path, map_size=config.LMDB_MAP_SIZE):
        self.lmdb_path = str(lmdb_path)
        self.env = lmdb.open(self.lmdb_path, map_size=map_size, max_dbs=2, subdir=True)
        self.dataset_db = self.env.open_db(b"datasets")  # source → {e: [...]}

    # ------------------------------------------------------------------
    # Read / write
    # ------------------------------------------------------------------

    def put(self, source, raw_entries):
        """Store a decoded dataset (list of {"id", "description"} dicts)."""
        rows = [[item.get("id"), item.get("description")]
                for item in raw_entries if isinstance(item, dict)]
        with self.env.begin(write=True) as txn:
            txn.put(
                str(source).encode("utf-8"),
                msgpack.packb({"e": rows}),
                db=self.dataset_db
            )
        logger.debug("gloss_cache_put", source=str(source), entries=len(rows))

    def get(self, source):
        """Return the cached dataset as a list of dicts, or None."""
        with self.env.begin(db=self.dataset_db) as txn:
            val = txn.get(str(source).encode("utf-8"))
            if val is None:
                return None
            data = msgpack.unpackb(val)
        return [{"id": row[0], "description": row[1]} for row in data["e"]]

    def sources(self):
        """All sources with a cached dataset."""
        with self.env.begin(db=self.dataset_db) as txn:
            return [key.decode("utf-8") for key, _ in txn.cursor()]

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self):
        """Close LMDB environment."""
        self.env.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

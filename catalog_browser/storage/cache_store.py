# catalog_browser/storage/cache_store.py

"""SQLite-backed key/value cache with millisecond fetch timestamps."""

import json
import logging
import sqlite3
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from catalog_browser.config.settings import Settings
from catalog_browser.errors import CacheReadError

logger = logging.getLogger("catalog_browser.cache")

_SCHEMA = """\
CREATE TABLE IF NOT EXISTS kv_store (
    key   TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""

_TIMESTAMP_SUFFIX = "_timestamp"


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


@dataclass
class CacheEntry:
    """A cached collection and the time it was fetched."""

    payload: list[dict[str, Any]]
    timestamp: int


class CacheStore:
    """Persistent cache keyed by collection name.

    Each collection occupies two rows, ``<key>`` holding the JSON
    payload and ``<key>_timestamp`` holding the fetch time.  Both are
    written in one transaction so readers never see a payload paired
    with another fetch's timestamp.
    """

    def __init__(
        self, db_path: Path | None = None,
    ) -> None:
        path = db_path or Settings.CACHE_DB_PATH
        path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(
            str(path), check_same_thread=False,
        )
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)
        logger.debug("CacheStore opened at %s", path)

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    # ── Raw rows ─────────────────────────────────────────

    def _read(self, key: str) -> str | None:
        row = self._conn.execute(
            "SELECT value FROM kv_store WHERE key = ?", (key,),
        ).fetchone()
        return None if row is None else str(row[0])

    def timestamp(self, key: str) -> int | None:
        """Return the stored fetch time for *key*, or ``None``.

        Unparsable timestamps are reported as ``None``.
        """
        raw = self._read(key + _TIMESTAMP_SUFFIX)
        if raw is None:
            return None
        try:
            return int(raw)
        except ValueError:
            logger.warning(
                "Unparsable cache timestamp for '%s': %r", key, raw,
            )
            return None

    # ── Public API ───────────────────────────────────────

    def get(self, key: str) -> CacheEntry | None:
        """Return the cached entry, or ``None`` when absent.

        Raises :class:`CacheReadError` if the stored payload or
        timestamp cannot be decoded.
        """
        raw_payload = self._read(key)
        raw_ts = self._read(key + _TIMESTAMP_SUFFIX)
        if raw_payload is None or raw_ts is None:
            return None
        try:
            payload = json.loads(raw_payload)
            ts = int(raw_ts)
        except ValueError as exc:
            raise CacheReadError(
                f"Corrupt cache entry '{key}': {exc}"
            ) from exc
        if not isinstance(payload, list):
            raise CacheReadError(
                f"Corrupt cache entry '{key}': expected a list, "
                f"got {type(payload).__name__}"
            )
        return CacheEntry(payload=payload, timestamp=ts)

    def put(
        self,
        key: str,
        payload: list[dict[str, Any]],
        now: int | None = None,
    ) -> CacheEntry:
        """Overwrite *key* with *payload*, stamped with the current time."""
        ts = now_ms() if now is None else now
        encoded = json.dumps(payload, ensure_ascii=False)
        with self._conn:
            self._conn.executemany(
                "INSERT INTO kv_store (key, value) VALUES (?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value=excluded.value",
                [
                    (key, encoded),
                    (key + _TIMESTAMP_SUFFIX, str(ts)),
                ],
            )
        logger.info(
            "Cached %d items for '%s' at %d", len(payload), key, ts,
        )
        return CacheEntry(payload=list(payload), timestamp=ts)

    def is_fresh(
        self,
        key: str,
        ttl_ms: int,
        now: int | None = None,
    ) -> bool:
        """True iff *key* has a payload fetched less than *ttl_ms* ago."""
        if self._read(key) is None:
            return False
        ts = self.timestamp(key)
        if ts is None:
            return False
        current = now_ms() if now is None else now
        return current - ts < ttl_ms

    def clear(self) -> int:
        """Purge every cached collection.

        Returns the number of collections that were removed.
        """
        with self._conn:
            count: int = self._conn.execute(
                "SELECT COUNT(*) FROM kv_store WHERE key NOT LIKE ?",
                ("%" + _TIMESTAMP_SUFFIX,),
            ).fetchone()[0]
            self._conn.execute("DELETE FROM kv_store")
        logger.info("Cache manually purged (%d entries removed)", count)
        return count

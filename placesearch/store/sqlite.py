#  Place Search - SQLite Store
#
#  Durable key-value store on async SQLite with WAL mode.
#  Each row carries an absolute expiry; expired rows are deleted on read.
#
#  Depends on: store/base.py, exceptions.py
#  Used by:    container.py (via DI), tests

import logging
import sqlite3
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

import aiosqlite

from placesearch.exceptions import StoreError
from placesearch.store.base import KeyValueStore, decode

logger = logging.getLogger("placesearch.store")


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_SCHEMA = """
CREATE TABLE IF NOT EXISTS kv_entries (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    expires_at REAL
);

CREATE INDEX IF NOT EXISTS idx_kv_expires ON kv_entries(expires_at);
"""


# ---------------------------------------------------------------------------
# Store class
# ---------------------------------------------------------------------------

class SqliteStore(KeyValueStore):
    """Async SQLite key-value store.

    Uses aiosqlite which runs SQLite on a dedicated background thread,
    so no threading.Lock is needed on our side. Writes are single-statement
    upserts; read-modify-write sequences across calls are not atomic.
    """

    name = "sqlite"

    def __init__(self, db_path: str | Path, now: Callable[[], float] = time.time):
        self._path = Path(db_path)
        self._now = now
        self._conn: aiosqlite.Connection | None = None

    async def open(self):
        """Open or create the database file and apply schema."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = await aiosqlite.connect(str(self._path))
        self._conn.row_factory = sqlite3.Row
        await self._conn.execute("PRAGMA journal_mode=WAL")
        await self._conn.executescript(_SCHEMA)
        await self._conn.commit()

        purged = await self.purge_expired()
        logger.info("Store initialized at %s (purged %d expired)", self._path, purged)

    @property
    def conn(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise StoreError("Store not initialized. Call await store.open() first.")
        return self._conn

    async def get(self, key: str, *, as_json: bool = False) -> Any | None:
        try:
            cursor = await self.conn.execute(
                "SELECT value, expires_at FROM kv_entries WHERE key = ?", (key,),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            if row["expires_at"] is not None and row["expires_at"] <= self._now():
                await self.conn.execute("DELETE FROM kv_entries WHERE key = ?", (key,))
                await self.conn.commit()
                return None
        except sqlite3.Error as e:
            raise StoreError(f"get {key!r} failed: {e}") from e
        return decode(row["value"], as_json)

    async def put(self, key: str, value: str, *, ttl_seconds: float | None = None) -> None:
        expires_at = self._now() + ttl_seconds if ttl_seconds else None
        try:
            await self.conn.execute(
                "INSERT INTO kv_entries (key, value, expires_at) VALUES (?, ?, ?) "
                "ON CONFLICT(key) DO UPDATE SET "
                "value = excluded.value, expires_at = excluded.expires_at",
                (key, value, expires_at),
            )
            await self.conn.commit()
        except sqlite3.Error as e:
            raise StoreError(f"put {key!r} failed: {e}") from e

    async def delete(self, key: str) -> None:
        try:
            await self.conn.execute("DELETE FROM kv_entries WHERE key = ?", (key,))
            await self.conn.commit()
        except sqlite3.Error as e:
            raise StoreError(f"delete {key!r} failed: {e}") from e

    async def purge_expired(self) -> int:
        """Delete every expired row. Returns the number removed."""
        cursor = await self.conn.execute(
            "DELETE FROM kv_entries WHERE expires_at IS NOT NULL AND expires_at <= ?",
            (self._now(),),
        )
        await self.conn.commit()
        return cursor.rowcount

    async def close(self):
        """Close the database connection."""
        if self._conn:
            await self._conn.close()
            self._conn = None

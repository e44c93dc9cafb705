#  Place Search - In-Memory Store
#
#  Process-local fallback with the same contract as the durable store.
#  Entries past their TTL are dropped lazily on the next read, and every
#  sweep_every writes a sweep drops expired entries nobody reads again.
#
#  Depends on: store/base.py
#  Used by:    container.py, tests

import time
from collections.abc import Callable
from typing import Any

from placesearch.store.base import KeyValueStore, decode

DEFAULT_SWEEP_EVERY = 256


class InMemoryStore(KeyValueStore):
    """Dict-backed store. All access happens on the event loop, so no lock."""

    name = "memory"

    def __init__(self, now: Callable[[], float] = time.time, sweep_every: int = DEFAULT_SWEEP_EVERY):
        self._now = now
        self._sweep_every = sweep_every
        self._writes = 0
        self._data: dict[str, tuple[str, float | None]] = {}

    async def get(self, key: str, *, as_json: bool = False) -> Any | None:
        record = self._data.get(key)
        if record is None:
            return None
        value, expires_at = record
        if expires_at is not None and expires_at <= self._now():
            del self._data[key]
            return None
        return decode(value, as_json)

    async def put(self, key: str, value: str, *, ttl_seconds: float | None = None) -> None:
        expires_at = self._now() + ttl_seconds if ttl_seconds else None
        self._data[key] = (value, expires_at)
        self._writes += 1
        if self._writes % self._sweep_every == 0:
            self.purge_expired()

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def purge_expired(self) -> int:
        """Drop every expired entry. Returns the number removed."""
        now = self._now()
        expired = [
            key for key, (_, expires_at) in self._data.items()
            if expires_at is not None and expires_at <= now
        ]
        for key in expired:
            del self._data[key]
        return len(expired)

    def __len__(self) -> int:
        return len(self._data)

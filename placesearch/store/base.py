#  Place Search - Key-Value Store Interface
#
#  Capability interface shared by the durable and in-memory stores.
#  Injected into the rate limiter and response cache, never a global.
#
#  Depends on: (none)
#  Used by:    store/memory.py, store/sqlite.py, rate_limit.py, services/response_cache.py

import json
from abc import ABC, abstractmethod
from typing import Any


class KeyValueStore(ABC):
    """Async get/put/delete with optional TTL.

    Backends raise StoreError on I/O failure. Expired entries must never be
    returned; removing them lazily on read is sufficient.
    """

    name: str = ""

    async def open(self):
        """Acquire backend resources. No-op unless the backend needs it."""

    async def close(self):
        """Release backend resources."""

    @abstractmethod
    async def get(self, key: str, *, as_json: bool = False) -> Any | None:
        """Return the stored string (or decoded JSON), or None if absent/expired."""
        ...

    @abstractmethod
    async def put(self, key: str, value: str, *, ttl_seconds: float | None = None) -> None:
        ...

    @abstractmethod
    async def delete(self, key: str) -> None:
        ...


def decode(raw: str, as_json: bool) -> Any | None:
    """Decode a stored value. Undecodable JSON reads as absent."""
    if not as_json:
        return raw
    try:
        return json.loads(raw)
    except ValueError:
        return None

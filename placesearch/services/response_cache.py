#  Place Search - Response Cache
#
#  Canonical cache keys for search requests and TTL-bound storage of
#  prior responses in the key-value store.
#
#  Depends on: store/base.py, models/schemas.py, exceptions.py
#  Used by:    container.py, services/search.py

import hashlib
import json
import logging

from pydantic import ValidationError

from placesearch.exceptions import StoreError
from placesearch.models.enums import SearchMode
from placesearch.models.schemas import SearchRequest, SearchResponse
from placesearch.store.base import KeyValueStore

logger = logging.getLogger("placesearch.cache")

_KEY_PREFIX = "search:"
_NO_BUDGET = "none"


def _coord(value: float) -> str:
    # 4 decimals is ~11 m; adding 0.0 folds -0.0 into 0.0
    return f"{round(value, 4) + 0.0:.4f}"


def canonical_fields(request: SearchRequest) -> dict:
    """The request fields that decide the result set, in normalized form."""
    return {
        "lat": _coord(request.location.lat),
        "lng": _coord(request.location.lng),
        "radius": str(float(request.radius_m)),
        "cuisine": ",".join(sorted(set(request.cuisine))),
        "budget": str(float(request.budget.max)) if request.budget else _NO_BUDGET,
        "limit": request.limit,
    }


def cache_key(request: SearchRequest, mode: SearchMode = SearchMode.LIVE) -> str:
    """Order-independent key: equivalent requests always map to the same key.

    Live and synthesized results live in separate namespaces so a credential
    change never serves one as the other.
    """
    normalized = json.dumps(canonical_fields(request), sort_keys=True)
    digest = hashlib.sha256(normalized.encode()).hexdigest()[:32]
    return f"{_KEY_PREFIX}{mode.value}:{digest}"


class ResponseCache:
    """TTL-bound storage of SearchResponse payloads.

    Store failures and corrupt records read as a miss; a failed write is
    logged and dropped. Neither is ever fatal to the request.
    """

    def __init__(self, store: KeyValueStore, live_ttl_seconds: float, mock_ttl_seconds: float):
        self._store = store
        self._ttls = {
            SearchMode.LIVE: live_ttl_seconds,
            SearchMode.MOCK: mock_ttl_seconds,
        }

    def ttl_for(self, mode: SearchMode) -> float:
        return self._ttls[mode]

    async def get(self, key: str) -> SearchResponse | None:
        try:
            record = await self._store.get(key, as_json=True)
        except StoreError as e:
            logger.warning("Cache read failed, treating as miss: %s", e)
            return None
        if record is None:
            return None
        try:
            return SearchResponse.model_validate(record)
        except ValidationError:
            logger.warning("Corrupt cache record at %s, treating as miss", key)
            return None

    async def put(self, key: str, response: SearchResponse, ttl_seconds: float) -> None:
        try:
            await self._store.put(
                key, response.model_dump_json(by_alias=True), ttl_seconds=ttl_seconds,
            )
        except StoreError as e:
            logger.warning("Cache write failed for %s: %s", key, e)

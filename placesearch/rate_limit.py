#  Place Search - Rate Limiter
#
#  Continuous token bucket per client, persisted in the key-value store.
#  Buckets refill at capacity tokens per interval and expire after an idle TTL.
#
#  Depends on: store/base.py, exceptions.py
#  Used by:    container.py, services/search.py, routes/search.py

import json
import logging
import math
import time
from collections.abc import Callable
from dataclasses import dataclass

from slowapi.util import get_remote_address
from starlette.requests import Request

from placesearch.exceptions import StoreError
from placesearch.store.base import KeyValueStore

logger = logging.getLogger("placesearch.rate_limit")

CLIENT_ID_HEADER = "X-Client-Id"
_KEY_PREFIX = "ratelimit:"
_TOKEN_EPSILON = 1e-9


def client_key(request: Request) -> str:
    """Identity a bucket is keyed by: explicit client header, else remote address."""
    explicit = request.headers.get(CLIENT_ID_HEADER, "").strip()
    if explicit:
        return explicit
    return get_remote_address(request)


def _now_ms() -> float:
    return time.time() * 1000


@dataclass
class RateLimitDecision:
    allowed: bool
    retry_after_seconds: int = 0


class RateLimiter:
    """Token-bucket admission control keyed by client identity.

    Every call persists {tokens, updatedAt}, denied or not, so updatedAt is
    the latest observation. A missing, undecodable or malformed record is
    treated as a fresh full bucket. Concurrent calls for one key race
    (last write wins), which can only over-admit.
    """

    def __init__(
        self,
        store: KeyValueStore,
        capacity: int,
        interval_ms: float,
        bucket_ttl_seconds: float,
        now: Callable[[], float] = _now_ms,
    ):
        self._store = store
        self._capacity = capacity
        self._interval_ms = interval_ms
        self._bucket_ttl = bucket_ttl_seconds
        self._now = now

    async def consume(self, key: str) -> RateLimitDecision:
        bucket_key = f"{_KEY_PREFIX}{key}"
        current = self._now()

        tokens = float(self._capacity)
        bucket = await self._load(bucket_key)
        if bucket is not None:
            stored_tokens, updated_at = bucket
            elapsed = max(0.0, current - updated_at)
            refill = elapsed / self._interval_ms * self._capacity
            tokens = min(float(self._capacity), stored_tokens + refill)

        # Summed partial refills land a hair under 1.0 (0.9999999999999999)
        if tokens < 1 - _TOKEN_EPSILON:
            await self._save(bucket_key, tokens, current)
            ms_until_next = (1 - tokens) / self._capacity * self._interval_ms
            # Drop float noise so 5.000000000000001 doesn't ceil to 6
            retry_after = max(1, math.ceil(round(ms_until_next / 1000, 9)))
            logger.warning("Rate limit exceeded for %s (retry in %ds)", key, retry_after)
            return RateLimitDecision(allowed=False, retry_after_seconds=retry_after)

        tokens = max(0.0, tokens - 1)
        await self._save(bucket_key, tokens, current)
        return RateLimitDecision(allowed=True, retry_after_seconds=0)

    async def _load(self, bucket_key: str) -> tuple[float, float] | None:
        try:
            record = await self._store.get(bucket_key, as_json=True)
        except StoreError as e:
            logger.warning("Bucket read failed, treating as absent: %s", e)
            return None
        if not isinstance(record, dict):
            return None
        tokens = record.get("tokens")
        updated_at = record.get("updatedAt")
        for val in (tokens, updated_at):
            if isinstance(val, bool) or not isinstance(val, (int, float)) or not math.isfinite(val):
                logger.warning("Corrupt bucket record at %s, reinitializing", bucket_key)
                return None
        # A real bucket never drops below zero
        if tokens < 0:
            logger.warning("Corrupt bucket record at %s, reinitializing", bucket_key)
            return None
        return float(tokens), float(updated_at)

    async def _save(self, bucket_key: str, tokens: float, updated_at: float) -> None:
        try:
            await self._store.put(
                bucket_key,
                json.dumps({"tokens": tokens, "updatedAt": updated_at}),
                ttl_seconds=self._bucket_ttl,
            )
        except StoreError as e:
            logger.warning("Bucket write failed for %s: %s", bucket_key, e)

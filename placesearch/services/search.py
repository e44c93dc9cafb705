#  Place Search - Search Orchestrator
#
#  Per-request pipeline: validate -> rate-limit -> cache lookup ->
#  (hit: respond) | (fetch or synthesize -> normalize -> cache store -> respond).
#  Failures at validation, rate limiting or fetching raise immediately.
#
#  Depends on: rate_limit.py, services/response_cache.py, services/scorer.py,
#              services/mock_places.py, services/places_client.py
#  Used by:    container.py, routes/search.py

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone

from pydantic import ValidationError

from placesearch.exceptions import InvalidRequestError, RateLimitExceededError
from placesearch.models.enums import CacheStatus, SearchMode
from placesearch.models.schemas import SearchRequest, SearchResponse
from placesearch.rate_limit import RateLimiter
from placesearch.services.mock_places import MockPlaceGenerator
from placesearch.services.places_client import PlacesClient
from placesearch.services.response_cache import ResponseCache, cache_key
from placesearch.services.scorer import PlaceScorer

logger = logging.getLogger("placesearch.search")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _describe_validation_error(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "body"
        msg = err["msg"].removeprefix("Value error, ")
        parts.append(f"{loc}: {msg}")
    return "Invalid search request: " + "; ".join(parts)


def validate_request(payload) -> SearchRequest:
    """Parse a decoded JSON body into a clamped SearchRequest."""
    if not isinstance(payload, dict):
        raise InvalidRequestError("Invalid search request: body must be a JSON object")
    try:
        return SearchRequest.model_validate(payload)
    except ValidationError as e:
        raise InvalidRequestError(_describe_validation_error(e)) from e


def _log_served(mode: SearchMode, status: CacheStatus, count: int):
    logger.info(
        "Search served",
        extra={"mode": mode.value, "cache": status.value, "results": count},
    )


@dataclass
class SearchOutcome:
    response: SearchResponse
    cache_status: CacheStatus
    mode: SearchMode


class SearchService:
    """Composes limiter, cache, data source and scorer for one request.

    Holds no per-request state and takes no locks: the store is the only
    shared resource. Mock vs. live is decided per request from whether the
    upstream client has a credential.
    """

    def __init__(
        self,
        rate_limiter: RateLimiter,
        cache: ResponseCache,
        scorer: PlaceScorer,
        places: PlacesClient,
        mock_places: MockPlaceGenerator,
        now: Callable[[], datetime] = _utcnow,
    ):
        self._limiter = rate_limiter
        self._cache = cache
        self._scorer = scorer
        self._places = places
        self._mock = mock_places
        self._now = now

    @property
    def mode(self) -> SearchMode:
        return SearchMode.LIVE if self._places.configured else SearchMode.MOCK

    async def search(self, payload, client_key: str) -> SearchOutcome:
        """Run the pipeline.

        Raises InvalidRequestError, RateLimitExceededError or UpstreamError.
        """
        request = validate_request(payload)

        decision = await self._limiter.consume(client_key)
        if not decision.allowed:
            raise RateLimitExceededError(decision.retry_after_seconds)

        mode = self.mode
        key = cache_key(request, mode)
        cached = await self._cache.get(key)
        if cached is not None:
            logger.debug("Cache hit %s", key)
            _log_served(mode, CacheStatus.HIT, len(cached.results))
            return SearchOutcome(cached, CacheStatus.HIT, mode)
        logger.debug("Cache miss %s", key)

        if mode == SearchMode.MOCK:
            raw_places = self._mock.generate(request)
        else:
            raw_places = await self._places.search_nearby(request)
            logger.info("Fetched %d places from upstream", len(raw_places))

        results = self._scorer.normalize(raw_places, request)
        cached_at = self._now().isoformat(timespec="milliseconds").replace("+00:00", "Z")
        response = SearchResponse(results=results, cached_at=cached_at)

        await self._cache.put(key, response, self._cache.ttl_for(mode))
        _log_served(mode, CacheStatus.MISS, len(results))
        return SearchOutcome(response, CacheStatus.MISS, mode)

#  Place Search - Test Fixtures
#
#  Shared fixtures for the test suite.
#  Uses DI container overrides instead of monkey-patching singletons.
#
#  Depends on: placesearch/store/*, placesearch/services/*, placesearch/container.py, placesearch/app.py
#  Used by:    all test files

import pytest
from dependency_injector import providers

from placesearch.models.schemas import SearchRequest
from placesearch.rate_limit import RateLimiter
from placesearch.services.mock_places import MockPlaceGenerator
from placesearch.services.places_client import PlacesClient
from placesearch.services.response_cache import ResponseCache
from placesearch.services.scorer import PlaceScorer
from placesearch.services.search import SearchService
from placesearch.store.memory import InMemoryStore
from placesearch.store.sqlite import SqliteStore

TOKYO_STATION = {"lat": 35.681236, "lng": 139.767125}


# ---------------------------------------------------------------------------
# Clock
# ---------------------------------------------------------------------------

class FakeClock:
    """Manually advanced clock. Call it to read the current value."""

    def __init__(self, start: float = 0.0):
        self.value = start

    def __call__(self) -> float:
        return self.value

    def advance(self, delta: float):
        self.value += delta


@pytest.fixture
def clock():
    """Millisecond clock for the rate limiter."""
    return FakeClock()


@pytest.fixture
def store_clock():
    """Seconds clock for store TTL expiry."""
    return FakeClock(1_000_000.0)


# ---------------------------------------------------------------------------
# Store fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def memory_store(store_clock):
    return InMemoryStore(now=store_clock)


@pytest.fixture
async def sqlite_store(tmp_path, store_clock):
    """Fresh SQLite store in a temp directory."""
    store = SqliteStore(tmp_path / "kv.db", now=store_clock)
    await store.open()

    yield store

    await store.close()


# ---------------------------------------------------------------------------
# Pipeline fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def search_request():
    return SearchRequest(location=TOKYO_STATION, radius_m=1200, cuisine=[], limit=5)


def make_search_service(store, places=None, now_ms=None, capacity=10, now=None) -> SearchService:
    """SearchService over the given store. Without `places`, runs in mock mode."""
    limiter_kwargs = {"now": now_ms} if now_ms else {}
    service_kwargs = {"now": now} if now else {}
    limiter = RateLimiter(
        store, capacity=capacity, interval_ms=60_000, bucket_ttl_seconds=120, **limiter_kwargs,
    )
    if places is None:
        places = PlacesClient(http_client=None, api_key="", endpoint="http://places.test/search")
    return SearchService(
        rate_limiter=limiter,
        cache=ResponseCache(store, live_ttl_seconds=600, mock_ttl_seconds=120),
        scorer=PlaceScorer(static_map_base_url="/api/static-map"),
        places=places,
        mock_places=MockPlaceGenerator(),
        **service_kwargs,
    )


@pytest.fixture
def build_search():
    """Factory fixture: build_search(store, places=None, now_ms=None, capacity=10, now=None)."""
    return make_search_service


# ---------------------------------------------------------------------------
# FastAPI client fixtures
# ---------------------------------------------------------------------------

async def _client_for(search: SearchService, store):
    from httpx import ASGITransport, AsyncClient
    from placesearch.app import app, container

    container.store.override(providers.Object(store))
    container.search.override(providers.Object(search))
    try:
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        container.store.reset_override()
        container.search.reset_override()


@pytest.fixture
async def app_client(memory_store):
    """API client in mock mode over a fresh in-memory store."""
    async for client in _client_for(make_search_service(memory_store), memory_store):
        yield client


@pytest.fixture
def live_places():
    """Stand-in upstream client that reports a configured credential."""
    from unittest.mock import AsyncMock, MagicMock

    places = MagicMock(spec=PlacesClient)
    places.configured = True
    places.search_nearby = AsyncMock(return_value=[])
    return places


@pytest.fixture
async def live_app_client(memory_store, live_places):
    """API client in live mode with the upstream client mocked."""
    search = make_search_service(memory_store, places=live_places)
    async for client in _client_for(search, memory_store):
        yield client

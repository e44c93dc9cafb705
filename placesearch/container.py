#  Place Search - Dependency Injection Container
#
#  DeclarativeContainer wiring the store, the pipeline components and the
#  search orchestrator. The store backend is chosen from config.
#
#  Depends on: config.py, store/*, rate_limit.py, services/*
#  Used by:    app.py, routes/*

import httpx
from dependency_injector import containers, providers

from placesearch.config import (
    CACHE_LIVE_TTL,
    CACHE_MOCK_TTL,
    GOOGLE_PLACES_API_KEY,
    PLACES_ENDPOINT,
    PLACES_INCLUDED_TYPES,
    PLACES_LANGUAGE_CODE,
    PLACES_TIMEOUT,
    RATE_LIMIT_BUCKET_TTL,
    RATE_LIMIT_CAPACITY,
    RATE_LIMIT_INTERVAL_MS,
    STATIC_MAP_BASE_URL,
    STORE_BACKEND,
    STORE_PATH,
)
from placesearch.rate_limit import RateLimiter
from placesearch.services.mock_places import MockPlaceGenerator
from placesearch.services.places_client import PlacesClient
from placesearch.services.response_cache import ResponseCache
from placesearch.services.scorer import PlaceScorer
from placesearch.services.search import SearchService
from placesearch.store.memory import InMemoryStore
from placesearch.store.sqlite import SqliteStore


class Container(containers.DeclarativeContainer):
    """DI container for the search service.

    All components are Singletons: one instance per application lifecycle.
    Routes access them via @inject + Depends(Provide[Container.xxx]).
    Tests override them via container.xxx.override(providers.Object(mock)).
    """

    wiring_config = containers.WiringConfiguration(
        modules=[
            "placesearch.routes.search",
            "placesearch.routes.health",
        ]
    )

    # --- Core ---
    store = providers.Selector(
        providers.Object(STORE_BACKEND),
        sqlite=providers.Singleton(SqliteStore, db_path=STORE_PATH),
        memory=providers.Singleton(InMemoryStore),
    )
    http_client = providers.Singleton(httpx.AsyncClient, timeout=PLACES_TIMEOUT)

    # --- Pipeline components ---
    rate_limiter = providers.Singleton(
        RateLimiter,
        store=store,
        capacity=RATE_LIMIT_CAPACITY,
        interval_ms=RATE_LIMIT_INTERVAL_MS,
        bucket_ttl_seconds=RATE_LIMIT_BUCKET_TTL,
    )
    cache = providers.Singleton(
        ResponseCache,
        store=store,
        live_ttl_seconds=CACHE_LIVE_TTL,
        mock_ttl_seconds=CACHE_MOCK_TTL,
    )
    scorer = providers.Singleton(PlaceScorer, static_map_base_url=STATIC_MAP_BASE_URL)
    places = providers.Singleton(
        PlacesClient,
        http_client=http_client,
        api_key=GOOGLE_PLACES_API_KEY,
        endpoint=PLACES_ENDPOINT,
        timeout=PLACES_TIMEOUT,
        language_code=PLACES_LANGUAGE_CODE,
        included_types=PLACES_INCLUDED_TYPES,
    )
    mock_places = providers.Singleton(MockPlaceGenerator)

    # --- Orchestrator (depends on all of the above) ---
    search = providers.Singleton(
        SearchService,
        rate_limiter=rate_limiter,
        cache=cache,
        scorer=scorer,
        places=places,
        mock_places=mock_places,
    )

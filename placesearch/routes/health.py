#  Place Search - Health Route
#
#  Liveness probe. Public, no I/O beyond reading wiring state.
#
#  Depends on: container.py, models/schemas.py
#  Used by:    app.py

from dependency_injector.wiring import inject, Provide
from fastapi import APIRouter, Depends

from placesearch.container import Container
from placesearch.models.schemas import HealthOut
from placesearch.services.search import SearchService
from placesearch.store.base import KeyValueStore

router = APIRouter(tags=["health"])


@router.get("/health")
@inject
async def health(
    search: SearchService = Depends(Provide[Container.search]),
    store: KeyValueStore = Depends(Provide[Container.store]),
) -> HealthOut:
    """Report liveness, whether results are live or synthesized, and the store backend."""
    return HealthOut(status="ok", mode=search.mode, store=store.name)

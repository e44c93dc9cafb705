#  Place Search - Search Route
#
#  POST /search: runs the search pipeline for one client request and
#  reports cache status and synthesized-data flags in response headers.
#
#  Depends on: container.py, services/search.py, rate_limit.py
#  Used by:    app.py

from dependency_injector.wiring import inject, Provide
from fastapi import APIRouter, Depends, Request, Response

from placesearch.container import Container
from placesearch.exceptions import InvalidRequestError
from placesearch.logging_config import set_client_id
from placesearch.models.enums import SearchMode
from placesearch.models.schemas import SearchResponse
from placesearch.rate_limit import client_key
from placesearch.services.search import SearchService

router = APIRouter(tags=["search"])

CACHE_HEADER = "X-Cache"
MOCK_HEADER = "X-Mock-Data"


@router.post("/search")
@inject
async def search_places(
    request: Request,
    response: Response,
    search: SearchService = Depends(Provide[Container.search]),
) -> SearchResponse:
    """Search nearby places. Errors are mapped to responses by app.py handlers."""
    try:
        payload = await request.json()
    except ValueError:
        raise InvalidRequestError("Invalid search request: body is not valid JSON")

    client = client_key(request)
    set_client_id(client)

    outcome = await search.search(payload, client)

    response.headers[CACHE_HEADER] = outcome.cache_status.value
    if outcome.mode == SearchMode.MOCK:
        response.headers[MOCK_HEADER] = "true"
    return outcome.response

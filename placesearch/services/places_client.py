#  Place Search - Places Client
#
#  Nearby search against the upstream geo-search provider over HTTP.
#  Single attempt per call: failures surface to the caller, no retries.
#
#  Depends on: models/schemas.py, exceptions.py
#  Used by:    container.py, services/search.py

import logging

import httpx

from placesearch.exceptions import UpstreamError
from placesearch.models.schemas import MAX_LIMIT, RawPlace, SearchRequest

logger = logging.getLogger("placesearch.places")

FIELD_MASK = ",".join([
    "places.id",
    "places.displayName",
    "places.rating",
    "places.priceLevel",
    "places.currentOpeningHours",
    "places.location",
    "places.googleMapsUri",
    "places.formattedAddress",
    "places.types",
])


def build_request_body(
    request: SearchRequest, included_types: list[str], language_code: str,
) -> dict:
    return {
        "includedTypes": list(included_types),
        # Ask for the upstream maximum so the cuisine filter has candidates
        "maxResultCount": MAX_LIMIT,
        "languageCode": language_code,
        "locationRestriction": {
            "circle": {
                "center": {
                    "latitude": request.location.lat,
                    "longitude": request.location.lng,
                },
                "radius": request.radius_m,
            },
        },
    }


def parse_place(data: dict) -> RawPlace:
    """Map one upstream place object to a RawPlace. Missing fields become None."""
    display = data.get("displayName") or {}
    location = data.get("location") or {}
    hours = data.get("currentOpeningHours") or {}
    open_now = hours.get("openNow")
    return RawPlace(
        id=str(data.get("id", "")),
        name=display.get("text") or "",
        rating=data.get("rating"),
        price_level=data.get("priceLevel"),
        open_now=open_now if isinstance(open_now, bool) else None,
        lat=location.get("latitude"),
        lng=location.get("longitude"),
        map_uri=data.get("googleMapsUri"),
        address=data.get("formattedAddress"),
        types=list(data.get("types") or []),
    )


class PlacesClient:
    """Upstream client. `configured` is False without an API key, which
    makes the orchestrator synthesize results instead of calling out."""

    def __init__(
        self,
        http_client: httpx.AsyncClient | None,
        api_key: str,
        endpoint: str,
        timeout: float = 10.0,
        language_code: str = "en",
        included_types: list[str] | None = None,
    ):
        self._http = http_client
        self._api_key = api_key
        self._endpoint = endpoint
        self._timeout = timeout
        self._language_code = language_code
        self._included_types = included_types or ["restaurant"]

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    async def search_nearby(self, request: SearchRequest) -> list[RawPlace]:
        body = build_request_body(request, self._included_types, self._language_code)
        headers = {
            "Content-Type": "application/json",
            "X-Goog-Api-Key": self._api_key,
            "X-Goog-FieldMask": FIELD_MASK,
        }

        try:
            if self._http:
                resp = await self._http.post(
                    self._endpoint, json=body, headers=headers, timeout=self._timeout,
                )
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    resp = await client.post(self._endpoint, json=body, headers=headers)
        except httpx.HTTPError as e:
            logger.error("Places request failed: %s", e)
            raise UpstreamError(f"Places provider unreachable: {e}") from e

        if not 200 <= resp.status_code < 300:
            logger.error("Places provider returned %d: %s", resp.status_code, resp.text[:200])
            raise UpstreamError(
                f"Places provider returned {resp.status_code}", status_code=resp.status_code,
            )

        try:
            payload = resp.json()
        except ValueError as e:
            raise UpstreamError("Places provider returned an undecodable body") from e

        if not isinstance(payload, dict):
            raise UpstreamError("Places provider returned an unexpected body")
        # An empty result set omits "places" entirely
        places = payload.get("places") or []
        return [parse_place(p) for p in places if isinstance(p, dict)]

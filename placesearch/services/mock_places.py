#  Place Search - Mock Place Generator
#
#  Deterministic placeholder places around the request origin, used only
#  when no upstream credential is configured. Output has the same RawPlace
#  shape as the live client and still goes through the scorer.
#
#  Depends on: services/geo.py, models/schemas.py, models/enums.py
#  Used by:    container.py, services/search.py

from dataclasses import dataclass

from placesearch.models.enums import PriceLevel
from placesearch.models.schemas import RawPlace, SearchRequest
from placesearch.services.geo import displace

MAX_MOCK_DISTANCE_M = 1000
DISTANCE_STEP_M = 45
FALLBACK_LABELS = ("Local", "Seasonal", "Neighborhood")


@dataclass(frozen=True)
class PlaceTemplate:
    name: str
    base_distance_m: float
    bearing_deg: float
    rating: float
    price_level: PriceLevel
    open_now: bool | None
    types: tuple[str, ...]


CATALOG: tuple[PlaceTemplate, ...] = (
    PlaceTemplate("Garden Table", 120, 20, 4.6, PriceLevel.INEXPENSIVE, True,
                  ("restaurant", "cafe")),
    PlaceTemplate("Corner Kitchen", 260, 95, 4.2, PriceLevel.MODERATE, True,
                  ("restaurant",)),
    PlaceTemplate("Harbor Grill", 380, 170, 4.4, PriceLevel.EXPENSIVE, False,
                  ("restaurant", "bar")),
    PlaceTemplate("Lantern House", 520, 240, 3.9, PriceLevel.INEXPENSIVE, None,
                  ("restaurant",)),
    PlaceTemplate("Market Hall", 680, 300, 4.1, PriceLevel.MODERATE, True,
                  ("restaurant", "food_court")),
    PlaceTemplate("Riverside Dining", 820, 335, 4.7, PriceLevel.VERY_EXPENSIVE, False,
                  ("restaurant",)),
)


class MockPlaceGenerator:
    """Builds request.limit synthetic places, cycling the catalog as needed.

    Names are decorated round-robin with the request's cuisine keywords
    (sorted, so equivalent requests get identical output), or with
    FALLBACK_LABELS when no keyword is given.
    """

    def __init__(self, catalog: tuple[PlaceTemplate, ...] = CATALOG):
        self._catalog = catalog

    def generate(self, request: SearchRequest) -> list[RawPlace]:
        origin = request.location
        clamped_radius = min(request.radius_m, MAX_MOCK_DISTANCE_M)
        keywords = sorted(set(request.cuisine))

        places = []
        for index in range(request.limit):
            template = self._catalog[index % len(self._catalog)]
            distance = min(clamped_radius, template.base_distance_m + index * DISTANCE_STEP_M)
            lat, lng = displace(origin.lat, origin.lng, distance, template.bearing_deg)

            types = list(template.types)
            if keywords:
                keyword = keywords[index % len(keywords)]
                label = keyword.title()
                # Tag keeps the cuisine filter passing on the keyword itself
                types.append(keyword)
            else:
                label = FALLBACK_LABELS[index % len(FALLBACK_LABELS)]

            places.append(RawPlace(
                id=f"mock-{index + 1}",
                name=f"{label} {template.name}",
                rating=template.rating,
                price_level=template.price_level.value,
                open_now=template.open_now,
                lat=lat,
                lng=lng,
                types=types,
            ))
        return places

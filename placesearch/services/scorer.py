#  Place Search - Place Scorer
#
#  Turns raw place records into scored SearchResults: cuisine filter,
#  distance from origin, weighted fitness score, stable sort, truncate.
#
#  Depends on: services/geo.py, models/schemas.py, models/enums.py
#  Used by:    container.py, services/search.py

from urllib.parse import urlencode

from placesearch.models.enums import PriceLevel
from placesearch.models.schemas import RawPlace, SearchRequest, SearchResult
from placesearch.services.geo import distance_meters

RATING_WEIGHT = 0.4
DISTANCE_WEIGHT = 0.3
PRICE_WEIGHT = 0.2
OPEN_WEIGHT = 0.1

UNRATED_SCORE = 0.6
UNKNOWN_PRICE_SCORE = 0.6
UNKNOWN_OPEN_SCORE = 0.5

PRICE_SCORES = {
    PriceLevel.FREE.value: 1.0,
    PriceLevel.INEXPENSIVE.value: 0.9,
    PriceLevel.MODERATE.value: 0.7,
    PriceLevel.EXPENSIVE.value: 0.4,
    PriceLevel.VERY_EXPENSIVE.value: 0.2,
}

_MAPS_SEARCH_URL = "https://www.google.com/maps/search/"


def matches_cuisine(place: RawPlace, cuisine: list[str]) -> bool:
    """True when any keyword is a substring of the name or of any category tag."""
    if not cuisine:
        return True
    name = place.name.lower()
    tags = [t.lower() for t in place.types]
    return any(kw in name or any(kw in tag for tag in tags) for kw in cuisine)


def fitness_score(
    rating: float | None,
    distance_m: float,
    radius_m: float,
    price_level: str | None,
    open_now: bool | None,
) -> float:
    """Weighted composite in [0, 1], rounded to 3 decimals."""
    rating_score = rating / 5 if rating is not None else UNRATED_SCORE
    rating_score = min(1.0, max(0.0, rating_score))
    distance_score = 1 - min(1.0, distance_m / max(radius_m, 1))
    price_score = PRICE_SCORES.get(price_level, UNKNOWN_PRICE_SCORE)
    if open_now is None:
        open_score = UNKNOWN_OPEN_SCORE
    else:
        open_score = 1.0 if open_now else 0.0

    score = (RATING_WEIGHT * rating_score
             + DISTANCE_WEIGHT * distance_score
             + PRICE_WEIGHT * price_score
             + OPEN_WEIGHT * open_score)
    return round(score, 3)


class PlaceScorer:
    """Normalizes raw places against a request. Agnostic to where they came from."""

    def __init__(self, static_map_base_url: str):
        self._static_map_base_url = static_map_base_url

    def map_image_url(self, place_id: str, lat: float, lng: float) -> str:
        """Reference resolved by the static-map proxy. Built here, never fetched."""
        query = urlencode({"lat": f"{lat:.6f}", "lng": f"{lng:.6f}", "place_id": place_id})
        return f"{self._static_map_base_url}?{query}"

    @staticmethod
    def map_url(place: RawPlace, lat: float, lng: float) -> str:
        if place.map_uri:
            return place.map_uri
        query = urlencode({
            "api": 1,
            "query": f"{lat:.6f},{lng:.6f}",
            "query_place_id": place.id,
        })
        return f"{_MAPS_SEARCH_URL}?{query}"

    def normalize(self, raw_places: list[RawPlace], request: SearchRequest) -> list[SearchResult]:
        origin = request.location
        results = []
        for place in raw_places:
            if not matches_cuisine(place, request.cuisine):
                continue

            if place.lat is None or place.lng is None:
                lat, lng = origin.lat, origin.lng
            else:
                lat, lng = place.lat, place.lng
            distance = distance_meters(origin.lat, origin.lng, lat, lng)

            results.append(SearchResult(
                id=place.id,
                name=place.name,
                rating=place.rating,
                distance_m=distance,
                price_level=place.price_level,
                open_now=place.open_now,
                score=fitness_score(
                    place.rating, distance, request.radius_m, place.price_level, place.open_now,
                ),
                map_image_url=self.map_image_url(place.id, lat, lng),
                map_url=self.map_url(place, lat, lng),
                address=place.address,
                types=list(place.types),
            ))

        # sorted() is stable: equal scores keep input order
        results = sorted(results, key=lambda r: r.score, reverse=True)
        return results[:request.limit]

#  Place Search - Pydantic Schemas
#
#  Request/response models for the REST API, plus the RawPlace record
#  shared by the upstream client and the mock generator.
#
#  Depends on: models/enums.py
#  Used by:    routes/*, services/*

import math
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field, field_validator

from placesearch.models.enums import SearchMode

MAX_RADIUS_M = 50_000
MIN_LIMIT = 1
MAX_LIMIT = 20
DEFAULT_LIMIT = 5


# ---------------------------------------------------------------------------
# Search request
# ---------------------------------------------------------------------------

class Location(BaseModel):
    lat: float = Field(strict=True)
    lng: float = Field(strict=True)

    @field_validator("lat")
    @classmethod
    def _check_lat(cls, v: float) -> float:
        if not math.isfinite(v) or not -90 <= v <= 90:
            raise ValueError("latitude must be a finite number between -90 and 90")
        return v

    @field_validator("lng")
    @classmethod
    def _check_lng(cls, v: float) -> float:
        if not math.isfinite(v) or not -180 <= v <= 180:
            raise ValueError("longitude must be a finite number between -180 and 180")
        return v


class Budget(BaseModel):
    max: float = Field(strict=True)

    @field_validator("max")
    @classmethod
    def _check_max(cls, v: float) -> float:
        if not math.isfinite(v) or v < 0:
            raise ValueError("budget ceiling must be a finite, non-negative number")
        return v


class SearchRequest(BaseModel):
    """Validated search request. All numeric fields are finite and clamped."""

    location: Location
    radius_m: float = Field(strict=True)
    cuisine: list[str] = Field(default_factory=list)
    budget: Budget | None = None
    limit: int = Field(DEFAULT_LIMIT, strict=True)

    @field_validator("radius_m")
    @classmethod
    def _clamp_radius(cls, v: float) -> float:
        if not math.isfinite(v) or v <= 0:
            raise ValueError("radius must be a positive number")
        return min(v, MAX_RADIUS_M)

    @field_validator("cuisine", mode="before")
    @classmethod
    def _normalize_cuisine(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            v = [v]
        if not isinstance(v, (list, tuple)):
            raise ValueError("cuisine must be a list of keywords")
        keywords = []
        for item in v:
            if not isinstance(item, str):
                raise ValueError("cuisine keywords must be strings")
            item = item.strip().lower()
            if item:
                keywords.append(item)
        return keywords

    @field_validator("limit", mode="before")
    @classmethod
    def _default_limit(cls, v):
        return DEFAULT_LIMIT if v is None else v

    @field_validator("limit")
    @classmethod
    def _clamp_limit(cls, v: int) -> int:
        return max(MIN_LIMIT, min(MAX_LIMIT, v))


# ---------------------------------------------------------------------------
# Search response
# ---------------------------------------------------------------------------

class SearchResult(BaseModel):
    id: str
    name: str
    rating: float | None = None
    distance_m: int
    price_level: str | None = None
    open_now: bool | None = None   # None = unknown
    score: float
    map_image_url: str
    map_url: str
    address: str | None = None
    types: list[str] = Field(default_factory=list)


class SearchResponse(BaseModel):
    """Cached payload: immutable once stored, returned verbatim on a hit."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    results: list[SearchResult]
    cached_at: str = Field(alias="cachedAt")


class HealthOut(BaseModel):
    status: str
    mode: SearchMode
    store: str


# ---------------------------------------------------------------------------
# Internal records
# ---------------------------------------------------------------------------

@dataclass
class RawPlace:
    """A place as delivered by the upstream provider or the mock generator."""
    id: str
    name: str
    rating: float | None = None
    price_level: str | None = None
    open_now: bool | None = None
    lat: float | None = None
    lng: float | None = None
    map_uri: str | None = None
    address: str | None = None
    types: list[str] = field(default_factory=list)

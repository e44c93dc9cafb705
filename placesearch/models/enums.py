#  Place Search - Enums
#
#  Status and vocabulary enumerations used across the pipeline.
#
#  Depends on: (none)
#  Used by:    models/schemas.py, services/*, routes/*

from enum import Enum


class PriceLevel(str, Enum):
    """Upstream price tier labels, cheapest first."""
    FREE = "PRICE_LEVEL_FREE"
    INEXPENSIVE = "PRICE_LEVEL_INEXPENSIVE"
    MODERATE = "PRICE_LEVEL_MODERATE"
    EXPENSIVE = "PRICE_LEVEL_EXPENSIVE"
    VERY_EXPENSIVE = "PRICE_LEVEL_VERY_EXPENSIVE"


class CacheStatus(str, Enum):
    HIT = "HIT"
    MISS = "MISS"


class SearchMode(str, Enum):
    LIVE = "live"    # Upstream credential configured
    MOCK = "mock"    # Synthesized placeholder results

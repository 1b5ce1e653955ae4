"""
Comparable Ranker

Finds prior sales similar to a target property: hard filters, progressive
radius search and weighted similarity scoring.
"""

from .models import (
    ComparableSale,
    SearchTarget,
    RankedComparable,
    RankingResult,
    SOURCE_DATABASE,
    SOURCE_PORTAL,
)
from .geo import haversine_km, bounding_box, country_from_coordinates
from .filters import CompEligibilityFilter, normalise_property_type
from .ranker import (
    ComparableRanker,
    rank,
    MAX_RESULTS_LOCATION,
    MAX_RESULTS_PORTALS,
)

__all__ = [
    # Models
    "ComparableSale",
    "SearchTarget",
    "RankedComparable",
    "RankingResult",
    "SOURCE_DATABASE",
    "SOURCE_PORTAL",
    # Geo
    "haversine_km",
    "bounding_box",
    "country_from_coordinates",
    # Ranker
    "CompEligibilityFilter",
    "normalise_property_type",
    "ComparableRanker",
    "rank",
    "MAX_RESULTS_LOCATION",
    "MAX_RESULTS_PORTALS",
]

"""
Property Appraisal Engine - Core Business Logic

Two independent, stateless computations:
1. Valuation Calculator (table-driven multiplier chains, two strategies)
2. Comparable Ranker (radius search and similarity scoring of prior sales)

The ranker's results are informational only and never feed the
calculator's arithmetic.
"""

# Valuation Calculator
from .valuation import (
    PropertyType,
    LocationQuality,
    GeneralCondition,
    Topography,
    ValuationPurpose,
    Stratum,
    ValuationStrategy,
    PropertyAttributes,
    AppliedFactor,
    ValuationResult,
    QualityTierStrategy,
    StratumStrategy,
    land_size_factor,
    calculate,
)

# Comparable Ranker
from .comparables import (
    ComparableSale,
    SearchTarget,
    RankedComparable,
    RankingResult,
    ComparableRanker,
    rank,
)

# Country profiles
from .countries import CountryProfile, get_country, find_country

# Sales sources and search
from .sales_history import SalesHistoryService
from .search import (
    ComparableSearchService,
    ComparableSource,
    SourceOutcome,
    FanOutResult,
    gather_candidates,
)

__all__ = [
    # Valuation Calculator
    "PropertyType",
    "LocationQuality",
    "GeneralCondition",
    "Topography",
    "ValuationPurpose",
    "Stratum",
    "ValuationStrategy",
    "PropertyAttributes",
    "AppliedFactor",
    "ValuationResult",
    "QualityTierStrategy",
    "StratumStrategy",
    "land_size_factor",
    "calculate",
    # Comparable Ranker
    "ComparableSale",
    "SearchTarget",
    "RankedComparable",
    "RankingResult",
    "ComparableRanker",
    "rank",
    # Countries
    "CountryProfile",
    "get_country",
    "find_country",
    # Search
    "SalesHistoryService",
    "ComparableSearchService",
    "ComparableSource",
    "SourceOutcome",
    "FanOutResult",
    "gather_candidates",
]

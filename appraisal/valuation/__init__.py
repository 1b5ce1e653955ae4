"""
Valuation Calculator

Deterministic, table-driven property valuation. Two models are exposed as
named strategies and are deliberately not merged:

- quality_tier: location-quality tiers, land-only and improved branches
- stratum: country comparative value plus a social-stratum adjustment
"""

from .models import (
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
)
from .land_size import land_size_factor
from .calculator import (
    ValuationModel,
    QualityTierStrategy,
    StratumStrategy,
    get_strategy,
    calculate,
)

__all__ = [
    # Models
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
    # Calculator
    "land_size_factor",
    "ValuationModel",
    "QualityTierStrategy",
    "StratumStrategy",
    "get_strategy",
    "calculate",
]

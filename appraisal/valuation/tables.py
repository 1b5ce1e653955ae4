"""
Multiplier tables for the valuation calculator.

Every table is keyed by its enum and checked for completeness at import
time. Each table has exactly one runtime fallback, used when the attribute
is unset or unrecognised.

The intermediate stratum adjustments are placeholder data; see
STRATUM_ADJUSTMENTS.
"""

from enum import Enum
from typing import Dict, Optional, Type, TypeVar

from .models import (
    GeneralCondition,
    LocationQuality,
    PropertyType,
    Stratum,
    Topography,
    ValuationPurpose,
)

K = TypeVar("K", bound=Enum)


def _require_complete(table: Dict[K, float], enum_cls: Type[K]) -> Dict[K, float]:
    """Fail at import if a table is missing an enum member."""
    missing = [member.name for member in enum_cls if member not in table]
    if missing:
        raise ValueError(f"{enum_cls.__name__} table missing entries: {missing}")
    return table


def lookup(table: Dict[K, float], key: Optional[K], default: float) -> float:
    """Table lookup with the table's documented fallback."""
    if key is None:
        return default
    return table.get(key, default)


# =============================================================================
# Land Branch (quality-tier strategy)
# =============================================================================

# USD per m², independent of country
LAND_BASE_PRICE_PER_SQM = 80.0

TOPOGRAPHY_FACTORS = _require_complete({
    Topography.FLAT: 1.12,             # +12%
    Topography.GENTLE_SLOPE: 1.03,     # +3%
    Topography.MODERATE_SLOPE: 0.93,   # -7%
    Topography.STEEP_SLOPE: 0.80,      # -20%
    Topography.IRREGULAR: 0.75,        # -25%
}, Topography)
TOPOGRAPHY_DEFAULT = 1.0

VALUATION_PURPOSE_FACTORS = _require_complete({
    ValuationPurpose.RESIDENTIAL: 0.65,    # -35% (baseline)
    ValuationPurpose.COMMERCIAL: 1.28,     # +28%
    ValuationPurpose.INDUSTRIAL: 1.24,     # +24%
    ValuationPurpose.AGRICULTURAL: 0.43,   # -57%
}, ValuationPurpose)
VALUATION_PURPOSE_DEFAULT = 1.0


# =============================================================================
# Improved-Property Branch (quality-tier strategy)
# =============================================================================

PRICE_PER_SQM = {
    PropertyType.HOUSE: 850.0,
    PropertyType.APARTMENT: 950.0,
    PropertyType.COMMERCIAL: 1200.0,
}
# Unset or unrecognised type
GENERIC_PRICE_PER_SQM = 800.0

# Land component of an improved property, USD per m²
LAND_UNIT_RATE = 120.0

LOCATION_FACTORS = _require_complete({
    LocationQuality.EXCELLENT: 1.25,
    LocationQuality.GOOD: 1.10,
    LocationQuality.MEDIUM: 1.0,
    LocationQuality.REGULAR: 0.85,
    LocationQuality.POOR: 0.70,
}, LocationQuality)
LOCATION_DEFAULT = 1.0  # medium tier

# Shared by both strategies
CONDITION_FACTORS = _require_complete({
    GeneralCondition.NEW: 1.15,
    GeneralCondition.GOOD: 1.05,
    GeneralCondition.MEDIUM: 1.0,
    GeneralCondition.REGULAR: 0.90,
    GeneralCondition.SIMPLE_REPAIRS: 0.85,
    GeneralCondition.MEDIUM_REPAIRS: 0.75,
    GeneralCondition.MAJOR_REPAIRS: 0.60,
    GeneralCondition.SEVERE_DAMAGE: 0.40,
    GeneralCondition.DISPOSAL: 0.20,
}, GeneralCondition)
CONDITION_DEFAULT = 1.0  # medium tier


# =============================================================================
# Stratum Strategy
# =============================================================================

# alto_bajo is the 0% baseline, not the highest tier.
# Only alto_alto, alto_bajo and bajo_bajo are fixed values; the tiers between
# them are placeholder steps.
STRATUM_ADJUSTMENTS = _require_complete({
    Stratum.ALTO_ALTO: 0.07,
    Stratum.ALTO_MEDIO: 0.035,
    Stratum.ALTO_BAJO: 0.0,
    Stratum.MEDIO_ALTO: -0.05,
    Stratum.MEDIO_MEDIO: -0.10,
    Stratum.MEDIO_BAJO: -0.16,
    Stratum.BAJO_ALTO: -0.22,
    Stratum.BAJO_MEDIO: -0.30,
    Stratum.BAJO_BAJO: -0.40,
}, Stratum)
STRATUM_DEFAULT = 0.0

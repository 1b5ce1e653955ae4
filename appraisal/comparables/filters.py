"""
Comparable Eligibility Filters

Implements the hard filters and the progressive radius search:
- Country (same country as the target, when given)
- Sale date (within 24 months)
- Total area (within ±30% of the target area, when given)
- Property type (exact canonical type, or the broader type group)
- Geographic radius (1 -> 25 km, bounding box then haversine)
"""

from dataclasses import dataclass
from datetime import date
from typing import FrozenSet, List, Optional, Tuple

from appraisal.countries import same_country

from .geo import bounding_box, haversine_km
from .models import ComparableSale, SearchTarget


# =============================================================================
# Configuration Constants
# =============================================================================

MAX_SALE_AGE_MONTHS = 24
AREA_TOLERANCE = 0.30

# Progressive search radii (km)
SEARCH_RADII_KM = (1, 2, 5, 10, 15, 20, 25)

# Stop widening the radius once this many candidates qualify
MIN_COMPS_TO_STOP = 5

# Fewer exact-type matches than this triggers the type-group search
MIN_COMPS_EXACT_TYPE = 3


# =============================================================================
# Property Type Normalisation
# =============================================================================

_TYPE_SYNONYMS = {
    "house": "house",
    "casa": "house",
    "home": "house",
    "residential": "house",
    "residencial": "house",
    "vivienda": "house",
    "townhouse": "house",
    "apartment": "apartment",
    "departamento": "apartment",
    "apartamento": "apartment",
    "condo": "apartment",
    "condominium": "apartment",
    "flat": "apartment",
    "land": "land",
    "terreno": "land",
    "lot": "land",
    "lote": "land",
    "plot": "land",
    "commercial": "commercial",
    "comercial": "commercial",
    "local": "commercial",
    "retail": "commercial",
    "shop": "commercial",
    "office": "office",
    "oficina": "office",
    "consultorio": "office",
    "warehouse": "warehouse",
    "bodega": "warehouse",
    "industrial": "warehouse",
}

_TYPE_GROUPS = (
    frozenset({"house", "apartment"}),
    frozenset({"commercial", "office", "warehouse"}),
    frozenset({"land"}),
)


@dataclass(frozen=True)
class NormalisedType:
    """Canonical property type plus the broader group it belongs to."""
    canonical: str
    group: FrozenSet[str]


def normalise_property_type(value: Optional[str]) -> NormalisedType:
    """
    Map a raw property type to its canonical type and type group.

    Unknown types keep their cleaned name and form a group of one.
    """
    cleaned = (value or "").lower().strip().replace("-", "_").replace(" ", "_")
    canonical = _TYPE_SYNONYMS.get(cleaned, cleaned)
    for group in _TYPE_GROUPS:
        if canonical in group:
            return NormalisedType(canonical, group)
    return NormalisedType(canonical, frozenset({canonical}))


# =============================================================================
# Date Helpers
# =============================================================================

def months_between(sale_date: date, reference_date: date) -> int:
    """Whole months elapsed from ``sale_date`` to ``reference_date`` (>= 0)."""
    months = (
        (reference_date.year - sale_date.year) * 12
        + (reference_date.month - sale_date.month)
    )
    if reference_date.day < sale_date.day:
        months -= 1
    return max(months, 0)


# =============================================================================
# Filter
# =============================================================================

@dataclass
class RadiusMatch:
    """A candidate found inside the search radius."""
    sale: ComparableSale
    distance_km: float


class CompEligibilityFilter:
    """
    Applies hard filters and the progressive radius search.

    A candidate must pass ALL hard filters before radius search.
    """

    def __init__(self, reference_date: date = None):
        """
        Initialize filter with reference date.

        Args:
            reference_date: Date to calculate sale age from (default: today)
        """
        self._reference_date = reference_date or date.today()

    @property
    def reference_date(self) -> date:
        return self._reference_date

    def apply_hard_filters(
        self,
        candidates: List[ComparableSale],
        target: SearchTarget,
    ) -> List[ComparableSale]:
        """Apply the country, sale date and area filters."""
        result = []

        for comp in candidates:
            if target.country and not same_country(comp.country, target.country):
                continue

            if self.months_old(comp) > MAX_SALE_AGE_MONTHS:
                continue

            if target.has_area and not self._is_within_area_tolerance(comp, target):
                continue

            result.append(comp)

        return result

    def filter_by_type(
        self,
        candidates: List[ComparableSale],
        target: SearchTarget,
        use_group: bool = False,
    ) -> List[ComparableSale]:
        """Keep candidates of the target's exact type, or its type group."""
        wanted = normalise_property_type(target.property_type)
        result = []
        for comp in candidates:
            comp_type = normalise_property_type(comp.property_type).canonical
            if use_group:
                if comp_type in wanted.group:
                    result.append(comp)
            elif comp_type == wanted.canonical:
                result.append(comp)
        return result

    def progressive_radius_search(
        self,
        candidates: List[ComparableSale],
        target: SearchTarget,
    ) -> Tuple[List[RadiusMatch], float]:
        """
        Widen the radius until enough candidates qualify.

        Returns:
            Tuple of:
            - Candidates inside the final radius, with their distance
            - Radius used (km); the largest radius if never satisfied
        """
        matches: List[RadiusMatch] = []
        radius_used = float(SEARCH_RADII_KM[-1])

        for radius in SEARCH_RADII_KM:
            matches = self.filter_by_radius(candidates, target, radius)
            if len(matches) >= MIN_COMPS_TO_STOP:
                radius_used = float(radius)
                break

        return matches, radius_used

    def filter_by_radius(
        self,
        candidates: List[ComparableSale],
        target: SearchTarget,
        radius_km: float,
    ) -> List[RadiusMatch]:
        """Bounding-box pre-filter, then exact haversine distance check."""
        box = bounding_box(target.latitude, target.longitude, radius_km)
        result = []

        for comp in candidates:
            if not box.contains(comp.latitude, comp.longitude):
                continue
            distance = haversine_km(
                target.latitude, target.longitude,
                comp.latitude, comp.longitude,
            )
            if distance <= radius_km:
                result.append(RadiusMatch(sale=comp, distance_km=distance))

        return result

    def months_old(self, comp: ComparableSale) -> int:
        """Age of a sale in whole months."""
        return months_between(comp.sale_date, self._reference_date)

    @staticmethod
    def _is_within_area_tolerance(comp: ComparableSale, target: SearchTarget) -> bool:
        """Check total area is within ±30% of the target area."""
        low = target.area * (1 - AREA_TOLERANCE)
        high = target.area * (1 + AREA_TOLERANCE)
        return low <= comp.total_area <= high

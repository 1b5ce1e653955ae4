"""
Comparable Ranker

Pipeline order:
1. FILTER - Country, sale date, area tolerance
2. SEARCH - Progressive radius with exact type, then type group if thin
3. SCORE - Area, distance and recency similarity
4. RANK - Sort by score, then distance, then age; keep top N
"""

import logging
from datetime import date
from typing import List, Optional

from .filters import (
    MIN_COMPS_EXACT_TYPE,
    CompEligibilityFilter,
    RadiusMatch,
)
from .models import (
    TYPE_MODE_EXACT,
    TYPE_MODE_GROUP,
    ComparableSale,
    RankedComparable,
    RankingResult,
    SearchTarget,
)


# =============================================================================
# Configuration Constants
# =============================================================================

# Result counts for the two search paths
MAX_RESULTS_LOCATION = 5
MAX_RESULTS_PORTALS = 3

# Score weights
WEIGHT_AREA = 0.5
WEIGHT_DISTANCE = 0.3
WEIGHT_RECENCY = 0.2

# Area score when the target has no area
NEUTRAL_AREA_SCORE = 0.5

# (upper bound inclusive, score)
DISTANCE_SCORE_STEPS = ((1, 1.0), (5, 0.8), (10, 0.6), (15, 0.4))
DISTANCE_SCORE_FLOOR = 0.2

RECENCY_SCORE_STEPS = ((6, 1.0), (12, 0.8), (18, 0.6), (24, 0.4))
RECENCY_SCORE_FLOOR = 0.2


def area_score(candidate_area: float, target_area: Optional[float]) -> float:
    """1 for identical areas, falling linearly with relative difference."""
    if target_area is None or target_area <= 0:
        return NEUTRAL_AREA_SCORE
    largest = max(candidate_area, target_area)
    if largest <= 0:
        return NEUTRAL_AREA_SCORE
    return max(0.0, 1 - abs(candidate_area - target_area) / largest)


def distance_score(distance_km: float) -> float:
    for limit, score in DISTANCE_SCORE_STEPS:
        if distance_km <= limit:
            return score
    return DISTANCE_SCORE_FLOOR


def recency_score(months_old: int) -> float:
    for limit, score in RECENCY_SCORE_STEPS:
        if months_old <= limit:
            return score
    return RECENCY_SCORE_FLOOR


def overall_score(area: float, distance: float, recency: float) -> float:
    return WEIGHT_AREA * area + WEIGHT_DISTANCE * distance + WEIGHT_RECENCY * recency


class ComparableRanker:
    """
    Ranks prior sales by similarity to a target property.

    Operates on an already-fetched in-memory pool; no I/O.
    """

    def __init__(
        self,
        reference_date: date = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize ranker.

        Args:
            reference_date: Reference date for sale age (default: today)
            logger: Logger for search diagnostics
        """
        self._reference_date = reference_date or date.today()
        self._filter = CompEligibilityFilter(reference_date=self._reference_date)
        self._logger = logger or logging.getLogger(__name__)

    def search(
        self,
        target: SearchTarget,
        pool: List[ComparableSale],
        max_results: int = MAX_RESULTS_LOCATION,
    ) -> RankingResult:
        """
        Find and rank comparables, returning search metadata.

        Args:
            target: The property being compared
            pool: Candidate prior sales
            max_results: Number of comparables to keep

        Returns:
            RankingResult (empty comparables if nothing qualifies)
        """
        if not pool:
            return RankingResult()

        eligible = self._filter.apply_hard_filters(pool, target)

        # Step 1: exact type
        exact = self._filter.filter_by_type(eligible, target)
        matches, radius_used = self._filter.progressive_radius_search(exact, target)
        type_mode = TYPE_MODE_EXACT

        # Step 2: type group when exact matches are thin
        if len(matches) < MIN_COMPS_EXACT_TYPE:
            grouped = self._filter.filter_by_type(eligible, target, use_group=True)
            group_matches, group_radius = self._filter.progressive_radius_search(
                grouped, target
            )
            if len(group_matches) > len(matches):
                matches, radius_used = group_matches, group_radius
                type_mode = TYPE_MODE_GROUP

        ranked = sorted(
            (self._score(match, target) for match in matches),
            key=lambda r: (-r.overall_similarity_score, r.distance_km, r.months_old),
        )

        self._logger.info(
            "Ranked %d of %d candidates (radius %.0f km, %s type)",
            min(len(ranked), max_results),
            len(pool),
            radius_used,
            type_mode,
        )

        return RankingResult(
            comparables=ranked[:max_results],
            radius_used_km=radius_used,
            type_mode=type_mode,
            pool_size=len(pool),
            eligible_count=len(eligible),
            within_radius_count=len(matches),
        )

    def rank(
        self,
        target: SearchTarget,
        pool: List[ComparableSale],
        max_results: int = MAX_RESULTS_LOCATION,
    ) -> List[RankedComparable]:
        """Ranked comparables only."""
        return self.search(target, pool, max_results).comparables

    def _score(self, match: RadiusMatch, target: SearchTarget) -> RankedComparable:
        months_old = self._filter.months_old(match.sale)
        area = area_score(
            match.sale.total_area, target.area if target.has_area else None
        )
        distance = distance_score(match.distance_km)
        recency = recency_score(months_old)

        return RankedComparable(
            sale=match.sale,
            distance_km=match.distance_km,
            months_old=months_old,
            area_similarity_score=area,
            distance_score=distance,
            recency_score=recency,
            overall_similarity_score=overall_score(area, distance, recency),
        )


def rank(
    target: SearchTarget,
    pool: List[ComparableSale],
    max_results: int = MAX_RESULTS_LOCATION,
    reference_date: date = None,
) -> List[RankedComparable]:
    """Rank ``pool`` against ``target``; empty list if nothing qualifies."""
    return ComparableRanker(reference_date=reference_date).rank(target, pool, max_results)

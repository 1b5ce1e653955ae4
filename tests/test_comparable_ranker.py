"""
Tests for the Comparable Ranker

Verifies:
- Empty pool / nothing qualifying returns [] (never raises)
- Hard filters: country, 24-month window, ±30% area
- Progressive radius search stops at 5 candidates
- Type-group fallback when fewer than 3 exact-type matches
- Weighted scoring and deterministic tie-breaks
- Distinct result counts for the two search paths
"""

import pytest
from datetime import date
from pathlib import Path
import sys

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from appraisal.comparables import (
    ComparableSale,
    SearchTarget,
    ComparableRanker,
    CompEligibilityFilter,
    rank,
    haversine_km,
    bounding_box,
    country_from_coordinates,
    normalise_property_type,
    MAX_RESULTS_LOCATION,
    MAX_RESULTS_PORTALS,
)
from appraisal.comparables.filters import months_between, SEARCH_RADII_KM
from appraisal.comparables.geo import KM_PER_DEGREE
from appraisal.comparables.models import TYPE_MODE_EXACT, TYPE_MODE_GROUP
from appraisal.comparables.ranker import (
    area_score,
    distance_score,
    recency_score,
    overall_score,
)


# San Salvador
TARGET_LAT = 13.6929
TARGET_LNG = -89.2182


def months_before(reference: date, months: int) -> date:
    """First-of-month date ``months`` before ``reference``."""
    total = reference.year * 12 + (reference.month - 1) - months
    return date(total // 12, total % 12 + 1, 1)


# =============================================================================
# Test Fixtures
# =============================================================================

@pytest.fixture
def reference_date():
    """Fixed reference date for deterministic tests."""
    return date(2024, 6, 1)


@pytest.fixture
def target():
    """150 m² house in San Salvador."""
    return SearchTarget(
        latitude=TARGET_LAT,
        longitude=TARGET_LNG,
        property_type="house",
        area=150,
        country="SV",
    )


@pytest.fixture
def create_sale(reference_date):
    """Factory fixture for sales placed ``km_north`` of the target."""
    def _create(
        sale_id: str,
        km_north: float = 0.5,
        area: float = 150,
        months_ago: int = 1,
        property_type: str = "house",
        country: str = "SV",
        price: float = 150000,
    ) -> ComparableSale:
        return ComparableSale(
            id=sale_id,
            address=f"{sale_id} Test Street, San Salvador",
            property_type=property_type,
            total_area=area,
            price_usd=price,
            price_per_sqm_usd=price / area,
            latitude=TARGET_LAT + km_north / KM_PER_DEGREE,
            longitude=TARGET_LNG,
            sale_date=months_before(reference_date, months_ago),
            country=country,
        )
    return _create


@pytest.fixture
def ranker(reference_date):
    """Ranker with fixed reference date."""
    return ComparableRanker(reference_date=reference_date)


@pytest.fixture
def filter_engine(reference_date):
    """Filter engine with fixed reference date."""
    return CompEligibilityFilter(reference_date=reference_date)


# =============================================================================
# Test: Empty Results
# =============================================================================

class TestEmptyResults:
    """Nothing to rank is a valid, empty answer."""

    def test_empty_pool_returns_empty_list(self, target, reference_date):
        assert rank(target, [], reference_date=reference_date) == []

    def test_empty_pool_search_metadata(self, ranker, target):
        result = ranker.search(target, [])

        assert result.count == 0
        assert result.pool_size == 0

    def test_nothing_qualifying_returns_empty_list(self, ranker, target, create_sale):
        pool = [
            create_sale("GT-1", country="GT"),
            create_sale("OLD-1", months_ago=36),
            create_sale("FAR-1", km_north=40),
        ]
        assert ranker.rank(target, pool) == []


# =============================================================================
# Test: Similarity Ordering
# =============================================================================

class TestSimilarityOrdering:
    """A close, recent, same-size sale beats a distant, stale, mismatched one."""

    def test_scores_prefer_close_recent_match(self):
        near = overall_score(area_score(150, 150), distance_score(0.5), recency_score(1))
        far = overall_score(area_score(75, 150), distance_score(20), recency_score(23))

        assert near > far

    def test_ranked_order_without_target_area(self, ranker, target, create_sale):
        target.area = None
        far = create_sale("FAR", km_north=20, area=75, months_ago=23)
        near = create_sale("NEAR", km_north=0.5, area=150, months_ago=1)

        ranked = ranker.rank(target, [far, near])

        assert [r.sale.id for r in ranked] == ["NEAR", "FAR"]
        assert ranked[0].overall_similarity_score > ranked[1].overall_similarity_score

    def test_area_mismatch_excluded_with_target_area(self, ranker, target, create_sale):
        far = create_sale("FAR", km_north=20, area=75, months_ago=23)
        near = create_sale("NEAR", km_north=0.5, area=150, months_ago=1)

        ranked = ranker.rank(target, [far, near])

        assert [r.sale.id for r in ranked] == ["NEAR"]

    def test_scores_attached_to_result(self, ranker, target, create_sale):
        ranked = ranker.rank(target, [create_sale("A", km_north=3, area=120, months_ago=8)])

        comp = ranked[0]
        assert comp.distance_km == pytest.approx(3.0, abs=0.01)
        assert comp.months_old == 8
        assert comp.area_similarity_score == pytest.approx(1 - 30 / 150)
        assert comp.distance_score == 0.8
        assert comp.recency_score == 0.8
        assert comp.overall_similarity_score == pytest.approx(
            0.5 * 0.8 + 0.3 * 0.8 + 0.2 * 0.8
        )


# =============================================================================
# Test: Hard Filters
# =============================================================================

class TestHardFilters:
    """Country, sale date and area filters."""

    def test_other_country_excluded(self, filter_engine, target, create_sale):
        pool = [create_sale("SV-1"), create_sale("GT-1", country="GT")]

        result = filter_engine.apply_hard_filters(pool, target)

        assert [s.id for s in result] == ["SV-1"]

    def test_country_name_matches_code(self, filter_engine, target, create_sale):
        target.country = "El Salvador"
        result = filter_engine.apply_hard_filters([create_sale("SV-1")], target)

        assert len(result) == 1

    def test_no_target_country_keeps_all(self, filter_engine, target, create_sale):
        target.country = None
        pool = [create_sale("SV-1"), create_sale("GT-1", country="GT")]

        assert len(filter_engine.apply_hard_filters(pool, target)) == 2

    def test_24_months_included(self, filter_engine, target, create_sale):
        result = filter_engine.apply_hard_filters([create_sale("A", months_ago=24)], target)
        assert len(result) == 1

    def test_25_months_excluded(self, filter_engine, target, create_sale):
        result = filter_engine.apply_hard_filters([create_sale("A", months_ago=25)], target)
        assert result == []

    @pytest.mark.parametrize("area,kept", [
        (100, False),
        (110, True),
        (150, True),
        (190, True),
        (200, False),
    ])
    def test_area_tolerance(self, filter_engine, target, create_sale, area, kept):
        result = filter_engine.apply_hard_filters([create_sale("A", area=area)], target)
        assert (len(result) == 1) == kept

    def test_no_target_area_skips_area_filter(self, filter_engine, target, create_sale):
        target.area = None
        result = filter_engine.apply_hard_filters([create_sale("A", area=5000)], target)

        assert len(result) == 1

    @pytest.mark.parametrize("area", [0, -40])
    def test_unusable_target_area_is_ignored(self, ranker, target, create_sale, area):
        target.area = area
        ranked = ranker.rank(target, [create_sale("A", area=5000)])

        assert len(ranked) == 1
        assert ranked[0].area_similarity_score == 0.5


# =============================================================================
# Test: Progressive Radius Search
# =============================================================================

class TestProgressiveRadius:
    """Radius widens 1 -> 25 km until five candidates qualify."""

    def test_radii_sequence(self):
        assert SEARCH_RADII_KM == (1, 2, 5, 10, 15, 20, 25)

    def test_stops_at_first_radius(self, ranker, target, create_sale):
        pool = [create_sale(f"S{i}", km_north=0.2 * (i + 1)) for i in range(5)]

        result = ranker.search(target, pool)

        assert result.radius_used_km == 1
        assert result.count == 5

    def test_widens_until_five(self, ranker, target, create_sale):
        pool = [create_sale(f"NEAR{i}", km_north=0.5) for i in range(4)]
        pool += [create_sale(f"MID{i}", km_north=4) for i in range(2)]
        pool.append(create_sale("FAR", km_north=8))

        result = ranker.search(target, pool)

        assert result.radius_used_km == 5
        assert result.within_radius_count == 6
        assert "FAR" not in [r.sale.id for r in result.comparables]

    def test_never_satisfied_uses_largest_radius(self, ranker, target, create_sale):
        pool = [create_sale("A", km_north=12), create_sale("B", km_north=30)]

        result = ranker.search(target, pool)

        assert result.radius_used_km == 25
        assert [r.sale.id for r in result.comparables] == ["A"]

    def test_just_inside_radius_kept(self, filter_engine, target, create_sale):
        matches = filter_engine.filter_by_radius([create_sale("A", km_north=0.999)], target, 1)
        assert len(matches) == 1

    def test_just_outside_radius_rejected(self, filter_engine, target, create_sale):
        matches = filter_engine.filter_by_radius([create_sale("A", km_north=1.01)], target, 1)
        assert matches == []

    def test_diagonal_corner_rejected(self, filter_engine, target, create_sale):
        """Inside the bounding box but outside the circle."""
        sale = create_sale("CORNER", km_north=0.9)
        sale.longitude = TARGET_LNG + 0.9 / (KM_PER_DEGREE * 0.9716)

        assert filter_engine.filter_by_radius([sale], target, 1) == []


# =============================================================================
# Test: Type Group Fallback
# =============================================================================

class TestTypeGroupFallback:
    """Fewer than 3 exact-type matches widens to the synonym group."""

    def test_falls_back_to_group(self, ranker, target, create_sale):
        pool = [create_sale(f"H{i}") for i in range(2)]
        pool += [create_sale(f"A{i}", property_type="apartment") for i in range(3)]

        result = ranker.search(target, pool)

        assert result.type_mode == TYPE_MODE_GROUP
        assert result.count == 5

    def test_three_exact_matches_stay_exact(self, ranker, target, create_sale):
        pool = [create_sale(f"H{i}") for i in range(3)]
        pool += [create_sale(f"A{i}", property_type="apartment") for i in range(3)]

        result = ranker.search(target, pool)

        assert result.type_mode == TYPE_MODE_EXACT
        assert {r.sale.property_type for r in result.comparables} == {"house"}

    def test_synonyms_count_as_exact(self, ranker, target, create_sale):
        pool = [
            create_sale("H1", property_type="casa"),
            create_sale("H2", property_type="Residential"),
            create_sale("H3", property_type="house"),
        ]

        result = ranker.search(target, pool)

        assert result.type_mode == TYPE_MODE_EXACT
        assert result.count == 3

    def test_group_excludes_unrelated_types(self, ranker, target, create_sale):
        pool = [create_sale(f"C{i}", property_type="commercial") for i in range(5)]

        assert ranker.rank(target, pool) == []

    def test_commercial_group(self, ranker, target, create_sale):
        target.property_type = "local"
        pool = [
            create_sale("O1", property_type="oficina"),
            create_sale("W1", property_type="bodega"),
            create_sale("H1"),
        ]

        result = ranker.search(target, pool)

        assert result.type_mode == TYPE_MODE_GROUP
        assert sorted(r.sale.id for r in result.comparables) == ["O1", "W1"]


# =============================================================================
# Test: Scoring
# =============================================================================

class TestScoring:
    """Area, distance and recency score functions."""

    def test_identical_area(self):
        assert area_score(150, 150) == 1.0

    def test_half_area(self):
        assert area_score(75, 150) == 0.5

    def test_no_target_area_is_neutral(self):
        assert area_score(150, None) == 0.5

    @pytest.mark.parametrize("distance,score", [
        (0.0, 1.0), (1.0, 1.0), (1.01, 0.8), (5.0, 0.8),
        (9.9, 0.6), (15.0, 0.4), (15.1, 0.2), (25.0, 0.2),
    ])
    def test_distance_steps(self, distance, score):
        assert distance_score(distance) == score

    @pytest.mark.parametrize("months,score", [
        (0, 1.0), (6, 1.0), (7, 0.8), (12, 0.8),
        (18, 0.6), (24, 0.4), (25, 0.2),
    ])
    def test_recency_steps(self, months, score):
        assert recency_score(months) == score

    def test_weights(self):
        assert overall_score(1.0, 0.0, 0.0) == pytest.approx(0.5)
        assert overall_score(0.0, 1.0, 0.0) == pytest.approx(0.3)
        assert overall_score(0.0, 0.0, 1.0) == pytest.approx(0.2)


# =============================================================================
# Test: Tie-Breaks and Result Counts
# =============================================================================

class TestOrderingAndLimits:
    """Deterministic ordering and per-path result counts."""

    def test_equal_score_closer_first(self, ranker, target, create_sale):
        pool = [create_sale("FAR", km_north=0.6), create_sale("NEAR", km_north=0.3)]

        ranked = ranker.rank(target, pool)

        assert ranked[0].overall_similarity_score == ranked[1].overall_similarity_score
        assert [r.sale.id for r in ranked] == ["NEAR", "FAR"]

    def test_equal_score_and_distance_newer_first(self, ranker, target, create_sale):
        pool = [create_sale("OLDER", months_ago=5), create_sale("NEWER", months_ago=2)]

        ranked = ranker.rank(target, pool)

        assert [r.sale.id for r in ranked] == ["NEWER", "OLDER"]

    def test_deterministic(self, ranker, target, create_sale):
        pool = [
            create_sale(f"S{i}", km_north=0.1 * i, area=130 + i * 5, months_ago=i)
            for i in range(8)
        ]
        first = [r.sale.id for r in ranker.rank(target, pool)]
        second = [r.sale.id for r in ranker.rank(target, list(reversed(pool)))]

        assert first == second

    def test_location_path_returns_five(self, ranker, target, create_sale):
        pool = [create_sale(f"S{i}", km_north=0.1 * i) for i in range(8)]

        assert MAX_RESULTS_LOCATION == 5
        assert len(ranker.rank(target, pool)) == 5

    def test_portal_path_returns_three(self, ranker, target, create_sale):
        pool = [create_sale(f"S{i}", km_north=0.1 * i) for i in range(8)]

        assert MAX_RESULTS_PORTALS == 3
        assert len(ranker.rank(target, pool, MAX_RESULTS_PORTALS)) == 3

    def test_to_dict_flattens_sale(self, ranker, target, create_sale):
        data = ranker.rank(target, [create_sale("A")])[0].to_dict()

        assert data["id"] == "A"
        assert data["sale_date"] == "2024-05-01"
        assert data["months_old"] == 1
        assert "overall_similarity_score" in data
        assert "distance_km" in data


# =============================================================================
# Test: Geo Helpers
# =============================================================================

class TestGeo:
    """Haversine distance, bounding box and country detection."""

    def test_same_point_is_zero(self):
        assert haversine_km(TARGET_LAT, TARGET_LNG, TARGET_LAT, TARGET_LNG) == 0

    def test_one_degree_of_latitude(self):
        assert haversine_km(0, 0, 1, 0) == pytest.approx(111.195, abs=0.01)

    def test_symmetric(self):
        a = haversine_km(13.69, -89.21, 14.63, -90.51)
        b = haversine_km(14.63, -90.51, 13.69, -89.21)
        assert a == pytest.approx(b)

    def test_bounding_box_contains_center(self):
        box = bounding_box(TARGET_LAT, TARGET_LNG, 5)
        assert box.contains(TARGET_LAT, TARGET_LNG)

    def test_bounding_box_excludes_distant_point(self):
        box = bounding_box(TARGET_LAT, TARGET_LNG, 5)
        assert not box.contains(TARGET_LAT + 1, TARGET_LNG)

    def test_bounding_box_at_pole(self):
        box = bounding_box(90, 0, 10)
        assert box.min_lng == -180
        assert box.max_lng == 180

    @pytest.mark.parametrize("lat,lng,expected", [
        (13.6929, -89.2182, "SV"),
        (14.6349, -90.5069, "GT"),
        (14.0723, -87.1921, "HN"),
        (19.4326, -99.1332, "MX"),
        (40.4168, -3.7038, None),
    ])
    def test_country_from_coordinates(self, lat, lng, expected):
        assert country_from_coordinates(lat, lng) == expected


# =============================================================================
# Test: Helpers
# =============================================================================

class TestHelpers:
    """Date arithmetic and type normalisation."""

    @pytest.mark.parametrize("sale_date,expected", [
        (date(2024, 6, 1), 0),
        (date(2024, 5, 15), 0),
        (date(2024, 5, 1), 1),
        (date(2023, 6, 1), 12),
        (date(2022, 6, 2), 23),
        (date(2024, 9, 1), 0),
    ])
    def test_months_between(self, reference_date, sale_date, expected):
        assert months_between(sale_date, reference_date) == expected

    @pytest.mark.parametrize("raw,canonical", [
        ("Residential", "house"),
        ("casa", "house"),
        ("condo", "apartment"),
        ("Flat", "apartment"),
        ("terreno", "land"),
        ("bodega", "warehouse"),
    ])
    def test_normalise_canonical(self, raw, canonical):
        assert normalise_property_type(raw).canonical == canonical

    def test_house_group_includes_apartment(self):
        assert "apartment" in normalise_property_type("house").group

    def test_unknown_type_is_own_group(self):
        result = normalise_property_type("Castle")
        assert result.canonical == "castle"
        assert result.group == frozenset({"castle"})

    def test_none_type(self):
        assert normalise_property_type(None).canonical == ""

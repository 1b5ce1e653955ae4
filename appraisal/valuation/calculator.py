"""
Valuation Calculator

Two parallel valuation models are kept as separate, named strategies:

- QualityTierStrategy: location-quality tiers with a land-only branch and an
  improved-property branch (construction + land, scaled by parcel size).
- StratumStrategy: country base price x condition x economic factor, then a
  second, independent social-stratum adjustment.

Neither strategy raises. Missing or unknown attributes fall back to the
defaults documented in ``tables``.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from appraisal.countries import CountryProfile, get_country

from .land_size import land_size_factor
from .models import (
    AppliedFactor,
    PropertyAttributes,
    ValuationResult,
    ValuationStrategy,
)
from .tables import (
    CONDITION_DEFAULT,
    CONDITION_FACTORS,
    GENERIC_PRICE_PER_SQM,
    LAND_BASE_PRICE_PER_SQM,
    LAND_UNIT_RATE,
    LOCATION_DEFAULT,
    LOCATION_FACTORS,
    PRICE_PER_SQM,
    STRATUM_ADJUSTMENTS,
    STRATUM_DEFAULT,
    TOPOGRAPHY_DEFAULT,
    TOPOGRAPHY_FACTORS,
    VALUATION_PURPOSE_DEFAULT,
    VALUATION_PURPOSE_FACTORS,
    lookup,
)


class ValuationModel(ABC):
    """Base class for valuation strategies."""

    strategy: ValuationStrategy

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger(__name__)

    @abstractmethod
    def calculate(self, attrs: PropertyAttributes) -> ValuationResult:
        """Value a property."""

    def _result(
        self,
        country: CountryProfile,
        comparative_usd: float,
        estimated_usd: float,
        factors: List[AppliedFactor],
        construction_usd: float = 0.0,
        land_usd: float = 0.0,
    ) -> ValuationResult:
        """Wrap USD values with the country's currency conversion."""
        result = ValuationResult(
            strategy=self.strategy,
            comparative_value_usd=comparative_usd,
            estimated_value_usd=estimated_usd,
            estimated_value_local=estimated_usd * country.exchange_rate,
            currency=country.currency,
            exchange_rate=country.exchange_rate,
            applied_factors=factors,
            construction_value_usd=construction_usd,
            land_value_usd=land_usd,
        )
        self._logger.debug(
            "%s valuation: %.2f USD (%s %.2f)",
            self.strategy.value,
            result.estimated_value_usd,
            result.currency,
            result.estimated_value_local,
        )
        return result


class QualityTierStrategy(ValuationModel):
    """
    Location-quality tier model.

    Land:
        land_area * 80 * topography * purpose
    Improved property:
        construction = total_built * price/m² * location * condition
        land = land_area * 120 * location
        value = (construction + land) * land_size_factor(land_area)
    """

    strategy = ValuationStrategy.QUALITY_TIER

    def calculate(self, attrs: PropertyAttributes) -> ValuationResult:
        country = get_country(attrs.country_code)
        if attrs.is_land:
            return self._calculate_land(attrs, country)
        return self._calculate_improved(attrs, country)

    def _calculate_land(
        self,
        attrs: PropertyAttributes,
        country: CountryProfile,
    ) -> ValuationResult:
        topography = lookup(TOPOGRAPHY_FACTORS, attrs.topography, TOPOGRAPHY_DEFAULT)
        purpose = lookup(
            VALUATION_PURPOSE_FACTORS, attrs.valuation_purpose, VALUATION_PURPOSE_DEFAULT
        )

        value = attrs.land_area * LAND_BASE_PRICE_PER_SQM * topography * purpose

        factors = [
            AppliedFactor("land_base_price_per_sqm", LAND_BASE_PRICE_PER_SQM),
            AppliedFactor("topography", topography),
            AppliedFactor("valuation_purpose", purpose),
        ]
        return self._result(country, value, value, factors, land_usd=value)

    def _calculate_improved(
        self,
        attrs: PropertyAttributes,
        country: CountryProfile,
    ) -> ValuationResult:
        price_per_sqm = lookup(PRICE_PER_SQM, attrs.property_type, GENERIC_PRICE_PER_SQM)
        location = lookup(LOCATION_FACTORS, attrs.location_quality, LOCATION_DEFAULT)
        condition = lookup(CONDITION_FACTORS, attrs.general_condition, CONDITION_DEFAULT)
        size_factor = land_size_factor(attrs.land_area)

        construction_value = attrs.total_built_area * price_per_sqm * location * condition
        land_value = attrs.land_area * LAND_UNIT_RATE * location
        value = (construction_value + land_value) * size_factor

        factors = [
            AppliedFactor("price_per_sqm", price_per_sqm),
            AppliedFactor("location", location),
            AppliedFactor("condition", condition),
            AppliedFactor("land_unit_rate", LAND_UNIT_RATE),
            AppliedFactor("land_size", size_factor),
        ]
        return self._result(
            country,
            value,
            value,
            factors,
            construction_usd=construction_value,
            land_usd=land_value,
        )


class StratumStrategy(ValuationModel):
    """
    Social-stratum model.

    comparative = area * country base price * condition * economic factor
    final = comparative * (1 + stratum adjustment)

    Area is the land area for land, the total built area otherwise. Land
    is priced from the country base price in this model.
    """

    strategy = ValuationStrategy.STRATUM

    def calculate(self, attrs: PropertyAttributes) -> ValuationResult:
        country = get_country(attrs.country_code)

        area = attrs.land_area if attrs.is_land else attrs.total_built_area
        condition = lookup(CONDITION_FACTORS, attrs.general_condition, CONDITION_DEFAULT)
        adjustment = lookup(STRATUM_ADJUSTMENTS, attrs.stratum, STRATUM_DEFAULT)

        comparative = (
            area
            * country.base_price_per_sqm_usd
            * condition
            * country.economic_factor
        )
        final = comparative * (1 + adjustment)

        factors = [
            AppliedFactor("country_base_price_per_sqm", country.base_price_per_sqm_usd),
            AppliedFactor("condition", condition),
            AppliedFactor("economic_factor", country.economic_factor),
            AppliedFactor("stratum_adjustment", adjustment),
        ]
        return self._result(country, comparative, final, factors)


_STRATEGIES = {
    ValuationStrategy.QUALITY_TIER: QualityTierStrategy,
    ValuationStrategy.STRATUM: StratumStrategy,
}


def get_strategy(
    strategy: ValuationStrategy = ValuationStrategy.QUALITY_TIER,
    logger: Optional[logging.Logger] = None,
) -> ValuationModel:
    """Instantiate the model for a strategy."""
    return _STRATEGIES[strategy](logger=logger)


def calculate(
    attrs: PropertyAttributes,
    strategy: ValuationStrategy = ValuationStrategy.QUALITY_TIER,
    logger: Optional[logging.Logger] = None,
) -> ValuationResult:
    """Value a property with the chosen strategy."""
    return get_strategy(strategy, logger=logger).calculate(attrs)

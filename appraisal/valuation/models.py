"""
Data models for the valuation calculator.

Enumerations accept both the English names and the Spanish values posted by
the valuation form. Unrecognised values parse to None and are priced with
each table's documented default.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from appraisal.validation import sanitize_numeric_input
from utils.formatting import format_currency, format_percent


class _AliasedEnum(Enum):
    """Enum parsed from its value or any alias in ``_aliases()``."""

    @classmethod
    def _aliases(cls) -> Dict[str, str]:
        return {}

    @classmethod
    def from_string(cls, value: Any) -> Optional["_AliasedEnum"]:
        """Convert string to member, case-insensitive. None if unrecognised."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        normalised = value.lower().strip().replace("-", "_").replace(" ", "_")
        normalised = cls._aliases().get(normalised, normalised)
        for member in cls:
            if member.value == normalised:
                return member
        return None


class PropertyType(_AliasedEnum):
    """Property type. Land selects the land-only branch."""
    HOUSE = "house"
    APARTMENT = "apartment"
    LAND = "land"
    COMMERCIAL = "commercial"

    @classmethod
    def _aliases(cls) -> Dict[str, str]:
        return {
            "casa": "house",
            "departamento": "apartment",
            "terreno": "land",
            "comercial": "commercial",
        }


class LocationQuality(_AliasedEnum):
    """Ordinal location quality tier."""
    EXCELLENT = "excellent"
    GOOD = "good"
    MEDIUM = "medium"
    REGULAR = "regular"
    POOR = "poor"

    @classmethod
    def _aliases(cls) -> Dict[str, str]:
        return {
            "average": "medium",
            "excelente": "excellent",
            "buena": "good",
            "media": "medium",
            "mala": "poor",
        }


class GeneralCondition(_AliasedEnum):
    """Ordinal condition tier, from new to disposal."""
    NEW = "new"
    GOOD = "good"
    MEDIUM = "medium"
    REGULAR = "regular"
    SIMPLE_REPAIRS = "simple_repairs"
    MEDIUM_REPAIRS = "medium_repairs"
    MAJOR_REPAIRS = "major_repairs"
    SEVERE_DAMAGE = "severe_damage"
    DISPOSAL = "disposal"

    @classmethod
    def _aliases(cls) -> Dict[str, str]:
        return {
            "nuevo": "new",
            "bueno": "good",
            "medio": "medium",
            "reparaciones_sencillas": "simple_repairs",
            "reparaciones_medias": "medium_repairs",
            "reparaciones_importantes": "major_repairs",
            "reparaciones_mayores": "major_repairs",
            "danos_graves": "severe_damage",
            "en_desecho": "disposal",
        }


class Topography(_AliasedEnum):
    """Land topography."""
    FLAT = "flat"
    GENTLE_SLOPE = "gentle_slope"
    MODERATE_SLOPE = "moderate_slope"
    STEEP_SLOPE = "steep_slope"
    IRREGULAR = "irregular"

    @classmethod
    def _aliases(cls) -> Dict[str, str]:
        return {
            "plano": "flat",
            "terreno_plano": "flat",
            "pendiente_suave": "gentle_slope",
            "pendiente_moderada": "moderate_slope",
            "pendiente_pronunciada": "steep_slope",
        }


class ValuationPurpose(_AliasedEnum):
    """Intended use of a land parcel."""
    RESIDENTIAL = "residential"
    COMMERCIAL = "commercial"
    INDUSTRIAL = "industrial"
    AGRICULTURAL = "agricultural"

    @classmethod
    def _aliases(cls) -> Dict[str, str]:
        return {
            "residencial": "residential",
            "comercial": "commercial",
            "agricola": "agricultural",
        }


class Stratum(_AliasedEnum):
    """Nine-tier social stratum: three classes with three sub-tiers each."""
    ALTO_ALTO = "alto_alto"
    ALTO_MEDIO = "alto_medio"
    ALTO_BAJO = "alto_bajo"
    MEDIO_ALTO = "medio_alto"
    MEDIO_MEDIO = "medio_medio"
    MEDIO_BAJO = "medio_bajo"
    BAJO_ALTO = "bajo_alto"
    BAJO_MEDIO = "bajo_medio"
    BAJO_BAJO = "bajo_bajo"


class ValuationStrategy(Enum):
    """The two parallel valuation models."""
    QUALITY_TIER = "quality_tier"
    STRATUM = "stratum"

    @classmethod
    def from_string(cls, value: Any) -> "ValuationStrategy":
        """Parse a strategy name, defaulting to the quality-tier model."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalised = value.lower().strip().replace("-", "_")
            for member in cls:
                if member.value == normalised:
                    return member
        return cls.QUALITY_TIER


# Basement, then floors 1 to 4
BUILT_AREA_LEVELS = 5


@dataclass
class PropertyAttributes:
    """
    Attributes collected by the valuation form.

    Numeric fields are sanitized on construction (NaN, negative or
    unparsable -> 0) so arithmetic downstream never sees bad numbers.
    """
    property_type: Optional[PropertyType] = None
    built_areas: List[float] = field(default_factory=list)
    land_area: float = 0.0
    location_quality: Optional[LocationQuality] = None
    stratum: Optional[Stratum] = None
    general_condition: Optional[GeneralCondition] = None
    topography: Optional[Topography] = None
    valuation_purpose: Optional[ValuationPurpose] = None
    country_code: str = ""

    def __post_init__(self):
        """Sanitize numeric inputs."""
        self.built_areas = [
            sanitize_numeric_input(area) for area in self.built_areas[:BUILT_AREA_LEVELS]
        ]
        self.land_area = sanitize_numeric_input(self.land_area)

    @property
    def total_built_area(self) -> float:
        """Sum of all per-level built areas."""
        return sum(self.built_areas)

    @property
    def is_land(self) -> bool:
        return self.property_type == PropertyType.LAND

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PropertyAttributes":
        """
        Build attributes from a form/JSON payload.

        Accepts either ``built_areas`` or the individual level fields
        (``basement_area``, ``floor1_area`` .. ``floor4_area``).
        """
        built_areas = data.get("built_areas")
        if built_areas is None:
            built_areas = [
                data.get(key, 0)
                for key in (
                    "basement_area",
                    "floor1_area",
                    "floor2_area",
                    "floor3_area",
                    "floor4_area",
                )
            ]
        return cls(
            property_type=PropertyType.from_string(data.get("property_type")),
            built_areas=list(built_areas),
            land_area=data.get("land_area", 0),
            location_quality=LocationQuality.from_string(data.get("location_quality")),
            stratum=Stratum.from_string(data.get("stratum")),
            general_condition=GeneralCondition.from_string(data.get("general_condition")),
            topography=Topography.from_string(data.get("topography")),
            valuation_purpose=ValuationPurpose.from_string(data.get("valuation_purpose")),
            country_code=data.get("country_code") or "",
        )


@dataclass
class AppliedFactor:
    """One multiplier or rate used in a valuation, kept for audit."""
    name: str
    value: float

    def to_dict(self) -> dict:
        return {"name": self.name, "value": self.value}


@dataclass
class ValuationResult:
    """
    Output of a valuation strategy.

    ``comparative_value_usd`` is the value before any stratum adjustment;
    for the quality-tier strategy it equals ``estimated_value_usd``.
    """
    strategy: ValuationStrategy
    comparative_value_usd: float
    estimated_value_usd: float
    estimated_value_local: float
    currency: str
    exchange_rate: float
    applied_factors: List[AppliedFactor] = field(default_factory=list)

    # Breakdown (improved-property branch of the quality-tier strategy)
    construction_value_usd: float = 0.0
    land_value_usd: float = 0.0

    @property
    def adjustment(self) -> float:
        """Relative change from comparative to estimated value."""
        if self.comparative_value_usd <= 0:
            return 0.0
        return self.estimated_value_usd / self.comparative_value_usd - 1

    def factor(self, name: str) -> Optional[float]:
        """Look up an applied factor by name."""
        for applied in self.applied_factors:
            if applied.name == name:
                return applied.value
        return None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output."""
        return {
            "strategy": self.strategy.value,
            "comparative_value_usd": self.comparative_value_usd,
            "estimated_value_usd": self.estimated_value_usd,
            "estimated_value_local": self.estimated_value_local,
            "estimated_value_local_formatted": format_currency(
                round(self.estimated_value_local), self.currency
            ),
            "currency": self.currency,
            "exchange_rate": self.exchange_rate,
            "adjustment": format_percent(self.adjustment),
            "construction_value_usd": self.construction_value_usd,
            "land_value_usd": self.land_value_usd,
            "applied_factors": [f.to_dict() for f in self.applied_factors],
        }

"""
Data models for the Comparable Ranker.

Defines prior-sale records, search targets and ranked results.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from appraisal.validation import validate_area

SOURCE_DATABASE = "database"
SOURCE_PORTAL = "portal_scraping"

TYPE_MODE_EXACT = "exact"
TYPE_MODE_GROUP = "group"


@dataclass
class ComparableSale:
    """
    A prior sale used as a comparable.

    Records come from the sales history table or, with lower confidence,
    from listing portals.
    """
    id: str
    address: str
    property_type: str
    total_area: float
    price_usd: float
    price_per_sqm_usd: float
    latitude: float
    longitude: float
    sale_date: date
    country: str = ""
    stratum: Optional[str] = None

    # Provenance
    source: str = SOURCE_DATABASE
    source_url: str = ""
    confidence_score: float = 1.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ComparableSale":
        """Build a sale from a sales history row."""
        sale_date = data.get("sale_date")
        if isinstance(sale_date, str):
            sale_date = datetime.fromisoformat(sale_date[:10]).date()
        elif isinstance(sale_date, datetime):
            sale_date = sale_date.date()
        if not isinstance(sale_date, date):
            raise ValueError(f"Sale {data.get('id')} has no sale_date")

        total_area = float(data.get("total_area") or 0)
        price_usd = float(data.get("price_usd") or 0)
        price_per_sqm = data.get("price_per_sqm_usd")
        if price_per_sqm is None:
            price_per_sqm = price_usd / total_area if total_area > 0 else 0.0

        return cls(
            id=str(data["id"]),
            address=data.get("address", ""),
            property_type=data.get("property_type", ""),
            total_area=total_area,
            price_usd=price_usd,
            price_per_sqm_usd=float(price_per_sqm),
            latitude=float(data["latitude"]),
            longitude=float(data["longitude"]),
            sale_date=sale_date,
            country=data.get("country") or "",
            stratum=data.get("stratum") or data.get("estrato_social"),
            source=data.get("source", SOURCE_DATABASE),
            source_url=data.get("source_url", ""),
            confidence_score=float(data.get("confidence_score", 1.0)),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output."""
        return {
            "id": self.id,
            "address": self.address,
            "property_type": self.property_type,
            "total_area": self.total_area,
            "price_usd": self.price_usd,
            "price_per_sqm_usd": self.price_per_sqm_usd,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "sale_date": self.sale_date.isoformat(),
            "country": self.country,
            "stratum": self.stratum,
            "source": self.source,
            "source_url": self.source_url,
            "confidence_score": self.confidence_score,
        }


@dataclass
class SearchTarget:
    """The subject property we are finding comparables for."""
    latitude: float
    longitude: float
    property_type: str
    area: Optional[float] = None
    country: Optional[str] = None

    @property
    def has_area(self) -> bool:
        """True if the area is usable for the area filter and score."""
        return self.area is not None and validate_area(self.area)

    def to_dict(self) -> dict:
        return {
            "lat": self.latitude,
            "lng": self.longitude,
            "property_type": self.property_type,
            "area": self.area,
            "country": self.country,
        }


@dataclass
class RankedComparable:
    """A comparable sale with its distance, age and similarity scores."""
    sale: ComparableSale
    distance_km: float
    months_old: int
    area_similarity_score: float
    distance_score: float
    recency_score: float
    overall_similarity_score: float

    def to_dict(self) -> dict:
        """Flatten the sale and its scores for JSON output."""
        data = self.sale.to_dict()
        data.update({
            "distance_km": round(self.distance_km, 3),
            "months_old": self.months_old,
            "area_similarity_score": self.area_similarity_score,
            "distance_score": self.distance_score,
            "recency_score": self.recency_score,
            "overall_similarity_score": self.overall_similarity_score,
        })
        return data


@dataclass
class RankingResult:
    """
    Result of a ranking run.

    Carries the ranked comparables and metadata about how they were found.
    """
    comparables: List[RankedComparable] = field(default_factory=list)
    radius_used_km: float = 0.0
    type_mode: str = TYPE_MODE_EXACT
    pool_size: int = 0
    eligible_count: int = 0  # After country/date/area filters
    within_radius_count: int = 0

    @property
    def count(self) -> int:
        return len(self.comparables)

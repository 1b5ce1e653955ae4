"""
Country profiles for valuation and comparable search.

Each profile carries the base construction price per m² (USD), the economic
adjustment factor applied by the stratum strategy, and the fixed exchange
rate used to convert USD results into local currency.

The figures are placeholder data written for this project, not published
rates. Replace them with sourced values before relying on local-currency
or stratum results.
"""

from dataclasses import dataclass
from typing import Dict, Optional


@dataclass(frozen=True)
class CountryProfile:
    """Static economic data for one country."""
    code: str
    name: str
    currency: str
    base_price_per_sqm_usd: float
    economic_factor: float
    exchange_rate: float  # Local currency units per USD


# =============================================================================
# Country Table
# =============================================================================

COUNTRIES: Dict[str, CountryProfile] = {
    "SV": CountryProfile("SV", "El Salvador", "USD", 750.0, 1.00, 1.0),
    "GT": CountryProfile("GT", "Guatemala", "GTQ", 800.0, 1.05, 7.75),
    "HN": CountryProfile("HN", "Honduras", "HNL", 650.0, 0.92, 24.70),
    "NI": CountryProfile("NI", "Nicaragua", "NIO", 550.0, 0.85, 36.60),
    "CR": CountryProfile("CR", "Costa Rica", "CRC", 1200.0, 1.15, 520.0),
    "PA": CountryProfile("PA", "Panama", "USD", 1400.0, 1.20, 1.0),
    "MX": CountryProfile("MX", "Mexico", "MXN", 1100.0, 1.18, 17.20),
}

# Used when the country is unset or unrecognised
DEFAULT_COUNTRY = CountryProfile("XX", "Default", "USD", 800.0, 1.00, 1.0)

_BY_NAME = {profile.name.lower(): profile for profile in COUNTRIES.values()}
_BY_NAME["mexico"] = COUNTRIES["MX"]
_BY_NAME["méxico"] = COUNTRIES["MX"]
_BY_NAME["panamá"] = COUNTRIES["PA"]


def find_country(value: Optional[str]) -> Optional[CountryProfile]:
    """Resolve an ISO code or country name, case-insensitive. None if unknown."""
    if not value or not isinstance(value, str):
        return None
    cleaned = value.strip()
    if cleaned.upper() in COUNTRIES:
        return COUNTRIES[cleaned.upper()]
    return _BY_NAME.get(cleaned.lower())


def get_country(value: Optional[str]) -> CountryProfile:
    """Resolve a country, falling back to the default USD profile."""
    return find_country(value) or DEFAULT_COUNTRY


def same_country(a: Optional[str], b: Optional[str]) -> bool:
    """Compare two country values that may be codes or names."""
    profile_a = find_country(a)
    profile_b = find_country(b)
    if profile_a and profile_b:
        return profile_a.code == profile_b.code
    if not a or not b:
        return False
    return a.strip().lower() == b.strip().lower()

"""
Scraper module for fetching comparable listings from real estate portals.

Available scrapers:
- PortalScraper: Regional listing portals (El Salvador, Guatemala, Honduras, Mexico)
"""

from .base import BaseScraper
from .portals import (
    PortalScraper,
    PortalListing,
    PortalListingParser,
)

__all__ = [
    "BaseScraper",
    "PortalScraper",
    "PortalListing",
    "PortalListingParser",
]

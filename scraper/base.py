"""
Base scraper interface.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from appraisal.comparables import ComparableSale, SearchTarget


class BaseScraper(ABC):
    """Abstract base class for listing portal scrapers."""

    @abstractmethod
    def portals_for(self, country: Optional[str]) -> List[str]:
        """
        Portal URLs to search for a country.

        Args:
            country: ISO country code, or None if unknown.

        Returns:
            List of portal base URLs.
        """
        pass

    @abstractmethod
    def fetch_portal(self, url: str, target: SearchTarget) -> List[ComparableSale]:
        """
        Search one portal for listings comparable to the target.

        Args:
            url: Portal base URL.
            target: The property being compared.

        Returns:
            List of ComparableSale objects found on the portal.

        Raises:
            requests.RequestException: On network errors.
        """
        pass

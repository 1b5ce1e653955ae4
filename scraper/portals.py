"""
Real estate portal scraper.

Searches regional listing portals for properties comparable to a target.
Only price and area text are extracted; portal listings carry no sale date
or coordinates, so they are stamped with the search date and location and
a lower confidence score than sales history records.

Best effort: a portal that errors or times out contributes nothing.
"""

import hashlib
import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

import requests

from appraisal.comparables import ComparableSale, SearchTarget, SOURCE_PORTAL

from .base import BaseScraper


# =============================================================================
# Configuration
# =============================================================================

USER_AGENT = "Mozilla/5.0 (compatible; PropertyBot/1.0)"
ACCEPT_HEADER = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"
REQUEST_TIMEOUT_SECONDS = 10

MAX_LISTINGS_PER_PORTAL = 3
MIN_PRICE_USD = 10000
MIN_AREA_SQM = 20
PORTAL_CONFIDENCE = 0.7

PORTALS_BY_COUNTRY = {
    "SV": [
        "https://www.encuentra24.com/el-salvador-es/bienes-raices-venta",
        "https://www.olx.com.sv/inmuebles",
        "https://www.mercadolibre.com.sv/inmuebles",
        "https://www.propiedades.com.sv",
        "https://www.inmonet.com.sv",
    ],
    "GT": [
        "https://www.encuentra24.com/guatemala-es/bienes-raices-venta",
        "https://www.olx.com.gt/inmuebles",
        "https://www.mercadolibre.com.gt/inmuebles",
    ],
    "HN": [
        "https://www.encuentra24.com/honduras-es/bienes-raices-venta",
        "https://www.olx.com.hn/inmuebles",
    ],
    "MX": [
        "https://www.inmuebles24.com/mexico",
        "https://www.propiedades.com",
        "https://www.metroscubicos.com",
        "https://www.mercadolibre.com.mx/inmuebles",
    ],
}

DEFAULT_PORTALS = [
    "https://www.encuentra24.com",
    "https://www.olx.com",
    "https://www.mercadolibre.com",
]


# =============================================================================
# Parser
# =============================================================================

@dataclass
class PortalListing:
    """Raw price/area pair extracted from a portal page."""
    source_url: str
    price_usd: int
    total_area: int


class PortalListingParser:
    """
    Extracts price and area pairs from portal HTML.

    Prices and areas are paired in page order; pairs below the minimum
    price or area are discarded.
    """

    PRICE_PATTERN = re.compile(r"\$[\d,]+")
    AREA_PATTERN = re.compile(r"(\d+)\s*m[²2]")

    @classmethod
    def parse(cls, html: str, source_url: str) -> List[PortalListing]:
        """
        Parse listings from portal HTML.

        Args:
            html: Raw HTML of a search results page.
            source_url: Portal the page came from.

        Returns:
            Up to MAX_LISTINGS_PER_PORTAL listings.
        """
        prices = cls.PRICE_PATTERN.findall(html)
        areas = cls.AREA_PATTERN.findall(html)

        listings = []
        for price_text, area_text in zip(prices, areas):
            if len(listings) >= MAX_LISTINGS_PER_PORTAL:
                break
            digits = price_text.replace("$", "").replace(",", "")
            if not digits:
                continue
            price = int(digits)
            area = int(area_text)
            if price > MIN_PRICE_USD and area > MIN_AREA_SQM:
                listings.append(PortalListing(source_url, price, area))

        return listings


# =============================================================================
# Scraper
# =============================================================================

class PortalScraper(BaseScraper):
    """
    Scraper for regional real estate portals.

    Each call is a single GET with its own timeout; no retries. Portals are
    fetched from worker threads, so each fetch opens its own session unless
    one is injected.
    """

    def __init__(
        self,
        timeout_seconds: float = REQUEST_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
        reference_date: date = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._timeout = timeout_seconds
        self._session = session
        if session is not None:
            self._prepare(session)
        self._reference_date = reference_date
        self._logger = logger or logging.getLogger(__name__)

    @staticmethod
    def _prepare(session: requests.Session) -> requests.Session:
        session.headers.update({
            "User-Agent": USER_AGENT,
            "Accept": ACCEPT_HEADER,
        })
        return session

    def portals_for(self, country: Optional[str]) -> List[str]:
        if country and country.upper() in PORTALS_BY_COUNTRY:
            return list(PORTALS_BY_COUNTRY[country.upper()])
        return list(DEFAULT_PORTALS)

    def fetch_portal(self, url: str, target: SearchTarget) -> List[ComparableSale]:
        """
        Search one portal.

        Raises:
            requests.RequestException: On network errors or non-2xx status.
        """
        self._logger.debug("Scraping portal %s", url)

        params = {
            "q": target.property_type,
            "location": f"{target.latitude},{target.longitude}",
            "area": target.area or "",
        }
        if self._session is not None:
            response = self._session.get(url, params=params, timeout=self._timeout)
        else:
            with self._prepare(requests.Session()) as session:
                response = session.get(url, params=params, timeout=self._timeout)
        response.raise_for_status()

        listings = PortalListingParser.parse(response.text, url)
        self._logger.info("Found %d listings on %s", len(listings), url)

        return [self._to_sale(listing, target) for listing in listings]

    def _to_sale(self, listing: PortalListing, target: SearchTarget) -> ComparableSale:
        """Stamp a portal listing with the search location and date."""
        listing_id = hashlib.sha256(
            f"{listing.source_url}|{listing.price_usd}|{listing.total_area}".encode()
        ).hexdigest()[:12]

        return ComparableSale(
            id=f"PORTAL-{listing_id}",
            address=f"Listing found via {listing.source_url}",
            property_type=target.property_type,
            total_area=float(listing.total_area),
            price_usd=float(listing.price_usd),
            price_per_sqm_usd=round(listing.price_usd / listing.total_area, 2),
            latitude=target.latitude,
            longitude=target.longitude,
            sale_date=self._reference_date or date.today(),
            country=target.country or "",
            source=SOURCE_PORTAL,
            source_url=listing.source_url,
            confidence_score=PORTAL_CONFIDENCE,
        )

    def close(self) -> None:
        """Close the injected session, if any."""
        if self._session is not None:
            self._session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

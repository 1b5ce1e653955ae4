"""
Comparable Search Service

Fetches candidate sales from every configured source concurrently, ranks
the merged pool, and builds the response returned to the frontend:

    {"data": [...], "metadata": {"strategy_used", "radius_used_km",
     "type_mode", "search_parameters", "totals", ...}}

Sources run in a bounded fan-out with a per-source timeout. A source that
fails or times out contributes zero candidates; it never aborts the search.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import List, Optional

from appraisal.countries import find_country
from appraisal.validation import validate_coordinates
from utils.config import Config

from .comparables import (
    ComparableRanker,
    ComparableSale,
    RankingResult,
    SearchTarget,
    MAX_RESULTS_LOCATION,
    MAX_RESULTS_PORTALS,
    SOURCE_DATABASE,
    SOURCE_PORTAL,
    country_from_coordinates,
)
from .sales_history import SalesHistoryService


# =============================================================================
# Configuration Constants
# =============================================================================

STRATEGY_LOCATION = "progressive_radius"
STRATEGY_PORTALS = "progressive_radius_with_portals"
STRATEGY_INVALID = "invalid_target"

STATUS_OK = "ok"
STATUS_TIMEOUT = "timeout"
STATUS_ERROR = "error"


# =============================================================================
# Sources
# =============================================================================

class ComparableSource(ABC):
    """A place candidate sales can be fetched from."""

    name: str
    kind: str
    timeout_seconds: Optional[float] = None

    @abstractmethod
    async def fetch(self, target: SearchTarget) -> List[ComparableSale]:
        """Fetch candidate sales for a target."""


class DatabaseSource(ComparableSource):
    """Sales history records."""

    kind = SOURCE_DATABASE

    def __init__(self, service: SalesHistoryService, timeout_seconds: Optional[float] = None):
        self.name = "sales_history"
        self._service = service
        self.timeout_seconds = timeout_seconds

    async def fetch(self, target: SearchTarget) -> List[ComparableSale]:
        return self._service.fetch_comparables(target)


class PortalSource(ComparableSource):
    """One listing portal, scraped on a worker thread."""

    kind = SOURCE_PORTAL

    def __init__(self, scraper, url: str, timeout_seconds: Optional[float] = None):
        self.name = url
        self._scraper = scraper
        self._url = url
        self.timeout_seconds = timeout_seconds

    async def fetch(self, target: SearchTarget) -> List[ComparableSale]:
        return await asyncio.to_thread(self._scraper.fetch_portal, self._url, target)


@dataclass
class SourceOutcome:
    """What one source contributed to a search."""
    name: str
    kind: str
    status: str
    count: int = 0
    error: str = ""

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "kind": self.kind,
            "status": self.status,
            "count": self.count,
            "error": self.error,
        }


@dataclass
class FanOutResult:
    """Merged candidates plus per-source outcomes."""
    candidates: List[ComparableSale] = field(default_factory=list)
    outcomes: List[SourceOutcome] = field(default_factory=list)

    @property
    def partial(self) -> bool:
        """True if any source failed or timed out."""
        return any(o.status != STATUS_OK for o in self.outcomes)

    def count_for(self, kind: str) -> int:
        return sum(o.count for o in self.outcomes if o.kind == kind)


async def gather_candidates(
    sources: List[ComparableSource],
    target: SearchTarget,
    timeout_seconds: float,
    max_concurrency: int,
    logger: Optional[logging.Logger] = None,
) -> FanOutResult:
    """
    Fetch from all sources concurrently.

    Args:
        sources: Sources to query
        target: The property being compared
        timeout_seconds: Default per-source timeout
        max_concurrency: Maximum sources in flight at once
        logger: Logger for source failures

    Returns:
        FanOutResult with candidates in source order
    """
    log = logger or logging.getLogger(__name__)
    semaphore = asyncio.Semaphore(max(1, max_concurrency))

    async def run(source: ComparableSource):
        timeout = source.timeout_seconds or timeout_seconds
        async with semaphore:
            try:
                sales = await asyncio.wait_for(source.fetch(target), timeout=timeout)
            except asyncio.TimeoutError:
                log.warning("Source %s timed out after %.1fs", source.name, timeout)
                return [], SourceOutcome(source.name, source.kind, STATUS_TIMEOUT)
            except Exception as e:
                log.warning("Source %s failed: %s", source.name, e)
                return [], SourceOutcome(
                    source.name, source.kind, STATUS_ERROR, error=str(e)
                )
        return sales, SourceOutcome(source.name, source.kind, STATUS_OK, count=len(sales))

    results = await asyncio.gather(*(run(source) for source in sources))

    merged = FanOutResult()
    for sales, outcome in results:
        merged.candidates.extend(sales)
        merged.outcomes.append(outcome)
    return merged


# =============================================================================
# Service
# =============================================================================

class ComparableSearchService:
    """
    Runs comparable searches for the two frontend paths.

    - find_by_location: sales history only, top 5
    - search_with_portals: sales history plus portals, top 3
    """

    def __init__(
        self,
        sales_history: SalesHistoryService,
        scraper=None,
        config: Optional[Config] = None,
        reference_date: date = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize search service.

        Args:
            sales_history: Sales history store
            scraper: Portal scraper (None disables portal search)
            config: Timeouts and concurrency limits
            reference_date: Fixed reference date for sale age (default: today,
                read on every search)
            logger: Logger for search diagnostics
        """
        self._sales_history = sales_history
        self._scraper = scraper
        self._config = config or Config()
        self._logger = logger or logging.getLogger(__name__)
        self._reference_date = reference_date

    async def find_by_location(self, target: SearchTarget) -> dict:
        """Search sales history around the target; top 5."""
        sources = [self._database_source()]
        return await self._search(target, sources, STRATEGY_LOCATION, MAX_RESULTS_LOCATION)

    async def search_with_portals(self, target: SearchTarget) -> dict:
        """Search sales history and listing portals; top 3."""
        sources: List[ComparableSource] = [self._database_source()]
        if self._scraper is not None and self._config.portal_search_enabled:
            country = self.detect_country(target)
            sources.extend(
                PortalSource(self._scraper, url, self._config.portal_timeout_seconds)
                for url in self._scraper.portals_for(country)
            )
        return await self._search(target, sources, STRATEGY_PORTALS, MAX_RESULTS_PORTALS)

    @staticmethod
    def detect_country(target: SearchTarget) -> Optional[str]:
        """Country code from the request, else from the coordinates."""
        profile = find_country(target.country)
        if profile:
            return profile.code
        return country_from_coordinates(target.latitude, target.longitude)

    def _database_source(self) -> DatabaseSource:
        return DatabaseSource(self._sales_history, self._config.source_timeout_seconds)

    async def _search(
        self,
        target: SearchTarget,
        sources: List[ComparableSource],
        strategy: str,
        max_results: int,
    ) -> dict:
        if not validate_coordinates(target.latitude, target.longitude):
            self._logger.warning(
                "Invalid search coordinates: %s, %s", target.latitude, target.longitude
            )
            return self._response(
                STRATEGY_INVALID, target, FanOutResult(), RankingResult()
            )

        fan_out = await gather_candidates(
            sources,
            target,
            timeout_seconds=self._config.source_timeout_seconds,
            max_concurrency=self._config.max_concurrent_sources,
            logger=self._logger,
        )
        ranker = ComparableRanker(
            reference_date=self._reference_date or date.today(), logger=self._logger
        )
        ranking = ranker.search(target, fan_out.candidates, max_results)
        return self._response(strategy, target, fan_out, ranking)

    def _response(
        self,
        strategy: str,
        target: SearchTarget,
        fan_out: FanOutResult,
        ranking: RankingResult,
    ) -> dict:
        return {
            "data": [r.to_dict() for r in ranking.comparables],
            "metadata": {
                "strategy_used": strategy,
                "radius_used_km": ranking.radius_used_km,
                "type_mode": ranking.type_mode,
                "country_detected": self.detect_country(target),
                "search_parameters": target.to_dict(),
                "totals": {
                    "database": fan_out.count_for(SOURCE_DATABASE),
                    "portals": fan_out.count_for(SOURCE_PORTAL),
                    "pool": ranking.pool_size,
                    "eligible": ranking.eligible_count,
                    "within_radius": ranking.within_radius_count,
                    "returned": ranking.count,
                },
                "sources": [o.to_dict() for o in fan_out.outcomes],
                "partial": fan_out.partial,
                "search_timestamp": datetime.now(timezone.utc).isoformat(),
            },
        }

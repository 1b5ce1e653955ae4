"""
Sales History Service

Provides prior sales for comparable search. Records are loaded from a JSON
export of the sales history table (one object per sale) and held in memory;
ranking always works on the fetched pool, never on the store directly.
"""

import json
import logging
from pathlib import Path
from typing import Any, Iterable, List, Optional

from appraisal.countries import same_country

from .comparables import ComparableSale, SearchTarget


class SalesHistoryService:
    """
    In-memory sales history.

    Malformed rows are skipped with a warning; a missing file yields an
    empty history so searches degrade to zero comparables.
    """

    def __init__(
        self,
        sales: Optional[Iterable[ComparableSale]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._sales: List[ComparableSale] = list(sales or [])
        self._logger = logger or logging.getLogger(__name__)

    @classmethod
    def from_json_file(
        cls,
        path: Optional[str],
        logger: Optional[logging.Logger] = None,
    ) -> "SalesHistoryService":
        """
        Load sales from a JSON file.

        Args:
            path: File containing a list of sale objects (or ``{"data": [...]}``)
            logger: Logger for load diagnostics

        Returns:
            SalesHistoryService (empty if the file is missing or unreadable)
        """
        service = cls(logger=logger)
        if not path:
            return service

        file_path = Path(path)
        if not file_path.exists():
            service._logger.warning("Sales history file not found: %s", file_path)
            return service

        try:
            payload = json.loads(file_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            service._logger.error("Could not read sales history %s: %s", file_path, e)
            return service

        rows = payload.get("data", []) if isinstance(payload, dict) else payload
        service.load_rows(rows)
        return service

    def load_rows(self, rows: Iterable[Any]) -> int:
        """
        Parse and add sale rows.

        Returns:
            Number of rows accepted
        """
        accepted = 0
        for index, row in enumerate(rows):
            try:
                self._sales.append(ComparableSale.from_dict(row))
                accepted += 1
            except (KeyError, TypeError, ValueError) as e:
                self._logger.warning("Skipping malformed sale row %d: %s", index, e)
        self._logger.info("Loaded %d sales history records", accepted)
        return accepted

    def add(self, sale: ComparableSale) -> None:
        self._sales.append(sale)

    def __len__(self) -> int:
        return len(self._sales)

    def fetch_comparables(self, target: SearchTarget) -> List[ComparableSale]:
        """
        Fetch candidate sales for a target.

        Only the country is narrowed here; all other filtering belongs to
        the ranker.
        """
        if not target.country:
            return list(self._sales)
        return [
            sale for sale in self._sales
            if same_country(sale.country, target.country)
        ]

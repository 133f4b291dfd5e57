"""Reconciliation domain service."""

import hashlib
import logging
from datetime import date
from typing import Any, Callable, Optional

from dayrec.database.base import Database
from dayrec.database.snapshot import Snapshot, take_snapshot
from dayrec.domain import coverage
from dayrec.domain.entities import MonthCoverage, MonthSummary, ReconciliationRow
from dayrec.domain.matching import DEFAULT_SETTLEMENT_DAYS, reconcile
from dayrec.utils.date_parser import month_bounds

logger = logging.getLogger(__name__)


def snapshot_fingerprint(snapshot: Snapshot) -> str:
    """SHA-256 over the reconciliation inputs of a snapshot."""
    digest = hashlib.sha256()
    for collection in (snapshot.deposits, snapshot.transactions, snapshot.import_log):
        digest.update(repr(collection).encode("utf-8"))
    return digest.hexdigest()


class ReconciliationService:
    """Service for month reconciliation, summaries and coverage.

    Every call reads a fresh snapshot from the database. Results are cached by
    snapshot fingerprint, so any mutation of the underlying data is picked up
    on the next call.
    """

    def __init__(self, db: Database, settlement_days: int = DEFAULT_SETTLEMENT_DAYS):
        """Initialize reconciliation service.

        Args:
            db: Database instance
            settlement_days: Maximum days a bank credit may lag its deposit
        """
        self.db = db
        self.settlement_days = settlement_days
        self._cache: dict[tuple[Any, ...], Any] = {}

    def _cached(self, key: tuple[Any, ...], compute: Callable[[Snapshot], Any]) -> Any:
        snapshot = take_snapshot(self.db)
        cache_key = (snapshot_fingerprint(snapshot), *key)
        if cache_key not in self._cache:
            self._cache[cache_key] = compute(snapshot)
        else:
            logger.debug("Reusing cached result for %s", key)
        return self._cache[cache_key]

    def clear_cache(self) -> None:
        self._cache.clear()

    def reconcile_month(self, year: int, month: int) -> list[ReconciliationRow]:
        """Reconcile one calendar month.

        Returns:
            Reconciliation rows sorted descending by date
        """
        start, end = month_bounds(year, month)
        return self._cached(
            ("reconcile", year, month, self.settlement_days),
            lambda s: reconcile(
                s.deposits, s.transactions, start, end, settlement_days=self.settlement_days
            ),
        )

    def summarize_month(self, year: int, month: int) -> MonthSummary:
        """Totals, counts and status of one month."""
        return self._cached(
            ("summary", year, month, self.settlement_days),
            lambda s: coverage.summarize_month(
                s.deposits, s.transactions, year, month, self.settlement_days
            ),
        )

    def summarize_year(self, year: int) -> list[MonthSummary]:
        """Summaries for every month of a year."""
        return self._cached(
            ("summaries", year, self.settlement_days),
            lambda s: coverage.summarize(s.deposits, s.transactions, year, self.settlement_days),
        )

    def month_coverage(
        self, year: int, month: int, today: Optional[date] = None
    ) -> MonthCoverage:
        """Day-sheet coverage of one month."""
        today = today or date.today()
        return self._cached(
            ("coverage", year, month, today),
            lambda s: coverage.month_coverage(
                year, month, coverage.covered_dates(s.deposits, s.import_log), today
            ),
        )

    def year_coverage(self, year: int, today: Optional[date] = None) -> list[MonthCoverage]:
        """Day-sheet coverage of every month of a year."""
        today = today or date.today()
        return self._cached(
            ("year_coverage", year, today),
            lambda s: coverage.year_coverage(
                year, coverage.covered_dates(s.deposits, s.import_log), today
            ),
        )

"""Month and year roll-ups of reconciliation results and day-sheet coverage."""

from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from dayrec.domain.entities import (
    ZERO,
    BankTransaction,
    CoverageStatus,
    DayCoverage,
    DayState,
    DepositRecord,
    ImportLogEntry,
    MonthCoverage,
    MonthSummary,
    RowFlag,
)
from dayrec.domain.import_log import imported_day_sheet_dates
from dayrec.domain.matching import DEFAULT_SETTLEMENT_DAYS, reconcile
from dayrec.utils.date_parser import month_bounds

# Months whose totals differ by less than this are considered balanced
BALANCED_THRESHOLD = Decimal("1.00")


def month_status(deposit_count: int, transaction_count: int, difference: Decimal) -> CoverageStatus:
    """Tri-state health of a month from its entry counts and difference."""
    if deposit_count == 0 and transaction_count == 0:
        return CoverageStatus.RED
    if abs(difference) < BALANCED_THRESHOLD:
        return CoverageStatus.GREEN
    return CoverageStatus.ORANGE


def summarize_month(
    deposits: Sequence[DepositRecord],
    transactions: Sequence[BankTransaction],
    year: int,
    month: int,
    settlement_days: int = DEFAULT_SETTLEMENT_DAYS,
) -> MonthSummary:
    """Summarize one month.

    Bank totals only count deposit-side (positive) transactions, the same
    population the matching engine draws candidates from.
    """
    start, end = month_bounds(year, month)
    month_deposits = [d for d in deposits if start <= d.date <= end]
    month_credits = [t for t in transactions if t.amount > 0 and start <= t.date <= end]

    deposit_total = sum((d.total for d in month_deposits), ZERO)
    bank_total = sum((t.amount for t in month_credits), ZERO)
    difference = bank_total - deposit_total

    rows = reconcile(deposits, transactions, start, end, settlement_days=settlement_days)
    orphan_count = sum(1 for row in rows if RowFlag.ORPHAN in row.flags)
    matched_count = sum(1 for row in rows if row.matches)
    unmatched_count = len(rows) - matched_count - orphan_count

    return MonthSummary(
        year=year,
        month=month,
        deposit_total=deposit_total,
        bank_total=bank_total,
        difference=difference,
        status=month_status(len(month_deposits), len(month_credits), difference),
        deposit_count=len(month_deposits),
        transaction_count=len(month_credits),
        matched_count=matched_count,
        unmatched_count=unmatched_count,
        orphan_count=orphan_count,
    )


def summarize(
    deposits: Sequence[DepositRecord],
    transactions: Sequence[BankTransaction],
    year: int,
    settlement_days: int = DEFAULT_SETTLEMENT_DAYS,
) -> list[MonthSummary]:
    """Summaries for January through December of a year."""
    return [
        summarize_month(deposits, transactions, year, month, settlement_days)
        for month in range(1, 13)
    ]


def covered_dates(
    deposits: Iterable[DepositRecord], import_log: Iterable[ImportLogEntry]
) -> set[date]:
    """Dates referenced by a deposit record or a day-sheet import."""
    dates = {d.date for d in deposits}
    dates.update(imported_day_sheet_dates(import_log))
    return dates


def day_state(day: date, covered: set[date], today: date) -> DayState:
    if day > today:
        return DayState.FUTURE
    if day.weekday() >= 5:
        return DayState.WEEKEND
    return DayState.COVERED if day in covered else DayState.MISSING


def month_coverage(
    year: int, month: int, covered: set[date], today: Optional[date] = None
) -> MonthCoverage:
    """Day-by-day coverage of one month.

    Only weekdays up to and including today take part in gap detection.
    """
    today = today or date.today()
    start, end = month_bounds(year, month)

    days = []
    current = start
    while current <= end:
        days.append(DayCoverage(date=current, state=day_state(current, covered, today)))
        current += timedelta(days=1)

    covered_count = sum(1 for d in days if d.state == DayState.COVERED)
    missing_count = sum(1 for d in days if d.state == DayState.MISSING)
    if covered_count == 0:
        status = CoverageStatus.RED
    elif missing_count == 0:
        status = CoverageStatus.GREEN
    else:
        status = CoverageStatus.ORANGE

    return MonthCoverage(year=year, month=month, status=status, days=tuple(days))


def year_coverage(
    year: int, covered: set[date], today: Optional[date] = None
) -> list[MonthCoverage]:
    """Coverage of every month of a year."""
    today = today or date.today()
    return [month_coverage(year, month, covered, today) for month in range(1, 13)]

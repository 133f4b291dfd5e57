"""Reconciliation matching engine.

Pairs day-sheet deposits with bank credits in a single greedy pass:

1. Deposits dated inside the month are taken in ascending date order.
2. The candidate pool holds every positive transaction dated on or after the
   first day of the month, so a deposit late in the month can still match a
   credit that settles in the following month.
3. Each deposit claims the first unclaimed candidate (ascending date, then
   input order) within the amount tolerance and the settlement window.
4. Unclaimed credits dated inside the month are reported as orphans.

The assignment is not globally optimal. Its tie-break order is part of the
contract: the same snapshot always yields the same rows.
"""

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from dayrec.domain.entities import (
    ZERO,
    BankTransaction,
    DepositRecord,
    ReconciliationRow,
    RowFlag,
)

AMOUNT_TOLERANCE = Decimal("0.02")
DEFAULT_SETTLEMENT_DAYS = 45


def in_range(day: date, start: date, end: date) -> bool:
    return start <= day <= end


def deposit_pool(
    deposits: Sequence[DepositRecord], month_start: date, month_end: date
) -> list[DepositRecord]:
    """Deposits dated inside the window, ascending by date (stable)."""
    pool = [d for d in deposits if in_range(d.date, month_start, month_end)]
    return sorted(pool, key=lambda d: d.date)


def candidate_pool(
    transactions: Sequence[BankTransaction], month_start: date
) -> list[BankTransaction]:
    """Deposit-side transactions from the window start onwards, ascending (stable)."""
    pool = [t for t in transactions if t.amount > 0 and t.date >= month_start]
    return sorted(pool, key=lambda t: t.date)


def is_candidate_match(
    deposit: DepositRecord,
    txn: BankTransaction,
    settlement_days: int = DEFAULT_SETTLEMENT_DAYS,
    tolerance: Decimal = AMOUNT_TOLERANCE,
) -> bool:
    """Check amount tolerance and settlement window for one pairing."""
    if abs(txn.amount - deposit.total) > tolerance:
        return False
    lag = (txn.date - deposit.date).days
    return 0 <= lag <= settlement_days


def find_match(
    deposit: DepositRecord,
    pool: list[Optional[BankTransaction]],
    settlement_days: int = DEFAULT_SETTLEMENT_DAYS,
    tolerance: Decimal = AMOUNT_TOLERANCE,
) -> Optional[int]:
    """Index of the first unclaimed candidate matching a deposit, if any.

    Claimed slots in the pool are None.
    """
    for index, txn in enumerate(pool):
        if txn is None:
            continue
        if is_candidate_match(deposit, txn, settlement_days, tolerance):
            return index
    return None


def settlement_note(deposit_date: date, txn_date: date) -> Optional[str]:
    """Describe a settlement lag, or None for same-day settlement."""
    lag = (txn_date - deposit_date).days
    if lag == 0:
        return None
    return f"Settled {txn_date.isoformat()} (+{lag} day{'s' if lag != 1 else ''})"


def matched_row(deposit: DepositRecord, txn: BankTransaction) -> ReconciliationRow:
    return ReconciliationRow(
        date=deposit.date,
        deposit_total=deposit.total,
        bank_total=txn.amount,
        difference=txn.amount - deposit.total,
        matches=True,
        deposit_ids=(deposit.id,),
        transaction_ids=(txn.id,),
        note=settlement_note(deposit.date, txn.date),
    )


def unmatched_row(deposit: DepositRecord) -> ReconciliationRow:
    return ReconciliationRow(
        date=deposit.date,
        deposit_total=deposit.total,
        bank_total=ZERO,
        difference=-deposit.total,
        matches=False,
        deposit_ids=(deposit.id,),
        flags=frozenset({RowFlag.MISMATCH}),
    )


def orphan_row(txn: BankTransaction) -> ReconciliationRow:
    return ReconciliationRow(
        date=txn.date,
        deposit_total=ZERO,
        bank_total=txn.amount,
        difference=txn.amount,
        matches=False,
        transaction_ids=(txn.id,),
        flags=frozenset({RowFlag.ORPHAN}),
        note="No day sheet matches this deposit",
    )


def reconcile(
    deposits: Sequence[DepositRecord],
    transactions: Sequence[BankTransaction],
    month_start: date,
    month_end: date,
    *,
    settlement_days: int = DEFAULT_SETTLEMENT_DAYS,
    tolerance: Decimal = AMOUNT_TOLERANCE,
) -> list[ReconciliationRow]:
    """Reconcile one month of deposits against bank credits.

    Args:
        deposits: Deposit records snapshot (any dates; filtered to the window)
        transactions: Bank transactions snapshot (any dates and signs)
        month_start: First day of the window
        month_end: Last day of the window (inclusive)
        settlement_days: Maximum days a credit may lag its deposit
        tolerance: Maximum absolute amount difference for a match

    Returns:
        Rows sorted descending by date; rows sharing a date keep the order in
        which they were produced (deposits ascending, then orphans).
    """
    if month_end < month_start:
        raise ValueError(
            f"Window end {month_end.isoformat()} is before start {month_start.isoformat()}"
        )

    pool: list[Optional[BankTransaction]] = list(candidate_pool(transactions, month_start))
    rows: list[ReconciliationRow] = []

    for deposit in deposit_pool(deposits, month_start, month_end):
        index = find_match(deposit, pool, settlement_days, tolerance)
        if index is None:
            rows.append(unmatched_row(deposit))
            continue
        txn = pool[index]
        pool[index] = None
        rows.append(matched_row(deposit, txn))

    for txn in pool:
        if txn is not None and in_range(txn.date, month_start, month_end):
            rows.append(orphan_row(txn))

    return sorted(rows, key=lambda row: row.date, reverse=True)

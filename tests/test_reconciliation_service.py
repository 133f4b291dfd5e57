"""Domain tests for reconciliation service."""

from datetime import date
from decimal import Decimal

from dayrec.database.snapshot import take_snapshot
from dayrec.domain.entities import CoverageStatus, DepositBreakdown, TransactionCandidate
from dayrec.domain.reconciliation import ReconciliationService, snapshot_fingerprint


def add_credits(db, *lines):
    db.add_transactions(
        [TransactionCandidate(day, "DEPOSIT", Decimal(amount)) for day, amount in lines]
    )


def test_reconcile_month_against_database(temp_db, sample_deposits):
    add_credits(temp_db, (date(2024, 5, 3), "530.00"), (date(2024, 5, 6), "250.00"))
    service = ReconciliationService(temp_db)

    rows = service.reconcile_month(2024, 5)

    assert [row.date for row in rows] == [date(2024, 5, 3), date(2024, 5, 2), date(2024, 5, 1)]
    assert [row.matches for row in rows] == [False, True, True]
    assert rows[0].difference == Decimal("-75.25")


def test_results_follow_mutations(temp_db, sample_deposits):
    service = ReconciliationService(temp_db)
    before = service.reconcile_month(2024, 5)
    assert not any(row.matches for row in before)

    add_credits(temp_db, (date(2024, 5, 3), "530.00"))
    after = service.reconcile_month(2024, 5)

    assert sum(1 for row in after if row.matches) == 1


def test_unchanged_snapshot_reuses_result(temp_db, sample_deposits):
    service = ReconciliationService(temp_db)

    first = service.summarize_year(2024)
    second = service.summarize_year(2024)

    assert first is second
    service.clear_cache()
    assert service.summarize_year(2024) == first


def test_fingerprint_changes_with_data(temp_db, deposit_service):
    empty = snapshot_fingerprint(take_snapshot(temp_db))
    deposit_service.commit_deposit(
        date=date(2024, 5, 1), total=Decimal("1.00"), breakdown=DepositBreakdown(cash=Decimal("1.00"))
    )

    assert snapshot_fingerprint(take_snapshot(temp_db)) != empty


def test_settlement_days_setting(temp_db, sample_deposits):
    add_credits(temp_db, (date(2024, 5, 12), "530.00"))

    assert ReconciliationService(temp_db).summarize_month(2024, 5).matched_count == 1
    assert ReconciliationService(temp_db, settlement_days=3).summarize_month(2024, 5).matched_count == 0


def test_summary_and_coverage(temp_db, sample_deposits):
    add_credits(temp_db, (date(2024, 5, 3), "530.00"), (date(2024, 5, 6), "250.00"))
    service = ReconciliationService(temp_db)

    may = service.summarize_year(2024)[4]
    assert may.deposit_total == Decimal("855.25")
    assert may.bank_total == Decimal("780.00")
    assert may.status == CoverageStatus.ORANGE

    coverage = service.month_coverage(2024, 5, today=date(2024, 5, 3))
    assert coverage.status == CoverageStatus.GREEN
    year = service.year_coverage(2024, today=date(2024, 5, 3))
    assert year[4] == coverage
    assert year[0].status == CoverageStatus.RED

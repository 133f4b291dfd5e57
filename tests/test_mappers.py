"""Tests for database mappers."""

import pytest
from datetime import datetime, date, UTC
from decimal import Decimal

from dayrec.database.models import (
    Deposit as ORMDeposit,
    BankTransaction as ORMBankTransaction,
    ImportLogEntry as ORMImportLogEntry,
)
from dayrec.database.mappers import (
    apply_breakdown,
    breakdown_to_domain,
    deposit_to_domain,
    import_log_entry_to_domain,
    import_log_entry_to_orm,
    transaction_to_domain,
)
from dayrec.domain.entities import (
    BankTransaction,
    CardSplit,
    DepositBreakdown,
    DepositRecord,
    DepositStatus,
    ImportFileType,
    ImportLogEntry,
)


class TestDepositMapper:
    """Tests for Deposit mapper."""

    def _orm_deposit(self, breakdown: DepositBreakdown) -> ORMDeposit:
        orm_deposit = ORMDeposit(
            id=1,
            date=date(2024, 5, 1),
            total=Decimal("530.00"),
            status="verified",
            source_image="scan.png",
        )
        apply_breakdown(orm_deposit, breakdown)
        return orm_deposit

    def test_deposit_to_domain(self):
        """Test converting ORM Deposit to domain DepositRecord."""
        breakdown = DepositBreakdown(cash=Decimal("130.00"), credit_cards=Decimal("400.00"))

        deposit = deposit_to_domain(self._orm_deposit(breakdown))

        assert isinstance(deposit, DepositRecord)
        assert deposit.id == 1
        assert deposit.status == DepositStatus.VERIFIED
        assert deposit.source_image == "scan.png"
        assert deposit.breakdown == breakdown

    def test_nested_detail_round_trip(self):
        """Check list and card split survive the flat column layout."""
        breakdown = DepositBreakdown(
            checks=Decimal("30.00"),
            check_list=(Decimal("10.00"), Decimal("20.00")),
            credit_cards=Decimal("400.00"),
            card_split=CardSplit(visa=Decimal("400.00")),
        )

        orm_deposit = self._orm_deposit(breakdown)

        assert orm_deposit.check_count == 2
        assert [c.position for c in orm_deposit.checks_detail] == [0, 1]
        assert breakdown_to_domain(orm_deposit) == breakdown

    def test_empty_check_list_differs_from_none(self):
        orm_deposit = self._orm_deposit(DepositBreakdown(check_list=()))

        assert orm_deposit.check_count == 0
        assert breakdown_to_domain(orm_deposit).check_list == ()

        apply_breakdown(orm_deposit, DepositBreakdown())
        assert orm_deposit.check_count == -1
        assert breakdown_to_domain(orm_deposit).check_list is None


class TestTransactionMapper:
    """Tests for BankTransaction mapper."""

    def test_transaction_to_domain(self):
        """Test converting ORM BankTransaction to domain BankTransaction."""
        orm_transaction = ORMBankTransaction(
            id=7,
            date=date(2024, 5, 3),
            description="DEPOSIT",
            amount=Decimal("530.00"),
            signature="2024-05-03|deposit|530.00",
            payment_type="credit_cards",
        )

        transaction = transaction_to_domain(orm_transaction)

        assert transaction == BankTransaction(
            id=7,
            date=date(2024, 5, 3),
            description="DEPOSIT",
            amount=Decimal("530.00"),
            payment_type="credit_cards",
        )


class TestImportLogMapper:
    """Tests for ImportLogEntry mapper."""

    @pytest.mark.parametrize("file_type", list(ImportFileType))
    def test_round_trip(self, file_type):
        entry = ImportLogEntry(
            key=f"{file_type.value}:abc",
            date=date(2024, 5, 1),
            imported_at=datetime(2024, 5, 1, 18, 0, tzinfo=UTC),
            file_type=file_type,
            file_name="file",
            source_machine="front-desk",
            record_count=3,
            file_hash="abc",
        )

        orm_entry = import_log_entry_to_orm(entry)

        assert isinstance(orm_entry, ORMImportLogEntry)
        assert orm_entry.file_type == file_type.value
        assert import_log_entry_to_domain(orm_entry) == entry

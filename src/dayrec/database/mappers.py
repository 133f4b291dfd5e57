"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the flat breakdown columns and
the check detail table never leak into the domain.
"""

from dayrec.domain import entities as domain
from dayrec.database.models import (
    Deposit as ORMDeposit,
    DepositCheck as ORMDepositCheck,
    BankTransaction as ORMBankTransaction,
    ImportLogEntry as ORMImportLogEntry,
)


def breakdown_to_domain(orm_deposit: ORMDeposit) -> domain.DepositBreakdown:
    """Rebuild the breakdown record from deposit columns."""
    check_list = None
    if orm_deposit.check_count >= 0:
        check_list = tuple(check.amount for check in orm_deposit.checks_detail)

    card_split = None
    card_columns = (
        orm_deposit.card_visa,
        orm_deposit.card_mastercard,
        orm_deposit.card_amex,
        orm_deposit.card_discover,
    )
    if any(value is not None for value in card_columns):
        visa, mastercard, amex, discover = (
            value if value is not None else domain.ZERO for value in card_columns
        )
        card_split = domain.CardSplit(
            visa=visa, mastercard=mastercard, amex=amex, discover=discover
        )

    return domain.DepositBreakdown(
        **{name: getattr(orm_deposit, name) for name in domain.BREAKDOWN_FIELDS},
        check_list=check_list,
        card_split=card_split,
    )


def apply_breakdown(orm_deposit: ORMDeposit, breakdown: domain.DepositBreakdown) -> None:
    """Write a breakdown into deposit columns and check rows."""
    for name in domain.BREAKDOWN_FIELDS:
        setattr(orm_deposit, name, getattr(breakdown, name))

    split = breakdown.card_split
    orm_deposit.card_visa = split.visa if split else None
    orm_deposit.card_mastercard = split.mastercard if split else None
    orm_deposit.card_amex = split.amex if split else None
    orm_deposit.card_discover = split.discover if split else None

    orm_deposit.checks_detail.clear()
    if breakdown.check_list is None:
        orm_deposit.check_count = -1
    else:
        orm_deposit.check_count = len(breakdown.check_list)
        for position, amount in enumerate(breakdown.check_list):
            orm_deposit.checks_detail.append(ORMDepositCheck(position=position, amount=amount))


def deposit_to_domain(orm_deposit: ORMDeposit) -> domain.DepositRecord:
    """Convert SQLAlchemy Deposit model to domain DepositRecord entity."""
    return domain.DepositRecord(
        id=orm_deposit.id,
        date=orm_deposit.date,
        total=orm_deposit.total,
        breakdown=breakdown_to_domain(orm_deposit),
        status=domain.DepositStatus(orm_deposit.status),
        source_image=orm_deposit.source_image,
        notes=orm_deposit.notes,
    )


def transaction_to_domain(orm_transaction: ORMBankTransaction) -> domain.BankTransaction:
    """Convert SQLAlchemy BankTransaction model to domain BankTransaction entity."""
    return domain.BankTransaction(
        id=orm_transaction.id,
        date=orm_transaction.date,
        description=orm_transaction.description,
        amount=orm_transaction.amount,
        payment_type=orm_transaction.payment_type,
        category=orm_transaction.category,
    )


def import_log_entry_to_domain(orm_entry: ORMImportLogEntry) -> domain.ImportLogEntry:
    """Convert SQLAlchemy ImportLogEntry model to domain ImportLogEntry entity."""
    return domain.ImportLogEntry(
        key=orm_entry.key,
        date=orm_entry.date,
        imported_at=orm_entry.imported_at,
        file_type=domain.ImportFileType(orm_entry.file_type),
        file_name=orm_entry.file_name,
        source_machine=orm_entry.source_machine,
        record_count=orm_entry.record_count,
        file_hash=orm_entry.file_hash,
    )


def import_log_entry_to_orm(entry: domain.ImportLogEntry) -> ORMImportLogEntry:
    """Convert domain ImportLogEntry entity to a new SQLAlchemy row."""
    return ORMImportLogEntry(
        key=entry.key,
        date=entry.date,
        imported_at=entry.imported_at,
        file_type=entry.file_type.value,
        file_name=entry.file_name,
        source_machine=entry.source_machine,
        record_count=entry.record_count,
        file_hash=entry.file_hash,
    )

"""Generic SQLAlchemy database implementation."""

import logging
from typing import Optional, Sequence
from datetime import date
from decimal import Decimal
from sqlalchemy.orm import Session

from dayrec.database.base import Database
from dayrec.database.models import (
    SCHEMA_VERSION,
    BankTransaction,
    Deposit,
    ImportLogEntry,
    SchemaInfo,
    create_session_factory,
)
from dayrec.database.mappers import (
    apply_breakdown,
    deposit_to_domain,
    transaction_to_domain,
    import_log_entry_to_domain,
    import_log_entry_to_orm,
)
from dayrec.domain.dedup import transaction_signature
from dayrec.domain.entities import (
    BankTransaction as DomainBankTransaction,
    DepositBreakdown,
    DepositRecord as DomainDepositRecord,
    DepositStatus,
    ImportLogEntry as DomainImportLogEntry,
    TransactionCandidate,
)
from dayrec.domain.errors import (
    NotFoundError,
    deposit_not_found,
    transaction_not_found,
)

logger = logging.getLogger(__name__)


class SQLAlchemyDatabase(Database):
    """SQLAlchemy-based implementation of Database interface."""

    def __init__(self, database_url: str):
        """Initialize SQLAlchemy database.

        Args:
            database_url: SQLAlchemy database URL (e.g., 'sqlite:///path/to.db')
        """
        self.database_url = database_url
        self.session_factory = create_session_factory(database_url)
        self._session: Optional[Session] = None

    def _get_session(self) -> Session:
        """Get current session, creating one if needed."""
        if self._session is None:
            self._session = self.session_factory()
        return self._session

    def _commit(self) -> None:
        """Commit the current session, rolling back on failure."""
        session = self._get_session()
        try:
            session.commit()
        except Exception:
            session.rollback()
            raise

    def connect(self) -> None:
        """Connect to the database."""
        # Connection is lazy, so this is a no-op
        pass

    def disconnect(self) -> None:
        """Disconnect from the database."""
        if self._session is not None:
            self._session.close()
            self._session = None

    def initialize_schema(self) -> None:
        """Record the schema version; tables are created by create_session_factory."""
        session = self._get_session()
        info = session.query(SchemaInfo).first()
        if info is None:
            session.add(SchemaInfo(version=SCHEMA_VERSION))
            self._commit()
        elif info.version != SCHEMA_VERSION:
            logger.warning(
                "Database schema version %s differs from supported version %s",
                info.version,
                SCHEMA_VERSION,
            )

    def get_schema_version(self) -> Optional[int]:
        """Return the stored schema version."""
        info = self._get_session().query(SchemaInfo).first()
        return info.version if info is not None else None

    # Deposit operations
    def _get_orm_deposit(self, deposit_id: int) -> Optional[Deposit]:
        return self._get_session().query(Deposit).filter(Deposit.id == deposit_id).first()

    def create_deposit(
        self,
        date: date,
        total: Decimal,
        breakdown: DepositBreakdown,
        status: DepositStatus = DepositStatus.PENDING,
        source_image: Optional[str] = None,
        notes: Optional[str] = None,
        log_entries: Sequence[DomainImportLogEntry] = (),
        replaces: Sequence[int] = (),
    ) -> int:
        """Create a deposit and its import log entries atomically.

        Deposits listed in ``replaces`` are deleted in the same transaction.
        """
        session = self._get_session()
        for replaced_id in replaces:
            replaced = self._get_orm_deposit(replaced_id)
            if replaced is None:
                session.rollback()
                raise NotFoundError(deposit_not_found(replaced_id))
            session.delete(replaced)
        deposit = Deposit(
            date=date,
            total=total,
            status=status.value,
            source_image=source_image,
            notes=notes,
        )
        apply_breakdown(deposit, breakdown)
        session.add(deposit)
        self._stage_log_entries(log_entries)
        self._commit()
        return deposit.id

    def get_deposit(self, deposit_id: int) -> Optional[DomainDepositRecord]:
        """Get deposit by ID."""
        deposit = self._get_orm_deposit(deposit_id)
        if deposit is None:
            return None
        return deposit_to_domain(deposit)

    def list_deposits(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> list[DomainDepositRecord]:
        """List deposits ordered by date, then ID."""
        query = self._get_session().query(Deposit)
        if start_date is not None:
            query = query.filter(Deposit.date >= start_date)
        if end_date is not None:
            query = query.filter(Deposit.date <= end_date)
        deposits = query.order_by(Deposit.date, Deposit.id).all()
        return [deposit_to_domain(d) for d in deposits]

    def update_deposit(
        self,
        deposit_id: int,
        date: Optional[date] = None,
        total: Optional[Decimal] = None,
        breakdown: Optional[DepositBreakdown] = None,
        status: Optional[DepositStatus] = None,
        notes: Optional[str] = None,
    ) -> None:
        """Update deposit fields."""
        deposit = self._get_orm_deposit(deposit_id)
        if deposit is None:
            raise NotFoundError(deposit_not_found(deposit_id))

        if date is not None:
            deposit.date = date
        if total is not None:
            deposit.total = total
        if breakdown is not None:
            apply_breakdown(deposit, breakdown)
        if status is not None:
            deposit.status = status.value
        if notes is not None:
            deposit.notes = notes

        self._commit()

    def delete_deposit(self, deposit_id: int) -> None:
        """Delete a deposit."""
        deposit = self._get_orm_deposit(deposit_id)
        if deposit is None:
            raise NotFoundError(deposit_not_found(deposit_id))
        self._get_session().delete(deposit)
        self._commit()

    # Transaction operations
    def add_transactions(
        self,
        candidates: Sequence[TransactionCandidate],
        log_entries: Sequence[DomainImportLogEntry] = (),
    ) -> list[int]:
        """Commit a batch of transactions and its log entries atomically."""
        session = self._get_session()
        rows = [
            BankTransaction(
                date=candidate.date,
                description=candidate.description,
                amount=candidate.amount,
                signature=transaction_signature(
                    candidate.date, candidate.description, candidate.amount
                ),
            )
            for candidate in candidates
        ]
        session.add_all(rows)
        self._stage_log_entries(log_entries)
        self._commit()
        return [row.id for row in rows]

    def get_transaction(self, transaction_id: int) -> Optional[DomainBankTransaction]:
        """Get transaction by ID."""
        session = self._get_session()
        txn = session.query(BankTransaction).filter(BankTransaction.id == transaction_id).first()
        if txn is None:
            return None
        return transaction_to_domain(txn)

    def list_transactions(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> list[DomainBankTransaction]:
        """List transactions ordered by date, then ID."""
        query = self._get_session().query(BankTransaction)
        if start_date is not None:
            query = query.filter(BankTransaction.date >= start_date)
        if end_date is not None:
            query = query.filter(BankTransaction.date <= end_date)
        transactions = query.order_by(BankTransaction.date, BankTransaction.id).all()
        return [transaction_to_domain(txn) for txn in transactions]

    def update_transaction_payment_type(
        self, transaction_id: int, payment_type: Optional[str]
    ) -> None:
        """Set the post-hoc classification tag of a transaction."""
        session = self._get_session()
        txn = session.query(BankTransaction).filter(BankTransaction.id == transaction_id).first()
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        txn.payment_type = payment_type
        self._commit()

    # Import log operations
    def _stage_log_entries(self, entries: Sequence[DomainImportLogEntry]) -> None:
        """Add log entries to the pending unit of work, skipping known keys."""
        session = self._get_session()
        staged = set()
        for entry in entries:
            if entry.key in staged or session.get(ImportLogEntry, entry.key) is not None:
                continue
            staged.add(entry.key)
            session.add(import_log_entry_to_orm(entry))

    def get_import_log_entry(self, key: str) -> Optional[DomainImportLogEntry]:
        """Get import log entry by key."""
        entry = self._get_session().get(ImportLogEntry, key)
        if entry is None:
            return None
        return import_log_entry_to_domain(entry)

    def add_import_log_entries(self, entries: Sequence[DomainImportLogEntry]) -> None:
        """Add import log entries, skipping keys already present."""
        self._stage_log_entries(entries)
        self._commit()

    def list_import_log_entries(self) -> list[DomainImportLogEntry]:
        """List import log entries, newest first."""
        session = self._get_session()
        entries = (
            session.query(ImportLogEntry)
            .order_by(ImportLogEntry.imported_at.desc(), ImportLogEntry.key)
            .all()
        )
        return [import_log_entry_to_domain(e) for e in entries]

    def clear_import_log(self) -> int:
        """Delete every import log entry."""
        removed = self._get_session().query(ImportLogEntry).delete()
        self._commit()
        return removed

    # Bulk operations
    def replace_all(
        self,
        deposits: Sequence[DomainDepositRecord],
        transactions: Sequence[DomainBankTransaction],
        import_log: Sequence[DomainImportLogEntry],
    ) -> None:
        """Replace every collection in one transaction, keeping IDs."""
        session = self._get_session()
        for deposit in session.query(Deposit).all():
            session.delete(deposit)
        session.query(BankTransaction).delete()
        session.query(ImportLogEntry).delete()
        session.flush()

        for record in deposits:
            deposit = Deposit(
                id=record.id,
                date=record.date,
                total=record.total,
                status=record.status.value,
                source_image=record.source_image,
                notes=record.notes,
            )
            apply_breakdown(deposit, record.breakdown)
            session.add(deposit)

        for txn in transactions:
            session.add(
                BankTransaction(
                    id=txn.id,
                    date=txn.date,
                    description=txn.description,
                    amount=txn.amount,
                    signature=transaction_signature(txn.date, txn.description, txn.amount),
                    payment_type=txn.payment_type,
                    category=txn.category,
                )
            )

        keys = set()
        for entry in import_log:
            if entry.key not in keys:
                keys.add(entry.key)
                session.add(import_log_entry_to_orm(entry))
        self._commit()

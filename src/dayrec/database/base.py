"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional, Sequence
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from dayrec.domain.entities import (
    BankTransaction,
    DepositBreakdown,
    DepositRecord,
    DepositStatus,
    ImportLogEntry,
    TransactionCandidate,
)


class Database(ABC):
    """Abstract database interface for dayrec.

    The database exclusively owns the deposit, transaction and import log
    collections. Callers receive immutable domain entities.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables, record schema version)."""
        pass

    @abstractmethod
    def get_schema_version(self) -> Optional[int]:
        """Return the stored schema version, or None for an uninitialized store."""
        pass

    # Deposit operations
    @abstractmethod
    def create_deposit(
        self,
        date: date,
        total: Decimal,
        breakdown: DepositBreakdown,
        status: DepositStatus = DepositStatus.PENDING,
        source_image: Optional[str] = None,
        notes: Optional[str] = None,
        log_entries: Sequence[ImportLogEntry] = (),
        replaces: Sequence[int] = (),
    ) -> int:
        """Create a deposit and its import log entries atomically. Returns deposit ID.

        Deposits listed in ``replaces`` are deleted in the same transaction.
        """
        pass

    @abstractmethod
    def get_deposit(self, deposit_id: int) -> Optional[DepositRecord]:
        """Get deposit by ID."""
        pass

    @abstractmethod
    def list_deposits(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> list[DepositRecord]:
        """List deposits ordered by date, then ID."""
        pass

    @abstractmethod
    def update_deposit(
        self,
        deposit_id: int,
        date: Optional[date] = None,
        total: Optional[Decimal] = None,
        breakdown: Optional[DepositBreakdown] = None,
        status: Optional[DepositStatus] = None,
        notes: Optional[str] = None,
    ) -> None:
        """Update deposit fields. None leaves a field unchanged."""
        pass

    @abstractmethod
    def delete_deposit(self, deposit_id: int) -> None:
        """Delete a deposit permanently."""
        pass

    # Transaction operations
    @abstractmethod
    def add_transactions(
        self,
        candidates: Sequence[TransactionCandidate],
        log_entries: Sequence[ImportLogEntry] = (),
    ) -> list[int]:
        """Commit a batch of transactions and its log entries atomically.

        Returns transaction IDs in batch order.
        """
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[BankTransaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> list[BankTransaction]:
        """List transactions ordered by date, then ID."""
        pass

    @abstractmethod
    def update_transaction_payment_type(
        self, transaction_id: int, payment_type: Optional[str]
    ) -> None:
        """Set the post-hoc classification tag of a transaction."""
        pass

    # Import log operations
    @abstractmethod
    def get_import_log_entry(self, key: str) -> Optional[ImportLogEntry]:
        """Get import log entry by key."""
        pass

    @abstractmethod
    def add_import_log_entries(self, entries: Sequence[ImportLogEntry]) -> None:
        """Add import log entries, skipping keys already present."""
        pass

    @abstractmethod
    def list_import_log_entries(self) -> list[ImportLogEntry]:
        """List import log entries, newest first."""
        pass

    @abstractmethod
    def clear_import_log(self) -> int:
        """Delete every import log entry. Returns the number deleted."""
        pass

    # Bulk operations
    @abstractmethod
    def replace_all(
        self,
        deposits: Sequence[DepositRecord],
        transactions: Sequence[BankTransaction],
        import_log: Sequence[ImportLogEntry],
    ) -> None:
        """Replace every collection in one transaction (snapshot restore)."""
        pass

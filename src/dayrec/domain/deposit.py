"""Deposit record domain service."""

import logging
from typing import Optional, Sequence
from datetime import date
from decimal import Decimal

from dayrec.database.base import Database
from dayrec.domain.entities import (
    DepositBreakdown,
    DepositRecord,
    DepositStatus,
    ImportLogEntry,
)
from dayrec.domain.errors import (
    MissingDateError,
    NotFoundError,
    ValidationError,
    deposit_not_found,
    missing_deposit_date,
)

logger = logging.getLogger(__name__)

# Slack between a stated total and the sum of its breakdown before warning
TOTAL_TOLERANCE = Decimal("0.05")


class DepositService:
    """Service for committing and maintaining deposit records."""

    def __init__(self, db: Database):
        """Initialize deposit service.

        Args:
            db: Database instance
        """
        self.db = db

    def commit_deposit(
        self,
        date: Optional[date],
        total: Decimal,
        breakdown: DepositBreakdown,
        status: DepositStatus = DepositStatus.PENDING,
        source_image: Optional[str] = None,
        notes: Optional[str] = None,
        source: Optional[str] = None,
        log_entries: Sequence[ImportLogEntry] = (),
        replaces: Sequence[int] = (),
    ) -> int:
        """Commit a deposit record.

        The stated total is trusted for matching; a breakdown that does not add
        up to it is only logged.

        Args:
            date: Business date the day sheet belongs to
            total: Stated deposit total
            breakdown: Payment-method subtotals
            status: Review status
            source_image: Optional reference to the processed slip image
            notes: Optional notes
            source: Name of the originating file, used in error messages
            log_entries: Import log entries committed together with the deposit
            replaces: IDs of deposits this one supersedes, deleted atomically

        Returns:
            Deposit ID

        Raises:
            MissingDateError: If no date was assigned
            ValidationError: If the total is negative or nested breakdown
                detail does not add up
        """
        if date is None:
            raise MissingDateError(missing_deposit_date(source))
        if total < 0:
            raise ValidationError(f"Deposit total cannot be negative: {total:.2f}")

        breakdown.validate()
        subtotal = breakdown.subtotal()
        if abs(subtotal - total) > TOTAL_TOLERANCE:
            logger.warning(
                "Deposit for %s: total %.2f differs from breakdown sum %.2f",
                date.isoformat(),
                total,
                subtotal,
            )

        deposit_id = self.db.create_deposit(
            date=date,
            total=total,
            breakdown=breakdown,
            status=status,
            source_image=source_image,
            notes=notes,
            log_entries=log_entries,
            replaces=replaces,
        )
        logger.info("Committed deposit %d for %s (%.2f)", deposit_id, date.isoformat(), total)
        return deposit_id

    def get_deposit(self, deposit_id: int) -> Optional[DepositRecord]:
        """Get deposit by ID.

        Args:
            deposit_id: Deposit ID

        Returns:
            Deposit record or None if not found
        """
        return self.db.get_deposit(deposit_id)

    def list_deposits(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> list[DepositRecord]:
        """List deposits ordered by date."""
        return self.db.list_deposits(start_date=start_date, end_date=end_date)

    def update_deposit(
        self,
        deposit_id: int,
        date: Optional[date] = None,
        total: Optional[Decimal] = None,
        breakdown: Optional[DepositBreakdown] = None,
        notes: Optional[str] = None,
    ) -> None:
        """Correct a deposit record.

        Raises:
            NotFoundError: If the deposit doesn't exist
            ValidationError: If the new breakdown is inconsistent
        """
        if self.db.get_deposit(deposit_id) is None:
            raise NotFoundError(deposit_not_found(deposit_id))
        if total is not None and total < 0:
            raise ValidationError(f"Deposit total cannot be negative: {total:.2f}")
        if breakdown is not None:
            breakdown.validate()

        self.db.update_deposit(
            deposit_id, date=date, total=total, breakdown=breakdown, notes=notes
        )

    def verify_deposit(self, deposit_id: int) -> None:
        """Mark a deposit as verified by the operator.

        Raises:
            NotFoundError: If the deposit doesn't exist
        """
        if self.db.get_deposit(deposit_id) is None:
            raise NotFoundError(deposit_not_found(deposit_id))
        self.db.update_deposit(deposit_id, status=DepositStatus.VERIFIED)

    def delete_deposit(self, deposit_id: int) -> None:
        """Delete a deposit, removing it from reconciliation permanently.

        Raises:
            NotFoundError: If the deposit doesn't exist
        """
        if self.db.get_deposit(deposit_id) is None:
            raise NotFoundError(deposit_not_found(deposit_id))
        self.db.delete_deposit(deposit_id)
        logger.info("Deleted deposit %d", deposit_id)

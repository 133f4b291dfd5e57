"""Bank transaction domain service."""

from typing import Optional
from datetime import date
from dayrec.database.base import Database
from dayrec.domain.entities import BREAKDOWN_FIELDS, BankTransaction
from dayrec.domain.errors import NotFoundError, ValidationError, transaction_not_found


class TransactionService:
    """Service for querying and classifying committed bank transactions."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_transaction(self, transaction_id: int) -> Optional[BankTransaction]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction or None if not found
        """
        return self.db.get_transaction(transaction_id)

    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        credits_only: bool = False,
    ) -> list[BankTransaction]:
        """List transactions ordered by date.

        Args:
            start_date: Optional start date filter
            end_date: Optional end date filter
            credits_only: If True, only deposit-side (positive) transactions

        Returns:
            List of transactions
        """
        transactions = self.db.list_transactions(start_date=start_date, end_date=end_date)
        if credits_only:
            transactions = [t for t in transactions if t.amount > 0]
        return transactions

    def set_payment_type(self, transaction_id: int, payment_type: Optional[str]) -> None:
        """Tag a transaction with the breakdown field it settles.

        The payment type is the only part of a committed transaction that can
        change. None clears it.

        Raises:
            NotFoundError: If the transaction doesn't exist
            ValidationError: If payment_type is not a breakdown field
        """
        if self.db.get_transaction(transaction_id) is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        if payment_type is not None and payment_type not in BREAKDOWN_FIELDS:
            raise ValidationError(
                f"Unknown payment type '{payment_type}'. "
                f"Valid types: {', '.join(BREAKDOWN_FIELDS)}"
            )
        self.db.update_transaction_payment_type(transaction_id, payment_type)

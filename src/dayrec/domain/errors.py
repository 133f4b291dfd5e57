"""Shared domain error messages and error types."""

from datetime import date
from decimal import Decimal


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class MissingDateError(ValidationError):
    """A record cannot be committed because it has no assignable date."""


class NotFoundError(DomainError):
    """Requested domain entity or path does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as an unresolved same-date ambiguity."""


def deposit_not_found(deposit_id: int) -> str:
    """Return message for missing deposit record."""
    return f"Deposit {deposit_id} not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing bank transaction."""
    return f"Transaction {transaction_id} not found"


def missing_deposit_date(source: str | None = None) -> str:
    """Return message for a deposit without a resolvable date."""
    if source:
        return f"Missing date: assign a date to '{source}' before saving this day sheet"
    return "Missing date: assign a date before saving this day sheet"


def nested_sum_mismatch(
    detail: str, detail_sum: Decimal, summary_field: str, summary_value: Decimal
) -> str:
    """Return message for nested breakdown detail that does not add up."""
    return (
        f"Breakdown {detail} sums to {detail_sum:.2f} "
        f"but {summary_field} is {summary_value:.2f}"
    )


def no_conflict_for_date(day: date) -> str:
    """Return message when resolving a date that has no pending conflict."""
    return f"No pending conflict for {day.isoformat()}"


def candidate_not_in_conflict(name: str, day: date) -> str:
    """Return message for a choice that is not one of the conflicting files."""
    return f"'{name}' is not a candidate for {day.isoformat()}"

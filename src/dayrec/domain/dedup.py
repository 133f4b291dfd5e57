"""Signature-based duplicate suppression for bank transaction imports."""

import re
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable, Sequence

from dayrec.domain.entities import BankTransaction, TransactionCandidate

_WHITESPACE = re.compile(r"\s+")


def normalize_description(description: str | None) -> str:
    """Collapse runs of whitespace and lower-case a bank description."""
    if not description:
        return ""
    return _WHITESPACE.sub(" ", description).strip().lower()


def transaction_signature(txn_date: date, description: str | None, amount: Decimal) -> str:
    """Build the composite dedup key of a statement line.

    Args:
        txn_date: Transaction date
        description: Free-text bank description
        amount: Signed amount

    Returns:
        "<iso date>|<normalized description>|<amount with two decimals>"
    """
    return f"{txn_date.isoformat()}|{normalize_description(description)}|{Decimal(amount):.2f}"


def signature_of(txn: BankTransaction | TransactionCandidate) -> str:
    """Signature of a committed transaction or an import candidate."""
    return transaction_signature(txn.date, txn.description, txn.amount)


@dataclass(frozen=True)
class DedupResult:
    """Outcome of filtering one batch of candidates."""

    accepted: tuple[TransactionCandidate, ...]
    skipped: tuple[TransactionCandidate, ...]


def filter_new_transactions(
    candidates: Sequence[TransactionCandidate],
    persisted: Iterable[BankTransaction],
) -> DedupResult:
    """Drop candidates already persisted or repeated earlier in the batch.

    Overlapping multi-page extractions produce the same line twice; only the
    first occurrence in batch order is accepted.

    Args:
        candidates: Newly extracted statement lines, in batch order
        persisted: Currently committed transactions

    Returns:
        DedupResult with accepted and skipped candidates, both in batch order
    """
    seen = {signature_of(txn) for txn in persisted}
    accepted = []
    skipped = []
    for candidate in candidates:
        signature = signature_of(candidate)
        if signature in seen:
            skipped.append(candidate)
            continue
        seen.add(signature)
        accepted.append(candidate)
    return DedupResult(accepted=tuple(accepted), skipped=tuple(skipped))

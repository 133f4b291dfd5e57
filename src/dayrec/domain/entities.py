"""Domain model entities for dayrec.

These are pure data classes representing business concepts, independent of
database schema. The matching engine and the coverage aggregator only ever see
these types, never ORM rows.
"""

from dataclasses import dataclass
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional

from dayrec.domain.errors import ValidationError, nested_sum_mismatch

ZERO = Decimal("0.00")

# Rounding slack allowed between a summary field and its nested detail
BREAKDOWN_TOLERANCE = Decimal("0.02")


class DepositStatus(str, Enum):
    """Review state of a deposit record."""

    PENDING = "pending"
    VERIFIED = "verified"


class ImportFileType(str, Enum):
    """Kind of source file recorded in the import log."""

    DAY_SHEET = "day_sheet"
    BANK_CSV = "bank_csv"
    BANK_STATEMENT_PDF = "bank_pdf"


class RowFlag(str, Enum):
    """Flags attached to a reconciliation row."""

    ORPHAN = "orphan"
    MISMATCH = "mismatch"


class CoverageStatus(str, Enum):
    """Tri-state health of a month."""

    RED = "red"
    ORANGE = "orange"
    GREEN = "green"


class DayState(str, Enum):
    """Coverage state of one calendar day."""

    COVERED = "covered"
    MISSING = "missing"
    WEEKEND = "weekend"
    FUTURE = "future"


class DateSource(str, Enum):
    """Where the resolved date of an ingestion candidate came from."""

    DOCUMENT = "document"
    FILENAME = "filename"
    MODIFIED_TIME = "modified_time"


BREAKDOWN_FIELDS = (
    "cash",
    "checks",
    "insurance_checks",
    "credit_cards",
    "insurance_credit_cards",
    "care_financing",
    "installment_financing",
    "eft",
    "other",
)


@dataclass(frozen=True)
class CardSplit:
    """Per-network split of the credit card subtotal."""

    visa: Decimal = ZERO
    mastercard: Decimal = ZERO
    amex: Decimal = ZERO
    discover: Decimal = ZERO

    def total(self) -> Decimal:
        return self.visa + self.mastercard + self.amex + self.discover


@dataclass(frozen=True)
class DepositBreakdown:
    """Payment-method subtotals of a day sheet."""

    cash: Decimal = ZERO
    checks: Decimal = ZERO
    insurance_checks: Decimal = ZERO
    credit_cards: Decimal = ZERO
    insurance_credit_cards: Decimal = ZERO
    care_financing: Decimal = ZERO
    installment_financing: Decimal = ZERO
    eft: Decimal = ZERO
    other: Decimal = ZERO
    check_list: Optional[tuple[Decimal, ...]] = None
    card_split: Optional[CardSplit] = None

    def subtotal(self) -> Decimal:
        """Sum of all summary fields."""
        return sum((getattr(self, name) for name in BREAKDOWN_FIELDS), ZERO)

    def validate(self) -> None:
        """Check nested detail against the summary fields it refines.

        Raises:
            ValidationError: If the check list or card split does not add up
        """
        if self.check_list is not None:
            check_sum = sum(self.check_list, ZERO)
            if abs(check_sum - self.checks) > BREAKDOWN_TOLERANCE:
                raise ValidationError(
                    nested_sum_mismatch("check list", check_sum, "checks", self.checks)
                )
        if self.card_split is not None:
            card_sum = self.card_split.total()
            if abs(card_sum - self.credit_cards) > BREAKDOWN_TOLERANCE:
                raise ValidationError(
                    nested_sum_mismatch(
                        "card split", card_sum, "credit_cards", self.credit_cards
                    )
                )


@dataclass(frozen=True)
class DepositRecord:
    """Digitized day-sheet total for one business date."""

    id: int
    date: date
    total: Decimal
    breakdown: DepositBreakdown
    status: DepositStatus = DepositStatus.PENDING
    source_image: Optional[str] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class BankTransaction:
    """One signed line item from a bank statement or export."""

    id: int
    date: date
    description: str
    amount: Decimal
    payment_type: Optional[str] = None
    category: Optional[str] = None


@dataclass(frozen=True)
class TransactionCandidate:
    """Statement line produced by extraction, not yet committed."""

    date: date
    description: str
    amount: Decimal


@dataclass(frozen=True)
class ImportLogEntry:
    """Record of one committed import, keyed by content identity."""

    key: str
    date: Optional[date]
    imported_at: datetime
    file_type: ImportFileType
    file_name: Optional[str] = None
    source_machine: Optional[str] = None
    record_count: int = 0
    file_hash: Optional[str] = None


@dataclass(frozen=True)
class ReconciliationRow:
    """Derived comparison of deposit and bank sides for one date."""

    date: date
    deposit_total: Decimal
    bank_total: Decimal
    difference: Decimal
    matches: bool
    deposit_ids: tuple[int, ...] = ()
    transaction_ids: tuple[int, ...] = ()
    flags: frozenset[RowFlag] = frozenset()
    note: Optional[str] = None

    @property
    def is_orphan(self) -> bool:
        return RowFlag.ORPHAN in self.flags


@dataclass(frozen=True)
class MonthSummary:
    """Deposit vs bank totals for one month."""

    year: int
    month: int
    deposit_total: Decimal
    bank_total: Decimal
    difference: Decimal
    status: CoverageStatus
    deposit_count: int = 0
    transaction_count: int = 0
    matched_count: int = 0
    unmatched_count: int = 0
    orphan_count: int = 0


@dataclass(frozen=True)
class DayCoverage:
    """Coverage state of one calendar day."""

    date: date
    state: DayState


@dataclass(frozen=True)
class MonthCoverage:
    """Day-sheet coverage of one month."""

    year: int
    month: int
    status: CoverageStatus
    days: tuple[DayCoverage, ...] = ()

    @property
    def missing_dates(self) -> tuple[date, ...]:
        return tuple(d.date for d in self.days if d.state == DayState.MISSING)


@dataclass(frozen=True)
class ExtractedSlip:
    """Deposit slip data as read by the extraction collaborator."""

    total: Decimal
    breakdown: DepositBreakdown
    date: Optional[date] = None
    source_image: Optional[str] = None


@dataclass(frozen=True)
class SheetCandidate:
    """Day-sheet file awaiting commit, with its resolved date."""

    name: str
    path: str
    modified_time_ms: float
    file_hash: str
    slip: ExtractedSlip
    resolved_date: Optional[date]
    date_source: Optional[DateSource]
    # Document date and file name date both present but disagreeing
    date_mismatch: bool = False


@dataclass(frozen=True)
class DateConflict:
    """Same-date day sheets awaiting an operator decision.

    A date is also in conflict when a single new candidate lands on a date
    already held by a committed deposit or a logged day sheet.
    """

    date: date
    candidates: tuple[SheetCandidate, ...]
    existing_deposit_ids: tuple[int, ...] = ()
    previously_imported: bool = False

    def get(self, name_or_path: str) -> Optional[SheetCandidate]:
        for candidate in self.candidates:
            if name_or_path in (candidate.name, candidate.path):
                return candidate
        return None


@dataclass(frozen=True)
class SheetScan:
    """Candidates of one scan grouped by resolved date."""

    ready: tuple[SheetCandidate, ...] = ()
    conflicts: tuple[DateConflict, ...] = ()
    undated: tuple[SheetCandidate, ...] = ()
    already_imported: tuple[str, ...] = ()
    committed: tuple[int, ...] = ()
    errors: tuple[str, ...] = ()

"""Same-date conflict detection for day-sheet ingestion.

All candidates of a scan are grouped by resolved date before anything is
committed. A date with a single new candidate and no earlier sheet is ready.
A date with several candidates, or one that already holds a deposit or a
logged day sheet, is a DateConflict that waits for an explicit operator choice.
"""

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Mapping, Optional, Sequence

from dayrec.domain.entities import (
    DateConflict,
    DateSource,
    DepositRecord,
    ExtractedSlip,
    ImportLogEntry,
    SheetCandidate,
    SheetScan,
)
from dayrec.domain.errors import (
    ConflictError,
    NotFoundError,
    candidate_not_in_conflict,
    no_conflict_for_date,
)
from dayrec.domain.import_log import imported_day_sheet_dates
from dayrec.utils.date_parser import (
    date_from_filename,
    date_from_text,
    date_from_timestamp_ms,
)


def sniff_document_date(content: bytes) -> Optional[date]:
    """Find a date printed in raw document bytes."""
    if not content:
        return None
    return date_from_text(content.decode("latin-1"))


def resolve_candidate_date(
    document_date: Optional[date],
    name: str,
    modified_time_ms: Optional[float],
) -> tuple[Optional[date], Optional[DateSource]]:
    """Pick a candidate's business date.

    Precedence: date read from the document, then a date in the file name,
    then the file's modification time.
    """
    if document_date is not None:
        return document_date, DateSource.DOCUMENT
    filename_date = date_from_filename(name)
    if filename_date is not None:
        return filename_date, DateSource.FILENAME
    if modified_time_ms is not None:
        return date_from_timestamp_ms(modified_time_ms), DateSource.MODIFIED_TIME
    return None, None


def build_candidate(
    name: str,
    path: str,
    modified_time_ms: Optional[float],
    content: bytes,
    file_hash: str,
    slip: ExtractedSlip,
) -> SheetCandidate:
    """Wrap an extracted slip with its file metadata and resolved date."""
    document_date = slip.date or sniff_document_date(content)
    resolved, source = resolve_candidate_date(document_date, name, modified_time_ms)
    filename_date = date_from_filename(name)
    return SheetCandidate(
        name=name,
        path=path,
        modified_time_ms=modified_time_ms or 0,
        file_hash=file_hash,
        slip=slip,
        resolved_date=resolved,
        date_source=source,
        date_mismatch=(
            document_date is not None
            and filename_date is not None
            and document_date != filename_date
        ),
    )


def committed_sheet_dates(
    deposits: Iterable[DepositRecord], log_entries: Iterable[ImportLogEntry]
) -> dict[date, tuple[int, ...]]:
    """Dates already holding a day sheet, mapped to their deposit IDs.

    A date logged as imported whose deposit was since deleted maps to an
    empty tuple.
    """
    held: dict[date, tuple[int, ...]] = {
        day: () for day in imported_day_sheet_dates(log_entries)
    }
    for deposit in deposits:
        held[deposit.date] = held.get(deposit.date, ()) + (deposit.id,)
    return held


def group_by_date(
    candidates: Sequence[SheetCandidate],
    committed: Optional[Mapping[date, tuple[int, ...]]] = None,
) -> SheetScan:
    """Group candidates by resolved date.

    Args:
        candidates: Every candidate of the scan
        committed: Dates that already hold a sheet, as returned by
            committed_sheet_dates

    Returns:
        SheetScan whose ``ready`` and ``conflicts`` are ordered by date and
        whose conflicting candidates keep scan order
    """
    committed = committed or {}
    groups: dict[date, list[SheetCandidate]] = {}
    undated = []
    for candidate in candidates:
        if candidate.resolved_date is None:
            undated.append(candidate)
            continue
        groups.setdefault(candidate.resolved_date, []).append(candidate)

    ready = []
    conflicts = []
    for day in sorted(groups):
        group = groups[day]
        if len(group) == 1 and day not in committed:
            ready.append(group[0])
        else:
            conflicts.append(
                DateConflict(
                    date=day,
                    candidates=tuple(group),
                    existing_deposit_ids=committed.get(day, ()),
                    previously_imported=day in committed,
                )
            )

    return SheetScan(ready=tuple(ready), conflicts=tuple(conflicts), undated=tuple(undated))


# Choice that keeps what a date already holds and commits none of the new sheets
KEEP_EXISTING = "existing"


@dataclass(frozen=True)
class Resolution:
    """Operator decision for one conflicting date."""

    date: date
    chosen: Optional[SheetCandidate]
    rejected: tuple[SheetCandidate, ...]
    replaces: tuple[int, ...] = ()


def resolve_conflict(conflict: DateConflict, choice: str) -> Resolution:
    """Apply an operator's choice to a conflict.

    Picking a new sheet for a date that already holds deposits replaces them.
    Picking KEEP_EXISTING rejects every new sheet.

    Args:
        conflict: Pending conflict
        choice: Name or path of the chosen candidate, or KEEP_EXISTING

    Raises:
        NotFoundError: If the choice is not one of the conflicting candidates,
            or KEEP_EXISTING is picked for a date with no earlier sheet
    """
    if choice == KEEP_EXISTING and conflict.previously_imported:
        return Resolution(date=conflict.date, chosen=None, rejected=conflict.candidates)

    chosen = conflict.get(choice)
    if chosen is None:
        raise NotFoundError(candidate_not_in_conflict(choice, conflict.date))
    rejected = tuple(c for c in conflict.candidates if c is not chosen)
    return Resolution(
        date=conflict.date,
        chosen=chosen,
        rejected=rejected,
        replaces=conflict.existing_deposit_ids,
    )


def find_conflict(scan: SheetScan, day: date) -> DateConflict:
    """Look up the pending conflict of a date.

    Raises:
        ConflictError: If the date has no pending conflict
    """
    for conflict in scan.conflicts:
        if conflict.date == day:
            return conflict
    raise ConflictError(no_conflict_for_date(day))

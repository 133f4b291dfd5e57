"""Day-sheet ingestion with same-date conflict resolution."""

import json
import logging
from datetime import date
from pathlib import Path
from typing import Optional

from dayrec.database.base import Database
from dayrec.domain.conflicts import (
    build_candidate,
    committed_sheet_dates,
    find_conflict,
    group_by_date,
    resolve_conflict,
)
from dayrec.domain.deposit import DepositService
from dayrec.domain.entities import ImportFileType, SheetCandidate, SheetScan
from dayrec.domain.errors import DomainError, NotFoundError, ValidationError
from dayrec.domain.extraction import slip_from_dict
from dayrec.domain.import_log import (
    ImportLogService,
    build_import_log_key,
    hash_content,
)

logger = logging.getLogger(__name__)

SHEET_PATTERN = "*.json"


class SheetImportService:
    """Service for importing a folder of extracted day sheets."""

    def __init__(self, db: Database):
        """Initialize sheet import service.

        Args:
            db: Database instance
        """
        self.db = db
        self.deposit_service = DepositService(db)
        self.import_log = ImportLogService(db)

    def _load_candidates(self, folder: Path) -> tuple[list[SheetCandidate], list[str], list[str]]:
        """Read every not-yet-imported sheet in a folder.

        Returns:
            Tuple of (candidates, already imported file names, error messages)
        """
        candidates = []
        already_imported = []
        errors = []
        for path in sorted(folder.glob(SHEET_PATTERN)):
            content = path.read_bytes()
            file_hash = hash_content(content)
            key = build_import_log_key(ImportFileType.DAY_SHEET, path.name, file_hash)
            if self.import_log.is_imported(key):
                already_imported.append(path.name)
                continue
            try:
                slip = slip_from_dict(json.loads(content.decode("utf-8-sig")))
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                errors.append(f"{path.name}: not a readable extraction file ({e})")
                continue
            except DomainError as e:
                errors.append(f"{path.name}: {e}")
                continue
            candidates.append(
                build_candidate(
                    name=path.name,
                    path=str(path),
                    modified_time_ms=path.stat().st_mtime * 1000,
                    content=content,
                    file_hash=file_hash,
                    slip=slip,
                )
            )
        return candidates, already_imported, errors

    def _log_entry(self, candidate: SheetCandidate, day: date, record_count: int):
        return self.import_log.build_entry(
            ImportFileType.DAY_SHEET,
            candidate.name,
            file_hash=candidate.file_hash,
            assigned_date=day,
            record_count=record_count,
        )

    def _commit_candidate(
        self,
        candidate: SheetCandidate,
        also_log: tuple[SheetCandidate, ...] = (),
        replaces: tuple[int, ...] = (),
    ) -> int:
        """Commit one candidate and log it (plus any extra candidates) atomically."""
        entries = [
            self._log_entry(c, candidate.resolved_date, record_count=1 if c is candidate else 0)
            for c in (candidate, *also_log)
        ]
        return self.deposit_service.commit_deposit(
            date=candidate.resolved_date,
            total=candidate.slip.total,
            breakdown=candidate.slip.breakdown,
            source_image=candidate.slip.source_image,
            source=candidate.name,
            log_entries=entries,
            replaces=replaces,
        )

    def _committed_dates(self) -> dict[date, tuple[int, ...]]:
        return committed_sheet_dates(self.db.list_deposits(), self.import_log.list_entries())

    def scan(
        self,
        folder: str,
        commit: bool = True,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> SheetScan:
        """Scan a folder, commit unambiguous sheets and surface conflicts.

        Every candidate is grouped by resolved date before anything is
        committed. Conflicting dates, including dates that already hold a
        sheet, are left pending for resolve().

        Args:
            folder: Folder holding slip extraction JSON files
            commit: If False, only report what would happen
            start_date: Ignore sheets dated before this day
            end_date: Ignore sheets dated after this day

        Returns:
            SheetScan with committed deposit IDs and pending conflicts

        Raises:
            NotFoundError: If the folder doesn't exist
        """
        root = Path(folder)
        if not root.is_dir():
            raise NotFoundError(f"Folder not found: {folder}")

        candidates, already_imported, errors = self._load_candidates(root)
        candidates = [
            c
            for c in candidates
            if c.resolved_date is None
            or (
                (start_date is None or c.resolved_date >= start_date)
                and (end_date is None or c.resolved_date <= end_date)
            )
        ]
        for candidate in candidates:
            if candidate.date_mismatch:
                logger.warning(
                    "%s: document date %s differs from the date in its file name",
                    candidate.name,
                    candidate.resolved_date.isoformat(),
                )

        grouped = group_by_date(candidates, self._committed_dates())

        committed = []
        if commit:
            for candidate in grouped.ready:
                try:
                    committed.append(self._commit_candidate(candidate))
                except ValidationError as e:
                    errors.append(f"{candidate.name}: {e}")

        for conflict in grouped.conflicts:
            if conflict.previously_imported:
                logger.info(
                    "%s already has a day sheet; %d new sheet(s) wait for a decision",
                    conflict.date.isoformat(),
                    len(conflict.candidates),
                )
            else:
                logger.info(
                    "%d day sheets resolve to %s; waiting for a decision",
                    len(conflict.candidates),
                    conflict.date.isoformat(),
                )

        return SheetScan(
            ready=grouped.ready,
            conflicts=grouped.conflicts,
            undated=grouped.undated,
            already_imported=tuple(already_imported),
            committed=tuple(committed),
            errors=tuple(errors),
        )

    def resolve(
        self,
        folder: str,
        day: date,
        choice: str,
        mark_rejected: bool = True,
    ) -> Optional[int]:
        """Commit the operator's choice for a conflicting date.

        With mark_rejected (the default) every candidate of the date is logged
        as imported, so a rejected sheet can never be imported on its own later.
        A chosen sheet replaces any deposit the date already holds; choosing
        KEEP_EXISTING keeps it and commits none of the new sheets.

        Args:
            folder: Folder that was scanned
            day: Conflicting date
            choice: File name or path of the chosen sheet, or KEEP_EXISTING
            mark_rejected: Log rejected candidates as imported too

        Returns:
            ID of the committed deposit, or of the kept deposit (None when the
            date holds no deposit)

        Raises:
            ConflictError: If the date has no pending conflict
            NotFoundError: If the choice is not a candidate for the date
        """
        scan = self.scan(folder, commit=False)
        conflict = find_conflict(scan, day)
        resolution = resolve_conflict(conflict, choice)

        if resolution.chosen is None:
            deposit_id = conflict.existing_deposit_ids[0] if conflict.existing_deposit_ids else None
            if mark_rejected:
                self.db.add_import_log_entries(
                    [self._log_entry(c, day, record_count=0) for c in resolution.rejected]
                )
        else:
            also_log = resolution.rejected if mark_rejected else ()
            deposit_id = self._commit_candidate(
                resolution.chosen, also_log=also_log, replaces=resolution.replaces
            )
            if resolution.replaces:
                logger.warning(
                    "Replaced deposit(s) %s for %s with %s",
                    ", ".join(str(i) for i in resolution.replaces),
                    day.isoformat(),
                    resolution.chosen.name,
                )

        if resolution.rejected and mark_rejected:
            logger.warning(
                "Marked rejected day sheets for %s as imported: %s",
                day.isoformat(),
                ", ".join(c.name for c in resolution.rejected),
            )
        return deposit_id

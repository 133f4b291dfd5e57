"""Import log: which source files have already been committed."""

import hashlib
import logging
import platform
from datetime import datetime, date, UTC
from typing import Iterable, Optional

from dayrec.database.base import Database
from dayrec.domain.entities import ImportFileType, ImportLogEntry

logger = logging.getLogger(__name__)


def hash_content(content: bytes) -> str:
    """Return the SHA-256 hex digest of raw file content."""
    return hashlib.sha256(content).hexdigest()


def build_import_log_key(
    file_type: ImportFileType,
    file_name: str,
    file_hash: Optional[str] = None,
    now: Optional[datetime] = None,
) -> str:
    """Build the content-identity key of an import.

    The content hash is preferred. Without one the key falls back to file name
    plus import timestamp, which never collides with a later import.
    """
    if file_hash:
        return f"{file_type.value}:{file_hash}"
    stamp = (now or datetime.now(UTC)).isoformat()
    return f"{file_type.value}:{file_name}:{stamp}"


def imported_day_sheet_dates(entries: Iterable[ImportLogEntry]) -> set[date]:
    """Dates assigned to day-sheet imports."""
    return {
        entry.date
        for entry in entries
        if entry.file_type == ImportFileType.DAY_SHEET and entry.date is not None
    }


def source_machine_name() -> str:
    """Name of the machine recording imports."""
    return platform.node() or "unknown"


class ImportLogService:
    """Service for recording and querying committed imports."""

    def __init__(self, db: Database):
        """Initialize import log service.

        Args:
            db: Database instance
        """
        self.db = db

    def is_imported(self, key: str) -> bool:
        """Check whether an import key has already been committed."""
        return self.db.get_import_log_entry(key) is not None

    def build_entry(
        self,
        file_type: ImportFileType,
        file_name: str,
        content: Optional[bytes] = None,
        file_hash: Optional[str] = None,
        assigned_date: Optional[date] = None,
        record_count: int = 0,
    ) -> ImportLogEntry:
        """Build an entry for a file about to be committed.

        Args:
            file_type: Kind of source file
            file_name: Original file name
            content: Raw file content, hashed for the identity key when given
            file_hash: Precomputed content hash, used when content is not given
            assigned_date: Business date the import was assigned to
            record_count: Number of records committed from the file

        Returns:
            ImportLogEntry (not yet persisted)
        """
        now = datetime.now(UTC)
        if content is not None:
            file_hash = hash_content(content)
        return ImportLogEntry(
            key=build_import_log_key(file_type, file_name, file_hash, now=now),
            date=assigned_date,
            imported_at=now,
            file_type=file_type,
            file_name=file_name,
            source_machine=source_machine_name(),
            record_count=record_count,
            file_hash=file_hash,
        )

    def record(self, entry: ImportLogEntry) -> None:
        """Persist an entry. Existing keys are left untouched."""
        if self.is_imported(entry.key):
            logger.debug("Import log already has %s", entry.key)
            return
        self.db.add_import_log_entries([entry])
        logger.info("Recorded import %s (%d records)", entry.key, entry.record_count)

    def list_entries(self) -> list[ImportLogEntry]:
        """List all entries, newest first."""
        return self.db.list_import_log_entries()

    def imported_dates(self) -> set[date]:
        """Dates covered by committed day-sheet imports."""
        return imported_day_sheet_dates(self.db.list_import_log_entries())

    def clear(self) -> int:
        """Remove every entry (full reset). Returns the number removed."""
        removed = self.db.clear_import_log()
        logger.warning("Cleared import log (%d entries)", removed)
        return removed

"""Bank transaction import domain service."""

import csv
import io
import json
import logging
from pathlib import Path
from typing import Any, Sequence

from dayrec.database.base import Database
from dayrec.domain.dedup import filter_new_transactions
from dayrec.domain.entities import ImportFileType, TransactionCandidate
from dayrec.domain.errors import DomainError, NotFoundError, ValidationError
from dayrec.domain.extraction import candidate_from_dict
from dayrec.domain.import_log import ImportLogService

logger = logging.getLogger(__name__)

# Bank CSV exports are read with fixed headers, matched case-insensitively
CSV_COLUMNS = ("date", "description", "amount")

# Tried in order; bank exports that are not UTF-8 are usually Windows-1252
TEXT_ENCODINGS = ("utf-8-sig", "cp1252")


def decode_bank_file(content: bytes, file_name: str) -> str:
    """Decode raw bank file content.

    Raises:
        ValidationError: If no supported encoding can read the file
    """
    for encoding in TEXT_ENCODINGS:
        try:
            text = content.decode(encoding)
        except UnicodeDecodeError:
            continue
        if encoding != TEXT_ENCODINGS[0]:
            logger.info("Read %s as %s", file_name, encoding)
        return text
    raise ValidationError(f"Could not decode {file_name}: not UTF-8 or Windows-1252 text")


def parse_bank_csv(text: str) -> tuple[list[TransactionCandidate], list[str]]:
    """Parse a ``Date,Description,Amount`` bank export.

    Returns:
        Tuple of (candidates in file order, row error messages)

    Raises:
        ValidationError: If the file has no header or lacks a required column
    """
    sample = text[:1024]
    try:
        delimiter = csv.Sniffer().sniff(sample, delimiters=",;\t").delimiter
    except csv.Error:
        delimiter = ","

    reader = csv.DictReader(io.StringIO(text), delimiter=delimiter)
    if reader.fieldnames is None:
        raise ValidationError("CSV file has no columns")

    columns = {name.strip().lower(): name for name in reader.fieldnames if name}
    missing = [col for col in CSV_COLUMNS if col not in columns]
    if missing:
        raise ValidationError(f"CSV file missing required columns: {', '.join(missing)}")

    candidates = []
    errors = []
    for row_num, row in enumerate(reader, start=2):  # Start at 2 (header is row 1)
        values = {col: (row.get(columns[col]) or "").strip() for col in CSV_COLUMNS}
        try:
            candidates.append(candidate_from_dict(values))
        except DomainError as e:
            errors.append(f"Row {row_num}: {e}")
    return candidates, errors


def parse_statement_json(text: str) -> tuple[list[TransactionCandidate], list[str]]:
    """Parse statement extraction output: a list of ``{date, description, amount}``.

    A top-level object with a ``transactions`` list is accepted too.

    Raises:
        ValidationError: If the document is not JSON or has no transaction list
    """
    try:
        data: Any = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Statement file is not valid JSON: {e}")
    if isinstance(data, dict):
        data = data.get("transactions")
    if not isinstance(data, list):
        raise ValidationError("Statement file must contain a list of transactions")

    candidates = []
    errors = []
    for index, item in enumerate(data, start=1):
        try:
            candidates.append(candidate_from_dict(item))
        except DomainError as e:
            errors.append(f"Item {index}: {e}")
    return candidates, errors


class BankImportService:
    """Service for importing bank statement lines."""

    def __init__(self, db: Database):
        """Initialize bank import service.

        Args:
            db: Database instance
        """
        self.db = db
        self.import_log = ImportLogService(db)

    def import_batch(
        self,
        content: bytes,
        file_name: str,
        file_type: ImportFileType,
        candidates: Sequence[TransactionCandidate],
    ) -> dict[str, Any]:
        """Commit one extracted batch.

        Content already present in the import log is a no-op, and candidates
        whose signature is already persisted (or repeated earlier in the batch)
        are skipped, so importing the same source twice adds nothing.

        Args:
            content: Raw bytes of the source file
            file_name: Source file name
            file_type: Kind of source file
            candidates: Extracted statement lines in source order

        Returns:
            Dict with import statistics:
            - imported: number of transactions committed
            - skipped: number of duplicate candidates
            - already_imported: True if the content was imported before
            - transaction_ids: IDs of committed transactions
        """
        entry = self.import_log.build_entry(file_type, file_name, content=content)
        if self.import_log.is_imported(entry.key):
            logger.info("Skipping %s: content already imported", file_name)
            return {
                "imported": 0,
                "skipped": len(candidates),
                "already_imported": True,
                "transaction_ids": [],
            }

        result = filter_new_transactions(candidates, self.db.list_transactions())
        entry = self.import_log.build_entry(
            file_type, file_name, content=content, record_count=len(result.accepted)
        )
        transaction_ids = self.db.add_transactions(result.accepted, log_entries=[entry])
        logger.info(
            "Imported %d transactions from %s (%d duplicates skipped)",
            len(transaction_ids),
            file_name,
            len(result.skipped),
        )
        return {
            "imported": len(transaction_ids),
            "skipped": len(result.skipped),
            "already_imported": False,
            "transaction_ids": transaction_ids,
        }

    def import_file(self, file_path: str) -> dict[str, Any]:
        """Import a bank CSV export or a statement extraction JSON file.

        Args:
            file_path: Path to a ``.csv`` or ``.json`` file

        Returns:
            Import statistics as returned by import_batch, plus ``errors``
            (row-level messages for lines that could not be read)

        Raises:
            NotFoundError: If the file doesn't exist
            ValidationError: If the file type is unsupported or unreadable
        """
        path = Path(file_path)
        if not path.exists():
            raise NotFoundError(f"File not found: {file_path}")

        suffix = path.suffix.lower()
        if suffix not in (".csv", ".json"):
            raise ValidationError(f"Unsupported bank file type: '{path.suffix}'")

        content = path.read_bytes()
        text = decode_bank_file(content, path.name)
        if suffix == ".csv":
            file_type = ImportFileType.BANK_CSV
            candidates, errors = parse_bank_csv(text)
        else:
            file_type = ImportFileType.BANK_STATEMENT_PDF
            candidates, errors = parse_statement_json(text)

        result = self.import_batch(content, path.name, file_type, candidates)
        result["errors"] = errors
        return result

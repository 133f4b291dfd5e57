"""JSON snapshot of all persisted collections.

Amounts are written as two-decimal strings and dates as ISO strings so a
snapshot round-trips the entities exactly. When loading, each collection is
parsed on its own: a malformed collection (or an unsupported schema version)
is logged and treated as empty so a damaged backup never blocks startup.
"""

import json
import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Callable, TypeVar

from dayrec.database.base import Database
from dayrec.database.models import SCHEMA_VERSION
from dayrec.domain.entities import (
    BREAKDOWN_FIELDS,
    BankTransaction,
    CardSplit,
    DepositBreakdown,
    DepositRecord,
    DepositStatus,
    ImportFileType,
    ImportLogEntry,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Snapshot:
    """All collections at one point in time."""

    deposits: tuple[DepositRecord, ...] = ()
    transactions: tuple[BankTransaction, ...] = ()
    import_log: tuple[ImportLogEntry, ...] = ()
    schema_version: int = SCHEMA_VERSION


def take_snapshot(db: Database) -> Snapshot:
    """Read every collection from the database."""
    return Snapshot(
        deposits=tuple(db.list_deposits()),
        transactions=tuple(db.list_transactions()),
        import_log=tuple(db.list_import_log_entries()),
    )


def _money(value: Decimal) -> str:
    return f"{value:.2f}"


def _breakdown_to_dict(breakdown: DepositBreakdown) -> dict[str, Any]:
    data: dict[str, Any] = {name: _money(getattr(breakdown, name)) for name in BREAKDOWN_FIELDS}
    if breakdown.check_list is not None:
        data["check_list"] = [_money(v) for v in breakdown.check_list]
    if breakdown.card_split is not None:
        split = breakdown.card_split
        data["card_split"] = {
            "visa": _money(split.visa),
            "mastercard": _money(split.mastercard),
            "amex": _money(split.amex),
            "discover": _money(split.discover),
        }
    return data


def snapshot_to_dict(snapshot: Snapshot) -> dict[str, Any]:
    """Serialize a snapshot to plain JSON types."""
    return {
        "schema_version": snapshot.schema_version,
        "deposits": [
            {
                "id": d.id,
                "date": d.date.isoformat(),
                "total": _money(d.total),
                "breakdown": _breakdown_to_dict(d.breakdown),
                "status": d.status.value,
                "source_image": d.source_image,
                "notes": d.notes,
            }
            for d in snapshot.deposits
        ],
        "transactions": [
            {
                "id": t.id,
                "date": t.date.isoformat(),
                "description": t.description,
                "amount": _money(t.amount),
                "payment_type": t.payment_type,
                "category": t.category,
            }
            for t in snapshot.transactions
        ],
        "import_log": {
            e.key: {
                "date": e.date.isoformat() if e.date else None,
                "imported_at": e.imported_at.isoformat(),
                "file_type": e.file_type.value,
                "file_name": e.file_name,
                "source_machine": e.source_machine,
                "record_count": e.record_count,
                "file_hash": e.file_hash,
            }
            for e in snapshot.import_log
        },
    }


def _breakdown_from_dict(data: dict[str, Any]) -> DepositBreakdown:
    fields: dict[str, Any] = {name: Decimal(data.get(name, "0")) for name in BREAKDOWN_FIELDS}
    if data.get("check_list") is not None:
        fields["check_list"] = tuple(Decimal(v) for v in data["check_list"])
    if data.get("card_split") is not None:
        split = data["card_split"]
        fields["card_split"] = CardSplit(
            visa=Decimal(split.get("visa", "0")),
            mastercard=Decimal(split.get("mastercard", "0")),
            amex=Decimal(split.get("amex", "0")),
            discover=Decimal(split.get("discover", "0")),
        )
    return DepositBreakdown(**fields)


def _deposit_from_dict(data: dict[str, Any]) -> DepositRecord:
    return DepositRecord(
        id=int(data["id"]),
        date=date.fromisoformat(data["date"]),
        total=Decimal(data["total"]),
        breakdown=_breakdown_from_dict(data.get("breakdown") or {}),
        status=DepositStatus(data.get("status", DepositStatus.PENDING.value)),
        source_image=data.get("source_image"),
        notes=data.get("notes"),
    )


def _transaction_from_dict(data: dict[str, Any]) -> BankTransaction:
    return BankTransaction(
        id=int(data["id"]),
        date=date.fromisoformat(data["date"]),
        description=data.get("description") or "",
        amount=Decimal(data["amount"]),
        payment_type=data.get("payment_type"),
        category=data.get("category"),
    )


# File type names used by older stores
_LEGACY_FILE_TYPES = {"day_sheet_pdf": ImportFileType.DAY_SHEET.value}


def _log_entry_from_item(item: tuple[str, dict[str, Any]]) -> ImportLogEntry:
    key, data = item
    # Entries written before file types were tracked are day sheets
    file_type = data.get("file_type") or ImportFileType.DAY_SHEET.value
    if file_type in _LEGACY_FILE_TYPES:
        file_type = _LEGACY_FILE_TYPES[file_type]
    for legacy, current in _LEGACY_FILE_TYPES.items():
        if key.startswith(f"{legacy}:"):
            key = f"{current}:{key[len(legacy) + 1:]}"
    return ImportLogEntry(
        key=key,
        date=date.fromisoformat(data["date"]) if data.get("date") else None,
        imported_at=datetime.fromisoformat(data["imported_at"]),
        file_type=ImportFileType(file_type),
        file_name=data.get("file_name"),
        source_machine=data.get("source_machine"),
        record_count=int(data.get("record_count") or 0),
        file_hash=data.get("file_hash"),
    )


def _parse_collection(
    name: str, items: Any, parse: Callable[[Any], T]
) -> tuple[T, ...]:
    """Parse one collection, or log and return nothing if it is malformed."""
    try:
        return tuple(parse(item) for item in items)
    except (KeyError, TypeError, ValueError, AttributeError, InvalidOperation) as e:
        logger.warning("Ignoring malformed %s in snapshot: %r", name, e)
        return ()


def snapshot_from_dict(data: Any) -> Snapshot:
    """Deserialize a snapshot, treating malformed collections as empty."""
    if not isinstance(data, dict):
        logger.warning("Ignoring malformed snapshot: expected an object")
        return Snapshot()

    version = data.get("schema_version")
    if version != SCHEMA_VERSION:
        logger.warning(
            "Ignoring snapshot with schema version %r (supported: %s)", version, SCHEMA_VERSION
        )
        return Snapshot()

    import_log = data.get("import_log", {})
    return Snapshot(
        deposits=_parse_collection("deposits", data.get("deposits", []), _deposit_from_dict),
        transactions=_parse_collection(
            "transactions", data.get("transactions", []), _transaction_from_dict
        ),
        import_log=_parse_collection(
            "import_log",
            import_log.items() if isinstance(import_log, dict) else None,
            _log_entry_from_item,
        ),
    )


def save_snapshot(snapshot: Snapshot, path: str | Path) -> None:
    """Write a snapshot to a JSON file."""
    Path(path).write_text(json.dumps(snapshot_to_dict(snapshot), indent=2), encoding="utf-8")


def load_snapshot(path: str | Path) -> Snapshot:
    """Read a snapshot file.

    Raises:
        FileNotFoundError: If the file does not exist
    """
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        logger.warning("Ignoring unreadable snapshot %s: %s", path, e)
        return Snapshot()
    return snapshot_from_dict(data)


def restore_snapshot(db: Database, snapshot: Snapshot) -> None:
    """Replace database contents with a snapshot."""
    db.replace_all(snapshot.deposits, snapshot.transactions, snapshot.import_log)
    logger.info(
        "Restored %d deposits, %d transactions, %d import log entries",
        len(snapshot.deposits),
        len(snapshot.transactions),
        len(snapshot.import_log),
    )

"""Tests for JSON snapshots."""

import json
from datetime import date
from decimal import Decimal

import pytest

from dayrec.database.snapshot import (
    Snapshot,
    load_snapshot,
    restore_snapshot,
    save_snapshot,
    snapshot_from_dict,
    snapshot_to_dict,
    take_snapshot,
)
from dayrec.domain.entities import (
    CardSplit,
    DepositBreakdown,
    ImportFileType,
    TransactionCandidate,
)
from dayrec.domain.import_log import ImportLogService


@pytest.fixture
def populated_db(temp_db, deposit_service):
    breakdown = DepositBreakdown(
        cash=Decimal("100.00"),
        checks=Decimal("30.00"),
        check_list=(Decimal("30.00"),),
        credit_cards=Decimal("400.00"),
        card_split=CardSplit(visa=Decimal("300.00"), amex=Decimal("100.00")),
    )
    log = ImportLogService(temp_db)
    deposit_service.commit_deposit(
        date=date(2024, 5, 1),
        total=Decimal("530.00"),
        breakdown=breakdown,
        source_image="scan-001.png",
        log_entries=[
            log.build_entry(
                ImportFileType.DAY_SHEET, "a.json", content=b"a", assigned_date=date(2024, 5, 1)
            )
        ],
    )
    temp_db.add_transactions(
        [TransactionCandidate(date(2024, 5, 3), "DEPOSIT", Decimal("530.00"))],
        log_entries=[log.build_entry(ImportFileType.BANK_CSV, "may.csv", content=b"csv")],
    )
    return temp_db


def test_export_and_restore(populated_db, tmp_path):
    original = take_snapshot(populated_db)
    path = tmp_path / "backup.json"
    save_snapshot(original, path)

    restore_snapshot(populated_db, Snapshot())
    assert populated_db.list_deposits() == []

    restored = load_snapshot(path)
    restore_snapshot(populated_db, restored)

    assert populated_db.list_deposits() == list(original.deposits)
    assert populated_db.list_transactions() == list(original.transactions)
    assert [e.key for e in populated_db.list_import_log_entries()] == [
        e.key for e in original.import_log
    ]


def test_document_shape(populated_db):
    data = snapshot_to_dict(take_snapshot(populated_db))

    assert data["schema_version"] == 1
    assert data["deposits"][0]["total"] == "530.00"
    assert data["deposits"][0]["breakdown"]["card_split"]["visa"] == "300.00"
    assert data["transactions"][0]["date"] == "2024-05-03"
    assert isinstance(data["import_log"], dict)
    assert all(key.startswith(("day_sheet:", "bank_csv:")) for key in data["import_log"])


def test_malformed_collection_is_empty(populated_db, caplog):
    data = snapshot_to_dict(take_snapshot(populated_db))
    data["deposits"] = [{"id": 1, "date": "yesterday-ish", "total": "1.00"}]

    with caplog.at_level("WARNING"):
        snapshot = snapshot_from_dict(data)

    assert snapshot.deposits == ()
    assert len(snapshot.transactions) == 1
    assert len(snapshot.import_log) == 2
    assert "malformed deposits" in caplog.text


def test_import_log_without_file_type_is_a_day_sheet():
    snapshot = snapshot_from_dict(
        {
            "schema_version": 1,
            "import_log": {
                "legacy": {"date": "2024-05-01", "imported_at": "2024-05-01T18:00:00"}
            },
        }
    )

    assert snapshot.import_log[0].file_type == ImportFileType.DAY_SHEET
    assert snapshot.import_log[0].date == date(2024, 5, 1)


def test_legacy_day_sheet_file_type_is_renamed():
    snapshot = snapshot_from_dict(
        {
            "schema_version": 1,
            "import_log": {
                "day_sheet_pdf:abc123": {
                    "date": "2024-05-01",
                    "imported_at": "2024-05-01T18:00:00",
                    "file_type": "day_sheet_pdf",
                }
            },
        }
    )

    entry = snapshot.import_log[0]
    assert entry.file_type == ImportFileType.DAY_SHEET
    assert entry.key == "day_sheet:abc123"


@pytest.mark.parametrize(
    "document",
    [
        [],
        {"schema_version": 99, "deposits": []},
        {"deposits": []},
    ],
)
def test_unsupported_documents_are_empty(document, caplog):
    with caplog.at_level("WARNING"):
        snapshot = snapshot_from_dict(document)

    assert snapshot == Snapshot()
    assert "Ignoring" in caplog.text


def test_unreadable_file_loads_empty(tmp_path, caplog):
    path = tmp_path / "backup.json"
    path.write_text("{truncated", encoding="utf-8")

    with caplog.at_level("WARNING"):
        assert load_snapshot(path) == Snapshot()


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_snapshot(tmp_path / "missing.json")


def test_saved_file_is_plain_json(populated_db, tmp_path):
    path = tmp_path / "backup.json"
    save_snapshot(take_snapshot(populated_db), path)

    data = json.loads(path.read_text(encoding="utf-8"))
    assert len(data["deposits"]) == 1

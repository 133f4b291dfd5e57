"""Integration tests for end-to-end workflows."""

import json

from dayrec.cli.main import cli


def invoke(cli_runner, temp_db, *args, input=None):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args], input=input)


def write_sheet(folder, name, data):
    (folder / name).write_text(json.dumps(data), encoding="utf-8")


def test_full_workflow(cli_runner, temp_db, fixtures_dir, tmp_path):
    """Test complete workflow: sheets → conflict → bank import → reconcile → summary."""
    sheets = tmp_path / "sheets"
    sheets.mkdir()
    write_sheet(sheets, "may01.json", {"date": "2024-05-01", "total": "530.00", "breakdown": {"cash": "130.00", "creditCards": "400.00"}})
    write_sheet(sheets, "may02-a.json", {"date": "2024-05-02", "total": "250.00", "breakdown": {"cash": "250.00"}})
    write_sheet(sheets, "may02-b.json", {"date": "2024-05-02", "total": "260.00", "breakdown": {"cash": "260.00"}})

    # Step 1: Scan sheets; one date is ambiguous
    result = invoke(cli_runner, temp_db, "scan-sheets", str(sheets))
    assert result.exit_code == 0
    assert "Imported: 1 deposit(s)" in result.output
    assert "Conflicts: 1 date(s)" in result.output
    assert "may02-a.json" in result.output

    # Step 2: Resolve the conflict
    result = invoke(
        cli_runner, temp_db, "resolve-sheet", str(sheets), "--date", "2024-05-02", "--choose", "may02-a.json"
    )
    assert result.exit_code == 0
    assert "Committed may02-a.json" in result.output

    # Step 3: Import the bank export twice
    csv_file = str(fixtures_dir / "bank_export.csv")
    result = invoke(cli_runner, temp_db, "import-bank", csv_file)
    assert result.exit_code == 0
    assert "Imported: 5 transactions" in result.output
    result = invoke(cli_runner, temp_db, "import-bank", csv_file)
    assert result.exit_code == 0
    assert "already imported" in result.output

    # Step 4: Reconcile May
    result = invoke(cli_runner, temp_db, "reconcile", "--month", "2024-05")
    assert result.exit_code == 0
    assert "Reconciliation for May 2024" in result.output
    assert result.output.count("matched") >= 2
    assert "orphan" in result.output

    # Step 5: Yearly summary and coverage
    result = invoke(cli_runner, temp_db, "summary", "--year", "2024")
    assert result.exit_code == 0
    assert "May" in result.output

    result = invoke(cli_runner, temp_db, "coverage", "--year", "2024")
    assert result.exit_code == 0
    assert "Day-sheet coverage for 2024" in result.output

    # Step 6: The import log lists every file
    result = invoke(cli_runner, temp_db, "import-log", "list")
    assert result.exit_code == 0
    assert "may02-b.json" in result.output
    assert "bank_export.csv" in result.output


def test_deposit_commands(cli_runner, temp_db):
    result = invoke(
        cli_runner, temp_db, "deposit", "add", "--date", "2024-05-01", "--cash", "120", "--credit-cards", "410.00"
    )
    assert result.exit_code == 0
    assert "$530.00" in result.output

    result = invoke(cli_runner, temp_db, "deposit", "list", "--verbose")
    assert result.exit_code == 0
    assert "2024-05-01" in result.output
    assert "credit cards" in result.output

    result = invoke(cli_runner, temp_db, "deposit", "verify", "1")
    assert result.exit_code == 0
    assert "Verified deposit 1" in result.output

    result = invoke(cli_runner, temp_db, "deposit", "delete", "1", "--yes")
    assert result.exit_code == 0

    result = invoke(cli_runner, temp_db, "deposit", "list")
    assert "No deposits found." in result.output


def test_domain_errors_exit_with_failure(cli_runner, temp_db, tmp_path):
    result = invoke(cli_runner, temp_db, "deposit", "verify", "42")
    assert result.exit_code == 1
    assert "Error: Deposit 42 not found" in result.output

    sheets = tmp_path / "sheets"
    sheets.mkdir()
    result = invoke(
        cli_runner, temp_db, "resolve-sheet", str(sheets), "--date", "2024-05-02", "--choose", "x.json"
    )
    assert result.exit_code == 1
    assert "No pending conflict for 2024-05-02" in result.output

    result = invoke(cli_runner, temp_db, "deposit", "add", "--date", "2024-05-01", "--checks", "10", "--total", "abc")
    assert result.exit_code == 1


def test_export_and_restore(cli_runner, temp_db, tmp_path):
    invoke(cli_runner, temp_db, "deposit", "add", "--date", "2024-05-01", "--cash", "99.00")
    backup = tmp_path / "backup.json"

    result = invoke(cli_runner, temp_db, "export", str(backup))
    assert result.exit_code == 0
    assert json.loads(backup.read_text(encoding="utf-8"))["deposits"][0]["total"] == "99.00"

    invoke(cli_runner, temp_db, "deposit", "delete", "1", "--yes")
    result = invoke(cli_runner, temp_db, "restore", str(backup), input="y\n")
    assert result.exit_code == 0
    assert "Restored 1 deposits" in result.output

    result = invoke(cli_runner, temp_db, "deposit", "list")
    assert "$99.00" in result.output


def test_import_log_clear(cli_runner, temp_db, fixtures_dir):
    invoke(cli_runner, temp_db, "import-bank", str(fixtures_dir / "bank_export.csv"))

    result = invoke(cli_runner, temp_db, "import-log", "clear", "--yes")
    assert result.exit_code == 0
    assert "Removed 1 import log entries" in result.output

    # Lines are still deduplicated by signature
    result = invoke(cli_runner, temp_db, "import-bank", str(fixtures_dir / "bank_export.csv"))
    assert "Imported: 0 transactions" in result.output
    assert "Skipped: 5 duplicates" in result.output


def test_settlement_days_option(cli_runner, temp_db, tmp_path):
    invoke(cli_runner, temp_db, "deposit", "add", "--date", "2024-05-01", "--cash", "530.00")
    bank = tmp_path / "late.csv"
    bank.write_text("Date,Description,Amount\n2024-05-20,DEPOSIT,530.00\n", encoding="utf-8")
    invoke(cli_runner, temp_db, "import-bank", str(bank))

    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "--settlement-days", "5", "reconcile", "--month", "2024-05"],
    )
    assert result.exit_code == 0
    assert "unmatched" in result.output
    assert "orphan" in result.output


def test_help_does_not_open_database(cli_runner, tmp_path):
    db_path = tmp_path / "never" / "created.db"

    result = cli_runner.invoke(cli, ["--db-path", str(db_path), "--help"])

    assert result.exit_code == 0
    assert "scan-sheets" in result.output
    assert not db_path.exists()


def test_sheet_for_imported_date_is_resolved_from_cli(cli_runner, temp_db, tmp_path):
    sheets = tmp_path / "sheets"
    sheets.mkdir()
    write_sheet(sheets, "may06.json", {"date": "2024-05-06", "total": "100.00", "breakdown": {"cash": "100.00"}})
    invoke(cli_runner, temp_db, "scan-sheets", str(sheets))
    write_sheet(sheets, "may06-late.json", {"date": "2024-05-06", "total": "120.00", "breakdown": {"cash": "120.00"}})

    result = invoke(cli_runner, temp_db, "scan-sheets", str(sheets))
    assert result.exit_code == 0
    assert "Imported: 0 deposit(s)" in result.output
    assert "2024-05-06: already has deposit 1" in result.output
    assert "--choose existing" in result.output

    result = invoke(
        cli_runner, temp_db, "resolve-sheet", str(sheets), "--date", "2024-05-06", "--choose", "existing"
    )
    assert result.exit_code == 0
    assert "Kept deposit 1 for 2024-05-06" in result.output

    result = invoke(cli_runner, temp_db, "deposit", "list")
    assert "$100.00" in result.output
    assert "$120.00" not in result.output


def test_scan_sheets_date_range_and_mismatch(cli_runner, temp_db, tmp_path):
    sheets = tmp_path / "sheets"
    sheets.mkdir()
    write_sheet(sheets, "2024-05-07.json", {"date": "2024-05-06", "total": "10.00"})
    write_sheet(sheets, "june.json", {"date": "2024-06-03", "total": "20.00"})

    result = invoke(
        cli_runner, temp_db, "scan-sheets", str(sheets), "--from", "2024-05-01", "--to", "2024-05-31"
    )
    assert result.exit_code == 0
    assert "Imported: 1 deposit(s)" in result.output
    assert "Date mismatch in 1 file(s)" in result.output

    result = invoke(
        cli_runner, temp_db, "scan-sheets", str(sheets), "--from", "2024-06-30", "--to", "2024-06-01"
    )
    assert result.exit_code == 1
    assert "--from date must be on or before --to date" in result.output
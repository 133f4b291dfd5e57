"""Shared pytest fixtures for dayrec tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
from pathlib import Path
import pytest

from dayrec.database.factories import create_sqlite_database
from dayrec.domain.bank_import import BankImportService
from dayrec.domain.deposit import DepositService
from dayrec.domain.entities import DepositBreakdown
from dayrec.domain.sheet_import import SheetImportService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def deposit_service(temp_db):
    """Create a DepositService with a temporary database."""
    return DepositService(temp_db)


@pytest.fixture
def bank_import_service(temp_db):
    """Create a BankImportService with a temporary database."""
    return BankImportService(temp_db)


@pytest.fixture
def sheet_import_service(temp_db):
    """Create a SheetImportService with a temporary database."""
    return SheetImportService(temp_db)


@pytest.fixture
def sample_deposits(deposit_service):
    """Commit three May 2024 deposits and return their IDs."""
    ids = []
    for day, cash, cards in (
        (date(2024, 5, 1), "130.00", "400.00"),
        (date(2024, 5, 2), "50.00", "200.00"),
        (date(2024, 5, 3), "0.00", "75.25"),
    ):
        breakdown = DepositBreakdown(cash=Decimal(cash), credit_cards=Decimal(cards))
        ids.append(
            deposit_service.commit_deposit(
                date=day, total=breakdown.subtotal(), breakdown=breakdown
            )
        )
    return ids


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"

"""Tests for the top-level package exports."""

import pytest

import dayrec


def test_lazy_exports():
    from dayrec.cli.main import main
    from dayrec.database.factories import create_sqlite_database
    from dayrec.domain.reconciliation import ReconciliationService

    assert dayrec.main is main
    assert dayrec.create_sqlite_database is create_sqlite_database
    assert dayrec.ReconciliationService is ReconciliationService
    assert dayrec.__version__ == "0.1.0"


def test_unknown_attribute():
    with pytest.raises(AttributeError):
        dayrec.not_a_thing

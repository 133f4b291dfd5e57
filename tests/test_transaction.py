"""Domain tests for transaction service."""

from datetime import date
from decimal import Decimal

import pytest

from dayrec.domain.entities import TransactionCandidate
from dayrec.domain.errors import NotFoundError, ValidationError
from dayrec.domain.transaction import TransactionService


@pytest.fixture
def transaction_ids(temp_db):
    return temp_db.add_transactions(
        [
            TransactionCandidate(date(2024, 5, 3), "VISA SETTLEMENT", Decimal("400.00")),
            TransactionCandidate(date(2024, 5, 4), "SERVICE FEE", Decimal("-15.00")),
        ]
    )


def test_list_credits_only(temp_db, transaction_ids):
    service = TransactionService(temp_db)

    assert len(service.list_transactions()) == 2
    credits = service.list_transactions(credits_only=True)
    assert [t.description for t in credits] == ["VISA SETTLEMENT"]


def test_set_and_clear_payment_type(temp_db, transaction_ids):
    service = TransactionService(temp_db)

    service.set_payment_type(transaction_ids[0], "credit_cards")
    assert service.get_transaction(transaction_ids[0]).payment_type == "credit_cards"

    service.set_payment_type(transaction_ids[0], None)
    assert service.get_transaction(transaction_ids[0]).payment_type is None


def test_set_payment_type_validation(temp_db, transaction_ids):
    service = TransactionService(temp_db)

    with pytest.raises(ValidationError) as excinfo:
        service.set_payment_type(transaction_ids[0], "bitcoin")
    assert "Unknown payment type" in str(excinfo.value)

    with pytest.raises(NotFoundError):
        service.set_payment_type(999, "cash")


def test_transaction_commands(cli_runner, temp_db, transaction_ids):
    from dayrec.cli.main import cli

    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "transaction", "set-type", str(transaction_ids[0]), "credit_cards"]
    )
    assert result.exit_code == 0

    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "transaction", "list", "--credits"]
    )
    assert result.exit_code == 0
    assert "credit_cards" in result.output
    assert "SERVICE FEE" not in result.output

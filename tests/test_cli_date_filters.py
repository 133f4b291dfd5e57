"""Tests for CLI month resolution helper."""

from datetime import date

import click
import pytest

from dayrec.cli.date_filters import resolve_cli_month
from dayrec.utils.date_parser import get_date_range


def _ctx() -> click.Context:
    return click.Context(click.Command("test"))


def test_resolve_cli_month_rejects_multiple_periods(capsys):
    period_flags = {"this-month": True, "last-month": True}

    with pytest.raises(click.exceptions.Exit) as excinfo:
        resolve_cli_month(_ctx(), month=None, period_flags=period_flags)

    assert excinfo.value.exit_code == 1
    err = capsys.readouterr().err
    assert "Only one period option" in err


def test_resolve_cli_month_rejects_period_with_month(capsys):
    with pytest.raises(click.exceptions.Exit) as excinfo:
        resolve_cli_month(_ctx(), month="2024-05", period_flags={"this-month": True})

    assert excinfo.value.exit_code == 1
    assert "cannot be combined" in capsys.readouterr().err


def test_resolve_cli_month_invalid_month(capsys):
    with pytest.raises(click.exceptions.Exit):
        resolve_cli_month(_ctx(), month="2024-13", period_flags={})

    assert "Invalid month" in capsys.readouterr().err


def test_resolve_cli_month_explicit():
    assert resolve_cli_month(_ctx(), month="2024-05", period_flags={"this-month": False}) == (
        2024,
        5,
    )


def test_resolve_cli_month_uses_period():
    start, _ = get_date_range("last-month")

    result = resolve_cli_month(_ctx(), month=None, period_flags={"last-month": True})

    assert result == (start.year, start.month)


def test_resolve_cli_month_defaults_to_current_month():
    today = date.today()

    assert resolve_cli_month(_ctx(), month=None, period_flags={}) == (today.year, today.month)

"""Tests for CLI error reporting helpers."""

import click
import pytest

from dayrec.cli.error_handling import echo_row_errors, handle_domain_error
from dayrec.domain.errors import ConflictError, MissingDateError, NotFoundError


def _failing_command(error):
    @click.command()
    @click.pass_context
    def command(ctx):
        handle_domain_error(ctx, error)

    return command


@pytest.mark.parametrize(
    "error, hint",
    [
        (MissingDateError("Missing date"), "Hint: Put the date in the file name"),
        (ConflictError("No pending conflict"), "Hint: Run 'dayrec scan-sheets"),
    ],
)
def test_actionable_errors_carry_a_hint(cli_runner, error, hint):
    result = cli_runner.invoke(_failing_command(error))

    assert result.exit_code == 1
    assert f"Error: {error}" in result.output
    assert hint in result.output


def test_other_errors_have_no_hint(cli_runner):
    result = cli_runner.invoke(_failing_command(NotFoundError("Deposit 7 not found")))

    assert result.exit_code == 1
    assert "Error: Deposit 7 not found" in result.output
    assert "Hint:" not in result.output


def test_echo_row_errors(capsys):
    echo_row_errors([])
    assert capsys.readouterr().out == ""

    echo_row_errors(["Row 2: Missing amount", "Row 4: Missing date"])
    captured = capsys.readouterr()
    assert "Errors: 2" in captured.out
    assert "Row 2: Missing amount" in captured.err
    assert "Row 4: Missing date" in captured.err

"""CLI error reporting for dayrec commands."""

from typing import Sequence

import click

from dayrec.domain.errors import ConflictError, DomainError, MissingDateError

# Follow-up advice printed under errors the operator can act on
_HINTS = {
    MissingDateError: "Put the date in the file name (YYYY-MM-DD) or in the sheet's 'date' field.",
    ConflictError: "Run 'dayrec scan-sheets FOLDER --dry-run' to list pending conflicts.",
}


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error, with a hint where one applies, and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    for error_type, hint in _HINTS.items():
        if isinstance(error, error_type):
            click.echo(f"Hint: {hint}", err=True)
            break
    ctx.exit(1)


def echo_row_errors(errors: Sequence[str], indent: str = "  ") -> None:
    """Print the count of per-row or per-file errors, then each one on stderr."""
    if not errors:
        return
    click.echo(f"{indent}Errors: {len(errors)}")
    for error in errors:
        click.echo(f"{indent}  {error}", err=True)

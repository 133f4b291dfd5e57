"""Bank statement import command."""

import click
from dayrec.cli.error_handling import echo_row_errors, handle_domain_error
from dayrec.domain.bank_import import BankImportService
from dayrec.domain.errors import DomainError


@click.command("import-bank")
@click.argument("bank_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def import_bank(ctx, bank_file: str):
    """Import bank transactions from a CSV export or statement JSON file.

    CSV files need Date, Description and Amount columns. Re-importing the
    same file adds nothing.
    """
    db = ctx.obj["db"]
    service = BankImportService(db)

    try:
        result = service.import_file(bank_file)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if result["already_imported"]:
        click.echo("File was already imported; nothing to do.")
        return

    click.echo("\nImport complete:")
    click.echo(f"  Imported: {result['imported']} transactions")
    click.echo(f"  Skipped: {result['skipped']} duplicates")
    echo_row_errors(result["errors"])


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_bank)

"""Main CLI entry point."""

import logging

import click
from dayrec.config import DB_PATH_ENV, LOG_LEVEL_ENV, SETTLEMENT_DAYS_ENV, load_settings
from dayrec.database.factories import create_sqlite_database

# Import and register all commands at module level
from dayrec.cli.commands import (
    backup,
    deposit,
    import_cmd,
    import_log_cmd,
    reconcile,
    sheets,
    transaction,
)

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help=f"Path to database file (overrides {DB_PATH_ENV} environment variable)",
    envvar=DB_PATH_ENV,
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help=f"Logging level (overrides {LOG_LEVEL_ENV}, default WARNING)",
    envvar=LOG_LEVEL_ENV,
)
@click.option(
    "--settlement-days",
    type=click.IntRange(min=0),
    help=f"Days a bank credit may lag its deposit (overrides {SETTLEMENT_DAYS_ENV}, default 45)",
    envvar=SETTLEMENT_DAYS_ENV,
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str | None, settlement_days: int | None):
    """Dayrec - Deposit reconciliation for day sheets and bank statements.

    Import day-sheet extractions and bank exports, then compare daily
    deposits against bank credits month by month.
    """
    ctx.ensure_object(dict)

    try:
        settings = load_settings()
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    logging.basicConfig(level=(log_level or settings.log_level).upper(), format=LOG_FORMAT)
    ctx.obj["settlement_days"] = (
        settlement_days if settlement_days is not None else settings.settlement_days
    )

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path or settings.database_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
import_cmd.register_commands(cli)
sheets.register_commands(cli)
deposit.register_commands(cli)
reconcile.register_commands(cli)
import_log_cmd.register_commands(cli)
backup.register_commands(cli)
transaction.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()

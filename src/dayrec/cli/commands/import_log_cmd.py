"""Import log commands."""

import click
from dayrec.domain.import_log import ImportLogService


@click.group()
def import_log_group():
    """Inspect or reset the record of imported files."""
    pass


@import_log_group.command("list")
@click.pass_context
def list_entries(ctx):
    """List imported files, newest first."""
    service = ImportLogService(ctx.obj["db"])

    entries = service.list_entries()
    if not entries:
        click.echo("Import log is empty.")
        return

    click.echo(f"\n{'Imported at':<20} {'Type':<14} {'Date':<12} {'Records':>7}  File")
    click.echo("-" * 80)
    for entry in entries:
        click.echo(
            f"{entry.imported_at.strftime('%Y-%m-%d %H:%M'):<20} {entry.file_type.value:<14} "
            f"{entry.date.isoformat() if entry.date else '':<12} {entry.record_count:>7}  "
            f"{entry.file_name or ''}"
        )


@import_log_group.command("clear")
@click.option("--yes", is_flag=True, help="Skip confirmation")
@click.pass_context
def clear_entries(ctx, yes: bool):
    """Forget every imported file so it can be imported again.

    Deposits and transactions are kept; bank lines are still deduplicated.
    """
    if not yes:
        click.confirm("Clear the whole import log?", abort=True)

    removed = ImportLogService(ctx.obj["db"]).clear()
    click.echo(f"Removed {removed} import log entries")


def register_commands(cli):
    """Register import log commands with main CLI."""
    cli.add_command(import_log_group, name="import-log")

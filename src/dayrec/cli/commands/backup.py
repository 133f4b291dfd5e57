"""Snapshot export and restore commands."""

import click
from dayrec.database.snapshot import load_snapshot, restore_snapshot, save_snapshot, take_snapshot


@click.command("export")
@click.argument("output_file", type=click.Path(dir_okay=False))
@click.pass_context
def export_snapshot(ctx, output_file: str):
    """Write every deposit, transaction and import log entry to a JSON file."""
    snapshot = take_snapshot(ctx.obj["db"])
    save_snapshot(snapshot, output_file)
    click.echo(
        f"Exported {len(snapshot.deposits)} deposits, {len(snapshot.transactions)} transactions "
        f"and {len(snapshot.import_log)} import log entries to {output_file}"
    )


@click.command("restore")
@click.argument("snapshot_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--yes", is_flag=True, help="Skip confirmation")
@click.pass_context
def restore(ctx, snapshot_file: str, yes: bool):
    """Replace all data with the contents of a JSON snapshot.

    Collections that cannot be read are restored as empty.
    """
    if not yes:
        click.confirm("This replaces all existing data. Continue?", abort=True)

    snapshot = load_snapshot(snapshot_file)
    restore_snapshot(ctx.obj["db"], snapshot)
    click.echo(
        f"Restored {len(snapshot.deposits)} deposits, {len(snapshot.transactions)} transactions "
        f"and {len(snapshot.import_log)} import log entries"
    )


def register_commands(cli):
    """Register backup commands with main CLI."""
    cli.add_command(export_snapshot)
    cli.add_command(restore)

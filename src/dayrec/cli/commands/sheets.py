"""Day-sheet scanning and conflict resolution commands."""

import click
from dayrec.cli.error_handling import echo_row_errors, handle_domain_error
from dayrec.domain.conflicts import KEEP_EXISTING
from dayrec.domain.errors import DomainError
from dayrec.domain.sheet_import import SheetImportService
from dayrec.utils.amount_parser import format_amount
from dayrec.utils.date_parser import parse_date


def _candidate_line(candidate) -> str:
    source = candidate.date_source.value if candidate.date_source else "unknown"
    line = f"{candidate.name}  {format_amount(candidate.slip.total)}  (date from {source})"
    if candidate.date_mismatch:
        line += "  [file name date differs]"
    return line


@click.command("scan-sheets")
@click.argument("folder", type=click.Path(exists=True, file_okay=False))
@click.option("--dry-run", is_flag=True, help="Report what would be imported without committing")
@click.option("--from", "from_date", help="Only import sheets dated on or after this date")
@click.option("--to", "to_date", help="Only import sheets dated on or before this date")
@click.pass_context
def scan_sheets(ctx, folder: str, dry_run: bool, from_date: str | None, to_date: str | None):
    """Import day-sheet extraction files from a folder.

    Dates with a single new sheet are committed. Dates with several sheets,
    or that already have one, are listed as conflicts; decide with
    'resolve-sheet'.
    """
    db = ctx.obj["db"]
    service = SheetImportService(db)

    start = None
    if from_date:
        try:
            start = parse_date(from_date)
        except ValueError as e:
            click.echo(f"Error: Invalid --from date: {e}", err=True)
            ctx.exit(1)

    end = None
    if to_date:
        try:
            end = parse_date(to_date)
        except ValueError as e:
            click.echo(f"Error: Invalid --to date: {e}", err=True)
            ctx.exit(1)

    if start and end and start > end:
        click.echo("Error: --from date must be on or before --to date", err=True)
        ctx.exit(1)

    try:
        scan = service.scan(folder, commit=not dry_run, start_date=start, end_date=end)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if dry_run:
        click.echo(f"Ready to import: {len(scan.ready)} sheet(s)")
        for candidate in scan.ready:
            click.echo(f"  {candidate.resolved_date}  {_candidate_line(candidate)}")
    else:
        click.echo(f"Imported: {len(scan.committed)} deposit(s)")
    if scan.already_imported:
        click.echo(f"Already imported: {len(scan.already_imported)} file(s)")

    mismatched = [c for c in scan.ready if c.date_mismatch]
    if mismatched:
        click.echo(f"\nDate mismatch in {len(mismatched)} file(s); the document date was used:")
        for candidate in mismatched:
            click.echo(f"  {candidate.resolved_date}  {candidate.name}")

    if scan.undated:
        click.echo(f"\nNo date found for {len(scan.undated)} file(s):")
        for candidate in scan.undated:
            click.echo(f"  {candidate.name}")

    if scan.conflicts:
        click.echo(f"\nConflicts: {len(scan.conflicts)} date(s) need a decision")
        for conflict in scan.conflicts:
            if conflict.existing_deposit_ids:
                ids = ", ".join(str(i) for i in conflict.existing_deposit_ids)
                click.echo(f"  {conflict.date}: already has deposit {ids}")
            elif conflict.previously_imported:
                click.echo(f"  {conflict.date}: a sheet was already imported for this date")
            else:
                click.echo(f"  {conflict.date}:")
            for candidate in conflict.candidates:
                click.echo(f"    {_candidate_line(candidate)}")
        click.echo("\nUse 'dayrec resolve-sheet FOLDER --date DATE --choose FILE' to pick one.")
        if any(c.previously_imported for c in scan.conflicts):
            click.echo(f"Use '--choose {KEEP_EXISTING}' to keep what a date already has.")

    if scan.errors:
        click.echo("")
        echo_row_errors(scan.errors, indent="")


@click.command("resolve-sheet")
@click.argument("folder", type=click.Path(exists=True, file_okay=False))
@click.option("--date", "day", required=True, help="Conflicting date (YYYY-MM-DD)")
@click.option(
    "--choose",
    required=True,
    help=f"File name of the sheet to keep, or '{KEEP_EXISTING}' to keep the current deposit",
)
@click.option(
    "--keep-rejected",
    is_flag=True,
    help="Leave the other sheets for this date importable later",
)
@click.pass_context
def resolve_sheet(ctx, folder: str, day: str, choose: str, keep_rejected: bool):
    """Decide a date with conflicting day sheets.

    The chosen sheet replaces any deposit the date already has. By default
    the other sheets for the date are marked as imported so they are not
    offered again.
    """
    db = ctx.obj["db"]
    service = SheetImportService(db)

    try:
        conflict_date = parse_date(day)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        deposit_id = service.resolve(
            folder, conflict_date, choose, mark_rejected=not keep_rejected
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if choose == KEEP_EXISTING:
        if deposit_id is None:
            click.echo(f"Kept {conflict_date} as it is; no new sheet committed")
        else:
            click.echo(f"Kept deposit {deposit_id} for {conflict_date}")
    else:
        click.echo(f"Committed {choose} as deposit {deposit_id} for {conflict_date}")


def register_commands(cli):
    """Register day-sheet commands with main CLI."""
    cli.add_command(scan_sheets)
    cli.add_command(resolve_sheet)

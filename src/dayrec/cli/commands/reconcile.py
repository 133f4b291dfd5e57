"""Reconciliation, summary and coverage commands."""

import calendar
from datetime import date

import click
from dayrec.cli.date_filters import resolve_cli_month
from dayrec.domain.entities import DayState
from dayrec.domain.reconciliation import ReconciliationService
from dayrec.utils.amount_parser import format_amount


def _service(ctx) -> ReconciliationService:
    return ReconciliationService(ctx.obj["db"], settlement_days=ctx.obj["settlement_days"])


@click.command("reconcile")
@click.option("--month", help="Month to reconcile (YYYY-MM)")
@click.option("--this-month", is_flag=True, help="Reconcile the current month")
@click.option("--last-month", is_flag=True, help="Reconcile the previous month")
@click.option("--unmatched", is_flag=True, help="Show only rows that did not match")
@click.pass_context
def reconcile_month(ctx, month: str | None, this_month: bool, last_month: bool, unmatched: bool):
    """Compare deposits with bank credits for one month.

    Each deposit is matched to the earliest unclaimed bank credit within
    0.02 of its total that settled within the settlement window. Bank
    credits left over are listed as orphans.
    """
    year, month_num = resolve_cli_month(
        ctx,
        month=month,
        period_flags={"this-month": this_month, "last-month": last_month},
    )
    service = _service(ctx)
    rows = service.reconcile_month(year, month_num)
    summary = service.summarize_month(year, month_num)

    click.echo(f"\nReconciliation for {calendar.month_name[month_num]} {year}")
    if unmatched:
        rows = [row for row in rows if not row.matches]
    if not rows:
        click.echo("No rows to show.")
    else:
        click.echo(f"\n{'Date':<12} {'Deposit':>12} {'Bank':>12} {'Difference':>12}  Status")
        click.echo("-" * 72)
        for row in rows:
            if row.matches:
                status = "matched"
            elif row.is_orphan:
                status = "orphan"
            else:
                status = "unmatched"
            line = (
                f"{row.date.isoformat():<12} {format_amount(row.deposit_total):>12} "
                f"{format_amount(row.bank_total):>12} {format_amount(row.difference):>12}  {status}"
            )
            if row.note:
                line += f"  ({row.note})"
            click.echo(line)

    click.echo("-" * 72)
    click.echo(f"Deposits:   {format_amount(summary.deposit_total):>12}")
    click.echo(f"Bank:       {format_amount(summary.bank_total):>12}")
    click.echo(f"Difference: {format_amount(summary.difference):>12}  [{summary.status.value}]")


@click.command("summary")
@click.option("--year", type=int, default=None, help="Year to summarize (default: current year)")
@click.pass_context
def summary(ctx, year: int | None):
    """Show deposit and bank totals for every month of a year."""
    year = year or date.today().year
    summaries = _service(ctx).summarize_year(year)

    click.echo(f"\nSummary for {year}")
    click.echo(
        f"\n{'Month':<10} {'Deposits':>12} {'Bank':>12} {'Difference':>12} "
        f"{'Matched':>8} {'Unmatched':>10} {'Orphans':>8}  Status"
    )
    click.echo("-" * 92)
    for month in summaries:
        click.echo(
            f"{calendar.month_abbr[month.month]:<10} {format_amount(month.deposit_total):>12} "
            f"{format_amount(month.bank_total):>12} {format_amount(month.difference):>12} "
            f"{month.matched_count:>8} {month.unmatched_count:>10} {month.orphan_count:>8}  "
            f"{month.status.value}"
        )


@click.command("coverage")
@click.option("--year", type=int, default=None, help="Year to check (default: current year)")
@click.option("--verbose", "-v", is_flag=True, help="List every missing date")
@click.pass_context
def coverage(ctx, year: int | None, verbose: bool):
    """Show which weekdays have an imported day sheet."""
    year = year or date.today().year
    months = _service(ctx).year_coverage(year)

    click.echo(f"\nDay-sheet coverage for {year}")
    click.echo(f"\n{'Month':<10} {'Covered':>8} {'Missing':>8}  Status")
    click.echo("-" * 40)
    for month in months:
        covered = sum(1 for day in month.days if day.state == DayState.COVERED)
        click.echo(
            f"{calendar.month_abbr[month.month]:<10} {covered:>8} "
            f"{len(month.missing_dates):>8}  {month.status.value}"
        )
        if verbose:
            for missing in month.missing_dates:
                click.echo(f"{'':<10} {missing.isoformat()} ({calendar.day_abbr[missing.weekday()]})")


def register_commands(cli):
    """Register reconciliation commands with main CLI."""
    cli.add_command(reconcile_month)
    cli.add_command(summary)
    cli.add_command(coverage)

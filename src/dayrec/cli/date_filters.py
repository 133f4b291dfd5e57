"""CLI helpers for month resolution."""

from datetime import date

import click

from dayrec.utils.date_parser import get_date_range, parse_month


def resolve_cli_month(
    ctx,
    *,
    month: str | None,
    period_flags: dict[str, bool],
) -> tuple[int, int]:
    """Resolve the month to reconcile from --month or a period flag.

    Defaults to the current month when nothing is given.
    """
    period_count = sum(1 for is_set in period_flags.values() if is_set)

    if period_count > 1:
        click.echo(
            "Error: Only one period option (--this-month, --last-month) can be specified at a time.",
            err=True,
        )
        ctx.exit(1)

    if period_count > 0 and month:
        click.echo(
            "Error: Period options (--this-month, --last-month) cannot be combined with --month.",
            err=True,
        )
        ctx.exit(1)

    if month:
        try:
            return parse_month(month)
        except ValueError as e:
            click.echo(f"Error: Invalid month: {e}", err=True)
            ctx.exit(1)

    for period, is_set in period_flags.items():
        if is_set:
            start, _ = get_date_range(period)
            return start.year, start.month

    today = date.today()
    return today.year, today.month

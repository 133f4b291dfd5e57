"""Deposit record management commands."""

import click
from dayrec.cli.error_handling import handle_domain_error
from dayrec.domain.deposit import DepositService
from dayrec.domain.entities import BREAKDOWN_FIELDS
from dayrec.domain.errors import DomainError
from dayrec.domain.extraction import breakdown_from_dict
from dayrec.utils.amount_parser import format_amount, parse_amount
from dayrec.utils.date_parser import parse_date


@click.group()
def deposit_group():
    """Manage deposit records."""
    pass


def _breakdown_options(func):
    """Attach one --<field> amount option per breakdown field."""
    for name in reversed(BREAKDOWN_FIELDS):
        flag = "--" + name.replace("_", "-")
        func = click.option(flag, name, help=f"{name.replace('_', ' ').capitalize()} subtotal")(func)
    return func


@deposit_group.command("add")
@click.option("--date", required=True, help="Business date (YYYY-MM-DD or relative like 'today', 'yesterday')")
@click.option("--total", help="Deposit total (defaults to the sum of the breakdown)")
@_breakdown_options
@click.option("--notes", help="Notes")
@click.pass_context
def add_deposit(ctx, date: str, total: str | None, notes: str | None, **breakdown_values):
    """Record a deposit by hand.

    Examples:
        dayrec deposit add --date 2024-05-01 --cash 120.00 --credit-cards 410.00
        dayrec deposit add --date yesterday --total 530.00
    """
    db = ctx.obj["db"]
    service = DepositService(db)

    try:
        deposit_date = parse_date(date)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        breakdown = breakdown_from_dict(breakdown_values)
        deposit_total = parse_amount(total) if total is not None else breakdown.subtotal()
        deposit_id = service.commit_deposit(
            date=deposit_date, total=deposit_total, breakdown=breakdown, notes=notes
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Created deposit {deposit_id} for {deposit_date} ({format_amount(deposit_total)})")


@deposit_group.command("list")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month', 'this year')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today', 'this month')")
@click.option("--verbose", "-v", is_flag=True, help="Show the payment-method breakdown")
@click.pass_context
def list_deposits(ctx, start_date: str | None, end_date: str | None, verbose: bool):
    """List deposit records ordered by date."""
    db = ctx.obj["db"]
    service = DepositService(db)

    start = None
    if start_date:
        try:
            start = parse_date(start_date)
        except ValueError as e:
            click.echo(f"Error: Invalid start date: {e}", err=True)
            ctx.exit(1)

    end = None
    if end_date:
        try:
            end = parse_date(end_date)
        except ValueError as e:
            click.echo(f"Error: Invalid end date: {e}", err=True)
            ctx.exit(1)

    deposits = service.list_deposits(start_date=start, end_date=end)
    if not deposits:
        click.echo("No deposits found.")
        return

    click.echo(f"\n{'ID':<6} {'Date':<12} {'Total':>14} {'Status':<10} Notes")
    click.echo("-" * 60)
    for record in deposits:
        click.echo(
            f"{record.id:<6} {record.date.isoformat():<12} {format_amount(record.total):>14} "
            f"{record.status.value:<10} {record.notes or ''}"
        )
        if verbose:
            for name in BREAKDOWN_FIELDS:
                value = getattr(record.breakdown, name)
                if value:
                    click.echo(f"{'':<6} {name.replace('_', ' '):<24} {format_amount(value):>14}")


@deposit_group.command("verify")
@click.argument("deposit_id", type=int)
@click.pass_context
def verify_deposit(ctx, deposit_id: int):
    """Mark a deposit as verified."""
    db = ctx.obj["db"]
    service = DepositService(db)

    try:
        service.verify_deposit(deposit_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Verified deposit {deposit_id}")


@deposit_group.command("delete")
@click.argument("deposit_id", type=int)
@click.option("--yes", is_flag=True, help="Skip confirmation")
@click.pass_context
def delete_deposit(ctx, deposit_id: int, yes: bool):
    """Delete a deposit record."""
    db = ctx.obj["db"]
    service = DepositService(db)

    if not yes:
        click.confirm(f"Delete deposit {deposit_id}?", abort=True)

    try:
        service.delete_deposit(deposit_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Deleted deposit {deposit_id}")


def register_commands(cli):
    """Register deposit commands with main CLI."""
    cli.add_command(deposit_group, name="deposit")

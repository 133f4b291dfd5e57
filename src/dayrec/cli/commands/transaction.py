"""Bank transaction commands."""

import click
from dayrec.cli.error_handling import handle_domain_error
from dayrec.domain.errors import DomainError
from dayrec.domain.transaction import TransactionService
from dayrec.utils.amount_parser import format_amount
from dayrec.utils.date_parser import parse_date


@click.group()
def transaction_group():
    """View and classify bank transactions."""
    pass


@transaction_group.command("list")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month', 'this year')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today', 'this month')")
@click.option("--credits", "credits_only", is_flag=True, help="Show only deposit-side transactions")
@click.pass_context
def list_transactions(ctx, start_date: str | None, end_date: str | None, credits_only: bool):
    """List bank transactions ordered by date."""
    service = TransactionService(ctx.obj["db"])

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

    transactions = service.list_transactions(
        start_date=start, end_date=end, credits_only=credits_only
    )
    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\n{'ID':<6} {'Date':<12} {'Amount':>14} {'Type':<24} Description")
    click.echo("-" * 90)
    for txn in transactions:
        click.echo(
            f"{txn.id:<6} {txn.date.isoformat():<12} {format_amount(txn.amount):>14} "
            f"{txn.payment_type or '':<24} {txn.description}"
        )


@transaction_group.command("set-type")
@click.argument("transaction_id", type=int)
@click.argument("payment_type")
@click.pass_context
def set_type(ctx, transaction_id: int, payment_type: str):
    """Tag a transaction with a payment type (e.g. credit_cards, eft).

    Use an empty string to clear the tag.
    """
    service = TransactionService(ctx.obj["db"])

    try:
        service.set_payment_type(transaction_id, payment_type or None)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if payment_type:
        click.echo(f"Tagged transaction {transaction_id} as {payment_type}")
    else:
        click.echo(f"Cleared payment type of transaction {transaction_id}")


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")

"""Add transaction command."""

import click

from moneytrack.cli.account_resolution import resolve_account_or_exit, resolve_category_or_exit
from moneytrack.cli.date_filters import parse_date_or_exit
from moneytrack.cli.error_handling import handle_domain_error
from moneytrack.domain.entities import CategoryType, TransactionType
from moneytrack.domain.errors import DomainError, StorageFailureError
from moneytrack.utils.amount_parser import format_amount, parse_amount

TRANSACTION_TYPES = [t.value for t in TransactionType]


@click.command("add")
@click.option("--account", required=True, help="Account name or ID")
@click.option(
    "--type",
    "transaction_type",
    type=click.Choice(TRANSACTION_TYPES),
    default="expense",
    show_default=True,
)
@click.option("--amount", required=True, help="Positive amount (e.g., 123.45)")
@click.option(
    "--date",
    default="today",
    show_default=True,
    help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')",
)
@click.option("--description", default="", help="Transaction description")
@click.option("--category", help="Category name or ID")
@click.option("--notes", help="Notes")
@click.option("--pending", is_flag=True, help="Mark the transaction as not yet cleared")
@click.pass_context
def add_transaction(
    ctx,
    account: str,
    transaction_type: str,
    amount: str,
    date: str,
    description: str,
    category: str | None,
    notes: str | None,
    pending: bool,
):
    """Add a transaction and update the account balance.

    Examples:
        moneytrack add --account Checking --amount 42.50 --description "Groceries" --category Groceries
        moneytrack add --account 1 --type income --amount 2500 --date 2024-01-15 --category Salary
    """
    app = ctx.obj["app"]

    account_id = resolve_account_or_exit(ctx, app, account)
    txn_date = parse_date_or_exit(ctx, date)

    try:
        txn_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    category_id = None
    if category:
        txn_type = TransactionType(transaction_type)
        category_type = CategoryType.INCOME if txn_type.is_inflow else CategoryType.EXPENSE
        category_id = resolve_category_or_exit(ctx, app, category, category_type)

    try:
        txn = app.transactions.create_transaction(
            owner_id=app.owner_id,
            account_id=account_id,
            transaction_type=transaction_type,
            amount=txn_amount,
            date=txn_date,
            description=description,
            category_id=category_id,
            is_cleared=not pending,
            notes=notes,
        )
    except (DomainError, StorageFailureError) as e:
        handle_domain_error(ctx, e)

    account_obj = app.accounts.require_account(account_id)
    click.echo(f"Created transaction {txn.id}")
    click.echo(f"  Account: {account_obj.name}")
    click.echo(f"  Date: {txn.date}")
    click.echo(f"  Amount: ${format_amount(txn.amount)} ({txn.transaction_type.value})")
    if description:
        click.echo(f"  Description: {description}")
    click.echo(f"  New balance: ${format_amount(account_obj.balance)}")


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_transaction)

"""Transaction management commands."""

import click

from moneytrack.cli.account_resolution import resolve_account_or_exit, resolve_category_or_exit
from moneytrack.cli.date_filters import parse_date_or_exit, resolve_cli_date_range
from moneytrack.cli.error_handling import handle_domain_error
from moneytrack.domain.entities import TransactionType
from moneytrack.domain.errors import DomainError, StorageFailureError
from moneytrack.utils.amount_parser import format_amount, parse_amount

TRANSACTION_TYPES = [t.value for t in TransactionType]


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("list")
@click.option("--account", help="Account name or ID; also shows the running balance")
@click.option("--category", help="Category name or ID")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month', 'this year')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today', 'this month')")
@click.option("--this-month", is_flag=True, help="Only transactions from this month")
@click.option("--this-week", is_flag=True, help="Only transactions from this week")
@click.option("--this-year", is_flag=True, help="Only transactions from this year")
@click.option("--last-month", is_flag=True, help="Only transactions from last month")
@click.option("--last-week", is_flag=True, help="Only transactions from last week")
@click.option("--last-year", is_flag=True, help="Only transactions from last year")
@click.pass_context
def list_transactions(
    ctx,
    account: str | None,
    category: str | None,
    start_date: str | None,
    end_date: str | None,
    this_month: bool,
    this_week: bool,
    this_year: bool,
    last_month: bool,
    last_week: bool,
    last_year: bool,
):
    """View transactions, newest first, with optional filters.

    With --account the register view is shown: each line carries the
    account balance right after that transaction.
    """
    app = ctx.obj["app"]

    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags={
            "this-month": this_month,
            "this-week": this_week,
            "this-year": this_year,
            "last-month": last_month,
            "last-week": last_week,
            "last-year": last_year,
        },
    )
    account_id = resolve_account_or_exit(ctx, app, account) if account else None
    category_id = resolve_category_or_exit(ctx, app, category) if category else None

    transactions = app.transactions.list_transactions(
        app.owner_id,
        account_id=account_id,
        start_date=start,
        end_date=end,
        category_id=category_id,
    )
    if not transactions:
        click.echo("No transactions found.")
        return

    running = {}
    if account_id is not None:
        running = {
            entry.transaction.id: entry.running_balance
            for entry in app.transactions.get_register(account_id)
        }

    accounts = {
        acc.id: acc.name for acc in app.accounts.list_accounts(app.owner_id, include_inactive=True)
    }
    categories = {cat.id: cat.name for cat in app.categories.list_categories(app.owner_id)}

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 110)
    click.echo(
        f"{'ID':<6} {'Date':<12} {'Type':<13} {'Amount':>12} {'Account':<18} "
        f"{'Category':<16} {'Description':<20} {'Balance':>12}"
    )
    click.echo("-" * 110)

    for txn in transactions:
        balance = running.get(txn.id)
        balance_str = f"${format_amount(balance)}" if balance is not None else ""
        click.echo(
            f"{txn.id:<6} {str(txn.date):<12} {txn.transaction_type.value:<13} "
            f"{'$' + format_amount(txn.amount):>12} {accounts.get(txn.account_id, 'Unknown')[:18]:<18} "
            f"{categories.get(txn.category_id, '')[:16]:<16} {(txn.description or '')[:20]:<20} "
            f"{balance_str:>12}"
        )

    total_out = sum(t.amount for t in transactions if not t.transaction_type.is_inflow)
    total_in = sum(t.amount for t in transactions if t.transaction_type.is_inflow)
    click.echo("-" * 110)
    click.echo(
        f"{'TOTAL':<6} In: ${format_amount(total_in)} | Out: ${format_amount(total_out)} | "
        f"Count: {len(transactions)}"
    )


@transaction_group.command("update")
@click.argument("transaction_id", type=int)
@click.option("--type", "transaction_type", type=click.Choice(TRANSACTION_TYPES), help="New type")
@click.option("--amount", help="New positive amount")
@click.option("--date", help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')")
@click.option("--description", help="Transaction description")
@click.option("--category", help="Category name or ID, or empty string to clear")
@click.option("--notes", help="Notes")
@click.option("--cleared/--pending", default=None, help="Cleared status")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: int,
    transaction_type: str | None,
    amount: str | None,
    date: str | None,
    description: str | None,
    category: str | None,
    notes: str | None,
    cleared: bool | None,
) -> None:
    """Update a transaction; the account balance follows the change.

    Updates only the fields that are provided. Use --category "" to clear the category.

    Examples:
        moneytrack transaction update 1 --amount 75.00
        moneytrack transaction update 1 --type income --category Refund
        moneytrack transaction update 1 --category ""  # Clear category
    """
    app = ctx.obj["app"]

    txn = app.transactions.get_transaction(transaction_id)
    if txn is None or txn.owner_id != app.owner_id:
        click.echo(f"Error: Transaction {transaction_id} not found", err=True)
        ctx.exit(1)

    txn_date = parse_date_or_exit(ctx, date) if date is not None else None

    txn_amount = None
    if amount is not None:
        try:
            txn_amount = parse_amount(amount)
        except ValueError as e:
            click.echo(f"Error: Invalid amount format: {e}", err=True)
            ctx.exit(1)

    category_id = None
    clear_category = False
    if category is not None:
        if category == "":
            clear_category = True
        else:
            category_id = resolve_category_or_exit(ctx, app, category)

    try:
        updated = app.transactions.update_transaction(
            transaction_id,
            transaction_type=transaction_type,
            amount=txn_amount,
            description=description,
            category_id=category_id,
            date=txn_date,
            is_cleared=cleared,
            notes=notes,
            clear_category=clear_category,
        )
    except (DomainError, StorageFailureError) as e:
        handle_domain_error(ctx, e)

    account_obj = app.accounts.require_account(updated.account_id)
    click.echo(f"Updated transaction {transaction_id}")
    click.echo(f"  New balance of '{account_obj.name}': ${format_amount(account_obj.balance)}")


@transaction_group.command("delete")
@click.argument("transaction_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: int, yes: bool) -> None:
    """Delete a transaction and reverse its effect on the balance.

    Examples:
        moneytrack transaction delete 1
    """
    app = ctx.obj["app"]

    txn = app.transactions.get_transaction(transaction_id)
    if txn is None or txn.owner_id != app.owner_id:
        click.echo(f"Error: Transaction {transaction_id} not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(f"Are you sure you want to delete transaction {transaction_id}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        app.transactions.delete_transaction(transaction_id)
        click.echo(f"Deleted transaction {transaction_id}")
    except (DomainError, StorageFailureError) as e:
        handle_domain_error(ctx, e)


def register_commands(cli: click.Group) -> None:
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")

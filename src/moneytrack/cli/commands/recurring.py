"""Recurring transaction commands."""

from datetime import date as date_type, datetime

import click

from moneytrack.cli.account_resolution import resolve_account_or_exit, resolve_category_or_exit
from moneytrack.cli.date_filters import parse_date_or_exit
from moneytrack.cli.error_handling import handle_domain_error
from moneytrack.domain.entities import CategoryType, RecurringFrequency, TransactionType
from moneytrack.domain.errors import DomainError, StorageFailureError
from moneytrack.utils.amount_parser import format_amount, parse_amount

FREQUENCIES = [f.value for f in RecurringFrequency]
TRANSACTION_TYPES = [t.value for t in TransactionType]


def _print_schedule(items, accounts: dict[int, str]) -> None:
    click.echo("-" * 90)
    click.echo(
        f"{'ID':<5} {'Next':<12} {'Frequency':<10} {'Type':<13} {'Amount':>12} "
        f"{'Account':<16} {'Description':<20}"
    )
    click.echo("-" * 90)
    for item in items:
        click.echo(
            f"{item.id:<5} {str(item.next_date):<12} {item.frequency.value:<10} "
            f"{item.transaction_type.value:<13} {'$' + format_amount(item.amount):>12} "
            f"{accounts.get(item.account_id, 'Unknown')[:16]:<16} {item.description[:20]:<20}"
        )


@click.group()
def recurring_group():
    """Manage recurring transactions."""
    pass


@recurring_group.command("add")
@click.option("--account", required=True, help="Account name or ID")
@click.option("--type", "transaction_type", type=click.Choice(TRANSACTION_TYPES), default="expense", show_default=True)
@click.option("--amount", required=True, help="Positive amount per occurrence")
@click.option("--description", required=True, help="Description copied to each occurrence")
@click.option("--frequency", type=click.Choice(FREQUENCIES), default="monthly", show_default=True)
@click.option("--start-date", default="today", show_default=True, help="Schedule start date")
@click.option("--end-date", help="Last date an occurrence may fall on")
@click.option("--category", help="Category name or ID")
@click.pass_context
def add_recurring(
    ctx,
    account: str,
    transaction_type: str,
    amount: str,
    description: str,
    frequency: str,
    start_date: str,
    end_date: str | None,
    category: str | None,
):
    """Schedule a recurring transaction.

    The first occurrence is generated one period after the start date;
    occurrences already due are generated straight away.

    Examples:
        moneytrack recurring add --account Checking --amount 800 --description Rent --start-date 2024-01-01
        moneytrack recurring add --account 1 --type income --amount 2500 --description Salary --frequency biweekly
    """
    app = ctx.obj["app"]

    account_id = resolve_account_or_exit(ctx, app, account)
    start = parse_date_or_exit(ctx, start_date, "start date")
    end = parse_date_or_exit(ctx, end_date, "end date") if end_date else None
    try:
        per_occurrence = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    category_id = None
    if category:
        category_type = (
            CategoryType.INCOME if TransactionType(transaction_type).is_inflow else CategoryType.EXPENSE
        )
        category_id = resolve_category_or_exit(ctx, app, category, category_type)

    try:
        item = app.recurring.create_recurring(
            owner_id=app.owner_id,
            account_id=account_id,
            transaction_type=transaction_type,
            amount=per_occurrence,
            description=description,
            frequency=frequency,
            start_date=start,
            end_date=end,
            category_id=category_id,
        )
        generated = app.recurring.sweep_recurring(app.owner_id, datetime.now())
    except (DomainError, StorageFailureError) as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created recurring transaction {item.id} ({item.frequency.value})")
    click.echo(f"  Next occurrence: {app.recurring.get_recurring(item.id).next_date}")
    if generated:
        click.echo(f"  Generated {generated} due transaction(s)")


@recurring_group.command("list")
@click.option("--all", "include_inactive", is_flag=True, help="Include finished and paused schedules")
@click.pass_context
def list_recurring(ctx, include_inactive: bool):
    """List recurring schedules ordered by next due date."""
    app = ctx.obj["app"]

    items = app.recurring.list_recurring(app.owner_id, active_only=not include_inactive)
    if not items:
        click.echo("No recurring transactions found.")
        return

    accounts = {
        acc.id: acc.name for acc in app.accounts.list_accounts(app.owner_id, include_inactive=True)
    }
    click.echo(f"\nRecurring transactions ({len(items)}):")
    _print_schedule(items, accounts)


@recurring_group.command("upcoming")
@click.option("--days", type=int, help="Horizon in days (defaults to MONEYTRACK_UPCOMING_DAYS or 30)")
@click.pass_context
def upcoming_recurring(ctx, days: int | None):
    """Show recurring transactions due soon."""
    app = ctx.obj["app"]

    horizon = days if days is not None else app.settings.upcoming_days
    items = app.recurring.list_upcoming(app.owner_id, date_type.today(), days=horizon)
    if not items:
        click.echo(f"Nothing due in the next {horizon} days.")
        return

    accounts = {
        acc.id: acc.name for acc in app.accounts.list_accounts(app.owner_id, include_inactive=True)
    }
    click.echo(f"\nDue in the next {horizon} days:")
    _print_schedule(items, accounts)


@recurring_group.command("sweep")
@click.pass_context
def sweep_recurring(ctx):
    """Generate every recurring transaction that has come due."""
    app = ctx.obj["app"]

    try:
        generated = ctx.obj.get("swept", 0) + app.sweep_once()
    except (DomainError, StorageFailureError) as e:
        handle_domain_error(ctx, e)
    click.echo(f"Generated {generated} transaction(s)")


@recurring_group.command("delete")
@click.argument("recurring_id", type=int)
@click.pass_context
def delete_recurring(ctx, recurring_id: int):
    """Delete a schedule. Transactions it already generated are kept."""
    app = ctx.obj["app"]

    item = app.recurring.get_recurring(recurring_id)
    if item is None or item.owner_id != app.owner_id:
        click.echo(f"Error: Recurring transaction {recurring_id} not found", err=True)
        ctx.exit(1)

    try:
        app.recurring.delete_recurring(recurring_id)
        click.echo(f"Deleted recurring transaction {recurring_id}")
    except (DomainError, StorageFailureError) as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register recurring commands with main CLI."""
    cli.add_command(recurring_group, name="recurring")

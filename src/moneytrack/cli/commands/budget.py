"""Budget commands."""

from datetime import datetime
from decimal import Decimal

import click

from moneytrack.cli.account_resolution import resolve_category_or_exit
from moneytrack.cli.date_filters import parse_date_or_exit
from moneytrack.cli.error_handling import handle_domain_error
from moneytrack.domain.entities import BudgetPeriod, BudgetProgress, CategoryType
from moneytrack.domain.errors import DomainError, StorageFailureError
from moneytrack.utils.amount_parser import format_amount, parse_amount

PERIODS = [p.value for p in BudgetPeriod]


def _percent(value: Decimal) -> str:
    return f"{value:.0f}%"


def _print_progress(progress: BudgetProgress, category_name: str) -> None:
    budget = progress.budget
    status = "OVER" if progress.is_over_budget else ("ALERT" if progress.is_alerting else "ok")
    click.echo(f"\n{budget.name} (ID: {budget.id}) - {category_name}, {budget.period.value}")
    click.echo(f"  Window: {progress.window.start} to {progress.window.end}")
    click.echo(
        f"  Spent: ${format_amount(progress.spent)} of ${format_amount(budget.amount)} "
        f"({_percent(progress.percent_used)}) [{status}]"
    )
    click.echo(f"  Remaining: ${format_amount(progress.remaining)}")
    click.echo(f"  Days remaining: {progress.days_remaining}")


@click.group()
def budget_group():
    """Manage budgets."""
    pass


@budget_group.command("add")
@click.argument("name")
@click.option("--amount", required=True, help="Spending limit per period")
@click.option("--period", type=click.Choice(PERIODS), default="monthly", show_default=True)
@click.option("--category", help="Category name or ID (omit for an overall budget)")
@click.option("--start-date", help="Anchor date for biweekly budgets (defaults to today)")
@click.option(
    "--alert-threshold",
    type=float,
    help="Percent of the limit that triggers a warning (defaults to MONEYTRACK_BUDGET_ALERT_THRESHOLD or 80)",
)
@click.pass_context
def add_budget(
    ctx,
    name: str,
    amount: str,
    period: str,
    category: str | None,
    start_date: str | None,
    alert_threshold: float | None,
):
    """Create a budget.

    Examples:
        moneytrack budget add "Groceries" --amount 500 --category Groceries
        moneytrack budget add "Everything" --amount 3000
    """
    app = ctx.obj["app"]

    try:
        limit = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    category_id = (
        resolve_category_or_exit(ctx, app, category, CategoryType.EXPENSE) if category else None
    )
    start = parse_date_or_exit(ctx, start_date, "start date") if start_date else None

    try:
        budget = app.budgets.create_budget(
            owner_id=app.owner_id,
            name=name,
            amount=limit,
            period=period,
            start_date=start,
            category_id=category_id,
            alert_threshold=str(alert_threshold) if alert_threshold is not None else None,
        )
        click.echo(f"Created budget '{budget.name}' (ID: {budget.id})")
    except (DomainError, StorageFailureError) as e:
        handle_domain_error(ctx, e)


@budget_group.command("list")
@click.option("--all", "include_inactive", is_flag=True, help="Include inactive budgets")
@click.pass_context
def list_budgets(ctx, include_inactive: bool):
    """List budgets."""
    app = ctx.obj["app"]

    budgets = app.budgets.list_budgets(app.owner_id, include_inactive=include_inactive)
    if not budgets:
        click.echo("No budgets found.")
        return

    categories = {cat.id: cat.name for cat in app.categories.list_categories(app.owner_id)}
    click.echo("\nBudgets:")
    click.echo("-" * 70)
    for budget in budgets:
        category_name = categories.get(budget.category_id, "All spending")
        click.echo(
            f"ID: {budget.id:3d} | {budget.name:20s} | ${format_amount(budget.amount):>10s} "
            f"{budget.period.value:9s} | {category_name}"
        )


@budget_group.command("progress")
@click.argument("budget_id", type=int, required=False)
@click.pass_context
def budget_progress(ctx, budget_id: int | None):
    """Show spending against budgets for the current period."""
    app = ctx.obj["app"]
    now = datetime.now()

    try:
        if budget_id is not None:
            progress_list = [app.budgets.get_progress(budget_id, now)]
        else:
            progress_list = app.budgets.list_progress(app.owner_id, now)
    except (DomainError, StorageFailureError) as e:
        handle_domain_error(ctx, e)

    if not progress_list:
        click.echo("No budgets found.")
        return

    categories = {cat.id: cat.name for cat in app.categories.list_categories(app.owner_id)}
    for progress in progress_list:
        _print_progress(progress, categories.get(progress.budget.category_id, "All spending"))


@budget_group.command("update")
@click.argument("budget_id", type=int)
@click.option("--name", help="New budget name")
@click.option("--amount", help="New spending limit per period")
@click.option("--period", type=click.Choice(PERIODS), help="New budget period")
@click.option("--category", help="Track only this category (name or ID)")
@click.option("--overall", is_flag=True, help="Track all spending instead of one category")
@click.option("--alert-threshold", type=float, help="Percent of the limit that triggers a warning")
@click.option("--deactivate", is_flag=True, help="Stop tracking the budget")
@click.option("--activate", is_flag=True, help="Resume tracking a deactivated budget")
@click.pass_context
def update_budget(
    ctx,
    budget_id: int,
    name: str | None,
    amount: str | None,
    period: str | None,
    category: str | None,
    overall: bool,
    alert_threshold: float | None,
    deactivate: bool,
    activate: bool,
):
    """Update a budget's limit, period, category or threshold.

    Examples:
        moneytrack budget update 1 --amount 650
        moneytrack budget update 2 --overall --period weekly
    """
    app = ctx.obj["app"]

    if activate and deactivate:
        click.echo("Error: --activate and --deactivate cannot be combined", err=True)
        ctx.exit(1)
    if category and overall:
        click.echo("Error: --category and --overall cannot be combined", err=True)
        ctx.exit(1)
    is_active = True if activate else (False if deactivate else None)

    limit = None
    if amount is not None:
        try:
            limit = parse_amount(amount)
        except ValueError as e:
            click.echo(f"Error: Invalid amount format: {e}", err=True)
            ctx.exit(1)

    category_id = (
        resolve_category_or_exit(ctx, app, category, CategoryType.EXPENSE) if category else None
    )

    try:
        budget = app.budgets.update_budget(
            budget_id,
            name=name,
            amount=limit,
            period=period,
            alert_threshold=str(alert_threshold) if alert_threshold is not None else None,
            category_id=category_id,
            is_active=is_active,
            clear_category=overall,
        )
        click.echo(f"Updated budget '{budget.name}' (ID: {budget.id})")
    except (DomainError, StorageFailureError) as e:
        handle_domain_error(ctx, e)


@budget_group.command("delete")
@click.argument("budget_id", type=int)
@click.pass_context
def delete_budget(ctx, budget_id: int):
    """Delete a budget."""
    app = ctx.obj["app"]

    try:
        app.budgets.delete_budget(budget_id)
        click.echo(f"Deleted budget {budget_id}")
    except (DomainError, StorageFailureError) as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register budget commands with main CLI."""
    cli.add_command(budget_group, name="budget")

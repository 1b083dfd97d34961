"""Savings goal commands."""

from datetime import datetime

import click

from moneytrack.cli.date_filters import parse_date_or_exit
from moneytrack.cli.error_handling import handle_domain_error
from moneytrack.domain.entities import GoalProgress
from moneytrack.domain.errors import DomainError, StorageFailureError
from moneytrack.utils.amount_parser import format_amount, parse_amount


def _print_progress(progress: GoalProgress) -> None:
    goal = progress.goal
    click.echo(f"\n{goal.name} (ID: {goal.id})")
    click.echo(
        f"  Saved: ${format_amount(goal.current_amount)} of ${format_amount(goal.target_amount)} "
        f"({progress.percent_complete:.0f}%)"
    )
    if goal.is_completed:
        click.echo(f"  Completed on {goal.completed_at:%Y-%m-%d}")
        return
    click.echo(f"  Remaining: ${format_amount(progress.amount_remaining)}")
    if progress.days_until_deadline is not None:
        click.echo(f"  Deadline: {goal.deadline} ({progress.days_until_deadline} days)")
        click.echo(f"  Pace: {'on track' if progress.is_on_track else 'behind schedule'}")


@click.group()
def goal_group():
    """Manage savings goals."""
    pass


@goal_group.command("add")
@click.argument("name")
@click.option("--target", required=True, help="Amount to save")
@click.option("--initial", default="0", show_default=True, help="Amount already saved")
@click.option("--deadline", help="Target date (YYYY-MM-DD or relative)")
@click.option("--color", help="Display color")
@click.option("--icon", help="Display icon name")
@click.pass_context
def add_goal(
    ctx,
    name: str,
    target: str,
    initial: str,
    deadline: str | None,
    color: str | None,
    icon: str | None,
):
    """Create a savings goal.

    Examples:
        moneytrack goal add "Emergency fund" --target 5000 --deadline 2025-12-31
    """
    app = ctx.obj["app"]

    try:
        target_amount = parse_amount(target)
    except ValueError as e:
        click.echo(f"Error: Invalid target amount: {e}", err=True)
        ctx.exit(1)
    deadline_date = parse_date_or_exit(ctx, deadline, "deadline") if deadline else None

    try:
        goal = app.goals.create_goal(
            owner_id=app.owner_id,
            name=name,
            target_amount=target_amount,
            initial_amount=initial.replace(",", ""),
            deadline=deadline_date,
            color=color,
            icon=icon,
        )
        click.echo(f"Created goal '{goal.name}' (ID: {goal.id})")
    except (DomainError, StorageFailureError) as e:
        handle_domain_error(ctx, e)


@goal_group.command("list")
@click.pass_context
def list_goals(ctx):
    """List savings goals."""
    app = ctx.obj["app"]

    goals = app.goals.list_goals(app.owner_id)
    if not goals:
        click.echo("No goals found.")
        return

    click.echo("\nGoals:")
    click.echo("-" * 70)
    for goal in goals:
        status = "done" if goal.is_completed else f"due {goal.deadline}" if goal.deadline else ""
        click.echo(
            f"ID: {goal.id:3d} | {goal.name:20s} | ${format_amount(goal.current_amount):>10s} / "
            f"${format_amount(goal.target_amount):>10s} | {status}"
        )


@goal_group.command("contribute")
@click.argument("goal_id", type=int)
@click.argument("amount")
@click.option("--note", help="Note for this contribution")
@click.pass_context
def contribute(ctx, goal_id: int, amount: str, note: str | None):
    """Add money to a savings goal.

    Examples:
        moneytrack goal contribute 1 250
    """
    app = ctx.obj["app"]

    try:
        value = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        was_completed = app.goals.require_goal(goal_id).is_completed
        goal = app.goals.contribute(goal_id, value, note=note)
    except (DomainError, StorageFailureError) as e:
        handle_domain_error(ctx, e)

    click.echo(
        f"Added ${format_amount(value)} to '{goal.name}': "
        f"${format_amount(goal.current_amount)} of ${format_amount(goal.target_amount)}"
    )
    if goal.is_completed and not was_completed:
        click.echo("Goal reached!")


@goal_group.command("progress")
@click.argument("goal_id", type=int, required=False)
@click.pass_context
def goal_progress(ctx, goal_id: int | None):
    """Show progress towards savings goals."""
    app = ctx.obj["app"]
    now = datetime.now()

    try:
        if goal_id is not None:
            progress_list = [app.goals.get_progress(goal_id, now)]
        else:
            progress_list = app.goals.list_progress(app.owner_id, now)
    except (DomainError, StorageFailureError) as e:
        handle_domain_error(ctx, e)

    if not progress_list:
        click.echo("No goals found.")
        return
    for progress in progress_list:
        _print_progress(progress)


@goal_group.command("update")
@click.argument("goal_id", type=int)
@click.option("--name", help="New goal name")
@click.option("--target", help="New amount to save")
@click.option("--deadline", help="New target date (YYYY-MM-DD or relative)")
@click.option("--no-deadline", is_flag=True, help="Remove the deadline")
@click.option("--color", help="New display color")
@click.option("--icon", help="New display icon name")
@click.pass_context
def update_goal(
    ctx,
    goal_id: int,
    name: str | None,
    target: str | None,
    deadline: str | None,
    no_deadline: bool,
    color: str | None,
    icon: str | None,
):
    """Update a savings goal.

    Lowering the target to or below the amount already saved completes the goal.

    Examples:
        moneytrack goal update 1 --target 6000 --deadline 2026-06-30
    """
    app = ctx.obj["app"]

    if deadline and no_deadline:
        click.echo("Error: --deadline and --no-deadline cannot be combined", err=True)
        ctx.exit(1)

    target_amount = None
    if target is not None:
        try:
            target_amount = parse_amount(target)
        except ValueError as e:
            click.echo(f"Error: Invalid target amount: {e}", err=True)
            ctx.exit(1)
    deadline_date = parse_date_or_exit(ctx, deadline, "deadline") if deadline else None

    try:
        was_completed = app.goals.require_goal(goal_id).is_completed
        goal = app.goals.update_goal(
            goal_id,
            name=name,
            target_amount=target_amount,
            deadline=deadline_date,
            color=color,
            icon=icon,
            clear_deadline=no_deadline,
        )
        click.echo(f"Updated goal '{goal.name}' (ID: {goal.id})")
        if goal.is_completed and not was_completed:
            click.echo("Goal reached!")
    except (DomainError, StorageFailureError) as e:
        handle_domain_error(ctx, e)


@goal_group.command("delete")
@click.argument("goal_id", type=int)
@click.pass_context
def delete_goal(ctx, goal_id: int):
    """Delete a goal and its contribution history."""
    app = ctx.obj["app"]

    try:
        app.goals.delete_goal(goal_id)
        click.echo(f"Deleted goal {goal_id}")
    except (DomainError, StorageFailureError) as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register goal commands with main CLI."""
    cli.add_command(goal_group, name="goal")

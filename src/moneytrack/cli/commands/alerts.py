"""Alerts command."""

import click

from moneytrack.domain.entities import Alert, AlertKind
from moneytrack.utils.amount_parser import format_amount


def describe_alert(alert: Alert) -> str:
    """One-line human description of an alert."""
    data = alert.data
    name = data.get("name", "")
    if alert.kind == AlertKind.BUDGET_EXCEEDED:
        if data["remaining"] == 0:
            return f"Budget limit reached: {name} is fully spent"
        return f"Over budget: {name} is ${format_amount(-data['remaining'])} over"
    if alert.kind == AlertKind.BUDGET_WARNING:
        return f"Budget warning: {name} is at {data['percent_used']:.0f}%"
    if alert.kind == AlertKind.GOAL_COMPLETED:
        return f"Goal achieved: {name}"
    if alert.kind == AlertKind.GOAL_MILESTONE:
        return (
            f"{data['milestone']}% complete: {name} - "
            f"${format_amount(data['amount_remaining'])} to go"
        )
    if alert.kind == AlertKind.GOAL_DEADLINE:
        days = data["days_until_deadline"]
        when = "Due tomorrow" if days == 1 else f"{days} days left"
        return f"{when}: {name} is {data['percent_complete']:.0f}% complete"
    if alert.kind == AlertKind.GOAL_BEHIND:
        return f"Behind schedule: {name} needs attention to meet its deadline"
    if alert.kind == AlertKind.BUDGETS_HEALTHY:
        return f"Budgets on track: {data['healthy']} of {data['total']} budgets under 60%"
    if alert.kind == AlertKind.GOALS_ON_TRACK:
        count = data["count"]
        return f"Goals on track: {count} goal{'s' if count > 1 else ''} progressing well"
    return f"Deadline passed: {name} is {abs(data['days_until_deadline'])} days overdue"


@click.command("alerts")
@click.pass_context
def show_alerts(ctx):
    """Show budget and savings goal alerts, most urgent first."""
    app = ctx.obj["app"]

    alerts = app.alerts()
    if not alerts:
        click.echo("No alerts.")
        return

    for alert in alerts:
        click.echo(f"[{alert.priority.value.upper():6s}] {describe_alert(alert)}")


def register_commands(cli):
    """Register alerts command with main CLI."""
    cli.add_command(show_alerts)

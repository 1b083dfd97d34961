"""Alert triggers derived from budget and goal progress.

Alerts carry only the triggering condition and its numbers; wording and
presentation belong to the caller.
"""

from datetime import datetime, timedelta
from typing import Iterable

from moneytrack.domain.entities import (
    Alert,
    AlertKind,
    AlertPriority,
    BudgetProgress,
    GoalProgress,
)

GOAL_MILESTONES = (75, 50, 25)
MILESTONE_WINDOW = 5
DEADLINE_WARNING_DAYS = 14
RECENTLY_COMPLETED_DAYS = 7
HEALTHY_BUDGET_PERCENT = 60

_PRIORITY_ORDER = {AlertPriority.HIGH: 0, AlertPriority.MEDIUM: 1, AlertPriority.LOW: 2}


def budget_alerts(progress_list: Iterable[BudgetProgress]) -> list[Alert]:
    """Exceeded (spent at or past the limit) and threshold warnings, at most one per budget."""
    alerts = []
    for progress in progress_list:
        budget = progress.budget
        data = {
            "name": budget.name,
            "spent": progress.spent,
            "remaining": progress.remaining,
            "percent_used": progress.percent_used,
        }
        if progress.is_over_budget or progress.percent_used >= 100:
            alerts.append(Alert(AlertKind.BUDGET_EXCEEDED, budget.id, AlertPriority.HIGH, data))
        elif progress.is_alerting:
            alerts.append(Alert(AlertKind.BUDGET_WARNING, budget.id, AlertPriority.MEDIUM, data))
    return alerts


def _deadline_priority(days: int) -> AlertPriority:
    if days <= 3:
        return AlertPriority.HIGH
    if days <= 7:
        return AlertPriority.MEDIUM
    return AlertPriority.LOW


def goal_alerts(progress_list: Iterable[GoalProgress], now: datetime) -> list[Alert]:
    """Milestone, completion and deadline alerts for savings goals."""
    alerts = []
    for progress in progress_list:
        goal = progress.goal
        days = progress.days_until_deadline
        data = {
            "name": goal.name,
            "percent_complete": progress.percent_complete,
            "amount_remaining": progress.amount_remaining,
            "days_until_deadline": days,
        }

        if goal.is_completed:
            if goal.completed_at is not None and (
                now - goal.completed_at < timedelta(days=RECENTLY_COMPLETED_DAYS + 1)
            ):
                alerts.append(Alert(AlertKind.GOAL_COMPLETED, goal.id, AlertPriority.LOW, data))
            continue

        for milestone in GOAL_MILESTONES:
            if milestone <= progress.percent_complete < milestone + MILESTONE_WINDOW:
                alerts.append(
                    Alert(
                        AlertKind.GOAL_MILESTONE,
                        goal.id,
                        AlertPriority.LOW,
                        dict(data, milestone=milestone),
                    )
                )
                break

        if days is None:
            continue
        if 0 < days <= DEADLINE_WARNING_DAYS:
            alerts.append(Alert(AlertKind.GOAL_DEADLINE, goal.id, _deadline_priority(days), data))
        if days > 0 and not progress.is_on_track:
            alerts.append(Alert(AlertKind.GOAL_BEHIND, goal.id, AlertPriority.MEDIUM, data))
        if days < 0:
            alerts.append(Alert(AlertKind.GOAL_OVERDUE, goal.id, AlertPriority.HIGH, data))
    return alerts


def positive_alerts(
    budget_progress: Iterable[BudgetProgress], goal_progress: Iterable[GoalProgress]
) -> list[Alert]:
    """Encouraging summaries: most budgets well under their limit, goals on pace.

    Budgets count as healthy when they are used but below 60%; the alert needs
    at least half of all budgets to be healthy. Only open goals with a
    deadline can be on track.
    """
    budget_progress = list(budget_progress)
    alerts = []

    healthy = [
        progress.budget.id
        for progress in budget_progress
        if 0 < progress.percent_used < HEALTHY_BUDGET_PERCENT
    ]
    if healthy and len(healthy) * 2 >= len(budget_progress):
        alerts.append(
            Alert(
                AlertKind.BUDGETS_HEALTHY,
                None,
                AlertPriority.LOW,
                {"healthy": len(healthy), "total": len(budget_progress), "budget_ids": healthy},
            )
        )

    on_track = [
        progress.goal.id
        for progress in goal_progress
        if not progress.goal.is_completed
        and progress.is_on_track
        and progress.days_until_deadline is not None
    ]
    if on_track:
        alerts.append(
            Alert(
                AlertKind.GOALS_ON_TRACK,
                None,
                AlertPriority.LOW,
                {"count": len(on_track), "goal_ids": on_track},
            )
        )
    return alerts


def collect_alerts(
    budget_progress: Iterable[BudgetProgress],
    goal_progress: Iterable[GoalProgress],
    now: datetime,
) -> list[Alert]:
    """All alerts, highest priority first; positive summaries come last."""
    budget_progress = list(budget_progress)
    goal_progress = list(goal_progress)
    alerts = budget_alerts(budget_progress) + goal_alerts(goal_progress, now)
    alerts = sorted(alerts, key=lambda alert: _PRIORITY_ORDER[alert.priority])
    return alerts + positive_alerts(budget_progress, goal_progress)

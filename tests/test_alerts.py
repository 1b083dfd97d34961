"""Tests for alert triggers."""

from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from moneytrack.cli.commands.alerts import describe_alert
from moneytrack.domain.alerts import budget_alerts, collect_alerts, goal_alerts, positive_alerts
from moneytrack.domain.entities import (
    AlertKind,
    AlertPriority,
    Budget,
    BudgetPeriod,
    BudgetProgress,
    GoalProgress,
    PeriodWindow,
    SavingsGoal,
)

NOW = datetime(2024, 6, 12, 12, 0)


def _budget_progress(spent, amount="500", threshold="80", budget_id=1):
    amount = Decimal(amount)
    spent = Decimal(spent)
    budget = Budget(
        id=budget_id,
        owner_id="alice",
        name="Groceries",
        category_id=None,
        amount=amount,
        period=BudgetPeriod.MONTHLY,
        start_date=date(2024, 1, 1),
        alert_threshold=Decimal(threshold),
        is_active=True,
        created_at=datetime(2024, 1, 1),
    )
    percent = spent / amount * 100
    return BudgetProgress(
        budget=budget,
        window=PeriodWindow(date(2024, 6, 1), date(2024, 6, 30)),
        spent=spent,
        remaining=amount - spent,
        percent_used=min(percent, Decimal("100")),
        is_over_budget=spent > amount,
        is_alerting=percent >= Decimal(threshold),
        days_remaining=19,
    )


def _goal_progress(percent, days=None, on_track=True, goal_id=1, completed_at=None):
    goal = SavingsGoal(
        id=goal_id,
        owner_id="alice",
        name="Vacation",
        target_amount=Decimal("1000"),
        initial_amount=Decimal("0"),
        current_amount=Decimal(percent) * 10,
        deadline=None,
        color=None,
        icon=None,
        is_completed=completed_at is not None,
        completed_at=completed_at,
        created_at=datetime(2024, 1, 1),
    )
    return GoalProgress(
        goal=goal,
        percent_complete=Decimal(percent),
        amount_remaining=Decimal("1000") - Decimal(percent) * 10,
        days_until_deadline=days,
        is_on_track=on_track,
    )


def _kinds(alerts):
    return [(a.kind, a.priority) for a in alerts]


class TestBudgetAlerts:
    def test_under_threshold_is_quiet(self):
        assert budget_alerts([_budget_progress("100")]) == []

    def test_warning_at_threshold(self):
        alerts = budget_alerts([_budget_progress("400")])
        assert _kinds(alerts) == [(AlertKind.BUDGET_WARNING, AlertPriority.MEDIUM)]
        assert alerts[0].data["name"] == "Groceries"

    def test_exceeded_replaces_warning(self):
        alerts = budget_alerts([_budget_progress("500.01")])
        assert _kinds(alerts) == [(AlertKind.BUDGET_EXCEEDED, AlertPriority.HIGH)]

    def test_exactly_at_limit_counts_as_exceeded(self):
        alerts = budget_alerts([_budget_progress("500")])
        assert _kinds(alerts) == [(AlertKind.BUDGET_EXCEEDED, AlertPriority.HIGH)]
        assert describe_alert(alerts[0]) == "Budget limit reached: Groceries is fully spent"


class TestGoalAlerts:
    @pytest.mark.parametrize(
        "percent,milestone",
        [("25", 25), ("29.9", 25), ("50", 50), ("77", 75), ("80", None), ("10", None)],
    )
    def test_milestones(self, percent, milestone):
        alerts = goal_alerts([_goal_progress(percent)], NOW)
        milestones = [a.data["milestone"] for a in alerts if a.kind == AlertKind.GOAL_MILESTONE]
        assert milestones == ([milestone] if milestone else [])

    @pytest.mark.parametrize(
        "days,priority",
        [(1, AlertPriority.HIGH), (3, AlertPriority.HIGH), (7, AlertPriority.MEDIUM), (14, AlertPriority.LOW)],
    )
    def test_approaching_deadline(self, days, priority):
        alerts = goal_alerts([_goal_progress("10", days=days)], NOW)
        assert _kinds(alerts) == [(AlertKind.GOAL_DEADLINE, priority)]

    def test_distant_deadline_is_quiet(self):
        assert goal_alerts([_goal_progress("10", days=15)], NOW) == []

    def test_behind_schedule(self):
        alerts = goal_alerts([_goal_progress("10", days=100, on_track=False)], NOW)
        assert _kinds(alerts) == [(AlertKind.GOAL_BEHIND, AlertPriority.MEDIUM)]

    def test_overdue(self):
        alerts = goal_alerts([_goal_progress("10", days=-2, on_track=False)], NOW)
        assert _kinds(alerts) == [(AlertKind.GOAL_OVERDUE, AlertPriority.HIGH)]

    def test_due_today_is_neither_deadline_nor_overdue(self):
        assert goal_alerts([_goal_progress("10", days=0)], NOW) == []

    def test_recently_completed(self):
        alerts = goal_alerts([_goal_progress("100", completed_at=NOW - timedelta(days=3))], NOW)
        assert _kinds(alerts) == [(AlertKind.GOAL_COMPLETED, AlertPriority.LOW)]

    def test_completed_long_ago_is_quiet(self):
        progress = _goal_progress("100", days=-30, completed_at=NOW - timedelta(days=10))
        assert goal_alerts([progress], NOW) == []


class TestPositiveAlerts:
    def test_budgets_healthy_when_half_are_under_sixty_percent(self):
        progress = [
            _budget_progress("100", budget_id=1),
            _budget_progress("250", budget_id=2),
            _budget_progress("450", budget_id=3),
            _budget_progress("0", budget_id=4),
        ]

        [alert] = positive_alerts(progress, [])

        assert (alert.kind, alert.priority, alert.subject_id) == (
            AlertKind.BUDGETS_HEALTHY,
            AlertPriority.LOW,
            None,
        )
        assert alert.data["budget_ids"] == [1, 2]
        assert describe_alert(alert) == "Budgets on track: 2 of 4 budgets under 60%"

    def test_unused_budgets_are_not_healthy(self):
        progress = [_budget_progress("0", budget_id=1), _budget_progress("0", budget_id=2)]
        assert positive_alerts(progress, []) == []

    def test_minority_of_healthy_budgets_is_quiet(self):
        progress = [
            _budget_progress("100", budget_id=1),
            _budget_progress("450", budget_id=2),
            _budget_progress("300", budget_id=3),
        ]
        assert positive_alerts(progress, []) == []

    def test_goals_on_track_need_a_deadline(self):
        progress = [
            _goal_progress("40", days=60, goal_id=1),
            _goal_progress("40", days=None, goal_id=2),
            _goal_progress("10", days=60, on_track=False, goal_id=3),
            _goal_progress("100", days=60, goal_id=4, completed_at=NOW),
        ]

        [alert] = positive_alerts([], progress)

        assert alert.kind == AlertKind.GOALS_ON_TRACK
        assert alert.data == {"count": 1, "goal_ids": [1]}
        assert describe_alert(alert) == "Goals on track: 1 goal progressing well"

    def test_collect_alerts_lists_positive_summaries_last(self):
        alerts = collect_alerts(
            [_budget_progress("100")],
            [_goal_progress("52", days=200, goal_id=1), _goal_progress("10", days=-1, on_track=False, goal_id=2)],
            NOW,
        )

        assert [a.kind for a in alerts] == [
            AlertKind.GOAL_OVERDUE,
            AlertKind.GOAL_MILESTONE,
            AlertKind.BUDGETS_HEALTHY,
            AlertKind.GOALS_ON_TRACK,
        ]


def test_collect_alerts_orders_by_priority():
    alerts = collect_alerts(
        [_budget_progress("400")],
        [
            _goal_progress("52", goal_id=1),
            _goal_progress("10", days=-1, on_track=False, goal_id=2),
        ],
        NOW,
    )

    assert [a.priority for a in alerts] == [
        AlertPriority.HIGH,
        AlertPriority.MEDIUM,
        AlertPriority.LOW,
    ]
    assert alerts[0].subject_id == 2


def test_describe_alert():
    [exceeded] = budget_alerts([_budget_progress("550")])
    [deadline] = goal_alerts([_goal_progress("10", days=1)], NOW)

    assert describe_alert(exceeded) == "Over budget: Groceries is $50.00 over"
    assert describe_alert(deadline) == "Due tomorrow: Vacation is 10% complete"


def test_alerts_command(run_cli, budget_service, goal_service, add_expense, owner_id):
    assert "No alerts." in run_cli("alerts").output

    budget_service.create_budget(owner_id, "Everything", "100")
    add_expense("150", day=date.today())
    goal_service.create_goal(
        owner_id, "Trip", "1000", initial_amount="760", deadline=date.today() + timedelta(days=30)
    )

    result = run_cli("alerts")

    assert result.exit_code == 0
    lines = result.output.strip().splitlines()
    assert lines[0].startswith("[HIGH")
    assert "Over budget: Everything" in lines[0]
    assert any("75% complete: Trip" in line for line in lines)

"""Tests for savings goals."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from moneytrack.domain.entities import SavingsGoal
from moneytrack.domain.errors import InvalidAmountError, NotFoundError, ValidationError
from moneytrack.domain.goal import GoalService, compute_goal_progress


def _goal(current="0", target="1000", deadline=None, created_at=datetime(2024, 1, 1), completed=False):
    return SavingsGoal(
        id=1,
        owner_id="alice",
        name="Emergency fund",
        target_amount=Decimal(target),
        initial_amount=Decimal("0"),
        current_amount=Decimal(current),
        deadline=deadline,
        color=None,
        icon=None,
        is_completed=completed,
        completed_at=None,
        created_at=created_at,
    )


class TestGoalProgress:
    def test_without_deadline(self):
        progress = compute_goal_progress(_goal(current="250"), datetime(2024, 6, 1))

        assert progress.percent_complete == Decimal("25")
        assert progress.amount_remaining == Decimal("750")
        assert progress.days_until_deadline is None
        assert progress.is_on_track

    def test_overshoot_is_capped(self):
        progress = compute_goal_progress(_goal(current="1050"), datetime(2024, 6, 1))

        assert progress.percent_complete == Decimal("100")
        assert progress.amount_remaining == Decimal("0")

    def test_pace_within_buffer_is_on_track(self):
        # Halfway through the year 49.9% is expected; 10 points of slack
        goal = _goal(current="450", deadline=date(2024, 12, 31))

        progress = compute_goal_progress(goal, datetime(2024, 7, 1))

        assert progress.days_until_deadline == 183
        assert progress.is_on_track

    def test_falling_behind_pace(self):
        goal = _goal(current="300", deadline=date(2024, 12, 31))

        assert not compute_goal_progress(goal, datetime(2024, 7, 1)).is_on_track
        assert compute_goal_progress(goal, datetime(2024, 7, 1), pace_buffer=Decimal("25")).is_on_track

    def test_days_until_deadline_rounds_up(self):
        goal = _goal(deadline=date(2024, 6, 10))

        assert compute_goal_progress(goal, datetime(2024, 6, 8, 18, 0)).days_until_deadline == 2
        assert compute_goal_progress(goal, datetime(2024, 6, 10, 0, 0)).days_until_deadline == 0
        assert compute_goal_progress(goal, datetime(2024, 6, 12, 9, 0)).days_until_deadline == -2


class TestGoalService:
    def test_create_goal(self, goal_service, owner_id):
        goal = goal_service.create_goal(owner_id, "Vacation", "2000", initial_amount="100")

        assert goal.current_amount == Decimal("100")
        assert goal.initial_amount == Decimal("100")
        assert goal.icon == "flag"
        assert not goal.is_completed

    def test_create_goal_validation(self, goal_service, owner_id):
        with pytest.raises(InvalidAmountError):
            goal_service.create_goal(owner_id, "Vacation", "0")
        with pytest.raises(ValidationError):
            goal_service.create_goal(owner_id, "Vacation", "100", initial_amount="-1")
        with pytest.raises(ValidationError):
            goal_service.create_goal(owner_id, "", "100")

    def test_create_goal_already_funded_is_completed(self, goal_service, owner_id):
        now = datetime(2024, 6, 1, 10, 0)
        goal = goal_service.create_goal(owner_id, "Done", "100", initial_amount="100", now=now)

        assert goal.is_completed
        assert goal.completed_at == now

    def test_contribution_reaching_target_completes_goal(self, goal_service, owner_id):
        goal = goal_service.create_goal(owner_id, "Bike", "1000", initial_amount="900")
        now = datetime(2024, 6, 1, 10, 0)

        goal = goal_service.contribute(goal.id, "100", note="bonus", now=now)

        assert goal.current_amount == Decimal("1000")
        assert goal.is_completed
        assert goal.completed_at == now
        [contribution] = goal_service.list_contributions(goal.id)
        assert contribution.amount == Decimal("100")
        assert contribution.note == "bonus"
        assert contribution.date == date(2024, 6, 1)

    def test_overshoot_never_reverts_completion(self, goal_service, owner_id):
        goal = goal_service.create_goal(owner_id, "Bike", "1000", initial_amount="950")
        first = datetime(2024, 6, 1, 10, 0)
        goal_service.contribute(goal.id, "100", now=first)

        goal = goal_service.update_goal(goal.id, target_amount="5000", now=datetime(2024, 6, 2))

        assert goal.current_amount == Decimal("1050")
        assert goal.is_completed
        assert goal.completed_at == first
        progress = goal_service.get_progress(goal.id, datetime(2024, 6, 2))
        assert progress.percent_complete == Decimal("21")

    def test_lowering_target_completes_goal(self, goal_service, owner_id):
        goal = goal_service.create_goal(owner_id, "Bike", "1000", initial_amount="600")

        goal = goal_service.update_goal(goal.id, target_amount="500")

        assert goal.is_completed

    def test_contribute_validation(self, goal_service, owner_id):
        goal = goal_service.create_goal(owner_id, "Bike", "1000")

        with pytest.raises(InvalidAmountError):
            goal_service.contribute(goal.id, "-5")
        with pytest.raises(NotFoundError):
            goal_service.contribute(999, "5")
        assert goal_service.list_contributions(goal.id) == []

    def test_update_clears_deadline(self, goal_service, owner_id):
        goal = goal_service.create_goal(owner_id, "Bike", "1000", deadline=date(2030, 1, 1))

        goal = goal_service.update_goal(goal.id, clear_deadline=True)

        assert goal.deadline is None

    def test_delete_goal_removes_contributions(self, goal_service, owner_id):
        goal = goal_service.create_goal(owner_id, "Bike", "1000")
        goal_service.contribute(goal.id, "10")

        goal_service.delete_goal(goal.id)

        assert goal_service.list_goals(owner_id) == []
        with pytest.raises(NotFoundError):
            goal_service.list_contributions(goal.id)

    def test_pace_buffer_is_configurable(self, temp_db, owner_id):
        service = GoalService(temp_db, pace_buffer=Decimal("0"))
        goal = service.create_goal(owner_id, "Car", "1000", deadline=date(2099, 1, 1))

        assert service.pace_buffer == Decimal("0")
        assert service.get_progress(goal.id, datetime.now()).days_until_deadline > 0


def test_goal_commands(run_cli, goal_service, owner_id):
    created = run_cli("goal", "add", "Emergency fund", "--target", "1000", "--initial", "900")
    assert created.exit_code == 0
    [goal] = goal_service.list_goals(owner_id)

    contributed = run_cli("goal", "contribute", str(goal.id), "100", "--note", "bonus")
    assert contributed.exit_code == 0
    assert "$1,000.00 of $1,000.00" in contributed.output
    assert "Goal reached!" in contributed.output

    progress = run_cli("goal", "progress", str(goal.id))
    assert "(100%)" in progress.output
    assert "Completed on" in progress.output

    listed = run_cli("goal", "list")
    assert "Emergency fund" in listed.output
    assert "done" in listed.output


def test_goal_contribute_invalid_amount(run_cli, goal_service, owner_id):
    goal = goal_service.create_goal(owner_id, "Bike", "1000")

    result = run_cli("goal", "contribute", str(goal.id), "abc")

    assert result.exit_code == 1
    assert "Invalid amount" in result.output


def test_goal_delete_command(run_cli, goal_service, owner_id):
    goal = goal_service.create_goal(owner_id, "Bike", "1000")

    assert run_cli("goal", "delete", str(goal.id)).exit_code == 0
    assert goal_service.list_goals(owner_id) == []


def test_goal_update_command(run_cli, goal_service, owner_id):
    goal = goal_service.create_goal(
        owner_id, "Bike", "1000", initial_amount="600", deadline=date(2030, 1, 1)
    )

    renamed = run_cli("goal", "update", str(goal.id), "--name", "Road bike", "--no-deadline")
    assert renamed.exit_code == 0
    assert "Updated goal 'Road bike'" in renamed.output
    assert "Goal reached!" not in renamed.output
    assert goal_service.require_goal(goal.id).deadline is None

    lowered = run_cli("goal", "update", str(goal.id), "--target", "500")
    assert lowered.exit_code == 0
    assert "Goal reached!" in lowered.output
    assert goal_service.require_goal(goal.id).is_completed

    again = run_cli("goal", "update", str(goal.id), "--color", "#FF0000")
    assert "Goal reached!" not in again.output


def test_goal_update_invalid_target(run_cli, goal_service, owner_id):
    goal = goal_service.create_goal(owner_id, "Bike", "1000")

    result = run_cli("goal", "update", str(goal.id), "--target", "0.004")

    assert result.exit_code == 1
    assert "Invalid target amount" in result.output
    assert goal_service.require_goal(goal.id).target_amount == Decimal("1000")

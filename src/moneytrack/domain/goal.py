"""Savings goals: progress calculation, contributions and completion."""

import math
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING, Optional, Union

import structlog

from moneytrack.domain.entities import GoalContribution, GoalProgress
from moneytrack.domain.entities import SavingsGoal as GoalEntity
from moneytrack.domain.errors import (
    NotFoundError,
    ValidationError,
    goal_not_found,
)
from moneytrack.domain.ledger import require_positive_amount

if TYPE_CHECKING:
    from moneytrack.database.base import Database

logger = structlog.get_logger(__name__)

# Percentage points a goal may lag its linear pace and still be on track
DEFAULT_PACE_BUFFER = Decimal("10")

DEFAULT_GOAL_COLOR = "#4CAF50"
DEFAULT_GOAL_ICON = "flag"

_HUNDRED = Decimal("100")
_ONE_DAY = timedelta(days=1)


def compute_goal_progress(
    goal: GoalEntity, now: datetime, pace_buffer: Decimal = DEFAULT_PACE_BUFFER
) -> GoalProgress:
    """Compute how far a goal has come and whether it keeps pace with its deadline.

    Pace is linear from the goal's creation to midnight at the start of its
    deadline day.

    Args:
        goal: Goal to evaluate
        now: Current time
        pace_buffer: Allowed lag behind the linear pace, in percentage points

    Returns:
        Goal progress
    """
    if goal.target_amount > 0:
        percent_complete = min(goal.current_amount / goal.target_amount * _HUNDRED, _HUNDRED)
    else:
        percent_complete = Decimal("0")
    amount_remaining = max(goal.target_amount - goal.current_amount, Decimal("0"))

    days_until_deadline = None
    is_on_track = True
    if goal.deadline is not None:
        deadline = datetime.combine(goal.deadline, time.min)
        days_until_deadline = math.ceil((deadline - now) / _ONE_DAY)
        total_days = math.ceil((deadline - goal.created_at) / _ONE_DAY)
        days_elapsed = total_days - days_until_deadline
        if total_days > 0:
            expected = Decimal(days_elapsed) / Decimal(total_days) * _HUNDRED
        else:
            expected = Decimal("0")
        is_on_track = percent_complete >= expected - pace_buffer

    return GoalProgress(
        goal=goal,
        percent_complete=percent_complete,
        amount_remaining=amount_remaining,
        days_until_deadline=days_until_deadline,
        is_on_track=is_on_track,
    )


def _non_negative(value: Union[Decimal, int, str], label: str) -> Decimal:
    try:
        amount = Decimal(str(value))
    except ArithmeticError:
        raise ValidationError(f"{label} must be a number, got {value!r}")
    if not amount.is_finite() or amount < 0:
        raise ValidationError(f"{label} cannot be negative, got {value!r}")
    return amount


class GoalService:
    """Service for managing savings goals.

    ``current_amount`` only changes through contributions, and a goal that
    has reached its target stays completed.
    """

    def __init__(self, db: "Database", pace_buffer: Decimal = DEFAULT_PACE_BUFFER):
        """Initialize goal service.

        Args:
            db: Database instance
            pace_buffer: Allowed lag behind pace for on-track checks
        """
        self.db = db
        self.pace_buffer = pace_buffer

    def require_goal(self, goal_id: int) -> GoalEntity:
        goal = self.db.get_goal(goal_id)
        if goal is None:
            raise NotFoundError(goal_not_found(goal_id))
        return goal

    def _complete_if_reached(self, goal_id: int, now: datetime) -> GoalEntity:
        goal = self.require_goal(goal_id)
        if not goal.is_completed and goal.current_amount >= goal.target_amount:
            self.db.mark_goal_completed(goal_id, now)
            logger.info("goal_completed", goal_id=goal_id, current=str(goal.current_amount))
            goal = self.require_goal(goal_id)
        return goal

    def create_goal(
        self,
        owner_id: str,
        name: str,
        target_amount: Union[Decimal, int, str],
        initial_amount: Union[Decimal, int, str] = Decimal("0"),
        deadline: Optional[date] = None,
        color: Optional[str] = None,
        icon: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> GoalEntity:
        """Create a savings goal.

        Args:
            owner_id: Owning user
            name: Goal name
            target_amount: Amount to save
            initial_amount: Amount already saved
            deadline: Optional target date
            color: Optional display color
            icon: Optional display icon
            now: Completion timestamp if the initial amount already meets the target

        Raises:
            ValidationError: If the name is empty or initial amount negative
            InvalidAmountError: If the target is not positive
        """
        name = name.strip()
        if not name:
            raise ValidationError("Goal name cannot be empty")
        target = require_positive_amount(target_amount)
        initial = _non_negative(initial_amount, "Initial amount")

        with self.db.atomic():
            goal_id = self.db.create_goal(
                owner_id=owner_id,
                name=name,
                target_amount=target,
                initial_amount=initial,
                deadline=deadline,
                color=color or DEFAULT_GOAL_COLOR,
                icon=icon or DEFAULT_GOAL_ICON,
            )
            goal = self._complete_if_reached(goal_id, now or datetime.now())

        logger.info("goal_created", goal_id=goal_id, target=str(target))
        return goal

    def list_goals(self, owner_id: str) -> list[GoalEntity]:
        return self.db.list_goals(owner_id)

    def update_goal(
        self,
        goal_id: int,
        name: Optional[str] = None,
        target_amount: Optional[Union[Decimal, int, str]] = None,
        deadline: Optional[date] = None,
        color: Optional[str] = None,
        icon: Optional[str] = None,
        clear_deadline: bool = False,
        now: Optional[datetime] = None,
    ) -> GoalEntity:
        """Update a goal's definition. Lowering the target below the saved
        amount completes the goal; raising it never un-completes one.

        Raises:
            NotFoundError: If the goal doesn't exist
        """
        self.require_goal(goal_id)
        if name is not None and not name.strip():
            raise ValidationError("Goal name cannot be empty")
        if target_amount is not None:
            target_amount = require_positive_amount(target_amount)

        with self.db.atomic():
            self.db.update_goal(
                goal_id,
                name=name.strip() if name is not None else None,
                target_amount=target_amount,
                deadline=deadline,
                color=color,
                icon=icon,
                clear_deadline=clear_deadline,
            )
            goal = self._complete_if_reached(goal_id, now or datetime.now())
        return goal

    def delete_goal(self, goal_id: int) -> None:
        """Delete a goal and its contribution history."""
        self.require_goal(goal_id)
        self.db.delete_goal(goal_id)
        logger.info("goal_deleted", goal_id=goal_id)

    def contribute(
        self,
        goal_id: int,
        amount: Union[Decimal, int, str],
        note: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> GoalEntity:
        """Record a contribution and raise the goal's saved amount.

        Contributions beyond the target are accepted; the goal simply
        overshoots.

        Args:
            goal_id: Goal ID
            amount: Positive amount contributed
            note: Optional note
            now: Contribution time; defaults to the current time

        Returns:
            The goal after the contribution

        Raises:
            NotFoundError: If the goal doesn't exist
            InvalidAmountError: If amount is not positive
        """
        amount = require_positive_amount(amount)
        goal = self.require_goal(goal_id)
        now = now or datetime.now()

        with self.db.atomic():
            self.db.create_contribution(
                goal_id=goal_id,
                owner_id=goal.owner_id,
                amount=amount,
                date=now.date(),
                note=note,
            )
            self.db.increment_goal_amount(goal_id, amount)
            goal = self._complete_if_reached(goal_id, now)

        logger.info(
            "goal_contribution_recorded",
            goal_id=goal_id,
            amount=str(amount),
            current=str(goal.current_amount),
        )
        return goal

    def list_contributions(self, goal_id: int) -> list[GoalContribution]:
        self.require_goal(goal_id)
        return self.db.list_contributions(goal_id)

    def get_progress(self, goal_id: int, now: datetime) -> GoalProgress:
        return compute_goal_progress(self.require_goal(goal_id), now, self.pace_buffer)

    def list_progress(self, owner_id: str, now: datetime) -> list[GoalProgress]:
        return [
            compute_goal_progress(goal, now, self.pace_buffer)
            for goal in self.db.list_goals(owner_id)
        ]

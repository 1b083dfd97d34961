"""Budgets: period windows, progress calculation and the budget service."""

import calendar
import math
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING, Iterable, Optional, Union

import structlog

from moneytrack.domain.entities import Budget as BudgetEntity
from moneytrack.domain.entities import (
    BudgetPeriod,
    BudgetProgress,
    PeriodWindow,
    Transaction,
)
from moneytrack.domain.errors import (
    NotFoundError,
    ValidationError,
    budget_not_found,
    category_not_found,
)
from moneytrack.domain.ledger import require_positive_amount

if TYPE_CHECKING:
    from moneytrack.database.base import Database

logger = structlog.get_logger(__name__)

DEFAULT_ALERT_THRESHOLD = Decimal("80")

_HUNDRED = Decimal("100")


def budget_period_window(
    period: Union[BudgetPeriod, str], start_date: date, today: date
) -> PeriodWindow:
    """Return the inclusive date window a budget tracks on ``today``.

    Weekly windows run Sunday through Saturday. Biweekly windows are
    14-day blocks anchored at the budget's start date. Monthly and yearly
    windows follow the calendar.
    """
    period = BudgetPeriod(period)
    if period == BudgetPeriod.WEEKLY:
        # date.weekday() is 0 for Monday
        start = today - timedelta(days=(today.weekday() + 1) % 7)
        return PeriodWindow(start, start + timedelta(days=6))
    if period == BudgetPeriod.BIWEEKLY:
        blocks = (today - start_date).days // 14
        start = start_date + timedelta(days=14 * blocks)
        return PeriodWindow(start, start + timedelta(days=13))
    if period == BudgetPeriod.MONTHLY:
        last_day = calendar.monthrange(today.year, today.month)[1]
        return PeriodWindow(today.replace(day=1), today.replace(day=last_day))
    return PeriodWindow(date(today.year, 1, 1), date(today.year, 12, 31))


def compute_budget_progress(
    budget: BudgetEntity, transactions: Iterable[Transaction], now: datetime
) -> BudgetProgress:
    """Compute spending against a budget for the window containing ``now``.

    Only outflows (expense and transfer_out) inside the window count, and
    only those in the budget's category when it has one.

    Args:
        budget: Budget to evaluate
        transactions: Candidate transactions; filtering happens here
        now: Current time

    Returns:
        Budget progress for the current window
    """
    window = budget_period_window(budget.period, budget.start_date, now.date())

    spent = Decimal("0")
    for txn in transactions:
        if txn.transaction_type.is_inflow or not window.contains(txn.date):
            continue
        if budget.category_id is not None and txn.category_id != budget.category_id:
            continue
        spent += txn.amount

    if budget.amount > 0:
        raw_percent = spent / budget.amount * _HUNDRED
    else:
        raw_percent = Decimal("0")

    until_end = datetime.combine(window.end, time.max) - now
    days_remaining = max(0, math.ceil(until_end / timedelta(days=1)))

    return BudgetProgress(
        budget=budget,
        window=window,
        spent=spent,
        remaining=budget.amount - spent,
        percent_used=min(raw_percent, _HUNDRED),
        is_over_budget=spent > budget.amount,
        is_alerting=budget.amount > 0 and raw_percent >= budget.alert_threshold,
        days_remaining=days_remaining,
    )


def _alert_threshold(value: Union[Decimal, int, str]) -> Decimal:
    try:
        threshold = Decimal(str(value))
    except ArithmeticError:
        raise ValidationError(f"Alert threshold must be a number, got {value!r}")
    if not threshold.is_finite() or threshold <= 0:
        raise ValidationError(f"Alert threshold must be positive, got {value!r}")
    return threshold


class BudgetService:
    """Service for managing budgets."""

    def __init__(self, db: "Database", default_alert_threshold: Decimal = DEFAULT_ALERT_THRESHOLD):
        """Initialize budget service.

        Args:
            db: Database instance
            default_alert_threshold: Threshold used when a budget is created without one
        """
        self.db = db
        self.default_alert_threshold = default_alert_threshold

    def create_budget(
        self,
        owner_id: str,
        name: str,
        amount: Union[Decimal, int, str],
        period: Union[BudgetPeriod, str] = BudgetPeriod.MONTHLY,
        start_date: Optional[date] = None,
        category_id: Optional[int] = None,
        alert_threshold: Optional[Union[Decimal, int, str]] = None,
    ) -> BudgetEntity:
        """Create a budget.

        Args:
            owner_id: Owning user
            name: Budget name
            amount: Spending limit per period
            period: weekly, biweekly, monthly or yearly
            start_date: Anchor for biweekly windows; defaults to today
            category_id: Category to track, or None for all spending
            alert_threshold: Percent of the limit that triggers an alert

        Raises:
            ValidationError: If the name, period or threshold is invalid
            InvalidAmountError: If amount is not positive
            NotFoundError: If the category doesn't exist
        """
        name = name.strip()
        if not name:
            raise ValidationError("Budget name cannot be empty")
        amount = require_positive_amount(amount)
        try:
            period = BudgetPeriod(period)
        except ValueError:
            raise ValidationError(f"Unknown budget period '{period}'")
        threshold = _alert_threshold(
            self.default_alert_threshold if alert_threshold is None else alert_threshold
        )
        self._check_category(owner_id, category_id)

        budget_id = self.db.create_budget(
            owner_id=owner_id,
            name=name,
            amount=amount,
            period=period.value,
            start_date=start_date or date.today(),
            alert_threshold=threshold,
            category_id=category_id,
        )
        logger.info("budget_created", budget_id=budget_id, period=period.value)
        return self.db.get_budget(budget_id)

    def _check_category(self, owner_id: str, category_id: Optional[int]) -> None:
        if category_id is None:
            return
        category = self.db.get_category(category_id)
        if category is None or category.owner_id != owner_id:
            raise NotFoundError(category_not_found(category_id))

    def require_budget(self, budget_id: int) -> BudgetEntity:
        budget = self.db.get_budget(budget_id)
        if budget is None:
            raise NotFoundError(budget_not_found(budget_id))
        return budget

    def list_budgets(self, owner_id: str, include_inactive: bool = False) -> list[BudgetEntity]:
        return self.db.list_budgets(owner_id, include_inactive=include_inactive)

    def update_budget(
        self,
        budget_id: int,
        name: Optional[str] = None,
        amount: Optional[Union[Decimal, int, str]] = None,
        period: Optional[Union[BudgetPeriod, str]] = None,
        alert_threshold: Optional[Union[Decimal, int, str]] = None,
        category_id: Optional[int] = None,
        is_active: Optional[bool] = None,
        clear_category: bool = False,
    ) -> BudgetEntity:
        """Update a budget.

        Raises:
            NotFoundError: If the budget or category doesn't exist
        """
        budget = self.require_budget(budget_id)
        if name is not None and not name.strip():
            raise ValidationError("Budget name cannot be empty")
        if amount is not None:
            amount = require_positive_amount(amount)
        period_value = None
        if period is not None:
            try:
                period_value = BudgetPeriod(period).value
            except ValueError:
                raise ValidationError(f"Unknown budget period '{period}'")
        if alert_threshold is not None:
            alert_threshold = _alert_threshold(alert_threshold)
        self._check_category(budget.owner_id, category_id)

        self.db.update_budget(
            budget_id,
            name=name.strip() if name is not None else None,
            amount=amount,
            period=period_value,
            alert_threshold=alert_threshold,
            category_id=category_id,
            is_active=is_active,
            update_category=clear_category,
        )
        return self.require_budget(budget_id)

    def delete_budget(self, budget_id: int) -> None:
        self.require_budget(budget_id)
        self.db.delete_budget(budget_id)
        logger.info("budget_deleted", budget_id=budget_id)

    def get_progress(self, budget_id: int, now: datetime) -> BudgetProgress:
        """Progress of one budget for the window containing ``now``."""
        budget = self.require_budget(budget_id)
        return self._progress(budget, now)

    def list_progress(self, owner_id: str, now: datetime) -> list[BudgetProgress]:
        """Progress of every active budget of an owner."""
        return [self._progress(budget, now) for budget in self.db.list_budgets(owner_id)]

    def _progress(self, budget: BudgetEntity, now: datetime) -> BudgetProgress:
        window = budget_period_window(budget.period, budget.start_date, now.date())
        transactions = self.db.list_transactions(
            owner_id=budget.owner_id,
            start_date=window.start,
            end_date=window.end,
            category_id=budget.category_id,
        )
        return compute_budget_progress(budget, transactions, now)

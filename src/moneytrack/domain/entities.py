"""Domain model entities for moneytrack.

These are pure data classes representing business concepts, independent of
database schema. Storage implementations map their own records onto these
so the ledger and calculators never see ORM objects.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional


class TransactionType(str, Enum):
    """Direction of a transaction's effect on its account."""

    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER_IN = "transfer_in"
    TRANSFER_OUT = "transfer_out"

    @property
    def is_inflow(self) -> bool:
        return self in (TransactionType.INCOME, TransactionType.TRANSFER_IN)


class AccountType(str, Enum):
    CHECKING = "checking"
    SAVINGS = "savings"
    CREDIT_CARD = "credit_card"
    CASH = "cash"
    INVESTMENT = "investment"
    OTHER = "other"


class CategoryType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class BudgetPeriod(str, Enum):
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class RecurringFrequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class AlertKind(str, Enum):
    """Conditions that should raise a user notification."""

    BUDGET_WARNING = "budget_warning"
    BUDGET_EXCEEDED = "budget_exceeded"
    GOAL_MILESTONE = "goal_milestone"
    GOAL_COMPLETED = "goal_completed"
    GOAL_DEADLINE = "goal_deadline"
    GOAL_BEHIND = "goal_behind"
    GOAL_OVERDUE = "goal_overdue"
    BUDGETS_HEALTHY = "budgets_healthy"
    GOALS_ON_TRACK = "goals_on_track"


class AlertPriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class Account:
    """Account domain entity.

    ``balance`` is a denormalized aggregate: it must always equal
    ``initial_balance`` plus the signed effect of every transaction on the
    account.
    """

    id: int
    owner_id: str
    name: str
    account_type: AccountType
    initial_balance: Decimal
    balance: Decimal
    color: Optional[str]
    icon: Optional[str]
    is_active: bool
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class Category:
    """Category domain entity."""

    id: int
    owner_id: str
    name: str
    category_type: CategoryType
    icon: Optional[str]
    color: Optional[str]
    is_default: bool
    created_at: datetime


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity.

    ``amount`` is always positive; the direction comes from
    ``transaction_type``.
    """

    id: int
    owner_id: str
    account_id: int
    transaction_type: TransactionType
    amount: Decimal
    description: str
    category_id: Optional[int]
    date: date
    is_cleared: bool
    notes: Optional[str]
    recurring_id: Optional[int]
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class Budget:
    """Budget domain entity. ``category_id`` of None means an overall budget."""

    id: int
    owner_id: str
    name: str
    category_id: Optional[int]
    amount: Decimal
    period: BudgetPeriod
    start_date: date
    alert_threshold: Decimal
    is_active: bool
    created_at: datetime


@dataclass(frozen=True)
class SavingsGoal:
    """Savings goal domain entity."""

    id: int
    owner_id: str
    name: str
    target_amount: Decimal
    initial_amount: Decimal
    current_amount: Decimal
    deadline: Optional[date]
    color: Optional[str]
    icon: Optional[str]
    is_completed: bool
    completed_at: Optional[datetime]
    created_at: datetime


@dataclass(frozen=True)
class GoalContribution:
    """Append-only contribution towards a savings goal."""

    id: int
    goal_id: int
    owner_id: str
    amount: Decimal
    note: Optional[str]
    date: date
    created_at: datetime


@dataclass(frozen=True)
class RecurringTransaction:
    """Recurring transaction schedule.

    ``next_date`` is the earliest occurrence that has not been materialized
    yet.
    """

    id: int
    owner_id: str
    account_id: int
    transaction_type: TransactionType
    amount: Decimal
    description: str
    category_id: Optional[int]
    frequency: RecurringFrequency
    start_date: date
    next_date: date
    end_date: Optional[date]
    is_active: bool
    last_generated_date: Optional[date]
    created_at: datetime


@dataclass(frozen=True)
class RegisterEntry:
    """A transaction annotated with the account balance right after it."""

    transaction: Transaction
    running_balance: Decimal


@dataclass(frozen=True)
class BalanceCheck:
    """Result of recomputing an account balance from its transactions."""

    account_id: int
    stored: Decimal
    recomputed: Decimal

    @property
    def drift(self) -> Decimal:
        return self.stored - self.recomputed


@dataclass(frozen=True)
class PeriodWindow:
    """Inclusive calendar date range a budget currently tracks."""

    start: date
    end: date

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass(frozen=True)
class BudgetProgress:
    """Derived state of a budget for its current period window."""

    budget: Budget
    window: PeriodWindow
    spent: Decimal
    remaining: Decimal
    percent_used: Decimal
    is_over_budget: bool
    is_alerting: bool
    days_remaining: int


@dataclass(frozen=True)
class GoalProgress:
    """Derived state of a savings goal."""

    goal: SavingsGoal
    percent_complete: Decimal
    amount_remaining: Decimal
    days_until_deadline: Optional[int]
    is_on_track: bool


@dataclass(frozen=True)
class Alert:
    """A triggered notification condition, without any display copy.

    ``subject_id`` is None for alerts that summarize several budgets or goals.
    """

    kind: AlertKind
    subject_id: Optional[int]
    priority: AlertPriority
    data: dict[str, Any] = field(default_factory=dict)

"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Any, Callable, Optional
from datetime import date, datetime
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from moneytrack.domain.entities import (
    Account,
    Budget,
    Category,
    GoalContribution,
    RecurringTransaction,
    SavingsGoal,
    Transaction,
)

COLLECTIONS = (
    "accounts",
    "categories",
    "transactions",
    "budgets",
    "savings_goals",
    "recurring_transactions",
)


class Database(ABC):
    """Abstract storage collaborator for moneytrack.

    Every write commits on its own unless it runs inside ``atomic()``, in
    which case all writes of the block commit or roll back together.
    Storage errors are raised as ``StorageFailureError``.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def atomic(self) -> AbstractContextManager[None]:
        """Group writes into one unit of work. Nested blocks join the outer one."""
        pass

    @abstractmethod
    def subscribe(
        self, collection: str, owner_id: str, callback: Callable[[list[Any]], None]
    ) -> Callable[[], None]:
        """Push a snapshot of ``collection`` now and after every committed change.

        Returns a function that cancels the subscription.
        """
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self,
        owner_id: str,
        name: str,
        account_type: str,
        initial_balance: Decimal,
        color: Optional[str] = None,
        icon: Optional[str] = None,
    ) -> int:
        """Create a new account with ``balance`` equal to its initial balance."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def list_accounts(self, owner_id: str, include_inactive: bool = False) -> list[Account]:
        """List an owner's accounts in creation order."""
        pass

    @abstractmethod
    def update_account(
        self,
        account_id: int,
        name: Optional[str] = None,
        account_type: Optional[str] = None,
        color: Optional[str] = None,
        icon: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> None:
        """Update display fields of an account. Never touches the balance."""
        pass

    @abstractmethod
    def adjust_account_balance(self, account_id: int, delta: Decimal) -> None:
        """Atomically add ``delta`` to the stored balance."""
        pass

    @abstractmethod
    def set_account_balance(self, account_id: int, balance: Decimal) -> None:
        """Overwrite the stored balance. Reserved for reconciliation."""
        pass

    @abstractmethod
    def delete_account(self, account_id: int) -> None:
        """Delete an account."""
        pass

    @abstractmethod
    def get_account_transaction_count(self, account_id: int) -> int:
        """Count transactions attributed to an account."""
        pass

    @abstractmethod
    def get_account_recurring_count(self, account_id: int) -> int:
        """Count recurring schedules that target an account."""
        pass

    # Category operations
    @abstractmethod
    def create_category(
        self,
        owner_id: str,
        name: str,
        category_type: str,
        icon: Optional[str] = None,
        color: Optional[str] = None,
        is_default: bool = False,
    ) -> int:
        """Create a category. Returns category ID."""
        pass

    @abstractmethod
    def get_category(self, category_id: int) -> Optional[Category]:
        """Get category by ID."""
        pass

    @abstractmethod
    def list_categories(self, owner_id: str, category_type: Optional[str] = None) -> list[Category]:
        """List an owner's categories ordered by type then name."""
        pass

    @abstractmethod
    def update_category(
        self,
        category_id: int,
        name: Optional[str] = None,
        icon: Optional[str] = None,
        color: Optional[str] = None,
    ) -> None:
        """Update category display fields."""
        pass

    @abstractmethod
    def delete_category(self, category_id: int) -> None:
        """Delete a category."""
        pass

    @abstractmethod
    def get_category_usage(self, category_id: int) -> dict[str, int]:
        """Count records referencing a category.

        Returns a dict with ``transactions``, ``budgets`` and ``recurring`` counts.
        """
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        owner_id: str,
        account_id: int,
        transaction_type: str,
        amount: Decimal,
        date: date,
        description: str = "",
        category_id: Optional[int] = None,
        is_cleared: bool = True,
        notes: Optional[str] = None,
        recurring_id: Optional[int] = None,
    ) -> int:
        """Create a transaction record. Does not touch the account balance."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def update_transaction(
        self,
        transaction_id: int,
        transaction_type: Optional[str] = None,
        amount: Optional[Decimal] = None,
        description: Optional[str] = None,
        category_id: Optional[int] = None,
        date: Optional[date] = None,
        is_cleared: Optional[bool] = None,
        notes: Optional[str] = None,
        update_category: bool = False,
    ) -> None:
        """Update transaction fields.

        Args:
            update_category: If True, update category_id even if it's None (to clear it)
        """
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction record. Does not touch the account balance."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        owner_id: Optional[str] = None,
        account_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        category_id: Optional[int] = None,
    ) -> list[Transaction]:
        """List transactions newest first with optional filters."""
        pass

    # Budget operations
    @abstractmethod
    def create_budget(
        self,
        owner_id: str,
        name: str,
        amount: Decimal,
        period: str,
        start_date: date,
        alert_threshold: Decimal,
        category_id: Optional[int] = None,
    ) -> int:
        """Create a budget. Returns budget ID."""
        pass

    @abstractmethod
    def get_budget(self, budget_id: int) -> Optional[Budget]:
        """Get budget by ID."""
        pass

    @abstractmethod
    def list_budgets(self, owner_id: str, include_inactive: bool = False) -> list[Budget]:
        """List an owner's budgets, newest first."""
        pass

    @abstractmethod
    def update_budget(
        self,
        budget_id: int,
        name: Optional[str] = None,
        amount: Optional[Decimal] = None,
        period: Optional[str] = None,
        alert_threshold: Optional[Decimal] = None,
        category_id: Optional[int] = None,
        is_active: Optional[bool] = None,
        update_category: bool = False,
    ) -> None:
        """Update budget fields."""
        pass

    @abstractmethod
    def delete_budget(self, budget_id: int) -> None:
        """Delete a budget."""
        pass

    # Savings goal operations
    @abstractmethod
    def create_goal(
        self,
        owner_id: str,
        name: str,
        target_amount: Decimal,
        initial_amount: Decimal,
        deadline: Optional[date] = None,
        color: Optional[str] = None,
        icon: Optional[str] = None,
    ) -> int:
        """Create a savings goal with ``current_amount`` equal to its initial amount."""
        pass

    @abstractmethod
    def get_goal(self, goal_id: int) -> Optional[SavingsGoal]:
        """Get savings goal by ID."""
        pass

    @abstractmethod
    def list_goals(self, owner_id: str) -> list[SavingsGoal]:
        """List an owner's savings goals, newest first."""
        pass

    @abstractmethod
    def update_goal(
        self,
        goal_id: int,
        name: Optional[str] = None,
        target_amount: Optional[Decimal] = None,
        deadline: Optional[date] = None,
        color: Optional[str] = None,
        icon: Optional[str] = None,
        clear_deadline: bool = False,
    ) -> None:
        """Update goal definition fields. Never touches ``current_amount``."""
        pass

    @abstractmethod
    def increment_goal_amount(self, goal_id: int, delta: Decimal) -> None:
        """Atomically add ``delta`` to the goal's current amount."""
        pass

    @abstractmethod
    def mark_goal_completed(self, goal_id: int, completed_at: datetime) -> None:
        """Flag a goal as completed."""
        pass

    @abstractmethod
    def delete_goal(self, goal_id: int) -> None:
        """Delete a goal together with its contributions."""
        pass

    @abstractmethod
    def create_contribution(
        self,
        goal_id: int,
        owner_id: str,
        amount: Decimal,
        date: date,
        note: Optional[str] = None,
    ) -> int:
        """Append a contribution record. Returns contribution ID."""
        pass

    @abstractmethod
    def list_contributions(self, goal_id: int) -> list[GoalContribution]:
        """List a goal's contributions, newest first."""
        pass

    # Recurring transaction operations
    @abstractmethod
    def create_recurring(
        self,
        owner_id: str,
        account_id: int,
        transaction_type: str,
        amount: Decimal,
        description: str,
        frequency: str,
        start_date: date,
        next_date: date,
        end_date: Optional[date] = None,
        category_id: Optional[int] = None,
    ) -> int:
        """Create a recurring schedule. Returns its ID."""
        pass

    @abstractmethod
    def get_recurring(self, recurring_id: int) -> Optional[RecurringTransaction]:
        """Get recurring schedule by ID."""
        pass

    @abstractmethod
    def list_recurring(self, owner_id: str, active_only: bool = True) -> list[RecurringTransaction]:
        """List an owner's recurring schedules ordered by next due date."""
        pass

    @abstractmethod
    def update_recurring(
        self,
        recurring_id: int,
        amount: Optional[Decimal] = None,
        description: Optional[str] = None,
        category_id: Optional[int] = None,
        frequency: Optional[str] = None,
        end_date: Optional[date] = None,
        is_active: Optional[bool] = None,
        next_date: Optional[date] = None,
        last_generated_date: Optional[date] = None,
        update_category: bool = False,
        clear_end_date: bool = False,
    ) -> None:
        """Update recurring schedule fields."""
        pass

    @abstractmethod
    def delete_recurring(self, recurring_id: int) -> None:
        """Delete a recurring schedule. Generated transactions are kept."""
        pass

"""Domain layer for moneytrack application."""

from moneytrack.domain.account import AccountService
from moneytrack.domain.budget import BudgetService
from moneytrack.domain.category import CategoryService
from moneytrack.domain.goal import GoalService
from moneytrack.domain.recurrence import RecurrenceService
from moneytrack.domain.transaction import TransactionService

__all__ = [
    "AccountService",
    "BudgetService",
    "CategoryService",
    "GoalService",
    "RecurrenceService",
    "TransactionService",
]

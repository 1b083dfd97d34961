"""Mapper functions to convert SQLAlchemy models into domain entities.

This layer isolates the conversion logic, including the string-to-enum
translation of stored type columns.
"""

from decimal import Decimal
from typing import Optional

from moneytrack.domain import entities as domain
from moneytrack.database.models import (
    Account as ORMAccount,
    Budget as ORMBudget,
    Category as ORMCategory,
    GoalContribution as ORMGoalContribution,
    RecurringTransaction as ORMRecurringTransaction,
    SavingsGoal as ORMSavingsGoal,
    Transaction as ORMTransaction,
)


def _money(value: Optional[Decimal]) -> Decimal:
    if value is None:
        return Decimal("0")
    return Decimal(value)


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        owner_id=orm_account.owner_id,
        name=orm_account.name,
        account_type=domain.AccountType(orm_account.account_type),
        initial_balance=_money(orm_account.initial_balance),
        balance=_money(orm_account.balance),
        color=orm_account.color,
        icon=orm_account.icon,
        is_active=orm_account.is_active,
        created_at=orm_account.created_at,
        updated_at=orm_account.updated_at,
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        owner_id=orm_category.owner_id,
        name=orm_category.name,
        category_type=domain.CategoryType(orm_category.category_type),
        icon=orm_category.icon,
        color=orm_category.color,
        is_default=orm_category.is_default,
        created_at=orm_category.created_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        owner_id=orm_transaction.owner_id,
        account_id=orm_transaction.account_id,
        transaction_type=domain.TransactionType(orm_transaction.transaction_type),
        amount=_money(orm_transaction.amount),
        description=orm_transaction.description or "",
        category_id=orm_transaction.category_id,
        date=orm_transaction.date,
        is_cleared=orm_transaction.is_cleared,
        notes=orm_transaction.notes,
        recurring_id=orm_transaction.recurring_id,
        created_at=orm_transaction.created_at,
        updated_at=orm_transaction.updated_at,
    )


def budget_to_domain(orm_budget: ORMBudget) -> domain.Budget:
    """Convert SQLAlchemy Budget model to domain Budget entity."""
    return domain.Budget(
        id=orm_budget.id,
        owner_id=orm_budget.owner_id,
        name=orm_budget.name,
        category_id=orm_budget.category_id,
        amount=_money(orm_budget.amount),
        period=domain.BudgetPeriod(orm_budget.period),
        start_date=orm_budget.start_date,
        alert_threshold=_money(orm_budget.alert_threshold),
        is_active=orm_budget.is_active,
        created_at=orm_budget.created_at,
    )


def goal_to_domain(orm_goal: ORMSavingsGoal) -> domain.SavingsGoal:
    """Convert SQLAlchemy SavingsGoal model to domain SavingsGoal entity."""
    return domain.SavingsGoal(
        id=orm_goal.id,
        owner_id=orm_goal.owner_id,
        name=orm_goal.name,
        target_amount=_money(orm_goal.target_amount),
        initial_amount=_money(orm_goal.initial_amount),
        current_amount=_money(orm_goal.current_amount),
        deadline=orm_goal.deadline,
        color=orm_goal.color,
        icon=orm_goal.icon,
        is_completed=orm_goal.is_completed,
        completed_at=orm_goal.completed_at,
        created_at=orm_goal.created_at,
    )


def contribution_to_domain(orm_contribution: ORMGoalContribution) -> domain.GoalContribution:
    """Convert SQLAlchemy GoalContribution model to domain GoalContribution entity."""
    return domain.GoalContribution(
        id=orm_contribution.id,
        goal_id=orm_contribution.goal_id,
        owner_id=orm_contribution.owner_id,
        amount=_money(orm_contribution.amount),
        note=orm_contribution.note,
        date=orm_contribution.date,
        created_at=orm_contribution.created_at,
    )


def recurring_to_domain(orm_recurring: ORMRecurringTransaction) -> domain.RecurringTransaction:
    """Convert SQLAlchemy RecurringTransaction model to domain entity."""
    return domain.RecurringTransaction(
        id=orm_recurring.id,
        owner_id=orm_recurring.owner_id,
        account_id=orm_recurring.account_id,
        transaction_type=domain.TransactionType(orm_recurring.transaction_type),
        amount=_money(orm_recurring.amount),
        description=orm_recurring.description or "",
        category_id=orm_recurring.category_id,
        frequency=domain.RecurringFrequency(orm_recurring.frequency),
        start_date=orm_recurring.start_date,
        next_date=orm_recurring.next_date,
        end_date=orm_recurring.end_date,
        is_active=orm_recurring.is_active,
        last_generated_date=orm_recurring.last_generated_date,
        created_at=orm_recurring.created_at,
    )

"""Shared domain error messages and error types."""

from typing import Optional

from moneytrack.domain.entities import BalanceCheck


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class InvalidAmountError(ValidationError):
    """Amount is non-numeric, non-finite or not strictly positive."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


class InvariantViolationError(DomainError):
    """A stored aggregate disagrees with the records it is derived from."""

    def __init__(self, message: str, check: Optional[BalanceCheck] = None):
        super().__init__(message)
        self.check = check


class StorageFailureError(RuntimeError):
    """The storage collaborator failed; the operation may be retried."""


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def category_not_found(category_id: int) -> str:
    """Return message for missing category by ID."""
    return f"Category {category_id} not found"


def budget_not_found(budget_id: int) -> str:
    """Return message for missing budget."""
    return f"Budget {budget_id} not found"


def goal_not_found(goal_id: int) -> str:
    """Return message for missing savings goal."""
    return f"Savings goal {goal_id} not found"


def recurring_not_found(recurring_id: int) -> str:
    """Return message for missing recurring transaction."""
    return f"Recurring transaction {recurring_id} not found"


def invalid_amount(amount: object) -> str:
    """Return message for an amount the engine refuses to record."""
    return f"Amount must be a positive number, got {amount!r}"


def balance_drift(check: BalanceCheck) -> str:
    """Return message for a stored balance that disagrees with its history."""
    return (
        f"Account {check.account_id} balance drifted: stored {check.stored}, "
        f"recomputed {check.recomputed} (drift {check.drift})"
    )


def account_delete_blocked(account_id: int, transaction_count: int, recurring_count: int) -> str:
    """Return message when account has dependent transactions or schedules."""
    parts = []
    if transaction_count > 0:
        parts.append(
            f"{transaction_count} transaction{'s' if transaction_count != 1 else ''}"
        )
    if recurring_count > 0:
        parts.append(
            f"{recurring_count} recurring transaction{'s' if recurring_count != 1 else ''}"
        )
    return (
        f"Cannot delete account {account_id}: it has {', '.join(parts)}. "
        "Please delete them first or deactivate the account instead."
    )


def category_delete_blocked(category_id: int, reason: str) -> str:
    """Return message when a category cannot be deleted."""
    return f"Cannot delete category {category_id}: {reason}"

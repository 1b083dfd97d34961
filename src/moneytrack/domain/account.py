"""Account domain service."""

from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Optional, Union

import structlog

from moneytrack.domain.entities import Account as AccountEntity
from moneytrack.domain.entities import AccountType, BalanceCheck
from moneytrack.domain.errors import (
    ConflictError,
    DependencyError,
    InvariantViolationError,
    NotFoundError,
    ValidationError,
    account_delete_blocked,
    account_not_found,
    balance_drift,
)
from moneytrack.domain.running_balance import recompute_balance

if TYPE_CHECKING:
    from moneytrack.database.base import Database

logger = structlog.get_logger(__name__)

# Drift below this is rounding noise from the storage layer
BALANCE_EPSILON = Decimal("0.005")

DEFAULT_ACCOUNT_COLOR = "#4CAF50"
DEFAULT_ACCOUNT_ICON = "account-balance"


class AccountService:
    """Service for managing accounts."""

    def __init__(self, db: "Database"):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(
        self,
        owner_id: str,
        name: str,
        account_type: Union[AccountType, str] = AccountType.CHECKING,
        initial_balance: Union[Decimal, int, str] = Decimal("0"),
        color: Optional[str] = None,
        icon: Optional[str] = None,
    ) -> AccountEntity:
        """Create a new account.

        Args:
            owner_id: Owning user
            name: Account name
            account_type: Kind of account
            initial_balance: Opening balance; may be negative (credit cards)
            color: Optional display color
            icon: Optional display icon

        Returns:
            The stored account

        Raises:
            ValidationError: If the name is empty or the balance is not a number
            ConflictError: If the owner already has an active account with this name
        """
        name = name.strip()
        if not name:
            raise ValidationError("Account name cannot be empty")
        try:
            account_type = AccountType(account_type)
        except ValueError:
            raise ValidationError(f"Unknown account type '{account_type}'")
        try:
            opening = Decimal(str(initial_balance))
        except InvalidOperation:
            raise ValidationError(f"Initial balance must be a number, got {initial_balance!r}")
        if not opening.is_finite():
            raise ValidationError(f"Initial balance must be a number, got {initial_balance!r}")

        # Check if account with same name exists
        for acc in self.db.list_accounts(owner_id):
            if acc.name == name:
                raise ConflictError(f"Account with name '{name}' already exists")

        account_id = self.db.create_account(
            owner_id=owner_id,
            name=name,
            account_type=account_type.value,
            initial_balance=opening,
            color=color or DEFAULT_ACCOUNT_COLOR,
            icon=icon or DEFAULT_ACCOUNT_ICON,
        )
        logger.info("account_created", owner_id=owner_id, account_id=account_id)
        return self.require_account(account_id)

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID.

        Args:
            account_id: Account ID

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(account_id)

    def require_account(self, account_id: int, owner_id: Optional[str] = None) -> AccountEntity:
        """Get account by ID or raise.

        Args:
            account_id: Account ID
            owner_id: If given, the account must belong to this owner

        Raises:
            NotFoundError: If account doesn't exist (or belongs to someone else)
        """
        account = self.db.get_account(account_id)
        if account is None or (owner_id is not None and account.owner_id != owner_id):
            raise NotFoundError(account_not_found(account_id))
        return account

    def list_accounts(self, owner_id: str, include_inactive: bool = False) -> list[AccountEntity]:
        """List an owner's accounts.

        Returns:
            List of account entities
        """
        return self.db.list_accounts(owner_id, include_inactive=include_inactive)

    def update_account(
        self,
        account_id: int,
        name: Optional[str] = None,
        account_type: Optional[Union[AccountType, str]] = None,
        color: Optional[str] = None,
        icon: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> AccountEntity:
        """Update account display fields. The balance is never edited here.

        Raises:
            NotFoundError: If account not found
            ConflictError: If the new name is taken
        """
        account = self.require_account(account_id)

        if name is not None:
            name = name.strip()
            if not name:
                raise ValidationError("Account name cannot be empty")
            # Check for duplicate names (excluding current account)
            for acc in self.db.list_accounts(account.owner_id):
                if acc.id != account_id and acc.name == name:
                    raise ConflictError(f"Account with name '{name}' already exists")

        type_value = None
        if account_type is not None:
            try:
                type_value = AccountType(account_type).value
            except ValueError:
                raise ValidationError(f"Unknown account type '{account_type}'")

        self.db.update_account(
            account_id=account_id,
            name=name,
            account_type=type_value,
            color=color,
            icon=icon,
            is_active=is_active,
        )
        return self.require_account(account_id)

    def deactivate_account(self, account_id: int) -> AccountEntity:
        """Soft-delete an account, keeping its history."""
        return self.update_account(account_id, is_active=False)

    def delete_account(self, account_id: int) -> None:
        """Delete an account.

        Args:
            account_id: Account ID to delete

        Raises:
            NotFoundError: If account not found
            DependencyError: If account has transactions or recurring schedules
        """
        self.require_account(account_id)

        transaction_count = self.db.get_account_transaction_count(account_id)
        recurring_count = self.db.get_account_recurring_count(account_id)
        if transaction_count > 0 or recurring_count > 0:
            raise DependencyError(
                account_delete_blocked(account_id, transaction_count, recurring_count)
            )

        self.db.delete_account(account_id)
        logger.info("account_deleted", account_id=account_id)

    def check_balance(self, account_id: int) -> BalanceCheck:
        """Recompute an account's balance from its full transaction history."""
        account = self.require_account(account_id)
        transactions = self.db.list_transactions(account_id=account_id)
        return BalanceCheck(
            account_id=account_id,
            stored=account.balance,
            recomputed=recompute_balance(account.initial_balance, transactions),
        )

    def verify_balance(self, account_id: int) -> BalanceCheck:
        """Check the balance invariant without correcting anything.

        Raises:
            InvariantViolationError: If stored and recomputed balances differ
                beyond rounding
        """
        check = self.check_balance(account_id)
        if abs(check.drift) > BALANCE_EPSILON:
            logger.warning(
                "balance_drift_detected",
                account_id=account_id,
                stored=str(check.stored),
                recomputed=str(check.recomputed),
                drift=str(check.drift),
            )
            raise InvariantViolationError(balance_drift(check), check=check)
        return check

    def repair_balance(self, account_id: int) -> BalanceCheck:
        """Overwrite the stored balance with the recomputed one.

        Returns:
            The check as it stood before the repair
        """
        check = self.check_balance(account_id)
        if check.drift != 0:
            self.db.set_account_balance(account_id, check.recomputed)
            logger.warning(
                "balance_repaired",
                account_id=account_id,
                previous=str(check.stored),
                repaired=str(check.recomputed),
            )
        return check

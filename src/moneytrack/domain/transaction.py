"""Transaction domain service."""

from typing import TYPE_CHECKING, Optional, Union
from datetime import date
from decimal import Decimal

import structlog

from moneytrack.domain.entities import RegisterEntry, TransactionType
from moneytrack.domain.entities import Transaction as TransactionEntity
from moneytrack.domain.errors import (
    NotFoundError,
    ValidationError,
    account_not_found,
    category_not_found,
    transaction_not_found,
)
from moneytrack.domain.ledger import BalanceLedger, require_positive_amount
from moneytrack.domain.running_balance import project_running_balances

if TYPE_CHECKING:
    from moneytrack.database.base import Database

logger = structlog.get_logger(__name__)


def _transaction_type(value: Union[TransactionType, str]) -> TransactionType:
    try:
        return TransactionType(value)
    except ValueError:
        raise ValidationError(f"Unknown transaction type '{value}'")


class TransactionService:
    """Service for managing transactions.

    Every write goes through the balance ledger inside one unit of work, so
    the transaction record and the account balance commit together.
    """

    def __init__(self, db: "Database"):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db
        self.ledger = BalanceLedger(db)

    def _check_category(self, owner_id: str, category_id: Optional[int]) -> None:
        if category_id is None:
            return
        category = self.db.get_category(category_id)
        if category is None or category.owner_id != owner_id:
            raise NotFoundError(category_not_found(category_id))

    def create_transaction(
        self,
        owner_id: str,
        account_id: int,
        transaction_type: Union[TransactionType, str],
        amount: Union[Decimal, int, str],
        date: date,
        description: str = "",
        category_id: Optional[int] = None,
        is_cleared: bool = True,
        notes: Optional[str] = None,
        recurring_id: Optional[int] = None,
    ) -> TransactionEntity:
        """Record a transaction and apply its effect to the account balance.

        Args:
            owner_id: Owning user
            account_id: Account the money moves in or out of
            transaction_type: income, expense, transfer_in or transfer_out
            amount: Positive amount; the type carries the direction
            date: Calendar date of the transaction
            description: Free-text description
            category_id: Optional category ID
            is_cleared: Whether the bank has cleared it
            notes: Optional notes
            recurring_id: Schedule that generated it, if any

        Returns:
            The stored transaction

        Raises:
            InvalidAmountError: If amount is not a positive number
            NotFoundError: If the account or category doesn't exist
        """
        transaction_type = _transaction_type(transaction_type)
        amount = require_positive_amount(amount)

        account = self.db.get_account(account_id)
        if account is None or account.owner_id != owner_id:
            raise NotFoundError(account_not_found(account_id))
        self._check_category(owner_id, category_id)

        with self.db.atomic():
            transaction_id = self.db.create_transaction(
                owner_id=owner_id,
                account_id=account_id,
                transaction_type=transaction_type.value,
                amount=amount,
                date=date,
                description=description,
                category_id=category_id,
                is_cleared=is_cleared,
                notes=notes,
                recurring_id=recurring_id,
            )
            transaction = self.db.get_transaction(transaction_id)
            self.ledger.record_create(account_id, transaction)

        logger.info(
            "transaction_created",
            transaction_id=transaction_id,
            account_id=account_id,
            transaction_type=transaction_type.value,
            amount=str(amount),
        )
        return transaction

    def get_transaction(self, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(transaction_id)

    def update_transaction(
        self,
        transaction_id: int,
        transaction_type: Optional[Union[TransactionType, str]] = None,
        amount: Optional[Union[Decimal, int, str]] = None,
        description: Optional[str] = None,
        category_id: Optional[int] = None,
        date: Optional[date] = None,
        is_cleared: Optional[bool] = None,
        notes: Optional[str] = None,
        clear_category: bool = False,
    ) -> TransactionEntity:
        """Edit a transaction, reversing its old effect and applying the new one.

        The account cannot be changed; delete and re-create instead.

        Args:
            transaction_id: Transaction ID to update
            transaction_type: Optional new type
            amount: Optional new amount
            description: Optional new description
            category_id: Optional new category ID
            date: Optional new date
            is_cleared: Optional new cleared flag
            notes: Optional new notes
            clear_category: If True, clear the category (category_id must be None)

        Returns:
            The updated transaction

        Raises:
            NotFoundError: If the transaction or category doesn't exist
            InvalidAmountError: If the new amount is not a positive number
        """
        if transaction_type is not None:
            transaction_type = _transaction_type(transaction_type)
        if amount is not None:
            amount = require_positive_amount(amount)
        if clear_category and category_id is not None:
            raise ValidationError("Cannot set both category_id and clear_category")

        old = self.db.get_transaction(transaction_id)
        if old is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        self._check_category(old.owner_id, category_id)

        with self.db.atomic():
            self.db.update_transaction(
                transaction_id=transaction_id,
                transaction_type=transaction_type.value if transaction_type else None,
                amount=amount,
                description=description,
                category_id=category_id,
                date=date,
                is_cleared=is_cleared,
                notes=notes,
                update_category=clear_category,
            )
            updated = self.db.get_transaction(transaction_id)
            delta = self.ledger.record_edit(old.account_id, old, updated)

        logger.info(
            "transaction_updated",
            transaction_id=transaction_id,
            account_id=old.account_id,
            delta=str(delta),
        )
        return updated

    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction and reverse its balance effect.

        Args:
            transaction_id: Transaction ID to delete

        Raises:
            NotFoundError: If transaction doesn't exist
        """
        txn = self.db.get_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))

        with self.db.atomic():
            self.db.delete_transaction(transaction_id)
            self.ledger.record_delete(txn.account_id, txn)

        logger.info("transaction_deleted", transaction_id=transaction_id, account_id=txn.account_id)

    def list_transactions(
        self,
        owner_id: str,
        account_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        category_id: Optional[int] = None,
    ) -> list[TransactionEntity]:
        """List an owner's transactions, newest first.

        Args:
            owner_id: Owning user
            account_id: Optional account filter
            start_date: Optional start date (inclusive)
            end_date: Optional end date (inclusive)
            category_id: Optional category filter

        Returns:
            List of transaction entities
        """
        return self.db.list_transactions(
            owner_id=owner_id,
            account_id=account_id,
            start_date=start_date,
            end_date=end_date,
            category_id=category_id,
        )

    def get_register(self, account_id: int) -> list[RegisterEntry]:
        """Account register: every transaction with the balance after it, newest first.

        Raises:
            NotFoundError: If account doesn't exist
        """
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        transactions = self.db.list_transactions(account_id=account_id)
        return project_running_balances(account.balance, transactions)

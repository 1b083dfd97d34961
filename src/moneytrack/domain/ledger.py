"""Balance ledger: keeps an account's stored balance in step with its transactions.

Every path that creates, edits or deletes a transaction goes through
``BalanceLedger``; nothing else writes ``Account.balance`` except the explicit
reconciliation repair in ``AccountService``.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import TYPE_CHECKING, Optional, Union

import structlog

from moneytrack.domain.entities import Transaction, TransactionType
from moneytrack.domain.errors import (
    InvalidAmountError,
    NotFoundError,
    account_not_found,
    invalid_amount,
)

if TYPE_CHECKING:
    from moneytrack.database.base import Database

logger = structlog.get_logger(__name__)

CENT = Decimal("0.01")


def signed_effect(transaction_type: TransactionType, amount: Decimal) -> Decimal:
    """Return the directional impact of a transaction on its account balance."""
    if TransactionType(transaction_type).is_inflow:
        return amount
    return -amount


def transaction_effect(transaction: Transaction) -> Decimal:
    """Signed effect of a stored transaction."""
    return signed_effect(transaction.transaction_type, transaction.amount)


def require_positive_amount(amount: Union[Decimal, int, float, str, None]) -> Decimal:
    """Coerce ``amount`` to a Decimal rounded half-up to cents.

    Amounts are stored with two decimals, so anything that rounds to 0.00
    is rejected rather than stored as an empty transaction.

    Raises:
        InvalidAmountError: If amount is missing, non-numeric, non-finite or
            below one cent after rounding
    """
    if amount is None or isinstance(amount, bool):
        raise InvalidAmountError(invalid_amount(amount))
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except (InvalidOperation, ValueError):
        raise InvalidAmountError(invalid_amount(amount))
    if not value.is_finite():
        raise InvalidAmountError(invalid_amount(amount))
    try:
        value = value.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise InvalidAmountError(invalid_amount(amount))
    if value <= 0:
        raise InvalidAmountError(invalid_amount(amount))
    return value


class BalanceLedger:
    """Applies transaction effects to account balances.

    Each operation issues exactly one atomic increment, so a reader never
    sees an edit that has been reversed but not re-applied.
    """

    def __init__(self, db: "Database"):
        """Initialize balance ledger.

        Args:
            db: Database instance
        """
        self.db = db

    def _apply(self, account_id: int, delta: Decimal, operation: str, transaction_id: Optional[int]) -> Decimal:
        if self.db.get_account(account_id) is None:
            raise NotFoundError(account_not_found(account_id))
        if delta != 0:
            self.db.adjust_account_balance(account_id, delta)
        logger.debug(
            "balance_adjusted",
            account_id=account_id,
            transaction_id=transaction_id,
            operation=operation,
            delta=str(delta),
        )
        return delta

    def record_create(self, account_id: int, transaction: Transaction) -> Decimal:
        """Apply a new transaction's effect. Returns the delta applied."""
        return self._apply(account_id, transaction_effect(transaction), "create", transaction.id)

    def record_edit(
        self,
        account_id: int,
        old_transaction: Optional[Transaction],
        new_transaction: Transaction,
    ) -> Decimal:
        """Reverse the old effect and apply the new one in a single increment.

        The type may change as part of the edit (expense to income), so the
        reversal and the re-application are computed separately.

        Raises:
            NotFoundError: If the old transaction is gone; applying only the
                new effect would corrupt the balance
        """
        if old_transaction is None:
            raise NotFoundError(
                f"Transaction {new_transaction.id} not found; edit would leave the balance inconsistent"
            )
        reversal = -transaction_effect(old_transaction)
        application = transaction_effect(new_transaction)
        return self._apply(account_id, reversal + application, "edit", new_transaction.id)

    def record_delete(self, account_id: int, transaction: Transaction) -> Decimal:
        """Reverse a removed transaction's effect. Returns the delta applied."""
        return self._apply(account_id, -transaction_effect(transaction), "delete", transaction.id)

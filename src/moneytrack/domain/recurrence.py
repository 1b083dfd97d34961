"""Recurring transactions: schedule arithmetic and the catch-up sweep."""

from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING, Optional, Union

import structlog
from dateutil.relativedelta import relativedelta

from moneytrack.domain.entities import RecurringFrequency, TransactionType
from moneytrack.domain.entities import RecurringTransaction as RecurringEntity
from moneytrack.domain.errors import (
    NotFoundError,
    ValidationError,
    account_not_found,
    category_not_found,
    recurring_not_found,
)
from moneytrack.domain.ledger import require_positive_amount
from moneytrack.domain.transaction import TransactionService

if TYPE_CHECKING:
    from moneytrack.database.base import Database

logger = structlog.get_logger(__name__)

_DAY_STEPS = {
    RecurringFrequency.DAILY: 1,
    RecurringFrequency.WEEKLY: 7,
    RecurringFrequency.BIWEEKLY: 14,
}


def next_occurrence(day: date, frequency: Union[RecurringFrequency, str]) -> date:
    """Return the occurrence one period after ``day``.

    Month and year steps keep the day-of-month offset and roll past the end
    of a short month rather than clamping to it: Jan 31 plus one month is
    Mar 3 (Mar 2 in a leap year) and Feb 29 plus one year is Mar 1.

    Args:
        day: Current occurrence
        frequency: Schedule frequency

    Returns:
        The following occurrence
    """
    frequency = RecurringFrequency(frequency)
    if frequency in _DAY_STEPS:
        return day + timedelta(days=_DAY_STEPS[frequency])

    if frequency == RecurringFrequency.MONTHLY:
        step = relativedelta(months=1)
    else:
        step = relativedelta(years=1)
    return day.replace(day=1) + step + timedelta(days=day.day - 1)


def auto_generated_note(description: str) -> str:
    """Notes annotation carried by every materialized occurrence."""
    return f"Auto-generated from recurring: {description}"


class RecurrenceService:
    """Service for recurring transaction schedules."""

    def __init__(self, db: "Database"):
        """Initialize recurrence service.

        Args:
            db: Database instance
        """
        self.db = db
        self.transactions = TransactionService(db)

    def create_recurring(
        self,
        owner_id: str,
        account_id: int,
        transaction_type: Union[TransactionType, str],
        amount: Union[Decimal, int, str],
        description: str,
        frequency: Union[RecurringFrequency, str],
        start_date: date,
        end_date: Optional[date] = None,
        category_id: Optional[int] = None,
    ) -> RecurringEntity:
        """Create a schedule. The first generated occurrence is one period after ``start_date``.

        Raises:
            InvalidAmountError: If amount is not a positive number
            NotFoundError: If the account or category doesn't exist
            ValidationError: If the type, frequency or end date is invalid
        """
        amount = require_positive_amount(amount)
        try:
            transaction_type = TransactionType(transaction_type)
            frequency = RecurringFrequency(frequency)
        except ValueError as e:
            raise ValidationError(str(e))
        if end_date is not None and end_date < start_date:
            raise ValidationError("End date cannot be before start date")

        account = self.db.get_account(account_id)
        if account is None or account.owner_id != owner_id:
            raise NotFoundError(account_not_found(account_id))
        if category_id is not None:
            category = self.db.get_category(category_id)
            if category is None or category.owner_id != owner_id:
                raise NotFoundError(category_not_found(category_id))

        recurring_id = self.db.create_recurring(
            owner_id=owner_id,
            account_id=account_id,
            transaction_type=transaction_type.value,
            amount=amount,
            description=description,
            frequency=frequency.value,
            start_date=start_date,
            next_date=next_occurrence(start_date, frequency),
            end_date=end_date,
            category_id=category_id,
        )
        logger.info("recurring_created", recurring_id=recurring_id, frequency=frequency.value)
        return self.db.get_recurring(recurring_id)

    def get_recurring(self, recurring_id: int) -> Optional[RecurringEntity]:
        """Get a schedule by ID."""
        return self.db.get_recurring(recurring_id)

    def list_recurring(self, owner_id: str, active_only: bool = True) -> list[RecurringEntity]:
        """List an owner's schedules ordered by next due date."""
        return self.db.list_recurring(owner_id, active_only=active_only)

    def list_upcoming(self, owner_id: str, today: date, days: int = 30) -> list[RecurringEntity]:
        """Active schedules due on or before ``today + days``, overdue ones included."""
        horizon = today + timedelta(days=days)
        return [item for item in self.db.list_recurring(owner_id) if item.next_date <= horizon]

    def update_recurring(
        self,
        recurring_id: int,
        amount: Optional[Union[Decimal, int, str]] = None,
        description: Optional[str] = None,
        category_id: Optional[int] = None,
        frequency: Optional[Union[RecurringFrequency, str]] = None,
        end_date: Optional[date] = None,
        is_active: Optional[bool] = None,
        clear_end_date: bool = False,
    ) -> RecurringEntity:
        """Update a schedule. Already generated transactions are left alone.

        Raises:
            NotFoundError: If the schedule doesn't exist
        """
        item = self.db.get_recurring(recurring_id)
        if item is None:
            raise NotFoundError(recurring_not_found(recurring_id))
        if amount is not None:
            amount = require_positive_amount(amount)
        frequency_value = None
        if frequency is not None:
            try:
                frequency_value = RecurringFrequency(frequency).value
            except ValueError as e:
                raise ValidationError(str(e))
        if category_id is not None:
            category = self.db.get_category(category_id)
            if category is None or category.owner_id != item.owner_id:
                raise NotFoundError(category_not_found(category_id))

        self.db.update_recurring(
            recurring_id,
            amount=amount,
            description=description,
            category_id=category_id,
            frequency=frequency_value,
            end_date=end_date,
            is_active=is_active,
            clear_end_date=clear_end_date,
        )
        return self.db.get_recurring(recurring_id)

    def delete_recurring(self, recurring_id: int) -> None:
        """Delete a schedule. Transactions it generated are kept.

        Raises:
            NotFoundError: If the schedule doesn't exist
        """
        if self.db.get_recurring(recurring_id) is None:
            raise NotFoundError(recurring_not_found(recurring_id))
        self.db.delete_recurring(recurring_id)
        logger.info("recurring_deleted", recurring_id=recurring_id)

    def _materialize(self, item: RecurringEntity, today: date) -> int:
        if item.end_date is not None and item.end_date < today:
            self.db.update_recurring(item.id, is_active=False, last_generated_date=today)
            logger.info("recurring_deactivated", recurring_id=item.id, reason="end_date_passed")
            return 0

        generated = 0
        occurrence = item.next_date
        while occurrence <= today:
            following = next_occurrence(occurrence, item.frequency)
            finished = item.end_date is not None and following > item.end_date

            # One unit of work per occurrence so a failure resumes exactly here
            with self.db.atomic():
                transaction = self.transactions.create_transaction(
                    owner_id=item.owner_id,
                    account_id=item.account_id,
                    transaction_type=item.transaction_type,
                    amount=item.amount,
                    date=occurrence,
                    description=item.description,
                    category_id=item.category_id,
                    notes=auto_generated_note(item.description),
                    recurring_id=item.id,
                )
                self.db.update_recurring(
                    item.id,
                    next_date=following,
                    last_generated_date=occurrence,
                    is_active=False if finished else None,
                )

            generated += 1
            logger.info(
                "recurring_occurrence_materialized",
                recurring_id=item.id,
                transaction_id=transaction.id,
                occurrence=occurrence.isoformat(),
            )
            occurrence = following
            if finished:
                logger.info("recurring_deactivated", recurring_id=item.id, reason="end_date_reached")
                break

        self.db.update_recurring(item.id, last_generated_date=today)
        return generated

    def sweep_recurring(self, owner_id: str, now: datetime) -> int:
        """Materialize every due occurrence of the owner's active schedules.

        The whole calendar day of ``now`` counts as due. Each occurrence is
        committed together with the schedule's advanced ``next_date``, so
        re-running the sweep never generates an occurrence twice and a
        failed sweep resumes from the first occurrence it did not commit.

        Args:
            owner_id: Owning user
            now: Current time

        Returns:
            Number of transactions generated

        Raises:
            StorageFailureError: If storage fails mid-sweep; earlier
                occurrences stay committed
        """
        today = now.date()
        generated = 0
        for item in self.db.list_recurring(owner_id):
            generated += self._materialize(item, today)

        logger.info("recurring_sweep_completed", owner_id=owner_id, generated=generated)
        return generated

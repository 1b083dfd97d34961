"""Running-balance projection and balance recomputation.

Both functions are pure: they take plain entities and never touch storage.
"""

from decimal import Decimal
from typing import Iterable, Sequence

from moneytrack.domain.entities import RegisterEntry, Transaction
from moneytrack.domain.ledger import transaction_effect


def chronological_key(transaction: Transaction) -> tuple:
    """Sort key giving a reproducible order for transactions sharing a date."""
    return (transaction.date, transaction.created_at, transaction.id)


def project_running_balances(
    balance: Decimal, transactions: Sequence[Transaction]
) -> list[RegisterEntry]:
    """Annotate transactions with the account balance after each one.

    Args:
        balance: The account's current stored balance
        transactions: Every transaction on the account, in any order

    Returns:
        Register entries ordered newest first
    """
    if not transactions:
        return []

    # Balance before any of the given transactions existed
    running = balance - sum((transaction_effect(txn) for txn in transactions), Decimal("0"))

    entries = []
    for txn in sorted(transactions, key=chronological_key):
        running += transaction_effect(txn)
        entries.append(RegisterEntry(transaction=txn, running_balance=running))

    entries.reverse()
    return entries


def recompute_balance(initial_balance: Decimal, transactions: Iterable[Transaction]) -> Decimal:
    """Authoritative balance: the initial balance plus every transaction effect."""
    return initial_balance + sum((transaction_effect(txn) for txn in transactions), Decimal("0"))

"""Utility for resolving account names to IDs."""

from moneytrack.domain.account import AccountService
from moneytrack.domain.errors import NotFoundError


def resolve_account(account_service: AccountService, owner_id: str, account: str | int) -> int:
    """Resolve an owner's account name or ID to an account ID.

    Args:
        account_service: AccountService instance
        owner_id: Owner whose accounts are searched
        account: Account name (str) or ID (int or string representation of int)

    Returns:
        Account ID

    Raises:
        NotFoundError: If the owner has no such account
    """
    try:
        account_id = int(account)
    except (ValueError, TypeError):
        account_id = None

    if account_id is not None:
        return account_service.require_account(account_id, owner_id=owner_id).id

    # Inactive accounts can still be addressed by name
    for acc in account_service.list_accounts(owner_id, include_inactive=True):
        if acc.name == account:
            return acc.id

    raise NotFoundError(f"Account '{account}' not found")

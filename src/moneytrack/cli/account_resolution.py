"""CLI helpers for account and category resolution."""

from __future__ import annotations

import click

from moneytrack.app import AppContext
from moneytrack.domain.entities import CategoryType
from moneytrack.utils.account_resolver import resolve_account


def resolve_account_or_exit(ctx: click.Context, app: AppContext, account: str | int) -> int:
    """Resolve account name or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_account(app.accounts, app.owner_id, account)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)


def resolve_category_or_exit(
    ctx: click.Context,
    app: AppContext,
    category: str,
    category_type: CategoryType | None = None,
) -> int:
    """Resolve a category name or ID for the current owner, or exit."""
    if category.isdigit():
        found = app.categories.get_category(int(category))
        if found is not None and found.owner_id == app.owner_id:
            return found.id
    else:
        found = app.categories.find_category(app.owner_id, category, category_type)
        if found is None and category_type is not None:
            found = app.categories.find_category(app.owner_id, category)
        if found is not None:
            return found.id

    click.echo(f"Error: Category '{category}' not found", err=True)
    ctx.exit(1)

"""Account management commands."""

import click

from moneytrack.cli.account_resolution import resolve_account_or_exit
from moneytrack.cli.error_handling import handle_domain_error
from moneytrack.domain.entities import AccountType
from moneytrack.domain.errors import DomainError, InvariantViolationError, StorageFailureError
from moneytrack.utils.amount_parser import format_amount

ACCOUNT_TYPES = [t.value for t in AccountType]


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option(
    "--type", "account_type", type=click.Choice(ACCOUNT_TYPES), default="checking", show_default=True
)
@click.option("--initial-balance", default="0", help="Opening balance (may be negative for credit cards)")
@click.option("--color", help="Display color, e.g. '#4CAF50'")
@click.option("--icon", help="Display icon name")
@click.pass_context
def create_account(
    ctx, name: str, account_type: str, initial_balance: str, color: str | None, icon: str | None
):
    """Create a new account.

    Examples:
        moneytrack account create "Checking"
        moneytrack account create "Visa" --type credit_card --initial-balance -250.00
    """
    app = ctx.obj["app"]

    try:
        acc = app.accounts.create_account(
            owner_id=app.owner_id,
            name=name,
            account_type=account_type,
            initial_balance=initial_balance.replace(",", ""),
            color=color,
            icon=icon,
        )
        click.echo(f"Created account '{acc.name}' (ID: {acc.id})")
        click.echo(f"  Balance: ${format_amount(acc.balance)}")
    except (DomainError, StorageFailureError) as e:
        handle_domain_error(ctx, e)


@account_group.command("list")
@click.option("--all", "include_inactive", is_flag=True, help="Include deactivated accounts")
@click.pass_context
def list_accounts(ctx, include_inactive: bool):
    """List accounts with their current balances."""
    app = ctx.obj["app"]

    accounts = app.accounts.list_accounts(app.owner_id, include_inactive=include_inactive)
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 70)
    for acc in accounts:
        status = "" if acc.is_active else " (inactive)"
        click.echo(
            f"ID: {acc.id:3d} | {acc.name:20s} | {acc.account_type.value:12s} | "
            f"${format_amount(acc.balance):>12s}{status}"
        )
    click.echo("-" * 70)
    total = sum(acc.balance for acc in accounts if acc.is_active)
    click.echo(f"Net worth: ${format_amount(total)}")


@account_group.command("update")
@click.argument("account", metavar="ACCOUNT")
@click.option("--name", help="New account name")
@click.option("--type", "account_type", type=click.Choice(ACCOUNT_TYPES), help="New account type")
@click.option("--color", help="New display color")
@click.option("--icon", help="New display icon")
@click.option("--deactivate", is_flag=True, help="Hide the account but keep its history")
@click.option("--activate", is_flag=True, help="Re-activate a deactivated account")
@click.pass_context
def update_account(
    ctx,
    account: str,
    name: str | None,
    account_type: str | None,
    color: str | None,
    icon: str | None,
    deactivate: bool,
    activate: bool,
) -> None:
    """Update an account's name, type or display settings.

    ACCOUNT can be an account name or ID. Balances cannot be edited; they
    follow the account's transactions.

    Examples:
        moneytrack account update "Checking" --name "Main Checking"
        moneytrack account update 2 --deactivate
    """
    app = ctx.obj["app"]

    if activate and deactivate:
        click.echo("Error: --activate and --deactivate cannot be combined", err=True)
        ctx.exit(1)
    is_active = True if activate else (False if deactivate else None)

    account_id = resolve_account_or_exit(ctx, app, account)
    try:
        acc = app.accounts.update_account(
            account_id,
            name=name,
            account_type=account_type,
            color=color,
            icon=icon,
            is_active=is_active,
        )
        click.echo(f"Updated account '{acc.name}' (ID: {acc.id})")
    except (DomainError, StorageFailureError) as e:
        handle_domain_error(ctx, e)


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_account(ctx, account: str, yes: bool) -> None:
    """Delete an account.

    ACCOUNT can be an account name or ID.

    The account can only be deleted if it has no transactions or recurring
    schedules. Deactivate it instead to keep its history.

    Examples:
        moneytrack account delete "Old Savings"
        moneytrack account delete 3 --yes
    """
    app = ctx.obj["app"]

    account_id = resolve_account_or_exit(ctx, app, account)
    account_obj = app.accounts.require_account(account_id)

    if not yes and not click.confirm(
        f"Are you sure you want to delete account '{account_obj.name}' (ID: {account_id})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        app.accounts.delete_account(account_id)
        click.echo(f"Deleted account '{account_obj.name}'")
    except (DomainError, StorageFailureError) as e:
        handle_domain_error(ctx, e)


@account_group.command("reconcile")
@click.argument("account", metavar="ACCOUNT", required=False)
@click.option("--repair", is_flag=True, help="Overwrite drifted balances with the recomputed value")
@click.pass_context
def reconcile_account(ctx, account: str | None, repair: bool) -> None:
    """Check stored balances against transaction history.

    Without ACCOUNT every account is checked. Exits with status 1 when a
    drifted balance is found and --repair was not given.

    Examples:
        moneytrack account reconcile
        moneytrack account reconcile "Checking" --repair
    """
    app = ctx.obj["app"]

    if account is not None:
        account_ids = [resolve_account_or_exit(ctx, app, account)]
    else:
        account_ids = [
            acc.id for acc in app.accounts.list_accounts(app.owner_id, include_inactive=True)
        ]

    drifted = 0
    for account_id in account_ids:
        try:
            if repair:
                check = app.accounts.repair_balance(account_id)
                if check.drift != 0:
                    click.echo(
                        f"Account {account_id}: repaired ${format_amount(check.stored)} "
                        f"-> ${format_amount(check.recomputed)}"
                    )
                    continue
            else:
                check = app.accounts.verify_balance(account_id)
        except InvariantViolationError as e:
            drifted += 1
            click.echo(f"Account {account_id}: {e}", err=True)
            continue
        except (DomainError, StorageFailureError) as e:
            handle_domain_error(ctx, e)
        click.echo(f"Account {account_id}: OK (${format_amount(check.recomputed)})")

    if drifted:
        click.echo(f"{drifted} account(s) out of balance. Run with --repair to fix.", err=True)
        ctx.exit(1)


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")

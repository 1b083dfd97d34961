"""Main CLI entry point."""

import click

from moneytrack.app import AppContext
from moneytrack.cli.error_handling import handle_domain_error
from moneytrack.config import load_settings
from moneytrack.domain.errors import DomainError, StorageFailureError
from moneytrack.log import configure_logging

# Import and register all commands at module level
from moneytrack.cli.commands import (
    account,
    add,
    alerts,
    budget,
    category,
    goal,
    recurring,
    transaction,
)

DEFAULT_OWNER = "local"


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides MONEYTRACK_DB_PATH environment variable)",
    envvar="MONEYTRACK_DB_PATH",
)
@click.option(
    "--owner",
    default=DEFAULT_OWNER,
    show_default=True,
    help="User whose data to operate on (overrides MONEYTRACK_OWNER environment variable)",
    envvar="MONEYTRACK_OWNER",
)
@click.option(
    "--no-sweep",
    is_flag=True,
    help="Do not generate due recurring transactions before running the command",
)
@click.pass_context
def cli(ctx, db_path: str | None, owner: str, no_sweep: bool):
    """Moneytrack - personal finance ledger.

    Keep account balances, recurring bills, budgets and savings goals in one
    place. Due recurring transactions are generated automatically each time
    a command runs.
    """
    ctx.ensure_object(dict)

    # Open storage only when actually running a command (not when showing help)
    if ctx.invoked_subcommand is None:
        return

    try:
        settings = load_settings()
    except DomainError as e:
        handle_domain_error(ctx, e)
    configure_logging(settings.log_level)

    app = AppContext.open(owner, db_path=db_path, settings=settings)
    ctx.obj["app"] = app
    ctx.call_on_close(app.close)

    ctx.obj["swept"] = 0
    if not no_sweep:
        try:
            ctx.obj["swept"] = app.sweep_once()
        except (DomainError, StorageFailureError) as e:
            handle_domain_error(ctx, e)


# Register all commands
account.register_commands(cli)
category.register_commands(cli)
add.register_commands(cli)
transaction.register_commands(cli)
recurring.register_commands(cli)
budget.register_commands(cli)
goal.register_commands(cli)
alerts.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()

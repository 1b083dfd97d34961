"""CLI error handling helpers."""

import click

from moneytrack.domain.errors import DomainError, StorageFailureError


def handle_domain_error(ctx: click.Context, error: DomainError | StorageFailureError | ValueError) -> None:
    """Render a domain or storage error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)

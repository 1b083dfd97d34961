"""Category management commands."""

import click

from moneytrack.cli.account_resolution import resolve_category_or_exit
from moneytrack.cli.error_handling import handle_domain_error
from moneytrack.domain.entities import CategoryType
from moneytrack.domain.errors import DomainError, StorageFailureError

CATEGORY_TYPES = [t.value for t in CategoryType]


@click.group()
def category_group():
    """Manage categories."""
    pass


@category_group.command("init")
@click.pass_context
def init_categories(ctx):
    """Create the default expense and income categories.

    Does nothing if categories already exist.
    """
    app = ctx.obj["app"]

    try:
        created = app.categories.seed_defaults(app.owner_id)
    except (DomainError, StorageFailureError) as e:
        handle_domain_error(ctx, e)

    if created == 0:
        click.echo("Categories already exist.")
    else:
        click.echo(f"Successfully created {created} categories.")


@category_group.command("list")
@click.option("--type", "category_type", type=click.Choice(CATEGORY_TYPES), help="Only show one type")
@click.pass_context
def list_categories(ctx, category_type: str | None):
    """List categories grouped by type."""
    app = ctx.obj["app"]

    categories = app.categories.list_categories(app.owner_id, category_type=category_type)
    if not categories:
        click.echo("No categories found. Run 'category init' to create default categories.")
        return

    current_type = None
    for cat in categories:
        if cat.category_type != current_type:
            current_type = cat.category_type
            click.echo(f"\n{current_type.value.capitalize()}:")
        marker = " *" if cat.is_default else ""
        click.echo(f"  {cat.name} (ID: {cat.id}){marker}")


@category_group.command("create")
@click.argument("name")
@click.option(
    "--type", "category_type", type=click.Choice(CATEGORY_TYPES), default="expense", show_default=True
)
@click.option("--icon", help="Display icon name")
@click.option("--color", help="Display color")
@click.pass_context
def create_category(ctx, name: str, category_type: str, icon: str | None, color: str | None):
    """Create a new category."""
    app = ctx.obj["app"]

    try:
        cat = app.categories.create_category(
            app.owner_id, name, category_type, icon=icon, color=color
        )
        click.echo(f"Created {cat.category_type.value} category '{cat.name}' (ID: {cat.id})")
    except (DomainError, StorageFailureError) as e:
        handle_domain_error(ctx, e)


@category_group.command("update")
@click.argument("category")
@click.option("--name", help="New category name")
@click.option("--icon", help="New display icon name")
@click.option("--color", help="New display color")
@click.pass_context
def update_category(ctx, category: str, name: str | None, icon: str | None, color: str | None):
    """Rename a category or change how it is displayed.

    CATEGORY can be a name or ID.
    """
    app = ctx.obj["app"]

    category_id = resolve_category_or_exit(ctx, app, category)
    try:
        cat = app.categories.update_category(category_id, name=name, icon=icon, color=color)
        click.echo(f"Updated category '{cat.name}' (ID: {cat.id})")
    except (DomainError, StorageFailureError) as e:
        handle_domain_error(ctx, e)


@category_group.command("delete")
@click.argument("category")
@click.pass_context
def delete_category(ctx, category: str):
    """Delete a category.

    CATEGORY can be a name or ID. Default categories and categories used by
    transactions, budgets or recurring schedules cannot be deleted.
    """
    app = ctx.obj["app"]

    category_id = resolve_category_or_exit(ctx, app, category)
    try:
        app.categories.delete_category(category_id)
        click.echo(f"Deleted category {category_id}")
    except (DomainError, StorageFailureError) as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")

"""Category commands."""

import click

from lawledger.cli.error_handling import handle_domain_error
from lawledger.domain.category import CategoryService
from lawledger.domain.errors import DomainError


@click.group()
def category_group():
    """Manage transaction categories."""
    pass


@category_group.command("add")
@click.argument("name")
@click.option("--type", "category_type", required=True, help="Transaction type the category is for (e.g. Gelir, Gider)")
@click.pass_context
def add_category(ctx, name: str, category_type: str):
    """Add a category.

    Examples:
        lawledger category add "Vekalet Ücreti" --type Gelir
        lawledger category add "Kira" --type Gider
    """
    service = CategoryService(ctx.obj["db"])
    try:
        service.create_category(name, category_type)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Created category '{name}'")


@category_group.command("list")
@click.option("--type", "category_type", help="Only categories for this transaction type")
@click.pass_context
def list_categories(ctx, category_type: str | None):
    """List categories."""
    service = CategoryService(ctx.obj["db"])
    try:
        categories = service.list_categories(type=category_type)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not categories:
        click.echo("No categories found.")
        return
    for cat in categories:
        click.echo(f"{cat.type:8s} | {cat.name}")


@category_group.command("delete")
@click.argument("name")
@click.pass_context
def delete_category(ctx, name: str):
    """Delete a category by name."""
    service = CategoryService(ctx.obj["db"])
    try:
        service.delete_category(name)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Deleted category '{name}'")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")

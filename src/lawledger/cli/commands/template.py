"""Import template commands."""

import click

from lawledger.cli.error_handling import handle_domain_error
from lawledger.domain.errors import DomainError
from lawledger.domain.import_template import ImportTemplateService


@click.group()
def template_group():
    """Manage saved spreadsheet import mappings."""
    pass


@template_group.command("list")
@click.pass_context
def list_templates(ctx):
    """List saved import mappings."""
    templates = ImportTemplateService(ctx.obj["db"]).list_templates()
    if not templates:
        click.echo("No import templates found.")
        return

    for template in templates:
        click.echo(f"\n{template.name}")
        for field, column in template.mapping.items():
            click.echo(f"  {field:14s} <- {column}")


@template_group.command("delete")
@click.argument("name")
@click.pass_context
def delete_template(ctx, name: str):
    """Delete a saved import mapping."""
    service = ImportTemplateService(ctx.obj["db"])
    try:
        service.delete_template(name)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Deleted import template '{name}'")


def register_commands(cli):
    """Register template commands with main CLI."""
    cli.add_command(template_group, name="template")

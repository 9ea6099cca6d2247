"""Organization settings commands."""

import click

from lawledger.cli.error_handling import handle_domain_error
from lawledger.domain.errors import DomainError
from lawledger.domain.settings import OrganizationService


@click.group()
def settings_group():
    """Show and change settings."""
    pass


@settings_group.command("show")
@click.pass_context
def show_settings(ctx):
    """Show organization and runtime settings."""
    organization = OrganizationService(ctx.obj["db"]).get_settings()
    ledger_settings = ctx.obj["settings"]

    click.echo(f"Organization:          {organization.app_name}")
    if organization.logo_url:
        click.echo(f"Logo:                  {organization.logo_url}")
    click.echo(f"Database:              {ledger_settings.resolve_database_path()}")
    click.echo(f"USD rate:              {ledger_settings.usd_rate}")
    click.echo(f"EUR rate:              {ledger_settings.eur_rate}")
    click.echo(f"Reconciliation limit:  {ledger_settings.reconciliation_tolerance}")
    click.echo(f"Credit card marker:    {ledger_settings.credit_card_marker}")


@settings_group.command("set-name")
@click.argument("app_name")
@click.option("--logo", "logo_url", help="Logo URL")
@click.pass_context
def set_name(ctx, app_name: str, logo_url: str | None):
    """Set the organization name shown on reports."""
    service = OrganizationService(ctx.obj["db"])
    try:
        service.set_app_name(app_name, logo_url=logo_url)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Organization name set to '{app_name}'")


def register_commands(cli):
    """Register settings commands with main CLI."""
    cli.add_command(settings_group, name="settings")

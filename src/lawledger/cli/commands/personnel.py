"""Personnel roster commands."""

import click

from lawledger.cli.error_handling import handle_domain_error
from lawledger.domain.errors import DomainError
from lawledger.domain.personnel import PersonnelService

PROFILE_OPTIONS = ("role", "title", "email", "phone", "location", "start_date")


def _profile_options(func):
    for name in reversed(PROFILE_OPTIONS):
        option = click.option(
            f"--{name.replace('_', '-')}",
            name,
            default=None,
            help=name.replace("_", " ").capitalize(),
        )
        func = option(func)
    return func


def _find_person(service: PersonnelService, key: str):
    return service.get_personnel(key) or service.get_personnel_by_name(key)


@click.group()
def personnel_group():
    """Manage the staff roster."""
    pass


@personnel_group.command("add")
@click.argument("full_name")
@click.option("--bonus", default="0", show_default=True, help="Profit share percentage (0-100)")
@_profile_options
@click.pass_context
def add_personnel(ctx, full_name: str, bonus: str, **profile):
    """Add a staff member.

    Transactions refer to staff by FULL_NAME.

    Examples:
        lawledger personnel add "Ayşe Yılmaz" --bonus 40 --title Avukat
    """
    service = PersonnelService(ctx.obj["db"])
    fields = {name: value for name, value in profile.items() if value is not None}
    try:
        personnel_id = service.create_personnel(full_name, bonus_percentage=bonus, **fields)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Added '{full_name}' (ID: {personnel_id})")


@personnel_group.command("update")
@click.argument("person")
@click.option("--name", "full_name", help="New full name")
@click.option("--bonus", help="Profit share percentage (0-100)")
@_profile_options
@click.pass_context
def update_personnel(ctx, person: str, full_name, bonus, **profile):
    """Update a staff member, given by ID or full name."""
    fields = {name: value for name, value in profile.items() if value is not None}
    if full_name is not None:
        fields["full_name"] = full_name
    if bonus is not None:
        fields["bonus_percentage"] = bonus
    if not fields:
        click.echo("Error: No fields to update were given", err=True)
        ctx.exit(1)

    service = PersonnelService(ctx.obj["db"])
    found = _find_person(service, person)
    if found is None:
        click.echo(f"Error: Personnel {person} not found", err=True)
        ctx.exit(1)

    try:
        service.update_personnel(found.id, **fields)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Updated personnel '{found.full_name}'")


@personnel_group.command("delete")
@click.argument("key")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.pass_context
def delete_personnel(ctx, key: str, yes: bool):
    """Remove a staff member, given by ID or full name. Their transactions are kept."""
    service = PersonnelService(ctx.obj["db"])
    person = _find_person(service, key)
    if person is None:
        click.echo(f"Error: Personnel {key} not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(f"Remove '{person.full_name}' from the roster?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_personnel(person.id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Removed '{person.full_name}'")


@personnel_group.command("list")
@click.pass_context
def list_personnel(ctx):
    """List the staff roster."""
    people = PersonnelService(ctx.obj["db"]).list_personnel()
    if not people:
        click.echo("No personnel found.")
        return

    click.echo("\nPersonnel:")
    click.echo("-" * 80)
    for person in people:
        click.echo(
            f"{person.id} | {person.full_name:25s} | {person.title or '-':15s} | "
            f"%{person.bonus_percentage}"
        )


def register_commands(cli):
    """Register personnel commands with main CLI."""
    cli.add_command(personnel_group, name="personnel")

"""Spreadsheet import command."""

import click

from lawledger.cli.error_handling import handle_domain_error
from lawledger.cli.formatting import transaction_line
from lawledger.domain.errors import DomainError, ValidationError, missing_required_fields
from lawledger.domain.spreadsheet_import import (
    IMPORT_FIELDS,
    SpreadsheetImportService,
    preview,
    read_spreadsheet,
    validate_mapping,
)


def _parse_map_options(values: tuple[str, ...]) -> dict[str, str]:
    mapping: dict[str, str] = {}
    for value in values:
        field, sep, column = value.partition("=")
        if not sep or not field.strip() or not column.strip():
            raise ValidationError(f"Invalid --map '{value}'. Use field=Column, e.g. date=Tarih")
        mapping[field.strip()] = column.strip()
    return mapping


@click.command("import")
@click.argument("spreadsheet", type=click.Path(exists=True, dir_okay=False))
@click.option("--map", "map_options", multiple=True,
              help=f"Column for a field as field=Column. Fields: {', '.join(IMPORT_FIELDS)}")
@click.option("--template", "template_name", help="Use a saved mapping (--map entries override it)")
@click.option("--save-template", help="Save the mapping under this name after importing")
@click.option("--preview", "show_preview", is_flag=True, help="Show the first rows as they would be imported and stop")
@click.pass_context
def import_spreadsheet(ctx, spreadsheet: str, map_options, template_name, save_template, show_preview):
    """Import transactions from a CSV or XLSX file.

    The first row must hold column headers. date, amount and description
    must be mapped. Imported transactions are approved and numbered
    YYYYMMDD-BLK-NNNNN.

    Examples:
        lawledger import ekstre.xlsx --map date=Tarih --map amount=Tutar --map description=Açıklama
        lawledger import ekstre.csv --template banka --preview
    """
    service = SpreadsheetImportService(ctx.obj["db"])
    try:
        mapping = service.resolve_mapping(_parse_map_options(map_options), template_name)
        data = read_spreadsheet(spreadsheet)
        missing = validate_mapping(mapping)
        if missing:
            raise ValidationError(missing_required_fields(missing))
    except (DomainError, OSError) as e:
        handle_domain_error(ctx, e)
        return

    if show_preview:
        click.echo(f"Columns: {', '.join(data.headers)}")
        click.echo(f"Rows: {len(data.rows)}\n")
        for txn in preview(data.rows, mapping):
            click.echo(transaction_line(txn))
        return

    try:
        result = service.import_rows(data.rows, mapping, save_template_as=save_template)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo("\nImport complete:")
    click.echo(f"  Imported: {result.imported} transactions")
    if result.transaction_numbers:
        click.echo(f"  Numbers: {result.transaction_numbers[0]} .. {result.transaction_numbers[-1]}")
    if result.template_saved:
        click.echo(f"  Saved mapping as template '{save_template}'")
    for error in result.errors:
        click.echo(f"  {error}", err=True)


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_spreadsheet)

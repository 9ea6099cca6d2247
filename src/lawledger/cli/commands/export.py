"""Spreadsheet export commands."""

import click

from lawledger.cli.error_handling import handle_domain_error
from lawledger.config import CLIENT_GROUP_LABEL
from lawledger.domain import aggregation, export as exporter
from lawledger.domain.errors import DomainError
from lawledger.domain.ledger import LedgerService
from lawledger.domain.transaction import TransactionService


def _write(ctx, output: str, sheets) -> None:
    try:
        path = exporter.export_sheets(output, sheets)
    except (DomainError, OSError) as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Exported to {path}")


@click.group()
def export_group():
    """Export reports to XLSX or CSV."""
    pass


@export_group.command("group")
@click.argument("group_name")
@click.option("--exclude", multiple=True, help="Client to leave out (repeatable)")
@click.option("--output", "-o", help="Output file (.xlsx or .csv)")
@click.pass_context
def export_group_statement(ctx, group_name: str, exclude: tuple[str, ...], output: str | None):
    """Export a client/project group statement."""
    transactions = TransactionService(ctx.obj["db"]).list_transactions()
    detail = aggregation.group_detail(transactions, group_name, exclude, default_label=CLIENT_GROUP_LABEL)
    output = output or exporter.default_export_name(group_name, "Proje_Ekstresi")
    _write(ctx, output, [exporter.group_statement_sheet(detail)])


@export_group.command("account-group")
@click.argument("group_name")
@click.option("--exclude", multiple=True, help="Client to leave out (repeatable)")
@click.option("--output", "-o", help="Output file (.xlsx or .csv)")
@click.pass_context
def export_account_group(ctx, group_name: str, exclude: tuple[str, ...], output: str | None):
    """Export an expense statement with its monthly summary."""
    transactions = TransactionService(ctx.obj["db"]).list_transactions()
    detail = aggregation.group_detail(transactions, group_name, exclude)
    output = output or exporter.default_export_name(group_name, "Masraf_Ekstresi")
    _write(ctx, output, exporter.account_group_sheets(detail))


@export_group.command("personnel")
@click.argument("full_name")
@click.option("--year", type=int, help="Quarter year (with --quarter)")
@click.option("--quarter", type=click.IntRange(1, 4), help="Quarter number (with --year)")
@click.option("--output", "-o", help="Output file (.xlsx or .csv)")
@click.pass_context
def export_personnel(ctx, full_name: str, year: int | None, quarter: int | None, output: str | None):
    """Export a quarterly profit-share statement, or the current-account ledger.

    With --year and --quarter the quarter's summary and transactions are
    exported; without them, the person's DEBT/RECEIVABLE/CURRENT movements.
    """
    snapshot = LedgerService(ctx.obj["db"], ctx.obj["settings"]).refresh()
    summary = next((s for s in snapshot.personnel_summaries if s.person.full_name == full_name), None)
    if summary is None:
        click.echo(f"Error: Personnel '{full_name}' not found", err=True)
        ctx.exit(1)

    stem = exporter.safe_file_stem(full_name)
    if year is None and quarter is None:
        ledger = aggregation.personnel_ledger(snapshot.transactions, full_name)
        _write(ctx, output or f"{stem}_cari_hesap_dokumu.xlsx", [exporter.personnel_ledger_sheet(ledger.financial)])
        return
    if year is None or quarter is None:
        click.echo("Error: --year and --quarter must be given together", err=True)
        ctx.exit(1)

    stat = next((q for q in summary.quarterly_stats if (q.year, q.quarter) == (year, quarter)), None)
    if stat is None:
        click.echo(f"Error: No transactions for {full_name} in {year}-Q{quarter}", err=True)
        ctx.exit(1)

    transactions = aggregation.quarter_transactions(snapshot.transactions, full_name, year, quarter)
    sheets = exporter.personnel_quarter_sheets(summary.person, stat, transactions)
    _write(ctx, output or f"{stem}_{year}_Q{quarter}_hakedis.xlsx", sheets)


@export_group.command("transactions")
@click.option("--search", help="Text to find in number, client, counterparty, description, category or account")
@click.option("--type", "txn_type", help="Only this transaction type")
@click.option("--status", help="Only this status")
@click.option("--output", "-o", required=True, help="Output file (.xlsx or .csv)")
@click.pass_context
def export_transactions(ctx, search, txn_type, status, output: str):
    """Export the (filtered) transaction list."""
    try:
        transactions = TransactionService(ctx.obj["db"]).list_transactions(
            search=search, type=txn_type, status=status
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    _write(ctx, output, [exporter.transaction_list_sheet(transactions)])


def register_commands(cli):
    """Register export commands with main CLI."""
    cli.add_command(export_group, name="export")

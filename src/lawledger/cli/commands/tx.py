"""Transaction commands."""

import click

from lawledger.cli.error_handling import handle_domain_error
from lawledger.cli.formatting import transaction_line
from lawledger.domain.errors import DomainError, InlineEditError
from lawledger.domain.transaction import SORT_KEYS, TransactionService

TYPE_HELP = "Gelir/Gider/Alacak/Borç/Cari or INCOME/EXPENSE/RECEIVABLE/DEBT/CURRENT"
STATUS_HELP = "Onaylandı/İnceleniyor/Reddedildi or APPROVED/PENDING/REJECTED"


@click.group()
def tx_group():
    """Record and manage transactions."""
    pass


@tx_group.command("add")
@click.option("--date", "txn_date", default="today", show_default=True,
              help="Transaction date (YYYY-MM-DD, DD.MM.YYYY or 'today', 'yesterday')")
@click.option("--amount", required=True, help="Amount (e.g. 1250.50 or 1.250,50)")
@click.option("--type", "txn_type", required=True, help=f"Transaction type: {TYPE_HELP}")
@click.option("--status", default="APPROVED", show_default=True, help=f"Status: {STATUS_HELP}")
@click.option("--description", default="", help="Description")
@click.option("--category", default="", help="Category name")
@click.option("--method", default="", help="Payment method")
@click.option("--account", default="", help="Bank account name")
@click.option("--client", default="", help="Client name")
@click.option("--group", default="", help="Project / case name")
@click.option("--counterparty", default="", help="Counterparty name")
@click.option("--personnel", default="", help="Staff member (full name)")
@click.option("--number", default=None, help="Transaction number (generated as YYYYMMDD-NNN if omitted)")
@click.option("--payment", is_flag=True, help="For Cari entries: record a payment (reduces the balance)")
@click.pass_context
def add_transaction(
    ctx,
    txn_date: str,
    amount: str,
    txn_type: str,
    status: str,
    description: str,
    category: str,
    method: str,
    account: str,
    client: str,
    group: str,
    counterparty: str,
    personnel: str,
    number: str | None,
    payment: bool,
):
    """Add a transaction.

    Cari (current-account) entries are always approved, use the
    current-account method, carry no bank account and take the client as
    counterparty.

    Examples:
        lawledger tx add --amount 1500 --type Gelir --client "Acme" --group "Dava 2024/12"
        lawledger tx add --date 15.03.2024 --amount 500 --type Cari --client "Acme" --payment
    """
    service = TransactionService(ctx.obj["db"])
    try:
        transaction_id = service.create_transaction(
            date=txn_date,
            amount=amount,
            type=txn_type,
            status=status,
            description=description,
            category=category,
            method=method,
            account=account,
            client=client,
            group=group,
            counterparty=counterparty,
            personnel=personnel,
            transaction_number=number,
            is_payment=payment,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    txn = service.get_transaction(transaction_id)
    click.echo(f"Created transaction {txn.transaction_number} (ID: {transaction_id})")
    click.echo(transaction_line(txn))


@tx_group.command("update")
@click.argument("transaction_id")
@click.option("--date", "txn_date", help="Transaction date")
@click.option("--amount", help="Amount")
@click.option("--type", "txn_type", help=f"Transaction type: {TYPE_HELP}")
@click.option("--status", help=f"Status: {STATUS_HELP}")
@click.option("--description", help="Description")
@click.option("--category", help="Category name")
@click.option("--method", help="Payment method")
@click.option("--account", help="Bank account name")
@click.option("--client", help="Client name")
@click.option("--group", help="Project / case name")
@click.option("--counterparty", help="Counterparty name")
@click.option("--personnel", help="Staff member (full name)")
@click.option("--number", help="Transaction number")
@click.option("--payment/--accrual", "is_payment", default=None,
              help="For Cari entries: record as a payment or an accrual (default: keep direction)")
@click.pass_context
def update_transaction(ctx, transaction_id: str, txn_date, txn_type, number, is_payment, **options) -> None:
    """Update a transaction.

    Updates only the fields that are provided. Amounts are stored as
    magnitudes; Cari entries keep their direction unless --payment or
    --accrual is given.

    Examples:
        lawledger tx update 5f1c... --status Reddedildi
        lawledger tx update 5f1c... --amount 1750 --client "Acme"
    """
    fields = {name: value for name, value in options.items() if value is not None}
    if txn_date is not None:
        fields["date"] = txn_date
    if txn_type is not None:
        fields["type"] = txn_type
    if number is not None:
        fields["transaction_number"] = number
    if not fields and is_payment is None:
        click.echo("Error: No fields to update were given", err=True)
        ctx.exit(1)

    service = TransactionService(ctx.obj["db"])
    try:
        service.update_transaction(transaction_id, is_payment=is_payment, **fields)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Updated transaction {transaction_id}")


@tx_group.command("edit")
@click.argument("transaction_id")
@click.argument("field")
@click.argument("value")
@click.pass_context
def edit_transaction(ctx, transaction_id: str, field: str, value: str) -> None:
    """Change a single field of a transaction (inline edit).

    The transaction number cannot be edited this way. If saving fails, the
    previous values are kept.

    Examples:
        lawledger tx edit 5f1c... status Onaylandı
        lawledger tx edit 5f1c... amount "2.000,00"
    """
    service = TransactionService(ctx.obj["db"])
    transactions = service.list_transactions()
    try:
        updated = service.update_field(transactions, transaction_id, field, value)
    except InlineEditError as e:
        click.echo(f"Error: {e}", err=True)
        click.echo(f"Edit rolled back; {len(e.snapshot)} transactions unchanged.", err=True)
        ctx.exit(1)
        return
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    edited = next(t for t in updated if t.id == transaction_id)
    click.echo(f"Updated {field} of {edited.transaction_number}")
    click.echo(transaction_line(edited))


@tx_group.command("delete")
@click.argument("transaction_ids", nargs=-1, required=True)
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.pass_context
def delete_transactions(ctx, transaction_ids: tuple[str, ...], yes: bool) -> None:
    """Delete one or more transactions.

    Examples:
        lawledger tx delete 5f1c...
        lawledger tx delete 5f1c... 9a2e... --yes
    """
    service = TransactionService(ctx.obj["db"])
    count = len(transaction_ids)
    if not yes and not click.confirm(f"Delete {count} transaction{'s' if count != 1 else ''}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        if count == 1:
            service.delete_transaction(transaction_ids[0])
            deleted = 1
        else:
            deleted = service.delete_transactions(transaction_ids)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Deleted {deleted} transaction{'s' if deleted != 1 else ''}")


@tx_group.command("list")
@click.option("--search", help="Text to find in number, client, counterparty, description, category or account")
@click.option("--type", "txn_type", help=f"Only this type: {TYPE_HELP}")
@click.option("--status", help=f"Only this status: {STATUS_HELP}")
@click.option("--sort", "sort_key", type=click.Choice(SORT_KEYS), default="transaction_number", show_default=True)
@click.option("--asc", is_flag=True, help="Sort ascending")
@click.option("--limit", type=int, help="Show at most this many rows")
@click.option("--ids", is_flag=True, help="Show transaction IDs")
@click.pass_context
def list_transactions(ctx, search, txn_type, status, sort_key, asc, limit, ids) -> None:
    """List transactions."""
    service = TransactionService(ctx.obj["db"])
    try:
        transactions = service.list_transactions(
            search=search, type=txn_type, status=status, sort_key=sort_key, descending=not asc
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not transactions:
        click.echo("No transactions found.")
        return

    shown = transactions[:limit] if limit else transactions
    for txn in shown:
        line = transaction_line(txn)
        click.echo(f"{txn.id} | {line}" if ids else line)
    click.echo(f"\n{len(shown)} of {len(transactions)} transaction(s)")


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(tx_group, name="tx")

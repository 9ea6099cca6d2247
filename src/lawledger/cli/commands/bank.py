"""Bank account commands."""

import click

from lawledger.cli.error_handling import handle_domain_error
from lawledger.cli.formatting import format_amount
from lawledger.domain.account import BankAccountService
from lawledger.domain.aggregation import live_accounts
from lawledger.domain.errors import DomainError
from lawledger.domain.transaction import TransactionService


@click.group()
def bank_group():
    """Manage bank and cash accounts."""
    pass


@bank_group.command("add")
@click.argument("name", metavar="BANK_NAME")
@click.option("--number", "account_number", default="", help="Account number or IBAN")
@click.option("--balance", default="0", show_default=True, help="Opening balance")
@click.option("--currency", default="TRY", show_default=True, help="TRY, USD or EUR")
@click.option("--type", "account_type", default="", help="Kind of account, e.g. 'Vadesiz', 'Kasa', 'Kredi Kartı'")
@click.pass_context
def add_bank_account(ctx, name: str, account_number: str, balance: str, currency: str, account_type: str):
    """Add a bank account.

    Transactions are linked to the account by BANK_NAME.

    Examples:
        lawledger bank add "Ziraat TL" --balance 10000 --type Vadesiz
        lawledger bank add "Garanti Kart" --type "Kredi Kartı"
    """
    service = BankAccountService(ctx.obj["db"])
    try:
        account_id = service.create_bank_account(
            bank_name=name,
            account_number=account_number,
            balance=balance,
            currency=currency,
            type=account_type,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Created bank account '{name}' (ID: {account_id})")


@bank_group.command("update")
@click.argument("account_id")
@click.option("--name", "bank_name", help="New bank account name")
@click.option("--number", "account_number", help="Account number or IBAN")
@click.option("--balance", help="Opening balance")
@click.option("--currency", help="TRY, USD or EUR")
@click.option("--type", "account_type", help="Kind of account")
@click.pass_context
def update_bank_account(ctx, account_id: str, bank_name, account_number, balance, currency, account_type):
    """Update a bank account's details or opening balance."""
    fields = {
        "bank_name": bank_name,
        "account_number": account_number,
        "balance": balance,
        "currency": currency,
        "type": account_type,
    }
    fields = {name: value for name, value in fields.items() if value is not None}
    if not fields:
        click.echo("Error: No fields to update were given", err=True)
        ctx.exit(1)

    service = BankAccountService(ctx.obj["db"])
    try:
        service.update_bank_account(account_id, **fields)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Updated bank account {account_id}")


@bank_group.command("delete")
@click.argument("account_id")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.pass_context
def delete_bank_account(ctx, account_id: str, yes: bool):
    """Delete a bank account. Its transactions are kept."""
    service = BankAccountService(ctx.obj["db"])
    account = service.get_bank_account(account_id)
    if account is None:
        click.echo(f"Error: Bank account {account_id} not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(f"Delete bank account '{account.bank_name}'?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_bank_account(account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Deleted bank account '{account.bank_name}'")


@bank_group.command("list")
@click.pass_context
def list_bank_accounts(ctx):
    """List bank accounts with their live balances."""
    db = ctx.obj["db"]
    accounts = BankAccountService(db).list_bank_accounts()
    if not accounts:
        click.echo("No bank accounts found.")
        return

    transactions = TransactionService(db).list_transactions()
    click.echo("\nBank accounts:")
    click.echo("-" * 100)
    for entry in live_accounts(transactions, accounts):
        acc = entry.account
        click.echo(
            f"{acc.id} | {acc.bank_name:20s} | {acc.type or '-':12s} | {acc.currency.value} | "
            f"opening {format_amount(acc.balance):>14s} | live {format_amount(entry.balance):>14s}"
        )


def register_commands(cli):
    """Register bank account commands with main CLI."""
    cli.add_command(bank_group, name="bank")

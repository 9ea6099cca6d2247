"""Main CLI entry point."""

import dataclasses
import logging

import click
from lawledger.config import LedgerSettings
from lawledger.database.factories import create_sqlite_database
from lawledger.log import init_logging

# Import and register all commands at module level
from lawledger.cli.commands import (
    bank,
    category,
    export,
    import_cmd,
    personnel,
    report,
    settings,
    template,
    tx,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides LAWLEDGER_DB_PATH environment variable)",
    envvar="LAWLEDGER_DB_PATH",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging on stderr")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool):
    """Lawledger - law office accounting ledger.

    Record income, expenses, receivables, debts and current-account entries,
    track bank balances, and report per client, project and staff member.
    """
    ctx.ensure_object(dict)

    ledger_settings = LedgerSettings.from_env()
    if db_path is not None:
        ledger_settings = dataclasses.replace(ledger_settings, database_path=db_path)
    init_logging(logging.DEBUG if verbose else ledger_settings.log_level)
    ctx.obj["settings"] = ledger_settings

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=ledger_settings.resolve_database_path())
        db.connect()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
tx.register_commands(cli)
bank.register_commands(cli)
personnel.register_commands(cli)
category.register_commands(cli)
template.register_commands(cli)
import_cmd.register_commands(cli)
report.register_commands(cli)
export.register_commands(cli)
settings.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()

"""Report commands over the derived ledger views."""

import click

from lawledger.cli.formatting import format_amount, transaction_line
from lawledger.domain import aggregation
from lawledger.domain.aggregation import GroupSort, PersonnelSort
from lawledger.domain.ledger import LedgerService, LedgerSnapshot


def _snapshot(ctx) -> LedgerSnapshot:
    snapshot = LedgerService(ctx.obj["db"], ctx.obj["settings"]).refresh()
    for source in snapshot.degraded_sources:
        click.echo(f"Warning: {source} could not be loaded; figures exclude them", err=True)
    return snapshot


def _echo_unmatched(snapshot: LedgerSnapshot) -> None:
    unmatched = snapshot.unmatched
    if unmatched.is_empty:
        return
    click.echo("\nUnmatched references:")
    for name, count in sorted(unmatched.accounts.items()):
        click.echo(f"  account '{name}': {count} transaction(s)")
    for name, count in sorted(unmatched.personnel.items()):
        click.echo(f"  personnel '{name}': {count} transaction(s)")


@click.group()
def report_group():
    """Show dashboard, group, bank and personnel reports."""
    pass


@report_group.command("dashboard")
@click.option("--recent", "recent_count", type=click.IntRange(0, None), default=5, show_default=True,
              help="Number of recent transactions to show")
@click.pass_context
def dashboard(ctx, recent_count: int):
    """Show dashboard totals, the last six months and recent transactions."""
    snapshot = _snapshot(ctx)
    stats = snapshot.dashboard

    click.echo(f"\n{snapshot.organization.app_name}")
    click.echo("=" * 50)
    click.echo(f"Income:              {format_amount(stats.income_total):>18s}")
    click.echo(f"Expense:             {format_amount(stats.expense_total):>18s}")
    click.echo(
        f"Pending income:      {format_amount(stats.pending_income_total):>18s}"
        f"  ({stats.pending_income_count} transaction(s))"
    )
    click.echo(f"Client receivable:   {format_amount(stats.total_client_receivable):>18s}")
    click.echo(f"Cash balance (TRY):  {format_amount(stats.cash_balance):>18s}")
    click.echo(f"Clients:             {stats.client_count:>18d}")

    click.echo(f"\n{'Month':8s} | {'Income':>14s} | {'Expense':>14s}")
    click.echo("-" * 42)
    for month in snapshot.monthly_trend:
        click.echo(f"{month.month:8s} | {format_amount(month.income):>14s} | {format_amount(month.expense):>14s}")

    recent = aggregation.recent_transactions(snapshot.transactions, recent_count)
    if recent:
        click.echo("\nRecent transactions:")
        for txn in recent:
            click.echo(transaction_line(txn))
    _echo_unmatched(snapshot)


@report_group.command("groups")
@click.option("--sort", "order", type=click.Choice([s.value for s in GroupSort]),
              default=GroupSort.RECENT.value, show_default=True)
@click.option("--search", help="Only groups whose name or clients contain this text")
@click.pass_context
def groups(ctx, order: str, search: str | None):
    """Show client/project group summaries."""
    snapshot = _snapshot(ctx)
    summaries = aggregation.filter_groups(
        aggregation.sort_groups(snapshot.groups, GroupSort(order)), search
    )
    if not summaries:
        click.echo("No groups found.")
        return

    click.echo(f"\n{'Group':30s} | {'Income':>14s} | {'Expense':>14s} | {'Balance':>14s} | {'Txns':>5s} | Last")
    click.echo("-" * 110)
    for s in summaries:
        click.echo(
            f"{s.name[:30]:30s} | {format_amount(s.total_income):>14s} | "
            f"{format_amount(s.total_expense):>14s} | {format_amount(s.balance):>14s} | "
            f"{s.transaction_count:5d} | {s.last_transaction_date}"
        )
        click.echo(f"{'':30s}   clients: {', '.join(s.clients)}")


@report_group.command("accounts")
@click.option("--search", help="Only groups whose name or clients contain this text")
@click.option("--group", "group_name", help="Show one group's detail")
@click.option("--exclude", multiple=True, help="Client to leave out of the group detail (repeatable)")
@click.pass_context
def accounts(ctx, search: str | None, group_name: str | None, exclude: tuple[str, ...]):
    """Show expense-centric group summaries, or one group's detail."""
    snapshot = _snapshot(ctx)

    if group_name:
        detail = aggregation.group_detail(snapshot.transactions, group_name, exclude)
        click.echo(f"\n{detail.name}")
        click.echo("=" * 60)
        click.echo(f"Clients: {', '.join(detail.clients) or '-'}")
        if exclude:
            click.echo(f"Excluded: {', '.join(exclude)}")
        click.echo(f"Income:  {format_amount(detail.income):>16s}")
        click.echo(f"Expense: {format_amount(detail.expense):>16s}")
        click.echo(f"Balance: {format_amount(detail.balance):>16s}")
        click.echo(
            f"Current account: accrued {format_amount(detail.current_accrual)}, "
            f"paid {format_amount(detail.current_payment)}, net {format_amount(detail.current_net)}"
        )
        if detail.monthly:
            click.echo("\nMonthly expense:")
            for month in detail.monthly:
                click.echo(f"  {month.month}  {format_amount(month.amount):>16s}")
        click.echo("\nTransactions:")
        for txn in detail.transactions:
            click.echo(f"  {transaction_line(txn)}")
        return

    summaries = aggregation.filter_groups(snapshot.account_groups, search)
    if not summaries:
        click.echo("No groups found.")
        return
    click.echo(f"\n{'Group':30s} | {'Income':>14s} | {'Expense':>14s} | {'Net':>14s} | {'Txns':>5s}")
    click.echo("-" * 90)
    for s in summaries:
        click.echo(
            f"{s.name[:30]:30s} | {format_amount(s.total_income):>14s} | "
            f"{format_amount(s.total_expense):>14s} | {format_amount(s.net_balance):>14s} | "
            f"{s.transaction_count:5d}"
        )


@report_group.command("bank")
@click.pass_context
def bank(ctx):
    """Show live bank balances and the reconciliation check."""
    snapshot = _snapshot(ctx)
    if not snapshot.live_accounts:
        click.echo("No bank accounts found.")
    for entry in snapshot.live_accounts:
        acc = entry.account
        click.echo(
            f"{acc.bank_name[:25]:25s} | {acc.currency.value} | in {format_amount(entry.money_in):>14s} | "
            f"out {format_amount(entry.money_out):>14s} | balance {format_amount(entry.balance):>14s}"
        )

    report = snapshot.reconciliation
    click.echo("\nReconciliation:")
    click.echo(f"  Liquid assets (TRY):  {format_amount(report.liquid_assets):>16s}")
    click.echo(f"  Income - expense:     {format_amount(report.system_balance):>16s}")
    click.echo(f"  Discrepancy:          {format_amount(report.discrepancy):>16s}")
    click.echo(f"  Credit card debt:     {format_amount(report.credit_card_debt):>16s}")
    click.echo(f"  Status: {'reconciled' if report.is_reconciled else 'NOT reconciled'}")
    _echo_unmatched(snapshot)


@report_group.command("personnel")
@click.option("--sort", "order", type=click.Choice([s.value for s in PersonnelSort]),
              default=PersonnelSort.NAME_ASC.value, show_default=True)
@click.pass_context
def personnel(ctx, order: str):
    """Show per-person totals, current-account balance and this year's profit share."""
    snapshot = _snapshot(ctx)
    summaries = aggregation.sort_personnel(snapshot.personnel_summaries, PersonnelSort(order))
    if not summaries:
        click.echo("No personnel found.")
        return

    for s in summaries:
        click.echo(
            f"{s.person.full_name[:25]:25s} | income {format_amount(s.total_income):>14s} | "
            f"expense {format_amount(s.total_expense):>14s} | "
            f"current acct {format_amount(s.current_account_balance):>14s} | "
            f"share {format_amount(s.current_year_share):>12s} | {s.transaction_count} txns"
        )


@report_group.command("quarters")
@click.argument("full_name")
@click.option("--ledger", "show_ledger", is_flag=True, help="Also list operational and financial transactions")
@click.pass_context
def quarters(ctx, full_name: str, show_ledger: bool):
    """Show one person's quarterly profit share."""
    snapshot = _snapshot(ctx)
    summary = next((s for s in snapshot.personnel_summaries if s.person.full_name == full_name), None)
    if summary is None:
        click.echo(f"Error: Personnel '{full_name}' not found", err=True)
        ctx.exit(1)

    click.echo(f"\n{full_name} (%{summary.person.bonus_percentage})")
    click.echo(f"Debt {format_amount(summary.total_debt)} | Receivable {format_amount(summary.total_receivable)} | "
               f"Balance {format_amount(summary.current_account_balance)}")
    click.echo("-" * 90)
    for stat in summary.quarterly_stats:
        click.echo(
            f"{stat.key} | income {format_amount(stat.total_income):>14s} | "
            f"expense {format_amount(stat.total_expense):>14s} | net {format_amount(stat.net_balance):>14s} | "
            f"share {format_amount(stat.share_amount):>12s}"
        )
    click.echo(f"\nThis year's share: {format_amount(summary.current_year_share)}")

    if show_ledger:
        ledger = aggregation.personnel_ledger(snapshot.transactions, full_name)
        click.echo("\nOperational:")
        for txn in ledger.operational:
            click.echo(f"  {transaction_line(txn)}")
        click.echo("\nFinancial:")
        for txn in ledger.financial:
            click.echo(f"  {transaction_line(txn)}")


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")

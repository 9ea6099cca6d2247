"""Aggregation engine.

Pure functions that turn the flat transaction ledger into dashboard totals,
group summaries, bank balances and personnel profit-share figures. Every
function reads its input and builds new output; callers recompute from the
full list after each change.

Rejected transactions are excluded from every figure here.
"""

import logging
from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from lawledger.config import (
    ACCOUNT_GROUP_LABEL,
    CLIENT_GROUP_LABEL,
    NO_CLIENT_LABEL,
    LedgerSettings,
)
from lawledger.domain.entities import (
    AccountGroupSummary,
    BankAccount,
    DashboardStats,
    GroupDetail,
    GroupSummary,
    LiveAccount,
    MonthlyTotal,
    MonthlyTrend,
    Personnel,
    PersonnelLedger,
    PersonnelSummary,
    QuarterlyStat,
    ReconciliationReport,
    Transaction,
    TransactionStatus,
    TransactionType,
    UnmatchedReferences,
)
from lawledger.utils.amount_parser import coerce_amount
from lawledger.utils.date_parser import month_key, year_quarter

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")

OPERATIONAL_TYPES = (TransactionType.INCOME, TransactionType.EXPENSE)
FINANCIAL_TYPES = (TransactionType.DEBT, TransactionType.RECEIVABLE, TransactionType.CURRENT)


class GroupSort(str, Enum):
    """Listing order for group summaries."""

    RECENT = "recent"
    EXPENSE = "expense"


class PersonnelSort(str, Enum):
    NAME_ASC = "name-asc"
    NAME_DESC = "name-desc"
    COUNT_DESC = "count-desc"


def signed_amount(transaction: Transaction) -> Decimal:
    """Amount with its direction applied: inflows positive, outflows negative.

    INCOME and RECEIVABLE are inflows, EXPENSE and DEBT outflows. CURRENT
    amounts already carry their sign. Unknown types have no direction.
    """
    amount = coerce_amount(transaction.amount)
    if transaction.type is None:
        return ZERO
    if transaction.type.is_inflow:
        return amount
    if transaction.type.is_outflow:
        return -amount
    return amount


def is_payment(transaction: Transaction) -> bool:
    """True for a CURRENT entry that reduces the running balance."""
    return transaction.type == TransactionType.CURRENT and signed_amount(transaction) < 0


def _active(transactions: Iterable[Transaction]) -> list[Transaction]:
    return [t for t in transactions if not t.is_rejected]


def _sum_type(transactions: Iterable[Transaction], tx_type: TransactionType) -> Decimal:
    return sum((coerce_amount(t.amount) for t in transactions if t.type == tx_type), ZERO)


def _is_credit_card(account: BankAccount, marker: str) -> bool:
    return bool(marker) and marker in (account.type or "")


def _client_label(transaction: Transaction) -> str:
    return transaction.client or NO_CLIENT_LABEL


def _add_client(clients: list[str], transaction: Transaction) -> None:
    label = _client_label(transaction)
    if label not in clients:
        clients.append(label)


def _by_date_desc(transactions: Iterable[Transaction]) -> tuple[Transaction, ...]:
    return tuple(sorted(transactions, key=lambda t: t.date, reverse=True))


def client_balances(transactions: Iterable[Transaction]) -> dict[str, Decimal]:
    """Running balance per named client.

    INCOME adds, EXPENSE subtracts and CURRENT adds its signed amount.
    Transactions without a client are skipped.
    """
    balances: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for transaction in _active(transactions):
        if not transaction.client:
            continue
        if transaction.type in (
            TransactionType.INCOME,
            TransactionType.EXPENSE,
            TransactionType.CURRENT,
        ):
            balances[transaction.client] += signed_amount(transaction)
    return dict(balances)


def total_client_receivable(transactions: Iterable[Transaction]) -> Decimal:
    """Sum of the magnitudes of all negative client balances."""
    return sum((-balance for balance in client_balances(transactions).values() if balance < 0), ZERO)


def live_accounts(
    transactions: Iterable[Transaction], accounts: Iterable[BankAccount]
) -> list[LiveAccount]:
    """Recompute every account's balance from its opening balance and linked transactions.

    A transaction is linked when its ``account`` equals the account's
    ``bank_name`` exactly. CURRENT entries never move bank balances.
    """
    active = _active(transactions)
    result = []
    for account in accounts:
        linked = [t for t in active if t.account == account.bank_name]
        money_in = sum(
            (coerce_amount(t.amount) for t in linked if t.type is not None and t.type.is_inflow),
            ZERO,
        )
        money_out = sum(
            (coerce_amount(t.amount) for t in linked if t.type is not None and t.type.is_outflow),
            ZERO,
        )
        result.append(
            LiveAccount(
                account=account,
                money_in=money_in,
                money_out=money_out,
                balance=coerce_amount(account.balance) + money_in - money_out,
            )
        )
    return result


def cash_balance(live: Iterable[LiveAccount], settings: LedgerSettings) -> Decimal:
    """TRY-equivalent total of all non credit-card live balances."""
    total = ZERO
    for entry in live:
        if _is_credit_card(entry.account, settings.credit_card_marker):
            continue
        total += entry.balance * settings.rate_for(entry.account.currency)
    return total


def dashboard_stats(
    transactions: Sequence[Transaction],
    accounts: Sequence[BankAccount] = (),
    settings: Optional[LedgerSettings] = None,
) -> DashboardStats:
    """Compute dashboard-wide totals.

    Args:
        transactions: Full transaction list
        accounts: Bank accounts with their opening balances
        settings: Exchange rates and credit-card marker (defaults apply when None)

    Returns:
        DashboardStats for the given ledger
    """
    settings = settings or LedgerSettings()
    active = _active(transactions)
    pending_income = [
        t
        for t in active
        if t.type == TransactionType.INCOME and t.status == TransactionStatus.PENDING
    ]
    return DashboardStats(
        income_total=_sum_type(active, TransactionType.INCOME),
        expense_total=_sum_type(active, TransactionType.EXPENSE),
        pending_income_total=sum((coerce_amount(t.amount) for t in pending_income), ZERO),
        pending_income_count=len(pending_income),
        total_client_receivable=total_client_receivable(active),
        cash_balance=cash_balance(live_accounts(active, accounts), settings),
        client_count=len({t.client for t in active if t.client}),
    )


def _trend_months(today: date, months: int) -> list[str]:
    keys = []
    year, month = today.year, today.month
    for _ in range(months):
        keys.append(f"{year:04d}-{month:02d}")
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(keys))


def monthly_trend(
    transactions: Iterable[Transaction],
    months: int = 6,
    today: Optional[date] = None,
) -> list[MonthlyTrend]:
    """Income and expense per month for the last ``months`` months, oldest first.

    The window ends with the month of ``today``. Only INCOME and EXPENSE
    count; rejected transactions are ignored. Months without activity are
    included with zero totals.
    """
    buckets = {key: [ZERO, ZERO] for key in _trend_months(today or date.today(), months)}
    for transaction in _active(transactions):
        bucket = buckets.get(month_key(transaction.date))
        if bucket is None:
            continue
        if transaction.type == TransactionType.INCOME:
            bucket[0] += coerce_amount(transaction.amount)
        elif transaction.type == TransactionType.EXPENSE:
            bucket[1] += coerce_amount(transaction.amount)
    return [MonthlyTrend(month=key, income=income, expense=expense) for key, (income, expense) in buckets.items()]


def recent_transactions(transactions: Iterable[Transaction], limit: int = 5) -> list[Transaction]:
    """The latest non-rejected transactions, newest first."""
    return list(_by_date_desc(_active(transactions))[:limit])


def sort_groups(summaries: Iterable, order: GroupSort = GroupSort.RECENT) -> list:
    """Order group summaries by latest activity or by total expense, both descending."""
    if GroupSort(order) == GroupSort.EXPENSE:
        return sorted(summaries, key=lambda s: s.total_expense, reverse=True)
    return sorted(summaries, key=lambda s: s.last_transaction_date, reverse=True)


def filter_groups(summaries: Iterable, search: Optional[str]) -> list:
    """Keep groups whose name or one of whose clients contains ``search`` (case-insensitive)."""
    summaries = list(summaries)
    if not search:
        return summaries
    needle = search.casefold()
    return [
        s
        for s in summaries
        if needle in s.name.casefold() or any(needle in c.casefold() for c in s.clients)
    ]


def group_summaries(
    transactions: Iterable[Transaction],
    default_label: str = CLIENT_GROUP_LABEL,
    order: GroupSort = GroupSort.RECENT,
) -> list[GroupSummary]:
    """Summarize transactions per client/project group.

    Only INCOME and EXPENSE feed the totals, but every transaction counts
    toward the member list, the latest date and the transaction count.
    """
    acc: dict[str, dict] = {}
    for transaction in _active(transactions):
        name = transaction.group or default_label
        entry = acc.setdefault(
            name,
            {"income": ZERO, "expense": ZERO, "count": 0, "clients": [], "last": ""},
        )
        if transaction.type == TransactionType.INCOME:
            entry["income"] += coerce_amount(transaction.amount)
        elif transaction.type == TransactionType.EXPENSE:
            entry["expense"] += coerce_amount(transaction.amount)
        _add_client(entry["clients"], transaction)
        entry["last"] = max(entry["last"], transaction.date)
        entry["count"] += 1

    summaries = [
        GroupSummary(
            name=name,
            total_income=entry["income"],
            total_expense=entry["expense"],
            balance=entry["income"] - entry["expense"],
            transaction_count=entry["count"],
            clients=tuple(entry["clients"]),
            last_transaction_date=entry["last"],
        )
        for name, entry in acc.items()
    ]
    return sort_groups(summaries, order)


def _expense_flow(transaction: Transaction) -> tuple[Decimal, Decimal]:
    """(income, expense) contribution under the expense-centric rules.

    EXPENSE, DEBT and negative CURRENT are outflows; INCOME, RECEIVABLE and
    non-negative CURRENT are inflows.
    """
    amount = coerce_amount(transaction.amount)
    if transaction.type in (TransactionType.EXPENSE, TransactionType.DEBT):
        return ZERO, abs(amount)
    if transaction.type in (TransactionType.INCOME, TransactionType.RECEIVABLE):
        return amount, ZERO
    if transaction.type == TransactionType.CURRENT:
        if amount < 0:
            return ZERO, abs(amount)
        return amount, ZERO
    return ZERO, ZERO


def monthly_expenses(transactions: Iterable[Transaction]) -> dict[str, Decimal]:
    """Outflow histogram keyed by ``YYYY-MM``."""
    monthly: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for transaction in transactions:
        _, expense = _expense_flow(transaction)
        if expense:
            monthly[month_key(transaction.date)] += expense
    return dict(monthly)


def account_group_summaries(
    transactions: Iterable[Transaction],
    default_label: str = ACCOUNT_GROUP_LABEL,
    order: GroupSort = GroupSort.EXPENSE,
) -> list[AccountGroupSummary]:
    """Expense-centric group summaries with a monthly outflow histogram."""
    grouped: dict[str, list[Transaction]] = {}
    for transaction in _active(transactions):
        grouped.setdefault(transaction.group or default_label, []).append(transaction)

    summaries = []
    for name, members in grouped.items():
        income = expense = ZERO
        clients: list[str] = []
        for transaction in members:
            tx_income, tx_expense = _expense_flow(transaction)
            income += tx_income
            expense += tx_expense
            _add_client(clients, transaction)
        summaries.append(
            AccountGroupSummary(
                name=name,
                total_income=income,
                total_expense=expense,
                net_balance=income - expense,
                transaction_count=len(members),
                clients=tuple(clients),
                last_transaction_date=max(t.date for t in members),
                monthly_stats=monthly_expenses(members),
            )
        )
    return sort_groups(summaries, order)


def group_detail(
    transactions: Iterable[Transaction],
    group: str,
    excluded_clients: Iterable[str] = (),
    default_label: str = ACCOUNT_GROUP_LABEL,
) -> GroupDetail:
    """One group's transactions with a client sub-filter applied.

    The member client list always reflects the whole group. Excluded clients
    (matched by label, so ``Müvekkilsiz`` excludes rows without a client) are
    dropped from the listed transactions, the monthly histogram and the
    filtered totals.
    """
    members = [t for t in _active(transactions) if (t.group or default_label) == group]
    clients: list[str] = []
    for transaction in members:
        _add_client(clients, transaction)

    excluded = set(excluded_clients)
    visible = [t for t in members if _client_label(t) not in excluded]

    income = expense = accrual = payment = ZERO
    for transaction in visible:
        tx_income, tx_expense = _expense_flow(transaction)
        income += tx_income
        expense += tx_expense
        if transaction.type == TransactionType.CURRENT:
            amount = coerce_amount(transaction.amount)
            if amount > 0:
                accrual += amount
            elif amount < 0:
                payment += abs(amount)

    monthly = sorted(monthly_expenses(visible).items(), reverse=True)
    return GroupDetail(
        name=group,
        transactions=_by_date_desc(visible),
        clients=tuple(clients),
        monthly=tuple(MonthlyTotal(month=m, amount=a) for m, a in monthly),
        income=income,
        expense=expense,
        balance=income - expense,
        current_accrual=accrual,
        current_payment=payment,
        current_net=accrual - payment,
    )


def reconcile(
    transactions: Sequence[Transaction],
    accounts: Sequence[BankAccount],
    settings: Optional[LedgerSettings] = None,
) -> ReconciliationReport:
    """Compare liquid assets against ledger-wide income minus expense.

    Credit-card accounts are left out of liquid assets and reported as
    ``credit_card_debt`` instead. The ledger counts as reconciled while the
    absolute discrepancy stays under the configured tolerance.
    """
    settings = settings or LedgerSettings()
    live = live_accounts(transactions, accounts)
    liquid = cash_balance(live, settings)
    card_debt = sum(
        (e.balance for e in live if _is_credit_card(e.account, settings.credit_card_marker)),
        ZERO,
    )
    active = _active(transactions)
    system = _sum_type(active, TransactionType.INCOME) - _sum_type(active, TransactionType.EXPENSE)
    discrepancy = liquid - system
    return ReconciliationReport(
        liquid_assets=liquid,
        system_balance=system,
        discrepancy=discrepancy,
        is_reconciled=abs(discrepancy) < settings.reconciliation_tolerance,
        credit_card_debt=card_debt,
    )


def _person_transactions(transactions: Iterable[Transaction], full_name: str) -> list[Transaction]:
    return [t for t in _active(transactions) if t.personnel == full_name]


def quarterly_stats(
    transactions: Iterable[Transaction], bonus_percentage: Decimal
) -> tuple[QuarterlyStat, ...]:
    """Per (year, quarter) totals for one person's transactions, newest first.

    Every dated transaction opens and counts toward its quarter, but only
    INCOME and EXPENSE feed the totals. The share is the quarter's net times
    ``bonus_percentage`` / 100.
    """
    buckets: dict[tuple[int, int], dict] = {}
    for transaction in transactions:
        key = year_quarter(transaction.date)
        if key is None:
            logger.debug(
                "Transaction %s has no usable date %r; left out of quarterly stats",
                transaction.transaction_number,
                transaction.date,
            )
            continue
        bucket = buckets.setdefault(key, {"income": ZERO, "expense": ZERO, "count": 0})
        bucket["count"] += 1
        if transaction.type == TransactionType.INCOME:
            bucket["income"] += coerce_amount(transaction.amount)
        elif transaction.type == TransactionType.EXPENSE:
            bucket["expense"] += coerce_amount(transaction.amount)

    rate = coerce_amount(bonus_percentage) / HUNDRED
    stats = []
    for (year, quarter), bucket in sorted(buckets.items(), reverse=True):
        net = bucket["income"] - bucket["expense"]
        stats.append(
            QuarterlyStat(
                year=year,
                quarter=quarter,
                total_income=bucket["income"],
                total_expense=bucket["expense"],
                net_balance=net,
                share_amount=net * rate,
                transaction_count=bucket["count"],
            )
        )
    return tuple(stats)


def personnel_summary(
    transactions: Iterable[Transaction], person: Personnel, today: Optional[date] = None
) -> PersonnelSummary:
    """Totals, current-account balance and quarterly profit share for one person."""
    today = today or date.today()
    members = _person_transactions(transactions, person.full_name)
    debt = _sum_type(members, TransactionType.DEBT)
    receivable = _sum_type(members, TransactionType.RECEIVABLE)
    quarters = quarterly_stats(members, person.bonus_percentage)
    return PersonnelSummary(
        person=person,
        total_income=_sum_type(members, TransactionType.INCOME),
        total_expense=_sum_type(members, TransactionType.EXPENSE),
        total_debt=debt,
        total_receivable=receivable,
        current_account_balance=debt - receivable,
        transaction_count=len(members),
        last_transaction_date=max((t.date for t in members), default=None),
        quarterly_stats=quarters,
        current_year_share=sum(
            (q.share_amount for q in quarters if q.year == today.year), ZERO
        ),
    )


def personnel_summaries(
    transactions: Sequence[Transaction],
    personnel: Iterable[Personnel],
    today: Optional[date] = None,
) -> list[PersonnelSummary]:
    """Summaries for every roster entry, in roster order."""
    return [personnel_summary(transactions, person, today) for person in personnel]


def sort_personnel(
    summaries: Iterable[PersonnelSummary], order: PersonnelSort = PersonnelSort.NAME_ASC
) -> list[PersonnelSummary]:
    order = PersonnelSort(order)
    if order == PersonnelSort.COUNT_DESC:
        return sorted(summaries, key=lambda s: s.transaction_count, reverse=True)
    return sorted(
        summaries,
        key=lambda s: s.person.full_name.casefold(),
        reverse=order == PersonnelSort.NAME_DESC,
    )


def personnel_ledger(transactions: Iterable[Transaction], full_name: str) -> PersonnelLedger:
    """Split one person's transactions into operational and financial lists."""
    members = _person_transactions(transactions, full_name)
    return PersonnelLedger(
        operational=_by_date_desc(t for t in members if t.type in OPERATIONAL_TYPES),
        financial=_by_date_desc(t for t in members if t.type in FINANCIAL_TYPES),
    )


def quarter_transactions(
    transactions: Iterable[Transaction], full_name: str, year: int, quarter: int
) -> tuple[Transaction, ...]:
    """One person's INCOME/EXPENSE transactions within a calendar quarter."""
    return tuple(
        t
        for t in personnel_ledger(transactions, full_name).operational
        if year_quarter(t.date) == (year, quarter)
    )


def find_unmatched_references(
    transactions: Iterable[Transaction],
    accounts: Iterable[BankAccount],
    personnel: Iterable[Personnel],
) -> UnmatchedReferences:
    """Count transactions whose account or personnel name matches nothing.

    Such transactions still count in every total that does not depend on the
    link; they are reported here so the data can be corrected.
    """
    bank_names = {a.bank_name for a in accounts}
    full_names = {p.full_name for p in personnel}
    unmatched_accounts: dict[str, int] = defaultdict(int)
    unmatched_personnel: dict[str, int] = defaultdict(int)

    for transaction in _active(transactions):
        if transaction.account and transaction.account not in bank_names:
            unmatched_accounts[transaction.account] += 1
        if transaction.personnel and transaction.personnel not in full_names:
            unmatched_personnel[transaction.personnel] += 1

    for name, count in unmatched_accounts.items():
        logger.warning("%d transaction(s) reference unknown account %r", count, name)
    for name, count in unmatched_personnel.items():
        logger.warning("%d transaction(s) reference unknown personnel %r", count, name)

    return UnmatchedReferences(
        accounts=dict(unmatched_accounts), personnel=dict(unmatched_personnel)
    )

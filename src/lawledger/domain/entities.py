"""Domain model entities for lawledger.

These are pure data classes representing business concepts, independent of
the ledger store schema. Stored rows are converted into these entities by the
mappers and the normalizer; aggregation works on them only.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Optional


class TransactionType(str, Enum):
    """Kind of ledger entry. The value is the label stored in the ledger."""

    INCOME = "Gelir"
    EXPENSE = "Gider"
    RECEIVABLE = "Alacak"
    DEBT = "Borç"
    CURRENT = "Cari"

    @property
    def is_inflow(self) -> bool:
        return self in (TransactionType.INCOME, TransactionType.RECEIVABLE)

    @property
    def is_outflow(self) -> bool:
        return self in (TransactionType.EXPENSE, TransactionType.DEBT)


class TransactionStatus(str, Enum):
    """Approval state of a ledger entry."""

    APPROVED = "Onaylandı"
    PENDING = "İnceleniyor"
    REJECTED = "Reddedildi"


class Currency(str, Enum):
    TRY = "TRY"
    USD = "USD"
    EUR = "EUR"


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity.

    ``amount`` is an unsigned magnitude for INCOME, EXPENSE, RECEIVABLE and
    DEBT (the type carries the direction) and a signed value for CURRENT
    (positive = accrual, negative = payment). Use ``signed_amount`` whenever
    direction matters.

    ``type`` and ``status`` are None when a stored row carries a label this
    package does not know; such rows match no type or status filter.
    """

    id: str
    transaction_number: str
    date: str
    amount: Decimal
    type: Optional[TransactionType]
    status: Optional[TransactionStatus]
    description: str = ""
    category: str = ""
    method: str = ""
    account: str = ""
    client: str = ""
    group: str = ""
    counterparty: str = ""
    personnel: str = ""

    @property
    def is_rejected(self) -> bool:
        return self.status == TransactionStatus.REJECTED


@dataclass(frozen=True)
class BankAccount:
    """Bank or cash account. ``balance`` is the opening balance."""

    id: str
    bank_name: str
    account_number: str
    balance: Decimal
    currency: Currency
    type: str


@dataclass(frozen=True)
class Personnel:
    """Staff roster entry, linked to transactions by ``full_name``."""

    id: str
    full_name: str
    role: Optional[str] = None
    title: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    start_date: Optional[str] = None
    bonus_percentage: Decimal = Decimal("0")


@dataclass(frozen=True)
class Category:
    """Transaction category definition."""

    id: str
    name: str
    type: str


@dataclass(frozen=True)
class ImportTemplate:
    """Named, reusable spreadsheet column mapping (field -> column header)."""

    id: str
    name: str
    mapping: dict[str, str]


@dataclass(frozen=True)
class OrganizationSettings:
    """Organization-wide display settings."""

    id: Optional[str]
    app_name: str
    logo_url: Optional[str] = None


# Derived views. Recomputed from the full transaction list on every refresh.


@dataclass(frozen=True)
class DashboardStats:
    """Dashboard-wide totals."""

    income_total: Decimal
    expense_total: Decimal
    pending_income_total: Decimal
    pending_income_count: int
    total_client_receivable: Decimal
    cash_balance: Decimal
    client_count: int


@dataclass(frozen=True)
class GroupSummary:
    """Per client/project group totals."""

    name: str
    total_income: Decimal
    total_expense: Decimal
    balance: Decimal
    transaction_count: int
    clients: tuple[str, ...]
    last_transaction_date: str

    @property
    def client_count(self) -> int:
        return len(self.clients)


@dataclass(frozen=True)
class AccountGroupSummary:
    """Expense-centric group totals with a monthly outflow histogram."""

    name: str
    total_income: Decimal
    total_expense: Decimal
    net_balance: Decimal
    transaction_count: int
    clients: tuple[str, ...]
    last_transaction_date: str
    monthly_stats: dict[str, Decimal] = field(default_factory=dict)


@dataclass(frozen=True)
class MonthlyTotal:
    month: str
    amount: Decimal


@dataclass(frozen=True)
class MonthlyTrend:
    """Income and expense of one calendar month (``YYYY-MM``)."""

    month: str
    income: Decimal
    expense: Decimal


@dataclass(frozen=True)
class GroupDetail:
    """A single group's transactions after the client sub-filter."""

    name: str
    transactions: tuple[Transaction, ...]
    clients: tuple[str, ...]
    monthly: tuple[MonthlyTotal, ...]
    income: Decimal
    expense: Decimal
    balance: Decimal
    current_accrual: Decimal
    current_payment: Decimal
    current_net: Decimal


@dataclass(frozen=True)
class LiveAccount:
    """Bank account with its balance reconciled against transaction flow."""

    account: BankAccount
    money_in: Decimal
    money_out: Decimal
    balance: Decimal


@dataclass(frozen=True)
class ReconciliationReport:
    liquid_assets: Decimal
    system_balance: Decimal
    discrepancy: Decimal
    is_reconciled: bool
    credit_card_debt: Decimal


@dataclass(frozen=True)
class QuarterlyStat:
    year: int
    quarter: int
    total_income: Decimal
    total_expense: Decimal
    net_balance: Decimal
    share_amount: Decimal
    transaction_count: int

    @property
    def key(self) -> str:
        return f"{self.year}-Q{self.quarter}"


@dataclass(frozen=True)
class PersonnelSummary:
    person: Personnel
    total_income: Decimal
    total_expense: Decimal
    total_debt: Decimal
    total_receivable: Decimal
    current_account_balance: Decimal
    transaction_count: int
    last_transaction_date: Optional[str]
    quarterly_stats: tuple[QuarterlyStat, ...]
    current_year_share: Decimal


@dataclass(frozen=True)
class PersonnelLedger:
    """Operational (INCOME/EXPENSE) and financial (DEBT/RECEIVABLE/CURRENT) views."""

    operational: tuple[Transaction, ...]
    financial: tuple[Transaction, ...]


@dataclass(frozen=True)
class UnmatchedReferences:
    """Name references that match no bank account or roster entry."""

    accounts: dict[str, int] = field(default_factory=dict)
    personnel: dict[str, int] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.accounts and not self.personnel


@dataclass(frozen=True)
class ImportResult:
    imported: int
    transaction_numbers: tuple[str, ...]
    template_saved: bool
    errors: tuple[str, ...] = ()

"""Full reload pipeline: store -> normalized entities -> derived views."""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional, TypeVar

from lawledger.config import LedgerSettings
from lawledger.database.base import Database
from lawledger.domain import aggregation
from lawledger.domain.entities import (
    AccountGroupSummary,
    BankAccount,
    DashboardStats,
    GroupSummary,
    LiveAccount,
    MonthlyTrend,
    OrganizationSettings,
    Personnel,
    PersonnelSummary,
    ReconciliationReport,
    Transaction,
    UnmatchedReferences,
)
from lawledger.domain.errors import StoreError
from lawledger.domain.settings import OrganizationService

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class LedgerSnapshot:
    """Everything derived from one reload. Rebuilt from scratch every time."""

    transactions: tuple[Transaction, ...]
    accounts: tuple[BankAccount, ...]
    personnel: tuple[Personnel, ...]
    organization: OrganizationSettings
    dashboard: DashboardStats
    monthly_trend: tuple[MonthlyTrend, ...]
    groups: tuple[GroupSummary, ...]
    account_groups: tuple[AccountGroupSummary, ...]
    live_accounts: tuple[LiveAccount, ...]
    reconciliation: ReconciliationReport
    personnel_summaries: tuple[PersonnelSummary, ...]
    unmatched: UnmatchedReferences
    degraded_sources: tuple[str, ...] = ()


class LedgerService:
    """Loads the ledger and recomputes every derived view."""

    def __init__(self, db: Database, settings: Optional[LedgerSettings] = None):
        """Initialize ledger service.

        Args:
            db: Database instance
            settings: Exchange rates, tolerance and credit-card marker
        """
        self.db = db
        self.settings = settings or LedgerSettings()
        self.organization_service = OrganizationService(db)

    def _load(self, source: str, read: Callable[[], list[T]], degraded: list[str]) -> list[T]:
        try:
            return read()
        except StoreError as e:
            logger.warning("Could not load %s, continuing without them: %s", source, e)
            degraded.append(source)
            return []

    def refresh(self, today: Optional[date] = None) -> LedgerSnapshot:
        """Reload transactions, accounts and personnel and rebuild all views.

        A failed read leaves that source empty instead of aborting; the
        source is listed in ``degraded_sources``.

        Args:
            today: Reference day for the monthly trend and the current-year
                profit share

        Returns:
            LedgerSnapshot
        """
        degraded: list[str] = []
        transactions = tuple(self._load("transactions", self.db.list_transactions, degraded))
        accounts = tuple(self._load("bank accounts", self.db.list_bank_accounts, degraded))
        personnel = tuple(self._load("personnel", self.db.list_personnel, degraded))

        summaries = aggregation.personnel_summaries(transactions, personnel, today)
        return LedgerSnapshot(
            transactions=transactions,
            accounts=accounts,
            personnel=personnel,
            organization=self.organization_service.get_settings(),
            dashboard=aggregation.dashboard_stats(transactions, accounts, self.settings),
            monthly_trend=tuple(aggregation.monthly_trend(transactions, today=today)),
            groups=tuple(aggregation.group_summaries(transactions)),
            account_groups=tuple(aggregation.account_group_summaries(transactions)),
            live_accounts=tuple(aggregation.live_accounts(transactions, accounts)),
            reconciliation=aggregation.reconcile(transactions, accounts, self.settings),
            personnel_summaries=tuple(summaries),
            unmatched=aggregation.find_unmatched_references(transactions, accounts, personnel),
            degraded_sources=tuple(degraded),
        )

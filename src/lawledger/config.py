"""Runtime settings for lawledger."""

import logging
import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_APP_NAME = "AYAB Finans"
LEGACY_APP_NAME = "HukukFinans"

# Labels used when a transaction leaves the grouping field empty.
CLIENT_GROUP_LABEL = "Genel / Diğer"
ACCOUNT_GROUP_LABEL = "Genel / Grupsuz"
NO_CLIENT_LABEL = "Müvekkilsiz"


@dataclass(frozen=True)
class LedgerSettings:
    """Settings for the ledger store and the aggregation engine.

    Attributes:
        database_path: SQLite file holding the ledger.
        usd_rate: TRY value of one USD, used for cash totals.
        eur_rate: TRY value of one EUR, used for cash totals.
        reconciliation_tolerance: Largest absolute discrepancy still reported
            as reconciled.
        credit_card_marker: Substring of an account type that marks it as a
            credit card (excluded from cash and liquid assets).
        log_level: Default log level for the CLI.
    """

    database_path: Optional[str] = None
    usd_rate: Decimal = Decimal("34.5")
    eur_rate: Decimal = Decimal("36.2")
    reconciliation_tolerance: Decimal = Decimal("5")
    credit_card_marker: str = "Kredi Kartı"
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "LedgerSettings":
        """Build settings from LAWLEDGER_* environment variables."""
        defaults = cls()
        return cls(
            database_path=os.environ.get("LAWLEDGER_DB_PATH"),
            usd_rate=_decimal_env("LAWLEDGER_USD_RATE", defaults.usd_rate),
            eur_rate=_decimal_env("LAWLEDGER_EUR_RATE", defaults.eur_rate),
            reconciliation_tolerance=_decimal_env(
                "LAWLEDGER_RECONCILIATION_TOLERANCE", defaults.reconciliation_tolerance
            ),
            credit_card_marker=os.environ.get(
                "LAWLEDGER_CREDIT_CARD_MARKER", defaults.credit_card_marker
            ),
            log_level=os.environ.get("LAWLEDGER_LOG_LEVEL", defaults.log_level).upper(),
        )

    def resolve_database_path(self) -> str:
        """Return the configured database path, defaulting to ~/.lawledger/lawledger.db."""
        if self.database_path:
            return self.database_path
        db_dir = Path.home() / ".lawledger"
        db_dir.mkdir(exist_ok=True)
        return str(db_dir / "lawledger.db")

    def rate_for(self, currency: str) -> Decimal:
        """Return the TRY conversion rate for a currency code."""
        if currency == "USD":
            return self.usd_rate
        if currency == "EUR":
            return self.eur_rate
        return Decimal("1")


def _decimal_env(name: str, default: Decimal) -> Decimal:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return Decimal(raw.strip())
    except InvalidOperation:
        logger.warning("Ignoring invalid %s=%r, using %s", name, raw, default)
        return default

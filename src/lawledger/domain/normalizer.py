"""Conversion of stored ledger rows into Transaction entities and numbering."""

import logging
import re
from collections.abc import Iterable, Mapping
from datetime import date
from typing import Any, Optional

from lawledger.domain.entities import Transaction, TransactionStatus, TransactionType
from lawledger.utils.amount_parser import coerce_amount
from lawledger.utils.date_parser import compact_date

logger = logging.getLogger(__name__)

LEGACY_PREFIX = "ESKİ-"
BULK_MARKER = "BLK"

_TEXT_FIELDS = (
    "description",
    "category",
    "method",
    "account",
    "client",
    "group",
    "counterparty",
    "personnel",
)


def legacy_transaction_number(transaction_id: str) -> str:
    """Display number for rows stored without one.

    Long ids (more than 8 characters) become ``ESKİ-`` plus their first six
    characters uppercased; short ids are used as they are.
    """
    if len(transaction_id) > 8:
        return LEGACY_PREFIX + transaction_id[:6].upper()
    return transaction_id


def _coerce_enum(enum_cls, value: Any):
    if value is None or value == "":
        return None
    if isinstance(value, enum_cls):
        return value
    text = str(value)
    try:
        return enum_cls(text)
    except ValueError:
        pass
    member = enum_cls.__members__.get(text.upper())
    if member is None:
        logger.debug("Unknown %s label %r", enum_cls.__name__, value)
    return member


def coerce_type(value: Any) -> Optional[TransactionType]:
    """Accept a stored type label ("Gelir") or its name ("INCOME")."""
    return _coerce_enum(TransactionType, value)


def coerce_status(value: Any) -> Optional[TransactionStatus]:
    """Accept a stored status label ("Onaylandı") or its name ("APPROVED")."""
    return _coerce_enum(TransactionStatus, value)


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def normalize_row(row: Mapping[str, Any]) -> Transaction:
    """Build a Transaction from a raw stored row.

    Only the transaction number is derived; dates and amounts pass through
    without validation. Non-numeric amounts count as zero.
    """
    transaction_id = _text(row.get("id"))
    number = _text(row.get("transaction_number"))
    if not number:
        number = legacy_transaction_number(transaction_id)

    return Transaction(
        id=transaction_id,
        transaction_number=number,
        date=_text(row.get("date")),
        amount=coerce_amount(row.get("amount")),
        type=coerce_type(row.get("type")),
        status=coerce_status(row.get("status")),
        **{name: _text(row.get(name)) for name in _TEXT_FIELDS},
    )


def _max_sequence(existing_numbers: Iterable[str], prefix: str) -> int:
    highest = 0
    pattern = re.compile(re.escape(prefix) + r"(\d+)$")
    for number in existing_numbers:
        match = pattern.match(number or "")
        if match:
            highest = max(highest, int(match.group(1)))
    return highest


def next_transaction_number(existing_numbers: Iterable[str], today: Optional[date] = None) -> str:
    """Next manual-entry number for today, ``YYYYMMDD-NNN``.

    The sequence continues from the highest number already issued today and
    starts at 001.

    Args:
        existing_numbers: Transaction numbers already in the ledger
        today: Day to number for (defaults to the current date)

    Returns:
        New transaction number
    """
    prefix = f"{compact_date(today or date.today())}-"
    sequence = _max_sequence(existing_numbers, prefix) + 1
    return f"{prefix}{sequence:03d}"


def bulk_transaction_numbers(
    existing_numbers: Iterable[str], count: int, today: Optional[date] = None
) -> list[str]:
    """Unique numbers for a bulk import, ``YYYYMMDD-BLK-NNNNN``.

    Numbering continues past any bulk numbers already issued today, so a
    batch never collides with the store or with itself.
    """
    prefix = f"{compact_date(today or date.today())}-{BULK_MARKER}-"
    start = _max_sequence(existing_numbers, prefix)
    return [f"{prefix}{start + offset:05d}" for offset in range(1, count + 1)]

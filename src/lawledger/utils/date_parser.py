"""Date parsing utilities.

Ledger dates are kept as ISO ``YYYY-MM-DD`` strings and compared
lexicographically. The helpers here convert user and spreadsheet input into
that form and derive the month and quarter keys used by the aggregations.
"""

from datetime import date, datetime, timedelta
from typing import Any, Optional

from dateutil import parser as date_parser


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports "today", "yesterday", "tomorrow", ISO dates and day-first
    formats such as "15.03.2024".

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    try:
        return date.fromisoformat(date_str)
    except ValueError:
        pass

    try:
        return date_parser.parse(date_str, dayfirst=True).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def normalize_import_date(value: Any) -> Any:
    """Convert a spreadsheet date cell to ``YYYY-MM-DD`` where possible.

    Native dates are formatted; ``DD.MM.YYYY`` strings are rearranged. Any
    other value is passed through untouched.
    """
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        parts = value.strip().split(".")
        if len(parts) == 3:
            return f"{parts[2]}-{parts[1]}-{parts[0]}"
    return value


def to_date(date_str: str) -> Optional[date]:
    """Return the calendar date of a ledger date string, or None if malformed."""
    if not date_str:
        return None
    try:
        return date.fromisoformat(date_str[:10])
    except ValueError:
        pass
    try:
        return date_parser.parse(date_str).date()
    except (ValueError, TypeError, OverflowError):
        return None


def year_quarter(date_str: str) -> Optional[tuple[int, int]]:
    """Return (year, calendar quarter) for a ledger date. Jan-Mar is Q1."""
    parsed = to_date(date_str)
    if parsed is None:
        return None
    return parsed.year, (parsed.month - 1) // 3 + 1


def month_key(date_str: str) -> str:
    """Return the ``YYYY-MM`` bucket key of a ledger date."""
    return (date_str or "")[:7]


def compact_date(day: date) -> str:
    """Return ``YYYYMMDD`` for a date."""
    return day.strftime("%Y%m%d")


def display_date(date_str: Optional[str]) -> str:
    """Format a ledger date as ``DD.MM.YYYY`` for exports; unknown input is returned as-is."""
    if not date_str:
        return "-"
    parsed = to_date(date_str)
    if parsed is None:
        return date_str
    return parsed.strftime("%d.%m.%Y")

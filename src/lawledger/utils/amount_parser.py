"""Amount parsing utilities."""

import logging
import math
import re
from decimal import Decimal, InvalidOperation
from typing import Any

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def _normalize_separators(amount_str: str) -> str:
    """Strip everything but digits, separators and minus, then settle on a dot decimal.

    "1.250,50" -> "1250.50", "1,250.50" -> "1250.50", "12,5" -> "12.5",
    "1.250.000" -> "1250000".
    """
    cleaned = re.sub(r"[^0-9.,-]", "", amount_str)

    if "," in cleaned and "." in cleaned:
        if cleaned.rfind(",") > cleaned.rfind("."):
            cleaned = cleaned.replace(".", "").replace(",", ".")
        else:
            cleaned = cleaned.replace(",", "")
    elif "," in cleaned:
        if cleaned.count(",") == 1:
            cleaned = cleaned.replace(",", ".")
        else:
            cleaned = cleaned.replace(",", "")
    elif cleaned.count(".") > 1:
        cleaned = cleaned.replace(".", "")

    return cleaned


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "₺1.250,50"
    - "-123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    normalized = _normalize_separators(amount_str)

    try:
        amount = Decimal(normalized)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    return -amount if is_negative else amount


def parse_spreadsheet_amount(value: Any) -> Decimal:
    """Best-effort amount from a spreadsheet cell.

    Numeric cells are taken as-is. Text cells are cleaned of currency symbols
    and thousands separators. Anything unparseable becomes zero.
    """
    if isinstance(value, str):
        try:
            return parse_amount(value)
        except ValueError:
            logger.warning("Unparseable amount %r imported as 0", value)
            return ZERO
    return coerce_amount(value)


def coerce_amount(value: Any) -> Decimal:
    """Numeric cast of a stored amount; non-numeric values count as zero."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value if value.is_finite() else ZERO
    if isinstance(value, bool):
        return Decimal(int(value))
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return ZERO
        return Decimal(str(value))

    text = str(value).strip()
    if not text:
        return ZERO
    try:
        amount = Decimal(text)
    except InvalidOperation:
        logger.debug("Non-numeric amount %r counted as 0", value)
        return ZERO
    return amount if amount.is_finite() else ZERO

"""Text rendering helpers shared by the CLI commands."""

from decimal import Decimal
from typing import Any

from lawledger.domain.aggregation import is_payment
from lawledger.domain.entities import Transaction, TransactionType


def format_amount(value: Decimal) -> str:
    """Two decimals with thousands separators, e.g. 1,250.50."""
    return f"{value:,.2f}"


def label(value: Any) -> str:
    if value is None:
        return "?"
    return getattr(value, "value", str(value))


def direction(transaction: Transaction) -> str:
    """'+' for inflows and accruals, '-' for outflows and current-account payments."""
    if transaction.type is None:
        return " "
    if transaction.type.is_outflow or is_payment(transaction):
        return "-"
    return "+"


def transaction_line(transaction: Transaction) -> str:
    amount = abs(transaction.amount) if transaction.type == TransactionType.CURRENT else transaction.amount
    who = transaction.client or transaction.counterparty or transaction.personnel or "-"
    return (
        f"{transaction.transaction_number:20s} | {transaction.date:10s} | "
        f"{label(transaction.type):6s} | {direction(transaction)}{format_amount(amount):>14s} | "
        f"{label(transaction.status):12s} | {who[:20]:20s} | {transaction.description}"
    )

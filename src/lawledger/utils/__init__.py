"""Utility functions for lawledger."""

from lawledger.utils.date_parser import parse_date, normalize_import_date
from lawledger.utils.amount_parser import parse_amount, coerce_amount

__all__ = ["parse_date", "normalize_import_date", "parse_amount", "coerce_amount"]

"""Ledger store layer for lawledger."""

from lawledger.database.base import Database
from lawledger.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]

"""Database factory functions for creating database instances."""

from typing import Optional

from lawledger.config import LedgerSettings
from lawledger.database.sqlalchemy_db import SQLAlchemyDatabase


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks LAWLEDGER_DB_PATH
            environment variable, then defaults to ~/.lawledger/lawledger.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        database_path = LedgerSettings.from_env().resolve_database_path()

    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyDatabase(database_url)

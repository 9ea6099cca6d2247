"""SQLAlchemy models for the lawledger store."""

import uuid
from datetime import datetime, UTC
from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Numeric,
    String,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


def _new_id() -> str:
    return str(uuid.uuid4())


class Transaction(Base):
    """Ledger entry model.

    Dates are kept as the text they were entered with. ``account`` and
    ``personnel`` hold names, not keys.
    """

    __tablename__ = "transactions"

    id = Column(String, primary_key=True, default=_new_id)
    transaction_number = Column(String, nullable=True, index=True)
    date = Column(String, nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    type = Column(String, nullable=False)
    status = Column(String, nullable=False)
    description = Column(String, nullable=True)
    category = Column(String, nullable=True)
    method = Column(String, nullable=True)
    account = Column(String, nullable=True)
    client = Column(String, nullable=True)
    group = Column(String, nullable=True)
    counterparty = Column(String, nullable=True)
    personnel = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class BankAccount(Base):
    """Bank or cash account model. ``balance`` is the opening balance."""

    __tablename__ = "bank_accounts"

    id = Column(String, primary_key=True, default=_new_id)
    bank_name = Column(String, nullable=False)
    account_number = Column(String, nullable=True)
    balance = Column(Numeric(14, 2), nullable=False, default=0)
    currency = Column(String, nullable=False, default="TRY")
    type = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class PersonnelDefinition(Base):
    """Staff roster model."""

    __tablename__ = "personnel_definitions"

    id = Column(String, primary_key=True, default=_new_id)
    full_name = Column(String, nullable=False)
    role = Column(String, nullable=True)
    title = Column(String, nullable=True)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    location = Column(String, nullable=True)
    start_date = Column(String, nullable=True)
    bonus_percentage = Column(Numeric(5, 2), nullable=False, default=0)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class Category(Base):
    """Transaction category model."""

    __tablename__ = "categories"

    id = Column(String, primary_key=True, default=_new_id)
    name = Column(String, unique=True, nullable=False)
    type = Column(String, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class TransactionImportTemplate(Base):
    """Saved spreadsheet column mapping."""

    __tablename__ = "transaction_import_templates"

    id = Column(String, primary_key=True, default=_new_id)
    name = Column(String, unique=True, nullable=False)
    mapping = Column(JSON, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class OrganizationSettings(Base):
    """Organization display settings (a single row)."""

    __tablename__ = "organization_settings"

    id = Column(String, primary_key=True, default=_new_id)
    app_name = Column(String, nullable=True)
    logo_url = Column(String, nullable=True)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)

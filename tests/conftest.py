"""Shared pytest fixtures for lawledger tests."""

import os
import tempfile
from datetime import date
from decimal import Decimal

import pytest

from lawledger.database.factories import create_sqlite_database
from lawledger.domain.account import BankAccountService
from lawledger.domain.category import CategoryService
from lawledger.domain.entities import (
    BankAccount,
    Currency,
    Personnel,
    Transaction,
    TransactionStatus,
    TransactionType,
)
from lawledger.domain.import_template import ImportTemplateService
from lawledger.domain.personnel import PersonnelService
from lawledger.domain.settings import OrganizationService
from lawledger.domain.spreadsheet_import import SpreadsheetImportService
from lawledger.domain.transaction import TransactionService

TODAY = date(2024, 3, 15)


def make_transaction(
    amount,
    type=TransactionType.INCOME,
    status=TransactionStatus.APPROVED,
    date="2024-03-01",
    id=None,
    number=None,
    **fields,
) -> Transaction:
    """Build an in-memory Transaction for aggregation tests."""
    make_transaction.counter += 1
    n = make_transaction.counter
    return Transaction(
        id=id or f"t{n}",
        transaction_number=number or f"20240301-{n:03d}",
        date=date,
        amount=Decimal(str(amount)),
        type=type,
        status=status,
        **fields,
    )


make_transaction.counter = 0


def make_account(bank_name, balance="0", currency=Currency.TRY, type="Vadesiz", id=None) -> BankAccount:
    return BankAccount(
        id=id or bank_name,
        bank_name=bank_name,
        account_number="",
        balance=Decimal(str(balance)),
        currency=currency,
        type=type,
    )


def make_person(full_name, bonus="0", id=None) -> Personnel:
    return Personnel(id=id or full_name, full_name=full_name, bonus_percentage=Decimal(str(bonus)))


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def bank_account_service(temp_db):
    """Create a BankAccountService with a temporary database."""
    return BankAccountService(temp_db)


@pytest.fixture
def personnel_service(temp_db):
    """Create a PersonnelService with a temporary database."""
    return PersonnelService(temp_db)


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db)


@pytest.fixture
def template_service(temp_db):
    """Create an ImportTemplateService with a temporary database."""
    return ImportTemplateService(temp_db)


@pytest.fixture
def import_service(temp_db):
    """Create a SpreadsheetImportService with a temporary database."""
    return SpreadsheetImportService(temp_db)


@pytest.fixture
def organization_service(temp_db):
    """Create an OrganizationService with a temporary database."""
    return OrganizationService(temp_db)


@pytest.fixture
def sample_ledger(transaction_service, bank_account_service, personnel_service):
    """Populate the store with a small office ledger.

    One TRY bank account opened with 1000, one staff member on a 40% share,
    and a mix of income, expense, current-account and rejected entries.
    """
    bank_account_service.create_bank_account("Ziraat", balance="1000", type="Vadesiz")
    personnel_service.create_personnel("Ayşe Yılmaz", bonus_percentage="40")

    ids = {}
    ids["fee"] = transaction_service.create_transaction(
        date="2024-04-15", amount="1000", type="Gelir", account="Ziraat",
        client="Acme", group="Dava 1", personnel="Ayşe Yılmaz", today=TODAY,
    )
    ids["court"] = transaction_service.create_transaction(
        date="2024-05-02", amount="400", type="Gider", account="Ziraat",
        client="Acme", group="Dava 1", personnel="Ayşe Yılmaz", today=TODAY,
    )
    ids["accrual"] = transaction_service.create_transaction(
        date="2024-05-10", amount="300", type="Cari", client="Beta", group="Dava 2", today=TODAY,
    )
    ids["rejected"] = transaction_service.create_transaction(
        date="2024-05-11", amount="9999", type="Gelir", status="Reddedildi",
        client="Acme", group="Dava 1", today=TODAY,
    )
    return ids


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()

"""Mapper functions to convert SQLAlchemy models into domain entities.

Transactions go through the normalizer so stored rows and rows from any other
source are shaped the same way.
"""

from decimal import Decimal

from lawledger.domain import entities as domain
from lawledger.domain.normalizer import normalize_row
from lawledger.database.models import (
    BankAccount as ORMBankAccount,
    Category as ORMCategory,
    OrganizationSettings as ORMOrganizationSettings,
    PersonnelDefinition as ORMPersonnel,
    Transaction as ORMTransaction,
    TransactionImportTemplate as ORMTemplate,
)

TRANSACTION_COLUMNS = (
    "id",
    "transaction_number",
    "date",
    "amount",
    "type",
    "status",
    "description",
    "category",
    "method",
    "account",
    "client",
    "group",
    "counterparty",
    "personnel",
)


def transaction_to_row(orm_transaction: ORMTransaction) -> dict:
    """Raw column values of a stored transaction."""
    return {name: getattr(orm_transaction, name) for name in TRANSACTION_COLUMNS}


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return normalize_row(transaction_to_row(orm_transaction))


def _currency(value) -> domain.Currency:
    try:
        return domain.Currency(value or "TRY")
    except ValueError:
        return domain.Currency.TRY


def bank_account_to_domain(orm_account: ORMBankAccount) -> domain.BankAccount:
    """Convert SQLAlchemy BankAccount model to domain BankAccount entity."""
    return domain.BankAccount(
        id=orm_account.id,
        bank_name=orm_account.bank_name,
        account_number=orm_account.account_number or "",
        balance=Decimal(orm_account.balance or 0),
        currency=_currency(orm_account.currency),
        type=orm_account.type or "",
    )


def personnel_to_domain(orm_personnel: ORMPersonnel) -> domain.Personnel:
    """Convert SQLAlchemy PersonnelDefinition model to domain Personnel entity."""
    return domain.Personnel(
        id=orm_personnel.id,
        full_name=orm_personnel.full_name,
        role=orm_personnel.role,
        title=orm_personnel.title,
        email=orm_personnel.email,
        phone=orm_personnel.phone,
        location=orm_personnel.location,
        start_date=orm_personnel.start_date,
        bonus_percentage=Decimal(orm_personnel.bonus_percentage or 0),
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        name=orm_category.name,
        type=orm_category.type,
    )


def template_to_domain(orm_template: ORMTemplate) -> domain.ImportTemplate:
    """Convert SQLAlchemy TransactionImportTemplate model to domain ImportTemplate entity."""
    return domain.ImportTemplate(
        id=orm_template.id,
        name=orm_template.name,
        mapping=dict(orm_template.mapping or {}),
    )


def organization_settings_to_domain(
    orm_settings: ORMOrganizationSettings,
) -> domain.OrganizationSettings:
    """Convert SQLAlchemy OrganizationSettings model to its domain entity.

    The name is passed through as stored; the default-name fallback lives in
    the settings service.
    """
    return domain.OrganizationSettings(
        id=orm_settings.id,
        app_name=orm_settings.app_name or "",
        logo_url=orm_settings.logo_url,
    )

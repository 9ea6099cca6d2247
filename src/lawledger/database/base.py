"""Abstract ledger store interface."""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any, Optional

from lawledger.domain.entities import (
    BankAccount,
    Category,
    ImportTemplate,
    OrganizationSettings,
    Personnel,
    Transaction,
)


class Database(ABC):
    """Abstract ledger store.

    Rows are selected, updated and deleted by exact field equality only.
    Implementations raise ``StoreError`` when the underlying store fails.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(self, **fields: Any) -> str:
        """Create a transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def create_transactions(self, rows: list[dict[str, Any]]) -> list[str]:
        """Insert many transactions in one commit. Returns their IDs in order."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(self) -> list[Transaction]:
        """List all transactions, newest transaction number first."""
        pass

    @abstractmethod
    def list_transaction_numbers(self, prefix: Optional[str] = None) -> list[str]:
        """List stored transaction numbers, optionally only those starting with prefix."""
        pass

    @abstractmethod
    def update_transaction(self, transaction_id: str, **fields: Any) -> None:
        """Update the given fields of a transaction."""
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: str) -> None:
        """Delete a transaction."""
        pass

    @abstractmethod
    def delete_transactions(self, transaction_ids: list[str]) -> int:
        """Delete every transaction whose ID is listed. Returns the number deleted."""
        pass

    # Bank account operations
    @abstractmethod
    def create_bank_account(
        self,
        bank_name: str,
        account_number: str = "",
        balance: Decimal = Decimal("0"),
        currency: str = "TRY",
        type: str = "",
    ) -> str:
        """Create a bank account. Returns account ID."""
        pass

    @abstractmethod
    def get_bank_account(self, account_id: str) -> Optional[BankAccount]:
        """Get bank account by ID."""
        pass

    @abstractmethod
    def list_bank_accounts(self) -> list[BankAccount]:
        """List all bank accounts."""
        pass

    @abstractmethod
    def update_bank_account(self, account_id: str, **fields: Any) -> None:
        """Update the given fields of a bank account."""
        pass

    @abstractmethod
    def delete_bank_account(self, account_id: str) -> None:
        """Delete a bank account."""
        pass

    # Personnel operations
    @abstractmethod
    def create_personnel(self, full_name: str, **fields: Any) -> str:
        """Create a roster entry. Returns personnel ID."""
        pass

    @abstractmethod
    def get_personnel(self, personnel_id: str) -> Optional[Personnel]:
        """Get roster entry by ID."""
        pass

    @abstractmethod
    def list_personnel(self) -> list[Personnel]:
        """List the roster ordered by name."""
        pass

    @abstractmethod
    def update_personnel(self, personnel_id: str, **fields: Any) -> None:
        """Update the given fields of a roster entry."""
        pass

    @abstractmethod
    def delete_personnel(self, personnel_id: str) -> None:
        """Delete a roster entry."""
        pass

    # Category operations
    @abstractmethod
    def create_category(self, name: str, type: str) -> str:
        """Create a category. Returns category ID."""
        pass

    @abstractmethod
    def get_category_by_name(self, name: str) -> Optional[Category]:
        """Get category by name."""
        pass

    @abstractmethod
    def list_categories(self) -> list[Category]:
        """List categories ordered by name."""
        pass

    @abstractmethod
    def delete_category(self, category_id: str) -> None:
        """Delete a category."""
        pass

    # Import template operations
    @abstractmethod
    def create_import_template(self, name: str, mapping: dict[str, str]) -> str:
        """Save a named column mapping. Returns template ID."""
        pass

    @abstractmethod
    def get_import_template_by_name(self, name: str) -> Optional[ImportTemplate]:
        """Get import template by name."""
        pass

    @abstractmethod
    def list_import_templates(self) -> list[ImportTemplate]:
        """List import templates ordered by name."""
        pass

    @abstractmethod
    def delete_import_template(self, template_id: str) -> None:
        """Delete an import template."""
        pass

    # Organization settings
    @abstractmethod
    def get_organization_settings(self) -> Optional[OrganizationSettings]:
        """Get the settings row, or None if none has been saved."""
        pass

    @abstractmethod
    def save_organization_settings(self, app_name: str, logo_url: Optional[str] = None) -> None:
        """Create or replace the settings row."""
        pass

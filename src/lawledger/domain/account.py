"""Bank account domain service."""

from decimal import Decimal
from typing import Any, Optional

from lawledger.database.base import Database
from lawledger.domain.entities import BankAccount as BankAccountEntity, Currency
from lawledger.domain.errors import NotFoundError, ValidationError, bank_account_not_found
from lawledger.utils.amount_parser import parse_amount


def _currency(value: Any) -> Currency:
    try:
        return Currency(str(value.value if isinstance(value, Currency) else value).upper())
    except ValueError:
        raise ValidationError(
            f"Unknown currency '{value}'. Use one of: {', '.join(c.value for c in Currency)}"
        )


def _balance(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float)):
        return Decimal(str(value))
    try:
        return parse_amount(str(value))
    except ValueError as e:
        raise ValidationError(str(e)) from e


class BankAccountService:
    """Service for managing bank and cash accounts.

    Only the opening balance is stored; live balances come from the
    aggregation engine.
    """

    def __init__(self, db: Database):
        """Initialize bank account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_bank_account(
        self,
        bank_name: str,
        account_number: str = "",
        balance: Any = Decimal("0"),
        currency: Any = Currency.TRY,
        type: str = "",
    ) -> str:
        """Create a bank account.

        Args:
            bank_name: Account name; transactions link to it by this name
            account_number: Optional account number or IBAN
            balance: Opening balance
            currency: TRY, USD or EUR
            type: Free-text kind (checking, cash, "Kredi Kartı", POS, ...)

        Returns:
            Bank account ID

        Raises:
            ValidationError: If the name is empty or currency/balance is invalid
        """
        if not bank_name or not bank_name.strip():
            raise ValidationError("Bank account name cannot be empty")

        return self.db.create_bank_account(
            bank_name=bank_name.strip(),
            account_number=account_number or "",
            balance=_balance(balance),
            currency=_currency(currency).value,
            type=type or "",
        )

    def get_bank_account(self, account_id: str) -> Optional[BankAccountEntity]:
        """Get bank account by ID."""
        return self.db.get_bank_account(account_id)

    def list_bank_accounts(self) -> list[BankAccountEntity]:
        """List all bank accounts."""
        return self.db.list_bank_accounts()

    def update_bank_account(self, account_id: str, **fields: Any) -> None:
        """Update bank account fields.

        Args:
            account_id: Bank account ID
            **fields: Any of bank_name, account_number, balance, currency, type

        Raises:
            NotFoundError: If the account doesn't exist
            ValidationError: If a value is invalid
        """
        if self.db.get_bank_account(account_id) is None:
            raise NotFoundError(bank_account_not_found(account_id))

        values = dict(fields)
        if "bank_name" in values:
            if not values["bank_name"] or not str(values["bank_name"]).strip():
                raise ValidationError("Bank account name cannot be empty")
            values["bank_name"] = str(values["bank_name"]).strip()
        if "balance" in values:
            values["balance"] = _balance(values["balance"])
        if "currency" in values:
            values["currency"] = _currency(values["currency"]).value

        self.db.update_bank_account(account_id, **values)

    def delete_bank_account(self, account_id: str) -> None:
        """Delete a bank account.

        Transactions keep their account name; they show up as unmatched
        references afterwards.

        Raises:
            NotFoundError: If the account doesn't exist
        """
        if self.db.get_bank_account(account_id) is None:
            raise NotFoundError(bank_account_not_found(account_id))
        self.db.delete_bank_account(account_id)

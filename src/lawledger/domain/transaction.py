"""Transaction domain service."""

import dataclasses
import datetime
import logging
from decimal import Decimal
from typing import Any, Optional, Sequence

from lawledger.database.base import Database
from lawledger.domain.entities import (
    Transaction as TransactionEntity,
    TransactionStatus,
    TransactionType,
)
from lawledger.domain.errors import (
    InlineEditError,
    NotFoundError,
    StoreError,
    ValidationError,
    transaction_not_found,
)
from lawledger.domain.normalizer import coerce_status, coerce_type, next_transaction_number
from lawledger.utils.amount_parser import parse_amount
from lawledger.utils.date_parser import compact_date, parse_date

logger = logging.getLogger(__name__)

CURRENT_ACCOUNT_METHOD = "Cari Hesaba İşle"

SEARCH_FIELDS = ("transaction_number", "client", "counterparty", "description", "category", "account")
SORT_KEYS = (
    "transaction_number",
    "date",
    "amount",
    "type",
    "status",
    "description",
    "category",
    "account",
    "client",
    "group",
    "counterparty",
    "personnel",
)
INLINE_FIELDS = frozenset(SORT_KEYS) - {"transaction_number"}


def _to_amount(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float)):
        return Decimal(str(value))
    try:
        return parse_amount(str(value))
    except ValueError as e:
        raise ValidationError(str(e)) from e


def _to_date(value: Any) -> str:
    if isinstance(value, datetime.date):
        return value.isoformat()
    try:
        return parse_date(str(value)).isoformat()
    except ValueError as e:
        raise ValidationError(str(e)) from e


def _to_type(value: Any) -> TransactionType:
    tx_type = coerce_type(value)
    if tx_type is None:
        raise ValidationError(f"Unknown transaction type '{value}'")
    return tx_type


def _to_status(value: Any) -> TransactionStatus:
    status = coerce_status(value)
    if status is None:
        raise ValidationError(f"Unknown transaction status '{value}'")
    return status


def _coerce_field(field: str, value: Any) -> Any:
    """Convert a user-supplied value for ``field`` into its entity form."""
    if field == "amount":
        return _to_amount(value)
    if field == "date":
        return _to_date(value)
    if field == "type":
        return _to_type(value)
    if field == "status":
        return _to_status(value)
    return "" if value is None else str(value)


def _apply_sign_rules(
    txn: TransactionEntity, values: dict[str, Any], is_payment: Optional[bool] = None
) -> dict[str, Any]:
    """Apply the creation rules for amount sign and CURRENT entries to an update.

    Amounts are stored as magnitudes, except CURRENT payments which are
    negative. Without ``is_payment`` a CURRENT entry keeps its previous
    direction. A CURRENT entry uses the current-account method and has no
    bank account.
    """
    if not ({"amount", "type"} & set(values)) and is_payment is None:
        return values

    values = dict(values)
    tx_type = values.get("type", txn.type)
    magnitude = abs(values.get("amount", txn.amount))
    if tx_type == TransactionType.CURRENT:
        if is_payment is None:
            is_payment = txn.type == TransactionType.CURRENT and txn.amount < 0
        values.update(
            amount=-magnitude if is_payment else magnitude,
            method=CURRENT_ACCOUNT_METHOD,
            account="",
        )
    else:
        values["amount"] = magnitude
    return values


def _sort_value(transaction: TransactionEntity, key: str) -> Any:
    value = getattr(transaction, key)
    if key == "amount":
        return value
    if key in ("type", "status"):
        return value.value if value is not None else ""
    if key in ("date", "transaction_number"):
        return value or ""
    return (value or "").casefold()


class TransactionService:
    """Service for managing ledger transactions."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_transaction(
        self,
        date: Any,
        amount: Any,
        type: Any,
        status: Any = TransactionStatus.APPROVED,
        description: str = "",
        category: str = "",
        method: str = "",
        account: str = "",
        client: str = "",
        group: str = "",
        counterparty: str = "",
        personnel: str = "",
        transaction_number: Optional[str] = None,
        is_payment: bool = False,
        today: Optional[datetime.date] = None,
    ) -> str:
        """Create a transaction.

        The amount is stored as a magnitude. For CURRENT entries the sign is
        taken from ``is_payment`` (payments are stored negative), and the
        entry is forced onto the current-account method, approved, with no
        bank account and the client as counterparty.

        Args:
            date: Transaction date (date or parseable string)
            amount: Amount (Decimal, number or parseable string)
            type: TransactionType or its label/name
            status: TransactionStatus or its label/name
            description: Optional description
            category: Optional category name
            method: Optional payment method
            account: Optional bank account name
            client: Optional client name
            group: Optional project/case name
            counterparty: Optional counterparty name
            personnel: Optional staff member name
            transaction_number: Optional number; generated as YYYYMMDD-NNN when omitted
            is_payment: For CURRENT entries, store as a payment (negative)
            today: Day used for number generation (defaults to the current date)

        Returns:
            Transaction ID

        Raises:
            ValidationError: If date, amount, type or status cannot be parsed
        """
        tx_type = _to_type(type)
        magnitude = abs(_to_amount(amount))
        fields = {
            "date": _to_date(date),
            "amount": magnitude,
            "type": tx_type,
            "status": _to_status(status),
            "description": description or "",
            "category": category or "",
            "method": method or "",
            "account": account or "",
            "client": client or "",
            "group": group or "",
            "counterparty": counterparty or "",
            "personnel": personnel or "",
        }

        if tx_type == TransactionType.CURRENT:
            fields.update(
                amount=-magnitude if is_payment else magnitude,
                method=CURRENT_ACCOUNT_METHOD,
                account="",
                status=TransactionStatus.APPROVED,
                counterparty=client or "-",
            )

        if not transaction_number:
            day = today or datetime.date.today()
            existing = self.db.list_transaction_numbers(prefix=f"{compact_date(day)}-")
            transaction_number = next_transaction_number(existing, day)
        fields["transaction_number"] = transaction_number

        transaction_id = self.db.create_transaction(**fields)
        logger.info("Created transaction %s", transaction_number)
        return transaction_id

    def get_transaction(self, transaction_id: str) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(transaction_id)

    def update_transaction(
        self, transaction_id: str, is_payment: Optional[bool] = None, **fields: Any
    ) -> None:
        """Update transaction fields.

        Amount and type changes follow the same rules as
        :meth:`create_transaction`: amounts are stored as magnitudes and a
        CURRENT entry is moved onto the current-account method with no bank
        account.

        Args:
            transaction_id: Transaction ID to update
            is_payment: For CURRENT entries, store as a payment (negative) or
                accrual (positive); keeps the previous direction when None
            **fields: New values keyed by field name

        Raises:
            NotFoundError: If transaction doesn't exist
            ValidationError: If a field is unknown or a value cannot be parsed
        """
        txn = self.db.get_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))

        unknown = sorted(set(fields) - INLINE_FIELDS - {"transaction_number"})
        if unknown:
            raise ValidationError(f"Unknown transaction field(s): {', '.join(unknown)}")

        values = {name: _coerce_field(name, value) for name, value in fields.items()}
        values = _apply_sign_rules(txn, values, is_payment)
        if "transaction_number" in fields:
            values["transaction_number"] = fields["transaction_number"] or txn.transaction_number

        self.db.update_transaction(transaction_id, **values)

    def update_field(
        self,
        transactions: Sequence[TransactionEntity],
        transaction_id: str,
        field: str,
        value: Any,
    ) -> list[TransactionEntity]:
        """Apply a single-field edit optimistically, then save it.

        The caller's list is left untouched; a new list with the edited
        transaction is returned once the store accepts the change. Amount and
        type edits follow the sign rules of :meth:`update_transaction`.

        Args:
            transactions: Current in-memory transaction list
            transaction_id: ID of the transaction to edit
            field: Field name (the transaction number cannot be edited inline)
            value: New value

        Returns:
            New transaction list with the edit applied

        Raises:
            ValidationError: If the field cannot be edited or the value is invalid
            NotFoundError: If the transaction is not in the list
            InlineEditError: If the store rejects the change; carries the
                pre-edit snapshot
        """
        if field not in INLINE_FIELDS:
            raise ValidationError(f"Field '{field}' cannot be edited inline")

        snapshot = tuple(transactions)
        coerced = _coerce_field(field, value)

        updated: list[TransactionEntity] = []
        values: Optional[dict[str, Any]] = None
        for txn in snapshot:
            if txn.id == transaction_id:
                values = _apply_sign_rules(txn, {field: coerced})
                txn = dataclasses.replace(txn, **values)
            updated.append(txn)
        if values is None:
            raise NotFoundError(transaction_not_found(transaction_id))

        try:
            self.db.update_transaction(transaction_id, **values)
        except StoreError as e:
            logger.error("Inline edit of %s on %s failed, restoring previous values", field, transaction_id)
            raise InlineEditError(str(e), snapshot=snapshot) from e
        return updated

    def delete_transaction(self, transaction_id: str) -> None:
        """Delete a transaction.

        Args:
            transaction_id: Transaction ID to delete

        Raises:
            NotFoundError: If transaction doesn't exist
        """
        txn = self.db.get_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))

        self.db.delete_transaction(transaction_id)

    def delete_transactions(self, transaction_ids: Sequence[str]) -> int:
        """Delete several transactions at once.

        Returns:
            Number of transactions deleted
        """
        return self.db.delete_transactions(list(transaction_ids))

    def list_transactions(
        self,
        search: Optional[str] = None,
        type: Any = None,
        status: Any = None,
        sort_key: str = "transaction_number",
        descending: bool = True,
    ) -> list[TransactionEntity]:
        """List transactions with search, filters and sort.

        Args:
            search: Case-insensitive text matched against number, client,
                counterparty, description, category and account
            type: Optional type filter
            status: Optional status filter
            sort_key: Field to sort by
            descending: Sort direction

        Returns:
            List of transaction entities
        """
        if sort_key not in SORT_KEYS:
            raise ValidationError(f"Cannot sort by '{sort_key}'")

        transactions = self.db.list_transactions()
        return filter_transactions(
            transactions,
            search=search,
            type=_to_type(type) if type else None,
            status=_to_status(status) if status else None,
            sort_key=sort_key,
            descending=descending,
        )


def filter_transactions(
    transactions: Sequence[TransactionEntity],
    search: Optional[str] = None,
    type: Optional[TransactionType] = None,
    status: Optional[TransactionStatus] = None,
    sort_key: str = "transaction_number",
    descending: bool = True,
) -> list[TransactionEntity]:
    """Search, filter and sort an in-memory transaction list."""
    result = list(transactions)
    if search:
        needle = search.casefold()
        result = [
            t
            for t in result
            if any(needle in (getattr(t, name) or "").casefold() for name in SEARCH_FIELDS)
        ]
    if type is not None:
        result = [t for t in result if t.type == type]
    if status is not None:
        result = [t for t in result if t.status == status]
    return sorted(result, key=lambda t: _sort_value(t, sort_key), reverse=descending)

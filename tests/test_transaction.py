"""Tests for the transaction service."""

import dataclasses
from datetime import date
from decimal import Decimal

import pytest

from lawledger.domain.entities import TransactionStatus, TransactionType
from lawledger.domain.errors import InlineEditError, NotFoundError, StoreError, ValidationError
from lawledger.domain.transaction import (
    CURRENT_ACCOUNT_METHOD,
    TransactionService,
    filter_transactions,
)

TODAY = date(2024, 3, 15)


class TestCreateTransaction:
    def test_create_stores_magnitude_and_generates_number(self, transaction_service):
        txn_id = transaction_service.create_transaction(
            date="15.03.2024", amount="-1.250,50", type="Gider", client="Acme", today=TODAY
        )

        txn = transaction_service.get_transaction(txn_id)
        assert txn.transaction_number == "20240315-001"
        assert txn.date == "2024-03-15"
        assert txn.amount == Decimal("1250.50")
        assert txn.type == TransactionType.EXPENSE
        assert txn.status == TransactionStatus.APPROVED

    def test_numbers_continue_within_the_day(self, transaction_service):
        for _ in range(2):
            transaction_service.create_transaction(date="2024-03-15", amount=10, type="Gelir", today=TODAY)
        third = transaction_service.create_transaction(date="2024-03-15", amount=10, type="Gelir", today=TODAY)

        assert transaction_service.get_transaction(third).transaction_number == "20240315-003"

    def test_explicit_number_is_kept(self, transaction_service):
        txn_id = transaction_service.create_transaction(
            date="2024-03-15", amount=10, type="INCOME", transaction_number="MANUAL-1"
        )
        assert transaction_service.get_transaction(txn_id).transaction_number == "MANUAL-1"

    def test_current_entries_are_forced(self, transaction_service):
        txn_id = transaction_service.create_transaction(
            date="2024-03-15",
            amount="500",
            type="Cari",
            status="İnceleniyor",
            method="Havale",
            account="Ziraat",
            client="Acme",
            counterparty="Someone",
            is_payment=True,
            today=TODAY,
        )

        txn = transaction_service.get_transaction(txn_id)
        assert txn.amount == Decimal("-500")
        assert txn.method == CURRENT_ACCOUNT_METHOD
        assert txn.account == ""
        assert txn.status == TransactionStatus.APPROVED
        assert txn.counterparty == "Acme"

    def test_current_accrual_without_client(self, transaction_service):
        txn_id = transaction_service.create_transaction(date="2024-03-15", amount="200", type="Cari")

        txn = transaction_service.get_transaction(txn_id)
        assert txn.amount == Decimal("200")
        assert txn.counterparty == "-"

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"date": "someday", "amount": "10", "type": "Gelir"},
            {"date": "2024-03-15", "amount": "ten", "type": "Gelir"},
            {"date": "2024-03-15", "amount": "10", "type": "Hibe"},
            {"date": "2024-03-15", "amount": "10", "type": "Gelir", "status": "Belki"},
        ],
    )
    def test_invalid_input(self, transaction_service, kwargs):
        with pytest.raises(ValidationError):
            transaction_service.create_transaction(**kwargs)


class TestUpdateAndDelete:
    def test_update_fields(self, transaction_service):
        txn_id = transaction_service.create_transaction(date="2024-03-15", amount=10, type="Gelir")

        transaction_service.update_transaction(txn_id, status="Reddedildi", amount="25", client="Beta")

        txn = transaction_service.get_transaction(txn_id)
        assert txn.status == TransactionStatus.REJECTED
        assert txn.amount == Decimal("25")
        assert txn.client == "Beta"

    def test_update_stores_magnitude(self, transaction_service):
        txn_id = transaction_service.create_transaction(date="2024-03-15", amount=1000, type="Gelir")

        transaction_service.update_transaction(txn_id, amount="-500")

        assert transaction_service.get_transaction(txn_id).amount == Decimal("500")

    def test_update_keeps_current_payment_direction(self, transaction_service):
        txn_id = transaction_service.create_transaction(
            date="2024-03-15", amount=500, type="Cari", client="Acme", is_payment=True
        )

        transaction_service.update_transaction(txn_id, amount="300")
        assert transaction_service.get_transaction(txn_id).amount == Decimal("-300")

        transaction_service.update_transaction(txn_id, is_payment=False)
        assert transaction_service.get_transaction(txn_id).amount == Decimal("300")

    def test_update_to_current_clears_bank_account(self, transaction_service):
        txn_id = transaction_service.create_transaction(
            date="2024-03-15", amount=200, type="Gider", account="Kasa", method="Nakit"
        )

        transaction_service.update_transaction(txn_id, type="Cari", is_payment=True)

        txn = transaction_service.get_transaction(txn_id)
        assert txn.type == TransactionType.CURRENT
        assert txn.amount == Decimal("-200")
        assert txn.account == ""
        assert txn.method == CURRENT_ACCOUNT_METHOD

    def test_current_payment_becomes_positive_under_other_type(self, transaction_service):
        txn_id = transaction_service.create_transaction(
            date="2024-03-15", amount=500, type="Cari", is_payment=True
        )

        transaction_service.update_transaction(txn_id, type="Gider")

        assert transaction_service.get_transaction(txn_id).amount == Decimal("500")

    def test_update_missing(self, transaction_service):
        with pytest.raises(NotFoundError):
            transaction_service.update_transaction("missing", client="x")

    def test_update_unknown_field(self, transaction_service):
        txn_id = transaction_service.create_transaction(date="2024-03-15", amount=10, type="Gelir")
        with pytest.raises(ValidationError):
            transaction_service.update_transaction(txn_id, colour="red")

    def test_delete_one_and_many(self, transaction_service):
        ids = [
            transaction_service.create_transaction(date="2024-03-15", amount=i + 1, type="Gelir")
            for i in range(3)
        ]

        transaction_service.delete_transaction(ids[0])
        assert transaction_service.delete_transactions(ids[1:]) == 2
        assert transaction_service.list_transactions() == []

    def test_delete_missing(self, transaction_service):
        with pytest.raises(NotFoundError):
            transaction_service.delete_transaction("missing")


class TestInlineEdit:
    def test_edit_returns_new_list_and_persists(self, transaction_service):
        txn_id = transaction_service.create_transaction(date="2024-03-15", amount=10, type="Gelir")
        before = transaction_service.list_transactions()

        after = transaction_service.update_field(before, txn_id, "amount", "2.000,00")

        assert before[0].amount == Decimal("10")
        assert after[0].amount == Decimal("2000.00")
        assert transaction_service.get_transaction(txn_id).amount == Decimal("2000.00")

    def test_edit_amount_keeps_sign_rules(self, transaction_service):
        income = transaction_service.create_transaction(date="2024-03-15", amount=10, type="Gelir")
        payment = transaction_service.create_transaction(
            date="2024-03-15", amount=50, type="Cari", is_payment=True
        )
        transactions = transaction_service.list_transactions()

        transactions = transaction_service.update_field(transactions, income, "amount", "-75")
        transactions = transaction_service.update_field(transactions, payment, "amount", "80")

        edited = {t.id: t.amount for t in transactions}
        assert edited == {income: Decimal("75"), payment: Decimal("-80")}
        assert transaction_service.get_transaction(payment).amount == Decimal("-80")

    def test_edit_type_to_current(self, transaction_service):
        txn_id = transaction_service.create_transaction(
            date="2024-03-15", amount=10, type="Gider", account="Kasa"
        )
        transactions = transaction_service.list_transactions()

        [edited] = transaction_service.update_field(transactions, txn_id, "type", "Cari")

        assert edited.account == ""
        assert edited.method == CURRENT_ACCOUNT_METHOD
        assert transaction_service.get_transaction(txn_id).account == ""

    def test_number_cannot_be_edited_inline(self, transaction_service):
        txn_id = transaction_service.create_transaction(date="2024-03-15", amount=10, type="Gelir")
        transactions = transaction_service.list_transactions()

        with pytest.raises(ValidationError):
            transaction_service.update_field(transactions, txn_id, "transaction_number", "X")

    def test_store_failure_restores_snapshot(self, temp_db):
        class FailingStore:
            """Reads from the real store, fails every update."""

            def __getattr__(self, name):
                return getattr(temp_db, name)

            def update_transaction(self, transaction_id, **fields):
                raise StoreError("Could not update transaction: disk I/O error")

        TransactionService(temp_db).create_transaction(date="2024-03-15", amount=10, type="Gelir")
        service = TransactionService(FailingStore())
        transactions = service.list_transactions()

        with pytest.raises(InlineEditError) as excinfo:
            service.update_field(transactions, transactions[0].id, "client", "Acme")

        assert "disk I/O error" in str(excinfo.value)
        assert excinfo.value.snapshot == tuple(transactions)
        assert excinfo.value.snapshot[0].client == ""
        assert temp_db.get_transaction(transactions[0].id).client == ""


class TestListing:
    @pytest.fixture
    def ledger(self, transaction_service):
        transaction_service.create_transaction(
            date="2024-01-01", amount=300, type="Gelir", client="Acme", description="Vekalet", today=TODAY
        )
        transaction_service.create_transaction(
            date="2024-02-01", amount=100, type="Gider", client="Beta", category="Harç", today=TODAY
        )
        transaction_service.create_transaction(
            date="2024-03-01", amount=200, type="Gelir", status="İnceleniyor", client="beta", today=TODAY
        )

    def test_default_order_is_newest_number_first(self, transaction_service, ledger):
        numbers = [t.transaction_number for t in transaction_service.list_transactions()]
        assert numbers == ["20240315-003", "20240315-002", "20240315-001"]

    def test_search_is_case_insensitive(self, transaction_service, ledger):
        assert len(transaction_service.list_transactions(search="BETA")) == 2
        assert len(transaction_service.list_transactions(search="harç")) == 1
        assert len(transaction_service.list_transactions(search="20240315-001")) == 1

    def test_type_and_status_filters(self, transaction_service, ledger):
        assert len(transaction_service.list_transactions(type="Gelir")) == 2
        assert len(transaction_service.list_transactions(type="INCOME", status="PENDING")) == 1

    def test_sort_by_amount(self, transaction_service, ledger):
        amounts = [t.amount for t in transaction_service.list_transactions(sort_key="amount", descending=False)]
        assert amounts == [Decimal("100"), Decimal("200"), Decimal("300")]

    def test_unknown_sort_key(self, transaction_service):
        with pytest.raises(ValidationError):
            transaction_service.list_transactions(sort_key="colour")

    def test_unknown_types_match_no_filter(self, transaction_service, ledger):
        transactions = transaction_service.list_transactions()
        odd = dataclasses.replace(transactions[0], id="odd", type=None)

        result = filter_transactions([*transactions, odd], type=TransactionType.INCOME)

        assert odd not in result
        assert len(result) == 2

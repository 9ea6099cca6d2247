"""Tests for row normalization and transaction numbering."""

from datetime import date
from decimal import Decimal

from lawledger.domain.entities import TransactionStatus, TransactionType
from lawledger.domain.normalizer import (
    bulk_transaction_numbers,
    coerce_status,
    coerce_type,
    legacy_transaction_number,
    next_transaction_number,
    normalize_row,
)


def test_normalize_row_maps_labels_and_amount():
    txn = normalize_row(
        {
            "id": "abc",
            "transaction_number": "20240315-001",
            "date": "2024-03-15",
            "amount": "1250.50",
            "type": "Gider",
            "status": "İnceleniyor",
            "client": "Acme",
            "description": None,
        }
    )

    assert txn.transaction_number == "20240315-001"
    assert txn.amount == Decimal("1250.50")
    assert txn.type == TransactionType.EXPENSE
    assert txn.status == TransactionStatus.PENDING
    assert txn.client == "Acme"
    assert txn.description == ""


def test_normalize_row_tolerates_bad_values():
    txn = normalize_row({"id": "x1", "amount": "abc", "type": "Hibe", "status": None})

    assert txn.amount == Decimal("0")
    assert txn.type is None
    assert txn.status is None
    assert txn.date == ""


def test_legacy_numbers_for_rows_without_one():
    assert normalize_row({"id": "5f1c2a9e-1234"}).transaction_number == "ESKİ-5F1C2A"
    assert legacy_transaction_number("short") == "short"
    assert legacy_transaction_number("12345678") == "12345678"


def test_coerce_accepts_labels_and_names():
    assert coerce_type("Cari") == TransactionType.CURRENT
    assert coerce_type("current") == TransactionType.CURRENT
    assert coerce_type(TransactionType.DEBT) == TransactionType.DEBT
    assert coerce_type("") is None
    assert coerce_status("REJECTED") == TransactionStatus.REJECTED
    assert coerce_status("Onaylandı") == TransactionStatus.APPROVED


class TestNumbering:
    def test_first_number_of_the_day(self):
        assert next_transaction_number([], date(2024, 3, 15)) == "20240315-001"

    def test_continues_after_highest_number(self):
        existing = ["20240315-001", "20240315-007", "20240314-020", "20240315-BLK-00003"]
        assert next_transaction_number(existing, date(2024, 3, 15)) == "20240315-008"

    def test_bulk_numbers_are_unique_and_sequential(self):
        numbers = bulk_transaction_numbers([], 3, date(2024, 3, 15))
        assert numbers == ["20240315-BLK-00001", "20240315-BLK-00002", "20240315-BLK-00003"]

    def test_bulk_numbers_continue_past_earlier_batches(self):
        existing = ["20240315-BLK-00002", "20240315-005"]
        assert bulk_transaction_numbers(existing, 2, date(2024, 3, 15)) == [
            "20240315-BLK-00003",
            "20240315-BLK-00004",
        ]

    def test_bulk_count_zero(self):
        assert bulk_transaction_numbers([], 0, date(2024, 3, 15)) == []

"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class StoreError(DomainError):
    """A ledger store write failed. The message carries the raw store error."""


class InlineEditError(StoreError):
    """An optimistic inline edit could not be saved.

    ``snapshot`` holds the transaction list as it was before the edit, for
    callers to restore.
    """

    def __init__(self, message: str, snapshot: tuple = ()):
        super().__init__(message)
        self.snapshot = snapshot


def transaction_not_found(transaction_id: str) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def bank_account_not_found(account_id: str) -> str:
    """Return message for missing bank account."""
    return f"Bank account {account_id} not found"


def personnel_not_found(personnel_id: str) -> str:
    """Return message for missing personnel entry."""
    return f"Personnel {personnel_id} not found"


def template_not_found(name: str) -> str:
    """Return message for missing import template."""
    return f"Import template '{name}' not found"


def missing_required_fields(fields: list[str]) -> str:
    """Return message when an import mapping leaves required fields unmapped."""
    return f"Required fields are not mapped: {', '.join(fields)}"


def store_write_failed(action: str, error: Exception) -> str:
    """Return message for a failed store write, keeping the raw error text."""
    return f"Could not {action}: {error}"

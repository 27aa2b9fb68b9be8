"""Shared domain error messages and error types."""

from typing import Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class PersistenceError(RuntimeError):
    """A persistence adapter call or cache read/write failed.

    Never reverts an in-memory mutation; callers log and report it.
    """

    def __init__(self, operation: str, message: str, cause: Optional[BaseException] = None):
        super().__init__(f"{operation}: {message}")
        self.operation = operation
        self.cause = cause


def booking_not_found(booking_id: str) -> str:
    """Return message for missing booking."""
    return f"Booking '{booking_id}' not found"


def expense_not_found(expense_id: str) -> str:
    """Return message for missing expense entry."""
    return f"Expense '{expense_id}' not found"


def payment_not_found(payment_id: str, booking_id: str) -> str:
    """Return message for missing payment entry on a booking."""
    return f"Payment '{payment_id}' not found on booking '{booking_id}'"


def duplicate_booking_id(booking_id: str) -> str:
    """Return message for duplicate booking identifier."""
    return f"Booking with id '{booking_id}' already exists"


def duplicate_entry_id(kind: str, entry_id: str) -> str:
    """Return message for a ledger entry id that is already in use."""
    return f"{kind} with id '{entry_id}' already exists"


def non_positive_amount(kind: str, amount) -> str:
    """Return message for a ledger entry with a zero or negative amount."""
    return f"{kind} amount must be positive, got {amount}"


def unknown_booking_fields(fields: list[str]) -> str:
    """Return message for booking patch keys that are not booking fields."""
    return f"Unknown booking field{'s' if len(fields) != 1 else ''}: {', '.join(sorted(fields))}"

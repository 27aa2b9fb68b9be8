"""Abstract storage interfaces."""

from abc import ABC, abstractmethod
from typing import Any, Optional

# Import entities directly to avoid circular import through domain/__init__.py
from venueledger.domain.entities import AuditEntry, Booking, Expense


class CacheKeys:
    """Fixed keys of the collections kept in the local cache."""

    BOOKINGS = "hg_bookings"
    EXPENSES = "hg_allExpenses"
    VENDORS = "hg_vendors"
    EXPENSE_CATEGORIES = "hg_expenseCategories"
    PACKAGES = "hg_packages"
    SERVICES_CONFIG = "hg_servicesConfig"


class LocalCache(ABC):
    """Whole-collection durable cache keyed by string keys."""

    @abstractmethod
    def read(self, key: str) -> Optional[str]:
        """Return the stored payload for ``key`` or None if absent.

        Raises:
            PersistenceError: If the underlying store cannot be read
        """
        pass

    @abstractmethod
    def write(self, key: str, payload: str) -> None:
        """Replace the stored payload for ``key``.

        Raises:
            PersistenceError: If the underlying store cannot be written
        """
        pass

    def close(self) -> None:
        """Release resources held by the cache."""
        pass


class PersistenceAdapter(ABC):
    """Asynchronous mirror of ledger mutations to durable storage.

    Every method may fail with PersistenceError. Callers never block
    in-memory state on these calls.
    """

    @abstractmethod
    async def create_booking(self, booking: Booking) -> str:
        """Store a new booking. Returns the booking ID."""
        pass

    @abstractmethod
    async def update_booking(self, booking_id: str, fields: dict[str, Any]) -> None:
        """Apply a partial update to a stored booking.

        ``fields`` may contain ``payments``; stored payment rows are only ever
        added, never rewritten.
        """
        pass

    @abstractmethod
    async def add_expense(self, expense: Expense) -> str:
        """Store an expense entry. Returns the expense ID."""
        pass

    @abstractmethod
    async def log_audit_action(self, entry: AuditEntry) -> None:
        """Store an audit trail entry."""
        pass

    async def close(self) -> None:
        """Release resources held by the adapter."""
        pass

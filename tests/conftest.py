"""Shared pytest fixtures for venueledger tests."""

import os
import tempfile
from datetime import date
from decimal import Decimal

import pytest

from venueledger.database.base import PersistenceAdapter
from venueledger.database.cache import MemoryCache
from venueledger.domain.entities import (
    Booking,
    Expense,
    ExpenseCategory,
    Payment,
    PaymentMethod,
    Vendor,
)
from venueledger.domain.errors import PersistenceError
from venueledger.domain.ledger import LedgerStore
from venueledger.domain.notifications import MemoryNotifier
from venueledger.domain.sync import RemoteMirror


class RecordingAdapter(PersistenceAdapter):
    """Adapter that records every call in order."""

    def __init__(self):
        self.calls = []
        self.closed = False

    async def create_booking(self, booking):
        self.calls.append(("create_booking", booking.booking_id))
        return booking.booking_id

    async def update_booking(self, booking_id, fields):
        self.calls.append(("update_booking", booking_id, dict(fields)))

    async def add_expense(self, expense):
        self.calls.append(("add_expense", expense.expense_id))
        return expense.expense_id

    async def log_audit_action(self, entry):
        self.calls.append(("log_audit_action", entry.action, entry.target_id))

    async def close(self):
        self.closed = True


class FailingAdapter(RecordingAdapter):
    """Adapter whose every call fails after being recorded."""

    async def create_booking(self, booking):
        await super().create_booking(booking)
        raise PersistenceError("create_booking", "remote unavailable")

    async def update_booking(self, booking_id, fields):
        await super().update_booking(booking_id, fields)
        raise PersistenceError("update_booking", "remote unavailable")

    async def add_expense(self, expense):
        await super().add_expense(expense)
        raise ConnectionError("connection reset")

    async def log_audit_action(self, entry):
        await super().log_audit_action(entry)
        raise PersistenceError("log_audit_action", "remote unavailable")


class FailingCache(MemoryCache):
    """Cache whose writes always fail; reads still work."""

    def __init__(self, entries=None):
        super().__init__(entries)
        self.attempted = []

    def write(self, key, payload):
        self.attempted.append(key)
        raise PersistenceError("write", "disk full")


@pytest.fixture
def temp_db():
    """Create a temporary database file path for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    yield db_path

    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def notifier():
    """Create a notifier that records messages."""
    return MemoryNotifier()


@pytest.fixture
def memory_cache():
    """Create an empty in-memory cache."""
    return MemoryCache()


@pytest.fixture
def recording_adapter():
    return RecordingAdapter()


@pytest.fixture
def categories():
    """Expense categories used by store tests."""
    return [
        ExpenseCategory("decoration", "Decoration"),
        ExpenseCategory("labour", "Labour", requires_manpower=True),
        ExpenseCategory("other", "Other"),
    ]


@pytest.fixture
def sample_booking():
    """A booking with no payments."""
    return Booking(
        booking_id="B1",
        client_name="Kapoor Family",
        event_date=date(2025, 12, 10),
        season="2025-26",
        rate=Decimal("1000"),
    )


@pytest.fixture
def store(memory_cache, notifier, categories):
    """Create an empty LedgerStore writing to an in-memory cache."""
    return LedgerStore(
        vendors=[Vendor("v-1", "Shree Tent House", "decoration")],
        categories=categories,
        cache=memory_cache,
        notifier=notifier,
        user="tester",
    )


@pytest.fixture
def store_with_booking(store, sample_booking):
    """Store holding booking B1 (rate 1000)."""
    store.add_booking(sample_booking)
    return store


def make_payment(payment_id="p-1", amount="600", on=date(2025, 9, 1), **kwargs):
    """Build a Received payment."""
    return Payment(payment_id, on, Decimal(amount), kwargs.pop("method", PaymentMethod.CASH), **kwargs)


def make_expense(expense_id="e-1", amount="200", booking_id="B1", vendor="Shree Tent House", **kwargs):
    """Build a Paid expense."""
    return Expense(
        expense_id=expense_id,
        expense_date=kwargs.pop("expense_date", date(2025, 9, 5)),
        category=kwargs.pop("category", "Decoration"),
        vendor=vendor,
        amount=Decimal(amount),
        payment_method=kwargs.pop("payment_method", PaymentMethod.CASH),
        booking_id=booking_id,
        **kwargs,
    )


@pytest.fixture
def mirrored_store(memory_cache, notifier, categories, recording_adapter):
    """Store mirroring to a RecordingAdapter."""
    return LedgerStore(
        categories=categories,
        cache=memory_cache,
        mirror=RemoteMirror(recording_adapter, notifier),
        notifier=notifier,
        user="tester",
    )


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def failing_cache():
    return FailingCache()


@pytest.fixture
def store_with_failing_cache(failing_cache, notifier, categories, sample_booking):
    """Store holding booking B1 whose cache writes all fail."""
    return LedgerStore(
        bookings=[sample_booking],
        vendors=[Vendor("v-1", "Shree Tent House", "decoration")],
        categories=categories,
        cache=failing_cache,
        notifier=notifier,
        user="tester",
    )

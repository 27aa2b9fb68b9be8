"""Tests for the async SQLAlchemy persistence adapter."""

import dataclasses
from datetime import date, datetime, UTC
from decimal import Decimal

import pytest
import pytest_asyncio

from venueledger.database.factories import create_sqlite_adapter
from venueledger.domain.entities import (
    AuditEntry,
    BookingStatus,
    ExpenseType,
    PaymentType,
)
from venueledger.domain.errors import PersistenceError

from conftest import make_expense, make_payment


@pytest_asyncio.fixture
async def adapter(temp_db):
    """Create an adapter on a temporary SQLite file."""
    adapter = create_sqlite_adapter(database_path=temp_db)
    yield adapter
    await adapter.close()


@pytest.fixture
def stamped_booking(sample_booking):
    return dataclasses.replace(
        sample_booking,
        created_at=datetime(2025, 8, 1, 10, 30),
        created_by="tester",
        payments=(make_payment("p-1", "600"),),
    )


@pytest.mark.asyncio
async def test_create_and_read_booking(adapter, stamped_booking):
    """Test that a booking and its payments are stored."""
    assert await adapter.create_booking(stamped_booking) == "B1"

    stored = await adapter.get_booking("B1")

    assert stored.client_name == "Kapoor Family"
    assert stored.rate == Decimal("1000")
    assert stored.event_date == date(2025, 12, 10)
    assert [p.payment_id for p in stored.payments] == ["p-1"]
    assert stored.payments[0].amount == Decimal("600")


@pytest.mark.asyncio
async def test_get_missing_booking(adapter):
    assert await adapter.get_booking("NOPE") is None


@pytest.mark.asyncio
async def test_update_booking_fields(adapter, stamped_booking):
    await adapter.create_booking(stamped_booking)

    await adapter.update_booking(
        "B1",
        {
            "status": BookingStatus.COMPLETED,
            "guests": 300,
            "updated_at": datetime(2025, 9, 1, 12, 0, tzinfo=UTC),
        },
    )

    stored = await adapter.get_booking("B1")
    assert stored.status == BookingStatus.COMPLETED
    assert stored.guests == 300
    assert stored.updated_at is not None


@pytest.mark.asyncio
async def test_update_payments_only_appends(adapter, stamped_booking):
    """Test that resending the payment sequence inserts only new entries."""
    await adapter.create_booking(stamped_booking)
    reversal = make_payment("p-2", "100", type=PaymentType.REVERTED, notes="Refund")

    await adapter.update_booking("B1", {"payments": stamped_booking.payments + (reversal,)})
    await adapter.update_booking("B1", {"payments": stamped_booking.payments + (reversal,)})

    stored = await adapter.get_booking("B1")
    assert [p.payment_id for p in stored.payments] == ["p-1", "p-2"]
    assert stored.payments[1].type == PaymentType.REVERTED
    assert stored.payments[1].notes == "Refund"


@pytest.mark.asyncio
async def test_update_ignores_derived_expenses(adapter, stamped_booking):
    await adapter.create_booking(stamped_booking)

    await adapter.update_booking("B1", {"expenses": Decimal("500")})

    assert (await adapter.get_booking("B1")).expenses == Decimal("0")


@pytest.mark.asyncio
async def test_update_missing_booking(adapter):
    with pytest.raises(PersistenceError, match="not stored") as excinfo:
        await adapter.update_booking("NOPE", {"guests": 1})

    assert excinfo.value.operation == "update_booking"


@pytest.mark.asyncio
async def test_update_unknown_field(adapter, stamped_booking):
    await adapter.create_booking(stamped_booking)

    with pytest.raises(PersistenceError, match="no stored field 'colour'"):
        await adapter.update_booking("B1", {"colour": "red"})


@pytest.mark.asyncio
async def test_create_duplicate_booking(adapter, stamped_booking):
    """Test that a constraint violation surfaces as PersistenceError."""
    await adapter.create_booking(stamped_booking)

    with pytest.raises(PersistenceError) as excinfo:
        await adapter.create_booking(stamped_booking)

    assert excinfo.value.operation == "create_booking"
    assert excinfo.value.cause is not None


@pytest.mark.asyncio
async def test_add_expenses(adapter):
    paid = make_expense("e-1", "200", manpower_count=4, rate_per_person=Decimal("50"))
    reverted = make_expense("e-2", "200", type=ExpenseType.REVERTED, expense_date=date(2025, 9, 6))

    await adapter.add_expense(paid)
    await adapter.add_expense(reverted)

    stored = await adapter.list_expenses()
    assert [e.expense_id for e in stored] == ["e-1", "e-2"]
    assert stored[0].manpower_count == 4
    assert stored[0].rate_per_person == Decimal("50")
    assert stored[1].type == ExpenseType.REVERTED


@pytest.mark.asyncio
async def test_log_audit_action(adapter):
    entry = AuditEntry(
        action="create",
        target_collection="bookings",
        performed_by="tester",
        details="Created booking for Kapoor Family",
        target_id="B1",
        timestamp=datetime(2025, 8, 1, 10, 30),
    )

    await adapter.log_audit_action(entry)

    (stored,) = await adapter.list_audit_entries()
    assert stored.action == "create"
    assert stored.target_id == "B1"
    assert stored.performed_by == "tester"

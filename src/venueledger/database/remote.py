"""Asynchronous SQLAlchemy persistence adapter.

Mirrors ledger mutations into relational tables through
``sqlalchemy.ext.asyncio`` (aiosqlite driver for SQLite URLs). Payment and
expense rows are only ever inserted.
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from venueledger.database.base import PersistenceAdapter
from venueledger.database.mappers import (
    audit_entry_to_record,
    audit_record_to_domain,
    booking_record_to_domain,
    booking_to_record,
    expense_record_to_domain,
    expense_to_record,
    payment_to_record,
)
from venueledger.database.models import (
    AuditLogRecord,
    BookingRecord,
    ExpenseRecord,
    PaymentRecord,
    create_async_session_factory,
    create_schema,
)
from venueledger.domain.entities import AuditEntry, Booking, Expense
from venueledger.domain.errors import PersistenceError

logger = logging.getLogger(__name__)

# Booking fields that are derived in memory and have no stored column
DERIVED_BOOKING_FIELDS = frozenset({"expenses"})


def _column_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    return value


class SQLAlchemyPersistenceAdapter(PersistenceAdapter):
    """PersistenceAdapter backed by an async SQLAlchemy engine."""

    def __init__(self, database_url: str):
        """Initialize the adapter.

        Args:
            database_url: Async SQLAlchemy URL (e.g., 'sqlite+aiosqlite:///path/to.db')
        """
        self.database_url = database_url
        self.engine, self.session_factory = create_async_session_factory(database_url)
        self._schema_ready = False
        self._schema_lock = asyncio.Lock()

    async def _ensure_schema(self) -> None:
        async with self._schema_lock:
            if not self._schema_ready:
                await create_schema(self.engine)
                self._schema_ready = True

    async def create_booking(self, booking: Booking) -> str:
        await self._ensure_schema()
        try:
            async with self.session_factory() as session:
                session.add(booking_to_record(booking))
                for payment in booking.payments:
                    session.add(payment_to_record(booking.booking_id, payment))
                await session.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(
                "create_booking", f"could not store booking '{booking.booking_id}'", e
            ) from e
        logger.info("Stored booking %s", booking.booking_id)
        return booking.booking_id

    async def update_booking(self, booking_id: str, fields: dict[str, Any]) -> None:
        await self._ensure_schema()
        try:
            async with self.session_factory() as session:
                record = await session.get(BookingRecord, booking_id)
                if record is None:
                    raise PersistenceError(
                        "update_booking", f"booking '{booking_id}' is not stored"
                    )

                for name, value in fields.items():
                    if name == "payments":
                        await self._append_payments(session, booking_id, value)
                    elif name in DERIVED_BOOKING_FIELDS:
                        continue
                    elif hasattr(BookingRecord, name):
                        setattr(record, name, _column_value(value))
                    else:
                        raise PersistenceError(
                            "update_booking", f"booking has no stored field '{name}'"
                        )
                await session.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(
                "update_booking", f"could not update booking '{booking_id}'", e
            ) from e
        logger.info("Updated booking %s (%s)", booking_id, ", ".join(sorted(fields)))

    async def _append_payments(self, session, booking_id: str, payments) -> None:
        """Insert the payments that are not stored yet; existing rows are kept."""
        result = await session.scalars(
            select(PaymentRecord.payment_id).where(PaymentRecord.booking_id == booking_id)
        )
        stored = set(result.all())
        for payment in payments:
            if payment.payment_id not in stored:
                session.add(payment_to_record(booking_id, payment))

    async def add_expense(self, expense: Expense) -> str:
        await self._ensure_schema()
        try:
            async with self.session_factory() as session:
                session.add(expense_to_record(expense))
                await session.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(
                "add_expense", f"could not store expense '{expense.expense_id}'", e
            ) from e
        logger.info("Stored expense %s", expense.expense_id)
        return expense.expense_id

    async def log_audit_action(self, entry: AuditEntry) -> None:
        await self._ensure_schema()
        try:
            async with self.session_factory() as session:
                session.add(audit_entry_to_record(entry))
                await session.commit()
        except SQLAlchemyError as e:
            raise PersistenceError("log_audit_action", "could not store audit entry", e) from e

    async def get_booking(self, booking_id: str) -> Optional[Booking]:
        """Read a stored booking with its payment rows."""
        await self._ensure_schema()
        async with self.session_factory() as session:
            record = await session.get(BookingRecord, booking_id)
            if record is None:
                return None
            payments = await session.scalars(
                select(PaymentRecord)
                .where(PaymentRecord.booking_id == booking_id)
                .order_by(PaymentRecord.id)
            )
            return booking_record_to_domain(record, list(payments.all()))

    async def list_expenses(self) -> list[Expense]:
        """Read every stored expense entry."""
        await self._ensure_schema()
        async with self.session_factory() as session:
            records = await session.scalars(
                select(ExpenseRecord).order_by(ExpenseRecord.expense_date)
            )
            return [expense_record_to_domain(r) for r in records.all()]

    async def list_audit_entries(self) -> list[AuditEntry]:
        """Read the audit trail in insertion order."""
        await self._ensure_schema()
        async with self.session_factory() as session:
            records = await session.scalars(select(AuditLogRecord).order_by(AuditLogRecord.id))
            return [audit_record_to_domain(r) for r in records.all()]

    async def close(self) -> None:
        await self.engine.dispose()

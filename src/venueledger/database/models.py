"""SQLAlchemy models for venueledger storage."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    JSON,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class CacheEntry(Base):
    """Whole-collection JSON payload stored under a fixed key."""

    __tablename__ = "cache_entries"

    key = Column(String, primary_key=True)
    payload = Column(Text, nullable=False)
    updated_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class BookingRecord(Base):
    """Booking row mirrored by the persistence adapter."""

    __tablename__ = "bookings"

    booking_id = Column(String, primary_key=True)
    client_name = Column(String, nullable=False)
    status = Column(String, nullable=False)
    tier = Column(String, nullable=False)
    season = Column(String, nullable=False)
    event_date = Column(Date, nullable=False)
    contact = Column(String, nullable=False, default="")
    rate = Column(Numeric(12, 2), nullable=False)
    discount = Column(Numeric(12, 2), nullable=False, default=0)
    guests = Column(Integer, nullable=False, default=0)
    shift = Column(String, nullable=False)
    event_type = Column(String, nullable=False, default="")
    services = Column(JSON, nullable=False, default=dict)
    refund_amount = Column(Numeric(12, 2), nullable=True)
    created_by = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    updated_at = Column(DateTime, nullable=True)

    # Relationships
    payments = relationship("PaymentRecord", back_populates="booking", order_by="PaymentRecord.id")


class PaymentRecord(Base):
    """Append-only payment row."""

    __tablename__ = "payments"

    id = Column(Integer, primary_key=True)
    payment_id = Column(String, nullable=False)
    booking_id = Column(String, ForeignKey("bookings.booking_id"), nullable=False)
    date = Column(Date, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    method = Column(String, nullable=False)
    type = Column(String, nullable=False)
    notes = Column(String, nullable=True)
    recorded_by = Column(String, nullable=True)
    reverts_id = Column(String, nullable=True)

    __table_args__ = (UniqueConstraint("booking_id", "payment_id", name="uq_booking_payment_id"),)

    # Relationships
    booking = relationship("BookingRecord", back_populates="payments")


class ExpenseRecord(Base):
    """Append-only expense row."""

    __tablename__ = "expenses"

    expense_id = Column(String, primary_key=True)
    booking_id = Column(String, nullable=True)
    expense_date = Column(Date, nullable=False)
    category = Column(String, nullable=False)
    vendor = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    payment_method = Column(String, nullable=False)
    type = Column(String, nullable=False)
    notes = Column(String, nullable=True)
    manpower_count = Column(Integer, nullable=True)
    rate_per_person = Column(Numeric(12, 2), nullable=True)
    recorded_by = Column(String, nullable=True)
    reverts_id = Column(String, nullable=True)


class AuditLogRecord(Base):
    """Audit trail row."""

    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True)
    action = Column(String, nullable=False)
    target_collection = Column(String, nullable=False)
    target_id = Column(String, nullable=True)
    performed_by = Column(String, nullable=False)
    details = Column(String, nullable=False)
    timestamp = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)


def create_async_session_factory(
    database_url: str,
) -> tuple[AsyncEngine, async_sessionmaker[AsyncSession]]:
    """Create an async engine and session factory.

    Tables are not created here; call ``create_schema`` from inside the
    event loop that will use the engine.
    """
    engine = create_async_engine(database_url, echo=False)
    return engine, async_sessionmaker(bind=engine, expire_on_commit=False)


async def create_schema(engine: AsyncEngine) -> None:
    """Create all tables through an async engine."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

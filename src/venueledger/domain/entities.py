"""Domain model entities for venueledger.

These are pure data classes representing business concepts, independent of
the storage schema. Ledger entries (payments and expenses) are frozen so an
appended entry can never be changed in place; corrections are recorded as
new entries of type ``Reverted``.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional, Union


class BookingStatus(str, Enum):
    UPCOMING = "Upcoming"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class BookingTier(str, Enum):
    SILVER = "Silver"
    GOLD = "Gold"
    DIAMOND = "Diamond"


class Shift(str, Enum):
    DAY = "Day"
    NIGHT = "Night"


class PaymentMethod(str, Enum):
    CASH = "Cash"
    CARD = "Card"
    UPI = "UPI"
    BANK = "Bank"


class PaymentType(str, Enum):
    RECEIVED = "Received"
    REVERTED = "Reverted"


class ExpenseType(str, Enum):
    PAID = "Paid"
    REVERTED = "Reverted"


class TransactionType(str, Enum):
    INCOME = "Income"
    EXPENSE = "Expense"


class Severity(str, Enum):
    """Notification severities understood by every notifier."""

    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


ServiceSelection = Union[bool, str, int]


@dataclass(frozen=True)
class Payment:
    """Payment ledger entry tied to exactly one booking."""

    payment_id: str
    date: date
    amount: Decimal
    method: PaymentMethod
    type: PaymentType = PaymentType.RECEIVED
    notes: Optional[str] = None
    recorded_by: Optional[str] = None
    # ID of the Received payment a Reverted entry offsets
    reverts_id: Optional[str] = None


@dataclass(frozen=True)
class Booking:
    """Venue reservation domain entity.

    ``expenses`` is owned by the balance deriver and always equals the signed
    sum of the expense entries that reference this booking.
    """

    booking_id: str
    client_name: str
    event_date: date
    season: str
    rate: Decimal
    status: BookingStatus = BookingStatus.UPCOMING
    tier: BookingTier = BookingTier.SILVER
    contact: str = ""
    discount: Decimal = Decimal("0")
    guests: int = 0
    shift: Shift = Shift.DAY
    event_type: str = ""
    services: dict[str, ServiceSelection] = field(default_factory=dict)
    refund_amount: Optional[Decimal] = None
    payments: tuple[Payment, ...] = ()
    expenses: Decimal = Decimal("0")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    created_by: Optional[str] = None


@dataclass(frozen=True)
class Expense:
    """Expense ledger entry, optionally tied to a booking."""

    expense_id: str
    expense_date: date
    category: str
    vendor: str
    amount: Decimal
    payment_method: PaymentMethod
    type: ExpenseType = ExpenseType.PAID
    booking_id: Optional[str] = None
    notes: Optional[str] = None
    manpower_count: Optional[int] = None
    rate_per_person: Optional[Decimal] = None
    recorded_by: Optional[str] = None
    # ID of the Paid expense a Reverted entry offsets
    reverts_id: Optional[str] = None


@dataclass(frozen=True)
class ExpenseCategory:
    """Expense classification; ``requires_manpower`` only shapes entry forms."""

    category_id: str
    name: str
    requires_manpower: bool = False


@dataclass(frozen=True)
class Vendor:
    """Named expense payee bound to one expense category."""

    vendor_id: str
    name: str
    category_id: str


@dataclass(frozen=True)
class Transaction:
    """Read-only reporting row merged from payments and expenses."""

    date: date
    description: str
    type: TransactionType
    amount: Decimal
    booking_id: Optional[str] = None
    payment_method: Optional[PaymentMethod] = None
    vendor: Optional[str] = None
    category: Optional[str] = None


@dataclass(frozen=True)
class AuditEntry:
    """Audit trail record mirrored to the persistence adapter."""

    action: str
    target_collection: str
    performed_by: str
    details: str
    target_id: Optional[str] = None
    timestamp: Optional[datetime] = None


@dataclass(frozen=True)
class Service:
    """Configurable per-booking service offered by the venue."""

    service_id: str
    name: str
    type: str = "checkbox"
    options: tuple[str, ...] = ()
    min: Optional[int] = None
    max: Optional[int] = None


@dataclass(frozen=True)
class ServiceConfig:
    """Services grouped by the section they appear under."""

    infrastructure: tuple[Service, ...] = ()
    decoration: tuple[Service, ...] = ()
    labour: tuple[Service, ...] = ()
    halwai: tuple[Service, ...] = ()
    extra: tuple[Service, ...] = ()


@dataclass(frozen=True)
class Package:
    """Named bundle of service selections sold at a fixed price."""

    package_id: str
    name: str
    price: Decimal
    services: dict[str, ServiceSelection] = field(default_factory=dict)


@dataclass(frozen=True)
class BookingBalance:
    """Derived money position of a single booking."""

    booking_id: str
    total_due: Decimal
    received: Decimal
    outstanding: Decimal
    expenses: Decimal
    net_profit: Decimal


@dataclass(frozen=True)
class LedgerTotals:
    """Income/expense totals over a set of transactions."""

    income: Decimal
    expense: Decimal
    count: int

    @property
    def net(self) -> Decimal:
        return self.income - self.expense

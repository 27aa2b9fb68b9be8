"""Built-in configuration and sample data.

Loaded when the local cache has no usable payload for a collection.
"""

from datetime import date
from decimal import Decimal

from venueledger.domain.entities import (
    Booking,
    BookingStatus,
    BookingTier,
    Expense,
    ExpenseCategory,
    ExpenseType,
    Package,
    Payment,
    PaymentMethod,
    PaymentType,
    Service,
    ServiceConfig,
    Shift,
    Vendor,
)

DEFAULT_EXPENSE_CATEGORIES = (
    ExpenseCategory("decoration", "Decoration"),
    ExpenseCategory("halwai", "Halwai & Catering"),
    ExpenseCategory("labour", "Labour", requires_manpower=True),
    ExpenseCategory("electricity", "Electricity & Generator"),
    ExpenseCategory("maintenance", "Maintenance"),
    ExpenseCategory("other", "Other"),
)

DEFAULT_VENDORS = (
    Vendor("v-1", "Shree Tent House", "decoration"),
    Vendor("v-2", "Annapurna Caterers", "halwai"),
    Vendor("v-3", "Local Labour Contractor", "labour"),
    Vendor("v-4", "City Power Services", "electricity"),
)

DEFAULT_SERVICES_CONFIG = ServiceConfig(
    infrastructure=(
        Service("lawn", "Lawn"),
        Service("banquet_hall", "Banquet Hall"),
        Service("rooms", "Rooms", type="number", min=0, max=12),
    ),
    decoration=(
        Service("stage", "Stage Decoration", type="dropdown", options=("Basic", "Premium", "Royal")),
        Service("entry_gate", "Entry Gate"),
        Service("lighting", "Lighting"),
    ),
    labour=(
        Service("waiters", "Waiters", type="number", min=0, max=50),
        Service("cleaning", "Cleaning Staff", type="number", min=0, max=20),
    ),
    halwai=(
        Service("veg_menu", "Veg Menu", type="dropdown", options=("Standard", "Deluxe")),
        Service("live_counters", "Live Counters", type="number", min=0, max=10),
    ),
    extra=(
        Service("dj", "DJ"),
        Service("generator", "Generator Backup"),
    ),
)

DEFAULT_PACKAGES = (
    Package(
        "silver",
        "Silver",
        Decimal("150000"),
        {"lawn": True, "stage": "Basic", "waiters": 10},
    ),
    Package(
        "gold",
        "Gold",
        Decimal("250000"),
        {"lawn": True, "banquet_hall": True, "stage": "Premium", "lighting": True, "waiters": 20},
    ),
    Package(
        "diamond",
        "Diamond",
        Decimal("400000"),
        {
            "lawn": True,
            "banquet_hall": True,
            "rooms": 8,
            "stage": "Royal",
            "lighting": True,
            "entry_gate": True,
            "waiters": 30,
            "dj": True,
        },
    ),
)

SAMPLE_BOOKINGS = (
    Booking(
        booking_id="HG/2025/001",
        client_name="Sharma Family",
        event_date=date(2025, 11, 22),
        season="2025-26",
        rate=Decimal("250000"),
        tier=BookingTier.GOLD,
        contact="9876543210",
        discount=Decimal("10000"),
        guests=400,
        shift=Shift.NIGHT,
        event_type="Wedding",
        payments=(
            Payment("p-1", date(2025, 8, 1), Decimal("50000"), PaymentMethod.BANK),
            Payment("p-2", date(2025, 10, 15), Decimal("100000"), PaymentMethod.UPI),
        ),
    ),
    Booking(
        booking_id="HG/2025/002",
        client_name="Verma Enterprises",
        event_date=date(2025, 6, 14),
        season="2024-25",
        rate=Decimal("150000"),
        status=BookingStatus.COMPLETED,
        tier=BookingTier.SILVER,
        contact="9812345678",
        guests=150,
        shift=Shift.DAY,
        event_type="Corporate",
        payments=(
            Payment("p-3", date(2025, 5, 2), Decimal("150000"), PaymentMethod.CASH),
            Payment(
                "p-4",
                date(2025, 6, 20),
                Decimal("5000"),
                PaymentMethod.CASH,
                PaymentType.REVERTED,
                notes="Generator not provided",
            ),
        ),
    ),
)

SAMPLE_EXPENSES = (
    Expense(
        expense_id="e-1",
        booking_id="HG/2025/002",
        expense_date=date(2025, 6, 13),
        category="Decoration",
        vendor="Shree Tent House",
        amount=Decimal("30000"),
        payment_method=PaymentMethod.CASH,
        type=ExpenseType.PAID,
    ),
    Expense(
        expense_id="e-2",
        expense_date=date(2025, 6, 30),
        category="Electricity & Generator",
        vendor="City Power Services",
        amount=Decimal("12000"),
        payment_method=PaymentMethod.BANK,
        type=ExpenseType.PAID,
    ),
)

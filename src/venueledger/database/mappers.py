"""Mapper functions between domain entities and storage shapes.

Two shapes are handled: JSON-ready dicts for the local cache, and
SQLAlchemy records for the persistence adapter. Keeping the conversion here
means the entities stay unaware of either storage format.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from venueledger.domain import entities as domain
from venueledger.database.models import (
    AuditLogRecord,
    BookingRecord,
    ExpenseRecord,
    PaymentRecord,
)


def _decimal_or_none(value: Any) -> Optional[Decimal]:
    return None if value is None else Decimal(str(value))


def _str_or_none(value: Optional[Decimal]) -> Optional[str]:
    return None if value is None else str(value)


def _datetime_or_none(value: Optional[str]) -> Optional[datetime]:
    return None if value is None else datetime.fromisoformat(value)


def _isoformat_or_none(value: Optional[datetime]) -> Optional[str]:
    return None if value is None else value.isoformat()


# Cache (JSON) shapes


def payment_to_dict(payment: domain.Payment) -> dict[str, Any]:
    """Convert a Payment entity to a JSON-ready dict."""
    return {
        "id": payment.payment_id,
        "date": payment.date.isoformat(),
        "amount": str(payment.amount),
        "method": payment.method.value,
        "type": payment.type.value,
        "notes": payment.notes,
        "recordedBy": payment.recorded_by,
        "revertsId": payment.reverts_id,
    }


def payment_from_dict(data: dict[str, Any]) -> domain.Payment:
    """Convert a cached dict to a Payment entity."""
    return domain.Payment(
        payment_id=data["id"],
        date=date.fromisoformat(data["date"]),
        amount=Decimal(str(data["amount"])),
        method=domain.PaymentMethod(data["method"]),
        type=domain.PaymentType(data["type"]),
        notes=data.get("notes"),
        recorded_by=data.get("recordedBy"),
        reverts_id=data.get("revertsId"),
    )


def booking_to_dict(booking: domain.Booking) -> dict[str, Any]:
    """Convert a Booking entity to a JSON-ready dict."""
    return {
        "bookingId": booking.booking_id,
        "clientName": booking.client_name,
        "status": booking.status.value,
        "tier": booking.tier.value,
        "season": booking.season,
        "eventDate": booking.event_date.isoformat(),
        "contact": booking.contact,
        "rate": str(booking.rate),
        "discount": str(booking.discount),
        "guests": booking.guests,
        "shift": booking.shift.value,
        "eventType": booking.event_type,
        "services": dict(booking.services),
        "refundAmount": _str_or_none(booking.refund_amount),
        "payments": [payment_to_dict(p) for p in booking.payments],
        "expenses": str(booking.expenses),
        "createdAt": _isoformat_or_none(booking.created_at),
        "updatedAt": _isoformat_or_none(booking.updated_at),
        "createdBy": booking.created_by,
    }


def booking_from_dict(data: dict[str, Any]) -> domain.Booking:
    """Convert a cached dict to a Booking entity.

    The cached ``expenses`` value is read back as-is; the ledger store
    rederives it from the expense ledger after loading.
    """
    return domain.Booking(
        booking_id=data["bookingId"],
        client_name=data["clientName"],
        status=domain.BookingStatus(data["status"]),
        tier=domain.BookingTier(data["tier"]),
        season=data["season"],
        event_date=date.fromisoformat(data["eventDate"]),
        contact=data.get("contact", ""),
        rate=Decimal(str(data["rate"])),
        discount=Decimal(str(data.get("discount") or "0")),
        guests=int(data.get("guests", 0)),
        shift=domain.Shift(data["shift"]),
        event_type=data.get("eventType", ""),
        services=dict(data.get("services") or {}),
        refund_amount=_decimal_or_none(data.get("refundAmount")),
        payments=tuple(payment_from_dict(p) for p in data.get("payments", [])),
        expenses=Decimal(str(data.get("expenses") or "0")),
        created_at=_datetime_or_none(data.get("createdAt")),
        updated_at=_datetime_or_none(data.get("updatedAt")),
        created_by=data.get("createdBy"),
    )


def expense_to_dict(expense: domain.Expense) -> dict[str, Any]:
    """Convert an Expense entity to a JSON-ready dict."""
    return {
        "id": expense.expense_id,
        "bookingId": expense.booking_id,
        "expenseDate": expense.expense_date.isoformat(),
        "category": expense.category,
        "vendor": expense.vendor,
        "amount": str(expense.amount),
        "paymentMethod": expense.payment_method.value,
        "type": expense.type.value,
        "notes": expense.notes,
        "manpowerCount": expense.manpower_count,
        "ratePerPerson": _str_or_none(expense.rate_per_person),
        "recordedBy": expense.recorded_by,
        "revertsId": expense.reverts_id,
    }


def expense_from_dict(data: dict[str, Any]) -> domain.Expense:
    """Convert a cached dict to an Expense entity."""
    manpower_count = data.get("manpowerCount")
    return domain.Expense(
        expense_id=data["id"],
        booking_id=data.get("bookingId") or None,
        expense_date=date.fromisoformat(data["expenseDate"]),
        category=data["category"],
        vendor=data["vendor"],
        amount=Decimal(str(data["amount"])),
        payment_method=domain.PaymentMethod(data["paymentMethod"]),
        type=domain.ExpenseType(data["type"]),
        notes=data.get("notes"),
        manpower_count=None if manpower_count is None else int(manpower_count),
        rate_per_person=_decimal_or_none(data.get("ratePerPerson")),
        recorded_by=data.get("recordedBy"),
        reverts_id=data.get("revertsId"),
    )


def vendor_to_dict(vendor: domain.Vendor) -> dict[str, Any]:
    return {"id": vendor.vendor_id, "name": vendor.name, "categoryId": vendor.category_id}


def vendor_from_dict(data: dict[str, Any]) -> domain.Vendor:
    return domain.Vendor(vendor_id=data["id"], name=data["name"], category_id=data["categoryId"])


def category_to_dict(category: domain.ExpenseCategory) -> dict[str, Any]:
    return {
        "id": category.category_id,
        "name": category.name,
        "requiresManpower": category.requires_manpower,
    }


def category_from_dict(data: dict[str, Any]) -> domain.ExpenseCategory:
    return domain.ExpenseCategory(
        category_id=data["id"],
        name=data["name"],
        requires_manpower=bool(data.get("requiresManpower", False)),
    )


def package_to_dict(package: domain.Package) -> dict[str, Any]:
    return {
        "id": package.package_id,
        "name": package.name,
        "price": str(package.price),
        "services": dict(package.services),
    }


def package_from_dict(data: dict[str, Any]) -> domain.Package:
    return domain.Package(
        package_id=data["id"],
        name=data["name"],
        price=Decimal(str(data["price"])),
        services=dict(data.get("services") or {}),
    )


def service_to_dict(service: domain.Service) -> dict[str, Any]:
    return {
        "id": service.service_id,
        "name": service.name,
        "type": service.type,
        "options": list(service.options),
        "min": service.min,
        "max": service.max,
    }


def service_from_dict(data: dict[str, Any]) -> domain.Service:
    return domain.Service(
        service_id=data["id"],
        name=data["name"],
        type=data.get("type", "checkbox"),
        options=tuple(data.get("options") or ()),
        min=data.get("min"),
        max=data.get("max"),
    )


SERVICE_SECTIONS = ("infrastructure", "decoration", "labour", "halwai", "extra")


def service_config_to_dict(config: domain.ServiceConfig) -> dict[str, Any]:
    return {
        section: [service_to_dict(s) for s in getattr(config, section)]
        for section in SERVICE_SECTIONS
    }


def service_config_from_dict(data: dict[str, Any]) -> domain.ServiceConfig:
    return domain.ServiceConfig(
        **{
            section: tuple(service_from_dict(s) for s in data.get(section, []))
            for section in SERVICE_SECTIONS
        }
    )


# Persistence adapter (ORM) shapes


def booking_to_record(booking: domain.Booking) -> BookingRecord:
    """Convert a Booking entity to a new SQLAlchemy BookingRecord.

    Payments are converted separately so they can be appended row by row.
    """
    record = BookingRecord(
        booking_id=booking.booking_id,
        client_name=booking.client_name,
        status=booking.status.value,
        tier=booking.tier.value,
        season=booking.season,
        event_date=booking.event_date,
        contact=booking.contact,
        rate=booking.rate,
        discount=booking.discount,
        guests=booking.guests,
        shift=booking.shift.value,
        event_type=booking.event_type,
        services=dict(booking.services),
        refund_amount=booking.refund_amount,
        created_by=booking.created_by,
        updated_at=booking.updated_at,
    )
    if booking.created_at is not None:
        record.created_at = booking.created_at
    return record


def payment_to_record(booking_id: str, payment: domain.Payment) -> PaymentRecord:
    """Convert a Payment entity to a SQLAlchemy PaymentRecord."""
    return PaymentRecord(
        payment_id=payment.payment_id,
        booking_id=booking_id,
        date=payment.date,
        amount=payment.amount,
        method=payment.method.value,
        type=payment.type.value,
        notes=payment.notes,
        recorded_by=payment.recorded_by,
        reverts_id=payment.reverts_id,
    )


def payment_record_to_domain(record: PaymentRecord) -> domain.Payment:
    """Convert a SQLAlchemy PaymentRecord to a Payment entity."""
    return domain.Payment(
        payment_id=record.payment_id,
        date=record.date,
        amount=Decimal(record.amount),
        method=domain.PaymentMethod(record.method),
        type=domain.PaymentType(record.type),
        notes=record.notes,
        recorded_by=record.recorded_by,
        reverts_id=record.reverts_id,
    )


def booking_record_to_domain(
    record: BookingRecord, payments: list[PaymentRecord]
) -> domain.Booking:
    """Convert a SQLAlchemy BookingRecord and its payment rows to a Booking.

    The stored row has no ``expenses`` column, so the result carries 0 until
    the balance deriver runs.
    """
    return domain.Booking(
        booking_id=record.booking_id,
        client_name=record.client_name,
        status=domain.BookingStatus(record.status),
        tier=domain.BookingTier(record.tier),
        season=record.season,
        event_date=record.event_date,
        contact=record.contact,
        rate=Decimal(record.rate),
        discount=Decimal(record.discount),
        guests=record.guests,
        shift=domain.Shift(record.shift),
        event_type=record.event_type,
        services=dict(record.services or {}),
        refund_amount=_decimal_or_none(record.refund_amount),
        payments=tuple(payment_record_to_domain(p) for p in payments),
        created_at=record.created_at,
        updated_at=record.updated_at,
        created_by=record.created_by,
    )


def expense_to_record(expense: domain.Expense) -> ExpenseRecord:
    """Convert an Expense entity to a SQLAlchemy ExpenseRecord."""
    return ExpenseRecord(
        expense_id=expense.expense_id,
        booking_id=expense.booking_id,
        expense_date=expense.expense_date,
        category=expense.category,
        vendor=expense.vendor,
        amount=expense.amount,
        payment_method=expense.payment_method.value,
        type=expense.type.value,
        notes=expense.notes,
        manpower_count=expense.manpower_count,
        rate_per_person=expense.rate_per_person,
        recorded_by=expense.recorded_by,
        reverts_id=expense.reverts_id,
    )


def expense_record_to_domain(record: ExpenseRecord) -> domain.Expense:
    """Convert a SQLAlchemy ExpenseRecord to an Expense entity."""
    return domain.Expense(
        expense_id=record.expense_id,
        booking_id=record.booking_id,
        expense_date=record.expense_date,
        category=record.category,
        vendor=record.vendor,
        amount=Decimal(record.amount),
        payment_method=domain.PaymentMethod(record.payment_method),
        type=domain.ExpenseType(record.type),
        notes=record.notes,
        manpower_count=record.manpower_count,
        rate_per_person=_decimal_or_none(record.rate_per_person),
        recorded_by=record.recorded_by,
        reverts_id=record.reverts_id,
    )


def audit_entry_to_record(entry: domain.AuditEntry) -> AuditLogRecord:
    """Convert an AuditEntry entity to a SQLAlchemy AuditLogRecord."""
    record = AuditLogRecord(
        action=entry.action,
        target_collection=entry.target_collection,
        target_id=entry.target_id,
        performed_by=entry.performed_by,
        details=entry.details,
    )
    if entry.timestamp is not None:
        record.timestamp = entry.timestamp
    return record


def audit_record_to_domain(record: AuditLogRecord) -> domain.AuditEntry:
    """Convert a SQLAlchemy AuditLogRecord to an AuditEntry entity."""
    return domain.AuditEntry(
        action=record.action,
        target_collection=record.target_collection,
        target_id=record.target_id,
        performed_by=record.performed_by,
        details=record.details,
        timestamp=record.timestamp,
    )

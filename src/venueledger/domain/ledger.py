"""Ledger store: the single owner of bookings, payments and expenses.

All mutation goes through the methods of ``LedgerStore``. Payments and
expenses are only ever appended; a reversal is a new entry of type
``Reverted``. Booking ``expenses`` totals are rederived from the full expense
ledger after every expense mutation and are never taken from callers.

Each mutation is applied in memory first, then the affected collections are
written to the local cache and the change is handed to the remote mirror.
Cache and mirror failures are reported but never undo the mutation.
"""

import dataclasses
import json
import logging
import threading
import uuid
from datetime import date, datetime, UTC
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence, TypeVar

from venueledger.database.base import CacheKeys, LocalCache, PersistenceAdapter
from venueledger.database import mappers
from venueledger.domain import defaults
from venueledger.domain.balances import apply_booking_expenses, booking_balance
from venueledger.domain.entities import (
    AuditEntry,
    Booking,
    BookingBalance,
    BookingStatus,
    BookingTier,
    Expense,
    ExpenseCategory,
    ExpenseType,
    Package,
    Payment,
    PaymentMethod,
    PaymentType,
    ServiceConfig,
    Severity,
    Shift,
    Transaction,
    Vendor,
)
from venueledger.domain.errors import (
    NotFoundError,
    PersistenceError,
    ValidationError,
    booking_not_found,
    duplicate_booking_id,
    duplicate_entry_id,
    expense_not_found,
    non_positive_amount,
    payment_not_found,
    unknown_booking_fields,
)
from venueledger.domain.notifications import Notifier, NullNotifier
from venueledger.domain.seasons import available_seasons
from venueledger.domain.sync import RemoteMirror
from venueledger.domain.transactions import merge_transactions
from venueledger.domain.vendors import find_or_create_vendor
from venueledger.utils.amount_parser import format_inr

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Patch keys that edits may carry but must never apply
PROTECTED_BOOKING_FIELDS = frozenset(
    {"booking_id", "payments", "expenses", "created_at", "created_by", "updated_at"}
)
EDITABLE_BOOKING_FIELDS = frozenset(
    f.name for f in dataclasses.fields(Booking)
) - PROTECTED_BOOKING_FIELDS

_ENUM_FIELDS = {"status": BookingStatus, "tier": BookingTier, "shift": Shift}
_MONEY_FIELDS = ("rate", "discount", "refund_amount")
_TEXT_FIELDS = ("client_name", "season", "contact", "event_type")
_OPTIONAL_FIELDS = frozenset({"refund_amount"})


def new_entry_id(prefix: str) -> str:
    """Generate an identifier for a new ledger entry."""
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


def _load_collection(
    cache: LocalCache, key: str, decode: Callable[[Any], T], fallback: T
) -> T:
    """Read one cached collection, falling back to ``fallback``.

    Absent, unreadable and malformed payloads all fall back; only the latter
    two are logged.
    """
    try:
        payload = cache.read(key)
    except PersistenceError as e:
        logger.warning("Could not read %s from cache, using defaults: %s", key, e)
        return fallback
    if payload is None:
        return fallback
    try:
        return decode(json.loads(payload))
    except (ValueError, KeyError, TypeError, AttributeError, InvalidOperation) as e:
        logger.warning("Malformed cached %s, using defaults: %s", key, e)
        return fallback


class LedgerStore:
    """In-memory ledger with an append-only mutation API."""

    def __init__(
        self,
        bookings: Iterable[Booking] = (),
        expenses: Iterable[Expense] = (),
        vendors: Iterable[Vendor] = defaults.DEFAULT_VENDORS,
        categories: Iterable[ExpenseCategory] = defaults.DEFAULT_EXPENSE_CATEGORIES,
        packages: Iterable[Package] = defaults.DEFAULT_PACKAGES,
        services_config: ServiceConfig = defaults.DEFAULT_SERVICES_CONFIG,
        cache: Optional[LocalCache] = None,
        mirror: Optional[RemoteMirror] = None,
        notifier: Optional[Notifier] = None,
        user: str = "system",
    ):
        """Initialize the store.

        Args:
            bookings: Initial bookings; their ``expenses`` are rederived
            expenses: Initial expense ledger
            vendors: Known vendors
            categories: Expense categories
            packages: Package configuration
            services_config: Service configuration
            cache: Local cache written after each mutation, or None
            mirror: Remote mirror receiving each mutation, or None
            notifier: Sink for action outcomes
            user: Identity recorded on new entries and audit entries
        """
        self._expenses: list[Expense] = list(expenses)
        self._bookings: list[Booking] = apply_booking_expenses(list(bookings), self._expenses)
        self._vendors: list[Vendor] = list(vendors)
        self._categories: tuple[ExpenseCategory, ...] = tuple(categories)
        self._packages: tuple[Package, ...] = tuple(packages)
        self._services_config = services_config
        self.cache = cache
        self.notifier = notifier or NullNotifier()
        self.mirror = mirror or RemoteMirror(None, self.notifier)
        self.user = user
        self._viewing_booking: Optional[Booking] = None
        self._lock = threading.RLock()

    @classmethod
    def load(
        cls,
        cache: LocalCache,
        adapter: Optional[PersistenceAdapter] = None,
        notifier: Optional[Notifier] = None,
        user: str = "system",
    ) -> "LedgerStore":
        """Build a store from the local cache.

        Each collection falls back to the built-in sample or default data when
        its cached payload is absent or malformed.
        """
        notifier = notifier or NullNotifier()
        return cls(
            bookings=_load_collection(
                cache,
                CacheKeys.BOOKINGS,
                lambda data: [mappers.booking_from_dict(d) for d in data],
                list(defaults.SAMPLE_BOOKINGS),
            ),
            expenses=_load_collection(
                cache,
                CacheKeys.EXPENSES,
                lambda data: [mappers.expense_from_dict(d) for d in data],
                list(defaults.SAMPLE_EXPENSES),
            ),
            vendors=_load_collection(
                cache,
                CacheKeys.VENDORS,
                lambda data: [mappers.vendor_from_dict(d) for d in data],
                list(defaults.DEFAULT_VENDORS),
            ),
            categories=_load_collection(
                cache,
                CacheKeys.EXPENSE_CATEGORIES,
                lambda data: [mappers.category_from_dict(d) for d in data],
                list(defaults.DEFAULT_EXPENSE_CATEGORIES),
            ),
            packages=_load_collection(
                cache,
                CacheKeys.PACKAGES,
                lambda data: [mappers.package_from_dict(d) for d in data],
                list(defaults.DEFAULT_PACKAGES),
            ),
            services_config=_load_collection(
                cache,
                CacheKeys.SERVICES_CONFIG,
                mappers.service_config_from_dict,
                defaults.DEFAULT_SERVICES_CONFIG,
            ),
            cache=cache,
            mirror=RemoteMirror(adapter, notifier),
            notifier=notifier,
            user=user,
        )

    # Read access

    @property
    def bookings(self) -> tuple[Booking, ...]:
        return tuple(self._bookings)

    @property
    def expenses(self) -> tuple[Expense, ...]:
        return tuple(self._expenses)

    @property
    def vendors(self) -> tuple[Vendor, ...]:
        return tuple(self._vendors)

    @property
    def categories(self) -> tuple[ExpenseCategory, ...]:
        return self._categories

    @property
    def packages(self) -> tuple[Package, ...]:
        return self._packages

    @property
    def services_config(self) -> ServiceConfig:
        return self._services_config

    @property
    def viewing_booking(self) -> Optional[Booking]:
        """The booking currently open for viewing, kept in sync with the ledger."""
        return self._viewing_booking

    def get_booking(self, booking_id: str) -> Optional[Booking]:
        """Get booking by ID, or None if not found."""
        for booking in self._bookings:
            if booking.booking_id == booking_id:
                return booking
        return None

    def require_booking(self, booking_id: str) -> Booking:
        """Get booking by ID.

        Raises:
            NotFoundError: If the booking does not exist
        """
        booking = self.get_booking(booking_id)
        if booking is None:
            raise NotFoundError(booking_not_found(booking_id))
        return booking

    def get_expense(self, expense_id: str) -> Optional[Expense]:
        """Get expense entry by ID, or None if not found."""
        for expense in self._expenses:
            if expense.expense_id == expense_id:
                return expense
        return None

    def expenses_for_booking(self, booking_id: str) -> list[Expense]:
        """Expense entries referencing a booking, in ledger order."""
        return [e for e in self._expenses if e.booking_id == booking_id]

    def transactions(self) -> list[Transaction]:
        """Build the merged transaction ledger from the current state."""
        return merge_transactions(self._bookings, self._expenses)

    def available_seasons(self) -> list[str]:
        return available_seasons(self._bookings)

    def booking_balance(self, booking_id: str) -> BookingBalance:
        """Compute the money position of a booking.

        Raises:
            NotFoundError: If the booking does not exist
        """
        return booking_balance(self.require_booking(booking_id))

    def view_booking(self, booking_id: str) -> Booking:
        """Open a booking for viewing.

        Raises:
            NotFoundError: If the booking does not exist
        """
        booking = self.require_booking(booking_id)
        self._viewing_booking = booking
        return booking

    def close_view(self) -> None:
        self._viewing_booking = None

    # Mutations

    def add_booking(self, booking: Booking) -> Booking:
        """Add a new booking.

        Payments already on the booking (an advance taken at creation) are
        kept. Any ``expenses`` value on the argument is discarded and
        rederived from the expense ledger.

        Args:
            booking: Booking to add

        Returns:
            The stored booking

        Raises:
            ValidationError: If the ID already exists or the booking is malformed
        """
        with self._lock:
            if self.get_booking(booking.booking_id) is not None:
                raise ValidationError(duplicate_booking_id(booking.booking_id))
            if not booking.booking_id.strip():
                raise ValidationError("Booking id must not be empty")
            if not booking.client_name.strip():
                raise ValidationError("Client name must not be empty")
            self._validate_money(booking.rate, booking.discount, booking.refund_amount)
            seen: set[str] = set()
            for payment in booking.payments:
                self._validate_payment(payment, seen)
                seen.add(payment.payment_id)

            now = datetime.now(UTC)
            stored = dataclasses.replace(
                booking,
                payments=tuple(booking.payments),
                services=dict(booking.services),
                created_at=booking.created_at or now,
                created_by=booking.created_by or self.user,
            )
            self._bookings.append(stored)
            self._bookings = apply_booking_expenses(self._bookings, self._expenses)
            stored = self.require_booking(booking.booking_id)
            logger.info("Added booking %s for %s", stored.booking_id, stored.client_name)

            self._save_bookings()
            self.mirror.submit("create_booking", lambda adapter: adapter.create_booking(stored))
            self._audit(
                "create",
                "bookings",
                stored.booking_id,
                f"Created booking for {stored.client_name}",
            )
            self.notifier.notify(
                f"Booking {stored.booking_id} for {stored.client_name} created.", Severity.SUCCESS
            )
            return stored

    def update_booking(self, booking_id: str, patch: Mapping[str, Any]) -> Booking:
        """Replace editable fields of a booking.

        Keys for ``payments``, ``expenses``, ``booking_id`` and the creation
        and update stamps are ignored, so a full edited booking can be passed
        as a patch without touching ledger-owned fields.

        Args:
            booking_id: Booking to update
            patch: Field name to new value

        Returns:
            The updated booking

        Raises:
            NotFoundError: If the booking does not exist
            ValidationError: If the patch names unknown fields or has bad values
        """
        with self._lock:
            booking = self.require_booking(booking_id)

            unknown = [k for k in patch if k not in EDITABLE_BOOKING_FIELDS | PROTECTED_BOOKING_FIELDS]
            if unknown:
                raise ValidationError(unknown_booking_fields(unknown))
            ignored = sorted(k for k in patch if k in PROTECTED_BOOKING_FIELDS)
            if ignored:
                logger.debug("Ignoring protected booking fields for %s: %s", booking_id, ignored)

            changes = {
                name: self._coerce_booking_field(name, value)
                for name, value in patch.items()
                if name in EDITABLE_BOOKING_FIELDS
            }
            self._validate_money(
                changes.get("rate", booking.rate),
                changes.get("discount", booking.discount),
                changes.get("refund_amount", booking.refund_amount),
            )
            if "client_name" in changes and not changes["client_name"].strip():
                raise ValidationError("Client name must not be empty")

            changes["updated_at"] = datetime.now(UTC)
            updated = dataclasses.replace(booking, **changes)
            self._replace_booking(updated)
            logger.info("Updated booking %s (%s)", booking_id, ", ".join(sorted(changes)))

            self._save_bookings()
            self.mirror.submit(
                "update_booking", lambda adapter: adapter.update_booking(booking_id, changes)
            )
            self._audit(
                "update",
                "bookings",
                booking_id,
                f"Updated {', '.join(sorted(k for k in changes if k != 'updated_at'))}",
            )
            self.notifier.notify(f"Booking {booking_id} updated.", Severity.SUCCESS)
            return updated

    def append_payment(self, booking_id: str, payment: Payment) -> Booking:
        """Append a payment entry (Received or Reverted) to a booking.

        Args:
            booking_id: Booking the payment belongs to
            payment: Payment entry to append

        Returns:
            The booking with the new payment sequence

        Raises:
            NotFoundError: If the booking does not exist
            ValidationError: If the amount is not positive or the ID is in use
        """
        with self._lock:
            booking = self.require_booking(booking_id)
            self._validate_payment(payment, {p.payment_id for p in booking.payments})

            updated = dataclasses.replace(booking, payments=booking.payments + (payment,))
            self._replace_booking(updated)
            logger.info(
                "Appended %s payment %s of %s to %s",
                payment.type.value,
                payment.payment_id,
                payment.amount,
                booking_id,
            )

            self._save_bookings()
            payments = updated.payments
            self.mirror.submit(
                "update_booking",
                lambda adapter: adapter.update_booking(booking_id, {"payments": payments}),
            )
            if payment.type == PaymentType.RECEIVED:
                self.notifier.notify(
                    f"Payment of {format_inr(payment.amount)} added successfully!", Severity.SUCCESS
                )
            else:
                self.notifier.notify(
                    f"Payment of {format_inr(payment.amount)} reverted successfully.", Severity.WARNING
                )
            return updated

    def revert_payment(
        self,
        booking_id: str,
        payment_id: str,
        notes: Optional[str] = None,
        amount: Optional[Decimal] = None,
        on: Optional[date] = None,
        method: Optional[PaymentMethod] = None,
    ) -> Payment:
        """Append a Reverted payment offsetting a Received one.

        The original entry is left untouched.

        Args:
            booking_id: Booking holding the payment
            payment_id: ID of the Received payment being reverted
            notes: Reason for the reversal
            amount: Amount to revert; defaults to the part of the original
                not yet reverted and may not exceed it
            on: Reversal date; defaults to today
            method: Refund method; defaults to the original method

        Returns:
            The appended Reverted payment

        Raises:
            NotFoundError: If the booking or payment does not exist
            ValidationError: If the payment is not Received or the amount is invalid
        """
        with self._lock:
            booking = self.require_booking(booking_id)
            original = next((p for p in booking.payments if p.payment_id == payment_id), None)
            if original is None:
                raise NotFoundError(payment_not_found(payment_id, booking_id))
            if original.type != PaymentType.RECEIVED:
                raise ValidationError(f"Payment '{payment_id}' is a reversal and cannot be reverted")

            already = sum(
                (
                    p.amount
                    for p in booking.payments
                    if p.type == PaymentType.REVERTED and p.reverts_id == payment_id
                ),
                Decimal("0"),
            )
            revert_amount = self._revert_amount("Payment", payment_id, original.amount, already, amount)

            reversal = Payment(
                payment_id=new_entry_id("pay"),
                date=on or date.today(),
                amount=revert_amount,
                method=method or original.method,
                type=PaymentType.REVERTED,
                notes=notes,
                recorded_by=self.user,
                reverts_id=payment_id,
            )
            self.append_payment(booking_id, reversal)
            return reversal

    def append_expense(
        self, expense: Expense, fallback_category_id: Optional[str] = None
    ) -> Expense:
        """Append an expense entry (Paid or Reverted) to the ledger.

        A vendor name not matching any known vendor (ignoring case) creates a
        new vendor in ``fallback_category_id``, or the "Other" category.

        Args:
            expense: Expense entry to append
            fallback_category_id: Category for an implicitly created vendor

        Returns:
            The appended expense

        Raises:
            ValidationError: If the amount is not positive or the ID is in use
            NotFoundError: If the expense references an unknown booking
        """
        with self._lock:
            if expense.amount <= 0:
                raise ValidationError(non_positive_amount("Expense", expense.amount))
            if self.get_expense(expense.expense_id) is not None:
                raise ValidationError(duplicate_entry_id("Expense", expense.expense_id))
            if not expense.vendor.strip():
                raise ValidationError("Vendor name must not be empty")
            if expense.booking_id and self.get_booking(expense.booking_id) is None:
                raise NotFoundError(booking_not_found(expense.booking_id))

            self._expenses.append(expense)
            logger.info(
                "Appended %s expense %s of %s (%s)",
                expense.type.value,
                expense.expense_id,
                expense.amount,
                expense.booking_id or "general",
            )

            vendor, created = find_or_create_vendor(
                self._vendors, expense.vendor, self._categories, fallback_category_id
            )
            if created:
                self._vendors.append(vendor)
                logger.info("Created vendor %s in category %s", vendor.name, vendor.category_id)
                self._save(CacheKeys.VENDORS, [mappers.vendor_to_dict(v) for v in self._vendors])
                self.notifier.notify(
                    f'New vendor "{vendor.name}" added to category.', Severity.INFO
                )

            self._rederive_balances()
            self._save(CacheKeys.EXPENSES, [mappers.expense_to_dict(e) for e in self._expenses])
            self._save_bookings()
            self.mirror.submit("add_expense", lambda adapter: adapter.add_expense(expense))

            if expense.type == ExpenseType.PAID:
                self.notifier.notify("Expense added successfully!", Severity.SUCCESS)
            else:
                self.notifier.notify(
                    f"Expense of {format_inr(expense.amount)} reverted successfully.", Severity.WARNING
                )
            return expense

    def revert_expense(
        self,
        expense_id: str,
        notes: Optional[str] = None,
        amount: Optional[Decimal] = None,
        on: Optional[date] = None,
    ) -> Expense:
        """Append a Reverted copy of a Paid expense.

        Args:
            expense_id: ID of the Paid expense being reverted
            notes: Reason for the reversal
            amount: Amount to revert; defaults to the part of the original
                not yet reverted and may not exceed it
            on: Reversal date; defaults to today

        Returns:
            The appended Reverted expense

        Raises:
            NotFoundError: If the expense does not exist
            ValidationError: If the expense is not Paid or the amount is invalid
        """
        with self._lock:
            original = self.get_expense(expense_id)
            if original is None:
                raise NotFoundError(expense_not_found(expense_id))
            if original.type != ExpenseType.PAID:
                raise ValidationError(f"Expense '{expense_id}' is a reversal and cannot be reverted")

            already = sum(
                (
                    e.amount
                    for e in self._expenses
                    if e.type == ExpenseType.REVERTED and e.reverts_id == expense_id
                ),
                Decimal("0"),
            )
            revert_amount = self._revert_amount("Expense", expense_id, original.amount, already, amount)

            reversal = dataclasses.replace(
                original,
                expense_id=new_entry_id("exp"),
                expense_date=on or date.today(),
                amount=revert_amount,
                type=ExpenseType.REVERTED,
                notes=notes,
                recorded_by=self.user,
                reverts_id=expense_id,
            )
            return self.append_expense(reversal)

    # Catalog

    def add_category(self, category: ExpenseCategory) -> ExpenseCategory:
        """Add an expense category.

        Raises:
            ValidationError: If the ID or name (ignoring case) is already used
        """
        with self._lock:
            if not category.category_id.strip() or not category.name.strip():
                raise ValidationError("Category id and name must not be empty")
            for existing in self._categories:
                if existing.category_id == category.category_id:
                    raise ValidationError(f"Category '{category.category_id}' already exists")
                if existing.name.lower() == category.name.strip().lower():
                    raise ValidationError(f"Category named '{existing.name}' already exists")

            self._categories = self._categories + (category,)
            logger.info("Added expense category %s (%s)", category.category_id, category.name)
            self._save(
                CacheKeys.EXPENSE_CATEGORIES,
                [mappers.category_to_dict(c) for c in self._categories],
            )
            self.notifier.notify(f'Category "{category.name}" added.', Severity.SUCCESS)
            return category

    def set_packages(self, packages: Sequence[Package]) -> tuple[Package, ...]:
        """Replace the package configuration.

        Existing bookings keep the services and rate they were created with.

        Raises:
            ValidationError: If package IDs repeat or a price is negative
        """
        with self._lock:
            seen: set[str] = set()
            for package in packages:
                if package.package_id in seen:
                    raise ValidationError(f"Package '{package.package_id}' listed twice")
                if package.price < 0:
                    raise ValidationError(
                        f"Package '{package.package_id}' price must not be negative"
                    )
                seen.add(package.package_id)

            self._packages = tuple(
                dataclasses.replace(p, services=dict(p.services)) for p in packages
            )
            logger.info("Replaced packages: %s", ", ".join(sorted(seen)) or "none")
            self._save(CacheKeys.PACKAGES, [mappers.package_to_dict(p) for p in self._packages])
            self.notifier.notify("Packages saved.", Severity.SUCCESS)
            return self._packages

    def set_services_config(self, config: ServiceConfig) -> ServiceConfig:
        """Replace the service configuration.

        Raises:
            ValidationError: If a service ID is used in more than one place
        """
        with self._lock:
            ids = [
                service.service_id
                for section in mappers.SERVICE_SECTIONS
                for service in getattr(config, section)
            ]
            repeated = sorted({i for i in ids if ids.count(i) > 1})
            if repeated:
                raise ValidationError(f"Duplicate service id(s): {', '.join(repeated)}")

            self._services_config = config
            logger.info("Replaced services config (%d services)", len(ids))
            self._save(CacheKeys.SERVICES_CONFIG, mappers.service_config_to_dict(config))
            self.notifier.notify("Services configuration saved.", Severity.SUCCESS)
            return config

    # Internals

    def _replace_booking(self, updated: Booking) -> None:
        for index, booking in enumerate(self._bookings):
            if booking.booking_id == updated.booking_id:
                self._bookings[index] = updated
                break
        self._refresh_view()

    def _refresh_view(self) -> None:
        if self._viewing_booking is not None:
            current = self.get_booking(self._viewing_booking.booking_id)
            if current is not None:
                self._viewing_booking = current

    def _rederive_balances(self) -> None:
        self._bookings = apply_booking_expenses(self._bookings, self._expenses)
        self._refresh_view()

    def _validate_payment(self, payment: Payment, used_ids: set[str]) -> None:
        if payment.amount <= 0:
            raise ValidationError(non_positive_amount("Payment", payment.amount))
        if payment.payment_id in used_ids:
            raise ValidationError(duplicate_entry_id("Payment", payment.payment_id))

    def _validate_money(
        self, rate: Decimal, discount: Decimal, refund_amount: Optional[Decimal]
    ) -> None:
        if rate < 0:
            raise ValidationError(f"Rate must not be negative, got {rate}")
        if discount < 0:
            raise ValidationError(f"Discount must not be negative, got {discount}")
        if refund_amount is not None and refund_amount < 0:
            raise ValidationError(f"Refund amount must not be negative, got {refund_amount}")

    def _revert_amount(
        self,
        kind: str,
        entry_id: str,
        original: Decimal,
        already_reverted: Decimal,
        requested: Optional[Decimal],
    ) -> Decimal:
        remaining = original - already_reverted
        if remaining <= 0:
            raise ValidationError(f"{kind} '{entry_id}' is already fully reverted")
        if requested is None:
            return remaining
        if requested > remaining:
            raise ValidationError(
                f"Revert amount {requested} exceeds the {remaining} of {kind.lower()} "
                f"'{entry_id}' not yet reverted"
            )
        return requested

    def _coerce_booking_field(self, name: str, value: Any) -> Any:
        if value is None:
            if name in _OPTIONAL_FIELDS:
                return None
            raise ValidationError(f"Field '{name}' must not be empty")
        if name in _ENUM_FIELDS:
            try:
                return _ENUM_FIELDS[name](value)
            except ValueError as e:
                raise ValidationError(f"Invalid {name} '{value}'") from e
        if name in _MONEY_FIELDS:
            if isinstance(value, bool):
                raise ValidationError(f"Invalid {name} '{value}'")
            try:
                amount = Decimal(str(value))
            except InvalidOperation as e:
                raise ValidationError(f"Invalid {name} '{value}'") from e
            if not amount.is_finite():
                raise ValidationError(f"Invalid {name} '{value}'")
            return amount
        if name == "event_date":
            if isinstance(value, datetime):
                return value.date()
            if isinstance(value, date):
                return value
            if isinstance(value, str):
                try:
                    return date.fromisoformat(value)
                except ValueError as e:
                    raise ValidationError(f"Invalid event_date '{value}'") from e
            raise ValidationError(f"Invalid event_date '{value}'")
        if name == "guests":
            if isinstance(value, bool) or not isinstance(value, (int, str)):
                raise ValidationError(f"Invalid guests '{value}'")
            try:
                guests = int(value)
            except ValueError as e:
                raise ValidationError(f"Invalid guests '{value}'") from e
            if guests < 0:
                raise ValidationError(f"Guests must not be negative, got {guests}")
            return guests
        if name in _TEXT_FIELDS:
            if not isinstance(value, str):
                raise ValidationError(f"Field '{name}' must be text, got {type(value).__name__}")
            return value
        if name == "services":
            if not isinstance(value, Mapping):
                raise ValidationError("Field 'services' must be a mapping of service ID to selection")
            return dict(value)
        return value

    def _save_bookings(self) -> None:
        self._save(CacheKeys.BOOKINGS, [mappers.booking_to_dict(b) for b in self._bookings])

    def _save(self, key: str, data: Any) -> None:
        if self.cache is None:
            return
        try:
            self.cache.write(key, json.dumps(data))
        except PersistenceError as e:
            logger.warning("Could not write %s to cache: %s", key, e)
            self.notifier.notify(f"Could not save {key} locally: {e}", Severity.WARNING)

    def _audit(self, action: str, collection: str, target_id: str, details: str) -> None:
        entry = AuditEntry(
            action=action,
            target_collection=collection,
            target_id=target_id,
            performed_by=self.user,
            details=details,
            timestamp=datetime.now(UTC),
        )
        self.mirror.submit("log_audit_action", lambda adapter: adapter.log_audit_action(entry))

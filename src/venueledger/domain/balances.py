"""Booking balance derivation.

A booking's ``expenses`` field is never written by edit actions. It is
recomputed here from the full expense ledger every time that ledger changes.
"""

import logging
from dataclasses import replace
from decimal import Decimal
from typing import Iterable, Sequence

from venueledger.domain.entities import (
    Booking,
    BookingBalance,
    Expense,
    ExpenseType,
    PaymentType,
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def signed_expense_amount(expense: Expense) -> Decimal:
    """Return the expense amount signed by its type (Reverted is negative)."""
    if expense.type == ExpenseType.PAID:
        return expense.amount
    return -expense.amount


def derive_booking_expenses(expenses: Iterable[Expense]) -> dict[str, Decimal]:
    """Build a map of booking ID to net expense total.

    General expenses (no booking) are skipped.

    Args:
        expenses: The complete expense ledger

    Returns:
        Dict mapping booking ID to the signed sum of its expense entries
    """
    totals: dict[str, Decimal] = {}
    for expense in expenses:
        if not expense.booking_id:
            continue
        totals[expense.booking_id] = totals.get(expense.booking_id, ZERO) + signed_expense_amount(expense)
    return totals


def apply_booking_expenses(
    bookings: Sequence[Booking], expenses: Iterable[Expense]
) -> list[Booking]:
    """Return bookings with ``expenses`` replaced by the derived totals.

    This is a full recomputation: bookings without matching entries get 0.
    Bookings whose total is unchanged are returned as the same object.
    """
    totals = derive_booking_expenses(expenses)
    result = []
    for booking in bookings:
        derived = totals.get(booking.booking_id, ZERO)
        if booking.expenses != derived:
            logger.debug(
                "Booking %s expenses %s -> %s", booking.booking_id, booking.expenses, derived
            )
            booking = replace(booking, expenses=derived)
        result.append(booking)
    return result


def net_received(booking: Booking) -> Decimal:
    """Sum of Received payments minus sum of Reverted payments."""
    total = ZERO
    for payment in booking.payments:
        if payment.type == PaymentType.RECEIVED:
            total += payment.amount
        else:
            total -= payment.amount
    return total


def booking_balance(booking: Booking) -> BookingBalance:
    """Compute the money position of a booking.

    Args:
        booking: Booking with derived ``expenses``

    Returns:
        BookingBalance with total due (rate less discount), amount received,
        outstanding amount, expenses and net profit (received less expenses)
    """
    total_due = booking.rate - booking.discount
    received = net_received(booking)
    return BookingBalance(
        booking_id=booking.booking_id,
        total_due=total_due,
        received=received,
        outstanding=total_due - received,
        expenses=booking.expenses,
        net_profit=received - booking.expenses,
    )

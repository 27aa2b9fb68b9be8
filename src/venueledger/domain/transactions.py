"""Transaction ledger projection.

Merges every payment of every booking and every expense entry into one
chronologically ordered list of reporting rows. Nothing here is cached; the
projection is rebuilt from the current ledger on each call.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from venueledger.domain.entities import (
    Booking,
    Expense,
    ExpenseType,
    LedgerTotals,
    Payment,
    PaymentType,
    Transaction,
    TransactionType,
)


def payment_to_transaction(booking: Booking, payment: Payment) -> Transaction:
    """Project a payment entry into a transaction row.

    A Received payment is income. A Reverted payment is money going back to
    the client, so it is reported as an expense.
    """
    if payment.type == PaymentType.RECEIVED:
        description = f"Payment from {booking.client_name}"
        txn_type = TransactionType.INCOME
    else:
        description = f"Payment Reverted to {booking.client_name}"
        if payment.notes:
            description += f" (Reason: {payment.notes})"
        txn_type = TransactionType.EXPENSE

    return Transaction(
        date=payment.date,
        description=description,
        type=txn_type,
        amount=payment.amount,
        booking_id=booking.booking_id,
        payment_method=payment.method,
    )


def expense_to_transaction(expense: Expense) -> Transaction:
    """Project an expense entry into a transaction row.

    A Paid expense is an expense. A Reverted expense is money coming back,
    so it is reported as income.
    """
    description = f"{expense.category}: {expense.vendor}"
    if expense.type == ExpenseType.REVERTED and expense.notes:
        description += f" (Revert Reason: {expense.notes})"

    return Transaction(
        date=expense.expense_date,
        description=description,
        type=TransactionType.EXPENSE if expense.type == ExpenseType.PAID else TransactionType.INCOME,
        amount=expense.amount,
        booking_id=expense.booking_id,
        payment_method=expense.payment_method,
        vendor=expense.vendor,
        category=expense.category,
    )


def merge_transactions(
    bookings: Iterable[Booking], expenses: Iterable[Expense]
) -> list[Transaction]:
    """Merge payments and expenses into one date-ordered ledger.

    Payment rows are built first (booking order, then payment order),
    followed by expense rows in ledger order. The sort is stable, so that
    construction order breaks ties between rows on the same date.

    Args:
        bookings: All bookings with their payment sequences
        expenses: The complete expense ledger

    Returns:
        List of transactions sorted ascending by date
    """
    rows = [
        payment_to_transaction(booking, payment)
        for booking in bookings
        for payment in booking.payments
    ]
    rows.extend(expense_to_transaction(expense) for expense in expenses)
    return sorted(rows, key=lambda txn: txn.date)


def filter_transactions(
    transactions: Iterable[Transaction],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    booking_id: Optional[str] = None,
    txn_type: Optional[TransactionType] = None,
) -> list[Transaction]:
    """Filter transactions, keeping their order.

    Args:
        transactions: Transactions to filter
        start_date: Optional inclusive start date
        end_date: Optional inclusive end date
        booking_id: Optional booking ID the rows must reference
        txn_type: Optional Income/Expense direction

    Returns:
        List of matching transactions
    """
    result = []
    for txn in transactions:
        if start_date is not None and txn.date < start_date:
            continue
        if end_date is not None and txn.date > end_date:
            continue
        if booking_id is not None and txn.booking_id != booking_id:
            continue
        if txn_type is not None and txn.type != txn_type:
            continue
        result.append(txn)
    return result


def summarize_transactions(transactions: Sequence[Transaction]) -> LedgerTotals:
    """Total income and expense over a set of transactions."""
    income = Decimal("0")
    expense = Decimal("0")
    for txn in transactions:
        if txn.type == TransactionType.INCOME:
            income += txn.amount
        else:
            expense += txn.amount
    return LedgerTotals(income=income, expense=expense, count=len(transactions))

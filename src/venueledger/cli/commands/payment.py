"""Payment ledger commands."""

import click

from venueledger.cli.error_handling import handle_domain_error
from venueledger.domain.entities import Payment, PaymentMethod
from venueledger.domain.errors import DomainError
from venueledger.domain.ledger import LedgerStore, new_entry_id
from venueledger.utils.amount_parser import format_inr, parse_positive_amount
from venueledger.utils.date_parser import parse_date

METHOD_CHOICES = [m.value for m in PaymentMethod]


@click.group()
def payment_group():
    """Record and revert client payments."""
    pass


@payment_group.command("add")
@click.argument("booking_id", metavar="BOOKING_ID")
@click.option("--amount", required=True, help="Amount received (e.g., 50000 or ₹50,000)")
@click.option("--method", type=click.Choice(METHOD_CHOICES), default=PaymentMethod.CASH.value, show_default=True)
@click.option("--date", "payment_date", default="today", show_default=True, help="Payment date")
@click.option("--notes", help="Optional notes")
@click.pass_context
def add_payment(ctx, booking_id: str, amount: str, method: str, payment_date: str, notes: str | None):
    """Record a payment received from the client.

    Examples:
        venueledger payment add HG/2025/001 --amount 25000 --method UPI
    """
    store: LedgerStore = ctx.obj["store"]

    try:
        payment = Payment(
            payment_id=new_entry_id("pay"),
            date=parse_date(payment_date),
            amount=parse_positive_amount(amount),
            method=PaymentMethod(method),
            notes=notes,
            recorded_by=store.user,
        )
        booking = store.append_payment(booking_id, payment)
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)

    balance = store.booking_balance(booking.booking_id)
    click.echo(f"Recorded payment {payment.payment_id} of {format_inr(payment.amount)} for {booking_id}")
    click.echo(f"  Outstanding: {format_inr(balance.outstanding)}")


@payment_group.command("revert")
@click.argument("booking_id", metavar="BOOKING_ID")
@click.argument("payment_id", metavar="PAYMENT_ID")
@click.option("--reason", required=True, help="Reason for the reversal")
@click.option("--amount", help="Amount to revert (defaults to the full payment)")
@click.option("--date", "revert_date", default="today", show_default=True, help="Reversal date")
@click.option("--method", type=click.Choice(METHOD_CHOICES), help="Refund method (defaults to the original method)")
@click.pass_context
def revert_payment(
    ctx,
    booking_id: str,
    payment_id: str,
    reason: str,
    amount: str | None,
    revert_date: str,
    method: str | None,
):
    """Revert a received payment.

    The original payment stays in the ledger; a Reverted entry is appended.

    Examples:
        venueledger payment revert HG/2025/001 p-2 --reason "Client overpaid"
        venueledger payment revert HG/2025/001 p-2 --reason "Partial refund" --amount 10000
    """
    store: LedgerStore = ctx.obj["store"]

    try:
        reversal = store.revert_payment(
            booking_id,
            payment_id,
            notes=reason,
            amount=parse_positive_amount(amount) if amount is not None else None,
            on=parse_date(revert_date),
            method=PaymentMethod(method) if method else None,
        )
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)

    balance = store.booking_balance(booking_id)
    click.echo(f"Reverted {format_inr(reversal.amount)} of payment {payment_id} as {reversal.payment_id}")
    click.echo(f"  Received: {format_inr(balance.received)}")
    click.echo(f"  Outstanding: {format_inr(balance.outstanding)}")


def register_commands(cli):
    """Register payment commands with main CLI."""
    cli.add_command(payment_group, name="payment")

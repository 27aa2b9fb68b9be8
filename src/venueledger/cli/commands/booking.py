"""Booking management commands."""

import click

from venueledger.cli.error_handling import handle_domain_error
from venueledger.domain.balances import booking_balance
from venueledger.domain.entities import (
    Booking,
    BookingStatus,
    BookingTier,
    Payment,
    PaymentMethod,
    Shift,
)
from venueledger.domain.errors import DomainError
from venueledger.domain.ledger import LedgerStore, new_entry_id
from venueledger.domain.seasons import ALL_SEASONS, filter_bookings_by_season
from venueledger.utils.amount_parser import format_inr, parse_amount, parse_positive_amount
from venueledger.utils.date_parser import parse_date, season_for_date

STATUS_CHOICES = [s.value for s in BookingStatus]
TIER_CHOICES = [t.value for t in BookingTier]
SHIFT_CHOICES = [s.value for s in Shift]
METHOD_CHOICES = [m.value for m in PaymentMethod]


def _parse_or_exit(ctx, parser, value: str, label: str):
    try:
        return parser(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


@click.group()
def booking_group():
    """Manage bookings."""
    pass


@booking_group.command("create")
@click.argument("booking_id", metavar="BOOKING_ID")
@click.option("--client", "client_name", required=True, help="Client name")
@click.option("--date", "event_date", required=True, help="Event date (YYYY-MM-DD or 'today', 'in 30 days')")
@click.option("--rate", help="Base rate (defaults to the package price when --package is given)")
@click.option("--package", "package_id", help="Package ID to take services and rate from")
@click.option("--season", help="Season label (defaults to the season of the event date)")
@click.option("--tier", type=click.Choice(TIER_CHOICES), default=BookingTier.SILVER.value, show_default=True)
@click.option("--shift", type=click.Choice(SHIFT_CHOICES), default=Shift.DAY.value, show_default=True)
@click.option("--guests", type=int, default=0, help="Expected guest count")
@click.option("--contact", default="", help="Contact phone or email")
@click.option("--discount", default="0", help="Discount on the base rate")
@click.option("--event-type", default="", help="Event type (e.g., Wedding)")
@click.option("--advance", help="Advance payment received at booking time")
@click.option("--method", type=click.Choice(METHOD_CHOICES), default=PaymentMethod.CASH.value, show_default=True, help="Method of the advance payment")
@click.pass_context
def create_booking(
    ctx,
    booking_id: str,
    client_name: str,
    event_date: str,
    rate: str | None,
    package_id: str | None,
    season: str | None,
    tier: str,
    shift: str,
    guests: int,
    contact: str,
    discount: str,
    event_type: str,
    advance: str | None,
    method: str,
):
    """Create a new booking.

    Examples:
        venueledger booking create HG/2025/010 --client "Mehta Family" --date 2025-12-05 --rate 200000
        venueledger booking create HG/2025/011 --client "Rao" --date 2026-01-18 --package gold --advance 50000 --method UPI
    """
    store: LedgerStore = ctx.obj["store"]

    parsed_date = _parse_or_exit(ctx, parse_date, event_date, "date")
    services: dict = {}
    base_rate = None
    if package_id is not None:
        package = next((p for p in store.packages if p.package_id == package_id), None)
        if package is None:
            click.echo(f"Error: Package '{package_id}' not found", err=True)
            ctx.exit(1)
        services = dict(package.services)
        base_rate = package.price
    if rate is not None:
        base_rate = _parse_or_exit(ctx, parse_amount, rate, "rate")
    if base_rate is None:
        click.echo("Error: Either --rate or --package is required", err=True)
        ctx.exit(1)

    payments: tuple[Payment, ...] = ()
    if advance is not None:
        payments = (
            Payment(
                payment_id=new_entry_id("pay"),
                date=parse_date("today"),
                amount=_parse_or_exit(ctx, parse_positive_amount, advance, "advance"),
                method=PaymentMethod(method),
                recorded_by=store.user,
            ),
        )

    booking = Booking(
        booking_id=booking_id,
        client_name=client_name,
        event_date=parsed_date,
        season=season or season_for_date(parsed_date),
        rate=base_rate,
        tier=BookingTier(tier),
        shift=Shift(shift),
        guests=guests,
        contact=contact,
        discount=_parse_or_exit(ctx, parse_amount, discount, "discount"),
        event_type=event_type,
        services=services,
        payments=payments,
    )

    try:
        stored = store.add_booking(booking)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created booking {stored.booking_id}")
    click.echo(f"  Client: {stored.client_name}")
    click.echo(f"  Event date: {stored.event_date} ({stored.shift.value})")
    click.echo(f"  Season: {stored.season}")
    click.echo(f"  Rate: {format_inr(stored.rate)}")


@booking_group.command("update")
@click.argument("booking_id", metavar="BOOKING_ID")
@click.option("--client", "client_name", help="New client name")
@click.option("--date", "event_date", help="New event date")
@click.option("--rate", help="New base rate")
@click.option("--discount", help="New discount")
@click.option("--season", help="New season label")
@click.option("--status", type=click.Choice(STATUS_CHOICES))
@click.option("--tier", type=click.Choice(TIER_CHOICES))
@click.option("--shift", type=click.Choice(SHIFT_CHOICES))
@click.option("--guests", type=int)
@click.option("--contact")
@click.option("--event-type")
@click.pass_context
def update_booking(ctx, booking_id: str, **options):
    """Update booking details.

    Payments and expenses cannot be changed here; use the payment and
    expense commands to append entries instead.

    Examples:
        venueledger booking update HG/2025/010 --guests 350 --status Completed
    """
    store: LedgerStore = ctx.obj["store"]

    patch = {}
    for name, value in options.items():
        if value is None:
            continue
        if name == "event_date":
            value = _parse_or_exit(ctx, parse_date, value, "date")
        elif name in ("rate", "discount"):
            value = _parse_or_exit(ctx, parse_amount, value, name)
        patch[name] = value

    if not patch:
        click.echo("Error: Nothing to update. Pass at least one option.", err=True)
        ctx.exit(1)

    try:
        store.update_booking(booking_id, patch)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated booking {booking_id}: {', '.join(sorted(patch))}")


@booking_group.command("cancel")
@click.argument("booking_id", metavar="BOOKING_ID")
@click.pass_context
def cancel_booking(ctx, booking_id: str):
    """Mark a booking as Cancelled.

    Bookings are never deleted; their ledger entries stay in reports.
    """
    store: LedgerStore = ctx.obj["store"]
    try:
        store.update_booking(booking_id, {"status": BookingStatus.CANCELLED})
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Cancelled booking {booking_id}")


@booking_group.command("list")
@click.option("--season", default=ALL_SEASONS, show_default=True, help="Season label or 'All'")
@click.option("--status", type=click.Choice(STATUS_CHOICES), help="Only bookings with this status")
@click.pass_context
def list_bookings(ctx, season: str, status: str | None):
    """List bookings with their balances."""
    store: LedgerStore = ctx.obj["store"]

    bookings = filter_bookings_by_season(store.bookings, season)
    if status is not None:
        bookings = [b for b in bookings if b.status.value == status]
    if not bookings:
        click.echo("No bookings found.")
        return

    bookings = sorted(bookings, key=lambda b: b.event_date)
    click.echo(f"\nFound {len(bookings)} booking(s):")
    click.echo("-" * 118)
    click.echo(
        f"{'Booking':<14} {'Date':<12} {'Client':<24} {'Status':<10} {'Season':<8} "
        f"{'Due':>14} {'Received':>14} {'Expenses':>14}"
    )
    click.echo("-" * 118)
    for b in bookings:
        balance = booking_balance(b)
        click.echo(
            f"{b.booking_id:<14} {str(b.event_date):<12} {b.client_name[:24]:<24} "
            f"{b.status.value:<10} {b.season:<8} {format_inr(balance.total_due):>14} "
            f"{format_inr(balance.received):>14} {format_inr(balance.expenses):>14}"
        )


@booking_group.command("show")
@click.argument("booking_id", metavar="BOOKING_ID")
@click.pass_context
def show_booking(ctx, booking_id: str):
    """Show a booking with its payment ledger and balance."""
    store: LedgerStore = ctx.obj["store"]
    try:
        booking = store.view_booking(booking_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    balance = booking_balance(booking)

    click.echo(f"\nBooking {booking.booking_id}")
    click.echo("=" * 80)
    click.echo(f"  Client: {booking.client_name}")
    if booking.contact:
        click.echo(f"  Contact: {booking.contact}")
    click.echo(f"  Event: {booking.event_type or '-'} on {booking.event_date} ({booking.shift.value})")
    click.echo(f"  Status: {booking.status.value} | Tier: {booking.tier.value} | Season: {booking.season}")
    click.echo(f"  Guests: {booking.guests}")
    if booking.services:
        selected = [f"{k}={v}" for k, v in sorted(booking.services.items()) if v]
        click.echo(f"  Services: {', '.join(selected)}")

    click.echo("\nPayments:")
    if not booking.payments:
        click.echo("  (none)")
    for p in booking.payments:
        line = f"  {p.payment_id:<18} {str(p.date):<12} {p.type.value:<9} {format_inr(p.amount):>14} {p.method.value:<5}"
        if p.notes:
            line += f" {p.notes}"
        click.echo(line)

    expenses = store.expenses_for_booking(booking.booking_id)
    if expenses:
        click.echo("\nExpenses:")
        for e in expenses:
            click.echo(
                f"  {e.expense_id:<18} {str(e.expense_date):<12} {e.type.value:<9} "
                f"{format_inr(e.amount):>14} {e.category}: {e.vendor}"
            )

    click.echo("\nBalance:")
    click.echo(f"  Rate:        {format_inr(booking.rate)}")
    if booking.discount:
        click.echo(f"  Discount:    {format_inr(booking.discount)}")
    click.echo(f"  Total due:   {format_inr(balance.total_due)}")
    click.echo(f"  Received:    {format_inr(balance.received)}")
    click.echo(f"  Outstanding: {format_inr(balance.outstanding)}")
    click.echo(f"  Expenses:    {format_inr(balance.expenses)}")
    click.echo(f"  Net profit:  {format_inr(balance.net_profit)}")


def register_commands(cli):
    """Register booking commands with main CLI."""
    cli.add_command(booking_group, name="booking")

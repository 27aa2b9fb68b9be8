"""Expense ledger commands."""

from decimal import Decimal
from typing import Optional, Sequence

import click

from venueledger.cli.error_handling import handle_domain_error
from venueledger.domain.entities import Expense, ExpenseCategory, ExpenseType, PaymentMethod
from venueledger.domain.errors import DomainError
from venueledger.domain.ledger import LedgerStore, new_entry_id
from venueledger.utils.amount_parser import format_inr, parse_positive_amount
from venueledger.utils.date_parser import parse_date

METHOD_CHOICES = [m.value for m in PaymentMethod]


def resolve_category(categories: Sequence[ExpenseCategory], value: str) -> Optional[ExpenseCategory]:
    """Find a category by ID or by name, ignoring case."""
    wanted = value.strip().lower()
    for category in categories:
        if category.category_id.lower() == wanted or category.name.lower() == wanted:
            return category
    return None


@click.group()
def expense_group():
    """Record and revert venue expenses."""
    pass


@expense_group.command("add")
@click.option("--amount", help="Amount paid (computed from --manpower and --rate-per-person when omitted)")
@click.option("--category", required=True, help="Category ID or name (e.g., labour, Decoration)")
@click.option("--vendor", required=True, help="Vendor name; unknown vendors are added automatically")
@click.option("--method", type=click.Choice(METHOD_CHOICES), default=PaymentMethod.CASH.value, show_default=True)
@click.option("--date", "expense_date", default="today", show_default=True, help="Expense date")
@click.option("--booking", "booking_id", help="Booking the expense belongs to (omit for a general expense)")
@click.option("--vendor-category", help="Category ID for a newly added vendor (defaults to the expense category)")
@click.option("--manpower", type=int, help="Number of workers (manpower categories)")
@click.option("--rate-per-person", help="Rate per worker (manpower categories)")
@click.option("--notes", help="Optional notes")
@click.pass_context
def add_expense(
    ctx,
    amount: str | None,
    category: str,
    vendor: str,
    method: str,
    expense_date: str,
    booking_id: str | None,
    vendor_category: str | None,
    manpower: int | None,
    rate_per_person: str | None,
    notes: str | None,
):
    """Record an expense.

    Examples:
        venueledger expense add --amount 30000 --category Decoration --vendor "Shree Tent House" --booking HG/2025/001
        venueledger expense add --category labour --vendor "Ramu" --manpower 8 --rate-per-person 600
    """
    store: LedgerStore = ctx.obj["store"]

    resolved = resolve_category(store.categories, category)
    if resolved is None:
        click.echo(f"Error: Category '{category}' not found", err=True)
        known = ", ".join(c.category_id for c in store.categories)
        click.echo(f"Known categories: {known}", err=True)
        ctx.exit(1)

    try:
        rate = parse_positive_amount(rate_per_person) if rate_per_person is not None else None
        if resolved.requires_manpower and (manpower is None or rate is None):
            raise ValueError(f"Category '{resolved.name}' requires --manpower and --rate-per-person")
        if manpower is not None and manpower <= 0:
            raise ValueError(f"Manpower count must be positive, got {manpower}")

        if amount is not None:
            total = parse_positive_amount(amount)
        elif manpower is not None and rate is not None:
            total = Decimal(manpower) * rate
        else:
            raise ValueError("--amount is required")

        expense = Expense(
            expense_id=new_entry_id("exp"),
            expense_date=parse_date(expense_date),
            category=resolved.name,
            vendor=vendor,
            amount=total,
            payment_method=PaymentMethod(method),
            booking_id=booking_id,
            notes=notes,
            manpower_count=manpower,
            rate_per_person=rate,
            recorded_by=store.user,
        )
        store.append_expense(expense, fallback_category_id=vendor_category or resolved.category_id)
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)

    target = booking_id or "general"
    click.echo(f"Recorded expense {expense.expense_id} of {format_inr(expense.amount)} ({target})")
    click.echo(f"  {expense.category}: {expense.vendor}")


@expense_group.command("revert")
@click.argument("expense_id", metavar="EXPENSE_ID")
@click.option("--reason", required=True, help="Reason for the reversal")
@click.option("--amount", help="Amount to revert (defaults to the full expense)")
@click.option("--date", "revert_date", default="today", show_default=True, help="Reversal date")
@click.pass_context
def revert_expense(ctx, expense_id: str, reason: str, amount: str | None, revert_date: str):
    """Revert a paid expense.

    The original expense stays in the ledger; a Reverted entry is appended.

    Examples:
        venueledger expense revert e-1 --reason "Vendor refunded deposit"
    """
    store: LedgerStore = ctx.obj["store"]

    try:
        reversal = store.revert_expense(
            expense_id,
            notes=reason,
            amount=parse_positive_amount(amount) if amount is not None else None,
            on=parse_date(revert_date),
        )
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)

    click.echo(f"Reverted {format_inr(reversal.amount)} of expense {expense_id} as {reversal.expense_id}")


@expense_group.command("list")
@click.option("--booking", "booking_id", help="Only expenses of this booking")
@click.option("--general", is_flag=True, help="Only expenses not tied to a booking")
@click.option("--category", help="Only expenses in this category (ID or name)")
@click.pass_context
def list_expenses(ctx, booking_id: str | None, general: bool, category: str | None):
    """List expense ledger entries."""
    store: LedgerStore = ctx.obj["store"]

    if booking_id and general:
        click.echo("Error: --booking cannot be combined with --general.", err=True)
        ctx.exit(1)

    expenses = list(store.expenses)
    if booking_id:
        if store.get_booking(booking_id) is None:
            click.echo(f"Error: Booking '{booking_id}' not found", err=True)
            ctx.exit(1)
        expenses = store.expenses_for_booking(booking_id)
    elif general:
        expenses = [e for e in expenses if not e.booking_id]
    if category:
        resolved = resolve_category(store.categories, category)
        name = resolved.name if resolved else category
        expenses = [e for e in expenses if e.category.lower() == name.lower()]

    if not expenses:
        click.echo("No expenses found.")
        return

    click.echo(f"\nFound {len(expenses)} expense(s):")
    click.echo("-" * 110)
    click.echo(
        f"{'ID':<18} {'Date':<12} {'Type':<9} {'Booking':<14} {'Category':<24} {'Vendor':<20} {'Amount':>10}"
    )
    click.echo("-" * 110)
    total = Decimal("0")
    for e in expenses:
        click.echo(
            f"{e.expense_id:<18} {str(e.expense_date):<12} {e.type.value:<9} {(e.booking_id or '-'):<14} "
            f"{e.category[:24]:<24} {e.vendor[:20]:<20} {format_inr(e.amount):>10}"
        )
        total += e.amount if e.type == ExpenseType.PAID else -e.amount
    click.echo("-" * 110)
    click.echo(f"Net spent: {format_inr(total)}")


def register_commands(cli):
    """Register expense commands with main CLI."""
    cli.add_command(expense_group, name="expense")

"""Transaction ledger report."""

import click

from venueledger.cli.date_filters import resolve_cli_date_range
from venueledger.domain.entities import TransactionType
from venueledger.domain.ledger import LedgerStore
from venueledger.domain.transactions import filter_transactions, summarize_transactions
from venueledger.utils.amount_parser import format_inr

TYPE_CHOICES = [t.value for t in TransactionType]


@click.command("ledger")
@click.option("--start-date", help="Start date (YYYY-MM-DD)")
@click.option("--end-date", help="End date (YYYY-MM-DD)")
@click.option("--season", help="Season label (e.g., 2025-26) or 'All'")
@click.option("--booking", "booking_id", help="Only rows of this booking")
@click.option("--type", "txn_type", type=click.Choice(TYPE_CHOICES), help="Only Income or Expense rows")
@click.option("--verbose", "-v", is_flag=True, help="Show vendor, category and payment method columns")
@click.pass_context
def view_ledger(
    ctx,
    start_date: str | None,
    end_date: str | None,
    season: str | None,
    booking_id: str | None,
    txn_type: str | None,
    verbose: bool,
):
    """View all payments and expenses as one dated ledger.

    Received payments and reverted expenses are income; paid expenses and
    reverted payments are expenses.

    Examples:
        venueledger ledger --season 2025-26
        venueledger ledger --booking HG/2025/002 --type Expense
    """
    store: LedgerStore = ctx.obj["store"]
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, season=season
    )

    transactions = filter_transactions(
        store.transactions(),
        start_date=start,
        end_date=end,
        booking_id=booking_id,
        txn_type=TransactionType(txn_type) if txn_type else None,
    )

    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 100)
    click.echo(f"{'Date':<12} {'Type':<8} {'Amount':>14}  {'Booking':<14} Description")
    click.echo("-" * 100)
    for txn in transactions:
        click.echo(
            f"{str(txn.date):<12} {txn.type.value:<8} {format_inr(txn.amount):>14}  "
            f"{(txn.booking_id or '-'):<14} {txn.description}"
        )
        if verbose:
            details = []
            if txn.payment_method is not None:
                details.append(f"Method: {txn.payment_method.value}")
            if txn.category:
                details.append(f"Category: {txn.category}")
            if txn.vendor:
                details.append(f"Vendor: {txn.vendor}")
            if details:
                click.echo(f"{'':<12} {' | '.join(details)}")

    totals = summarize_transactions(transactions)
    click.echo("-" * 100)
    click.echo(f"Total income:  {format_inr(totals.income)}")
    click.echo(f"Total expense: {format_inr(totals.expense)}")
    click.echo(f"Net:           {format_inr(totals.net)}")


def register_commands(cli):
    """Register ledger command with main CLI."""
    cli.add_command(view_ledger)

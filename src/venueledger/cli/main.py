"""Main CLI entry point."""

import asyncio

import click

from venueledger.database.factories import create_sqlite_adapter, create_sqlite_cache
from venueledger.domain.ledger import LedgerStore
from venueledger.domain.notifications import ConsoleNotifier
from venueledger.logging_config import setup_logging

# Import and register all commands at module level
from venueledger.cli.commands import (
    booking,
    payment,
    expense,
    ledger,
    catalog,
)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def _close_store(store: LedgerStore) -> None:
    """Flush mirrored writes and release storage handles."""
    # Failures were already reported through the notifier
    asyncio.run(store.mirror.close())
    if store.cache is not None:
        store.cache.close()


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides VENUELEDGER_DB_PATH environment variable)",
    envvar="VENUELEDGER_DB_PATH",
)
@click.option(
    "--user",
    default="cli",
    show_default=True,
    envvar="VENUELEDGER_USER",
    help="Identity recorded on new entries and in the audit log",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="VENUELEDGER_LOG_LEVEL",
    help="Log verbosity",
)
@click.pass_context
def cli(ctx, db_path: str | None, user: str, log_level: str):
    """Venueledger - Venue booking and finance tracking.

    Record bookings, payments and expenses for an event venue. Payments and
    expenses are never edited or deleted; mistakes are corrected with
    revert entries.
    """
    ctx.ensure_object(dict)
    setup_logging(log_level)

    # Open storage only when actually running a command (not when showing help)
    if ctx.invoked_subcommand is not None:
        cache = create_sqlite_cache(database_path=db_path)
        adapter = create_sqlite_adapter(database_path=db_path)
        store = LedgerStore.load(cache, adapter, notifier=ConsoleNotifier(), user=user)
        ctx.obj["store"] = store
        ctx.call_on_close(lambda: _close_store(store))


# Register all commands
booking.register_commands(cli)
payment.register_commands(cli)
expense.register_commands(cli)
ledger.register_commands(cli)
catalog.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()

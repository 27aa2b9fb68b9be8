"""Integration tests for end-to-end workflows."""

import asyncio
from decimal import Decimal

from venueledger.cli.main import cli
from venueledger.database.factories import create_sqlite_adapter


async def _read_remote(db_path, booking_id):
    adapter = create_sqlite_adapter(database_path=db_path)
    try:
        return (
            await adapter.get_booking(booking_id),
            await adapter.list_expenses(),
            await adapter.list_audit_entries(),
        )
    finally:
        await adapter.close()


def test_full_workflow(cli_runner, temp_db):
    """Test booking → payment → expense → revert → ledger, with the remote mirror."""
    # Step 1: Create booking
    result = cli_runner.invoke(
        cli,
        [
            "--db-path",
            temp_db,
            "--user",
            "manager",
            "booking",
            "create",
            "B1",
            "--client",
            "Kapoor Family",
            "--date",
            "2025-12-10",
            "--rate",
            "1000",
        ],
    )
    assert result.exit_code == 0

    # Step 2: Receive a payment
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db, "payment", "add", "B1", "--amount", "600", "--date", "2025-09-01"]
    )
    assert result.exit_code == 0

    # Step 3: Pay an expense for the booking
    result = cli_runner.invoke(
        cli,
        [
            "--db-path",
            temp_db,
            "expense",
            "add",
            "--amount",
            "200",
            "--category",
            "decoration",
            "--vendor",
            "Shree Tent House",
            "--booking",
            "B1",
            "--date",
            "2025-09-05",
        ],
    )
    assert result.exit_code == 0
    expense_id = result.output.split("Recorded expense ")[1].split()[0]

    # Step 4: Booking carries the derived expense total
    result = cli_runner.invoke(cli, ["--db-path", temp_db, "booking", "show", "B1"])
    assert "Expenses:    ₹200" in result.output
    assert "Net profit:  ₹400" in result.output

    # Step 5: Revert the expense
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db, "expense", "revert", expense_id, "--reason", "Vendor refund", "--date", "2025-09-20"],
    )
    assert result.exit_code == 0

    # Step 6: Ledger for the booking shows three rows
    result = cli_runner.invoke(cli, ["--db-path", temp_db, "ledger", "--booking", "B1"])
    assert "Found 3 transaction(s)" in result.output
    assert "Total income:  ₹800" in result.output
    assert "Total expense: ₹200" in result.output

    result = cli_runner.invoke(cli, ["--db-path", temp_db, "booking", "show", "B1"])
    assert "Expenses:    ₹0" in result.output

    # Step 7: Everything reached the remote store
    booking, expenses, audit = asyncio.run(_read_remote(temp_db, "B1"))
    assert booking is not None
    assert [p.amount for p in booking.payments] == [Decimal("600")]
    assert [e.type.value for e in expenses] == ["Paid", "Reverted"]
    assert audit[0].action == "create"
    assert audit[0].performed_by == "manager"


def test_db_path_from_environment(cli_runner, temp_db, monkeypatch):
    """Test that VENUELEDGER_DB_PATH selects the database."""
    monkeypatch.setenv("VENUELEDGER_DB_PATH", temp_db)

    result = cli_runner.invoke(
        cli, ["booking", "create", "B7", "--client", "Env", "--date", "2025-12-10", "--rate", "1000"]
    )
    assert result.exit_code == 0

    result = cli_runner.invoke(cli, ["--db-path", temp_db, "booking", "show", "B7"])
    assert result.exit_code == 0
    assert "Client: Env" in result.output

"""Tests for payment, expense, ledger and catalog commands."""

from venueledger.cli.main import cli


def _invoke(cli_runner, temp_db, *args):
    return cli_runner.invoke(cli, ["--db-path", temp_db, *args])


class TestPaymentCommands:
    """Tests for payment add and payment revert."""

    def test_payment_add(self, cli_runner, temp_db):
        result = _invoke(
            cli_runner, temp_db, "payment", "add", "HG/2025/001", "--amount", "25,000", "--method", "UPI"
        )

        assert result.exit_code == 0
        assert "Payment of ₹25,000 added successfully!" in result.output
        assert "Outstanding: ₹65,000" in result.output

    def test_payment_add_persists(self, cli_runner, temp_db):
        _invoke(cli_runner, temp_db, "payment", "add", "HG/2025/001", "--amount", "25000", "--notes", "Second instalment")

        result = _invoke(cli_runner, temp_db, "booking", "show", "HG/2025/001")

        assert "Second instalment" in result.output
        assert "Received:    ₹1,75,000" in result.output

    def test_payment_add_zero(self, cli_runner, temp_db):
        result = _invoke(cli_runner, temp_db, "payment", "add", "HG/2025/001", "--amount", "0")

        assert result.exit_code == 1
        assert "must be positive" in result.output

    def test_payment_add_missing_booking(self, cli_runner, temp_db):
        result = _invoke(cli_runner, temp_db, "payment", "add", "NOPE", "--amount", "100")

        assert result.exit_code == 1
        assert "Booking 'NOPE' not found" in result.output

    def test_payment_revert_partial(self, cli_runner, temp_db):
        """Test a partial reversal keeps the original payment."""
        result = _invoke(
            cli_runner,
            temp_db,
            "payment",
            "revert",
            "HG/2025/001",
            "p-2",
            "--reason",
            "Overpaid",
            "--amount",
            "10000",
        )

        assert result.exit_code == 0
        assert "Reverted ₹10,000 of payment p-2" in result.output
        assert "Received: ₹1,40,000" in result.output

        result = _invoke(cli_runner, temp_db, "booking", "show", "HG/2025/001")
        assert "p-2" in result.output
        assert "Overpaid" in result.output

    def test_payment_revert_reversal(self, cli_runner, temp_db):
        result = _invoke(cli_runner, temp_db, "payment", "revert", "HG/2025/002", "p-4", "--reason", "Oops")

        assert result.exit_code == 1
        assert "cannot be reverted" in result.output

    def test_payment_revert_requires_reason(self, cli_runner, temp_db):
        result = _invoke(cli_runner, temp_db, "payment", "revert", "HG/2025/001", "p-2")

        assert result.exit_code == 2


class TestExpenseCommands:
    """Tests for expense add, revert and list."""

    def test_expense_add_creates_vendor(self, cli_runner, temp_db):
        """Test that an unknown vendor is added to the expense category."""
        result = _invoke(
            cli_runner,
            temp_db,
            "expense",
            "add",
            "--amount",
            "5000",
            "--category",
            "decoration",
            "--vendor",
            "New Florist",
            "--booking",
            "HG/2025/001",
        )

        assert result.exit_code == 0
        assert 'New vendor "New Florist" added to category.' in result.output
        assert "Expense added successfully!" in result.output

        result = _invoke(cli_runner, temp_db, "vendors", "--category", "decoration")
        assert "New Florist" in result.output
        assert "Shree Tent House" in result.output

        result = _invoke(cli_runner, temp_db, "booking", "show", "HG/2025/001")
        assert "Expenses:    ₹5,000" in result.output

    def test_expense_add_known_vendor_any_case(self, cli_runner, temp_db):
        result = _invoke(
            cli_runner,
            temp_db,
            "expense",
            "add",
            "--amount",
            "100",
            "--category",
            "Decoration",
            "--vendor",
            "SHREE TENT HOUSE",
        )

        assert result.exit_code == 0
        assert "New vendor" not in result.output

    def test_expense_add_unknown_category(self, cli_runner, temp_db):
        result = _invoke(
            cli_runner, temp_db, "expense", "add", "--amount", "100", "--category", "travel", "--vendor", "Ola"
        )

        assert result.exit_code == 1
        assert "Category 'travel' not found" in result.output

    def test_expense_manpower_required(self, cli_runner, temp_db):
        result = _invoke(
            cli_runner, temp_db, "expense", "add", "--amount", "100", "--category", "labour", "--vendor", "Ramu"
        )

        assert result.exit_code == 1
        assert "requires --manpower and --rate-per-person" in result.output

    def test_expense_manpower_amount(self, cli_runner, temp_db):
        """Test that a labour expense defaults to count times rate."""
        result = _invoke(
            cli_runner,
            temp_db,
            "expense",
            "add",
            "--category",
            "labour",
            "--vendor",
            "Local Labour Contractor",
            "--manpower",
            "8",
            "--rate-per-person",
            "600",
        )

        assert result.exit_code == 0
        assert "of ₹4,800 (general)" in result.output

    def test_expense_unknown_booking(self, cli_runner, temp_db):
        result = _invoke(
            cli_runner,
            temp_db,
            "expense",
            "add",
            "--amount",
            "100",
            "--category",
            "other",
            "--vendor",
            "Ola",
            "--booking",
            "NOPE",
        )

        assert result.exit_code == 1
        assert "Booking 'NOPE' not found" in result.output

    def test_expense_revert(self, cli_runner, temp_db):
        """Test reverting the sample decoration expense."""
        result = _invoke(cli_runner, temp_db, "expense", "revert", "e-1", "--reason", "Refund")

        assert result.exit_code == 0
        assert "Reverted ₹30,000 of expense e-1" in result.output

        result = _invoke(cli_runner, temp_db, "booking", "show", "HG/2025/002")
        assert "Expenses:    ₹0" in result.output

    def test_expense_revert_missing(self, cli_runner, temp_db):
        result = _invoke(cli_runner, temp_db, "expense", "revert", "e-404", "--reason", "x")

        assert result.exit_code == 1
        assert "Expense 'e-404' not found" in result.output

    def test_expense_list(self, cli_runner, temp_db):
        result = _invoke(cli_runner, temp_db, "expense", "list")

        assert result.exit_code == 0
        assert "Found 2 expense(s)" in result.output
        assert "Net spent: ₹42,000" in result.output

    def test_expense_list_general(self, cli_runner, temp_db):
        result = _invoke(cli_runner, temp_db, "expense", "list", "--general")

        assert "Found 1 expense(s)" in result.output
        assert "City Power Services" in result.output


class TestLedgerCommand:
    """Tests for the ledger report."""

    def test_ledger_season_totals(self, cli_runner, temp_db):
        """Test totals over the sample ledger for one season."""
        result = _invoke(cli_runner, temp_db, "ledger", "--season", "2025-26")

        assert result.exit_code == 0
        assert "Found 6 transaction(s)" in result.output
        assert "Total income:  ₹3,00,000" in result.output
        assert "Total expense: ₹47,000" in result.output
        assert "Net:           ₹2,53,000" in result.output

    def test_ledger_descriptions(self, cli_runner, temp_db):
        result = _invoke(cli_runner, temp_db, "ledger")

        assert "Payment from Sharma Family" in result.output
        assert "Payment Reverted to Verma Enterprises (Reason: Generator not provided)" in result.output
        assert "Decoration: Shree Tent House" in result.output

    def test_ledger_booking_and_type(self, cli_runner, temp_db):
        result = _invoke(cli_runner, temp_db, "ledger", "--booking", "HG/2025/002", "--type", "Expense")

        assert result.exit_code == 0
        assert "Found 2 transaction(s)" in result.output
        assert "Total expense: ₹35,000" in result.output

    def test_ledger_reverted_expense_is_income(self, cli_runner, temp_db):
        _invoke(cli_runner, temp_db, "expense", "revert", "e-2", "--reason", "Billing error", "--date", "2025-07-01")

        result = _invoke(cli_runner, temp_db, "ledger", "--type", "Income", "--start-date", "2025-07-01", "--end-date", "2025-07-01")

        assert "Found 1 transaction(s)" in result.output
        assert "(Revert Reason: Billing error)" in result.output

    def test_ledger_empty_range(self, cli_runner, temp_db):
        result = _invoke(cli_runner, temp_db, "ledger", "--season", "2030-31")

        assert result.exit_code == 0
        assert "No transactions found." in result.output

    def test_ledger_season_with_dates(self, cli_runner, temp_db):
        result = _invoke(cli_runner, temp_db, "ledger", "--season", "2025-26", "--start-date", "2025-05-01")

        assert result.exit_code == 1
        assert "cannot be combined" in result.output


class TestCatalogCommands:
    """Tests for seasons, vendors, categories and packages."""

    def test_seasons(self, cli_runner, temp_db):
        result = _invoke(cli_runner, temp_db, "seasons")

        assert result.exit_code == 0
        assert result.output.split() == ["All", "2024-25", "2025-26", "2026-27"]

    def test_seasons_include_new_booking_season(self, cli_runner, temp_db):
        _invoke(
            cli_runner, temp_db, "booking", "create", "B-9", "--client", "Rao", "--date", "2028-05-01", "--rate", "1000"
        )

        result = _invoke(cli_runner, temp_db, "seasons")

        assert "2028-29" in result.output.split()

    def test_categories(self, cli_runner, temp_db):
        result = _invoke(cli_runner, temp_db, "categories")

        assert "Labour (manpower)" in result.output
        assert "Electricity & Generator" in result.output

    def test_packages(self, cli_runner, temp_db):
        result = _invoke(cli_runner, temp_db, "packages", "--verbose")

        assert "₹4,00,000" in result.output
        assert "stage: Royal" in result.output

    def test_vendors(self, cli_runner, temp_db):
        result = _invoke(cli_runner, temp_db, "vendors")

        assert "Annapurna Caterers" in result.output
        assert "Halwai & Catering" in result.output

    def test_add_category(self, cli_runner, temp_db):
        result = _invoke(cli_runner, temp_db, "add-category", "Security Staff", "--manpower")

        assert result.exit_code == 0
        assert "Added category security-staff: Security Staff" in result.output

        result = _invoke(cli_runner, temp_db, "categories")
        assert "Security Staff (manpower)" in result.output

    def test_add_category_duplicate(self, cli_runner, temp_db):
        result = _invoke(cli_runner, temp_db, "add-category", "decoration")

        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_set_package_adds(self, cli_runner, temp_db):
        result = _invoke(
            cli_runner,
            temp_db,
            "set-package",
            "platinum",
            "--name",
            "Platinum",
            "--price",
            "5,00,000",
            "--service",
            "lawn=true",
            "--service",
            "rooms=12",
            "--service",
            "stage=Royal",
        )

        assert result.exit_code == 0
        assert "Added package platinum: Platinum (₹5,00,000)" in result.output

        result = _invoke(cli_runner, temp_db, "packages", "--verbose")
        assert "₹5,00,000" in result.output
        assert "rooms: 12" in result.output
        assert "lawn: True" in result.output

    def test_set_package_replaces(self, cli_runner, temp_db):
        result = _invoke(cli_runner, temp_db, "set-package", "silver", "--name", "Silver", "--price", "175000")

        assert "Updated package silver" in result.output

        result = _invoke(cli_runner, temp_db, "packages")
        assert "₹1,75,000" in result.output
        assert "₹1,50,000" not in result.output

    def test_set_package_bad_service(self, cli_runner, temp_db):
        result = _invoke(
            cli_runner, temp_db, "set-package", "x", "--name", "X", "--price", "1", "--service", "lawn"
        )

        assert result.exit_code == 1
        assert "Expected SERVICE_ID=VALUE" in result.output

    def test_services(self, cli_runner, temp_db):
        result = _invoke(cli_runner, temp_db, "services")

        assert result.exit_code == 0
        assert "Decoration:" in result.output
        assert "[Basic, Premium, Royal]" in result.output

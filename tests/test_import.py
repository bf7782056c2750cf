"""Tests for the command line interface."""

import os
import pytest

from finimport.cli.main import cli
from finimport.database.factories import create_sqlite_database


@pytest.fixture
def invoke(cli_runner, db_path, maps_path):
    """Invoke the CLI against the temporary store and sample maps."""

    def _invoke(*args):
        return cli_runner.invoke(cli, ["--db-path", db_path, "--maps", str(maps_path), *args])

    return _invoke


@pytest.fixture
def visa_csv(fixtures_dir):
    return str(fixtures_dir / "visa_statement.csv")


@pytest.fixture
def checking_csv(fixtures_dir):
    return str(fixtures_dir / "checking_statement.csv")


def _transactions(db_path):
    db = create_sqlite_database(db_path)
    db.connect()
    try:
        categories = {c.id: c.name for c in db.list_categories()}
        return [(t.description, categories[t.category_id]) for t in db.list_transactions()]
    finally:
        db.disconnect()


def test_import_successful(invoke, visa_csv, db_path):
    """Test importing one statement."""
    result = invoke("import", visa_csv, "visa")

    assert result.exit_code == 0
    assert "Starting batch import for 1 file(s)" in result.output
    assert "Inserted 4 transactions into 'Visa'" in result.output
    assert "Skipped 4 rows" in result.output
    assert "Batch complete. Total transactions imported: 4" in result.output
    assert len(_transactions(db_path)) == 4


def test_import_multiple(invoke, visa_csv, checking_csv):
    """Test importing two statements in one run."""
    result = invoke("import", visa_csv, "visa", checking_csv, "checking")

    assert result.exit_code == 0
    assert "Total transactions imported: 7" in result.output


def test_import_odd_arguments(invoke, visa_csv, db_path):
    """Test that unpaired arguments print usage and available keys."""
    result = invoke("import", visa_csv)

    assert result.exit_code == 2
    assert "Usage: finimport import" in result.output
    assert "Available keys: broken_rules, checking, no_account, visa" in result.output
    assert not os.path.exists(db_path)


def test_import_no_arguments(invoke):
    """Test that no files is a usage error."""
    result = invoke("import")

    assert result.exit_code == 2
    assert "No files given" in result.output


def test_import_unknown_key_continues(invoke, visa_csv, checking_csv):
    """Test that a failing file is reported and the run continues."""
    result = invoke("import", visa_csv, "amex", checking_csv, "checking")

    assert result.exit_code == 0
    assert "Failed to import" in result.output
    assert "Unknown institution key 'amex'" in result.output
    assert "Total transactions imported: 3" in result.output
    assert "Failed files: 1" in result.output


def test_import_missing_maps(cli_runner, db_path, visa_csv, tmp_path):
    """Test that a missing maps file is fatal."""
    result = cli_runner.invoke(
        cli, ["--db-path", db_path, "--maps", str(tmp_path / "nope.json"), "import", visa_csv, "visa"]
    )

    assert result.exit_code == 1
    assert "Error: Institution maps file not found" in result.output


def test_import_store_error(cli_runner, maps_path, visa_csv, tmp_path):
    """Test that an unusable store path is fatal."""
    result = cli_runner.invoke(
        cli, ["--db-path", str(tmp_path), "--maps", str(maps_path), "import", visa_csv, "visa"]
    )

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_import_no_reset(invoke, visa_csv, db_path):
    """Test that --no-reset keeps earlier imports."""
    invoke("import", visa_csv, "visa")
    result = invoke("import", "--no-reset", visa_csv, "visa")

    assert result.exit_code == 0
    assert "will be deleted" not in result.output
    assert len(_transactions(db_path)) == 8


def test_list_institutions(invoke):
    """Test listing configured institution keys."""
    result = invoke("institutions")

    assert result.exit_code == 0
    assert result.output.split() == ["broken_rules", "checking", "no_account", "visa"]


def test_party_default_used_by_later_import(invoke, checking_csv, db_path):
    """Test that a party default set from the CLI classifies a --no-reset import."""
    result = invoke("party", "set-category", "CITY UTILITIES", "Utilities")
    assert result.exit_code == 0
    assert "Party 'CITY UTILITIES' now defaults to 'Utilities'" in result.output

    invoke("import", "--no-reset", checking_csv, "checking")

    assert ("CITY UTILITIES", "Utilities") in _transactions(db_path)

    listing = invoke("party", "list")
    assert "CITY UTILITIES" in listing.output


def test_party_unknown_category(invoke):
    """Test that an unknown category is an error."""
    result = invoke("party", "set-category", "CITY UTILITIES", "Gadgets")

    assert result.exit_code == 1
    assert "Category 'Gadgets' not found" in result.output


class TestReportCommands:
    """Tests for report commands after an import."""

    @pytest.fixture(autouse=True)
    def imported(self, invoke, visa_csv, checking_csv):
        result = invoke("import", visa_csv, "visa", checking_csv, "checking")
        assert result.exit_code == 0

    def test_monthly(self, invoke):
        result = invoke("report", "monthly")

        assert result.exit_code == 0
        assert "2024-01" in result.output
        assert "2024-02" in result.output

    def test_breakdown(self, invoke):
        result = invoke("report", "breakdown", "2024-01", "expense")

        assert result.exit_code == 0
        assert "Shopping" in result.output
        assert "Transfers" not in result.output

    def test_breakdown_invalid_month(self, invoke):
        result = invoke("report", "breakdown", "2024-13", "EXPENSE")

        assert result.exit_code == 1
        assert "Invalid month" in result.output

    def test_month_transactions(self, invoke):
        result = invoke("report", "month-transactions", "2024-01", "INCOME")

        assert result.exit_code == 0
        assert "PAYMENT THANK YOU" in result.output
        assert "ACME PAYROLL DEP" in result.output

    def test_transactions(self, invoke):
        result = invoke("report", "transactions", "--detailed")

        assert result.exit_code == 0
        assert "Found 7 transaction(s)" in result.output
        assert "TRANSFER" in result.output

    def test_categories(self, invoke):
        result = invoke("report", "categories")

        assert result.exit_code == 0
        assert "Uncategorized" in result.output


def test_report_without_database(invoke, db_path):
    """Test that reports refuse to run before anything was imported."""
    result = invoke("report", "monthly")

    assert result.exit_code == 1
    assert "No database at" in result.output
    assert not os.path.exists(db_path)


def test_party_list_without_database(invoke, db_path):
    """Test that listing parties does not create an empty store."""
    result = invoke("party", "list")

    assert result.exit_code == 1
    assert not os.path.exists(db_path)

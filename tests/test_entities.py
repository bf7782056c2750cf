"""Tests for domain entities."""

import pytest
from dataclasses import FrozenInstanceError
from datetime import date
from decimal import Decimal

from finimport.domain.entities import (
    Account,
    BatchImportSummary,
    CategoryType,
    FileImportResult,
    ImportContext,
    RowOutcome,
    TransactionCandidate,
)


class TestAccount:
    """Tests for Account entity."""

    def test_create_account(self):
        """Test creating an Account entity."""
        account = Account(id=1, name="Visa", type="credit", initial_balance=Decimal("0"), is_active=True)
        assert account.name == "Visa"
        assert account.type == "credit"

    def test_account_immutability(self):
        """Test that Account entities are immutable."""
        account = Account(id=1, name="Visa", type="credit", initial_balance=Decimal("0"), is_active=True)
        with pytest.raises(FrozenInstanceError):
            account.name = "New Name"


class TestTransactionCandidate:
    """Tests for TransactionCandidate entity."""

    def test_category_defaults_to_none(self):
        """Test that a candidate starts without a category."""
        candidate = TransactionCandidate(
            date=date(2024, 1, 15),
            amount=Decimal("-45.20"),
            description="STARBUCKS",
            party_name="STARBUCKS",
            account_id=1,
        )
        assert candidate.category_id is None


def test_category_type_values():
    """Test category type string values as stored."""
    assert CategoryType("INCOME") is CategoryType.INCOME
    assert CategoryType.TRANSFER.value == "TRANSFER"


def test_import_context_lookup():
    """Test category name lookups in the import context."""
    context = ImportContext(category_ids={"Dining": 3, "Uncategorized": 9}, uncategorized_id=9)
    assert context.category_id("Dining") == 3
    assert context.category_id("Gadgets") is None


class TestImportResults:
    """Tests for per-file and batch results."""

    def test_file_result_success(self):
        """Test skipped totals and success flag."""
        result = FileImportResult(
            file_path="visa.csv",
            institution_key="visa",
            imported=4,
            skipped={RowOutcome.SKIPPED_MISSING_FIELD: 2, RowOutcome.SKIPPED_UNPARSEABLE_DATE: 1},
        )
        assert result.succeeded
        assert result.skipped_total == 3

    def test_batch_summary(self):
        """Test totals and failures across files."""
        summary = BatchImportSummary(files=[
            FileImportResult("a.csv", "visa", imported=4),
            FileImportResult("b.csv", "checking", imported=3),
            FileImportResult("c.csv", "amex", error="Unknown institution key 'amex'"),
        ])
        assert summary.total_imported == 7
        assert [r.file_path for r in summary.failed] == ["c.csv"]

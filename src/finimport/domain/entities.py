"""Domain model entities for finimport.

These are pure data classes representing business concepts, independent of
database schema. The import pipeline passes them between the normalizer,
the classification engine and the persistence gateway.
"""

import re
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional


class CategoryType(str, Enum):
    """Category classification type."""

    INCOME = "INCOME"
    EXPENSE = "EXPENSE"
    TRANSFER = "TRANSFER"


class RowOutcome(str, Enum):
    """Result of normalizing a single CSV row."""

    ACCEPTED = "accepted"
    SKIPPED_MISSING_FIELD = "skipped_missing_field"
    SKIPPED_UNPARSEABLE_DATE = "skipped_unparseable_date"
    SKIPPED_UNPARSEABLE_AMOUNT = "skipped_unparseable_amount"


@dataclass(frozen=True)
class Account:
    """Account domain entity."""

    id: int
    name: str
    type: str
    initial_balance: Decimal
    is_active: bool


@dataclass(frozen=True)
class Category:
    """Category domain entity."""

    id: int
    name: str
    parent_id: Optional[int]
    type: CategoryType


@dataclass(frozen=True)
class Party:
    """Counterparty domain entity."""

    id: int
    name: str
    is_person: bool
    default_category_id: Optional[int]


@dataclass(frozen=True)
class Transaction:
    """Persisted transaction domain entity."""

    id: int
    date: date
    description: Optional[str]
    amount: Decimal
    account_id: int
    category_id: int
    party_id: Optional[int]
    is_cleared: bool
    related_transaction_id: Optional[int]


@dataclass(frozen=True)
class TransactionCandidate:
    """Normalized, not yet persisted transaction.

    ``category_id`` is None when neither the bank category map nor a
    classification rule produced a category; the persistence gateway then
    falls back to the party default and finally to Uncategorized.
    """

    date: date
    amount: Decimal
    description: str
    party_name: str
    account_id: int
    category_id: Optional[int] = None


@dataclass(frozen=True)
class AccountDescriptor:
    """Target account described by an institution configuration."""

    name: str
    type: str = "checking"
    initial_balance: Decimal = Decimal("0")


@dataclass(frozen=True)
class CategoryMapping:
    """Bank category label mapped to an internal category name."""

    bank_cat: str
    internal_cat: str


@dataclass(frozen=True)
class ClassificationRule:
    """Compiled classification rule with optional category/party overrides."""

    pattern: re.Pattern
    category: Optional[str] = None
    party: Optional[str] = None


@dataclass(frozen=True)
class InstitutionConfig:
    """Column bindings, parsing options and rules for one institution."""

    key: str
    date_column: str
    amount_column: str
    payee_column: str
    account: AccountDescriptor
    date_format: Optional[str] = None
    bank_category_column: Optional[str] = None
    category_mappings: tuple[CategoryMapping, ...] = ()
    rules: tuple[ClassificationRule, ...] = ()


@dataclass(frozen=True)
class ImportContext:
    """Category lookups loaded once after the store is initialized."""

    category_ids: dict[str, int]
    uncategorized_id: int

    def category_id(self, name: str) -> Optional[int]:
        """Return the id for a category name, or None if unknown."""
        return self.category_ids.get(name)


@dataclass
class FileImportResult:
    """Outcome of importing one (file, institution key) pair."""

    file_path: str
    institution_key: str
    imported: int = 0
    account_name: Optional[str] = None
    skipped: dict[RowOutcome, int] = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def skipped_total(self) -> int:
        return sum(self.skipped.values())


@dataclass
class BatchImportSummary:
    """Aggregate outcome of an import run."""

    files: list[FileImportResult] = field(default_factory=list)

    @property
    def total_imported(self) -> int:
        return sum(result.imported for result in self.files)

    @property
    def failed(self) -> list[FileImportResult]:
        return [result for result in self.files if not result.succeeded]

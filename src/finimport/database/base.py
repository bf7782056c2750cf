"""Abstract database interface."""

from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from typing import Any, Iterable, Optional

# Import entities directly to avoid circular import through domain/__init__.py
from finimport.domain.entities import (
    Account,
    Category,
    CategoryType,
    Party,
    Transaction,
    TransactionCandidate,
)


class Database(ABC):
    """Abstract database interface for finimport."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Account operations
    @abstractmethod
    def create_account(self, name: str, account_type: str, initial_balance: Decimal = Decimal("0")) -> int:
        """Create a new account. Returns account ID."""
        pass

    @abstractmethod
    def get_account_by_name(self, name: str) -> Optional[Account]:
        """Get account by exact name."""
        pass

    @abstractmethod
    def list_accounts(self) -> list[Account]:
        """List all accounts."""
        pass

    # Category operations
    @abstractmethod
    def seed_categories(self, categories: Iterable[tuple[str, CategoryType]]) -> int:
        """Insert categories whose name does not exist yet. Returns number inserted."""
        pass

    @abstractmethod
    def get_category_by_name(self, name: str) -> Optional[Category]:
        """Get category by name."""
        pass

    @abstractmethod
    def list_categories(self) -> list[Category]:
        """List all categories ordered by name."""
        pass

    # Party operations
    @abstractmethod
    def get_party_by_name(self, name: str) -> Optional[Party]:
        """Get party by name."""
        pass

    @abstractmethod
    def list_parties(self) -> list[Party]:
        """List all parties ordered by name."""
        pass

    @abstractmethod
    def create_party(
        self, name: str, default_category_id: Optional[int], is_person: bool = False
    ) -> int:
        """Create a party. Returns party ID."""
        pass

    @abstractmethod
    def update_party_default_category(self, party_id: int, category_id: Optional[int]) -> None:
        """Change the default category of a party."""
        pass

    # Transaction operations
    @abstractmethod
    def insert_transaction_batch(
        self, candidates: Iterable[TransactionCandidate], fallback_category_id: int
    ) -> int:
        """Insert candidates as one atomic unit. Returns number inserted.

        Parties are created on first reference. A candidate without a category
        gets its party's default category, or ``fallback_category_id``.

        Raises:
            PersistenceError: If any insert fails; nothing is written
        """
        pass

    @abstractmethod
    def list_transactions(self, account_id: Optional[int] = None) -> list[Transaction]:
        """List transactions, newest first."""
        pass

    # Reporting queries
    @abstractmethod
    def get_transaction_listing(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[dict[str, Any]]:
        """List transactions joined with account, category and party names.

        Returns a list of dictionaries; ``end_date`` is exclusive.
        """
        pass

    @abstractmethod
    def get_category_totals(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        sign: int = 0,
        include_transfers: bool = False,
    ) -> list[dict[str, Any]]:
        """Sum amounts per category name.

        Args:
            start_date: Optional inclusive start date
            end_date: Optional exclusive end date
            sign: 1 for inflows only, -1 for outflows only, 0 for both
            include_transfers: If False, TRANSFER categories are excluded

        Returns a list of dictionaries with ``name`` and ``total`` keys.
        """
        pass

"""Category domain service."""

from typing import Optional

from finimport.database.base import Database
from finimport.domain.entities import Category, CategoryType, ImportContext
from finimport.domain.errors import StoreError

UNCATEGORIZED = "Uncategorized"

# Canonical category list seeded into every store
CANONICAL_CATEGORIES = [
    ("Paycheck", CategoryType.INCOME),
    ("Other Income", CategoryType.INCOME),
    ("Utilities", CategoryType.EXPENSE),
    ("Groceries", CategoryType.EXPENSE),
    ("Dining", CategoryType.EXPENSE),
    ("Travel", CategoryType.EXPENSE),
    ("Fuel", CategoryType.EXPENSE),
    ("Health", CategoryType.EXPENSE),
    ("Entertainment", CategoryType.EXPENSE),
    ("Hobbies", CategoryType.EXPENSE),
    ("Shopping", CategoryType.EXPENSE),
    ("Home Supplies", CategoryType.EXPENSE),
    ("Child Health and Education", CategoryType.EXPENSE),
    ("Shared Expenses", CategoryType.EXPENSE),
    ("Taxes", CategoryType.EXPENSE),
    ("Insurance", CategoryType.EXPENSE),
    ("Transfers", CategoryType.TRANSFER),
    (UNCATEGORIZED, CategoryType.EXPENSE),
]


class CategoryService:
    """Service for seeding and looking up categories."""

    def __init__(self, db: Database):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    def seed_categories(self) -> int:
        """Insert the canonical categories that are not present yet.

        Running this repeatedly leaves exactly one row per canonical name.

        Returns:
            Number of categories inserted
        """
        return self.db.seed_categories(CANONICAL_CATEGORIES)

    def get_category_by_name(self, name: str) -> Optional[Category]:
        """Get category by name.

        Args:
            name: Category name

        Returns:
            Category entity or None if not found
        """
        return self.db.get_category_by_name(name)

    def list_categories(self) -> list[Category]:
        """List all categories ordered by name."""
        return self.db.list_categories()

    def build_import_context(self) -> ImportContext:
        """Load the category lookups used during import.

        Raises:
            StoreError: If the Uncategorized fallback category is missing
        """
        category_ids = {cat.name: cat.id for cat in self.db.list_categories()}
        uncategorized_id = category_ids.get(UNCATEGORIZED)
        if uncategorized_id is None:
            raise StoreError(f"'{UNCATEGORIZED}' category missing from database")
        return ImportContext(category_ids=category_ids, uncategorized_id=uncategorized_id)

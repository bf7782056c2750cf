"""Batch import domain service.

Resolves the target account for a statement and hands the classified
candidates to the database as one atomic batch.
"""

import logging
from typing import Iterable, Sequence

from finimport.database.base import Database
from finimport.domain.entities import (
    AccountDescriptor,
    CategoryMapping,
    ImportContext,
    TransactionCandidate,
)

logger = logging.getLogger(__name__)


class BatchImportService:
    """Service for persisting classified statement rows."""

    def __init__(self, db: Database):
        """Initialize batch import service.

        Args:
            db: Database instance
        """
        self.db = db

    def resolve_account(self, descriptor: AccountDescriptor) -> int:
        """Get or create the account named by the descriptor.

        The name is the only identity key: institutions that configure the
        same account name share one account.

        Args:
            descriptor: Account name, type and initial balance

        Returns:
            Account ID
        """
        account = self.db.get_account_by_name(descriptor.name)
        if account is not None:
            return account.id

        logger.info("Account '%s' not found. Creating it", descriptor.name)
        return self.db.create_account(
            name=descriptor.name,
            account_type=descriptor.type,
            initial_balance=descriptor.initial_balance,
        )

    @staticmethod
    def build_bank_category_map(
        mappings: Iterable[CategoryMapping], context: ImportContext
    ) -> dict[str, int]:
        """Map upper-cased bank category labels to internal category IDs.

        Mappings naming an unknown internal category are skipped.
        """
        lookup = {}
        for mapping in mappings:
            internal_id = context.category_id(mapping.internal_cat)
            if internal_id is None:
                logger.warning(
                    "Bank category '%s' maps to unknown category '%s'; ignored",
                    mapping.bank_cat,
                    mapping.internal_cat,
                )
                continue
            lookup[mapping.bank_cat.upper().strip()] = internal_id
        return lookup

    def import_batch(self, candidates: Sequence[TransactionCandidate], context: ImportContext) -> int:
        """Insert all candidates in one transaction.

        Args:
            candidates: Classified transaction candidates for one file
            context: Import context providing the fallback category

        Returns:
            Number of transactions inserted

        Raises:
            PersistenceError: If the batch could not be written; nothing is saved
        """
        if not candidates:
            return 0
        return self.db.insert_transaction_batch(candidates, context.uncategorized_id)

"""Import orchestration.

An import run pairs up ``<file> <institution-key>`` arguments, optionally
deletes the existing store, initializes schema and categories, then imports
each file in turn. A failing file is logged and recorded; it never stops
the remaining files.
"""

import csv
import logging
from pathlib import Path
from typing import Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError

from finimport.database.base import Database
from finimport.database.factories import create_sqlite_database, reset_sqlite_database
from finimport.domain.batch_import import BatchImportService
from finimport.domain.category import CategoryService
from finimport.domain.classification import apply_rules, resolve_rules
from finimport.domain.entities import (
    BatchImportSummary,
    FileImportResult,
    ImportContext,
    InstitutionConfig,
)
from finimport.domain.errors import DomainError, StoreError, UsageError, uneven_arguments
from finimport.domain.institution_maps import InstitutionMapRegistry
from finimport.domain.normalizer import NormalizationStats, normalize_row, read_statement_rows

logger = logging.getLogger(__name__)

# Expected errors that fail a single file; anything else is logged with a traceback
FILE_ERRORS = (DomainError, OSError, csv.Error, UnicodeDecodeError, SQLAlchemyError)


def pair_arguments(args: Sequence[str]) -> list[tuple[str, str]]:
    """Split a flat argument list into (file path, institution key) pairs.

    Raises:
        UsageError: If the list is empty or has an odd length
    """
    if not args or len(args) % 2 != 0:
        raise UsageError(uneven_arguments(len(args)))
    return [(args[i], args[i + 1]) for i in range(0, len(args), 2)]


class ImportOrchestrator:
    """Runs a batch of statement imports against a freshly prepared store."""

    def __init__(
        self,
        registry: InstitutionMapRegistry,
        database_path: Optional[str] = None,
        reset: bool = True,
    ):
        """Initialize the orchestrator.

        Args:
            registry: Loaded institution maps
            database_path: SQLite file location (see create_sqlite_database)
            reset: If True, delete the existing store before importing
        """
        self.registry = registry
        self.database_path = database_path
        self.reset = reset

    def run(self, args: Sequence[str]) -> BatchImportSummary:
        """Import every (file, key) pair given as a flat argument list.

        Raises:
            UsageError: If the arguments cannot be paired
            StoreError: If the store cannot be reset or initialized
        """
        pairs = pair_arguments(args)
        logger.info("Starting batch import for %d file(s)", len(pairs))

        db, context = self.prepare_store()
        summary = BatchImportSummary()
        try:
            for file_path, institution_key in pairs:
                summary.files.append(self.import_file(db, context, file_path, institution_key))
        finally:
            db.disconnect()

        logger.info("Batch complete. Total transactions imported: %d", summary.total_imported)
        return summary

    def prepare_store(self) -> tuple[Database, ImportContext]:
        """Reset (if requested) and initialize the store.

        Returns:
            Connected database and the category lookups for this run

        Raises:
            StoreError: If the store cannot be reset or initialized
        """
        if self.reset and reset_sqlite_database(self.database_path):
            logger.info("Existing database deleted. Starting fresh.")

        db = create_sqlite_database(self.database_path)
        try:
            db.connect()
            db.initialize_schema()
            category_service = CategoryService(db)
            category_service.seed_categories()
            context = category_service.build_import_context()
        except SQLAlchemyError as e:
            db.disconnect()
            raise StoreError(f"Could not initialize database: {e}") from e
        except StoreError:
            db.disconnect()
            raise
        return db, context

    def import_file(
        self,
        db: Database,
        context: ImportContext,
        file_path: str,
        institution_key: str,
    ) -> FileImportResult:
        """Import one file, recording any failure instead of raising it."""
        result = FileImportResult(file_path=file_path, institution_key=institution_key)
        logger.info("Processing %s (%s)", file_path, institution_key)
        try:
            if not Path(file_path).is_file():
                raise FileNotFoundError(f"File not found: {file_path}")
            config = self.registry.get(institution_key)
            result.account_name = config.account.name

            stats = NormalizationStats()
            result.imported = import_statement(db, context, file_path, config, stats)
            result.skipped = stats.skipped
        except FILE_ERRORS as e:
            logger.error("Failed to import %s: %s", file_path, e)
            result.error = str(e)
        except Exception as e:
            logger.exception("Unexpected error importing %s", file_path)
            result.error = f"Unexpected error: {e}"
        return result


def import_statement(
    db: Database,
    context: ImportContext,
    file_path: str,
    config: InstitutionConfig,
    stats: Optional[NormalizationStats] = None,
) -> int:
    """Normalize, classify and store one statement file.

    Args:
        db: Initialized database
        context: Category lookups for this run
        file_path: CSV statement path
        config: Institution configuration for the file
        stats: Optional tally that receives every row outcome

    Returns:
        Number of transactions inserted

    Raises:
        FileNotFoundError: If the file doesn't exist
        PersistenceError: If the batch could not be written
    """
    stats = stats if stats is not None else NormalizationStats()
    batch_service = BatchImportService(db)

    account_id = batch_service.resolve_account(config.account)
    bank_category_ids = batch_service.build_bank_category_map(config.category_mappings, context)
    rules = resolve_rules(config.rules, context)

    candidates = []
    for row in read_statement_rows(file_path):
        normalized = normalize_row(row, config, account_id, bank_category_ids)
        stats.record(normalized.outcome)
        if normalized.candidate is not None:
            candidates.append(apply_rules(normalized.candidate, rules))

    inserted = batch_service.import_batch(candidates, context)
    logger.info(
        "Inserted %d transactions into '%s' (%d rows skipped)",
        inserted,
        config.account.name,
        sum(stats.skipped.values()),
    )
    return inserted

"""Database factory functions for creating database instances."""

import logging
import os
from pathlib import Path
from typing import Optional

from finimport.database.sqlalchemy_db import SQLAlchemyDatabase
from finimport.domain.errors import StoreError

logger = logging.getLogger(__name__)


def resolve_database_path(database_path: Optional[str] = None) -> str:
    """Resolve the SQLite file location.

    Args:
        database_path: Explicit path. If None, checks FINIMPORT_DB_PATH
            environment variable, then defaults to ~/.finimport/finance.db
    """
    if database_path is None:
        # Check environment variable
        database_path = os.environ.get("FINIMPORT_DB_PATH")

    if database_path is None:
        # Default to ~/.finimport/finance.db
        home = Path.home()
        db_dir = home / ".finimport"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "finance.db")

    return database_path


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file, see ``resolve_database_path``

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    database_path = resolve_database_path(database_path)
    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyDatabase(database_url)


def reset_sqlite_database(database_path: Optional[str] = None) -> bool:
    """Delete the SQLite database file so the next run starts from scratch.

    Returns:
        True if a file was deleted, False if there was nothing to delete

    Raises:
        StoreError: If the file exists but cannot be removed
    """
    path = Path(resolve_database_path(database_path))
    if not path.exists():
        return False

    logger.warning("Deleting existing database %s", path)
    try:
        path.unlink()
    except OSError as e:
        raise StoreError(f"Could not delete existing database {path}: {e}") from e
    return True

"""Shared pytest fixtures for finimport tests."""

import tempfile
import os
from pathlib import Path
import pytest

from finimport.database.factories import create_sqlite_database
from finimport.domain.batch_import import BatchImportService
from finimport.domain.category import CategoryService
from finimport.domain.institution_maps import InstitutionMapRegistry


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db)


@pytest.fixture
def batch_service(temp_db):
    """Create a BatchImportService with a temporary database."""
    return BatchImportService(temp_db)


@pytest.fixture
def import_context(category_service):
    """Seed the canonical categories and return the lookup context."""
    category_service.seed_categories()
    return category_service.build_import_context()


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def maps_path(fixtures_dir):
    """Return the path to the sample institution maps file."""
    return fixtures_dir / "maps.json"


@pytest.fixture
def registry(maps_path):
    """Load the sample institution maps."""
    return InstitutionMapRegistry.load(maps_path)


@pytest.fixture
def db_path(tmp_path):
    """Return a database path that does not exist yet."""
    return str(tmp_path / "finance.db")


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()

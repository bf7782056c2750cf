"""Database layer for finimport application."""

from finimport.database.base import Database
from finimport.database.factories import create_sqlite_database, reset_sqlite_database

__all__ = ["Database", "create_sqlite_database", "reset_sqlite_database"]

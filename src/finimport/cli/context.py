"""Lazy access to the database and institution maps from CLI commands."""

from pathlib import Path

import click

from finimport.cli.error_handling import handle_domain_error
from finimport.database.base import Database
from finimport.database.factories import create_sqlite_database, resolve_database_path
from finimport.domain.errors import ConfigError, NotFoundError
from finimport.domain.institution_maps import InstitutionMapRegistry


def get_database(ctx: click.Context, create: bool = True) -> Database:
    """Open the database once per invocation and close it when the command ends.

    Args:
        ctx: Click context
        create: If False, a missing database file ends the command instead
            of creating an empty one
    """
    root = ctx.find_root()
    db = root.obj.get("db")
    if db is None:
        database_path = resolve_database_path(root.obj.get("db_path"))
        if not create and not Path(database_path).is_file():
            handle_domain_error(
                ctx,
                NotFoundError(f"No database at {database_path}. Run 'finimport import' first."),
            )
        db = create_sqlite_database(database_path=database_path)
        db.connect()
        db.initialize_schema()
        root.obj["db"] = db
        root.call_on_close(db.disconnect)
    return db


def get_registry(ctx: click.Context) -> InstitutionMapRegistry:
    """Load the institution maps; a missing or malformed file ends the command."""
    root = ctx.find_root()
    registry = root.obj.get("registry")
    if registry is None:
        try:
            registry = InstitutionMapRegistry.load(root.obj["maps_path"])
        except ConfigError as e:
            handle_domain_error(ctx, e)
        root.obj["registry"] = registry
    return registry

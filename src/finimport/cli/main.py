"""Main CLI entry point."""

import logging

import click

# Import and register all commands at module level
from finimport.cli.commands import (
    import_cmd,
    party,
    report,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides FINIMPORT_DB_PATH environment variable)",
    envvar="FINIMPORT_DB_PATH",
)
@click.option(
    "--maps",
    "maps_path",
    type=click.Path(),
    default="maps.json",
    show_default=True,
    help="Path to institution maps file (overrides FINIMPORT_MAPS_PATH environment variable)",
    envvar="FINIMPORT_MAPS_PATH",
)
@click.option("--verbose", "-v", is_flag=True, help="Log progress and warnings to stderr")
@click.pass_context
def cli(ctx, db_path: str | None, maps_path: str, verbose: bool):
    """Finimport - bank statement importer.

    Normalizes CSV exports from multiple institutions, classifies each
    transaction and stores the result for reporting.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # The database is opened lazily by commands; import may delete it first
    ctx.obj["db_path"] = db_path
    ctx.obj["maps_path"] = maps_path


# Register all commands
import_cmd.register_commands(cli)
report.register_commands(cli)
party.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()

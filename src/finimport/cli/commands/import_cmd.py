"""CSV import commands."""

import click

from finimport.cli.context import get_registry
from finimport.cli.error_handling import handle_domain_error
from finimport.domain.entities import FileImportResult, RowOutcome
from finimport.domain.errors import StoreError, UsageError
from finimport.domain.orchestrator import ImportOrchestrator, pair_arguments

USAGE = "Usage: finimport import <file_path_1> <key_1> [<file_path_2> <key_2> ...]"

SKIP_LABELS = {
    RowOutcome.SKIPPED_MISSING_FIELD: "missing field",
    RowOutcome.SKIPPED_UNPARSEABLE_DATE: "unparseable date",
    RowOutcome.SKIPPED_UNPARSEABLE_AMOUNT: "unparseable amount",
}


def _echo_file_result(result: FileImportResult) -> None:
    click.echo("\n" + "-" * 48)
    click.echo(f"Processing: {result.file_path} ({result.institution_key})")

    if not result.succeeded:
        click.echo(f"  Failed to import {result.file_path}: {result.error}", err=True)
        return

    if result.imported:
        click.echo(f"  -> Inserted {result.imported} transactions into '{result.account_name}'.")
    else:
        click.echo("  -> No valid transactions found.")

    if result.skipped_total:
        details = ", ".join(
            f"{SKIP_LABELS[outcome]}: {count}" for outcome, count in sorted(result.skipped.items())
        )
        click.echo(f"  -> Skipped {result.skipped_total} rows ({details})")


@click.command("import")
@click.argument("pairs", nargs=-1)
@click.option(
    "--reset/--no-reset",
    default=True,
    show_default=True,
    help="Delete the existing database before importing",
)
@click.pass_context
def import_statements(ctx, pairs: tuple[str, ...], reset: bool):
    """Import statements given as FILE INSTITUTION_KEY pairs.

    By default the database is rebuilt from scratch on every run.
    A file that fails to import is reported and the remaining files
    are still imported.
    """
    registry = get_registry(ctx)

    try:
        pair_arguments(pairs)
    except UsageError as e:
        click.echo(f"Error: {e}", err=True)
        click.echo(USAGE, err=True)
        click.echo(f"Available keys: {', '.join(registry.keys())}", err=True)
        ctx.exit(2)

    click.echo(f"Starting batch import for {len(pairs) // 2} file(s)...")
    if reset:
        click.echo("Existing database will be deleted and rebuilt.")

    orchestrator = ImportOrchestrator(registry, database_path=ctx.obj["db_path"], reset=reset)
    try:
        summary = orchestrator.run(pairs)
    except StoreError as e:
        handle_domain_error(ctx, e)
        return

    for result in summary.files:
        _echo_file_result(result)

    click.echo("\n" + "-" * 48)
    click.echo(f"Batch complete. Total transactions imported: {summary.total_imported}")
    if summary.failed:
        click.echo(f"Failed files: {len(summary.failed)}", err=True)


@click.command("institutions")
@click.pass_context
def list_institutions(ctx):
    """List institution keys defined in the maps file."""
    registry = get_registry(ctx)
    keys = registry.keys()
    if not keys:
        click.echo("No institutions configured.")
        return
    for key in keys:
        click.echo(key)


def register_commands(cli):
    """Register import commands with main CLI."""
    cli.add_command(import_statements)
    cli.add_command(list_institutions)

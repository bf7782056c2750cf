"""Party management commands."""

import click

from finimport.cli.context import get_database
from finimport.cli.error_handling import handle_domain_error
from finimport.domain.category import CategoryService
from finimport.domain.errors import NotFoundError
from finimport.domain.party import PartyService


@click.group()
def party_group():
    """Manage counterparties and their default categories."""
    pass


@party_group.command("list")
@click.pass_context
def list_parties(ctx):
    """List parties with their default category."""
    db = get_database(ctx, create=False)
    parties = PartyService(db).list_parties()
    if not parties:
        click.echo("No parties found. Import a statement first.")
        return

    category_names = {cat.id: cat.name for cat in CategoryService(db).list_categories()}
    for p in parties:
        default = category_names.get(p.default_category_id, "-")
        click.echo(f"{p.name:<40} {default}")


@party_group.command("set-category")
@click.argument("name")
@click.argument("category")
@click.pass_context
def set_category(ctx, name: str, category: str):
    """Use CATEGORY for NAME's transactions when no bank mapping or rule applies.

    Only takes effect for later imports run with --no-reset.
    """
    db = get_database(ctx)
    category_service = CategoryService(db)
    category_service.seed_categories()

    try:
        party = PartyService(db).set_default_category(name, category)
    except NotFoundError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Party '{party.name}' now defaults to '{category}'")


def register_commands(cli):
    """Register party commands with main CLI."""
    cli.add_command(party_group, name="party")

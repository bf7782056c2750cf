"""CLI error handling helpers."""

import click

from finimport.domain.errors import DomainError, UsageError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure.

    Usage errors exit with 2, like click's own argument errors.
    """
    click.echo(f"Error: {error}", err=True)
    ctx.exit(2 if isinstance(error, UsageError) else 1)

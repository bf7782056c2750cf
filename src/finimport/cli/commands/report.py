"""Reporting commands over imported transactions."""

import click

from finimport.cli.context import get_database
from finimport.cli.error_handling import handle_domain_error
from finimport.domain.errors import ValidationError
from finimport.domain.reporting import ReportService

FLOW_TYPE = click.Choice(["INCOME", "EXPENSE"], case_sensitive=False)


def _echo_transactions(rows: list[dict], detailed: bool = False) -> None:
    if not rows:
        click.echo("No transactions found.")
        return

    click.echo(f"\nFound {len(rows)} transaction(s):")
    click.echo("-" * 110)
    header = f"{'Date':<12} {'Amount':>12}  {'Category':<22} {'Party':<28} {'Description':<30}"
    if detailed:
        header += f" {'Type':<9}"
    else:
        header = f"{'ID':<6} " + header
    click.echo(header)
    click.echo("-" * 110)

    for row in rows:
        amount_str = f"${row['amount']:,.2f}"
        line = (
            f"{str(row['date']):<12} {amount_str:>12}  {row['category_name']:<22} "
            f"{(row['party_name'] or '')[:28]:<28} {(row['description'] or '')[:30]:<30}"
        )
        if detailed:
            line += f" {row['category_type']:<9}"
        else:
            line = f"{row['id']:<6} " + line
        click.echo(line)


def _echo_breakdown(rows: list[dict]) -> None:
    if not rows:
        click.echo("No transactions found.")
        return
    for row in rows:
        click.echo(f"{row['name']:<30} ${row['total']:>12,.2f}")


@click.group()
def report_group():
    """Read-only reports over imported transactions."""
    pass


@report_group.command("monthly")
@click.pass_context
def monthly(ctx):
    """Income, expense and net change per month (transfers excluded)."""
    service = ReportService(get_database(ctx, create=False))
    rows = service.monthly_cash_flow()
    if not rows:
        click.echo("No transactions found.")
        return

    click.echo(f"{'Month':<9} {'Income':>14} {'Expense':>14} {'Net':>14}")
    click.echo("-" * 54)
    for row in rows:
        click.echo(
            f"{row['month']:<9} {row['total_income']:>14,.2f} "
            f"{row['total_expense']:>14,.2f} {row['net_change']:>14,.2f}"
        )


@report_group.command("month-transactions")
@click.argument("month")
@click.argument("flow_type", metavar="TYPE", type=FLOW_TYPE)
@click.pass_context
def month_transactions(ctx, month: str, flow_type: str):
    """Transactions of MONTH (YYYY-MM) on the INCOME or EXPENSE side."""
    service = ReportService(get_database(ctx, create=False))
    try:
        rows = service.transactions_by_month_and_type(month, flow_type)
    except ValidationError as e:
        handle_domain_error(ctx, e)
        return
    _echo_transactions(rows, detailed=True)


@report_group.command("breakdown")
@click.argument("month")
@click.argument("flow_type", metavar="TYPE", type=FLOW_TYPE)
@click.pass_context
def breakdown(ctx, month: str, flow_type: str):
    """Totals per category for MONTH (YYYY-MM), transfers excluded."""
    service = ReportService(get_database(ctx, create=False))
    try:
        rows = service.category_breakdown(month, flow_type)
    except ValidationError as e:
        handle_domain_error(ctx, e)
        return
    _echo_breakdown(rows)


@report_group.command("breakdown-all-time")
@click.pass_context
def breakdown_all_time(ctx):
    """Expense totals per category over all time, transfers excluded."""
    service = ReportService(get_database(ctx, create=False))
    _echo_breakdown(service.category_breakdown_all_time())


@report_group.command("transactions")
@click.option("--detailed", is_flag=True, help="Include the category type column")
@click.pass_context
def transactions(ctx, detailed: bool):
    """List all transactions, newest first."""
    service = ReportService(get_database(ctx, create=False))
    if detailed:
        _echo_transactions(service.list_transactions_detailed(), detailed=True)
    else:
        _echo_transactions(service.list_transactions())


@report_group.command("categories")
@click.pass_context
def categories(ctx):
    """List category names."""
    service = ReportService(get_database(ctx, create=False))
    for name in service.list_category_names():
        click.echo(name)


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")

"""Fiscal year commands."""

from datetime import date

import typer

from ledger_engine.cli.config import CLIConfig, OutputFormat, parse_date
from ledger_engine.cli.formatters import format_output, print_success
from ledger_engine.cli.ledger_factory import open_ledger
from ledger_engine.exceptions import NotFoundError
from ledger_engine.ledger import Ledger
from ledger_engine.models import FiscalYear

app = typer.Typer(no_args_is_help=True)


def _get_year(ledger: Ledger, year: int) -> FiscalYear:
    fiscal_year = ledger.fiscal_years.find_by_year(year)
    if fiscal_year is None:
        raise NotFoundError("FiscalYear", year)
    return fiscal_year


@app.command("create")
def create_year(
    ctx: typer.Context,
    year: int = typer.Argument(..., help="Fiscal year."),
    start: str | None = typer.Option(None, "--start", help="Start date (default: Jan 1)."),
    end: str | None = typer.Option(None, "--end", help="End date (default: Dec 31)."),
    current: bool = typer.Option(False, "--current", help="Make it the current year."),
) -> None:
    """Create a fiscal year."""
    config: CLIConfig = ctx.obj
    start_date = parse_date(start, "--start") or date(year, 1, 1)
    end_date = parse_date(end, "--end") or date(year, 12, 31)

    with open_ledger(config) as ledger:
        fiscal_year = ledger.fiscal_years.create(year, start_date, end_date)
        if current:
            ledger.fiscal_years.set_current(fiscal_year.id)

    print_success(f"Fiscal year {year} created ({start_date} to {end_date}).")


@app.command("list")
def list_years(
    ctx: typer.Context,
    output: OutputFormat = typer.Option(
        OutputFormat.TABLE,
        "--output",
        "-o",
        help="Output format.",
    ),
) -> None:
    """List fiscal years."""
    config: CLIConfig = ctx.obj

    with open_ledger(config) as ledger:
        years = ledger.fiscal_years.find_all()

    format_output(
        years,
        output,
        title="Fiscal Years",
        columns=["year", "start_date", "end_date", "current", "closed"],
    )


@app.command("set-current")
def set_current(
    ctx: typer.Context,
    year: int = typer.Argument(..., help="Fiscal year."),
) -> None:
    """Make a fiscal year current."""
    config: CLIConfig = ctx.obj

    with open_ledger(config) as ledger:
        ledger.fiscal_years.set_current(_get_year(ledger, year).id)

    print_success(f"Fiscal year {year} is now current.")


@app.command("close")
def close_year(
    ctx: typer.Context,
    year: int = typer.Argument(..., help="Fiscal year."),
) -> None:
    """Close a fiscal year (no more postings dated inside it)."""
    config: CLIConfig = ctx.obj

    with open_ledger(config) as ledger:
        ledger.fiscal_years.close(_get_year(ledger, year).id)

    print_success(f"Fiscal year {year} closed.")


@app.command("reopen")
def reopen_year(
    ctx: typer.Context,
    year: int = typer.Argument(..., help="Fiscal year."),
) -> None:
    """Re-open a closed fiscal year."""
    config: CLIConfig = ctx.obj

    with open_ledger(config) as ledger:
        ledger.fiscal_years.reopen(_get_year(ledger, year).id)

    print_success(f"Fiscal year {year} re-opened.")

"""Financial report commands."""

from datetime import date

import typer
from rich.table import Table

from ledger_engine.cli.config import CLIConfig, OutputFormat, parse_date
from ledger_engine.cli.formatters import console, format_output
from ledger_engine.cli.ledger_factory import open_ledger
from ledger_engine.models.reports import AccountBalance

app = typer.Typer(no_args_is_help=True)


def _output_option() -> OutputFormat:
    return typer.Option(
        OutputFormat.TABLE,
        "--output",
        "-o",
        help="Output format.",
    )


def _section(table: Table, title: str, rows: list[AccountBalance], total: object) -> None:
    table.add_row(f"[bold]{title}[/bold]", "")
    for row in rows:
        table.add_row(f"  {row.code}  {row.name}", f"{row.balance:,.2f}")
    table.add_row(f"[bold]Total {title}[/bold]", f"[bold]{total:,.2f}[/bold]")


@app.command("trial-balance")
def trial_balance(
    ctx: typer.Context,
    as_of: str | None = typer.Option(None, "--as-of", help="Balances as of (YYYY-MM-DD)."),
    output: OutputFormat = _output_option(),
) -> None:
    """Non-zero balances in debit and credit columns."""
    config: CLIConfig = ctx.obj
    day = parse_date(as_of, "--as-of")

    with open_ledger(config) as ledger:
        report = ledger.reports.trial_balance(day)

    if output != OutputFormat.TABLE:
        format_output(report, output)
        return

    table = Table(title="Trial Balance", show_header=True, header_style="bold")
    table.add_column("Code")
    table.add_column("Name")
    table.add_column("Debit", justify="right")
    table.add_column("Credit", justify="right")
    for row in report.rows:
        table.add_row(
            row.code,
            row.name,
            f"{row.debit:,.2f}" if row.debit else "",
            f"{row.credit:,.2f}" if row.credit else "",
        )
    table.add_row(
        "", "[bold]Totals[/bold]", f"{report.total_debit:,.2f}", f"{report.total_credit:,.2f}"
    )
    console.print(table)
    if not report.balanced:
        console.print("[red]Trial balance does not balance.[/red]")


@app.command("balance-sheet")
def balance_sheet(
    ctx: typer.Context,
    as_of: str | None = typer.Option(None, "--as-of", help="Balances as of (YYYY-MM-DD)."),
    output: OutputFormat = _output_option(),
) -> None:
    """Assets, liabilities and equity."""
    config: CLIConfig = ctx.obj
    day = parse_date(as_of, "--as-of")

    with open_ledger(config) as ledger:
        report = ledger.reports.balance_sheet(day)

    if output != OutputFormat.TABLE:
        format_output(report, output)
        return

    table = Table(title=f"Balance Sheet{f' as of {day}' if day else ''}", show_header=False)
    table.add_column("Account")
    table.add_column("Amount", justify="right")
    _section(table, "Assets", report.assets, report.total_assets)
    _section(table, "Liabilities", report.liabilities, report.total_liabilities)
    _section(table, "Equity", report.equity, report.total_equity)
    table.add_row("Net income (unclosed)", f"{report.net_income:,.2f}")
    table.add_row(
        "[bold]Total Liabilities and Equity[/bold]",
        f"[bold]{report.total_liabilities_and_equity:,.2f}[/bold]",
    )
    console.print(table)


@app.command("income-statement")
def income_statement(
    ctx: typer.Context,
    from_date: str | None = typer.Option(None, "--from", help="Start date (YYYY-MM-DD)."),
    to_date: str | None = typer.Option(None, "--to", help="End date (YYYY-MM-DD)."),
    ytd: bool = typer.Option(False, "--ytd", help="Year to date (Jan 1 to today)."),
    output: OutputFormat = _output_option(),
) -> None:
    """Income against expenses for a period."""
    config: CLIConfig = ctx.obj
    start = parse_date(from_date, "--from")
    end = parse_date(to_date, "--to")
    if ytd:
        today = date.today()
        start, end = date(today.year, 1, 1), today

    with open_ledger(config) as ledger:
        report = ledger.reports.income_statement(start, end)

    if output != OutputFormat.TABLE:
        format_output(report, output)
        return

    table = Table(title="Income Statement", show_header=False)
    table.add_column("Account")
    table.add_column("Amount", justify="right")
    _section(table, "Income", report.income, report.total_income)
    _section(table, "Expenses", report.expenses, report.total_expenses)
    table.add_row("[bold]Net Income[/bold]", f"[bold]{report.net_income:,.2f}[/bold]")
    console.print(table)


@app.command("ledger")
def account_ledger(
    ctx: typer.Context,
    account: str = typer.Argument(..., help="Account code."),
    from_date: str | None = typer.Option(None, "--from", help="Start date (YYYY-MM-DD)."),
    to_date: str | None = typer.Option(None, "--to", help="End date (YYYY-MM-DD)."),
    output: OutputFormat = _output_option(),
) -> None:
    """Posted movements on one account with a running balance."""
    config: CLIConfig = ctx.obj
    start = parse_date(from_date, "--from")
    end = parse_date(to_date, "--to")

    with open_ledger(config) as ledger:
        report = ledger.reports.account_ledger(account, start, end)

    if output == OutputFormat.JSON:
        format_output(report, output)
        return
    format_output(report.movements, output, title=report.account)


@app.command("journal")
def journal(
    ctx: typer.Context,
    from_date: str = typer.Option(..., "--from", help="Start date (YYYY-MM-DD)."),
    to_date: str = typer.Option(..., "--to", help="End date (YYYY-MM-DD)."),
    output: OutputFormat = _output_option(),
) -> None:
    """Every entry in a period with its lines."""
    config: CLIConfig = ctx.obj
    start = parse_date(from_date, "--from")
    end = parse_date(to_date, "--to")

    with open_ledger(config) as ledger:
        report = ledger.reports.journal(start, end)

    if output == OutputFormat.JSON:
        format_output(report, output)
        return

    rows = [
        {
            "number": entry.entry_number,
            "date": entry.entry_date,
            "account": line.account,
            "memo": line.memo or entry.description,
            "debit": line.debit or "",
            "credit": line.credit or "",
        }
        for entry in report.entries
        for line in entry.lines
    ]
    format_output(rows, output, title=f"Journal {start} to {end}")


@app.command("dashboard")
def dashboard(
    ctx: typer.Context,
    from_date: str | None = typer.Option(None, "--from", help="Start date (default Jan 1)."),
    to_date: str | None = typer.Option(None, "--to", help="End date (default today)."),
    top: int = typer.Option(5, "--top", help="Number of top customers to list."),
    output: OutputFormat = _output_option(),
) -> None:
    """Record counts, invoice KPIs, revenue trend and top customers."""
    config: CLIConfig = ctx.obj
    end = parse_date(to_date, "--to") or date.today()
    start = parse_date(from_date, "--from") or date(end.year, 1, 1)

    with open_ledger(config) as ledger:
        report = ledger.reports.dashboard(start, end, top=top)

    if output == OutputFormat.JSON:
        format_output(report, output)
        return

    summary = report.summary.model_dump()
    kpis = report.kpis.model_dump(exclude={"start", "end"})
    format_output(
        [{"metric": key, "value": value} for key, value in {**summary, **kpis}.items()],
        output,
        title=f"Dashboard {start} to {end}",
    )
    format_output(
        [{"status": status, "count": count} for status, count in report.invoices_by_status.items()],
        output,
        title="Invoices by status",
    )
    format_output(
        [{"month": m.month, "revenue": m.revenue} for m in report.monthly_revenue],
        output,
        title=f"Revenue {end.year}",
    )
    format_output(report.top_customers, output, title="Top customers")

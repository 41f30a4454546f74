"""Journal entry commands."""

from datetime import date

import typer

from ledger_engine.builders import JournalEntryBuilder
from ledger_engine.cli.config import CLIConfig, OutputFormat, parse_amount, parse_date
from ledger_engine.cli.formatters import console, format_output, print_error, print_success
from ledger_engine.cli.ledger_factory import open_ledger
from ledger_engine.exceptions import NotFoundError
from ledger_engine.ledger import Ledger
from ledger_engine.models import JournalEntry
from ledger_engine.retry import retry_on_conflict

app = typer.Typer(no_args_is_help=True)


def _get_entry(ledger: Ledger, number: int) -> JournalEntry:
    entry = ledger.journal.find_by_number(number)
    if entry is None:
        raise NotFoundError("JournalEntry", f"#{number}")
    return entry


def _entry_row(entry: JournalEntry) -> dict[str, object]:
    return {
        "number": entry.entry_number,
        "date": entry.date,
        "description": entry.description,
        "reference": entry.reference or "",
        "debit": entry.total_debit,
        "credit": entry.total_credit,
        "posted": entry.posted,
    }


def _print_entry(ledger: Ledger, entry: JournalEntry) -> None:
    """Print a single journal entry in ledger format."""
    status = "[green]posted[/green]" if entry.posted else "[yellow]draft[/yellow]"
    console.print(
        f"[bold]#{entry.entry_number}  {entry.date.isoformat()}[/bold]  "
        f"[cyan]{entry.description}[/cyan]  ({status})"
    )
    if entry.reference:
        console.print(f"    [dim]ref: {entry.reference}[/dim]")

    for line in entry.lines:
        account = ledger.accounts.find_by_id(line.account_id)
        name = account.label if account else str(line.account_id)
        if line.is_debit:
            console.print(f"    {name:<40} {line.debit:>14,.2f}")
        else:
            console.print(f"        {name:<36} {' ':>14}{line.credit:>14,.2f}")
        if line.memo:
            console.print(f"            [dim]; {line.memo}[/dim]")

    console.print(f"    {'Totals':<40} {entry.total_debit:>14,.2f}{entry.total_credit:>14,.2f}")
    console.print()


@app.command("create")
def create_entry(
    ctx: typer.Context,
    entry_date: str = typer.Argument(..., help="Entry date (YYYY-MM-DD)."),
    description: str = typer.Argument(..., help="Entry description."),
    reference: str | None = typer.Option(
        None,
        "--reference",
        "-r",
        help="External reference.",
    ),
) -> None:
    """Create an empty draft entry."""
    config: CLIConfig = ctx.obj
    day = parse_date(entry_date)

    with open_ledger(config) as ledger:
        entry = ledger.journal.create(day, description, reference)

    print_success(f"Journal entry #{entry.entry_number} created.")


@app.command("add-line")
def add_line(
    ctx: typer.Context,
    number: int = typer.Argument(..., help="Entry number."),
    account: str = typer.Argument(..., help="Account code."),
    debit: str | None = typer.Option(None, "--debit", "-d", help="Debit amount."),
    credit: str | None = typer.Option(None, "--credit", "-c", help="Credit amount."),
    memo: str = typer.Option("", "--memo", "-m", help="Line memo."),
) -> None:
    """Add a debit or credit line to a draft entry."""
    config: CLIConfig = ctx.obj

    with open_ledger(config) as ledger:
        entry = _get_entry(ledger, number)
        entry = ledger.journal.add_line(
            entry,
            account,
            debit=parse_amount(debit, "debit"),
            credit=parse_amount(credit, "credit"),
            memo=memo,
        )

    diff = entry.imbalance
    suffix = "balanced" if diff == 0 else f"difference {diff:,.2f}"
    print_success(f"Line added to entry #{number} ({suffix}).")


@app.command("record")
def record_entry(
    ctx: typer.Context,
    entry_date: str = typer.Argument(..., help="Entry date (YYYY-MM-DD)."),
    description: str = typer.Argument(..., help="Entry description."),
    debit_account: str = typer.Option(..., "--debit-account", help="Account to debit."),
    credit_account: str = typer.Option(..., "--credit-account", help="Account to credit."),
    amount: str = typer.Option(..., "--amount", "-a", help="Amount."),
    reference: str | None = typer.Option(None, "--reference", "-r", help="External reference."),
    post: bool = typer.Option(False, "--post", help="Post the entry immediately."),
) -> None:
    """Record a two-line entry in one step."""
    config: CLIConfig = ctx.obj
    day = parse_date(entry_date)
    value = parse_amount(amount)

    with open_ledger(config) as ledger:
        builder = JournalEntryBuilder(day, description)
        if reference:
            builder.reference(reference)
        draft = builder.debit(debit_account, value).credit(credit_account, value).build()
        entry = ledger.journal.record(draft, post=post)

    state = "posted" if entry.posted else "recorded"
    print_success(f"Journal entry #{entry.entry_number} {state}.")


@app.command("post")
def post_entry(
    ctx: typer.Context,
    number: int = typer.Argument(..., help="Entry number."),
) -> None:
    """Post a draft entry to the account balances."""
    config: CLIConfig = ctx.obj

    with open_ledger(config) as ledger:
        entry = _get_entry(ledger, number)
        retry_on_conflict(ledger.journal.post)(entry.id)

    print_success(f"Journal entry #{number} posted.")


@app.command("reverse")
def reverse_entry(
    ctx: typer.Context,
    number: int = typer.Argument(..., help="Entry number."),
    reversal_date: str | None = typer.Option(
        None,
        "--date",
        help="Reversal date (YYYY-MM-DD, default: today).",
    ),
    description: str | None = typer.Option(
        None,
        "--description",
        "-d",
        help="Reversal description.",
    ),
) -> None:
    """Reverse a posted entry with a compensating entry."""
    config: CLIConfig = ctx.obj
    day = parse_date(reversal_date)

    with open_ledger(config) as ledger:
        entry = _get_entry(ledger, number)
        reversal = retry_on_conflict(ledger.journal.reverse)(entry.id, day, description)

    print_success(f"Journal entry #{number} reversed by #{reversal.entry_number}.")


@app.command("delete")
def delete_entry(
    ctx: typer.Context,
    number: int = typer.Argument(..., help="Entry number."),
) -> None:
    """Delete a draft entry."""
    config: CLIConfig = ctx.obj

    with open_ledger(config) as ledger:
        ledger.journal.delete(_get_entry(ledger, number).id)

    print_success(f"Journal entry #{number} deleted.")


@app.command("list")
def list_entries(
    ctx: typer.Context,
    from_date: str | None = typer.Option(None, "--from", help="Start date (YYYY-MM-DD)."),
    to_date: str | None = typer.Option(None, "--to", help="End date (YYYY-MM-DD)."),
    output: OutputFormat = typer.Option(
        OutputFormat.TABLE,
        "--output",
        "-o",
        help="Output format.",
    ),
) -> None:
    """List journal entries."""
    config: CLIConfig = ctx.obj
    start = parse_date(from_date, "--from")
    end = parse_date(to_date, "--to")

    with open_ledger(config) as ledger:
        if start or end:
            entries = ledger.journal.find_by_date_range(start or date.min, end or date.max)
        else:
            entries = ledger.journal.find_all()

    format_output([_entry_row(e) for e in entries], output, title="Journal Entries")


@app.command("show")
def show_entry(
    ctx: typer.Context,
    number: int = typer.Argument(..., help="Entry number."),
    output: OutputFormat = typer.Option(
        OutputFormat.TABLE,
        "--output",
        "-o",
        help="Output format.",
    ),
) -> None:
    """Show an entry with its lines."""
    config: CLIConfig = ctx.obj

    with open_ledger(config) as ledger:
        entry = ledger.journal.find_by_number(number)
        if entry is None:
            print_error(f"Journal entry #{number} not found.")
            raise typer.Exit(1)

        if output == OutputFormat.TABLE:
            _print_entry(ledger, entry)
        else:
            format_output(entry, output)

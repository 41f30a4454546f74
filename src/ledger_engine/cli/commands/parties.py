"""Customer and supplier commands."""

import typer

from ledger_engine.cli.config import CLIConfig, OutputFormat
from ledger_engine.cli.formatters import format_output, print_success
from ledger_engine.cli.ledger_factory import open_ledger
from ledger_engine.models import PartyKind

app = typer.Typer(no_args_is_help=True)

_COLUMNS = ["kind", "code", "name", "tax_id", "email", "active"]


@app.command("add")
def add_party(
    ctx: typer.Context,
    kind: PartyKind = typer.Argument(..., help="customer or supplier.", case_sensitive=False),
    code: str = typer.Argument(..., help="Party code."),
    name: str = typer.Argument(..., help="Party name."),
    tax_id: str = typer.Option("", "--tax-id", help="Tax identifier."),
    email: str = typer.Option("", "--email", help="Contact email."),
    phone: str = typer.Option("", "--phone", help="Contact phone."),
    address: str = typer.Option("", "--address", help="Postal address."),
) -> None:
    """Register a customer or supplier."""
    config: CLIConfig = ctx.obj

    with open_ledger(config) as ledger:
        party = ledger.parties.create(
            kind, code, name, tax_id=tax_id, email=email, phone=phone, address=address
        )

    print_success(f"{party.kind.capitalize()} {party.code} created.")


@app.command("list")
def list_parties(
    ctx: typer.Context,
    kind: PartyKind | None = typer.Option(
        None,
        "--kind",
        "-k",
        help="Only customers or suppliers.",
        case_sensitive=False,
    ),
    active: bool = typer.Option(False, "--active", help="Only active parties."),
    output: OutputFormat = typer.Option(
        OutputFormat.TABLE,
        "--output",
        "-o",
        help="Output format.",
    ),
) -> None:
    """List customers and suppliers."""
    config: CLIConfig = ctx.obj

    with open_ledger(config) as ledger:
        parties = []
        if kind in (None, PartyKind.CUSTOMER):
            parties += ledger.parties.find_customers(active_only=active)
        if kind in (None, PartyKind.SUPPLIER):
            parties += ledger.parties.find_suppliers(active_only=active)

    format_output(parties, output, title="Parties", columns=_COLUMNS)


@app.command("search")
def search_parties(
    ctx: typer.Context,
    term: str = typer.Argument(..., help="Text to look for in name, code or tax id."),
    output: OutputFormat = typer.Option(
        OutputFormat.TABLE,
        "--output",
        "-o",
        help="Output format.",
    ),
) -> None:
    """Search customers and suppliers."""
    config: CLIConfig = ctx.obj

    with open_ledger(config) as ledger:
        parties = ledger.parties.search(term)

    format_output(parties, output, title=f"Parties matching {term!r}", columns=_COLUMNS)


@app.command("deactivate")
def deactivate_party(
    ctx: typer.Context,
    kind: PartyKind = typer.Argument(..., help="customer or supplier.", case_sensitive=False),
    code: str = typer.Argument(..., help="Party code."),
) -> None:
    """Deactivate a customer or supplier."""
    config: CLIConfig = ctx.obj

    with open_ledger(config) as ledger:
        party = ledger.parties.deactivate(ledger.parties.resolve(kind, code).id)

    print_success(f"{party.kind.capitalize()} {party.code} deactivated.")

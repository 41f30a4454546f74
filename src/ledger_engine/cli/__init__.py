"""Ledger CLI - Command-line interface for the ledger engine."""

from ledger_engine.cli.app import app

# Import command modules to register them with the app
from ledger_engine.cli.commands import (
    accounts,
    currencies,
    fiscal,
    invoices,
    journal,
    parties,
    reports,
)

# Register sub-apps
app.add_typer(accounts.app, name="accounts", help="Chart of accounts.")
app.add_typer(journal.app, name="journal", help="Journal entries.")
app.add_typer(invoices.app, name="invoices", help="Sale and purchase invoices.")
app.add_typer(fiscal.app, name="fiscal", help="Fiscal years.")
app.add_typer(currencies.app, name="currencies", help="Currencies and exchange rates.")
app.add_typer(parties.app, name="parties", help="Customers and suppliers.")
app.add_typer(reports.app, name="reports", help="Financial reports.")


def main() -> None:
    """Entry point for the CLI."""
    app()


__all__ = ["app", "main"]

"""Currency commands."""

from decimal import Decimal

import typer

from ledger_engine.cli.config import CLIConfig, OutputFormat, parse_amount
from ledger_engine.cli.formatters import console, format_output, print_success
from ledger_engine.cli.ledger_factory import open_ledger
from ledger_engine.models import Currency

app = typer.Typer(no_args_is_help=True)


@app.command("add")
def add_currency(
    ctx: typer.Context,
    code: str = typer.Argument(..., help="ISO code (e.g., USD)."),
    name: str = typer.Argument(..., help="Currency name."),
    symbol: str = typer.Option("", "--symbol", "-s", help="Display symbol."),
    rate: str = typer.Option("1", "--rate", "-r", help="Value of one unit in the base currency."),
    base: bool = typer.Option(False, "--base", help="Make it the base currency."),
) -> None:
    """Add a currency."""
    config: CLIConfig = ctx.obj
    exchange_rate = parse_amount(rate, "rate") or Decimal(1)

    with open_ledger(config) as ledger:
        currency = ledger.currencies.save(
            Currency(
                code=code.upper(),
                name=name,
                symbol=symbol,
                exchange_rate=exchange_rate,
                base_currency=base,
            )
        )

    print_success(f"Currency {currency.code} added.")


@app.command("list")
def list_currencies(
    ctx: typer.Context,
    output: OutputFormat = typer.Option(
        OutputFormat.TABLE,
        "--output",
        "-o",
        help="Output format.",
    ),
) -> None:
    """List active currencies."""
    config: CLIConfig = ctx.obj

    with open_ledger(config) as ledger:
        currencies = ledger.currencies.find_all_active()

    format_output(
        currencies,
        output,
        title="Currencies",
        columns=["code", "name", "symbol", "exchange_rate", "base_currency"],
    )


@app.command("rate")
def update_rate(
    ctx: typer.Context,
    code: str = typer.Argument(..., help="Currency code."),
    rate: str = typer.Argument(..., help="New exchange rate."),
) -> None:
    """Update an exchange rate."""
    config: CLIConfig = ctx.obj
    new_rate = parse_amount(rate, "rate")

    with open_ledger(config) as ledger:
        currency = ledger.currencies.update_exchange_rate(code.upper(), new_rate)

    print_success(f"{currency.code} rate set to {currency.exchange_rate}.")


@app.command("set-base")
def set_base(
    ctx: typer.Context,
    code: str = typer.Argument(..., help="Currency code."),
) -> None:
    """Make a currency the base currency."""
    config: CLIConfig = ctx.obj

    with open_ledger(config) as ledger:
        currency = ledger.currencies.set_as_base_currency(code.upper())

    print_success(f"{currency.code} is now the base currency.")


@app.command("deactivate")
def deactivate_currency(
    ctx: typer.Context,
    code: str = typer.Argument(..., help="Currency code."),
) -> None:
    """Deactivate a currency."""
    config: CLIConfig = ctx.obj

    with open_ledger(config) as ledger:
        ledger.currencies.deactivate(code.upper())

    print_success(f"Currency {code.upper()} deactivated.")


@app.command("convert")
def convert(
    ctx: typer.Context,
    amount: str = typer.Argument(..., help="Amount to convert."),
    from_code: str = typer.Argument(..., help="Source currency."),
    to_code: str = typer.Argument(..., help="Target currency."),
) -> None:
    """Convert an amount between two currencies."""
    config: CLIConfig = ctx.obj
    value = parse_amount(amount)

    with open_ledger(config) as ledger:
        result = ledger.currencies.convert(value, from_code.upper(), to_code.upper())

    console.print(f"{value} {from_code.upper()} = [bold]{result}[/bold] {to_code.upper()}")

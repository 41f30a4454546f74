"""Main Typer application."""

import logging
from pathlib import Path

import typer

from ledger_engine.cli.config import CLIConfig, _default_ledger_file

app = typer.Typer(
    name="ledger-cli",
    help="Double-entry ledger command-line interface.",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output.",
    ),
    ledger_file: Path | None = typer.Option(
        None,
        "--ledger-file",
        "-f",
        help="Ledger file (default: ~/.local/share/ledger-engine/ledger.json).",
        envvar="LEDGER_FILE",
    ),
    config_file: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Ledger config file (default: ~/.config/ledger-engine/config.json).",
        envvar="LEDGER_CONFIG_FILE",
    ),
) -> None:
    """Double-entry ledger command-line interface.

    Every command loads the ledger file, applies the change and writes the
    file back. A failed command leaves the file untouched.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    ctx.obj = CLIConfig(
        verbose=verbose,
        ledger_file=ledger_file or _default_ledger_file(),
        config_file=config_file,
    )

"""Ledger factory for CLI commands."""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

import typer

from ledger_engine.cli.formatters import print_error
from ledger_engine.exceptions import LedgerError
from ledger_engine.ledger import Ledger

if TYPE_CHECKING:
    from ledger_engine.cli.config import CLIConfig


@contextmanager
def open_ledger(config: "CLIConfig") -> Iterator[Ledger]:
    """Open the ledger file for one CLI command.

    This context manager:
    1. Loads the ledger configuration (config file + LEDGER_* overrides)
    2. Loads the ledger file (an empty ledger if it does not exist yet)
    3. Writes the file back only if the command succeeded

    Ledger errors are printed as ``Error: <message>`` and exit with status 1.

    Usage:
        with open_ledger(cli_config) as ledger:
            ledger.journal.post(entry_id)
    """
    try:
        ledger_config = config.load_ledger_config()
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(1) from e

    try:
        with Ledger.open(config.ledger_file, ledger_config) as ledger:
            yield ledger
    except LedgerError as e:
        print_error(e.message)
        raise typer.Exit(1) from e

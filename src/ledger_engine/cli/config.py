"""CLI configuration with XDG-compliant paths and environment variable overrides."""

import os
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from enum import StrEnum
from pathlib import Path

import typer

from ledger_engine.config import LedgerConfig


class OutputFormat(StrEnum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"
    CSV = "csv"


def _default_ledger_file() -> Path:
    """Get XDG-compliant ledger file path.

    Uses XDG_DATA_HOME if set, otherwise ~/.local/share/ledger-engine.
    """
    xdg_data = os.environ.get("XDG_DATA_HOME")
    if xdg_data:
        return Path(xdg_data) / "ledger-engine" / "ledger.json"
    return Path.home() / ".local" / "share" / "ledger-engine" / "ledger.json"


@dataclass
class CLIConfig:
    """Configuration passed through Typer context.

    Attributes:
        verbose: Enable verbose (DEBUG) logging on stderr.
        ledger_file: JSON file holding the ledger.
        config_file: Optional ledger configuration file (default accounts, scales).
    """

    verbose: bool = False
    ledger_file: Path = field(default_factory=_default_ledger_file)
    config_file: Path | None = None

    def load_ledger_config(self) -> LedgerConfig:
        """Load ledger configuration: file (if any), then LEDGER_* overrides."""
        return LedgerConfig.load(self.config_file)


def parse_date(value: str | None, option: str = "date") -> date | None:
    """Parse a YYYY-MM-DD option value."""
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise typer.BadParameter(f"Invalid {option} (expected YYYY-MM-DD): {value}") from None


def parse_amount(value: str | None, option: str = "amount") -> Decimal | None:
    """Parse a decimal option value without going through float."""
    if value is None:
        return None
    try:
        return Decimal(value)
    except InvalidOperation:
        raise typer.BadParameter(f"Invalid {option}: {value}") from None

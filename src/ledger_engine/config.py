"""Configuration management for the ledger engine."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, fields
from pathlib import Path


def _get_config_dir() -> Path:
    """Get XDG-compliant config directory."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config) / "ledger-engine"
    return Path.home() / ".config" / "ledger-engine"


_ENV_PREFIX = "LEDGER_"


@dataclass(frozen=True, slots=True)
class LedgerConfig:
    """Ledger engine configuration.

    Attributes:
        receivables_account: Debited by sale invoices (total)
        payables_account: Credited by purchase invoices (total)
        tax_payable_account: Receives the aggregate invoice tax
        revenue_account: Default credit for sale lines without an account
        expense_account: Default debit for purchase lines without an account
        money_scale: Decimal places for invoice amounts
        currency_scale: Decimal places for currency conversions
        require_open_period: Reject postings outside any open fiscal year
    """

    receivables_account: str = "1.1.03"
    payables_account: str = "2.1.01"
    tax_payable_account: str = "2.1.02"
    revenue_account: str = "4.1.01"
    expense_account: str = "5.1.02"
    money_scale: int = 2
    currency_scale: int = 2
    require_open_period: bool = False

    @classmethod
    def from_env(cls) -> LedgerConfig:
        """Create config from environment variables.

        Every field can be set as LEDGER_<FIELD_NAME>, e.g.
        LEDGER_RECEIVABLES_ACCOUNT=1.1.03 or LEDGER_REQUIRE_OPEN_PERIOD=true.
        Unset variables keep their defaults.
        """
        values: dict[str, object] = {}
        for f in fields(cls):
            raw = os.environ.get(_ENV_PREFIX + f.name.upper())
            if raw is not None:
                values[f.name] = _coerce(f.name, f.type, raw)
        return cls(**values)

    @classmethod
    def from_file(cls, path: Path | None = None) -> LedgerConfig:
        """Load config from JSON file.

        Default path: ~/.config/ledger-engine/config.json

        Expected format:
        {
            "receivables_account": "1.1.03",
            "require_open_period": true
        }
        """
        if path is None:
            path = _get_config_dir() / "config.json"

        if not path.exists():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)

        with path.open() as f:
            data = json.load(f)

        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            msg = f"Unknown config keys in {path}: {', '.join(sorted(unknown))}"
            raise ValueError(msg)

        return cls(**data)

    @classmethod
    def load(cls, path: Path | None = None) -> LedgerConfig:
        """Load config from file, then apply environment overrides.

        Falls back to defaults when no file exists.
        """
        try:
            base = cls.from_file(path)
        except FileNotFoundError:
            base = cls()

        overrides = cls.from_env()
        changed = {
            f.name: getattr(overrides, f.name)
            for f in fields(cls)
            if os.environ.get(_ENV_PREFIX + f.name.upper()) is not None
        }
        return cls(**{**{f.name: getattr(base, f.name) for f in fields(cls)}, **changed})


def _coerce(name: str, type_name: object, raw: str) -> object:
    # Annotations are strings under `from __future__ import annotations`
    if type_name in ("bool", bool):
        return raw.strip().lower() in ("1", "true", "yes", "on")
    if type_name in ("int", int):
        try:
            return int(raw)
        except ValueError:
            msg = f"Invalid integer for {_ENV_PREFIX}{name.upper()}: {raw!r}"
            raise ValueError(msg) from None
    return raw

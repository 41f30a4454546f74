"""Tests for ledger and CLI configuration."""

import json
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest
import typer

from ledger_engine import LedgerConfig
from ledger_engine.cli.config import CLIConfig, parse_amount, parse_date


class TestLedgerConfig:
    """Tests for LedgerConfig loading."""

    def test_defaults_match_chart(self) -> None:
        """Should point at the default chart accounts."""
        config = LedgerConfig()

        assert config.receivables_account == "1.1.03"
        assert config.payables_account == "2.1.01"
        assert config.tax_payable_account == "2.1.02"
        assert config.money_scale == 2
        assert not config.require_open_period

    def test_from_file(self, tmp_path: Path) -> None:
        """Should read known keys from JSON."""
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"revenue_account": "4.1.02", "currency_scale": 4}))

        config = LedgerConfig.from_file(path)

        assert config.revenue_account == "4.1.02"
        assert config.currency_scale == 4

    def test_from_file_rejects_unknown_keys(self, tmp_path: Path) -> None:
        """Should reject typos in the config file."""
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"revenue_acount": "4.1.02"}))

        with pytest.raises(ValueError, match="revenue_acount"):
            LedgerConfig.from_file(path)

    def test_from_file_missing(self, tmp_path: Path) -> None:
        """Should raise FileNotFoundError for a missing file."""
        with pytest.raises(FileNotFoundError):
            LedgerConfig.from_file(tmp_path / "missing.json")

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should coerce environment overrides."""
        monkeypatch.setenv("LEDGER_EXPENSE_ACCOUNT", "5.1.01")
        monkeypatch.setenv("LEDGER_MONEY_SCALE", "3")
        monkeypatch.setenv("LEDGER_REQUIRE_OPEN_PERIOD", "yes")

        config = LedgerConfig.from_env()

        assert config.expense_account == "5.1.01"
        assert config.money_scale == 3
        assert config.require_open_period

    def test_from_env_bad_integer(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should name the variable holding a bad integer."""
        monkeypatch.setenv("LEDGER_MONEY_SCALE", "two")

        with pytest.raises(ValueError, match="LEDGER_MONEY_SCALE"):
            LedgerConfig.from_env()

    def test_load_env_overrides_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Should apply environment variables on top of the file."""
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"revenue_account": "4.1.02", "money_scale": 4}))
        monkeypatch.setenv("LEDGER_MONEY_SCALE", "0")

        config = LedgerConfig.load(path)

        assert config.revenue_account == "4.1.02"
        assert config.money_scale == 0

    def test_load_without_file(self, tmp_path: Path) -> None:
        """Should fall back to defaults."""
        assert LedgerConfig.load(tmp_path / "missing.json") == LedgerConfig()


class TestCLIConfig:
    """Tests for CLI helpers."""

    def test_default_ledger_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should follow XDG_DATA_HOME."""
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))

        assert CLIConfig().ledger_file == tmp_path / "ledger-engine" / "ledger.json"

    def test_parse_date(self) -> None:
        """Should parse ISO dates and pass None through."""
        assert parse_date("2025-02-28") == date(2025, 2, 28)
        assert parse_date(None) is None
        with pytest.raises(typer.BadParameter):
            parse_date("28/02/2025", "--from")

    def test_parse_amount(self) -> None:
        """Should parse decimals exactly."""
        assert parse_amount("0.10") == Decimal("0.10")
        assert parse_amount(None) is None
        with pytest.raises(typer.BadParameter):
            parse_amount("ten")

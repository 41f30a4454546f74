"""Shared fixtures for ledger tests."""

from datetime import date

import pytest

from ledger_engine import Ledger, LedgerConfig
from ledger_engine.models import Account, Party

TODAY = date(2025, 6, 15)


@pytest.fixture
def config() -> LedgerConfig:
    """Create a test configuration (default account codes)."""
    return LedgerConfig()


@pytest.fixture
def empty_ledger(config: LedgerConfig) -> Ledger:
    """An in-memory ledger with no accounts and no fiscal years."""
    return Ledger.in_memory(config)


@pytest.fixture
def ledger(empty_ledger: Ledger) -> Ledger:
    """An in-memory ledger with the default chart and fiscal year 2025 current."""
    empty_ledger.initialize(today=TODAY)
    return empty_ledger


@pytest.fixture
def cash(ledger: Ledger) -> Account:
    return ledger.accounts.get_by_code("1.1.01")


@pytest.fixture
def sales(ledger: Ledger) -> Account:
    return ledger.accounts.get_by_code("4.1.01")


@pytest.fixture
def customer(ledger: Ledger) -> Party:
    return ledger.parties.create_customer("C001", "Acme Ltd", tax_id="B12345678")


@pytest.fixture
def supplier(ledger: Ledger) -> Party:
    return ledger.parties.create_supplier("S001", "Office Supplies SA")


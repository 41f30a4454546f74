"""Ledger facade wiring the services to one store."""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING

from ledger_engine.config import LedgerConfig
from ledger_engine.services import (
    AccountLedger,
    CurrencyConverter,
    FiscalYearManager,
    InvoiceLifecycle,
    JournalEntryEngine,
    PartyDirectory,
    ReportService,
    TemplateService,
)
from ledger_engine.storage import JsonFileStore, LedgerStore

if TYPE_CHECKING:
    from types import TracebackType

logger = logging.getLogger(__name__)


class Ledger:
    """A double-entry ledger.

    Every service shares the same store and configuration, so an invoice
    posted through ``invoices`` moves the balances seen by ``accounts`` and
    ``reports``.

    Usage (in memory):
        ledger = Ledger.in_memory()
        ledger.initialize()
        entry = ledger.journal.create(date.today(), "Owner contribution")

    Usage (file-backed, context manager flushes on success):
        with Ledger.open(Path("books.json")) as ledger:
            ledger.invoices.post(invoice_id)
    """

    def __init__(self, store: LedgerStore, config: LedgerConfig | None = None) -> None:
        """Wire the services.

        Args:
            store: Persistence shared by every service
            config: Default accounts and rounding (defaults if not provided)
        """
        self.store = store
        self.config = config or LedgerConfig()

        self.accounts = AccountLedger(store, self.config)
        self.fiscal_years = FiscalYearManager(store, self.config)
        self.currencies = CurrencyConverter(store, self.config)
        self.parties = PartyDirectory(store, self.config)
        self.journal = JournalEntryEngine(store, self.config, self.accounts, self.fiscal_years)
        self.invoices = InvoiceLifecycle(
            store, self.config, self.accounts, self.journal, self.parties
        )
        self.templates = TemplateService(store, self.config, self.accounts, self.journal)
        self.reports = ReportService(store, self.config)

    @classmethod
    def in_memory(cls, config: LedgerConfig | None = None) -> Ledger:
        return cls(LedgerStore(), config)

    @classmethod
    def open(
        cls,
        path: Path | None = None,
        config: LedgerConfig | None = None,
        *,
        autoflush: bool = False,
    ) -> Ledger:
        """Open (or start) a ledger file.

        Args:
            path: Ledger file (default: $XDG_DATA_HOME/ledger-engine/ledger.json)
            config: Ledger configuration (default: ``LedgerConfig.load()``)
            autoflush: Write the file after every committed operation
        """
        return cls(JsonFileStore(path, autoflush=autoflush), config or LedgerConfig.load())

    def initialize(self, today: date | None = None) -> None:
        """Seed the default chart of accounts and the current fiscal year."""
        with self.store.transaction():
            self.accounts.initialize_default_accounts()
            self.fiscal_years.initialize_current_year(today)
        logger.info("Ledger initialized")

    def flush(self) -> None:
        self.store.flush()

    def __enter__(self) -> Ledger:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Flush on a clean exit; leave the file untouched after an error."""
        if exc_type is None:
            self.flush()


def build_ledger(config: LedgerConfig | None = None, store: LedgerStore | None = None) -> Ledger:
    """Assemble a ledger from explicit collaborators (in-memory store by default)."""
    return Ledger(store or LedgerStore(), config)

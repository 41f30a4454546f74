"""In-memory ledger store with a snapshot-based unit of work."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from ledger_engine.storage.repositories import (
    AccountRepository,
    CurrencyRepository,
    FiscalYearRepository,
    InvoiceRepository,
    JournalEntryRepository,
    PartyRepository,
    TemplateRepository,
)
from ledger_engine.storage.snapshot import LedgerSnapshot

logger = logging.getLogger(__name__)


class LedgerStore:
    """Persistence handle shared by every ledger service.

    Holds one repository per entity plus named sequences. Reads and writes
    share one re-entrant lock, and ``transaction()`` holds it for the whole
    block, so other threads never see a half-applied unit of work. If the
    block raises, every repository and sequence is put back exactly as it was.

    Usage:
        store = LedgerStore()
        with store.transaction():
            store.accounts.update(cash)
            store.journal_entries.update(entry)
    """

    def __init__(self) -> None:
        self.lock = threading.RLock()
        self._depth = 0
        self.sequences: dict[str, int] = {}

        self.accounts = AccountRepository(self)
        self.journal_entries = JournalEntryRepository(self)
        self.invoices = InvoiceRepository(self)
        self.fiscal_years = FiscalYearRepository(self)
        self.currencies = CurrencyRepository(self)
        self.parties = PartyRepository(self)
        self.templates = TemplateRepository(self)

    @property
    def _repositories(self) -> dict[str, Any]:
        return {
            "accounts": self.accounts,
            "journal_entries": self.journal_entries,
            "invoices": self.invoices,
            "fiscal_years": self.fiscal_years,
            "currencies": self.currencies,
            "parties": self.parties,
            "templates": self.templates,
        }

    @property
    def in_transaction(self) -> bool:
        return self._depth > 0

    def next_value(self, sequence: str) -> int:
        """Allocate the next value of a named sequence (starting at 1)."""
        with self.lock:
            value = self.sequences.get(sequence, 0) + 1
            self.sequences[sequence] = value
            return value

    @contextmanager
    def transaction(self) -> Iterator[LedgerStore]:
        """Run a block as one atomic unit of work.

        Nested calls join the outermost transaction; only the outermost one
        snapshots and rolls back.
        """
        with self.lock:
            if self._depth:
                self._depth += 1
                try:
                    yield self
                finally:
                    self._depth -= 1
                return

            saved = self._capture()
            self._depth = 1
            try:
                yield self
            except BaseException:
                self._restore(saved)
                logger.debug("Transaction rolled back")
                raise
            finally:
                self._depth = 0
            self.on_commit()

    def on_commit(self) -> None:
        """Called after the outermost transaction commits."""

    def flush(self) -> None:
        """Write pending state to durable storage (no-op in memory)."""

    def _capture(self) -> dict[str, Any]:
        state: dict[str, Any] = {name: repo.capture() for name, repo in self._repositories.items()}
        state["sequences"] = dict(self.sequences)
        return state

    def _restore(self, state: dict[str, Any]) -> None:
        for name, repo in self._repositories.items():
            repo.restore(state[name])
        self.sequences = state["sequences"]

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def export_snapshot(self) -> LedgerSnapshot:
        """Return every record and sequence as a serializable snapshot."""
        with self.lock:
            return LedgerSnapshot(
                accounts=self.accounts.find_all(),
                journal_entries=self.journal_entries.find_all(),
                invoices=self.invoices.find_all(),
                fiscal_years=self.fiscal_years.find_all(),
                currencies=self.currencies.find_all(),
                parties=self.parties.find_all(),
                templates=self.templates.find_all(),
                sequences=dict(self.sequences),
            )

    def import_snapshot(self, snapshot: LedgerSnapshot) -> None:
        """Replace the whole store content with a snapshot."""
        with self.lock:
            for name, repo in self._repositories.items():
                repo.load(getattr(snapshot, name))
            self.sequences = dict(snapshot.sequences)

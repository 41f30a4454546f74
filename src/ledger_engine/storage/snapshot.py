"""Serializable snapshot of a ledger store."""

from pydantic import BaseModel, Field

from ledger_engine.models import (
    Account,
    Currency,
    FiscalYear,
    Invoice,
    JournalEntry,
    JournalEntryTemplate,
    Party,
)

SNAPSHOT_FORMAT = 1


class LedgerSnapshot(BaseModel):
    """Every record of a ledger, as written to and read from a ledger file."""

    format: int = Field(default=SNAPSHOT_FORMAT, description="Snapshot layout version")
    accounts: list[Account] = Field(default_factory=list)
    journal_entries: list[JournalEntry] = Field(default_factory=list)
    invoices: list[Invoice] = Field(default_factory=list)
    fiscal_years: list[FiscalYear] = Field(default_factory=list)
    currencies: list[Currency] = Field(default_factory=list)
    parties: list[Party] = Field(default_factory=list)
    templates: list[JournalEntryTemplate] = Field(default_factory=list)
    sequences: dict[str, int] = Field(default_factory=dict)

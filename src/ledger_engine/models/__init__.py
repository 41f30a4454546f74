"""Ledger records.

Plain dataclasses. Identity (``id``), optimistic ``version`` and timestamps
are ordinary fields maintained by the storage layer.
"""

from ledger_engine.models.accounts import Account, AccountNode, AccountType
from ledger_engine.models.currencies import Currency
from ledger_engine.models.fiscal import FiscalYear
from ledger_engine.models.invoices import Invoice, InvoiceLine, InvoiceStatus, InvoiceType
from ledger_engine.models.journal import JournalEntry, JournalEntryLine
from ledger_engine.models.parties import Party, PartyKind
from ledger_engine.models.templates import JournalEntryTemplate

__all__ = [
    # Accounts
    "Account",
    "AccountNode",
    "AccountType",
    # Journal
    "JournalEntry",
    "JournalEntryLine",
    # Invoices
    "Invoice",
    "InvoiceLine",
    "InvoiceStatus",
    "InvoiceType",
    # Periods and currencies
    "Currency",
    "FiscalYear",
    # Parties and templates
    "JournalEntryTemplate",
    "Party",
    "PartyKind",
]

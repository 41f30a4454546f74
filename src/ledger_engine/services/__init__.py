"""Ledger services, one per aggregate."""

from ledger_engine.services.accounts import AccountLedger
from ledger_engine.services.currencies import CurrencyConverter
from ledger_engine.services.fiscal import FiscalYearManager
from ledger_engine.services.invoices import InvoiceLifecycle
from ledger_engine.services.journal import JournalEntryEngine
from ledger_engine.services.parties import PartyDirectory
from ledger_engine.services.reports import ReportService
from ledger_engine.services.templates import TemplateService

__all__ = [
    "AccountLedger",
    "CurrencyConverter",
    "FiscalYearManager",
    "InvoiceLifecycle",
    "JournalEntryEngine",
    "PartyDirectory",
    "ReportService",
    "TemplateService",
]

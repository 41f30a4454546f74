"""Double-entry ledger engine.

Chart of accounts, journal entries, invoices, fiscal years and currency
conversion over a pluggable store.

Example:
    from datetime import date
    from ledger_engine import JournalEntryBuilder, Ledger

    ledger = Ledger.in_memory()
    ledger.initialize()

    # Record and post a balanced entry
    draft = (
        JournalEntryBuilder(date(2025, 1, 15), "Owner contribution")
        .debit("1.1.01", "1000.00")
        .credit("3.1", "1000.00")
        .build()
    )
    entry = ledger.journal.record(draft, post=True)

    # Invoice a customer
    customer = ledger.parties.create_customer("C001", "Acme Ltd")
    invoice = ledger.invoices.create_sale_invoice(customer, date(2025, 1, 20))
    ledger.invoices.add_line(invoice, "Consulting", 2, "100.00", tax_rate=21)
    ledger.invoices.post(invoice.id)

    # Persist to a file
    with Ledger.open(Path("books.json")) as ledger:
        ...
"""

from ledger_engine.builders import JournalEntryBuilder, JournalEntryDraft
from ledger_engine.config import LedgerConfig
from ledger_engine.exceptions import (
    AlreadyPostedError,
    ConsistencyError,
    DuplicateError,
    ErrorKind,
    LedgerError,
    MissingDefaultAccountError,
    NotFoundError,
    PeriodClosedError,
    StaleVersionError,
    StateConflictError,
    StorageError,
    UnbalancedEntryError,
    ValidationError,
)
from ledger_engine.ledger import Ledger, build_ledger
from ledger_engine.models import (
    Account,
    AccountType,
    Currency,
    FiscalYear,
    Invoice,
    InvoiceStatus,
    InvoiceType,
    JournalEntry,
    JournalEntryLine,
    JournalEntryTemplate,
    Party,
    PartyKind,
)
from ledger_engine.retry import retry_on_conflict

__version__ = "0.1.0"

__all__ = [
    # Main entry points
    "Ledger",
    "LedgerConfig",
    "build_ledger",
    "retry_on_conflict",
    # Builders
    "JournalEntryBuilder",
    "JournalEntryDraft",
    # Records
    "Account",
    "AccountType",
    "Currency",
    "FiscalYear",
    "Invoice",
    "InvoiceStatus",
    "InvoiceType",
    "JournalEntry",
    "JournalEntryLine",
    "JournalEntryTemplate",
    "Party",
    "PartyKind",
    # Exceptions
    "AlreadyPostedError",
    "ConsistencyError",
    "DuplicateError",
    "ErrorKind",
    "LedgerError",
    "MissingDefaultAccountError",
    "NotFoundError",
    "PeriodClosedError",
    "StaleVersionError",
    "StateConflictError",
    "StorageError",
    "UnbalancedEntryError",
    "ValidationError",
]

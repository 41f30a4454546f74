"""Default chart of accounts."""

from ledger_engine.models import AccountType

# =============================================================================
# DEFAULT CHART OF ACCOUNTS
# =============================================================================
# Seeded by AccountLedger.initialize_default_accounts() on an empty ledger.
# Codes are dotted; the parent of "1.1.01" is "1.1", whose parent is "1".
# The invoice defaults in LedgerConfig point at accounts in this chart.
# =============================================================================

DEFAULT_CHART: list[tuple[str, str, AccountType]] = [
    # -------------------------------------------------------------------------
    # ASSETS - What you own (Debit increases)
    # -------------------------------------------------------------------------
    ("1", "ASSETS", AccountType.ASSET),
    ("1.1", "Current Assets", AccountType.ASSET),
    ("1.1.01", "Cash", AccountType.ASSET),
    ("1.1.02", "Banks", AccountType.ASSET),
    ("1.1.03", "Accounts Receivable", AccountType.ASSET),
    ("1.2", "Non-Current Assets", AccountType.ASSET),
    # -------------------------------------------------------------------------
    # LIABILITIES - What you owe (Credit increases)
    # -------------------------------------------------------------------------
    ("2", "LIABILITIES", AccountType.LIABILITY),
    ("2.1", "Current Liabilities", AccountType.LIABILITY),
    ("2.1.01", "Accounts Payable", AccountType.LIABILITY),
    ("2.1.02", "Taxes Payable", AccountType.LIABILITY),
    # -------------------------------------------------------------------------
    # EQUITY - Owner's stake (Credit increases)
    # -------------------------------------------------------------------------
    ("3", "EQUITY", AccountType.EQUITY),
    ("3.1", "Share Capital", AccountType.EQUITY),
    ("3.2", "Retained Earnings", AccountType.EQUITY),
    # -------------------------------------------------------------------------
    # INCOME - Money earned (Credit increases)
    # -------------------------------------------------------------------------
    ("4", "INCOME", AccountType.INCOME),
    ("4.1", "Operating Income", AccountType.INCOME),
    ("4.1.01", "Sales Revenue", AccountType.INCOME),
    # -------------------------------------------------------------------------
    # EXPENSES - Money spent (Debit increases)
    # -------------------------------------------------------------------------
    ("5", "EXPENSES", AccountType.EXPENSE),
    ("5.1", "Operating Expenses", AccountType.EXPENSE),
    ("5.1.01", "Payroll Expenses", AccountType.EXPENSE),
    ("5.1.02", "Administrative Expenses", AccountType.EXPENSE),
]


def parent_code(code: str) -> str | None:
    """Return the parent code in the dotted hierarchy, or None for a root."""
    parts = code.split(".")
    if len(parts) <= 1:
        return None
    return ".".join(parts[:-1])

"""Journal entry template records."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass
class JournalEntryTemplate:
    """A reusable two-line entry (one debit account, one credit account)."""

    name: str
    debit_account_id: int
    credit_account_id: int
    description: str = ""
    default_amount: Decimal | None = None
    active: bool = True
    id: int | None = None
    version: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

"""Journal entry records."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal


@dataclass
class JournalEntryLine:
    """A single line in a journal entry.

    Exactly one of ``debit`` / ``credit`` is non-zero; both are never negative.

    Attributes:
        account_id: The account being affected
        debit: Debit amount (zero for a credit line)
        credit: Credit amount (zero for a debit line)
        memo: Optional note for this specific line
    """

    account_id: int
    debit: Decimal = Decimal(0)
    credit: Decimal = Decimal(0)
    memo: str = ""

    @property
    def is_debit(self) -> bool:
        """Return True if this is a debit line."""
        return self.debit > 0

    @property
    def is_credit(self) -> bool:
        """Return True if this is a credit line."""
        return self.credit > 0

    def swapped(self, memo: str | None = None) -> "JournalEntryLine":
        """Return a copy with debit and credit exchanged."""
        return JournalEntryLine(
            account_id=self.account_id,
            debit=self.credit,
            credit=self.debit,
            memo=self.memo if memo is None else memo,
        )


@dataclass
class JournalEntry:
    """A journal entry header with its ordered lines.

    Once ``posted`` is True the lines are frozen and the entry cannot be
    deleted; mistakes are corrected with a reversing entry.

    Attributes:
        entry_number: Sequential number allocated by the engine
        date: The transaction date
        description: A description of the transaction
        reference: Optional external reference (e.g., invoice number)
        lines: Ordered debit/credit lines
        posted: True once balances have been applied
        reversal_of: Id of the entry this one reverses, if any
    """

    entry_number: int
    date: date
    description: str
    reference: str | None = None
    lines: list[JournalEntryLine] = field(default_factory=list)
    posted: bool = False
    reversal_of: int | None = None
    id: int | None = None
    version: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def total_debit(self) -> Decimal:
        """Sum of all debit amounts."""
        return sum((line.debit for line in self.lines), Decimal(0))

    @property
    def total_credit(self) -> Decimal:
        """Sum of all credit amounts."""
        return sum((line.credit for line in self.lines), Decimal(0))

    @property
    def is_balanced(self) -> bool:
        """Check if debits equal credits (exact Decimal comparison)."""
        return self.total_debit == self.total_credit

    @property
    def imbalance(self) -> Decimal:
        """Return debit minus credit (zero when balanced)."""
        return self.total_debit - self.total_credit

    @property
    def account_ids(self) -> set[int]:
        """Return the ids of every account this entry touches."""
        return {line.account_id for line in self.lines}

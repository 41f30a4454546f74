"""Fluent builder for journal entries."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from ledger_engine.exceptions import ValidationError
from ledger_engine.money import ZERO, to_decimal

__all__ = [
    "DraftLine",
    "JournalEntryBuilder",
    "JournalEntryDraft",
]


@dataclass(frozen=True)
class DraftLine:
    """A line waiting to be recorded. ``account`` is a code or an id."""

    account: str | int
    debit: Decimal = ZERO
    credit: Decimal = ZERO
    memo: str = ""


@dataclass(frozen=True)
class JournalEntryDraft:
    """Everything needed to record a journal entry in one call."""

    date: date
    description: str
    reference: str | None = None
    lines: tuple[DraftLine, ...] = field(default_factory=tuple)

    @property
    def total_debit(self) -> Decimal:
        return sum((line.debit for line in self.lines), ZERO)

    @property
    def total_credit(self) -> Decimal:
        return sum((line.credit for line in self.lines), ZERO)

    @property
    def is_balanced(self) -> bool:
        return self.total_debit == self.total_credit


class JournalEntryBuilder:
    """Fluent builder for journal entries.

    Example:
        draft = (
            JournalEntryBuilder(date(2025, 1, 15), "Cash sale")
            .reference("TICKET-42")
            .debit("1.1.01", "100.00")
            .credit("4.1.01", "100.00")
            .build()
        )

        # Then record it with the engine:
        entry = ledger.journal.record(draft, post=True)
    """

    def __init__(self, entry_date: date, description: str) -> None:
        """Initialize builder with date and description.

        Args:
            entry_date: Transaction date
            description: Entry description
        """
        self._date = entry_date
        self._description = description
        self._reference: str | None = None
        self._lines: list[DraftLine] = []

    def reference(self, reference: str) -> "JournalEntryBuilder":
        """Set the external reference."""
        self._reference = reference
        return self

    def debit(
        self, account: str | int, amount: Decimal | int | str, memo: str = ""
    ) -> "JournalEntryBuilder":
        """Add a debit line."""
        self._lines.append(DraftLine(account, debit=self._amount(amount), memo=memo))
        return self

    def credit(
        self, account: str | int, amount: Decimal | int | str, memo: str = ""
    ) -> "JournalEntryBuilder":
        """Add a credit line."""
        self._lines.append(DraftLine(account, credit=self._amount(amount), memo=memo))
        return self

    @staticmethod
    def _amount(amount: Decimal | int | str) -> Decimal:
        value = to_decimal(amount)
        if value <= 0:
            raise ValidationError(f"Line amount must be positive: {value}", field="amount")
        return value

    def build(self) -> JournalEntryDraft:
        """Build the draft.

        Balance is not required here; the engine checks it when posting.

        Raises:
            ValidationError: If the description is blank or there are no lines
        """
        if not self._description or not self._description.strip():
            raise ValidationError("Journal entry description cannot be empty", field="description")
        if not self._lines:
            raise ValidationError("Journal entry needs at least one line", field="lines")

        return JournalEntryDraft(
            date=self._date,
            description=self._description.strip(),
            reference=self._reference,
            lines=tuple(self._lines),
        )

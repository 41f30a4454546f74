"""Fiscal year records."""

from dataclasses import dataclass
from datetime import date, datetime


@dataclass
class FiscalYear:
    """A fiscal period.

    At most one year is ``current`` at a time; that rule is kept by
    ``FiscalYearManager``, not by the record.
    """

    year: int
    start_date: date
    end_date: date
    closed: bool = False
    current: bool = False
    id: int | None = None
    version: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def contains(self, day: date) -> bool:
        """Inclusive bounds check."""
        return self.start_date <= day <= self.end_date

    @property
    def is_open(self) -> bool:
        return not self.closed

"""Fiscal year management."""

import logging
from datetime import date

from ledger_engine.exceptions import (
    DuplicateError,
    PeriodClosedError,
    StateConflictError,
    ValidationError,
)
from ledger_engine.models import FiscalYear
from ledger_engine.services.base import BaseService

logger = logging.getLogger(__name__)


class FiscalYearManager(BaseService):
    """Manages fiscal year lifecycle: creation, the current year, closing.

    Example:
        fy = ledger.fiscal_years.create(2025, date(2025, 1, 1), date(2025, 12, 31))
        ledger.fiscal_years.set_current(fy.id)
        ledger.fiscal_years.close(fy.id)
    """

    def create(self, year: int, start_date: date, end_date: date) -> FiscalYear:
        """Create a new, open, non-current fiscal year.

        Raises:
            ValidationError: If the end date is before the start date
            DuplicateError: If the year already exists
        """
        logger.info("Creating fiscal year: %s", year)

        if end_date < start_date:
            msg = f"Fiscal year {year} ends ({end_date}) before it starts ({start_date})"
            raise ValidationError(msg, field="end_date")

        with self.store.transaction():
            if self.store.fiscal_years.find_by_year(year) is not None:
                raise DuplicateError("FiscalYear", year)

            fiscal_year = FiscalYear(year=year, start_date=start_date, end_date=end_date)
            self.store.fiscal_years.save(fiscal_year)

        logger.info("Fiscal year %s created successfully", year)
        return fiscal_year

    def set_current(self, fiscal_year_id: int) -> FiscalYear:
        """Make a year current, clearing the flag on the previous holder.

        Raises:
            NotFoundError: If the year does not exist
            StateConflictError: If the year is closed
        """
        logger.info("Setting fiscal year %s as current", fiscal_year_id)

        with self.store.transaction():
            fiscal_year = self.get(fiscal_year_id)
            if fiscal_year.closed:
                msg = f"Fiscal year {fiscal_year.year} is closed and cannot be current"
                raise StateConflictError(msg)

            for holder in self.store.fiscal_years.find_all():
                if holder.current and holder.id != fiscal_year.id:
                    holder.current = False
                    self.store.fiscal_years.update(holder)

            if not fiscal_year.current:
                fiscal_year.current = True
                self.store.fiscal_years.update(fiscal_year)

        logger.info("Fiscal year %s is now current", fiscal_year.year)
        return fiscal_year

    def close(self, fiscal_year_id: int) -> FiscalYear:
        """Close a fiscal year.

        Once closed, no journal entry dated inside the year can be posted.

        Raises:
            StateConflictError: If the fiscal year is already closed
        """
        logger.info("Closing fiscal year: %s", fiscal_year_id)

        with self.store.transaction():
            fiscal_year = self.get(fiscal_year_id)
            if fiscal_year.closed:
                raise StateConflictError(f"Fiscal year {fiscal_year.year} is already closed")

            fiscal_year.closed = True
            fiscal_year.current = False
            self.store.fiscal_years.update(fiscal_year)

        logger.info("Fiscal year %s closed successfully", fiscal_year.year)
        return fiscal_year

    def reopen(self, fiscal_year_id: int) -> FiscalYear:
        """Re-open a closed fiscal year. The current flag is not restored.

        Raises:
            StateConflictError: If the fiscal year is not closed
        """
        logger.info("Re-opening fiscal year: %s", fiscal_year_id)

        with self.store.transaction():
            fiscal_year = self.get(fiscal_year_id)
            if not fiscal_year.closed:
                raise StateConflictError(f"Fiscal year {fiscal_year.year} is not closed")

            fiscal_year.closed = False
            self.store.fiscal_years.update(fiscal_year)

        logger.info("Fiscal year %s re-opened successfully", fiscal_year.year)
        return fiscal_year

    def delete(self, fiscal_year_id: int) -> None:
        logger.info("Deleting fiscal year: %s", fiscal_year_id)
        with self.store.transaction():
            fiscal_year = self.get(fiscal_year_id)
            self.store.fiscal_years.delete(fiscal_year)
        logger.info("Fiscal year %s deleted successfully", fiscal_year.year)

    def initialize_current_year(self, today: date | None = None) -> FiscalYear:
        """Ensure the calendar year of ``today`` exists.

        Creates it (January 1 to December 31) and makes it current when it is
        missing; an existing year is returned untouched.
        """
        today = today or date.today()
        year = today.year
        logger.info("Initializing current fiscal year: %s", year)

        existing = self.store.fiscal_years.find_by_year(year)
        if existing is not None:
            logger.debug("Fiscal year %s already exists", year)
            return existing

        with self.store.transaction():
            fiscal_year = self.create(year, date(year, 1, 1), date(year, 12, 31))
            fiscal_year = self.set_current(fiscal_year.id)
        logger.info("Fiscal year %s created and set as current", year)
        return fiscal_year

    # ------------------------------------------------------------------
    # Posting gate
    # ------------------------------------------------------------------

    def ensure_postable(self, day: date) -> None:
        """Raise ``PeriodClosedError`` if entries dated ``day`` cannot be posted.

        A date inside a closed year is never postable. A date outside every
        year is postable unless ``require_open_period`` is configured.
        """
        containing = self.store.fiscal_years.find_containing(day)
        closed = [fy for fy in containing if fy.closed]
        if closed:
            raise PeriodClosedError(f"Fiscal year {closed[0].year} is closed for {day}")
        if self.config.require_open_period and not containing:
            raise PeriodClosedError(f"No open fiscal year covers {day}")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def is_date_within(self, fiscal_year_id: int, day: date) -> bool:
        """Check if a date is within a fiscal year (inclusive bounds)."""
        return self.get(fiscal_year_id).contains(day)

    def get(self, fiscal_year_id: int) -> FiscalYear:
        return self.store.fiscal_years.get(fiscal_year_id)

    def find_by_id(self, fiscal_year_id: int) -> FiscalYear | None:
        return self.store.fiscal_years.find_by_id(fiscal_year_id)

    def find_by_year(self, year: int) -> FiscalYear | None:
        return self.store.fiscal_years.find_by_year(year)

    def find_current(self) -> FiscalYear | None:
        return self.store.fiscal_years.find_current()

    def find_all(self) -> list[FiscalYear]:
        return self.store.fiscal_years.find_all()

    def find_open(self) -> list[FiscalYear]:
        return self.store.fiscal_years.find_open()

    def find_for_date(self, day: date) -> FiscalYear | None:
        matches = self.store.fiscal_years.find_containing(day)
        return matches[0] if matches else None

    def find_current_or_most_recent(self) -> FiscalYear | None:
        """Return the current year, or the latest year if none is current."""
        current = self.find_current()
        if current is not None:
            return current
        years = self.find_all()
        return years[-1] if years else None

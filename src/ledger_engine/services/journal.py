"""Journal entry engine: creation, posting and reversal."""

import logging
from datetime import date
from decimal import Decimal

from ledger_engine.builders import JournalEntryDraft
from ledger_engine.exceptions import (
    AlreadyPostedError,
    ConsistencyError,
    NotFoundError,
    StateConflictError,
    UnbalancedEntryError,
    ValidationError,
)
from ledger_engine.models import Account, JournalEntry, JournalEntryLine
from ledger_engine.money import ZERO, to_decimal
from ledger_engine.services.accounts import AccountLedger, AccountRef
from ledger_engine.services.base import BaseService
from ledger_engine.services.fiscal import FiscalYearManager
from ledger_engine.storage.store import LedgerStore

logger = logging.getLogger(__name__)

ENTRY_SEQUENCE = "journal_entry"


class JournalEntryEngine(BaseService):
    """Creates, posts and reverses journal entries.

    An entry is a draft until ``post`` applies its lines to account balances
    and flips ``posted``; after that it is frozen. Corrections are made with
    ``reverse``, which records and posts a compensating entry and leaves the
    original untouched.
    """

    def __init__(
        self,
        store: LedgerStore,
        config,
        accounts: AccountLedger,
        fiscal_years: FiscalYearManager | None = None,
    ) -> None:
        super().__init__(store, config)
        self.accounts = accounts
        self.fiscal_years = fiscal_years

    # ------------------------------------------------------------------
    # Drafting
    # ------------------------------------------------------------------

    def create(
        self, entry_date: date, description: str, reference: str | None = None
    ) -> JournalEntry:
        """Create an empty draft entry with the next entry number."""
        logger.info("Creating journal entry: %s - %s", entry_date, description)
        if not description or not description.strip():
            raise ValidationError("Journal entry description cannot be empty", field="description")

        with self.store.transaction():
            entry = JournalEntry(
                entry_number=self.store.next_value(ENTRY_SEQUENCE),
                date=entry_date,
                description=description.strip(),
                reference=reference,
            )
            self.store.journal_entries.save(entry)

        logger.info("Journal entry created: #%s", entry.entry_number)
        return entry

    def add_line(
        self,
        entry: JournalEntry,
        account: AccountRef,
        debit: Decimal | int | str | None = None,
        credit: Decimal | int | str | None = None,
        memo: str = "",
    ) -> JournalEntry:
        """Append a debit or credit line to a draft entry.

        Raises:
            AlreadyPostedError: If the entry is posted
            ValidationError: Negative amounts, or both/neither side set
            NotFoundError: Unknown account
            StateConflictError: The account is inactive
            StaleVersionError: ``entry`` was modified since it was read
        """
        debit_amount = to_decimal(debit, field="debit")
        credit_amount = to_decimal(credit, field="credit")
        logger.debug(
            "Adding line to entry #%s: account=%s, debit=%s, credit=%s",
            entry.entry_number,
            account.code if isinstance(account, Account) else account,
            debit_amount,
            credit_amount,
        )

        if entry.posted:
            logger.error("Cannot add lines to posted entry #%s", entry.entry_number)
            raise AlreadyPostedError(entry.entry_number)
        _validate_amounts(debit_amount, credit_amount)

        with self.store.transaction():
            target = self.accounts.resolve(account)
            if not target.active:
                raise StateConflictError(f"Account {target.code} is inactive")

            entry.lines.append(
                JournalEntryLine(
                    account_id=target.id,
                    debit=debit_amount,
                    credit=credit_amount,
                    memo=memo,
                )
            )
            try:
                self.store.journal_entries.update(entry)
            except Exception:
                entry.lines.pop()
                raise

        return entry

    def record(self, draft: JournalEntryDraft, *, post: bool = False) -> JournalEntry:
        """Create an entry from a builder draft, optionally posting it.

        The whole operation is one unit of work: if posting fails, the draft
        entry is not kept either.
        """
        with self.store.transaction():
            entry = self.create(draft.date, draft.description, draft.reference)
            for line in draft.lines:
                entry = self.add_line(entry, line.account, line.debit, line.credit, line.memo)
            if post:
                entry = self.post(entry.id)
        return entry

    # ------------------------------------------------------------------
    # Posting
    # ------------------------------------------------------------------

    def post(self, entry_id: int) -> JournalEntry:
        """Apply an entry to account balances and freeze it.

        Every balance change and the ``posted`` flag are written in one
        transaction; on any failure nothing changes.

        Raises:
            NotFoundError: Unknown entry
            AlreadyPostedError: Entry already posted
            ConsistencyError: Entry has no lines
            UnbalancedEntryError: Total debit differs from total credit
            PeriodClosedError: Entry date is in a closed fiscal year
        """
        logger.info("Posting journal entry ID: %s", entry_id)

        with self.store.transaction():
            entry = self.get(entry_id)

            if entry.posted:
                logger.error("Entry #%s is already posted", entry.entry_number)
                raise AlreadyPostedError(entry.entry_number)

            if not entry.lines:
                logger.error("Entry #%s has no lines", entry.entry_number)
                raise ConsistencyError(f"Journal entry #{entry.entry_number} has no lines")

            if not entry.is_balanced:
                logger.error(
                    "Entry #%s is not balanced. Debit: %s, Credit: %s",
                    entry.entry_number,
                    entry.total_debit,
                    entry.total_credit,
                )
                raise UnbalancedEntryError(
                    entry.entry_number,
                    total_debit=entry.total_debit,
                    total_credit=entry.total_credit,
                )

            if self.fiscal_years is not None:
                self.fiscal_years.ensure_postable(entry.date)

            logger.debug("Updating account balances for entry #%s", entry.entry_number)
            for line in entry.lines:
                account = self.accounts.get(line.account_id)
                if line.debit:
                    account = self.accounts.debit(account, line.debit)
                if line.credit:
                    self.accounts.credit(account, line.credit)

            entry.posted = True
            self.store.journal_entries.update(entry)

        logger.info("Journal entry #%s posted successfully", entry.entry_number)
        return entry

    def reverse(
        self,
        entry_id: int,
        reversal_date: date | None = None,
        description: str | None = None,
    ) -> JournalEntry:
        """Post a compensating entry with every line's debit and credit swapped.

        The original entry keeps its lines and stays posted.

        Raises:
            NotFoundError: Unknown entry
            StateConflictError: Entry not posted, or already reversed
        """
        logger.info("Reversing journal entry ID: %s", entry_id)

        with self.store.transaction():
            original = self.get(entry_id)

            if not original.posted:
                logger.error("Cannot reverse unposted entry #%s", original.entry_number)
                raise StateConflictError(
                    f"Only posted entries can be reversed (entry #{original.entry_number})"
                )

            existing = self.store.journal_entries.find_reversal_of(original.id)
            if existing is not None:
                raise StateConflictError(
                    f"Entry #{original.entry_number} was already reversed "
                    f"by entry #{existing.entry_number}"
                )

            reversal = self.create(
                reversal_date or date.today(),
                description or f"Reversal of entry #{original.entry_number}",
                f"REV-{original.entry_number}",
            )
            # Lines are copied directly so reversals still work on accounts
            # deactivated after the original was posted.
            reversal.lines = [
                line.swapped(memo=f"Reversal: {line.memo}" if line.memo else "Reversal")
                for line in original.lines
            ]
            reversal.reversal_of = original.id
            self.store.journal_entries.update(reversal)
            reversal = self.post(reversal.id)

        logger.info(
            "Entry #%s reversed with new entry #%s",
            original.entry_number,
            reversal.entry_number,
        )
        return reversal

    def delete(self, entry_id: int) -> None:
        """Delete a draft entry together with its lines."""
        logger.info("Deleting journal entry ID: %s", entry_id)

        with self.store.transaction():
            entry = self.get(entry_id)
            if entry.posted:
                logger.error("Cannot delete posted entry #%s", entry.entry_number)
                raise AlreadyPostedError(entry.entry_number)
            self.store.journal_entries.delete(entry)

        logger.info("Journal entry #%s deleted", entry.entry_number)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @staticmethod
    def total_debit(entry: JournalEntry) -> Decimal:
        return entry.total_debit

    @staticmethod
    def total_credit(entry: JournalEntry) -> Decimal:
        return entry.total_credit

    @staticmethod
    def is_balanced(entry: JournalEntry) -> bool:
        return entry.is_balanced

    def get(self, entry_id: int) -> JournalEntry:
        entry = self.store.journal_entries.find_by_id(entry_id)
        if entry is None:
            logger.error("Journal entry not found: %s", entry_id)
            raise NotFoundError("JournalEntry", entry_id)
        return entry

    def find_by_id(self, entry_id: int) -> JournalEntry | None:
        logger.debug("Finding journal entry by ID: %s", entry_id)
        return self.store.journal_entries.find_by_id(entry_id)

    def find_by_number(self, entry_number: int) -> JournalEntry | None:
        return self.store.journal_entries.find_by_number(entry_number)

    def find_all(self) -> list[JournalEntry]:
        logger.debug("Retrieving all journal entries")
        return self.store.journal_entries.find_all()

    def find_by_date_range(self, start: date, end: date) -> list[JournalEntry]:
        logger.debug("Finding entries by date range: %s to %s", start, end)
        return self.store.journal_entries.find_by_date_range(start, end)

    def ledger_lines(
        self,
        account: AccountRef,
        start: date | None = None,
        end: date | None = None,
    ) -> list[tuple[JournalEntry, JournalEntryLine]]:
        """Return posted lines touching an account, oldest first."""
        target = self.accounts.resolve(account)
        logger.debug("Getting ledger for account %s from %s to %s", target.code, start, end)
        return self.store.journal_entries.find_lines_by_account(target.id, start, end)


def _validate_amounts(debit: Decimal, credit: Decimal) -> None:
    if debit < 0 or credit < 0:
        raise ValidationError("Debit and credit amounts cannot be negative", field="amount")
    if debit == ZERO and credit == ZERO:
        raise ValidationError("Line needs a debit or a credit amount", field="amount")
    if debit != ZERO and credit != ZERO:
        raise ValidationError("Line cannot have both a debit and a credit", field="amount")

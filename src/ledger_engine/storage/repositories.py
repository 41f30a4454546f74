"""Entity repositories with type-specific finders."""

from collections import defaultdict
from datetime import date

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
from ledger_engine.storage.base import Repository


class AccountRepository(Repository[Account]):
    """Accounts stored as an arena keyed by id.

    Children are never stored on the parent; a parent-id index answers
    ``find_children`` and ``has_children``.
    """

    entity = "Account"

    def __init__(self, store) -> None:
        self._by_code: dict[str, int] = {}
        self._children: defaultdict[int | None, set[int]] = defaultdict(set)
        super().__init__(store)

    def _index_insert(self, row: Account) -> None:
        self._by_code[row.code] = row.id
        self._children[row.parent_id].add(row.id)

    def _index_remove(self, row: Account) -> None:
        self._by_code.pop(row.code, None)
        self._children[row.parent_id].discard(row.id)

    def _clear_indexes(self) -> None:
        self._by_code.clear()
        self._children.clear()

    def find_by_code(self, code: str) -> Account | None:
        with self._store.lock:
            account_id = self._by_code.get(code)
            return self.find_by_id(account_id) if account_id is not None else None

    def find_by_type(self, account_type: AccountType) -> list[Account]:
        return self._select(lambda a: a.account_type == account_type, key=lambda a: a.code)

    def find_active(self) -> list[Account]:
        return self._select(lambda a: a.active, key=lambda a: a.code)

    def find_children(self, parent_id: int | None) -> list[Account]:
        with self._store.lock:
            ids = set(self._children.get(parent_id, ()))
            return self._select(lambda a: a.id in ids, key=lambda a: a.code)

    def find_roots(self) -> list[Account]:
        return self.find_children(None)

    def has_children(self, account_id: int) -> bool:
        with self._store.lock:
            return bool(self._children.get(account_id))

    def find_all(self) -> list[Account]:
        return self._select(lambda _: True, key=lambda a: a.code)


class JournalEntryRepository(Repository[JournalEntry]):
    entity = "JournalEntry"

    def find_by_number(self, entry_number: int) -> JournalEntry | None:
        return self._first(lambda e: e.entry_number == entry_number)

    def find_all(self) -> list[JournalEntry]:
        return self._select(lambda _: True, key=lambda e: e.entry_number)

    def find_reversal_of(self, entry_id: int) -> JournalEntry | None:
        return self._first(lambda e: e.reversal_of == entry_id)

    def find_by_date_range(self, start: date, end: date) -> list[JournalEntry]:
        return self._select(
            lambda e: start <= e.date <= end, key=lambda e: (e.date, e.entry_number)
        )

    def find_lines_by_account(
        self,
        account_id: int,
        start: date | None = None,
        end: date | None = None,
    ) -> list[tuple[JournalEntry, JournalEntryLine]]:
        """Return (entry, line) pairs of posted entries touching an account, oldest first."""
        entries = self._select(
            lambda e: e.posted
            and account_id in e.account_ids
            and (start is None or e.date >= start)
            and (end is None or e.date <= end),
            key=lambda e: (e.date, e.entry_number),
        )
        return [
            (entry, line)
            for entry in entries
            for line in entry.lines
            if line.account_id == account_id
        ]


class InvoiceRepository(Repository[Invoice]):
    entity = "Invoice"

    def find_by_number(self, number: str) -> Invoice | None:
        return self._first(lambda i: i.number == number)

    def find_by_status(self, status: InvoiceStatus) -> list[Invoice]:
        return self._select(lambda i: i.status == status)

    def find_by_type(self, invoice_type: InvoiceType) -> list[Invoice]:
        return self._select(lambda i: i.invoice_type == invoice_type)

    def find_by_date_range(self, start: date, end: date) -> list[Invoice]:
        return self._select(lambda i: start <= i.date <= end, key=lambda i: (i.date, i.id))


class FiscalYearRepository(Repository[FiscalYear]):
    entity = "FiscalYear"

    def find_by_year(self, year: int) -> FiscalYear | None:
        return self._first(lambda fy: fy.year == year)

    def find_current(self) -> FiscalYear | None:
        return self._first(lambda fy: fy.current)

    def find_open(self) -> list[FiscalYear]:
        return self._select(lambda fy: not fy.closed, key=lambda fy: fy.year)

    def find_all(self) -> list[FiscalYear]:
        return self._select(lambda _: True, key=lambda fy: fy.year)

    def find_containing(self, day: date) -> list[FiscalYear]:
        return self._select(lambda fy: fy.contains(day), key=lambda fy: fy.year)


class CurrencyRepository(Repository[Currency]):
    entity = "Currency"

    def find_by_code(self, code: str) -> Currency | None:
        return self._first(lambda c: c.code == code)

    def find_base(self) -> Currency | None:
        return self._first(lambda c: c.base_currency)

    def find_active(self) -> list[Currency]:
        return self._select(lambda c: c.active, key=lambda c: c.code)


class PartyRepository(Repository[Party]):
    entity = "Party"

    def find_by_code(self, kind: PartyKind, code: str) -> Party | None:
        return self._first(lambda p: p.kind == kind and p.code == code)

    def find_by_kind(self, kind: PartyKind, *, active_only: bool = False) -> list[Party]:
        return self._select(
            lambda p: p.kind == kind and (p.active or not active_only), key=lambda p: p.code
        )


class TemplateRepository(Repository[JournalEntryTemplate]):
    entity = "JournalEntryTemplate"

    def find_active(self) -> list[JournalEntryTemplate]:
        return self._select(lambda t: t.active, key=lambda t: t.name)

    def search_by_name(self, fragment: str) -> list[JournalEntryTemplate]:
        needle = fragment.lower()
        return self._select(lambda t: t.active and needle in t.name.lower(), key=lambda t: t.name)

"""Generic in-memory repository with optimistic versioning."""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, ClassVar, Generic, Protocol, TypeVar

from ledger_engine.exceptions import NotFoundError, StaleVersionError

if TYPE_CHECKING:
    from ledger_engine.storage.store import LedgerStore

logger = logging.getLogger(__name__)


class Record(Protocol):
    """Fields every stored record carries."""

    id: int | None
    version: int
    created_at: datetime | None
    updated_at: datetime | None


def utcnow() -> datetime:
    return datetime.now(UTC)


T = TypeVar("T", bound=Record)


class Repository(Generic[T]):
    """Stores records of one type keyed by id.

    Stored rows are private copies: callers always receive a copy from the
    finders and must hand it back to ``update`` to persist changes. Rows are
    replaced, never mutated in place, so a shallow copy of the row table is a
    complete snapshot for rollback.

    Every write bumps ``version``. Writing a record whose version differs
    from the stored one raises ``StaleVersionError``.
    """

    entity: ClassVar[str] = "Record"

    def __init__(self, store: LedgerStore) -> None:
        self._store = store
        self._rows: dict[int, T] = {}
        self._next_id = 1

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def save(self, record: T) -> T:
        """Insert a new record, assigning id, version and timestamps."""
        with self._store.lock:
            now = utcnow()
            record.id = self._next_id
            record.version = 1
            record.created_at = now
            record.updated_at = now
            self._next_id += 1
            stored = copy.deepcopy(record)
            self._rows[stored.id] = stored
            self._index_insert(stored)
            logger.debug("Saved %s %s", self.entity, record.id)
            return record

    def update(self, record: T) -> T:
        """Persist changes to an existing record.

        Raises:
            NotFoundError: If the record was never saved or has been deleted
            StaleVersionError: If the stored version moved on since ``record`` was read
        """
        with self._store.lock:
            current = self._current(record)
            record.version = current.version + 1
            record.updated_at = utcnow()
            stored = copy.deepcopy(record)
            self._index_remove(current)
            self._rows[stored.id] = stored
            self._index_insert(stored)
            logger.debug("Updated %s %s to version %s", self.entity, record.id, record.version)
            return record

    def delete(self, record: T) -> None:
        """Remove a record (version-checked)."""
        with self._store.lock:
            current = self._current(record)
            del self._rows[current.id]
            self._index_remove(current)
            logger.debug("Deleted %s %s", self.entity, record.id)

    def _current(self, record: T) -> T:
        if record.id is None or record.id not in self._rows:
            raise NotFoundError(self.entity, record.id)
        current = self._rows[record.id]
        if current.version != record.version:
            raise StaleVersionError(
                self.entity, record.id, expected=record.version, actual=current.version
            )
        return current

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def find_by_id(self, record_id: int) -> T | None:
        with self._store.lock:
            row = self._rows.get(record_id)
            return copy.deepcopy(row) if row is not None else None

    def get(self, record_id: int) -> T:
        """Like ``find_by_id`` but raises ``NotFoundError``."""
        row = self.find_by_id(record_id)
        if row is None:
            raise NotFoundError(self.entity, record_id)
        return row

    def find_all(self) -> list[T]:
        return self._select(lambda _: True)

    def count(self) -> int:
        with self._store.lock:
            return len(self._rows)

    def exists(self, record_id: int) -> bool:
        with self._store.lock:
            return record_id in self._rows

    def _select(
        self,
        predicate: Callable[[T], bool],
        *,
        key: Callable[[T], Any] | None = None,
    ) -> list[T]:
        with self._store.lock:
            rows = [row for row in self._rows.values() if predicate(row)]
            rows.sort(key=key or (lambda r: r.id))
            return [copy.deepcopy(row) for row in rows]

    def _first(self, predicate: Callable[[T], bool]) -> T | None:
        with self._store.lock:
            for row in self._rows.values():
                if predicate(row):
                    return copy.deepcopy(row)
            return None

    # ------------------------------------------------------------------
    # Secondary indexes and snapshots
    # ------------------------------------------------------------------

    def _index_insert(self, row: T) -> None:
        """Hook for subclasses maintaining secondary indexes."""

    def _index_remove(self, row: T) -> None:
        """Hook for subclasses maintaining secondary indexes."""

    def _clear_indexes(self) -> None:
        """Hook for subclasses maintaining secondary indexes."""

    def capture(self) -> tuple[dict[int, T], int]:
        return dict(self._rows), self._next_id

    def restore(self, state: tuple[dict[int, T], int]) -> None:
        rows, next_id = state
        self.load(rows.values(), next_id=next_id)

    def load(self, rows: Iterable[T], *, next_id: int | None = None) -> None:
        """Replace all rows (used by rollback and file stores)."""
        self._rows = {row.id: row for row in rows if row.id is not None}
        self._next_id = next_id or max(self._rows, default=0) + 1
        self._clear_indexes()
        for row in self._rows.values():
            self._index_insert(row)

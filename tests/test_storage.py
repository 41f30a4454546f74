"""Tests for the in-memory store and its unit of work."""

import threading
from decimal import Decimal

import pytest

from ledger_engine.exceptions import NotFoundError, StaleVersionError
from ledger_engine.models import Account, AccountType
from ledger_engine.storage import LedgerStore


@pytest.fixture
def store() -> LedgerStore:
    return LedgerStore()


def _cash(store: LedgerStore) -> Account:
    return store.accounts.save(Account("1.1.01", "Cash", AccountType.ASSET))


class TestRepository:
    """Tests for versioned repository writes."""

    def test_save_assigns_identity(self, store: LedgerStore) -> None:
        """Should assign id, version and timestamps."""
        account = _cash(store)

        assert account.id == 1
        assert account.version == 1
        assert account.created_at is not None
        assert account.created_at == account.updated_at

    def test_update_bumps_version(self, store: LedgerStore) -> None:
        """Should increment the version on every write."""
        account = _cash(store)
        account.name = "Petty Cash"

        store.accounts.update(account)

        assert account.version == 2
        assert store.accounts.get(account.id).name == "Petty Cash"

    def test_stale_write_rejected(self, store: LedgerStore) -> None:
        """Should refuse a write based on an outdated read."""
        account = _cash(store)
        first = store.accounts.get(account.id)
        second = store.accounts.get(account.id)
        first.name = "First"
        store.accounts.update(first)
        second.name = "Second"

        with pytest.raises(StaleVersionError):
            store.accounts.update(second)

        assert store.accounts.get(account.id).name == "First"

    def test_rows_are_private(self, store: LedgerStore) -> None:
        """Should not share objects between callers and storage."""
        account = _cash(store)
        account.balance = Decimal("10")

        assert store.accounts.get(account.id).balance == Decimal(0)

    def test_delete_and_get(self, store: LedgerStore) -> None:
        """Should raise not-found after delete."""
        account = _cash(store)

        store.accounts.delete(account)

        assert store.accounts.find_by_code("1.1.01") is None
        with pytest.raises(NotFoundError):
            store.accounts.get(account.id)

    def test_update_unsaved(self, store: LedgerStore) -> None:
        """Should refuse to update a record that was never saved."""
        with pytest.raises(NotFoundError):
            store.accounts.update(Account("9", "Nowhere", AccountType.ASSET))


class TestTransaction:
    """Tests for the unit of work."""

    def test_commits(self, store: LedgerStore) -> None:
        """Should keep writes made in a successful block."""
        with store.transaction():
            _cash(store)
            store.next_value("seq")

        assert store.accounts.count() == 1
        assert store.sequences == {"seq": 1}

    def test_rolls_back_everything(self, store: LedgerStore) -> None:
        """Should restore rows, indexes, ids and sequences on error."""
        existing = _cash(store)

        with pytest.raises(RuntimeError), store.transaction():
            existing.name = "Renamed"
            store.accounts.update(existing)
            store.accounts.save(Account("1.1.02", "Banks", AccountType.ASSET))
            store.next_value("seq")
            raise RuntimeError("boom")

        assert store.accounts.get(existing.id).name == "Cash"
        assert store.accounts.get(existing.id).version == 1
        assert store.accounts.find_by_code("1.1.02") is None
        assert store.sequences == {}
        assert store.accounts.save(Account("1.2", "Other", AccountType.ASSET)).id == 2

    def test_nested_joins_outer(self, store: LedgerStore) -> None:
        """Should roll back inner work when the outer block fails."""
        with pytest.raises(RuntimeError), store.transaction():
            with store.transaction():
                _cash(store)
            assert store.in_transaction
            raise RuntimeError("boom")

        assert store.accounts.count() == 0
        assert not store.in_transaction

    def test_on_commit_once(self, store: LedgerStore, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should call the commit hook only for the outermost block."""
        commits: list[int] = []
        monkeypatch.setattr(store, "on_commit", lambda: commits.append(1))

        with store.transaction(), store.transaction():
            _cash(store)

        assert commits == [1]


class TestSnapshot:
    """Tests for export/import."""

    def test_round_trip(self, store: LedgerStore) -> None:
        """Should rebuild an identical store from a snapshot."""
        _cash(store)
        store.next_value("journal_entry")

        other = LedgerStore()
        other.import_snapshot(store.export_snapshot())

        assert other.accounts.find_by_code("1.1.01").name == "Cash"
        assert other.sequences == {"journal_entry": 1}
        assert other.accounts.save(Account("1.2", "Other", AccountType.ASSET)).id == 2


class TestConcurrentReads:
    """Tests for readers on other threads while a transaction is open."""

    def test_reader_waits_for_commit(self, store: LedgerStore) -> None:
        """Should block readers until the open transaction commits."""
        _cash(store)
        inside = threading.Event()
        release = threading.Event()
        seen: list[Decimal] = []

        def write() -> None:
            with store.transaction():
                cash = store.accounts.find_by_code("1.1.01")
                cash.balance = Decimal("100.00")
                store.accounts.update(cash)
                inside.set()
                release.wait(5)

        def read() -> None:
            seen.append(store.accounts.find_by_code("1.1.01").balance)

        writer = threading.Thread(target=write)
        writer.start()
        assert inside.wait(5)

        reader = threading.Thread(target=read)
        reader.start()
        reader.join(0.2)
        assert reader.is_alive()

        release.set()
        writer.join(5)
        reader.join(5)

        assert seen == [Decimal("100.00")]

    def test_reader_never_sees_rolled_back_rows(self, store: LedgerStore) -> None:
        """Should only ever show readers committed state."""
        inside = threading.Event()
        release = threading.Event()
        counts: list[int] = []

        def write() -> None:
            try:
                with store.transaction():
                    _cash(store)
                    inside.set()
                    release.wait(5)
                    raise RuntimeError("abort")
            except RuntimeError:
                pass

        writer = threading.Thread(target=write)
        writer.start()
        assert inside.wait(5)

        reader = threading.Thread(target=lambda: counts.append(store.accounts.count()))
        reader.start()
        release.set()
        writer.join(5)
        reader.join(5)

        assert counts == [0]

"""Tests for the chart of accounts and balance bookkeeping."""

from decimal import Decimal

import pytest

from ledger_engine import Ledger
from ledger_engine.exceptions import (
    DuplicateError,
    ErrorKind,
    NotFoundError,
    StateConflictError,
    ValidationError,
)
from ledger_engine.models import Account, AccountType


class TestAccountType:
    """Tests for the debit/credit sign rule."""

    def test_increases_with_debit(self) -> None:
        """Should identify debit-increase types."""
        assert AccountType.ASSET.increases_with_debit
        assert AccountType.EXPENSE.increases_with_debit
        assert not AccountType.INCOME.increases_with_debit

    def test_increases_with_credit(self) -> None:
        """Should identify credit-increase types."""
        assert AccountType.LIABILITY.increases_with_credit
        assert AccountType.EQUITY.increases_with_credit
        assert AccountType.INCOME.increases_with_credit
        assert not AccountType.ASSET.increases_with_credit

    def test_balance_change(self) -> None:
        """Should sign movements by the type's normal side."""
        assert AccountType.ASSET.balance_change(Decimal("10"), Decimal("3")) == Decimal("7")
        assert AccountType.INCOME.balance_change(Decimal("10"), Decimal("3")) == Decimal("-7")


class TestCreateAccount:
    """Tests for AccountLedger.create_account."""

    def test_creates_root_account(self, empty_ledger: Ledger) -> None:
        """Should create a root account with zero balance at depth 1."""
        account = empty_ledger.accounts.create_account("1", "ASSETS", AccountType.ASSET)

        assert account.id is not None
        assert account.balance == Decimal(0)
        assert account.depth == 1
        assert account.parent_id is None
        assert account.active

    def test_creates_child_account(self, empty_ledger: Ledger) -> None:
        """Should link a child to its parent and compute depth."""
        parent = empty_ledger.accounts.create_account("1", "ASSETS", AccountType.ASSET)
        child = empty_ledger.accounts.create_account("1.1", "Current", AccountType.ASSET, parent)

        assert child.parent_id == parent.id
        assert child.depth == 2
        assert [a.code for a in empty_ledger.accounts.find_children(parent)] == ["1.1"]

    def test_accepts_parent_code(self, empty_ledger: Ledger) -> None:
        """Should resolve the parent from its code."""
        empty_ledger.accounts.create_account("1", "ASSETS", AccountType.ASSET)
        child = empty_ledger.accounts.create_account("1.1", "Current", AccountType.ASSET, "1")

        assert child.depth == 2

    def test_rejects_duplicate_code(self, ledger: Ledger) -> None:
        """Should raise a state conflict for a duplicate code."""
        with pytest.raises(DuplicateError) as exc_info:
            ledger.accounts.create_account("1.1.01", "Cash again", AccountType.ASSET)

        assert exc_info.value.kind == ErrorKind.STATE_CONFLICT

    @pytest.mark.parametrize("code", ["", "1..2", "A.1", "1.", ".1"])
    def test_rejects_malformed_code(self, empty_ledger: Ledger, code: str) -> None:
        """Should reject codes that are not dotted digits."""
        with pytest.raises(ValidationError):
            empty_ledger.accounts.create_account(code, "Bad", AccountType.ASSET)

    def test_rejects_blank_name(self, empty_ledger: Ledger) -> None:
        """Should reject an empty name."""
        with pytest.raises(ValidationError):
            empty_ledger.accounts.create_account("1", "  ", AccountType.ASSET)

    def test_rejects_type_mismatch_with_parent(self, ledger: Ledger) -> None:
        """Should require a child to share its parent's type."""
        with pytest.raises(ValidationError):
            ledger.accounts.create_account("1.1.99", "Odd", AccountType.INCOME, "1.1")

    def test_unknown_parent(self, empty_ledger: Ledger) -> None:
        """Should raise not-found for an unknown parent."""
        with pytest.raises(NotFoundError) as exc_info:
            empty_ledger.accounts.create_account("9.1", "Orphan", AccountType.ASSET, "9")

        assert exc_info.value.kind == ErrorKind.NOT_FOUND


class TestDefaultChart:
    """Tests for initialize_default_accounts."""

    def test_seeds_chart(self, ledger: Ledger) -> None:
        """Should create the default chart with hierarchy."""
        cash = ledger.accounts.get_by_code("1.1.01")
        current = ledger.accounts.get_by_code("1.1")

        assert cash.parent_id == current.id
        assert cash.depth == 3
        assert [a.code for a in ledger.accounts.find_roots()] == ["1", "2", "3", "4", "5"]

    def test_is_idempotent(self, ledger: Ledger) -> None:
        """Should skip seeding when accounts already exist."""
        count = ledger.accounts.count()

        assert ledger.accounts.initialize_default_accounts() == []
        assert ledger.accounts.count() == count

    def test_tree(self, ledger: Ledger) -> None:
        """Should return the chart as a forest ordered by code."""
        forest = ledger.accounts.tree()
        assets = forest[0]

        assert assets.account.code == "1"
        assert [n.account.code for n in assets.children] == ["1.1", "1.2"]
        assert [a.code for a in assets.walk()] == ["1", "1.1", "1.1.01", "1.1.02", "1.1.03", "1.2"]


class TestDeleteAccount:
    """Tests for hierarchy integrity on delete."""

    def test_deletes_leaf_with_zero_balance(self, ledger: Ledger) -> None:
        """Should delete a leaf account with zero balance."""
        account = ledger.accounts.get_by_code("1.1.02")

        ledger.accounts.delete_account(account.id)

        assert ledger.accounts.find_by_code("1.1.02") is None
        assert ledger.accounts.find_by_id(account.id) is None

    def test_rejects_account_with_children(self, ledger: Ledger) -> None:
        """Should refuse to delete a parent account."""
        parent = ledger.accounts.get_by_code("1.1")

        with pytest.raises(StateConflictError):
            ledger.accounts.delete_account(parent.id)

        assert ledger.accounts.find_by_code("1.1") is not None

    def test_rejects_account_with_balance(self, ledger: Ledger, cash: Account) -> None:
        """Should refuse to delete an account with a balance."""
        with ledger.store.transaction():
            ledger.accounts.debit(cash, Decimal("5.00"))

        with pytest.raises(StateConflictError):
            ledger.accounts.delete_account(cash.id)

    def test_unknown_account(self, ledger: Ledger) -> None:
        """Should raise not-found for an unknown id."""
        with pytest.raises(NotFoundError):
            ledger.accounts.delete_account(9999)


class TestUpdateAccount:
    """Tests for update_account."""

    def test_renames_account(self, ledger: Ledger, cash: Account) -> None:
        """Should persist a new name."""
        cash.name = "Petty Cash"

        ledger.accounts.update_account(cash)

        assert ledger.accounts.get_by_code("1.1.01").name == "Petty Cash"

    def test_rejects_balance_edit(self, ledger: Ledger, cash: Account) -> None:
        """Should refuse balance changes outside posting."""
        cash.balance = Decimal("1000")

        with pytest.raises(ValidationError):
            ledger.accounts.update_account(cash)

    def test_rejects_code_taken(self, ledger: Ledger, cash: Account) -> None:
        """Should refuse a code already used by another account."""
        cash.code = "1.1.02"

        with pytest.raises(DuplicateError):
            ledger.accounts.update_account(cash)


class TestBalanceBookkeeping:
    """Tests for debit/credit."""

    def test_debit_then_credit_restores_asset(self, ledger: Ledger, cash: Account) -> None:
        """Should return an asset to its original balance."""
        with ledger.store.transaction():
            cash = ledger.accounts.debit(cash, Decimal("40.00"))
            assert cash.balance == Decimal("40.00")
            cash = ledger.accounts.credit(cash, Decimal("40.00"))

        assert cash.balance == Decimal(0)

    def test_credit_then_debit_restores_income(self, ledger: Ledger, sales: Account) -> None:
        """Should return an income account to its original balance."""
        with ledger.store.transaction():
            sales = ledger.accounts.credit(sales, Decimal("25.50"))
            assert sales.balance == Decimal("25.50")
            sales = ledger.accounts.debit(sales, Decimal("25.50"))

        assert sales.balance == Decimal(0)

    def test_requires_transaction(self, ledger: Ledger, cash: Account) -> None:
        """Should refuse balance changes outside a transaction."""
        with pytest.raises(StateConflictError):
            ledger.accounts.debit(cash, Decimal("1"))

    def test_rejects_negative_amount(self, ledger: Ledger, cash: Account) -> None:
        """Should reject negative amounts."""
        with ledger.store.transaction(), pytest.raises(ValidationError):
            ledger.accounts.credit(cash, Decimal("-1"))


class TestActivation:
    """Tests for deactivate/activate and finders."""

    def test_deactivate_and_activate(self, ledger: Ledger, cash: Account) -> None:
        """Should toggle the active flag."""
        ledger.accounts.deactivate(cash.id)
        assert "1.1.01" not in [a.code for a in ledger.accounts.find_active()]

        ledger.accounts.activate(cash.id)
        assert ledger.accounts.get_by_code("1.1.01").active

    def test_find_by_type(self, ledger: Ledger) -> None:
        """Should return accounts of one type ordered by code."""
        income = ledger.accounts.find_by_type(AccountType.INCOME)

        assert [a.code for a in income] == ["4", "4.1", "4.1.01"]

    def test_search_by_name(self, ledger: Ledger) -> None:
        """Should match names case-insensitively."""
        assert [a.code for a in ledger.accounts.search_by_name("payable")] == ["2.1.01", "2.1.02"]

    def test_finders_return_copies(self, ledger: Ledger, cash: Account) -> None:
        """Should not let callers mutate stored rows."""
        cash.balance = Decimal("999")

        assert ledger.accounts.get(cash.id).balance == Decimal(0)

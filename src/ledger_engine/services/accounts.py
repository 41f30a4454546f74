"""Chart of accounts and balance bookkeeping."""

import logging
import re
from decimal import Decimal

from ledger_engine.chart import DEFAULT_CHART, parent_code
from ledger_engine.exceptions import (
    DuplicateError,
    NotFoundError,
    StateConflictError,
    ValidationError,
)
from ledger_engine.models import Account, AccountNode, AccountType
from ledger_engine.money import ZERO, to_decimal
from ledger_engine.services.base import BaseService

logger = logging.getLogger(__name__)

_CODE_PATTERN = re.compile(r"^[0-9]{1,10}(\.[0-9]{1,10})*$")

AccountRef = Account | int | str
"""An account given as a record, an id, or a code."""


class AccountLedger(BaseService):
    """Owns the chart of accounts and applies the debit/credit sign rule.

    Balances only move through ``debit`` and ``credit``, and those must run
    inside a store transaction (the journal engine opens one when posting).
    """

    # ------------------------------------------------------------------
    # Chart maintenance
    # ------------------------------------------------------------------

    def create_account(
        self,
        code: str,
        name: str,
        account_type: AccountType,
        parent: AccountRef | None = None,
        *,
        description: str = "",
    ) -> Account:
        """Create an account.

        Args:
            code: Unique dotted code (e.g., "1.1.01")
            name: Display name
            account_type: Account classification
            parent: Optional parent account (record, id or code)

        Raises:
            ValidationError: Malformed code, blank name, or type differs from parent
            DuplicateError: Code already in use
            NotFoundError: Parent does not exist
        """
        logger.info("Creating account: %s - %s", code, name)
        code = (code or "").strip()
        name = (name or "").strip()
        _validate_code(code)
        if not name:
            raise ValidationError("Account name cannot be empty", field="name")
        account_type = AccountType(account_type)

        with self.store.transaction():
            if self.store.accounts.find_by_code(code) is not None:
                logger.error("Account already exists with code: %s", code)
                raise DuplicateError("Account", code)

            parent_account = self.resolve(parent) if parent is not None else None
            if parent_account is not None and parent_account.account_type != account_type:
                msg = (
                    f"Account {code} is {account_type} but parent "
                    f"{parent_account.code} is {parent_account.account_type}"
                )
                raise ValidationError(msg, field="account_type")

            account = Account(
                code=code,
                name=name,
                account_type=account_type,
                parent_id=parent_account.id if parent_account else None,
                depth=parent_account.depth + 1 if parent_account else 1,
                balance=ZERO,
                active=True,
                description=description,
            )
            self.store.accounts.save(account)

        logger.info("Account created successfully: %s (ID: %s)", code, account.id)
        return account

    def update_account(self, account: Account) -> Account:
        """Persist name, code, description or active-flag changes.

        Hierarchy, type and balance cannot be edited here.
        """
        logger.info("Updating account: %s", account.code)
        _validate_code(account.code)
        if not account.name.strip():
            raise ValidationError("Account name cannot be empty", field="name")

        with self.store.transaction():
            stored = self.get(account.id)
            if (
                stored.account_type != account.account_type
                or stored.parent_id != account.parent_id
                or stored.depth != account.depth
            ):
                raise ValidationError("Account type and parent cannot be changed")
            if stored.balance != account.balance:
                raise ValidationError(
                    "Account balance can only change by posting journal entries",
                    field="balance",
                )
            other = self.store.accounts.find_by_code(account.code)
            if other is not None and other.id != account.id:
                raise DuplicateError("Account", account.code)
            self.store.accounts.update(account)
        return account

    def delete_account(self, account_id: int) -> None:
        """Delete a leaf account with a zero balance.

        Raises:
            NotFoundError: Unknown account
            StateConflictError: The account has children or a non-zero balance
        """
        logger.info("Deleting account with ID: %s", account_id)

        with self.store.transaction():
            account = self.get(account_id)

            if self.store.accounts.has_children(account_id):
                logger.error("Cannot delete account %s - has child accounts", account.code)
                msg = f"Cannot delete account {account.code} with child accounts"
                raise StateConflictError(msg)

            if account.balance != 0:
                logger.error("Cannot delete account %s - has balance", account.code)
                msg = f"Cannot delete account {account.code} with balance {account.balance}"
                raise StateConflictError(msg)

            self.store.accounts.delete(account)

        logger.info("Account deleted: %s", account.code)

    def deactivate(self, account_id: int) -> Account:
        """Mark an account inactive (soft state, the account is kept)."""
        logger.info("Deactivating account with ID: %s", account_id)
        return self._set_active(account_id, False)

    def activate(self, account_id: int) -> Account:
        logger.info("Activating account with ID: %s", account_id)
        return self._set_active(account_id, True)

    def _set_active(self, account_id: int, active: bool) -> Account:
        with self.store.transaction():
            account = self.get(account_id)
            account.active = active
            self.store.accounts.update(account)
        return account

    def initialize_default_accounts(self) -> list[Account]:
        """Seed the default chart of accounts on an empty ledger.

        Returns:
            The created accounts (empty if the chart already had accounts)
        """
        if self.store.accounts.count():
            logger.info("Chart of accounts already initialized, skipping")
            return []

        logger.info("Initializing default chart of accounts")
        created: list[Account] = []
        with self.store.transaction():
            for code, name, account_type in DEFAULT_CHART:
                created.append(self.create_account(code, name, account_type, parent_code(code)))
        logger.info("Default chart of accounts initialized successfully")
        return created

    # ------------------------------------------------------------------
    # Balance bookkeeping
    # ------------------------------------------------------------------

    def debit(self, account: Account, amount: Decimal | int | str) -> Account:
        """Debit an account: increases ASSET/EXPENSE, decreases the others."""
        return self._apply(account, debit=to_decimal(amount), credit=ZERO)

    def credit(self, account: Account, amount: Decimal | int | str) -> Account:
        """Credit an account: increases LIABILITY/EQUITY/INCOME, decreases the others."""
        return self._apply(account, debit=ZERO, credit=to_decimal(amount))

    def _apply(self, account: Account, *, debit: Decimal, credit: Decimal) -> Account:
        if debit < 0 or credit < 0:
            raise ValidationError("Debit and credit amounts cannot be negative", field="amount")
        if not self.store.in_transaction:
            raise StateConflictError("Balances can only change inside a posting transaction")

        account.balance += account.account_type.balance_change(debit, credit)
        self.store.accounts.update(account)
        logger.debug(
            "Updated account %s: debit=%s, credit=%s, balance=%s",
            account.code,
            debit,
            credit,
            account.balance,
        )
        return account

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def resolve(self, ref: AccountRef) -> Account:
        """Load an account from a record, an id, or a code."""
        if isinstance(ref, Account):
            if ref.id is None:
                raise NotFoundError("Account", ref.code)
            return self.get(ref.id)
        if isinstance(ref, int):
            return self.get(ref)
        return self.get_by_code(ref)

    def get(self, account_id: int) -> Account:
        return self.store.accounts.get(account_id)

    def find_by_id(self, account_id: int) -> Account | None:
        logger.debug("Finding account by ID: %s", account_id)
        return self.store.accounts.find_by_id(account_id)

    def find_by_code(self, code: str) -> Account | None:
        logger.debug("Finding account by code: %s", code)
        return self.store.accounts.find_by_code(code)

    def get_by_code(self, code: str) -> Account:
        account = self.find_by_code(code)
        if account is None:
            raise NotFoundError("Account", code)
        return account

    def find_all(self) -> list[Account]:
        return self.store.accounts.find_all()

    def find_by_type(self, account_type: AccountType) -> list[Account]:
        logger.debug("Finding accounts by type: %s", account_type)
        return self.store.accounts.find_by_type(AccountType(account_type))

    def find_active(self) -> list[Account]:
        return self.store.accounts.find_active()

    def find_roots(self) -> list[Account]:
        return self.store.accounts.find_roots()

    def find_children(self, parent: AccountRef) -> list[Account]:
        return self.store.accounts.find_children(self.resolve(parent).id)

    def tree(self) -> list[AccountNode]:
        """Return the chart as a forest, roots and children ordered by code."""

        def build(account: Account) -> AccountNode:
            children = self.store.accounts.find_children(account.id)
            return AccountNode(account=account, children=[build(c) for c in children])

        return [build(root) for root in self.find_roots()]

    def search_by_name(self, fragment: str) -> list[Account]:
        needle = fragment.lower()
        return [a for a in self.find_all() if needle in a.name.lower()]

    def count(self) -> int:
        return self.store.accounts.count()


def _validate_code(code: str) -> None:
    if not code:
        raise ValidationError("Account code cannot be empty", field="code")
    if not _CODE_PATTERN.match(code):
        msg = f"Account code must be dotted digits (e.g. 1.1.01): {code!r}"
        raise ValidationError(msg, field="code")

"""Chart of accounts records."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import StrEnum


class AccountType(StrEnum):
    """Classification of accounts in double-entry bookkeeping.

    Debit increases: ASSET, EXPENSE
    Credit increases: LIABILITY, EQUITY, INCOME
    """

    ASSET = "ASSET"
    LIABILITY = "LIABILITY"
    EQUITY = "EQUITY"
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"

    @property
    def increases_with_debit(self) -> bool:
        """Return True if debits increase balances of this type."""
        return self in (AccountType.ASSET, AccountType.EXPENSE)

    @property
    def increases_with_credit(self) -> bool:
        """Return True if credits increase balances of this type."""
        return not self.increases_with_debit

    def balance_change(self, debit: Decimal, credit: Decimal) -> Decimal:
        """Return the signed balance movement for a debit/credit pair.

        This is the only place the sign rule is written down.
        """
        if self.increases_with_debit:
            return debit - credit
        return credit - debit


@dataclass
class Account:
    """A node in the chart of accounts.

    Accounts form a forest: each node stores its ``parent_id`` and children
    are looked up through the repository's parent index.

    Attributes:
        code: Unique dotted code (e.g., "1.1.01")
        name: Display name
        account_type: The type classification (Asset, Liability, etc.)
        parent_id: Id of the parent account, or None for a root
        depth: Hierarchy level (1 for roots)
        balance: Current balance, signed by the type's normal side
        active: False once the account has been deactivated
    """

    code: str
    name: str
    account_type: AccountType
    parent_id: int | None = None
    depth: int = 1
    balance: Decimal = Decimal(0)
    active: bool = True
    description: str = ""
    id: int | None = None
    version: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_root(self) -> bool:
        """Return True if the account has no parent."""
        return self.parent_id is None

    @property
    def label(self) -> str:
        """Return "code - name" for display."""
        return f"{self.code} - {self.name}"

    def is_descendant_code_of(self, other: "Account") -> bool:
        """Check if this account's code sits below another's in the dotted hierarchy."""
        return self.code.startswith(other.code + ".")


@dataclass
class AccountNode:
    """An account with its children, as returned by ``AccountLedger.tree``."""

    account: Account
    children: list["AccountNode"] = field(default_factory=list)

    def walk(self) -> list[Account]:
        """Return this node and all descendants depth-first."""
        result = [self.account]
        for child in self.children:
            result.extend(child.walk())
        return result

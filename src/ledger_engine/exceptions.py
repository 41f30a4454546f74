"""Typed exceptions for the ledger engine.

Every error carries an ``ErrorKind`` tag so callers can branch on the kind
of failure without catching individual subclasses:

    try:
        ledger.journal.post(entry.id)
    except LedgerError as e:
        match e.kind:
            case ErrorKind.STATE_CONFLICT:
                ...  # offer a reversal instead of an edit
            case ErrorKind.CONSISTENCY:
                ...
"""

from enum import StrEnum


class ErrorKind(StrEnum):
    """Error taxonomy shared by every ledger operation."""

    VALIDATION = "validation"
    STATE_CONFLICT = "state_conflict"
    NOT_FOUND = "not_found"
    CONSISTENCY = "consistency"


class LedgerError(Exception):
    """Base exception for all ledger engine errors."""

    kind: ErrorKind = ErrorKind.CONSISTENCY

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(LedgerError):
    """Malformed or out-of-range input, detected before any mutation."""

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, *, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


class StateConflictError(LedgerError):
    """Operation is not allowed in the aggregate's current state."""

    kind = ErrorKind.STATE_CONFLICT


class NotFoundError(LedgerError):
    """A referenced id or code does not exist."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, entity: str, key: object) -> None:
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} not found: {key}")


class ConsistencyError(LedgerError):
    """The operation would break a ledger invariant and was rolled back."""

    kind = ErrorKind.CONSISTENCY


class DuplicateError(StateConflictError):
    """A record with the same unique key already exists."""

    def __init__(self, entity: str, key: object) -> None:
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} already exists: {key}")


class AlreadyPostedError(StateConflictError):
    """Journal entry has been posted and can no longer change."""

    def __init__(self, entry_number: int) -> None:
        self.entry_number = entry_number
        super().__init__(f"Journal entry #{entry_number} is already posted")


class PeriodClosedError(StateConflictError):
    """Posting date falls in a closed (or missing) fiscal period."""


class UnbalancedEntryError(ConsistencyError):
    """Total debit and total credit of an entry differ."""

    def __init__(self, entry_number: int, *, total_debit: object, total_credit: object) -> None:
        self.entry_number = entry_number
        self.total_debit = total_debit
        self.total_credit = total_credit
        super().__init__(
            f"Journal entry #{entry_number} is not balanced: "
            f"debit={total_debit}, credit={total_credit}"
        )


class MissingDefaultAccountError(ConsistencyError):
    """A default account needed to synthesize a journal entry is missing."""

    def __init__(self, role: str, code: str) -> None:
        self.role = role  # e.g., "receivables", "tax_payable"
        self.code = code
        super().__init__(f"Default {role} account not found: {code}")


class StaleVersionError(ConsistencyError):
    """A concurrent write changed the aggregate after it was read.

    Safe to retry after re-reading the aggregate.
    """

    def __init__(self, entity: str, key: object, *, expected: int, actual: int) -> None:
        self.entity = entity
        self.key = key
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"{entity} {key} was modified concurrently (version {expected}, stored {actual})"
        )


class StorageError(LedgerError):
    """Ledger file could not be read or decoded."""

    kind = ErrorKind.CONSISTENCY

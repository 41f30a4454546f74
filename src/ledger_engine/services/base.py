"""Base class for ledger services."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ledger_engine.config import LedgerConfig
    from ledger_engine.storage.store import LedgerStore


class BaseService:
    """Common state for ledger services.

    Services receive the store and configuration explicitly; there is no
    global database handle.
    """

    def __init__(self, store: "LedgerStore", config: "LedgerConfig") -> None:
        self.store = store
        self.config = config

"""Persistence collaborators for the ledger services."""

from ledger_engine.storage.base import Repository
from ledger_engine.storage.json_file import JsonFileStore
from ledger_engine.storage.snapshot import LedgerSnapshot
from ledger_engine.storage.store import LedgerStore

__all__ = ["JsonFileStore", "LedgerSnapshot", "LedgerStore", "Repository"]

"""Ledger store persisted to a single JSON file."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from ledger_engine.exceptions import StorageError
from ledger_engine.storage.snapshot import LedgerSnapshot
from ledger_engine.storage.store import LedgerStore

logger = logging.getLogger(__name__)


def _get_data_path() -> Path:
    """Get default ledger file path."""
    xdg_data = os.environ.get("XDG_DATA_HOME")
    base = Path(xdg_data) if xdg_data else Path.home() / ".local" / "share"
    return base / "ledger-engine" / "ledger.json"


class JsonFileStore(LedgerStore):
    """A ``LedgerStore`` loaded from and flushed to a JSON document.

    The file is rewritten as a whole: the snapshot is written to a sibling
    temp file and renamed over the original, so a crash mid-write leaves the
    previous version intact.

    Args:
        path: Ledger file (default: $XDG_DATA_HOME/ledger-engine/ledger.json)
        autoflush: Flush after every committed transaction
    """

    def __init__(self, path: Path | None = None, *, autoflush: bool = False) -> None:
        super().__init__()
        self.path = path or _get_data_path()
        self.autoflush = autoflush
        self.load()

    def load(self) -> bool:
        """Load the ledger file if it exists.

        Returns:
            True if a file was loaded, False if starting empty
        """
        if not self.path.exists():
            logger.debug("No ledger file at %s, starting empty", self.path)
            return False

        try:
            snapshot = LedgerSnapshot.model_validate_json(self.path.read_bytes())
        except PydanticValidationError as e:
            msg = f"Ledger file {self.path} is corrupt: {e.error_count()} invalid field(s)"
            raise StorageError(msg) from e

        self.import_snapshot(snapshot)
        logger.info("Loaded ledger from %s", self.path)
        return True

    def flush(self) -> None:
        """Write the whole ledger atomically."""
        with self.lock:
            payload = self.export_snapshot().model_dump_json(indent=2)
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            tmp_path.write_text(payload, encoding="utf-8")
            os.replace(tmp_path, self.path)
            logger.debug("Flushed ledger to %s", self.path)

    def on_commit(self) -> None:
        if self.autoflush:
            self.flush()

"""Persistence adapters for the ledger snapshot."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .exceptions import PersistenceError

__all__ = ["STORAGE_KEY", "JSONStorage", "MemoryStorage"]

logger = logging.getLogger(__name__)

# Versioned so a future schema can live beside older snapshots.
STORAGE_KEY = "expenseTrackerTransactions_v2"


class JSONStorage:
    """File-based storage of the ledger blob with crash-safe writes."""

    def __init__(self, base_path: Path, key: str = STORAGE_KEY) -> None:
        self._base_path = Path(base_path)
        try:
            self._base_path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise PersistenceError(f"Unable to create {self._base_path}") from exc
        self._key = key

    def read_blob(self) -> Optional[str]:
        path = self.path
        if not path.exists():
            return None
        try:
            with path.open("r", encoding="utf-8") as handle:
                return handle.read()
        except UnicodeDecodeError as exc:
            logger.warning("Stored transactions in %s are not UTF-8, resetting: %s", path, exc)
            return ""
        except OSError as exc:
            raise PersistenceError(f"Unable to read from {path}") from exc

    def write_blob(self, text: str) -> None:
        path = self.path
        temp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            with temp_path.open("w", encoding="utf-8") as handle:
                handle.write(text)
                handle.flush()
            # Use replace for atomic move on POSIX; ensures crash-safe persistence.
            temp_path.replace(path)
        except OSError as exc:
            raise PersistenceError(f"Unable to write to {path}") from exc

    @property
    def path(self) -> Path:
        return self._base_path / f"{self._key}.json"

    @property
    def base_path(self) -> Path:
        return self._base_path


class MemoryStorage:
    """Keeps the blob in memory; handy for tests and throwaway sessions."""

    def __init__(self, blob: Optional[str] = None) -> None:
        self.blob = blob
        self.writes = 0

    def read_blob(self) -> Optional[str]:
        return self.blob

    def write_blob(self, text: str) -> None:
        self.blob = text
        self.writes += 1

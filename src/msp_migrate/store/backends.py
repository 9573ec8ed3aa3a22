"""
Account Persistence Backends

The account collection is loaded and saved as a whole. Backends only know how
to read and write that collection; the store owns caching and locking.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any
from typing import Dict
from typing import List
from typing import Protocol
from typing import Union

from loguru import logger


class AccountBackend(Protocol):
    """Durable storage for the full account collection."""

    def load(self) -> List[Dict[str, Any]]: ...

    def save(self, records: List[Dict[str, Any]]) -> None: ...


class JsonFileBackend:
    """
    Accounts stored as a single JSON array on disk.

    Writes go to a temporary file in the same directory and are moved over the
    target, so a crash mid-write never leaves a truncated document.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self) -> List[Dict[str, Any]]:
        if not self.path.exists():
            logger.info("Accounts file not found, starting empty", path=str(self.path))
            return []
        with self.path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, list):
            raise ValueError(f"Accounts file {self.path} must contain a JSON array")
        return data

    def save(self, records: List[Dict[str, Any]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".accounts-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(records, f, indent=2)
            os.replace(tmp_path, self.path)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise
        logger.debug("Accounts file written", path=str(self.path), count=len(records))


class InMemoryBackend:
    """Backend kept in process memory. Used by tests and throwaway sessions."""

    def __init__(self, records: List[Dict[str, Any]] = None):
        self.records: List[Dict[str, Any]] = [dict(r) for r in (records or [])]
        self.load_count = 0
        self.save_count = 0

    def load(self) -> List[Dict[str, Any]]:
        self.load_count += 1
        return [dict(r) for r in self.records]

    def save(self, records: List[Dict[str, Any]]) -> None:
        self.save_count += 1
        self.records = [dict(r) for r in records]

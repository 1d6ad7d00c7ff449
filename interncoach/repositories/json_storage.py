"""
JSON-file persistence adapter.

The whole collection lives in one file holding a top-level array. Every
mutation is a read-modify-write of the full file, serialized by a per-store
lock so that two requests in the same process cannot lose each other's
changes. Nothing coordinates separate processes writing the same file.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator
import json
import logging
import os
import threading

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Base exception for the backing file."""


class StorageReadError(StorageError):
    """Raised when the store file cannot be read or is not a JSON array."""


class StorageWriteError(StorageError):
    """Raised when the store file cannot be written."""


class JsonInternshipStore:
    """Whole-file load/save helpers around a single JSON array."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._lock = threading.RLock()

    def ensure(self) -> None:
        """Create the parent directory and an empty array file on first run."""
        with self._lock:
            if self.path.exists():
                return
            self._write([])
            logger.info("Initialized empty store at %s", self.path)

    def load(self) -> list[dict]:
        with self._lock:
            if not self.path.exists():
                self.ensure()
                return []
            try:
                with self.path.open("r", encoding="utf-8") as f:
                    data = json.load(f)
            except (OSError, ValueError) as exc:
                logger.exception("Failed to read store %s", self.path)
                raise StorageReadError(f"cannot read {self.path}") from exc
            if not isinstance(data, list) or not all(isinstance(r, dict) for r in data):
                logger.error("Store %s does not hold a JSON array of objects", self.path)
                raise StorageReadError(f"{self.path} does not hold a JSON array of objects")
            return data

    def save(self, records: list[dict]) -> None:
        with self._lock:
            self._write(records)

    def clear(self) -> None:
        """Replace the collection with an empty array, whatever the file holds."""
        with self._lock:
            self._write([])

    @contextmanager
    def transaction(self) -> Iterator[list[dict]]:
        """
        Hold the lock across load -> mutate -> save.

        The caller mutates the yielded list in place. If the block raises,
        nothing is written.
        """
        with self._lock:
            records = self.load()
            yield records
            self._write(records)

    def _write(self, records: list[dict]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.exception("Failed to create store directory %s", self.path.parent)
            raise StorageWriteError(f"cannot create {self.path.parent}") from exc
        # Write to a sibling file then swap it in so readers never see half a file.
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            tmp_path.write_text(json.dumps(records, ensure_ascii=False, indent=2), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as exc:
            logger.exception("Failed to write store %s", self.path)
            try:
                tmp_path.unlink()
            except OSError:
                pass
            raise StorageWriteError(f"cannot write {self.path}") from exc

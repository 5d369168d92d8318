"""Mini README: Persistence backends for whole-document JSON storage.

Structure:
    * DocumentBackend - abstract load/save contract.
    * JsonFileBackend - reads and atomically rewrites a JSON file on disk.
    * InMemoryBackend - deep-copying fake used by unit tests.

Backends know nothing about ledger shapes. ``load`` returns ``None`` when no
document has been written yet, which callers treat as the creation case. A
file that exists but does not parse raises ``CorruptStoreError`` rather than
being mistaken for an empty store.
"""

from __future__ import annotations

import copy
import json
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

from ..errors import CorruptStoreError
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


class DocumentBackend(ABC):
    """Storage location for a single JSON document."""

    name: str = "document"

    @abstractmethod
    def load(self) -> Optional[Any]:
        """Return the parsed document or ``None`` when nothing is stored."""

    @abstractmethod
    def save(self, data: Any) -> None:
        """Replace the stored document with ``data``."""


class JsonFileBackend(DocumentBackend):
    """JSON file rewritten in full on every save."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self.name = self.path.name

    def load(self) -> Optional[Any]:
        if not self.path.exists():
            LOGGER.debug("Document %s not found; using empty default", self.path)
            return None
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as error:
            raise CorruptStoreError(f"Unable to read {self.name}: {error}") from error
        if not raw.strip():
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as error:
            LOGGER.error("Document %s is not valid JSON: %s", self.path, error)
            raise CorruptStoreError(f"Store {self.name} is corrupt: {error.msg}") from error

    def save(self, data: Any) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        handle, temp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent)
        )
        try:
            with os.fdopen(handle, "w", encoding="utf-8") as temp_file:
                json.dump(data, temp_file, indent=2, ensure_ascii=False)
            os.replace(temp_name, self.path)
        except BaseException:
            Path(temp_name).unlink(missing_ok=True)
            raise
        LOGGER.debug("Wrote document %s", self.path)


class InMemoryBackend(DocumentBackend):
    """Holds a deep copy of the document so callers cannot alias stored state."""

    def __init__(self, initial: Optional[Any] = None, *, name: str = "memory") -> None:
        self.name = name
        self._data = copy.deepcopy(initial)
        self.save_count = 0

    def load(self) -> Optional[Any]:
        return copy.deepcopy(self._data)

    def save(self, data: Any) -> None:
        self._data = copy.deepcopy(data)
        self.save_count += 1

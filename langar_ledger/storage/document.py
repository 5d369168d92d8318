"""Mini README: Lock-guarded read-modify-write access to one JSON document.

Structure:
    * JsonDocument - wraps a backend with a default value, an optional
      normaliser and a re-entrant lock.

Usage:
    ``with document.transaction() as data:`` loads the whole document, yields
    it for in-place mutation and persists it when the block exits cleanly. An
    exception inside the block discards the changes. The lock is held for the
    full load-mutate-persist sequence, so two requests touching the same
    document are serialised instead of silently overwriting each other.
"""

from __future__ import annotations

import copy
import threading
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional

from .backends import DocumentBackend
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


class JsonDocument:
    """A single logical store persisted as one JSON tree."""

    def __init__(
        self,
        backend: DocumentBackend,
        *,
        default: Callable[[], Any] = dict,
        normalise: Optional[Callable[[Any], Any]] = None,
    ) -> None:
        self.backend = backend
        self._default = default
        self._normalise = normalise
        self._lock = threading.RLock()

    @property
    def name(self) -> str:
        return self.backend.name

    def _load(self) -> Any:
        data = self.backend.load()
        if data is None:
            return self._default()
        if self._normalise is not None:
            data = self._normalise(data)
        return data

    def read(self) -> Any:
        """Return a private copy of the current document."""

        with self._lock:
            return copy.deepcopy(self._load())

    @contextmanager
    def transaction(self) -> Iterator[Any]:
        """Yield the loaded document and persist it if no error was raised."""

        with self._lock:
            data = self._load()
            yield data
            self.backend.save(data)
            LOGGER.debug("Persisted %s", self.name)

    def write(self, data: Any) -> None:
        """Replace the document wholesale."""

        with self._lock:
            self.backend.save(data)

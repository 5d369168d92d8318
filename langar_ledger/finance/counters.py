"""Mini README: The "additional" counters document.

Structure:
    * CounterBook - read the counters and record removed donation totals.

``donatedRemoved`` accumulates the money stripped from the donation ledger
when members are deleted. ``lastRemovalId`` is written in the same document
update so replaying a half-finished removal never counts it twice.
"""

from __future__ import annotations

from typing import Any, Dict

from ..logging_utils import get_logger
from ..storage import JsonDocument
from ..utils import coerce_number
from ..utils.keys import Number

LOGGER = get_logger(__name__)

DONATED_REMOVED = "donatedRemoved"
LAST_REMOVAL_ID = "lastRemovalId"


class CounterBook:
    def __init__(self, document: JsonDocument) -> None:
        self.document = document

    def snapshot(self) -> Dict[str, Any]:
        return self.document.read()

    @property
    def donated_removed(self) -> Number:
        return coerce_number(self.snapshot().get(DONATED_REMOVED, 0))

    def record_removed_donations(self, total: Number, removal_id: str) -> bool:
        """Add ``total`` to ``donatedRemoved`` once per ``removal_id``."""

        with self.document.transaction() as counters:
            if counters.get(LAST_REMOVAL_ID) == removal_id:
                LOGGER.warning("Removal %s already counted; skipping", removal_id)
                return False
            counters[DONATED_REMOVED] = coerce_number(counters.get(DONATED_REMOVED, 0)) + total
            counters[LAST_REMOVAL_ID] = removal_id
        LOGGER.info("donatedRemoved increased by %s (removal %s)", total, removal_id)
        return True

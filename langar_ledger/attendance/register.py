"""Mini README: Day-by-day attendance register.

Structure:
    * PRESENT - the only value ever stored for a roll number.
    * AttendanceRegister - mark/unmark presence on the attendance tree.

The tree is ``year -> month name -> day -> roll number -> "present"``.
Absence is never written: a roll number is absent on a date exactly when its
key is missing from that date's node. Marking is therefore idempotent and
unmarking is a key deletion.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List

from ..errors import NotFoundError, ValidationError
from ..logging_utils import get_logger
from ..storage import JsonDocument, ensure_path, lookup_path
from ..utils import canonical_day, canonical_month, canonical_roll_no, canonical_year

LOGGER = get_logger(__name__)

PRESENT = "present"


def _roll_numbers(values: Any) -> List[str]:
    if not isinstance(values, (list, tuple)):
        raise ValidationError("Attendance must be a list of roll numbers")
    return [canonical_roll_no(value) for value in values]


class AttendanceRegister:
    """Mutations and queries over the attendance document."""

    def __init__(self, document: JsonDocument) -> None:
        self.document = document

    def snapshot(self) -> Dict[str, Any]:
        return self.document.read()

    def mark_present(self, year: Any, month: Any, day: Any, roll_numbers: Iterable[Any]) -> List[str]:
        """Record every listed roll number as present on the given date."""

        coordinates = [canonical_year(year), canonical_month(month), canonical_day(day)]
        rolls = _roll_numbers(roll_numbers)
        with self.document.transaction() as tree:
            day_node = ensure_path(tree, coordinates)
            for roll_no in rolls:
                day_node[roll_no] = PRESENT
        LOGGER.info("Marked %s present on %s", rolls, "/".join(coordinates))
        return rolls

    def unmark_present(self, year: Any, month: Any, day: Any, roll_numbers: Iterable[Any]) -> List[str]:
        """Remove presence for the listed roll numbers and return those removed.

        Roll numbers that were not marked are ignored, but at least one must
        have been present or the call fails with ``NotFoundError``.
        """

        coordinates = [canonical_year(year), canonical_month(month), canonical_day(day)]
        rolls = _roll_numbers(roll_numbers)
        with self.document.transaction() as tree:
            day_node = lookup_path(tree, coordinates)
            if not isinstance(day_node, dict):
                raise NotFoundError("No attendance data found for that date")
            deleted = [roll_no for roll_no in rolls if day_node.pop(roll_no, None) is not None]
            if not deleted:
                raise NotFoundError(
                    "None of the selected roll numbers were found in attendance data."
                )
        LOGGER.info("Removed attendance for %s on %s", deleted, "/".join(coordinates))
        return deleted

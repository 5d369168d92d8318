"""Mini README: Donation and fine running totals per member and month.

Structure:
    * ContributionKind - enum of the two totals kept for each member.
    * MemberRemovalResult - what ``remove_member`` stripped from the ledger.
    * read_leaf - tolerant reader for numeric (legacy) and object leaves.
    * DonationLedger - accumulate amounts and strip a member's entries.

Layout: ``year -> month -> roll number -> {"donation": n, "fine": n}``. Older
files store a bare number instead of the object; that number is read as the
donation total and upgraded to the object form the next time the member's
entry is written. Totals only ever grow through ``accumulate``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..errors import ValidationError
from ..logging_utils import get_logger
from ..storage import JsonDocument, ensure_path
from ..utils import (
    canonical_month,
    canonical_roll_no,
    canonical_year,
    coerce_number,
    parse_amount,
)
from ..utils.keys import Number

LOGGER = get_logger(__name__)


class ContributionKind(str, Enum):
    """Enumerate the running totals tracked for each member."""

    DONATION = "donation"
    FINE = "fine"

    @classmethod
    def from_str(cls, value: Optional[str]) -> "ContributionKind":
        """Coerce arbitrary casing into a valid kind; ``None`` means donation."""

        if value is None or value == "":
            return cls.DONATION
        try:
            normalised = value.strip().lower()
            return cls(normalised)
        except (ValueError, AttributeError) as error:
            raise ValidationError(
                f"Invalid type: {value}. Must be 'donation' or 'fine'."
            ) from error


def read_leaf(value: Any) -> Dict[str, Number]:
    """Return ``{"donation", "fine"}`` totals for a stored leaf of either shape."""

    if isinstance(value, bool):
        return {"donation": 0, "fine": 0}
    if isinstance(value, (int, float)):
        return {"donation": value, "fine": 0}
    if isinstance(value, dict):
        return {
            kind.value: coerce_number(value.get(kind.value, 0)) for kind in ContributionKind
        }
    return {"donation": 0, "fine": 0}


@dataclass(slots=True)
class MemberRemovalResult:
    """Entries stripped from the ledger for one roll number."""

    roll_no: str
    total: Number = 0
    entries: List[Tuple[str, str, str]] = field(default_factory=list)


class DonationLedger:
    """Accumulate donations and fines on the donation document."""

    def __init__(self, document: JsonDocument) -> None:
        self.document = document

    def snapshot(self) -> Dict[str, Any]:
        return self.document.read()

    def accumulate(
        self,
        year: Any,
        month: Any,
        roll_no: Any,
        amount: Any,
        kind: Optional[str] = None,
    ) -> Dict[str, Number]:
        """Add ``amount`` to the member's running total of ``kind`` and return the leaf."""

        year_key = canonical_year(year)
        month_key = canonical_month(month)
        roll_key = canonical_roll_no(roll_no)
        value = parse_amount(amount, minimum=0)
        contribution = ContributionKind.from_str(kind)

        with self.document.transaction() as tree:
            month_node = ensure_path(tree, [year_key, month_key])
            leaf = read_leaf(month_node.get(roll_key))
            leaf[contribution.value] = leaf[contribution.value] + value
            month_node[roll_key] = leaf
        LOGGER.info(
            "Recorded %s of %s for roll %s in %s %s (totals %s)",
            contribution.value,
            value,
            roll_key,
            month_key,
            year_key,
            leaf,
        )
        return dict(leaf)

    def remove_member(
        self,
        roll_no: Any,
        *,
        before_persist: Optional[Callable[[MemberRemovalResult], None]] = None,
    ) -> MemberRemovalResult:
        """Delete every entry for ``roll_no`` across all years and months.

        ``before_persist`` runs while the document lock is held, after the
        entries are removed in memory and before the document is written.
        Member removal uses it to journal the removed total.
        """

        roll_key = canonical_roll_no(roll_no)
        with self.document.transaction() as tree:
            result = self._collect(tree, roll_key)
            for year_key, month_key, stored_roll in result.entries:
                del tree[year_key][month_key][stored_roll]
            if before_persist is not None:
                before_persist(result)
        LOGGER.info(
            "Removed %s donation entries totalling %s for roll %s",
            len(result.entries),
            result.total,
            roll_key,
        )
        return result

    @staticmethod
    def _collect(tree: Dict[str, Any], roll_key: str) -> MemberRemovalResult:
        result = MemberRemovalResult(roll_no=roll_key)
        for year_key, months in tree.items():
            if not isinstance(months, dict):
                continue
            for month_key, rolls in months.items():
                if not isinstance(rolls, dict):
                    continue
                for stored_roll, leaf in rolls.items():
                    if _matches(stored_roll, roll_key):
                        totals = read_leaf(leaf)
                        result.total += totals["donation"] + totals["fine"]
                        result.entries.append((year_key, month_key, stored_roll))
        return result


def _matches(stored_roll: str, roll_key: str) -> bool:
    try:
        return canonical_roll_no(stored_roll) == roll_key
    except ValidationError:
        return False

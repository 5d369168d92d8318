"""Mini README: Soft-deleting a member and settling their donations.

Structure:
    * RemovalOutcome - what a removal changed, for the HTTP response.
    * MemberRemoval - journalled removal across three documents plus replay.

Removing a member touches the donation ledger, the counters document and the
roster. The steps run in a fixed order and each is idempotent:

    1. strip the member's donation entries; the journal (roll number, total,
       removal id) is written while the donation lock is held, before the
       stripped ledger is persisted;
    2. add the journalled total to ``donatedRemoved`` unless the counters
       already carry this removal id;
    3. blank the member's personal fields;
    4. clear the journal.

If the process stops part-way, ``recover`` replays steps 1-4 from the journal
and ends in the same state as an uninterrupted run.
"""

from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from ..errors import NotFoundError
from ..finance import CounterBook, DonationLedger, MemberRemovalResult
from ..logging_utils import get_logger
from ..storage import JsonDocument
from ..utils import canonical_roll_no
from ..utils.keys import Number
from .roster import Member, MemberRoster

LOGGER = get_logger(__name__)


@dataclass(slots=True)
class RemovalOutcome:
    removal_id: str
    roll_no: str
    removed_total: Number
    member: Optional[Member]


class MemberRemoval:
    """Coordinates the roster, donation ledger and counters for a soft delete."""

    def __init__(
        self,
        roster: MemberRoster,
        donations: DonationLedger,
        counters: CounterBook,
        journal: JsonDocument,
        *,
        id_factory: Callable[[], str] = lambda: uuid.uuid4().hex,
    ) -> None:
        self.roster = roster
        self.donations = donations
        self.counters = counters
        self.journal = journal
        self._id_factory = id_factory
        self._lock = threading.Lock()

    def pending(self) -> Optional[Dict[str, Any]]:
        """Return the outstanding journal entry, if a removal was interrupted."""

        entry = self.journal.read()
        return entry if isinstance(entry, dict) and entry.get("removal_id") else None

    def remove(self, roll_no: Any) -> RemovalOutcome:
        """Soft-delete ``roll_no`` and move its donations into ``donatedRemoved``."""

        key = canonical_roll_no(roll_no)
        with self._lock:
            self._replay_pending()
            self.roster.get(key)  # raises NotFoundError before anything is written

            removal_id = self._id_factory()

            def _journal(result: MemberRemovalResult) -> None:
                self.journal.write(
                    {"removal_id": removal_id, "roll_no": key, "total": result.total}
                )

            result = self.donations.remove_member(key, before_persist=_journal)
            return self._settle(removal_id, key, result.total)

    def recover(self) -> Optional[RemovalOutcome]:
        """Finish an interrupted removal, if any. Safe to call at every start-up."""

        with self._lock:
            return self._replay_pending()

    def _replay_pending(self) -> Optional[RemovalOutcome]:
        entry = self.pending()
        if entry is None:
            return None
        LOGGER.warning("Replaying interrupted removal %s for roll %s", entry["removal_id"], entry["roll_no"])
        self.donations.remove_member(entry["roll_no"])
        return self._settle(entry["removal_id"], entry["roll_no"], entry.get("total", 0))

    def _settle(self, removal_id: str, roll_no: str, total: Number) -> RemovalOutcome:
        self.counters.record_removed_donations(total, removal_id)
        try:
            member: Optional[Member] = self.roster.blank_member(roll_no)
        except NotFoundError:
            LOGGER.warning("Member %s vanished before removal %s completed", roll_no, removal_id)
            member = None
        self.journal.write({})
        LOGGER.info("Member %s removed; %s moved to donatedRemoved", roll_no, total)
        return RemovalOutcome(removal_id=removal_id, roll_no=roll_no, removed_total=total, member=member)

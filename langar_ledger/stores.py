"""Mini README: One place that builds every ledger store.

Structure:
    * DOCUMENT_FILES - file name of each logical document.
    * LedgerStores - the roster, ledgers, counters and removal workflow.

``LedgerStores.from_directory`` is used by the web application and the CLI
with the configured data directory. ``LedgerStores.in_memory`` builds the
same objects over ``InMemoryBackend`` instances so tests can seed documents
without touching the filesystem.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from .attendance import AttendanceRegister
from .finance import CounterBook, DonationLedger, ExpenseLedger
from .logging_utils import get_logger
from .members import ImageStore, MemberRemoval, MemberRoster
from .storage import DocumentBackend, InMemoryBackend, JsonDocument, JsonFileBackend, unwrap_legacy

LOGGER = get_logger(__name__)

DOCUMENT_FILES = {
    "members": "members.json",
    "attendance": "attendance.json",
    "donations": "donations.json",
    "expenses": "expenses.json",
    "additional": "additional.json",
    "journal": "pending_removal.json",
}


def _as_dict(data: Any) -> Dict[str, Any]:
    return data if isinstance(data, dict) else {}


@dataclass
class LedgerStores:
    members: MemberRoster
    attendance: AttendanceRegister
    donations: DonationLedger
    expenses: ExpenseLedger
    counters: CounterBook
    removal: MemberRemoval
    images: Optional[ImageStore] = None

    @classmethod
    def from_backends(
        cls, backends: Dict[str, DocumentBackend], images: Optional[ImageStore] = None
    ) -> "LedgerStores":
        members = MemberRoster(
            JsonDocument(backends["members"], default=list, normalise=MemberRoster.normalise)
        )
        attendance = AttendanceRegister(JsonDocument(backends["attendance"], normalise=unwrap_legacy))
        donations = DonationLedger(JsonDocument(backends["donations"], normalise=unwrap_legacy))
        expenses = ExpenseLedger(JsonDocument(backends["expenses"], normalise=unwrap_legacy))
        counters = CounterBook(JsonDocument(backends["additional"], normalise=_as_dict))
        journal = JsonDocument(backends["journal"], normalise=_as_dict)
        removal = MemberRemoval(members, donations, counters, journal)
        return cls(
            members=members,
            attendance=attendance,
            donations=donations,
            expenses=expenses,
            counters=counters,
            removal=removal,
            images=images,
        )

    @classmethod
    def from_directory(cls, data_directory: Path, uploads_directory: Optional[Path] = None) -> "LedgerStores":
        data_directory = Path(data_directory)
        data_directory.mkdir(parents=True, exist_ok=True)
        backends: Dict[str, DocumentBackend] = {
            key: JsonFileBackend(data_directory / filename) for key, filename in DOCUMENT_FILES.items()
        }
        images = ImageStore(uploads_directory or data_directory / "uploads")
        LOGGER.debug("Ledger stores opened in %s", data_directory)
        return cls.from_backends(backends, images=images)

    @classmethod
    def in_memory(cls, seed: Optional[Dict[str, Any]] = None, images: Optional[ImageStore] = None) -> "LedgerStores":
        seed = seed or {}
        backends: Dict[str, DocumentBackend] = {
            key: InMemoryBackend(seed.get(key), name=filename) for key, filename in DOCUMENT_FILES.items()
        }
        return cls.from_backends(backends, images=images)

"""Mini README: Member roster keyed by roll number.

Structure:
    * Member - dataclass mirroring one JSON record.
    * MemberRoster - add/edit/list/blank operations on the members document.

Roll numbers are the natural key and are compared in canonical form (see
``utils.keys.canonical_roll_no``). Records are never removed: a soft delete
blanks the personal fields so the roll number stays reserved, and a record
with an empty name is treated as a free placeholder by ``add_member``.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, List, Optional, Tuple

from ..errors import ConflictError, NotFoundError, ValidationError
from ..logging_utils import get_logger
from ..storage import JsonDocument
from ..utils import canonical_roll_no

LOGGER = get_logger(__name__)

PERSONAL_FIELDS = ("name", "last_name", "phone_no", "address")


@dataclass(slots=True)
class Member:
    """Roster entry; ``img`` is the stored upload file name."""

    roll_no: str
    name: str = ""
    last_name: str = ""
    phone_no: str = ""
    address: str = ""
    img: str = ""

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Member":
        known = {item.name for item in fields(cls)}
        values = {key: "" if value is None else str(value) for key, value in record.items() if key in known}
        values["roll_no"] = canonical_roll_no(record.get("roll_no"))
        return cls(**values)

    @property
    def is_placeholder(self) -> bool:
        return not self.name.strip()

    def as_dict(self) -> Dict[str, str]:
        return asdict(self)


def _normalise_members(data: Any) -> List[Dict[str, Any]]:
    if not isinstance(data, list):
        return []
    return [record for record in data if isinstance(record, dict)]


def _clean(value: Optional[str]) -> str:
    return value.strip() if isinstance(value, str) else ""


class MemberRoster:
    """Operations over the members document (a JSON list of records)."""

    def __init__(self, document: JsonDocument) -> None:
        self.document = document

    @staticmethod
    def normalise(data: Any) -> List[Dict[str, Any]]:
        return _normalise_members(data)

    def list_members(self) -> List[Dict[str, Any]]:
        return self.document.read()

    def get(self, roll_no: Any) -> Member:
        key = canonical_roll_no(roll_no)
        records = self.document.read()
        index = self._index_of(records, key)
        if index is None:
            raise NotFoundError("Member not found.")
        return Member.from_record(records[index])

    def add_member(
        self,
        roll_no: Any,
        *,
        name: Optional[str] = None,
        last_name: Optional[str] = None,
        phone_no: Optional[str] = None,
        address: Optional[str] = None,
        img: Optional[str] = None,
    ) -> Tuple[Member, bool]:
        """Create a member, or fill a placeholder row; return ``(member, created)``.

        A live record (non-empty name) under the same roll number is a
        conflict. A placeholder row is overwritten in full, keeping its image
        when no new one is supplied.
        """

        key = self._require_roll(roll_no)
        member = Member(
            roll_no=key,
            name=_clean(name),
            last_name=_clean(last_name),
            phone_no=_clean(phone_no),
            address=_clean(address),
            img=_clean(img),
        )
        with self.document.transaction() as records:
            index = self._index_of(records, key)
            if index is None:
                records.append(member.as_dict())
                created = True
            else:
                existing = Member.from_record(records[index])
                if not existing.is_placeholder:
                    raise ConflictError(f"Roll number {key} is already assigned to {existing.name}.")
                if not member.img:
                    member.img = existing.img
                records[index] = member.as_dict()
                created = False
        LOGGER.info("%s member %s", "Added" if created else "Filled placeholder for", key)
        return member, created

    def edit_member(
        self,
        roll_no: Any,
        *,
        name: Optional[str] = None,
        last_name: Optional[str] = None,
        phone_no: Optional[str] = None,
        address: Optional[str] = None,
        img: Optional[str] = None,
    ) -> Tuple[Member, bool]:
        """Update the non-empty fields of a member, creating it if absent."""

        key = self._require_roll(roll_no)
        updates = {
            "name": _clean(name),
            "last_name": _clean(last_name),
            "phone_no": _clean(phone_no),
            "address": _clean(address),
            "img": _clean(img),
        }
        with self.document.transaction() as records:
            index = self._index_of(records, key)
            if index is None:
                member = Member(roll_no=key, **updates)
                records.append(member.as_dict())
                created = True
            else:
                member = Member.from_record(records[index])
                for field_name, value in updates.items():
                    if value:
                        setattr(member, field_name, value)
                records[index] = member.as_dict()
                created = False
        LOGGER.info("%s member %s", "Created" if created else "Updated", key)
        return member, created

    def blank_member(self, roll_no: Any) -> Member:
        """Clear the personal fields of a member, keeping the row."""

        key = canonical_roll_no(roll_no)
        with self.document.transaction() as records:
            index = self._index_of(records, key)
            if index is None:
                raise NotFoundError("Member not found.")
            member = Member.from_record(records[index])
            for field_name in PERSONAL_FIELDS:
                setattr(member, field_name, "")
            records[index] = member.as_dict()
        LOGGER.info("Blanked personal details for member %s", key)
        return member

    @staticmethod
    def _require_roll(roll_no: Any) -> str:
        if roll_no is None or (isinstance(roll_no, str) and not roll_no.strip()):
            raise ValidationError("Roll number is required")
        return canonical_roll_no(roll_no)

    @staticmethod
    def _index_of(records: List[Dict[str, Any]], key: str) -> Optional[int]:
        for index, record in enumerate(records):
            try:
                if canonical_roll_no(record.get("roll_no")) == key:
                    return index
            except ValidationError:
                continue
        return None

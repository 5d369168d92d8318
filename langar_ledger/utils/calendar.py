"""Mini README: Month name handling for ledger keys.

Structure:
    * MONTH_NAMES - the fixed 12-entry English calendar.
    * month_name_to_number - case-insensitive lookup.
    * canonical_month - validate a client-supplied month and return its key.

Ledgers are keyed by month *name*; these helpers keep the spelling of those
keys consistent no matter how the client capitalised the request.
"""

from __future__ import annotations

from typing import Any, Optional

from ..errors import ValidationError

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

_LOOKUP = {name.lower(): index for index, name in enumerate(MONTH_NAMES, start=1)}


def month_name_to_number(name: str) -> Optional[int]:
    """Return 1-12 for a month name, ignoring case, or ``None``."""

    if not isinstance(name, str):
        return None
    return _LOOKUP.get(name.strip().lower())


def canonical_month(value: Any) -> str:
    """Validate ``value`` as a month name and return the stored spelling."""

    if value is None or value == "":
        raise ValidationError("Month is required")
    number = month_name_to_number(value)
    if number is None:
        raise ValidationError(f"Invalid month name: {value}")
    return MONTH_NAMES[number - 1]

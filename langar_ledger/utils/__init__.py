"""Mini README: Small helpers shared across the ledger packages.

``calendar`` validates month names; ``keys`` turns request values into the
canonical string keys and numeric amounts the ledgers store.
"""

from .calendar import MONTH_NAMES, canonical_month, month_name_to_number
from .keys import (
    canonical_day,
    canonical_roll_no,
    canonical_year,
    coerce_number,
    parse_amount,
    require_text,
)

__all__ = [
    "MONTH_NAMES",
    "canonical_day",
    "canonical_month",
    "canonical_roll_no",
    "canonical_year",
    "coerce_number",
    "month_name_to_number",
    "parse_amount",
    "require_text",
]

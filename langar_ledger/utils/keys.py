"""Mini README: Canonical key and amount coercion for ledger requests.

Structure:
    * canonical_year / canonical_day - digit-normalised string keys.
    * canonical_roll_no - the single roll-number key type used everywhere.
    * parse_amount - numeric coercion that refuses booleans, NaN and values below a minimum.
    * require_text - non-empty string fields such as expense descriptions.

JSON object keys are strings, so every coordinate is stored as a string.
Digit strings drop their leading zeros so that ``7``, ``"7"`` and ``"007"``
address the same member; any other roll number is matched exactly after
trimming whitespace.
"""

from __future__ import annotations

import math
from typing import Any, Optional, Union

from ..errors import ValidationError

Number = Union[int, float]


def _digit_normalise(text: str) -> str:
    return str(int(text)) if text.isdecimal() else text


def canonical_year(value: Any) -> str:
    if isinstance(value, bool) or value is None or value == "":
        raise ValidationError("Year is required")
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str) and value.strip().isdecimal():
        return str(int(value.strip()))
    raise ValidationError(f"Invalid year: {value}")


def canonical_day(value: Any) -> str:
    if isinstance(value, bool) or value is None:
        raise ValidationError("Day is required")
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str) and value.strip():
        return _digit_normalise(value.strip())
    raise ValidationError(f"Invalid day: {value}")


def canonical_roll_no(value: Any) -> str:
    """Return the canonical string form of a roll number."""

    if isinstance(value, bool) or value is None:
        raise ValidationError("Roll number is required")
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, str) and value.strip():
        return _digit_normalise(value.strip())
    raise ValidationError(f"Invalid roll number: {value}")


def _to_number(value: Any, field: str) -> Number:
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError) as error:
        raise ValidationError(f"Missing or invalid {field}: {value!r}") from error
    if math.isnan(number) or math.isinf(number):
        raise ValidationError(f"Missing or invalid {field}: {value!r}")
    return int(number) if number.is_integer() else number


def parse_amount(value: Any, *, field: str = "amount", minimum: Optional[Number] = None) -> Number:
    """Coerce ``value`` to a finite number, keeping integral values as ``int``.

    Integers and integer strings are kept exact; they never pass through
    ``float``. ``minimum`` rejects anything below it.
    """

    if isinstance(value, bool) or value is None or value == "":
        raise ValidationError(f"Missing or invalid {field}")
    number = value if isinstance(value, int) else _to_number(value, field)
    if minimum is not None and number < minimum:
        raise ValidationError(f"{field.capitalize()} must be at least {minimum}, got {number}")
    return number


def require_text(value: Any, *, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field.capitalize()} is required")
    return value.strip()


def coerce_number(value: Any) -> Number:
    """Lenient read-side variant of ``parse_amount``: unusable values count as zero."""

    try:
        return parse_amount(value)
    except ValidationError:
        return 0

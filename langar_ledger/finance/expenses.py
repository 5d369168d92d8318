"""Mini README: Monthly expense lists.

Structure:
    * Expense - dataclass for one ``{amount, description}`` entry.
    * ExpenseLedger - append entries and delete them by position.

Layout: ``year -> month -> [ {amount, description}, ... ]``. Entries are kept
in insertion order. Deleting by index shifts later entries down, so clients
must re-read the list before issuing another delete.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from ..errors import InvalidIndexError, NotFoundError, ValidationError
from ..logging_utils import get_logger
from ..storage import JsonDocument, ensure_path, lookup_path
from ..utils import canonical_month, canonical_year, parse_amount, require_text
from ..utils.keys import Number

LOGGER = get_logger(__name__)


@dataclass(slots=True)
class Expense:
    """Single expense line."""

    amount: Number
    description: str

    def as_dict(self) -> Dict[str, Any]:
        return {"amount": self.amount, "description": self.description}


class ExpenseLedger:
    """Append-only expense lists with explicit index deletes."""

    def __init__(self, document: JsonDocument) -> None:
        self.document = document

    def snapshot(self) -> Dict[str, Any]:
        return self.document.read()

    def append(self, year: Any, month: Any, amount: Any, description: Any) -> Expense:
        """Append an expense to the month's list, creating the month if needed."""

        expense = Expense(amount=parse_amount(amount), description=require_text(description, field="description"))
        year_key = canonical_year(year)
        month_key = canonical_month(month)
        with self.document.transaction() as tree:
            entries = ensure_path(tree, [year_key, month_key], leaf_factory=list)
            entries.append(expense.as_dict())
        LOGGER.info("Added expense %s (%s) to %s %s", expense.amount, expense.description, month_key, year_key)
        return expense

    def delete_at(self, year: Any, month: Any, index: Any) -> Dict[str, Any]:
        """Remove the entry at ``index`` and return it."""

        if isinstance(index, bool) or not isinstance(index, int):
            raise ValidationError("Missing or invalid data. Please provide year, month, and index.")
        year_key = canonical_year(year)
        month_key = canonical_month(month)
        with self.document.transaction() as tree:
            entries = lookup_path(tree, [year_key, month_key])
            if not isinstance(entries, list):
                raise NotFoundError("Expense entry not found.")
            if index < 0 or index >= len(entries):
                raise InvalidIndexError("Invalid expense index.")
            removed = entries.pop(index)
        LOGGER.info("Deleted expense #%s from %s %s: %s", index, month_key, year_key, removed)
        return removed

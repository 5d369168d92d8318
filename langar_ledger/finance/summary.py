"""Mini README: Donation, fine and expense totals for reporting.

Structure:
    * FinancialSummary - dataclass holding the four reported figures.
    * summarise_overall - totals across every year and month.
    * summarise_month - totals for a single year/month.

``netAmount`` is donations plus fines minus expenses. Leaves in the donation
tree may be bare numbers (legacy) or ``{donation, fine}`` objects; both are
read through ``donations.read_leaf``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable

from ..storage import lookup_path
from ..utils import canonical_month, canonical_year, coerce_number
from ..utils.keys import Number
from .donations import DonationLedger, read_leaf
from .expenses import ExpenseLedger


@dataclass(slots=True)
class FinancialSummary:
    """Aggregated figures returned by the summary endpoints."""

    total_donations: Number = 0
    total_fines: Number = 0
    total_expenses: Number = 0

    @property
    def net_amount(self) -> Number:
        return self.total_donations + self.total_fines - self.total_expenses

    def as_dict(self) -> Dict[str, Number]:
        return {
            "totalDonations": self.total_donations,
            "totalFines": self.total_fines,
            "totalExpenses": self.total_expenses,
            "netAmount": self.net_amount,
        }


def _add_donations(summary: FinancialSummary, rolls: Any) -> None:
    if not isinstance(rolls, dict):
        return
    for leaf in rolls.values():
        totals = read_leaf(leaf)
        summary.total_donations += totals["donation"]
        summary.total_fines += totals["fine"]


def _add_expenses(summary: FinancialSummary, entries: Any) -> None:
    if not isinstance(entries, list):
        return
    for entry in entries:
        if isinstance(entry, dict):
            summary.total_expenses += coerce_number(entry.get("amount"))


def _month_nodes(tree: Dict[str, Any]) -> Iterable[Any]:
    for months in tree.values():
        if isinstance(months, dict):
            yield from months.values()


def summarise_overall(donations: DonationLedger, expenses: ExpenseLedger) -> FinancialSummary:
    summary = FinancialSummary()
    for rolls in _month_nodes(donations.snapshot()):
        _add_donations(summary, rolls)
    for entries in _month_nodes(expenses.snapshot()):
        _add_expenses(summary, entries)
    return summary


def summarise_month(
    donations: DonationLedger, expenses: ExpenseLedger, year: Any, month: Any
) -> FinancialSummary:
    year_key = canonical_year(year)
    month_key = canonical_month(month)
    summary = FinancialSummary()
    _add_donations(summary, lookup_path(donations.snapshot(), [year_key, month_key]))
    _add_expenses(summary, lookup_path(expenses.snapshot(), [year_key, month_key]))
    return summary

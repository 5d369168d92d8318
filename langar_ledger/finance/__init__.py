"""Mini README: Money ledgers for the langar.

Donations and fines are running totals per member and month; expenses are
per-month lists of amounts with a description. ``summary`` folds both
documents into the totals shown on the dashboard and summary endpoints.
"""

from .counters import CounterBook
from .donations import ContributionKind, DonationLedger, MemberRemovalResult, read_leaf
from .expenses import Expense, ExpenseLedger
from .summary import FinancialSummary, summarise_month, summarise_overall

__all__ = [
    "ContributionKind",
    "CounterBook",
    "DonationLedger",
    "Expense",
    "ExpenseLedger",
    "FinancialSummary",
    "MemberRemovalResult",
    "read_leaf",
    "summarise_month",
    "summarise_overall",
]

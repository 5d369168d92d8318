"""Mini README: Tests covering donations, fines, expenses and summaries.

Structure:
    * donation tests - running totals, kind validation, legacy numeric leaves.
    * expense tests - append order, delete by index, error cases.
    * summary tests - overall and monthly totals.
"""

from __future__ import annotations

import pytest

from langar_ledger.errors import InvalidIndexError, NotFoundError, ValidationError
from langar_ledger.finance import ContributionKind, summarise_month, summarise_overall
from langar_ledger.stores import LedgerStores


@pytest.fixture()
def stores() -> LedgerStores:
    return LedgerStores.in_memory()


def test_donations_accumulate_and_fines_are_separate(stores) -> None:
    """500 then 300 donated gives 800; a fine of 100 is tracked beside it."""

    ledger = stores.donations
    ledger.accumulate(2024, "March", "7", 500)
    ledger.accumulate(2024, "March", "7", "300")
    totals = ledger.accumulate(2024, "March", "7", 100, kind="fine")

    assert totals == {"donation": 800, "fine": 100}
    assert ledger.snapshot() == {"2024": {"March": {"7": {"donation": 800, "fine": 100}}}}

    summary = summarise_overall(stores.donations, stores.expenses)
    assert summary.total_donations == 800
    assert summary.total_fines == 100
    assert summary.net_amount == 900


def test_accumulation_is_order_independent(stores) -> None:
    amounts = [5, 12.5, 100, 0.5]
    for amount in amounts:
        stores.donations.accumulate(2024, "April", 3, amount)
    forward = stores.donations.snapshot()["2024"]["April"]["3"]

    other = LedgerStores.in_memory()
    for amount in reversed(amounts):
        other.donations.accumulate(2024, "April", 3, amount)

    assert forward["donation"] == pytest.approx(sum(amounts))
    assert other.donations.snapshot()["2024"]["April"]["3"]["donation"] == pytest.approx(forward["donation"])


def test_donation_rejects_bad_input(stores) -> None:
    with pytest.raises(ValidationError):
        stores.donations.accumulate(2024, "March", "7", "lots")
    with pytest.raises(ValidationError):
        stores.donations.accumulate(2024, "March", "7", 10, kind="tip")
    with pytest.raises(ValidationError):
        stores.donations.accumulate(2024, "March", None, 10)
    assert stores.donations.snapshot() == {}


def test_contribution_kind_parsing() -> None:
    assert ContributionKind.from_str(" Fine ") is ContributionKind.FINE
    assert ContributionKind.from_str(None) is ContributionKind.DONATION
    with pytest.raises(ValidationError):
        ContributionKind.from_str("refund")


def test_legacy_numeric_leaf_is_upgraded() -> None:
    stores = LedgerStores.in_memory(seed={"donations": {"2023": {"May": {"7": 250, "8": 40}}}})

    stores.donations.accumulate(2023, "May", "7", 50, kind="fine")

    tree = stores.donations.snapshot()
    assert tree["2023"]["May"]["7"] == {"donation": 250, "fine": 50}
    assert tree["2023"]["May"]["8"] == 40
    summary = summarise_overall(stores.donations, stores.expenses)
    assert (summary.total_donations, summary.total_fines) == (290, 50)


def test_expenses_append_and_delete_keep_order(stores) -> None:
    ledger = stores.expenses
    for amount, description in [(100, "Rice"), (40, "Salt"), (250, "Gas"), (60, "Ghee")]:
        ledger.append(2024, "March", amount, description)

    removed = ledger.delete_at(2024, "March", 1)

    assert removed == {"amount": 40, "description": "Salt"}
    assert [entry["description"] for entry in ledger.snapshot()["2024"]["March"]] == ["Rice", "Gas", "Ghee"]


def test_expense_delete_out_of_range_leaves_list(stores) -> None:
    stores.expenses.append(2024, "March", 100, "Rice")

    with pytest.raises(InvalidIndexError):
        stores.expenses.delete_at(2024, "March", 1)
    with pytest.raises(InvalidIndexError):
        stores.expenses.delete_at(2024, "March", -1)
    with pytest.raises(ValidationError):
        stores.expenses.delete_at(2024, "March", "0")
    with pytest.raises(NotFoundError):
        stores.expenses.delete_at(2024, "April", 0)

    assert stores.expenses.snapshot()["2024"]["March"] == [{"amount": 100, "description": "Rice"}]


def test_expense_requires_description_and_amount(stores) -> None:
    with pytest.raises(ValidationError):
        stores.expenses.append(2024, "March", 100, "  ")
    with pytest.raises(ValidationError):
        stores.expenses.append(2024, "March", None, "Rice")
    assert stores.expenses.snapshot() == {}


def test_monthly_summary_for_empty_month_is_zero(stores) -> None:
    stores.donations.accumulate(2024, "March", "7", 500)

    summary = summarise_month(stores.donations, stores.expenses, 2024, "April")

    assert summary.as_dict() == {
        "totalDonations": 0,
        "totalFines": 0,
        "totalExpenses": 0,
        "netAmount": 0,
    }


def test_monthly_summary_counts_only_that_month(stores) -> None:
    stores.donations.accumulate(2024, "March", "7", 500)
    stores.donations.accumulate(2024, "March", "8", 20, kind="fine")
    stores.donations.accumulate(2024, "April", "7", 999)
    stores.expenses.append(2024, "March", 120, "Flour")

    summary = summarise_month(stores.donations, stores.expenses, "2024", "march")

    assert summary.as_dict() == {
        "totalDonations": 500,
        "totalFines": 20,
        "totalExpenses": 120,
        "netAmount": 400,
    }


def test_negative_amounts_never_reduce_a_total(stores) -> None:
    stores.donations.accumulate(2024, "March", "7", 500)

    with pytest.raises(ValidationError):
        stores.donations.accumulate(2024, "March", "7", -300)
    with pytest.raises(ValidationError):
        stores.donations.accumulate(2024, "March", "7", "-1", kind="fine")

    assert stores.donations.snapshot()["2024"]["March"]["7"] == {"donation": 500, "fine": 0}


def test_large_integer_donations_sum_exactly(stores) -> None:
    stores.donations.accumulate(2024, "March", "7", 9007199254740993)
    stores.donations.accumulate(2024, "March", "7", 1)

    assert stores.donations.snapshot()["2024"]["March"]["7"]["donation"] == 9007199254740994

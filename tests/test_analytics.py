"""Tests for ledger summary analytics."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

import pytest

from financeflow.domain.starter import starter_transactions
from financeflow.models.transaction import TransactionKind
from financeflow.services import analytics

INCOME = TransactionKind.INCOME
EXPENSE = TransactionKind.EXPENSE
TODAY = date(2026, 3, 15)


def test_empty_collection_has_zero_totals():
    totals = analytics.compute_totals([])

    assert totals.income == Decimal("0")
    assert totals.expenses == Decimal("0")
    assert totals.balance == Decimal("0")
    assert analytics.category_totals([]) == {}


def test_income_only_collection_has_no_category_totals(transaction_factory):
    txns = [transaction_factory(amount="500", kind=INCOME, category="Income")]
    assert analytics.category_totals(txns) == {}


def test_totals_and_balance(transaction_factory):
    txns = [
        transaction_factory(amount="1000", kind=INCOME, category="Income"),
        transaction_factory(amount="250.50"),
        transaction_factory(amount="49.50", category="Shopping"),
    ]

    totals = analytics.compute_totals(txns)

    assert totals.income == Decimal("1000")
    assert totals.expenses == Decimal("300.00")
    assert totals.balance == Decimal("700.00")


def test_category_totals_sum_to_all_expenses(transaction_factory):
    txns = [
        transaction_factory(amount="350"),
        transaction_factory(amount="150"),
        transaction_factory(amount="120", category="Transportation"),
        transaction_factory(amount="999", kind=INCOME, category="Income"),
    ]

    by_category = analytics.category_totals(txns)

    assert by_category == {"Food & Dining": Decimal("500"), "Transportation": Decimal("120")}
    assert sum(by_category.values()) == analytics.compute_totals(txns).expenses


def test_window_sums_are_additive_over_adjacent_windows(transaction_factory):
    txns = [
        transaction_factory(amount=str(n), on=date(2026, 2, 20) + timedelta(days=n))
        for n in range(20)
    ]
    whole = analytics.window_sum(txns, EXPENSE, date(2026, 2, 20), date(2026, 3, 11))
    first = analytics.window_sum(txns, EXPENSE, date(2026, 2, 20), date(2026, 2, 28))
    second = analytics.window_sum(txns, EXPENSE, date(2026, 3, 1), date(2026, 3, 11))

    assert whole == first + second == Decimal(sum(range(20)))


@pytest.mark.parametrize("kind", [EXPENSE, INCOME])
@pytest.mark.parametrize("start_inclusive", [True, False])
def test_window_sum_is_additive_over_disjoint_collections(transaction_factory, kind, start_inclusive):
    start, end = TODAY - timedelta(days=7), TODAY
    category = "Income" if kind is INCOME else "Shopping"
    collection = [
        transaction_factory(amount=str(10 + n), kind=kind, category=category, on=TODAY - timedelta(days=n))
        for n in range(10)
    ]
    collection.append(transaction_factory(amount="3", on=TODAY))
    collection.append(transaction_factory(amount="4", kind=INCOME, category="Income", on=start))
    part_a, part_b = collection[::2], collection[1::2]

    def total(txns):
        return analytics.window_sum(txns, kind, start, end, start_inclusive=start_inclusive)

    assert total(part_a + part_b) == total(part_a) + total(part_b)
    assert total(part_a + part_b) == total(collection)
    assert total([]) == Decimal("0")


def test_weekly_figures_are_additive_over_disjoint_collections(transaction_factory):
    part_a = [transaction_factory(amount="5", on=TODAY - timedelta(days=n)) for n in (0, 3, 7)]
    part_b = [
        transaction_factory(amount="8", on=TODAY - timedelta(days=6)),
        transaction_factory(amount="2", kind=INCOME, category="Income", on=TODAY - timedelta(days=7)),
        transaction_factory(amount="9", kind=INCOME, category="Income", on=TODAY),
    ]

    for weekly in (analytics.weekly_expenses, analytics.weekly_income):
        assert weekly(part_a + part_b, TODAY) == weekly(part_a, TODAY) + weekly(part_b, TODAY)
    assert analytics.weekly_expenses(part_a + part_b, TODAY) == Decimal("18")
    assert analytics.weekly_income(part_a + part_b, TODAY) == Decimal("9")


def test_monthly_window_includes_first_day_and_today(transaction_factory):
    txns = [
        transaction_factory(amount="1", on=date(2026, 2, 28)),
        transaction_factory(amount="10", on=date(2026, 3, 1)),
        transaction_factory(amount="100", on=TODAY),
        transaction_factory(amount="1000", on=TODAY + timedelta(days=1)),
        transaction_factory(amount="7", kind=INCOME, category="Income", on=date(2026, 3, 1)),
    ]

    assert analytics.monthly_expenses(txns, TODAY) == Decimal("110")
    assert analytics.monthly_income(txns, TODAY) == Decimal("7")


def test_weekly_window_excludes_its_first_day(transaction_factory):
    txns = [
        transaction_factory(amount="1", on=TODAY - timedelta(days=7)),
        transaction_factory(amount="10", on=TODAY - timedelta(days=6)),
        transaction_factory(amount="100", on=TODAY),
        transaction_factory(amount="5", kind=INCOME, category="Income", on=TODAY - timedelta(days=7)),
        transaction_factory(amount="50", kind=INCOME, category="Income", on=TODAY - timedelta(days=1)),
    ]

    assert analytics.weekly_expenses(txns, TODAY) == Decimal("110")
    assert analytics.weekly_income(txns, TODAY) == Decimal("50")


def test_daily_average_uses_elapsed_days_of_month(transaction_factory):
    txns = [transaction_factory(amount="300", on=date(2026, 3, 2))]

    assert analytics.daily_average_expense(txns, TODAY) == Decimal("20")
    assert analytics.daily_average_expense(txns, date(2026, 3, 1)) == Decimal("0")


def test_daily_trend_covers_last_seven_days(transaction_factory):
    txns = [
        transaction_factory(amount="40", on=TODAY),
        transaction_factory(amount="60", on=TODAY),
        transaction_factory(amount="900", kind=INCOME, category="Income", on=TODAY - timedelta(days=6)),
        transaction_factory(amount="5", on=TODAY - timedelta(days=7)),
    ]

    trend = analytics.daily_trend_series(txns, TODAY)

    assert len(trend) == 7
    assert trend[0].day == TODAY - timedelta(days=6)
    assert trend[-1].day == TODAY
    assert trend[-1].expenses == Decimal("100")
    assert trend[0].income == Decimal("900")
    assert sum(point.expenses for point in trend) == Decimal("100")


def test_monthly_trend_crosses_year_boundary(transaction_factory):
    today = date(2026, 1, 10)
    txns = [
        transaction_factory(amount="10", on=date(2025, 7, 31)),
        transaction_factory(amount="20", on=date(2025, 8, 1)),
        transaction_factory(amount="30", on=date(2025, 12, 31)),
        transaction_factory(amount="40", on=date(2026, 1, 25)),
    ]

    trend = analytics.monthly_trend_series(txns, today)

    assert [point.label for point in trend] == [
        "Aug 2025",
        "Sep 2025",
        "Oct 2025",
        "Nov 2025",
        "Dec 2025",
        "Jan 2026",
    ]
    assert [point.expenses for point in trend] == [
        Decimal("20"),
        Decimal("0"),
        Decimal("0"),
        Decimal("0"),
        Decimal("30"),
        Decimal("40"),
    ]
    assert trend[-1].last_day == date(2026, 1, 31)


def test_month_end_handles_leap_years():
    assert analytics.month_end(date(2024, 2, 10)) == date(2024, 2, 29)
    assert analytics.month_end(date(2025, 2, 10)) == date(2025, 2, 28)
    assert analytics.shift_months(date(2026, 1, 1), -1) == date(2025, 12, 1)
    assert analytics.shift_months(date(2025, 11, 1), 3) == date(2026, 2, 1)


def test_budget_utilization():
    assert analytics.budget_utilization(Decimal("25000"), Decimal("50000")) == Decimal("50")
    assert analytics.budget_utilization(Decimal("0"), Decimal("50000")) == Decimal("0")


def test_budget_utilization_requires_positive_budget():
    with pytest.raises(ZeroDivisionError):
        analytics.budget_utilization(Decimal("10"), Decimal("0"))


def test_budget_status_reports_overspend(transaction_factory):
    txns = [transaction_factory(amount="600"), transaction_factory(amount="600")]

    status = analytics.budget_status(txns, TODAY, Decimal("1000"))

    assert status.spent == Decimal("1200")
    assert status.remaining == Decimal("-200")
    assert status.utilization == Decimal("120")
    assert status.over_budget


def test_spending_breakdown_is_sorted_by_amount(transaction_factory):
    txns = [
        transaction_factory(amount="25", category="Shopping"),
        transaction_factory(amount="75"),
        transaction_factory(amount="500", kind=INCOME, category="Income"),
    ]

    breakdown = analytics.spending_breakdown(txns)

    assert [share.category for share in breakdown] == ["Food & Dining", "Shopping"]
    assert [share.percentage for share in breakdown] == [Decimal("75"), Decimal("25")]
    assert analytics.spending_breakdown([]) == []


def test_recent_transactions_newest_first(transaction_factory):
    txns = [transaction_factory(on=TODAY - timedelta(days=n), note=str(n)) for n in (3, 0, 8, 1, 5, 2)]

    recent = analytics.recent_transactions(txns)

    assert [txn.note for txn in recent] == ["0", "1", "2", "3", "5"]


def test_dashboard_for_starter_ledger():
    board = analytics.build_dashboard(starter_transactions(TODAY), TODAY, Decimal("50000"))

    assert board.totals.income == Decimal("45000")
    assert board.totals.expenses == Decimal("5270")
    assert board.totals.balance == Decimal("39730")
    assert board.monthly_expenses == Decimal("5270")
    assert board.weekly_expenses == Decimal("5270")
    assert board.budget.remaining == Decimal("44730")
    assert len(board.daily_trend) == 7
    assert len(board.monthly_trend) == 6
    assert len(board.recent) == 5
    assert board.recent[0].note == "Monthly salary"
    assert board.breakdown[0].category == "Shopping"

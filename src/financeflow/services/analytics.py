"""Summary figures derived from a user's transactions.

Everything here is a pure function of the collection it is given (plus a
reference date); nothing reads the clock implicitly or touches storage.
"""

from __future__ import annotations

from calendar import monthrange
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Sequence

from ..models.transaction import Transaction, TransactionKind

ZERO = Decimal("0")
HUNDRED = Decimal("100")


@dataclass(slots=True)
class LedgerTotals:
    """All-time income, expense and balance figures."""

    income: Decimal
    expenses: Decimal

    @property
    def balance(self) -> Decimal:
        return self.income - self.expenses


@dataclass(slots=True)
class DailyTrendPoint:
    day: date
    income: Decimal
    expenses: Decimal


@dataclass(slots=True)
class MonthlyTrendPoint:
    label: str
    first_day: date
    last_day: date
    expenses: Decimal


@dataclass(slots=True)
class CategoryShare:
    category: str
    amount: Decimal
    percentage: Decimal


@dataclass(slots=True)
class BudgetStatus:
    budget: Decimal
    spent: Decimal

    @property
    def remaining(self) -> Decimal:
        return self.budget - self.spent

    @property
    def utilization(self) -> Decimal:
        return budget_utilization(self.spent, self.budget)

    @property
    def over_budget(self) -> bool:
        return self.spent > self.budget


@dataclass(slots=True)
class DashboardSummary:
    """Every figure the dashboard shows, computed in one pass."""

    today: date
    totals: LedgerTotals
    monthly_income: Decimal
    monthly_expenses: Decimal
    weekly_income: Decimal
    weekly_expenses: Decimal
    daily_average_expense: Decimal
    category_totals: dict[str, Decimal]
    daily_trend: list[DailyTrendPoint]
    monthly_trend: list[MonthlyTrendPoint]
    recent: list[Transaction]
    budget: BudgetStatus
    breakdown: list[CategoryShare] = field(default_factory=list)


def compute_totals(transactions: Iterable[Transaction]) -> LedgerTotals:
    """Compute income and expense totals from the provided transactions."""

    income = ZERO
    expenses = ZERO
    for txn in transactions:
        if txn.kind is TransactionKind.INCOME:
            income += txn.amount
        else:
            expenses += txn.amount
    return LedgerTotals(income=income, expenses=expenses)


def category_totals(transactions: Iterable[Transaction]) -> dict[str, Decimal]:
    """Roll up expense totals by category; income entries are ignored."""

    totals: dict[str, Decimal] = {}
    for txn in transactions:
        if txn.kind is not TransactionKind.EXPENSE:
            continue
        totals[txn.category] = totals.get(txn.category, ZERO) + txn.amount
    return totals


def window_sum(
    transactions: Iterable[Transaction],
    kind: TransactionKind,
    start: date,
    end: date,
    *,
    start_inclusive: bool = True,
) -> Decimal:
    """Sum amounts of ``kind`` dated between ``start`` and ``end``.

    ``end`` is always inclusive; ``start`` is inclusive unless
    ``start_inclusive`` is False.
    """

    total = ZERO
    for txn in transactions:
        if txn.kind is not kind or txn.date > end:
            continue
        if txn.date < start or (not start_inclusive and txn.date == start):
            continue
        total += txn.amount
    return total


def month_start(day: date) -> date:
    return day.replace(day=1)


def month_end(day: date) -> date:
    return day.replace(day=monthrange(day.year, day.month)[1])


def shift_months(first_day: date, months: int) -> date:
    """Return the first day of the month ``months`` away from ``first_day``."""

    year, month_index = divmod(first_day.year * 12 + (first_day.month - 1) + months, 12)
    return date(year, month_index + 1, 1)


def monthly_income(transactions: Iterable[Transaction], today: date) -> Decimal:
    return window_sum(transactions, TransactionKind.INCOME, month_start(today), today)


def monthly_expenses(transactions: Iterable[Transaction], today: date) -> Decimal:
    return window_sum(transactions, TransactionKind.EXPENSE, month_start(today), today)


# The weekly window excludes its first day (today - 7) while the monthly
# window includes the 1st. Both boundaries are kept as the ledger has always
# reported them.
def weekly_income(transactions: Iterable[Transaction], today: date) -> Decimal:
    return window_sum(
        transactions,
        TransactionKind.INCOME,
        today - timedelta(days=7),
        today,
        start_inclusive=False,
    )


def weekly_expenses(transactions: Iterable[Transaction], today: date) -> Decimal:
    return window_sum(
        transactions,
        TransactionKind.EXPENSE,
        today - timedelta(days=7),
        today,
        start_inclusive=False,
    )


def daily_average_expense(transactions: Iterable[Transaction], today: date) -> Decimal:
    """Average expense per elapsed day of the current month, today included."""

    days = (today - month_start(today)).days + 1
    if days <= 0:
        return ZERO
    return monthly_expenses(transactions, today) / Decimal(days)


def daily_trend_series(
    transactions: Sequence[Transaction], today: date, days: int = 7
) -> list[DailyTrendPoint]:
    """Income and expense per calendar day for the last ``days`` days, oldest first."""

    points = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        points.append(
            DailyTrendPoint(
                day=day,
                income=window_sum(transactions, TransactionKind.INCOME, day, day),
                expenses=window_sum(transactions, TransactionKind.EXPENSE, day, day),
            )
        )
    return points


def monthly_trend_series(
    transactions: Sequence[Transaction], today: date, months: int = 6
) -> list[MonthlyTrendPoint]:
    """Expenses per calendar month for the last ``months`` months, oldest first.

    Each month covers its whole span, first to last day, so the current
    month also counts entries dated later this month.
    """

    current = month_start(today)
    points = []
    for offset in range(months - 1, -1, -1):
        first_day = shift_months(current, -offset)
        last_day = month_end(first_day)
        points.append(
            MonthlyTrendPoint(
                label=first_day.strftime("%b %Y"),
                first_day=first_day,
                last_day=last_day,
                expenses=window_sum(transactions, TransactionKind.EXPENSE, first_day, last_day),
            )
        )
    return points


def budget_utilization(monthly_expenses: Decimal, budget: Decimal) -> Decimal:
    """Percentage of ``budget`` consumed.

    ``budget`` must be positive; callers validate it before calling.
    """

    return HUNDRED * monthly_expenses / budget


def budget_status(transactions: Iterable[Transaction], today: date, budget: Decimal) -> BudgetStatus:
    return BudgetStatus(budget=budget, spent=monthly_expenses(transactions, today))


def spending_breakdown(transactions: Iterable[Transaction]) -> list[CategoryShare]:
    """Expense categories with their share of all expenses, largest first."""

    totals = category_totals(transactions)
    grand_total = sum(totals.values(), ZERO)
    breakdown = [
        CategoryShare(
            category=category,
            amount=amount,
            percentage=(HUNDRED * amount / grand_total) if grand_total > 0 else ZERO,
        )
        for category, amount in totals.items()
    ]
    breakdown.sort(key=lambda share: share.amount, reverse=True)
    return breakdown


def recent_transactions(transactions: Iterable[Transaction], limit: int = 5) -> list[Transaction]:
    """Return the ``limit`` most recently dated transactions, newest first."""

    return sorted(transactions, key=lambda txn: txn.date, reverse=True)[:limit]


def build_dashboard(
    transactions: Sequence[Transaction], today: date, budget: Decimal
) -> DashboardSummary:
    """Assemble the full dashboard for ``transactions`` as of ``today``."""

    return DashboardSummary(
        today=today,
        totals=compute_totals(transactions),
        monthly_income=monthly_income(transactions, today),
        monthly_expenses=monthly_expenses(transactions, today),
        weekly_income=weekly_income(transactions, today),
        weekly_expenses=weekly_expenses(transactions, today),
        daily_average_expense=daily_average_expense(transactions, today),
        category_totals=category_totals(transactions),
        daily_trend=daily_trend_series(transactions, today),
        monthly_trend=monthly_trend_series(transactions, today),
        recent=recent_transactions(transactions),
        budget=budget_status(transactions, today, budget),
        breakdown=spending_breakdown(transactions),
    )

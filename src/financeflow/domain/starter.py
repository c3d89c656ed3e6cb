"""Starter data seeded into a brand-new ledger."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from ..models.transaction import Transaction, TransactionKind

# (days before today, kind, category, amount, note)
_STARTER_ROWS = (
    (0, TransactionKind.INCOME, "Income", "45000", "Monthly salary"),
    (1, TransactionKind.EXPENSE, "Food & Dining", "350", "Restaurant dinner"),
    (2, TransactionKind.EXPENSE, "Transportation", "120", "Uber ride"),
    (3, TransactionKind.EXPENSE, "Shopping", "2500", "Grocery shopping"),
    (4, TransactionKind.EXPENSE, "Entertainment", "800", "Movie night"),
    (5, TransactionKind.EXPENSE, "Bills & Utilities", "1500", "Internet bill"),
)


def starter_transactions(today: Optional[date] = None) -> list[Transaction]:
    """Return the illustrative starter set anchored to ``today``."""

    anchor = today or date.today()
    return [
        Transaction(
            date=anchor - timedelta(days=offset),
            kind=kind,
            category=category,
            amount=Decimal(amount),
            note=note,
        )
        for offset, kind, category, amount, note in _STARTER_ROWS
    ]

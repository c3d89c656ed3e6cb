"""
Centralized category vocabulary offered when entering transactions.
Categories are free-form in storage; these are the suggested values.
"""

from __future__ import annotations

# Transaction Categories - Expenses (first entry is the quick-add default)
EXPENSE_CATEGORIES = [
    "Food & Dining",
    "Transportation",
    "Shopping",
    "Entertainment",
    "Bills & Utilities",
    "Healthcare",
    "Education",
    "Investment",
    "Travel",
]

INCOME_CATEGORY = "Income"
OTHER_CATEGORY = "Other"

# Full vocabulary in display order
TRANSACTION_CATEGORIES = EXPENSE_CATEGORIES + [INCOME_CATEGORY, OTHER_CATEGORY]

DEFAULT_EXPENSE_CATEGORY = EXPENSE_CATEGORIES[0]


def category_suggestions(kind: str | None = None) -> list[str]:
    """
    Get the suggested categories for a transaction type.

    Args:
        kind: "income" or "expense" (any case); None for the full vocabulary

    Returns:
        List of category name strings in display order
    """
    if kind is None:
        return list(TRANSACTION_CATEGORIES)
    if kind.strip().lower() == INCOME_CATEGORY.lower():
        return [INCOME_CATEGORY, OTHER_CATEGORY]
    return EXPENSE_CATEGORIES + [OTHER_CATEGORY]


def is_known_category(category_name: str) -> bool:
    return category_name in TRANSACTION_CATEGORIES

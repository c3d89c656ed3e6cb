"""Ledger transaction value type."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from enum import Enum
from uuid import uuid4

from ..errors import InvalidTransaction


class TransactionKind(str, Enum):
    """Direction of a cash event; the amount itself is never negative."""

    INCOME = "Income"
    EXPENSE = "Expense"

    @classmethod
    def parse(cls, raw: "str | TransactionKind") -> "TransactionKind":
        """Resolve a kind from user or stored text, ignoring case."""

        if isinstance(raw, cls):
            return raw
        text = (raw or "").strip().lower()
        for kind in cls:
            if kind.value.lower() == text:
                return kind
        raise InvalidTransaction(f"Unknown transaction type: {raw!r}")


def _new_id() -> str:
    return uuid4().hex


@dataclass(frozen=True)
class Transaction:
    """A single dated income or expense entry in one user's ledger.

    ``id`` only identifies the entry while it is held in memory; it is not
    persisted and does not take part in equality.
    """

    date: date
    kind: TransactionKind
    category: str
    amount: Decimal
    note: str = ""
    id: str = field(default_factory=_new_id, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.date, date):
            raise InvalidTransaction("Transaction date is required")
        if not isinstance(self.kind, TransactionKind):
            object.__setattr__(self, "kind", TransactionKind.parse(self.kind))
        if not self.category or not self.category.strip():
            raise InvalidTransaction("Category cannot be empty")
        if not isinstance(self.amount, Decimal):
            try:
                object.__setattr__(self, "amount", Decimal(str(self.amount)))
            except InvalidOperation as exc:
                raise InvalidTransaction("Amount must be a number") from exc
        if not self.amount.is_finite() or self.amount < 0:
            raise InvalidTransaction("Amount must be a non-negative number")
        if self.note is None:
            object.__setattr__(self, "note", "")
        if any(ch in text for text in (self.category, self.note) for ch in "\r\n"):
            raise InvalidTransaction("Category and note must be a single line")

    @property
    def is_income(self) -> bool:
        return self.kind is TransactionKind.INCOME

    @property
    def is_expense(self) -> bool:
        return self.kind is TransactionKind.EXPENSE

    @property
    def signed_amount(self) -> Decimal:
        """Amount with the sign implied by ``kind`` applied."""
        return self.amount if self.is_income else -self.amount

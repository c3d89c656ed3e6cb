"""Ledger store protocol."""

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ...models.transaction import Transaction


class LedgerRepository(Protocol):
    """Durable per-user sequence of transactions."""

    def load(self, username: str, *, today: Optional[date] = None) -> list[Transaction]:
        """Read the user's ledger, seeding it first when none exists."""
        ...

    def save(self, username: str, transactions: Sequence[Transaction]) -> None:
        """Atomically replace the user's ledger with ``transactions``."""
        ...

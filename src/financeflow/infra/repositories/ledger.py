"""Flat-file implementation of the per-user ledger store."""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Callable, Optional, Sequence

from ...errors import DecodeError, StorageError
from ...models.transaction import Transaction
from ..codec import LEDGER_HEADER, decode_transaction, encode_transaction
from ..files import atomic_write_lines, path_lock, read_lines

logger = logging.getLogger("financeflow.infra.repositories.ledger")

SeedFactory = Callable[[Optional[date]], list[Transaction]]


class CsvLedgerRepository:
    """Stores each user's ledger at ``<root>/<username>/<username>.csv``."""

    def __init__(self, root: Path, *, seed: Optional[SeedFactory] = None):
        """Initialize with the data root and an optional starter-data factory.

        When ``seed`` is None a missing ledger loads as empty instead.
        """
        self.root = Path(root)
        self.seed = seed

    def path_for(self, username: str) -> Path:
        # Usernames are case-sensitive but paths are not on every filesystem:
        # on a case-insensitive one, "alice" and "Alice" share a ledger file.
        return self.root / username / f"{username}.csv"

    def load(self, username: str, *, today: Optional[date] = None) -> list[Transaction]:
        """Read and decode every row, skipping rows that fail to decode.

        A user with no ledger file gets the starter data, which is written
        to disk before returning so later loads see the same entries.
        """
        path = self.path_for(username)
        with path_lock(path):
            try:
                lines = read_lines(path)
            except FileNotFoundError:
                return self._seed(username, today)
            except OSError as exc:
                raise StorageError("Could not read your transactions") from exc

        transactions: list[Transaction] = []
        for lineno, line in enumerate(lines[1:], start=2):
            if not line.strip():
                continue
            try:
                transactions.append(decode_transaction(line))
            except DecodeError as exc:
                logger.warning(
                    "Skipping invalid ledger line",
                    extra={
                        "path": str(path),
                        "line_number": lineno,
                        "reason": str(exc),
                    },
                )
        return transactions

    def _seed(self, username: str, today: Optional[date]) -> list[Transaction]:
        transactions = list(self.seed(today)) if self.seed is not None else []
        self.save(username, transactions)
        logger.info(
            "Created new ledger",
            extra={"username": username, "seeded": len(transactions)},
        )
        return transactions

    def save(self, username: str, transactions: Sequence[Transaction]) -> None:
        """Atomically replace the user's ledger with ``transactions`` in order.

        Saves for one user are serialized; a failed save leaves the previous
        file intact and raises :class:`StorageError`.
        """
        path = self.path_for(username)
        lines = [LEDGER_HEADER]
        lines.extend(encode_transaction(txn) for txn in transactions)
        with path_lock(path):
            try:
                atomic_write_lines(path, lines)
            except OSError as exc:
                logger.error(
                    "Failed to save ledger",
                    extra={"username": username, "path": str(path)},
                    exc_info=True,
                )
                raise StorageError("Could not save your transactions") from exc

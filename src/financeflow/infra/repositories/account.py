"""Flat-file implementation of the account registry."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, Optional

from ...errors import DecodeError, DuplicateUsername, StorageError
from ...models.account import Account
from ..codec import ACCOUNTS_HEADER, DELIMITER, decode_account, encode_account, unescape_field
from ..files import append_line, atomic_write_lines, path_lock, read_lines

logger = logging.getLogger("financeflow.infra.repositories.account")


class CsvAccountRepository:
    """Append-only registry stored as one comma-delimited row per account."""

    def __init__(self, path: Path):
        """Initialize with the registry file path."""
        self.path = Path(path)
        self._lock = path_lock(self.path)

    def _rows(self) -> list[str]:
        try:
            lines = read_lines(self.path)
        except FileNotFoundError:
            return []
        except OSError as exc:
            raise StorageError("Account registry is unavailable") from exc
        # First line is the header.
        return [line for line in lines[1:] if line.strip()]

    def _ensure_file(self) -> None:
        if self.path.exists():
            return
        atomic_write_lines(self.path, [ACCOUNTS_HEADER])

    def _iter_accounts(self) -> Iterator[Account]:
        for lineno, line in enumerate(self._rows(), start=2):
            try:
                yield decode_account(line)
            except DecodeError as exc:
                logger.warning(
                    "Skipping malformed account row",
                    extra={"path": str(self.path), "line_number": lineno, "reason": str(exc)},
                )

    def exists(self, username: str) -> bool:
        """Return True when a row with exactly this username is stored."""
        # Only the first column matters, so a row with a damaged tail still
        # reserves its username.
        return any(
            unescape_field(line.split(DELIMITER, 1)[0]) == username for line in self._rows()
        )

    def get_by_username(self, username: str) -> Optional[Account]:
        """Retrieve an account by username."""
        for account in self._iter_accounts():
            if account.username == username:
                return account
        return None

    def list_all(self) -> list[Account]:
        """List all accounts in registration order."""
        return list(self._iter_accounts())

    def create(self, account: Account) -> Account:
        """Append ``account`` unless its username is already registered.

        The existence check and the append happen under the registry lock so
        concurrent registrations of one name cannot both succeed.
        """
        with self._lock:
            if self.exists(account.username):
                logger.info(
                    "Registration refused: duplicate username",
                    extra={"username": account.username},
                )
                raise DuplicateUsername()
            try:
                self._ensure_file()
                append_line(self.path, encode_account(account))
            except OSError as exc:
                logger.error("Failed to append account", exc_info=True)
                raise StorageError("Could not save the new account") from exc
        return account

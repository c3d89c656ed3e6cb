"""Account registry protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.account import Account


class AccountRepository(Protocol):
    """Append-only store of registered accounts."""

    def exists(self, username: str) -> bool:
        """Return True when an account with this exact username is stored."""
        ...

    def get_by_username(self, username: str) -> Optional[Account]:
        """Retrieve an account by username."""
        ...

    def list_all(self) -> list[Account]:
        """List all accounts in registration order."""
        ...

    def create(self, account: Account) -> Account:
        """Append a new account; raises DuplicateUsername if the name is taken."""
        ...

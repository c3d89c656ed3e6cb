"""Registered account record."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

REGISTERED_AT_FORMAT = "%Y-%m-%d %H:%M:%S"


def _now() -> datetime:
    return datetime.now().replace(microsecond=0)


@dataclass(frozen=True)
class Account:
    """Application user with a hashed credential.

    ``password_hash`` is an argon2 encoded hash; the salt travels inside it.
    """

    username: str
    password_hash: str
    email: str
    registered_at: datetime = field(default_factory=_now)

    @staticmethod
    def default_email(username: str, domain: str) -> str:
        return f"{username.lower()}@{domain}"

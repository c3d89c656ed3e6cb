"""Account registration and authentication services."""

from __future__ import annotations

import logging

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHash, VerificationError, VerifyMismatchError

from ..domain.repositories.account import AccountRepository
from ..errors import InvalidUsername, WeakCredential
from ..models.account import Account

logger = logging.getLogger("financeflow.services.auth")

_hasher = PasswordHasher()

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6
DEFAULT_EMAIL_DOMAIN = "financeflow.com"
_FORBIDDEN_USERNAME_CHARS = ("/", "\\", "&", "\x00", "\r", "\n")


def validate_username(username: str) -> None:
    """Reject usernames that are too short or unusable as a ledger directory.

    ``&`` is refused because a name holding a marker sequence such as
    ``&#44;`` would read back from the registry as a different name.
    """

    if len(username or "") < MIN_USERNAME_LENGTH:
        raise InvalidUsername()
    if username != username.strip() or username in {".", ".."}:
        raise InvalidUsername("Username cannot start or end with spaces")
    if any(ch in username for ch in _FORBIDDEN_USERNAME_CHARS):
        raise InvalidUsername("Username cannot contain slashes, ampersands or line breaks")


def validate_password(password: str) -> None:
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise WeakCredential()


def exists(username: str, *, repository: AccountRepository) -> bool:
    """Return True when an account with exactly this username is registered."""
    return repository.exists(username)


def register(
    *,
    username: str,
    password: str,
    repository: AccountRepository,
    email_domain: str = DEFAULT_EMAIL_DOMAIN,
) -> Account:
    """Create a new account with a salted password hash.

    Raises:
        InvalidUsername: username shorter than three characters or unsafe.
        WeakCredential: password shorter than six characters.
        DuplicateUsername: the username is already registered.
    """

    validate_username(username)
    validate_password(password)
    account = Account(
        username=username,
        password_hash=_hasher.hash(password),
        email=Account.default_email(username, email_domain),
    )
    created = repository.create(account)
    logger.info("Registered account", extra={"username": username})
    return created


def authenticate(*, username: str, password: str, repository: AccountRepository) -> bool:
    """Validate credentials.

    Unknown users and wrong passwords both return False.
    """

    if not username or not password:
        return False
    account = repository.get_by_username(username)
    if account is None:
        logger.info("Authentication failed", extra={"username": username})
        return False
    try:
        _hasher.verify(account.password_hash, password)
    except (VerifyMismatchError, InvalidHash, VerificationError):
        logger.info("Authentication failed", extra={"username": username})
        return False
    return True

"""Exception hierarchy surfaced by the ledger core.

Every exception carries a short message suitable for showing to the user
as-is; callers display ``str(exc)`` and never need the traceback.
"""

from __future__ import annotations


class FinanceFlowError(Exception):
    """Base class for all errors raised by the ledger core."""

    default_message = "Something went wrong"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class ValidationError(FinanceFlowError):
    """Bad user input."""

    default_message = "Invalid input"


class RegistrationError(FinanceFlowError):
    """Registration was refused."""

    default_message = "Registration failed"


class InvalidUsername(ValidationError, RegistrationError):
    default_message = "Username must be at least 3 characters"


class WeakCredential(ValidationError, RegistrationError):
    default_message = "Password must be at least 6 characters"


class PasswordMismatch(ValidationError, RegistrationError):
    default_message = "Passwords do not match"


class DuplicateUsername(RegistrationError):
    default_message = "Username already exists"


class InvalidAmount(ValidationError):
    default_message = "Please enter a valid amount"


class InvalidBudget(ValidationError):
    default_message = "Invalid budget amount"


class InvalidTransaction(ValidationError):
    default_message = "Invalid transaction"


class AuthError(FinanceFlowError):
    default_message = "Authentication failed"


class InvalidCredentials(AuthError):
    default_message = "Invalid credentials"


class NotAuthenticated(AuthError):
    default_message = "Please log in first"


class NotFound(FinanceFlowError):
    default_message = "Transaction not found"


class DecodeError(FinanceFlowError, ValueError):
    """A single stored record could not be decoded."""

    default_message = "Malformed record"


class StorageError(FinanceFlowError):
    """Durable storage was unavailable or a write could not be committed."""

    default_message = "Storage is unavailable"


__all__ = [
    "AuthError",
    "DecodeError",
    "DuplicateUsername",
    "FinanceFlowError",
    "InvalidAmount",
    "InvalidBudget",
    "InvalidCredentials",
    "InvalidTransaction",
    "InvalidUsername",
    "NotAuthenticated",
    "NotFound",
    "PasswordMismatch",
    "RegistrationError",
    "StorageError",
    "ValidationError",
    "WeakCredential",
]

"""Domain model exports."""

from .account import Account
from .transaction import Transaction, TransactionKind

__all__ = [
    "Account",
    "Transaction",
    "TransactionKind",
]

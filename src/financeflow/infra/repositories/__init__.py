"""Concrete repository implementations backed by flat text files."""

from .account import CsvAccountRepository
from .ledger import CsvLedgerRepository

__all__ = [
    "CsvAccountRepository",
    "CsvLedgerRepository",
]

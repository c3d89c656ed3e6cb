"""Service module exports."""

from . import analytics, auth, export_csv, ledger_service

__all__ = [
    "analytics",
    "auth",
    "export_csv",
    "ledger_service",
]

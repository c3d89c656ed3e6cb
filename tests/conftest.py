"""Pytest configuration and shared fixtures for FinanceFlow tests.

Every test gets its own data directory under ``tmp_path`` so no test touches
a real ledger or account registry.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

import pytest

from financeflow.config import BaseConfig
from financeflow.domain.starter import starter_transactions
from financeflow.infra.repositories import CsvAccountRepository, CsvLedgerRepository
from financeflow.models.transaction import Transaction, TransactionKind
from financeflow.services.ledger_service import LedgerService

# Fixed reference date used by the service clock in tests.
TODAY = date(2026, 3, 15)

_ENV_VARS = (
    "FINANCEFLOW_DATA_DIR",
    "FINANCEFLOW_DEV_MODE",
    "FINANCEFLOW_MONTHLY_BUDGET",
    "FINANCEFLOW_EXPORT_RETENTION",
    "FINANCEFLOW_EMAIL_DOMAIN",
    "FINANCEFLOW_SEED_NEW_LEDGERS",
    "FINANCEFLOW_WORKERS",
    "FINANCEFLOW_USERNAME",
    "FINANCEFLOW_PASSWORD",
)


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Point configuration at a throwaway directory and reset logging after."""

    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("FINANCEFLOW_DATA_DIR", str(tmp_path / "instance"))
    monkeypatch.setenv("FINANCEFLOW_DEV_MODE", "0")
    yield
    package_logger = logging.getLogger("financeflow")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()


@pytest.fixture
def config(tmp_path) -> BaseConfig:
    return BaseConfig(data_dir=tmp_path / "instance")


@pytest.fixture
def account_repo(config) -> CsvAccountRepository:
    return CsvAccountRepository(config.accounts_path)


@pytest.fixture
def ledger_repo(config) -> CsvLedgerRepository:
    return CsvLedgerRepository(config.ledger_dir, seed=starter_transactions)


@pytest.fixture
def service(config, account_repo, ledger_repo):
    """Ledger service whose clock is pinned to ``TODAY``."""

    svc = LedgerService(
        accounts=account_repo,
        ledgers=ledger_repo,
        export_dir=config.export_dir,
        default_budget=Decimal("50000"),
        export_retention=3,
        workers=2,
        clock=lambda: TODAY,
    )
    yield svc
    svc.shutdown()


@pytest.fixture
def alice_session(service):
    """A session logged in as ``alice`` with the starter ledger loaded."""

    service.register("alice", "secret1", "secret1")
    return service.login(service.new_session(), "alice", "secret1")


@pytest.fixture
def transaction_factory():
    """Factory for building transactions with sensible defaults.

    Returns:
        Callable: Function that returns Transaction instances
    """

    def _create(
        amount: str = "100",
        kind: TransactionKind = TransactionKind.EXPENSE,
        category: str = "Food & Dining",
        on: date = TODAY,
        note: str = "",
    ) -> Transaction:
        return Transaction(
            date=on,
            kind=kind,
            category=category,
            amount=Decimal(amount),
            note=note,
        )

    return _create

"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .config import BaseConfig
from .domain.starter import starter_transactions
from .infra.repositories import CsvAccountRepository, CsvLedgerRepository
from .services.ledger_service import LedgerService


@dataclass
class AppContext:
    """Centralized application context with repositories and services."""

    config: BaseConfig
    account_repo: CsvAccountRepository
    ledger_repo: CsvLedgerRepository
    ledger_service: LedgerService

    def close(self) -> None:
        self.ledger_service.shutdown()


def create_app_context(config: Optional[BaseConfig] = None) -> AppContext:
    """Create and wire the repositories and the ledger service."""

    if config is None:
        config = BaseConfig()

    account_repo = CsvAccountRepository(config.accounts_path)
    ledger_repo = CsvLedgerRepository(
        config.ledger_dir,
        seed=starter_transactions if config.SEED_NEW_LEDGERS else None,
    )
    ledger_service = LedgerService(
        accounts=account_repo,
        ledgers=ledger_repo,
        export_dir=config.export_dir,
        default_budget=config.MONTHLY_BUDGET,
        email_domain=config.EMAIL_DOMAIN,
        export_retention=config.EXPORT_RETENTION,
        workers=config.WORKERS,
    )

    return AppContext(
        config=config,
        account_repo=account_repo,
        ledger_repo=ledger_repo,
        ledger_service=ledger_service,
    )

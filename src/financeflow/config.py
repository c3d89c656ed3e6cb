"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from decimal import Decimal, InvalidOperation
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "FinanceFlow"
    ACCOUNTS_FILENAME = "Accounts.csv"
    EXPORT_DIRNAME = "exports"
    LEDGER_DIRNAME = "ledgers"
    LOG_FILENAME = "financeflow.log"

    def __init__(self, data_dir: Path | str | None = None) -> None:
        self.DATA_DIR = self._resolve_data_dir(data_dir)
        self.DEV_MODE = _env_bool("FINANCEFLOW_DEV_MODE", default=True)
        self.MONTHLY_BUDGET = self._resolve_budget()
        self.EXPORT_RETENTION = _env_int("FINANCEFLOW_EXPORT_RETENTION", 5)
        self.EMAIL_DOMAIN = os.getenv("FINANCEFLOW_EMAIL_DOMAIN", "financeflow.com")
        self.SEED_NEW_LEDGERS = _env_bool("FINANCEFLOW_SEED_NEW_LEDGERS", default=True)
        self.WORKERS = max(1, _env_int("FINANCEFLOW_WORKERS", 4))

    def _resolve_data_dir(self, override: Path | str | None = None) -> Path:
        """Return the directory where the registry, ledgers and exports live."""

        data_root = override or os.getenv("FINANCEFLOW_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _resolve_budget(self) -> Decimal:
        raw = os.getenv("FINANCEFLOW_MONTHLY_BUDGET", "50000")
        try:
            budget = Decimal(raw.strip())
        except InvalidOperation as exc:
            raise ValueError(f"FINANCEFLOW_MONTHLY_BUDGET is not a number: {raw!r}") from exc
        if not budget.is_finite() or budget <= 0:
            raise ValueError("FINANCEFLOW_MONTHLY_BUDGET must be a positive number.")
        return budget

    @property
    def accounts_path(self) -> Path:
        return Path(self.DATA_DIR) / self.ACCOUNTS_FILENAME

    @property
    def ledger_dir(self) -> Path:
        return Path(self.DATA_DIR) / self.LEDGER_DIRNAME

    @property
    def export_dir(self) -> Path:
        return Path(self.DATA_DIR) / self.EXPORT_DIRNAME

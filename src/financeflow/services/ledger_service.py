"""Use cases the user interface drives: accounts, sessions and ledger edits."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Optional, TypeVar, Union

from ..constants.categories import DEFAULT_EXPENSE_CATEGORY, INCOME_CATEGORY
from ..domain.repositories import AccountRepository, LedgerRepository
from ..errors import (
    InvalidAmount,
    InvalidBudget,
    InvalidCredentials,
    NotAuthenticated,
    NotFound,
    PasswordMismatch,
    StorageError,
    ValidationError,
)
from ..infra.codec import parse_amount
from ..models.account import Account
from ..models.transaction import Transaction, TransactionKind
from . import analytics, auth
from .export_csv import EXPORT_RETENTION, export_transactions_csv

logger = logging.getLogger("financeflow.services.ledger_service")

T = TypeVar("T")
AmountInput = Union[str, Decimal, int, float]
KindInput = Union[str, TransactionKind]


class SessionState(str, Enum):
    LOGGED_OUT = "logged_out"
    LOGGED_IN = "logged_in"


@dataclass
class LedgerSession:
    """One user's login and the in-memory copy of their ledger.

    Sessions are plain values handed to every service call, so any number
    of them can be open at once.
    """

    budget: Decimal
    username: Optional[str] = None
    transactions: list[Transaction] = field(default_factory=list)

    @property
    def state(self) -> SessionState:
        return SessionState.LOGGED_IN if self.username is not None else SessionState.LOGGED_OUT

    @property
    def is_authenticated(self) -> bool:
        return self.username is not None

    def require_username(self) -> str:
        """Return the logged-in username or raise if logged out."""

        if self.username is None:
            raise NotAuthenticated()
        return self.username


def parse_amount_input(raw: AmountInput) -> Decimal:
    """Parse a typed amount, keeping its magnitude if a sign was entered."""

    if isinstance(raw, bool):
        raise InvalidAmount()
    text = raw if isinstance(raw, str) else str(raw)
    if not text.strip():
        raise InvalidAmount()
    try:
        value = parse_amount(text)
    except ValueError as exc:
        raise InvalidAmount() from exc
    return abs(value)


def parse_budget_input(raw: AmountInput) -> Decimal:
    """Parse a monthly budget; it must be strictly positive."""

    try:
        value = parse_amount(raw if isinstance(raw, str) else str(raw))
    except ValueError as exc:
        raise InvalidBudget() from exc
    if value <= 0:
        raise InvalidBudget("Budget must be greater than zero")
    return value


class LedgerService:
    """Coordinates the account registry, ledger store and analytics."""

    def __init__(
        self,
        *,
        accounts: AccountRepository,
        ledgers: LedgerRepository,
        export_dir: Path,
        default_budget: Decimal = Decimal("50000"),
        email_domain: str = auth.DEFAULT_EMAIL_DOMAIN,
        export_retention: int = EXPORT_RETENTION,
        workers: int = 4,
        clock: Callable[[], date] = date.today,
    ):
        self.accounts = accounts
        self.ledgers = ledgers
        self.export_dir = Path(export_dir)
        self.default_budget = default_budget
        self.email_domain = email_domain
        self.export_retention = export_retention
        self.clock = clock
        self._workers = workers
        self._executor: Optional[ThreadPoolExecutor] = None
        self._executor_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Sessions and accounts
    # ------------------------------------------------------------------

    def new_session(self) -> LedgerSession:
        return LedgerSession(budget=self.default_budget)

    def register(self, username: str, password: str, confirm: str) -> Account:
        """Create an account. The caller stays logged out and must log in."""

        if not username or not password or not confirm:
            raise ValidationError("Please fill all fields")
        if password != confirm:
            raise PasswordMismatch()
        return auth.register(
            username=username,
            password=password,
            repository=self.accounts,
            email_domain=self.email_domain,
        )

    def login(self, session: LedgerSession, username: str, password: str) -> LedgerSession:
        """Authenticate and load the user's ledger into ``session``.

        Any previous login held by ``session`` is discarded first. On failure
        the session is left logged out.
        """

        if session.is_authenticated:
            self.logout(session)
        if not username or not password:
            raise ValidationError("Please fill all fields")
        if not auth.authenticate(username=username, password=password, repository=self.accounts):
            raise InvalidCredentials()

        transactions = self.ledgers.load(username, today=self.clock())
        session.username = username
        session.transactions = list(transactions)
        logger.info(
            "Session started",
            extra={"username": username, "transactions": len(session.transactions)},
        )
        return session

    def logout(self, session: LedgerSession) -> None:
        """Drop the login and the in-memory ledger without saving."""

        session.username = None
        session.transactions = []
        session.budget = self.default_budget

    # ------------------------------------------------------------------
    # Ledger edits
    # ------------------------------------------------------------------

    def list_transactions(self, session: LedgerSession) -> list[Transaction]:
        """Return the session's transactions, most recently added first."""

        session.require_username()
        return list(session.transactions)

    def add_transaction(
        self,
        session: LedgerSession,
        *,
        kind: KindInput,
        category: str,
        amount: AmountInput,
        note: str = "",
        on: Optional[date] = None,
    ) -> analytics.LedgerTotals:
        """Validate, prepend and persist a new entry; return updated totals."""

        session.require_username()
        value = parse_amount_input(amount)
        transaction = Transaction(
            date=on or self.clock(),
            kind=TransactionKind.parse(kind),
            category=(category or "").strip(),
            amount=value,
            note=(note or "").strip(),
        )
        self._commit(session, [transaction, *session.transactions])
        return analytics.compute_totals(session.transactions)

    def quick_add(
        self,
        session: LedgerSession,
        kind: KindInput,
        amount: AmountInput,
        note: str = "",
        category: Optional[str] = None,
    ) -> analytics.LedgerTotals:
        """Add an entry dated today with the default category for its kind."""

        resolved = TransactionKind.parse(kind)
        if resolved is TransactionKind.INCOME:
            category = INCOME_CATEGORY
        elif not category:
            category = DEFAULT_EXPENSE_CATEGORY
        return self.add_transaction(
            session, kind=resolved, category=category, amount=amount, note=note
        )

    def delete_transaction(self, session: LedgerSession, transaction_id: str) -> analytics.LedgerTotals:
        """Remove the entry with ``transaction_id`` and persist the ledger."""

        session.require_username()
        remaining = [txn for txn in session.transactions if txn.id != transaction_id]
        if len(remaining) == len(session.transactions):
            raise NotFound()
        self._commit(session, remaining)
        return analytics.compute_totals(session.transactions)

    def _commit(self, session: LedgerSession, updated: list[Transaction]) -> None:
        """Persist ``updated``; adopt it in memory only once it is durable."""

        username = session.require_username()
        try:
            self.ledgers.save(username, updated)
        except StorageError:
            session.transactions = self._reload(username, fallback=session.transactions)
            raise
        session.transactions = updated

    def _reload(self, username: str, *, fallback: list[Transaction]) -> list[Transaction]:
        try:
            return list(self.ledgers.load(username, today=self.clock()))
        except StorageError:
            logger.error("Could not re-read ledger after failed save", extra={"username": username})
            return fallback

    def export_ledger(self, session: LedgerSession) -> Path:
        """Write the in-memory ledger to a new timestamped export file."""

        username = session.require_username()
        return export_transactions_csv(
            username=username,
            transactions=session.transactions,
            output_dir=self.export_dir,
            retention=self.export_retention,
        )

    # ------------------------------------------------------------------
    # Budget and summaries
    # ------------------------------------------------------------------

    def set_budget(self, session: LedgerSession, raw: AmountInput) -> Decimal:
        session.require_username()
        session.budget = parse_budget_input(raw)
        return session.budget

    def totals(self, session: LedgerSession) -> analytics.LedgerTotals:
        session.require_username()
        return analytics.compute_totals(session.transactions)

    def budget_status(self, session: LedgerSession, today: Optional[date] = None) -> analytics.BudgetStatus:
        session.require_username()
        return analytics.budget_status(session.transactions, today or self.clock(), session.budget)

    def dashboard(self, session: LedgerSession, today: Optional[date] = None) -> analytics.DashboardSummary:
        session.require_username()
        return analytics.build_dashboard(session.transactions, today or self.clock(), session.budget)

    # ------------------------------------------------------------------
    # Background execution
    # ------------------------------------------------------------------

    def submit(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> "Future[T]":
        """Run a blocking call (login, registration, save) on the worker pool."""

        with self._executor_lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self._workers, thread_name_prefix="financeflow"
                )
            executor = self._executor
        return executor.submit(fn, *args, **kwargs)

    def shutdown(self) -> None:
        with self._executor_lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=True)

"""Command-line interface for FinanceFlow."""

from __future__ import annotations

import functools
from decimal import Decimal
from pathlib import Path

import click

from .config import BaseConfig
from .constants.categories import category_suggestions, is_known_category
from .context import AppContext, create_app_context
from .errors import FinanceFlowError
from .logging_config import setup_logging
from .services.ledger_service import LedgerSession


def _money(value: Decimal) -> str:
    return f"{value:,.2f}"


def _handle_errors(func):
    """Turn core errors into a one-line message and exit status 1."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except FinanceFlowError as exc:
            raise click.ClickException(str(exc)) from exc

    return wrapper


def _credentials(func):
    func = click.option(
        "--password",
        prompt=True,
        hide_input=True,
        envvar="FINANCEFLOW_PASSWORD",
        help="Account password (prompted when omitted).",
    )(func)
    func = click.option(
        "--username", "-u", required=True, envvar="FINANCEFLOW_USERNAME", help="Account username."
    )(func)
    return func


def _login(app: AppContext, username: str, password: str) -> LedgerSession:
    service = app.ledger_service
    return service.login(service.new_session(), username, password)


@click.group()
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding accounts, ledgers and exports.",
)
@click.pass_context
def main(ctx: click.Context, data_dir: Path | None) -> None:
    """FinanceFlow personal ledger."""

    config = BaseConfig(data_dir=data_dir)
    setup_logging(config)
    app = create_app_context(config)
    ctx.obj = app
    ctx.call_on_close(app.close)


@main.command()
@click.argument("username")
@click.option("--password", prompt=True, hide_input=True, help="New password.")
@click.option("--confirm", prompt="Confirm password", hide_input=True, help="Repeat the password.")
@click.pass_obj
@_handle_errors
def register(app: AppContext, username: str, password: str, confirm: str) -> None:
    """Create a new account."""

    account = app.ledger_service.register(username, password, confirm)
    click.echo(f"Account created successfully for {account.username}. Please log in.")


@main.command("list")
@_credentials
@click.pass_obj
@_handle_errors
def list_transactions(app: AppContext, username: str, password: str) -> None:
    """List transactions, most recently added first."""

    session = _login(app, username, password)
    transactions = app.ledger_service.list_transactions(session)
    if not transactions:
        click.echo("No transactions yet")
        return
    for index, txn in enumerate(transactions, start=1):
        sign = "+" if txn.is_income else "-"
        note = f"  {txn.note}" if txn.note else ""
        click.echo(
            f"{index:>3}. {txn.date.isoformat()}  {txn.kind.value:<7}  "
            f"{txn.category:<18} {sign}{_money(txn.amount)}{note}"
        )


@main.command()
@_credentials
@click.option(
    "--type",
    "kind",
    type=click.Choice(["income", "expense"], case_sensitive=False),
    required=True,
)
@click.option("--category", required=True, help="See the categories command for suggestions.")
@click.option("--amount", required=True, help="Amount; a sign is ignored.")
@click.option("--note", default="")
@click.option("--date", "on", type=click.DateTime(formats=["%Y-%m-%d"]), default=None)
@click.pass_obj
@_handle_errors
def add(app, username, password, kind, category, amount, note, on) -> None:
    """Add a transaction."""

    session = _login(app, username, password)
    totals = app.ledger_service.add_transaction(
        session,
        kind=kind,
        category=category,
        amount=amount,
        note=note,
        on=on.date() if on else None,
    )
    if not is_known_category(category.strip()):
        click.echo(f"Note: '{category.strip()}' is not a suggested category")
    click.echo("Transaction added successfully!")
    _echo_totals(totals)


@main.command()
@click.option(
    "--type",
    "kind",
    type=click.Choice(["income", "expense"], case_sensitive=False),
    default=None,
    help="Only show categories suggested for this type.",
)
def categories(kind: str | None) -> None:
    """List the suggested categories."""

    for name in category_suggestions(kind):
        click.echo(name)


@main.command("quick-add")
@_credentials
@click.argument("kind", type=click.Choice(["income", "expense"], case_sensitive=False))
@click.argument("amount")
@click.option("--category", default=None, help="Expense category (defaults to Food & Dining).")
@click.option("--note", default="")
@click.pass_obj
@_handle_errors
def quick_add(app, username, password, kind, amount, category, note) -> None:
    """Add an income or expense dated today."""

    session = _login(app, username, password)
    totals = app.ledger_service.quick_add(session, kind, amount, note=note, category=category)
    click.echo(f"{kind.capitalize()} added successfully!")
    _echo_totals(totals)


@main.command()
@_credentials
@click.argument("position", type=click.IntRange(min=1))
@click.pass_obj
@_handle_errors
def delete(app: AppContext, username: str, password: str, position: int) -> None:
    """Delete the transaction shown at POSITION by the list command."""

    session = _login(app, username, password)
    transactions = app.ledger_service.list_transactions(session)
    if position > len(transactions):
        raise click.ClickException(f"No transaction at position {position}")
    totals = app.ledger_service.delete_transaction(session, transactions[position - 1].id)
    click.echo("Transaction deleted")
    _echo_totals(totals)


@main.command()
@_credentials
@click.pass_obj
@_handle_errors
def export(app: AppContext, username: str, password: str) -> None:
    """Export the ledger to a timestamped file."""

    session = _login(app, username, password)
    path = app.ledger_service.export_ledger(session)
    click.echo(f"Data exported successfully to {path.name}")


@main.command()
@_credentials
@click.option("--budget", default=None, help="Monthly budget to measure against.")
@click.pass_obj
@_handle_errors
def summary(app: AppContext, username: str, password: str, budget: str | None) -> None:
    """Show the dashboard figures."""

    service = app.ledger_service
    session = _login(app, username, password)
    if budget is not None:
        service.set_budget(session, budget)
    board = service.dashboard(session)

    _echo_totals(board.totals)
    click.echo(f"This month: income {_money(board.monthly_income)}, expenses {_money(board.monthly_expenses)}")
    click.echo(f"This week:  income {_money(board.weekly_income)}, expenses {_money(board.weekly_expenses)}")
    click.echo(f"Daily average expense: {_money(board.daily_average_expense)}")
    click.echo(
        f"Budget: {_money(board.budget.budget)}, remaining {_money(board.budget.remaining)} "
        f"({board.budget.utilization:.1f}% used)"
    )
    if board.breakdown:
        click.echo("Spending by category:")
        for share in board.breakdown:
            click.echo(f"  {share.category:<18} {_money(share.amount):>12}  {share.percentage:.1f}%")
    click.echo("Last 7 days:")
    for point in board.daily_trend:
        click.echo(
            f"  {point.day.strftime('%b %d')}  +{_money(point.income):>10}  -{_money(point.expenses):>10}"
        )
    click.echo("Monthly expenses:")
    for month in board.monthly_trend:
        click.echo(f"  {month.label}  {_money(month.expenses):>12}")


@main.command("budget")
@_credentials
@click.argument("amount")
@click.pass_obj
@_handle_errors
def budget_cmd(app: AppContext, username: str, password: str, amount: str) -> None:
    """Check this month's spending against a budget of AMOUNT."""

    service = app.ledger_service
    session = _login(app, username, password)
    service.set_budget(session, amount)
    status = service.budget_status(session)
    click.echo(f"Budget updated to {_money(status.budget)}")
    click.echo(f"Spent: {_money(status.spent)}")
    click.echo(f"Remaining: {_money(status.remaining)}")
    click.echo(f"{status.utilization:.1f}% used" + (" (over budget)" if status.over_budget else ""))


def _echo_totals(totals) -> None:
    click.echo(
        f"Income {_money(totals.income)} | Expenses {_money(totals.expenses)} | "
        f"Balance {totals.balance:+,.2f}"
    )


if __name__ == "__main__":  # pragma: no cover
    main()

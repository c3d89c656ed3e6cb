"""Tests for the per-user flat-file ledger store."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

import pytest

from financeflow.errors import StorageError
from financeflow.infra import files
from financeflow.infra.codec import LEDGER_HEADER
from financeflow.infra.repositories import CsvLedgerRepository
from financeflow.models.transaction import TransactionKind

TODAY = date(2026, 3, 15)


def test_first_load_seeds_and_persists_starter_data(ledger_repo):
    first = ledger_repo.load("carol", today=TODAY)

    assert len(first) == 6
    assert ledger_repo.path_for("carol").exists()
    assert ledger_repo.path_for("carol").name == "carol.csv"
    assert ledger_repo.path_for("carol").parent.name == "carol"

    second = ledger_repo.load("carol", today=TODAY + timedelta(days=3))
    assert second == first


def test_starter_data_contents(ledger_repo):
    entries = ledger_repo.load("carol", today=TODAY)

    income = [txn for txn in entries if txn.kind is TransactionKind.INCOME]
    expenses = [txn for txn in entries if txn.kind is TransactionKind.EXPENSE]
    assert len(income) == 1
    assert income[0].amount == Decimal("45000")
    assert income[0].date == TODAY
    assert len(expenses) == 5
    assert len({txn.category for txn in expenses}) == 5
    assert all(txn.date < TODAY for txn in expenses)
    assert sum(txn.amount for txn in expenses) == Decimal("5270")


def test_unseeded_store_creates_empty_ledger(config):
    repo = CsvLedgerRepository(config.ledger_dir)

    assert repo.load("erin") == []
    assert repo.path_for("erin").read_text(encoding="utf-8") == LEDGER_HEADER + "\n"


def test_save_then_load_preserves_order(ledger_repo, transaction_factory):
    entries = [
        transaction_factory(amount="10", note="newest"),
        transaction_factory(amount="20", on=TODAY - timedelta(days=40), note="old"),
        transaction_factory(amount="5", kind=TransactionKind.INCOME, category="Income"),
    ]

    ledger_repo.save("alice", entries)

    assert ledger_repo.load("alice") == entries
    lines = ledger_repo.path_for("alice").read_text(encoding="utf-8").splitlines()
    assert lines[0] == LEDGER_HEADER
    assert lines[1] == "2026-03-15,Expense,Food & Dining,10,newest"


def test_ledgers_are_isolated_per_user(ledger_repo, transaction_factory):
    ledger_repo.save("alice", [transaction_factory(amount="1")])
    ledger_repo.save("bob", [transaction_factory(amount="2"), transaction_factory(amount="3")])

    assert len(ledger_repo.load("alice")) == 1
    assert len(ledger_repo.load("bob")) == 2


def test_ledger_path_keeps_username_case(ledger_repo):
    lower = ledger_repo.path_for("alice")
    upper = ledger_repo.path_for("Alice")

    assert lower != upper
    assert upper.relative_to(ledger_repo.root).parts == ("Alice", "Alice.csv")


def test_invalid_lines_are_skipped(ledger_repo, caplog):
    path = ledger_repo.path_for("alice")
    path.parent.mkdir(parents=True)
    path.write_text(
        "\n".join(
            [
                LEDGER_HEADER,
                "2026-03-01,Expense,Shopping,20,ok",
                "garbage",
                "2026-03-02,Expense,Shopping,-4,negative",
                "",
                "2026-03-03,Income,Income,100,",
            ]
        )
        + "\n",
        encoding="utf-8",
    )

    entries = ledger_repo.load("alice")

    assert [txn.amount for txn in entries] == [Decimal("20"), Decimal("100")]
    assert caplog.text.count("Skipping invalid ledger line") == 2


def test_failed_replace_keeps_previous_ledger(ledger_repo, transaction_factory, monkeypatch):
    ledger_repo.save("alice", [transaction_factory(amount="10")])
    path = ledger_repo.path_for("alice")
    before = path.read_text(encoding="utf-8")

    def broken_replace(src, dst):
        raise OSError("disk went away")

    monkeypatch.setattr(files.os, "replace", broken_replace)

    with pytest.raises(StorageError):
        ledger_repo.save("alice", [transaction_factory(amount="99")])

    assert path.read_text(encoding="utf-8") == before
    assert [p.name for p in path.parent.iterdir()] == ["alice.csv"]


def test_interrupted_write_leaves_target_untouched(tmp_path):
    target = tmp_path / "ledger.csv"
    target.write_text("old\n", encoding="utf-8")

    def exploding_lines():
        yield "first"
        raise RuntimeError("crash mid-write")

    with pytest.raises(RuntimeError):
        files.atomic_write_lines(target, exploding_lines())

    assert target.read_text(encoding="utf-8") == "old\n"
    assert [p.name for p in tmp_path.iterdir()] == ["ledger.csv"]


def test_read_lines_tolerates_crlf_and_missing_final_newline(tmp_path):
    target = tmp_path / "rows.csv"
    target.write_bytes(b"a\r\nb\r\nc")

    assert files.read_lines(target) == ["a", "b", "c"]


def test_path_lock_is_shared_per_file(tmp_path):
    first = files.path_lock(tmp_path / "x.csv")
    second = files.path_lock(str(tmp_path / "x.csv"))

    assert first is second
    assert files.path_lock(tmp_path / "y.csv") is not first

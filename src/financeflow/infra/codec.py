"""Flat-text record codec shared by ledgers, the account registry and exports.

Rows are comma-delimited with no CSV quoting. Commas and double quotes in
free-text fields are replaced by fixed marker sequences instead, and the
markers are blindly restored on the way back in. Text that already contains
a marker sequence before encoding does not survive a round trip unchanged.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from ..errors import DecodeError, InvalidTransaction
from ..models.account import REGISTERED_AT_FORMAT, Account
from ..models.transaction import Transaction, TransactionKind

DELIMITER = ","
COMMA_MARKER = "&#44;"
QUOTE_MARKER = "&quot;"

LEDGER_HEADER = "date,type,category,amount,note"
EXPORT_HEADER = "Date,Type,Category,Amount,Note"
ACCOUNTS_HEADER = "username,password,email,registration_date"

_TRANSACTION_FIELDS = 5
_ACCOUNT_FIELDS = 4


def escape_field(text: str | None) -> str:
    if text is None:
        return ""
    return text.replace(",", COMMA_MARKER).replace('"', QUOTE_MARKER)


def unescape_field(text: str | None) -> str:
    if text is None:
        return ""
    return text.replace(COMMA_MARKER, ",").replace(QUOTE_MARKER, '"')


def format_amount(amount: Decimal) -> str:
    """Plain positional decimal: no exponent, no separators, no symbol."""
    return format(amount, "f")


def parse_amount(text: str) -> Decimal:
    """Parse a stored or typed amount; raises ``ValueError`` for non-numbers."""

    try:
        value = Decimal(text.strip())
    except InvalidOperation as exc:
        raise ValueError(f"not a number: {text!r}") from exc
    if not value.is_finite():
        raise ValueError(f"not a finite number: {text!r}")
    return value


def encode_transaction(transaction: Transaction) -> str:
    """Encode a transaction as ``date,kind,category,amount,note``."""

    return DELIMITER.join(
        (
            transaction.date.isoformat(),
            escape_field(transaction.kind.value),
            escape_field(transaction.category),
            format_amount(transaction.amount),
            escape_field(transaction.note),
        )
    )


def decode_transaction(line: str) -> Transaction:
    """Decode one ledger row back into a :class:`Transaction`.

    Raises:
        DecodeError: too few fields, bad date, bad or negative amount,
            unknown kind or empty category.
    """

    parts = line.rstrip("\r\n").split(DELIMITER)
    if len(parts) < _TRANSACTION_FIELDS:
        raise DecodeError(f"expected {_TRANSACTION_FIELDS} fields, found {len(parts)}")

    raw_date, raw_kind, raw_category, raw_amount, raw_note = parts[:_TRANSACTION_FIELDS]
    try:
        occurred_on = date.fromisoformat(raw_date.strip())
    except ValueError as exc:
        raise DecodeError(f"unparsable date {raw_date!r}") from exc

    try:
        amount = parse_amount(raw_amount)
    except ValueError as exc:
        raise DecodeError(f"unparsable amount {raw_amount!r}") from exc
    if amount < 0:
        raise DecodeError(f"negative amount {raw_amount!r}")

    try:
        return Transaction(
            date=occurred_on,
            kind=TransactionKind.parse(unescape_field(raw_kind)),
            category=unescape_field(raw_category),
            amount=amount,
            note=unescape_field(raw_note),
        )
    except InvalidTransaction as exc:
        raise DecodeError(str(exc)) from exc


def encode_account(account: Account) -> str:
    return DELIMITER.join(
        (
            escape_field(account.username),
            escape_field(account.password_hash),
            escape_field(account.email),
            account.registered_at.strftime(REGISTERED_AT_FORMAT),
        )
    )


def decode_account(line: str) -> Account:
    parts = line.rstrip("\r\n").split(DELIMITER)
    if len(parts) < _ACCOUNT_FIELDS:
        raise DecodeError(f"expected {_ACCOUNT_FIELDS} fields, found {len(parts)}")
    raw_username, raw_hash, raw_email, raw_registered = parts[:_ACCOUNT_FIELDS]
    username = unescape_field(raw_username)
    if not username:
        raise DecodeError("empty username")
    try:
        registered_at = datetime.strptime(raw_registered.strip(), REGISTERED_AT_FORMAT)
    except ValueError as exc:
        raise DecodeError(f"unparsable registration date {raw_registered!r}") from exc
    return Account(
        username=username,
        password_hash=unescape_field(raw_hash),
        email=unescape_field(raw_email),
        registered_at=registered_at,
    )

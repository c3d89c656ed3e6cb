"""Ledger export artifacts.

Exports use the ledger row encoding under a capitalised header and are
write-only: nothing in the application reads them back.
"""

from __future__ import annotations

import glob
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional

from ..errors import StorageError
from ..infra.codec import EXPORT_HEADER, encode_transaction
from ..infra.files import atomic_write_lines, path_lock
from ..models.transaction import Transaction

logger = logging.getLogger("financeflow.services.export_csv")

EXPORT_RETENTION = 5
_STAMP_FORMAT = "%Y%m%d_%H%M%S"


def export_filename(username: str, stamp: datetime) -> str:
    return f"{username}_finance_export_{stamp.strftime(_STAMP_FORMAT)}.csv"


def _ensure_secure_directory(directory: Path) -> None:
    """Create the directory and set restrictive permissions when possible."""

    directory.mkdir(parents=True, exist_ok=True)
    try:
        os.chmod(directory, 0o700)
    except (NotImplementedError, PermissionError):  # pragma: no cover - platform specific
        pass


def _unique_path(directory: Path, username: str, stamp: datetime) -> Path:
    base = directory / export_filename(username, stamp)
    candidate = base
    counter = 1
    while candidate.exists():
        candidate = base.with_name(f"{base.stem}_{counter}{base.suffix}")
        counter += 1
    return candidate


def _prune_old_exports(directory: Path, username: str, keep: int = EXPORT_RETENTION) -> None:
    """Remove this user's exports beyond the retention count."""

    if keep <= 0:
        return
    exports = sorted(directory.glob(f"{glob.escape(username)}_finance_export_*.csv"), reverse=True)
    for old in exports[keep:]:
        try:
            old.unlink()
        except OSError:  # pragma: no cover - best-effort cleanup
            logger.warning("Could not prune old export", extra={"path": str(old)})


def export_transactions_csv(
    *,
    username: str,
    transactions: Iterable[Transaction],
    output_dir: Path,
    retention: int = EXPORT_RETENTION,
    now: Optional[datetime] = None,
) -> Path:
    """Write ``transactions`` to a timestamped export file and return its path.

    Rows keep the order of ``transactions``.
    """

    stamp = now or datetime.now()
    lines = [EXPORT_HEADER]
    lines.extend(encode_transaction(txn) for txn in transactions)
    try:
        _ensure_secure_directory(output_dir)
        # Name choice, write and pruning must not interleave with another export.
        with path_lock(output_dir):
            output_path = _unique_path(output_dir, username, stamp)
            atomic_write_lines(output_path, lines)
            _prune_old_exports(output_dir, username, keep=retention)
    except OSError as exc:
        logger.error("Export failed", extra={"username": username}, exc_info=True)
        raise StorageError("Could not write the export file") from exc

    logger.info(
        "Export written",
        extra={"username": username, "path": str(output_path), "rows": len(lines) - 1},
    )
    return output_path

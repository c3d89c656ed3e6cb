"""File primitives for the flat-text stores."""

from __future__ import annotations

import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Iterable

logger = logging.getLogger("financeflow.infra.files")

_PATH_LOCKS: dict[Path, threading.RLock] = {}
_PATH_LOCKS_GUARD = threading.Lock()


def path_lock(target: Path) -> threading.RLock:
    """Return the process-wide lock serializing writers of ``target``.

    Every store instance pointing at the same file shares one lock.
    """

    key = Path(target).resolve()
    with _PATH_LOCKS_GUARD:
        lock = _PATH_LOCKS.get(key)
        if lock is None:
            lock = _PATH_LOCKS[key] = threading.RLock()
        return lock


def _fsync_dir(directory: Path) -> None:
    """Persist a rename on POSIX; not every platform can open a directory."""
    try:
        fd = os.open(directory, os.O_RDONLY)
    except OSError:
        logger.debug("Directory fsync unsupported for %s", directory)
        return
    try:
        os.fsync(fd)
    except OSError:
        logger.warning("Directory fsync failed (best-effort): %s", directory)
    finally:
        os.close(fd)


def atomic_write_lines(target: Path, lines: Iterable[str]) -> None:
    """Replace ``target`` with ``lines`` so readers see either old or new content.

    The content goes to a temporary file next to the target, is flushed and
    fsynced, then moved over the target with :func:`os.replace`. The live
    file is never truncated. On any failure the temporary file is removed and
    the ``OSError`` propagates with the target untouched.
    """

    target = Path(target)
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as fh:
            for line in lines:
                fh.write(line)
                fh.write("\n")
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_path, target)
    except BaseException:
        try:
            tmp_path.unlink(missing_ok=True)
        except OSError:
            logger.exception("Failed to remove temporary file %s", tmp_path)
        raise
    _fsync_dir(target.parent)


def append_line(target: Path, line: str) -> None:
    """Append one line and fsync it before returning."""

    target = Path(target)
    with target.open("a", encoding="utf-8", newline="\n") as fh:
        fh.write(line)
        fh.write("\n")
        fh.flush()
        os.fsync(fh.fileno())


def read_lines(target: Path) -> list[str]:
    """Return the file's lines without line terminators."""

    with Path(target).open("r", encoding="utf-8", newline="") as fh:
        content = fh.read()
    if not content:
        return []
    lines = content.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line.rstrip("\r") for line in lines]

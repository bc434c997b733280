"""Atomic cache writes and per-destination producer locks."""

import os
import tempfile
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from os import PathLike
from pathlib import Path

from loguru import logger

from ..common.errors import EncodeError

# Entries live only while some thread holds or waits for the lock
_locks: dict[Path, threading.Lock] = {}
_lock_users: dict[Path, int] = {}
_locks_guard = threading.Lock()


@contextmanager
def destination_lock(dest_path: str | PathLike[str]) -> Iterator[None]:
    """Serialise producers of the same destination within this process."""
    key = Path(dest_path).absolute()
    with _locks_guard:
        lock = _locks.setdefault(key, threading.Lock())
        _lock_users[key] = _lock_users.get(key, 0) + 1

    try:
        with lock:
            yield
    finally:
        with _locks_guard:
            _lock_users[key] -= 1
            if not _lock_users[key]:
                del _lock_users[key]
                del _locks[key]


@contextmanager
def atomic_output(dest_path: str | PathLike[str]) -> Iterator[Path]:
    """
    Yield a temporary path next to `dest_path` and move it into place on success.

    The temporary file keeps the destination's suffix so tools that infer
    the format from the extension behave the same. It is removed if the
    body raises.

    Raises:
        EncodeError: If the temporary file cannot be created or moved into place
    """
    dest = Path(dest_path)
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{dest.stem}.", suffix=dest.suffix, dir=dest.parent)
    except OSError as exc:
        raise EncodeError(f"Cannot create a temporary file in {dest.parent}: {exc}") from exc
    os.close(fd)
    tmp_path = Path(tmp_name)

    try:
        yield tmp_path
        try:
            # mkstemp creates 0600; published assets must be world-readable
            os.chmod(tmp_path, 0o644)
            os.replace(tmp_path, dest)
        except OSError as exc:
            raise EncodeError(f"Cannot move {tmp_path.name} into place as {dest}: {exc}") from exc
        logger.debug(f"Moved {tmp_path.name} into place as {dest}")
    finally:
        tmp_path.unlink(missing_ok=True)

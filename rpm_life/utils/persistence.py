# JSON persistence helpers with file locking on *nix/Windows

from __future__ import annotations

import json
import logging
import os
import threading
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator

from rpm_life.store.errors import MalformedStore, StoreLockTimeout

logger = logging.getLogger(__name__)

# One in-process lock per resolved path; the .lock file covers other processes.
_THREAD_LOCKS: Dict[str, threading.Lock] = {}
_THREAD_LOCKS_GUARD = threading.Lock()

# A .lock file older than this is treated as abandoned.
STALE_LOCK_SECONDS = 30.0


def _lock_path(p: Path) -> Path:
    return p.with_suffix(p.suffix + ".lock")


def _thread_lock(p: Path) -> threading.Lock:
    key = str(p.resolve())
    with _THREAD_LOCKS_GUARD:
        lock = _THREAD_LOCKS.get(key)
        if lock is None:
            lock = _THREAD_LOCKS[key] = threading.Lock()
        return lock


def _break_stale(lock: Path, seen: os.stat_result) -> None:
    """Remove `lock` only if it is still the file that was judged stale."""
    grave = lock.with_name(f"{lock.name}.{os.getpid()}.{threading.get_ident()}.stale")
    try:
        os.rename(lock, grave)
    except FileNotFoundError:
        return
    now = grave.stat()
    if (now.st_ino, now.st_mtime_ns) != (seen.st_ino, seen.st_mtime_ns):
        # Another writer broke it first and took a fresh lock; hand that back
        try:
            os.link(grave, lock)
        except FileExistsError:
            logger.warning("Lock %s re-taken while breaking a stale one", lock)
    else:
        logger.warning("Broke stale lock %s (%.1fs old)", lock, time.time() - seen.st_mtime)
    grave.unlink(missing_ok=True)


def _acquire_lock(p: Path, timeout: float = 3.0, poll: float = 0.05) -> None:
    lock = _lock_path(p)
    lock.parent.mkdir(parents=True, exist_ok=True)
    deadline = time.monotonic() + timeout
    while True:
        try:
            fd = os.open(lock, os.O_CREAT | os.O_EXCL | os.O_WRONLY)
        except FileExistsError:
            try:
                seen = lock.stat()
            except FileNotFoundError:
                continue
            if time.time() - seen.st_mtime > STALE_LOCK_SECONDS:
                # Left behind by a crashed writer
                _break_stale(lock, seen)
                continue
            if time.monotonic() > deadline:
                raise StoreLockTimeout(p)
            time.sleep(poll)
            continue
        with os.fdopen(fd, "w") as f:
            f.write(str(os.getpid()))
        return


def _release_lock(p: Path) -> None:
    _lock_path(p).unlink(missing_ok=True)


@contextmanager
def locked(path: str | Path, timeout: float = 3.0) -> Iterator[None]:
    """Hold both the in-process and the on-disk lock for `path`."""
    p = Path(path)
    deadline = time.monotonic() + timeout
    tlock = _thread_lock(p)
    if not tlock.acquire(timeout=timeout):
        raise StoreLockTimeout(p)
    try:
        # One budget for both waits
        _acquire_lock(p, timeout=max(0.0, deadline - time.monotonic()))
        try:
            yield
        finally:
            _release_lock(p)
    finally:
        tlock.release()


def dumps(data: Any) -> str:
    # NaN/Infinity are not JSON
    return json.dumps(data, indent=2, ensure_ascii=False, allow_nan=False) + "\n"


def load_json(path: str | Path) -> Any:
    """Parse the file at `path`; a missing or unparsable file is a MalformedStore."""
    p = Path(path)
    try:
        with p.open("r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        raise MalformedStore(p, "file does not exist") from None
    except json.JSONDecodeError as e:
        raise MalformedStore(p, f"invalid JSON: {e}") from e


def save_json(path: str | Path, data: Any) -> None:
    """Replace the file contents atomically (temp file + os.replace)."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    text = dumps(data)
    tmp = p.with_suffix(p.suffix + ".tmp")
    with tmp.open("w", encoding="utf-8") as f:
        f.write(text)
        f.flush()
        os.fsync(f.fileno())
    os.replace(tmp, p)

"""Locks and atomic writes for the JSON data files.

Every data file gets one ``PathLock`` per process.  It is reentrant,
serializes threads of this process, and holds an OS-level lock on a
sibling ``.lock`` file so separate ``shelf`` processes serialize too.
"""

from __future__ import annotations

import os
import tempfile
import threading
from pathlib import Path

from filelock import FileLock

_registry_guard = threading.Lock()
_locks: dict[Path, PathLock] = {}


class PathLock:

    def __init__(self, file_path: Path) -> None:
        self._thread_lock = threading.RLock()
        # one holder at a time is guaranteed by the RLock
        self._file_lock = FileLock(f"{file_path}.lock", thread_local=False)

    def __enter__(self) -> PathLock:
        self._thread_lock.acquire()
        try:
            self._file_lock.acquire()
        except BaseException:
            self._thread_lock.release()
            raise
        return self

    def __exit__(self, *exc_info) -> None:
        try:
            self._file_lock.release()
        finally:
            self._thread_lock.release()


def lock_for(file_path: Path) -> PathLock:
    key = file_path.resolve()
    with _registry_guard:
        lock = _locks.get(key)
        if lock is None:
            key.parent.mkdir(parents=True, exist_ok=True)
            lock = _locks[key] = PathLock(key)
        return lock


def write_atomic(file_path: Path, text: str) -> None:
    """Replace *file_path* with *text*; readers see the old or the new file, never a partial one."""
    fd, tmp_name = tempfile.mkstemp(dir=file_path.parent, prefix=f".{file_path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as tmp:
            tmp.write(text)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_name, file_path)
    except BaseException:
        os.unlink(tmp_name)
        raise

"""Append-only log writer with an exclusive lock and truncate-on-overflow rotation."""

import os
from enum import Enum

from filelog.filelock import FileLockError, acquire_lock, release_lock

DEFAULT_MAX_FILE_SIZE_BYTES = 10 * 1024 * 1024  # 10 MB


class WriteResult(Enum):
    WRITTEN = "written"
    ROTATED = "rotated"
    OPEN_FAILED = "open_failed"
    LOCK_FAILED = "lock_failed"
    WRITE_FAILED = "write_failed"

    @property
    def ok(self) -> bool:
        return self in (WriteResult.WRITTEN, WriteResult.ROTATED)


class LogWriter:
    """Appends rendered entries to a single size-bounded file.

    Each append opens its own handle, takes an exclusive lock, checks the
    size, truncates the file when the entry would push it past the cap,
    writes, flushes, unlocks and closes. Failures are reported through
    ``WriteResult`` and never raised.
    """

    def __init__(self, path: str, max_file_size_bytes: int = DEFAULT_MAX_FILE_SIZE_BYTES):
        self._path = path
        self._max_file_size_bytes = max_file_size_bytes

    @property
    def path(self) -> str:
        return self._path

    @property
    def max_file_size_bytes(self) -> int:
        return self._max_file_size_bytes

    def _ensure_directory(self):
        dir_path = os.path.dirname(self._path)
        if dir_path and not os.path.isdir(dir_path):
            try:
                os.makedirs(dir_path, mode=0o755, exist_ok=True)
            except (OSError, ValueError):
                # The open below fails and reports it.
                pass

    def _open(self):
        # Read/write, create if missing, never truncate on open.
        fd = os.open(self._path, os.O_RDWR | os.O_CREAT, 0o644)
        try:
            return os.fdopen(fd, "r+b")
        except OSError:
            os.close(fd)
            raise

    def _enforce_limit(self, f, incoming_bytes: int) -> bool:
        """Truncate when the incoming entry would exceed the cap. Returns True if truncated."""
        current = os.fstat(f.fileno()).st_size
        if current + incoming_bytes <= self._max_file_size_bytes:
            f.seek(0, os.SEEK_END)
            return False

        f.truncate(0)
        f.seek(0)
        return True

    def append(self, entry: str) -> WriteResult:
        """Append one rendered entry. Never raises for I/O problems."""
        data = entry.encode("utf-8", errors="replace")
        self._ensure_directory()

        try:
            f = self._open()
        except (OSError, ValueError):
            return WriteResult.OPEN_FAILED

        try:
            with f:
                return self._locked_append(f, data)
        except OSError:
            # close() flushes again and may fail
            return WriteResult.WRITE_FAILED

    def _locked_append(self, f, data: bytes) -> WriteResult:
        try:
            acquire_lock(f)
        except FileLockError:
            return WriteResult.LOCK_FAILED

        try:
            truncated = self._enforce_limit(f, len(data))
            f.write(data)
            f.flush()
        except OSError:
            return WriteResult.WRITE_FAILED
        finally:
            try:
                release_lock(f)
            except FileLockError:
                pass

        return WriteResult.ROTATED if truncated else WriteResult.WRITTEN

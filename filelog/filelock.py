"""Cross-platform exclusive advisory locks on open file handles.

POSIX systems use ``fcntl.flock``; Windows uses ``msvcrt.locking`` on the
first byte of the file. Locks are blocking by default.
"""

import sys


class FileLockError(Exception):
    """A lock could not be acquired or released."""


class LockAcquisitionError(FileLockError):
    """The lock is held elsewhere and a non-blocking acquire was requested."""


def acquire_lock(file_handle, non_blocking: bool = False) -> None:
    if sys.platform == "win32":
        _acquire_lock_windows(file_handle, non_blocking)
    else:
        _acquire_lock_unix(file_handle, non_blocking)


def release_lock(file_handle) -> None:
    if sys.platform == "win32":
        _release_lock_windows(file_handle)
    else:
        _release_lock_unix(file_handle)


def _acquire_lock_unix(file_handle, non_blocking: bool) -> None:
    import fcntl

    flags = fcntl.LOCK_EX
    if non_blocking:
        flags |= fcntl.LOCK_NB
    try:
        fcntl.flock(file_handle.fileno(), flags)
    except BlockingIOError as e:
        raise LockAcquisitionError(f"Lock is held by another process: {file_handle.name}") from e
    except OSError as e:
        raise FileLockError(f"fcntl.flock failed: {e}") from e


def _release_lock_unix(file_handle) -> None:
    import fcntl

    try:
        fcntl.flock(file_handle.fileno(), fcntl.LOCK_UN)
    except OSError as e:
        raise FileLockError(f"fcntl.flock unlock failed: {e}") from e


def _acquire_lock_windows(file_handle, non_blocking: bool) -> None:
    import msvcrt

    mode = msvcrt.LK_NBLCK if non_blocking else msvcrt.LK_LOCK
    position = file_handle.tell()
    try:
        file_handle.seek(0)
        msvcrt.locking(file_handle.fileno(), mode, 1)
    except OSError as e:
        # errno 13 / 36: the region is locked by someone else
        if e.errno in (13, 36):
            raise LockAcquisitionError(f"Lock is held by another process: {file_handle.name}") from e
        raise FileLockError(f"msvcrt.locking failed: {e}") from e
    finally:
        file_handle.seek(position)


def _release_lock_windows(file_handle) -> None:
    import msvcrt

    position = file_handle.tell()
    try:
        file_handle.seek(0)
        msvcrt.locking(file_handle.fileno(), msvcrt.LK_UNLCK, 1)
    except OSError as e:
        raise FileLockError(f"msvcrt.locking unlock failed: {e}") from e
    finally:
        file_handle.seek(position)

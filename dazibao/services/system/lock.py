"""
Single-Instance Lock

A lock file created with O_EXCL holds the PID of the running server.
It is removed on shutdown; a stale file left by a crash must be deleted
by hand.
"""

import os
from pathlib import Path

from dazibao.common.exceptions import LockError
from dazibao.common.logging_setup import get_service_logger

logger = get_service_logger("system.lock")


class InstanceLock:
    """Exclusive lock file guarding against a second server instance"""

    def __init__(self, path: Path):
        self.path = Path(path)
        self._fd: int | None = None

    @property
    def is_held(self) -> bool:
        return self._fd is not None

    def acquire(self) -> None:
        """
        Create the lock file and write our PID into it.

        Raises:
            LockError: If the file already exists or cannot be created
        """
        if self._fd is not None:
            return

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(self.path, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
        except FileExistsError as e:
            raise LockError(
                f"Another instance of dazibao is already running. Lock file exists: {self.path}",
                str(self.path),
            ) from e
        except OSError as e:
            raise LockError(f"Failed to create lock file {self.path}: {e}", str(self.path)) from e

        try:
            os.write(fd, str(os.getpid()).encode("ascii"))
        except OSError as e:
            os.close(fd)
            self._remove()
            raise LockError(f"Failed to write PID to lock file: {e}", str(self.path)) from e

        self._fd = fd
        logger.info(f"Acquired lock: {self.path} (PID: {os.getpid()})")

    def release(self) -> None:
        """Close and remove the lock file. Safe to call more than once."""
        if self._fd is None:
            return

        try:
            os.close(self._fd)
        except OSError as e:
            logger.warning(f"Failed to close lock file {self.path}: {e}")
        self._fd = None

        if self._remove():
            logger.info(f"Released lock: {self.path}")

    def _remove(self) -> bool:
        try:
            self.path.unlink()
            return True
        except OSError as e:
            logger.warning(f"Failed to remove lock file {self.path}: {e}")
            return False

    def __enter__(self) -> "InstanceLock":
        self.acquire()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.release()
        return False

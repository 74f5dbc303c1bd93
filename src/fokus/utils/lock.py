"""Single-instance lock file holding the owner's PID."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from fokus.models.errors import AlreadyRunning

logger = logging.getLogger(__name__)


def pid_alive(pid: int) -> bool:
    """Return True if a process with *pid* exists."""
    if pid <= 0:
        return False
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        # Exists but belongs to someone else
        return True
    except OSError:
        return False
    return True


class InstanceLock:
    """Context manager guarding against two fokus processes sharing history."""

    def __init__(self, path: Path | None = None):
        if path is None:
            from platformdirs import user_config_dir

            path = Path(user_config_dir("fokus")) / "fokus.lock"
        self.path = path
        self.acquired = False

    def acquire(self) -> None:
        """
        Create the lock file with our PID.

        A lock left behind by a dead process (or with unreadable contents) is
        removed first.

        Raises:
            AlreadyRunning: If a live process holds the lock
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)

        if self.path.exists():
            owner = self._read_owner()
            if owner is not None and owner != os.getpid() and pid_alive(owner):
                raise AlreadyRunning(
                    "Another instance is already running. There can only be one fokus "
                    f"instance at a time (pid {owner})."
                )
            logger.info("Removing stale lock %s (pid %s)", self.path, owner)
            self.path.unlink(missing_ok=True)

        try:
            fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
        except FileExistsError as e:
            raise AlreadyRunning("Another instance started at the same time.") from e
        with os.fdopen(fd, "w") as f:
            f.write(str(os.getpid()))
        self.acquired = True

    def release(self) -> None:
        """Remove the lock file if we created it."""
        if self.acquired:
            self.path.unlink(missing_ok=True)
            self.acquired = False

    def _read_owner(self) -> int | None:
        try:
            return int(self.path.read_text().strip())
        except (OSError, ValueError):
            return None

    def __enter__(self) -> InstanceLock:
        self.acquire()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

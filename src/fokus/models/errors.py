"""Custom exceptions for fokus."""


class FokusError(Exception):
    """Base exception for all fokus errors."""


class InvalidTarget(FokusError, ValueError):
    """Raised when a timer duration falls outside the allowed minute range."""

    def __init__(self, minutes: int):
        self.minutes = minutes
        super().__init__(f"Timer duration must be between 1 and 999 minutes, got {minutes}")


class CorruptHistory(FokusError):
    """Raised (or recorded) when the history file cannot be parsed.

    Recoverable: loading continues with an empty log and the original file is
    left untouched until the next successful save.
    """

    def __init__(self, path, reason: str, backup_path=None):
        self.path = path
        self.reason = reason
        self.backup_path = backup_path
        super().__init__(f"History file {path} is corrupt: {reason}")


class PersistenceFailed(FokusError):
    """Raised when the daily log could not be written to disk.

    The in-memory log already holds the new minutes; the write is retried on
    the next commit.
    """


class AlreadyRunning(FokusError):
    """Raised when another fokus instance holds the lock file."""

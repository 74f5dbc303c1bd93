"""Daily focus log stored as a JSON object of ISO date -> minutes."""

from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
from collections.abc import Iterator
from datetime import date, datetime
from pathlib import Path
from typing import Any

from .errors import CorruptHistory, PersistenceFailed

logger = logging.getLogger(__name__)

DailyLog = dict[date, int]


class HistoryStore:
    """Manages the daily minute totals and their history file."""

    def __init__(self, path: Path | None = None):
        """Initialize the store. Nothing is read until ``load()``."""
        if path is None:
            from platformdirs import user_config_dir

            path = Path(user_config_dir("fokus")) / "history.json"

        self.path = path
        self.log: DailyLog = {}
        # Entries we could not interpret, written back untouched on save.
        self._unknown: dict[str, Any] = {}
        self.load_error: CorruptHistory | None = None
        self.dirty = False

    def load(self, backup: bool = True) -> DailyLog:
        """
        Read the history file into memory.

        A missing file yields an empty log. A file that is not a JSON object
        also yields an empty log; ``load_error`` is set to a CorruptHistory
        and, when *backup* is true, a timestamped backup copy is made. The
        file itself stays in place until the next successful save.

        Only canonical ``YYYY-MM-DD`` keys count as dates. Compact or week
        forms such as ``20240501`` are kept as unknown entries.
        """
        self.log = {}
        self._unknown = {}
        self.load_error = None
        self.dirty = False

        if not self.path.exists():
            return self.log

        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError(f"expected a JSON object, got {type(data).__name__}")
        except (OSError, ValueError) as e:
            self.load_error = CorruptHistory(
                self.path, str(e), self._backup() if backup else None
            )
            logger.warning("%s; starting with an empty log", self.load_error)
            return self.log

        for key, value in data.items():
            day = _parse_day(key)
            if day is None or isinstance(value, bool) or not isinstance(value, int) or value < 0:
                self._unknown[key] = value
                continue
            self.log[day] = value

        logger.debug("Loaded %d history entries from %s", len(self.log), self.path)
        return self.log

    def commit(self, day: date, minutes: int) -> None:
        """
        Add *minutes* to *day* and persist the whole log.

        Args:
            day: Calendar date the minutes belong to
            minutes: Positive number of whole minutes

        Raises:
            ValueError: If minutes is not a positive integer
            PersistenceFailed: If the file could not be written. The minutes
                are kept in memory and written again on the next commit.
        """
        if isinstance(minutes, bool) or not isinstance(minutes, int) or minutes < 1:
            raise ValueError(f"minutes must be a positive integer, got {minutes!r}")

        key = day.isoformat()
        if key in self._unknown:
            logger.warning(
                "Dropping unreadable value %r for %s; it is replaced by this commit",
                self._unknown.pop(key),
                key,
            )

        self.log[day] = self.log.get(day, 0) + minutes
        self.dirty = True
        logger.info("Committed %d min to %s (total %d)", minutes, key, self.log[day])
        self.save()

    def save(self) -> None:
        """Atomically replace the history file with the in-memory log."""
        payload: dict[str, Any] = dict(self._unknown)
        for day, minutes in sorted(self.log.items()):
            payload[day.isoformat()] = minutes

        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.stem}-",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_name = f.name
                json.dump(payload, f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as e:
            logger.error("Failed to save history to %s: %s", self.path, e)
            raise PersistenceFailed(f"could not write {self.path}: {e}") from e
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass

        self.dirty = False
        self.load_error = None

    def flush(self) -> bool:
        """Best-effort save of a log whose last write failed. Returns success."""
        if not self.dirty:
            return True
        try:
            self.save()
        except PersistenceFailed:
            return False
        return True

    def minutes_for(self, day: date) -> int:
        """Total minutes banked on *day*."""
        return self.log.get(day, 0)

    def entries_sorted(self) -> Iterator[tuple[date, int]]:
        """Yield ``(date, minutes)`` newest first, re-derived on every call."""
        for day in sorted(self.log, reverse=True):
            yield day, self.log[day]

    def unparsed_keys(self) -> list[str]:
        """Keys from the file that are not ISO dates with a minute count."""
        return sorted(self._unknown)

    def _backup(self) -> Path | None:
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        backup = self.path.with_name(f"{self.path.stem}_{stamp}.json.bak")
        try:
            shutil.copy2(self.path, backup)
        except OSError as e:
            logger.error("Could not back up corrupt history %s: %s", self.path, e)
            return None
        return backup


def _parse_day(key: str) -> date | None:
    try:
        day = date.fromisoformat(key)
    except (TypeError, ValueError):
        return None
    # fromisoformat also accepts "20240501" and "2024-W18-3"
    return day if day.isoformat() == key else None

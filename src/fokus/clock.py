"""Clock sources used by the session engine."""

from __future__ import annotations

import time
from datetime import date, datetime
from typing import Protocol


class ClockSource(Protocol):
    """Provides time readings to the session engine.

    ``now()`` is monotonic seconds and is only meaningful as a difference
    between two readings. ``today()`` is the local calendar date used to
    bucket banked minutes.
    """

    def now(self) -> float: ...

    def today(self) -> date: ...


class SystemClock:
    """Clock backed by ``time.monotonic`` and the local wall clock."""

    def now(self) -> float:
        return time.monotonic()

    def today(self) -> date:
        return datetime.now().astimezone().date()

"""Shared test fixtures and configuration.

Provides a controllable clock and filesystem-isolated history stores so no
test touches real platform directories or depends on wall-clock timing.
"""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from fokus.models.history import HistoryStore
from fokus.models.pages import PageController
from fokus.models.session import SessionEngine

TODAY = date(2024, 5, 1)


class FakeClock:
    """ClockSource whose time only moves when a test advances it."""

    def __init__(self, start: float = 1000.0, today: date = TODAY):
        self.t = start
        self.day = today

    def now(self) -> float:
        return self.t

    def today(self) -> date:
        return self.day

    def advance(self, seconds: float = 0, minutes: float = 0) -> None:
        self.t += seconds + minutes * 60

    def next_day(self) -> None:
        self.day += timedelta(days=1)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def history_path(tmp_path):
    return tmp_path / "fokus" / "history.json"


@pytest.fixture()
def store(history_path) -> HistoryStore:
    s = HistoryStore(path=history_path)
    s.load()
    return s


@pytest.fixture()
def engine(store, clock) -> SessionEngine:
    return SessionEngine(store, clock=clock)


@pytest.fixture()
def controller(engine, store) -> PageController:
    return PageController(engine, store)

"""Page state machine routing key events to the session engine and history."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum

from .history import HistoryStore
from .session import SessionEngine, SessionMode, SessionStatus

DEFAULT_HISTORY_ROWS = 10


class Page(Enum):
    STOPWATCH = 0
    TIMER = 1
    HISTORY = 2

    @property
    def title(self) -> str:
        return self.name.capitalize()

    def next(self) -> Page:
        pages = list(Page)
        return pages[(pages.index(self) + 1) % len(pages)]

    def previous(self) -> Page:
        pages = list(Page)
        return pages[(pages.index(self) - 1) % len(pages)]


class Key(Enum):
    """Normalized key symbols."""

    SPACE = " "
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"
    H = "h"
    J = "j"
    K = "k"
    L = "l"
    Q = "q"
    OTHER = ""

    @classmethod
    def parse(cls, raw: Key | str | None) -> Key:
        """Map a raw key string onto a Key; unknown input becomes OTHER."""
        if isinstance(raw, Key):
            return raw
        if not raw:
            return cls.OTHER
        try:
            return cls(raw if raw == " " else raw.lower())
        except ValueError:
            return cls.OTHER


_PAGE_MODES = {
    Page.STOPWATCH: SessionMode.STOPWATCH,
    Page.TIMER: SessionMode.TIMER,
}


@dataclass(frozen=True)
class PageViewModel:
    """Everything the renderer needs for one frame."""

    page: Page
    mode: SessionMode
    status: SessionStatus
    elapsed: float
    remaining: float
    target_minutes: int
    minutes_today: int
    history: tuple[tuple[date, int], ...]
    history_offset: int
    history_total: int
    unparsed_history: tuple[str, ...] = ()
    notice: str | None = None

    @property
    def page_number(self) -> int:
        return self.page.value + 1

    @property
    def page_count(self) -> int:
        return len(Page)

    @property
    def page_session_running(self) -> bool:
        """Whether the session shown on this page is counting."""
        return (
            self.page in _PAGE_MODES
            and self.mode is _PAGE_MODES[self.page]
            and self.status is SessionStatus.RUNNING
        )


class PageController:
    """Top-level state machine over the Stopwatch, Timer and History pages."""

    def __init__(
        self,
        engine: SessionEngine,
        history: HistoryStore,
        history_rows: int = DEFAULT_HISTORY_ROWS,
    ):
        self.engine = engine
        self.history = history
        self.history_rows = max(1, history_rows)
        self.page = Page.STOPWATCH
        self.history_offset = 0
        self.quit_requested = False
        self._frame_at = engine.clock.now()

    def handle_key(self, key: Key | str | None) -> None:
        """Apply one key press to the active page."""
        self._frame_at = self.engine.clock.now()

        match Key.parse(key):
            case Key.Q:
                self.quit_requested = True
            case Key.H | Key.LEFT:
                self.page = self.page.previous()
            case Key.L | Key.RIGHT:
                self.page = self.page.next()
            case Key.SPACE:
                if self.page in _PAGE_MODES:
                    self.engine.toggle(_PAGE_MODES[self.page])
            case Key.K | Key.UP:
                self._vertical(-1)
            case Key.J | Key.DOWN:
                self._vertical(1)
            case Key.OTHER:
                pass

        # A toggle may have started a session at a fresh clock reading.
        self._frame_at = self.engine.clock.now()

    def tick(self):
        """Advance the engine one frame and freeze the clock for rendering."""
        self._frame_at = self.engine.clock.now()
        return self.engine.tick(self._frame_at)

    def view_model(self) -> PageViewModel:
        """Snapshot of the current frame. Does not mutate any state."""
        engine = self.engine
        entries = list(self.history.entries_sorted())
        offset = self._clamp_offset(self.history_offset, len(entries))
        return PageViewModel(
            page=self.page,
            mode=engine.mode,
            status=engine.status,
            elapsed=engine.elapsed(self._frame_at),
            remaining=engine.remaining(self._frame_at),
            target_minutes=engine.target_minutes,
            minutes_today=self.history.minutes_for(engine.clock.today()),
            history=tuple(entries[offset : offset + self.history_rows]),
            history_offset=offset,
            history_total=len(entries),
            unparsed_history=tuple(self.history.unparsed_keys()),
            notice=engine.notice,
        )

    def _vertical(self, step: int) -> None:
        # Up (-1) lengthens the timer and scrolls history towards newer days.
        match self.page:
            case Page.TIMER:
                if self.engine.status is SessionStatus.IDLE:
                    self.engine.adjust_target(-step)
            case Page.HISTORY:
                total = sum(1 for _ in self.history.entries_sorted())
                self.history_offset = self._clamp_offset(self.history_offset + step, total)
            case Page.STOPWATCH:
                pass

    @staticmethod
    def _clamp_offset(offset: int, total: int) -> int:
        return max(0, min(offset, max(0, total - 1)))

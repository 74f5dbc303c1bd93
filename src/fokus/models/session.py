"""Session engine: the single stopwatch/timer session and its banking rules."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum

from fokus.clock import ClockSource, SystemClock

from .errors import InvalidTarget, PersistenceFailed
from .history import HistoryStore

logger = logging.getLogger(__name__)

TARGET_MIN_MINUTES = 1
TARGET_MAX_MINUTES = 999
DEFAULT_TARGET_MINUTES = 25


class SessionMode(str, Enum):
    STOPWATCH = "stopwatch"
    TIMER = "timer"


class SessionStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    # Part of the status type for completeness; no engine operation enters it.
    PAUSED = "paused"
    COMPLETED = "completed"


def clamp_target(minutes: int) -> int:
    """Clamp a timer duration into the allowed minute range."""
    return max(TARGET_MIN_MINUTES, min(TARGET_MAX_MINUTES, int(minutes)))


def validate_target(minutes: int) -> int:
    """Return *minutes* unchanged or raise InvalidTarget."""
    if isinstance(minutes, bool) or not isinstance(minutes, int):
        raise InvalidTarget(minutes)
    if not TARGET_MIN_MINUTES <= minutes <= TARGET_MAX_MINUTES:
        raise InvalidTarget(minutes)
    return minutes


@dataclass
class SessionState:
    """The one active session record."""

    mode: SessionMode = SessionMode.STOPWATCH
    status: SessionStatus = SessionStatus.IDLE
    started_at: float | None = None  # clock.now() reading
    accumulated: float = 0.0  # seconds banked across pause/resume
    target_minutes: int = DEFAULT_TARGET_MINUTES

    @property
    def target_seconds(self) -> float:
        return float(self.target_minutes * 60)

    @property
    def is_active(self) -> bool:
        return self.status in (SessionStatus.RUNNING, SessionStatus.PAUSED)


@dataclass(frozen=True)
class BankedSession:
    """Minutes committed to the daily log when a session ends."""

    mode: SessionMode
    minutes: int
    day: date
    completed: bool


class SessionEngine:
    """Owns the session state and commits finished sessions to history."""

    def __init__(
        self,
        history: HistoryStore,
        clock: ClockSource | None = None,
        default_target: int = DEFAULT_TARGET_MINUTES,
    ):
        self.history = history
        self.clock = clock or SystemClock()
        self.state = SessionState(target_minutes=clamp_target(default_target))
        # Last persistence failure, shown by the UI until a commit succeeds.
        self.notice: str | None = None

    @property
    def status(self) -> SessionStatus:
        return self.state.status

    @property
    def mode(self) -> SessionMode:
        return self.state.mode

    @property
    def target_minutes(self) -> int:
        return self.state.target_minutes

    def start(self, mode: SessionMode, target: int | None = None) -> None:
        """Start a new session.

        Does nothing while a session is running or paused; the caller has to
        reset first. A completed session is cleared before starting again.

        Raises:
            InvalidTarget: If *mode* is TIMER and the duration is outside
                1-999 minutes. The session stays idle.
        """
        state = self.state
        if state.is_active:
            return

        if mode is SessionMode.TIMER:
            minutes = state.target_minutes if target is None else target
            validate_target(minutes)
            state.target_minutes = minutes

        if state.status is SessionStatus.COMPLETED:
            self._to_idle()

        state.mode = mode
        state.accumulated = 0.0
        state.started_at = self.clock.now()
        state.status = SessionStatus.RUNNING
        logger.debug("Started %s session (target %d min)", mode.value, state.target_minutes)

    def toggle(self, mode: SessionMode | None = None) -> BankedSession | None:
        """Start/reset control bound to the space bar.

        Idle starts a session in *mode* (or the last used mode). Running or
        paused stops and banks it. Completed returns to idle.
        """
        match self.state.status:
            case SessionStatus.IDLE:
                self.start(mode or self.state.mode)
                return None
            case SessionStatus.RUNNING | SessionStatus.PAUSED:
                return self.reset()
            case SessionStatus.COMPLETED:
                self._to_idle()
                return None

    def elapsed(self, at: float | None = None) -> float:
        """Seconds of focus in the current session.

        *at* is an optional clock reading; the live clock is used otherwise.
        Timer sessions never report more than their target.
        """
        state = self.state
        total = state.accumulated
        if state.status is SessionStatus.RUNNING and state.started_at is not None:
            now = self.clock.now() if at is None else at
            total += max(0.0, now - state.started_at)
        if state.mode is SessionMode.TIMER:
            total = min(total, state.target_seconds)
        return total

    def remaining(self, at: float | None = None) -> float:
        """Seconds left on the timer, floored at zero. Always 0 for stopwatch."""
        if self.state.mode is not SessionMode.TIMER:
            return 0.0
        return max(0.0, self.state.target_seconds - self.elapsed(at))

    def tick(self, at: float | None = None) -> BankedSession | None:
        """Advance the session by one frame.

        A running timer that has no time left becomes completed and banks its
        full target. Returns the banked session on that transition only.
        """
        state = self.state
        if state.status is not SessionStatus.RUNNING or state.mode is not SessionMode.TIMER:
            return None
        if self.remaining(at) > 0:
            return None

        state.accumulated = state.target_seconds
        state.started_at = None
        state.status = SessionStatus.COMPLETED
        day = self._bank(state.target_minutes)
        logger.info("Timer completed, banked %d min", state.target_minutes)
        return BankedSession(SessionMode.TIMER, state.target_minutes, day, completed=True)

    def reset(self) -> BankedSession | None:
        """Stop the session, bank its whole minutes and return to idle.

        Completed timers were banked when they finished and are not banked
        again. Never raises; persistence failures end up in ``notice``.
        """
        state = self.state
        if state.status is SessionStatus.IDLE:
            return None
        if state.status is SessionStatus.COMPLETED:
            self._to_idle()
            return None

        minutes = int(self.elapsed() // 60)
        banked = None
        if minutes >= 1:
            day = self._bank(minutes)
            banked = BankedSession(state.mode, minutes, day, completed=False)
        logger.debug("Reset %s session after %d min", state.mode.value, minutes)
        self._to_idle()
        return banked

    def adjust_target(self, delta_minutes: int) -> bool:
        """Change the timer duration while idle. Returns True if it changed."""
        state = self.state
        if state.status is not SessionStatus.IDLE:
            return False
        new_target = clamp_target(state.target_minutes + delta_minutes)
        changed = new_target != state.target_minutes
        state.target_minutes = new_target
        return changed

    def _bank(self, minutes: int) -> date:
        day = self.clock.today()
        try:
            self.history.commit(day, minutes)
        except PersistenceFailed as e:
            logger.warning("Banked %d min in memory only: %s", minutes, e)
            self.notice = f"History not saved: {e}"
        else:
            self.notice = None
        return day

    def _to_idle(self) -> None:
        state = self.state
        state.status = SessionStatus.IDLE
        state.started_at = None
        state.accumulated = 0.0

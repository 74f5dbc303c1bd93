"""Focus session engine, daily history and page state machine."""

from .errors import (
    AlreadyRunning,
    CorruptHistory,
    FokusError,
    InvalidTarget,
    PersistenceFailed,
)
from .history import HistoryStore
from .pages import Key, Page, PageController, PageViewModel
from .session import (
    BankedSession,
    SessionEngine,
    SessionMode,
    SessionState,
    SessionStatus,
)

__all__ = [
    "AlreadyRunning",
    "BankedSession",
    "CorruptHistory",
    "FokusError",
    "HistoryStore",
    "InvalidTarget",
    "Key",
    "Page",
    "PageController",
    "PageViewModel",
    "PersistenceFailed",
    "SessionEngine",
    "SessionMode",
    "SessionState",
    "SessionStatus",
]

"""Cross-platform keyboard input handler producing normalized keys."""

import os
import select
import sys
import time

from .pages import Key

_ESCAPE = "\x1b"
_ANSI_ARROWS = {
    "[A": Key.UP,
    "[B": Key.DOWN,
    "[C": Key.RIGHT,
    "[D": Key.LEFT,
    "OA": Key.UP,
    "OB": Key.DOWN,
    "OC": Key.RIGHT,
    "OD": Key.LEFT,
}
_WINDOWS_ARROWS = {
    "H": Key.UP,
    "P": Key.DOWN,
    "K": Key.LEFT,
    "M": Key.RIGHT,
}


def decode_key(raw: str) -> Key:
    """Turn a raw keypress (possibly an escape sequence) into a Key."""
    if raw.startswith(_ESCAPE):
        return _ANSI_ARROWS.get(raw[1:3], Key.OTHER)
    return Key.parse(raw)


class KeyboardHandler:
    """Non-blocking keyboard input handler for POSIX terminals."""

    def __init__(self):
        self.fd = sys.stdin.fileno()
        self.old_settings = None
        self._setup()

    def _setup(self):
        """Put the terminal into cbreak mode."""
        try:
            import termios
            import tty
        except ImportError:
            # Windows or other platform
            return

        try:
            self.old_settings = termios.tcgetattr(self.fd)
            tty.setcbreak(self.fd)
        except termios.error:
            # Not a TTY
            self.old_settings = None

    def _ready(self, timeout: float) -> bool:
        readable, _, _ = select.select([self.fd], [], [], timeout)
        return bool(readable)

    def _read_char(self) -> str:
        return os.read(self.fd, 1).decode("utf-8", errors="ignore")

    def get_key(self, timeout: float = 0) -> Key | None:
        """
        Wait up to *timeout* seconds for a keypress.

        Returns the decoded Key, or None if nothing was pressed.
        """
        if not self._ready(timeout):
            return None

        raw = self._read_char()
        if raw == _ESCAPE:
            # Arrow keys arrive as ESC [ A..D; a lone ESC has nothing after it
            while len(raw) < 3 and self._ready(0.01):
                raw += self._read_char()
        return decode_key(raw)

    def stop(self):
        """Restore terminal settings."""
        if self.old_settings:
            import termios

            try:
                termios.tcsetattr(self.fd, termios.TCSADRAIN, self.old_settings)
            except termios.error:
                pass


class WindowsKeyboardHandler:
    """Keyboard handler for Windows using msvcrt."""

    def __init__(self):
        try:
            import msvcrt

            self.msvcrt = msvcrt
        except ImportError:
            self.msvcrt = None

    def get_key(self, timeout: float = 0) -> Key | None:
        """Wait up to *timeout* seconds for a keypress."""
        if not self.msvcrt:
            time.sleep(timeout)
            return None

        deadline = time.monotonic() + timeout
        while not self.msvcrt.kbhit():
            if time.monotonic() >= deadline:
                return None
            time.sleep(0.01)

        key = self.msvcrt.getwch()
        if key in ("\x00", "\xe0"):
            return _WINDOWS_ARROWS.get(self.msvcrt.getwch(), Key.OTHER)
        return decode_key(key)

    def stop(self):
        """No cleanup needed on Windows."""
        pass


def get_keyboard_handler():
    """Return the handler matching the current platform."""
    if sys.platform == "win32":
        return WindowsKeyboardHandler()
    return KeyboardHandler()

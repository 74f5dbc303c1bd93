"""Application logger writing to platformdirs user_log_dir.

Modules log through ``logging.getLogger(__name__)``. Every module logger is a
child of ``fokus``, so records reach the rotating file configured here. The
terminal is owned by the full-screen UI, so nothing goes to stderr.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path

from platformdirs import user_log_dir

_APP_NAME = "fokus"
_LOG_FILE = "fokus.log"
_MAX_BYTES = 5 * 1024 * 1024  # 5 MB
_BACKUP_COUNT = 3
_LEVEL_ENV = "FOKUS_LOG_LEVEL"
_OWN_HANDLERS = (logging.handlers.RotatingFileHandler, logging.NullHandler)

_logger: logging.Logger | None = None


def _resolve_level(level: int | str | None) -> int:
    if level is None:
        level = os.environ.get(_LEVEL_ENV, "INFO")
    if isinstance(level, str):
        return logging.getLevelNamesMapping().get(level.upper(), logging.INFO)
    return level


def get_logger(level: int | str | None = None) -> logging.Logger:
    """Return the ``fokus`` logger, attaching the file handler on first call.

    Args:
        level: Logging level; defaults to $FOKUS_LOG_LEVEL or INFO.
    """
    global _logger
    if _logger is not None:
        return _logger

    logger = logging.getLogger(_APP_NAME)
    logger.setLevel(_resolve_level(level))
    logger.propagate = False

    # pytest and other hosts may attach their own capture handlers
    if not any(isinstance(h, _OWN_HANDLERS) for h in logger.handlers):
        log_dir = Path(user_log_dir(_APP_NAME))
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
            handler: logging.Handler = logging.handlers.RotatingFileHandler(
                log_dir / _LOG_FILE,
                maxBytes=_MAX_BYTES,
                backupCount=_BACKUP_COUNT,
                encoding="utf-8",
            )
        except OSError:
            # Read-only home; run without a log file
            handler = logging.NullHandler()
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S",
            )
        )
        logger.addHandler(handler)

    _logger = logger
    return _logger

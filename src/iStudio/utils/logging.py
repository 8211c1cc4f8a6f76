"""Package logger for the adjustment engine.

Render workers, the preview controller and the preset library log through
``logging.getLogger(__name__)``.  Those records propagate to the ``iStudio``
logger configured here, which owns the only handler.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from ..config import LOG_LEVEL_ENV, LOGGER_NAME

_LOGGER: Optional[logging.Logger] = None


def _level_from_env() -> int:
    name = os.environ.get(LOG_LEVEL_ENV, "").strip().upper()
    level = logging.getLevelName(name) if name else logging.INFO
    return level if isinstance(level, int) else logging.INFO


def get_logger() -> logging.Logger:
    """Return the ``iStudio`` logger, attaching its stream handler once.

    The level defaults to ``INFO``; ``ISTUDIO_LOG_LEVEL=DEBUG`` surfaces the
    dropped stale renders and skipped preset entries.
    """

    global _LOGGER
    if _LOGGER is None:
        _LOGGER = logging.getLogger(LOGGER_NAME)
        if not _LOGGER.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(
                logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
            )
            _LOGGER.addHandler(handler)
        _LOGGER.setLevel(_level_from_env())
    return _LOGGER


logger = get_logger()

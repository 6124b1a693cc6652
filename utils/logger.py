"""
utils/logger.py
---------------
Centralized logging configuration for the API, the recurring sweep and
the schema script. Every module obtains its logger through
`get_logger(__name__)`; the level comes from LOG_LEVEL.
"""

import logging
import sys

from config import LOG_LEVEL

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Chatty per-request loggers from the HTTP stack.
_QUIET_LOGGERS = ("uvicorn.access", "httpx")

_initialized = False


def _init_logging() -> None:
    global _initialized
    if _initialized:
        return
    level = getattr(logging, LOG_LEVEL, logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, _DATE_FORMAT))
    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
    _initialized = True


def get_logger(name: str) -> logging.Logger:
    """Named logger; configures the root logger on first use."""
    _init_logging()
    return logging.getLogger(name)

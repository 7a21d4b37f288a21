"""
utils/logger.py
---------------
Logging setup shared by every module.
Use `get_logger(__name__)`; the root logger is configured on first use.
"""

import logging
import sys

from config import LOG_LEVEL

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Libraries that log every poll or job run at INFO.
_NOISY_LOGGERS = ("httpx", "apscheduler")

_configured = False


def configure_logging(level: str = LOG_LEVEL) -> None:
    """
    Attach a stdout handler to the root logger and set its level.

    Calling it again only changes the level.

    Args:
        level: Level name such as "DEBUG" or "INFO"; unknown names fall back to INFO.
    """
    global _configured
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, _DATE_FORMAT))
    root.addHandler(handler)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    if not _configured:
        configure_logging()
    return logging.getLogger(name)

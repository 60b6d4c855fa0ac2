"""
Logging for the ``reelfeed`` package.

Modules log under ``reelfeed.<component>``. ``setup_feed_logging`` attaches a
console handler, and a file handler when ``FeedSettings.log_dir`` is set, to
the package logger. Calling it again only updates levels.
"""

import logging
import os
from typing import Optional, Union

from .config import FeedSettings

PACKAGE_LOGGER = "reelfeed"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# httpx logs every request at INFO.
_CHATTY_LOGGERS = ("httpx", "httpcore")


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def _is_console_handler(handler: logging.Handler) -> bool:
    return isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler)


def setup_feed_logging(
    settings: Optional[FeedSettings] = None,
    *,
    level: Optional[Union[int, str]] = None,
) -> logging.Logger:
    settings = settings or FeedSettings.from_env()
    resolved_level = _resolve_level(level if level is not None else settings.log_level)

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(resolved_level)
    logger.propagate = False
    formatter = logging.Formatter(LOG_FORMAT)

    if not any(_is_console_handler(h) for h in logger.handlers):
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    log_file = settings.log_file
    if log_file is not None:
        log_path = os.path.abspath(log_file)
        if not any(
            isinstance(h, logging.FileHandler) and h.baseFilename == log_path
            for h in logger.handlers
        ):
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path, encoding="utf-8")
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    for handler in logger.handlers:
        handler.setLevel(resolved_level)

    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(max(resolved_level, logging.WARNING))

    return logger


__all__ = ["setup_feed_logging", "PACKAGE_LOGGER"]

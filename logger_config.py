#!/usr/bin/env python3
"""
Centralized logging configuration for Hot Feeds.
Every module logs through get_logger(); run milestones (feed_generated,
feed_failed, index_written, run_complete) go through log_event() so each
line carries the feed id and its counts as key=value pairs.
"""

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional


def _level_from_env(default: int = logging.INFO) -> int:
    """Resolve LOG_LEVEL (e.g. "DEBUG") to a logging level, falling back to default."""
    name = (os.getenv("LOG_LEVEL") or "").strip().upper()
    level = logging.getLevelName(name) if name else default
    return level if isinstance(level, int) else default


# Configure default log level from environment or use INFO
DEFAULT_LOG_LEVEL = _level_from_env()


class StructuredFormatter(logging.Formatter):
    """
    One line per record: ``<utc-iso> [LEVEL] logger: message | key=value ...``.

    Event data comes from log_event; the feed id, when present, is always
    rendered first so a run's output can be grepped per feed.
    """

    def format(self, record: logging.LogRecord) -> str:
        record.timestamp = datetime.now(timezone.utc).isoformat()

        line = f"{record.timestamp} [{record.levelname}] {record.name}: {record.getMessage()}"
        event_data = getattr(record, 'event_data', None)
        if event_data:
            pairs = " ".join(f"{key}={value}" for key, value in event_data.items())
            line = f"{line} | {pairs}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def setup_logger(name: str, level: int = DEFAULT_LOG_LEVEL) -> logging.Logger:
    """
    Set up a logger with standardized configuration.

    Args:
        name: Logger name (typically __name__ from calling module)
        level: Logging level (default: INFO, or LOG_LEVEL from the environment)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Avoid duplicate handlers if logger already configured
    if logger.handlers:
        return logger

    logger.setLevel(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(StructuredFormatter())

    logger.addHandler(handler)

    return logger


def log_event(logger: logging.Logger, level: str, event_type: str,
              data: Optional[Dict[str, Any]] = None, feed: Optional[str] = None) -> None:
    """
    Log a structured event with optional data.

    Args:
        logger: Logger instance
        level: Log level ('debug', 'info', 'warning', 'error', 'critical')
        event_type: Type of event being logged (e.g. 'feed_generated')
        data: Optional dictionary of additional data
        feed: Feed id the event belongs to; stored as the leading 'feed' key
    """
    event_data: Dict[str, Any] = {'feed': feed} if feed else {}
    event_data.update(data or {})
    log_func = getattr(logger, level.lower())
    log_func(event_type, extra={'event_data': event_data})


def get_logger(name: str) -> logging.Logger:
    """Get a configured logger instance."""
    return setup_logger(name)

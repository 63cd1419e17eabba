"""Logging helpers for commitcoach.

Configuration is driven by a verbosity count from the CLI. Every handler
redacts secrets, IP addresses and email addresses from rendered records.

Contains:
- configure_logging: Set up the commitcoach logger
- RedactingFormatter: Formatter that redacts each rendered record
- snip: Cap text for inclusion in a log line
- LOG_PATH_ENV_VAR: Environment variable naming an optional log file
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional

from commitcoach.security.redactor import Redactor

LOG_PATH_ENV_VAR = "COMMITCOACH_LOG_PATH"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s - %(message)s"
CONSOLE_FORMAT = "%(levelname)s %(name)s: %(message)s"

_redactor = Redactor()


class RedactingFormatter(logging.Formatter):
    """Formatter that passes the final text through log redaction."""

    def format(self, record: logging.LogRecord) -> str:
        return _redactor.redact_for_logging(super().format(record))


def snip(text: str, max_chars: int) -> str:
    """Return at most `max_chars` characters of text, marking truncation.

    Args:
        text: Text to shorten.
        max_chars: Maximum number of characters to keep.

    Returns:
        The text, or its prefix followed by an ellipsis.
    """
    if max_chars <= 0:
        return ""
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + "…"


def _level_for(verbosity: int) -> int:
    if verbosity <= 0:
        return logging.WARNING
    elif verbosity == 1:
        return logging.INFO
    return logging.DEBUG


def configure_logging(verbosity: int = 0, log_path: Optional[str] = None) -> logging.Logger:
    """Configure the commitcoach logger based on a verbosity count.

    verbosity == 0 -> WARNING
    verbosity == 1 -> INFO
    verbosity >= 2 -> DEBUG

    Args:
        verbosity: Number of -v flags given.
        log_path: Optional file that receives DEBUG-level records in append
            mode. Defaults to $COMMITCOACH_LOG_PATH when set.

    Returns:
        The configured "commitcoach" logger.
    """
    logger = logging.getLogger("commitcoach")

    # Clear existing handlers so repeated calls do not duplicate output
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(_level_for(verbosity))
    console_handler.setFormatter(RedactingFormatter(CONSOLE_FORMAT))
    logger.addHandler(console_handler)

    log_path = log_path or os.getenv(LOG_PATH_ENV_VAR)
    if log_path:
        path = Path(log_path).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(RedactingFormatter(LOG_FORMAT))
        logger.addHandler(file_handler)

    return logger

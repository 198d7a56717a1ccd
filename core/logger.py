"""Centralized logging configuration."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Iterable, Optional


LOG_FORMAT = '%(asctime)s | %(levelname)s | %(name)s | %(message)s'
FILE_LOG_FORMAT = '%(asctime)s | %(levelname)s | %(name)s | %(funcName)s:%(lineno)d | %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUPS = 3

# Third-party loggers that are too chatty at INFO
NOISY_LOGGERS = ("werkzeug", "aiohttp.access")


class ColoredFormatter(logging.Formatter):
    """Colored log formatter for terminal output."""

    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
    }
    RESET = '\033[0m'

    def format(self, record: logging.LogRecord) -> str:
        # Work on a copy so file handlers sharing the record stay uncolored
        record = logging.makeLogRecord(record.__dict__)
        color = self.COLORS.get(record.levelname, self.RESET)
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


def setup_logger(
    name: str = "portal",
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    colored: bool = True,
    quiet: Iterable[str] = NOISY_LOGGERS,
) -> logging.Logger:
    """Configure and return a logger instance.

    Args:
        name: Logger name; use "" to configure the root logger
        level: Logging level
        log_file: Optional path of a size-rotated log file
        colored: Color console output when stdout is a terminal
        quiet: Logger names raised to WARNING

    Returns:
        Configured logger instance
    """
    target = logging.getLogger(name)
    target.setLevel(level)
    target.handlers.clear()

    console = logging.StreamHandler(sys.stdout)
    use_color = colored and sys.stdout.isatty()
    console.setFormatter((ColoredFormatter if use_color else logging.Formatter)(LOG_FORMAT, datefmt=DATE_FORMAT))
    target.addHandler(console)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        rotating = RotatingFileHandler(
            path,
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUPS,
            encoding='utf-8',
        )
        rotating.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
        target.addHandler(rotating)

    for noisy in quiet:
        logging.getLogger(noisy).setLevel(logging.WARNING)

    return target


def get_logger(name: str) -> logging.Logger:
    """Module loggers inherit handlers from the configured root."""
    return logging.getLogger(name)

"""
Logging configuration for Planboard.

Provides:
- Colored console output for development
- JSON lines for production / log aggregation
- A ``planboard.`` namespace for every module logger
"""

import json
import logging
import sys
from typing import Optional

from planboard.config import get_settings


LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


# ANSI color codes for terminal output
class Colors:
    GREY = "\x1b[38;20m"
    YELLOW = "\x1b[33;20m"
    RED = "\x1b[31;20m"
    BOLD_RED = "\x1b[31;1m"
    GREEN = "\x1b[32;20m"
    RESET = "\x1b[0m"


class ColoredFormatter(logging.Formatter):
    """Formatter that tints each line by level."""

    LEVEL_COLORS = {
        logging.DEBUG: Colors.GREY,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BOLD_RED,
    }

    def format(self, record):
        color = self.LEVEL_COLORS.get(record.levelno, Colors.RESET)
        formatter = logging.Formatter(color + LOG_FORMAT + Colors.RESET, datefmt="%Y-%m-%d %H:%M:%S")
        return formatter.format(record)


class JsonFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record):
        log_record = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_record)


def setup_logging(
    level: Optional[str] = None,
    json_format: Optional[bool] = None,
) -> None:
    """
    Configure the ``planboard`` logger tree.

    Args:
        level: Log level name; defaults to DEBUG when settings.debug is on,
            otherwise settings.log_level
        json_format: Emit JSON lines; defaults to on in production or when
            settings.json_logs is set
    """
    settings = get_settings()

    log_level = level or ("DEBUG" if settings.debug else settings.log_level)
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)
    if json_format is None:
        json_format = settings.json_logs or settings.is_production

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(JsonFormatter() if json_format else ColoredFormatter())

    app_logger = logging.getLogger("planboard")
    app_logger.setLevel(numeric_level)

    # Replace handlers so repeated setup does not duplicate output
    for existing in app_logger.handlers[:]:
        app_logger.removeHandler(existing)
    app_logger.addHandler(handler)
    app_logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a specific module.

    Usage:
        from planboard.logging_config import get_logger
        logger = get_logger(__name__)
        logger.info("Something happened")
    """
    if not name.startswith("planboard"):
        name = f"planboard.{name}"
    return logging.getLogger(name)

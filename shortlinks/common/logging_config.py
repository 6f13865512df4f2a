"""Logging setup shared by the CLI and the API server."""

import json
import logging
import sys
from typing import Optional, TextIO

LOGGER_NAME = "shortlinks"
PLAIN_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class JsonLineFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": self.formatTime(record, DATE_FORMAT),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    json_format: bool = False,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Configure the ``shortlinks`` logger.

    Handlers from an earlier call are replaced, never duplicated.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file to log to as well
        json_format: Emit JSON lines instead of plain text
        stream: Console stream (stdout if not specified)

    Returns:
        The configured logger
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    formatter = JsonLineFormatter() if json_format else logging.Formatter(PLAIN_FORMAT, datefmt=DATE_FORMAT)

    handlers = [logging.StreamHandler(stream or sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()
    for handler in handlers:
        handler.setLevel(numeric_level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger

"""Logging setup."""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

LOGGER_NAME = "aiffconv"
CONSOLE_FORMAT = "%(levelname)s: %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# Keys callers may attach with ``extra=`` that end up in JSON records
CONTEXT_KEYS = ("source", "output", "error_code")


class JsonFormatter(logging.Formatter):
    """One JSON object per record, with per-file context when present."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in CONTEXT_KEYS:
            value = getattr(record, key, None)
            if value is not None:
                entry[key] = str(value)

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry)


def setup_logging(
    level: str = "INFO",
    log_file: Path | None = None,
    jsonl: bool = False,
    verbose: bool = False,
) -> logging.Logger:
    """
    Configure the package logger for one run.

    Console records go to stderr so they do not mix with the progress
    lines on stdout. Only warnings are shown unless ``verbose``.

    Args:
        level: Log level for the package logger (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional file receiving every record
        jsonl: Write the log file as JSON lines
        verbose: Show debug records (ffmpeg command lines) on the console

    Returns:
        Package logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if verbose else getattr(logging, level.upper()))
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(JsonFormatter() if jsonl else logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)

    return logger

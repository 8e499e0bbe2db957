"""Structured JSON logging for issueboard.

Writes JSONL to .issueboard/issueboard.log with rotation (5MB, 3 backups).
Callers attach structured context through ``extra``: ``op`` names the
operation or tool, ``args_data`` its arguments, ``duration_ms`` its timing.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

LOGGER_NAME = "issueboard"
LOG_FILENAME = "issueboard.log"
_MAX_BYTES = 5 * 1024 * 1024
_BACKUP_COUNT = 3
_setup_lock = threading.Lock()

# LogRecord attribute -> JSON key
_EXTRA_FIELDS: tuple[tuple[str, str], ...] = (
    ("op", "op"),
    ("args_data", "args"),
    ("duration_ms", "duration_ms"),
    ("error", "error"),
)


class _JsonFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for attr, key in _EXTRA_FIELDS:
            if hasattr(record, attr):
                entry[key] = getattr(record, attr)
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = str(record.exc_info[1])
        return json.dumps(entry, default=str)


def _file_handlers(logger: logging.Logger) -> list[RotatingFileHandler]:
    return [h for h in logger.handlers if isinstance(h, RotatingFileHandler)]


def setup_logging(issueboard_dir: Path) -> logging.Logger:
    """Route the package logger to ``<issueboard_dir>/issueboard.log``.

    Every ``issueboard.*`` module logs through this logger, so CLI, dashboard
    and MCP records for one project land in the same file. Calling it again
    for the same directory is a no-op; calling it for another directory
    moves the handler there. Thread-safe.
    """
    logger = logging.getLogger(LOGGER_NAME)
    log_path = issueboard_dir / LOG_FILENAME
    # abspath, not resolve(): RotatingFileHandler.baseFilename keeps symlinks.
    target = os.path.abspath(str(log_path))

    with _setup_lock:
        for handler in _file_handlers(logger):
            if handler.baseFilename == target:
                return logger
            logger.removeHandler(handler)
            handler.close()

        handler = RotatingFileHandler(str(log_path), maxBytes=_MAX_BYTES, backupCount=_BACKUP_COUNT)
        handler.setFormatter(_JsonFormatter())
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    return logger

"""Logging setup for the native_stage package logger."""

import logging
import logging.handlers
import json
import sys
from typing import Optional
from datetime import datetime, timezone
from pathlib import Path

from .logging_config import LoggingConfig

PACKAGE_LOGGER = "native_stage"


class StructuredFormatter(logging.Formatter):
    """JSON formatter; fields passed as ``extra={"extra_fields": {...}}`` are merged in."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "thread": record.threadName,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        if hasattr(record, "extra_fields"):
            log_data.update(record.extra_fields)

        return json.dumps(log_data, default=str)


class DetailedFormatter(logging.Formatter):
    """Human-readable detailed formatter."""

    def __init__(self) -> None:
        fmt = (
            "%(asctime)s | %(levelname)-8s | %(threadName)s | "
            "%(name)s:%(funcName)s:%(lineno)d | %(message)s"
        )
        super().__init__(fmt=fmt, datefmt="%Y-%m-%d %H:%M:%S")


class SimpleFormatter(logging.Formatter):
    """Simple formatter for console output."""

    def __init__(self) -> None:
        super().__init__(fmt="%(levelname)-8s | %(name)s | %(message)s")


_FORMATTERS = {
    "simple": SimpleFormatter,
    "detailed": DetailedFormatter,
    "json": StructuredFormatter,
}


def setup_logging(
    level: str = "INFO",
    format_type: str = "simple",
    log_file: Optional[Path] = None,
    max_file_size_mb: int = 10,
    backup_count: int = 5,
    logger_name: str = PACKAGE_LOGGER,
) -> logging.Logger:
    """Configure the package logger.

    Handlers are attached to ``logger_name`` only, so the host
    application's root logger is left alone. Records still propagate
    upwards. Calling this again replaces the handlers set up before.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        format_type: Format type (simple, detailed, json)
        log_file: Optional log file path
        max_file_size_mb: Max log file size in MB
        backup_count: Number of backup files to keep

    Returns:
        The configured logger
    """
    logger = logging.getLogger(logger_name)
    logger.setLevel(getattr(logging, level.upper()))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(_FORMATTERS.get(format_type, SimpleFormatter)())
    logger.addHandler(console_handler)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_file_size_mb * 1024 * 1024,
            backupCount=backup_count,
        )

        # File logs are always JSON
        file_handler.setFormatter(StructuredFormatter())
        logger.addHandler(file_handler)

    return logger


def configure_logging(config: LoggingConfig) -> logging.Logger:
    """Apply a ``[logging]`` config section to the package logger."""
    return setup_logging(
        level=config.level,
        format_type=config.format,
        log_file=Path(config.file) if config.file else None,
        max_file_size_mb=config.max_file_size_mb,
        backup_count=config.backup_count,
    )

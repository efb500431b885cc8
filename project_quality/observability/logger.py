"""
Structured JSON logging for project-quality

Every module logs through get_logger(__name__). Records are emitted as one
JSON object per line via python-json-logger, or as plain text when
LOG_FORMAT=text. Both settings can come from a dotenv file loaded by the CLI.
"""
import logging
import os
import sys
import time
from datetime import datetime, timezone
from typing import TextIO

from pythonjsonlogger import jsonlogger

DEFAULT_LOGGER_NAME = "project-quality"

JSON_FIELDS = "%(timestamp)s %(level)s %(logger)s %(location)s %(message)s"
TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s [%(module)s:%(lineno)d] %(message)s"


def _resolve_level(level: str | None) -> int:
    """LOG_LEVEL name to a logging level; unknown names fall back to INFO."""
    name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else logging.INFO


class ProjectQualityJsonFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter with a UTC timestamp, the level, the logger name and the
    source location of the call.

    Fields passed through ``extra`` (project_id, rule_id, counts) are kept as
    top-level keys.
    """

    def add_fields(self, log_record: dict, record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = datetime.fromtimestamp(record.created, timezone.utc).isoformat(
            timespec="milliseconds"
        )
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["location"] = f"{record.module}:{record.funcName}:{record.lineno}"


def _build_formatter(format_type: str) -> logging.Formatter:
    if format_type == "text":
        return logging.Formatter(fmt=TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    return ProjectQualityJsonFormatter(fmt=JSON_FIELDS)


def setup_logger(
    name: str = DEFAULT_LOGGER_NAME,
    level: str | None = None,
    format_type: str | None = None,
    stream: TextIO | None = None,
) -> logging.Logger:
    """
    Configure a logger with a single handler

    Args:
        name: Logger name
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL; LOG_LEVEL env var when omitted
        format_type: "json" or "text"; LOG_FORMAT env var when omitted
        stream: Destination stream (stderr by default, so stdout stays free for command output)

    Returns:
        Configured logger instance
    """
    log_level = _resolve_level(level)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(log_level)
    handler.setFormatter(_build_formatter((format_type or os.getenv("LOG_FORMAT", "json")).lower()))

    logger = logging.getLogger(name)
    logger.setLevel(log_level)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.propagate = False

    return logger


def get_logger(name: str = DEFAULT_LOGGER_NAME) -> logging.Logger:
    """
    Get a logger instance, configuring it on first use

    Args:
        name: Logger name, usually the calling module's __name__

    Returns:
        Logger instance
    """
    logger = logging.getLogger(name)
    return logger if logger.handlers else setup_logger(name)


class log_operation:
    """
    Context manager that logs the start and outcome of a pipeline step

    The elapsed time is kept on ``duration_seconds`` after the block exits.
    Exceptions are logged and re-raised.

    Usage:
        with log_operation("Data-quality run", logger=logger, record_count=26):
            result = engine.clean(records, stats)
    """

    def __init__(self, operation_name: str, logger: logging.Logger | None = None, **extra_fields):
        self.operation_name = operation_name
        self.logger = logger or get_logger()
        self.extra_fields = extra_fields
        self.duration_seconds: float | None = None
        self._started: float | None = None

    def _fields(self, **fields) -> dict:
        return {"operation": self.operation_name, **fields, **self.extra_fields}

    def __enter__(self):
        self._started = time.perf_counter()
        self.logger.info(f"Starting: {self.operation_name}", extra=self._fields())
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration_seconds = round(time.perf_counter() - self._started, 3)

        if exc_type is None:
            self.logger.info(
                f"Completed: {self.operation_name}",
                extra=self._fields(duration_seconds=self.duration_seconds, status="success"),
            )
            return False

        self.logger.error(
            f"Failed: {self.operation_name}",
            extra=self._fields(
                duration_seconds=self.duration_seconds,
                status="error",
                error_type=exc_type.__name__,
                error_message=str(exc_val),
            ),
            exc_info=(exc_type, exc_val, exc_tb),
        )
        return False

"""
Logging setup for geotabular.

Console records go through rich on stderr, so normalized data written to
stdout is never interleaved with log lines. File records are JSON lines.
"""

import json
import logging
import os
from logging import LogRecord
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.logging import RichHandler

from geotabular.common.exceptions import GeoTabularError, LoggingError

DEFAULT_LOGGER_NAME = "geotabular"
DEFAULT_LOG_DIRECTORY = "logs"

# Attributes passed through ``extra=`` that end up in the JSON document
EXTRA_FIELDS = ("error_details", "dataset_format", "row_count", "field_count")


class JsonFormatter(logging.Formatter):
    """One JSON document per record, with GeoTabularError details when present."""

    def format(self, record: LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info and record.exc_info[1] is not None:
            error = record.exc_info[1]
            payload["error"] = {"type": type(error).__name__, "message": str(error)}
            if isinstance(error, GeoTabularError) and error.details:
                payload["error"]["details"] = error.details

        for name in EXTRA_FIELDS:
            if hasattr(record, name):
                payload[name] = getattr(record, name)

        return json.dumps(payload, default=str)


def _console_handler(level: int, console_format: Optional[str]) -> logging.Handler:
    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        show_time=True,
        show_path=False,
    )
    if console_format:
        handler.setFormatter(logging.Formatter(console_format))
    handler.setLevel(level)
    return handler


def _file_handler(logger_name: str, log_directory: str, level: int) -> logging.Handler:
    try:
        directory = Path(log_directory)
        directory.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(
            str(directory / f"{logger_name.lower()}.log"), encoding="utf-8"
        )
    except OSError as e:
        raise LoggingError(
            f"Cannot write log files to {log_directory}",
            details={"error": str(e), "directory": log_directory},
        )
    handler.setFormatter(JsonFormatter())
    handler.setLevel(level)
    return handler


def setup_logging(
    component_name: Optional[str] = None,
    log_directory: Optional[str] = None,
    log_level: int = logging.INFO,
    enable_console: bool = True,
    enable_file: bool = False,
    console_format: Optional[str] = None,
) -> logging.Logger:
    """
    Configure the logger of a component, replacing its previous handlers.

    Args:
        component_name: Logger name, also used for the log file name
        log_directory: Where log files go; defaults to GEOTABULAR_LOGS, then 'logs'
        log_level: Level applied to the logger and its handlers
        enable_console: Attach a rich handler writing to stderr
        enable_file: Attach a JSON lines file handler
        console_format: Optional format string for the console handler

    Returns:
        The configured logger

    Raises:
        LoggingError: If a handler cannot be created
    """
    logger_name = component_name or DEFAULT_LOGGER_NAME
    logger = logging.getLogger(logger_name)
    logger.setLevel(log_level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers: List[logging.Handler] = []
    if enable_console:
        handlers.append(_console_handler(log_level, console_format))
    if enable_file:
        directory = log_directory or os.getenv("GEOTABULAR_LOGS", DEFAULT_LOG_DIRECTORY)
        handlers.append(_file_handler(logger_name, directory, log_level))

    for handler in handlers:
        logger.addHandler(handler)

    return logger

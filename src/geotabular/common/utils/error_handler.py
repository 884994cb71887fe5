"""
Error reporting shared by the CLI commands and the configuration loader.

Errors are reported once: ``handle_error`` marks what it has logged and
printed, so an error bubbling through several decorated calls is not
reported again on the way up.
"""

import logging
import sys
import traceback
from functools import wraps
from typing import Any, Callable, Dict, Optional, Tuple, Type, TypeVar

from rich.console import Console

from geotabular.common.exceptions import (
    ConfigurationError,
    DataProcessingError,
    FileError,
    GeoTabularError,
    InvalidShapeError,
    LoggingError,
)

console = Console(stderr=True)
T = TypeVar("T")

# Exceptions the decorator turns into reports; anything else propagates as is
HANDLED_EXCEPTIONS: Tuple[Type[BaseException], ...] = (
    GeoTabularError,
    ValueError,
    OSError,
)

# Attribute each error class carries on top of ``details``
_ERROR_ATTRIBUTES = (
    (FileError, "file_path"),
    (ConfigurationError, "config_key"),
    (InvalidShapeError, "attribute"),
)


def get_error_details(error: Exception) -> Dict[str, Any]:
    """
    Collect what is known about an error for structured logging.

    Returns:
        The error type, the current traceback, the error's ``details`` and
        its class specific attribute (file path, config key...)
    """
    details: Dict[str, Any] = {
        "error_type": type(error).__name__,
        "traceback": traceback.format_exc(),
    }
    if not isinstance(error, GeoTabularError):
        return details

    details.update(error.details)
    for error_class, attribute in _ERROR_ATTRIBUTES:
        if isinstance(error, error_class):
            details[attribute] = getattr(error, attribute)
    return details


def format_error_message(error: Exception) -> str:
    """One line description of an error for the console."""
    if isinstance(error, FileError):
        return f"File error on {error.file_path}: {error}"
    if isinstance(error, ConfigurationError):
        return f"Configuration error ({error.config_key}): {error}"
    if isinstance(error, InvalidShapeError):
        return f"Invalid dataset shape ({error.attribute}): {error}"
    if isinstance(error, DataProcessingError):
        return f"Processing error: {error}"
    if isinstance(error, LoggingError):
        return f"Logging error: {error}"
    return f"Error ({type(error).__name__}): {error}"


def handle_error(
    error: Exception,
    log: bool = True,
    raise_error: bool = True,
    console_output: bool = True,
) -> None:
    """
    Report an error and optionally raise it again.

    Errors outside the GeoTabularError hierarchy are raised again as a
    DataProcessingError, so callers only have one base class to catch.

    Args:
        error: The error to report
        log: Send a record to the ``logging`` root logger
        raise_error: Raise after reporting
        console_output: Print a one line summary on stderr
    """
    if not getattr(error, "_handled", False):
        error._handled = True
        _report(error, log, console_output)

    if not raise_error:
        return
    if isinstance(error, GeoTabularError):
        raise error
    raise DataProcessingError(str(error), details={"original_error": str(error)})


def _report(error: Exception, log: bool, console_output: bool) -> None:
    if log:
        extra = {"error_details": get_error_details(error)}
        if isinstance(error, GeoTabularError):
            logging.error("Error: %s", error.get_user_message(), extra=extra)
        else:
            # Unexpected errors keep their traceback
            logging.error("Unexpected error: %s", error, exc_info=True, extra=extra)

    if console_output:
        console.print(f"[red]✗ {format_error_message(error)}[/red]")


def error_handler(
    *, log: bool = True, raise_error: bool = True, console_output: bool = True
) -> Callable:
    """
    Decorator reporting the errors of the wrapped function through handle_error.

    Keyword Arguments:
        log (bool): Log the error. Defaults to True.
        raise_error (bool): Raise the error after reporting it. Defaults to True.
        console_output (bool): Print the error on stderr. Defaults to True.

    Returns:
        Callable: The decorator. When errors are not raised the wrapped
        function returns None on failure.
    """

    def decorator(func: Callable[..., T]) -> Callable[..., Optional[T]]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Optional[T]:
            try:
                return func(*args, **kwargs)
            except HANDLED_EXCEPTIONS as e:
                handle_error(
                    e, log=log, raise_error=raise_error, console_output=console_output
                )
                return None

        return wrapper

    return decorator


def setup_global_exception_handler() -> None:
    """Report uncaught exceptions through handle_error instead of a bare traceback."""

    def report_uncaught(exc_type: type, exc_value: BaseException, exc_traceback: Any) -> None:
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return
        handle_error(exc_value, log=True, raise_error=False, console_output=True)

    sys.excepthook = report_uncaught

"""
Custom exceptions for the geotabular package.
"""

from typing import Optional


class GeoTabularError(Exception):
    """Base exception class for all geotabular errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        """
        Initialize the base exception.

        Args:
            message: Main error message
            details: Optional dictionary with additional error details
        """
        super().__init__(message)
        self.details = details or {}

    def get_user_message(self) -> str:
        """Returns a user-friendly error message"""
        return str(self)


# --- System Level Exceptions ---


class ConfigurationError(GeoTabularError):
    """Exception raised for configuration errors."""

    def __init__(self, config_key: str, message: str, details: Optional[dict] = None):
        super().__init__(message, details)
        self.config_key = config_key

    def get_user_message(self) -> str:
        """Returns a user-friendly error message with details if available"""
        message = f"{str(self)} (configuration key: {self.config_key})"

        if self.details and "help" in self.details:
            message += f"\n{self.details['help']}"

        return message


class LoggingError(GeoTabularError):
    """Exception raised for logging configuration and handling errors."""


# --- File System Exceptions ---


class FileError(GeoTabularError):
    """Base class for file related errors."""

    def __init__(self, file_path: str, message: str, details: Optional[dict] = None):
        super().__init__(message, details)
        self.file_path = file_path


class FileReadError(FileError):
    """Exception raised when there is an error reading a file."""


class FileWriteError(FileError):
    """Exception raised when there is an error writing a file."""


# --- Data Processing Exceptions ---


class DataProcessingError(GeoTabularError):
    """Base class for errors raised while turning raw input into a dataset."""


class EmptyInputError(DataProcessingError):
    """Raised when the input holds no header or no data rows."""


class MalformedInputError(DataProcessingError):
    """Raised when the input matches none of the accepted ingestion shapes."""


class InvalidGeoJSONError(DataProcessingError):
    """Raised when GeoJSON cannot be normalized into a feature list."""

    def get_user_message(self) -> str:
        message = str(self)
        if self.details and "input_type" in self.details:
            message += f" (received {self.details['input_type']})"
        return message


class InvalidShapeError(DataProcessingError):
    """Raised when data to reconcile is not a ``{fields, rows}`` object."""

    def __init__(self, attribute: str, message: str, details: Optional[dict] = None):
        super().__init__(message, details)
        self.attribute = attribute

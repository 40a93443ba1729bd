"""Custom exceptions for text edit operations."""

from typing import Any


class EditError(Exception):
    """Base exception for text edit operations."""

    def __init__(
        self,
        message: str,
        kind_for_telemetry: str,
        path: str | None = None,
        error_details: dict[str, Any] | None = None
    ):
        """
        Initialize the exception.

        Args:
            message: Error message
            kind_for_telemetry: Short, stable tag that is safe to report in telemetry
            path: The path of the document the edit was aimed at
            error_details: Optional dictionary with detailed error information
        """
        super().__init__(message)
        self.kind_for_telemetry = kind_for_telemetry
        self.path = path
        self.error_details = error_details


class NoMatchError(EditError):
    """Raised when no strategy can locate the text to replace."""

    def __init__(self, message: str, path: str | None = None, error_details: dict[str, Any] | None = None):
        super().__init__(message, 'noMatchFound', path, error_details)


class MultipleMatchesError(EditError):
    """Raised when the text to replace occurs more than once."""

    def __init__(self, message: str, path: str | None = None, error_details: dict[str, Any] | None = None):
        super().__init__(message, 'multipleMatchesFound', path, error_details)


class NoChangeError(EditError):
    """Raised when the edit would leave the document unchanged."""

    def __init__(self, message: str, path: str | None = None, error_details: dict[str, Any] | None = None):
        super().__init__(message, 'noChange', path, error_details)


class ContentFormatError(EditError):
    """Raised when the old/new strings are unusable for the document (e.g. empty old string)."""

    def __init__(self, message: str, path: str | None = None, error_details: dict[str, Any] | None = None):
        super().__init__(message, 'contentFormatError', path, error_details)


class UnsafePathError(EditError):
    """Raised when a target path is not safe to write on the host OS."""

    def __init__(self, message: str, path: str | None = None, error_details: dict[str, Any] | None = None):
        super().__init__(message, 'unsafePath', path, error_details)

"""Custom exceptions for the application."""

from typing import Optional


class AppError(Exception):
    """Base exception for application errors."""
    pass


class ValidationError(AppError):
    """Raised when user input fails validation before any network call."""

    def __init__(self, message: str, field: Optional[str] = None):
        self.message = message
        self.field = field
        super().__init__(message)


class ApiError(AppError):
    """API error with status code and message.

    ``detail`` holds the text the backend sent (its ``detail`` or ``message``
    field), or None when the failure carried no readable body.
    """

    def __init__(self, status_code: int, message: str, detail: Optional[str] = None):
        self.status_code = status_code
        self.message = message
        self.detail = detail
        super().__init__(f"API Error {status_code}: {message}")


class RequestCancelled(AppError):
    """Raised when a request is abandoned through its cancel token."""
    pass


class UploadInProgressError(AppError):
    """Raised when an action is blocked by a running upload."""
    pass


class CapabilityUnavailableError(AppError):
    """Raised when an optional capability (e.g. voice input) is missing."""
    pass


class ImageProcessingError(AppError):
    """Raised when image decoding or cropping fails."""
    pass

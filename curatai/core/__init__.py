"""Framework-agnostic application state and controllers."""

from .exceptions import (
    AppError,
    ApiError,
    ValidationError,
    RequestCancelled,
    UploadInProgressError,
    CapabilityUnavailableError,
    ImageProcessingError,
)

__all__ = [
    "AppError",
    "ApiError",
    "ValidationError",
    "RequestCancelled",
    "UploadInProgressError",
    "CapabilityUnavailableError",
    "ImageProcessingError",
]

"""Standardized errors for the Figma server.

Core components raise subclasses of ``FigmaServerError``; the tool layer
renders them with ``format_error`` so LLM clients always see the same shape:
``[ERROR_CODE] Message (optional details)``.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Standardized error codes for tool and resource operations."""

    # Input errors
    INVALID_URL = "INVALID_URL"
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Figma API errors
    FIGMA_API_ERROR = "FIGMA_API_ERROR"
    AUTH_ERROR = "AUTH_ERROR"

    # Export cache errors
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    DOWNLOAD_FAILED = "DOWNLOAD_FAILED"

    # System errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


def format_error(
    code: ErrorCode,
    message: str,
    *,
    details: dict[str, Any] | None = None,
) -> str:
    """Format an error message in a standardized way.

    Args:
        code: The error code enum value
        message: Human-readable error message
        details: Optional dictionary of additional details

    Returns:
        Formatted error string
    """
    error_str = f"[{code.value}] {message}"
    if details:
        detail_str = ", ".join(f"{k}={v}" for k, v in details.items())
        error_str += f" ({detail_str})"
    return error_str


class FigmaServerError(Exception):
    """Base class for every error raised by the server's own components."""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def formatted(self) -> str:
        return format_error(self.code, self.message, details=self.details)

    def __str__(self) -> str:
        return self.formatted()


class UrlParseError(FigmaServerError):
    """The input is not a recognized Figma file URL."""

    code = ErrorCode.INVALID_URL


class CacheMiss(FigmaServerError):
    """An export resource was requested before it was registered."""

    code = ErrorCode.RESOURCE_NOT_FOUND


class DownloadError(FigmaServerError):
    """Fetching exported image bytes failed (network, status, or expired URL)."""

    code = ErrorCode.DOWNLOAD_FAILED


class FigmaApiError(FigmaServerError):
    """The Figma REST API returned an error."""

    code = ErrorCode.FIGMA_API_ERROR

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=details)
        self.status_code = status_code


class FigmaAuthError(FigmaServerError):
    """The Figma access token is missing or malformed."""

    code = ErrorCode.AUTH_ERROR


def cache_miss_error(uri: str) -> CacheMiss:
    """Create a resource-not-found error for an export URI."""
    return CacheMiss(
        f"Resource not found: {uri}. Export it first with export_images.",
    )


def download_failed_error(uri: str, reason: str) -> DownloadError:
    """Create a download error for an export URI."""
    return DownloadError(
        f"Failed to download {uri}: {reason}. The export URL may have expired; "
        "run export_images again to refresh it.",
    )

"""Custom exception hierarchy for Stashbox.

Every error raised by the domain services carries an HTTP-style status code
and a machine-readable code. The API boundary turns them into JSON; it never
inspects the message to decide what to do.
"""

from enum import Enum
from typing import Optional, Dict, Any


class ErrorCode(str, Enum):
    """Standardized error codes for API responses."""

    # Lookup errors (absent, trashed, or owned by someone else: never distinguished)
    NOT_FOUND = "NOT_FOUND"

    # Validation errors
    INVALID_INPUT = "INVALID_INPUT"
    INVALID_OPERATION = "INVALID_OPERATION"
    PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"

    # Upstream errors
    STORAGE_ERROR = "STORAGE_ERROR"

    # Auth & rate limiting
    UNAUTHORIZED = "UNAUTHORIZED"
    RATE_LIMITED = "RATE_LIMITED"

    # Generic errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class StashException(Exception):
    """
    Base exception for all Stashbox errors.

    Provides structured error responses with:
    - Human-readable message
    - Machine-readable error code
    - HTTP status code
    - Optional additional details
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize exception.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code
            status_code: HTTP status code to return
            details: Optional additional context/details
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for JSON response.

        Returns:
            Dictionary with error, message, and details fields
        """
        return {
            "error": self.error_code.value,
            "message": self.message,
            "details": self.details
        }


class NotFoundError(StashException):
    """Entity missing, soft-deleted where a live one was required, or foreign-owned."""

    def __init__(self, message: str, entity_id: Optional[str] = None):
        details = {"id": entity_id} if entity_id else {}
        super().__init__(
            message,
            ErrorCode.NOT_FOUND,
            status_code=404,
            details=details
        )


class FolderNotFoundError(NotFoundError):
    """Folder lookup failed."""

    def __init__(self, folder_id: Optional[str] = None, message: str = "Folder not found"):
        super().__init__(message, folder_id)


class ItemNotFoundError(NotFoundError):
    """Item lookup failed."""

    def __init__(self, item_id: Optional[str] = None, message: str = "Item not found"):
        super().__init__(message, item_id)


class InvalidInputError(StashException):
    """Request is missing required data or carries malformed parameters."""

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(
            message,
            ErrorCode.INVALID_INPUT,
            status_code=400,
            details=details
        )


class InvalidOperationError(StashException):
    """Request is well-formed but violates a hierarchy rule."""

    def __init__(self, message: str, entity_id: Optional[str] = None):
        details = {"id": entity_id} if entity_id else {}
        super().__init__(
            message,
            ErrorCode.INVALID_OPERATION,
            status_code=400,
            details=details
        )


class PayloadTooLargeError(StashException):
    """Uploaded payload exceeds the configured size limit."""

    def __init__(self, size: int, limit: int):
        super().__init__(
            f"File exceeds the maximum upload size of {limit} bytes",
            ErrorCode.PAYLOAD_TOO_LARGE,
            status_code=413,
            details={"size": size, "limit": limit}
        )


class StorageError(StashException):
    """Object storage provider call failed.

    The provider's own error text stays in the logs; callers only see a
    generic message.
    """

    def __init__(self, operation: str, original_error: Optional[Exception] = None):
        super().__init__(
            "Storage provider request failed",
            ErrorCode.STORAGE_ERROR,
            status_code=502,
            details={"operation": operation}
        )
        self.original_error = original_error


class AuthenticationError(StashException):
    """Request lacks valid authentication credentials."""

    def __init__(self, message: str = "Invalid or missing authentication token"):
        super().__init__(
            message,
            ErrorCode.UNAUTHORIZED,
            status_code=401,
        )

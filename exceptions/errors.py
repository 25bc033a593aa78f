"""
Custom exception classes for the sync engine.

Expected "no data" conditions are not exceptions: upstream misses come
back as None and storage failures as StorageResult.error values.
"""

from typing import Optional, Any
from datetime import datetime, timezone


class AppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "INVALID_WEEK")
        message: Human-readable message
        status_code: HTTP-style status code
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to a serializable error payload."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp
            }
        }


class NotFoundError(AppError):
    """Resource not found (404)."""

    def __init__(
        self,
        resource: str,
        identifier: str,
        code: Optional[str] = None,
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code or f"{resource.upper()}_NOT_FOUND",
            message=f"{resource} not found",
            status_code=404,
            details={"id": identifier, **(details or {})}
        )


class ValidationError(AppError):
    """Validation failed (422)."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=422,
            details=details
        )


class ExternalServiceError(AppError):
    """External service failure (503)."""

    def __init__(
        self,
        service: str,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code=f"{service.upper()}_ERROR",
            message=message,
            status_code=503,
            details={"service": service, **(details or {})}
        )


class DatabaseError(AppError):
    """Database operation failed (500)."""

    def __init__(
        self,
        operation: str,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code="DATABASE_ERROR",
            message=f"Database {operation} failed: {message}",
            status_code=500,
            details={"operation": operation, **(details or {})}
        )


# ===================
# SPECIFIC ERRORS
# ===================

class InvalidWeekError(ValidationError):
    """Week number outside the ISO range."""

    def __init__(self, week: Any):
        super().__init__(
            code="INVALID_WEEK",
            message="Week must be an integer between 1 and 53",
            details={"provided": week}
        )


class BoatHistoryNotFoundError(NotFoundError):
    """No stored price history for a boat/week/year."""

    def __init__(self, slug: str, week: int, year: int):
        super().__init__(
            resource="Boat history",
            identifier=slug,
            code="BOAT_HISTORY_NOT_FOUND",
            details={"week": week, "year": year}
        )


class UpstreamPayloadError(ExternalServiceError):
    """Upstream API answered with a payload we cannot read."""

    def __init__(self, endpoint: str, reason: str):
        super().__init__(
            service="boataround",
            message=f"Unexpected payload from {endpoint}: {reason}",
            details={"endpoint": endpoint}
        )

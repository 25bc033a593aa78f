"""
Custom exceptions module.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    NotFoundError,
    ValidationError,
    ExternalServiceError,
    DatabaseError,

    # Price history
    InvalidWeekError,
    BoatHistoryNotFoundError,

    # Upstream API
    UpstreamPayloadError,
)

__all__ = [
    # Base
    "AppError",
    "NotFoundError",
    "ValidationError",
    "ExternalServiceError",
    "DatabaseError",

    # Price history
    "InvalidWeekError",
    "BoatHistoryNotFoundError",

    # Upstream API
    "UpstreamPayloadError",
]

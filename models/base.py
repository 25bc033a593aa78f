"""
Base schemas for all models.
"""

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """
    Base for all schemas.

    Features:
        - Auto-trim whitespace from strings
        - Validate on attribute assignment
        - Accept field names as well as wire aliases
    """
    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
        validate_assignment=True,
        populate_by_name=True
    )


def parse_api_date(value: Any) -> Any:
    """Cut ISO datetime strings from the upstream API down to their date part."""
    if isinstance(value, str) and len(value) > 10:
        return value[:10]
    return value


def format_api_date(value: date) -> str:
    """Format a date the way the upstream API expects (yyyy-MM-dd)."""
    return value.strftime("%Y-%m-%d")

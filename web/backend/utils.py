#!/usr/bin/env python3
"""
Utility functions for the web application.
"""

import uuid
from datetime import datetime
from typing import Optional

from fastapi import HTTPException


def safe_datetime_iso(value: Optional[datetime]) -> Optional[str]:
    """
    Safely convert datetime to ISO format string.

    Args:
        value: Datetime value or None.

    Returns:
        ISO format string or None.
    """
    if value is None:
        return None
    return value.isoformat()


def validate_uuid(value: str, name: str = "id") -> str:
    """Validate that a path parameter is a valid UUID."""
    try:
        uuid.UUID(value)
        return value
    except ValueError:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid {name} format: {value}. Must be a valid UUID."
        )

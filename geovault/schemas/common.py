"""Common schemas used across multiple endpoints."""

from typing import Any

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Response model for errors."""
    detail: str
    code: str


class LocationRequest(BaseModel):
    """
    A claimed device location.

    Values are passed through untouched so that missing, boolean or
    non-numeric input is rejected by validate_coordinate and reported as
    an invalid coordinate rather than coerced or turned into a generic
    validation error.
    """
    latitude: Any = None
    longitude: Any = None

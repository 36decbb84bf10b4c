"""
Cookbook Services — Shared Response Schemas
=============================================

What:  Wire shapes shared by every resource: the error envelope and the
       health report. Also the before-validator that lets update bodies
       send a zero value ("" or 0) to mean "keep the stored value".
"""

from typing import Any

from pydantic import BaseModel, Field


def zero_to_none(value: Any) -> Any:
    """Map "" and 0 to None so the update merge treats them as absent."""
    if value == "" or (value == 0 and not isinstance(value, bool)):
        return None
    return value


class ErrorResponse(BaseModel):
    """
    Error envelope used for every non-2xx response.

    Example:
        {"error": "recipe not found"}
    """

    error: str = Field(description="Human-readable error message")


class HealthResponse(BaseModel):
    """Returned by GET /health; not behind authentication."""

    status: str = Field(description="healthy or unhealthy")
    service: str = Field(description="Name of the service answering")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")

"""
ShipTrack Backend — Shared Response Schemas
=============================================

What:  Error and health-check response models used across all routers.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Standardized error body for every non-2xx response.

    Example:
        {
            "error": "forbidden",
            "message": "Access denied",
            "request_id": "3f2a9c1e"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """GET /api/health. Always 200; `database` reports connectivity separately."""
    message: str = Field(default="Server is running!")
    status: str = Field(description="healthy or degraded")
    version: str
    database: str = Field(description="connected or disconnected")
    uptime_seconds: float

"""
Common Schemas
==============

Shared Pydantic schemas used across the application.
"""

from typing import Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    details: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check payload."""

    status: str
    version: str
    environment: str

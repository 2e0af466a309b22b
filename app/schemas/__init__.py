"""
Pydantic Schemas
================

Request/response schemas for API validation.
"""

from app.schemas.common import ErrorResponse, HealthResponse

__all__ = [
    "ErrorResponse",
    "HealthResponse",
]

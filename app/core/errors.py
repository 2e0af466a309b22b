"""
Error Handling
==============

Application exceptions and the handlers that render them.

Every error leaves the API with the same body shape::

    {"error": "<short label>", "details": "<optional human readable detail>"}
"""

import logging
from typing import Any, Optional

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


# =============================================================================
# Error Labels
# =============================================================================

class ErrorLabels:
    """Standardized values for the ``error`` field."""

    UNAUTHORIZED = "Unauthorized"
    VALIDATION_ERROR = "Validation error"
    NOT_FOUND = "Not found"
    CONFLICT = "Conflict"
    INVALID_STATUS = "Invalid status parameter"
    INTERNAL_ERROR = "Internal server error"


# =============================================================================
# Custom Exceptions
# =============================================================================

class AppException(HTTPException):
    """Base application exception with structured error response."""

    def __init__(
        self,
        status_code: int,
        error: str,
        details: Optional[str] = None,
        headers: Optional[dict[str, str]] = None,
    ):
        self.error = error
        self.details = details

        detail: dict[str, Any] = {"error": error}
        if details is not None:
            detail["details"] = details

        super().__init__(status_code=status_code, detail=detail, headers=headers)


class AuthenticationError(AppException):
    """No session, or a session that could not be resolved."""

    def __init__(
        self,
        details: Optional[str] = None,
        error: str = ErrorLabels.UNAUTHORIZED,
    ):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            error=error,
            details=details,
        )


class NotFoundError(AppException):
    """
    Resource not found.

    Also used when the resource exists but belongs to someone else, so the
    caller cannot tell the two cases apart.
    """

    def __init__(
        self,
        details: str = "Resource not found",
        error: str = ErrorLabels.NOT_FOUND,
    ):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            error=error,
            details=details,
        )


class ConflictError(AppException):
    """Resource conflict errors."""

    def __init__(
        self,
        details: str,
        error: str = ErrorLabels.CONFLICT,
    ):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            error=error,
            details=details,
        )


class ValidationError(AppException):
    """Validation errors."""

    def __init__(
        self,
        details: str,
        field: Optional[str] = None,
        error: str = ErrorLabels.VALIDATION_ERROR,
    ):
        self.field = field
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            error=error,
            details=details,
        )


# =============================================================================
# Exception Handlers
# =============================================================================

def _error_body(error: str, details: Optional[str] = None) -> dict[str, Any]:
    body: dict[str, Any] = {"error": error}
    if details is not None:
        body["details"] = details
    return body


async def app_exception_handler(
    request: Request,
    exc: AppException,
) -> JSONResponse:
    """Handler for AppException."""
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.error, exc.details),
        headers=exc.headers,
    )


async def http_exception_handler(
    request: Request,
    exc: HTTPException,
) -> JSONResponse:
    """Handler for standard HTTPException."""
    # Check if detail is already structured
    if isinstance(exc.detail, dict) and "error" in exc.detail:
        content = exc.detail
    else:
        content = _error_body(str(exc.detail))

    return JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=getattr(exc, "headers", None),
    )


def _describe_pydantic_error(error: dict[str, Any]) -> str:
    """Human readable message for one pydantic error entry."""
    message = error.get("msg", "Invalid value")
    # Custom field errors already name their field
    if error.get("type") == "task_field":
        return message
    loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
    if loc:
        return f"{'.'.join(loc)}: {message}"
    return message


async def validation_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handler for request and Pydantic validation errors."""
    errors = exc.errors() if hasattr(exc, "errors") else []
    details = _describe_pydantic_error(errors[0]) if errors else str(exc)

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(ErrorLabels.VALIDATION_ERROR, details),
    )


async def global_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handler for unhandled exceptions."""
    logger.exception(
        "Unhandled error on %s %s: %s",
        request.method,
        request.url.path,
        exc,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(ErrorLabels.INTERNAL_ERROR, str(exc) or type(exc).__name__),
    )


def setup_exception_handlers(app):
    """
    Register exception handlers with FastAPI app.

    Usage:
        from app.core.errors import setup_exception_handlers
        setup_exception_handlers(app)
    """
    from pydantic import ValidationError as PydanticValidationError
    from fastapi.exceptions import RequestValidationError
    from starlette.exceptions import HTTPException as StarletteHTTPException

    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(PydanticValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

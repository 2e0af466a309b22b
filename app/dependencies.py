"""
Common Dependencies
===================

Shared dependencies used across the application.
"""

import logging
from typing import Annotated, Optional
import uuid

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import AuthenticationError
from app.core.session_gate import USER_ID_HEADER
from app.db.session import get_db
from app.services.auth_service import Session, SessionResolver
from app.utils.helpers import parse_uuid

logger = logging.getLogger(__name__)

# Database session dependency
DBSession = Annotated[AsyncSession, Depends(get_db)]


def get_session_resolver(request: Request) -> SessionResolver:
    """The session provider configured on the application."""
    return request.app.state.session_resolver


async def get_optional_session(
    request: Request,
    resolver: Annotated[SessionResolver, Depends(get_session_resolver)],
) -> Optional[Session]:
    """
    Resolve the caller's session, or None.

    Used by the auth endpoints, which sit outside the session gate.
    """
    return await resolver.get_session(request.headers, request.cookies)


async def get_current_user_id(request: Request) -> uuid.UUID:
    """
    User id injected by the session gate.

    The gate strips any client-supplied value before setting its own, so
    the header can be trusted here. Raises 401 if it is missing, which
    only happens when a route is mounted outside the gate.
    """
    raw = request.headers.get(USER_ID_HEADER)
    if not raw:
        raise AuthenticationError(details="User ID not found in headers")

    user_id = parse_uuid(raw)
    if user_id is None:
        logger.warning("Malformed %s header on %s", USER_ID_HEADER, request.url.path)
        raise AuthenticationError(details="User ID not found in headers")

    return user_id


# Type aliases for dependency injection
CurrentUserId = Annotated[uuid.UUID, Depends(get_current_user_id)]
OptionalSession = Annotated[Optional[Session], Depends(get_optional_session)]

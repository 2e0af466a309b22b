"""
Authentication API Endpoints
============================

Account sign-up, password sign-in, sign-out and session lookup.

These routes sit outside the session gate. A successful sign-up or
sign-in returns the session token in the body and also sets it as an
HTTP-only cookie, so browser and API clients can both use it.
"""

import logging
from datetime import datetime

from fastapi import APIRouter, Response, status

from app.config import settings
from app.dependencies import DBSession, OptionalSession
from app.schemas.auth import (
    AuthResponse,
    SessionResponse,
    SignInRequest,
    SignUpRequest,
)
from app.schemas.common import ErrorResponse
from app.schemas.task import MessageResponse
from app.services.auth_service import AuthService, revoke_session
from app.utils.helpers import utc_now

logger = logging.getLogger(__name__)

router = APIRouter()


def _set_session_cookie(response: Response, token: str, expires_at: datetime) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=max(int((expires_at - utc_now()).total_seconds()), 0),
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )


@router.post(
    "/sign-up",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid email or weak password"},
        409: {"model": ErrorResponse, "description": "Email already registered"},
    },
)
async def sign_up(
    data: SignUpRequest,
    response: Response,
    db: DBSession,
):
    """
    Register a new account and sign it in.
    """
    user, token, expires_at = await AuthService(db).sign_up(data)
    _set_session_cookie(response, token, expires_at)

    return {"user": user.to_api_dict(), "token": token, "expiresAt": expires_at}


@router.post(
    "/sign-in",
    response_model=AuthResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
    },
)
async def sign_in(
    credentials: SignInRequest,
    response: Response,
    db: DBSession,
):
    """
    Authenticate with email and password.
    """
    user, token, expires_at = await AuthService(db).sign_in(
        credentials.email,
        credentials.password,
    )
    _set_session_cookie(response, token, expires_at)

    return {"user": user.to_api_dict(), "token": token, "expiresAt": expires_at}


@router.post(
    "/sign-out",
    response_model=MessageResponse,
)
async def sign_out(
    session: OptionalSession,
    response: Response,
):
    """
    End the current session. Safe to call without one.
    """
    if session is not None:
        await revoke_session(session)
        logger.info("Signed out session %s", session.token_id)

    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return {"message": "Signed out"}


@router.get(
    "/session",
    response_model=SessionResponse,
)
async def get_session(session: OptionalSession):
    """
    Return the caller's session, or ``{"session": null}``.
    """
    if session is None:
        return {"session": None}
    return {"session": session.to_api_dict()}

"""
Authentication Service
======================

The session provider: account registration, password sign-in, session
token resolution and sign-out.

The rest of the application only depends on the narrow
``SessionResolver.get_session`` interface; the task API never reads or
writes user rows itself.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Mapping, Optional, Protocol
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.errors import AuthenticationError, ConflictError, ValidationError
from app.core.security import (
    create_session_token,
    decode_token,
    hash_password,
    verify_password,
)
from app.models.user import User
from app.schemas.auth import SignUpRequest
from app.services.cache import CacheKeys, CacheManager
from app.utils.helpers import parse_uuid, utc_now
from app.utils.validators import validate_email, validate_password

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Session:
    """A resolved, unexpired, unrevoked session."""

    user_id: uuid.UUID
    email: str
    name: Optional[str]
    expires_at: datetime
    token_id: str

    def to_api_dict(self) -> dict:
        return {
            "user": {
                "id": str(self.user_id),
                "name": self.name,
                "email": self.email,
                "image": None,
            },
            "expiresAt": self.expires_at.isoformat(),
        }


class SessionResolver(Protocol):
    """Anything that can turn request headers/cookies into a session."""

    async def get_session(
        self,
        headers: Mapping[str, str],
        cookies: Mapping[str, str],
    ) -> Optional[Session]:
        ...


def extract_session_token(
    headers: Mapping[str, str],
    cookies: Mapping[str, str],
) -> Optional[str]:
    """Bearer token from ``Authorization``, falling back to the session cookie."""
    authorization = headers.get("authorization")
    if authorization:
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            return credentials.strip()
    token = cookies.get(settings.SESSION_COOKIE_NAME)
    return token or None


def session_from_payload(payload: dict) -> Optional[Session]:
    """Build a Session from decoded token claims, None if claims are incomplete."""
    user_id = parse_uuid(payload.get("sub", ""))
    token_id = payload.get("jti")
    exp = payload.get("exp")
    if user_id is None or not token_id or exp is None:
        return None
    return Session(
        user_id=user_id,
        email=payload.get("email") or "",
        name=payload.get("name"),
        expires_at=datetime.fromtimestamp(exp, tz=timezone.utc),
        token_id=token_id,
    )


class TokenSessionResolver:
    """
    Resolves sessions from signed session tokens.

    A token is valid when its signature and expiry check out and its id
    has not been revoked by a sign-out. The revocation lookup is best
    effort: if Redis is down the token is accepted until it expires.
    """

    async def get_session(
        self,
        headers: Mapping[str, str],
        cookies: Mapping[str, str],
    ) -> Optional[Session]:
        token = extract_session_token(headers, cookies)
        if token is None:
            return None

        payload = decode_token(token)
        if payload is None:
            return None

        session = session_from_payload(payload)
        if session is None:
            return None

        if await CacheManager.exists(CacheKeys.revoked_session(session.token_id)):
            logger.info("Rejected revoked session %s", session.token_id)
            return None

        return session


async def revoke_session(session: Session) -> None:
    """Mark a session token as signed out until it would have expired."""
    remaining = int((session.expires_at - utc_now()).total_seconds())
    if remaining <= 0:
        return
    stored = await CacheManager.set(
        CacheKeys.revoked_session(session.token_id),
        str(session.user_id),
        ttl=remaining,
    )
    if not stored:
        logger.warning("Could not record sign-out for session %s", session.token_id)


class AuthService:
    """Service for account and credential operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user_by_email(self, email: str) -> Optional[User]:
        """Get user by email address."""
        stmt = select(User).where(User.email == email)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_user_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        """Get user by ID."""
        stmt = select(User).where(User.id == user_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def sign_up(self, data: SignUpRequest) -> tuple[User, str, datetime]:
        """
        Create an account and open a session for it.

        Raises:
            ValidationError: Bad email, weak password or mismatched confirmation
            ConflictError: Email already registered
        """
        email = validate_email(data.email)
        password = validate_password(data.password)
        if data.confirm_password is not None and data.confirm_password != password:
            raise ValidationError(details="Passwords do not match", field="confirmPassword")

        if await self.get_user_by_email(email) is not None:
            raise ConflictError(details="Email already registered")

        name = (data.name or "").strip() or None
        user = User(
            email=email,
            name=name,
            password_hash=hash_password(password),
        )
        self.db.add(user)
        await self.db.flush()

        logger.info("Created account %s", user.id)
        token, expires_at = create_session_token(user.id, user.email, user.name)
        return user, token, expires_at

    async def sign_in(self, email: str, password: str) -> tuple[User, str, datetime]:
        """
        Verify credentials and open a session.

        Raises:
            ValidationError: Email or password missing
            AuthenticationError: Unknown email or wrong password
        """
        if not email or not email.strip() or not password:
            raise ValidationError(details="Email and password are required")

        user = await self.get_user_by_email(email.strip().lower())
        if (
            user is None
            or user.password_hash is None
            or not verify_password(password, user.password_hash)
        ):
            raise AuthenticationError(details="Invalid email or password")

        token, expires_at = create_session_token(user.id, user.email, user.name)
        return user, token, expires_at

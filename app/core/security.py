"""
Security Module
===============

Authentication and security utilities including:
- Password hashing with bcrypt
- Session token generation and validation (signed JWT)
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional
import uuid

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.config import settings

# Password hashing context using bcrypt
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

SESSION_TOKEN_TYPE = "session"


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password

    Returns:
        Hashed password string
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against its hash.

    Args:
        plain_password: Plain text password to verify
        hashed_password: Stored hash to compare against

    Returns:
        True if password matches, False otherwise
    """
    return pwd_context.verify(plain_password, hashed_password)


def create_session_token(
    user_id: uuid.UUID,
    email: str,
    name: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
) -> tuple[str, datetime]:
    """
    Create a signed session token for a user.

    Args:
        user_id: User's UUID
        email: User's email
        name: Display name (optional)
        expires_delta: Custom lifetime (optional)

    Returns:
        Tuple of (encoded token, expiry datetime)
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.SESSION_EXPIRE_MINUTES))

    to_encode: dict[str, Any] = {
        "sub": str(user_id),
        "email": email,
        "name": name,
        "jti": uuid.uuid4().hex,
        "iat": now,
        "exp": expire,
        "type": SESSION_TOKEN_TYPE,
    }

    encoded_jwt = jwt.encode(
        to_encode,
        settings.SESSION_SECRET,
        algorithm=settings.SESSION_ALGORITHM,
    )

    return encoded_jwt, expire


def decode_token(token: str) -> Optional[dict[str, Any]]:
    """
    Decode and validate a session token.

    Args:
        token: JWT token string

    Returns:
        Decoded payload if valid, None otherwise
    """
    try:
        payload = jwt.decode(
            token,
            settings.SESSION_SECRET,
            algorithms=[settings.SESSION_ALGORITHM],
        )
    except JWTError:
        return None

    if payload.get("type") != SESSION_TOKEN_TYPE:
        return None
    return payload

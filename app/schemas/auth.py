"""
Authentication Schemas
======================

Pydantic schemas for the sign-up / sign-in / session endpoints.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SignUpRequest(BaseModel):
    """Request schema for creating an account."""

    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(None, max_length=255)
    email: str = Field(max_length=255)
    password: str = Field(max_length=100)
    confirm_password: Optional[str] = Field(None, alias="confirmPassword")


class SignInRequest(BaseModel):
    """Request schema for signing in with email and password."""

    email: str
    password: str


class AuthUser(BaseModel):
    """Public user fields returned with a session."""

    id: str
    name: Optional[str] = None
    email: str
    image: Optional[str] = None


class SessionInfo(BaseModel):
    """A resolved session."""

    user: AuthUser
    expiresAt: datetime


class AuthResponse(BaseModel):
    """Returned by sign-up and sign-in."""

    user: AuthUser
    token: str
    expiresAt: datetime


class SessionResponse(BaseModel):
    """``{"session": null}`` when the caller has no valid session."""

    session: Optional[SessionInfo] = None

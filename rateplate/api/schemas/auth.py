"""Pydantic schemas for authentication endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field
from rateplate.api.schemas.common import CamelModel

# --- Request Schemas ---


class RegisterRequest(CamelModel):
    """Request schema for user registration.

    Field rules are checked by the auth service so every violation is
    reported at once.
    """

    email: str = Field("", description="User email address, also used as user name")
    password: str = Field("", description="Password")
    first_name: str = Field("", description="User's first name")
    last_name: str | None = Field(None, description="User's last name")


class LoginRequest(CamelModel):
    """Request schema for user login."""

    email: str = Field(..., description="User name or email address")
    password: str = Field(..., description="User password")


# --- Response Schemas ---


class IdentityErrorResponse(CamelModel):
    code: str
    description: str


class RegistrationErrorResponse(CamelModel):
    errors: list[IdentityErrorResponse]


class UserResponse(CamelModel):
    """Response schema for user data."""

    id: str = Field(..., description="User ID")
    user_name: str = Field(..., description="User name")
    email: str = Field(..., description="User email")
    first_name: str = Field(..., description="User's first name")
    last_name: str | None = Field(None, description="User's last name")
    roles: list[str] = Field(default_factory=list, description="Assigned roles")


class RegisterResponse(CamelModel):
    """Response schema for user registration."""

    message: str = Field(default="Registration successful")
    user: UserResponse


class AuthResponse(CamelModel):
    """Response schema for a successful login."""

    token: str = Field(..., description="JWT bearer token")
    expires_at: datetime = Field(..., description="Token expiry (UTC)")

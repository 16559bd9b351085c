"""Authentication schemas for request/response models."""

from typing import Optional

from pydantic import ConfigDict, Field

from mathquest.presentation.api.schemas.base import CamelModel


class SignInRequest(CamelModel):
    """Request schema for sign-in. ``username`` may also be an email."""

    username: Optional[str] = None
    password: Optional[str] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "username": "alice",
                "password": "secret123",
            },
        },
    )


class SignupRequest(CamelModel):
    """Request schema for self-registration."""

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = Field(
        default=None,
        description='"teacher" or "admin"; anything else registers a student',
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "firstName": "Alice",
                "lastName": "Doe",
                "username": "alice",
                "email": "alice@example.com",
                "password": "secret123",
                "role": "teacher",
            },
        },
    )


class JwtResponse(CamelModel):
    """Response schema for a successful sign-in."""

    token: str
    type: str = "Bearer"
    id: int
    first_name: str
    last_name: str
    username: str
    email: str
    roles: list[str]


class ForgotPasswordRequest(CamelModel):
    """Request schema for asking for a password reset email."""

    email: Optional[str] = None

    model_config = ConfigDict(
        json_schema_extra={"example": {"email": "alice@example.com"}},
    )


class ResetPasswordRequest(CamelModel):
    """Request schema for setting a new password with an emailed token."""

    token: Optional[str] = None
    new_password: Optional[str] = None
    confirm_password: Optional[str] = None

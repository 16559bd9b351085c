"""MathQuest Auth - Generic authentication infrastructure.

This package provides authentication infrastructure that is independent
of the MathQuest domain. It handles:
- Password hashing (bcrypt)
- JWT token creation and verification
- Single-use tokens for reset and verification links

Architecture:
    mathquest_auth/
    ├── services/           # Pure logic (password hashing, JWT, one-time tokens)
    ├── schemas.py          # Data classes
    └── exceptions.py       # Auth exceptions

Usage:
    from mathquest_auth import PasswordHashingService, JWTService
"""

from mathquest_auth.exceptions import (
    AuthError,
    ExpiredTokenError,
    InvalidCredentialsError,
    InvalidTokenError,
    WeakPasswordError,
)
from mathquest_auth.schemas import TokenPayload
from mathquest_auth.services import (
    PASSWORD_MAX_BYTES,
    PASSWORD_MIN_LENGTH,
    JWTService,
    OneTimeToken,
    PasswordHashingService,
    TokenSubject,
    hash_one_time_token,
)

__all__ = [
    # Services
    "PasswordHashingService",
    "JWTService",
    "TokenSubject",
    "OneTimeToken",
    "hash_one_time_token",
    "PASSWORD_MIN_LENGTH",
    "PASSWORD_MAX_BYTES",
    # Schemas
    "TokenPayload",
    # Exceptions
    "AuthError",
    "ExpiredTokenError",
    "InvalidTokenError",
    "WeakPasswordError",
    "InvalidCredentialsError",
]

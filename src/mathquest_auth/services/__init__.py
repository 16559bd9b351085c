"""Authentication services.

Provides password hashing, JWT token management and one-time tokens.
"""

from mathquest_auth.services.jwt_service import JWTService, TokenSubject
from mathquest_auth.services.one_time_token import OneTimeToken, hash_one_time_token
from mathquest_auth.services.password_service import (
    PASSWORD_MAX_BYTES,
    PASSWORD_MIN_LENGTH,
    PasswordHashingService,
)

__all__ = [
    "PASSWORD_MAX_BYTES",
    "PASSWORD_MIN_LENGTH",
    "PasswordHashingService",
    "JWTService",
    "OneTimeToken",
    "TokenSubject",
    "hash_one_time_token",
]

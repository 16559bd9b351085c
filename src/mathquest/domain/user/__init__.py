"""User domain: identity, credentials and roles.

This domain handles:
- User aggregate (identity, password hash, roles, soft delete)
- Temporary passwords issued by administrators
- Email verification of self-registered accounts
- Password reset tokens
- Role catalogue seeded at startup
"""

from mathquest.domain.user.aggregates import User
from mathquest.domain.user.exceptions import (
    EmailTakenError,
    InvalidResetTokenError,
    InvalidVerificationTokenError,
    PrincipalNotFoundError,
    RoleNotFoundError,
    UsernameTakenError,
    UserNotFoundError,
)
from mathquest.domain.user.repositories import (
    PasswordResetToken,
    PasswordResetTokenRepository,
    RoleRepository,
    UserRepository,
)
from mathquest.domain.user.value_objects import RoleName

__all__ = [
    "EmailTakenError",
    "InvalidResetTokenError",
    "InvalidVerificationTokenError",
    "PasswordResetToken",
    "PasswordResetTokenRepository",
    "PrincipalNotFoundError",
    "RoleName",
    "RoleNotFoundError",
    "RoleRepository",
    "User",
    "UserNotFoundError",
    "UserRepository",
    "UsernameTakenError",
]

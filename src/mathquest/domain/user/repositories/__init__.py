from mathquest.domain.user.repositories.password_reset_token_repository import (
    PasswordResetToken,
    PasswordResetTokenRepository,
)
from mathquest.domain.user.repositories.user_repository import (
    RoleRepository,
    UserRepository,
)

__all__ = [
    "PasswordResetToken",
    "PasswordResetTokenRepository",
    "RoleRepository",
    "UserRepository",
]

from mathquest.domain.user.aggregates.user import (
    EMAIL_MAX_LENGTH,
    NAME_MAX_LENGTH,
    USERNAME_MAX_LENGTH,
    User,
)

__all__ = ["EMAIL_MAX_LENGTH", "NAME_MAX_LENGTH", "USERNAME_MAX_LENGTH", "User"]

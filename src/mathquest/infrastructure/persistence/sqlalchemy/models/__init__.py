from mathquest.infrastructure.persistence.sqlalchemy.models.base import (
    Base,
    TimestampMixin,
)
from mathquest.infrastructure.persistence.sqlalchemy.models.password_reset_token_model import (  # noqa: E501
    PasswordResetTokenModel,
)
from mathquest.infrastructure.persistence.sqlalchemy.models.role_model import (
    RoleModel,
    user_roles,
)
from mathquest.infrastructure.persistence.sqlalchemy.models.user_model import UserModel

__all__ = [
    "Base",
    "PasswordResetTokenModel",
    "RoleModel",
    "TimestampMixin",
    "UserModel",
    "user_roles",
]

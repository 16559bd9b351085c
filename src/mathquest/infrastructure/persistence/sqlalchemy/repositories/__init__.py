from mathquest.infrastructure.persistence.sqlalchemy.repositories.password_reset_token_repository import (  # noqa: E501
    PasswordResetTokenRepositorySQLAlchemy,
)
from mathquest.infrastructure.persistence.sqlalchemy.repositories.role_repository import (  # noqa: E501
    RoleRepositorySQLAlchemy,
)
from mathquest.infrastructure.persistence.sqlalchemy.repositories.user_repository import (  # noqa: E501
    UserRepositorySQLAlchemy,
)

__all__ = [
    "PasswordResetTokenRepositorySQLAlchemy",
    "RoleRepositorySQLAlchemy",
    "UserRepositorySQLAlchemy",
]

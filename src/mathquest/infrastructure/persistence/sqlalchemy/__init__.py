"""SQLAlchemy persistence for the credential store."""

from mathquest.infrastructure.persistence.sqlalchemy.database import (
    create_engine,
    create_session_maker,
)
from mathquest.infrastructure.persistence.sqlalchemy.repositories import (
    PasswordResetTokenRepositorySQLAlchemy,
    RoleRepositorySQLAlchemy,
    UserRepositorySQLAlchemy,
)

__all__ = [
    "PasswordResetTokenRepositorySQLAlchemy",
    "RoleRepositorySQLAlchemy",
    "UserRepositorySQLAlchemy",
    "create_engine",
    "create_session_maker",
]

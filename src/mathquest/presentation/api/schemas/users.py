"""User profile schemas."""

from datetime import datetime
from typing import Optional

from mathquest.domain.user import User
from mathquest.presentation.api.schemas.base import CamelModel


class UserResponse(CamelModel):
    """User as returned by the API. Never includes the password hash."""

    id: int
    first_name: str
    last_name: str
    username: str
    email: str
    roles: list[str]
    deleted: bool
    temporary_password: bool
    temporary_password_expiry: Optional[datetime] = None
    created_by_admin: bool
    created_by: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            username=user.username,
            email=user.email,
            roles=sorted(role.value for role in user.roles),
            deleted=user.deleted,
            temporary_password=user.temporary_password,
            temporary_password_expiry=user.temporary_password_expiry,
            created_by_admin=user.created_by_admin,
            created_by=user.created_by,
            created_at=user.created_at,
        )


class UpdateProfileRequest(CamelModel):
    """Partial profile update; omitted fields stay unchanged."""

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class ChangePasswordRequest(CamelModel):
    current_password: Optional[str] = None
    new_password: Optional[str] = None
    confirm_password: Optional[str] = None

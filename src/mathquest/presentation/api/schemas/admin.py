"""Admin user-management schemas."""

from typing import Optional

from pydantic import Field

from mathquest.presentation.api.schemas.base import CamelModel
from mathquest.presentation.api.schemas.users import UpdateProfileRequest


class AdminCreateUserRequest(CamelModel):
    """Request schema for creating a user with a temporary password."""

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = Field(
        default=None,
        description="ROLE_STUDENT, ROLE_TEACHER or ROLE_ADMIN",
    )


class AdminUpdateUserRequest(UpdateProfileRequest):
    """Admin update; a password set here becomes temporary."""

    role: Optional[str] = None

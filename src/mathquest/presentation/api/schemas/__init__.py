from mathquest.presentation.api.schemas.admin import (
    AdminCreateUserRequest,
    AdminUpdateUserRequest,
)
from mathquest.presentation.api.schemas.auth import (
    ForgotPasswordRequest,
    JwtResponse,
    ResetPasswordRequest,
    SignInRequest,
    SignupRequest,
)
from mathquest.presentation.api.schemas.base import MessageResponse
from mathquest.presentation.api.schemas.error import ErrorResponse
from mathquest.presentation.api.schemas.users import (
    ChangePasswordRequest,
    UpdateProfileRequest,
    UserResponse,
)

__all__ = [
    "AdminCreateUserRequest",
    "AdminUpdateUserRequest",
    "ChangePasswordRequest",
    "ErrorResponse",
    "ForgotPasswordRequest",
    "JwtResponse",
    "MessageResponse",
    "ResetPasswordRequest",
    "SignInRequest",
    "SignupRequest",
    "UpdateProfileRequest",
    "UserResponse",
]

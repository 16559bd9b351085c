"""User profile router."""

import logging
from typing import Annotated

from fastapi import APIRouter

from mathquest.presentation.api.dependencies import (
    AccountService,
    AdminPrincipal,
    AnyRolePrincipal,
    DBSession,
)
from mathquest.presentation.api.errors import unwrap
from mathquest.presentation.api.schemas import (
    ChangePasswordRequest,
    MessageResponse,
    UpdateProfileRequest,
    UserResponse,
)
from mathquest.presentation.api.validation import (
    validate_change_password,
    validate_profile_update,
    validated,
)

logger = logging.getLogger(__name__)

router = APIRouter()

ProfileBody = Annotated[
    UpdateProfileRequest,
    validated(UpdateProfileRequest, validate_profile_update),
]
ChangePasswordBody = Annotated[
    ChangePasswordRequest,
    validated(ChangePasswordRequest, validate_change_password),
]


@router.get("/profile", summary="Get own profile")
async def get_profile(
    principal: AnyRolePrincipal,
    account_service: AccountService,
) -> UserResponse:
    user = unwrap(await account_service.get_profile(principal))
    return UserResponse.from_user(user)


@router.put("/profile", summary="Update own profile")
async def update_profile(
    body: ProfileBody,
    principal: AnyRolePrincipal,
    account_service: AccountService,
    session: DBSession,
) -> UserResponse:
    """Update the caller's profile. Omitted fields stay unchanged."""
    user = unwrap(
        await account_service.update_profile(
            principal,
            first_name=body.first_name,
            last_name=body.last_name,
            username=body.username,
            email=body.email,
            password=body.password,
        ),
    )
    await session.commit()
    return UserResponse.from_user(user)


@router.delete("/profile", summary="Delete own account")
async def delete_profile(
    principal: AnyRolePrincipal,
    account_service: AccountService,
    session: DBSession,
) -> MessageResponse:
    unwrap(await account_service.soft_delete(principal.id))
    await session.commit()
    return MessageResponse(message="User account deleted successfully")


@router.post(
    "/change-password",
    summary="Change own password",
    responses={
        200: {"description": "Password changed"},
        400: {"description": "Validation failed or passwords do not match"},
    },
)
async def change_password(
    body: ChangePasswordBody,
    principal: AnyRolePrincipal,
    account_service: AccountService,
    session: DBSession,
) -> MessageResponse:
    unwrap(
        await account_service.change_password(
            principal,
            current_password=body.current_password,
            new_password=body.new_password,
            confirm_password=body.confirm_password,
        ),
    )
    await session.commit()
    return MessageResponse(message="Password changed successfully")


@router.delete("/{user_id}", summary="Delete a user (admin)")
async def delete_user(
    user_id: int,
    admin: AdminPrincipal,
    account_service: AccountService,
    session: DBSession,
) -> MessageResponse:
    unwrap(await account_service.soft_delete(user_id))
    await session.commit()

    logger.info("User %s deleted by %s", user_id, admin.username)
    return MessageResponse(message="User deleted successfully")

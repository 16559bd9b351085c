"""Admin router for user management."""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, status

from mathquest.presentation.api.binding import optional_id_query
from mathquest.presentation.api.dependencies import (
    AccountService,
    AdminPrincipal,
    DBSession,
)
from mathquest.presentation.api.errors import unwrap
from mathquest.presentation.api.schemas import (
    AdminCreateUserRequest,
    AdminUpdateUserRequest,
    MessageResponse,
    UserResponse,
)
from mathquest.presentation.api.validation import (
    validate_admin_create,
    validate_admin_update,
    validated,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])

CreateUserBody = Annotated[
    AdminCreateUserRequest,
    validated(AdminCreateUserRequest, validate_admin_create),
]
UpdateUserBody = Annotated[
    AdminUpdateUserRequest,
    validated(AdminUpdateUserRequest, validate_admin_update),
]
RoleIdQuery = Annotated[Optional[int], optional_id_query("roleId")]


@router.get(
    "/users",
    summary="List users",
    responses={
        200: {"description": "Users that are not deleted"},
        401: {"description": "Authentication required"},
        403: {"description": "Admin access required"},
    },
)
async def list_users(
    _admin: AdminPrincipal,
    account_service: AccountService,
    role_id: RoleIdQuery,
) -> list[UserResponse]:
    """List users, optionally only those holding role ``roleId``."""
    users = unwrap(await account_service.list_users(role_id))
    return [UserResponse.from_user(user) for user in users]


@router.post(
    "/users",
    status_code=status.HTTP_201_CREATED,
    summary="Create a user with a temporary password",
)
async def create_user(
    body: CreateUserBody,
    admin: AdminPrincipal,
    account_service: AccountService,
    session: DBSession,
) -> UserResponse:
    user = unwrap(
        await account_service.create_by_admin(
            admin,
            first_name=body.first_name,
            last_name=body.last_name,
            username=body.username,
            email=body.email,
            password=body.password,
            role=body.role,
        ),
    )
    await session.commit()
    return UserResponse.from_user(user)


@router.put("/users/{user_id}", summary="Update a user")
async def update_user(
    user_id: int,
    body: UpdateUserBody,
    _admin: AdminPrincipal,
    account_service: AccountService,
    session: DBSession,
) -> UserResponse:
    user = unwrap(
        await account_service.update_by_admin(
            user_id,
            first_name=body.first_name,
            last_name=body.last_name,
            username=body.username,
            email=body.email,
            password=body.password,
            role=body.role,
        ),
    )
    await session.commit()
    return UserResponse.from_user(user)


@router.delete("/users/{user_id}", summary="Delete a user")
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

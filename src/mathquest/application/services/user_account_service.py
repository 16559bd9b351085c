"""Profile and account management for users and administrators."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import TYPE_CHECKING

from mathquest.domain.shared import Err, Ok, Result, ServiceError
from mathquest.domain.shared.exceptions import InvalidArgumentError
from mathquest.domain.user import (
    EmailTakenError,
    RoleName,
    User,
    UsernameTakenError,
    UserNotFoundError,
)
from mathquest_auth import WeakPasswordError

if TYPE_CHECKING:
    from mathquest.application.context import Principal
    from mathquest.domain.user import UserRepository
    from mathquest_auth import PasswordHashingService

logger = logging.getLogger(__name__)

DEFAULT_TEMPORARY_PASSWORD_LIFETIME = timedelta(days=7)

PASSWORD_UNCHANGED = "New password must be different from current password."
CURRENT_PASSWORD_INCORRECT = "Current password is incorrect"
PASSWORD_MISMATCH = "New password and confirm password do not match"


class UserAccountService:
    """
    Application service for user accounts.

    Self-service operations act on the calling principal. Admin operations
    act on any user by id; the caller's role is checked by the API layer
    before these methods run. Accounts are only ever soft-deleted.
    """

    def __init__(
        self,
        user_repository: UserRepository,
        password_service: PasswordHashingService,
        temporary_password_lifetime: timedelta = DEFAULT_TEMPORARY_PASSWORD_LIFETIME,
    ):
        self._user_repo = user_repository
        self._password_service = password_service
        self._temporary_lifetime = temporary_password_lifetime

    async def get_profile(self, principal: Principal) -> Result[User]:
        return await self._load(principal.id)

    async def update_profile(  # noqa: PLR0913
        self,
        principal: Principal,
        first_name: str | None = None,
        last_name: str | None = None,
        username: str | None = None,
        email: str | None = None,
        password: str | None = None,
    ) -> Result[User]:
        loaded = await self._load(principal.id)
        if isinstance(loaded, Err):
            return loaded
        user = loaded.value

        error = await self._apply_changes(user, first_name, last_name, username, email)
        if error is not None:
            return Err(error)

        if password is not None:
            try:
                user.change_password(self._password_service.hash(password))
            except WeakPasswordError as e:
                return Err(ServiceError.bad_input(e.message))

        user = await self._user_repo.save(user)
        logger.info("Profile updated: %s", user.username)
        return Ok(user)

    async def change_password(
        self,
        principal: Principal,
        current_password: str,
        new_password: str,
        confirm_password: str,
    ) -> Result[User]:
        """Change the caller's own password.

        Administrators may skip the current-password check. A successful
        change always clears any temporary-password state.
        """
        loaded = await self._load(principal.id)
        if isinstance(loaded, Err):
            return loaded
        user = loaded.value

        if current_password == new_password:
            return Err(ServiceError.bad_input(PASSWORD_UNCHANGED))

        if not principal.is_admin and not self._password_service.verify(
            current_password,
            user.password_hash,
        ):
            return Err(ServiceError.bad_input(CURRENT_PASSWORD_INCORRECT))

        if new_password != confirm_password:
            return Err(ServiceError.bad_input(PASSWORD_MISMATCH))

        try:
            user.change_password(self._password_service.hash(new_password))
        except WeakPasswordError as e:
            return Err(ServiceError.bad_input(e.message))

        user = await self._user_repo.save(user)
        logger.info("Password changed: %s", user.username)
        return Ok(user)

    async def soft_delete(self, user_id: int) -> Result[User]:
        loaded = await self._load(user_id)
        if isinstance(loaded, Err):
            return loaded
        user = loaded.value

        user.soft_delete()
        user = await self._user_repo.save(user)
        logger.info("User soft-deleted: %s", user.username)
        return Ok(user)

    async def list_users(self, role_id: int | None = None) -> Result[list[User]]:
        role = None
        if role_id is not None:
            try:
                role = RoleName.from_id(role_id)
            except ValueError as e:
                return Err(ServiceError.bad_input(str(e)))
        return Ok(await self._user_repo.list_all(role))

    async def create_by_admin(  # noqa: PLR0913
        self,
        admin: Principal,
        first_name: str,
        last_name: str,
        username: str,
        email: str,
        password: str,
        role: str,
    ) -> Result[User]:
        """Create a user whose password is temporary until first change."""
        if await self._user_repo.exists_by_username(username):
            return Err(ServiceError.bad_input(UsernameTakenError(username).message))
        if await self._user_repo.exists_by_email(email):
            return Err(ServiceError.bad_input(EmailTakenError(email).message))

        try:
            role_name = RoleName.parse(role)
        except ValueError as e:
            return Err(ServiceError.bad_input(str(e)))

        try:
            user = User.create_by_admin(
                first_name=first_name,
                last_name=last_name,
                username=username,
                email=email,
                password_hash=self._password_service.hash(password),
                roles=[role_name],
                created_by=admin.username,
                valid_for=self._temporary_lifetime,
            )
        except WeakPasswordError as e:
            return Err(ServiceError.bad_input(e.message))
        except InvalidArgumentError as e:
            return Err(ServiceError.from_exception(e))

        user = await self._user_repo.save(user)
        logger.info(
            "User created by admin %s: %s (role: %s)",
            admin.username,
            username,
            role_name.value,
        )
        return Ok(user)

    async def update_by_admin(  # noqa: PLR0913
        self,
        user_id: int,
        first_name: str | None = None,
        last_name: str | None = None,
        username: str | None = None,
        email: str | None = None,
        password: str | None = None,
        role: str | None = None,
    ) -> Result[User]:
        """Update any user. A new password becomes a temporary password."""
        loaded = await self._load(user_id)
        if isinstance(loaded, Err):
            return loaded
        user = loaded.value

        error = await self._apply_changes(user, first_name, last_name, username, email)
        if error is not None:
            return Err(error)

        try:
            if role is not None:
                user.replace_roles([RoleName.parse(role)])
            if password is not None:
                user.set_temporary_password(
                    self._password_service.hash(password),
                    self._temporary_lifetime,
                )
        except WeakPasswordError as e:
            return Err(ServiceError.bad_input(e.message))
        except ValueError as e:
            return Err(ServiceError.bad_input(str(e)))

        user = await self._user_repo.save(user)
        logger.info("User updated by admin: %s", user.username)
        return Ok(user)

    async def _load(self, user_id: int) -> Result[User]:
        user = await self._user_repo.find_by_id(user_id)
        if user is None or user.deleted:
            return Err(ServiceError.from_exception(UserNotFoundError(user_id)))
        return Ok(user)

    async def _apply_changes(
        self,
        user: User,
        first_name: str | None,
        last_name: str | None,
        username: str | None,
        email: str | None,
    ) -> ServiceError | None:
        if username is not None and username != user.username:
            if await self._user_repo.exists_by_username(username):
                return ServiceError.bad_input(UsernameTakenError(username).message)
        if email is not None and email != user.email:
            if await self._user_repo.exists_by_email(email):
                return ServiceError.bad_input(EmailTakenError(email).message)

        try:
            user.update_profile(
                first_name=first_name,
                last_name=last_name,
                username=username,
                email=email,
            )
        except InvalidArgumentError as e:
            return ServiceError.from_exception(e)
        return None

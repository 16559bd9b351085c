"""Resolve a login identifier into an authenticated principal."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Callable

from mathquest.application.context import Principal
from mathquest.domain.shared.time import utc_now
from mathquest.domain.user import PrincipalNotFoundError

if TYPE_CHECKING:
    from mathquest.domain.user import User, UserRepository

logger = logging.getLogger(__name__)

USER_NOT_FOUND = "User Not Found"
ACCOUNT_DELETED = "User account has been deleted"
TEMPORARY_PASSWORD_EXPIRED = (
    "Temporary password has expired. Please contact your administrator."
)


class PrincipalResolver:
    """
    Look up a user by username or email and check it may authenticate.

    Used both at sign-in and on every authenticated request, so a user
    soft-deleted or whose temporary password lapsed after a token was
    issued is rejected on the next request.
    """

    def __init__(
        self,
        user_repository: UserRepository,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._user_repo = user_repository
        self._clock = clock

    async def load_user(self, username_or_email: str) -> User:
        """Return the matching user if its account is usable.

        Parameters
        ----------
        username_or_email
            A username, or an email address when no username matches

        Raises
        ------
        PrincipalNotFoundError
            If no user matches, the account is soft-deleted, or its
            temporary password has expired
        """
        user = await self._user_repo.find_by_username(username_or_email)
        if user is None:
            user = await self._user_repo.find_by_email(username_or_email)
        if user is None:
            raise PrincipalNotFoundError(USER_NOT_FOUND)

        if user.deleted:
            logger.info("Rejected deleted account: %s", user.username)
            raise PrincipalNotFoundError(ACCOUNT_DELETED)

        if user.has_expired_temporary_password(self._clock()):
            logger.info("Rejected expired temporary password: %s", user.username)
            raise PrincipalNotFoundError(TEMPORARY_PASSWORD_EXPIRED)

        return user

    async def resolve(self, username_or_email: str) -> Principal:
        user = await self.load_user(username_or_email)
        return Principal.create(user)

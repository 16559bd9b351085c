"""Password reset by emailed single-use token."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Callable

from mathquest.domain.shared import Err, Ok, Result, ServiceError
from mathquest.domain.shared.time import utc_now
from mathquest.domain.user import InvalidResetTokenError
from mathquest_auth import OneTimeToken, WeakPasswordError, hash_one_time_token

if TYPE_CHECKING:
    from mathquest.domain.user import (
        PasswordResetTokenRepository,
        User,
        UserRepository,
    )
    from mathquest.infrastructure.email import EmailService
    from mathquest_auth import PasswordHashingService

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_LIFETIME = timedelta(hours=1)
DEFAULT_MAX_RESETS_PER_DAY = 3

PASSWORDS_DO_NOT_MATCH = "Passwords do not match"
TOKEN_EXPIRED = "Password reset token has expired"


class PasswordResetService:
    """
    Issue and redeem password reset tokens.

    ``request_reset`` never tells the caller whether the email exists or
    was rate limited. A redeemed token is marked used, and the new
    password replaces any temporary password.
    """

    def __init__(  # noqa: PLR0913
        self,
        user_repository: UserRepository,
        token_repository: PasswordResetTokenRepository,
        password_service: PasswordHashingService,
        email_service: EmailService,
        frontend_base_url: str,
        token_lifetime: timedelta = DEFAULT_TOKEN_LIFETIME,
        max_resets_per_day: int = DEFAULT_MAX_RESETS_PER_DAY,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._user_repo = user_repository
        self._token_repo = token_repository
        self._password_service = password_service
        self._email_service = email_service
        self._frontend_base_url = frontend_base_url.rstrip("/")
        self._token_lifetime = token_lifetime
        self._max_resets_per_day = max_resets_per_day
        self._clock = clock

    async def request_reset(self, email: str) -> None:
        user = await self._user_repo.find_by_email(email)
        if user is None or user.deleted:
            # Silent to prevent email enumeration
            logger.debug("Password reset requested for unknown email: %s", email)
            return

        now = self._clock()
        count = await self._token_repo.count_recent_for_user(
            user.id,
            now - timedelta(days=1),
        )
        if count >= self._max_resets_per_day:
            logger.warning("Rate limit exceeded for password reset: %s", email)
            return

        token = OneTimeToken.generate()
        await self._token_repo.invalidate_all_for_user(user.id)
        await self._token_repo.create(
            user.id,
            token.digest,
            now + self._token_lifetime,
        )

        reset_link = f"{self._frontend_base_url}/#/reset-password?token={token.raw}"
        try:
            self._email_service.send_password_reset_email(
                to_email=email,
                reset_link=reset_link,
            )
            logger.info("Password reset email sent to %s", email)
        except Exception as e:
            # The token is stored; the user can ask again
            logger.error("Failed to send password reset email: %s", e)

    async def reset_password(
        self,
        token: str,
        new_password: str,
        confirm_password: str,
    ) -> Result[User]:
        if new_password != confirm_password:
            return Err(ServiceError.bad_input(PASSWORDS_DO_NOT_MATCH))

        reset_token = await self._token_repo.find_unused_by_hash(
            hash_one_time_token(token),
        )
        if reset_token is None:
            return Err(ServiceError.from_exception(InvalidResetTokenError()))

        if reset_token.is_expired(self._clock()):
            expired = InvalidResetTokenError(TOKEN_EXPIRED)
            return Err(ServiceError.from_exception(expired))

        user = await self._user_repo.find_by_id(reset_token.user_id)
        if user is None or user.deleted:
            return Err(ServiceError.from_exception(InvalidResetTokenError()))

        try:
            user.change_password(self._password_service.hash(new_password))
        except WeakPasswordError as e:
            return Err(ServiceError.bad_input(e.message))

        user = await self._user_repo.save(user)
        await self._token_repo.mark_used(reset_token.id)
        logger.info("Password reset completed for user: %s", user.username)
        return Ok(user)

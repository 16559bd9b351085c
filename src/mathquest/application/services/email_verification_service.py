"""Email verification of self-registered accounts."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from mathquest.domain.shared import Err, Ok, Result, ServiceError
from mathquest.domain.user import InvalidVerificationTokenError
from mathquest_auth import OneTimeToken, hash_one_time_token

if TYPE_CHECKING:
    from mathquest.domain.user import User, UserRepository
    from mathquest.infrastructure.email import EmailService

logger = logging.getLogger(__name__)

TOKEN_MISSING = "Verification token is missing"
ALREADY_VERIFIED = "Email already verified. You can log in."
VERIFIED = "Email verified successfully! You can now log in."


class EmailVerificationService:
    """
    Hold new accounts disabled until the emailed link is followed.

    Sign-up calls ``prepare`` before the user is saved and ``send`` after;
    ``verify`` enables the account and forgets the token.
    """

    def __init__(
        self,
        user_repository: UserRepository,
        email_service: EmailService,
        frontend_base_url: str,
    ):
        self._user_repo = user_repository
        self._email_service = email_service
        self._frontend_base_url = frontend_base_url.rstrip("/")

    def prepare(self, user: User) -> OneTimeToken:
        token = OneTimeToken.generate()
        user.require_email_verification(token.digest)
        return token

    def send(self, user: User, token: OneTimeToken) -> None:
        link = f"{self._frontend_base_url}/#/auth/verify?token={token.raw}"
        try:
            self._email_service.send_verification_email(
                to_email=user.email,
                verification_link=link,
            )
        except Exception as e:
            # Don't raise - the account is already saved
            logger.error("Failed to send verification email to %s: %s", user.email, e)

    async def verify(self, raw_token: str | None) -> Result[str]:
        """Enable the account the token was issued for.

        Returns
        -------
        Ok with the message for the caller, or Err(BAD_INPUT) when the
        token is missing or matches no account
        """
        if raw_token is None or not raw_token.strip():
            return Err(ServiceError.bad_input(TOKEN_MISSING))

        user = await self._user_repo.find_by_verification_token_hash(
            hash_one_time_token(raw_token),
        )
        if user is None:
            logger.info("Unknown verification token presented")
            return Err(ServiceError.from_exception(InvalidVerificationTokenError()))

        if user.enabled:
            return Ok(ALREADY_VERIFIED)

        user.confirm_email()
        await self._user_repo.save(user)
        logger.info("Email verified: %s", user.username)
        return Ok(VERIFIED)

"""Authentication service for sign-in and self-registration."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from mathquest.application.context import Principal
from mathquest.domain.shared import Err, Ok, Result, ServiceError
from mathquest.domain.shared.exceptions import InvalidArgumentError
from mathquest.domain.user import (
    EmailTakenError,
    PrincipalNotFoundError,
    RoleName,
    User,
    UsernameTakenError,
)
from mathquest_auth import InvalidCredentialsError, WeakPasswordError

if TYPE_CHECKING:
    from mathquest.application.services.email_verification_service import (
        EmailVerificationService,
    )
    from mathquest.application.services.principal_resolver import PrincipalResolver
    from mathquest.domain.user import UserRepository
    from mathquest_auth import JWTService, PasswordHashingService

logger = logging.getLogger(__name__)

BAD_CREDENTIALS = InvalidCredentialsError().message
ACCOUNT_NOT_VERIFIED = (
    "Account not verified. Please check your email to verify your account."
)


@dataclass(frozen=True)
class SignInResult:
    token: str
    user: User
    principal: Principal


class AuthenticationService:
    """
    Application service for user authentication.

    Combines the generic mathquest_auth building blocks (password hashing,
    JWT tokens) with the user domain:
    - Sign in with username or email
    - Self-registration with an optional role, held disabled until the
      email is verified when an ``email_verification`` service is given

    Every failed sign-in is reported as the same bad-credentials error;
    the actual reason is only logged. Only a caller who knows the password
    learns that the account still awaits verification.
    """

    def __init__(
        self,
        user_repository: UserRepository,
        principal_resolver: PrincipalResolver,
        password_service: PasswordHashingService,
        jwt_service: JWTService,
        email_verification: Optional[EmailVerificationService] = None,
    ):
        self._user_repo = user_repository
        self._resolver = principal_resolver
        self._password_service = password_service
        self._jwt_service = jwt_service
        self._verification = email_verification

    async def sign_in(
        self,
        username_or_email: str,
        password: str,
    ) -> Result[SignInResult]:
        try:
            user = await self._resolver.load_user(username_or_email)
        except PrincipalNotFoundError as e:
            logger.info("Sign-in rejected for %s: %s", username_or_email, e.message)
            return Err(ServiceError.unauthorized(BAD_CREDENTIALS))

        if not self._password_service.verify(password, user.password_hash):
            logger.info("Sign-in rejected for %s: wrong password", username_or_email)
            return Err(ServiceError.unauthorized(BAD_CREDENTIALS))

        if not user.enabled:
            logger.info("Sign-in rejected for %s: not verified", user.username)
            return Err(ServiceError.unauthorized(ACCOUNT_NOT_VERIFIED))

        if self._password_service.needs_rehash(user.password_hash):
            await self._rehash(user, password)

        principal = Principal.create(user)
        token = self._jwt_service.issue(principal)

        logger.info("User signed in: %s", principal.username)
        return Ok(SignInResult(token=token, user=user, principal=principal))

    async def sign_up(  # noqa: PLR0913
        self,
        first_name: str,
        last_name: str,
        username: str,
        email: str,
        password: str,
        role: str | None = None,
    ) -> Result[User]:
        """Register a user. The returned user is disabled if it must verify."""
        if await self._user_repo.exists_by_username(username):
            return Err(ServiceError.bad_input(UsernameTakenError(username).message))
        if await self._user_repo.exists_by_email(email):
            return Err(ServiceError.bad_input(EmailTakenError(email).message))

        try:
            password_hash = self._password_service.hash(password)
        except WeakPasswordError as e:
            return Err(ServiceError.bad_input(e.message))

        assigned_role = RoleName.from_signup(role)
        try:
            user = User.create(
                first_name=first_name,
                last_name=last_name,
                username=username,
                email=email,
                password_hash=password_hash,
                roles=[assigned_role],
            )
        except InvalidArgumentError as e:
            return Err(ServiceError.from_exception(e))

        verification_token = None
        if self._verification is not None:
            verification_token = self._verification.prepare(user)

        user = await self._user_repo.save(user)

        if verification_token is not None:
            self._verification.send(user, verification_token)

        logger.info("User registered: %s (role: %s)", username, assigned_role.value)
        return Ok(user)

    async def _rehash(self, user: User, password: str) -> None:
        """Store the password again with the configured work factor."""
        try:
            user.rehash_password(self._password_service.hash(password))
        except WeakPasswordError:
            # Accounts from before the current rules keep their old hash
            logger.info(
                "Password of %s not rehashed: below current rules",
                user.username,
            )
            return
        await self._user_repo.save(user)
        logger.info("Password hash upgraded for %s", user.username)

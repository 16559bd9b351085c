"""FastAPI dependency injection for the MathQuest API.

Provides dependencies for:
- Settings and database sessions (held on app.state by create_app)
- Authentication services
- The current principal and role guards
- Application service instances
"""

import logging
from datetime import timedelta
from typing import Annotated, AsyncGenerator, Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from mathquest.application.context import Principal
from mathquest.application.services import (
    AuthenticationService,
    EmailVerificationService,
    PasswordResetService,
    PrincipalResolver,
    UserAccountService,
)
from mathquest.domain.shared import AccessDeniedError, AuthenticationRequiredError
from mathquest.domain.user import RoleName
from mathquest.infrastructure.email import EmailService
from mathquest.infrastructure.persistence.sqlalchemy.repositories import (
    PasswordResetTokenRepositorySQLAlchemy,
    UserRepositorySQLAlchemy,
)
from mathquest_auth import JWTService, PasswordHashingService
from mathquest_config.settings import Settings

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Settings & Database Session
# -----------------------------------------------------------------------------


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


SettingsDep = Annotated[Settings, Depends(get_app_settings)]


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Database session dependency.

    Opens one session per request from the app's session maker. Routers
    commit explicitly; anything left uncommitted is rolled back on close.

    Yields
    ------
    AsyncSession for database operations
    """
    async with request.app.state.session_maker() as session:
        yield session


# Type alias for injected session
DBSession = Annotated[AsyncSession, Depends(get_db_session)]


# -----------------------------------------------------------------------------
# Authentication Services
# -----------------------------------------------------------------------------


def build_jwt_service(settings: Settings) -> JWTService:
    return JWTService(
        secret_key=settings.jwt_secret_key.get_secret_value(),
        access_token_expire_hours=settings.jwt_access_token_expire_hours,
    )


def get_jwt_service(settings: SettingsDep) -> JWTService:
    """Get JWT service configured with API settings."""
    return build_jwt_service(settings)


def get_password_service(settings: SettingsDep) -> PasswordHashingService:
    """Get password hashing service."""
    return PasswordHashingService(rounds=settings.bcrypt_rounds)


def get_email_service(settings: SettingsDep) -> EmailService:
    """Email sender; overridden in tests to capture outgoing links."""
    return EmailService(settings)


PasswordServiceDep = Annotated[PasswordHashingService, Depends(get_password_service)]
JWTServiceDep = Annotated[JWTService, Depends(get_jwt_service)]
EmailServiceDep = Annotated[EmailService, Depends(get_email_service)]


# -----------------------------------------------------------------------------
# Application Services
# -----------------------------------------------------------------------------


async def get_email_verification_service(
    session: DBSession,
    email_service: EmailServiceDep,
    settings: SettingsDep,
) -> EmailVerificationService:
    return EmailVerificationService(
        user_repository=UserRepositorySQLAlchemy(session),
        email_service=email_service,
        frontend_base_url=settings.frontend_base_url,
    )


VerificationService = Annotated[
    EmailVerificationService,
    Depends(get_email_verification_service),
]


async def get_authentication_service(
    session: DBSession,
    jwt_service: JWTServiceDep,
    password_service: PasswordServiceDep,
    verification_service: VerificationService,
    settings: SettingsDep,
) -> AuthenticationService:
    user_repo = UserRepositorySQLAlchemy(session)
    return AuthenticationService(
        user_repository=user_repo,
        principal_resolver=PrincipalResolver(user_repo),
        password_service=password_service,
        jwt_service=jwt_service,
        email_verification=(
            verification_service
            if settings.auth_email_verification_required
            else None
        ),
    )


async def get_password_reset_service(
    session: DBSession,
    password_service: PasswordServiceDep,
    email_service: EmailServiceDep,
    settings: SettingsDep,
) -> PasswordResetService:
    return PasswordResetService(
        user_repository=UserRepositorySQLAlchemy(session),
        token_repository=PasswordResetTokenRepositorySQLAlchemy(session),
        password_service=password_service,
        email_service=email_service,
        frontend_base_url=settings.frontend_base_url,
        token_lifetime=timedelta(hours=settings.password_reset_token_expire_hours),
        max_resets_per_day=settings.password_reset_max_per_day,
    )


async def get_user_account_service(
    session: DBSession,
    password_service: PasswordServiceDep,
    settings: SettingsDep,
) -> UserAccountService:
    return UserAccountService(
        user_repository=UserRepositorySQLAlchemy(session),
        password_service=password_service,
        temporary_password_lifetime=timedelta(
            days=settings.temporary_password_expire_days,
        ),
    )


AuthService = Annotated[AuthenticationService, Depends(get_authentication_service)]
AccountService = Annotated[UserAccountService, Depends(get_user_account_service)]
ResetService = Annotated[PasswordResetService, Depends(get_password_reset_service)]


# -----------------------------------------------------------------------------
# Current Principal & Role Guards
# -----------------------------------------------------------------------------


def get_current_principal_optional(request: Request) -> Optional[Principal]:
    """Principal attached by the security pipeline, or None."""
    return getattr(request.state, "principal", None)


OptionalPrincipal = Annotated[
    Optional[Principal],
    Depends(get_current_principal_optional),
]


def require_authenticated(principal: OptionalPrincipal) -> Principal:
    """Require an authenticated principal (401 otherwise)."""
    if principal is None:
        raise AuthenticationRequiredError
    return principal


CurrentPrincipal = Annotated[Principal, Depends(require_authenticated)]


def require_roles(*roles: RoleName):
    """Build a guard requiring any of ``roles``.

    Missing principal gives 401; a principal without any of the roles
    gives 403.
    """
    allowed = frozenset(roles)

    def guard(principal: CurrentPrincipal) -> Principal:
        if not principal.has_any_role(allowed):
            logger.info(
                "Access denied for %s (needs one of %s)",
                principal.username,
                sorted(role.value for role in allowed),
            )
            raise AccessDeniedError
        return principal

    return guard


AnyRolePrincipal = Annotated[
    Principal,
    Depends(require_roles(RoleName.STUDENT, RoleName.TEACHER, RoleName.ADMIN)),
]
AdminPrincipal = Annotated[Principal, Depends(require_roles(RoleName.ADMIN))]

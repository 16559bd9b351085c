"""Bearer-token request authentication."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Callable, Optional

from mathquest.application.context import Principal
from mathquest.application.services import PrincipalResolver
from mathquest.domain.shared.time import utc_now
from mathquest.domain.user import PrincipalNotFoundError
from mathquest.infrastructure.persistence.sqlalchemy.repositories import (
    UserRepositorySQLAlchemy,
)
from mathquest_auth import ExpiredTokenError, InvalidTokenError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from mathquest.presentation.api.security.policy import AuthorizationPolicy
    from mathquest_auth import JWTService

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token of a ``Bearer <token>`` header, or None."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX) :].strip()
    return token or None


class RequestAuthenticator:
    """
    Turn an ``Authorization`` header into a principal.

    The token only proves who the caller is. Roles and account state are
    re-read through the PrincipalResolver, so a role change, soft delete or
    lapsed temporary password takes effect on the next request.

    ``authenticate`` never raises: every failure is logged and the request
    continues unauthenticated.
    """

    def __init__(
        self,
        jwt_service: JWTService,
        session_maker: async_sessionmaker[AsyncSession],
        policy: AuthorizationPolicy,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._jwt_service = jwt_service
        self._session_maker = session_maker
        self._policy = policy
        self._clock = clock

    async def authenticate(
        self,
        path: str,
        authorization: Optional[str],
    ) -> Optional[Principal]:
        if self._policy.skips_authentication(path):
            return None

        token = extract_bearer_token(authorization)
        if token is None:
            return None

        try:
            payload = self._jwt_service.verify_token(token)
        except ExpiredTokenError:
            logger.debug("Expired token on %s", path)
            return None
        except InvalidTokenError as e:
            logger.warning("Invalid token on %s: %s", path, e.message)
            return None

        try:
            async with self._session_maker() as session:
                resolver = PrincipalResolver(
                    UserRepositorySQLAlchemy(session),
                    clock=self._clock,
                )
                return await resolver.resolve(payload.subject)
        except PrincipalNotFoundError as e:
            logger.info("Token subject %s rejected: %s", payload.subject, e.message)
            return None
        except Exception as e:
            logger.exception("Cannot set user authentication: %s", e)
            return None

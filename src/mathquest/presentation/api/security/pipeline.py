"""Ordered request pipeline run before route dispatch.

Steps, in order:
1. log the request (never credential headers such as ``Authorization``)
2. authenticate the bearer token, attaching the principal to request.state
3. authorize the path against the access policy

Route-level role guards, validators and the exception handlers run after
this middleware hands the request on.
"""

import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from mathquest.domain.shared import AuthenticationRequiredError
from mathquest.presentation.api.errors import describe_exception, error_response
from mathquest.presentation.api.security.authenticator import RequestAuthenticator
from mathquest.presentation.api.security.policy import AuthorizationPolicy

logger = logging.getLogger(__name__)

# Credentials never reach the request log
REDACTED_HEADERS = frozenset({"authorization", "proxy-authorization", "cookie"})


def log_request(request: Request) -> None:
    headers = {
        name: value
        for name, value in request.headers.items()
        if name.lower() not in REDACTED_HEADERS
    }
    client = request.client.host if request.client else "-"
    logger.info(
        "%s %s%s client=%s headers=%s",
        request.method,
        request.url.path,
        f"?{request.url.query}" if request.url.query else "",
        client,
        headers,
    )


class SecurityPipeline(BaseHTTPMiddleware):
    """Authenticate then authorize every request before dispatch."""

    def __init__(
        self,
        app: ASGIApp,
        authenticator: RequestAuthenticator,
        policy: AuthorizationPolicy,
        request_logging: bool = True,
    ):
        super().__init__(app)
        self._authenticator = authenticator
        self._policy = policy
        self._request_logging = request_logging

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        if self._request_logging:
            log_request(request)

        request.state.principal = None

        # CORS preflight is answered without credentials
        if request.method == "OPTIONS":
            return await call_next(request)

        path = request.url.path
        principal = await self._authenticator.authenticate(
            path,
            request.headers.get("Authorization"),
        )
        request.state.principal = principal

        if principal is None and not self._policy.is_public(path):
            logger.info("Unauthenticated request to %s rejected", path)
            return error_response(
                describe_exception(AuthenticationRequiredError()),
                request,
            )

        return await call_next(request)

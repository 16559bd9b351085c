"""Request security: path policy, bearer authentication, pipeline."""

from mathquest.presentation.api.security.authenticator import (
    RequestAuthenticator,
    extract_bearer_token,
)
from mathquest.presentation.api.security.pipeline import SecurityPipeline
from mathquest.presentation.api.security.policy import (
    AUTHENTICATION_SKIP_PATHS,
    PUBLIC_PATHS,
    Access,
    AuthorizationPolicy,
    PathMatcher,
)

__all__ = [
    "AUTHENTICATION_SKIP_PATHS",
    "PUBLIC_PATHS",
    "Access",
    "AuthorizationPolicy",
    "PathMatcher",
    "RequestAuthenticator",
    "SecurityPipeline",
    "extract_bearer_token",
]

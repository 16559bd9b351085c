"""Path-based access policy.

Paths are matched with Ant-style patterns: ``*`` matches within one path
segment and a trailing ``/**`` matches the prefix itself and everything
below it.
"""

import re
from enum import Enum
from typing import Iterable


class Access(str, Enum):
    PUBLIC = "public"
    AUTHENTICATED = "authenticated"


def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile an Ant-style path pattern into an anchored regex."""
    if pattern.endswith("/**"):
        prefix = pattern[: -len("/**")]
        return re.compile(f"^{_segment_regex(prefix)}(/.*)?$")
    return re.compile(f"^{_segment_regex(pattern)}$")


def _segment_regex(pattern: str) -> str:
    parts = []
    for piece in re.split(r"(\*\*|\*)", pattern):
        if piece == "**":
            parts.append(".*")
        elif piece == "*":
            parts.append("[^/]*")
        else:
            parts.append(re.escape(piece))
    return "".join(parts)


class PathMatcher:
    """A set of path patterns."""

    def __init__(self, patterns: Iterable[str]):
        self.patterns = tuple(patterns)
        self._compiled = tuple(compile_pattern(p) for p in self.patterns)

    def __repr__(self) -> str:
        return f"PathMatcher({self.patterns!r})"

    def matches(self, path: str) -> bool:
        return any(regex.match(path) for regex in self._compiled)


DOCS_PATHS = ("/docs", "/docs/**", "/redoc", "/openapi.json")

# Prefixes open at the gateway. Operations below them that need an identity
# declare a role guard of their own.
PUBLIC_PATHS = (
    "/auth/**",
    "/users/**",
    "/classrooms/**",
    "/games/**",
    "/activities/**",
    "/lessons/**",
    "/reports/**",
    "/",
    "/error",
    "/health",
    *DOCS_PATHS,
)

# Paths where bearer tokens are never inspected. Narrower than PUBLIC_PATHS
# so role guards under public prefixes still see the caller's principal.
AUTHENTICATION_SKIP_PATHS = (
    "/auth/**",
    "/",
    "/error",
    "/health",
    *DOCS_PATHS,
)


class AuthorizationPolicy:
    """Decide whether a path is public or needs an authenticated principal."""

    def __init__(
        self,
        public_paths: Iterable[str] = PUBLIC_PATHS,
        skip_authentication_paths: Iterable[str] = AUTHENTICATION_SKIP_PATHS,
    ):
        self._public = PathMatcher(public_paths)
        self._skip = PathMatcher(skip_authentication_paths)

    def access_for(self, path: str) -> Access:
        if self._public.matches(path):
            return Access.PUBLIC
        return Access.AUTHENTICATED

    def is_public(self, path: str) -> bool:
        return self.access_for(path) is Access.PUBLIC

    def skips_authentication(self, path: str) -> bool:
        return self._skip.matches(path)

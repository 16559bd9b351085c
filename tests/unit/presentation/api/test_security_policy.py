"""Tests for the path access policy."""

import pytest

from mathquest.presentation.api.security import AuthorizationPolicy
from mathquest.presentation.api.security.policy import Access, compile_pattern


class TestCompilePattern:
    @pytest.mark.parametrize(
        ("pattern", "path", "matches"),
        [
            ("/auth/**", "/auth", True),
            ("/auth/**", "/auth/signin", True),
            ("/auth/**", "/auth/a/b", True),
            ("/auth/**", "/authx", False),
            ("/", "/", True),
            ("/", "/admin", False),
            ("/users/*", "/users/5", True),
            ("/users/*", "/users/5/x", False),
            ("/health", "/health/x", False),
        ],
    )
    def test_matching(self, pattern, path, matches):
        assert bool(compile_pattern(pattern).match(path)) is matches


class TestAuthorizationPolicy:
    def setup_method(self):
        self.policy = AuthorizationPolicy()

    @pytest.mark.parametrize(
        "path",
        ["/auth/signin", "/users/profile", "/games/1", "/health", "/", "/docs"],
    )
    def test_public_paths(self, path):
        assert self.policy.access_for(path) is Access.PUBLIC

    @pytest.mark.parametrize("path", ["/admin/users", "/admin", "/unknown"])
    def test_everything_else_needs_authentication(self, path):
        assert self.policy.access_for(path) is Access.AUTHENTICATED
        assert not self.policy.is_public(path)

    def test_skip_list_is_narrower_than_public_list(self):
        """Tokens are still read under public /users/** for role guards."""
        assert self.policy.is_public("/users/profile")
        assert not self.policy.skips_authentication("/users/profile")
        assert self.policy.skips_authentication("/auth/signup")

    def test_custom_paths(self):
        policy = AuthorizationPolicy(public_paths=["/open/**"], skip_authentication_paths=[])
        assert policy.is_public("/open/x")
        assert not policy.is_public("/auth/signin")

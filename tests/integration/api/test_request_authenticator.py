"""Tests for RequestAuthenticator against a real credential store."""

import logging
from datetime import timedelta
from unittest.mock import Mock

import pytest

from mathquest.domain.user import RoleName
from mathquest.infrastructure.persistence.sqlalchemy.repositories import (
    UserRepositorySQLAlchemy,
)
from mathquest.presentation.api.security import (
    AuthorizationPolicy,
    RequestAuthenticator,
    extract_bearer_token,
)
from mathquest_auth import JWTService
from tests.shared.fixtures.factories import TestUserFactory

SECRET = "authenticator-test-secret"


class TestExtractBearerToken:
    @pytest.mark.parametrize(
        ("header", "expected"),
        [
            (None, None),
            ("", None),
            ("Basic abc", None),
            ("Bearer ", None),
            ("bearer abc", None),
            ("Bearer abc.def.ghi", "abc.def.ghi"),
        ],
    )
    def test_extract(self, header, expected):
        assert extract_bearer_token(header) == expected


class TestRequestAuthenticator:
    @pytest.fixture
    def jwt_service(self):
        return JWTService(secret_key=SECRET)

    @pytest.fixture
    def authenticator(self, jwt_service, sqlite_session_maker):
        return RequestAuthenticator(
            jwt_service=jwt_service,
            session_maker=sqlite_session_maker,
            policy=AuthorizationPolicy(),
        )

    @pytest.fixture
    async def stored_user(self, sqlite_session_maker):
        async with sqlite_session_maker() as session:
            user = await UserRepositorySQLAlchemy(session).save(
                TestUserFactory.bob(with_id=False),
            )
            await session.commit()
        return user

    def bearer(self, jwt_service, username, **kwargs):
        return f"Bearer {jwt_service.create_access_token(username, **kwargs)}"

    async def test_valid_token_resolves_principal(
        self, authenticator, jwt_service, stored_user
    ):
        principal = await authenticator.authenticate(
            "/admin/users", self.bearer(jwt_service, "bob")
        )

        assert principal is not None
        assert principal.id == stored_user.id
        assert principal.roles == frozenset({RoleName.TEACHER})

    async def test_skipped_path_never_reads_token(self):
        jwt_service = Mock(spec=JWTService)
        authenticator = RequestAuthenticator(
            jwt_service=jwt_service,
            session_maker=Mock(),
            policy=AuthorizationPolicy(),
        )

        assert await authenticator.authenticate("/auth/signin", "Bearer x") is None
        jwt_service.verify_token.assert_not_called()

    async def test_missing_header(self, authenticator):
        assert await authenticator.authenticate("/admin/users", None) is None

    async def test_expired_token(self, authenticator, jwt_service, stored_user):
        header = self.bearer(jwt_service, "bob", expires_delta=timedelta(seconds=-5))
        assert await authenticator.authenticate("/admin/users", header) is None

    async def test_token_signed_with_other_key(self, authenticator, stored_user, caplog):
        header = self.bearer(JWTService(secret_key="other-secret"), "bob")

        with caplog.at_level(logging.WARNING):
            assert await authenticator.authenticate("/admin/users", header) is None

        assert "Invalid token" in caplog.text

    async def test_unknown_subject(self, authenticator, jwt_service):
        header = self.bearer(jwt_service, "ghost")
        assert await authenticator.authenticate("/admin/users", header) is None

    async def test_soft_deleted_after_issuance(
        self, authenticator, jwt_service, stored_user, sqlite_session_maker
    ):
        header = self.bearer(jwt_service, "bob")

        async with sqlite_session_maker() as session:
            repo = UserRepositorySQLAlchemy(session)
            user = await repo.find_by_id(stored_user.id)
            user.soft_delete()
            await repo.save(user)
            await session.commit()

        assert await authenticator.authenticate("/admin/users", header) is None

    async def test_unexpected_error_is_logged_not_raised(self, jwt_service, caplog):
        session_maker = Mock(side_effect=RuntimeError("database unavailable"))
        authenticator = RequestAuthenticator(
            jwt_service=jwt_service,
            session_maker=session_maker,
            policy=AuthorizationPolicy(),
        )

        with caplog.at_level(logging.ERROR):
            principal = await authenticator.authenticate(
                "/admin/users", self.bearer(jwt_service, "bob")
            )

        assert principal is None
        assert "Cannot set user authentication" in caplog.text

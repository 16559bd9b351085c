"""Unit tests for UserAccountService."""

from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from mathquest.application.services import UserAccountService
from mathquest.application.services.user_account_service import (
    CURRENT_PASSWORD_INCORRECT,
    PASSWORD_MISMATCH,
    PASSWORD_UNCHANGED,
)
from mathquest.domain.shared import Err, ErrorKind, Ok
from mathquest.domain.user import RoleName
from mathquest_auth import PasswordHashingService
from tests.shared.fixtures.factories import (
    DEFAULT_PASSWORD,
    TEST_BCRYPT_ROUNDS,
    TestUserFactory,
)

NEW_PASSWORD = "brand-new-pass"


class TestUserAccountService:
    def setup_method(self):
        self.user_repo = AsyncMock()
        self.user_repo.find_by_id.return_value = None
        self.user_repo.exists_by_username.return_value = False
        self.user_repo.exists_by_email.return_value = False
        self.user_repo.save.side_effect = lambda user: user

        self.password_service = PasswordHashingService(rounds=TEST_BCRYPT_ROUNDS)
        self.service = UserAccountService(
            user_repository=self.user_repo,
            password_service=self.password_service,
            temporary_password_lifetime=timedelta(days=3),
        )

    def given(self, user):
        self.user_repo.find_by_id.return_value = user
        return TestUserFactory.principal(user)


class TestChangePassword(TestUserAccountService):
    """The rules are checked in a fixed order."""

    async def test_success_clears_temporary_password(self):
        user = TestUserFactory.alice(
            temporary_password_expiry=TestUserFactory.expired_temporary(),
        )
        principal = self.given(user)

        result = await self.service.change_password(
            principal, DEFAULT_PASSWORD, NEW_PASSWORD, NEW_PASSWORD
        )

        assert isinstance(result, Ok)
        assert self.password_service.verify(NEW_PASSWORD, user.password_hash)
        assert user.temporary_password is False
        self.user_repo.save.assert_awaited_once_with(user)

    async def test_same_password_rejected_first(self):
        principal = self.given(TestUserFactory.alice())

        # Confirmation also mismatches, but the unchanged check comes first
        result = await self.service.change_password(
            principal, DEFAULT_PASSWORD, DEFAULT_PASSWORD, "something-else"
        )

        assert isinstance(result, Err)
        assert result.error.message == PASSWORD_UNCHANGED

    async def test_wrong_current_password(self):
        principal = self.given(TestUserFactory.alice())

        result = await self.service.change_password(
            principal, "not-my-password", NEW_PASSWORD, "mismatch-too"
        )

        assert isinstance(result, Err)
        assert result.error.kind is ErrorKind.BAD_INPUT
        assert result.error.message == CURRENT_PASSWORD_INCORRECT

    async def test_admin_skips_current_password_check(self):
        admin = TestUserFactory.admin()
        principal = self.given(admin)

        result = await self.service.change_password(
            principal, "forgotten", NEW_PASSWORD, NEW_PASSWORD
        )

        assert isinstance(result, Ok)
        assert self.password_service.verify(NEW_PASSWORD, admin.password_hash)

    async def test_confirmation_mismatch(self):
        principal = self.given(TestUserFactory.alice())

        result = await self.service.change_password(
            principal, DEFAULT_PASSWORD, NEW_PASSWORD, "another-pass"
        )

        assert isinstance(result, Err)
        assert result.error.message == PASSWORD_MISMATCH
        self.user_repo.save.assert_not_called()


class TestProfile(TestUserAccountService):
    async def test_get_profile(self):
        principal = self.given(TestUserFactory.alice())

        result = await self.service.get_profile(principal)

        assert isinstance(result, Ok)
        assert result.value.username == "alice"

    async def test_deleted_user_is_not_found(self):
        principal = self.given(TestUserFactory.alice(deleted=True))

        result = await self.service.get_profile(principal)

        assert isinstance(result, Err)
        assert result.error.kind is ErrorKind.NOT_FOUND

    async def test_update_profile_keeps_omitted_fields(self):
        principal = self.given(TestUserFactory.alice())

        result = await self.service.update_profile(principal, first_name="Alicia")

        assert result.value.first_name == "Alicia"
        assert result.value.email == "alice@example.com"

    async def test_update_to_taken_username(self):
        principal = self.given(TestUserFactory.alice())
        self.user_repo.exists_by_username.return_value = True

        result = await self.service.update_profile(principal, username="bob")

        assert isinstance(result, Err)
        assert result.error.message == "Error: Username is already taken!"

    async def test_keeping_own_username_is_not_a_conflict(self):
        principal = self.given(TestUserFactory.alice())
        self.user_repo.exists_by_username.return_value = True

        result = await self.service.update_profile(principal, username="alice")

        assert isinstance(result, Ok)

    async def test_soft_delete(self):
        user = TestUserFactory.alice()
        self.given(user)

        result = await self.service.soft_delete(user.id)

        assert isinstance(result, Ok)
        assert user.deleted is True

    async def test_soft_delete_unknown_user(self):
        result = await self.service.soft_delete(999)

        assert isinstance(result, Err)
        assert result.error.message == "User not found with id: 999"


class TestAdminOperations(TestUserAccountService):
    async def test_list_users_by_role_id(self):
        self.user_repo.list_all.return_value = []

        result = await self.service.list_users(2)

        assert isinstance(result, Ok)
        self.user_repo.list_all.assert_awaited_once_with(RoleName.TEACHER)

    async def test_list_users_unknown_role_id(self):
        result = await self.service.list_users(9)

        assert isinstance(result, Err)
        assert result.error.kind is ErrorKind.BAD_INPUT

    async def test_create_by_admin(self):
        admin = TestUserFactory.principal(TestUserFactory.admin())

        result = await self.service.create_by_admin(
            admin,
            first_name="Tom",
            last_name="Teach",
            username="tom",
            email="tom@example.com",
            password="temporary1",
            role="teacher",
        )

        assert isinstance(result, Ok)
        user = result.value
        assert user.roles == frozenset({RoleName.TEACHER})
        assert user.created_by_admin is True
        assert user.created_by == "admin"
        assert user.temporary_password is True

    async def test_create_by_admin_unknown_role(self):
        admin = TestUserFactory.principal(TestUserFactory.admin())

        result = await self.service.create_by_admin(
            admin,
            first_name="Tom",
            last_name="Teach",
            username="tom",
            email="tom@example.com",
            password="temporary1",
            role="janitor",
        )

        assert isinstance(result, Err)
        assert result.error.message == "Unknown role: janitor"

    async def test_update_by_admin_sets_temporary_password_and_role(self):
        user = TestUserFactory.alice()
        self.given(user)

        result = await self.service.update_by_admin(
            user.id,
            password="reset-pass",
            role="ROLE_TEACHER",
        )

        assert isinstance(result, Ok)
        assert user.roles == frozenset({RoleName.TEACHER})
        assert user.temporary_password is True
        assert self.password_service.verify("reset-pass", user.password_hash)

    @pytest.mark.parametrize("password", ["123", "x" * 80])
    async def test_update_by_admin_weak_password(self, password):
        user = TestUserFactory.alice()
        self.given(user)

        result = await self.service.update_by_admin(user.id, password=password)

        assert isinstance(result, Err)
        assert result.error.kind is ErrorKind.BAD_INPUT

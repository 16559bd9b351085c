"""Tests for the RoleName value object."""

import pytest

from mathquest.domain.user import RoleName


class TestRoleIds:
    def test_ids_follow_declaration_order(self):
        assert [role.role_id for role in RoleName] == [1, 2, 3]
        assert RoleName.ADMIN.role_id == 3

    @pytest.mark.parametrize("role", list(RoleName))
    def test_from_id_round_trips(self, role):
        assert RoleName.from_id(role.role_id) is role

    @pytest.mark.parametrize("role_id", [0, 4, -1])
    def test_unknown_id_raises(self, role_id):
        with pytest.raises(ValueError, match="Unknown role id"):
            RoleName.from_id(role_id)


class TestParse:
    """Tests for parsing role names from requests."""

    @pytest.mark.parametrize(
        "value",
        ["ROLE_TEACHER", "teacher", "TEACHER", " Teacher "],
    )
    def test_accepts_short_and_full_names(self, value):
        assert RoleName.parse(value) is RoleName.TEACHER

    def test_unknown_role_raises(self):
        with pytest.raises(ValueError, match="Unknown role: principal"):
            RoleName.parse("principal")

    def test_short_name(self):
        assert RoleName.STUDENT.short_name == "student"


class TestFromSignup:
    """Signup never fails on the role; unknown values register students."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("admin", RoleName.ADMIN),
            ("Admin", RoleName.ADMIN),
            ("teacher", RoleName.TEACHER),
            ("student", RoleName.STUDENT),
            ("superuser", RoleName.STUDENT),
            ("", RoleName.STUDENT),
            (None, RoleName.STUDENT),
        ],
    )
    def test_mapping(self, value, expected):
        assert RoleName.from_signup(value) is expected

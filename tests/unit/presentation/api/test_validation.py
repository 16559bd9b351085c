"""Tests for explicit request validators."""

from mathquest.presentation.api.schemas import (
    ChangePasswordRequest,
    ForgotPasswordRequest,
    ResetPasswordRequest,
    SignInRequest,
    SignupRequest,
    UpdateProfileRequest,
)
from mathquest.presentation.api.validation import (
    FieldError,
    RequestValidationFailed,
    format_field_errors,
    validate_change_password,
    validate_forgot_password,
    validate_profile_update,
    validate_reset_password,
    validate_sign_in,
    validate_sign_up,
)


def _signup(**overrides) -> SignupRequest:
    values = {
        "first_name": "Alice",
        "last_name": "Doe",
        "username": "alice",
        "email": "alice@example.com",
        "password": "secret123",
    }
    values.update(overrides)
    return SignupRequest(**values)


class TestFormatting:
    def test_format_field_errors(self):
        errors = [FieldError("username", "must not be blank"), FieldError("a", "b")]
        assert (
            format_field_errors(errors)
            == "Validation failed: username: must not be blank; a: b; "
        )

    def test_exception_message(self):
        exc = RequestValidationFailed([FieldError("email", "bad")])
        assert str(exc) == "Validation failed: email: bad; "
        assert exc.errors == [FieldError("email", "bad")]


class TestSignIn:
    def test_valid(self):
        assert validate_sign_in(SignInRequest(username="a", password="b")) == []

    def test_missing_fields_are_all_reported(self):
        errors = validate_sign_in(SignInRequest())
        assert [e.field for e in errors] == ["username", "password"]


class TestSignUp:
    def test_valid(self):
        assert validate_sign_up(_signup()) == []

    def test_multiple_fields_are_aggregated(self):
        errors = validate_sign_up(
            _signup(first_name="", username="u" * 21, email="not-an-email", password="1")
        )

        assert FieldError("firstName", "must not be blank") in errors
        assert FieldError("username", "size must be between 0 and 20") in errors
        assert FieldError("email", "must be a well-formed email address") in errors
        assert FieldError("password", "size must be at least 6") in errors

    def test_password_over_72_bytes(self):
        errors = validate_sign_up(_signup(password="ä" * 40))
        assert errors == [FieldError("password", "must not exceed 72 bytes")]

    def test_role_is_not_validated(self):
        assert validate_sign_up(_signup(role="anything")) == []


class TestProfileUpdate:
    def test_empty_update_is_valid(self):
        assert validate_profile_update(UpdateProfileRequest()) == []

    def test_present_fields_must_not_be_blank(self):
        errors = validate_profile_update(UpdateProfileRequest(last_name=" "))
        assert errors == [FieldError("lastName", "must not be blank")]


class TestChangePassword:
    def test_all_blank(self):
        errors = validate_change_password(ChangePasswordRequest())
        assert {e.field for e in errors} == {
            "currentPassword",
            "newPassword",
            "confirmPassword",
        }

    def test_short_new_password(self):
        errors = validate_change_password(
            ChangePasswordRequest(
                current_password="secret123",
                new_password="abc",
                confirm_password="abc",
            )
        )
        assert errors == [FieldError("newPassword", "size must be at least 6")]


class TestForgotPassword:
    def test_blank_email(self):
        errors = validate_forgot_password(ForgotPasswordRequest(email=" "))
        assert errors == [FieldError("email", "must not be blank")]

    def test_malformed_email(self):
        errors = validate_forgot_password(ForgotPasswordRequest(email="alice@"))
        assert errors == [FieldError("email", "must be a well-formed email address")]

    def test_valid(self):
        body = ForgotPasswordRequest(email="alice@example.com")
        assert validate_forgot_password(body) == []


class TestResetPassword:
    def test_all_blank(self):
        errors = validate_reset_password(ResetPasswordRequest())
        assert {e.field for e in errors} == {
            "token",
            "newPassword",
            "confirmPassword",
        }

    def test_password_over_72_bytes(self):
        errors = validate_reset_password(
            ResetPasswordRequest(
                token="abc",
                new_password="ü" * 37,
                confirm_password="ü" * 37,
            )
        )
        assert errors == [FieldError("newPassword", "must not exceed 72 bytes")]

"""Explicit request validators.

Each validator takes a parsed request body and returns the list of field
errors it found; an empty list means the body is valid. ``validated()``
turns a schema plus its validator into a FastAPI dependency that runs
before the route handler and raises ``RequestValidationFailed`` with all
errors at once.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional

from email_validator import EmailNotValidError, validate_email
from fastapi import Depends

from mathquest.domain.user.aggregates import (
    EMAIL_MAX_LENGTH,
    NAME_MAX_LENGTH,
    USERNAME_MAX_LENGTH,
)
from mathquest_auth import PASSWORD_MAX_BYTES, PASSWORD_MIN_LENGTH

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str


Validator = Callable[[Any], list[FieldError]]


def format_field_errors(errors: Iterable[FieldError]) -> str:
    """Render errors as ``Validation failed: field: message; ...``."""
    return "Validation failed: " + "".join(
        f"{error.field}: {error.message}; " for error in errors
    )


class RequestValidationFailed(Exception):  # NOQA: N818
    """One or more request fields failed validation."""

    def __init__(self, errors: Iterable[FieldError]):
        self.errors = list(errors)
        super().__init__(format_field_errors(self.errors))


# -----------------------------------------------------------------------------
# Field rules
# -----------------------------------------------------------------------------


def not_blank(field: str, value: Optional[str]) -> list[FieldError]:
    if value is None or not value.strip():
        return [FieldError(field, "must not be blank")]
    return []


def max_length(field: str, value: Optional[str], limit: int) -> list[FieldError]:
    if value is not None and len(value) > limit:
        return [FieldError(field, f"size must be between 0 and {limit}")]
    return []


def well_formed_email(field: str, value: Optional[str]) -> list[FieldError]:
    if value is None or not value.strip():
        return []
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return [FieldError(field, "must be a well-formed email address")]
    return []


def password_size(field: str, value: Optional[str]) -> list[FieldError]:
    if value is None:
        return []
    if len(value) < PASSWORD_MIN_LENGTH:
        return [
            FieldError(field, f"size must be at least {PASSWORD_MIN_LENGTH}"),
        ]
    if len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
        return [
            FieldError(field, f"must not exceed {PASSWORD_MAX_BYTES} bytes"),
        ]
    return []


def _required_text(field: str, value: Optional[str], limit: int) -> list[FieldError]:
    return not_blank(field, value) + max_length(field, value, limit)


def _optional_text(field: str, value: Optional[str], limit: int) -> list[FieldError]:
    if value is None:
        return []
    return _required_text(field, value, limit)


# -----------------------------------------------------------------------------
# Request validators
# -----------------------------------------------------------------------------


def validate_sign_in(body: Any) -> list[FieldError]:
    return not_blank("username", body.username) + not_blank("password", body.password)


def validate_sign_up(body: Any) -> list[FieldError]:
    return (
        _required_text("firstName", body.first_name, NAME_MAX_LENGTH)
        + _required_text("lastName", body.last_name, NAME_MAX_LENGTH)
        + _required_text("username", body.username, USERNAME_MAX_LENGTH)
        + _required_text("email", body.email, EMAIL_MAX_LENGTH)
        + well_formed_email("email", body.email)
        + not_blank("password", body.password)
        + password_size("password", body.password)
    )


def validate_forgot_password(body: Any) -> list[FieldError]:
    return not_blank("email", body.email) + well_formed_email("email", body.email)


def validate_reset_password(body: Any) -> list[FieldError]:
    return (
        not_blank("token", body.token)
        + not_blank("newPassword", body.new_password)
        + password_size("newPassword", body.new_password)
        + not_blank("confirmPassword", body.confirm_password)
    )


def validate_profile_update(body: Any) -> list[FieldError]:
    return (
        _optional_text("firstName", body.first_name, NAME_MAX_LENGTH)
        + _optional_text("lastName", body.last_name, NAME_MAX_LENGTH)
        + _optional_text("username", body.username, USERNAME_MAX_LENGTH)
        + _optional_text("email", body.email, EMAIL_MAX_LENGTH)
        + well_formed_email("email", body.email)
        + password_size("password", body.password)
    )


def validate_change_password(body: Any) -> list[FieldError]:
    return (
        not_blank("currentPassword", body.current_password)
        + not_blank("newPassword", body.new_password)
        + password_size("newPassword", body.new_password)
        + not_blank("confirmPassword", body.confirm_password)
    )


def validate_admin_create(body: Any) -> list[FieldError]:
    return validate_sign_up(body) + not_blank("role", body.role)


def validate_admin_update(body: Any) -> list[FieldError]:
    return validate_profile_update(body) + _optional_text("role", body.role, 20)


# -----------------------------------------------------------------------------
# FastAPI integration
# -----------------------------------------------------------------------------


def validated(schema: type, validator: Validator) -> Any:
    """Build a dependency that parses ``schema`` and runs ``validator`` on it.

    Examples
    --------
    >>> SignUpBody = Annotated[SignupRequest, validated(SignupRequest, validate_sign_up)]
    """

    def dependency(body: schema) -> Any:  # type: ignore[valid-type]
        errors = validator(body)
        if errors:
            logger.debug("Rejected %s: %s", schema.__name__, errors)
            raise RequestValidationFailed(errors)
        return body

    return Depends(dependency)

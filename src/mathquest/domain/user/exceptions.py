"""User domain exceptions.

Custom exceptions for the user domain, used for lookups
and business rule violations.
"""

from mathquest.domain.shared.exceptions import (
    EntityNotFoundError,
    InvalidArgumentError,
)


class PrincipalNotFoundError(EntityNotFoundError):
    """No usable account exists for a login identifier.

    Raised for unknown identifiers as well as soft-deleted accounts and
    accounts whose temporary password has expired.
    """


class UserNotFoundError(EntityNotFoundError):
    """User not found."""

    def __init__(self, user_id: int) -> None:
        self.user_id = user_id
        super().__init__(f"User not found with id: {user_id}")


class UsernameTakenError(InvalidArgumentError):
    """Username already registered."""

    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__("Error: Username is already taken!")


class EmailTakenError(InvalidArgumentError):
    """Email already registered."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__("Error: Email is already in use!")


class RoleNotFoundError(EntityNotFoundError):
    """A role row is missing from the credential store."""

    def __init__(self, role: str) -> None:
        self.role = role
        super().__init__(f"Error: Role is not found: {role}")


class InvalidResetTokenError(InvalidArgumentError):
    """A password reset token is unknown, already used or expired."""

    def __init__(
        self,
        message: str = "Invalid or expired password reset token",
    ) -> None:
        super().__init__(message)


class InvalidVerificationTokenError(InvalidArgumentError):
    """An email verification token matches no account awaiting verification."""

    def __init__(self, message: str = "Invalid verification token.") -> None:
        super().__init__(message)

"""Shared domain exceptions and error kinds.

This module defines the base exception hierarchy for the domain layer.
Every failure belongs to one ErrorKind; the presentation layer is the only
place that turns a kind into an HTTP status and response envelope.
"""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Stable failure categories for API clients."""

    BAD_INPUT = "BAD_INPUT"
    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    UNEXPECTED = "UNEXPECTED"


class DomainException(Exception):  # NOQA: N818
    """Base exception for all domain-related errors.

    Attributes
    ----------
    message
        Human-readable error message (safe for end users)
    kind
        Failure category used for translation to a response
    details
        Optional additional context (logged but not exposed to users)
    """

    kind: ErrorKind = ErrorKind.UNEXPECTED

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"kind={self.kind.value!r}, "
            f"details={self.details!r})"
        )


class InvalidArgumentError(DomainException, ValueError):
    """Raised when an argument is malformed or not allowed."""

    kind = ErrorKind.BAD_INPUT


class InvalidStateError(DomainException):
    """Raised when an operation is not allowed in the current state."""

    kind = ErrorKind.BAD_INPUT


class EntityNotFoundError(DomainException):
    """Raised when a requested entity cannot be found."""

    kind = ErrorKind.NOT_FOUND


class AuthenticationRequiredError(DomainException):
    """Raised when an operation needs an authenticated principal."""

    kind = ErrorKind.UNAUTHORIZED

    def __init__(
        self,
        message: str = "Full authentication is required to access this resource",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)


class AccessDeniedError(DomainException):
    """Raised when the principal lacks the role an operation requires."""

    kind = ErrorKind.FORBIDDEN

    def __init__(
        self,
        message: str = "Access Denied",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)

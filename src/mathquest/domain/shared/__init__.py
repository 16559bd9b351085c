"""Shared domain building blocks: errors, results and time helpers."""

from mathquest.domain.shared.exceptions import (
    AccessDeniedError,
    AuthenticationRequiredError,
    DomainException,
    EntityNotFoundError,
    ErrorKind,
    InvalidArgumentError,
    InvalidStateError,
)
from mathquest.domain.shared.result import Err, Ok, Result, ServiceError
from mathquest.domain.shared.time import ensure_tz_aware, utc_now

__all__ = [
    "AccessDeniedError",
    "AuthenticationRequiredError",
    "DomainException",
    "EntityNotFoundError",
    "Err",
    "ErrorKind",
    "InvalidArgumentError",
    "InvalidStateError",
    "Ok",
    "Result",
    "ServiceError",
    "ensure_tz_aware",
    "utc_now",
]

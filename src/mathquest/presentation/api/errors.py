"""Translate failures into the uniform error envelope.

This is the only place that decides a response status and label for a
failure. Exception handlers, the security pipeline and routers that
receive an ``Err`` from an application service all come through here.

Error Response Format:
    {
        "timestamp": "2026-01-01T12:00:00+00:00",
        "status": 400,
        "error": "Bad Request",
        "message": "Human-readable error message",
        "path": "uri=/users/profile"
    }
"""

import logging
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, TypeVar

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from mathquest.domain.shared import (
    AccessDeniedError,
    AuthenticationRequiredError,
    DomainException,
    EntityNotFoundError,
    Err,
    ErrorKind,
    InvalidStateError,
    Result,
    ServiceError,
)
from mathquest.domain.shared.time import utc_now
from mathquest.presentation.api.schemas.error import ErrorResponse
from mathquest.presentation.api.validation import (
    FieldError,
    RequestValidationFailed,
    format_field_errors,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

BAD_REQUEST = "Bad Request"
VALIDATION_ERROR = "Validation Error"
TYPE_MISMATCH_ERROR = "Type Mismatch Error"

KIND_TO_STATUS: dict[ErrorKind, tuple[int, str]] = {
    ErrorKind.BAD_INPUT: (status.HTTP_400_BAD_REQUEST, BAD_REQUEST),
    ErrorKind.NOT_FOUND: (status.HTTP_404_NOT_FOUND, "Not Found"),
    ErrorKind.UNAUTHORIZED: (status.HTTP_401_UNAUTHORIZED, "Unauthorized"),
    ErrorKind.FORBIDDEN: (status.HTTP_403_FORBIDDEN, "Forbidden"),
    ErrorKind.UNEXPECTED: (
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal Server Error",
    ),
}

# Request locations whose values are bound from strings (not the JSON body)
PARAMETER_LOCATIONS = frozenset({"query", "path", "header", "cookie"})


@dataclass(frozen=True)
class ErrorDescriptor:
    status: int
    error: str
    message: str


class ServiceFailure(Exception):  # NOQA: N818
    """Carries an ``Err`` from a service out of a route handler."""

    def __init__(self, error: ServiceError):
        self.error = error
        super().__init__(error.message)


def unwrap(result: Result[T]) -> T:
    """Return the value of ``Ok`` or raise ``ServiceFailure`` for ``Err``."""
    if isinstance(result, Err):
        raise ServiceFailure(result.error)
    return result.value


def describe_kind(kind: ErrorKind, message: str) -> ErrorDescriptor:
    status_code, label = KIND_TO_STATUS[kind]
    return ErrorDescriptor(status=status_code, error=label, message=message)


def describe_service_error(error: ServiceError) -> ErrorDescriptor:
    return describe_kind(error.kind, error.message)


def describe_exception(exc: BaseException) -> ErrorDescriptor:  # NOQA: PLR0911
    """Map an exception to its response descriptor, most specific first."""
    if isinstance(exc, RequestValidationFailed):
        return ErrorDescriptor(
            status=status.HTTP_400_BAD_REQUEST,
            error=VALIDATION_ERROR,
            message=format_field_errors(exc.errors),
        )
    if isinstance(exc, RequestValidationError):
        return _describe_request_validation_error(exc)
    if isinstance(exc, ServiceFailure):
        return describe_service_error(exc.error)
    if isinstance(exc, EntityNotFoundError):
        return describe_kind(ErrorKind.NOT_FOUND, exc.message)
    if isinstance(exc, InvalidStateError):
        return describe_kind(ErrorKind.BAD_INPUT, exc.message)
    if isinstance(exc, ValueError):
        return describe_kind(ErrorKind.BAD_INPUT, str(exc))
    if isinstance(exc, AuthenticationRequiredError):
        return describe_kind(ErrorKind.UNAUTHORIZED, exc.message)
    if isinstance(exc, AccessDeniedError):
        return describe_kind(ErrorKind.FORBIDDEN, exc.message)
    if isinstance(exc, DomainException):
        return describe_kind(exc.kind, exc.message)
    if isinstance(exc, StarletteHTTPException):
        return ErrorDescriptor(
            status=exc.status_code,
            error=HTTPStatus(exc.status_code).phrase,
            message=str(exc.detail),
        )
    return describe_kind(ErrorKind.UNEXPECTED, str(exc))


def error_response(descriptor: ErrorDescriptor, request: Request) -> JSONResponse:
    """Build the envelope for a descriptor and the current request."""
    body = ErrorResponse(
        timestamp=utc_now(),
        status=descriptor.status,
        error=descriptor.error,
        message=descriptor.message,
        path=f"uri={request.url.path}",
    )
    headers = None
    if descriptor.status == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=descriptor.status,
        content=body.model_dump(mode="json"),
        headers=headers,
    )


def _describe_request_validation_error(exc: RequestValidationError) -> ErrorDescriptor:
    errors = list(exc.errors())
    body_errors = [e for e in errors if not _is_parameter_error(e)]
    mismatches = [
        e for e in errors if _is_parameter_error(e) and e.get("type") != "missing"
    ]

    if mismatches and not body_errors:
        return ErrorDescriptor(
            status=status.HTTP_400_BAD_REQUEST,
            error=TYPE_MISMATCH_ERROR,
            message=_type_mismatch_message(mismatches[0]),
        )

    field_errors = [FieldError(_field_name(e), e.get("msg", "is invalid")) for e in errors]
    return ErrorDescriptor(
        status=status.HTTP_400_BAD_REQUEST,
        error=VALIDATION_ERROR,
        message=format_field_errors(field_errors),
    )


def _is_parameter_error(error: dict[str, Any]) -> bool:
    loc = error.get("loc") or ()
    return bool(loc) and loc[0] in PARAMETER_LOCATIONS


def _field_name(error: dict[str, Any]) -> str:
    loc = [str(part) for part in error.get("loc") or ()]
    if len(loc) > 1:
        return ".".join(loc[1:])
    return loc[0] if loc else "request"


def _type_mismatch_message(error: dict[str, Any]) -> str:
    loc = error.get("loc") or ()
    name = str(loc[-1]) if loc else "unknown"
    value = error.get("input")
    actual_type = type(value).__name__ if value is not None else "null"
    actual_value = str(value) if value is not None else "null"
    return (
        f"Type mismatch for parameter '{name}'. "
        f"Expected: {_expected_type(error.get('type', ''))}, "
        f"Actual: {actual_type}, Value: {actual_value}"
    )


def _expected_type(error_type: str) -> str:
    """Derive the expected type from a pydantic error type like ``int_parsing``."""
    for suffix in ("_parsing", "_type"):
        if error_type.endswith(suffix):
            return error_type.removesuffix(suffix)
    return error_type or "unknown"

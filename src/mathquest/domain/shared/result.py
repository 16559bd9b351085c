"""Tagged result type returned by application services.

Services return ``Ok(value)`` on success or ``Err(ServiceError)`` on a
business failure instead of raising across layers. Unexpected failures
still propagate as exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from mathquest.domain.shared.exceptions import DomainException, ErrorKind

T = TypeVar("T")


@dataclass(frozen=True)
class ServiceError:
    """A typed business failure."""

    kind: ErrorKind
    message: str

    @classmethod
    def bad_input(cls, message: str) -> ServiceError:
        return cls(ErrorKind.BAD_INPUT, message)

    @classmethod
    def not_found(cls, message: str) -> ServiceError:
        return cls(ErrorKind.NOT_FOUND, message)

    @classmethod
    def unauthorized(cls, message: str) -> ServiceError:
        return cls(ErrorKind.UNAUTHORIZED, message)

    @classmethod
    def forbidden(cls, message: str) -> ServiceError:
        return cls(ErrorKind.FORBIDDEN, message)

    @classmethod
    def from_exception(cls, exc: DomainException) -> ServiceError:
        return cls(exc.kind, exc.message)


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    error: ServiceError


Result = Union[Ok[T], Err]

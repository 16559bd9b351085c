"""Centralized exception handlers for the FastAPI application.

Every handler hands the exception to ``errors.describe_exception`` so all
failures share one envelope and one status mapping.

Usage:
    from mathquest.presentation.api.exception_handlers import (
        setup_exception_handlers,
    )

    app = FastAPI()
    setup_exception_handlers(app)
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from mathquest.domain.shared import DomainException
from mathquest.presentation.api.errors import (
    ServiceFailure,
    describe_exception,
    error_response,
)
from mathquest.presentation.api.validation import RequestValidationFailed

logger = logging.getLogger(__name__)


def _translate(request: Request, exc: Exception) -> JSONResponse:
    descriptor = describe_exception(exc)

    if descriptor.status >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.exception(
            "Unhandled exception on %s %s: %s",
            request.method,
            request.url.path,
            exc,
        )
    else:
        logger.warning(
            "%s on %s %s: %s",
            descriptor.error,
            request.method,
            request.url.path,
            descriptor.message,
        )

    return error_response(descriptor, request)


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI application.

    Parameters
    ----------
    app
        The FastAPI application instance
    """

    @app.exception_handler(RequestValidationFailed)
    async def request_validation_failed_handler(
        request: Request,
        exc: RequestValidationFailed,
    ) -> JSONResponse:
        return _translate(request, exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        return _translate(request, exc)

    @app.exception_handler(ServiceFailure)
    async def service_failure_handler(
        request: Request,
        exc: ServiceFailure,
    ) -> JSONResponse:
        return _translate(request, exc)

    @app.exception_handler(DomainException)
    async def domain_exception_handler(
        request: Request,
        exc: DomainException,
    ) -> JSONResponse:
        return _translate(request, exc)

    @app.exception_handler(ValueError)
    async def value_error_handler(
        request: Request,
        exc: ValueError,
    ) -> JSONResponse:
        return _translate(request, exc)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request,
        exc: StarletteHTTPException,
    ) -> JSONResponse:
        return _translate(request, exc)

    @app.exception_handler(Exception)
    async def global_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Catch-all so clients always receive the error envelope."""
        return _translate(request, exc)

"""FastAPI application factory.

Creates and configures the FastAPI application with all routers,
middleware, and exception handlers.

Run with:
    uvicorn mathquest.presentation.api.app:create_app --factory
"""

import logging
import sys
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import AsyncGenerator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mathquest.infrastructure.persistence.sqlalchemy.database import (
    create_engine,
    create_session_maker,
)
from mathquest.infrastructure.persistence.sqlalchemy.init_db import init_database
from mathquest.presentation.api.dependencies import build_jwt_service
from mathquest.presentation.api.exception_handlers import setup_exception_handlers
from mathquest.presentation.api.routers import admin_router, auth_router, users_router
from mathquest.presentation.api.security import (
    AuthorizationPolicy,
    RequestAuthenticator,
    SecurityPipeline,
)
from mathquest_config.settings import Settings, get_settings

API_VERSION = "1.0.0"


@lru_cache(maxsize=1)
def _configure_logging(log_level_str: str = "INFO") -> None:
    """Configure application logging.

    Sets up logging for the mathquest packages with:
    - Console output with timestamps and module names
    - Configurable log level for mathquest modules (from settings)
    - WARNING level for noisy third-party libraries
    """
    log_level = getattr(logging, log_level_str.upper(), logging.INFO)

    log_format = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt=date_format,
        stream=sys.stdout,
        force=True,
    )

    for name in ("mathquest", "mathquest_auth", "mathquest_config"):
        logging.getLogger(name).setLevel(log_level)

    # Quiet down noisy third-party loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


logger = logging.getLogger(__name__)

OPENAPI_TAGS = [
    {
        "name": "Authentication",
        "description": """Sign-in, self-registration and credential recovery.

- Sign in with username or email to obtain a bearer token
- Tokens carry the username only; roles are re-read on every request
- Self-registered accounts verify their email before signing in
- Forgotten passwords are reset through an emailed single-use link
""",
    },
    {
        "name": "Users",
        "description": "Own profile, password change and account deletion.",
    },
    {
        "name": "Admin",
        "description": """User management for administrators.

Users created or given a new password here receive a temporary
password that expires after a configurable number of days.
""",
    },
    {
        "name": "Health",
        "description": "Service health monitoring endpoints.",
    },
    {
        "name": "Info",
        "description": "API information and discovery.",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    logger.info("Starting MathQuest API v%s...", API_VERSION)
    try:
        await init_database(app.state.engine, app.state.session_maker)
    except ConnectionRefusedError:
        logger.critical("Could not connect to the database.")
        raise SystemExit(1) from None
    yield

    logger.info("Shutting down MathQuest API...")
    await app.state.engine.dispose()
    logger.info("Database connections closed")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Parameters
    ----------
    settings
        Optional settings override for testing.

    Returns
    -------
    Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    _configure_logging(settings.log_level)

    app = FastAPI(
        title=f"{settings.app_name} API",
        description="Backend API for the MathQuest learning platform.",
        version=API_VERSION,
        docs_url="/docs" if settings.api_debug else None,
        redoc_url="/redoc" if settings.api_debug else None,
        openapi_url="/openapi.json" if settings.api_debug else None,
        lifespan=lifespan,
        openapi_tags=OPENAPI_TAGS,
    )

    engine = create_engine(settings.database_url)
    session_maker = create_session_maker(engine)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_maker = session_maker

    policy = AuthorizationPolicy()
    authenticator = RequestAuthenticator(
        jwt_service=build_jwt_service(settings),
        session_maker=session_maker,
        policy=policy,
    )

    # Added first so CORS wraps it and also decorates 401 responses
    app.add_middleware(
        SecurityPipeline,
        authenticator=authenticator,
        policy=policy,
        request_logging=settings.api_request_logging,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_origin_regex=settings.api_cors_origin_regex,
        allow_credentials=True,
        allow_methods=settings.cors_methods,
        allow_headers=settings.cors_headers,
        expose_headers=settings.cors_exposed_headers,
        max_age=settings.api_cors_max_age,
    )

    setup_exception_handlers(app)

    app.include_router(auth_router, prefix="/auth", tags=["Authentication"])
    app.include_router(users_router, prefix="/users", tags=["Users"])
    app.include_router(admin_router)

    @app.get("/health", tags=["Health"])
    async def health_check() -> dict:
        """Health check endpoint."""
        return {"status": "healthy", "version": API_VERSION}

    @app.get("/", tags=["Info"])
    async def root() -> dict:
        """API root endpoint with version information."""
        return {
            "name": f"{settings.app_name} API",
            "version": API_VERSION,
            "docs": "/docs" if settings.api_debug else None,
            "endpoints": {
                "health": "/health",
                "auth": "/auth",
                "users": "/users",
                "admin": "/admin",
            },
        }

    return app

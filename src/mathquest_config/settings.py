"""Application settings loaded from environment variables.

Configuration file discovery (in priority order):
1. OS environment variables (always highest priority)
2. MATHQUEST_ENV_FILE environment variable (path to .env file)
3. config/.env.dev - local development
4. config/.env - production/Docker

Uses pydantic-settings for automatic type coercion and validation.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import SecretStr, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000"
DEFAULT_CORS_METHODS = "GET,POST,PUT,PATCH,DELETE,OPTIONS"
DEFAULT_CORS_HEADERS = "Authorization,Content-Type,Accept,X-Requested-With,Origin"
DEFAULT_CORS_EXPOSED_HEADERS = "Content-Disposition,Content-Type"


def _find_project_root() -> Path:
    """Find the project root directory."""
    current = Path(__file__).resolve().parent

    for parent in [current, *current.parents]:
        if (parent / "config").is_dir():
            return parent
        if (parent / ".git").is_dir():
            return parent
        if parent == Path("/app"):
            return parent

    return Path(__file__).resolve().parents[2]


def get_config_dir() -> Path:
    """Get the config directory path."""
    return _find_project_root() / "config"


def _resolve_env_file_path() -> Path | None:
    """Resolve the .env file path.

    Priority:
    1. MATHQUEST_ENV_FILE env var (full path)
    2. config/.env.dev (local development)
    3. config/.env (production)
    """
    env_file_path = os.environ.get("MATHQUEST_ENV_FILE")
    if env_file_path:
        path = Path(env_file_path)
        if not path.is_absolute():
            path = _find_project_root() / path
        if path.exists():
            return path

    config_dir = get_config_dir()

    dev_env = config_dir / ".env.dev"
    if dev_env.exists():
        return dev_env

    prod_env = config_dir / ".env"
    if prod_env.exists():
        return prod_env

    return None


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """Application configuration loaded from environment variables.

    Values are loaded from:
    1. OS environment variables (highest priority)
    2. .env file (config/.env.dev or config/.env)
    3. Default values
    """

    model_config = SettingsConfigDict(
        env_file=_resolve_env_file_path(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Security (MUST be set - app fails without these)
    jwt_secret_key: SecretStr  # Secret for signing JWT tokens
    postgres_password: SecretStr  # Database password

    # Application
    app_name: str = "MathQuest"
    debug: bool = False

    # Database (POSTGRES_ prefix); DATABASE_URL_OVERRIDE wins when set
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "postgres"
    postgres_db: str = "mathquest"
    database_url_override: str | None = None

    # API (API_ prefix)
    api_host: str = "0.0.0.0"
    api_port: int = 8080
    api_debug: bool = False
    api_request_logging: bool = True

    # CORS (comma-separated lists)
    api_cors_origins: str = DEFAULT_CORS_ORIGINS
    api_cors_origin_regex: str | None = r"https://.*\.onrender\.com"
    api_cors_methods: str = DEFAULT_CORS_METHODS
    api_cors_headers: str = DEFAULT_CORS_HEADERS
    api_cors_exposed_headers: str = DEFAULT_CORS_EXPOSED_HEADERS
    api_cors_max_age: int = 3600

    @field_validator(
        "api_cors_origins",
        "api_cors_methods",
        "api_cors_headers",
        "api_cors_exposed_headers",
        mode="before",
    )
    @classmethod
    def _validate_csv(cls, v: Any) -> str:
        """Ensure list-valued settings are stored as comma-separated strings."""
        if isinstance(v, list):
            return ",".join(v)
        return str(v) if v else ""

    # JWT
    jwt_access_token_expire_hours: int = 24

    # Passwords
    bcrypt_rounds: int = 10
    temporary_password_expire_days: int = 7

    # Account emails: verification on self-registration and password reset
    auth_email_verification_required: bool = True
    password_reset_token_expire_hours: int = 1
    password_reset_max_per_day: int = 3
    frontend_base_url: str = "http://localhost:3000"

    # SMTP (emails are only logged while disabled)
    smtp_enabled: bool = False
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: SecretStr | None = None
    smtp_from_email: str = "no-reply@mathquest.local"
    smtp_from_name: str = "MathQuest"
    smtp_use_tls: bool = True
    smtp_starttls: bool = True

    # Logging (LOG_ prefix)
    log_level: str = "INFO"

    # Computed properties
    @computed_field  # type: ignore[prop-decorator]
    @property
    def database_url(self) -> str:
        """Construct the database URL from components."""
        if self.database_url_override:
            return self.database_url_override
        return (
            f"postgresql+asyncpg://{self.postgres_user}:"
            f"{self.postgres_password.get_secret_value()}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cors_origins(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return _split_csv(self.api_cors_origins)

    @property
    def cors_methods(self) -> list[str]:
        return _split_csv(self.api_cors_methods)

    @property
    def cors_headers(self) -> list[str]:
        return _split_csv(self.api_cors_headers)

    @property
    def cors_exposed_headers(self) -> list[str]:
        return _split_csv(self.api_cors_exposed_headers)


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings.

    Required fields (jwt_secret_key, postgres_password) must be provided
    via environment variables or .env file.
    """
    return Settings()  # type: ignore[call-arg]  # pydantic-settings loads from env


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for tests)."""
    get_settings.cache_clear()

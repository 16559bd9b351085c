"""Pytest fixtures for API tests.

Every test gets a fresh application on its own in-memory SQLite store.
The client is entered as a context manager so the lifespan runs and
creates tables and role rows.
"""

from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient
from pydantic import SecretStr

from mathquest.infrastructure.email import EmailService
from mathquest.presentation.api.app import create_app
from mathquest.presentation.api.dependencies import get_email_service
from mathquest_config.settings import Settings
from tests.shared.fixtures.factories import DEFAULT_PASSWORD, TEST_BCRYPT_ROUNDS


@pytest.fixture
def api_settings() -> Settings:
    """Test API settings on an in-memory database."""
    return Settings(
        # Required security settings
        jwt_secret_key=SecretStr("test-jwt-secret-for-testing-only"),
        postgres_password=SecretStr("test-password"),
        database_url_override="sqlite+aiosqlite:///:memory:",
        # API settings
        api_host="127.0.0.1",
        api_port=8080,
        api_debug=True,
        api_cors_origins="http://localhost:3000",
        bcrypt_rounds=TEST_BCRYPT_ROUNDS,
        # Verification has its own fixture
        auth_email_verification_required=False,
        frontend_base_url="http://frontend.test",
    )


@pytest.fixture
def outbox() -> Mock:
    """Stands in for SMTP; assertions read the links it was handed."""
    return Mock(spec=EmailService)


@pytest.fixture
def app(api_settings, outbox):
    app = create_app(settings=api_settings)
    app.dependency_overrides[get_email_service] = lambda: outbox
    return app


@pytest.fixture
def test_client(app):
    with TestClient(app) as client:
        yield client


def register(
    client: TestClient,
    username: str,
    role: str | None = None,
    password: str = DEFAULT_PASSWORD,
) -> None:
    """Sign up ``username`` and assert it worked."""
    body = {
        "firstName": username.capitalize(),
        "lastName": "Tester",
        "username": username,
        "email": f"{username}@example.com",
        "password": password,
    }
    if role is not None:
        body["role"] = role
    response = client.post("/auth/signup", json=body)
    assert response.status_code == 200, response.text


def sign_in(
    client: TestClient,
    username: str,
    password: str = DEFAULT_PASSWORD,
) -> dict:
    """Sign in and return the JwtResponse body."""
    response = client.post(
        "/auth/signin",
        json={"username": username, "password": password},
    )
    assert response.status_code == 200, response.text
    return response.json()


def auth_headers(client: TestClient, username: str, **kwargs) -> dict:
    token = sign_in(client, username, **kwargs)["token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(test_client) -> dict:
    register(test_client, "admin", role="admin")
    return auth_headers(test_client, "admin")


@pytest.fixture
def student_headers(test_client) -> dict:
    register(test_client, "alice")
    return auth_headers(test_client, "alice")


def assert_error_envelope(response, status: int, error: str, path: str) -> dict:
    """Check the uniform error body and return it."""
    assert response.status_code == status, response.text
    body = response.json()
    assert set(body) == {"timestamp", "status", "error", "message", "path"}
    assert body["status"] == status
    assert body["error"] == error
    assert body["path"] == f"uri={path}"
    return body


def token_from_link(link: str) -> str:
    """The raw token at the end of an emailed link."""
    return link.split("token=", 1)[1]

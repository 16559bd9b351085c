"""Tests for the request security pipeline and error envelope."""

import logging
from datetime import datetime

from fastapi.testclient import TestClient
from pydantic import TypeAdapter

from tests.integration.api.conftest import (
    assert_error_envelope,
    sign_in,
)


class TestPublicPaths:
    def test_health_without_token(self, test_client):
        response = test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_root(self, test_client):
        response = test_client.get("/")

        assert response.status_code == 200
        assert response.json()["endpoints"]["admin"] == "/admin"

    def test_health_with_garbage_token(self, test_client):
        response = test_client.get(
            "/health", headers={"Authorization": "Bearer garbage"}
        )
        assert response.status_code == 200


class TestAuthenticationRequired:
    def test_admin_without_token(self, test_client):
        response = test_client.get("/admin/users")

        body = assert_error_envelope(response, 401, "Unauthorized", "/admin/users")
        assert (
            body["message"]
            == "Full authentication is required to access this resource"
        )
        assert response.headers["WWW-Authenticate"] == "Bearer"
        assert TypeAdapter(datetime).validate_python(body["timestamp"]).tzinfo

    def test_admin_with_invalid_token(self, test_client):
        response = test_client.get(
            "/admin/users", headers={"Authorization": "Bearer a.b.c"}
        )

        assert_error_envelope(response, 401, "Unauthorized", "/admin/users")

    def test_unknown_protected_path_without_token(self, test_client):
        response = test_client.get("/nowhere")

        assert_error_envelope(response, 401, "Unauthorized", "/nowhere")

    def test_unknown_path_with_token_is_not_found(self, test_client, student_headers):
        response = test_client.get("/nowhere", headers=student_headers)

        assert_error_envelope(response, 404, "Not Found", "/nowhere")

    def test_role_guard_under_public_prefix(self, test_client):
        """/users/** is open at the gateway; the route still needs a user."""
        response = test_client.get("/users/profile")

        assert_error_envelope(response, 401, "Unauthorized", "/users/profile")


class TestAuthorization:
    def test_student_on_admin_route(self, test_client, student_headers):
        response = test_client.get("/admin/users", headers=student_headers)

        body = assert_error_envelope(response, 403, "Forbidden", "/admin/users")
        assert body["message"] == "Access Denied"

    def test_role_change_applies_to_existing_token(
        self, test_client, admin_headers, student_headers
    ):
        alice_id = sign_in(test_client, "alice")["id"]
        assert (
            test_client.get("/admin/users", headers=student_headers).status_code
            == 403
        )

        response = test_client.put(
            f"/admin/users/{alice_id}",
            json={"role": "admin"},
            headers=admin_headers,
        )
        assert response.status_code == 200, response.text

        # Same token as before the change
        response = test_client.get("/admin/users", headers=student_headers)
        assert response.status_code == 200

    def test_soft_deleted_user_token_is_rejected(
        self, test_client, admin_headers, student_headers
    ):
        alice_id = sign_in(test_client, "alice")["id"]
        response = test_client.delete(
            f"/admin/users/{alice_id}", headers=admin_headers
        )
        assert response.status_code == 200

        response = test_client.get("/users/profile", headers=student_headers)
        assert_error_envelope(response, 401, "Unauthorized", "/users/profile")

        response = test_client.get("/admin/users", headers=student_headers)
        assert_error_envelope(response, 401, "Unauthorized", "/admin/users")


class TestCors:
    def test_preflight_is_answered_without_token(self, test_client):
        response = test_client.options(
            "/admin/users",
            headers={
                "Origin": "http://localhost:3000",
                "Access-Control-Request-Method": "GET",
                "Access-Control-Request-Headers": "Authorization",
            },
        )

        assert response.status_code == 200
        assert (
            response.headers["access-control-allow-origin"]
            == "http://localhost:3000"
        )

    def test_error_responses_carry_cors_headers(self, test_client):
        response = test_client.get(
            "/admin/users", headers={"Origin": "http://localhost:3000"}
        )

        assert response.status_code == 401
        assert (
            response.headers["access-control-allow-origin"]
            == "http://localhost:3000"
        )


class TestUnexpectedErrors:
    def test_unhandled_exception_is_500_envelope(self, app):
        @app.get("/auth/explode")
        async def explode():
            raise RuntimeError("boom")

        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.get("/auth/explode")

        body = assert_error_envelope(
            response, 500, "Internal Server Error", "/auth/explode"
        )
        assert body["message"] == "boom"

    def test_value_error_from_route_is_400(self, app):
        @app.get("/auth/reject")
        async def reject():
            raise ValueError("not acceptable")

        with TestClient(app) as client:
            response = client.get("/auth/reject")

        body = assert_error_envelope(response, 400, "Bad Request", "/auth/reject")
        assert body["message"] == "not acceptable"


class TestRequestLog:
    def test_credential_headers_are_not_logged(self, test_client, caplog):
        caplog.set_level(
            logging.INFO,
            logger="mathquest.presentation.api.security.pipeline",
        )

        test_client.get(
            "/health",
            headers={
                "Authorization": "Bearer secret-bearer",
                "Proxy-Authorization": "Basic secret-proxy",
                "Cookie": "session=secret-cookie",
                "X-Request-Id": "req-1",
            },
        )

        assert "GET /health" in caplog.text
        assert "req-1" in caplog.text
        assert "secret-bearer" not in caplog.text
        assert "secret-proxy" not in caplog.text
        assert "secret-cookie" not in caplog.text

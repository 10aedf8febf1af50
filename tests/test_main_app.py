"""
Tests for clientdesk/main.py - app factory, error rendering, correlation IDs.
Runs requests through the real FastAPI stack with the database dependency stubbed.
"""
import uuid
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from clientdesk.database import get_db
from clientdesk.main import create_app
from clientdesk.utils.auth import create_access_token
from conftest import JWT_SECRET, make_settings


@pytest.fixture
def stub_session():
    return AsyncMock()


@pytest.fixture
def app(stub_session):
    async def _stub_db():
        yield stub_session

    application = create_app()
    application.dependency_overrides[get_db] = _stub_db
    return application


@pytest.fixture
def client(app):
    return TestClient(app, raise_server_exceptions=False)


def _token(role: str) -> str:
    return create_access_token(uuid.uuid4(), role, JWT_SECRET)


class TestAppFactory:
    def test_routes_registered(self, app):
        paths = {route.path for route in app.routes}
        assert {
            "/api/v1/onboarding/submit",
            "/api/v1/webhooks/automation/callback",
            "/api/v1/admin/clients",
            "/api/v1/client/dashboard",
            "/api/v1/auth/login",
            "/health",
            "/health/ready",
        } <= paths

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestCorrelationId:
    def test_generated_when_absent(self, client):
        response = client.get("/health")
        assert len(response.headers["X-Correlation-ID"]) == 32

    def test_echoed_when_supplied(self, client):
        response = client.get("/health", headers={"X-Correlation-ID": "req-abc-123"})
        assert response.headers["X-Correlation-ID"] == "req-abc-123"


class TestErrorRendering:
    def test_missing_session_is_401(self, client):
        response = client.get("/api/v1/admin/clients")
        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}

    def test_wrong_role_is_403(self, client):
        with patch("clientdesk.api.auth.get_settings", return_value=make_settings()):
            response = client.get(
                "/api/v1/admin/clients",
                headers={"Authorization": f"Bearer {_token('client')}"},
            )
        assert response.status_code == 403
        assert response.json() == {"error": "Forbidden - Admin access required"}

    def test_admin_on_client_dashboard_is_403(self, client):
        with patch("clientdesk.api.auth.get_settings", return_value=make_settings()):
            response = client.get(
                "/api/v1/client/dashboard",
                headers={"Authorization": f"Bearer {_token('admin')}"},
            )
        assert response.status_code == 403

    def test_invalid_onboarding_body_is_400(self, client):
        response = client.post("/api/v1/onboarding/submit", json={"email": "a@b.co"})
        assert response.status_code == 400
        assert "Missing required field" in response.json()["error"]

    def test_callback_wrong_secret_is_401(self, client):
        with patch(
            "clientdesk.api.webhooks.get_settings",
            return_value=make_settings(automation_callback_secret="s3cret"),
        ):
            response = client.post(
                "/api/v1/webhooks/automation/callback",
                json={"uniqueClientId": "CL-123ABC", "secret": "nope", "links": []},
            )
        assert response.status_code == 401
        assert response.json() == {"error": "Invalid secret key"}

    def test_callback_malformed_json_is_400(self, client):
        response = client.post(
            "/api/v1/webhooks/automation/callback",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert "error" in response.json()

    def test_unknown_route_is_json_404(self, client):
        response = client.get("/api/v1/nowhere")
        assert response.status_code == 404
        assert "error" in response.json()

    def test_unhandled_exception_is_500(self, app, client):
        @app.get("/boom")
        async def boom():
            raise RuntimeError("kaboom")

        response = client.get("/boom")
        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}

    def test_oversized_answer_is_400_and_nothing_written(self, client, stub_session, sample_submission):
        sample_submission["industry"] = "x" * 101

        response = client.post("/api/v1/onboarding/submit", json=sample_submission)

        assert response.status_code == 400
        assert "industry" in response.json()["error"]
        stub_session.add_all.assert_not_called()
        stub_session.commit.assert_not_awaited()

    def test_admin_list_failure_has_route_message(self, client):
        with (
            patch("clientdesk.api.auth.get_settings", return_value=make_settings()),
            patch(
                "clientdesk.api.admin.list_clients_with_counts",
                AsyncMock(side_effect=RuntimeError("connection reset")),
            ),
        ):
            response = client.get(
                "/api/v1/admin/clients",
                headers={"Authorization": f"Bearer {_token('admin')}"},
            )
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch clients"}

    def test_dashboard_failure_has_route_message(self, client):
        with (
            patch("clientdesk.api.auth.get_settings", return_value=make_settings()),
            patch(
                "clientdesk.api.client_dashboard.get_client_for_user",
                AsyncMock(side_effect=RuntimeError("connection reset")),
            ),
        ):
            response = client.get(
                "/api/v1/client/dashboard",
                headers={"Authorization": f"Bearer {_token('client')}"},
            )
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch dashboard data"}

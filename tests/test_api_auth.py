"""
Tests for API authentication.

Tests X-API-Key header authentication when API_AUTH_ENABLED=true.
"""

import importlib
import os
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient


# Test API key for testing
TEST_API_KEY = "test-secret-key-12345"
USER = {"X-User-Id": "user-1"}


@pytest.fixture
def make_client(persistence):
    """Build a client on an app reloaded under the current environment."""
    apps = []

    def _make():
        import src.api.dependencies.auth as auth_module
        importlib.reload(auth_module)

        import src.api.main as main_module
        importlib.reload(main_module)

        from src.api._storage_state import get_persistence

        main_module.app.dependency_overrides[get_persistence] = lambda: persistence
        apps.append(main_module.app)
        return TestClient(main_module.app)

    yield _make

    for app in apps:
        app.dependency_overrides.clear()


class TestAuthDisabled:
    """Tests when authentication is disabled (default)."""

    def test_health_no_auth_required(self, make_client):
        """Health endpoint should work without auth."""
        with patch.dict(os.environ, {"API_AUTH_ENABLED": "false"}, clear=False):
            client = make_client()
            response = client.get("/health")

            assert response.status_code == 200
            assert response.json()["status"] == "ok"

    def test_protected_endpoint_open(self, make_client):
        with patch.dict(os.environ, {"API_AUTH_ENABLED": "false"}, clear=False):
            client = make_client()
            assert client.get("/drafts", headers=USER).status_code == 200


class TestAuthEnabled:
    """Tests when authentication is enabled."""

    @pytest.fixture
    def auth_env(self):
        with patch.dict(
            os.environ,
            {"API_AUTH_ENABLED": "true", "API_KEY": TEST_API_KEY},
            clear=False,
        ):
            yield

    def test_health_no_auth_required_even_when_enabled(self, auth_env, make_client):
        """Health endpoint should work without auth even when auth is enabled."""
        response = make_client().get("/health")
        assert response.status_code == 200

    def test_protected_endpoint_requires_auth(self, auth_env, make_client):
        response = make_client().get("/drafts", headers=USER)
        assert response.status_code == 401
        assert "Missing API key" in response.json()["detail"]

    def test_invalid_api_key(self, auth_env, make_client):
        headers = {**USER, "X-API-Key": "wrong"}
        response = make_client().get("/drafts", headers=headers)
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid API key"

    def test_valid_api_key(self, auth_env, make_client):
        headers = {**USER, "X-API-Key": TEST_API_KEY}
        response = make_client().get("/drafts", headers=headers)
        assert response.status_code == 200

    def test_templates_protected(self, auth_env, make_client):
        assert make_client().get("/templates").status_code == 401


class TestActingUser:
    """Tests for the X-User-Id dependency."""

    def test_blank_user_rejected(self, make_client):
        response = make_client().get("/drafts", headers={"X-User-Id": "   "})
        assert response.status_code == 401

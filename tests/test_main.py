"""Tests for the application factory"""

import logging

import pytest
from fastapi.testclient import TestClient

from tradehub.config import Settings
from tradehub.main import create_app


@pytest.fixture
def client(test_settings: Settings):
    """FastAPI test client fixture (runs the lifespan)"""
    with TestClient(create_app(test_settings)) as test_client:
        yield test_client


def test_root_endpoint(client: TestClient):
    """Test root endpoint returns expected response"""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "TradeHub API"
    assert data["version"] == "1.0.0"
    assert data["status"] == "running"


def test_health_check(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_app_state_built_from_settings(test_settings: Settings):
    app = create_app(test_settings)

    assert app.state.settings is test_settings
    assert app.state.token_service.default_ttl.total_seconds() == 24 * 3600
    assert app.state.password_hasher.rounds == 4
    assert app.state.storage is None


def test_unhandled_error_is_generic_problem(test_settings: Settings, caplog):
    app = create_app(test_settings)

    @app.get("/boom")
    async def boom():
        raise RuntimeError("database password is hunter2")

    with caplog.at_level(logging.ERROR, logger="tradehub.api.errors"):
        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.get("/boom")

    assert response.status_code == 500
    data = response.json()
    assert data["title"] == "Internal Server Error"
    assert data["detail"] == "An internal server error occurred"
    assert data["instance"] == "/boom"
    assert "hunter2" not in response.text
    assert "Unhandled error on GET /boom" in caplog.text


def test_cors_headers(client: TestClient):
    response = client.options(
        "/api/v1/users/login",
        headers={
            "Origin": "http://localhost:5173",
            "Access-Control-Request-Method": "POST",
        },
    )

    assert response.headers["access-control-allow-origin"] == "http://localhost:5173"
    assert response.headers["access-control-allow-credentials"] == "true"

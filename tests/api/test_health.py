from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.api.main import create_app
from catalog.boundary.db import get_async_db
from catalog.configs import get_settings


@pytest.fixture
def client():
    app = create_app()
    return TestClient(app)


def test_health_check(client):
    response = client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "message": "Server Healthy"}


def test_health_check_db(client):
    session = AsyncMock(spec=AsyncSession)
    client.app.dependency_overrides[get_async_db] = lambda: session

    response = client.get("/api/v1/health/db")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "message": "Database connection OK"}
    session.execute.assert_awaited_once()


def test_health_check_db_unreachable(client):
    session = AsyncMock(spec=AsyncSession)
    session.execute.side_effect = OperationalError("SELECT 1", {}, Exception("connection refused"))
    client.app.dependency_overrides[get_async_db] = lambda: session

    response = client.get("/api/v1/health/db")

    assert response.status_code == 503
    assert response.json()["status"] == "unhealthy"


def test_unknown_route_uses_error_payload(client):
    response = client.get("/api/v1/nothing-here")

    assert response.status_code == 404
    body = response.json()
    assert body["status"] == 404
    assert body["message"] == "Not Found"


def test_startup_should_configure_logging_and_shutdown_should_dispose_engine():
    engine = MagicMock()
    engine.dispose = AsyncMock()

    with patch("catalog.api.main.configure_logging") as configure, patch(
        "catalog.api.main.get_async_engine", return_value=engine
    ):
        with TestClient(create_app()) as client:
            configure.assert_called_once_with(get_settings().log_level)
            assert client.get("/api/v1/health").status_code == 200

    engine.dispose.assert_awaited_once()

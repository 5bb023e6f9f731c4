"""
Health, metrics and error envelope tests
"""

import pytest
from unittest.mock import AsyncMock

from httpx import AsyncClient
from sqlalchemy.exc import OperationalError

pytestmark = pytest.mark.integration


class TestHealth:

    async def test_liveness(self, client: AsyncClient):
        response = await client.get("/api/v1/health/live")
        assert response.status_code == 200
        assert response.json()["status"] == "alive"

    async def test_readiness(self, client: AsyncClient):
        response = await client.get("/api/v1/health/ready")
        assert response.status_code == 200
        assert response.json()["checks"] == {"database": True, "api": True}

    async def test_readiness_when_database_down(self, client: AsyncClient, database, monkeypatch):
        monkeypatch.setattr(database, "ping", AsyncMock(side_effect=OperationalError("SELECT 1", {}, Exception("down"))))
        response = await client.get("/api/v1/health/ready")
        assert response.status_code == 503
        assert response.json()["status"] == "not ready"


class TestApplication:

    async def test_root(self, client: AsyncClient):
        response = await client.get("/")
        assert response.status_code == 200
        assert response.json()["name"] == "Venue Admin"

    async def test_request_id_echoed(self, client: AsyncClient):
        response = await client.get("/api/v1/health/live", headers={"X-Request-ID": "req-123"})
        assert response.headers["X-Request-ID"] == "req-123"
        assert "X-Process-Time" in response.headers

    async def test_unknown_route(self, client: AsyncClient):
        response = await client.get("/api/v1/nothing-here")
        assert response.status_code == 404
        assert response.json() == {"error": "The requested resource was not found"}

    async def test_metrics_exposed(self, client: AsyncClient):
        await client.get("/api/v1/health/live")
        response = await client.get("/metrics/")
        assert response.status_code == 200
        assert "venue_admin_requests_total" in response.text

# tests/integration/test_health.py
"""Integration tests for health probes and the metrics endpoint."""

import pytest
from httpx import AsyncClient


@pytest.mark.integration
class TestHealthEndpoints:

    async def test_liveness(self, async_client: AsyncClient, test_settings):
        for path in ("/health", "/health/live"):
            response = await async_client.get(path)

            assert response.status_code == 200
            body = response.json()
            assert body["status"] == "alive"
            assert body["version"] == test_settings.app_version

    async def test_readiness_with_database(self, async_client: AsyncClient):
        response = await async_client.get("/health/ready")

        assert response.status_code == 200
        components = {c["name"]: c for c in response.json()["components"]}
        assert components["database"]["status"] == "healthy"
        # Redis is optional and never fails readiness
        assert components["redis"]["status"] == "degraded"

    async def test_metrics_exposed(self, async_client: AsyncClient):
        await async_client.get("/health")

        response = await async_client.get("/metrics")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert "solosuccess_requests_total" in response.text

    async def test_unknown_route_uses_error_envelope(self, async_client: AsyncClient):
        response = await async_client.get("/api/v1/nothing-here")

        assert response.status_code == 404
        assert "error" in response.json()

"""
Security headers tests.

Tests for the SecurityHeadersMiddleware and RequestIDMiddleware to ensure
headers are set on every response, including error responses.
"""

from uuid import UUID, uuid4

from httpx import AsyncClient


class TestSecurityHeaders:
    """Test security headers middleware."""

    async def test_all_security_headers_present(self, async_client: AsyncClient):
        response = await async_client.get("/health")

        assert response.status_code == 200
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert response.headers["Referrer-Policy"] == "strict-origin-when-cross-origin"
        assert "default-src" in response.headers["Content-Security-Policy"]

    async def test_permissions_policy_restrictive(self, async_client: AsyncClient):
        response = await async_client.get("/health")

        permissions_policy = response.headers["Permissions-Policy"]
        assert "geolocation=()" in permissions_policy
        assert "camera=()" in permissions_policy

    async def test_no_hsts_outside_production(self, async_client: AsyncClient):
        response = await async_client.get("/health")

        assert "Strict-Transport-Security" not in response.headers

    async def test_headers_on_error_responses(self, async_client: AsyncClient):
        response = await async_client.get("/api/v1/goals")

        assert response.status_code == 401
        assert response.headers["X-Content-Type-Options"] == "nosniff"


class TestRequestId:
    """Test request ID propagation."""

    async def test_request_id_generated(self, async_client: AsyncClient):
        response = await async_client.get("/health")

        assert UUID(response.headers["X-Request-ID"]).version == 4

    async def test_valid_request_id_echoed(self, async_client: AsyncClient):
        request_id = str(uuid4())

        response = await async_client.get("/health", headers={"X-Request-ID": request_id})

        assert response.headers["X-Request-ID"] == request_id

    async def test_invalid_request_id_replaced(self, async_client: AsyncClient):
        response = await async_client.get("/health", headers={"X-Request-ID": "not-a-uuid"})

        assert response.headers["X-Request-ID"] != "not-a-uuid"

    async def test_request_id_in_error_body(self, async_client: AsyncClient):
        response = await async_client.get("/api/v1/goals")

        assert response.json()["request_id"] == response.headers["X-Request-ID"]

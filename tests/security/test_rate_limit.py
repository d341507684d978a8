"""
Rate limiting tests.

The login route carries a stricter per-IP limit than the default; health
probes are exempt.
"""

from httpx import AsyncClient


class TestRateLimiting:

    async def test_login_limited_per_ip(self, async_client: AsyncClient):
        payload = {"email": "nobody@example.com", "password": "wrong-password"}

        statuses = [
            (await async_client.post("/api/v1/auth/login", json=payload)).status_code
            for _ in range(10)
        ]
        limited = await async_client.post("/api/v1/auth/login", json=payload)

        assert set(statuses) == {401}
        assert limited.status_code == 429
        assert limited.json()["error"]["code"] == "RATE_LIMITED"
        assert int(limited.headers["Retry-After"]) > 0

    async def test_limits_tracked_per_forwarded_ip(self, async_client: AsyncClient):
        payload = {"email": "nobody@example.com", "password": "wrong-password"}
        for _ in range(10):
            await async_client.post(
                "/api/v1/auth/login", json=payload, headers={"X-Forwarded-For": "10.0.0.1"}
            )

        response = await async_client.post(
            "/api/v1/auth/login", json=payload, headers={"X-Forwarded-For": "10.0.0.2"}
        )

        assert response.status_code == 401

    async def test_health_exempt(self, async_client: AsyncClient):
        for _ in range(105):
            response = await async_client.get("/health")

        assert response.status_code == 200

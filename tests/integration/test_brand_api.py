# tests/integration/test_brand_api.py
"""Integration tests for the brand guideline endpoint."""

import pytest
from httpx import AsyncClient


@pytest.mark.integration
class TestBrandGuidelines:

    async def test_generate(self, async_client: AsyncClient, auth_headers):
        response = await async_client.post(
            "/api/v1/brand/guidelines",
            headers=auth_headers,
            json={
                "company_name": "Northwind",
                "industry": "Finance",
                "brand_personality": ["Professional"],
                "color_palette": {"primary": "#003366"},
                "typography": {"primary": "Inter"},
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["company_name"] == "Northwind"
        assert "Use #003366 as the primary brand color for main elements" in body["color_usage"]
        assert len(body["logo_usage"]) == 7
        assert body["spacing_rules"]

    async def test_company_name_required(self, async_client: AsyncClient, auth_headers):
        response = await async_client.post("/api/v1/brand/guidelines", headers=auth_headers, json={})

        assert response.status_code == 400

    async def test_rate_limited(self, async_client: AsyncClient, auth_headers):
        statuses = [
            (
                await async_client.post(
                    "/api/v1/brand/guidelines", headers=auth_headers, json={"company_name": "Northwind"}
                )
            ).status_code
            for _ in range(6)
        ]

        assert statuses == [200] * 5 + [429]

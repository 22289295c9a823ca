"""Unit tests for MetricsMiddleware."""
from __future__ import annotations

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from jobboard_service.app.middleware.metrics import MetricsMiddleware
from jobboard_service.infra.metrics.prometheus import REGISTRY


def request_count(method: str, endpoint: str, status: str) -> float:
    value = REGISTRY.get_sample_value(
        "http_requests_total", {"method": method, "endpoint": endpoint, "status": status}
    )
    return value or 0.0


class TestMetricsMiddleware:
    """Test suite for MetricsMiddleware."""

    @pytest.fixture
    def app(self) -> FastAPI:
        app = FastAPI()
        app.add_middleware(MetricsMiddleware)

        @app.get("/metrics-test/{item_id}")
        async def get_item(item_id: int):
            return {"id": item_id}

        return app

    @pytest.fixture
    async def client(self, app: FastAPI) -> AsyncClient:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac

    async def test_counts_requests_by_route_template(self, client: AsyncClient):
        before = request_count("GET", "/metrics-test/{item_id}", "200")

        await client.get("/metrics-test/1")
        await client.get("/metrics-test/2")

        assert request_count("GET", "/metrics-test/{item_id}", "200") == before + 2

    async def test_unmatched_paths_use_raw_path(self, client: AsyncClient):
        before = request_count("GET", "/metrics-test-unknown", "404")

        await client.get("/metrics-test-unknown")

        assert request_count("GET", "/metrics-test-unknown", "404") == before + 1

    async def test_records_duration(self, client: AsyncClient):
        await client.get("/metrics-test/3")

        count = REGISTRY.get_sample_value(
            "http_request_duration_seconds_count",
            {"method": "GET", "endpoint": "/metrics-test/{item_id}"},
        )
        assert count is not None and count >= 1

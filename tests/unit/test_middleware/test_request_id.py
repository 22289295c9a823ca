"""Unit tests for RequestIDMiddleware."""
from __future__ import annotations

import uuid
from unittest.mock import patch

import pytest
from fastapi import FastAPI, Request
from httpx import ASGITransport, AsyncClient

from jobboard_service.app.middleware.request_id import RequestIDMiddleware
from jobboard_service.infra.logging.context import get_log_context


class TestRequestIDMiddleware:
    """Test suite for RequestIDMiddleware."""

    @pytest.fixture
    def app(self) -> FastAPI:
        app = FastAPI()
        app.add_middleware(RequestIDMiddleware)

        @app.get("/test")
        async def test_endpoint(request: Request):
            return {
                "request_id": request.state.request_id,
                "context": get_log_context().get("request_id"),
            }

        return app

    @pytest.fixture
    async def client(self, app: FastAPI) -> AsyncClient:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac

    async def test_generates_request_id_when_not_provided(self, client: AsyncClient):
        response = await client.get("/test")

        assert response.status_code == 200
        request_id = response.headers["x-request-id"]
        try:
            uuid.UUID(request_id)
        except ValueError:
            pytest.fail(f"Invalid UUID format: {request_id}")

    async def test_preserves_existing_request_id(self, client: AsyncClient):
        custom_id = str(uuid.uuid4())

        response = await client.get("/test", headers={"X-Request-ID": custom_id})

        assert response.headers["x-request-id"] == custom_id
        assert response.json()["request_id"] == custom_id

    async def test_request_id_visible_in_log_context(self, client: AsyncClient):
        response = await client.get("/test", headers={"X-Request-ID": "req-1"})

        assert response.json()["context"] == "req-1"

    async def test_each_request_gets_a_new_id(self, client: AsyncClient):
        first = await client.get("/test")
        second = await client.get("/test")

        assert first.headers["x-request-id"] != second.headers["x-request-id"]

    @patch("jobboard_service.app.middleware.base.clear_log_context")
    async def test_clears_context_on_completion(self, mock_clear_context, client: AsyncClient):
        await client.get("/test")

        mock_clear_context.assert_called_once()

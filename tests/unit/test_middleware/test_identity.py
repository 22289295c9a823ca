"""Unit tests for IdentityMiddleware."""
from __future__ import annotations

from unittest.mock import patch

import pytest
from fastapi import FastAPI, Request
from httpx import ASGITransport, AsyncClient

from jobboard_service.app.middleware.base import HeaderContextMiddleware
from jobboard_service.app.middleware.identity import IdentityMiddleware


class TestIdentityMiddleware:
    """Test suite for IdentityMiddleware."""

    @pytest.fixture
    def app(self) -> FastAPI:
        app = FastAPI()
        app.add_middleware(IdentityMiddleware)

        @app.get("/whoami")
        async def whoami(request: Request):
            return {"user_id": request.state.user_id}

        return app

    @pytest.fixture
    async def client(self, app: FastAPI) -> AsyncClient:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac

    async def test_header_sets_request_state(self, client: AsyncClient):
        response = await client.get("/whoami", headers={"X-User-Id": "recruiter-1"})

        assert response.json() == {"user_id": "recruiter-1"}

    async def test_value_is_stripped(self, client: AsyncClient):
        response = await client.get("/whoami", headers={"X-User-Id": "  42 "})

        assert response.json() == {"user_id": "42"}

    async def test_missing_header_is_anonymous(self, client: AsyncClient):
        response = await client.get("/whoami")

        assert response.json() == {"user_id": None}

    async def test_blank_header_is_anonymous(self, client: AsyncClient):
        response = await client.get("/whoami", headers={"X-User-Id": "   "})

        assert response.json() == {"user_id": None}

    async def test_identity_is_not_echoed(self, client: AsyncClient):
        response = await client.get("/whoami", headers={"X-User-Id": "recruiter-1"})

        assert "x-user-id" not in response.headers

    @patch("jobboard_service.app.middleware.base.set_log_context")
    async def test_user_id_added_to_log_context(self, mock_set_context, client: AsyncClient):
        await client.get("/whoami", headers={"X-User-Id": "recruiter-1"})

        mock_set_context.assert_called_once_with(user_id="recruiter-1")

    @patch("jobboard_service.app.middleware.base.set_log_context")
    async def test_anonymous_request_leaves_log_context(
        self, mock_set_context, client: AsyncClient
    ):
        await client.get("/whoami")

        mock_set_context.assert_not_called()

    def test_identity_is_never_generated(self):
        middleware = IdentityMiddleware(FastAPI())

        assert middleware.should_generate_if_missing is False
        assert middleware.generate_value() is None


class TestHeaderContextDefaults:
    """Test suite for the base class defaults."""

    async def test_default_generates_no_value(self):
        class TenantMiddleware(HeaderContextMiddleware):
            header_name = "x-tenant"
            state_key = "tenant"
            log_context_key = "tenant"

        app = FastAPI()
        app.add_middleware(TenantMiddleware)

        @app.get("/tenant")
        async def tenant(request: Request):
            return {"tenant": request.state.tenant}

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            missing = await ac.get("/tenant")
            given = await ac.get("/tenant", headers={"X-Tenant": "acme"})

        assert missing.json() == {"tenant": None}
        assert "x-tenant" not in missing.headers
        assert given.json() == {"tenant": "acme"}
        assert given.headers["x-tenant"] == "acme"

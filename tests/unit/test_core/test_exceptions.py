"""Unit tests for the exception hierarchy and problem-details handlers."""
from __future__ import annotations

import pytest
from fastapi import FastAPI, Query
from httpx import ASGITransport, AsyncClient

from jobboard_service.app.exception_handlers import configure_exception_handlers
from jobboard_service.app.middleware.request_id import RequestIDMiddleware
from jobboard_service.core.dependencies import CurrentUserDep
from jobboard_service.core.exceptions import (
    AppException,
    BadRequestException,
    ConflictException,
    ForbiddenException,
    NotFoundException,
    UnauthorizedException,
    ValidationException,
)
from jobboard_service.infra.cache.exceptions import CacheNotConfiguredError

PROBLEM_JSON = "application/problem+json"


@pytest.mark.unit
@pytest.mark.parametrize(
    ("exception", "status_code", "type_", "title"),
    [
        (NotFoundException("x"), 404, "not-found", "Not Found"),
        (ValidationException("x"), 422, "validation-error", "Validation Error"),
        (UnauthorizedException("x"), 401, "unauthorized", "Unauthorized"),
        (ForbiddenException("x"), 403, "forbidden", "Forbidden"),
        (ConflictException("x"), 409, "conflict", "Conflict"),
        (BadRequestException("x"), 400, "bad-request", "Bad Request"),
    ],
)
def test_exception_defaults(exception: AppException, status_code: int, type_: str, title: str):
    assert exception.status_code == status_code
    assert exception.type == type_
    assert exception.title == title
    assert exception.detail == "x"
    assert exception.extra == {}


class TestExceptionHandlers:
    """Test suite for the problem-details handlers."""

    @pytest.fixture
    def app(self) -> FastAPI:
        app = FastAPI()
        configure_exception_handlers(app)
        app.add_middleware(RequestIDMiddleware)

        @app.get("/not-found")
        async def not_found():
            raise NotFoundException(
                detail="Job posting not found.",
                type="job-posting-not-found",
                extra={"job_id": 42},
            )

        @app.get("/validated")
        async def validated(page: int = Query(ge=1)):
            return {"page": page}

        @app.get("/boom")
        async def boom():
            raise CacheNotConfiguredError("Cache store is not available")

        @app.get("/me")
        async def me(user_id: CurrentUserDep):
            return {"user_id": user_id}

        return app

    @pytest.fixture
    async def client(self, app: FastAPI) -> AsyncClient:
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac

    async def test_app_exception_renders_problem(self, client: AsyncClient):
        response = await client.get("/not-found", headers={"X-Request-ID": "req-1"})

        assert response.status_code == 404
        assert response.headers["content-type"] == PROBLEM_JSON
        assert response.json() == {
            "type": "job-posting-not-found",
            "title": "Not Found",
            "status": 404,
            "detail": "Job posting not found.",
            "instance": "/not-found",
            "job_id": 42,
            "request_id": "req-1",
        }

    async def test_request_validation_lists_field_errors(self, client: AsyncClient):
        response = await client.get("/validated", params={"page": 0})

        assert response.status_code == 422
        body = response.json()
        assert body["type"] == "validation-error"
        assert body["errors"][0]["field"] == "query.page"
        assert body["errors"][0]["value"] == "0"

    async def test_unexpected_errors_become_500(self, client: AsyncClient):
        response = await client.get("/boom")

        assert response.status_code == 500
        body = response.json()
        assert body["type"] == "internal-error"
        assert "Cache store" not in body["detail"]

    async def test_missing_identity_is_401(self, client: AsyncClient):
        response = await client.get("/me")

        assert response.status_code == 401
        assert response.json()["header"] == "X-User-Id"

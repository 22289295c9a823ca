"""Health check endpoints.

- Liveness: /health/live - the process is up
- Readiness: /health/ready - database reachable, cache connected

A missing cache store (degraded startup) reports ``degraded`` with a 200;
the service keeps serving uncached. A failing database reports 503.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request, Response, status
from pydantic import BaseModel
from sqlalchemy import text

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


class LivenessResponse(BaseModel):
    status: str = "alive"


class ReadinessResponse(BaseModel):
    status: str
    checks: dict[str, bool]


@router.get("/live", response_model=LivenessResponse, summary="Liveness probe")
async def live() -> LivenessResponse:
    return LivenessResponse()


@router.get("/ready", response_model=ReadinessResponse, summary="Readiness probe")
async def ready(request: Request, response: Response) -> ReadinessResponse:
    checks: dict[str, bool] = {}

    factory = getattr(request.app.state, "session_factory", None)
    try:
        async with factory() as session:
            await session.execute(text("SELECT 1"))
        checks["database"] = True
    except Exception as e:
        logger.warning("Database readiness check failed", extra={"error": str(e)})
        checks["database"] = False

    store = getattr(request.app.state, "cache_store", None)
    health_check = getattr(store, "health_check", None)
    checks["cache"] = bool(health_check and await health_check())

    if not checks["database"]:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return ReadinessResponse(status="unavailable", checks=checks)
    return ReadinessResponse(status="ready" if checks["cache"] else "degraded", checks=checks)

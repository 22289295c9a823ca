"""Router registry and setup."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from jobboard_service.features.applications.router import router as applications_router
from jobboard_service.features.companies.router import router as companies_router
from jobboard_service.features.education.router import router as education_router
from jobboard_service.features.health.router import router as health_router
from jobboard_service.features.job_postings.router import router as job_postings_router
from jobboard_service.features.metrics.router import router as metrics_router

if TYPE_CHECKING:
    from fastapi import FastAPI

logger = logging.getLogger(__name__)


def setup_routers(app: FastAPI) -> None:
    """Register all feature routers with the application.

    Routers carry their own path prefixes (``/job-posting``, ``/job-application``, ``/company``,
    ``/user/education``); nothing is mounted under a version prefix.
    """
    app.include_router(metrics_router)
    app.include_router(health_router)

    app.include_router(job_postings_router)
    app.include_router(companies_router)
    app.include_router(education_router)
    app.include_router(applications_router)

    logger.debug("Routers configured", extra={"route_count": len(app.routes)})

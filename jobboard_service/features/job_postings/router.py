"""API router for the job postings feature.

Endpoints:
    Recruiter (X-User-Id is the recruiter id):
        POST   /job-posting                      - Create a posting
        GET    /job-posting/listing              - List own postings
        GET    /job-posting/listing/{job_id}     - Get an own posting
        PATCH  /job-posting/{job_id}             - Update a posting
        POST   /job-posting/{job_id}/publish     - Publish a posting
        DELETE /job-posting/{job_id}             - Delete a posting

    Public:
        GET    /job-posting/public               - Search published postings
        GET    /job-posting/public/{identifier}  - Get a published posting by id or slug

Example Usage:
    GET /job-posting/public?query=python&skills=fastapi,redis&page=2
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, Response, status

from jobboard_service.core.dependencies import (
    CurrentUserDep,
    DbSessionDep,
    HttpKeyDep,
    OrchestratorDep,
)
from jobboard_service.features.job_postings.schemas import (
    EmploymentType,
    JobPostingCreate,
    JobPostingListResponse,
    JobPostingResponse,
    JobPostingUpdate,
    JobSearchFilters,
    WorkLocationType,
)
from jobboard_service.features.job_postings.service import JobPostingService

router = APIRouter(prefix="/job-posting", tags=["job-postings"])
logger = logging.getLogger(__name__)


def get_job_posting_service(session: DbSessionDep, cache: OrchestratorDep) -> JobPostingService:
    return JobPostingService(session, cache)


# ──────────────────────────────────────────────────────────────
# Public endpoints
# ──────────────────────────────────────────────────────────────


@router.get(
    "/public",
    response_model=JobPostingListResponse,
    summary="Search published job postings",
)
async def list_published(
    http_key: HttpKeyDep,
    query: str | None = Query(None, description="Matches title or description"),
    location: str | None = Query(None),
    employment_type: EmploymentType | None = Query(None),
    work_location_type: WorkLocationType | None = Query(None),
    salary_min: float | None = Query(None, ge=0),
    salary_max: float | None = Query(None, ge=0),
    salary_currency: str | None = Query(None, max_length=3),
    company_id: int | None = Query(None),
    skills: list[str] | None = Query(None, description="Comma-separated or repeated"),
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(10, ge=1, le=100, description="Items per page"),
    service: JobPostingService = Depends(get_job_posting_service),
) -> JobPostingListResponse:
    filters = JobSearchFilters(
        query=query,
        location=location,
        employment_type=employment_type,
        work_location_type=work_location_type,
        salary_min=salary_min,
        salary_max=salary_max,
        salary_currency=salary_currency,
        company_id=company_id,
        skills=skills,
    )
    return await service.list_published(filters, page=page, limit=limit, http_key=http_key)


@router.get(
    "/public/{identifier}",
    response_model=JobPostingResponse,
    summary="Get a published job posting by id or slug",
)
async def get_published(
    identifier: str,
    http_key: HttpKeyDep,
    service: JobPostingService = Depends(get_job_posting_service),
) -> JobPostingResponse:
    return await service.get_published(identifier, http_key)


# ──────────────────────────────────────────────────────────────
# Recruiter endpoints
# ──────────────────────────────────────────────────────────────


@router.post(
    "",
    response_model=JobPostingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a job posting",
)
async def create_job_posting(
    payload: JobPostingCreate,
    recruiter_id: CurrentUserDep,
    service: JobPostingService = Depends(get_job_posting_service),
) -> JobPostingResponse:
    return await service.create_job_posting(recruiter_id, payload)


@router.get(
    "/listing",
    response_model=JobPostingListResponse,
    summary="List the recruiter's job postings",
)
async def list_own(
    recruiter_id: CurrentUserDep,
    http_key: HttpKeyDep,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    service: JobPostingService = Depends(get_job_posting_service),
) -> JobPostingListResponse:
    return await service.list_for_recruiter(
        recruiter_id, page=page, limit=limit, http_key=http_key
    )


@router.get(
    "/listing/{job_id}",
    response_model=JobPostingResponse,
    summary="Get one of the recruiter's job postings",
)
async def get_own(
    job_id: int,
    recruiter_id: CurrentUserDep,
    http_key: HttpKeyDep,
    service: JobPostingService = Depends(get_job_posting_service),
) -> JobPostingResponse:
    return await service.get_for_recruiter(recruiter_id, job_id, http_key)


@router.patch("/{job_id}", response_model=JobPostingResponse, summary="Update a job posting")
async def update_job_posting(
    job_id: int,
    payload: JobPostingUpdate,
    recruiter_id: CurrentUserDep,
    service: JobPostingService = Depends(get_job_posting_service),
) -> JobPostingResponse:
    return await service.update_job_posting(recruiter_id, job_id, payload)


@router.post(
    "/{job_id}/publish",
    response_model=JobPostingResponse,
    summary="Publish a job posting",
)
async def publish_job_posting(
    job_id: int,
    recruiter_id: CurrentUserDep,
    service: JobPostingService = Depends(get_job_posting_service),
) -> JobPostingResponse:
    return await service.publish_job_posting(recruiter_id, job_id)


@router.delete(
    "/{job_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a job posting",
)
async def delete_job_posting(
    job_id: int,
    recruiter_id: CurrentUserDep,
    service: JobPostingService = Depends(get_job_posting_service),
) -> Response:
    await service.delete_job_posting(recruiter_id, job_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

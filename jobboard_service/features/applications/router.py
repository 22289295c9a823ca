"""API router for the applications feature.

Endpoints:
    Candidate (X-User-Id is the candidate id):
        POST   /job-application                                      - Apply to a posting
        GET    /job-application/my-applications                      - List own applications
        GET    /job-application/my-applications/{application_id}     - Get an own application
        PATCH  /job-application/my-applications/{application_id}/withdraw - Withdraw

    Recruiter (X-User-Id is the recruiter id):
        GET    /job-application/job/{job_id}                  - Applications to an own posting
        GET    /job-application/{application_id}              - Get an application
        PATCH  /job-application/{application_id}/status       - Change the status
        POST   /job-application/{application_id}/notes        - Add a note
        GET    /job-application/{application_id}/notes        - List notes
        GET    /job-application/{application_id}/events       - Status history
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from jobboard_service.core.dependencies import (
    CurrentUserDep,
    DbSessionDep,
    HttpKeyDep,
    OrchestratorDep,
)
from jobboard_service.features.applications.schemas import (
    ApplicationCreate,
    ApplicationListResponse,
    ApplicationResponse,
    EventResponse,
    NoteCreate,
    NoteResponse,
    StatusUpdate,
)
from jobboard_service.features.applications.service import ApplicationService

router = APIRouter(prefix="/job-application", tags=["job-applications"])


def get_application_service(session: DbSessionDep, cache: OrchestratorDep) -> ApplicationService:
    return ApplicationService(session, cache)


# ──────────────────────────────────────────────────────────────
# Candidate endpoints
# ──────────────────────────────────────────────────────────────


@router.post(
    "",
    response_model=ApplicationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Apply to a published job posting",
)
async def apply(
    payload: ApplicationCreate,
    candidate_id: CurrentUserDep,
    service: ApplicationService = Depends(get_application_service),
) -> ApplicationResponse:
    return await service.apply(candidate_id, payload)


@router.get(
    "/my-applications",
    response_model=ApplicationListResponse,
    summary="List the candidate's applications",
)
async def list_own(
    candidate_id: CurrentUserDep,
    http_key: HttpKeyDep,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    service: ApplicationService = Depends(get_application_service),
) -> ApplicationListResponse:
    return await service.list_for_candidate(
        candidate_id, page=page, limit=limit, http_key=http_key
    )


@router.get(
    "/my-applications/{application_id}",
    response_model=ApplicationResponse,
    summary="Get one of the candidate's applications",
)
async def get_own(
    application_id: int,
    candidate_id: CurrentUserDep,
    http_key: HttpKeyDep,
    service: ApplicationService = Depends(get_application_service),
) -> ApplicationResponse:
    return await service.get_for_candidate(candidate_id, application_id, http_key)


@router.patch(
    "/my-applications/{application_id}/withdraw",
    response_model=ApplicationResponse,
    summary="Withdraw an application",
)
async def withdraw(
    application_id: int,
    candidate_id: CurrentUserDep,
    service: ApplicationService = Depends(get_application_service),
) -> ApplicationResponse:
    return await service.withdraw(candidate_id, application_id)


# ──────────────────────────────────────────────────────────────
# Recruiter endpoints
# ──────────────────────────────────────────────────────────────


@router.get(
    "/job/{job_id}",
    response_model=ApplicationListResponse,
    summary="List applications to one of the recruiter's postings",
)
async def list_for_job(
    job_id: int,
    recruiter_id: CurrentUserDep,
    http_key: HttpKeyDep,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    service: ApplicationService = Depends(get_application_service),
) -> ApplicationListResponse:
    return await service.list_for_job(
        recruiter_id, job_id, page=page, limit=limit, http_key=http_key
    )


@router.get(
    "/{application_id}",
    response_model=ApplicationResponse,
    summary="Get an application to one of the recruiter's postings",
)
async def get_for_recruiter(
    application_id: int,
    recruiter_id: CurrentUserDep,
    http_key: HttpKeyDep,
    service: ApplicationService = Depends(get_application_service),
) -> ApplicationResponse:
    return await service.get_for_recruiter(recruiter_id, application_id, http_key)


@router.patch(
    "/{application_id}/status",
    response_model=EventResponse,
    summary="Change the status of an application",
)
async def update_status(
    application_id: int,
    payload: StatusUpdate,
    recruiter_id: CurrentUserDep,
    service: ApplicationService = Depends(get_application_service),
) -> EventResponse:
    return await service.update_status(recruiter_id, application_id, payload)


@router.post(
    "/{application_id}/notes",
    response_model=NoteResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a recruiter note to an application",
)
async def add_note(
    application_id: int,
    payload: NoteCreate,
    recruiter_id: CurrentUserDep,
    service: ApplicationService = Depends(get_application_service),
) -> NoteResponse:
    return await service.add_note(recruiter_id, application_id, payload)


@router.get(
    "/{application_id}/notes",
    response_model=list[NoteResponse],
    summary="List notes on an application",
)
async def list_notes(
    application_id: int,
    recruiter_id: CurrentUserDep,
    http_key: HttpKeyDep,
    service: ApplicationService = Depends(get_application_service),
) -> list[NoteResponse]:
    return await service.list_notes(recruiter_id, application_id, http_key)


@router.get(
    "/{application_id}/events",
    response_model=list[EventResponse],
    summary="Status history of an application",
)
async def list_events(
    application_id: int,
    recruiter_id: CurrentUserDep,
    http_key: HttpKeyDep,
    service: ApplicationService = Depends(get_application_service),
) -> list[EventResponse]:
    return await service.list_events(recruiter_id, application_id, http_key)

"""API router for the education feature.

Endpoints (all require X-User-Id):
    GET    /user/education                  - List own entries
    GET    /user/education/{education_id}   - Get an entry
    POST   /user/education                  - Add an entry
    PATCH  /user/education/{education_id}   - Update an entry
    DELETE /user/education/{education_id}   - Delete an entry
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status

from jobboard_service.core.dependencies import (
    CurrentUserDep,
    DbSessionDep,
    HttpKeyDep,
    OrchestratorDep,
)
from jobboard_service.features.education.schemas import (
    EducationCreate,
    EducationListResponse,
    EducationResponse,
    EducationUpdate,
)
from jobboard_service.features.education.service import EducationService

router = APIRouter(prefix="/user/education", tags=["education"])


def get_education_service(session: DbSessionDep, cache: OrchestratorDep) -> EducationService:
    return EducationService(session, cache)


@router.get("", response_model=EducationListResponse, summary="List education entries")
async def list_entries(
    user_id: CurrentUserDep,
    http_key: HttpKeyDep,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    service: EducationService = Depends(get_education_service),
) -> EducationListResponse:
    return await service.list_entries(user_id, page=page, limit=limit, http_key=http_key)


@router.get(
    "/{education_id}",
    response_model=EducationResponse,
    summary="Get an education entry",
)
async def get_entry(
    education_id: int,
    user_id: CurrentUserDep,
    service: EducationService = Depends(get_education_service),
) -> EducationResponse:
    return await service.get_entry(user_id, education_id)


@router.post(
    "",
    response_model=EducationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add an education entry",
)
async def create_entry(
    payload: EducationCreate,
    user_id: CurrentUserDep,
    service: EducationService = Depends(get_education_service),
) -> EducationResponse:
    return await service.create_entry(user_id, payload)


@router.patch(
    "/{education_id}",
    response_model=EducationResponse,
    summary="Update an education entry",
)
async def update_entry(
    education_id: int,
    payload: EducationUpdate,
    user_id: CurrentUserDep,
    service: EducationService = Depends(get_education_service),
) -> EducationResponse:
    return await service.update_entry(user_id, education_id, payload)


@router.delete(
    "/{education_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an education entry",
)
async def delete_entry(
    education_id: int,
    user_id: CurrentUserDep,
    service: EducationService = Depends(get_education_service),
) -> Response:
    await service.delete_entry(user_id, education_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

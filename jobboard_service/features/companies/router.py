"""API router for the companies feature.

Endpoints:
    GET    /company                              - Public profile of the primary company
    GET    /company/{company_id}                 - Company profile
    POST   /company                              - Register a company
    PATCH  /company/{company_id}                 - Update a company
    POST   /company/{company_id}/recruiters      - Attach a recruiter
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status

from jobboard_service.core.dependencies import (
    CurrentUserDep,
    DbSessionDep,
    HttpKeyDep,
    OrchestratorDep,
)
from jobboard_service.features.companies.schemas import (
    CompanyCreate,
    CompanyResponse,
    CompanyUpdate,
    RecruiterCreate,
    RecruiterResponse,
)
from jobboard_service.features.companies.service import CompanyService

router = APIRouter(prefix="/company", tags=["companies"])
logger = logging.getLogger(__name__)


def get_company_service(session: DbSessionDep, cache: OrchestratorDep) -> CompanyService:
    return CompanyService(session, cache)


@router.get("", response_model=CompanyResponse, summary="Get the public company profile")
async def get_public_company(
    http_key: HttpKeyDep,
    service: CompanyService = Depends(get_company_service),
) -> CompanyResponse:
    return await service.get_public_company(http_key)


@router.get("/{company_id}", response_model=CompanyResponse, summary="Get a company")
async def get_company(
    company_id: int,
    http_key: HttpKeyDep,
    service: CompanyService = Depends(get_company_service),
) -> CompanyResponse:
    return await service.get_company(company_id, http_key)


@router.post(
    "",
    response_model=CompanyResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a company",
)
async def create_company(
    payload: CompanyCreate,
    _user_id: CurrentUserDep,
    service: CompanyService = Depends(get_company_service),
) -> CompanyResponse:
    return await service.create_company(payload)


@router.patch("/{company_id}", response_model=CompanyResponse, summary="Update a company")
async def update_company(
    company_id: int,
    payload: CompanyUpdate,
    _user_id: CurrentUserDep,
    service: CompanyService = Depends(get_company_service),
) -> CompanyResponse:
    """Update a company and drop every cached copy of its profile."""
    return await service.update_company(company_id, payload)


@router.post(
    "/{company_id}/recruiters",
    response_model=RecruiterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Attach a recruiter to a company",
)
async def add_recruiter(
    company_id: int,
    payload: RecruiterCreate,
    _user_id: CurrentUserDep,
    service: CompanyService = Depends(get_company_service),
) -> RecruiterResponse:
    membership = await service.add_recruiter(company_id, payload)
    return RecruiterResponse.model_validate(membership)

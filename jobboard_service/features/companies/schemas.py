"""Pydantic schemas for the companies feature."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CompanyBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    website: str | None = Field(default=None, max_length=255)
    logo_path: str | None = None
    description: str | None = None


class CompanyCreate(CompanyBase):
    """Payload used when creating a company."""


class CompanyUpdate(BaseModel):
    """Partial update; omitted fields are left unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    website: str | None = Field(default=None, max_length=255)
    logo_path: str | None = None
    description: str | None = None


class CompanyResponse(CompanyBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime
    updated_at: datetime


class CompanySummary(BaseModel):
    """Company fields embedded in job posting payloads."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None = None


class RecruiterCreate(BaseModel):
    recruiter_id: str = Field(
        ...,
        min_length=1,
        max_length=64,
        description="User id of the recruiter, as forwarded by the gateway",
    )


class RecruiterResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    company_id: int
    recruiter_id: str
    is_active: bool
    created_at: datetime


__all__ = [
    "CompanyBase",
    "CompanyCreate",
    "CompanyResponse",
    "CompanySummary",
    "CompanyUpdate",
    "RecruiterCreate",
    "RecruiterResponse",
]

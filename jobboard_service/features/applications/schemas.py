"""Pydantic schemas for the applications feature."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ApplicationStatus(str, Enum):
    APPLIED = "applied"
    UNDER_REVIEW = "under review"
    INTERVIEW = "interview"
    OFFER = "offer"
    HIRED = "hired"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"


class ApplicationCreate(BaseModel):
    """Payload used when a candidate applies to a published posting."""

    job_id: int
    cover_letter: str | None = None
    expected_salary: float | None = Field(default=None, ge=0)
    salary_currency: str | None = Field(default=None, min_length=3, max_length=3)
    available_from: date | None = None

    @field_validator("salary_currency")
    @classmethod
    def upper_currency(cls, v: str | None) -> str | None:
        return v.upper() if v else v


class StatusUpdate(BaseModel):
    status: ApplicationStatus
    note: str | None = None


class NoteCreate(BaseModel):
    note: str = Field(..., min_length=1)


class ApplicationJob(BaseModel):
    """The posting an application belongs to."""

    id: int
    title: str
    company_name: str | None = None

    @model_validator(mode="before")
    @classmethod
    def from_posting(cls, data: Any) -> Any:
        """Accept a ``JobPosting`` row and flatten its company name."""
        if isinstance(data, dict):
            return data
        company = getattr(data, "company", None)
        return {
            "id": data.id,
            "title": data.title,
            "company_name": company.name if company is not None else None,
        }


class ApplicationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    job_id: int
    candidate_id: str
    status: ApplicationStatus
    cover_letter: str | None = None
    expected_salary: float | None = None
    salary_currency: str | None = None
    available_from: date | None = None
    submitted_at: datetime
    job: ApplicationJob
    created_at: datetime
    updated_at: datetime


class ApplicationListResponse(BaseModel):
    items: list[ApplicationResponse]
    total: int
    page: int
    limit: int
    pages: int


class EventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    application_id: int
    status: ApplicationStatus
    note: str | None = None
    occurred_at: datetime


class NoteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    application_id: int
    author_recruiter_id: str
    note: str
    created_at: datetime


__all__ = [
    "ApplicationCreate",
    "ApplicationJob",
    "ApplicationListResponse",
    "ApplicationResponse",
    "ApplicationStatus",
    "EventResponse",
    "NoteCreate",
    "NoteResponse",
    "StatusUpdate",
]

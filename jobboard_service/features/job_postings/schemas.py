"""Pydantic schemas for the job postings feature."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from jobboard_service.features.companies.schemas import CompanySummary


class EmploymentType(str, Enum):
    FULL_TIME = "full-time"
    PART_TIME = "part-time"
    FREELANCE = "freelance"
    SELF_EMPLOYED = "self-employed"
    CONTRACT = "contract"
    TEMPORARY = "temporary"
    INTERN = "intern"


class WorkLocationType(str, Enum):
    ONSITE = "onsite"
    REMOTE = "remote"
    HYBRID = "hybrid"


def _normalize_skills(value: list[str] | None) -> list[str] | None:
    if value is None:
        return None
    seen = dict.fromkeys(skill.strip().lower() for skill in value)
    return [skill for skill in seen if skill]


class _SalaryRange(BaseModel):
    salary_min: float | None = Field(default=None, ge=0)
    salary_max: float | None = Field(default=None, ge=0)
    salary_currency: str | None = Field(default=None, min_length=3, max_length=3)

    @field_validator("salary_currency")
    @classmethod
    def upper_currency(cls, v: str | None) -> str | None:
        return v.upper() if v else v

    @model_validator(mode="after")
    def _check_salary_range(self) -> _SalaryRange:
        low, high = self.salary_min, self.salary_max
        if low is not None and high is not None and low > high:
            msg = "salary_min must not exceed salary_max"
            raise ValueError(msg)
        return self


class JobPostingCreate(_SalaryRange):
    """Payload used when a recruiter creates a posting."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    location: str | None = Field(default=None, max_length=255)
    employment_type: EmploymentType = EmploymentType.FULL_TIME
    work_location_type: WorkLocationType = WorkLocationType.ONSITE
    is_published: bool = False
    skills: list[str] = Field(default_factory=list, max_length=50)

    @field_validator("skills")
    @classmethod
    def normalize_skills(cls, v: list[str]) -> list[str]:
        return _normalize_skills(v) or []


class JobPostingUpdate(_SalaryRange):
    """Partial update; omitted fields are left unchanged."""

    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, min_length=1)
    location: str | None = Field(default=None, max_length=255)
    employment_type: EmploymentType | None = None
    work_location_type: WorkLocationType | None = None
    is_published: bool | None = None
    skills: list[str] | None = Field(default=None, max_length=50)

    @field_validator("skills")
    @classmethod
    def normalize_skills(cls, v: list[str] | None) -> list[str] | None:
        return _normalize_skills(v)


class JobPostingResponse(BaseModel):
    """Job posting as returned to recruiters and candidates."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    company_id: int
    recruiter_id: str
    title: str
    slug: str
    description: str
    location: str | None = None
    employment_type: EmploymentType
    work_location_type: WorkLocationType
    salary_min: float | None = None
    salary_max: float | None = None
    salary_currency: str | None = None
    is_published: bool
    skills: list[str] = Field(default_factory=list)
    company: CompanySummary | None = None
    created_at: datetime
    updated_at: datetime

    @field_validator("skills", mode="before")
    @classmethod
    def skill_names(cls, v: Any) -> Any:
        """Accept ORM ``JobSkill`` rows as well as plain names."""
        return [getattr(skill, "name", skill) for skill in v or []]


class JobPostingListResponse(BaseModel):
    """Paginated job postings."""

    items: list[JobPostingResponse]
    total: int
    page: int
    limit: int
    pages: int


class JobSearchFilters(BaseModel):
    """Public listing filters.

    Field names double as query parameter names and as cache key labels.
    """

    query: str | None = None
    location: str | None = None
    employment_type: EmploymentType | None = None
    work_location_type: WorkLocationType | None = None
    salary_min: float | None = None
    salary_max: float | None = None
    salary_currency: str | None = None
    company_id: int | None = None
    skills: list[str] | None = None

    @field_validator("query", "location", "salary_currency", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v.strip() if isinstance(v, str) else v

    @field_validator("salary_currency")
    @classmethod
    def upper_currency(cls, v: str | None) -> str | None:
        """``usd`` and ``USD`` are one filter and one cache key."""
        return v.upper() if v else v

    @field_validator("skills", mode="before")
    @classmethod
    def split_skills(cls, v: Any) -> Any:
        """Accept ``skills=a,b`` as well as repeated ``skills`` parameters."""
        if v is None:
            return None
        values = [v] if isinstance(v, str) else list(v)
        names = [part for item in values for part in str(item).split(",")]
        return _normalize_skills(names) or None


__all__ = [
    "EmploymentType",
    "JobPostingCreate",
    "JobPostingListResponse",
    "JobPostingResponse",
    "JobPostingUpdate",
    "JobSearchFilters",
    "WorkLocationType",
]

"""Pydantic schemas for the education feature."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class EducationLevel(str, Enum):
    HIGH_SCHOOL = "High School Diploma or Equivalent"
    VOCATIONAL_DIPLOMA = "Vocational Diploma"
    ASSOCIATE_DEGREE = "Associate's Degree"
    BACHELOR_DEGREE = "Bachelor's Degree"
    POSTGRADUATE_DIPLOMA = "Postgraduate Diploma"
    MASTER_DEGREE = "Master's Degree"
    PROFESSIONAL_DEGREE = "Professional Degree"
    DOCTORATE = "Doctoral Degree"
    POSTDOCTORAL = "Postdoctoral Research"


class _Period(BaseModel):
    from_month: int | None = Field(default=None, ge=1, le=12)
    from_year: int | None = Field(default=None, ge=1950, le=2100)
    to_month: int | None = Field(default=None, ge=1, le=12)
    to_year: int | None = Field(default=None, ge=1950, le=2100)

    @model_validator(mode="after")
    def _check_period(self) -> _Period:
        if self.from_year is None or self.to_year is None:
            return self
        start = (self.from_year, self.from_month or 1)
        end = (self.to_year, self.to_month or 12)
        if end < start:
            msg = "Education period ends before it starts"
            raise ValueError(msg)
        return self


class EducationCreate(_Period):
    institution: str = Field(..., min_length=1, max_length=255)
    education_level: EducationLevel
    from_year: int = Field(..., ge=1950, le=2100)
    to_year: int = Field(..., ge=1950, le=2100)
    description: str | None = None


class EducationUpdate(_Period):
    """Partial update; omitted fields are left unchanged."""

    institution: str | None = Field(default=None, min_length=1, max_length=255)
    education_level: EducationLevel | None = None
    description: str | None = None


class EducationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    institution: str
    education_level: EducationLevel
    from_month: int | None = None
    from_year: int
    to_month: int | None = None
    to_year: int
    description: str | None = None
    created_at: datetime
    updated_at: datetime


class EducationListResponse(BaseModel):
    items: list[EducationResponse]
    total: int
    page: int
    limit: int
    pages: int


__all__ = [
    "EducationCreate",
    "EducationLevel",
    "EducationListResponse",
    "EducationResponse",
    "EducationUpdate",
]

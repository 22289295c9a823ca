"""Import every feature model so their tables are registered on ``Base.metadata``."""

from __future__ import annotations

from jobboard_service.features.applications.models import (
    ApplicationEvent,
    ApplicationNote,
    JobApplication,
)
from jobboard_service.features.companies.models import Company, CompanyRecruiter
from jobboard_service.features.education.models import UserEducation
from jobboard_service.features.job_postings.models import JobPosting, JobSkill

__all__ = [
    "ApplicationEvent",
    "ApplicationNote",
    "Company",
    "CompanyRecruiter",
    "JobApplication",
    "JobPosting",
    "JobSkill",
    "UserEducation",
]

"""SQLAlchemy models for the job postings feature."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Float, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from jobboard_service.core.database import Base, IntegerPKMixin, TimestampedBase

if TYPE_CHECKING:
    from jobboard_service.features.companies.models import Company


class JobPosting(TimestampedBase):
    """Job posting owned by a recruiter and published under their company."""

    __tablename__ = "job_postings"

    company_id: Mapped[int] = mapped_column(
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    recruiter_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    description: Mapped[str] = mapped_column(Text(), nullable=False)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    employment_type: Mapped[str] = mapped_column(String(32), nullable=False)
    work_location_type: Mapped[str] = mapped_column(String(32), nullable=False)
    salary_min: Mapped[float | None] = mapped_column(Float(), nullable=True)
    salary_max: Mapped[float | None] = mapped_column(Float(), nullable=True)
    salary_currency: Mapped[str | None] = mapped_column(String(3), nullable=True)
    is_published: Mapped[bool] = mapped_column(
        Boolean(), default=False, nullable=False, index=True
    )

    company: Mapped[Company] = relationship(lazy="selectin")
    skills: Mapped[list[JobSkill]] = relationship(
        back_populates="job",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="JobSkill.id",
    )

    def __repr__(self) -> str:
        return f"<JobPosting(id={self.id}, slug={self.slug!r})>"


class JobSkill(Base, IntegerPKMixin):
    """Skill required by a job posting."""

    __tablename__ = "job_skills"

    job_id: Mapped[int] = mapped_column(
        ForeignKey("job_postings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    job: Mapped[JobPosting] = relationship(back_populates="skills")

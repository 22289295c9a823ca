"""SQLAlchemy models for the applications feature."""

from __future__ import annotations

from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import Date, DateTime, Float, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from jobboard_service.core.database import TimestampedBase

if TYPE_CHECKING:
    from jobboard_service.features.job_postings.models import JobPosting


def _utcnow() -> datetime:
    return datetime.now(UTC)


class JobApplication(TimestampedBase):
    """A candidate's application to a job posting; one per candidate and posting."""

    __tablename__ = "job_applications"
    __table_args__ = (UniqueConstraint("job_id", "candidate_id"),)

    job_id: Mapped[int] = mapped_column(
        ForeignKey("job_postings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    candidate_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        index=True,
        comment="User id forwarded by the gateway",
    )
    status: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    cover_letter: Mapped[str | None] = mapped_column(Text(), nullable=True)
    expected_salary: Mapped[float | None] = mapped_column(Float(), nullable=True)
    salary_currency: Mapped[str | None] = mapped_column(String(3), nullable=True)
    available_from: Mapped[date | None] = mapped_column(Date(), nullable=True)
    submitted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )

    job: Mapped[JobPosting] = relationship(lazy="selectin")

    def __repr__(self) -> str:
        return f"<JobApplication(id={self.id}, job_id={self.job_id}, status={self.status!r})>"


class ApplicationEvent(TimestampedBase):
    """Status history entry; one per status change, including the initial one."""

    __tablename__ = "job_application_events"

    application_id: Mapped[int] = mapped_column(
        ForeignKey("job_applications.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    status: Mapped[str] = mapped_column(String(32), nullable=False)
    note: Mapped[str | None] = mapped_column(Text(), nullable=True)
    occurred_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )


class ApplicationNote(TimestampedBase):
    """Recruiter-only note on an application."""

    __tablename__ = "job_application_notes"

    application_id: Mapped[int] = mapped_column(
        ForeignKey("job_applications.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    author_recruiter_id: Mapped[str] = mapped_column(String(64), nullable=False)
    note: Mapped[str] = mapped_column(Text(), nullable=False)

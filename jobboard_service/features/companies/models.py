"""SQLAlchemy models for the companies feature."""

from __future__ import annotations

from sqlalchemy import Boolean, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from jobboard_service.core.database import TimestampedBase


class Company(TimestampedBase):
    """Employer publishing job postings."""

    __tablename__ = "companies"

    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    website: Mapped[str | None] = mapped_column(String(255), nullable=True)
    logo_path: Mapped[str | None] = mapped_column(Text(), nullable=True)
    description: Mapped[str | None] = mapped_column(Text(), nullable=True)

    recruiters: Mapped[list[CompanyRecruiter]] = relationship(
        back_populates="company",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Company(id={self.id}, name={self.name!r})>"


class CompanyRecruiter(TimestampedBase):
    """Membership of a recruiter (gateway user id) in a company.

    A recruiter belongs to at most one company; job postings they create are
    published under it.
    """

    __tablename__ = "company_recruiters"

    company_id: Mapped[int] = mapped_column(
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    recruiter_id: Mapped[str] = mapped_column(
        String(64),
        unique=True,
        nullable=False,
        comment="User id forwarded by the gateway",
    )
    is_active: Mapped[bool] = mapped_column(Boolean(), default=True, nullable=False)

    company: Mapped[Company] = relationship(back_populates="recruiters", lazy="selectin")

"""SQLAlchemy models for the education feature."""

from __future__ import annotations

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from jobboard_service.core.database import TimestampedBase


class UserEducation(TimestampedBase):
    """One education entry on a candidate profile."""

    __tablename__ = "user_educations"

    user_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        index=True,
        comment="User id forwarded by the gateway",
    )
    institution: Mapped[str] = mapped_column(String(255), nullable=False)
    education_level: Mapped[str] = mapped_column(String(64), nullable=False)
    from_month: Mapped[int | None] = mapped_column(Integer(), nullable=True)
    from_year: Mapped[int] = mapped_column(Integer(), nullable=False)
    to_month: Mapped[int | None] = mapped_column(Integer(), nullable=True)
    to_year: Mapped[int] = mapped_column(Integer(), nullable=False)
    description: Mapped[str | None] = mapped_column(Text(), nullable=True)

    def __repr__(self) -> str:
        return f"<UserEducation(id={self.id}, user_id={self.user_id!r})>"

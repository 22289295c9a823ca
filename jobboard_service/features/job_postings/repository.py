"""Repository for the job postings feature."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import or_, select

from jobboard_service.core.database.repository import BaseRepository, SearchResult
from jobboard_service.features.job_postings.models import JobPosting, JobSkill

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from jobboard_service.features.job_postings.schemas import JobSearchFilters


class JobPostingRepository(BaseRepository[JobPosting]):
    """Repository for JobPosting model.

    Inherits from BaseRepository:
        - get(session, id) -> JobPosting | None
        - get_by(session, attr, value) -> JobPosting | None
        - search(session, statement, limit, offset) -> SearchResult[JobPosting]
        - create(session, instance) -> JobPosting
        - delete(session, instance) -> None

    Company and skills are loaded eagerly (selectin) with every posting.
    """

    def __init__(self) -> None:
        super().__init__(JobPosting)

    async def get_published(self, session: AsyncSession, identifier: str) -> JobPosting | None:
        """Published posting whose id or slug equals ``identifier``."""
        match = JobPosting.slug == identifier
        if identifier.isdigit():
            match = or_(match, JobPosting.id == int(identifier))

        stmt = select(JobPosting).where(match, JobPosting.is_published.is_(True))
        result = await session.execute(stmt)
        posting = result.scalars().first()

        self._lazy.debug(lambda: f"db.get_published({identifier!r}) -> {posting is not None}")
        return posting

    async def slug_exists(
        self,
        session: AsyncSession,
        slug: str,
        *,
        exclude_id: int | None = None,
    ) -> bool:
        stmt = select(JobPosting.id).where(JobPosting.slug == slug)
        if exclude_id is not None:
            stmt = stmt.where(JobPosting.id != exclude_id)
        result = await session.execute(stmt.limit(1))
        return result.scalar_one_or_none() is not None

    async def list_for_recruiter(
        self,
        session: AsyncSession,
        recruiter_id: str,
        *,
        limit: int,
        offset: int,
    ) -> SearchResult[JobPosting]:
        stmt = (
            select(JobPosting)
            .where(JobPosting.recruiter_id == recruiter_id)
            .order_by(JobPosting.created_at.desc(), JobPosting.id.desc())
        )
        return await self.search(session, stmt, limit=limit, offset=offset)

    async def search_published(
        self,
        session: AsyncSession,
        filters: JobSearchFilters,
        *,
        limit: int,
        offset: int,
    ) -> SearchResult[JobPosting]:
        """Published postings matching every given filter, newest first.

        ``query`` matches title or description, ``location`` is a substring
        match, salary bounds compare against the posting's own range and
        ``skills`` matches postings requiring any of the names.
        """
        stmt = select(JobPosting).where(JobPosting.is_published.is_(True))

        if filters.query:
            pattern = f"%{filters.query}%"
            stmt = stmt.where(
                or_(JobPosting.title.ilike(pattern), JobPosting.description.ilike(pattern))
            )
        if filters.location:
            stmt = stmt.where(JobPosting.location.ilike(f"%{filters.location}%"))
        if filters.employment_type is not None:
            stmt = stmt.where(JobPosting.employment_type == filters.employment_type.value)
        if filters.work_location_type is not None:
            stmt = stmt.where(JobPosting.work_location_type == filters.work_location_type.value)
        if filters.salary_min is not None:
            stmt = stmt.where(JobPosting.salary_min >= filters.salary_min)
        if filters.salary_max is not None:
            stmt = stmt.where(JobPosting.salary_max <= filters.salary_max)
        if filters.salary_currency:
            stmt = stmt.where(JobPosting.salary_currency == filters.salary_currency)
        if filters.company_id is not None:
            stmt = stmt.where(JobPosting.company_id == filters.company_id)
        if filters.skills:
            stmt = stmt.where(JobPosting.skills.any(JobSkill.name.in_(filters.skills)))

        stmt = stmt.order_by(JobPosting.created_at.desc(), JobPosting.id.desc())
        return await self.search(session, stmt, limit=limit, offset=offset)


_job_posting_repository: JobPostingRepository | None = None


def get_job_posting_repository() -> JobPostingRepository:
    global _job_posting_repository
    if _job_posting_repository is None:
        _job_posting_repository = JobPostingRepository()
    return _job_posting_repository

"""Repositories for the applications feature."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select

from jobboard_service.core.database.repository import BaseRepository, SearchResult
from jobboard_service.features.applications.models import (
    ApplicationEvent,
    ApplicationNote,
    JobApplication,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.ext.asyncio import AsyncSession


class ApplicationRepository(BaseRepository[JobApplication]):
    """Repository for JobApplication model.

    The posting (with its company) is loaded eagerly with every application.
    """

    def __init__(self) -> None:
        super().__init__(JobApplication)

    async def get_for_candidate_and_job(
        self, session: AsyncSession, candidate_id: str, job_id: int
    ) -> JobApplication | None:
        stmt = select(JobApplication).where(
            JobApplication.candidate_id == candidate_id,
            JobApplication.job_id == job_id,
        )
        result = await session.execute(stmt)
        return result.scalars().first()

    async def list_for_candidate(
        self,
        session: AsyncSession,
        candidate_id: str,
        *,
        limit: int,
        offset: int,
    ) -> SearchResult[JobApplication]:
        stmt = (
            select(JobApplication)
            .where(JobApplication.candidate_id == candidate_id)
            .order_by(JobApplication.submitted_at.desc(), JobApplication.id.desc())
        )
        return await self.search(session, stmt, limit=limit, offset=offset)

    async def list_for_job(
        self,
        session: AsyncSession,
        job_id: int,
        *,
        limit: int,
        offset: int,
    ) -> SearchResult[JobApplication]:
        stmt = (
            select(JobApplication)
            .where(JobApplication.job_id == job_id)
            .order_by(JobApplication.submitted_at.desc(), JobApplication.id.desc())
        )
        return await self.search(session, stmt, limit=limit, offset=offset)


class ApplicationEventRepository(BaseRepository[ApplicationEvent]):
    def __init__(self) -> None:
        super().__init__(ApplicationEvent)

    async def list_for_application(
        self, session: AsyncSession, application_id: int
    ) -> Sequence[ApplicationEvent]:
        """Status history, newest first."""
        stmt = (
            select(ApplicationEvent)
            .where(ApplicationEvent.application_id == application_id)
            .order_by(ApplicationEvent.occurred_at.desc(), ApplicationEvent.id.desc())
        )
        result = await session.execute(stmt)
        return result.scalars().all()


class ApplicationNoteRepository(BaseRepository[ApplicationNote]):
    def __init__(self) -> None:
        super().__init__(ApplicationNote)

    async def list_for_application(
        self, session: AsyncSession, application_id: int
    ) -> Sequence[ApplicationNote]:
        stmt = (
            select(ApplicationNote)
            .where(ApplicationNote.application_id == application_id)
            .order_by(ApplicationNote.created_at.desc(), ApplicationNote.id.desc())
        )
        result = await session.execute(stmt)
        return result.scalars().all()


_application_repository: ApplicationRepository | None = None
_event_repository: ApplicationEventRepository | None = None
_note_repository: ApplicationNoteRepository | None = None


def get_application_repository() -> ApplicationRepository:
    global _application_repository
    if _application_repository is None:
        _application_repository = ApplicationRepository()
    return _application_repository


def get_event_repository() -> ApplicationEventRepository:
    global _event_repository
    if _event_repository is None:
        _event_repository = ApplicationEventRepository()
    return _event_repository


def get_note_repository() -> ApplicationNoteRepository:
    global _note_repository
    if _note_repository is None:
        _note_repository = ApplicationNoteRepository()
    return _note_repository

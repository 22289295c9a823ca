"""Repository for the education feature."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select

from jobboard_service.core.database.repository import BaseRepository, SearchResult
from jobboard_service.features.education.models import UserEducation

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


class EducationRepository(BaseRepository[UserEducation]):
    """Repository for UserEducation model; every query is scoped to one user."""

    def __init__(self) -> None:
        super().__init__(UserEducation)

    async def get_for_user(
        self, session: AsyncSession, user_id: str, education_id: int
    ) -> UserEducation | None:
        stmt = select(UserEducation).where(
            UserEducation.id == education_id,
            UserEducation.user_id == user_id,
        )
        result = await session.execute(stmt)
        return result.scalars().first()

    async def list_for_user(
        self,
        session: AsyncSession,
        user_id: str,
        *,
        limit: int,
        offset: int,
    ) -> SearchResult[UserEducation]:
        stmt = (
            select(UserEducation)
            .where(UserEducation.user_id == user_id)
            .order_by(UserEducation.created_at.desc(), UserEducation.id.desc())
        )
        return await self.search(session, stmt, limit=limit, offset=offset)


_education_repository: EducationRepository | None = None


def get_education_repository() -> EducationRepository:
    global _education_repository
    if _education_repository is None:
        _education_repository = EducationRepository()
    return _education_repository

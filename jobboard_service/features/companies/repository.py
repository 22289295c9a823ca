"""Repositories for the companies feature."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select

from jobboard_service.core.database.repository import BaseRepository
from jobboard_service.features.companies.models import Company, CompanyRecruiter

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


class CompanyRepository(BaseRepository[Company]):
    """Repository for Company model."""

    def __init__(self) -> None:
        super().__init__(Company)

    async def get_by_name(self, session: AsyncSession, name: str) -> Company | None:
        return await self.get_by(session, Company.name, name)

    async def get_primary(self, session: AsyncSession) -> Company | None:
        """The first registered company, served as the public company profile."""
        result = await session.execute(select(Company).order_by(Company.id.asc()).limit(1))
        company = result.scalars().first()

        self._lazy.debug(lambda: f"db.get_primary -> {company.id if company else None}")
        return company


class CompanyRecruiterRepository(BaseRepository[CompanyRecruiter]):
    """Repository for recruiter memberships."""

    def __init__(self) -> None:
        super().__init__(CompanyRecruiter)

    async def get_active(self, session: AsyncSession, recruiter_id: str) -> CompanyRecruiter | None:
        """Active membership of ``recruiter_id``, if any."""
        stmt = select(CompanyRecruiter).where(
            CompanyRecruiter.recruiter_id == recruiter_id,
            CompanyRecruiter.is_active.is_(True),
        )
        result = await session.execute(stmt)
        return result.scalars().first()

    async def recruiter_ids(self, session: AsyncSession, company_id: int) -> list[str]:
        """Every recruiter of the company, active or not."""
        stmt = (
            select(CompanyRecruiter.recruiter_id)
            .where(CompanyRecruiter.company_id == company_id)
            .order_by(CompanyRecruiter.id)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())


_company_repository: CompanyRepository | None = None
_recruiter_repository: CompanyRecruiterRepository | None = None


def get_company_repository() -> CompanyRepository:
    global _company_repository
    if _company_repository is None:
        _company_repository = CompanyRepository()
    return _company_repository


def get_recruiter_repository() -> CompanyRecruiterRepository:
    global _recruiter_repository
    if _recruiter_repository is None:
        _recruiter_repository = CompanyRecruiterRepository()
    return _recruiter_repository

"""Service layer for the companies feature.

Company profiles are read far more often than they change, so they are
cached without expiry and every write drops them. Job postings embed the
company, so a write also drops the public listings and details and the
listings and details of every recruiter of the company.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from jobboard_service.core.exceptions import ConflictException, NotFoundException
from jobboard_service.core.services.base import BaseService
from jobboard_service.features.companies.models import Company, CompanyRecruiter
from jobboard_service.features.companies.repository import (
    CompanyRecruiterRepository,
    CompanyRepository,
    get_company_repository,
    get_recruiter_repository,
)
from jobboard_service.features.companies.schemas import CompanyResponse
from jobboard_service.features.job_postings import keys
from jobboard_service.infra.cache.keys import build_key

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from jobboard_service.features.companies.schemas import (
        CompanyCreate,
        CompanyUpdate,
        RecruiterCreate,
    )
    from jobboard_service.infra.cache import CacheOrchestrator

COMPANY_PATH = "/company"
COMPANY_STATIC_KEY = build_key("company", "static")
HTTP_COMPANY_TAG = build_key("idx", "http", "company")

# No expiry; only writes drop company entries
COMPANY_TTL = 0


def company_detail_key(company_id: int) -> str:
    return build_key("company", "detail", company_id)


class CompanyService(BaseService):
    """Company profiles and recruiter memberships."""

    def __init__(
        self,
        session: AsyncSession,
        cache: CacheOrchestrator,
        repo: CompanyRepository | None = None,
        recruiters: CompanyRecruiterRepository | None = None,
    ) -> None:
        super().__init__()
        self._session = session
        self._cache = cache
        self._repo = repo or get_company_repository()
        self._recruiters = recruiters or get_recruiter_repository()

    async def get_public_company(self, http_key: str | None = None) -> CompanyResponse:
        """Public profile of the primary company.

        Raises:
            NotFoundException: If no company is registered yet.
        """

        async def load() -> dict:
            company = await self._repo.get_primary(self._session)
            if company is None:
                raise NotFoundException(detail="Company not found.", type="company-not-found")
            return CompanyResponse.model_validate(company).model_dump(mode="json")

        payload = await self._cache.get_or_set(COMPANY_STATIC_KEY, load, COMPANY_TTL)
        if http_key:
            await self._cache.track_http(HTTP_COMPANY_TAG, http_key)
        return CompanyResponse.model_validate(payload)

    async def get_company(self, company_id: int, http_key: str | None = None) -> CompanyResponse:
        async def load() -> dict:
            company = await self._get_or_404(company_id)
            return CompanyResponse.model_validate(company).model_dump(mode="json")

        payload = await self._cache.get_or_set(company_detail_key(company_id), load, COMPANY_TTL)
        if http_key:
            await self._cache.track_http(HTTP_COMPANY_TAG, http_key)
        return CompanyResponse.model_validate(payload)

    async def create_company(self, payload: CompanyCreate) -> CompanyResponse:
        """Register a company.

        Raises:
            ConflictException: If the name is taken.
        """
        await self._ensure_name_available(payload.name)

        company = await self._repo.create(self._session, Company(**payload.model_dump()))
        await self._session.commit()

        # The first company becomes the public profile
        await self._invalidate(company.id)

        self.logger.info("Company created", extra={"company_id": company.id})
        return CompanyResponse.model_validate(company)

    async def update_company(self, company_id: int, payload: CompanyUpdate) -> CompanyResponse:
        """Apply a partial update.

        Raises:
            NotFoundException: If the company does not exist.
            ConflictException: If the new name is taken.
        """
        company = await self._get_or_404(company_id)

        changes = payload.model_dump(exclude_unset=True)
        if "name" in changes and changes["name"] != company.name:
            await self._ensure_name_available(changes["name"])
        for field, value in changes.items():
            setattr(company, field, value)

        await self._session.commit()
        await self._session.refresh(company)
        await self._invalidate(company_id)

        self._lazy.debug(lambda: f"service.update_company({company_id}) -> {sorted(changes)}")
        return CompanyResponse.model_validate(company)

    async def add_recruiter(self, company_id: int, payload: RecruiterCreate) -> CompanyRecruiter:
        """Attach a recruiter to a company.

        Raises:
            NotFoundException: If the company does not exist.
            ConflictException: If the recruiter already belongs to a company.
        """
        await self._get_or_404(company_id)

        existing = await self._recruiters.get_by(
            self._session, CompanyRecruiter.recruiter_id, payload.recruiter_id
        )
        if existing is not None:
            raise ConflictException(
                detail="Recruiter is already registered with a company.",
                type="recruiter-exists",
                extra={"recruiter_id": payload.recruiter_id},
            )

        membership = await self._recruiters.create(
            self._session,
            CompanyRecruiter(company_id=company_id, recruiter_id=payload.recruiter_id),
        )
        await self._session.commit()

        self.logger.info(
            "Recruiter added",
            extra={"company_id": company_id, "recruiter_id": payload.recruiter_id},
        )
        return membership

    async def get_recruiter_membership(self, recruiter_id: str) -> CompanyRecruiter:
        """Active membership of a recruiter.

        Raises:
            NotFoundException: If the recruiter belongs to no company.
        """
        membership = await self._recruiters.get_active(self._session, recruiter_id)
        if membership is None:
            raise NotFoundException(
                detail="Recruiter mapping not found.",
                type="recruiter-not-found",
                extra={"recruiter_id": recruiter_id},
            )
        return membership

    async def _get_or_404(self, company_id: int) -> Company:
        company = await self._repo.get(self._session, company_id)
        if company is None:
            raise NotFoundException(
                detail="Company not found.",
                type="company-not-found",
                extra={"company_id": company_id},
            )
        return company

    async def _ensure_name_available(self, name: str) -> None:
        if await self._repo.get_by_name(self._session, name) is not None:
            raise ConflictException(
                detail=f"Company with name '{name}' already exists",
                type="company-name-exists",
                extra={"name": name},
            )

    async def _invalidate(self, company_id: int) -> None:
        # Postings embed the company, so every cached posting view goes too
        recruiter_tags = [
            tag
            for recruiter_id in await self._recruiters.recruiter_ids(self._session, company_id)
            for tag in (
                keys.recruiter_list_tag(recruiter_id),
                keys.recruiter_detail_tag(recruiter_id),
                keys.http_recruiter_list_tag(recruiter_id),
                keys.http_recruiter_detail_tag(recruiter_id),
            )
        ]
        await self._cache.delete(COMPANY_STATIC_KEY, company_detail_key(company_id))
        await self._cache.invalidate_tags(
            [
                HTTP_COMPANY_TAG,
                keys.PUBLIC_LIST_TAG,
                keys.HTTP_PUBLIC_LIST_TAG,
                keys.PUBLIC_DETAIL_TAG,
                keys.HTTP_PUBLIC_DETAIL_TAG,
                *recruiter_tags,
            ]
        )
        await self._cache.forget_http(None, COMPANY_PATH)
        await self._cache.forget_http(None, f"{COMPANY_PATH}/{company_id}")

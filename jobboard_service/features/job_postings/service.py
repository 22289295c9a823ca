"""Service layer for the job postings feature.

Reads are served through the application cache:

- public listing: ``remember_list`` under the public list tag, 60 s
- public detail (id or slug): ``remember_list`` under the public detail tag, 120 s
- recruiter listing: ``remember_list`` under the recruiter's list tag, 5 min
- recruiter detail: ``remember_list`` under the recruiter's detail tag, 5 min

Each read also registers the HTTP key of the request being served, so the
whole-response cache is dropped together with the application keys. Every
write commits first, then invalidates the public and recruiter tags and
deletes the detail keys it knows about.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from jobboard_service.core.exceptions import ForbiddenException, NotFoundException
from jobboard_service.core.services.base import BaseService
from jobboard_service.features.companies.service import CompanyService
from jobboard_service.features.job_postings import keys
from jobboard_service.features.job_postings.models import JobPosting, JobSkill
from jobboard_service.features.job_postings.repository import (
    JobPostingRepository,
    get_job_posting_repository,
)
from jobboard_service.features.job_postings.schemas import (
    JobPostingListResponse,
    JobPostingResponse,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from jobboard_service.core.database import SearchResult
    from jobboard_service.features.job_postings.schemas import (
        JobPostingCreate,
        JobPostingUpdate,
        JobSearchFilters,
    )
    from jobboard_service.infra.cache import CacheOrchestrator

_SLUG_STRIP = re.compile(r"[^a-z0-9\s-]")
_SLUG_SPACES = re.compile(r"\s+")

# Fields an update may clear by sending null
_NULLABLE_FIELDS = frozenset({"location", "salary_min", "salary_max", "salary_currency"})


def slugify(title: str) -> str:
    """Lowercase, drop punctuation, join words with hyphens."""
    slug = _SLUG_SPACES.sub("-", _SLUG_STRIP.sub("", title.lower()).strip())
    return slug or "job"


def _page_payload(result: SearchResult[JobPosting], page: int, limit: int) -> dict[str, Any]:
    return JobPostingListResponse(
        items=[JobPostingResponse.model_validate(posting) for posting in result.items],
        total=result.total,
        page=page,
        limit=limit,
        pages=result.pages,
    ).model_dump(mode="json")


class JobPostingService(BaseService):
    """Recruiter management of job postings and the public job board."""

    def __init__(
        self,
        session: AsyncSession,
        cache: CacheOrchestrator,
        repo: JobPostingRepository | None = None,
        companies: CompanyService | None = None,
    ) -> None:
        super().__init__()
        self._session = session
        self._cache = cache
        self._repo = repo or get_job_posting_repository()
        self._companies = companies or CompanyService(session, cache)

    # ──────────────────────────────────────────────────────────────
    # Public reads
    # ──────────────────────────────────────────────────────────────

    async def list_published(
        self,
        filters: JobSearchFilters,
        *,
        page: int = 1,
        limit: int = 10,
        http_key: str | None = None,
    ) -> JobPostingListResponse:
        """Published postings matching ``filters``, newest first."""
        segments = keys.filter_segments(filters.model_dump(mode="json", exclude_none=True))
        key = keys.public_list_key(segments, page, limit)

        async def load() -> dict[str, Any]:
            result = await self._repo.search_published(
                self._session, filters, limit=limit, offset=(page - 1) * limit
            )
            return _page_payload(result, page, limit)

        payload = await self._cache.remember_list(
            keys.PUBLIC_LIST_TAG, key, load, keys.PUBLIC_LIST_TTL
        )
        if http_key:
            await self._cache.track_http(keys.HTTP_PUBLIC_LIST_TAG, http_key)
        return JobPostingListResponse.model_validate(payload)

    async def get_published(
        self, identifier: str, http_key: str | None = None
    ) -> JobPostingResponse:
        """Published posting by id or slug.

        Raises:
            NotFoundException: If no published posting matches. Not cached.
        """

        async def load() -> dict[str, Any]:
            posting = await self._repo.get_published(self._session, identifier)
            if posting is None:
                raise NotFoundException(
                    detail="Job posting not found or not published.",
                    type="job-posting-not-found",
                    extra={"identifier": identifier},
                )
            return JobPostingResponse.model_validate(posting).model_dump(mode="json")

        payload = await self._cache.remember_list(
            keys.PUBLIC_DETAIL_TAG,
            keys.public_detail_key(identifier),
            load,
            keys.PUBLIC_DETAIL_TTL,
        )
        response = JobPostingResponse.model_validate(payload)
        if http_key:
            await self._cache.track_http(keys.http_public_detail_tag(response.id), http_key)
            await self._cache.track_http(keys.HTTP_PUBLIC_DETAIL_TAG, http_key)
        return response

    # ──────────────────────────────────────────────────────────────
    # Recruiter reads
    # ──────────────────────────────────────────────────────────────

    async def list_for_recruiter(
        self,
        recruiter_id: str,
        *,
        page: int = 1,
        limit: int = 10,
        http_key: str | None = None,
    ) -> JobPostingListResponse:
        key = keys.recruiter_list_key(recruiter_id, page, limit)

        async def load() -> dict[str, Any]:
            result = await self._repo.list_for_recruiter(
                self._session, recruiter_id, limit=limit, offset=(page - 1) * limit
            )
            return _page_payload(result, page, limit)

        payload = await self._cache.remember_list(
            keys.recruiter_list_tag(recruiter_id), key, load, keys.RECRUITER_TTL
        )
        if http_key:
            await self._cache.track_http(keys.http_recruiter_list_tag(recruiter_id), http_key)
        return JobPostingListResponse.model_validate(payload)

    async def get_for_recruiter(
        self, recruiter_id: str, job_id: int, http_key: str | None = None
    ) -> JobPostingResponse:
        """A recruiter's own posting, published or not.

        Raises:
            NotFoundException: If the posting does not exist.
            ForbiddenException: If another recruiter owns it.
        """

        async def load() -> dict[str, Any]:
            posting = await self._get_owned(recruiter_id, job_id, action="access")
            return JobPostingResponse.model_validate(posting).model_dump(mode="json")

        payload = await self._cache.remember_list(
            keys.recruiter_detail_tag(recruiter_id),
            keys.recruiter_detail_key(recruiter_id, job_id),
            load,
            keys.RECRUITER_TTL,
        )
        if http_key:
            await self._cache.track_http(keys.http_recruiter_detail_tag(recruiter_id), http_key)
        return JobPostingResponse.model_validate(payload)

    # ──────────────────────────────────────────────────────────────
    # Recruiter writes
    # ──────────────────────────────────────────────────────────────

    async def create_job_posting(
        self, recruiter_id: str, payload: JobPostingCreate
    ) -> JobPostingResponse:
        """Create a posting under the recruiter's company.

        Raises:
            NotFoundException: If the recruiter belongs to no company.
        """
        membership = await self._companies.get_recruiter_membership(recruiter_id)

        data = payload.model_dump(mode="json", exclude={"skills"})
        posting = JobPosting(
            **data,
            company_id=membership.company_id,
            recruiter_id=recruiter_id,
            slug=await self._unique_slug(payload.title),
            skills=[JobSkill(name=name) for name in payload.skills],
        )
        posting = await self._repo.create(self._session, posting)
        await self._session.commit()

        await self._invalidate(recruiter_id, posting.id, posting.slug)

        self.logger.info(
            "Job posting created",
            extra={"job_id": posting.id, "recruiter_id": recruiter_id, "slug": posting.slug},
        )
        return JobPostingResponse.model_validate(posting)

    async def update_job_posting(
        self, recruiter_id: str, job_id: int, payload: JobPostingUpdate
    ) -> JobPostingResponse:
        """Apply a partial update; a new title also changes the slug.

        Raises:
            NotFoundException: If the posting does not exist.
            ForbiddenException: If another recruiter owns it.
        """
        posting = await self._get_owned(recruiter_id, job_id, action="update")
        old_slug = posting.slug

        changes = {
            field: value
            for field, value in payload.model_dump(mode="json", exclude_unset=True).items()
            if value is not None or field in _NULLABLE_FIELDS
        }
        skills = changes.pop("skills", None)
        if "title" in changes:
            posting.slug = await self._unique_slug(changes["title"], exclude_id=job_id)
        for field, value in changes.items():
            setattr(posting, field, value)
        if skills is not None:
            posting.skills = [JobSkill(name=name) for name in skills]

        await self._session.commit()
        await self._session.refresh(posting)

        await self._invalidate(recruiter_id, job_id, old_slug, posting.slug)

        self._lazy.debug(lambda: f"service.update_job_posting({job_id}) -> {sorted(changes)}")
        return JobPostingResponse.model_validate(posting)

    async def publish_job_posting(self, recruiter_id: str, job_id: int) -> JobPostingResponse:
        posting = await self._get_owned(recruiter_id, job_id, action="publish")
        posting.is_published = True

        await self._session.commit()
        await self._session.refresh(posting)

        await self._invalidate(recruiter_id, job_id, posting.slug)

        self.logger.info("Job posting published", extra={"job_id": job_id})
        return JobPostingResponse.model_validate(posting)

    async def delete_job_posting(self, recruiter_id: str, job_id: int) -> None:
        posting = await self._get_owned(recruiter_id, job_id, action="delete")
        slug = posting.slug

        await self._repo.delete(self._session, posting)
        await self._session.commit()

        await self._invalidate(recruiter_id, job_id, slug)

    # ──────────────────────────────────────────────────────────────
    # Helpers
    # ──────────────────────────────────────────────────────────────

    async def _get_owned(self, recruiter_id: str, job_id: int, *, action: str) -> JobPosting:
        posting = await self._repo.get(self._session, job_id)
        if posting is None:
            raise NotFoundException(
                detail="Job posting not found.",
                type="job-posting-not-found",
                extra={"job_id": job_id},
            )
        if posting.recruiter_id != recruiter_id:
            raise ForbiddenException(
                detail=f"You can only {action} your own job postings.",
                extra={"job_id": job_id},
            )
        return posting

    async def _unique_slug(self, title: str, *, exclude_id: int | None = None) -> str:
        base = slugify(title)
        slug, counter = base, 1
        while await self._repo.slug_exists(self._session, slug, exclude_id=exclude_id):
            slug = f"{base}-{counter}"
            counter += 1
        return slug

    async def _invalidate(self, recruiter_id: str, job_id: int, *slugs: str) -> None:
        detail_keys = dict.fromkeys(
            [
                keys.public_detail_key(job_id),
                *(keys.public_detail_key(slug) for slug in slugs),
                keys.recruiter_detail_key(recruiter_id, job_id),
            ]
        )
        await self._cache.delete(*detail_keys)
        await self._cache.invalidate_tags(
            [
                keys.PUBLIC_LIST_TAG,
                keys.HTTP_PUBLIC_LIST_TAG,
                keys.http_public_detail_tag(job_id),
                keys.recruiter_list_tag(recruiter_id),
                keys.http_recruiter_list_tag(recruiter_id),
                keys.http_recruiter_detail_tag(recruiter_id),
            ]
        )
        # Base listing URL without query parameters
        await self._cache.forget_http(None, keys.PUBLIC_LIST_PATH)

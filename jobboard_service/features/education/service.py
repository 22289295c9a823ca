"""Service layer for the education feature.

Entries are private to their user, so every key, tag and HTTP key carries
the user id. The listing is cached with ``remember_list`` under
``idx|user|education|list|{uid}``; the HTTP responses of the listing are
tracked under ``idx|http|user|education|list|{uid}``. Writes invalidate both
tags and delete the detail keys.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from jobboard_service.core.exceptions import NotFoundException, ValidationException
from jobboard_service.core.services.base import BaseService
from jobboard_service.features.education.models import UserEducation
from jobboard_service.features.education.repository import (
    EducationRepository,
    get_education_repository,
)
from jobboard_service.features.education.schemas import (
    EducationListResponse,
    EducationResponse,
)
from jobboard_service.infra.cache.keys import build_key

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from jobboard_service.features.education.schemas import EducationCreate, EducationUpdate
    from jobboard_service.infra.cache import CacheOrchestrator

EDUCATION_PATH = "/user/education"
EDUCATION_TTL = 300

# Fields an update may clear by sending null
_NULLABLE_FIELDS = frozenset({"from_month", "to_month", "description"})


def list_tag(user_id: str) -> str:
    return build_key("idx", "user", "education", "list", user_id)


def http_list_tag(user_id: str) -> str:
    return build_key("idx", "http", "user", "education", "list", user_id)


def list_key(user_id: str, page: int, limit: int) -> str:
    return build_key("user", "education", "list", user_id, page, limit)


def detail_key(user_id: str, education_id: int) -> str:
    return build_key("user", "education", "detail", user_id, education_id)


class EducationService(BaseService):
    """CRUD over the calling user's education entries."""

    def __init__(
        self,
        session: AsyncSession,
        cache: CacheOrchestrator,
        repo: EducationRepository | None = None,
    ) -> None:
        super().__init__()
        self._session = session
        self._cache = cache
        self._repo = repo or get_education_repository()

    async def list_entries(
        self,
        user_id: str,
        *,
        page: int = 1,
        limit: int = 10,
        http_key: str | None = None,
    ) -> EducationListResponse:
        async def load() -> dict[str, Any]:
            result = await self._repo.list_for_user(
                self._session, user_id, limit=limit, offset=(page - 1) * limit
            )
            return EducationListResponse(
                items=[EducationResponse.model_validate(entry) for entry in result.items],
                total=result.total,
                page=page,
                limit=limit,
                pages=result.pages,
            ).model_dump(mode="json")

        payload = await self._cache.remember_list(
            list_tag(user_id), list_key(user_id, page, limit), load, EDUCATION_TTL
        )
        if http_key:
            await self._cache.track_http(http_list_tag(user_id), http_key)
        return EducationListResponse.model_validate(payload)

    async def get_entry(self, user_id: str, education_id: int) -> EducationResponse:
        """One entry of the user.

        Raises:
            NotFoundException: If the entry does not exist or belongs to
                another user.
        """

        async def load() -> dict[str, Any]:
            entry = await self._get_or_404(user_id, education_id)
            return EducationResponse.model_validate(entry).model_dump(mode="json")

        payload = await self._cache.get_or_set(
            detail_key(user_id, education_id), load, EDUCATION_TTL
        )
        return EducationResponse.model_validate(payload)

    async def create_entry(self, user_id: str, payload: EducationCreate) -> EducationResponse:
        entry = UserEducation(user_id=user_id, **payload.model_dump(mode="json"))
        entry = await self._repo.create(self._session, entry)
        await self._session.commit()

        await self._invalidate(user_id)

        self.logger.info(
            "Education entry created", extra={"education_id": entry.id, "user_id": user_id}
        )
        return EducationResponse.model_validate(entry)

    async def update_entry(
        self, user_id: str, education_id: int, payload: EducationUpdate
    ) -> EducationResponse:
        """Apply a partial update.

        Raises:
            NotFoundException: If the entry does not exist.
            ValidationException: If the merged period ends before it starts.
        """
        entry = await self._get_or_404(user_id, education_id)

        changes = {
            field: value
            for field, value in payload.model_dump(mode="json", exclude_unset=True).items()
            if value is not None or field in _NULLABLE_FIELDS
        }
        for field, value in changes.items():
            setattr(entry, field, value)

        start = (entry.from_year, entry.from_month or 1)
        end = (entry.to_year, entry.to_month or 12)
        if end < start:
            await self._session.rollback()
            raise ValidationException(
                detail="Education period ends before it starts",
                type="invalid-education-period",
                extra={"education_id": education_id},
            )

        await self._session.commit()
        await self._session.refresh(entry)

        await self._invalidate(user_id, education_id)

        self._lazy.debug(lambda: f"service.update_entry({education_id}) -> {sorted(changes)}")
        return EducationResponse.model_validate(entry)

    async def delete_entry(self, user_id: str, education_id: int) -> None:
        entry = await self._get_or_404(user_id, education_id)

        await self._repo.delete(self._session, entry)
        await self._session.commit()

        await self._invalidate(user_id, education_id)

    async def _get_or_404(self, user_id: str, education_id: int) -> UserEducation:
        entry = await self._repo.get_for_user(self._session, user_id, education_id)
        if entry is None:
            raise NotFoundException(
                detail="User education not found.",
                type="education-not-found",
                extra={"education_id": education_id},
            )
        return entry

    async def _invalidate(self, user_id: str, education_id: int | None = None) -> None:
        if education_id is not None:
            await self._cache.delete(detail_key(user_id, education_id))
            await self._cache.forget_http(user_id, f"{EDUCATION_PATH}/{education_id}")
        await self._cache.invalidate_tags([list_tag(user_id), http_list_tag(user_id)])
        # Base listing URL without query parameters
        await self._cache.forget_http(user_id, EDUCATION_PATH)

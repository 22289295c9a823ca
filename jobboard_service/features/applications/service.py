"""Service layer for the applications feature.

Candidates see their own applications; recruiters see the applications to
their own postings, with notes and status history. Both sides are cached
for five minutes:

- candidate listing: ``remember_list`` under the candidate's list tag
- candidate detail: ``get_or_set``
- recruiter listing per posting: ``remember_list`` under the recruiter's list tag
- recruiter detail, notes and events: ``remember_list`` under the recruiter's
  detail tag

Every read registers the HTTP key it serves under the caller's HTTP tag.
Writes that change an application (apply, withdraw, status update) commit,
then drop both sides: the candidate's and the recruiter's list and HTTP
tags and the detail keys of that application. Notes are recruiter-only, so
adding one drops only the recruiter side.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from jobboard_service.core.exceptions import (
    BadRequestException,
    ConflictException,
    ForbiddenException,
    NotFoundException,
)
from jobboard_service.core.services.base import BaseService
from jobboard_service.features.applications import keys
from jobboard_service.features.applications.models import (
    ApplicationEvent,
    ApplicationNote,
    JobApplication,
)
from jobboard_service.features.applications.repository import (
    ApplicationEventRepository,
    ApplicationNoteRepository,
    ApplicationRepository,
    get_application_repository,
    get_event_repository,
    get_note_repository,
)
from jobboard_service.features.applications.schemas import (
    ApplicationListResponse,
    ApplicationResponse,
    ApplicationStatus,
    EventResponse,
    NoteResponse,
)
from jobboard_service.features.job_postings.repository import (
    JobPostingRepository,
    get_job_posting_repository,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from jobboard_service.core.database import SearchResult
    from jobboard_service.features.applications.schemas import (
        ApplicationCreate,
        NoteCreate,
        StatusUpdate,
    )
    from jobboard_service.infra.cache import CacheOrchestrator

# Candidates may not withdraw from these
_FINAL_FOR_CANDIDATE = {
    ApplicationStatus.WITHDRAWN.value: (
        "Application has already been withdrawn.",
        "application-withdrawn",
    ),
    ApplicationStatus.HIRED.value: (
        "Cannot withdraw a hired application.",
        "application-hired",
    ),
}


def _page_payload(result: SearchResult[JobApplication], page: int, limit: int) -> dict[str, Any]:
    return ApplicationListResponse(
        items=[ApplicationResponse.model_validate(application) for application in result.items],
        total=result.total,
        page=page,
        limit=limit,
        pages=result.pages,
    ).model_dump(mode="json")


class ApplicationService(BaseService):
    """Applications from the candidate side and the recruiter side."""

    def __init__(
        self,
        session: AsyncSession,
        cache: CacheOrchestrator,
        repo: ApplicationRepository | None = None,
        events: ApplicationEventRepository | None = None,
        notes: ApplicationNoteRepository | None = None,
        postings: JobPostingRepository | None = None,
    ) -> None:
        super().__init__()
        self._session = session
        self._cache = cache
        self._repo = repo or get_application_repository()
        self._events = events or get_event_repository()
        self._notes = notes or get_note_repository()
        self._postings = postings or get_job_posting_repository()

    # ──────────────────────────────────────────────────────────────
    # Candidate side
    # ──────────────────────────────────────────────────────────────

    async def list_for_candidate(
        self,
        candidate_id: str,
        *,
        page: int = 1,
        limit: int = 10,
        http_key: str | None = None,
    ) -> ApplicationListResponse:
        """The candidate's applications, most recently submitted first."""

        async def load() -> dict[str, Any]:
            result = await self._repo.list_for_candidate(
                self._session, candidate_id, limit=limit, offset=(page - 1) * limit
            )
            return _page_payload(result, page, limit)

        payload = await self._cache.remember_list(
            keys.candidate_list_tag(candidate_id),
            keys.candidate_list_key(candidate_id, page, limit),
            load,
            keys.APPLICATION_TTL,
        )
        if http_key:
            await self._cache.track_http(keys.http_candidate_tag(candidate_id), http_key)
        return ApplicationListResponse.model_validate(payload)

    async def get_for_candidate(
        self, candidate_id: str, application_id: int, http_key: str | None = None
    ) -> ApplicationResponse:
        """Raises:
        NotFoundException: If the application does not exist.
        ForbiddenException: If another candidate submitted it.
        """

        async def load() -> dict[str, Any]:
            application = await self._get_or_404(application_id)
            if application.candidate_id != candidate_id:
                raise ForbiddenException(
                    detail="You can only access your own applications.",
                    extra={"application_id": application_id},
                )
            return ApplicationResponse.model_validate(application).model_dump(mode="json")

        payload = await self._cache.get_or_set(
            keys.candidate_detail_key(candidate_id, application_id), load, keys.APPLICATION_TTL
        )
        if http_key:
            await self._cache.track_http(keys.http_candidate_tag(candidate_id), http_key)
        return ApplicationResponse.model_validate(payload)

    async def apply(self, candidate_id: str, payload: ApplicationCreate) -> ApplicationResponse:
        """Submit an application to a published posting.

        Raises:
            NotFoundException: If the posting does not exist.
            BadRequestException: If the posting is not published.
            ConflictException: If the candidate already applied to it.
        """
        posting = await self._postings.get(self._session, payload.job_id)
        if posting is None:
            raise NotFoundException(
                detail="Job posting not found.",
                type="job-posting-not-found",
                extra={"job_id": payload.job_id},
            )
        if not posting.is_published:
            raise BadRequestException(
                detail="Job posting is not published.",
                type="job-posting-not-published",
                extra={"job_id": payload.job_id},
            )
        existing = await self._repo.get_for_candidate_and_job(
            self._session, candidate_id, payload.job_id
        )
        if existing is not None:
            raise ConflictException(
                detail="You have already applied to this job posting.",
                type="application-exists",
                extra={"job_id": payload.job_id, "application_id": existing.id},
            )

        application = JobApplication(
            **payload.model_dump(mode="python"),
            candidate_id=candidate_id,
            status=ApplicationStatus.APPLIED.value,
        )
        application = await self._repo.create(self._session, application)
        await self._events.create(
            self._session,
            ApplicationEvent(
                application_id=application.id, status=ApplicationStatus.APPLIED.value
            ),
        )
        await self._session.commit()

        await self._invalidate(application, posting.recruiter_id)

        self.logger.info(
            "Application submitted",
            extra={
                "application_id": application.id,
                "job_id": posting.id,
                "candidate_id": candidate_id,
            },
        )
        return ApplicationResponse.model_validate(application)

    async def withdraw(self, candidate_id: str, application_id: int) -> ApplicationResponse:
        """Withdraw the candidate's application.

        Raises:
            NotFoundException: If the application does not exist.
            ForbiddenException: If another candidate submitted it.
            BadRequestException: If it is already withdrawn or hired.
        """
        application = await self._get_or_404(application_id)
        if application.candidate_id != candidate_id:
            raise ForbiddenException(
                detail="You can only withdraw your own applications.",
                extra={"application_id": application_id},
            )
        if application.status in _FINAL_FOR_CANDIDATE:
            detail, error_type = _FINAL_FOR_CANDIDATE[application.status]
            raise BadRequestException(
                detail=detail,
                type=error_type,
                extra={"application_id": application_id, "status": application.status},
            )

        application.status = ApplicationStatus.WITHDRAWN.value
        await self._events.create(
            self._session,
            ApplicationEvent(
                application_id=application_id,
                status=ApplicationStatus.WITHDRAWN.value,
                note="Application withdrawn by candidate",
            ),
        )
        await self._session.commit()
        await self._session.refresh(application)

        await self._invalidate(application, application.job.recruiter_id)

        self.logger.info("Application withdrawn", extra={"application_id": application_id})
        return ApplicationResponse.model_validate(application)

    # ──────────────────────────────────────────────────────────────
    # Recruiter side
    # ──────────────────────────────────────────────────────────────

    async def list_for_job(
        self,
        recruiter_id: str,
        job_id: int,
        *,
        page: int = 1,
        limit: int = 10,
        http_key: str | None = None,
    ) -> ApplicationListResponse:
        """Applications to one of the recruiter's postings.

        Raises:
            NotFoundException: If the posting does not exist.
            ForbiddenException: If another recruiter owns it.
        """

        async def load() -> dict[str, Any]:
            posting = await self._postings.get(self._session, job_id)
            if posting is None:
                raise NotFoundException(
                    detail="Job posting not found.",
                    type="job-posting-not-found",
                    extra={"job_id": job_id},
                )
            if posting.recruiter_id != recruiter_id:
                raise ForbiddenException(
                    detail="You can only access applications for your own job postings.",
                    extra={"job_id": job_id},
                )
            result = await self._repo.list_for_job(
                self._session, job_id, limit=limit, offset=(page - 1) * limit
            )
            return _page_payload(result, page, limit)

        payload = await self._cache.remember_list(
            keys.recruiter_list_tag(recruiter_id),
            keys.recruiter_list_key(recruiter_id, job_id, page, limit),
            load,
            keys.APPLICATION_TTL,
        )
        if http_key:
            await self._cache.track_http(keys.http_recruiter_tag(recruiter_id), http_key)
        return ApplicationListResponse.model_validate(payload)

    async def get_for_recruiter(
        self, recruiter_id: str, application_id: int, http_key: str | None = None
    ) -> ApplicationResponse:
        async def load() -> dict[str, Any]:
            application = await self._get_reviewable(recruiter_id, application_id, action="access")
            return ApplicationResponse.model_validate(application).model_dump(mode="json")

        payload = await self._cache.remember_list(
            keys.recruiter_detail_tag(recruiter_id),
            keys.recruiter_detail_key(recruiter_id, application_id),
            load,
            keys.APPLICATION_TTL,
        )
        if http_key:
            await self._cache.track_http(keys.http_recruiter_tag(recruiter_id), http_key)
        return ApplicationResponse.model_validate(payload)

    async def list_notes(
        self, recruiter_id: str, application_id: int, http_key: str | None = None
    ) -> list[NoteResponse]:
        """Notes on the application, newest first."""

        async def load() -> list[dict[str, Any]]:
            await self._get_reviewable(recruiter_id, application_id, action="access notes of")
            notes = await self._notes.list_for_application(self._session, application_id)
            return [NoteResponse.model_validate(note).model_dump(mode="json") for note in notes]

        payload = await self._cache.remember_list(
            keys.recruiter_detail_tag(recruiter_id),
            keys.recruiter_notes_key(recruiter_id, application_id),
            load,
            keys.APPLICATION_TTL,
        )
        if http_key:
            await self._cache.track_http(keys.http_recruiter_tag(recruiter_id), http_key)
        return [NoteResponse.model_validate(note) for note in payload]

    async def list_events(
        self, recruiter_id: str, application_id: int, http_key: str | None = None
    ) -> list[EventResponse]:
        """Status history of the application, newest first."""

        async def load() -> list[dict[str, Any]]:
            await self._get_reviewable(recruiter_id, application_id, action="access events of")
            events = await self._events.list_for_application(self._session, application_id)
            return [EventResponse.model_validate(event).model_dump(mode="json") for event in events]

        payload = await self._cache.remember_list(
            keys.recruiter_detail_tag(recruiter_id),
            keys.recruiter_events_key(recruiter_id, application_id),
            load,
            keys.APPLICATION_TTL,
        )
        if http_key:
            await self._cache.track_http(keys.http_recruiter_tag(recruiter_id), http_key)
        return [EventResponse.model_validate(event) for event in payload]

    async def update_status(
        self, recruiter_id: str, application_id: int, payload: StatusUpdate
    ) -> EventResponse:
        """Move the application to a new status and record the change.

        Raises:
            NotFoundException: If the application does not exist.
            ForbiddenException: If another recruiter owns the posting.
        """
        application = await self._get_reviewable(recruiter_id, application_id, action="update")
        previous = application.status

        application.status = payload.status.value
        event = await self._events.create(
            self._session,
            ApplicationEvent(
                application_id=application_id,
                status=payload.status.value,
                note=payload.note,
            ),
        )
        await self._session.commit()

        await self._invalidate(application, recruiter_id)

        self.logger.info(
            "Application status changed",
            extra={
                "application_id": application_id,
                "from_status": previous,
                "to_status": payload.status.value,
            },
        )
        return EventResponse.model_validate(event)

    async def add_note(
        self, recruiter_id: str, application_id: int, payload: NoteCreate
    ) -> NoteResponse:
        await self._get_reviewable(recruiter_id, application_id, action="add notes to")

        note = await self._notes.create(
            self._session,
            ApplicationNote(
                application_id=application_id,
                author_recruiter_id=recruiter_id,
                note=payload.note,
            ),
        )
        await self._session.commit()

        await self._cache.delete(keys.recruiter_notes_key(recruiter_id, application_id))
        await self._cache.invalidate(keys.http_recruiter_tag(recruiter_id))

        self._lazy.debug(lambda: f"service.add_note({application_id}) -> note {note.id}")
        return NoteResponse.model_validate(note)

    # ──────────────────────────────────────────────────────────────
    # Helpers
    # ──────────────────────────────────────────────────────────────

    async def _get_or_404(self, application_id: int) -> JobApplication:
        application = await self._repo.get(self._session, application_id)
        if application is None:
            raise NotFoundException(
                detail="Job application not found.",
                type="application-not-found",
                extra={"application_id": application_id},
            )
        return application

    async def _get_reviewable(
        self, recruiter_id: str, application_id: int, *, action: str
    ) -> JobApplication:
        application = await self._get_or_404(application_id)
        if application.job.recruiter_id != recruiter_id:
            raise ForbiddenException(
                detail=f"You can only {action} applications for your own job postings.",
                extra={"application_id": application_id},
            )
        return application

    async def _invalidate(self, application: JobApplication, recruiter_id: str) -> None:
        candidate_id = application.candidate_id
        await self._cache.delete(
            keys.candidate_detail_key(candidate_id, application.id),
            keys.recruiter_detail_key(recruiter_id, application.id),
            keys.recruiter_events_key(recruiter_id, application.id),
        )
        await self._cache.invalidate_tags(
            [
                keys.candidate_list_tag(candidate_id),
                keys.http_candidate_tag(candidate_id),
                keys.recruiter_list_tag(recruiter_id),
                keys.http_recruiter_tag(recruiter_id),
            ]
        )
        # Base listing URLs without query parameters
        await self._cache.forget_http(candidate_id, keys.CANDIDATE_PATH)
        await self._cache.forget_http(
            recruiter_id, f"{keys.APPLICATIONS_PATH}/job/{application.job_id}"
        )

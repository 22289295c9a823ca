"""Unit tests for ApplicationService against SQLite and an in-memory cache."""
from __future__ import annotations

import pytest

from jobboard_service.core.exceptions import (
    BadRequestException,
    ConflictException,
    ForbiddenException,
    NotFoundException,
)
from jobboard_service.features.applications import keys
from jobboard_service.features.applications.schemas import (
    ApplicationCreate,
    ApplicationStatus,
    NoteCreate,
    StatusUpdate,
)
from jobboard_service.features.applications.service import ApplicationService
from jobboard_service.features.companies.schemas import CompanyCreate, RecruiterCreate
from jobboard_service.features.companies.service import CompanyService
from jobboard_service.features.job_postings.schemas import JobPostingCreate
from jobboard_service.features.job_postings.service import JobPostingService
from tests.helpers import CANDIDATE_ID, OTHER_RECRUITER_ID, RECRUITER_ID, InMemoryCacheStore

OTHER_CANDIDATE_ID = "candidate-2"


@pytest.fixture
async def postings(db_session, orchestrator) -> JobPostingService:
    companies = CompanyService(db_session, orchestrator)
    company = await companies.create_company(CompanyCreate(name="Acme"))
    for recruiter_id in (RECRUITER_ID, OTHER_RECRUITER_ID):
        await companies.add_recruiter(company.id, RecruiterCreate(recruiter_id=recruiter_id))
    return JobPostingService(db_session, orchestrator)


@pytest.fixture
async def job_id(postings: JobPostingService) -> int:
    posting = await postings.create_job_posting(
        RECRUITER_ID, JobPostingCreate(title="Backend Engineer", description="Python")
    )
    await postings.publish_job_posting(RECRUITER_ID, posting.id)
    return posting.id


@pytest.fixture
def service(db_session, orchestrator) -> ApplicationService:
    return ApplicationService(db_session, orchestrator)


@pytest.mark.unit
class TestApply:
    """Test suite for submitting applications."""

    async def test_apply_records_the_first_event(self, service: ApplicationService, job_id: int):
        application = await service.apply(
            CANDIDATE_ID,
            ApplicationCreate(job_id=job_id, expected_salary=70000, salary_currency="eur"),
        )

        assert application.status is ApplicationStatus.APPLIED
        assert application.candidate_id == CANDIDATE_ID
        assert application.salary_currency == "EUR"
        assert application.job.title == "Backend Engineer"
        assert application.job.company_name == "Acme"

        events = await service.list_events(RECRUITER_ID, application.id)
        assert [event.status for event in events] == [ApplicationStatus.APPLIED]

    async def test_unknown_posting_raises_not_found(self, service: ApplicationService, job_id: int):
        with pytest.raises(NotFoundException) as exc_info:
            await service.apply(CANDIDATE_ID, ApplicationCreate(job_id=job_id + 100))

        assert exc_info.value.type == "job-posting-not-found"

    async def test_unpublished_posting_is_rejected(
        self, service: ApplicationService, postings: JobPostingService
    ):
        draft = await postings.create_job_posting(
            RECRUITER_ID, JobPostingCreate(title="Draft", description="Not yet")
        )

        with pytest.raises(BadRequestException) as exc_info:
            await service.apply(CANDIDATE_ID, ApplicationCreate(job_id=draft.id))

        assert exc_info.value.status_code == 400
        assert exc_info.value.type == "job-posting-not-published"

    async def test_second_application_conflicts(self, service: ApplicationService, job_id: int):
        await service.apply(CANDIDATE_ID, ApplicationCreate(job_id=job_id))

        with pytest.raises(ConflictException):
            await service.apply(CANDIDATE_ID, ApplicationCreate(job_id=job_id))

        other = await service.apply(OTHER_CANDIDATE_ID, ApplicationCreate(job_id=job_id))
        assert other.candidate_id == OTHER_CANDIDATE_ID


@pytest.mark.unit
class TestCandidateSide:
    """Test suite for the candidate's reads and withdrawals."""

    async def test_listing_is_tagged_per_candidate(
        self, service: ApplicationService, job_id: int, cache_store: InMemoryCacheStore
    ):
        await service.apply(CANDIDATE_ID, ApplicationCreate(job_id=job_id))

        page = await service.list_for_candidate(
            CANDIDATE_ID, http_key="u:candidate-1|/job-application/my-applications"
        )

        assert page.total == 1
        list_key = keys.candidate_list_key(CANDIDATE_ID, 1, 10)
        assert cache_store.sets[f"tag:{keys.candidate_list_tag(CANDIDATE_ID)}"] == {list_key}
        assert cache_store.sets[f"tag:{keys.http_candidate_tag(CANDIDATE_ID)}"] == {
            "u:candidate-1|/job-application/my-applications"
        }
        assert cache_store.ttls[list_key] == keys.APPLICATION_TTL

    async def test_other_candidates_application_is_forbidden(
        self, service: ApplicationService, job_id: int, cache_store: InMemoryCacheStore
    ):
        application = await service.apply(CANDIDATE_ID, ApplicationCreate(job_id=job_id))

        with pytest.raises(ForbiddenException):
            await service.get_for_candidate(OTHER_CANDIDATE_ID, application.id)

        assert keys.candidate_detail_key(OTHER_CANDIDATE_ID, application.id) not in (
            cache_store.values
        )

    async def test_withdraw_records_event_and_refreshes_both_sides(
        self, service: ApplicationService, job_id: int, cache_store: InMemoryCacheStore
    ):
        application = await service.apply(CANDIDATE_ID, ApplicationCreate(job_id=job_id))
        await service.list_for_candidate(CANDIDATE_ID)
        await service.list_for_job(RECRUITER_ID, job_id)

        withdrawn = await service.withdraw(CANDIDATE_ID, application.id)

        assert withdrawn.status is ApplicationStatus.WITHDRAWN
        assert keys.candidate_list_key(CANDIDATE_ID, 1, 10) not in cache_store.values
        assert keys.recruiter_list_key(RECRUITER_ID, job_id, 1, 10) not in cache_store.values

        events = await service.list_events(RECRUITER_ID, application.id)
        assert events[0].status is ApplicationStatus.WITHDRAWN
        assert events[0].note == "Application withdrawn by candidate"

    async def test_withdraw_twice_is_rejected(self, service: ApplicationService, job_id: int):
        application = await service.apply(CANDIDATE_ID, ApplicationCreate(job_id=job_id))
        await service.withdraw(CANDIDATE_ID, application.id)

        with pytest.raises(BadRequestException) as exc_info:
            await service.withdraw(CANDIDATE_ID, application.id)

        assert exc_info.value.detail == "Application has already been withdrawn."

    async def test_hired_application_cannot_be_withdrawn(
        self, service: ApplicationService, job_id: int
    ):
        application = await service.apply(CANDIDATE_ID, ApplicationCreate(job_id=job_id))
        await service.update_status(
            RECRUITER_ID, application.id, StatusUpdate(status=ApplicationStatus.HIRED)
        )

        with pytest.raises(BadRequestException) as exc_info:
            await service.withdraw(CANDIDATE_ID, application.id)

        assert exc_info.value.type == "application-hired"

    async def test_only_the_applicant_can_withdraw(self, service: ApplicationService, job_id: int):
        application = await service.apply(CANDIDATE_ID, ApplicationCreate(job_id=job_id))

        with pytest.raises(ForbiddenException):
            await service.withdraw(OTHER_CANDIDATE_ID, application.id)


@pytest.mark.unit
class TestRecruiterSide:
    """Test suite for the recruiter's reviews."""

    async def test_other_recruiter_cannot_list_applications(
        self, service: ApplicationService, job_id: int
    ):
        with pytest.raises(ForbiddenException):
            await service.list_for_job(OTHER_RECRUITER_ID, job_id)

        with pytest.raises(NotFoundException):
            await service.list_for_job(RECRUITER_ID, job_id + 100)

    async def test_status_update_refreshes_candidate_and_recruiter_entries(
        self, service: ApplicationService, job_id: int, cache_store: InMemoryCacheStore
    ):
        application = await service.apply(CANDIDATE_ID, ApplicationCreate(job_id=job_id))
        await service.list_for_candidate(CANDIDATE_ID, http_key="u:candidate-1|/x")
        await service.get_for_candidate(CANDIDATE_ID, application.id)
        await service.list_for_job(RECRUITER_ID, job_id, http_key="u:recruiter-1|/y")
        await service.get_for_recruiter(RECRUITER_ID, application.id)

        event = await service.update_status(
            RECRUITER_ID,
            application.id,
            StatusUpdate(status=ApplicationStatus.INTERVIEW, note="Phone screen passed"),
        )

        assert event.status is ApplicationStatus.INTERVIEW
        assert event.note == "Phone screen passed"
        assert cache_store.keys_with_prefix("applications|") == []
        assert "u:candidate-1|/x" in cache_store.operations("delete")
        assert "u:recruiter-1|/y" in cache_store.operations("delete")

        mine = await service.get_for_candidate(CANDIDATE_ID, application.id)
        assert mine.status is ApplicationStatus.INTERVIEW

    async def test_other_recruiter_cannot_change_status(
        self, service: ApplicationService, job_id: int
    ):
        application = await service.apply(CANDIDATE_ID, ApplicationCreate(job_id=job_id))

        with pytest.raises(ForbiddenException):
            await service.update_status(
                OTHER_RECRUITER_ID, application.id, StatusUpdate(status=ApplicationStatus.OFFER)
            )

    async def test_note_drops_cached_notes(
        self, service: ApplicationService, job_id: int, cache_store: InMemoryCacheStore
    ):
        application = await service.apply(CANDIDATE_ID, ApplicationCreate(job_id=job_id))
        assert await service.list_notes(RECRUITER_ID, application.id) == []
        notes_key = keys.recruiter_notes_key(RECRUITER_ID, application.id)
        assert notes_key in cache_store.values

        note = await service.add_note(RECRUITER_ID, application.id, NoteCreate(note="Strong"))

        assert note.author_recruiter_id == RECRUITER_ID
        assert notes_key not in cache_store.values
        notes = await service.list_notes(RECRUITER_ID, application.id)
        assert [n.note for n in notes] == ["Strong"]

    async def test_unknown_application_raises_not_found(self, service: ApplicationService):
        with pytest.raises(NotFoundException) as exc_info:
            await service.get_for_recruiter(RECRUITER_ID, 999)

        assert exc_info.value.type == "application-not-found"

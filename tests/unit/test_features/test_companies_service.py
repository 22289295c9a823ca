"""Unit tests for CompanyService against SQLite and an in-memory cache."""
from __future__ import annotations

import pytest

from jobboard_service.core.exceptions import ConflictException, NotFoundException
from jobboard_service.features.companies.schemas import (
    CompanyCreate,
    CompanyUpdate,
    RecruiterCreate,
)
from jobboard_service.features.companies.service import (
    COMPANY_STATIC_KEY,
    HTTP_COMPANY_TAG,
    CompanyService,
    company_detail_key,
)
from jobboard_service.features.job_postings import keys
from jobboard_service.features.job_postings.schemas import JobPostingCreate
from jobboard_service.features.job_postings.service import JobPostingService
from tests.helpers import RECRUITER_ID, InMemoryCacheStore


@pytest.fixture
def service(db_session, orchestrator) -> CompanyService:
    return CompanyService(db_session, orchestrator)


@pytest.mark.unit
class TestCompanyReads:
    """Test suite for cached company reads."""

    async def test_public_profile_is_the_first_company(
        self, service: CompanyService, cache_store: InMemoryCacheStore
    ):
        first = await service.create_company(CompanyCreate(name="Acme"))
        await service.create_company(CompanyCreate(name="Globex"))

        profile = await service.get_public_company(http_key="/company")

        assert profile.id == first.id
        assert cache_store.values[COMPANY_STATIC_KEY]["name"] == "Acme"
        assert cache_store.sets[f"tag:{HTTP_COMPANY_TAG}"] == {"/company"}

    async def test_public_profile_without_company_is_not_found(
        self, service: CompanyService, cache_store: InMemoryCacheStore
    ):
        with pytest.raises(NotFoundException, match="Company not found"):
            await service.get_public_company()

        assert COMPANY_STATIC_KEY not in cache_store.values

    async def test_get_company_is_cached(
        self, service: CompanyService, cache_store: InMemoryCacheStore
    ):
        company = await service.create_company(CompanyCreate(name="Acme"))

        await service.get_company(company.id)
        cache_store.values[company_detail_key(company.id)]["name"] = "Stale"

        assert (await service.get_company(company.id)).name == "Stale"

    async def test_company_entries_never_expire(
        self, service: CompanyService, cache_store: InMemoryCacheStore
    ):
        company = await service.create_company(CompanyCreate(name="Acme"))

        await service.get_public_company()
        await service.get_company(company.id)

        assert cache_store.ttls[COMPANY_STATIC_KEY] == 0
        assert cache_store.ttls[company_detail_key(company.id)] == 0

    async def test_get_missing_company(self, service: CompanyService):
        with pytest.raises(NotFoundException) as exc_info:
            await service.get_company(404)

        assert exc_info.value.extra == {"company_id": 404}


@pytest.mark.unit
class TestCompanyWrites:
    """Test suite for company writes and their invalidation."""

    async def test_duplicate_name_conflicts(self, service: CompanyService):
        await service.create_company(CompanyCreate(name="Acme"))

        with pytest.raises(ConflictException) as exc_info:
            await service.create_company(CompanyCreate(name="Acme"))

        assert exc_info.value.type == "company-name-exists"

    async def test_rename_to_taken_name_conflicts(self, service: CompanyService):
        await service.create_company(CompanyCreate(name="Acme"))
        other = await service.create_company(CompanyCreate(name="Globex"))

        with pytest.raises(ConflictException):
            await service.update_company(other.id, CompanyUpdate(name="Acme"))

    async def test_update_keeps_unset_fields(self, service: CompanyService):
        company = await service.create_company(
            CompanyCreate(name="Acme", website="https://acme.example")
        )

        updated = await service.update_company(company.id, CompanyUpdate(description="Rockets"))

        assert updated.website == "https://acme.example"
        assert updated.description == "Rockets"

    async def test_update_drops_profile_and_job_listings(
        self, service: CompanyService, cache_store: InMemoryCacheStore
    ):
        company = await service.create_company(CompanyCreate(name="Acme"))
        await service.get_public_company(http_key="/company")
        await service.get_company(company.id, http_key=f"/company/{company.id}")
        cache_store.values["/company"] = {"body": ""}
        cache_store.values[f"/company/{company.id}"] = {"body": ""}
        cache_store.values["jobs|public|list|page=1|limit=10"] = {"items": []}
        cache_store.sets[f"tag:{keys.PUBLIC_LIST_TAG}"] = {"jobs|public|list|page=1|limit=10"}

        await service.update_company(company.id, CompanyUpdate(name="Acme Corp"))

        assert cache_store.values == {}
        assert (await service.get_public_company()).name == "Acme Corp"

    async def test_update_drops_cached_postings_of_its_recruiters(
        self, service: CompanyService, db_session, orchestrator, cache_store: InMemoryCacheStore
    ):
        company = await service.create_company(CompanyCreate(name="Acme"))
        await service.add_recruiter(company.id, RecruiterCreate(recruiter_id=RECRUITER_ID))
        postings = JobPostingService(db_session, orchestrator, companies=service)
        posting = await postings.create_job_posting(
            RECRUITER_ID, JobPostingCreate(title="Engineer", description="x", is_published=True)
        )
        await postings.get_published(posting.slug)
        await postings.get_for_recruiter(RECRUITER_ID, posting.id)
        await postings.list_for_recruiter(RECRUITER_ID)
        assert len(cache_store.keys_with_prefix("jobs|")) == 3

        await service.update_company(company.id, CompanyUpdate(name="Acme Corp"))

        assert cache_store.keys_with_prefix("jobs|") == []
        detail = await postings.get_for_recruiter(RECRUITER_ID, posting.id)
        assert detail.company is not None and detail.company.name == "Acme Corp"


@pytest.mark.unit
class TestRecruiters:
    """Test suite for recruiter memberships."""

    async def test_add_and_resolve_membership(self, service: CompanyService):
        company = await service.create_company(CompanyCreate(name="Acme"))

        membership = await service.add_recruiter(
            company.id, RecruiterCreate(recruiter_id=RECRUITER_ID)
        )
        resolved = await service.get_recruiter_membership(RECRUITER_ID)

        assert membership.company_id == company.id
        assert membership.is_active is True
        assert resolved.id == membership.id

    async def test_recruiter_belongs_to_one_company(self, service: CompanyService):
        acme = await service.create_company(CompanyCreate(name="Acme"))
        globex = await service.create_company(CompanyCreate(name="Globex"))
        await service.add_recruiter(acme.id, RecruiterCreate(recruiter_id=RECRUITER_ID))

        with pytest.raises(ConflictException) as exc_info:
            await service.add_recruiter(globex.id, RecruiterCreate(recruiter_id=RECRUITER_ID))

        assert exc_info.value.type == "recruiter-exists"

    async def test_unknown_company(self, service: CompanyService):
        with pytest.raises(NotFoundException):
            await service.add_recruiter(1, RecruiterCreate(recruiter_id=RECRUITER_ID))

    async def test_unknown_recruiter(self, service: CompanyService):
        with pytest.raises(NotFoundException, match="Recruiter mapping not found"):
            await service.get_recruiter_membership("stranger")

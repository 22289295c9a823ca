"""Unit tests for EducationService against SQLite and an in-memory cache."""
from __future__ import annotations

import pytest
from pydantic import ValidationError

from jobboard_service.core.exceptions import NotFoundException, ValidationException
from jobboard_service.features.education.schemas import (
    EducationCreate,
    EducationLevel,
    EducationUpdate,
)
from jobboard_service.features.education.service import (
    EducationService,
    detail_key,
    http_list_tag,
    list_key,
    list_tag,
)
from tests.helpers import CANDIDATE_ID, InMemoryCacheStore


@pytest.fixture
def service(db_session, orchestrator) -> EducationService:
    return EducationService(db_session, orchestrator)


def new_entry(**overrides) -> EducationCreate:
    data = {
        "institution": "TU Berlin",
        "education_level": EducationLevel.BACHELOR_DEGREE,
        "from_month": 10,
        "from_year": 2015,
        "to_month": 7,
        "to_year": 2019,
        "description": "Computer science",
    }
    data.update(overrides)
    return EducationCreate(**data)


@pytest.mark.unit
class TestEducationSchemas:
    """Test suite for period validation on input."""

    def test_period_must_not_end_before_it_starts(self):
        with pytest.raises(ValidationError, match="ends before it starts"):
            new_entry(from_year=2020, to_year=2019)

    def test_same_year_without_months_is_valid(self):
        entry = new_entry(from_month=None, to_month=None, from_year=2020, to_year=2020)

        assert entry.from_year == entry.to_year == 2020

    def test_partial_update_skips_period_check(self):
        assert EducationUpdate(to_year=1990).to_year == 1990


@pytest.mark.unit
class TestEducationReads:
    """Test suite for the per-user cached reads."""

    async def test_list_is_cached_under_user_tag(
        self, service: EducationService, cache_store: InMemoryCacheStore
    ):
        await service.create_entry(CANDIDATE_ID, new_entry())

        result = await service.list_entries(
            CANDIDATE_ID, http_key="u:candidate-1|/user/education"
        )

        assert result.total == 1
        assert result.items[0].education_level is EducationLevel.BACHELOR_DEGREE
        key = list_key(CANDIDATE_ID, 1, 10)
        assert key == "user|education|list|candidate-1|1|10"
        assert cache_store.ttls[key] == 300
        assert cache_store.sets[f"tag:{list_tag(CANDIDATE_ID)}"] == {key}
        assert cache_store.sets[f"tag:{http_list_tag(CANDIDATE_ID)}"] == {
            "u:candidate-1|/user/education"
        }

    async def test_entries_are_private(self, service: EducationService):
        entry = await service.create_entry(CANDIDATE_ID, new_entry())

        assert (await service.list_entries("someone-else")).total == 0
        with pytest.raises(NotFoundException, match="User education not found."):
            await service.get_entry("someone-else", entry.id)

    async def test_detail_is_cached(
        self, service: EducationService, cache_store: InMemoryCacheStore
    ):
        entry = await service.create_entry(CANDIDATE_ID, new_entry())

        await service.get_entry(CANDIDATE_ID, entry.id)

        assert cache_store.values[detail_key(CANDIDATE_ID, entry.id)]["institution"] == (
            "TU Berlin"
        )


@pytest.mark.unit
class TestEducationWrites:
    """Test suite for writes, period checks and invalidation."""

    async def test_create_invalidates_listing(
        self, service: EducationService, cache_store: InMemoryCacheStore
    ):
        await service.list_entries(CANDIDATE_ID, http_key="u:candidate-1|/user/education?page=1")
        cache_store.values["u:candidate-1|/user/education?page=1"] = {"body": ""}
        cache_store.values["u:candidate-1|/user/education"] = {"body": ""}

        await service.create_entry(CANDIDATE_ID, new_entry())

        assert cache_store.values == {}
        assert (await service.list_entries(CANDIDATE_ID)).total == 1

    async def test_update_rejects_inverted_period(self, service: EducationService):
        entry = await service.create_entry(CANDIDATE_ID, new_entry())

        with pytest.raises(ValidationException) as exc_info:
            await service.update_entry(CANDIDATE_ID, entry.id, EducationUpdate(to_year=2014))

        assert exc_info.value.type == "invalid-education-period"
        assert (await service.get_entry(CANDIDATE_ID, entry.id)).to_year == 2019

    async def test_update_clears_nullable_fields(self, service: EducationService):
        entry = await service.create_entry(CANDIDATE_ID, new_entry())

        updated = await service.update_entry(
            CANDIDATE_ID,
            entry.id,
            EducationUpdate(institution=None, description=None, to_month=None),
        )

        assert updated.institution == "TU Berlin"
        assert updated.description is None
        assert updated.to_month is None

    async def test_update_drops_cached_detail(
        self, service: EducationService, cache_store: InMemoryCacheStore
    ):
        entry = await service.create_entry(CANDIDATE_ID, new_entry())
        await service.get_entry(CANDIDATE_ID, entry.id)
        cache_store.values[f"u:candidate-1|/user/education/{entry.id}"] = {"body": ""}

        await service.update_entry(
            CANDIDATE_ID, entry.id, EducationUpdate(institution="HU Berlin")
        )

        assert cache_store.values == {}
        assert (await service.get_entry(CANDIDATE_ID, entry.id)).institution == "HU Berlin"

    async def test_delete(self, service: EducationService, cache_store: InMemoryCacheStore):
        entry = await service.create_entry(CANDIDATE_ID, new_entry())
        await service.get_entry(CANDIDATE_ID, entry.id)

        await service.delete_entry(CANDIDATE_ID, entry.id)

        assert detail_key(CANDIDATE_ID, entry.id) not in cache_store.values
        with pytest.raises(NotFoundException):
            await service.get_entry(CANDIDATE_ID, entry.id)

    async def test_other_user_cannot_delete(self, service: EducationService):
        entry = await service.create_entry(CANDIDATE_ID, new_entry())

        with pytest.raises(NotFoundException):
            await service.delete_entry("someone-else", entry.id)

"""Tests for the Info write use cases with in-memory fakes."""

from __future__ import annotations

import pytest

from todo_api.adapters.persistence.memory import InMemoryInfoRepository
from todo_api.application.use_cases.write_info import (
    CreateInfoUseCase,
    ReplaceInfoUseCase,
    UpdateAllInfosUseCase,
    UpdateInfoUseCase,
    resolve_remind_geo,
)
from todo_api.domain.entities.info import Info
from todo_api.domain.errors import (
    AddressNotFoundError,
    EntityNotFoundError,
    GeocoderUnavailableError,
)
from todo_api.domain.value_objects.filter import Condition, Group
from todo_api.domain.value_objects.geo_point import GeoPoint

from helpers import A_LOCATION, A_LOCATION_GEO, FakeGeocoder


@pytest.fixture
def repo():
    return InMemoryInfoRepository()


@pytest.fixture
def geocoder():
    return FakeGeocoder()


# ─── resolve_remind_geo ─────────────────────────────────────────────


@pytest.mark.asyncio
async def test_first_candidate_wins():
    geocoder = FakeGeocoder({"x": [GeoPoint(1.5, 2.5), GeoPoint(3.0, 4.0)]})
    assert await resolve_remind_geo(geocoder, "x") == "1.5,2.5"


@pytest.mark.asyncio
async def test_no_candidates_is_address_not_found():
    with pytest.raises(AddressNotFoundError) as exc:
        await resolve_remind_geo(FakeGeocoder(), "nowhere")
    assert exc.value.message == "Address not found: nowhere"


# ─── Create ─────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_create_resolves_address(repo, geocoder, given_info):
    uc = CreateInfoUseCase(geocoder=geocoder, info_repo=repo)
    created = await uc.execute(given_info(remind_at_address=A_LOCATION))
    assert created.id == 1
    assert created.remind_at_geo == A_LOCATION_GEO
    assert (await repo.find_by_id(1)).remind_at_geo == A_LOCATION_GEO


@pytest.mark.asyncio
async def test_create_without_address_skips_geocoder(repo, geocoder, given_info):
    uc = CreateInfoUseCase(geocoder=geocoder, info_repo=repo)
    created = await uc.execute(given_info())
    assert created.remind_at_geo is None
    assert geocoder.calls == []


@pytest.mark.asyncio
async def test_create_unknown_address_stores_nothing(repo, geocoder, given_info):
    uc = CreateInfoUseCase(geocoder=geocoder, info_repo=repo)
    with pytest.raises(AddressNotFoundError):
        await uc.execute(given_info(remind_at_address="nowhere at all"))
    assert await repo.count() == 0


@pytest.mark.asyncio
async def test_create_with_unavailable_provider_propagates(repo, given_info):
    uc = CreateInfoUseCase(geocoder=FakeGeocoder(unavailable=True), info_repo=repo)
    with pytest.raises(GeocoderUnavailableError):
        await uc.execute(given_info(remind_at_address=A_LOCATION))
    assert await repo.count() == 0


# ─── Replace / Update ───────────────────────────────────────────────


@pytest.mark.asyncio
async def test_replace_without_address_clears_geo(geocoder, given_info):
    repo = InMemoryInfoRepository([given_info(id=1, remind_at_address=A_LOCATION, remind_at_geo=A_LOCATION_GEO)])
    uc = ReplaceInfoUseCase(geocoder=geocoder, info_repo=repo)
    await uc.execute(1, Info(id=None, title="replaced"))
    stored = await repo.find_by_id(1)
    assert stored == Info(id=1, title="replaced")


@pytest.mark.asyncio
async def test_replace_missing_id(repo, geocoder):
    uc = ReplaceInfoUseCase(geocoder=geocoder, info_repo=repo)
    with pytest.raises(EntityNotFoundError):
        await uc.execute(99, Info(id=None, title="x"))


@pytest.mark.asyncio
async def test_update_with_address_rederives_geo(geocoder, given_info):
    repo = InMemoryInfoRepository([given_info(id=1)])
    uc = UpdateInfoUseCase(geocoder=geocoder, info_repo=repo)
    await uc.execute(1, {"remind_at_address": A_LOCATION})
    stored = await repo.find_by_id(1)
    assert stored.remind_at_geo == A_LOCATION_GEO
    assert stored.title == "remember-me"


@pytest.mark.asyncio
async def test_update_clearing_address_clears_geo(geocoder, given_info):
    repo = InMemoryInfoRepository([given_info(id=1, remind_at_address=A_LOCATION, remind_at_geo=A_LOCATION_GEO)])
    uc = UpdateInfoUseCase(geocoder=geocoder, info_repo=repo)
    await uc.execute(1, {"remind_at_address": None})
    assert (await repo.find_by_id(1)).remind_at_geo is None
    assert geocoder.calls == []


@pytest.mark.asyncio
async def test_update_other_fields_leaves_geo(geocoder, given_info):
    repo = InMemoryInfoRepository([given_info(id=1, remind_at_address=A_LOCATION, remind_at_geo=A_LOCATION_GEO)])
    uc = UpdateInfoUseCase(geocoder=geocoder, info_repo=repo)
    await uc.execute(1, {"is_complete": True})
    stored = await repo.find_by_id(1)
    assert stored.is_complete is True
    assert stored.remind_at_geo == A_LOCATION_GEO


# ─── Bulk update ────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_update_all_returns_affected_count(geocoder, given_info):
    repo = InMemoryInfoRepository(
        [given_info(id=1), given_info(id=2, is_complete=True), given_info(id=3, is_complete=None)]
    )
    uc = UpdateAllInfosUseCase(geocoder=geocoder, info_repo=repo)
    where = Group("and", (Condition("isComplete", "eq", False),))
    assert await uc.execute({"desc": "bulk"}, where) == 2
    assert [i.desc for i in await repo.find()] == ["bulk", "wait for me", "bulk"]


@pytest.mark.asyncio
async def test_missing_id_is_checked_before_geocoding(repo, geocoder):
    with pytest.raises(EntityNotFoundError):
        await ReplaceInfoUseCase(geocoder=geocoder, info_repo=repo).execute(
            9, Info(id=None, title="x", remind_at_address="nowhere")
        )
    with pytest.raises(EntityNotFoundError):
        await UpdateInfoUseCase(geocoder=geocoder, info_repo=repo).execute(9, {"remind_at_address": "nowhere"})
    assert geocoder.calls == []

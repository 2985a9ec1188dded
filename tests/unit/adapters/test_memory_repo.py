"""Tests for InMemoryInfoRepository — filtering, ordering, paging."""

import pytest

from todo_api.adapters.persistence.memory import InMemoryInfoRepository
from todo_api.domain.entities.info import Info
from todo_api.domain.errors import DuplicateIdError, EntityNotFoundError
from todo_api.domain.value_objects.filter import Condition, Filter, Group, OrderClause


def where(*conditions, kind="and"):
    return Group(kind, tuple(conditions))


@pytest.fixture
def repo():
    return InMemoryInfoRepository(
        [
            Info(id=1, title="b", is_complete=False, tag={"n": 1}),
            Info(id=2, title="c", is_complete=True),
            Info(id=3, title="a"),
        ]
    )


@pytest.mark.asyncio
async def test_create_assigns_next_id(repo):
    created = await repo.create(Info(id=None, title="d"))
    assert created.id == 4


@pytest.mark.asyncio
async def test_create_with_taken_id(repo):
    with pytest.raises(DuplicateIdError):
        await repo.create(Info(id=2, title="dup"))


@pytest.mark.asyncio
async def test_returned_records_are_copies(repo):
    found = await repo.find_by_id(1)
    found.tag["n"] = 99
    assert (await repo.find_by_id(1)).tag == {"n": 1}


@pytest.mark.asyncio
async def test_unset_flag_matches_false(repo):
    result = await repo.find(Filter(where=where(Condition("isComplete", "eq", False))))
    assert [i.id for i in result] == [1, 3]


@pytest.mark.asyncio
async def test_storage_order_without_order(repo):
    assert [i.id for i in await repo.find()] == [1, 2, 3]


@pytest.mark.asyncio
async def test_order_desc_and_multi_key(repo):
    f = Filter(order=(OrderClause("title", descending=True),))
    assert [i.title for i in await repo.find(f)] == ["c", "b", "a"]

    f = Filter(order=(OrderClause("isComplete"), OrderClause("title", descending=True)))
    assert [i.id for i in await repo.find(f)] == [1, 3, 2]


@pytest.mark.asyncio
async def test_limit_and_offset(repo):
    f = Filter(order=(OrderClause("title"),), limit=1, offset=1)
    assert [i.title for i in await repo.find(f)] == ["b"]


@pytest.mark.asyncio
async def test_or_and_like(repo):
    clause = where(Condition("title", "like", "a%"), Condition("id", "gte", 2), kind="or")
    assert [i.id for i in await repo.find(Filter(where=where(clause)))] == [2, 3]


@pytest.mark.asyncio
async def test_ilike_and_nin(repo):
    f = Filter(where=where(Condition("title", "ilike", "B"), Condition("id", "nin", (2, 3))))
    assert [i.id for i in await repo.find(f)] == [1]


@pytest.mark.asyncio
async def test_fields_projection(repo):
    [info] = await repo.find(Filter(where=where(Condition("id", "eq", 2)), fields=frozenset({"title"})))
    assert info.to_api() == {"title": "c"}


@pytest.mark.asyncio
async def test_missing_id_mutates_nothing(repo):
    for call in (
        repo.find_by_id(9),
        repo.replace_by_id(9, Info(id=None, title="x")),
        repo.update_by_id(9, {"title": "x"}),
        repo.delete_by_id(9),
    ):
        with pytest.raises(EntityNotFoundError):
            await call
    assert await repo.count() == 3


@pytest.mark.asyncio
async def test_update_all_and_count(repo):
    assert await repo.update_all({"desc": "x"}, where(Condition("isComplete", "neq", True))) == 2
    assert await repo.count(where(Condition("desc", "eq", "x"))) == 2


@pytest.mark.asyncio
async def test_delete_all(repo):
    assert await repo.delete_all(where(Condition("id", "between", (2, 3)))) == 2
    assert [i.id for i in await repo.find()] == [1]
    assert await repo.delete_all() == 1
    assert await repo.count() == 0


@pytest.mark.asyncio
async def test_ids_are_not_reused_after_delete(repo):
    await repo.delete_by_id(3)
    assert (await repo.create(Info(id=None, title="d"))).id == 4


@pytest.mark.asyncio
async def test_caller_supplied_id_advances_counter(repo):
    await repo.create(Info(id=10, title="ten"))
    assert (await repo.create(Info(id=None, title="next"))).id == 11

"""In-memory InfoRepository — the default backend for development and tests.

Records live in a dict kept in insertion order, which is the "storage order"
that unordered queries return. Every method runs without awaiting, so each
call is atomic with respect to other coroutines on the event loop.
"""

from __future__ import annotations

import copy
import re
from typing import Any

from todo_api.application.ports.info_repo import InfoRepository
from todo_api.domain.entities.info import FIELD_ATTRS, Info
from todo_api.domain.errors import DuplicateIdError, EntityNotFoundError
from todo_api.domain.value_objects.filter import (
    FALSY_WHEN_UNSET,
    Clause,
    Condition,
    Filter,
    Group,
    OrderClause,
)


class InMemoryInfoRepository(InfoRepository):
    def __init__(self, seed: list[Info] | None = None):
        self._items: dict[int, Info] = {}
        # Ids are never reused, even after the highest record is deleted.
        self._next_id = 1
        for info in seed or []:
            self._insert(info)

    async def create(self, info: Info) -> Info:
        return copy.deepcopy(self._insert(info))

    async def find_by_id(self, info_id: int, fields: frozenset[str] | None = None) -> Info:
        return copy.deepcopy(self._get(info_id).project(fields))

    async def find(self, filter: Filter | None = None) -> list[Info]:
        f = filter or Filter()
        items = [i for i in self._items.values() if matches(i, f.where)]
        items = sort_infos(items, f.order)
        end = None if f.limit is None else f.offset + f.limit
        return [copy.deepcopy(i.project(f.fields)) for i in items[f.offset:end]]

    async def replace_by_id(self, info_id: int, info: Info) -> None:
        self._get(info_id)
        replacement = copy.deepcopy(info)
        replacement.id = info_id
        self._items[info_id] = replacement

    async def update_by_id(self, info_id: int, changes: dict[str, Any]) -> None:
        current = self._get(info_id)
        self._items[info_id] = current.merge(copy.deepcopy(changes))

    async def delete_by_id(self, info_id: int) -> None:
        self._get(info_id)
        del self._items[info_id]

    async def update_all(self, changes: dict[str, Any], where: Group | None = None) -> int:
        targets = [key for key, info in self._items.items() if matches(info, where)]
        for key in targets:
            self._items[key] = self._items[key].merge(copy.deepcopy(changes))
        return len(targets)

    async def count(self, where: Group | None = None) -> int:
        return sum(1 for info in self._items.values() if matches(info, where))

    async def delete_all(self, where: Group | None = None) -> int:
        targets = [key for key, info in self._items.items() if matches(info, where)]
        for key in targets:
            del self._items[key]
        return len(targets)

    # ── internals ───────────────────────────────────────────────────

    def _get(self, info_id: int) -> Info:
        info = self._items.get(info_id)
        if info is None:
            raise EntityNotFoundError(info_id)
        return info

    def _insert(self, info: Info) -> Info:
        stored = copy.deepcopy(info)
        if stored.id is None:
            stored.id = self._next_id
        elif stored.id in self._items:
            raise DuplicateIdError(stored.id)
        self._items[stored.id] = stored
        self._next_id = max(self._next_id, stored.id + 1)
        return stored


# ── Query evaluation ────────────────────────────────────────────────


def _value(info: Info, field: str) -> Any:
    value = getattr(info, FIELD_ATTRS[field])
    if value is None and field in FALSY_WHEN_UNSET:
        return False
    return value


def _like(pattern: str, value: str, ignore_case: bool) -> bool:
    regex = "".join(
        ".*" if ch == "%" else "." if ch == "_" else re.escape(ch) for ch in pattern
    )
    return re.fullmatch(regex, value, re.IGNORECASE if ignore_case else 0) is not None


def _compare(condition: Condition, value: Any) -> bool:
    op, operand = condition.op, condition.value
    if op == "eq":
        return value == operand
    if op == "neq":
        return value != operand
    if op == "inq":
        return value in operand
    if op == "nin":
        return value not in operand
    if value is None:
        return False
    if op in ("like", "ilike"):
        return _like(operand, value, ignore_case=op == "ilike")
    if op in ("nlike", "nilike"):
        return not _like(operand, value, ignore_case=op == "nilike")
    if op == "between":
        low, high = operand
        return low is not None and high is not None and low <= value <= high
    if operand is None:
        return False
    if op == "gt":
        return value > operand
    if op == "gte":
        return value >= operand
    if op == "lt":
        return value < operand
    if op == "lte":
        return value <= operand
    raise ValueError(f"Unsupported operator: {op}")


def matches(info: Info, clause: Clause | None) -> bool:
    if clause is None:
        return True
    if isinstance(clause, Group):
        results = (matches(info, c) for c in clause.clauses)
        return all(results) if clause.kind == "and" else any(results)
    return _compare(clause, _value(info, clause.field))


def sort_infos(items: list[Info], order: tuple[OrderClause, ...]) -> list[Info]:
    """Stable multi-key sort; unset values sort first ascending, last descending."""
    def key_for(field: str):
        def key(info: Info) -> tuple[bool, Any]:
            value = _value(info, field)
            return (False, 0) if value is None else (True, value)

        return key

    result = list(items)
    for clause in reversed(order):
        result.sort(key=key_for(clause.field), reverse=clause.descending)
    return result

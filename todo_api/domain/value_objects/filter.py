"""Filter value objects — the normalized, validated form of a query."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Union

COMPARISON_OPS = frozenset(
    {"eq", "neq", "gt", "gte", "lt", "lte", "inq", "nin", "between", "like", "nlike", "ilike", "nilike"}
)

# Unset boolean flags compare as False.
FALSY_WHEN_UNSET = frozenset({"isComplete"})


@dataclass(frozen=True)
class Condition:
    field: str  # API property name
    op: str
    value: Any


@dataclass(frozen=True)
class Group:
    kind: Literal["and", "or"]
    clauses: tuple[Union["Condition", "Group"], ...]


Clause = Union[Condition, Group]


@dataclass(frozen=True)
class OrderClause:
    field: str
    descending: bool = False


@dataclass(frozen=True)
class Filter:
    where: Group | None = None
    order: tuple[OrderClause, ...] = ()
    limit: int | None = None
    offset: int = 0
    fields: frozenset[str] | None = None  # None = all fields

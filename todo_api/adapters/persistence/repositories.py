"""SQLAlchemy repository implementation."""

from __future__ import annotations

from typing import Any

from sqlalchemy import ColumnElement, and_, delete, false, func, or_, select, true, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from todo_api.adapters.persistence.models import InfoModel
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

# ─── Mappers ─────────────────────────────────────────────────────────


def _info_to_domain(m: InfoModel) -> Info:
    return Info(
        id=m.id,
        title=m.title,
        desc=m.desc,
        is_complete=m.is_complete,
        remind_at_address=m.remind_at_address,
        remind_at_geo=m.remind_at_geo,
        tag=m.tag,
    )


def _info_values(info: Info) -> dict[str, Any]:
    return {
        "title": info.title,
        "desc": info.desc,
        "is_complete": info.is_complete,
        "remind_at_address": info.remind_at_address,
        "remind_at_geo": info.remind_at_geo,
        "tag": info.tag,
    }


# ─── Where / order translation ───────────────────────────────────────


def _column(field: str) -> ColumnElement:
    col = getattr(InfoModel, FIELD_ATTRS[field])
    if field in FALSY_WHEN_UNSET:
        return func.coalesce(col, False)
    return col


def _condition_expr(c: Condition) -> ColumnElement[bool]:
    col = _column(c.field)
    op, value = c.op, c.value
    # eq/neq/inq/nin treat NULL as an ordinary value, like the in-memory backend.
    if op == "eq":
        return col.is_(None) if value is None else col == value
    if op == "neq":
        return col.is_not(None) if value is None else or_(col != value, col.is_(None))
    if op == "inq":
        present = [v for v in value if v is not None]
        expr = col.in_(present) if present else false()
        return or_(expr, col.is_(None)) if None in value else expr
    if op == "nin":
        present = [v for v in value if v is not None]
        expr = or_(col.not_in(present), col.is_(None)) if present else true()
        return and_(expr, col.is_not(None)) if None in value else expr
    if op == "between":
        low, high = value
        if low is None or high is None:
            return false()
        return col.between(low, high)
    if op == "like":
        return col.like(value)
    if op == "nlike":
        return col.not_like(value)
    if op == "ilike":
        return col.ilike(value)
    if op == "nilike":
        return col.not_ilike(value)
    if value is None:
        return false()
    if op == "gt":
        return col > value
    if op == "gte":
        return col >= value
    if op == "lt":
        return col < value
    if op == "lte":
        return col <= value
    raise ValueError(f"Unsupported operator: {op}")


def where_expr(clause: Clause | None) -> ColumnElement[bool]:
    if clause is None:
        return true()
    if isinstance(clause, Group):
        parts = [where_expr(c) for c in clause.clauses]
        return and_(true(), *parts) if clause.kind == "and" else or_(false(), *parts)
    return _condition_expr(clause)


def _order_by(order: tuple[OrderClause, ...]) -> list:
    # Unset values sort first ascending and last descending, as in memory.
    terms = [
        _column(o.field).desc().nulls_last() if o.descending else _column(o.field).asc().nulls_first()
        for o in order
    ]
    terms.append(InfoModel.id.asc())
    return terms


# ─── Repository ──────────────────────────────────────────────────────


class SqlInfoRepository(InfoRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def create(self, info: Info) -> Info:
        m = InfoModel(**_info_values(info))
        if info.id is not None:
            if await self._s.get(InfoModel, info.id) is not None:
                raise DuplicateIdError(info.id)
            m.id = info.id
        self._s.add(m)
        try:
            await self._s.flush()
        except IntegrityError as e:
            raise DuplicateIdError(info.id) from e
        return _info_to_domain(m)

    async def find_by_id(self, info_id: int, fields: frozenset[str] | None = None) -> Info:
        return _info_to_domain(await self._get(info_id)).project(fields)

    async def find(self, filter: Filter | None = None) -> list[Info]:
        f = filter or Filter()
        stmt = select(InfoModel).where(where_expr(f.where)).order_by(*_order_by(f.order))
        if f.offset:
            stmt = stmt.offset(f.offset)
        if f.limit is not None:
            stmt = stmt.limit(f.limit)
        result = await self._s.execute(stmt)
        return [_info_to_domain(m).project(f.fields) for m in result.scalars()]

    async def replace_by_id(self, info_id: int, info: Info) -> None:
        m = await self._get(info_id)
        for attr, value in _info_values(info).items():
            setattr(m, attr, value)
        await self._s.flush()

    async def update_by_id(self, info_id: int, changes: dict[str, Any]) -> None:
        m = await self._get(info_id)
        for attr, value in changes.items():
            if attr != "id":
                setattr(m, attr, value)
        await self._s.flush()

    async def delete_by_id(self, info_id: int) -> None:
        m = await self._get(info_id)
        await self._s.delete(m)
        await self._s.flush()

    async def update_all(self, changes: dict[str, Any], where: Group | None = None) -> int:
        values = {attr: value for attr, value in changes.items() if attr != "id"}
        if not values:
            return await self.count(where)
        result = await self._s.execute(
            update(InfoModel)
            .where(where_expr(where))
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        self._s.expire_all()
        return result.rowcount or 0

    async def count(self, where: Group | None = None) -> int:
        result = await self._s.execute(
            select(func.count(InfoModel.id)).where(where_expr(where))
        )
        return result.scalar() or 0

    async def delete_all(self, where: Group | None = None) -> int:
        result = await self._s.execute(
            delete(InfoModel).where(where_expr(where)).execution_options(synchronize_session=False)
        )
        self._s.expire_all()
        return result.rowcount or 0

    async def _get(self, info_id: int) -> InfoModel:
        m = await self._s.get(InfoModel, info_id)
        if m is None:
            raise EntityNotFoundError(info_id)
        return m

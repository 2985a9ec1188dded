"""FilterParser — validates raw filter/where objects and builds Filter values.

Raw input is whatever the HTTP layer decoded: a JSON object, or the nested
dict rebuilt from exploded ``filter[...]`` query parameters (all leaf values
are strings in that case, so values are coerced by field type).

Every key at every depth is checked against the denylist before the
structure is interpreted, so a hostile key never reaches a repository.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Iterable

from todo_api.domain.entities.info import FIELD_ATTRS, FIELD_TYPES, QUERYABLE_FIELDS
from todo_api.domain.errors import InvalidFilterError
from todo_api.domain.value_objects.filter import (
    COMPARISON_OPS,
    Clause,
    Condition,
    Filter,
    Group,
    OrderClause,
)

logger = logging.getLogger(__name__)

# Keys that could reach object-prototype machinery in loosely typed clients.
RESERVED_KEYS = frozenset({"__proto__", "constructor.prototype", "constructor", "prototype"})

FILTER_KEYS = frozenset({"where", "fields", "order", "limit", "offset", "skip"})

# Nesting beyond this is rejected rather than walked.
MAX_DEPTH = 32

_INT = re.compile(r"-?[0-9]+")
_NON_NEGATIVE_INT = re.compile(r"[0-9]+")

_TRUE = {"true", "1", "yes", "on"}
_FALSE = {"false", "0", "no", "off"}


class FilterParser:
    def __init__(self, prohibited_keys: Iterable[str] = ()):
        self._denied = RESERVED_KEYS | frozenset(prohibited_keys)

    # ── Entry points ────────────────────────────────────────────────

    def parse_filter(self, raw: Any, *, allow_where: bool = True, parameter: str = "filter") -> Filter:
        """Validate a raw filter and return a normalized Filter."""
        data = self._decode(raw, parameter)
        if data is None:
            return Filter()
        self.check_keys(data, parameter)

        unknown = set(data) - FILTER_KEYS
        if not allow_where and "where" in data:
            unknown.add("where")
        if unknown:
            key = sorted(unknown)[0]
            raise InvalidFilterError(parameter, f'Filter cannot contain "{key}" key.', key)

        offset = self._non_negative_int(data.get("offset"), parameter, "offset")
        if offset is None:
            offset = self._non_negative_int(data.get("skip"), parameter, "skip")

        return Filter(
            where=self._parse_where(data.get("where"), parameter),
            order=self._parse_order(data.get("order"), parameter),
            limit=self._non_negative_int(data.get("limit"), parameter, "limit"),
            offset=offset or 0,
            fields=self._parse_fields(data.get("fields"), parameter),
        )

    def parse_where(self, raw: Any, parameter: str = "where") -> Group | None:
        """Validate a standalone where clause (count / bulk update)."""
        data = self._decode(raw, parameter)
        if data is None:
            return None
        self.check_keys(data, parameter)
        return self._parse_where(data, parameter)

    def check_keys(self, value: Any, parameter: str, depth: int = 0) -> None:
        """Reject any denylisted key, at any depth up to MAX_DEPTH."""
        if depth > MAX_DEPTH:
            raise InvalidFilterError(parameter, f"Nesting deeper than {MAX_DEPTH} levels.")
        if isinstance(value, dict):
            for key, item in value.items():
                if key in self._denied:
                    logger.warning("Rejected %s with prohibited key %r", parameter, key)
                    raise InvalidFilterError(parameter, f'JSON string cannot contain "{key}" key.', key)
                self.check_keys(item, parameter, depth + 1)
        elif isinstance(value, list):
            for item in value:
                self.check_keys(item, parameter, depth + 1)

    # ── Decoding ────────────────────────────────────────────────────

    @staticmethod
    def _decode(raw: Any, parameter: str) -> dict[str, Any] | None:
        if raw is None:
            return None
        if isinstance(raw, str):
            if not raw.strip():
                return None
            try:
                raw = json.loads(raw)
            except json.JSONDecodeError as e:
                raise InvalidFilterError(parameter, f"Invalid JSON: {e.msg}") from e
            except RecursionError as e:
                raise InvalidFilterError(parameter, "Invalid JSON: nested too deeply") from e
        if not isinstance(raw, dict):
            raise InvalidFilterError(parameter, "Value must be a JSON object.")
        return raw or None

    # ── where ───────────────────────────────────────────────────────

    def _parse_where(self, raw: Any, parameter: str) -> Group | None:
        if raw is None:
            return None
        if not isinstance(raw, dict):
            raise InvalidFilterError(parameter, "where must be an object.", "where")
        if not raw:
            return None
        return Group("and", tuple(self._where_clauses(raw, parameter)))

    def _where_clauses(self, raw: dict[str, Any], parameter: str) -> list[Clause]:
        clauses: list[Clause] = []
        for key, value in raw.items():
            if key in ("and", "or"):
                if not isinstance(value, list) or not all(isinstance(v, dict) for v in value):
                    raise InvalidFilterError(parameter, f'"{key}" must be a list of where objects.', key)
                parts = tuple(Group("and", tuple(self._where_clauses(v, parameter))) for v in value)
                clauses.append(Group(key, parts))
                continue

            if key not in QUERYABLE_FIELDS:
                raise InvalidFilterError(parameter, f'Unknown property "{key}" in where.', key)

            if isinstance(value, dict):
                if not value:
                    raise InvalidFilterError(parameter, f'Empty condition for "{key}".', key)
                for op, operand in value.items():
                    clauses.append(self._condition(key, op, operand, parameter))
            else:
                clauses.append(Condition(key, "eq", self._coerce(key, value, parameter)))
        return clauses

    def _condition(self, field: str, op: str, operand: Any, parameter: str) -> Condition:
        if op not in COMPARISON_OPS:
            raise InvalidFilterError(parameter, f'Unknown operator "{op}" for "{field}".', op)

        if op in ("inq", "nin"):
            if not isinstance(operand, list):
                raise InvalidFilterError(parameter, f'"{op}" expects a list.', field)
            return Condition(field, op, tuple(self._coerce(field, v, parameter) for v in operand))

        if op == "between":
            if not isinstance(operand, list) or len(operand) != 2:
                raise InvalidFilterError(parameter, '"between" expects a list of two values.', field)
            low, high = (self._coerce(field, v, parameter) for v in operand)
            return Condition(field, op, (low, high))

        if op in ("like", "nlike", "ilike", "nilike"):
            if FIELD_TYPES[field] is not str or not isinstance(operand, str):
                raise InvalidFilterError(parameter, f'"{op}" expects a string pattern on a text property.', field)
            return Condition(field, op, operand)

        return Condition(field, op, self._coerce(field, operand, parameter))

    @staticmethod
    def _coerce(field: str, value: Any, parameter: str) -> Any:
        if value is None:
            return None
        expected = FIELD_TYPES[field]

        if expected is bool:
            if isinstance(value, bool):
                return value
            if isinstance(value, str) and value.strip().lower() in _TRUE | _FALSE:
                return value.strip().lower() in _TRUE
        elif expected is int:
            if isinstance(value, int) and not isinstance(value, bool):
                return value
            if isinstance(value, str) and _INT.fullmatch(value.strip()):
                return int(value)
        elif isinstance(value, str):
            return value

        raise InvalidFilterError(
            parameter, f'Invalid value {value!r} for "{field}" (expected {expected.__name__}).', field
        )

    # ── order / fields / paging ─────────────────────────────────────

    @staticmethod
    def _parse_order(raw: Any, parameter: str) -> tuple[OrderClause, ...]:
        if raw is None:
            return ()
        if isinstance(raw, str):
            items = raw.split(",")
        elif isinstance(raw, list) and all(isinstance(v, str) for v in raw):
            items = raw
        else:
            raise InvalidFilterError(parameter, "order must be a string or a list of strings.", "order")

        clauses = []
        for item in items:
            parts = item.split()
            if not parts:
                continue
            if len(parts) > 2:
                raise InvalidFilterError(parameter, f'Invalid order clause "{item.strip()}".', "order")
            field = parts[0]
            direction = parts[1].upper() if len(parts) == 2 else "ASC"
            if field not in QUERYABLE_FIELDS:
                raise InvalidFilterError(parameter, f'Cannot order by unknown property "{field}".', field)
            if direction not in ("ASC", "DESC"):
                raise InvalidFilterError(parameter, f'Invalid order direction "{parts[1]}".', "order")
            clauses.append(OrderClause(field, descending=direction == "DESC"))
        return tuple(clauses)

    @staticmethod
    def _parse_fields(raw: Any, parameter: str) -> frozenset[str] | None:
        if raw is None:
            return None
        if isinstance(raw, str):
            raw = [raw]

        if isinstance(raw, list):
            selected = set()
            for name in raw:
                if name not in FIELD_ATTRS:
                    raise InvalidFilterError(parameter, f'Unknown property "{name}" in fields.', str(name))
                selected.add(name)
            return frozenset(selected) or None

        if isinstance(raw, dict):
            flags: dict[str, bool] = {}
            for name, flag in raw.items():
                if name not in FIELD_ATTRS:
                    raise InvalidFilterError(parameter, f'Unknown property "{name}" in fields.', name)
                if isinstance(flag, str) and flag.strip().lower() in _TRUE | _FALSE:
                    flag = flag.strip().lower() in _TRUE
                if not isinstance(flag, bool):
                    raise InvalidFilterError(parameter, f'fields.{name} must be a boolean.', name)
                flags[name] = flag
            included = {name for name, flag in flags.items() if flag}
            if included:
                return frozenset(included)
            excluded = set(flags)
            return frozenset(set(FIELD_ATTRS) - excluded) if excluded else None

        raise InvalidFilterError(parameter, "fields must be a list or an object.", "fields")

    @staticmethod
    def _non_negative_int(raw: Any, parameter: str, key: str) -> int | None:
        if raw is None:
            return None
        if isinstance(raw, str) and _NON_NEGATIVE_INT.fullmatch(raw.strip()):
            return int(raw)
        if isinstance(raw, int) and not isinstance(raw, bool) and raw >= 0:
            return raw
        raise InvalidFilterError(parameter, f"{key} must be a non-negative integer.", key)

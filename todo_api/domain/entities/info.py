"""Info entity — a reminder/todo item, optionally tied to a place."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any

# API (JSON) property name → entity attribute
FIELD_ATTRS: dict[str, str] = {
    "id": "id",
    "title": "title",
    "desc": "desc",
    "isComplete": "is_complete",
    "remindAtAddress": "remind_at_address",
    "remindAtGeo": "remind_at_geo",
    "tag": "tag",
}

# Scalar type of each queryable API property
FIELD_TYPES: dict[str, type] = {
    "id": int,
    "title": str,
    "desc": str,
    "isComplete": bool,
    "remindAtAddress": str,
    "remindAtGeo": str,
}

# Open-schema values are not comparable, so they can be projected but not queried.
QUERYABLE_FIELDS = frozenset(name for name in FIELD_ATTRS if name != "tag")


@dataclass
class Info:
    id: int | None
    title: str
    desc: str | None = None
    is_complete: bool | None = None
    remind_at_address: str | None = None
    remind_at_geo: str | None = None
    tag: Any = None

    def to_api(self) -> dict[str, Any]:
        """Serialize with API property names, omitting unset attributes."""
        out: dict[str, Any] = {}
        for name, attr in FIELD_ATTRS.items():
            value = getattr(self, attr)
            if value is not None:
                out[name] = value
        return out

    def merge(self, changes: dict[str, Any]) -> Info:
        """Return a copy with the given attribute changes applied (id is kept)."""
        changes = {k: v for k, v in changes.items() if k != "id"}
        return replace(self, **changes)

    def project(self, selected: frozenset[str] | None) -> Info:
        """Return a copy holding only the selected API fields."""
        if selected is None:
            return self
        keep = {FIELD_ATTRS[name] for name in selected}
        values = {f.name: (getattr(self, f.name) if f.name in keep else None) for f in fields(self)}
        return Info(**values)

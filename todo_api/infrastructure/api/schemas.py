"""Request/response schemas for the /infos endpoints.

Bodies use the camelCase property names of the public API; unknown
properties (including ``id`` and the server-derived ``remindAtGeo``) are
rejected with 422.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from todo_api.domain.entities.info import Info

_EXAMPLE = {
    "title": "pick up the parcel",
    "desc": "It is waiting at the front desk",
    "isComplete": False,
    "remindAtAddress": "1 New Orchard Road, Armonk, 10504",
    "tag": {"priority": "high"},
}


class NewInfo(BaseModel):
    """Body of POST /infos."""

    model_config = ConfigDict(
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={"example": _EXAMPLE},
    )

    title: str = Field(..., min_length=1, description="What to be reminded of")
    desc: str | None = Field(default=None, description="Optional longer description")
    is_complete: bool | None = Field(default=None, description="Completion flag")
    remind_at_address: str | None = Field(
        default=None, description="Postal address; resolved to remindAtGeo on write"
    )
    tag: Any = Field(default=None, description="Arbitrary JSON value")

    def to_entity(self) -> Info:
        return Info(
            id=None,
            title=self.title,
            desc=self.desc,
            is_complete=self.is_complete,
            remind_at_address=self.remind_at_address,
            tag=self.tag,
        )


class InfoReplace(NewInfo):
    """Body of PUT /infos/{id}: a full record, omitted fields are cleared."""


class InfoPatch(BaseModel):
    """Body of PATCH /infos/{id} and PATCH /infos; only supplied fields change."""

    model_config = ConfigDict(
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={"example": {"isComplete": True}},
    )

    title: str | None = Field(default=None, min_length=1)
    desc: str | None = None
    is_complete: bool | None = None
    remind_at_address: str | None = None
    tag: Any = None

    @field_validator("title")
    @classmethod
    def title_not_null(cls, v: str | None) -> str:
        if v is None:
            raise ValueError("title cannot be null")
        return v

    def to_changes(self) -> dict[str, Any]:
        """Supplied fields only, keyed by entity attribute name."""
        return {name: getattr(self, name) for name in self.model_fields_set}


class CountOut(BaseModel):
    count: int = Field(..., description="Number of matching (or affected) records")

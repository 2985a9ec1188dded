"""SQLAlchemy ORM models — maps to the infos table."""

from typing import Any

from sqlalchemy import JSON, Boolean, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from todo_api.adapters.persistence.database import Base


class InfoModel(Base):
    __tablename__ = "infos"

    # Callers may supply the id; otherwise the database assigns one.
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    desc: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_complete: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    remind_at_address: Mapped[str | None] = mapped_column(Text, nullable=True)
    remind_at_geo: Mapped[str | None] = mapped_column(String(64), nullable=True)
    tag: Mapped[Any] = mapped_column(JSON(none_as_null=True), nullable=True)

    __table_args__ = (Index("idx_infos_is_complete", "is_complete"),)

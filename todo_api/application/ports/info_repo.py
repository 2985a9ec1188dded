"""Port interface for Info persistence."""

from abc import ABC, abstractmethod
from typing import Any

from todo_api.domain.entities.info import Info
from todo_api.domain.value_objects.filter import Filter, Group


class InfoRepository(ABC):
    """CRUD + count over the Info collection.

    Change sets passed to ``update_by_id`` / ``update_all`` are keyed by
    entity attribute name (``is_complete``, not ``isComplete``); only the
    keys present are written.
    """

    @abstractmethod
    async def create(self, info: Info) -> Info:
        """Persist a new record. Raises DuplicateIdError on an id collision."""
        ...

    @abstractmethod
    async def find_by_id(self, info_id: int, fields: frozenset[str] | None = None) -> Info:
        """Raises EntityNotFoundError if absent."""
        ...

    @abstractmethod
    async def find(self, filter: Filter | None = None) -> list[Info]:
        ...

    @abstractmethod
    async def replace_by_id(self, info_id: int, info: Info) -> None:
        """Overwrite every field but the id. Raises EntityNotFoundError if absent."""
        ...

    @abstractmethod
    async def update_by_id(self, info_id: int, changes: dict[str, Any]) -> None:
        """Merge the given attributes. Raises EntityNotFoundError if absent."""
        ...

    @abstractmethod
    async def delete_by_id(self, info_id: int) -> None:
        """Raises EntityNotFoundError if absent."""
        ...

    @abstractmethod
    async def update_all(self, changes: dict[str, Any], where: Group | None = None) -> int:
        """Merge the given attributes into every matching record; return the count."""
        ...

    @abstractmethod
    async def count(self, where: Group | None = None) -> int:
        ...

    @abstractmethod
    async def delete_all(self, where: Group | None = None) -> int:
        ...

"""Write use cases for Info — every write that sets an address geocodes it first."""

from __future__ import annotations

import logging
from typing import Any

from todo_api.application.ports.geocoder_port import GeocoderPort
from todo_api.application.ports.info_repo import InfoRepository
from todo_api.domain.entities.info import Info
from todo_api.domain.errors import AddressNotFoundError
from todo_api.domain.value_objects.filter import Group

logger = logging.getLogger(__name__)


async def resolve_remind_geo(geocoder: GeocoderPort, address: str) -> str:
    """Geocode an address and encode the best match as "lat,lng".

    Raises AddressNotFoundError when there are no candidates; provider
    failures (GeocoderUnavailableError) propagate untouched.
    """
    points = await geocoder.geocode(address)
    if not points:
        logger.info("No geocoding candidates for '%s'", address)
        raise AddressNotFoundError(address)
    return points[0].to_geo_string()


class _GeocodingWrite:
    def __init__(self, geocoder: GeocoderPort, info_repo: InfoRepository):
        self._geocoder = geocoder
        self._infos = info_repo

    async def _derive_geo(self, changes: dict[str, Any]) -> dict[str, Any]:
        """Keep remind_at_geo in step with remind_at_address in a change set."""
        if "remind_at_address" not in changes:
            return changes
        address = changes["remind_at_address"]
        geo = await resolve_remind_geo(self._geocoder, address) if address else None
        return {**changes, "remind_at_geo": geo}


class CreateInfoUseCase(_GeocodingWrite):
    """Create a reminder, resolving remindAtAddress to remindAtGeo first."""

    async def execute(self, info: Info) -> Info:
        if info.remind_at_address:
            info.remind_at_geo = await resolve_remind_geo(self._geocoder, info.remind_at_address)
            logger.info("Resolved '%s' → %s", info.remind_at_address, info.remind_at_geo)
        created = await self._infos.create(info)
        logger.info("Created Info %s", created.id)
        return created


class ReplaceInfoUseCase(_GeocodingWrite):
    async def execute(self, info_id: int, info: Info) -> None:
        await self._infos.find_by_id(info_id)  # 404 before any lookup
        info.remind_at_geo = (
            await resolve_remind_geo(self._geocoder, info.remind_at_address)
            if info.remind_at_address
            else None
        )
        await self._infos.replace_by_id(info_id, info)


class UpdateInfoUseCase(_GeocodingWrite):
    async def execute(self, info_id: int, changes: dict[str, Any]) -> None:
        await self._infos.find_by_id(info_id)
        await self._infos.update_by_id(info_id, await self._derive_geo(changes))


class UpdateAllInfosUseCase(_GeocodingWrite):
    async def execute(self, changes: dict[str, Any], where: Group | None = None) -> int:
        count = await self._infos.update_all(await self._derive_geo(changes), where)
        logger.info("Bulk update touched %d Info records", count)
        return count

"""US Census geocoder adapter — implements GeocoderPort."""

from __future__ import annotations

import logging

import httpx

from todo_api.application.ports.geocoder_port import GeocoderPort
from todo_api.config import settings
from todo_api.domain.errors import GeocoderUnavailableError
from todo_api.domain.value_objects.geo_point import GeoPoint

logger = logging.getLogger(__name__)


class CensusGeocoderAdapter(GeocoderPort):
    """One-line-address lookups against geocoding.geo.census.gov.

    ``proxy`` routes outbound calls through an HTTP intermediary (e.g. a
    caching proxy); ``transport`` replaces the network entirely, which is
    how tests replay recorded responses.
    """

    def __init__(
        self,
        base_url: str | None = None,
        benchmark: str | None = None,
        proxy: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._base_url = base_url or settings.geocoder_url
        self._benchmark = benchmark or settings.geocoder_benchmark
        self._proxy = proxy if proxy is not None else settings.geocoder_proxy
        self._timeout = timeout if timeout is not None else settings.geocoder_timeout
        self._transport = transport
        self._cache: dict[str, list[GeoPoint]] = {}

    async def geocode(self, address: str) -> list[GeoPoint]:
        cache_key = address.strip().lower()
        if cache_key in self._cache:
            logger.debug("Cache hit for '%s'", address)
            return list(self._cache[cache_key])

        data = await self._lookup(address)
        matches = (data.get("result") or {}).get("addressMatches") or []
        try:
            points = [
                GeoPoint(latitude=float(m["coordinates"]["y"]), longitude=float(m["coordinates"]["x"]))
                for m in matches
            ]
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Unexpected geocoder payload for '%s': %s", address, e)
            raise GeocoderUnavailableError("malformed provider response") from e

        if points:
            logger.info(
                "Census resolved '%s' → (%f, %f) [%d candidates]",
                address, points[0].latitude, points[0].longitude, len(points),
            )
        else:
            logger.info("Census returned no matches for '%s'", address)
        self._cache[cache_key] = points
        return list(points)

    async def _lookup(self, address: str) -> dict:
        try:
            # An injected transport wins; proxy mounts would otherwise shadow it.
            async with httpx.AsyncClient(
                proxy=None if self._transport else self._proxy,
                transport=self._transport,
                timeout=self._timeout,
            ) as client:
                response = await client.get(
                    self._base_url,
                    params={"address": address, "benchmark": self._benchmark, "format": "json"},
                )
        except httpx.HTTPError as e:
            logger.warning("Geocoder unreachable for '%s': %s", address, e)
            raise GeocoderUnavailableError(str(e) or type(e).__name__) from e

        if response.status_code >= 400:
            logger.warning("Geocoder responded %d for '%s'", response.status_code, address)
            raise GeocoderUnavailableError(
                f"provider responded with HTTP {response.status_code}",
                upstream_status=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            logger.warning("Geocoder sent a non-JSON body for '%s'", address)
            raise GeocoderUnavailableError("malformed provider response") from e
        if not isinstance(data, dict):
            raise GeocoderUnavailableError("malformed provider response")
        return data

"""Shared test doubles and recorded provider payloads."""

from __future__ import annotations

import httpx

from todo_api.application.ports.geocoder_port import GeocoderPort
from todo_api.domain.errors import GeocoderUnavailableError
from todo_api.domain.value_objects.geo_point import GeoPoint

A_LOCATION = "1 New Orchard Road, Armonk, 10504"
A_LOCATION_POINT = GeoPoint(latitude=41.109653, longitude=-73.72467)
A_LOCATION_GEO = "41.109653,-73.72467"


class FakeGeocoder(GeocoderPort):
    """Resolves only the addresses it was given; records every lookup."""

    def __init__(self, known: dict[str, list[GeoPoint]] | None = None, unavailable: bool = False):
        self._known = known if known is not None else {A_LOCATION: [A_LOCATION_POINT]}
        self._unavailable = unavailable
        self.calls: list[str] = []

    async def geocode(self, address):
        self.calls.append(address)
        if self._unavailable:
            raise GeocoderUnavailableError("provider responded with HTTP 502", upstream_status=502)
        return list(self._known.get(address, []))


async def is_geocoder_service_available(geocoder: GeocoderPort, address: str = A_LOCATION) -> bool:
    """False when the provider answers with its 502-class failure."""
    try:
        await geocoder.geocode(address)
    except GeocoderUnavailableError:
        return False
    return True


def census_payload(*points: GeoPoint, address: str = A_LOCATION) -> dict:
    """A onelineaddress JSON body, shaped like the provider's real answers."""
    return {
        "result": {
            "input": {
                "address": {"address": address},
                "benchmark": {"benchmarkName": "Public_AR_Current", "isDefault": True},
            },
            "addressMatches": [
                {
                    "matchedAddress": f"{address.upper()}, NY",
                    "coordinates": {"x": p.longitude, "y": p.latitude},
                    "tigerLine": {"side": "L", "tigerLineId": "59651373"},
                }
                for p in points
            ],
        }
    }


def census_transport(*points: GeoPoint, status_code: int = 200, requests: list | None = None):
    """MockTransport answering every lookup with the given matches."""

    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        if status_code >= 400:
            return httpx.Response(status_code, text="Bad Gateway")
        return httpx.Response(status_code, json=census_payload(*points))

    return httpx.MockTransport(handler)

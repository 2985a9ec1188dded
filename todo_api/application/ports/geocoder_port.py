"""Port interface for geocoding addresses to coordinates."""

from abc import ABC, abstractmethod

from todo_api.domain.value_objects.geo_point import GeoPoint


class GeocoderPort(ABC):
    @abstractmethod
    async def geocode(self, address: str) -> list[GeoPoint]:
        """Convert an address string to candidate lat/lon points.

        Candidates come in the provider's relevance order; an empty list
        means the address could not be resolved. Raises
        GeocoderUnavailableError when the provider itself fails.
        """
        ...

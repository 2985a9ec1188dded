"""GeoPoint value object — immutable (lat, lon) pair."""

import re
from dataclasses import dataclass
from decimal import Decimal


def _format_coordinate(value: float) -> str:
    """Render like a JavaScript number: "41" not "41.0", "1e-7" not "1e-07"."""
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    if 1e-6 <= abs(value) < 1e21:
        return format(Decimal(repr(value)), "f")
    return re.sub(r"e([+-])0*(\d)", r"e\1\2", repr(value))


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float

    def to_geo_string(self) -> str:
        """Encode as "lat,lng" (the Google Maps convention)."""
        return f"{_format_coordinate(self.latitude)},{_format_coordinate(self.longitude)}"

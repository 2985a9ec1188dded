"""Tests for GeoPoint value object."""

from todo_api.domain.value_objects.geo_point import GeoPoint


def test_to_geo_string_is_lat_then_lng():
    p = GeoPoint(latitude=41.109653, longitude=-73.72467)
    assert p.to_geo_string() == "41.109653,-73.72467"


def test_whole_degrees_have_no_trailing_zero():
    assert GeoPoint(latitude=41.0, longitude=-73.0).to_geo_string() == "41,-73"


def test_small_values():
    assert GeoPoint(latitude=1e-7, longitude=0.00001).to_geo_string() == "1e-7,0.00001"


def test_geo_point_is_frozen():
    """GeoPoint should be immutable."""
    p = GeoPoint(latitude=43.0, longitude=76.0)
    try:
        p.latitude = 50.0
        assert False, "Should have raised FrozenInstanceError"
    except AttributeError:
        pass

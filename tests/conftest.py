"""Pytest configuration and shared fixtures."""

import os

import pytest

# Tests run against the in-memory backend unless a test builds its own engine.
os.environ.setdefault("PERSISTENCE_BACKEND", "memory")

from todo_api.domain.entities.info import Info  # noqa: E402
from todo_api.domain.value_objects.geo_point import GeoPoint  # noqa: E402

from helpers import A_LOCATION, A_LOCATION_POINT  # noqa: E402


@pytest.fixture
def a_location():
    return A_LOCATION


@pytest.fixture
def a_location_point():
    return A_LOCATION_POINT


@pytest.fixture
def given_info():
    """Factory for Info entities with sensible defaults."""

    def _make(**overrides) -> Info:
        values = {
            "id": None,
            "title": "remember-me",
            "desc": "wait for me",
            "is_complete": False,
            "tag": "it's a tag",
        }
        values.update(overrides)
        return Info(**values)

    return _make


@pytest.fixture
def somewhere_else():
    return GeoPoint(latitude=38.897675, longitude=-77.036547)

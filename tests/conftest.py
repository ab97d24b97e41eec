import random

import pytest
import requests

from drive_safety.core import Settings
from drive_safety.safety.alerts import AlertSink
from drive_safety.safety.models import GeoPoint
from drive_safety.safety.zones import ZoneRegistry

# One degree of latitude along a meridian, in metres (R * pi / 180)
METERS_PER_DEG_LAT = 6371000 * 3.141592653589793 / 180


SQUARE_ZONE = {
    'id': "square",
    'name': "Unit Square",
    'description': "Synthetic test zone.",
    'risk_level': "HIGH",
    'color': "#FF3B30",
    'frequency': 100,
    'center': {'lat': 0.5, 'lng': 0.5},
    'path': [
        {'lat': 0.0, 'lng': 0.0},
        {'lat': 0.0, 'lng': 1.0},
        {'lat': 1.0, 'lng': 1.0},
        {'lat': 1.0, 'lng': 0.0},
    ],
}

# Small square (~220 m across) far away from the unit square
HUB_ZONE = {
    'id': "hub",
    'name': "Hub Junction",
    'description': "Small synthetic junction.",
    'risk_level': "MEDIUM",
    'color': "#FF9500",
    'frequency': 30,
    'center': {'lat': 10.0, 'lng': 10.0},
    'path': [
        {'lat': 9.999, 'lng': 9.999},
        {'lat': 9.999, 'lng': 10.001},
        {'lat': 10.001, 'lng': 10.001},
        {'lat': 10.001, 'lng': 9.999},
    ],
}


class RecordingSink(AlertSink):
    """Alert sink that remembers every call."""

    def __init__(self):
        self.shown = []
        self.spoken = []
        self.cleared = 0

    def show(self, headline, detail):
        self.shown.append((headline, detail))

    def clear(self):
        self.cleared += 1

    def speak(self, text):
        self.spoken.append(text)


class FakeResponse:
    def __init__(self, payload=None, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


class FakeHttp:
    """Stands in for requests / requests.Session in provider tests."""

    def __init__(self, payload=None, status_code=200, error=None):
        self.payload = payload
        self.status_code = status_code
        self.error = error
        self.calls = []

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append({"url": url, "params": params, "headers": headers, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return FakeResponse(self.payload, self.status_code)


@pytest.fixture
def square_zones():
    return ZoneRegistry.from_dicts([SQUARE_ZONE])


@pytest.fixture
def test_zones():
    return ZoneRegistry.from_dicts([SQUARE_ZONE, HUB_ZONE])


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def sink():
    return RecordingSink()


def inside_point(i=0):
    """A point well inside the unit square; varies with i."""
    return GeoPoint(0.5, 0.1 + (i % 80) * 0.01)


def outside_point(i=0):
    return GeoPoint(5.0, 5.0 + (i % 80) * 0.01)


def north_of(point, meters):
    return GeoPoint(point.lat + meters / METERS_PER_DEG_LAT, point.lng)

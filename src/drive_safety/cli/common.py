"""Helpers shared by the CLI commands."""

import re

from ..core import Settings
from ..safety.models import GeoPoint
from ..safety.zones import ZoneRegistry

_COORD_RE = re.compile(r'^\s*(-?\d+(?:\.\d+)?)\s*,\s*(-?\d+(?:\.\d+)?)\s*$')


def load_settings(args) -> Settings:
    if getattr(args, 'config', None):
        return Settings.from_yaml(args.config)
    return Settings()


def load_zones(args) -> ZoneRegistry:
    if getattr(args, 'zones', None):
        return ZoneRegistry.from_yaml(args.zones)
    return ZoneRegistry.default()


def parse_coordinate(text):
    """
    Parse 'LAT,LNG' into a GeoPoint.

    Returns:
        GeoPoint, or None if the text is not a coordinate pair
    """
    match = _COORD_RE.match(text or "")
    if not match:
        return None
    return GeoPoint(float(match.group(1)), float(match.group(2)))


def resolve_location(text, session, near=None):
    """
    Turn CLI input into a GeoPoint.

    Coordinates are reverse-geocoded for display; place names are
    searched near the given point.

    Raises:
        ValueError: If a place name has no geocoding match
    """
    point = parse_coordinate(text)
    if point is not None:
        print(f"  '{text}' → {session.describe_point(point)}")
        return point

    places = session.search_places(text, near=near)
    if not places:
        raise ValueError(f"No place found for '{text}'")

    place = places[0]
    print(f"  '{text}' → {place.main_name} ({place.lat:.4f}, {place.lng:.4f})")
    return place.point


def banner(title):
    print("=" * 70)
    print(title)
    print("=" * 70)

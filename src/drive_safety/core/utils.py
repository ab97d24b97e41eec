"""Geometry helpers and GPX loading."""

import gpxpy
from math import radians, sin, cos, sqrt, atan2
from pathlib import Path

EARTH_RADIUS_M = 6371000


def haversine_distance(lat1, lon1, lat2, lon2):
    """
    Calculate distance between two points in meters using Haversine formula.

    Args:
        lat1, lon1: Coordinates of first point
        lat2, lon2: Coordinates of second point

    Returns:
        Distance in meters
    """
    lat1, lon1, lat2, lon2 = map(radians, [lat1, lon1, lat2, lon2])
    dlat = lat2 - lat1
    dlon = lon2 - lon1

    a = sin(dlat/2)**2 + cos(lat1) * cos(lat2) * sin(dlon/2)**2
    c = 2 * atan2(sqrt(a), sqrt(1-a))

    return EARTH_RADIUS_M * c


def distance_meters(a, b):
    """Great-circle distance between two GeoPoints in meters."""
    return haversine_distance(a.lat, a.lng, b.lat, b.lng)


def point_in_polygon(point, path):
    """
    Even-odd ray casting test.

    The ray runs from the point towards increasing longitude at constant
    latitude. Points exactly on an edge or vertex may fall either way.

    Args:
        point: GeoPoint to test
        path: Sequence of GeoPoints; the last vertex connects to the first

    Returns:
        True if the point is inside the polygon
    """
    x, y = point.lng, point.lat
    inside = False

    j = len(path) - 1
    for i in range(len(path)):
        xi, yi = path[i].lng, path[i].lat
        xj, yj = path[j].lng, path[j].lat

        if (yi > y) != (yj > y):
            x_cross = (xj - xi) * (y - yi) / (yj - yi) + xi
            if x < x_cross:
                inside = not inside
        j = i

    return inside


def locate_zone(point, zones):
    """
    Return the first zone (in iteration order) containing the point.

    Overlapping zones are not reported beyond the first match.

    Args:
        point: GeoPoint to classify
        zones: Iterable of Zone objects

    Returns:
        Zone or None
    """
    for zone in zones:
        if zone.is_degenerate:
            continue
        min_lat, min_lng, max_lat, max_lng = zone.bounds
        if not (min_lat <= point.lat <= max_lat and min_lng <= point.lng <= max_lng):
            continue
        if point_in_polygon(point, zone.path):
            return zone
    return None


def load_gpx_route(gpx_file):
    """
    Load and parse GPX route file.

    Args:
        gpx_file: Path to GPX file

    Returns:
        List of (latitude, longitude) tuples

    Raises:
        ValueError: If no points found in GPX file
    """
    return [(p.latitude, p.longitude) for p in load_gpx_points(gpx_file)]


def load_gpx_points(gpx_file):
    """
    Load raw gpxpy points from tracks, then routes, then waypoints.

    Args:
        gpx_file: Path to GPX file

    Returns:
        List of gpxpy point objects

    Raises:
        ValueError: If no points found in GPX file
    """
    gpx_file = Path(gpx_file)

    with open(gpx_file) as f:
        gpx = gpxpy.parse(f)

    points = []

    # Try tracks first
    for track in gpx.tracks:
        for segment in track.segments:
            points.extend(segment.points)

    if not points:
        for route in gpx.routes:
            points.extend(route.points)

    # Fall back to waypoints if no tracks
    if not points:
        points.extend(gpx.waypoints)

    if not points:
        raise ValueError(f"No points found in GPX file: {gpx_file}")

    return points


def calculate_route_length(points):
    """
    Calculate total route length in kilometers.

    Args:
        points: List of GeoPoints

    Returns:
        Total length in kilometers
    """
    total = 0
    for i in range(len(points) - 1):
        total += distance_meters(points[i], points[i+1])
    return total / 1000  # Convert to km

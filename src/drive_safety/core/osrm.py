"""OSRM (Open Source Routing Machine) integration for driving routes."""

import logging

import requests

from .errors import ProviderUnavailableError
from ..safety.models import GeoPoint, Route

logger = logging.getLogger(__name__)

DEFAULT_OSRM_URL = "https://router.project-osrm.org"


def fetch_route(source, dest, osrm_url=DEFAULT_OSRM_URL, timeout=10, session=None):
    """
    Request a driving route between two points.

    Args:
        source: Start GeoPoint
        dest: Destination GeoPoint
        osrm_url: URL of OSRM server
        timeout: Request timeout in seconds
        session: Optional requests.Session to reuse connections

    Returns:
        Route with full-resolution geometry, distance and duration

    Raises:
        ProviderUnavailableError: On network failure or when no route is found
    """
    url = (
        f"{osrm_url.rstrip('/')}/route/v1/driving/"
        f"{source.lng},{source.lat};{dest.lng},{dest.lat}"
    )
    params = {"overview": "full", "geometries": "geojson"}
    http = session or requests

    try:
        response = http.get(url, params=params, timeout=timeout)
        response.raise_for_status()
        data = response.json()
    except (requests.RequestException, ValueError) as e:
        raise ProviderUnavailableError("routing", e)

    routes = data.get("routes") or []
    if data.get("code", "Ok") != "Ok" or not routes:
        raise ProviderUnavailableError("routing", data.get("message") or "no route found")

    route = routes[0]
    try:
        points = [GeoPoint(lat, lng) for lng, lat in route["geometry"]["coordinates"]]
        distance = float(route["distance"])
        duration = float(route["duration"])
    except (KeyError, TypeError, ValueError) as e:
        raise ProviderUnavailableError("routing", f"malformed response: {e}")

    logger.debug(f"OSRM route: {len(points)} points, {distance:.0f} m, {duration:.0f} s")
    return Route(points=points, distance_meters=distance, duration_seconds=duration)

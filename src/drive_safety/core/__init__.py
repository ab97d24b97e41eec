"""Core utilities for Drive Safety."""

from .utils import (
    haversine_distance,
    distance_meters,
    point_in_polygon,
    locate_zone,
    load_gpx_route,
    calculate_route_length,
)
from .config import Settings
from .errors import (
    DriveSafetyError,
    ProviderUnavailableError,
    LocationUnsupportedError,
    LocationError,
)

__all__ = [
    "haversine_distance",
    "distance_meters",
    "point_in_polygon",
    "locate_zone",
    "load_gpx_route",
    "calculate_route_length",
    "Settings",
    "DriveSafetyError",
    "ProviderUnavailableError",
    "LocationUnsupportedError",
    "LocationError",
]

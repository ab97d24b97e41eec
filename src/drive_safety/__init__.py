"""Drive Safety - Accident-zone route analysis and live driving alerts."""

__version__ = "0.1.0"

# Expose main classes for programmatic use
from .core import Settings
from .safety import (
    GeoPoint,
    Zone,
    ZoneRegistry,
    RouteRiskAnalyzer,
    TrafficEstimator,
    LiveTracker,
    decide_alert,
)
from .session import NavigationSession, RouteContext

__all__ = [
    "__version__",
    "Settings",
    "GeoPoint",
    "Zone",
    "ZoneRegistry",
    "RouteRiskAnalyzer",
    "TrafficEstimator",
    "LiveTracker",
    "decide_alert",
    "NavigationSession",
    "RouteContext",
]

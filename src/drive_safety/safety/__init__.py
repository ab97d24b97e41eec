"""Route safety analysis and live alerting."""

from .models import GeoPoint, Zone, RiskLevel, Severity, LiveAlert, AlertKind
from .zones import ZoneRegistry
from .analyzer import RouteRiskAnalyzer
from .traffic import TrafficEstimator
from .tracker import LiveTracker, TrackerState, decide_alert

__all__ = [
    "GeoPoint",
    "Zone",
    "RiskLevel",
    "Severity",
    "LiveAlert",
    "AlertKind",
    "ZoneRegistry",
    "RouteRiskAnalyzer",
    "TrafficEstimator",
    "LiveTracker",
    "TrackerState",
    "decide_alert",
]

"""Data models for route safety analysis and live alerting."""

import math
from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property
from typing import List, Optional, Tuple

from shapely.geometry import Polygon


@dataclass(frozen=True)
class GeoPoint:
    """Immutable geographic coordinate in decimal degrees."""

    lat: float
    lng: float

    def __post_init__(self):
        if not -90.0 <= self.lat <= 90.0:
            raise ValueError(f"Latitude out of range: {self.lat}")
        if not -180.0 <= self.lng <= 180.0:
            raise ValueError(f"Longitude out of range: {self.lng}")

    def __str__(self) -> str:
        return f"{self.lat:.4f}, {self.lng:.4f}"


class RiskLevel(Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


@dataclass(frozen=True)
class Zone:
    """Accident-prone polygonal region."""

    id: int
    name: str
    description: str
    risk_level: RiskLevel
    color: str
    frequency: int  # incidents per year
    center: GeoPoint
    path: Tuple[GeoPoint, ...]

    def __repr__(self) -> str:
        return (
            f"Zone(id={self.id}, name='{self.name}', "
            f"risk={self.risk_level.value}, vertices={len(self.path)})"
        )

    @cached_property
    def area(self) -> float:
        """Planar area in square degrees; zero for collinear outlines."""
        return Polygon([(p.lng, p.lat) for p in self.path]).area

    @property
    def is_degenerate(self) -> bool:
        return self.area == 0.0

    @cached_property
    def bounds(self) -> Tuple[float, float, float, float]:
        """(min_lat, min_lng, max_lat, max_lng)"""
        lats = [p.lat for p in self.path]
        lngs = [p.lng for p in self.path]
        return min(lats), min(lngs), max(lats), max(lngs)

    @property
    def heat_radius_m(self) -> float:
        """Display radius of the heat circle drawn around the zone center."""
        return math.sqrt(self.frequency) * 40

    @property
    def heat_opacity(self) -> float:
        return min(1.0, 0.1 + self.frequency / 300)


# ---------------------------------------------------------------------------
# Route safety
# ---------------------------------------------------------------------------

class Severity(Enum):
    LOW = "LOW"
    MODERATE = "MODERATE"
    CRITICAL = "CRITICAL"


@dataclass
class DangerSegment:
    """Maximal run of consecutive route points lying inside zones."""

    points: List[GeoPoint]
    zone_color: str = "#FF0000"

    def __len__(self) -> int:
        return len(self.points)


@dataclass
class RouteSafetyReport:
    danger_segments: List[DangerSegment] = field(default_factory=list)
    risk_zones: List[Zone] = field(default_factory=list)  # first-seen order
    risk_percentage: float = 0.0
    severity: Severity = Severity.LOW
    danger_points: int = 0
    total_points: int = 0

    WARNING_TITLE = "SAFETY WARNING"

    @property
    def warning(self) -> Optional[str]:
        """Route-level warning text, or None when no zone is crossed."""
        if not self.risk_zones:
            return None
        return f"This route passes through {len(self.risk_zones)} high-risk accident zones."


# ---------------------------------------------------------------------------
# Traffic (synthetic)
# ---------------------------------------------------------------------------

class TrafficLevel(Enum):
    LIGHT = "Light"
    MODERATE = "Moderate"
    HEAVY = "Heavy"

    @property
    def color(self) -> str:
        colors = {
            "Light": "#4CAF50",
            "Moderate": "#FF9500",
            "Heavy": "#FF3B30",
        }
        return colors[self.value]


@dataclass
class TrafficSegment:
    points: List[GeoPoint]
    classification: str  # "moderate" | "heavy"

    @property
    def color(self) -> str:
        return "#FF3B30" if self.classification == "heavy" else "#FF9500"


@dataclass
class TrafficReport:
    """Cosmetic congestion simulation; not a safety signal."""

    level: TrafficLevel = TrafficLevel.LIGHT
    segments: List[TrafficSegment] = field(default_factory=list)
    avg_speed_kmh: float = 0.0


# ---------------------------------------------------------------------------
# Live tracking
# ---------------------------------------------------------------------------

class AlertKind(Enum):
    DANGER = "danger"
    APPROACH_WARNING = "approach_warning"
    SPEED_WARNING = "speed_warning"


@dataclass(frozen=True)
class LiveAlert:
    kind: AlertKind
    headline: str
    detail: str
    spoken: str  # announcement text for the voice channel
    zone: Optional[Zone] = None


@dataclass(frozen=True)
class PositionSample:
    position: GeoPoint
    speed_mps: Optional[float] = None  # metres per second, None if unknown


# ---------------------------------------------------------------------------
# Provider payloads
# ---------------------------------------------------------------------------

@dataclass
class Route:
    """Routing provider result."""

    points: List[GeoPoint]
    distance_meters: float
    duration_seconds: float

    @property
    def distance_text(self) -> str:
        return f"{self.distance_meters / 1000:.1f} km"

    @property
    def duration_text(self) -> str:
        return f"{int(self.duration_seconds // 60)} mins"


@dataclass
class Weather:
    temperature: float  # °C
    windspeed: float    # km/h
    weathercode: int    # WMO code

    @property
    def condition(self) -> str:
        if self.temperature > 20:
            return "sunny"
        elif self.weathercode > 50:
            return "rainy"
        return "cloudy"


@dataclass
class Place:
    """Geocoding search hit."""

    display_name: str
    lat: float
    lng: float

    @property
    def main_name(self) -> str:
        return self.display_name.split(",")[0].strip()

    @property
    def sub_name(self) -> str:
        return ",".join(self.display_name.split(",")[1:]).strip()

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(self.lat, self.lng)

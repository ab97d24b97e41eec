"""Route risk analysis against accident zones."""

import json
import logging
import gpxpy.gpx
from pathlib import Path
from typing import List, Optional, Sequence

from shapely.geometry import LineString, Polygon, mapping

from .models import (
    DangerSegment,
    GeoPoint,
    RouteSafetyReport,
    Severity,
    TrafficReport,
)
from .zones import ZoneRegistry
from ..core.config import Settings
from ..core.utils import locate_zone, calculate_route_length

logger = logging.getLogger(__name__)


class RouteRiskAnalyzer:
    """Classify route points against a zone registry and score the route."""

    def __init__(self, zones: ZoneRegistry, settings: Optional[Settings] = None):
        """
        Initialize analyzer.

        Args:
            zones: Zone catalogue to test route points against
            settings: Settings providing severity thresholds (defaults if None)
        """
        self.zones = zones
        self.settings = settings or Settings()

    def analyze(self, points: Sequence[GeoPoint]) -> RouteSafetyReport:
        """
        Walk the route once and build a safety report.

        The route is not resampled: accuracy depends on the point density
        the routing provider delivered.

        Args:
            points: Ordered route points

        Returns:
            RouteSafetyReport
        """
        if not points:
            return RouteSafetyReport()

        segments: List[DangerSegment] = []
        seen_zones = []
        current: List[GeoPoint] = []
        danger_points = 0

        for point in points:
            zone = locate_zone(point, self.zones)

            if zone:
                current.append(point)
                danger_points += 1
                if zone not in seen_zones:
                    seen_zones.append(zone)
            else:
                # Lone flagged points are not rendered
                if len(current) > 1:
                    segments.append(DangerSegment(points=current))
                current = []

        if len(current) > 1:
            segments.append(DangerSegment(points=current))

        percentage = danger_points * 100 / len(points)

        report = RouteSafetyReport(
            danger_segments=segments,
            risk_zones=seen_zones,
            risk_percentage=percentage,
            severity=self.classify(percentage),
            danger_points=danger_points,
            total_points=len(points),
        )

        logger.info(
            f"Route analysed: {len(points)} points, {danger_points} in zones "
            f"({percentage:.1f}%, {report.severity.value}), "
            f"{len(segments)} danger segments"
        )
        return report

    def classify(self, risk_percentage: float) -> Severity:
        """Map a risk percentage to a severity tier."""
        if risk_percentage > self.settings.get_threshold('critical'):
            return Severity.CRITICAL
        elif risk_percentage > self.settings.get_threshold('moderate'):
            return Severity.MODERATE
        return Severity.LOW

    def export_to_gpx(
        self,
        report: RouteSafetyReport,
        output_path: str,
        route_points: Optional[Sequence[GeoPoint]] = None
    ):
        """
        Export the route and its danger segments to a GPX file.

        Args:
            report: RouteSafetyReport to export
            output_path: Path to output GPX file
            route_points: Original route; included as first track when given
        """
        gpx = gpxpy.gpx.GPX()
        gpx.name = "Route Safety Analysis"
        gpx.description = (
            f"Risk {report.risk_percentage:.1f}% ({report.severity.value}), "
            f"{len(report.danger_segments)} danger segments"
        )

        if route_points:
            gpx.tracks.append(self._make_track("Route", "Planned driving route", route_points))

        zone_names = ", ".join(z.name for z in report.risk_zones)
        for i, segment in enumerate(report.danger_segments, start=1):
            track = self._make_track(
                f"Danger segment {i}",
                f"Accident-prone stretch ({len(segment)} points). Zones on route: {zone_names}",
                segment.points,
            )
            track.type = "Danger"
            gpx.tracks.append(track)

        output_file = Path(output_path)
        output_file.parent.mkdir(parents=True, exist_ok=True)

        with open(output_file, 'w', encoding='utf-8') as f:
            f.write(gpx.to_xml())

        print(f"\n✓ Exported GPX file: {output_path}")
        if route_points:
            print(f"  • Route: {calculate_route_length(route_points):.1f} km")
        print(f"  • Danger segments: {len(report.danger_segments)} tracks")

    @staticmethod
    def _make_track(name: str, description: str, points: Sequence[GeoPoint]) -> gpxpy.gpx.GPXTrack:
        track = gpxpy.gpx.GPXTrack()
        track.name = name
        track.description = description

        track_segment = gpxpy.gpx.GPXTrackSegment()
        for p in points:
            track_segment.points.append(gpxpy.gpx.GPXTrackPoint(p.lat, p.lng))

        track.segments.append(track_segment)
        return track

    def export_to_geojson(
        self,
        report: RouteSafetyReport,
        output_path: str,
        route_points: Optional[Sequence[GeoPoint]] = None,
        traffic: Optional[TrafficReport] = None,
        include_zones: bool = True
    ):
        """
        Export the report to a GeoJSON FeatureCollection.

        Args:
            report: RouteSafetyReport to export
            output_path: Path to output GeoJSON file
            route_points: Original route; included as first feature when given
            traffic: Optional traffic simulation to include
            include_zones: Include every registry zone as a polygon feature
        """
        features = []

        if route_points and len(route_points) > 1:
            properties = {
                "type": "route",
                "name": "Route",
                "stroke": "#4285F4",
                "stroke-width": 5,
                "risk_percentage": round(report.risk_percentage, 1),
                "severity": report.severity.value,
            }
            if traffic:
                properties["traffic_level"] = traffic.level.value
                properties["traffic_color"] = traffic.level.color
            features.append(_line_feature(route_points, properties))

        if traffic:
            for segment in traffic.segments:
                if len(segment.points) < 2:
                    continue
                features.append(_line_feature(segment.points, {
                    "type": "traffic",
                    "classification": segment.classification,
                    "stroke": segment.color,
                    "stroke-width": 8,
                }))

        for segment in report.danger_segments:
            features.append(_line_feature(segment.points, {
                "type": "danger_segment",
                "points": len(segment),
                "stroke": segment.zone_color,
                "stroke-width": 6,
            }))

        if include_zones:
            features.extend(zone_features(self.zones, highlighted=report.risk_zones))

        output_file = Path(output_path)
        output_file.parent.mkdir(parents=True, exist_ok=True)

        with open(output_file, 'w', encoding='utf-8') as f:
            json.dump({"type": "FeatureCollection", "features": features}, f, indent=2)

        print(f"✓ Exported GeoJSON file: {output_path} ({len(features)} features)")


def _line_feature(points: Sequence[GeoPoint], properties: dict) -> dict:
    line = LineString([(p.lng, p.lat) for p in points])
    return {"type": "Feature", "geometry": mapping(line), "properties": properties}


def zone_features(zones: ZoneRegistry, highlighted=()) -> List[dict]:
    """GeoJSON polygon features for every zone in the registry."""
    features = []
    for zone in zones:
        ring = [(p.lng, p.lat) for p in zone.path]
        features.append({
            "type": "Feature",
            "geometry": mapping(Polygon(ring)),
            "properties": {
                "type": "zone",
                "id": zone.id,
                "name": zone.name,
                "description": zone.description,
                "risk_level": zone.risk_level.value,
                "frequency": zone.frequency,
                "on_route": zone in highlighted,
                "fill": zone.color,
                "fill-opacity": round(zone.heat_opacity, 3),
                "heat_radius_m": round(zone.heat_radius_m, 1),
                "center": [zone.center.lng, zone.center.lat],
            },
        })
    return features

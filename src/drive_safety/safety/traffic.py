"""Synthetic traffic estimation.

The congestion layer is a random simulation seeded by the average route
speed. It is cosmetic and must never feed into safety decisions.
"""

import logging
import random
from typing import List, Optional, Sequence

from .models import GeoPoint, TrafficLevel, TrafficReport, TrafficSegment
from ..core.config import Settings

logger = logging.getLogger(__name__)


class TrafficEstimator:
    """Derive a congestion level and simulated traffic stretches for a route."""

    def __init__(self, settings: Optional[Settings] = None, rng: Optional[random.Random] = None):
        """
        Args:
            settings: Speed bands and probabilities (defaults if None)
            rng: Random source; pass a seeded random.Random for reproducible output
        """
        self.settings = settings or Settings()
        self.rng = rng or random.Random()

    def classify(self, avg_speed_kmh: float) -> TrafficLevel:
        traffic = self.settings.traffic
        if avg_speed_kmh < traffic['heavy_below_kmh']:
            return TrafficLevel.HEAVY
        elif avg_speed_kmh < traffic['moderate_below_kmh']:
            return TrafficLevel.MODERATE
        return TrafficLevel.LIGHT

    def analyze(
        self,
        points: Sequence[GeoPoint],
        duration_seconds: float,
        distance_meters: float
    ) -> TrafficReport:
        """
        Estimate traffic along a route.

        Args:
            points: Route points
            duration_seconds: Total travel time reported by the router
            distance_meters: Total route length reported by the router

        Returns:
            TrafficReport; Light with no segments for zero duration or distance
        """
        if duration_seconds <= 0 or distance_meters <= 0:
            logger.debug("Degenerate route timing, reporting light traffic")
            return TrafficReport()

        avg_speed = (distance_meters / 1000) / (duration_seconds / 3600)
        level = self.classify(avg_speed)

        segments = self._simulate(points, self.settings.get_spawn_probability(level.value))
        logger.debug(f"Traffic {level.value} at {avg_speed:.1f} km/h, {len(segments)} segments")

        return TrafficReport(level=level, segments=segments, avg_speed_kmh=avg_speed)

    def _simulate(self, points: Sequence[GeoPoint], spawn_probability: float) -> List[TrafficSegment]:
        traffic = self.settings.traffic
        heavy_share = traffic['heavy_share']
        end_probability = traffic['end_probability']
        max_points = traffic['max_segment_points']

        segments = []
        current: List[GeoPoint] = []
        classification = None

        for point in points:
            if classification is None and self.rng.random() < spawn_probability:
                classification = "heavy" if self.rng.random() < heavy_share else "moderate"

            if classification is None:
                continue

            current.append(point)
            if self.rng.random() < end_probability or len(current) >= max_points:
                segments.append(TrafficSegment(points=current, classification=classification))
                current = []
                classification = None

        # A stretch still open at the end of the route is dropped
        return segments

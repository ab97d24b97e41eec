"""Navigation session: route calculation, safety report and trip annotations.

A session owns one RouteContext at a time. Every route request bumps a
generation counter; results tagged with an older generation are dropped
so a slow response can never overwrite a newer route.
"""

import logging
import random
from dataclasses import dataclass
from typing import Callable, Optional

import requests

from .core import Settings
from .core.errors import ProviderUnavailableError
from .core.geocoding import NominatimGeocoder
from .core.osrm import fetch_route
from .core.weather import fetch_weather
from .safety.alerts import AlertSink
from .safety.analyzer import RouteRiskAnalyzer
from .safety.models import GeoPoint, Route, RouteSafetyReport, TrafficReport, Weather
from .safety.traffic import TrafficEstimator
from .safety.tracker import LiveTracker
from .safety.zones import ZoneRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RouteContext:
    """Everything derived from one route calculation, replaced as a unit."""

    generation: int
    source: GeoPoint
    dest: GeoPoint
    route: Route
    safety: RouteSafetyReport
    traffic: TrafficReport
    weather: Optional[Weather] = None


class NavigationSession:
    """
    High-level facade tying providers, analyzers and the live tracker together.

    Typical lifecycle:
        session = NavigationSession(ZoneRegistry.default())
        context = session.calculate_route(GeoPoint(17.44, 78.48), GeoPoint(17.42, 78.45))
        session.tracker.start(source)

    Args:
        zones: Zone catalogue
        settings: Optional Settings; defaults to Settings()
        sink: Optional alert sink for route warnings and live alerts
        rng: Random source for the traffic simulation
        router: Callable (source, dest) -> Route; defaults to the OSRM client
        weather_provider: Callable (lat, lng) -> Optional[Weather]
    """

    def __init__(
        self,
        zones: ZoneRegistry,
        settings: Optional[Settings] = None,
        sink: Optional[AlertSink] = None,
        rng: Optional[random.Random] = None,
        router: Optional[Callable[[GeoPoint, GeoPoint], Route]] = None,
        weather_provider: Optional[Callable[[float, float], Optional[Weather]]] = None,
    ) -> None:
        self.zones = zones
        self.settings = settings or Settings()
        self.sink = sink

        self._http = requests.Session()
        self._router = router or self._osrm_route
        self._weather_provider = weather_provider or self._open_meteo_weather

        self.analyzer = RouteRiskAnalyzer(zones, self.settings)
        self.traffic = TrafficEstimator(self.settings, rng)
        self.tracker = LiveTracker(zones, self.settings, sink)
        self.geocoder = NominatimGeocoder(
            self.settings.get_provider_url('nominatim'),
            user_agent=self.settings.user_agent,
            timeout=self.settings.timeout,
            session=self._http,
        )

        self._generation = 0
        self._context: Optional[RouteContext] = None
        self._warning_shown = False

    # ------------------------------------------------------------------
    # Default providers
    # ------------------------------------------------------------------

    def _osrm_route(self, source: GeoPoint, dest: GeoPoint) -> Route:
        return fetch_route(
            source, dest,
            osrm_url=self.settings.get_provider_url('osrm'),
            timeout=self.settings.timeout,
            session=self._http,
        )

    def _open_meteo_weather(self, lat: float, lng: float) -> Optional[Weather]:
        return fetch_weather(
            lat, lng,
            base_url=self.settings.get_provider_url('open_meteo'),
            timeout=self.settings.timeout,
            session=self._http,
        )

    # ------------------------------------------------------------------
    # Read-only properties
    # ------------------------------------------------------------------

    @property
    def context(self) -> Optional[RouteContext]:
        return self._context

    @property
    def generation(self) -> int:
        return self._generation

    # ------------------------------------------------------------------
    # Route calculation
    # ------------------------------------------------------------------

    def begin_request(self) -> int:
        """Start a new route request and return its generation tag."""
        self._generation += 1
        return self._generation

    def calculate_route(self, source: GeoPoint, dest: GeoPoint) -> Optional[RouteContext]:
        """
        Fetch a route and replace the current context with its analysis.

        Args:
            source: Start point
            dest: Destination point

        Returns:
            The new RouteContext, or None if routing failed or a newer
            request superseded this one.
        """
        generation = self.begin_request()
        logger.info(f"Calculating route #{generation}: {source} → {dest}")

        weather = self.weather_at(dest)

        try:
            route = self._router(source, dest)
        except ProviderUnavailableError as e:
            logger.error(f"Routing error: {e}")
            return None

        return self.apply_route(generation, source, dest, route, weather)

    def apply_route(
        self,
        generation: int,
        source: GeoPoint,
        dest: GeoPoint,
        route: Route,
        weather: Optional[Weather] = None
    ) -> Optional[RouteContext]:
        """
        Analyse a routing result and install it, unless it is stale.

        Returns:
            The installed RouteContext, or None for an out-of-generation result
        """
        if generation != self._generation:
            logger.info(f"Discarding stale route #{generation} (current #{self._generation})")
            return None

        safety = self.analyzer.analyze(route.points)
        traffic = self.traffic.analyze(route.points, route.duration_seconds, route.distance_meters)

        self._context = RouteContext(
            generation=generation,
            source=source,
            dest=dest,
            route=route,
            safety=safety,
            traffic=traffic,
            weather=weather,
        )

        self._announce_route_warning(safety)
        return self._context

    def _announce_route_warning(self, safety: RouteSafetyReport):
        warning = safety.warning
        if not warning:
            self._clear_route_warning()
            return
        logger.warning(warning)
        if self.sink:
            self.sink.show(safety.WARNING_TITLE, warning)
            self._warning_shown = True
            if self.tracker.voice_enabled:
                self.sink.speak(warning)

    def weather_at(self, point: GeoPoint) -> Optional[Weather]:
        """Current weather at a point; None when the provider fails."""
        return self._weather_provider(point.lat, point.lng)

    def clear(self) -> None:
        """Drop the current route and stop any live tracking."""
        self._generation += 1
        self._context = None
        self._clear_route_warning()
        self.tracker.stop()

    def _clear_route_warning(self):
        if self._warning_shown and self.sink:
            self.sink.clear()
        self._warning_shown = False

    # ------------------------------------------------------------------
    # Geocoding helpers
    # ------------------------------------------------------------------

    def search_places(self, query: str, near: Optional[GeoPoint] = None):
        return self.geocoder.search(query, near=near)

    def describe_point(self, point: GeoPoint) -> str:
        return self.geocoder.reverse(point.lat, point.lng)

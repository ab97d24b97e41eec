"""Live tracking state machine raising zone and speed alerts.

Call start() with a position-sample source; every sample is classified
by decide_alert() and the result is pushed to the alert sink.
"""

import logging
import math
from enum import Enum
from typing import Callable, Iterable, Optional

from .alerts import AlertSink
from .models import AlertKind, GeoPoint, LiveAlert, PositionSample, Zone
from .sources import Subscription
from .zones import ZoneRegistry
from ..core.config import Settings
from ..core.errors import LocationError, LocationUnsupportedError
from ..core.utils import distance_meters, locate_zone

logger = logging.getLogger(__name__)


class TrackerState(Enum):
    IDLE = "idle"
    TRACKING = "tracking"


def to_kmh(speed_mps: Optional[float]) -> int:
    """Round a speed in m/s to whole km/h, halves up; missing speed counts as 0."""
    if not speed_mps:
        return 0
    return int(math.floor(speed_mps * 3.6 + 0.5))


def find_approaching_zone(position: GeoPoint, zones: Iterable[Zone], radius_m: float) -> Optional[Zone]:
    """First zone whose center lies strictly within radius_m of position."""
    for zone in zones:
        if distance_meters(position, zone.center) < radius_m:
            return zone
    return None


def decide_alert(
    position: GeoPoint,
    speed_kmh: int,
    zones: Iterable[Zone],
    speed_limit_kmh: int = 80,
    approach_radius_m: float = 500.0
) -> Optional[LiveAlert]:
    """
    Pick the single alert that applies to a position fix.

    Priority: inside a zone, then near a zone center, then over the speed
    limit. Returns None when nothing applies.
    """
    zones = list(zones)
    zone = locate_zone(position, zones)
    if zone:
        headline = f"ENTERING {zone.name}"
        return LiveAlert(
            kind=AlertKind.DANGER,
            headline=headline,
            detail=zone.description,
            spoken=f"{headline}. {zone.description}",
            zone=zone,
        )

    approaching = find_approaching_zone(position, zones, approach_radius_m)
    if approaching:
        return LiveAlert(
            kind=AlertKind.APPROACH_WARNING,
            headline="APPROACHING DANGER",
            detail=f"{approaching.name} is ~{approach_radius_m:.0f} m ahead.",
            spoken=f"APPROACHING DANGER. {approaching.name} is ahead.",
            zone=approaching,
        )

    if speed_kmh > speed_limit_kmh:
        return LiveAlert(
            kind=AlertKind.SPEED_WARNING,
            headline="SPEED VIOLATION",
            detail=f"Slow down! Limit is {speed_limit_kmh} km/h",
            spoken="SPEED VIOLATION. Slow down!",
        )

    return None


class LiveTracker:
    """
    Stateful alerting for a simulated drive.

    Usage:
        tracker = LiveTracker(zones, settings, sink)
        tracker.start(source)
        source.play()
        tracker.stop()

    Identical consecutive alerts are announced once; the banner is only
    updated when the alert changes.
    """

    def __init__(
        self,
        zones: ZoneRegistry,
        settings: Optional[Settings] = None,
        sink: Optional[AlertSink] = None
    ) -> None:
        self.zones = zones
        self.settings = settings or Settings()
        self.sink = sink
        self.voice_enabled = self.settings.voice_enabled

        self._state = TrackerState.IDLE
        self._subscription: Optional[Subscription] = None
        self._on_error: Optional[Callable[[LocationError], None]] = None
        self._reset()

    def _reset(self):
        self.speed_kmh = 0
        self.position: Optional[GeoPoint] = None
        self._alert: Optional[LiveAlert] = None
        self._announced: Optional[LiveAlert] = None
        self.last_error: Optional[LocationError] = None

    # ------------------------------------------------------------------
    # Read-only properties
    # ------------------------------------------------------------------

    @property
    def state(self) -> TrackerState:
        return self._state

    @property
    def is_tracking(self) -> bool:
        return self._state is TrackerState.TRACKING

    @property
    def alert(self) -> Optional[LiveAlert]:
        return self._alert

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self, source, on_error: Optional[Callable[[LocationError], None]] = None) -> Subscription:
        """
        Subscribe to a sample source and begin tracking.

        Args:
            source: Object with subscribe(on_sample, on_error) returning a Subscription
            on_error: Called with the LocationError if the source fails

        Raises:
            LocationUnsupportedError: If no source is available
        """
        if source is None:
            raise LocationUnsupportedError("Geolocation is not supported: no position source")

        if self.is_tracking:
            self.stop()

        self._reset()
        self._on_error = on_error
        self._state = TrackerState.TRACKING

        subscription = None

        def deliver(sample: PositionSample):
            if subscription is self._subscription:
                self.process(sample)

        def fail(error: LocationError):
            if subscription is self._subscription:
                self._fail(error)

        subscription = source.subscribe(deliver, fail)
        self._subscription = subscription
        logger.info("Live tracking started")
        return subscription

    def stop(self) -> None:
        """End tracking and reset speed and alert state. Safe to call repeatedly."""
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None

        was_tracking = self.is_tracking
        had_alert = self._alert is not None
        self._state = TrackerState.IDLE
        self.speed_kmh = 0
        self._alert = None
        self._announced = None

        if had_alert and self.sink:
            self.sink.clear()
        if was_tracking:
            logger.info("Live tracking stopped")

    def _fail(self, error: LocationError):
        logger.error(f"Error tracking location: {error}")
        on_error = self._on_error
        self.stop()
        self.last_error = error
        if self.sink:
            self.sink.show("LOCATION ERROR", f"Error tracking location: {error}")
        if on_error:
            on_error(error)

    # ------------------------------------------------------------------
    # Core method, called on every position sample
    # ------------------------------------------------------------------

    def process(self, sample: PositionSample) -> Optional[LiveAlert]:
        """
        Classify a position sample and update the active alert.

        Samples arriving while idle are ignored.

        Returns:
            The alert now active, or None
        """
        if not self.is_tracking:
            return None

        self.position = sample.position
        self.speed_kmh = to_kmh(sample.speed_mps)

        alert = decide_alert(
            sample.position,
            self.speed_kmh,
            self.zones,
            speed_limit_kmh=self.settings.speed_limit_kmh,
            approach_radius_m=self.settings.approach_radius_m,
        )
        logger.debug(f"Sample {sample.position} at {self.speed_kmh} km/h -> "
                     f"{alert.kind.value if alert else 'no alert'}")

        if alert != self._alert:
            self._transition(alert)
        return alert

    def _transition(self, alert: Optional[LiveAlert]):
        self._alert = alert

        if alert is None:
            logger.info("Alert cleared")
            self._announced = None
            if self.sink:
                self.sink.clear()
            return

        logger.info(f"{alert.kind.value}: {alert.headline} ({alert.detail})")
        if not self.sink:
            return

        self.sink.show(alert.headline, alert.detail)
        if self.voice_enabled and alert != self._announced:
            self.sink.speak(alert.spoken)
            self._announced = alert

"""Position-sample sources feeding the live tracker."""

import logging
import time
from typing import Callable, List, Optional, Sequence

from .models import GeoPoint, PositionSample
from ..core.errors import LocationError
from ..core.utils import haversine_distance, load_gpx_points

logger = logging.getLogger(__name__)


class Subscription:
    """
    Handle returned by a source's subscribe().

    cancel() is idempotent; once it returns the callbacks are never
    invoked again.
    """

    def __init__(self, source: 'ReplaySource', on_sample: Callable, on_error: Optional[Callable]):
        self._source = source
        self.on_sample = on_sample
        self.on_error = on_error
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self):
        if not self._active:
            return
        self._active = False
        self._source._remove(self)


class ReplaySource:
    """
    Replays a fixed list of samples to its subscribers.

    Delivery happens on the caller's thread inside play(), strictly in
    order. An optional terminal error is emitted after the last sample.
    """

    def __init__(self, samples: Sequence[PositionSample], error: Optional[LocationError] = None):
        self.samples = list(samples)
        self.error = error
        self._subscriptions: List[Subscription] = []

    @classmethod
    def from_gpx(cls, gpx_file: str) -> 'ReplaySource':
        """
        Build a replay from GPX points.

        Speed comes from the point itself when recorded, otherwise from the
        distance and time elapsed since the previous point.
        """
        samples = []
        prev = None
        for point in load_gpx_points(gpx_file):
            speed = getattr(point, 'speed', None)
            if speed is None and prev is not None and point.time and prev.time:
                seconds = (point.time - prev.time).total_seconds()
                if seconds > 0:
                    meters = haversine_distance(prev.latitude, prev.longitude,
                                                point.latitude, point.longitude)
                    speed = meters / seconds
            samples.append(PositionSample(GeoPoint(point.latitude, point.longitude), speed))
            prev = point
        return cls(samples)

    def subscribe(self, on_sample: Callable[[PositionSample], None],
                  on_error: Optional[Callable[[LocationError], None]] = None) -> Subscription:
        subscription = Subscription(self, on_sample, on_error)
        self._subscriptions.append(subscription)
        return subscription

    def _remove(self, subscription: Subscription):
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def play(self, interval: float = 0.0) -> int:
        """
        Deliver every sample to the active subscribers.

        Args:
            interval: Seconds to sleep between samples

        Returns:
            Number of samples delivered to at least one subscriber
        """
        delivered = 0
        for i, sample in enumerate(self.samples):
            if not self._subscriptions:
                break
            for subscription in list(self._subscriptions):
                if subscription.active:
                    subscription.on_sample(sample)
            delivered += 1
            if interval and i < len(self.samples) - 1:
                time.sleep(interval)

        if self.error is not None:
            logger.debug(f"Replay source emitting terminal error: {self.error}")
            for subscription in list(self._subscriptions):
                if subscription.active:
                    subscription.cancel()
                    if subscription.on_error:
                        subscription.on_error(self.error)

        return delivered

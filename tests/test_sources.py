import pytest

from drive_safety.core import LocationError
from drive_safety.safety.models import GeoPoint, PositionSample
from drive_safety.safety.sources import ReplaySource

GPX_WITH_TIMES = """<?xml version="1.0" encoding="UTF-8"?>
<gpx version="1.1" creator="tests" xmlns="http://www.topografix.com/GPX/1/1">
  <trk>
    <name>Test drive</name>
    <trkseg>
      <trkpt lat="17.0000" lon="78.0000"><time>2024-01-01T10:00:00Z</time></trkpt>
      <trkpt lat="17.0010" lon="78.0000"><time>2024-01-01T10:00:10Z</time></trkpt>
      <trkpt lat="17.0020" lon="78.0000"><time>2024-01-01T10:00:20Z</time></trkpt>
    </trkseg>
  </trk>
</gpx>
"""

GPX_WAYPOINTS = """<?xml version="1.0" encoding="UTF-8"?>
<gpx version="1.1" creator="tests" xmlns="http://www.topografix.com/GPX/1/1">
  <wpt lat="1.0" lon="2.0"></wpt>
  <wpt lat="3.0" lon="4.0"></wpt>
</gpx>
"""


def test_play_delivers_in_order():
    samples = [PositionSample(GeoPoint(i, i)) for i in range(5)]
    source = ReplaySource(samples)
    received = []
    source.subscribe(received.append)

    assert source.play() == 5
    assert received == samples


def test_cancel_is_idempotent_and_stops_delivery():
    source = ReplaySource([PositionSample(GeoPoint(i, i)) for i in range(5)])
    received = []

    def on_sample(sample):
        received.append(sample)
        if len(received) == 2:
            subscription.cancel()
            subscription.cancel()

    subscription = source.subscribe(on_sample)
    source.play()

    assert len(received) == 2
    assert not subscription.active
    assert source.subscriber_count == 0


def test_terminal_error_reaches_subscribers_once():
    error = LocationError("Position unavailable")
    source = ReplaySource([PositionSample(GeoPoint(0, 0))], error=error)
    errors = []
    subscription = source.subscribe(lambda s: None, errors.append)
    source.play()

    assert errors == [error]
    assert not subscription.active
    source.play()
    assert errors == [error]


def test_from_gpx_derives_speed(tmp_path):
    gpx_file = tmp_path / "drive.gpx"
    gpx_file.write_text(GPX_WITH_TIMES)

    source = ReplaySource.from_gpx(str(gpx_file))
    assert [s.position for s in source.samples] == [
        GeoPoint(17.0, 78.0), GeoPoint(17.001, 78.0), GeoPoint(17.002, 78.0)
    ]
    assert source.samples[0].speed_mps is None
    # ~111 m in 10 s
    assert source.samples[1].speed_mps == pytest.approx(11.12, abs=0.05)


def test_from_gpx_waypoints_without_time(tmp_path):
    gpx_file = tmp_path / "points.gpx"
    gpx_file.write_text(GPX_WAYPOINTS)

    source = ReplaySource.from_gpx(str(gpx_file))
    assert [s.position for s in source.samples] == [GeoPoint(1.0, 2.0), GeoPoint(3.0, 4.0)]
    assert all(s.speed_mps is None for s in source.samples)

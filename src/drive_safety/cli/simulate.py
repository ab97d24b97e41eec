"""Simulate subcommand implementation."""

import sys
from collections import Counter

from .common import banner, load_settings, load_zones
from ..core.errors import LocationUnsupportedError
from ..safety.alerts import ConsoleAlertSink, SpeechAnnouncer
from ..safety.sources import ReplaySource
from ..safety.tracker import LiveTracker


def run_simulate(args):
    """Replay a GPX track through the live tracker and report the alerts raised."""
    try:
        settings = load_settings(args)
        zones = load_zones(args)
        source = ReplaySource.from_gpx(args.gpx)
    except FileNotFoundError as e:
        print(f"\n❌ Error: File not found: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"\n❌ Error: {e}", file=sys.stderr)
        return 1

    announcer = SpeechAnnouncer() if args.speak else None
    sink = ConsoleAlertSink(announcer=announcer)
    tracker = LiveTracker(zones, settings, sink)
    tracker.voice_enabled = settings.voice_enabled and not args.mute

    banner("📡 LIVE ALERT SIMULATION")
    print(f"Track: {args.gpx} ({len(source.samples)} samples)")
    print(f"Zones: {len(zones)}  Speed limit: {settings.speed_limit_kmh} km/h  "
          f"Voice: {'on' if tracker.voice_enabled else 'off'}\n")

    alerts = Counter()
    max_speed = 0
    errors = []

    def on_sample(sample):
        nonlocal max_speed
        alert = tracker.alert
        if alert:
            alerts[alert.kind.value] += 1
        max_speed = max(max_speed, tracker.speed_kmh)

    try:
        tracker.start(source, on_error=errors.append)
        source.subscribe(on_sample)
        source.play(interval=args.interval)
    except LocationUnsupportedError as e:
        print(f"\n❌ Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\n\n⚠ Simulation interrupted by user")
        return 130
    finally:
        tracker.stop()
        if announcer:
            announcer.cancel()

    print("\n" + "=" * 70)
    print("📊 SIMULATION SUMMARY")
    print("=" * 70)
    print(f"Max speed: {max_speed} km/h")
    if alerts:
        for kind, count in alerts.most_common():
            print(f"  {kind}: {count} samples")
    else:
        print("✓ No alerts raised along this track.")

    if errors:
        print(f"\n❌ Tracking stopped: {errors[0]}", file=sys.stderr)
        return 1
    return 0

"""Analyze subcommand implementation."""

import random
import sys

from .common import banner, load_settings, load_zones, resolve_location
from ..core import calculate_route_length
from ..core.errors import ProviderUnavailableError
from ..core.utils import load_gpx_route
from ..safety.alerts import ConsoleAlertSink
from ..safety.models import GeoPoint, Route, Severity
from ..session import NavigationSession

SEVERITY_ICONS = {
    Severity.LOW: "🟢",
    Severity.MODERATE: "🟠",
    Severity.CRITICAL: "🔴",
}


def _analyze_gpx(session, args):
    points = [GeoPoint(lat, lon) for lat, lon in load_gpx_route(args.gpx)]
    print(f"✓ Loaded {len(points)} points from {args.gpx}")

    route = Route(
        points=points,
        distance_meters=calculate_route_length(points) * 1000,
        duration_seconds=args.duration,
    )
    weather = None
    if args.weather:
        weather = session.weather_at(points[-1])

    generation = session.begin_request()
    return session.apply_route(generation, points[0], points[-1], route, weather)


def _analyze_remote(session, args):
    source = resolve_location(args.source, session)
    dest = resolve_location(args.dest, session, near=source)
    return session.calculate_route(source, dest)


def print_report(context):
    route = context.route
    safety = context.safety
    traffic = context.traffic

    print("\n" + "=" * 70)
    print("📊 ROUTE SAFETY REPORT")
    print("=" * 70)
    print(f"Distance: {route.distance_text}")
    if route.duration_seconds > 0:
        print(f"Duration: {route.duration_text}")
    print(f"Route points: {safety.total_points}")
    print(f"\n{SEVERITY_ICONS[safety.severity]} Accident risk: "
          f"{safety.risk_percentage:.1f}% ({safety.severity.value})")
    print(f"Danger segments: {len(safety.danger_segments)}")

    if safety.risk_zones:
        print("\nZones on route:")
        for zone in safety.risk_zones:
            print(f"  • {zone.name} ({zone.risk_level.value}, "
                  f"{zone.frequency} incidents/yr): {zone.description}")
    else:
        print("\n✓ No accident zones on this route.")

    print(f"\nTraffic (simulated): {traffic.level.value}"
          f" (avg {traffic.avg_speed_kmh:.0f} km/h, {len(traffic.segments)} congested stretches)")

    if context.weather:
        w = context.weather
        print(f"Weather at destination: {w.temperature}°C, wind {w.windspeed} km/h ({w.condition})")


def run_analyze(args):
    """Execute route analysis command."""
    if not args.gpx and not (args.source and args.dest):
        print("\n❌ Error: give either --gpx or both --from and --to", file=sys.stderr)
        return 1

    try:
        settings = load_settings(args)
        zones = load_zones(args)
        rng = random.Random(args.seed) if args.seed is not None else None
        session = NavigationSession(zones, settings, sink=ConsoleAlertSink(), rng=rng)

        banner("🚗 ROUTE SAFETY ANALYSIS")

        if args.gpx:
            context = _analyze_gpx(session, args)
        else:
            context = _analyze_remote(session, args)

        if context is None:
            print("\n❌ Error: no route could be calculated (see log)", file=sys.stderr)
            return 1

        print_report(context)

        if args.output_geojson:
            session.analyzer.export_to_geojson(
                context.safety,
                args.output_geojson,
                route_points=context.route.points,
                traffic=context.traffic,
            )

        if args.output_gpx:
            session.analyzer.export_to_gpx(
                context.safety,
                args.output_gpx,
                route_points=context.route.points,
            )

        return 0

    except KeyboardInterrupt:
        print("\n\n⚠ Analysis interrupted by user")
        return 130
    except FileNotFoundError as e:
        print(f"\n❌ Error: File not found: {e}", file=sys.stderr)
        return 1
    except (ValueError, ProviderUnavailableError) as e:
        print(f"\n❌ Error during analysis: {e}", file=sys.stderr)
        return 1

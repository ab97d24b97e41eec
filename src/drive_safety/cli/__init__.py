"""Command-line interface for Drive Safety."""

import sys
import logging
import argparse


def _add_common_options(parser):
    parser.add_argument(
        "--config",
        help="Path to settings YAML file (default: built-in settings)"
    )
    parser.add_argument(
        "--zones",
        help="Path to zone catalogue YAML file (default: built-in catalogue)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging"
    )


def build_parser():
    parser = argparse.ArgumentParser(
        prog="drive-safety",
        description="Check routes against accident-prone zones and simulate live alerts"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Zones subcommand
    zones_parser = subparsers.add_parser(
        "zones",
        help="List the accident zone catalogue"
    )
    _add_common_options(zones_parser)
    zones_parser.add_argument(
        "--geojson",
        help="Also write the zones to a GeoJSON file"
    )

    # Analyze subcommand
    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Calculate a route and evaluate its accident risk"
    )
    _add_common_options(analyze_parser)
    analyze_parser.add_argument(
        "--from",
        dest="source",
        help="Start as 'LAT,LNG' or a place name to geocode"
    )
    analyze_parser.add_argument(
        "--to",
        dest="dest",
        help="Destination as 'LAT,LNG' or a place name to geocode"
    )
    analyze_parser.add_argument(
        "--gpx",
        help="Analyse the route in this GPX file instead of calling the router"
    )
    analyze_parser.add_argument(
        "--duration",
        type=float,
        default=0.0,
        help="Travel time in seconds for a GPX route (enables traffic estimate)"
    )
    analyze_parser.add_argument(
        "--seed",
        type=int,
        help="Seed for the traffic simulation"
    )
    analyze_parser.add_argument(
        "--no-weather",
        dest="weather",
        action="store_false",
        help="Skip the destination weather lookup"
    )
    analyze_parser.add_argument(
        "--output-geojson",
        help="Write route, danger segments, traffic and zones to GeoJSON"
    )
    analyze_parser.add_argument(
        "--output-gpx",
        help="Write route and danger segments to GPX"
    )

    # Simulate subcommand
    simulate_parser = subparsers.add_parser(
        "simulate",
        help="Replay a GPX track through the live alert engine"
    )
    _add_common_options(simulate_parser)
    simulate_parser.add_argument(
        "--gpx",
        required=True,
        help="GPX track to replay as position samples"
    )
    simulate_parser.add_argument(
        "--interval",
        type=float,
        default=0.0,
        help="Seconds between samples (default: 0, as fast as possible)"
    )
    simulate_parser.add_argument(
        "--mute",
        action="store_true",
        help="Disable voice announcements"
    )
    simulate_parser.add_argument(
        "--speak",
        action="store_true",
        help="Speak announcements aloud (requires drive-safety[voice])"
    )

    return parser


def main(argv=None):
    """Main CLI entry point with subcommands."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    # Route to appropriate subcommand
    if args.command == "zones":
        from .zones import run_zones
        sys.exit(run_zones(args))
    elif args.command == "analyze":
        from .analyze import run_analyze
        sys.exit(run_analyze(args))
    elif args.command == "simulate":
        from .simulate import run_simulate
        sys.exit(run_simulate(args))


if __name__ == "__main__":
    main()

"""Zones subcommand implementation."""

import json
import sys
from pathlib import Path

from .common import banner, load_zones
from ..safety.analyzer import zone_features


def run_zones(args):
    """List the zone catalogue and optionally export it as GeoJSON."""
    try:
        zones = load_zones(args)
    except (FileNotFoundError, ValueError) as e:
        print(f"\n❌ Error loading zones: {e}", file=sys.stderr)
        return 1

    banner(f"🚧 ACCIDENT ZONES ({len(zones)})")
    for zone in zones:
        print(f"\n[{zone.id}] {zone.name}  ({zone.risk_level.value})")
        print(f"    {zone.description}")
        print(f"    Incidents/year: {zone.frequency}")
        print(f"    Center: {zone.center}  Vertices: {len(zone.path)}")
        if zone.is_degenerate:
            print("    ⚠️  Degenerate polygon, never matches")

    if args.geojson:
        output_file = Path(args.geojson)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        with open(output_file, 'w', encoding='utf-8') as f:
            json.dump({"type": "FeatureCollection", "features": zone_features(zones)}, f, indent=2)
        print(f"\n✓ Exported {len(zones)} zones to GeoJSON: {args.geojson}")

    return 0

"""Accident-prone zone catalogue."""

from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence

import yaml

from .models import GeoPoint, RiskLevel, Zone


# Built-in catalogue (Hyderabad)
DEFAULT_ZONES = [
    {
        'id': 1,
        'name': "Paradise Circle Junction",
        'description': "High traffic convergence. Frequent merging accidents.",
        'risk_level': "HIGH",
        'color': "#FF3B30",
        'frequency': 145,
        'center': {'lat': 17.4409, 'lng': 78.4884},
        'path': [
            {'lat': 17.4410, 'lng': 78.4860},
            {'lat': 17.4435, 'lng': 78.4885},
            {'lat': 17.4405, 'lng': 78.4910},
            {'lat': 17.4385, 'lng': 78.4880},
        ],
    },
    {
        'id': 2,
        'name': "Panjagutta Main Road",
        'description': "Congested flyover entry. Sudden braking hazard.",
        'risk_level': "MEDIUM",
        'color': "#FF9500",
        'frequency': 98,
        'center': {'lat': 17.4253, 'lng': 78.4515},
        'path': [
            {'lat': 17.4255, 'lng': 78.4490},
            {'lat': 17.4270, 'lng': 78.4520},
            {'lat': 17.4250, 'lng': 78.4540},
            {'lat': 17.4235, 'lng': 78.4510},
        ],
    },
    {
        'id': 3,
        'name': "LB Nagar Ring Road",
        'description': "Heavy vehicle crossing zone. Pedestrian risk high.",
        'risk_level': "HIGH",
        'color': "#FF3B30",
        'frequency': 167,
        'center': {'lat': 17.3488, 'lng': 78.5508},
        'path': [
            {'lat': 17.3490, 'lng': 78.5480},
            {'lat': 17.3520, 'lng': 78.5510},
            {'lat': 17.3480, 'lng': 78.5540},
            {'lat': 17.3460, 'lng': 78.5500},
        ],
    },
]


def _parse_point(raw, context: str) -> GeoPoint:
    try:
        if isinstance(raw, dict):
            return GeoPoint(float(raw['lat']), float(raw['lng']))
        lat, lng = raw
        return GeoPoint(float(lat), float(lng))
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"{context}: invalid coordinate {raw!r} ({e})")


def zone_from_dict(raw: Dict) -> Zone:
    """
    Build a Zone from a plain mapping.

    Args:
        raw: Mapping with id, name, path and optional metadata

    Returns:
        Zone

    Raises:
        ValueError: If the zone definition is invalid
    """
    if 'id' not in raw or 'path' not in raw:
        raise ValueError(f"Zone definition needs 'id' and 'path': {raw!r}")

    label = f"Zone {raw['id']}"
    path = tuple(_parse_point(p, label) for p in raw['path'])
    if len(set(path)) < 3:
        raise ValueError(f"{label}: polygon needs at least 3 distinct vertices")

    if raw.get('center') is not None:
        center = _parse_point(raw['center'], label)
    else:
        center = GeoPoint(
            sum(p.lat for p in path) / len(path),
            sum(p.lng for p in path) / len(path),
        )

    frequency = int(raw.get('frequency', 0))
    if frequency < 0:
        raise ValueError(f"{label}: frequency must be >= 0")

    try:
        risk_level = RiskLevel(str(raw.get('risk_level', "MEDIUM")).upper())
    except ValueError:
        raise ValueError(f"{label}: unknown risk level {raw.get('risk_level')!r}")

    return Zone(
        id=raw['id'],
        name=raw.get('name', label),
        description=raw.get('description', ""),
        risk_level=risk_level,
        color=raw.get('color', "#FF3B30"),
        frequency=frequency,
        center=center,
        path=path,
    )


class ZoneRegistry:
    """Ordered, read-only collection of accident zones."""

    def __init__(self, zones: Sequence[Zone]):
        ids = [z.id for z in zones]
        duplicates = {i for i in ids if ids.count(i) > 1}
        if duplicates:
            raise ValueError(f"Duplicate zone ids: {sorted(duplicates)}")

        self._zones = tuple(zones)
        self._by_id = {z.id: z for z in self._zones}

    @classmethod
    def default(cls) -> 'ZoneRegistry':
        """Registry holding the built-in catalogue."""
        return cls.from_dicts(DEFAULT_ZONES)

    @classmethod
    def from_dicts(cls, records: List[Dict]) -> 'ZoneRegistry':
        return cls([zone_from_dict(r) for r in records])

    @classmethod
    def from_yaml(cls, yaml_path: str) -> 'ZoneRegistry':
        """
        Load a catalogue from a YAML file with a top-level 'zones' list.

        Args:
            yaml_path: Path to YAML catalogue

        Returns:
            ZoneRegistry instance
        """
        path = Path(yaml_path)
        if not path.exists():
            raise FileNotFoundError(f"Zone file not found: {yaml_path}")

        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in zone file: {e}")

        records = data.get('zones') if isinstance(data, dict) else None
        if not records:
            raise ValueError(f"No zones defined in {yaml_path}")

        return cls.from_dicts(records)

    def __iter__(self) -> Iterator[Zone]:
        return iter(self._zones)

    def __len__(self) -> int:
        return len(self._zones)

    def __contains__(self, zone_id) -> bool:
        return zone_id in self._by_id

    def get(self, zone_id) -> Optional[Zone]:
        """Look up a zone by id."""
        return self._by_id.get(zone_id)

    def __getitem__(self, zone_id) -> Zone:
        return self._by_id[zone_id]

    def __repr__(self) -> str:
        return f"ZoneRegistry({len(self._zones)} zones)"

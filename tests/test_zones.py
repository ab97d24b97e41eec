import pytest

from drive_safety.safety.models import GeoPoint, RiskLevel
from drive_safety.safety.zones import ZoneRegistry, zone_from_dict

from conftest import SQUARE_ZONE, HUB_ZONE


def test_default_catalogue():
    zones = ZoneRegistry.default()
    assert len(zones) == 3
    assert [z.id for z in zones] == [1, 2, 3]
    assert zones[2].name == "Panjagutta Main Road"
    assert zones.get(2).risk_level is RiskLevel.MEDIUM
    assert 3 in zones
    assert zones.get(99) is None


def test_iteration_order_is_registry_order(test_zones):
    assert [z.id for z in test_zones] == ["square", "hub"]


def test_zone_is_immutable(square_zones):
    zone = square_zones.get("square")
    with pytest.raises(Exception):
        zone.name = "Changed"


def test_center_defaults_to_vertex_average():
    raw = dict(SQUARE_ZONE)
    del raw['center']
    zone = zone_from_dict(raw)
    assert zone.center == GeoPoint(0.5, 0.5)


def test_heat_hints():
    zone = zone_from_dict(dict(SQUARE_ZONE, frequency=100))
    assert zone.heat_radius_m == pytest.approx(400.0)
    assert zone.heat_opacity == pytest.approx(0.1 + 100 / 300)

    busy = zone_from_dict(dict(SQUARE_ZONE, frequency=900))
    assert busy.heat_opacity == 1.0


@pytest.mark.parametrize("change,message", [
    ({'path': [{'lat': 0, 'lng': 0}, {'lat': 1, 'lng': 1}]}, "3 distinct"),
    ({'path': [{'lat': 0, 'lng': 0}, {'lat': 0, 'lng': 0}, {'lat': 1, 'lng': 1}]}, "3 distinct"),
    ({'path': [{'lat': 95, 'lng': 0}, {'lat': 0, 'lng': 1}, {'lat': 1, 'lng': 1}]}, "invalid coordinate"),
    ({'frequency': -1}, "frequency"),
    ({'risk_level': "EXTREME"}, "risk level"),
])
def test_invalid_zone_definitions(change, message):
    with pytest.raises(ValueError, match=message):
        zone_from_dict(dict(SQUARE_ZONE, **change))


def test_duplicate_ids_rejected():
    with pytest.raises(ValueError, match="Duplicate"):
        ZoneRegistry.from_dicts([SQUARE_ZONE, SQUARE_ZONE])


def test_from_yaml(tmp_path):
    zone_file = tmp_path / "zones.yaml"
    zone_file.write_text(
        "zones:\n"
        "  - id: 7\n"
        "    name: Ring Road Merge\n"
        "    risk_level: high\n"
        "    frequency: 42\n"
        "    path:\n"
        "      - [17.0, 78.0]\n"
        "      - [17.0, 78.1]\n"
        "      - [17.1, 78.1]\n"
    )
    zones = ZoneRegistry.from_yaml(str(zone_file))
    zone = zones.get(7)
    assert zone.name == "Ring Road Merge"
    assert zone.risk_level is RiskLevel.HIGH
    assert zone.frequency == 42
    assert len(zone.path) == 3


def test_from_yaml_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        ZoneRegistry.from_yaml(str(tmp_path / "missing.yaml"))

    empty = tmp_path / "empty.yaml"
    empty.write_text("zones: []\n")
    with pytest.raises(ValueError, match="No zones"):
        ZoneRegistry.from_yaml(str(empty))

    broken = tmp_path / "broken.yaml"
    broken.write_text("zones: [\n")
    with pytest.raises(ValueError, match="Invalid YAML"):
        ZoneRegistry.from_yaml(str(broken))


def test_hub_zone_is_small():
    zone = zone_from_dict(HUB_ZONE)
    assert not zone.is_degenerate
    assert zone.bounds == (9.999, 9.999, 10.001, 10.001)

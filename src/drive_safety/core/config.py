"""Configuration management for Drive Safety."""

import copy
from pathlib import Path
from typing import Optional

import yaml


class Settings:
    """Parse and manage alerting, scoring and provider settings."""

    DEFAULT_ALERTS = {
        'speed_limit_kmh': 80,
        'approach_radius_m': 500.0,
        'voice_enabled': True,
    }

    # Risk percentage thresholds (exclusive lower bounds)
    DEFAULT_RISK_THRESHOLDS = {
        'critical': 30.0,
        'moderate': 10.0,
    }

    DEFAULT_TRAFFIC = {
        'heavy_below_kmh': 25.0,
        'moderate_below_kmh': 45.0,
        'spawn_probability': {
            'Heavy': 0.5,
            'Moderate': 0.3,
            'Light': 0.1,
        },
        'heavy_share': 0.4,
        'end_probability': 0.2,
        'max_segment_points': 10,
    }

    DEFAULT_PROVIDERS = {
        'osrm_url': "https://router.project-osrm.org",
        'nominatim_url': "https://nominatim.openstreetmap.org",
        'open_meteo_url': "https://api.open-meteo.com",
        'user_agent': "drive-safety/0.1",
        'timeout': 10,
    }

    def __init__(self, config_file: Optional[str] = None):
        """
        Initialize settings.

        Args:
            config_file: Path to YAML settings file. If None, uses defaults.
        """
        self.alerts = self.DEFAULT_ALERTS.copy()
        self.risk_thresholds = self.DEFAULT_RISK_THRESHOLDS.copy()
        self.traffic = copy.deepcopy(self.DEFAULT_TRAFFIC)
        self.providers = self.DEFAULT_PROVIDERS.copy()

        if config_file:
            self._load_config(config_file)

    @classmethod
    def from_yaml(cls, yaml_path: str) -> 'Settings':
        """
        Load settings from YAML, falling back to defaults on any problem.

        Args:
            yaml_path: Path to YAML settings file

        Returns:
            Settings instance
        """
        yaml_file = Path(yaml_path)

        if not yaml_file.exists():
            print(f"⚠️  Settings file not found: {yaml_path}")
            print(f"   Using default settings")
            return cls()

        try:
            return cls(config_file=yaml_path)
        except ValueError as e:
            print(f"⚠️  Error loading settings file: {e}")
            print(f"   Using default settings")
            return cls()

    def _load_config(self, config_file: str):
        """Load configuration from YAML file."""
        config_path = Path(config_file)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_file}")

        try:
            with open(config_path) as f:
                config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in config file: {e}")

        if not isinstance(config, dict):
            raise ValueError(f"Settings file must contain a mapping: {config_file}")

        for section in ('alerts', 'risk_thresholds', 'traffic', 'providers'):
            if section in config and not isinstance(config[section], dict):
                raise ValueError(f"Section '{section}' must be a mapping in {config_file}")

        spawn = config.get('traffic', {}).get('spawn_probability', {})
        if not isinstance(spawn, dict):
            raise ValueError(f"Section 'traffic.spawn_probability' must be a mapping in {config_file}")

        if 'alerts' in config:
            self.alerts.update(config['alerts'])

        if 'risk_thresholds' in config:
            self.risk_thresholds.update(config['risk_thresholds'])

        if 'traffic' in config:
            traffic = dict(config['traffic'])
            if 'spawn_probability' in traffic:
                self.traffic['spawn_probability'].update(traffic.pop('spawn_probability'))
            self.traffic.update(traffic)

        if 'providers' in config:
            self.providers.update(config['providers'])

    # Alerts
    @property
    def speed_limit_kmh(self) -> int:
        return self.alerts['speed_limit_kmh']

    @property
    def approach_radius_m(self) -> float:
        return float(self.alerts['approach_radius_m'])

    @property
    def voice_enabled(self) -> bool:
        return bool(self.alerts['voice_enabled'])

    # Risk
    def get_threshold(self, level: str) -> float:
        """Get risk percentage threshold for a severity level."""
        return float(self.risk_thresholds[level])

    # Traffic
    def get_spawn_probability(self, level_name: str) -> float:
        return float(self.traffic['spawn_probability'].get(level_name, 0.1))

    # Providers
    def get_provider_url(self, name: str) -> str:
        return self.providers[f"{name}_url"].rstrip("/")

    @property
    def timeout(self) -> float:
        return self.providers['timeout']

    @property
    def user_agent(self) -> str:
        return self.providers['user_agent']

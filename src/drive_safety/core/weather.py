"""Open-Meteo current weather lookup."""

import logging

import requests

from ..safety.models import Weather

logger = logging.getLogger(__name__)

DEFAULT_OPEN_METEO_URL = "https://api.open-meteo.com"


def fetch_weather(lat, lng, base_url=DEFAULT_OPEN_METEO_URL, timeout=10, session=None):
    """
    Fetch current weather at a location.

    Args:
        lat, lng: Location in decimal degrees
        base_url: Open-Meteo API URL
        timeout: Request timeout in seconds
        session: Optional requests.Session

    Returns:
        Weather, or None if the provider failed
    """
    http = session or requests
    try:
        response = http.get(
            f"{base_url.rstrip('/')}/v1/forecast",
            params={"latitude": lat, "longitude": lng, "current_weather": "true"},
            timeout=timeout,
        )
        response.raise_for_status()
        current = response.json()["current_weather"]
        return Weather(
            temperature=float(current["temperature"]),
            windspeed=float(current["windspeed"]),
            weathercode=int(current["weathercode"]),
        )
    except (requests.RequestException, ValueError, KeyError, TypeError) as e:
        logger.error(f"Weather fetch error: {e}")
        return None

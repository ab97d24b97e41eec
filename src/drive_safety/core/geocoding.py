"""Nominatim geocoding: address search and reverse lookup."""

import logging

import requests

from .errors import ProviderUnavailableError
from ..safety.models import Place

logger = logging.getLogger(__name__)

DEFAULT_NOMINATIM_URL = "https://nominatim.openstreetmap.org"
MIN_QUERY_LENGTH = 3
VIEWBOX_DEGREES = 0.5


class NominatimGeocoder:
    """Forward and reverse geocoding against a Nominatim server."""

    def __init__(self, base_url=DEFAULT_NOMINATIM_URL, user_agent="drive-safety/0.1",
                 timeout=10, session=None):
        """
        Args:
            base_url: Nominatim server URL
            user_agent: Identifying User-Agent (required by the public server)
            timeout: Request timeout in seconds
            session: Optional requests.Session
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {"User-Agent": user_agent}

    def search(self, query, near=None, limit=5):
        """
        Search places by free text.

        Args:
            query: Address or place name
            near: Optional GeoPoint to bias results towards
            limit: Maximum number of results

        Returns:
            List of Place; empty for queries shorter than 3 characters

        Raises:
            ProviderUnavailableError: On network or response failure
        """
        query = (query or "").strip()
        if len(query) < MIN_QUERY_LENGTH:
            return []

        params = {
            "format": "json",
            "q": query,
            "limit": limit,
            "addressdetails": 1,
        }
        if near is not None:
            params["viewbox"] = (
                f"{near.lng - VIEWBOX_DEGREES},{near.lat - VIEWBOX_DEGREES},"
                f"{near.lng + VIEWBOX_DEGREES},{near.lat + VIEWBOX_DEGREES}"
            )

        data = self._get("/search", params)

        places = []
        for item in data:
            try:
                places.append(Place(
                    display_name=item["display_name"],
                    lat=float(item["lat"]),
                    lng=float(item["lon"]),
                ))
            except (KeyError, TypeError, ValueError):
                logger.debug(f"Skipping malformed geocoding hit: {item!r}")
        return places

    def reverse(self, lat, lng):
        """
        Resolve coordinates to a display name.

        Falls back to a formatted coordinate string when the lookup fails.
        """
        try:
            data = self._get("/reverse", {"format": "json", "lat": lat, "lon": lng})
            name = data.get("display_name") if isinstance(data, dict) else None
            if name:
                return name
        except ProviderUnavailableError as e:
            logger.warning(f"Reverse geocoding failed: {e}")
        return f"{lat:.4f}, {lng:.4f}"

    def _get(self, path, params):
        try:
            response = self.session.get(
                f"{self.base_url}{path}",
                params=params,
                headers=self.headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            return response.json()
        except (requests.RequestException, ValueError) as e:
            raise ProviderUnavailableError("geocoding", e)

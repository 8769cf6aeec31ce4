"""
Geocoding service for converting coordinates to a display address.
"""
import logging
from typing import Optional

import requests

from ..exceptions import GeocodingError
from .. import gcp_clients

logger = logging.getLogger(__name__)


class GeocodingService:
    """Service for reverse geocoding against a Nominatim endpoint."""

    def __init__(self, http_session=None, base_url: str = "", user_agent: str = ""):
        """
        Initialize geocoding service.

        Args:
            http_session: requests session (or None to use global session)
            base_url: Reverse geocoding endpoint
            user_agent: Client label sent with every request
        """
        self.http = http_session or gcp_clients.http_session or requests.Session()
        self.base_url = base_url or gcp_clients.NOMINATIM_URL
        self.user_agent = user_agent or gcp_clients.GEOCODER_USER_AGENT

    def reverse_geocode(self, latitude: float, longitude: float) -> Optional[str]:
        """
        Get a display address for coordinates.

        Args:
            latitude: Latitude coordinate
            longitude: Longitude coordinate

        Returns:
            str: The display name, or None when the service has no answer

        Raises:
            GeocodingError: If the request cannot be completed
        """
        params = {"format": "jsonv2", "lat": latitude, "lon": longitude}
        headers = {"User-Agent": self.user_agent}

        try:
            response = self.http.get(self.base_url, params=params, headers=headers)
        except requests.RequestException as e:
            logger.error(f"Geocoding failed for ({latitude}, {longitude}): {e}")
            raise GeocodingError(f"Reverse geocoding request failed: {str(e)}")

        if not response.ok:
            logger.warning(f"Geocoding returned {response.status_code} for ({latitude}, {longitude})")
            return None

        try:
            data = response.json()
        except ValueError as e:
            raise GeocodingError(f"Invalid geocoding response: {str(e)}")

        return data.get("display_name") or None

import logging
from typing import Any, Dict, Optional

import requests

from weather_dashboard.config.settings import settings
from weather_dashboard.errors import ProviderError
from weather_dashboard.models import Coordinates
from weather_dashboard.protocols import Location

logger = logging.getLogger(__name__)


class OpenWeatherClient:
    """
    Client for the OpenWeatherMap REST API.
    Every call is a single forward: no caching, no retries.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        geo_url: Optional[str] = None,
        units: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        if api_key is None and settings.WEATHER_API_KEY is not None:
            api_key = settings.WEATHER_API_KEY.get_secret_value()
        if not api_key:
            logger.warning("WEATHER_API_KEY is not set; upstream calls will be rejected.")
        self.api_key = api_key or ""
        self.base_url = (base_url or settings.OPENWEATHER_BASE_URL).rstrip("/")
        self.geo_url = (geo_url or settings.OPENWEATHER_GEO_URL).rstrip("/")
        self.units = units or settings.UNITS
        self.timeout = timeout or settings.REQUEST_TIMEOUT
        self.session = requests.Session()

    def _location_params(self, location: Location) -> Dict[str, Any]:
        if isinstance(location, Coordinates):
            return {"lat": location.lat, "lon": location.lon}
        return {"q": location}

    def _get(self, url: str, params: Dict[str, Any]) -> Any:
        params = dict(params, appid=self.api_key)
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.RequestException as e:
            status = e.response.status_code if e.response is not None else None
            logger.error(f"OpenWeatherMap request to {url} failed: {e}")
            if e.response is not None:
                logger.error(f"Response: {e.response.text}")
            raise ProviderError(f"OpenWeatherMap request failed: {e}", status) from e

    def get_current(self, location: Location) -> Dict[str, Any]:
        """Current conditions for a city name or coordinates."""
        params = self._location_params(location)
        params["units"] = self.units
        return self._get(f"{self.base_url}/weather", params)

    def get_forecast(self, location: Location) -> Dict[str, Any]:
        """
        Five day forecast in 3-hour steps.
        The samples are under the ``list`` key, 8 per day.
        """
        params = self._location_params(location)
        params["units"] = self.units
        return self._get(f"{self.base_url}/forecast", params)

    def reverse_geocode(self, lat: float, lon: float) -> Optional[str]:
        """
        Returns the nearest place name for the coordinates, or None.
        """
        places = self._get(f"{self.geo_url}/reverse", {"lat": lat, "lon": lon, "limit": 1})
        if places and isinstance(places, list):
            return places[0].get("name") or None
        return None

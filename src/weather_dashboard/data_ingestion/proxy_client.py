import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests

from weather_dashboard.config.settings import settings
from weather_dashboard.errors import ProviderError
from weather_dashboard.models import Coordinates, LocationInfo
from weather_dashboard.protocols import Location

logger = logging.getLogger(__name__)


class ProxyClient:
    """
    Client for the weather proxy service.
    Implements the WeatherProvider protocol used by the cache manager.
    """

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None):
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self.timeout = timeout or settings.REQUEST_TIMEOUT
        self.session = requests.Session()

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"Proxy request to {url} failed: {e}")
            raise ProviderError(f"Proxy unreachable: {e}") from e

        if not response.ok:
            message = response.reason or "Upstream error"
            try:
                body = response.json()
            except ValueError:
                body = None
            if isinstance(body, dict) and body.get("error"):
                message = body["error"]
            logger.warning(f"Proxy returned {response.status_code} for {path}: {message}")
            raise ProviderError(message, response.status_code)

        try:
            body = response.json()
        except ValueError as e:
            logger.error(f"Proxy returned an unreadable body for {path}: {e}")
            raise ProviderError("Unreadable response from proxy", response.status_code) from e
        if not isinstance(body, dict):
            logger.error(f"Proxy returned {type(body).__name__} instead of an object for {path}")
            raise ProviderError("Unexpected response from proxy", response.status_code)
        return body

    def _location_request(self, resource: str, location: Location) -> Any:
        if isinstance(location, Coordinates):
            return self._get(f"/{resource}", {"lat": location.lat, "lon": location.lon})
        return self._get(f"/{resource}/{quote(location, safe='')}")

    def get_current(self, location: Location) -> Dict[str, Any]:
        return self._location_request("weather", location)

    def get_forecast(self, location: Location) -> Dict[str, Any]:
        return self._location_request("forecast", location)

    def resolve_location(self) -> LocationInfo:
        return LocationInfo(**self._get("/location"))

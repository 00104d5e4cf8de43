import ipaddress
import logging
from typing import Any, Dict, Optional

import requests

from weather_dashboard.config.settings import settings
from weather_dashboard.errors import ProviderError

logger = logging.getLogger(__name__)


def is_public_ip(ip: Optional[str]) -> bool:
    """True for a routable address ipdata can look up."""
    if not ip:
        return False
    try:
        return ipaddress.ip_address(ip).is_global
    except ValueError:
        return False


class IpDataClient:
    """
    Client for the ipdata.co IP geolocation API.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        if api_key is None and settings.IPDATA_API_KEY is not None:
            api_key = settings.IPDATA_API_KEY.get_secret_value()
        self.api_key = api_key or ""
        self.base_url = (base_url or settings.IPDATA_BASE_URL).rstrip("/")
        self.timeout = timeout or settings.REQUEST_TIMEOUT
        self.session = requests.Session()

    def lookup(self, ip: Optional[str] = None) -> Dict[str, Any]:
        """
        Geolocates ``ip``. Private, loopback or missing addresses are
        not sent, so ipdata resolves the address the request came from.
        """
        url = f"{self.base_url}/{ip}" if is_public_ip(ip) else self.base_url
        try:
            response = self.session.get(
                url, params={"api-key": self.api_key}, timeout=self.timeout
            )
            response.raise_for_status()
            return response.json()
        except requests.exceptions.RequestException as e:
            status = e.response.status_code if e.response is not None else None
            logger.error(f"ipdata lookup failed: {e}")
            raise ProviderError(f"ipdata lookup failed: {e}", status) from e

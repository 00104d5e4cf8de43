import logging
from typing import Optional

from weather_dashboard.data_ingestion.ipdata_client import IpDataClient
from weather_dashboard.data_ingestion.weather_client import OpenWeatherClient
from weather_dashboard.models import LocationInfo

logger = logging.getLogger(__name__)


class LocationResolver:
    """
    Resolves a caller's location from its IP address.
    Falls back to reverse geocoding when the IP provider has no city.
    """

    def __init__(self, ip_client: IpDataClient, weather_client: OpenWeatherClient):
        self.ip_client = ip_client
        self.weather_client = weather_client

    def resolve(self, ip: Optional[str] = None) -> LocationInfo:
        data = self.ip_client.lookup(ip)
        latitude = data.get("latitude")
        longitude = data.get("longitude")
        city = data.get("city")

        if not city and latitude is not None and longitude is not None:
            logger.info(f"No city for {latitude},{longitude}, trying reverse geocoding")
            city = self.weather_client.reverse_geocode(latitude, longitude)

        return LocationInfo(
            city=city or None,
            region=data.get("region"),
            country=data.get("country_name"),
            latitude=latitude,
            longitude=longitude,
        )

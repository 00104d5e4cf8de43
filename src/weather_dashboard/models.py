from datetime import datetime, timezone
from typing import Any, Dict, List, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field


class Coordinates(NamedTuple):
    lat: float
    lon: float

    @property
    def key(self) -> str:
        """Fallback location key when the provider returns no place name."""
        return f"{self.lat},{self.lon}"


class CacheEntry(BaseModel):
    """
    Last fetched weather for one location.

    Stored on disk as ``{"weather", "forecast", "cachedAt"}``.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    current: Dict[str, Any] = Field(alias="weather")
    forecast: List[Dict[str, Any]] = []
    fetched_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), alias="cachedAt"
    )


class PersistedState(BaseModel):
    """The two keyed records kept in client storage."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    history: List[str] = Field(default_factory=list, alias="searchHistory")
    cache: Dict[str, CacheEntry] = Field(default_factory=dict, alias="searchCache")


class LocationInfo(BaseModel):
    """Location resolved from the caller's IP address."""

    model_config = ConfigDict(extra="ignore")

    city: Optional[str] = None
    region: Optional[str] = None
    country: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def coordinates(self) -> Optional[Coordinates]:
        if self.latitude is None or self.longitude is None:
            return None
        return Coordinates(self.latitude, self.longitude)

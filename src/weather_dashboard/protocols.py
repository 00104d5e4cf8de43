"""
Protocol interfaces for the dashboard's collaborators.

These protocols define the contracts the cache manager depends on,
enabling easier testing, mocking, and implementation swapping.
"""

from typing import Any, Dict, Protocol, Union, runtime_checkable

from weather_dashboard.models import Coordinates, LocationInfo, PersistedState

Location = Union[str, Coordinates]


@runtime_checkable
class WeatherProvider(Protocol):
    """Protocol for the weather proxy service as seen by the client."""

    def get_current(self, location: Location) -> Dict[str, Any]:
        """
        Fetch current conditions for a city name or coordinates.

        Returns
        -------
        Dict[str, Any]
            Provider payload, unchanged.

        Raises
        ------
        ProviderError
            When the upstream call fails.
        """
        ...

    def get_forecast(self, location: Location) -> Dict[str, Any]:
        """
        Fetch the fixed-interval forecast feed for a location.

        Returns
        -------
        Dict[str, Any]
            Provider payload; samples are under ``list``.
        """
        ...

    def resolve_location(self) -> LocationInfo:
        """
        Resolve the caller's location from its IP address.

        Returns
        -------
        LocationInfo
            City (may be None), region, country and coordinates.
        """
        ...


@runtime_checkable
class StateStore(Protocol):
    """Protocol for durable storage of the search history and cache."""

    def load(self) -> PersistedState:
        """Return the stored state, or an empty state when none is usable."""
        ...

    def save(self, state: PersistedState) -> None:
        """Replace the stored state."""
        ...

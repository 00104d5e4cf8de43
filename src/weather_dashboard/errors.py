"""
Exception hierarchy shared by the proxy service and the dashboard client.
"""

from typing import Optional


class WeatherDashboardError(Exception):
    """Base class for all weather dashboard errors."""


class ValidationError(WeatherDashboardError):
    """Required input was missing or malformed. Maps to HTTP 400."""

    status_code = 400


class ProviderError(WeatherDashboardError):
    """
    An upstream call failed or returned a non-2xx status.

    ``status_code`` is the upstream status when one was received, ``None``
    for transport failures (DNS, refused connection, timeout).
    """

    default_status = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def http_status(self, default: Optional[int] = None) -> int:
        """Status to relay downstream: the upstream one, else ``default``."""
        if self.status_code:
            return self.status_code
        return default if default is not None else self.default_status


class FetchError(ProviderError):
    """A dashboard search could not fetch weather data."""


class CacheMiss(WeatherDashboardError):
    """A history entry exists but its cache entry does not."""

    def __init__(self, key: str):
        super().__init__(f"No cached weather for '{key}'")
        self.key = key


class HistoryIndexError(WeatherDashboardError, IndexError):
    """Requested history index is outside the current history."""

"""
Search history and weather cache for the dashboard.

``WeatherCacheManager`` is the single owner of the cache, the history list
and the active index. Searching goes to the network; browsing the history
(``select_by_index`` / ``advance``) only ever reads the cache.
"""

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Set

from weather_dashboard.config.settings import settings
from weather_dashboard.errors import (
    CacheMiss,
    FetchError,
    HistoryIndexError,
    ProviderError,
    ValidationError,
)
from weather_dashboard.models import CacheEntry, Coordinates, PersistedState
from weather_dashboard.protocols import Location, StateStore, WeatherProvider
from weather_dashboard.state_manager import InMemoryStateStore

logger = logging.getLogger(__name__)

FETCH_ERROR_MESSAGE = "Could not fetch weather data."
LOCATION_ERROR_MESSAGE = "Could not detect your location."


class Direction(Enum):
    FORWARD = 1
    BACKWARD = -1


def normalize_location_key(raw: str) -> str:
    """Trims a typed location; blank input is rejected."""
    key = raw.strip() if isinstance(raw, str) else ""
    if not key:
        raise ValidationError("Location must not be empty")
    return key


def downsample_forecast(samples: Sequence[Any], stride: int = 8) -> List[Any]:
    """
    Keeps samples 0, stride, 2*stride, ... in their original order.

    With the provider's 3-hour feed and the default stride this yields one
    sample per day. It does not look at timestamps.
    """
    if stride < 1:
        raise ValueError(f"stride must be positive, got {stride}")
    return list(samples[::stride])


class WeatherCacheManager:
    """
    Owns the search history, the per-location cache and the active index.

    Parameters
    ----------
    provider : WeatherProvider
        Network collaborator used by ``search``.
    store : StateStore, optional
        Durable storage for history and cache. Defaults to in-memory.
    history_limit : int, optional
        Maximum history length (default ``settings.HISTORY_LIMIT``).
    forecast_stride : int, optional
        Downsampling stride (default ``settings.FORECAST_STRIDE``).
    clock : callable, optional
        Returns the timestamp recorded on new cache entries.
    """

    def __init__(
        self,
        provider: WeatherProvider,
        store: Optional[StateStore] = None,
        history_limit: Optional[int] = None,
        forecast_stride: Optional[int] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.provider = provider
        self.store = store if store is not None else InMemoryStateStore()
        self.history_limit = settings.HISTORY_LIMIT if history_limit is None else history_limit
        self.forecast_stride = settings.FORECAST_STRIDE if forecast_stride is None else forecast_stride
        if self.history_limit < 1:
            raise ValueError(f"history_limit must be positive, got {self.history_limit}")
        if self.forecast_stride < 1:
            raise ValueError(f"forecast_stride must be positive, got {self.forecast_stride}")
        self._clock = clock or (lambda: datetime.now(timezone.utc))

        self._cache: Dict[str, CacheEntry] = {}
        self._history: List[str] = []
        self._active_index: Optional[int] = None
        self._in_flight: Set[str] = set()
        self.last_error: Optional[str] = None

        self._load()

    # --- State access ---

    @property
    def history(self) -> List[str]:
        return list(self._history)

    @property
    def cache(self) -> Dict[str, CacheEntry]:
        return dict(self._cache)

    @property
    def active_index(self) -> Optional[int]:
        return self._active_index

    @property
    def active_key(self) -> Optional[str]:
        if self._active_index is None:
            return None
        return self._history[self._active_index]

    @property
    def active_entry(self) -> Optional[CacheEntry]:
        key = self.active_key
        return self.get(key) if key is not None else None

    @property
    def busy(self) -> bool:
        """True while a search is waiting on the network."""
        return bool(self._in_flight)

    def get(self, key: str) -> Optional[CacheEntry]:
        """Cached entry for ``key``, matched case-insensitively."""
        existing = self._find_cache_key(key)
        return self._cache[existing] if existing is not None else None

    def suggestions(self, query: str) -> List[str]:
        """History entries containing ``query``, ignoring case."""
        needle = query.strip().casefold()
        return [h for h in self._history if needle in h.casefold()]

    # --- Intents ---

    def search(self, location: Location) -> Optional[CacheEntry]:
        """
        Fetches current conditions and forecast, then caches them.

        Returns the new entry, or None when an identical search is already
        in flight. On failure nothing cached changes and FetchError is raised.
        """
        if isinstance(location, Coordinates):
            pending_key = location.key
        else:
            location = normalize_location_key(location)
            pending_key = location

        token = pending_key.casefold()
        if token in self._in_flight:
            logger.info(f"Search for {pending_key!r} already in flight, ignoring")
            return None

        self._in_flight.add(token)
        try:
            current = self.provider.get_current(location)
            forecast = self.provider.get_forecast(location)
            if not isinstance(current, dict) or not isinstance(forecast, (dict, type(None))):
                raise ProviderError("Malformed weather payload")
        except ProviderError as e:
            self.last_error = FETCH_ERROR_MESSAGE
            logger.error(f"Search for {pending_key!r} failed: {e}")
            raise FetchError(FETCH_ERROR_MESSAGE, e.status_code) from e
        finally:
            self._in_flight.discard(token)

        key = self._resolve_key(location, current)
        samples = (forecast or {}).get("list") or []
        entry = CacheEntry(
            current=current,
            forecast=downsample_forecast(samples, self.forecast_stride),
            fetched_at=self._clock(),
        )
        self._upsert(key, entry)
        self.last_error = None
        self._persist()
        logger.info(f"Cached weather for {key!r} ({len(entry.forecast)} forecast days)")
        return entry

    def search_current_location(self) -> Optional[CacheEntry]:
        """
        Searches the caller's location resolved by the provider: by city
        name when one is known, otherwise by coordinates.
        """
        try:
            info = self.provider.resolve_location()
        except ProviderError as e:
            self.last_error = LOCATION_ERROR_MESSAGE
            logger.warning(f"Location detection failed: {e}")
            raise FetchError(LOCATION_ERROR_MESSAGE, e.status_code) from e

        if info.city and info.city.strip():
            return self.search(info.city)
        if info.coordinates is not None:
            return self.search(info.coordinates)

        self.last_error = LOCATION_ERROR_MESSAGE
        raise FetchError(LOCATION_ERROR_MESSAGE)

    def select_by_index(self, index: int) -> CacheEntry:
        """
        Makes history entry ``index`` the active one. Never fetches.

        Raises HistoryIndexError for an out-of-range index (active index
        unchanged) and CacheMiss when the entry has no cached data.
        """
        if isinstance(index, bool) or not isinstance(index, int):
            raise HistoryIndexError(f"History index must be an int, got {index!r}")
        if not 0 <= index < len(self._history):
            raise HistoryIndexError(
                f"History index {index} out of range for {len(self._history)} entries"
            )

        self._active_index = index
        self.last_error = None
        key = self._history[index]
        entry = self.get(key)
        if entry is None:
            raise CacheMiss(key)
        return entry

    def advance(self, direction: Direction) -> Optional[CacheEntry]:
        """
        Moves one step through the history. At either end (or with an
        empty history) nothing changes and the current entry is returned.
        """
        if self._active_index is None:
            return None
        target = self._active_index + direction.value
        if not 0 <= target < len(self._history):
            return self.active_entry
        return self.select_by_index(target)

    def clear_all(self) -> None:
        self._cache.clear()
        self._history.clear()
        self._active_index = None
        self.last_error = None
        self._persist()
        logger.info("Search history and cache cleared.")

    # --- Internals ---

    def _find_cache_key(self, key: str) -> Optional[str]:
        folded = key.casefold()
        for existing in self._cache:
            if existing.casefold() == folded:
                return existing
        return None

    def _resolve_key(self, location: Location, current: Dict[str, Any]) -> str:
        if not isinstance(location, Coordinates):
            return location
        name = current.get("name") if isinstance(current, dict) else None
        if isinstance(name, str) and name.strip():
            return name.strip()
        return location.key

    def _upsert(self, key: str, entry: CacheEntry) -> None:
        folded = key.casefold()
        stale = self._find_cache_key(key)
        if stale is not None:
            del self._cache[stale]
        self._cache[key] = entry

        self._history = [key] + [h for h in self._history if h.casefold() != folded]
        if len(self._history) > self.history_limit:
            evicted = self._history[self.history_limit:]
            del self._history[self.history_limit:]
            logger.debug(f"Evicted from history: {evicted}")
        self._active_index = 0

    def _load(self) -> None:
        state = self.store.load()

        seen: Set[str] = set()
        history: List[str] = []
        for raw in state.history:
            key = raw.strip()
            if not key or key.casefold() in seen:
                continue
            seen.add(key.casefold())
            history.append(key)

        self._history = history[: self.history_limit]
        # Keys are stored trimmed, the same as history entries
        self._cache = {}
        for raw_key, entry in state.cache.items():
            key = raw_key.strip()
            if key:
                self._cache[key] = entry
        self._active_index = 0 if self._history else None
        if self._history:
            logger.info(f"Restored {len(self._history)} searches from storage")

    def _persist(self) -> None:
        self.store.save(PersistedState(history=list(self._history), cache=dict(self._cache)))

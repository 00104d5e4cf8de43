import json
import logging
import os
from typing import Any, Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from weather_dashboard.config.settings import settings
from weather_dashboard.models import CacheEntry, PersistedState

logger = logging.getLogger(__name__)


def parse_state(data: Any) -> PersistedState:
    """
    Builds a PersistedState from raw stored data, dropping whatever is
    malformed instead of failing. Anything unusable yields an empty state.
    """
    if not isinstance(data, dict):
        return PersistedState()

    raw_history = data.get("searchHistory")
    history = [h for h in raw_history if isinstance(h, str)] if isinstance(raw_history, list) else []

    cache: Dict[str, CacheEntry] = {}
    raw_cache = data.get("searchCache")
    if isinstance(raw_cache, dict):
        for key, value in raw_cache.items():
            try:
                cache[key] = CacheEntry.model_validate(value)
            except PydanticValidationError as e:
                logger.warning(f"Dropping malformed cache entry {key!r}: {e.error_count()} errors")

    return PersistedState(history=history, cache=cache)


def dump_state(state: PersistedState) -> Dict[str, Any]:
    return state.model_dump(mode="json", by_alias=True)


class JsonFileStateStore:
    """
    Persists the search history and cache to a local JSON file.
    This keeps past searches browsable after the dashboard restarts.
    """

    def __init__(self, state_file: Optional[str] = None):
        self.state_file = state_file or settings.STATE_FILE

    def _load_raw_state(self) -> Any:
        if not os.path.exists(self.state_file):
            return {}
        try:
            with open(self.state_file, "r", encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            logger.error(f"Failed to load dashboard state: {e}")
            return {}

    def load(self) -> PersistedState:
        return parse_state(self._load_raw_state())

    def save(self, state: PersistedState) -> None:
        try:
            with open(self.state_file, "w", encoding="utf-8") as f:
                json.dump(dump_state(state), f, indent=2)
        except IOError as e:
            logger.error(f"Failed to save dashboard state: {e}")


class InMemoryStateStore:
    """Keeps state for the life of the process only. Used in tests."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Any = initial or {}

    def load(self) -> PersistedState:
        return parse_state(self._data)

    def save(self, state: PersistedState) -> None:
        # Round-trip through JSON so nothing aliases the manager's live objects
        self._data = json.loads(json.dumps(dump_state(state)))

    @property
    def raw(self) -> Any:
        return self._data

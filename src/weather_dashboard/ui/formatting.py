"""
Turns provider payloads into display rows for the dashboard.
Kept free of Streamlit so it can be tested on its own.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

ICON_URL = "https://openweathermap.org/img/wn/{icon}@{scale}x.png"


def icon_url(icon: Optional[str], scale: int = 2) -> Optional[str]:
    if not icon:
        return None
    return ICON_URL.format(icon=icon, scale=scale)


def _first_condition(payload: Dict[str, Any]) -> Dict[str, Any]:
    conditions = payload.get("weather") or [{}]
    return conditions[0] if isinstance(conditions, list) and conditions else {}


def summarize_current(current: Dict[str, Any]) -> Dict[str, Any]:
    """
    Flattens a current-conditions payload into the fields the weather
    card shows. Missing fields come back as None.
    """
    main = current.get("main") or {}
    wind = current.get("wind") or {}
    condition = _first_condition(current)
    temp = main.get("temp")

    return {
        "name": current.get("name"),
        "country": (current.get("sys") or {}).get("country"),
        "temperature": round(temp) if isinstance(temp, (int, float)) else None,
        "description": condition.get("description"),
        "humidity": main.get("humidity"),
        "wind_speed": wind.get("speed"),
        "icon_url": icon_url(condition.get("icon"), scale=4),
    }


def forecast_rows(forecast: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """One row per retained forecast sample, labelled with its weekday."""
    rows = []
    for sample in forecast:
        dt = sample.get("dt")
        if not isinstance(dt, (int, float)):
            continue
        moment = datetime.fromtimestamp(dt, tz=timezone.utc)
        condition = _first_condition(sample)
        temp = (sample.get("main") or {}).get("temp")
        rows.append(
            {
                "day": moment.strftime("%a"),
                "date": moment.date().isoformat(),
                "temperature": round(temp) if isinstance(temp, (int, float)) else None,
                "description": condition.get("description"),
                "icon_url": icon_url(condition.get("icon")),
            }
        )
    return rows

from typing import Optional

import pandas as pd  # type: ignore
import plotly.express as px  # type: ignore
import streamlit as st

from weather_dashboard.cache_manager import Direction, WeatherCacheManager
from weather_dashboard.errors import CacheMiss, FetchError, ValidationError
from weather_dashboard.models import CacheEntry
from weather_dashboard.ui.formatting import forecast_rows, summarize_current


def render_search_bar(manager: WeatherCacheManager) -> None:
    """
    Renders the search box with suggestions from the history.
    """
    with st.form(key="search_form", clear_on_submit=False):
        query = st.text_input("City", placeholder="Enter city (e.g. Hyderabad, IN)")
        submitted = st.form_submit_button("Search", disabled=manager.busy)

    if submitted:
        _run_search(manager, query)

    matches = manager.suggestions(query) if query else []
    if matches:
        st.caption("Previous searches")
        columns = st.columns(len(matches))
        for idx, (column, match) in enumerate(zip(columns, matches)):
            with column:
                if st.button(match, key=f"suggestion_{idx}", disabled=manager.busy):
                    _run_search(manager, match)


def _run_search(manager: WeatherCacheManager, query: str) -> None:
    try:
        with st.spinner(f"Fetching weather for {query.strip()}..."):
            manager.search(query)
    except ValidationError:
        st.warning("Type a city name first.")
    except FetchError:
        pass  # manager.last_error is shown by render_error_banner
    else:
        st.rerun()


def render_sidebar(manager: WeatherCacheManager) -> None:
    """Renders the history controls."""
    with st.sidebar:
        st.title("History")
        if not manager.history:
            st.info("No searches yet.")
            return

        for idx, key in enumerate(manager.history):
            label = f"▶ {key}" if idx == manager.active_index else key
            if st.button(label, key=f"history_{idx}", use_container_width=True):
                try:
                    manager.select_by_index(idx)
                except CacheMiss:
                    pass  # render_weather shows the empty state
                st.rerun()

        st.divider()
        if st.button("🗑️ Clear History", use_container_width=True):
            manager.clear_all()
            st.rerun()


def render_navigation(manager: WeatherCacheManager) -> None:
    """Previous/next buttons stepping through cached searches."""
    if len(manager.history) < 2:
        return
    index = manager.active_index or 0
    col_prev, col_pos, col_next = st.columns([1, 2, 1])
    with col_prev:
        if st.button("◀", disabled=index == 0, use_container_width=True):
            _advance(manager, Direction.BACKWARD)
    with col_pos:
        st.caption(f"{index + 1} / {len(manager.history)}")
    with col_next:
        if st.button("▶", disabled=index == len(manager.history) - 1, use_container_width=True):
            _advance(manager, Direction.FORWARD)


def _advance(manager: WeatherCacheManager, direction: Direction) -> None:
    try:
        manager.advance(direction)
    except CacheMiss:
        pass
    st.rerun()


def render_error_banner(manager: WeatherCacheManager) -> None:
    if manager.last_error:
        st.error(manager.last_error)


def render_weather(entry: Optional[CacheEntry], key: Optional[str]) -> None:
    """Renders the weather card and forecast for the active entry."""
    if key is None:
        st.info("Search for a city to get started.")
        return
    if entry is None:
        st.warning(f"No cached weather for {key}. Search for it again to refresh.")
        return

    summary = summarize_current(entry.current)
    title = summary["name"] or key
    if summary["country"]:
        title = f"{title}, {summary['country']}"
    st.subheader(title)

    col_icon, col_temp, col_details = st.columns([1, 1, 2])
    with col_icon:
        if summary["icon_url"]:
            st.image(summary["icon_url"], width=110)
    with col_temp:
        temp = summary["temperature"]
        st.metric("Temperature", f"{temp}°C" if temp is not None else "n/a")
    with col_details:
        st.write((summary["description"] or "").capitalize())
        if summary["humidity"] is not None:
            st.write(f"Humidity: {summary['humidity']}%")
        if summary["wind_speed"] is not None:
            st.write(f"Wind: {summary['wind_speed']} m/s")

    st.caption(f"Fetched {entry.fetched_at:%Y-%m-%d %H:%M} UTC")
    render_forecast(entry)


def render_forecast(entry: CacheEntry) -> None:
    rows = forecast_rows(entry.forecast)
    if not rows:
        return

    st.markdown("### 5-Day Forecast")
    columns = st.columns(len(rows))
    for column, row in zip(columns, rows):
        with column:
            st.markdown(f"**{row['day']}**")
            if row["icon_url"]:
                st.image(row["icon_url"])
            if row["temperature"] is not None:
                st.write(f"{row['temperature']}°C")
            st.caption(row["description"] or "")

    df = pd.DataFrame(rows)
    fig = px.line(df, x="date", y="temperature", markers=True, title="Temperature (°C)")
    fig.update_layout(showlegend=False)
    fig.update_traces(line_color="#FF4B4B")
    st.plotly_chart(fig, use_container_width=True)

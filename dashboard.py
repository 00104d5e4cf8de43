import logging

import streamlit as st
from dotenv import load_dotenv

# Load Env before settings are read
load_dotenv()

from weather_dashboard.cache_manager import WeatherCacheManager
from weather_dashboard.config.logging import setup_logging
from weather_dashboard.config.settings import settings
from weather_dashboard.data_ingestion.proxy_client import ProxyClient
from weather_dashboard.errors import FetchError
from weather_dashboard.state_manager import JsonFileStateStore
from weather_dashboard.ui.components import (
    render_error_banner,
    render_navigation,
    render_search_bar,
    render_sidebar,
    render_weather,
)

setup_logging()
logger = logging.getLogger(__name__)

# App Title & Config
st.set_page_config(page_title="Weather Dashboard", page_icon="🌦️", layout="centered")


# --- Session State ---
def get_manager() -> WeatherCacheManager:
    if "manager" not in st.session_state:
        st.session_state["manager"] = WeatherCacheManager(
            provider=ProxyClient(settings.API_BASE_URL),
            store=JsonFileStateStore(settings.STATE_FILE),
        )
    return st.session_state["manager"]


def detect_location(manager: WeatherCacheManager) -> None:
    """Runs IP-based detection once per session when nothing is cached yet."""
    if st.session_state.get("location_checked"):
        return
    st.session_state["location_checked"] = True
    if manager.history:
        return
    try:
        with st.spinner("Detecting your location..."):
            manager.search_current_location()
    except FetchError as e:
        logger.warning(f"IP detection failed: {e}")


# --- Main App ---
def main():
    st.title("🌍 Weather Dashboard")

    manager = get_manager()
    detect_location(manager)

    render_sidebar(manager)
    render_search_bar(manager)
    render_error_banner(manager)
    render_navigation(manager)
    render_weather(manager.active_entry, manager.active_key)


if __name__ == "__main__":
    main()

from typing import Optional

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings managed by Pydantic Settings.
    Reads from environment variables and .env file.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Upstream providers
    WEATHER_API_KEY: Optional[SecretStr] = None
    IPDATA_API_KEY: Optional[SecretStr] = None
    OPENWEATHER_BASE_URL: str = "https://api.openweathermap.org/data/2.5"
    OPENWEATHER_GEO_URL: str = "https://api.openweathermap.org/geo/1.0"
    IPDATA_BASE_URL: str = "https://api.ipdata.co"
    UNITS: str = "metric"
    REQUEST_TIMEOUT: float = 10.0

    # Proxy service
    FRONTEND_URL: str = "*"
    HOST: str = "0.0.0.0"
    PORT: int = 5000

    # Dashboard client
    API_BASE_URL: str = "http://localhost:5000"
    HISTORY_LIMIT: int = 10
    FORECAST_STRIDE: int = 8
    STATE_FILE: str = ".weather_dashboard_state.json"

    LOG_LEVEL: str = "INFO"


settings = Settings()

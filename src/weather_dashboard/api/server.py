"""
HTTP proxy between the dashboard and the upstream weather providers.

Forwards each request once, injecting the API credentials, and relays the
provider's JSON or an ``{"error": ...}`` body with the upstream status.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from weather_dashboard.config.logging import setup_logging
from weather_dashboard.config.settings import settings
from weather_dashboard.data_ingestion.ipdata_client import IpDataClient
from weather_dashboard.data_ingestion.location_resolver import LocationResolver
from weather_dashboard.data_ingestion.weather_client import OpenWeatherClient
from weather_dashboard.errors import ProviderError, ValidationError
from weather_dashboard.models import Coordinates

logger = logging.getLogger(__name__)

router = APIRouter()


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def parse_coordinates(lat: Optional[str], lon: Optional[str]) -> Coordinates:
    """Validates the ``lat``/``lon`` query pair."""
    if not lat or not lon:
        raise ValidationError("Latitude and longitude required")
    try:
        coords = Coordinates(float(lat), float(lon))
    except ValueError:
        raise ValidationError("Latitude and longitude must be numbers")
    if not (-90 <= coords.lat <= 90 and -180 <= coords.lon <= 180):
        raise ValidationError("Latitude and longitude out of range")
    return coords


def client_ip(request: Request) -> Optional[str]:
    """First hop of X-Forwarded-For when behind a proxy, else the peer address."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


def get_weather_client(request: Request) -> OpenWeatherClient:
    return request.app.state.weather_client


def get_location_resolver(request: Request) -> LocationResolver:
    return request.app.state.location_resolver


@router.get("/", response_class=PlainTextResponse)
def root() -> str:
    return "Weather API is running. Use /weather/:city or /weather?lat&lon."


@router.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@router.get("/weather/{city}")
def weather_by_city(city: str, client: OpenWeatherClient = Depends(get_weather_client)) -> Any:
    try:
        return client.get_current(city)
    except ProviderError as e:
        logger.error(f"Weather-by-city error for {city!r}: {e}")
        return error_response("City not found", e.http_status())


@router.get("/weather")
def weather_by_coordinates(
    lat: Optional[str] = None,
    lon: Optional[str] = None,
    client: OpenWeatherClient = Depends(get_weather_client),
) -> Any:
    coords = parse_coordinates(lat, lon)
    try:
        return client.get_current(coords)
    except ProviderError as e:
        logger.error(f"Weather-by-coords error for {coords.key}: {e}")
        return error_response("Could not fetch weather by coordinates", e.http_status())


@router.get("/forecast/{city}")
def forecast_by_city(city: str, client: OpenWeatherClient = Depends(get_weather_client)) -> Any:
    try:
        return client.get_forecast(city)
    except ProviderError as e:
        logger.error(f"Forecast-by-city error for {city!r}: {e}")
        return error_response("City not found", e.http_status(404))


@router.get("/forecast")
def forecast_by_coordinates(
    lat: Optional[str] = None,
    lon: Optional[str] = None,
    client: OpenWeatherClient = Depends(get_weather_client),
) -> Any:
    coords = parse_coordinates(lat, lon)
    try:
        return client.get_forecast(coords)
    except ProviderError as e:
        logger.error(f"Forecast-by-coords error for {coords.key}: {e}")
        return error_response("Could not fetch forecast by coordinates", e.http_status())


@router.get("/location")
def location(
    request: Request, resolver: LocationResolver = Depends(get_location_resolver)
) -> Any:
    try:
        return resolver.resolve(client_ip(request)).model_dump()
    except ProviderError as e:
        logger.error(f"Location API error: {e}")
        return error_response("Could not fetch location", 500)


async def validation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    return error_response(str(exc), ValidationError.status_code)


def create_app(
    weather_client: Optional[OpenWeatherClient] = None,
    location_resolver: Optional[LocationResolver] = None,
    frontend_url: Optional[str] = None,
) -> FastAPI:
    app = FastAPI(title="Weather Dashboard Proxy", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[frontend_url or settings.FRONTEND_URL],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.state.weather_client = weather_client or OpenWeatherClient()
    app.state.location_resolver = location_resolver or LocationResolver(
        IpDataClient(), app.state.weather_client
    )

    app.add_exception_handler(ValidationError, validation_error_handler)
    app.include_router(router)
    return app


# ASGI app
app = create_app()


def main() -> None:
    import uvicorn

    setup_logging()

    logger.info(f"Backend running on port {settings.PORT}")
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    main()

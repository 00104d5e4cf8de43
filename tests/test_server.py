"""
Tests for the proxy service routes.
"""

import unittest
from unittest.mock import Mock, patch

from fastapi.testclient import TestClient

from weather_dashboard.api import server
from weather_dashboard.api.server import create_app, parse_coordinates
from weather_dashboard.errors import ProviderError, ValidationError
from weather_dashboard.models import Coordinates, LocationInfo


class TestParseCoordinates(unittest.TestCase):
    def test_valid_pair(self):
        self.assertEqual(parse_coordinates("48.85", "2.35"), Coordinates(48.85, 2.35))

    def test_missing_or_invalid(self):
        for lat, lon in ((None, "2"), ("1", None), ("", ""), ("north", "2"), ("91", "0"), ("0", "181")):
            with self.assertRaises(ValidationError):
                parse_coordinates(lat, lon)


class TestProxyRoutes(unittest.TestCase):
    def setUp(self):
        self.weather = Mock()
        self.resolver = Mock()
        self.app = create_app(weather_client=self.weather, location_resolver=self.resolver)
        self.client = TestClient(self.app)

    def test_root_and_health(self):
        self.assertIn("/weather/:city", self.client.get("/").text)

        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "ok"})

    def test_weather_by_city_relays_payload(self):
        payload = {"name": "Paris", "main": {"temp": 21.3}}
        self.weather.get_current.return_value = payload

        response = self.client.get("/weather/Paris")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), payload)
        self.weather.get_current.assert_called_once_with("Paris")

    def test_weather_by_city_relays_upstream_status(self):
        self.weather.get_current.side_effect = ProviderError("not found", 404)

        response = self.client.get("/weather/Atlantis")

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"error": "City not found"})

    def test_weather_by_city_defaults_to_500(self):
        self.weather.get_current.side_effect = ProviderError("timeout")

        response = self.client.get("/weather/Paris")

        self.assertEqual(response.status_code, 500)

    def test_weather_by_coordinates(self):
        self.weather.get_current.return_value = {"name": "Lyon"}

        response = self.client.get("/weather", params={"lat": "45.76", "lon": "4.84"})

        self.assertEqual(response.status_code, 200)
        self.weather.get_current.assert_called_once_with(Coordinates(45.76, 4.84))

    def test_weather_by_coordinates_requires_both(self):
        response = self.client.get("/weather", params={"lat": "45.76"})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "Latitude and longitude required"})
        self.weather.get_current.assert_not_called()

    def test_weather_by_coordinates_upstream_error(self):
        self.weather.get_current.side_effect = ProviderError("bad key", 401)

        response = self.client.get("/weather", params={"lat": "1", "lon": "2"})

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"error": "Could not fetch weather by coordinates"})

    def test_forecast_by_city(self):
        self.weather.get_forecast.return_value = {"list": [{"dt": 1}]}

        response = self.client.get("/forecast/Paris")

        self.assertEqual(response.json(), {"list": [{"dt": 1}]})

    def test_forecast_by_city_defaults_to_404(self):
        self.weather.get_forecast.side_effect = ProviderError("connection reset")

        response = self.client.get("/forecast/Paris")

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"error": "City not found"})

    def test_forecast_by_coordinates(self):
        self.weather.get_forecast.return_value = {"list": []}
        self.assertEqual(self.client.get("/forecast?lat=1&lon=2").status_code, 200)

        self.assertEqual(self.client.get("/forecast?lon=2").status_code, 400)

        self.weather.get_forecast.side_effect = ProviderError("down")
        response = self.client.get("/forecast?lat=1&lon=2")
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "Could not fetch forecast by coordinates"})

    def test_location_uses_forwarded_ip(self):
        self.resolver.resolve.return_value = LocationInfo(
            city="Paris", region="IDF", country="France", latitude=48.85, longitude=2.35
        )

        response = self.client.get("/location", headers={"X-Forwarded-For": "8.8.8.8, 10.0.0.1"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json(),
            {
                "city": "Paris",
                "region": "IDF",
                "country": "France",
                "latitude": 48.85,
                "longitude": 2.35,
            },
        )
        self.resolver.resolve.assert_called_once_with("8.8.8.8")

    def test_location_error(self):
        self.resolver.resolve.side_effect = ProviderError("ipdata down", 503)

        response = self.client.get("/location")

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "Could not fetch location"})

    def test_cors_origin(self):
        app = create_app(
            weather_client=self.weather,
            location_resolver=self.resolver,
            frontend_url="https://dash.example.com",
        )
        response = TestClient(app).get("/health", headers={"Origin": "https://dash.example.com"})
        self.assertEqual(
            response.headers["access-control-allow-origin"], "https://dash.example.com"
        )


class TestMain(unittest.TestCase):
    @patch("uvicorn.run")
    @patch("weather_dashboard.api.server.setup_logging")
    def test_main_configures_logging_and_serves_app(self, mock_setup_logging, mock_run):
        server.main()

        mock_setup_logging.assert_called_once_with()
        mock_run.assert_called_once()
        self.assertIs(mock_run.call_args[0][0], server.app)


if __name__ == "__main__":
    unittest.main()

"""
Tests for ProxyClient - the dashboard's view of the proxy service.
"""

import unittest
from unittest.mock import Mock

import requests

from weather_dashboard.data_ingestion.proxy_client import ProxyClient
from weather_dashboard.errors import ProviderError
from weather_dashboard.models import Coordinates
from weather_dashboard.protocols import WeatherProvider


def make_response(status=200, payload=None, reason="OK"):
    response = Mock()
    response.status_code = status
    response.ok = status < 400
    response.reason = reason
    if isinstance(payload, Exception):
        response.json.side_effect = payload
    else:
        response.json.return_value = payload
    return response


class TestProxyClient(unittest.TestCase):
    def setUp(self):
        self.client = ProxyClient(base_url="http://proxy.test/")
        self.client.session = Mock()

    def test_implements_weather_provider(self):
        self.assertIsInstance(self.client, WeatherProvider)

    def test_city_is_encoded_into_path(self):
        self.client.session.get.return_value = make_response(payload={"name": "São Paulo"})

        data = self.client.get_current("São Paulo")

        self.assertEqual(data["name"], "São Paulo")
        url = self.client.session.get.call_args[0][0]
        self.assertEqual(url, "http://proxy.test/weather/S%C3%A3o%20Paulo")

    def test_slash_in_city_is_encoded(self):
        self.client.session.get.return_value = make_response(payload={"list": []})
        self.client.get_forecast("A/B")
        self.assertEqual(self.client.session.get.call_args[0][0], "http://proxy.test/forecast/A%2FB")

    def test_coordinates_go_in_query(self):
        self.client.session.get.return_value = make_response(payload={"list": []})

        self.client.get_forecast(Coordinates(1.5, -2.25))

        args, kwargs = self.client.session.get.call_args
        self.assertEqual(args[0], "http://proxy.test/forecast")
        self.assertEqual(kwargs["params"], {"lat": 1.5, "lon": -2.25})

    def test_error_body_and_status_are_surfaced(self):
        self.client.session.get.return_value = make_response(
            404, {"error": "City not found"}, "Not Found"
        )

        with self.assertRaises(ProviderError) as ctx:
            self.client.get_current("Atlantis")

        self.assertEqual(ctx.exception.status_code, 404)
        self.assertEqual(ctx.exception.message, "City not found")

    def test_non_json_error_body(self):
        self.client.session.get.return_value = make_response(
            502, ValueError("no json"), "Bad Gateway"
        )

        with self.assertRaises(ProviderError) as ctx:
            self.client.get_current("Paris")

        self.assertEqual(ctx.exception.status_code, 502)
        self.assertEqual(ctx.exception.message, "Bad Gateway")

    def test_non_json_success_body(self):
        self.client.session.get.return_value = make_response(200, ValueError("html page"))

        with self.assertRaises(ProviderError) as ctx:
            self.client.get_current("Paris")

        self.assertEqual(ctx.exception.status_code, 200)

    def test_non_object_location_body(self):
        self.client.session.get.return_value = make_response(payload=["not", "an", "object"])

        with self.assertRaises(ProviderError) as ctx:
            self.client.resolve_location()

        self.assertEqual(ctx.exception.status_code, 200)

    def test_unreachable_proxy(self):
        self.client.session.get.side_effect = requests.exceptions.ConnectionError("refused")

        with self.assertRaises(ProviderError) as ctx:
            self.client.get_current("Paris")

        self.assertIsNone(ctx.exception.status_code)

    def test_resolve_location(self):
        self.client.session.get.return_value = make_response(
            payload={
                "city": None,
                "region": "Auvergne-Rhone-Alpes",
                "country": "France",
                "latitude": 45.76,
                "longitude": 4.84,
            }
        )

        info = self.client.resolve_location()

        self.assertIsNone(info.city)
        self.assertEqual(info.coordinates, Coordinates(45.76, 4.84))
        self.assertEqual(self.client.session.get.call_args[0][0], "http://proxy.test/location")


if __name__ == "__main__":
    unittest.main()

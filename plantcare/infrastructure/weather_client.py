"""
Infrastructure layer: OpenWeatherMap client.

Responses are returned as raw dictionaries so they can be stored verbatim
alongside an analysis.
"""
from typing import Any, Dict, Optional

from plantcare.config import settings
from plantcare.infrastructure.api_constants import WeatherAPIEndpoints
from plantcare.infrastructure.external_api_client import (
    ExternalAPIClient,
    ExternalAPIError,
    MissingCredentialsError,
)


class WeatherClient(ExternalAPIClient):
    """Client for current weather and forecasts."""

    service_name = "Weather API"

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        units: Optional[str] = None,
        **kwargs
    ):
        self.api_key = settings.weather_api_key if api_key is None else api_key
        self.units = units or settings.weather_units
        super().__init__(
            base_url=base_url or settings.weather_api_base_url,
            **kwargs,
        )

    def _params(self, lat: float, lon: float) -> Dict[str, Any]:
        if not self.api_key:
            raise MissingCredentialsError("Weather API key not configured")
        return {"lat": lat, "lon": lon, "appid": self.api_key, "units": self.units}

    async def _get_object(self, endpoint: str, lat: float, lon: float) -> Dict[str, Any]:
        data = await self._make_request("GET", endpoint, params=self._params(lat, lon))
        if not isinstance(data, dict):
            raise ExternalAPIError(f"{self.service_name} returned a malformed response")
        return data

    async def current_weather(self, lat: float, lon: float) -> Dict[str, Any]:
        """
        Fetch current weather at a location.

        Args:
            lat: Latitude in degrees
            lon: Longitude in degrees

        Returns:
            Raw weather response

        Raises:
            MissingCredentialsError: If no API key is configured
            ExternalAPIError: If the request fails or the body is not a JSON object
        """
        return await self._get_object(WeatherAPIEndpoints.CURRENT_WEATHER, lat, lon)

    async def forecast(self, lat: float, lon: float) -> Dict[str, Any]:
        """
        Fetch the multi-day forecast at a location.

        Args:
            lat: Latitude in degrees
            lon: Longitude in degrees

        Returns:
            Raw forecast response
        """
        return await self._get_object(WeatherAPIEndpoints.FORECAST, lat, lon)


# Singleton instance
_weather_client: Optional[WeatherClient] = None


def get_weather_client() -> WeatherClient:
    """
    Get or create the singleton weather client instance.

    Returns:
        WeatherClient instance
    """
    global _weather_client
    if _weather_client is None:
        _weather_client = WeatherClient()
    return _weather_client


async def close_weather_client() -> None:
    """Close the singleton client if one was created."""
    global _weather_client
    if _weather_client is not None:
        await _weather_client.close()
        _weather_client = None

"""
API router for weather endpoints.
"""
from fastapi import APIRouter, HTTPException, Query
from typing import Annotated, Any, Dict, Optional

from plantcare.api.dependencies import WeatherClientDep
from plantcare.api.v1.models.responses import CareAdviceResponse
from plantcare.infrastructure.external_api_client import ExternalAPIError
from plantcare.services.domain.weather_advice import WeatherSnapshot, generate_care_advice


router = APIRouter(
    prefix="/weather",
    tags=["weather"],
)

LatitudeQuery = Annotated[Optional[float], Query(description="Latitude in degrees")]
LongitudeQuery = Annotated[Optional[float], Query(description="Longitude in degrees")]


def _require_coordinates(lat: Optional[float], lon: Optional[float]) -> None:
    if lat is None or lon is None:
        raise HTTPException(status_code=400, detail="Latitude and longitude are required")


@router.get(
    "",
    summary="Current weather",
    description="Proxy the current weather at a location.",
)
async def get_weather(
    weather_client: WeatherClientDep,
    lat: LatitudeQuery = None,
    lon: LongitudeQuery = None,
) -> Dict[str, Any]:
    _require_coordinates(lat, lon)
    try:
        return await weather_client.current_weather(lat, lon)
    except ExternalAPIError as e:
        raise HTTPException(
            status_code=e.status_code,
            detail=f"Failed to fetch weather data: {e.message}"
        )


@router.get(
    "/forecast",
    summary="Weather forecast",
    description="Proxy the multi-day forecast at a location.",
)
async def get_forecast(
    weather_client: WeatherClientDep,
    lat: LatitudeQuery = None,
    lon: LongitudeQuery = None,
) -> Dict[str, Any]:
    _require_coordinates(lat, lon)
    try:
        return await weather_client.forecast(lat, lon)
    except ExternalAPIError as e:
        raise HTTPException(
            status_code=e.status_code,
            detail=f"Failed to fetch weather forecast: {e.message}"
        )


@router.get(
    "/care-advice",
    response_model=CareAdviceResponse,
    summary="Weather-based care advice",
)
async def get_care_advice(
    weather_client: WeatherClientDep,
    lat: LatitudeQuery = None,
    lon: LongitudeQuery = None,
) -> CareAdviceResponse:
    _require_coordinates(lat, lon)
    try:
        weather_data = await weather_client.current_weather(lat, lon)
    except ExternalAPIError as e:
        raise HTTPException(
            status_code=e.status_code,
            detail=f"Failed to fetch weather data: {e.message}"
        )

    snapshot = WeatherSnapshot.model_validate(weather_data)
    return CareAdviceResponse(
        advice=generate_care_advice(weather_data),
        temperature=snapshot.main.temp,
        humidity=snapshot.main.humidity,
        condition=snapshot.weather[0].main if snapshot.weather else None,
    )

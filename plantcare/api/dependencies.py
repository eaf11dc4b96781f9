"""
Dependency injection for FastAPI.
"""
from typing import Annotated
from fastapi import Depends, Request

from plantcare.infrastructure.analysis_store import AnalysisStore
from plantcare.infrastructure.plant_id_client import PlantIdClient, get_plant_id_client
from plantcare.infrastructure.weather_client import WeatherClient, get_weather_client
from plantcare.services.application.analysis_service import AnalysisService


def get_analysis_store(request: Request) -> AnalysisStore:
    """
    Dependency factory for the analysis store.

    The store is owned by the application and lives on app.state.

    Returns:
        AnalysisStore instance
    """
    return request.app.state.analysis_store


def get_analysis_service(
    plant_id_client: Annotated[PlantIdClient, Depends(get_plant_id_client)],
    weather_client: Annotated[WeatherClient, Depends(get_weather_client)],
    store: Annotated[AnalysisStore, Depends(get_analysis_store)],
) -> AnalysisService:
    """
    Dependency factory for AnalysisService.

    Args:
        plant_id_client: Plant.id client (injected)
        weather_client: Weather client (injected)
        store: Analysis store (injected)

    Returns:
        AnalysisService instance
    """
    return AnalysisService(
        plant_id_client=plant_id_client,
        weather_client=weather_client,
        store=store,
    )


# Type aliases for cleaner route signatures
AnalysisServiceDep = Annotated[AnalysisService, Depends(get_analysis_service)]
WeatherClientDep = Annotated[WeatherClient, Depends(get_weather_client)]

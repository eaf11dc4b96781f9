"""
Shared pytest fixtures for all tests.

This module provides common fixtures including:
- Sample images
- Sample identification results and health issues
- In-memory store with a deterministic clock
- Mock API clients
- FastAPI test client
"""
import pytest
from datetime import datetime, timedelta, timezone
from io import BytesIO
from typing import Iterator
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient
from PIL import Image

from plantcare.main import app
from plantcare.api.dependencies import get_analysis_store
from plantcare.domain.models import (
    DiseaseTreatment,
    HealthAssessment,
    HealthIssue,
    IdentificationResult,
    PlantSuggestion,
)
from plantcare.infrastructure.analysis_store import InMemoryAnalysisStore
from plantcare.infrastructure.plant_id_client import PlantIdClient, get_plant_id_client
from plantcare.infrastructure.weather_client import WeatherClient, get_weather_client


def make_image_bytes(fmt: str = "PNG", size: tuple[int, int] = (64, 48)) -> bytes:
    """Render a solid green image in the given format."""
    buffer = BytesIO()
    Image.new("RGB", size, color=(34, 139, 34)).save(buffer, format=fmt)
    return buffer.getvalue()


class SteppingClock:
    """Clock that advances one minute on every call."""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        self.current += timedelta(minutes=1)
        return self.current


# ============================================================
# Sample Data Fixtures
# ============================================================

@pytest.fixture
def png_bytes() -> bytes:
    return make_image_bytes("PNG")


@pytest.fixture
def monstera_suggestion() -> PlantSuggestion:
    return PlantSuggestion(
        name="Monstera Deliciosa",
        authority_name="Monstera deliciosa Liebm.",
        probability=0.93,
    )


@pytest.fixture
def leaf_spot_issue() -> HealthIssue:
    return HealthIssue(
        name="leaf spot",
        probability=0.8,
        treatment=DiseaseTreatment(
            biological=["neem"],
            chemical=["copper fungicide"],
            prevention=["improve airflow", "reduce leaf wetness", "avoid overhead watering"],
        ),
    )


@pytest.fixture
def identification_result(monstera_suggestion, leaf_spot_issue) -> IdentificationResult:
    return IdentificationResult(
        top_suggestion=monstera_suggestion,
        health_assessment=HealthAssessment(is_healthy=False, issues=[leaf_spot_issue]),
    )


@pytest.fixture
def sample_weather() -> dict:
    return {
        "main": {"temp": 72.4, "feels_like": 71.9, "humidity": 55, "pressure": 1015},
        "weather": [{"main": "Clouds", "description": "scattered clouds", "icon": "03d"}],
        "name": "Portland",
    }


# ============================================================
# Store Fixtures
# ============================================================

@pytest.fixture
def clock() -> SteppingClock:
    return SteppingClock(datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def store(clock) -> InMemoryAnalysisStore:
    return InMemoryAnalysisStore(clock=clock)


# ============================================================
# Mock API Client Fixtures
# ============================================================

@pytest.fixture
def mock_plant_id_client(identification_result):
    """Create a mock Plant.id client."""
    mock_client = AsyncMock(spec=PlantIdClient)
    mock_client.identify.return_value = identification_result
    return mock_client


@pytest.fixture
def mock_weather_client(sample_weather):
    """Create a mock weather client."""
    mock_client = AsyncMock(spec=WeatherClient)
    mock_client.current_weather.return_value = sample_weather
    mock_client.forecast.return_value = {"list": []}
    return mock_client


# ============================================================
# FastAPI Test Client Fixtures
# ============================================================

@pytest.fixture
def test_client() -> TestClient:
    """Create a synchronous test client for FastAPI."""
    return TestClient(app)


@pytest.fixture
def api_client(store, mock_plant_id_client, mock_weather_client) -> Iterator[TestClient]:
    """Test client with mocked external APIs and a fresh store."""
    app.dependency_overrides[get_plant_id_client] = lambda: mock_plant_id_client
    app.dependency_overrides[get_weather_client] = lambda: mock_weather_client
    app.dependency_overrides[get_analysis_store] = lambda: store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()

"""
Unit tests for the analysis application service.

Collaborators are mocked; the store is a real in-memory store.
"""
import httpx
import pytest
import respx

from plantcare.domain.models import HealthStatus
from plantcare.infrastructure.external_api_client import ExternalAPIError, MissingCredentialsError
from plantcare.infrastructure.weather_client import WeatherClient
from plantcare.services.application.analysis_service import (
    AnalysisNotFoundError,
    AnalysisService,
)
from plantcare.utils.image_processing import ImageValidationError


WEATHER_URL = "https://weather.test/data/2.5"


@pytest.fixture
def service(mock_plant_id_client, mock_weather_client, store) -> AnalysisService:
    return AnalysisService(
        plant_id_client=mock_plant_id_client,
        weather_client=mock_weather_client,
        store=store,
    )


# ============================================================
# Analyze Tests
# ============================================================

class TestAnalyze:
    """Tests for the analyze workflow."""

    @pytest.mark.asyncio
    async def test_analyze_persists_record(self, service, store, png_bytes, sample_weather):
        analysis = await service.analyze(png_bytes, "image/png", latitude=45.5, longitude=-122.6)

        assert store.get_by_id(analysis.id) == analysis
        assert analysis.common_name == "Monstera Deliciosa"
        assert analysis.health_status == HealthStatus.ISSUES_DETECTED
        assert analysis.weather_data == sample_weather
        assert analysis.image_url.startswith("data:image/jpeg;base64,")
        assert analysis.treatment_recommendations.immediate[-2:] == [
            "improve airflow",
            "reduce leaf wetness",
        ]

    @pytest.mark.asyncio
    async def test_identify_receives_normalized_jpeg(self, service, mock_plant_id_client, png_bytes):
        await service.analyze(png_bytes, "image/png")

        image_data, mime_type = mock_plant_id_client.identify.call_args.args
        assert mime_type == "image/jpeg"
        assert image_data.startswith(b"\xff\xd8")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("latitude,longitude", [(None, None), (45.5, None), (None, -122.6)])
    async def test_missing_coordinates_skip_weather(
        self, service, mock_weather_client, png_bytes, latitude, longitude
    ):
        analysis = await service.analyze(png_bytes, "image/png", latitude=latitude, longitude=longitude)

        mock_weather_client.current_weather.assert_not_called()
        assert analysis.weather_data is None

    @pytest.mark.asyncio
    async def test_zero_coordinates_are_valid(self, service, mock_weather_client, png_bytes):
        await service.analyze(png_bytes, "image/png", latitude=0.0, longitude=0.0)

        mock_weather_client.current_weather.assert_awaited_once_with(0.0, 0.0)

    @pytest.mark.asyncio
    async def test_weather_failure_is_not_fatal(self, service, mock_weather_client, store, png_bytes):
        mock_weather_client.current_weather.side_effect = ExternalAPIError("Weather API error: 500")

        analysis = await service.analyze(png_bytes, "image/png", latitude=1.0, longitude=2.0)

        assert analysis.weather_data is None
        assert len(store) == 1

    @pytest.mark.asyncio
    async def test_missing_weather_key_is_not_fatal(self, service, mock_weather_client, png_bytes):
        mock_weather_client.current_weather.side_effect = MissingCredentialsError("no key")

        analysis = await service.analyze(png_bytes, "image/png", latitude=1.0, longitude=2.0)

        assert analysis.weather_data is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [b"[]", b"\"ok\"", b"null"])
    async def test_non_object_weather_body_is_not_fatal(
        self, mock_plant_id_client, store, png_bytes, body
    ):
        """A weather reply that is not a JSON object leaves weather_data empty."""
        with respx.mock:
            respx.get(f"{WEATHER_URL}/weather").mock(
                return_value=httpx.Response(200, content=body)
            )
            async with WeatherClient(api_key="key", base_url=WEATHER_URL) as weather_client:
                service = AnalysisService(
                    plant_id_client=mock_plant_id_client,
                    weather_client=weather_client,
                    store=store,
                )
                analysis = await service.analyze(png_bytes, "image/png", latitude=1.0, longitude=2.0)

        assert analysis.weather_data is None
        assert store.get_by_id(analysis.id) == analysis

    @pytest.mark.asyncio
    async def test_identification_failure_stores_nothing(
        self, service, mock_plant_id_client, mock_weather_client, store, png_bytes
    ):
        mock_plant_id_client.identify.side_effect = ExternalAPIError("Plant.id API error: 401", status_code=401)

        with pytest.raises(ExternalAPIError):
            await service.analyze(png_bytes, "image/png", latitude=1.0, longitude=2.0)

        assert store.list_all() == []
        mock_weather_client.current_weather.assert_not_called()

    @pytest.mark.asyncio
    async def test_invalid_image_rejected_before_identify(self, service, mock_plant_id_client):
        with pytest.raises(ImageValidationError):
            await service.analyze(b"not an image", "image/png")

        mock_plant_id_client.identify.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_image_rejected(self, service):
        with pytest.raises(ImageValidationError, match="No image file provided"):
            await service.analyze(None, None)


# ============================================================
# Query and Delete Tests
# ============================================================

class TestQueries:
    """Tests for listing, searching and deleting analyses."""

    @pytest.mark.asyncio
    async def test_search_matches_common_and_scientific_names(self, service, png_bytes):
        await service.analyze(png_bytes, "image/png")

        assert len(service.list_analyses("monstera")) == 1
        assert len(service.list_analyses("LIEBM")) == 1
        assert service.list_analyses("ficus") == []
        assert len(service.list_analyses()) == 1

    def test_get_unknown_analysis(self, service):
        with pytest.raises(AnalysisNotFoundError):
            service.get_analysis("missing")

    def test_delete_unknown_analysis(self, service):
        with pytest.raises(AnalysisNotFoundError):
            service.delete_analysis("missing")

    @pytest.mark.asyncio
    async def test_clear_analyses(self, service, png_bytes):
        await service.analyze(png_bytes, "image/png")
        await service.analyze(png_bytes, "image/png")

        assert service.clear_analyses() == 2
        assert service.list_analyses() == []

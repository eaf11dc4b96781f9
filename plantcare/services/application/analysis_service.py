"""
Application service: Orchestration layer for plant analyses.
"""
import logging
from typing import Any, Dict, List, Optional

from plantcare.domain.models import PlantAnalysis
from plantcare.infrastructure.analysis_store import AnalysisStore
from plantcare.infrastructure.external_api_client import ExternalAPIError
from plantcare.infrastructure.plant_id_client import PlantIdClient
from plantcare.infrastructure.weather_client import WeatherClient
from plantcare.services.domain.record_assembly import assemble_analysis
from plantcare.utils.image_processing import normalize_image, validate_upload

logger = logging.getLogger(__name__)


class AnalysisNotFoundError(KeyError):
    """Raised when no analysis exists for an id."""

    def __init__(self, analysis_id: str):
        super().__init__(analysis_id)
        self.analysis_id = analysis_id


class AnalysisService:
    """
    Application service for plant analyses.

    Coordinates image normalization, the external API clients, record
    assembly and the store. No business rules live here.
    """

    def __init__(
        self,
        plant_id_client: PlantIdClient,
        weather_client: WeatherClient,
        store: AnalysisStore,
    ):
        """
        Initialize the service with dependencies.

        Args:
            plant_id_client: Identification/health API client
            weather_client: Weather API client
            store: Analysis record store
        """
        self.plant_id_client = plant_id_client
        self.weather_client = weather_client
        self.store = store

    async def analyze(
        self,
        image_bytes: Optional[bytes],
        content_type: Optional[str],
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> PlantAnalysis:
        """
        Analyze an uploaded plant photo and persist the result.

        This method orchestrates:
        1. Validating and normalizing the image
        2. Identifying the plant and assessing its health
        3. Fetching weather when both coordinates are given
        4. Assembling the record and storing it

        Args:
            image_bytes: Raw upload content
            content_type: MIME type declared by the client
            latitude: Optional latitude for weather lookup
            longitude: Optional longitude for weather lookup

        Returns:
            The stored PlantAnalysis

        Raises:
            ImageValidationError: If the upload is missing or not a usable image
            ExternalAPIError: If identification fails (nothing is stored)
        """
        validate_upload(image_bytes, content_type)
        image = normalize_image(image_bytes)

        try:
            identification = await self.plant_id_client.identify(image.data, image.mime_type)
        except ExternalAPIError as e:
            logger.error(f"Plant identification failed: {e.message}")
            raise

        weather_data = await self._fetch_weather(latitude, longitude)

        record = assemble_analysis(image, identification, weather_data)
        return self.store.create(record)

    async def _fetch_weather(
        self,
        latitude: Optional[float],
        longitude: Optional[float],
    ) -> Optional[Dict[str, Any]]:
        if latitude is None or longitude is None:
            return None
        try:
            return await self.weather_client.current_weather(latitude, longitude)
        except ExternalAPIError as e:
            logger.warning(f"Weather lookup skipped: {e.message}")
            return None

    def list_analyses(self, search: Optional[str] = None) -> List[PlantAnalysis]:
        """
        List analyses, most recent first.

        Args:
            search: Optional case-insensitive term matched against common
                and scientific names

        Returns:
            Matching analyses
        """
        analyses = self.store.list_all()
        if not search:
            return analyses

        term = search.casefold()
        return [
            analysis for analysis in analyses
            if term in (analysis.common_name or "").casefold()
            or term in (analysis.scientific_name or "").casefold()
        ]

    def get_analysis(self, analysis_id: str) -> PlantAnalysis:
        analysis = self.store.get_by_id(analysis_id)
        if analysis is None:
            raise AnalysisNotFoundError(analysis_id)
        return analysis

    def delete_analysis(self, analysis_id: str) -> None:
        if not self.store.delete_by_id(analysis_id):
            raise AnalysisNotFoundError(analysis_id)

    def clear_analyses(self) -> int:
        return self.store.clear()

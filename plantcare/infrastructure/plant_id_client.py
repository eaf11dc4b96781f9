"""
Infrastructure layer: Plant.id identification and health assessment client.
"""
import base64
import logging
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError

from plantcare.config import settings
from plantcare.domain.models import (
    DiseaseTreatment,
    HealthAssessment,
    HealthIssue,
    IdentificationResult,
    PlantSuggestion,
)
from plantcare.infrastructure.api_constants import APIConstants, PlantIdAPIEndpoints
from plantcare.infrastructure.external_api_client import (
    ExternalAPIClient,
    ExternalAPIError,
    MissingCredentialsError,
)

logger = logging.getLogger(__name__)


# Pydantic models for API responses
class SuggestionDetails(BaseModel):
    """Extra details attached to a species suggestion."""
    name_authority: Optional[str] = None


class SpeciesSuggestion(BaseModel):
    """A species suggestion from result.classification."""
    name: Optional[str] = None
    probability: Optional[float] = None
    details: Optional[SuggestionDetails] = None


class Classification(BaseModel):
    suggestions: List[SpeciesSuggestion] = Field(default_factory=list)


class DiseaseDetails(BaseModel):
    """Extra details attached to a disease suggestion."""
    description: Optional[str] = None
    treatment: Optional[DiseaseTreatment] = None


class DiseaseSuggestion(BaseModel):
    """A disease suggestion from result.disease."""
    name: Optional[str] = None
    probability: Optional[float] = None
    details: Optional[DiseaseDetails] = None


class Disease(BaseModel):
    suggestions: List[DiseaseSuggestion] = Field(default_factory=list)


class IsHealthy(BaseModel):
    binary: Optional[bool] = None
    probability: Optional[float] = None


class IdentificationPayload(BaseModel):
    """The `result` object of an identification response."""
    classification: Optional[Classification] = None
    disease: Optional[Disease] = None
    is_healthy: Optional[IsHealthy] = None


class IdentificationResponse(BaseModel):
    """Response from the identification endpoint."""
    result: Optional[IdentificationPayload] = None

    def to_identification_result(self) -> IdentificationResult:
        """
        Map the raw response onto the domain IdentificationResult.

        Returns:
            IdentificationResult with the top suggestion and ordered issues
        """
        payload = self.result or IdentificationPayload()

        top_suggestion = None
        if payload.classification and payload.classification.suggestions:
            top = payload.classification.suggestions[0]
            top_suggestion = PlantSuggestion(
                name=top.name,
                authority_name=top.details.name_authority if top.details else None,
                probability=top.probability,
            )

        issues = []
        if payload.disease:
            for suggestion in payload.disease.suggestions:
                issues.append(HealthIssue(
                    name=suggestion.name,
                    probability=suggestion.probability,
                    treatment=suggestion.details.treatment if suggestion.details else None,
                ))

        return IdentificationResult(
            top_suggestion=top_suggestion,
            health_assessment=HealthAssessment(
                is_healthy=payload.is_healthy.binary if payload.is_healthy else None,
                issues=issues,
            ),
        )


class PlantIdClient(ExternalAPIClient):
    """
    Client for the Plant.id v3 API.

    A single identification call returns both the species classification
    and the health assessment.
    """

    service_name = "Plant.id API"

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None, **kwargs):
        """
        Initialize the Plant.id client.

        Args:
            api_key: Plant.id API key (defaults to settings)
            base_url: API base URL (defaults to settings)
            **kwargs: Passed through to ExternalAPIClient
        """
        self.api_key = settings.plant_id_api_key if api_key is None else api_key
        super().__init__(
            base_url=base_url or settings.plant_id_api_base_url,
            headers={
                APIConstants.PLANT_ID_KEY_HEADER: self.api_key,
                "Content-Type": APIConstants.CONTENT_TYPE_JSON,
            },
            **kwargs,
        )

    async def identify(self, image_bytes: bytes, mime_type: str = "image/jpeg") -> IdentificationResult:
        """
        Identify a plant and assess its health.

        Args:
            image_bytes: Normalized image content
            mime_type: MIME type of the image

        Returns:
            IdentificationResult instance

        Raises:
            MissingCredentialsError: If no API key is configured
            ExternalAPIError: If the request fails or the response is malformed
        """
        if not self.api_key:
            raise MissingCredentialsError("Plant.id API key not configured")

        encoded = base64.b64encode(image_bytes).decode("ascii")
        data = await self._make_request(
            "POST",
            PlantIdAPIEndpoints.IDENTIFICATION,
            json={
                "images": [f"data:{mime_type};base64,{encoded}"],
                "similar_images": True,
                "health": PlantIdAPIEndpoints.HEALTH_MODE,
                "classification_level": PlantIdAPIEndpoints.CLASSIFICATION_LEVEL,
            },
        )

        try:
            response = IdentificationResponse(**data)
        except (ValidationError, TypeError) as e:
            logger.error(f"Malformed Plant.id response: {e}")
            raise ExternalAPIError("Plant.id API returned a malformed response") from e

        result = response.to_identification_result()
        logger.debug(
            f"Identified {result.top_suggestion.name if result.top_suggestion else 'nothing'} "
            f"with {len(result.health_assessment.issues)} health issue(s)"
        )
        return result


# Singleton instance
_plant_id_client: Optional[PlantIdClient] = None


def get_plant_id_client() -> PlantIdClient:
    """
    Get or create the singleton Plant.id client instance.

    Returns:
        PlantIdClient instance
    """
    global _plant_id_client
    if _plant_id_client is None:
        _plant_id_client = PlantIdClient()
    return _plant_id_client


async def close_plant_id_client() -> None:
    """Close the singleton client if one was created."""
    global _plant_id_client
    if _plant_id_client is not None:
        await _plant_id_client.close()
        _plant_id_client = None

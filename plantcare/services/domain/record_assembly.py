"""
Domain service: Assemble an analysis record from external API results.

All fallback defaults for missing identification fields are applied here,
once, rather than at each call site.
"""
from typing import Any, Dict, Optional

from plantcare.domain.models import (
    HealthAssessment,
    HealthStatus,
    IdentificationResult,
    PlantAnalysisCreate,
)
from plantcare.services.domain.treatment_synthesizer import synthesize
from plantcare.utils.image_processing import NormalizedImage


UNKNOWN_PLANT_NAME = "Unknown Plant"


def derive_health_status(health_assessment: HealthAssessment) -> HealthStatus:
    """
    Map the binary health flag and issue list to a HealthStatus.

    Args:
        health_assessment: Health section of the identification result

    Returns:
        HEALTHY if flagged healthy, ISSUES_DETECTED if any issues, else UNKNOWN
    """
    if health_assessment.is_healthy:
        return HealthStatus.HEALTHY
    if health_assessment.issues:
        return HealthStatus.ISSUES_DETECTED
    return HealthStatus.UNKNOWN


def assemble_analysis(
    image: NormalizedImage,
    identification: IdentificationResult,
    weather_data: Optional[Dict[str, Any]] = None,
) -> PlantAnalysisCreate:
    """
    Build the pre-persistence analysis record.

    Probability values are passed through as received, without clamping.

    Args:
        image: Normalized upload
        identification: Parsed identification/health result
        weather_data: Weather snapshot, or None if unavailable

    Returns:
        PlantAnalysisCreate ready for the store
    """
    suggestion = identification.top_suggestion
    health = identification.health_assessment

    common_name = UNKNOWN_PLANT_NAME
    scientific_name = ""
    confidence: float = 0
    if suggestion is not None:
        common_name = suggestion.name or UNKNOWN_PLANT_NAME
        scientific_name = suggestion.authority_name or suggestion.name or ""
        confidence = suggestion.probability or 0

    return PlantAnalysisCreate(
        image_url=image.to_data_url(),
        common_name=common_name,
        scientific_name=scientific_name,
        confidence=confidence,
        health_status=derive_health_status(health),
        health_issues=list(health.issues),
        treatment_recommendations=synthesize(suggestion, health),
        weather_data=weather_data,
        user_id=None,
    )

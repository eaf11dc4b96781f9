"""
Domain models for plant identification, health assessment and analyses.

These models represent the core domain entities and should be independent
of any infrastructure concerns (API clients, storage, etc.). They serialize
with camelCase aliases so the JSON contract matches the web client.
"""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HealthStatus(str, Enum):
    """Overall health verdict for an analyzed plant."""
    HEALTHY = "Healthy"
    ISSUES_DETECTED = "Issues Detected"
    UNKNOWN = "Unknown"


class DiseaseTreatment(CamelModel):
    """Treatment guidance attached to a detected disease."""
    biological: List[str] = Field(default_factory=list)
    chemical: List[str] = Field(default_factory=list)
    prevention: List[str] = Field(default_factory=list)

    @field_validator("biological", "chemical", "prevention", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return [] if value is None else value


class HealthIssue(CamelModel):
    """A single detected health issue, most likely first."""
    name: Optional[str] = None
    probability: Optional[float] = Field(
        default=None,
        description="Probability reported by the identification API (not clamped)"
    )
    treatment: Optional[DiseaseTreatment] = None


class HealthAssessment(CamelModel):
    """Health section of an identification result."""
    is_healthy: Optional[bool] = None
    issues: List[HealthIssue] = Field(default_factory=list)


class PlantSuggestion(CamelModel):
    """Best-guess species match."""
    name: Optional[str] = None
    authority_name: Optional[str] = Field(
        default=None,
        description="Scientific name qualified with its naming authority"
    )
    probability: Optional[float] = None


class IdentificationResult(CamelModel):
    """Normalized output of the identification/health API."""
    top_suggestion: Optional[PlantSuggestion] = None
    health_assessment: HealthAssessment = Field(default_factory=HealthAssessment)


class TreatmentTrack(CamelModel):
    """One treatment approach (organic or chemical)."""
    description: str
    steps: List[str] = Field(default_factory=list)
    timeline: str


class TreatmentPlan(CamelModel):
    """Three-part care plan derived from identification and health data."""
    immediate: List[str] = Field(default_factory=list)
    organic: TreatmentTrack
    chemical: TreatmentTrack


class PlantAnalysisCreate(CamelModel):
    """A completed analysis before it is persisted."""
    image_url: str
    common_name: Optional[str] = None
    scientific_name: Optional[str] = None
    confidence: Optional[float] = None
    health_status: Optional[HealthStatus] = None
    health_issues: Optional[List[HealthIssue]] = None
    treatment_recommendations: Optional[TreatmentPlan] = None
    weather_data: Optional[Dict[str, Any]] = None
    user_id: Optional[str] = None


class PlantAnalysis(PlantAnalysisCreate):
    """A persisted analysis. Immutable once created."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    id: str
    analysis_date: datetime

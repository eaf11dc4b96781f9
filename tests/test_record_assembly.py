"""
Unit tests for analysis record assembly.
"""
import pytest

from plantcare.domain.models import (
    HealthAssessment,
    HealthIssue,
    HealthStatus,
    IdentificationResult,
    PlantSuggestion,
)
from plantcare.services.domain.record_assembly import (
    UNKNOWN_PLANT_NAME,
    assemble_analysis,
    derive_health_status,
)
from plantcare.utils.image_processing import NormalizedImage


@pytest.fixture
def image() -> NormalizedImage:
    return NormalizedImage(mime_type="image/jpeg", data=b"\xff\xd8jpeg", width=10, height=10)


class TestFieldDerivation:
    """Tests for identification field fallbacks."""

    def test_full_identification(self, image, identification_result, sample_weather):
        record = assemble_analysis(image, identification_result, sample_weather)

        assert record.common_name == "Monstera Deliciosa"
        assert record.scientific_name == "Monstera deliciosa Liebm."
        assert record.confidence == 0.93
        assert record.health_status == HealthStatus.ISSUES_DETECTED
        assert record.weather_data == sample_weather
        assert record.user_id is None
        assert record.treatment_recommendations.organic.steps[-1] == "neem"

    def test_missing_suggestion_defaults(self, image):
        record = assemble_analysis(image, IdentificationResult())

        assert record.common_name == UNKNOWN_PLANT_NAME
        assert record.scientific_name == ""
        assert record.confidence == 0
        assert record.health_status == HealthStatus.UNKNOWN
        assert record.health_issues == []
        assert record.weather_data is None

    def test_scientific_name_falls_back_to_name(self, image):
        result = IdentificationResult(top_suggestion=PlantSuggestion(name="Ficus lyrata"))

        record = assemble_analysis(image, result)

        assert record.scientific_name == "Ficus lyrata"
        assert record.confidence == 0

    def test_probability_is_not_clamped(self, image):
        result = IdentificationResult(
            top_suggestion=PlantSuggestion(name="Rose", probability=1.7),
            health_assessment=HealthAssessment(issues=[HealthIssue(name="rust", probability=-0.2)]),
        )

        record = assemble_analysis(image, result)

        assert record.confidence == 1.7
        assert record.health_issues[0].probability == -0.2

    def test_image_url_is_data_url(self, image):
        record = assemble_analysis(image, IdentificationResult())

        assert record.image_url == f"data:image/jpeg;base64,{image.to_base64()}"

    def test_health_issue_order_preserved(self, image):
        issues = [HealthIssue(name=f"issue-{i}", probability=1 - i / 10) for i in range(4)]
        result = IdentificationResult(health_assessment=HealthAssessment(issues=issues))

        record = assemble_analysis(image, result)

        assert [issue.name for issue in record.health_issues] == ["issue-0", "issue-1", "issue-2", "issue-3"]


class TestHealthStatus:
    """Tests for health status precedence."""

    def test_healthy_flag_wins_over_issues(self):
        assessment = HealthAssessment(is_healthy=True, issues=[HealthIssue(name="rust")])

        assert derive_health_status(assessment) == HealthStatus.HEALTHY

    def test_issues_detected(self):
        assessment = HealthAssessment(is_healthy=False, issues=[HealthIssue(name="rust")])

        assert derive_health_status(assessment) == HealthStatus.ISSUES_DETECTED

    def test_unknown_when_no_flag_and_no_issues(self):
        assert derive_health_status(HealthAssessment()) == HealthStatus.UNKNOWN

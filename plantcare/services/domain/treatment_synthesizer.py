"""
Domain service: Treatment plan synthesis.

Builds a three-part care plan (immediate, organic, chemical) from:
- A species template picked by keyword match on the identified name
- Disease-specific treatment guidance returned by the identification API

The species templates are an ordered table evaluated top to bottom; the
first template with a keyword contained in the case-folded plant name wins,
and the generic template applies when nothing matches.
"""
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from plantcare.domain.models import (
    HealthAssessment,
    PlantSuggestion,
    TreatmentPlan,
    TreatmentTrack,
)


ORGANIC_DESCRIPTION = "Natural, eco-friendly treatment options"
ORGANIC_TIMELINE = "2-4 weeks for visible improvement"
CHEMICAL_DESCRIPTION = "Fast-acting treatment for severe cases"
CHEMICAL_TIMELINE = "1-2 weeks for visible improvement"

# Number of prevention tips taken from each disease into the immediate steps
PREVENTION_TIPS_PER_ISSUE = 2


@dataclass(frozen=True)
class CareTemplate:
    """Seed steps for a treatment plan."""
    immediate: Tuple[str, ...]
    organic: Tuple[str, ...]
    chemical: Tuple[str, ...]


MONSTERA_TEMPLATE = CareTemplate(
    immediate=(
        "Water when top inch of soil is dry",
        "Provide bright, indirect light",
        "Maintain 60-70% humidity",
        "Clean leaves weekly for optimal photosynthesis",
    ),
    organic=(
        "Use neem oil spray for pest prevention",
        "Apply compost-based fertilizer monthly",
        "Mist leaves regularly for humidity",
    ),
    chemical=(
        "Balanced liquid fertilizer (20-20-20) bi-weekly",
        "Systemic insecticide if pests detected",
    ),
)

GENERIC_TEMPLATE = CareTemplate(
    immediate=(
        "Check soil moisture regularly",
        "Ensure proper drainage",
        "Monitor for pests and diseases",
        "Provide appropriate lighting for your plant species",
    ),
    organic=(
        "Use organic compost for fertilization",
        "Apply neem oil for natural pest control",
        "Maintain proper humidity levels",
        "Prune dead or damaged parts",
    ),
    chemical=(
        "Use balanced NPK fertilizer as needed",
        "Apply fungicide if disease symptoms appear",
        "Use appropriate pesticides for specific pest problems",
    ),
)

# (keywords, template) pairs, first match wins
SPECIES_TEMPLATES: Tuple[Tuple[Tuple[str, ...], CareTemplate], ...] = (
    (("monstera",), MONSTERA_TEMPLATE),
)


def select_template(
    plant_name: Optional[str],
    templates: Sequence[Tuple[Tuple[str, ...], CareTemplate]] = SPECIES_TEMPLATES,
) -> CareTemplate:
    """
    Pick the care template for a plant name.

    Args:
        plant_name: Identified plant name, may be None or empty
        templates: Ordered (keywords, template) table

    Returns:
        The first matching species template, or the generic template
    """
    if not plant_name:
        return GENERIC_TEMPLATE

    folded = plant_name.casefold()
    for keywords, template in templates:
        if any(keyword in folded for keyword in keywords):
            return template
    return GENERIC_TEMPLATE


def synthesize(
    suggestion: Optional[PlantSuggestion],
    health_assessment: Optional[HealthAssessment],
) -> TreatmentPlan:
    """
    Build a treatment plan from identification and health data.

    Exactly one template seeds the three step lists. Every issue carrying
    treatment details then extends them: all biological entries go to the
    organic steps, all chemical entries to the chemical steps, and the first
    two prevention entries to the immediate steps.

    Args:
        suggestion: Top species suggestion, if any
        health_assessment: Detected issues in API order, if any

    Returns:
        TreatmentPlan with fixed descriptions and timelines
    """
    template = select_template(suggestion.name if suggestion else None)

    immediate = list(template.immediate)
    organic_steps = list(template.organic)
    chemical_steps = list(template.chemical)

    issues = health_assessment.issues if health_assessment else []
    for issue in issues:
        treatment = issue.treatment
        if treatment is None:
            continue
        organic_steps.extend(treatment.biological)
        chemical_steps.extend(treatment.chemical)
        immediate.extend(treatment.prevention[:PREVENTION_TIPS_PER_ISSUE])

    return TreatmentPlan(
        immediate=immediate,
        organic=TreatmentTrack(
            description=ORGANIC_DESCRIPTION,
            steps=organic_steps,
            timeline=ORGANIC_TIMELINE,
        ),
        chemical=TreatmentTrack(
            description=CHEMICAL_DESCRIPTION,
            steps=chemical_steps,
            timeline=CHEMICAL_TIMELINE,
        ),
    )

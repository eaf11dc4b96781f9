"""
API router for plant analysis endpoints.
"""
import logging
from fastapi import APIRouter, File, Form, HTTPException, Path, Query, Request, UploadFile
from typing import Annotated, List, Optional

from plantcare.api.dependencies import AnalysisServiceDep
from plantcare.api.v1.models.responses import ClearAnalysesResponse, MessageResponse
from plantcare.domain.models import PlantAnalysis
from plantcare.infrastructure.external_api_client import ExternalAPIError
from plantcare.middleware.rate_limiter import ANALYZE_RATE_LIMIT, limiter
from plantcare.services.application.analysis_service import AnalysisNotFoundError
from plantcare.utils.image_processing import ImageTooLargeError, ImageValidationError

logger = logging.getLogger(__name__)

NOT_FOUND_DETAIL = "Plant analysis not found"

router = APIRouter(
    tags=["plant-analyses"],
)


@router.get(
    "/plant-analyses",
    response_model=List[PlantAnalysis],
    summary="List plant analyses",
    description="Return all stored analyses, most recent first, optionally filtered by plant name.",
)
async def list_plant_analyses(
    analysis_service: AnalysisServiceDep,
    q: Annotated[
        Optional[str],
        Query(description="Case-insensitive match on common or scientific name")
    ] = None,
) -> List[PlantAnalysis]:
    return analysis_service.list_analyses(search=q)


@router.get(
    "/plant-analyses/{analysis_id}",
    response_model=PlantAnalysis,
    summary="Get a plant analysis",
    responses={404: {"description": "Plant analysis not found"}},
)
async def get_plant_analysis(
    analysis_id: Annotated[str, Path(description="Analysis identifier")],
    analysis_service: AnalysisServiceDep,
) -> PlantAnalysis:
    try:
        return analysis_service.get_analysis(analysis_id)
    except AnalysisNotFoundError:
        raise HTTPException(status_code=404, detail=NOT_FOUND_DETAIL)


@router.delete(
    "/plant-analyses/{analysis_id}",
    response_model=MessageResponse,
    summary="Delete a plant analysis",
    responses={404: {"description": "Plant analysis not found"}},
)
async def delete_plant_analysis(
    analysis_id: Annotated[str, Path(description="Analysis identifier")],
    analysis_service: AnalysisServiceDep,
) -> MessageResponse:
    try:
        analysis_service.delete_analysis(analysis_id)
    except AnalysisNotFoundError:
        raise HTTPException(status_code=404, detail=NOT_FOUND_DETAIL)
    return MessageResponse(message="Plant analysis deleted successfully")


@router.delete(
    "/plant-analyses",
    response_model=ClearAnalysesResponse,
    summary="Delete all plant analyses",
)
async def clear_plant_analyses(
    analysis_service: AnalysisServiceDep,
) -> ClearAnalysesResponse:
    deleted = analysis_service.clear_analyses()
    return ClearAnalysesResponse(message="All plant analyses cleared", deleted=deleted)


@router.post(
    "/analyze-plant",
    response_model=PlantAnalysis,
    summary="Analyze a plant photo",
    description="""
    Identify a plant from an uploaded photo and store the analysis.

    This endpoint:
    1. Validates the upload and resizes it to fit inside 1024x1024 (JPEG)
    2. Sends it to Plant.id for species identification and health assessment
    3. Fetches current weather when both latitude and longitude are supplied
    4. Builds a treatment plan and stores the analysis

    Weather failures never fail the request; identification failures do,
    and nothing is stored in that case.
    """,
    responses={
        400: {"description": "Missing, unsupported or unreadable image"},
        413: {"description": "Image too large"},
        429: {"description": "Rate limit exceeded"},
        500: {"description": "API key not configured or internal error"},
        502: {"description": "Identification API failure"},
    },
)
@limiter.limit(ANALYZE_RATE_LIMIT)
async def analyze_plant(
    request: Request,
    analysis_service: AnalysisServiceDep,
    image: Annotated[Optional[UploadFile], File(description="JPG, PNG or WEBP photo")] = None,
    latitude: Annotated[Optional[float], Form()] = None,
    longitude: Annotated[Optional[float], Form()] = None,
) -> PlantAnalysis:
    """
    Analyze an uploaded plant photo.

    Args:
        request: Incoming request (used by the rate limiter)
        analysis_service: Analysis service (injected dependency)
        image: Uploaded photo
        latitude: Optional latitude for weather lookup
        longitude: Optional longitude for weather lookup

    Returns:
        The stored PlantAnalysis

    Raises:
        HTTPException: If the image is rejected or identification fails
    """
    image_bytes = await image.read() if image is not None else None
    content_type = image.content_type if image is not None else None

    try:
        # Delegate to service layer (no business logic here)
        return await analysis_service.analyze(
            image_bytes,
            content_type,
            latitude=latitude,
            longitude=longitude,
        )

    except ImageTooLargeError as e:
        raise HTTPException(status_code=413, detail=str(e))

    except ImageValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    except ExternalAPIError as e:
        raise HTTPException(
            status_code=e.status_code,
            detail=f"Failed to analyze plant image: {e.message}"
        )

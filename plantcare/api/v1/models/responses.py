"""
API response models using Pydantic.
"""
from typing import Optional
from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """Confirmation message for mutating endpoints."""
    message: str = Field(
        description="Human-readable outcome"
    )


class ClearAnalysesResponse(MessageResponse):
    """Response model for the clear-all endpoint."""
    deleted: int = Field(
        description="Number of analyses removed"
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "message": "All plant analyses cleared",
                "deleted": 3,
            }
        }
    }


class CareAdviceResponse(BaseModel):
    """Weather-based care advice for a location."""
    advice: str = Field(
        description="Care tip derived from current conditions"
    )
    temperature: Optional[float] = Field(
        default=None,
        description="Current temperature in the configured units",
        examples=[72.5]
    )
    humidity: Optional[float] = Field(
        default=None,
        description="Relative humidity in percent",
        examples=[55]
    )
    condition: Optional[str] = Field(
        default=None,
        description="Main weather condition",
        examples=["Clouds"]
    )

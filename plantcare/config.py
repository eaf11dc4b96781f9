"""
Application configuration using Pydantic settings.
"""
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Plant.id API Configuration
    plant_id_api_base_url: str = Field(
        default="https://api.plant.id/v3",
        description="Base URL for the Plant.id identification API"
    )
    plant_id_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("plant_id_api_key", "vite_plant_id_api_key"),
        description="API key for Plant.id"
    )

    # Weather API Configuration
    weather_api_base_url: str = Field(
        default="https://api.openweathermap.org/data/2.5",
        description="Base URL for the OpenWeatherMap API"
    )
    weather_api_key: str = Field(
        default="",
        validation_alias=AliasChoices(
            "openweather_api_key", "vite_openweather_api_key", "weather_api_key"
        ),
        description="API key for OpenWeatherMap"
    )
    weather_units: str = Field(
        default="imperial",
        description="Unit system requested from the weather API"
    )

    # HTTP / Retry Configuration
    request_timeout: float = Field(
        default=30.0,
        description="Timeout in seconds for outbound API calls"
    )
    max_retry_attempts: int = Field(
        default=1,
        description="Maximum number of attempts for API calls (1 disables retries)"
    )
    retry_backoff_multiplier: int = Field(
        default=1,
        description="Multiplier for exponential backoff"
    )
    retry_min_wait: int = Field(
        default=4,
        description="Minimum wait time in seconds between retries"
    )
    retry_max_wait: int = Field(
        default=10,
        description="Maximum wait time in seconds between retries"
    )

    # Image Processing
    image_max_dimension: int = Field(
        default=1024,
        description="Images are resized to fit inside a square of this size"
    )
    image_jpeg_quality: int = Field(
        default=85,
        description="JPEG quality used when re-encoding uploads"
    )
    max_upload_size_bytes: int = Field(
        default=5 * 1024 * 1024,
        description="Maximum accepted upload size"
    )
    allowed_image_types: list[str] = Field(
        default=["image/jpeg", "image/png", "image/webp"],
        description="Accepted upload MIME types"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )

    # CORS Configuration
    cors_origins: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins (use specific origins in production)"
    )

    # Rate Limiting
    rate_limit_requests: int = Field(
        default=100,
        description="Maximum analyze requests per minute per client"
    )

    # Application Settings
    app_name: str = Field(
        default="Plant Care Assistant API",
        description="Application name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )
    debug: bool = Field(
        default=False,
        description="Debug mode"
    )


# Global settings instance
settings = Settings()

"""
FastAPI application entry point.
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from plantcare.config import settings
from plantcare.infrastructure.analysis_store import InMemoryAnalysisStore
from plantcare.infrastructure.plant_id_client import close_plant_id_client
from plantcare.infrastructure.weather_client import close_weather_client
from plantcare.middleware.error_handler import ErrorHandlerMiddleware
from plantcare.middleware.rate_limiter import limiter
from plantcare.api.v1.routers import analyses, weather

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events using the modern FastAPI pattern.
    """
    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Log level: {settings.log_level}")
    if not settings.plant_id_api_key:
        logger.warning("Plant.id API key not configured; analyses will fail")
    if not settings.weather_api_key:
        logger.warning("Weather API key not configured; analyses will omit weather data")
    logger.info(f"Rate limit: {settings.rate_limit_requests} analyze requests/minute")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    await close_plant_id_client()
    await close_weather_client()
    logger.info("Shutdown complete")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Plant Care Assistant API

    Upload a plant photo to identify the species, assess its health and get
    a treatment plan, enriched with local weather when coordinates are given.

    ## Features

    - **Identification & Health**: Species and disease detection via Plant.id
    - **Treatment Plans**: Immediate, organic and chemical care steps combining
      species care templates with disease-specific treatments
    - **Weather Context**: Current conditions, forecasts and care advice
    - **History**: List, search, fetch and delete past analyses
    - **Rate Limiting**: Protects the analysis endpoint from abuse
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# The store is owned by the application and injected into handlers
app.state.analysis_store = InMemoryAnalysisStore()

# Add rate limiter to app state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Add CORS middleware with configurable origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add global error handling middleware
app.add_middleware(ErrorHandlerMiddleware)

# Include routers
app.include_router(analyses.router, prefix="/api/v1")
app.include_router(weather.router, prefix="/api/v1")


@app.get("/", tags=["health"])
async def root():
    """
    Root endpoint for health check.

    Returns:
        Status message
    """
    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.app_version,
    }


@app.get("/health", tags=["health"])
async def health_check():
    """
    Health check endpoint.

    Returns:
        Health status
    """
    return {
        "status": "healthy",
        "service": settings.app_name,
    }

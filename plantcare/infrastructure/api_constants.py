"""
API endpoint constants and configuration.

This module contains all external API endpoint paths and related constants.
Centralizing these values makes it easy to swap out endpoints or update API versions.
"""


# Plant.id API Endpoints
class PlantIdAPIEndpoints:
    """Plant.id v3 endpoint paths."""

    IDENTIFICATION = "/identification"

    # Request options for the combined identification + health call
    HEALTH_MODE = "all"
    CLASSIFICATION_LEVEL = "species"


# OpenWeatherMap API Endpoints
class WeatherAPIEndpoints:
    """OpenWeatherMap endpoint paths."""

    CURRENT_WEATHER = "/weather"
    FORECAST = "/forecast"


# API Configuration Constants
class APIConstants:
    """General API configuration constants."""

    # HTTP Headers
    CONTENT_TYPE_JSON = "application/json"
    PLANT_ID_KEY_HEADER = "Api-Key"

    # Timeouts (in seconds)
    DEFAULT_TIMEOUT = 30.0

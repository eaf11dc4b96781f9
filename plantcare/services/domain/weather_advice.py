"""
Domain service: Weather-based care advice.

Thresholds assume imperial units (Fahrenheit), matching the units
requested from the weather API.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


HOT_TEMPERATURE_F = 85
COLD_TEMPERATURE_F = 50
LOW_HUMIDITY_PCT = 30
HIGH_HUMIDITY_PCT = 80


class WeatherMain(BaseModel):
    temp: Optional[float] = None
    humidity: Optional[float] = None


class WeatherCondition(BaseModel):
    main: str = ""
    description: str = ""


class WeatherSnapshot(BaseModel):
    """Subset of the current weather response used for advice."""
    main: WeatherMain = Field(default_factory=WeatherMain)
    weather: List[WeatherCondition] = Field(default_factory=list)


def generate_care_advice(weather_data: Dict[str, Any]) -> str:
    """
    Turn a weather snapshot into a one-line care tip.

    Rules are checked in order and the first match wins.

    Args:
        weather_data: Raw current weather response

    Returns:
        Care advice sentence
    """
    snapshot = WeatherSnapshot.model_validate(weather_data)
    temp = snapshot.main.temp
    humidity = snapshot.main.humidity
    condition = snapshot.weather[0].main.lower() if snapshot.weather else ""

    if "rain" in condition:
        return "Rainy conditions mean reduced watering needs. Check soil moisture before next watering."

    if temp is not None and temp > HOT_TEMPERATURE_F:
        return "High temperatures detected. Increase watering frequency and provide shade during peak hours."

    if temp is not None and temp < COLD_TEMPERATURE_F:
        return "Cool weather slows plant growth. Reduce watering and bring sensitive plants indoors."

    if humidity is not None and humidity < LOW_HUMIDITY_PCT:
        return "Low humidity can stress plants. Consider grouping plants together or using a humidifier."

    if humidity is not None and humidity > HIGH_HUMIDITY_PCT:
        return "High humidity is great for tropical plants but ensure good air circulation to prevent fungal issues."

    return "Current weather conditions are favorable for plant growth. Maintain regular care routine."

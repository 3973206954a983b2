"""Chat request and response models."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.domain import Recommendation


class ChatLocation(BaseModel):
    """Pilot location supplied by the chat client."""

    latitude: float = Field(..., ge=-90, le=90, description="Latitude in decimal degrees")
    longitude: float = Field(
        ..., ge=-180, le=180, description="Longitude in decimal degrees"
    )
    city: Optional[str] = Field(default=None, description="City name for display")
    country: Optional[str] = Field(default=None, description="Country name for display")

    def describe(self) -> str:
        if self.city and self.country:
            return f"{self.city}, {self.country}"
        return f"Latitude: {self.latitude}, Longitude: {self.longitude}"


DEFAULT_LOCATION = ChatLocation(
    latitude=37.7749,
    longitude=-122.4194,
    city="San Francisco",
    country="USA",
)


class ChatRequest(BaseModel):
    """A single chat turn from the pilot."""

    message: str = Field(..., min_length=1, description="Free-text question")
    location: Optional[ChatLocation] = Field(
        default=None, description="Pilot location; defaults to San Francisco"
    )


class FlightConditionsSummary(BaseModel):
    recommendation: Recommendation
    confidence: int


class HourlySummary(BaseModel):
    """One row of the hourly chart shown next to the answer."""

    timestamp: datetime
    temperature: Optional[float] = None
    wind_speed: float
    wind_direction: float
    cloud_cover: Optional[float] = None
    visibility: Optional[float] = None
    pressure: Optional[float] = None


class ChatWeatherSummary(BaseModel):
    """Structured weather data returned alongside the model's answer."""

    wind_speed: float = Field(..., description="Wind speed in mph")
    wind_direction: float = Field(..., description="Wind direction in degrees")
    cardinal_direction: str = Field(..., description="Eight-point compass label")
    flight_conditions: FlightConditionsSummary
    date: str = Field(..., description="Target day as YYYY-MM-DD")
    day_of_week: str = Field(..., description="Weekday name of the target day")
    hourly_data: list[HourlySummary] = Field(default_factory=list)


class ChatResponse(BaseModel):
    response: str = Field(..., description="Answer produced by the language model")
    weather_data: Optional[ChatWeatherSummary] = Field(
        default=None, description="Flight assessment for the target day, if available"
    )


class ForecastRequest(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)


__all__ = [
    "ChatLocation",
    "ChatRequest",
    "ChatResponse",
    "ChatWeatherSummary",
    "DEFAULT_LOCATION",
    "FlightConditionsSummary",
    "ForecastRequest",
    "HourlySummary",
]

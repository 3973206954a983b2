"""Pydantic models for ThermalAI backend."""

from .chat import (
    ChatLocation,
    ChatRequest,
    ChatResponse,
    ChatWeatherSummary,
    ForecastRequest,
)
from .weather import FlightAssessment, Forecast, ForecastStats, WeatherSample

__all__ = [
    "ChatLocation",
    "ChatRequest",
    "ChatResponse",
    "ChatWeatherSummary",
    "FlightAssessment",
    "Forecast",
    "ForecastRequest",
    "ForecastStats",
    "WeatherSample",
]

"""Weather data models for flight-condition scoring."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.domain import Recommendation


class WeatherSample(BaseModel):
    """One hour (or one aggregated day) of forecast data for a location.

    Units follow the US forecast convention: mph, miles, percent and degrees
    Fahrenheit. Naive timestamps are local to the reference timezone.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    timestamp: datetime = Field(..., description="Forecast valid time")
    wind_speed: float = Field(..., ge=0, description="Wind speed in mph")
    wind_direction: float = Field(
        ..., description="Direction the wind is coming from, in degrees"
    )
    wind_gusts: Optional[float] = Field(
        default=None, ge=0, description="Wind gusts in mph"
    )
    cloud_cover: Optional[float] = Field(
        default=None, ge=0, le=100, description="Total cloud cover percentage"
    )
    low_cloud_cover: Optional[float] = Field(
        default=None, ge=0, le=100, description="Low cloud cover percentage"
    )
    mid_cloud_cover: Optional[float] = Field(
        default=None, ge=0, le=100, description="Mid cloud cover percentage"
    )
    high_cloud_cover: Optional[float] = Field(
        default=None, ge=0, le=100, description="High cloud cover percentage"
    )
    visibility: Optional[float] = Field(
        default=None, ge=0, description="Visibility in miles"
    )
    temperature: Optional[float] = Field(
        default=None, description="Air temperature in Fahrenheit"
    )
    dewpoint: Optional[float] = Field(default=None, description="Dewpoint in Fahrenheit")
    humidity: Optional[float] = Field(
        default=None, ge=0, le=100, description="Relative humidity percentage"
    )
    precipitation: Optional[float] = Field(
        default=None, ge=0, description="Precipitation in inches"
    )
    pressure: Optional[float] = Field(default=None, description="Sea-level pressure in hPa")

    @field_validator("wind_direction")
    @classmethod
    def _normalize_direction(cls, value: float) -> float:
        return value % 360

    @property
    def effective_gusts(self) -> float:
        """Gusts, never below the sustained wind speed."""

        if self.wind_gusts is None:
            return self.wind_speed
        return max(self.wind_gusts, self.wind_speed)

    @property
    def effective_cloud_cover(self) -> Optional[float]:
        """Total cloud cover, or the mean of whichever bands are present."""

        if self.cloud_cover is not None:
            return self.cloud_cover
        bands = [
            band
            for band in (self.low_cloud_cover, self.mid_cloud_cover, self.high_cloud_cover)
            if band is not None
        ]
        if not bands:
            return None
        return sum(bands) / len(bands)


class FlightAssessment(BaseModel):
    """Flight suitability derived from a single weather sample."""

    model_config = ConfigDict(frozen=True)

    recommendation: Recommendation = Field(..., description="Low, Medium or High")
    confidence: int = Field(
        ..., description="Raw score on the 0-100 point scale, not clamped"
    )
    wind_speed: float = Field(..., description="Wind speed in mph")
    wind_direction: float = Field(..., description="Wind direction in degrees")
    cardinal_direction: str = Field(..., description="Eight-point compass label")
    timestamp: Optional[datetime] = Field(
        default=None, description="Valid time of the scored sample"
    )
    reasons: tuple[str, ...] = Field(
        default=(), description="Explanations for each score deduction"
    )
    safety_notes: tuple[str, ...] = Field(
        default=(), description="Pilot-facing safety notes"
    )

    @property
    def safety_summary(self) -> str:
        return ". ".join(self.safety_notes)


class ForecastStats(BaseModel):
    """Summary statistics over a forecast period."""

    avg_temp: Optional[float] = None
    max_temp: Optional[float] = None
    min_temp: Optional[float] = None
    avg_wind_speed: float = 0.0
    max_wind_speed: float = 0.0
    data_points: int = 0


class Forecast(BaseModel):
    """Hourly forecast for one location, normalized to weather samples."""

    source: str = Field(..., description="Provider the forecast came from")
    latitude: float
    longitude: float
    samples: list[WeatherSample] = Field(default_factory=list)
    stats: ForecastStats = Field(default_factory=ForecastStats)

    @property
    def start(self) -> Optional[datetime]:
        return self.samples[0].timestamp if self.samples else None

    @property
    def end(self) -> Optional[datetime]:
        return self.samples[-1].timestamp if self.samples else None


__all__ = ["FlightAssessment", "Forecast", "ForecastStats", "WeatherSample"]

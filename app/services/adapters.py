"""Normalize alternate weather shapes into ``WeatherSample`` values.

Every provider and every stored document is converted here so that a single
scoring policy applies to all of them.
"""

from __future__ import annotations

from datetime import date, datetime
import logging
import math
from typing import Any, Iterable, Optional, Union
from zoneinfo import ZoneInfo

from pydantic import ValidationError

from app.models.weather import ForecastStats, WeatherSample

logger = logging.getLogger("thermalai.adapters")

MPS_TO_MPH = 2.237
METERS_TO_INCHES = 39.3701


def _kelvin_to_fahrenheit(value: Optional[float]) -> Optional[float]:
    if value is None:
        return None
    return (value - 273.15) * 9 / 5 + 32


def _fraction_to_pct(value: Optional[float]) -> Optional[float]:
    if value is None:
        return None
    return min(100.0, max(0.0, value * 100))


def _mean(values: Iterable[Optional[float]]) -> Optional[float]:
    present = [value for value in values if value is not None]
    if not present:
        return None
    return sum(present) / len(present)


def sample_from_wind_components(
    timestamp: datetime,
    wind_u: float,
    wind_v: float,
    *,
    low_clouds: Optional[float] = None,
    mid_clouds: Optional[float] = None,
    high_clouds: Optional[float] = None,
    temperature_k: Optional[float] = None,
    dewpoint_k: Optional[float] = None,
    pressure_pa: Optional[float] = None,
    precipitation_m: Optional[float] = None,
) -> WeatherSample:
    """Build a sample from model output expressed as a wind vector.

    ``wind_u``/``wind_v`` are in m/s, cloud bands are 0-1 fractions,
    temperatures in Kelvin, pressure in Pa and precipitation in metres.
    Total cloud cover is left unset so scoring averages the three bands.
    """

    speed_mph = math.hypot(wind_u, wind_v) * MPS_TO_MPH
    direction = (270 - math.degrees(math.atan2(wind_v, wind_u))) % 360
    return WeatherSample(
        timestamp=timestamp,
        wind_speed=speed_mph,
        wind_direction=direction,
        low_cloud_cover=_fraction_to_pct(low_clouds),
        mid_cloud_cover=_fraction_to_pct(mid_clouds),
        high_cloud_cover=_fraction_to_pct(high_clouds),
        temperature=_kelvin_to_fahrenheit(temperature_k),
        dewpoint=_kelvin_to_fahrenheit(dewpoint_k),
        pressure=pressure_pa / 100 if pressure_pa is not None else None,
        precipitation=(
            max(precipitation_m, 0.0) * METERS_TO_INCHES
            if precipitation_m is not None
            else None
        ),
    )


def samples_from_metadata(metadata: Optional[dict[str, Any]]) -> list[WeatherSample]:
    """Rebuild hourly samples from a retrieved document's metadata."""

    if not metadata:
        return []

    samples: list[WeatherSample] = []
    for raw in metadata.get("weather_data") or []:
        try:
            samples.append(WeatherSample.model_validate(raw))
        except ValidationError as exc:
            logger.warning("Skipping malformed weather sample in metadata: %s", exc)
    return samples


def local_date(timestamp: datetime, tz: ZoneInfo) -> date:
    """Calendar day of ``timestamp`` in ``tz``; naive values are already local."""

    if timestamp.tzinfo is None:
        return timestamp.date()
    return timestamp.astimezone(tz).date()


def group_by_day(
    samples: Iterable[WeatherSample], tz: ZoneInfo
) -> dict[str, list[WeatherSample]]:
    grouped: dict[str, list[WeatherSample]] = {}
    for sample in samples:
        grouped.setdefault(local_date(sample.timestamp, tz).isoformat(), []).append(sample)
    return grouped


def select_sample_for_date(
    samples: Iterable[WeatherSample],
    target_date: str,
    tz: Union[ZoneInfo, str],
) -> Optional[WeatherSample]:
    """Return the first sample that falls on ``target_date`` (``YYYY-MM-DD``)."""

    if isinstance(tz, str):
        tz = ZoneInfo(tz)
    for sample in samples:
        if local_date(sample.timestamp, tz).isoformat() == target_date:
            return sample
    return None


def aggregate_day(samples: list[WeatherSample]) -> Optional[WeatherSample]:
    """Collapse one day of hourly samples into a single day-aggregate sample."""

    if not samples:
        return None

    sin_sum = sum(math.sin(math.radians(s.wind_direction)) for s in samples)
    cos_sum = sum(math.cos(math.radians(s.wind_direction)) for s in samples)
    gusts = [s.wind_gusts for s in samples if s.wind_gusts is not None]
    visibilities = [s.visibility for s in samples if s.visibility is not None]
    precipitation = [s.precipitation for s in samples if s.precipitation is not None]

    return WeatherSample(
        timestamp=samples[0].timestamp,
        wind_speed=sum(s.wind_speed for s in samples) / len(samples),
        wind_direction=math.degrees(math.atan2(sin_sum, cos_sum)) % 360,
        wind_gusts=max(gusts) if gusts else None,
        cloud_cover=_mean(s.effective_cloud_cover for s in samples),
        visibility=min(visibilities) if visibilities else None,
        temperature=_mean(s.temperature for s in samples),
        humidity=_mean(s.humidity for s in samples),
        pressure=_mean(s.pressure for s in samples),
        precipitation=sum(precipitation) if precipitation else None,
    )


def summarize_samples(samples: list[WeatherSample]) -> ForecastStats:
    """Temperature and wind statistics over a whole forecast period."""

    if not samples:
        return ForecastStats()

    temperatures = [s.temperature for s in samples if s.temperature is not None]
    wind_speeds = [s.wind_speed for s in samples]
    return ForecastStats(
        avg_temp=sum(temperatures) / len(temperatures) if temperatures else None,
        max_temp=max(temperatures) if temperatures else None,
        min_temp=min(temperatures) if temperatures else None,
        avg_wind_speed=sum(wind_speeds) / len(wind_speeds),
        max_wind_speed=max(wind_speeds),
        data_points=len(samples),
    )


__all__ = [
    "aggregate_day",
    "group_by_day",
    "local_date",
    "sample_from_wind_components",
    "samples_from_metadata",
    "select_sample_for_date",
    "summarize_samples",
]

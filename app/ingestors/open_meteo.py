"""Hourly forecast ingestion using Open-Meteo."""

from __future__ import annotations

from datetime import datetime
import logging
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from app.config import settings
from app.models.weather import Forecast, WeatherSample
from app.services.adapters import summarize_samples

logger = logging.getLogger("thermalai.ingestors.open_meteo")

HOURLY_FIELDS: tuple[str, ...] = (
    "temperature_2m",
    "relative_humidity_2m",
    "dew_point_2m",
    "precipitation",
    "pressure_msl",
    "cloud_cover",
    "cloud_cover_low",
    "cloud_cover_mid",
    "cloud_cover_high",
    "visibility",
    "wind_speed_10m",
    "wind_direction_10m",
    "wind_gusts_10m",
)


def _value_at(hourly: dict[str, Any], key: str, index: int) -> Optional[float]:
    values = hourly.get(key)
    if not values or index >= len(values):
        return None
    return values[index]


def _visibility_miles(value: Optional[float], unit: Optional[str]) -> Optional[float]:
    """Convert Open-Meteo visibility to miles using the reported unit."""

    if value is None:
        return None
    unit = (unit or "m").lower()
    if unit in {"ft", "feet"}:
        return value / 5280
    if unit in {"mi", "miles"}:
        return value
    return value / 1609.344


def parse_hourly_payload(payload: dict[str, Any]) -> list[WeatherSample]:
    """Turn an Open-Meteo ``hourly`` block into weather samples.

    Hours without wind data cannot be scored and are dropped.
    """

    hourly = payload.get("hourly") or {}
    units = payload.get("hourly_units") or {}
    samples: list[WeatherSample] = []
    for index, raw_time in enumerate(hourly.get("time") or []):
        wind_speed = _value_at(hourly, "wind_speed_10m", index)
        wind_direction = _value_at(hourly, "wind_direction_10m", index)
        if wind_speed is None or wind_direction is None:
            logger.debug("No wind data for %s; skipping hour", raw_time)
            continue
        try:
            samples.append(
                WeatherSample(
                    timestamp=datetime.fromisoformat(raw_time),
                    wind_speed=wind_speed,
                    wind_direction=wind_direction,
                    wind_gusts=_value_at(hourly, "wind_gusts_10m", index),
                    cloud_cover=_value_at(hourly, "cloud_cover", index),
                    low_cloud_cover=_value_at(hourly, "cloud_cover_low", index),
                    mid_cloud_cover=_value_at(hourly, "cloud_cover_mid", index),
                    high_cloud_cover=_value_at(hourly, "cloud_cover_high", index),
                    visibility=_visibility_miles(
                        _value_at(hourly, "visibility", index), units.get("visibility")
                    ),
                    temperature=_value_at(hourly, "temperature_2m", index),
                    dewpoint=_value_at(hourly, "dew_point_2m", index),
                    humidity=_value_at(hourly, "relative_humidity_2m", index),
                    precipitation=_value_at(hourly, "precipitation", index),
                    pressure=_value_at(hourly, "pressure_msl", index),
                )
            )
        except (ValidationError, ValueError) as exc:
            logger.warning("Skipping invalid Open-Meteo hour %s: %s", raw_time, exc)
    return samples


class OpenMeteoIngestor:
    """Fetch hourly paragliding-relevant forecasts from Open-Meteo."""

    def __init__(
        self,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        timezone_name: str | None = None,
        forecast_model: str | None = None,
    ):
        self.base_url = base_url or settings.weather_base_url
        self.timeout = timeout or settings.weather_timeout
        self.timezone_name = timezone_name or settings.reference_timezone
        self.forecast_model = forecast_model or settings.weather_model

    async def fetch_raw(self, lat: float, lon: float) -> dict[str, Any]:
        params = {
            "latitude": lat,
            "longitude": lon,
            "hourly": ",".join(HOURLY_FIELDS),
            "temperature_unit": "fahrenheit",
            "wind_speed_unit": "mph",
            "precipitation_unit": "inch",
            "timezone": self.timezone_name,
            "forecast_model": self.forecast_model,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(self.base_url, params=params)
                response.raise_for_status()
        except httpx.TimeoutException as exc:
            logger.error("Weather request timed out: %s", exc)
            raise RuntimeError("Weather service timeout") from exc
        except httpx.HTTPStatusError as exc:
            logger.error(
                "Weather service returned error: status=%s body=%s",
                exc.response.status_code,
                exc.response.text,
            )
            raise RuntimeError("Weather service error") from exc
        except httpx.RequestError as exc:
            logger.error("Weather request failed: %s", exc)
            raise RuntimeError("Weather request failed") from exc

        return response.json()

    async def get_forecast(self, lat: float, lon: float) -> Forecast:
        payload = await self.fetch_raw(lat, lon)
        samples = parse_hourly_payload(payload)
        forecast = Forecast(
            source="open-meteo",
            latitude=lat,
            longitude=lon,
            samples=samples,
            stats=summarize_samples(samples),
        )
        logger.info(
            "Open-Meteo forecast ingested: lat=%s lon=%s hours=%s",
            lat,
            lon,
            len(samples),
        )
        return forecast


__all__ = ["HOURLY_FIELDS", "OpenMeteoIngestor", "parse_hourly_payload"]

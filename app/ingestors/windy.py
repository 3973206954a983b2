"""Point-forecast ingestion using the Windy API."""

from __future__ import annotations

from datetime import datetime, timezone
import logging
from typing import Any, Optional

import httpx

from app.config import settings
from app.models.weather import Forecast, WeatherSample
from app.services.adapters import sample_from_wind_components, summarize_samples

logger = logging.getLogger("thermalai.ingestors.windy")

WINDY_PARAMETERS: tuple[str, ...] = (
    "temp",
    "wind",
    "dewpoint",
    "precip",
    "pressure",
    "lclouds",
    "mclouds",
    "hclouds",
)


def _series_value(payload: dict[str, Any], key: str, index: int) -> Optional[float]:
    values = payload.get(key)
    if not values or index >= len(values):
        return None
    return values[index]


def _parse_ts(raw_ts: float) -> datetime:
    # Windy reports epoch milliseconds
    seconds = raw_ts / 1000 if raw_ts > 1e12 else raw_ts
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


def parse_windy_payload(payload: dict[str, Any]) -> list[WeatherSample]:
    """Turn a Windy point forecast into samples; hours without wind are dropped."""

    samples: list[WeatherSample] = []
    for index, raw_ts in enumerate(payload.get("ts") or []):
        wind_u = _series_value(payload, "wind_u-surface", index)
        wind_v = _series_value(payload, "wind_v-surface", index)
        if wind_u is None or wind_v is None:
            logger.debug("No wind data for Windy timestamp %s; skipping hour", raw_ts)
            continue
        samples.append(
            sample_from_wind_components(
                _parse_ts(raw_ts),
                wind_u,
                wind_v,
                low_clouds=_series_value(payload, "lclouds-surface", index),
                mid_clouds=_series_value(payload, "mclouds-surface", index),
                high_clouds=_series_value(payload, "hclouds-surface", index),
                temperature_k=_series_value(payload, "temp-surface", index),
                dewpoint_k=_series_value(payload, "dewpoint-surface", index),
                pressure_pa=_series_value(payload, "pressure-surface", index),
                precipitation_m=_series_value(payload, "precip-surface", index),
            )
        )
    return samples


class WindyIngestor:
    """Fetch GFS point forecasts from Windy and normalize them to samples."""

    def __init__(
        self,
        *,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        model: str = "gfs",
    ):
        self.api_key = api_key if api_key is not None else settings.windy_api_key
        self.base_url = base_url or settings.windy_base_url
        self.timeout = timeout or settings.windy_timeout
        self.model = model

    async def get_forecast(self, lat: float, lon: float) -> Forecast:
        if not self.api_key:
            raise RuntimeError("Windy API key not configured")

        body = {
            "lat": lat,
            "lon": lon,
            "model": self.model,
            "parameters": list(WINDY_PARAMETERS),
            "key": self.api_key,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self.base_url, json=body)
                response.raise_for_status()
        except httpx.TimeoutException as exc:
            logger.error("Windy request timed out: %s", exc)
            raise RuntimeError("Windy service timeout") from exc
        except httpx.HTTPStatusError as exc:
            logger.error(
                "Windy service returned error: status=%s body=%s",
                exc.response.status_code,
                exc.response.text,
            )
            raise RuntimeError("Windy service error") from exc
        except httpx.RequestError as exc:
            logger.error("Windy request failed: %s", exc)
            raise RuntimeError("Windy request failed") from exc

        samples = parse_windy_payload(response.json())
        logger.info(
            "Windy forecast ingested: lat=%s lon=%s hours=%s", lat, lon, len(samples)
        )
        return Forecast(
            source="windy.com",
            latitude=lat,
            longitude=lon,
            samples=samples,
            stats=summarize_samples(samples),
        )


__all__ = ["WINDY_PARAMETERS", "WindyIngestor", "parse_windy_payload"]

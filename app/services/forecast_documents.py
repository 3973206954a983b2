"""Render forecasts into retrievable text documents."""

from __future__ import annotations

from datetime import datetime
import logging
from typing import Optional
from zoneinfo import ZoneInfo

from app.models.weather import Forecast, WeatherSample
from app.services.adapters import aggregate_day, group_by_day
from app.services.date_resolver import WEEKDAYS
from app.services.flight_scoring import FlightConditionScorer, cardinal_direction
from app.services.vector_store import DocumentChunk

logger = logging.getLogger("thermalai.forecast_documents")


def _fmt(value: Optional[float], spec: str = ".1f", suffix: str = "") -> str:
    if value is None:
        return "n/a"
    return f"{value:{spec}}{suffix}"


def _local(timestamp: datetime, tz: ZoneInfo) -> datetime:
    if timestamp.tzinfo is None:
        return timestamp
    return timestamp.astimezone(tz)


def _day_label(day: str) -> str:
    parsed = datetime.fromisoformat(day).date()
    return f"{day} ({WEEKDAYS[(parsed.weekday() + 1) % 7].capitalize()})"


def _range(values: list[Optional[float]], unit: str) -> str:
    present = [value for value in values if value is not None]
    if not present:
        return "n/a"
    return f"{min(present):.1f}{unit} to {max(present):.1f}{unit}"


def _describe_hour(
    sample: WeatherSample, day_label: str, tz: ZoneInfo, scorer: FlightConditionScorer
) -> str:
    assessment = scorer.score(sample)
    clock = _local(sample.timestamp, tz).strftime("%H:%M")
    lines = [
        f"{day_label} - {clock}:",
        f"Flight Recommendation: {assessment.recommendation.value} "
        f"(score {assessment.confidence}; {', '.join(assessment.reasons)})",
        f"- Temperature: {_fmt(sample.temperature, suffix='°F')}",
        f"- Wind: {sample.wind_speed:.1f} mph at {sample.wind_direction:.0f}° "
        f"({assessment.cardinal_direction}) (Gusts: {sample.effective_gusts:.1f} mph)",
        f"- Cloud Coverage: {_fmt(sample.effective_cloud_cover, suffix='%')}"
        f" (Low {_fmt(sample.low_cloud_cover, '.0f', '%')},"
        f" Mid {_fmt(sample.mid_cloud_cover, '.0f', '%')},"
        f" High {_fmt(sample.high_cloud_cover, '.0f', '%')})",
        f"- Visibility: {_fmt(sample.visibility, suffix=' miles')}",
        f"- Precipitation: {_fmt(sample.precipitation, '.3f', ' inches')}",
        f"- Pressure: {_fmt(sample.pressure, suffix=' hPa')}",
    ]
    return "\n".join(lines)


def _describe_day(
    day_label: str, hours: list[WeatherSample], scorer: FlightConditionScorer
) -> str:
    outlook = scorer.score(aggregate_day(hours))
    lines = [
        f"Summary for {day_label}:",
        f"- Temperature Range: {_range([h.temperature for h in hours], '°F')}",
        f"- Wind Range: {_range([h.wind_speed for h in hours], ' mph')}",
        f"- Cloud Coverage Range: {_range([h.effective_cloud_cover for h in hours], '%')}",
    ]
    if outlook is not None:
        lines.append(
            f"- Daily Flight Outlook: {outlook.recommendation.value} "
            f"(score {outlook.confidence}, prevailing wind "
            f"{cardinal_direction(outlook.wind_direction)})"
        )
    return "\n".join(lines)


def render_forecast_text(
    location_name: str,
    forecast: Forecast,
    tz: ZoneInfo,
    scorer: Optional[FlightConditionScorer] = None,
) -> str:
    """Render a daily and hourly breakdown; paragraphs are split on blank lines."""

    scorer = scorer or FlightConditionScorer()
    if not forecast.samples:
        return f"Weather forecast for {location_name}: no forecast data available."

    start = _local(forecast.start, tz).strftime("%Y-%m-%d %H:%M")
    end = _local(forecast.end, tz).strftime("%Y-%m-%d %H:%M")
    sections = [f"Weather forecast for {location_name} from {start} to {end}:"]

    for day, hours in group_by_day(forecast.samples, tz).items():
        label = _day_label(day)
        sections.append(_describe_day(label, hours, scorer))
        sections.extend(_describe_hour(hour, label, tz, scorer) for hour in hours)

    stats = forecast.stats
    sections.append(
        "\n".join(
            [
                f"Overall Summary Statistics for {location_name}:",
                f"- Average Temperature: {_fmt(stats.avg_temp, suffix='°F')}",
                f"- Max Temperature: {_fmt(stats.max_temp, suffix='°F')}",
                f"- Min Temperature: {_fmt(stats.min_temp, suffix='°F')}",
                f"- Average Wind Speed: {stats.avg_wind_speed:.1f} mph",
                f"- Max Wind Speed: {stats.max_wind_speed:.1f} mph",
            ]
        )
    )
    return "\n\n".join(sections)


def build_forecast_document(
    location_name: str,
    forecast: Forecast,
    tz: ZoneInfo,
    scorer: Optional[FlightConditionScorer] = None,
) -> DocumentChunk:
    """Build the document text plus the metadata later used for scoring."""

    stats = forecast.stats
    metadata = {
        "source": forecast.source,
        "type": "weather_forecast",
        "location": location_name,
        "latitude": forecast.latitude,
        "longitude": forecast.longitude,
        "timestamp": datetime.now(tz).isoformat(),
        "forecast_start": forecast.start.isoformat() if forecast.start else None,
        "forecast_end": forecast.end.isoformat() if forecast.end else None,
        "weather_stats": {
            "average_temp": round(stats.avg_temp, 1) if stats.avg_temp is not None else None,
            "max_temp": round(stats.max_temp, 1) if stats.max_temp is not None else None,
            "min_temp": round(stats.min_temp, 1) if stats.min_temp is not None else None,
            "average_wind_speed": round(stats.avg_wind_speed, 1),
            "max_wind_speed": round(stats.max_wind_speed, 1),
            "data_points": stats.data_points,
        },
        "weather_data": [
            sample.model_dump(mode="json", exclude_none=True) for sample in forecast.samples
        ],
    }
    content = render_forecast_text(location_name, forecast, tz, scorer)
    logger.debug(
        "Built forecast document for %s: %s chars, %s hours",
        location_name,
        len(content),
        stats.data_points,
    )
    return DocumentChunk(content=content, metadata=metadata)


__all__ = ["build_forecast_document", "render_forecast_text"]

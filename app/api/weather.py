"""Forecast, assessment and date-resolution endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.dependencies import get_chat_service, get_forecast_ingestor, get_scorer
from app.ingestors import OpenMeteoIngestor
from app.models.chat import ForecastRequest
from app.models.weather import FlightAssessment, Forecast, WeatherSample
from app.services.chat_service import ChatService
from app.services.date_resolver import ResolvedDate
from app.services.flight_scoring import FlightConditionScorer

router = APIRouter(prefix="/api/v1", tags=["weather"])

logger = logging.getLogger("thermalai.api.weather")


@router.post(
    "/weather",
    response_model=Forecast,
    summary="Fetch the hourly forecast for a location",
)
async def get_weather(
    request: ForecastRequest,
    ingestor: OpenMeteoIngestor = Depends(get_forecast_ingestor),
) -> Forecast:
    try:
        return await ingestor.get_forecast(request.lat, request.lon)
    except RuntimeError as exc:
        logger.error("Forecast fetch failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to fetch weather data",
        ) from exc


@router.post(
    "/assessment",
    response_model=FlightAssessment,
    summary="Score a single weather sample",
)
def assess_sample(
    sample: WeatherSample,
    scorer: FlightConditionScorer = Depends(get_scorer),
) -> FlightAssessment:
    return scorer.score(sample)


@router.get(
    "/dates/resolve",
    response_model=ResolvedDate,
    summary="Resolve the target day of a free-text question",
)
def resolve_date(
    q: str = Query(..., description="Free-text question such as 'flying on friday?'"),
    service: ChatService = Depends(get_chat_service),
) -> ResolvedDate:
    return service.date_resolver.resolve_date(q)

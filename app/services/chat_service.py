"""Answer pilot questions from retrieved forecasts and the flight score."""

from __future__ import annotations

from datetime import datetime, timezone
import logging
from typing import Optional, Protocol, Sequence

from sqlalchemy.exc import SQLAlchemyError

from app.models.chat import (
    DEFAULT_LOCATION,
    ChatLocation,
    ChatRequest,
    ChatResponse,
    ChatWeatherSummary,
    FlightConditionsSummary,
    HourlySummary,
)
from app.models.weather import FlightAssessment, WeatherSample
from app.services.adapters import local_date, samples_from_metadata, select_sample_for_date
from app.services.date_resolver import DateResolver, ResolvedDate
from app.services.embeddings import EmbeddingService
from app.services.flight_scoring import FlightConditionScorer
from app.services.openai_client import CompletionClient
from app.services.vector_store import RetrievedDocument

logger = logging.getLogger("thermalai.chat")

FALLBACK_ANSWER = "The weather assistant is currently unavailable. Please try again later."

SAFETY_REMINDERS = (
    "Check local conditions at launch",
    "Consult with local pilots",
    "Never fly beyond their skill level",
    "Have proper equipment and certification",
)


class DocumentSearch(Protocol):
    def similarity_search(
        self, query_embedding: Sequence[float], k: int = 3
    ) -> list[RetrievedDocument]:
        """Return the most similar stored documents."""


def build_system_prompt(
    *,
    now: datetime,
    location: ChatLocation,
    resolved: ResolvedDate,
    assessment: Optional[FlightAssessment],
    context: str,
) -> str:
    """Construct the system prompt for the completion model."""

    lines: list[str] = [
        "You are a paragliding assistant, specialized in providing weather analysis "
        "and flight recommendations for paragliding enthusiasts.",
        f"Current date: {now.strftime('%A, %B %d, %Y')}.",
        f"Pilot location: {location.describe()}.",
        f"Forecast date in question: {resolved.day_of_week}, {resolved.date}.",
        "--IMPORTANT: Always use the current date as your reference of time for the "
        "weather forecast. If today's date is asked, always return the current date.",
        "--You have access to the weather forecast for the next 7 days and can use it "
        "to answer questions about that period.",
        "When responding, always think from a paraglider's perspective and focus on "
        "conditions that matter most for safe and enjoyable flights.",
    ]

    if assessment is not None:
        lines.extend(
            [
                "",
                "## Current Weather Conditions",
                f"- Wind Speed: {assessment.wind_speed:.1f} mph",
                f"- Wind Direction: {assessment.wind_direction:.0f}° "
                f"({assessment.cardinal_direction})",
                f"- Flight Recommendation: {assessment.recommendation.value}",
                f"- Confidence Score: {assessment.confidence}%",
                "",
                "## Flight Assessment",
                "Based on paragliding requirements:",
                f"- **Flight Safety Level**: {assessment.recommendation.value}",
                f"- **Confidence**: {assessment.confidence}%",
                f"- **Wind Analysis**: {assessment.wind_speed:.1f} mph at "
                f"{assessment.wind_direction:.0f}°",
                f"- **Score Factors**: {'; '.join(assessment.reasons)}",
                f"- **Safety Notes**: {assessment.safety_summary}",
            ]
        )

    lines.extend(["", "**Important:** Always emphasize safety and remind pilots to:"])
    lines.extend(f"{index}. {reminder}" for index, reminder in enumerate(SAFETY_REMINDERS, 1))

    if context:
        lines.extend(["", "Use this forecast context to help answer the question:", context])

    return "\n".join(lines)


def _weather_summary(
    assessment: Optional[FlightAssessment],
    resolved: ResolvedDate,
    day_samples: list[WeatherSample],
) -> Optional[ChatWeatherSummary]:
    if assessment is None:
        return None
    return ChatWeatherSummary(
        wind_speed=assessment.wind_speed,
        wind_direction=assessment.wind_direction,
        cardinal_direction=assessment.cardinal_direction,
        flight_conditions=FlightConditionsSummary(
            recommendation=assessment.recommendation,
            confidence=assessment.confidence,
        ),
        date=resolved.date,
        day_of_week=resolved.day_of_week,
        hourly_data=[
            HourlySummary(
                timestamp=sample.timestamp,
                temperature=sample.temperature,
                wind_speed=sample.wind_speed,
                wind_direction=sample.wind_direction,
                cloud_cover=sample.effective_cloud_cover,
                visibility=sample.visibility,
                pressure=sample.pressure,
            )
            for sample in day_samples
        ],
    )


class ChatService:
    """Orchestrates retrieval, date resolution, scoring and completion."""

    def __init__(
        self,
        *,
        embedder: EmbeddingService,
        completion_client: CompletionClient,
        date_resolver: DateResolver,
        scorer: Optional[FlightConditionScorer] = None,
        top_k: int = 3,
    ) -> None:
        self.embedder = embedder
        self.completion_client = completion_client
        self.date_resolver = date_resolver
        self.scorer = scorer or FlightConditionScorer()
        self.top_k = top_k

    async def answer(
        self,
        request: ChatRequest,
        store: DocumentSearch,
        *,
        now: Optional[datetime] = None,
    ) -> ChatResponse:
        now = now or datetime.now(timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        tz = self.date_resolver.timezone

        documents = await self._retrieve(request.message, store)
        resolved = self.date_resolver.resolve_date(request.message, now)

        samples = samples_from_metadata(documents[0].metadata) if documents else []
        sample = select_sample_for_date(samples, resolved.date, tz)
        if sample is None and samples:
            logger.info(
                "No forecast data for %s; available days: %s",
                resolved.date,
                sorted({local_date(s.timestamp, tz).isoformat() for s in samples}),
            )
        assessment = self.scorer.score(sample)
        day_samples = [
            s for s in samples if local_date(s.timestamp, tz).isoformat() == resolved.date
        ]

        system_message = build_system_prompt(
            now=now.astimezone(tz),
            location=request.location or DEFAULT_LOCATION,
            resolved=resolved,
            assessment=assessment,
            context="\n".join(doc.content for doc in documents),
        )
        answer = await self._complete(request.message, system_message)

        logger.info(
            "Chat answered: date=%s documents=%s recommendation=%s",
            resolved.date,
            len(documents),
            assessment.recommendation.value if assessment else None,
        )
        return ChatResponse(
            response=answer.strip(),
            weather_data=_weather_summary(assessment, resolved, day_samples),
        )

    async def _retrieve(self, message: str, store: DocumentSearch) -> list[RetrievedDocument]:
        try:
            query_embedding = await self.embedder.embed_query(message)
            return store.similarity_search(query_embedding, k=self.top_k)
        except (RuntimeError, SQLAlchemyError) as exc:
            logger.warning("Forecast retrieval unavailable: %s", exc)
            return []

    async def _complete(self, message: str, system_message: str) -> str:
        try:
            return await self.completion_client.complete(
                message, system_message=system_message
            )
        except RuntimeError as exc:
            logger.error("AI answer failed: %s", exc)
            return FALLBACK_ANSWER


__all__ = ["ChatService", "FALLBACK_ANSWER", "build_system_prompt"]

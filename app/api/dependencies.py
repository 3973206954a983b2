"""Construction of request-scoped collaborators from application settings."""

from __future__ import annotations

from fastapi import Request

from app.config import Settings, settings
from app.ingestors import OpenMeteoIngestor
from app.services.chat_service import ChatService
from app.services.date_resolver import DateResolver
from app.services.embeddings import EmbeddingService
from app.services.flight_scoring import FlightConditionScorer
from app.services.openai_client import CompletionClient


def build_embedder(config: Settings = settings) -> EmbeddingService:
    return EmbeddingService(
        api_key=config.openai_api_key,
        model=config.openai_embedding_model,
        timeout=config.openai_timeout,
    )


def build_chat_service(config: Settings = settings) -> ChatService:
    """Wire a chat service from explicit configuration."""

    return ChatService(
        embedder=build_embedder(config),
        completion_client=CompletionClient(
            api_key=config.openai_api_key,
            model=config.openai_model,
            timeout=config.openai_timeout,
            max_tokens=config.openai_max_tokens,
        ),
        date_resolver=DateResolver(config.reference_timezone),
        scorer=FlightConditionScorer(),
        top_k=config.chat_top_k,
    )


def get_chat_service(request: Request) -> ChatService:
    service = getattr(request.app.state, "chat_service", None)
    if service is None:
        service = build_chat_service()
        request.app.state.chat_service = service
    return service


def get_forecast_ingestor(request: Request) -> OpenMeteoIngestor:
    ingestor = getattr(request.app.state, "forecast_ingestor", None)
    if ingestor is None:
        ingestor = OpenMeteoIngestor()
        request.app.state.forecast_ingestor = ingestor
    return ingestor


def get_scorer() -> FlightConditionScorer:
    return FlightConditionScorer()


__all__ = [
    "build_chat_service",
    "build_embedder",
    "get_chat_service",
    "get_forecast_ingestor",
    "get_scorer",
]

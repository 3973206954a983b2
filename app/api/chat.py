"""Chat endpoint for paragliding weather questions."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.dependencies import get_chat_service
from app.db import get_db, maybe_cleanup_old_records
from app.models.chat import ChatRequest, ChatResponse
from app.services.chat_service import ChatService
from app.services.vector_store import WeatherDocumentStore

router = APIRouter(prefix="/api/v1", tags=["chat"])

logger = logging.getLogger("thermalai.api.chat")


@router.post(
    "/chat",
    response_model=ChatResponse,
    summary="Ask about flying conditions",
)
async def chat(
    request: ChatRequest,
    db: Session = Depends(get_db),
    service: ChatService = Depends(get_chat_service),
) -> ChatResponse:
    """Answer a pilot's question using stored forecasts and the flight score."""

    maybe_cleanup_old_records(db)
    response = await service.answer(request, WeatherDocumentStore(db))
    logger.info(
        "Chat request handled: chars=%s weather=%s",
        len(request.message),
        response.weather_data is not None,
    )
    return response

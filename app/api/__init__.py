"""API routers for ThermalAI backend."""

from fastapi import APIRouter

from .chat import router as chat_router
from .health import router as health_router
from .weather import router as weather_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(chat_router)
api_router.include_router(weather_router)

__all__ = ["api_router"]

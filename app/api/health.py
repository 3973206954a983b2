"""Health check endpoint."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.config import settings
from app.db import get_db
from app.services.vector_store import WeatherDocumentStore

router = APIRouter()


@router.get("/healthz", summary="Health check")
def health_check(db: Session = Depends(get_db)) -> dict[str, str | int]:
    """Report environment, reference timezone and stored forecast chunks."""
    return {
        "status": "ok",
        "env": settings.thermalai_env,
        "timezone": settings.reference_timezone,
        "documents": WeatherDocumentStore(db).count(),
    }

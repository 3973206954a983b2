"""Database configuration and helpers for ThermalAI backend."""

from __future__ import annotations

import logging
import os
from datetime import date, timedelta
from pathlib import Path
from typing import Generator

from sqlalchemy import create_engine, func
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from app.config import settings

DATABASE_URL = os.getenv("THERMALAI_DB_URL", "sqlite:///./thermalai.db")
CLEANUP_STATE_FILE = Path(
    os.getenv(
        "THERMALAI_RETENTION_STATE_FILE", "/var/lib/thermalai/retention_cleanup_state"
    )
)

engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {},
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

logger = logging.getLogger("thermalai.db")


def _load_last_cleanup_date() -> date | None:
    """Load the last cleanup date from disk if present."""

    try:
        if not CLEANUP_STATE_FILE.exists():
            return None

        stored = CLEANUP_STATE_FILE.read_text().strip()
        if not stored:
            return None

        return date.fromisoformat(stored)
    except (OSError, ValueError) as exc:
        logger.warning(
            "Failed to load last cleanup date from %s: %s", CLEANUP_STATE_FILE, exc
        )
        return None


def _persist_last_cleanup_date(value: date) -> None:
    """Persist the last cleanup date to disk for reuse across restarts."""

    try:
        CLEANUP_STATE_FILE.parent.mkdir(parents=True, exist_ok=True)
        CLEANUP_STATE_FILE.write_text(value.isoformat())
    except OSError as exc:
        logger.warning(
            "Failed to persist cleanup date to %s: %s", CLEANUP_STATE_FILE, exc
        )


_last_cleanup_date: date | None = _load_last_cleanup_date()


def get_db() -> Generator:
    """Yield a SQLAlchemy session and ensure it is closed."""

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """Create database tables if they do not exist."""

    import app.db_models  # noqa: F401 - models are imported for side effects

    Base.metadata.create_all(bind=engine)


def maybe_cleanup_old_records(db: Session) -> None:
    """
    Delete stale forecast documents once the retention window has passed.

    - Only run at most once per day.
    - Delete weather documents created before the retention cutoff.
    - Use date-based comparison, ignoring time-of-day.
    - Fail-soft: log on error but never break the chat request.
    """

    global _last_cleanup_date

    try:
        today = date.today()
        if _last_cleanup_date == today:
            return

        retention_days = max(settings.retention_days, 1)
        cutoff_str = (today - timedelta(days=retention_days)).isoformat()

        import app.db_models as models

        stale = db.query(models.WeatherDocument).filter(
            func.date(models.WeatherDocument.created_at) < cutoff_str
        )
        if stale.limit(1).first() is not None:
            deleted = stale.delete(synchronize_session=False)
            db.commit()
            logger.info("Retention cleanup removed %s weather documents", deleted)

        _last_cleanup_date = today
        _persist_last_cleanup_date(today)
    except Exception as exc:  # pragma: no cover
        db.rollback()
        logger.warning("Retention cleanup failed: %s", exc)

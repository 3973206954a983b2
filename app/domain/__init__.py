"""Domain primitives shared across services."""

from .recommendations import (
    HIGH_THRESHOLD,
    MEDIUM_THRESHOLD,
    Recommendation,
    recommendation_for_score,
)

__all__ = [
    "HIGH_THRESHOLD",
    "MEDIUM_THRESHOLD",
    "Recommendation",
    "recommendation_for_score",
]

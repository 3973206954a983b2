"""Flight recommendation levels."""

from __future__ import annotations

from enum import Enum


class Recommendation(str, Enum):
    """Top-level flight-suitability verdict."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


# Score cut points on the 0-100 confidence scale
HIGH_THRESHOLD = 80
MEDIUM_THRESHOLD = 50


def recommendation_for_score(score: float) -> Recommendation:
    if score >= HIGH_THRESHOLD:
        return Recommendation.HIGH
    if score >= MEDIUM_THRESHOLD:
        return Recommendation.MEDIUM
    return Recommendation.LOW


__all__ = [
    "HIGH_THRESHOLD",
    "MEDIUM_THRESHOLD",
    "Recommendation",
    "recommendation_for_score",
]

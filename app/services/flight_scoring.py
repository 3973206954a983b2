"""Points-based flight-condition scoring for paragliding."""

from __future__ import annotations

import logging
import math
from typing import Optional

from app.domain import MEDIUM_THRESHOLD, recommendation_for_score
from app.models.weather import FlightAssessment, WeatherSample

logger = logging.getLogger("thermalai.flight_scoring")

COMPASS_POINTS: tuple[str, ...] = ("N", "NE", "E", "SE", "S", "SW", "W", "NW")

MAX_SCORE = 100
LIGHT_WIND_MPH = 5.0
STRONG_WIND_MPH = 15.0
EXCESSIVE_WIND_MPH = 20.0

DEFAULT_REASON = "Conditions look suitable"
LIGHT_WIND_NOTE = "Light wind conditions - be cautious of sink"
STRONG_WIND_NOTE = "Strong winds - exercise extra caution"
MARGINAL_NOTE = "Marginal conditions - carefully assess before launch"
DEFAULT_SAFETY_NOTE = "Standard safety protocols apply"


def cardinal_direction(degrees: float) -> str:
    """Return the eight-point compass label for a wind direction."""

    index = math.floor((degrees % 360) / 45 + 0.5) % 8
    return COMPASS_POINTS[index]


def safety_notes(wind_speed: float, confidence: float) -> list[str]:
    """Pilot-facing notes derived from wind speed and the final score."""

    notes: list[str] = []
    if wind_speed < LIGHT_WIND_MPH:
        notes.append(LIGHT_WIND_NOTE)
    elif wind_speed > STRONG_WIND_MPH:
        notes.append(STRONG_WIND_NOTE)
    if confidence < MEDIUM_THRESHOLD:
        notes.append(MARGINAL_NOTE)
    return notes or [DEFAULT_SAFETY_NOTE]


class FlightConditionScorer:
    """Score a weather sample on a 0-100 point scale.

    Deductions are applied for wind outside the 5-15 mph band, heavy cloud
    and poor visibility. The raw point total is reported as the confidence
    without clamping.
    """

    def score(self, sample: Optional[WeatherSample]) -> Optional[FlightAssessment]:
        if sample is None:
            return None

        points = MAX_SCORE
        reasons: list[str] = []
        for deduction, reason in (
            self._wind_penalty(sample.wind_speed),
            self._cloud_penalty(sample.effective_cloud_cover),
            self._visibility_penalty(sample.visibility),
        ):
            if deduction:
                points -= deduction
                reasons.append(reason)

        assessment = FlightAssessment(
            recommendation=recommendation_for_score(points),
            confidence=points,
            wind_speed=sample.wind_speed,
            wind_direction=sample.wind_direction,
            cardinal_direction=cardinal_direction(sample.wind_direction),
            timestamp=sample.timestamp,
            reasons=tuple(reasons or [DEFAULT_REASON]),
            safety_notes=tuple(safety_notes(sample.wind_speed, points)),
        )
        logger.debug("Flight assessment computed: %s", assessment)
        return assessment

    def _wind_penalty(self, wind_speed: float) -> tuple[int, str]:
        if wind_speed < LIGHT_WIND_MPH:
            return 20, f"Light wind ({wind_speed:.1f} mph) - sink risk"
        if wind_speed > EXCESSIVE_WIND_MPH:
            return 40, f"Wind too strong ({wind_speed:.1f} mph)"
        if wind_speed > STRONG_WIND_MPH:
            return 20, f"Strong wind ({wind_speed:.1f} mph)"
        return 0, ""

    def _cloud_penalty(self, cloud_cover: Optional[float]) -> tuple[int, str]:
        if cloud_cover is None:
            return 0, ""
        if cloud_cover > 80:
            return 30, f"Heavy cloud cover ({cloud_cover:.0f}%)"
        if cloud_cover > 60:
            return 20, f"Extensive cloud cover ({cloud_cover:.0f}%)"
        return 0, ""

    def _visibility_penalty(self, visibility: Optional[float]) -> tuple[int, str]:
        if visibility is None:
            return 0, ""
        if visibility < 3:
            return 30, f"Low visibility ({visibility:.1f} mi)"
        if visibility < 5:
            return 20, f"Reduced visibility ({visibility:.1f} mi)"
        return 0, ""


__all__ = [
    "COMPASS_POINTS",
    "DEFAULT_REASON",
    "DEFAULT_SAFETY_NOTE",
    "FlightConditionScorer",
    "cardinal_direction",
    "safety_notes",
]

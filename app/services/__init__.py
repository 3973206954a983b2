"""Service-layer helpers for ThermalAI backend."""

from .date_resolver import DateResolver, ResolvedDate
from .flight_scoring import FlightConditionScorer, cardinal_direction, safety_notes

__all__ = [
    "DateResolver",
    "FlightConditionScorer",
    "ResolvedDate",
    "cardinal_direction",
    "safety_notes",
]

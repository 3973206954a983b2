"""Resolve the calendar day a pilot is asking about from free text."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
import logging
import re
from typing import Optional
from zoneinfo import ZoneInfo

logger = logging.getLogger("thermalai.date_resolver")

# Sunday-first, matching the weekday numbering used for offsets below
WEEKDAYS: tuple[str, ...] = (
    "sunday",
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
)

_US_DATE = re.compile(r"\b(\d{1,2})/(\d{1,2})/(\d{4})\b")
_ISO_DATE = re.compile(r"\b(\d{4})-(\d{2})-(\d{2})\b")


@dataclass(frozen=True)
class ResolvedDate:
    """Canonical target day plus its weekday label."""

    date: str
    day_of_week: str


def _sunday_based_weekday(day: date) -> int:
    return (day.weekday() + 1) % 7


def _us_date(match: re.Match) -> date:
    month, day, year = (int(part) for part in match.groups())
    return date(year, month, day)


def _iso_date(match: re.Match) -> date:
    year, month, day = (int(part) for part in match.groups())
    return date(year, month, day)


_EXPLICIT_PATTERNS = ((_US_DATE, _us_date), (_ISO_DATE, _iso_date))


class DateResolver:
    """Map phrases such as "tomorrow" or "friday" to a target calendar day.

    All arithmetic happens on the reference instant converted to the
    configured timezone, so day boundaries match the pilot's day rather than
    the server's. Resolution never fails: anything unrecognised falls back to
    the reference day.
    """

    def __init__(self, timezone_name: str = "America/Los_Angeles") -> None:
        self.timezone = ZoneInfo(timezone_name)

    def reference_day(self, reference_instant: Optional[datetime] = None) -> date:
        """Return the reference instant's calendar day in the configured timezone.

        Naive instants are taken to be UTC.
        """

        if reference_instant is None:
            return datetime.now(self.timezone).date()
        if reference_instant.tzinfo is None:
            reference_instant = reference_instant.replace(tzinfo=timezone.utc)
        return reference_instant.astimezone(self.timezone).date()

    def resolve(
        self, query_text: str, reference_instant: Optional[datetime] = None
    ) -> str:
        """Return the target day as ``YYYY-MM-DD``."""

        return self.resolve_date(query_text, reference_instant).date

    def resolve_date(
        self, query_text: str, reference_instant: Optional[datetime] = None
    ) -> ResolvedDate:
        today = self.reference_day(reference_instant)
        target = self._target_day((query_text or "").lower(), today)
        logger.debug("Resolved %r to %s", query_text, target.isoformat())
        return ResolvedDate(
            date=target.isoformat(),
            day_of_week=WEEKDAYS[_sunday_based_weekday(target)].capitalize(),
        )

    def _target_day(self, text: str, today: date) -> date:
        if "tomorrow" in text:
            return today + timedelta(days=1)

        if "today" in text:
            return today

        current = _sunday_based_weekday(today)
        if "this weekend" in text:
            return today + timedelta(days=(6 - current) % 7)

        # Same weekday counts as today, not next week
        for index, name in enumerate(WEEKDAYS):
            if name in text:
                return today + timedelta(days=(index - current + 7) % 7)

        explicit = _explicit_date(text)
        if explicit is not None:
            return explicit

        return today


def _explicit_date(text: str) -> Optional[date]:
    for pattern, build in _EXPLICIT_PATTERNS:
        match = pattern.search(text)
        if match is None:
            continue
        try:
            return build(match)
        except ValueError:
            logger.debug("Ignoring invalid calendar date %r", match.group(0))
    return None


__all__ = ["DateResolver", "ResolvedDate", "WEEKDAYS"]

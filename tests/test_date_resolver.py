from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from app.services.date_resolver import DateResolver

PACIFIC = ZoneInfo("America/Los_Angeles")

# Friday 2024-06-14, noon Pacific
FRIDAY_NOON = datetime(2024, 6, 14, 19, 0, tzinfo=timezone.utc)


@pytest.fixture
def resolver():
    return DateResolver("America/Los_Angeles")


@pytest.mark.parametrize("hour", range(24))
def test_tomorrow_is_next_day_for_any_hour(resolver, hour):
    now = datetime(2024, 6, 14, hour, 30, tzinfo=PACIFIC)

    assert resolver.resolve("Can I fly tomorrow?", now) == "2024-06-15"


def test_tomorrow_rolls_over_year_end(resolver):
    now = datetime(2024, 12, 31, 23, 0, tzinfo=PACIFIC)

    assert resolver.resolve("TOMORROW", now) == "2025-01-01"


def test_today_uses_reference_timezone(resolver):
    # 03:00 UTC on the 15th is still the evening of the 14th in California
    now = datetime(2024, 6, 15, 3, 0, tzinfo=timezone.utc)

    assert resolver.resolve("how is it today", now) == "2024-06-14"


def test_naive_reference_is_treated_as_utc(resolver):
    assert resolver.resolve("today", datetime(2024, 6, 15, 3, 0)) == "2024-06-14"


def test_tomorrow_wins_over_weekday(resolver):
    assert resolver.resolve("tomorrow or monday?", FRIDAY_NOON) == "2024-06-15"


def test_same_weekday_returns_today(resolver):
    assert resolver.resolve("flying on Friday?", FRIDAY_NOON) == "2024-06-14"


@pytest.mark.parametrize(
    "phrase,expected",
    [
        ("saturday", "2024-06-15"),
        ("sunday", "2024-06-16"),
        ("monday", "2024-06-17"),
        ("thursday", "2024-06-20"),
    ],
)
def test_weekday_is_next_occurrence(resolver, phrase, expected):
    assert resolver.resolve(f"what about {phrase}", FRIDAY_NOON) == expected


@pytest.mark.parametrize(
    "now,expected",
    [
        (FRIDAY_NOON, "2024-06-15"),
        (datetime(2024, 6, 15, 19, 0, tzinfo=timezone.utc), "2024-06-15"),
        (datetime(2024, 6, 16, 19, 0, tzinfo=timezone.utc), "2024-06-22"),
    ],
)
def test_this_weekend_is_next_saturday(resolver, now, expected):
    assert resolver.resolve("Any thermals this weekend?", now) == expected


def test_explicit_us_date(resolver):
    assert resolver.resolve("conditions on 07/04/2024", FRIDAY_NOON) == "2024-07-04"


def test_explicit_iso_date(resolver):
    assert resolver.resolve("conditions on 2024-07-04", FRIDAY_NOON) == "2024-07-04"


def test_us_date_takes_priority_over_iso(resolver):
    text = "2024-08-01 or 07/04/2024"

    assert resolver.resolve(text, FRIDAY_NOON) == "2024-07-04"


def test_invalid_calendar_date_falls_through(resolver):
    assert resolver.resolve("02/30/2024 or 2024-03-01", FRIDAY_NOON) == "2024-03-01"
    assert resolver.resolve("02/30/2024", FRIDAY_NOON) == "2024-06-14"


@pytest.mark.parametrize("text", ["", "is the wind ok?", "13/45/2024"])
def test_unparseable_defaults_to_today(resolver, text):
    resolved = resolver.resolve_date(text, FRIDAY_NOON)

    assert resolved.date == "2024-06-14"
    assert resolved.day_of_week == "Friday"


def test_resolve_date_reports_weekday(resolver):
    resolved = resolver.resolve_date("tomorrow", FRIDAY_NOON)

    assert resolved.date == "2024-06-15"
    assert resolved.day_of_week == "Saturday"


def test_other_reference_timezone():
    resolver = DateResolver("Europe/Berlin")
    now = datetime(2024, 6, 14, 22, 30, tzinfo=timezone.utc)

    assert resolver.resolve("today", now) == "2024-06-15"

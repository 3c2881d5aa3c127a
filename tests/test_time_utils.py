from datetime import date, datetime, timedelta, timezone

import pytest

from planner.models import DayCode, SCHOOL_WEEK
from planner.time_utils import (
    day_name,
    fmt_clock,
    is_school_day,
    parse_clock,
    resolve_day_code,
    to_local_date,
)

MONDAY = date(2026, 10, 19)


@pytest.mark.parametrize(
    "offset, expected",
    [(0, DayCode.MONDAY), (1, DayCode.TUESDAY), (2, DayCode.WEDNESDAY), (3, DayCode.THURSDAY), (4, DayCode.FRIDAY)],
)
def test_weekdays_map_to_their_code(offset, expected):
    assert resolve_day_code(MONDAY + timedelta(days=offset)) is expected


def test_weekend_falls_back_to_monday():
    saturday = date(2026, 10, 24)
    sunday = date(2026, 10, 25)
    assert resolve_day_code(saturday) is DayCode.MONDAY
    assert resolve_day_code(sunday) is DayCode.MONDAY


def test_resolver_is_total_over_a_year():
    start = date(2026, 1, 1)
    for i in range(366):
        assert resolve_day_code(start + timedelta(days=i)) in SCHOOL_WEEK


def test_is_school_day_tells_weekend_apart():
    assert is_school_day(MONDAY)
    assert not is_school_day(date(2026, 10, 24))
    # a setup that only teaches Mon/Wed
    assert not is_school_day(MONDAY + timedelta(days=1), [DayCode.MONDAY, DayCode.WEDNESDAY])
    assert is_school_day(date(2026, 10, 24), [DayCode.SATURDAY])


@pytest.mark.parametrize(
    "text, minutes",
    [
        ("9:00 AM", 9 * 60),
        ("10:00 AM", 10 * 60),
        ("12:00 PM", 12 * 60),
        ("12:15 AM", 15),
        ("1:30 PM", 13 * 60 + 30),
        ("11:59pm", 23 * 60 + 59),
        ("09:05", 9 * 60 + 5),
        ("14:45:00", 14 * 60 + 45),
    ],
)
def test_parse_clock(text, minutes):
    assert parse_clock(text) == minutes


@pytest.mark.parametrize("text", ["", "noon", "9", "25:00", "13:00 PM", "9:75 AM", None, 900])
def test_parse_clock_rejects_garbage(text):
    assert parse_clock(text) is None


def test_to_local_date_handles_the_shapes_supabase_returns():
    assert to_local_date("2026-10-19") == MONDAY
    assert to_local_date(MONDAY) == MONDAY
    assert to_local_date(datetime(2026, 10, 19, 23, 0)) == MONDAY
    # midnight local stored as UTC; America/New_York is UTC-4 in October
    assert to_local_date("2026-10-19T04:00:00.000Z") == MONDAY
    assert to_local_date(datetime(2026, 10, 20, 2, 0, tzinfo=timezone.utc)) == MONDAY
    assert to_local_date(None) is None
    assert to_local_date("not a date") is None


def test_display_helpers():
    assert fmt_clock("08:00:00") == "08:00"
    assert fmt_clock("9:00 AM") == "9:00 AM"
    assert fmt_clock(None) == "--:--"
    assert day_name("Th") == "Thursday"
    assert day_name("X") == "X"

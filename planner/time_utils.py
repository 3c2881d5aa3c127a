# planner/time_utils.py
from __future__ import annotations
import os
import re
from datetime import datetime, date
from typing import Any, Iterable, Optional
from zoneinfo import ZoneInfo

from .models import DayCode, SCHOOL_WEEK

TZ = os.getenv("TZ_USER", "America/New_York")

DAY_NAMES = {
    DayCode.MONDAY: "Monday",
    DayCode.TUESDAY: "Tuesday",
    DayCode.WEDNESDAY: "Wednesday",
    DayCode.THURSDAY: "Thursday",
    DayCode.FRIDAY: "Friday",
    DayCode.SATURDAY: "Saturday",
    DayCode.SUNDAY: "Sunday",
}
# Python weekday() order, Monday=0
_WEEKDAY_CODES = SCHOOL_WEEK + [DayCode.SATURDAY, DayCode.SUNDAY]

_CLOCK = re.compile(r"^\s*(\d{1,2}):(\d{2})(?::(\d{2}))?\s*([AaPp][Mm])?\s*$")


def now_local() -> datetime:
    return datetime.now(ZoneInfo(TZ))


def today_local() -> date:
    return now_local().date()


def to_local_date(value: Any) -> Optional[date]:
    """date / datetime / ISO string -> calendar date in TZ. None if unparseable."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(ZoneInfo(TZ)).date()
        return value.date()
    if isinstance(value, date):
        return value
    s = str(value).strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    try:
        return to_local_date(datetime.fromisoformat(s))
    except ValueError:
        pass
    try:
        return date.fromisoformat(s[:10])
    except ValueError:
        return None


def resolve_day_code(d: date) -> DayCode:
    # Saturday/Sunday fall back to Monday; use is_school_day() to tell them apart
    idx = d.weekday()
    if 0 <= idx <= 4:
        return SCHOOL_WEEK[idx]
    return DayCode.MONDAY


def is_school_day(d: date, school_days: Optional[Iterable[DayCode]] = None) -> bool:
    code = _WEEKDAY_CODES[d.weekday()]
    allowed = list(school_days) if school_days is not None else SCHOOL_WEEK
    return code in allowed


def parse_clock(text: Any) -> Optional[int]:
    """
    Minutes since midnight for "9:00 AM", "12:15pm", "09:00" or "09:00:00".
    Returns None for anything it can't read.
    """
    if not isinstance(text, str):
        return None
    m = _CLOCK.match(text)
    if not m:
        return None
    hh, mm = int(m.group(1)), int(m.group(2))
    meridian = (m.group(4) or "").upper()
    if mm > 59:
        return None
    if meridian:
        if not 1 <= hh <= 12:
            return None
        if meridian == "PM" and hh < 12:
            hh += 12
        if meridian == "AM" and hh == 12:
            hh = 0
    elif hh > 23:
        return None
    return hh * 60 + mm


def fmt_clock(text: Optional[str]) -> str:
    if not text:
        return "--:--"
    # Postgres time columns come back as '08:00:00'
    if re.match(r"^\d{2}:\d{2}:\d{2}$", text):
        return text[:5]
    return text.strip()


def day_name(code: Any) -> str:
    parsed = DayCode.parse(code)
    if parsed is None:
        return str(code)
    return DAY_NAMES[parsed]

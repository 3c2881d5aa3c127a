# planner/schedule.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from .models import DayCode, Period, Reminder, ScheduleEntry
from .time_utils import parse_clock

UNASSIGNED = "N/A"


@dataclass
class PeriodGroup:
    period: Period
    schedule: ScheduleEntry
    reminders: List[Reminder] = field(default_factory=list)


@dataclass
class ScheduleView:
    """Today's periods in start-time order, plus any data-quality notes."""
    day: DayCode
    groups: List[PeriodGroup] = field(default_factory=list)
    diagnostics: List[str] = field(default_factory=list)

    def __iter__(self) -> Iterator[PeriodGroup]:
        return iter(self.groups)

    def __len__(self) -> int:
        return len(self.groups)

    @property
    def periods(self) -> List[Period]:
        return [g.period for g in self.groups]


def find_period(periods: List[Period], period_id: Optional[str]) -> Optional[Period]:
    if not period_id:
        return None
    for p in periods:
        if p.id == period_id:
            return p
    return None


def period_label(periods: List[Period], period_id: Optional[str]) -> str:
    p = find_period(periods, period_id)
    return p.name if p else UNASSIGNED


def active_periods(periods: List[Period], day: DayCode) -> Tuple[List[Tuple[Period, ScheduleEntry]], List[str]]:
    """
    Periods meeting on `day`, each with its matching schedule entry, ordered by
    parsed start time. Entries whose start time can't be parsed go last, in
    their original order.
    """
    found: List[Tuple[Period, ScheduleEntry]] = []
    notes: List[str] = []
    for p in periods:
        entry = p.schedule_for(day)
        if entry is None:
            continue
        found.append((p, entry))
        if parse_clock(entry.start_time) is None:
            notes.append(
                f"period '{p.name or p.id}' has unreadable start time {entry.start_time!r} on {day.value}; listed last"
            )

    def _key(pair: Tuple[Period, ScheduleEntry]) -> Tuple[int, int]:
        minutes = parse_clock(pair[1].start_time)
        return (1, 0) if minutes is None else (0, minutes)

    # sorted() is stable, so malformed entries keep their relative order
    return sorted(found, key=_key), notes


def group_by_period(periods: List[Period], reminders: List[Reminder], day: DayCode) -> ScheduleView:
    ordered, notes = active_periods(periods, day)
    view = ScheduleView(day=day, diagnostics=notes)
    for period, entry in ordered:
        attached = [r for r in reminders if r.period_id == period.id and day in r.days]
        view.groups.append(PeriodGroup(period=period, schedule=entry, reminders=attached))
    return view


def orphaned_reminders(periods: List[Period], reminders: List[Reminder]) -> List[Reminder]:
    return [r for r in reminders if r.period_id and find_period(periods, r.period_id) is None]


def find_overlaps(periods: List[Period], day: DayCode) -> List[Tuple[str, str]]:
    """Pairs of period ids whose blocks on `day` overlap. Unreadable times are skipped."""
    spans: List[Tuple[str, int, int]] = []
    for p in periods:
        entry = p.schedule_for(day)
        if entry is None:
            continue
        start, end = parse_clock(entry.start_time), parse_clock(entry.end_time)
        if start is None or end is None:
            continue
        spans.append((p.id, start, end))

    out: List[Tuple[str, str]] = []
    for i, (a_id, a_start, a_end) in enumerate(spans):
        for b_id, b_start, b_end in spans[i + 1:]:
            # touching edges (10:00 end / 10:00 start) are not an overlap
            if a_start < b_end and b_start < a_end:
                out.append((a_id, b_id))
    return out

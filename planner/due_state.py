# planner/due_state.py
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Callable, Iterable, List, Optional, Union

from .models import DayCode, Period, RecurrencePattern, Reminder, SchoolSetup
from .schedule import active_periods, find_period
from .time_utils import is_school_day, resolve_day_code, to_local_date

Predicate = Callable[[Reminder], bool]

# Recurring patterns that mean "fires on the listed days"
_DAY_DRIVEN = {p.value.lower() for p in (
    RecurrencePattern.DAILY, RecurrencePattern.WEEKLY, RecurrencePattern.SPECIFIC_DAYS,
)}


@dataclass
class Classification:
    today: List[Reminder] = field(default_factory=list)
    past_due: List[Reminder] = field(default_factory=list)
    completed: List[Reminder] = field(default_factory=list)
    diagnostics: List[str] = field(default_factory=list)


@dataclass
class DashboardStats:
    day: DayCode
    school_day: bool
    total_today: int
    completed_today: int
    past_due: int
    periods_today: int

    @property
    def completion_percent(self) -> float:
        if self.total_today == 0:
            return 0.0
        return self.completed_today * 100.0 / self.total_today


def _as_date(now: Union[date, datetime]) -> date:
    if not isinstance(now, (date, datetime)):
        raise TypeError(f"now must be a date or datetime, got {type(now).__name__}")
    d = to_local_date(now)
    if d is None:
        raise ValueError(f"can't read a calendar date from {now!r}")
    return d


def _bound_today(r: Reminder, code: DayCode, periods: Optional[List[Period]]) -> bool:
    if code not in r.days:
        return False
    if periods is None or not r.period_id:
        return True
    p = find_period(periods, r.period_id)
    # a dangling period reference doesn't hide the reminder
    return p is None or p.schedule_for(code) is not None


def classify(
    reminders: Iterable[Reminder],
    now: Union[date, datetime],
    periods: Optional[List[Period]] = None,
) -> Classification:
    """
    Split reminders into today / past-due / completed as of `now`.

    Completed reminders only ever land in `completed`. One-off reminders are
    judged by due date (date only); without one they count for today when
    their days and period say so. Recurring reminders are judged by `days`
    alone, never by a stale due date.
    """
    today = _as_date(now)
    code = resolve_day_code(today)
    out = Classification()

    for r in reminders:
        if r.completed:
            out.completed.append(r)
            continue

        if r.is_recurring:
            pattern = (r.recurrence or "").strip().lower()
            if pattern not in _DAY_DRIVEN:
                out.diagnostics.append(
                    f"reminder {r.id}: recurrence {r.recurrence!r} has no date rule; using its days"
                )
            if _bound_today(r, code, periods):
                out.today.append(r)
            continue

        due = to_local_date(r.due_date)
        if r.due_date and due is None:
            out.diagnostics.append(f"reminder {r.id}: unreadable due date {r.due_date!r}")
        if due is not None:
            if due < today:
                out.past_due.append(r)
            elif due == today:
                out.today.append(r)
        elif _bound_today(r, code, periods):
            out.today.append(r)

    return out


def todays_reminders(reminders: Iterable[Reminder], setup: Optional[SchoolSetup], day: DayCode) -> List[Reminder]:
    """Reminders firing on `day`, limited to the setup's active term if it has one."""
    term_id = setup.term_id if setup else None
    return [r for r in reminders if day in r.days and (not term_id or r.term_id == term_id)]


def dashboard_stats(reminders: List[Reminder], setup: Optional[SchoolSetup], now: Union[date, datetime]) -> DashboardStats:
    today = _as_date(now)
    code = resolve_day_code(today)
    school_day = is_school_day(today, setup.days if setup else None)
    periods = setup.periods if setup else []
    todays = todays_reminders(reminders, setup, code) if school_day else []
    active, _ = active_periods(periods, code)
    return DashboardStats(
        day=code,
        school_day=school_day,
        total_today=len(todays),
        completed_today=sum(1 for r in todays if r.completed),
        past_due=len(classify(reminders, today, periods).past_due),
        periods_today=len(active) if school_day else 0,
    )


# ---------- Filters ----------

def by_category(category: str) -> Predicate:
    return lambda r: r.category == category


def by_priority(priority: str) -> Predicate:
    return lambda r: r.priority == priority


def by_type(kind: str) -> Predicate:
    return lambda r: r.type == kind


def by_completed(completed: bool) -> Predicate:
    return lambda r: r.completed == completed


def by_day(day: DayCode) -> Predicate:
    return lambda r: day in r.days


def by_period(period_id: str) -> Predicate:
    return lambda r: r.period_id == period_id


def by_term(term_id: str) -> Predicate:
    return lambda r: r.term_id == term_id


def apply_filters(reminders: Iterable[Reminder], predicates: Iterable[Predicate]) -> List[Reminder]:
    preds = list(predicates)
    return [r for r in reminders if all(p(r) for p in preds)]


def filtered_reminders(
    reminders: Iterable[Reminder],
    category: Optional[str] = None,
    priority: Optional[str] = None,
    type: Optional[str] = None,
    completed: Optional[bool] = None,
    day: Optional[DayCode] = None,
) -> List[Reminder]:
    preds: List[Predicate] = []
    if category:
        preds.append(by_category(category))
    if priority:
        preds.append(by_priority(priority))
    if type:
        preds.append(by_type(type))
    if completed is not None:
        preds.append(by_completed(completed))
    if day is not None:
        preds.append(by_day(day))
    return apply_filters(reminders, preds)

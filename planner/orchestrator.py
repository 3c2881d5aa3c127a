# planner/orchestrator.py
from __future__ import annotations

import os
from datetime import datetime
from typing import List, Optional
from zoneinfo import ZoneInfo

from . import db
from . import notifier as nt
from .db import BulkResult
from .due_state import Classification, classify, dashboard_stats
from .errors import ConfigError
from .models import Reminder, SchoolSetup
from .schedule import ScheduleView, group_by_period, period_label
from .time_utils import TZ, day_name, fmt_clock, is_school_day, resolve_day_code, to_local_date

# ------------------------ Context ------------------------

def _active_user(user_id: Optional[str] = None) -> str:
    uid = (user_id or os.getenv("ACTIVE_USER_ID", "")).strip()
    if not uid:
        raise ConfigError("No user given and ACTIVE_USER_ID is not set.")
    return uid


def _now(asof: Optional[datetime]) -> datetime:
    zone = ZoneInfo(TZ)
    if asof is None:
        return datetime.now(zone)
    if asof.tzinfo is None:
        return asof.replace(tzinfo=zone)
    return asof.astimezone(zone)

# ------------------------ Formatting ------------------------

def _reminder_line(r: Reminder) -> str:
    mark = "x" if r.completed else " "
    prio = f" ({r.priority})" if r.priority else ""
    return f"  [{mark}] {r.title}{prio}"


def format_schedule(view: ScheduleView, cls: Classification, setup: SchoolSetup) -> str:
    lines = [f"📅 {day_name(view.day)}"]
    if not view.groups:
        lines.append("No periods scheduled for today")
    for g in view:
        loc = f" · {g.period.location}" if g.period.location else ""
        lines.append(f"{fmt_clock(g.schedule.start_time)}–{fmt_clock(g.schedule.end_time)} — {g.period.name}{loc}")
        if g.reminders:
            lines.extend(_reminder_line(r) for r in g.reminders)
        else:
            lines.append("  No reminders for this period")

    # today's items that aren't tied to a period shown above
    shown = {r.id for g in view for r in g.reminders}
    extra = [r for r in cls.today if r.id not in shown]
    if extra:
        lines.append("Also today:")
        lines.extend(f"{_reminder_line(r)} · {period_label(setup.periods, r.period_id)}" for r in extra)
    if cls.past_due:
        lines.append(f"⚠️ {len(cls.past_due)} past due")
    return "\n".join(lines)


def format_past_due(reminders: List[Reminder], setup: Optional[SchoolSetup]) -> str:
    if not reminders:
        return "✅ No past-due reminders. All caught up!"
    periods = setup.periods if setup else []
    lines = [f"⚠️ Past Due Reminders ({len(reminders)})"]
    for r in reminders:
        due = to_local_date(r.due_date)
        due_s = due.strftime("%b %d, %Y") if due else "Not specified"
        lines.append(f"- {r.title} · {period_label(periods, r.period_id)} · Due: {due_s}")
    return "\n".join(lines)

# ------------------------ Jobs ------------------------

def today_digest(user_id: Optional[str] = None, force: bool = False, asof: Optional[datetime] = None) -> Optional[str]:
    """
    Post today's periods with their reminders.
    - force: bypass per-day dedupe
    - asof: pretend it's this local datetime
    """
    now = _now(asof)
    uid = _active_user(user_id)

    if not force and db.already_sent("today_digest", now.date(), user_id=uid):
        msg = f"TodayDigest skipped (already sent for {now.date()})"
        db.log_event("today_digest", "skipped", msg, user_id=uid)
        nt.log(f"🟨 {msg}")
        return None

    try:
        setup = db.get_school_setup(uid)
        reminders = db.get_reminders(uid, setup.term_id if setup else None) if setup else []
    except Exception as e:
        nt.log(f"⚠️ TodayDigest: fetch failed — {e}")
        db.log_event("today_digest", "fail", "fetch failed", user_id=uid, error=str(e))
        raise

    if setup is None:
        text = "👋 Finish setting up your school schedule to get a daily digest."
        nt.send(text)
        db.log_event("today_digest", "success", "no-setup", user_id=uid)
        return text

    if not is_school_day(now.date(), setup.days):
        text = "☀️ No school today 🎉"
        nt.send(text)
        db.log_event("today_digest", "success", "no-school", user_id=uid)
        return text

    code = resolve_day_code(now.date())
    view = group_by_period(setup.periods, reminders, code)
    cls = classify(reminders, now, setup.periods)
    for note in view.diagnostics + cls.diagnostics:
        print(f"[orchestrator] {note}")
    if view.diagnostics or cls.diagnostics:
        nt.log("🟧 data issues:\n" + "\n".join(view.diagnostics + cls.diagnostics))

    text = format_schedule(view, cls, setup)
    nt.send(text)
    stats = dashboard_stats(reminders, setup, now)
    db.log_event(
        "today_digest", "success", f"{len(view)} periods | user={uid}", user_id=uid,
        payload={
            "day": code.value,
            "total_today": stats.total_today,
            "completed_today": stats.completed_today,
            "past_due": stats.past_due,
        },
    )
    return text


def past_due_review(user_id: Optional[str] = None, complete: bool = False, asof: Optional[datetime] = None) -> BulkResult:
    """Post the past-due list; with complete=True mark them all done and report the outcome."""
    now = _now(asof)
    uid = _active_user(user_id)
    setup = db.get_school_setup(uid)
    reminders = db.get_reminders(uid, setup.term_id if setup else None)
    cls = classify(reminders, now, setup.periods if setup else None)

    nt.send(format_past_due(cls.past_due, setup))
    if not complete or not cls.past_due:
        db.log_event("past_due", "success", f"{len(cls.past_due)} past due", user_id=uid)
        return BulkResult()

    result = db.bulk_complete(uid, [r.id for r in cls.past_due])
    summary = f"Marked {len(result.succeeded)} reminder(s) completed"
    if result.failed:
        summary += f", {len(result.failed)} failed: " + ", ".join(sorted(result.failed))
    nt.send(("✅ " if result.ok else "⚠️ ") + summary)
    db.log_event(
        "past_due", "success" if result.ok else "partial", summary, user_id=uid,
        payload={"succeeded": result.succeeded, "failed": result.failed},
    )
    return result


def heartbeat() -> str:
    msg = (
        f"🫀 planner heartbeat @ {datetime.now(ZoneInfo('UTC')).isoformat()} "
        f"(DRY_RUN={nt.DRY_RUN}, TZ={TZ})\n"
        f"ACTIVE_USER_ID='{os.getenv('ACTIVE_USER_ID', '')}'"
    )
    nt.log(msg)
    db.log_event("heartbeat", "success", message=msg)
    return msg

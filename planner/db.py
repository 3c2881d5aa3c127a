# planner/db.py
from __future__ import annotations
import os
import uuid
from dataclasses import dataclass, field
from datetime import datetime, date, time, timedelta
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfo

from supabase import create_client, Client

from .errors import ConfigError, map_supabase_error
from .models import Reminder, SchoolSetup
from .time_utils import TZ

_SUPA_URL = os.getenv("SUPABASE_URL")
_SUPA_ANON = os.getenv("SUPABASE_ANON_KEY")
_SUPA_SERVICE = os.getenv("SUPABASE_SERVICE_KEY")


def _client(service: bool = False) -> Optional[Client]:
    if not _SUPA_URL:
        return None
    key = _SUPA_SERVICE if (service and _SUPA_SERVICE) else _SUPA_ANON
    if not key:
        return None
    return create_client(_SUPA_URL, key)


def _require(service: bool = True) -> Client:
    sb = _client(service=service)
    if sb is None:
        raise ConfigError("Supabase is not configured (set SUPABASE_URL and SUPABASE_SERVICE_KEY).")
    return sb


@dataclass
class BulkResult:
    succeeded: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


# -------------------- School setup --------------------
def get_school_setup(user_id: str) -> Optional[SchoolSetup]:
    """None means the user hasn't finished onboarding."""
    sb = _require()
    try:
        res = sb.table("school_setup").select("data").eq("user_id", user_id).limit(1).execute()
    except Exception as e:
        raise map_supabase_error(e) from e
    row = (res.data or [None])[0]
    if not row or not row.get("data"):
        return None
    return SchoolSetup.from_doc(row["data"], user_id=user_id)


def save_school_setup(user_id: str, setup: SchoolSetup) -> None:
    # whole document is replaced, there is no partial update
    sb = _require()
    doc = setup.to_doc()
    try:
        res = sb.table("school_setup").select("id").eq("user_id", user_id).limit(1).execute()
        existing = (res.data or [None])[0]
        if existing:
            sb.table("school_setup").update({"data": doc}).eq("id", existing["id"]).execute()
        else:
            sb.table("school_setup").insert({"id": str(uuid.uuid4()), "user_id": user_id, "data": doc}).execute()
    except Exception as e:
        raise map_supabase_error(e) from e


# -------------------- Reminders --------------------
def get_reminders(user_id: str, term_id: Optional[str] = None) -> List[Reminder]:
    sb = _require()
    try:
        q = sb.table("reminders").select("*").eq("user_id", user_id)
        if term_id:
            q = q.eq("term_id", term_id)
        res = q.order("created_at", desc=True).execute()
    except Exception as e:
        raise map_supabase_error(e) from e
    return [Reminder.from_row(r) for r in (res.data or [])]


def get_reminders_by_period(user_id: str, period_id: str) -> List[Reminder]:
    sb = _require()
    try:
        res = sb.table("reminders").select("*").eq("user_id", user_id).eq("period_id", period_id).execute()
    except Exception as e:
        raise map_supabase_error(e) from e
    return [Reminder.from_row(r) for r in (res.data or [])]


def save_reminder(user_id: str, reminder: Reminder) -> Reminder:
    """Updates a saved reminder, inserts a new or `local-` one. Returns the stored row."""
    sb = _require()
    payload = reminder.to_row(user_id)
    try:
        if reminder.is_saved:
            res = sb.table("reminders").update(payload).eq("id", reminder.id).eq("user_id", user_id).execute()
        else:
            res = sb.table("reminders").insert(payload).execute()
    except Exception as e:
        raise map_supabase_error(e) from e
    row = (res.data or [None])[0]
    return Reminder.from_row(row) if row else reminder


def delete_reminder(user_id: str, reminder_id: str) -> None:
    sb = _require()
    try:
        sb.table("reminders").delete().eq("id", reminder_id).eq("user_id", user_id).execute()
    except Exception as e:
        raise map_supabase_error(e) from e


def _set_completed(sb: Client, user_id: str, reminder_id: str, completed: bool) -> bool:
    """False when no row of this user has that id."""
    try:
        res = sb.table("reminders").update({"completed": completed}).eq("id", reminder_id).eq("user_id", user_id).execute()
    except Exception as e:
        raise map_supabase_error(e) from e
    return bool(res.data)


def set_completed(user_id: str, reminder_id: str, completed: bool = True) -> bool:
    return _set_completed(_require(), user_id, reminder_id, completed)


def bulk_complete(user_id: str, ids: List[str]) -> BulkResult:
    """Marks each id completed. Failures are collected per id, not raised."""
    result = BulkResult()
    if not ids:
        return result
    sb = _require()
    for rid in dict.fromkeys(ids):
        try:
            matched = _set_completed(sb, user_id, rid, True)
        except Exception as e:
            result.failed[rid] = str(e)
            continue
        if matched:
            result.succeeded.append(rid)
        else:
            result.failed[rid] = "not found"
    return result


# -------------------- Events Log --------------------
def log_event(task: str, status: str, message: str = "", user_id: Optional[str] = None,
              payload: Optional[Dict[str, Any]] = None, error: Optional[str] = None) -> None:
    sb = _client(service=True)
    if not sb:
        print(f"[LOG:{task}:{status}] {message} (no supabase client)")
        return
    try:
        sb.table("events_log").insert(
            {
                "task": task,
                "status": status,
                "message": message,
                "user_id": user_id,
                "payload": payload or {},
                "error": error or None,
            }
        ).execute()
    except Exception as e:
        print(f"[db] events_log insert failed: {e}")


def already_sent(task: str, on_day: date, user_id: Optional[str] = None) -> bool:
    sb = _client(service=True)
    if not sb:
        return False
    # local day; created_at is timestamptz so the offset matters
    start = datetime.combine(on_day, time(0, 0), tzinfo=ZoneInfo(TZ))
    end = start + timedelta(days=1)
    q = (
        sb.table("events_log")
        .select("id")
        .eq("task", task)
        .gte("created_at", start.isoformat())
        .lt("created_at", end.isoformat())
        .eq("status", "success")
    )
    if user_id:
        q = q.eq("user_id", user_id)
    try:
        res = q.limit(1).execute()
    except Exception as e:
        raise map_supabase_error(e) from e
    return bool(res.data)

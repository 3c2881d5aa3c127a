# planner/models.py
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class DayCode(str, Enum):
    MONDAY = "M"
    TUESDAY = "T"
    WEDNESDAY = "W"
    THURSDAY = "Th"
    FRIDAY = "F"
    SATURDAY = "Sa"
    SUNDAY = "Su"

    @classmethod
    def parse(cls, value: Any) -> Optional["DayCode"]:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip())
        except ValueError:
            return None


# Only the first five ever come out of the day resolver
SCHOOL_WEEK: List[DayCode] = [
    DayCode.MONDAY, DayCode.TUESDAY, DayCode.WEDNESDAY, DayCode.THURSDAY, DayCode.FRIDAY,
]


class RecurrencePattern(str, Enum):
    NONE = "none"
    DAILY = "Daily"
    WEEKLY = "Weekly"
    BI_WEEKLY = "bi-weekly"
    MONTHLY = "monthly"
    ONCE = "Once"
    SPECIFIC_DAYS = "Specific Days"


class ReminderPriority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


LOCAL_ID_PREFIX = "local-"


def _days(value: Any) -> List[DayCode]:
    """Accepts a list of codes or a Postgres array literal like "{M,W}"."""
    if isinstance(value, str):
        value = [t for t in value.strip().strip("{}").split(",") if t.strip()]
    out: List[DayCode] = []
    for v in value or []:
        code = DayCode.parse(v)
        if code and code not in out:
            out.append(code)
    return out


@dataclass
class Term:
    id: str
    name: str
    start_date: str = ""
    end_date: str = ""
    school_year: Optional[str] = None

    @classmethod
    def from_doc(cls, d: Dict[str, Any]) -> "Term":
        return cls(
            id=str(d.get("id") or ""),
            name=d.get("name") or "",
            start_date=d.get("startDate") or "",
            end_date=d.get("endDate") or "",
            school_year=d.get("schoolYear"),
        )

    def to_doc(self) -> Dict[str, Any]:
        doc = {"id": self.id, "name": self.name, "startDate": self.start_date, "endDate": self.end_date}
        if self.school_year:
            doc["schoolYear"] = self.school_year
        return doc


@dataclass
class ScheduleEntry:
    day_of_week: DayCode
    start_time: str
    end_time: str

    @classmethod
    def from_doc(cls, d: Dict[str, Any]) -> Optional["ScheduleEntry"]:
        # older documents used `dayCode`
        code = DayCode.parse(d.get("dayOfWeek") or d.get("dayCode"))
        if code is None:
            return None
        return cls(day_of_week=code, start_time=d.get("startTime") or "", end_time=d.get("endTime") or "")

    def to_doc(self) -> Dict[str, Any]:
        return {"dayOfWeek": self.day_of_week.value, "startTime": self.start_time, "endTime": self.end_time}


@dataclass
class Period:
    id: str
    name: str
    start_time: str = ""
    end_time: str = ""
    subject: Optional[str] = None
    location: Optional[str] = None
    schedules: List[ScheduleEntry] = field(default_factory=list)
    is_prep_period: bool = False

    def schedule_for(self, day: DayCode) -> Optional[ScheduleEntry]:
        """First matching entry; a second entry for the same day is ignored."""
        for s in self.schedules:
            if s.day_of_week == day:
                return s
        return None

    @classmethod
    def from_doc(cls, d: Dict[str, Any]) -> "Period":
        raw = d.get("schedules")
        if raw is None:
            raw = d.get("schedule") or []
        entries = [ScheduleEntry.from_doc(s) for s in raw if isinstance(s, dict)]
        return cls(
            id=str(d.get("id") or ""),
            name=d.get("name") or "",
            start_time=d.get("startTime") or "",
            end_time=d.get("endTime") or "",
            subject=d.get("subject"),
            location=d.get("location"),
            schedules=[e for e in entries if e is not None],
            is_prep_period=bool(d.get("isPrepPeriod", False)),
        )

    def to_doc(self) -> Dict[str, Any]:
        doc: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "schedules": [s.to_doc() for s in self.schedules],
        }
        if self.subject is not None:
            doc["subject"] = self.subject
        if self.location is not None:
            doc["location"] = self.location
        if self.is_prep_period:
            doc["isPrepPeriod"] = True
        return doc


@dataclass
class SchoolSetup:
    """One user's terms, periods and categories, stored as a single jsonb document."""
    user_id: str
    school_name: str = ""
    school_year: str = ""
    terms: List[Term] = field(default_factory=list)
    periods: List[Period] = field(default_factory=list)
    days: List[DayCode] = field(default_factory=lambda: list(SCHOOL_WEEK))
    categories: List[str] = field(default_factory=list)
    term_id: Optional[str] = None
    id: Optional[str] = None

    @classmethod
    def from_doc(cls, d: Dict[str, Any], user_id: Optional[str] = None) -> "SchoolSetup":
        days = d.get("days")
        if days is None:
            days = d.get("schoolDays")
        return cls(
            id=d.get("id"),
            user_id=user_id or d.get("userId") or "",
            school_name=d.get("schoolName") or "",
            school_year=d.get("schoolYear") or "",
            terms=[Term.from_doc(t) for t in d.get("terms") or []],
            periods=[Period.from_doc(p) for p in d.get("periods") or []],
            days=_days(days) if days is not None else list(SCHOOL_WEEK),
            categories=list(d.get("categories") or []),
            term_id=d.get("termId"),
        )

    def to_doc(self) -> Dict[str, Any]:
        doc: Dict[str, Any] = {
            "userId": self.user_id,
            "schoolName": self.school_name,
            "schoolYear": self.school_year,
            "terms": [t.to_doc() for t in self.terms],
            "periods": [p.to_doc() for p in self.periods],
            "days": [d.value for d in self.days],
            "categories": list(self.categories),
        }
        if self.term_id:
            doc["termId"] = self.term_id
        if self.id:
            doc["id"] = self.id
        return doc


@dataclass
class Reminder:
    id: str
    title: str
    period_id: Optional[str] = None
    days: List[DayCode] = field(default_factory=list)
    timing: str = ""
    type: str = ""
    priority: str = ReminderPriority.MEDIUM.value
    category: Optional[str] = None
    recurrence: Optional[str] = None
    due_date: Optional[str] = None
    completed: bool = False
    term_id: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[str] = None

    @property
    def is_recurring(self) -> bool:
        r = (self.recurrence or "").strip().lower()
        return r not in ("", RecurrencePattern.NONE.value.lower(), RecurrencePattern.ONCE.value.lower())

    @property
    def is_saved(self) -> bool:
        return bool(self.id) and not self.id.startswith(LOCAL_ID_PREFIX)

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Reminder":
        return cls(
            id=str(row.get("id") or ""),
            title=row.get("title") or "",
            period_id=row.get("period_id") or None,
            days=_days(row.get("days")),
            timing=row.get("timing") or "",
            type=row.get("type") or "",
            priority=row.get("priority") or ReminderPriority.MEDIUM.value,
            category=row.get("category"),
            recurrence=row.get("recurrence"),
            due_date=row.get("due_date"),
            completed=bool(row.get("completed")),
            term_id=row.get("term_id"),
            notes=row.get("notes"),
            created_at=row.get("created_at"),
        )

    def to_row(self, user_id: str) -> Dict[str, Any]:
        # `id` is left out: Supabase generates it on insert
        return {
            "title": self.title,
            "notes": self.notes,
            "category": self.category,
            "priority": self.priority,
            "completed": self.completed,
            "period_id": self.period_id,
            "type": self.type,
            "timing": self.timing,
            "days": [d.value for d in self.days],
            "recurrence": self.recurrence,
            "term_id": self.term_id,
            "due_date": self.due_date,
            "user_id": user_id,
        }

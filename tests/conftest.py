from __future__ import annotations

import itertools
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest

from planner import db
from planner.models import DayCode, Period, Reminder, ScheduleEntry


class FakeAPIError(Exception):
    """Looks like postgrest.APIError as far as the error mapper cares."""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code


class FakeQuery:
    def __init__(self, client: "FakeSupabase", table: str):
        self.client = client
        self.table = table
        self.op = "select"
        self.payload: Any = None
        self.filters: List[tuple] = []
        self.order_by: Optional[tuple] = None
        self.max_rows: Optional[int] = None

    # builder methods
    def select(self, *_cols: str) -> "FakeQuery":
        self.op = "select"
        return self

    def insert(self, payload: Dict[str, Any]) -> "FakeQuery":
        self.op, self.payload = "insert", payload
        return self

    def update(self, payload: Dict[str, Any]) -> "FakeQuery":
        self.op, self.payload = "update", payload
        return self

    def delete(self) -> "FakeQuery":
        self.op = "delete"
        return self

    def eq(self, col: str, val: Any) -> "FakeQuery":
        self.filters.append(("eq", col, val))
        return self

    def gte(self, col: str, val: Any) -> "FakeQuery":
        self.filters.append(("gte", col, val))
        return self

    def lt(self, col: str, val: Any) -> "FakeQuery":
        self.filters.append(("lt", col, val))
        return self

    def order(self, col: str, desc: bool = False) -> "FakeQuery":
        self.order_by = (col, desc)
        return self

    def limit(self, n: int) -> "FakeQuery":
        self.max_rows = n
        return self

    def _match(self, row: Dict[str, Any]) -> bool:
        for kind, col, val in self.filters:
            have = row.get(col)
            if kind == "eq" and have != val:
                return False
            if kind == "gte" and not (have is not None and have >= val):
                return False
            if kind == "lt" and not (have is not None and have < val):
                return False
        return True

    def execute(self) -> SimpleNamespace:
        self.client.calls.append((self.table, self.op, self.payload, list(self.filters)))
        if self.client.error is not None:
            raise self.client.error
        rows = self.client.tables.setdefault(self.table, [])
        if self.op == "insert":
            row = dict(self.payload)
            row.setdefault("id", f"gen-{next(self.client.ids)}")
            rows.append(row)
            return SimpleNamespace(data=[row])
        hits = [r for r in rows if self._match(r)]
        if self.op == "update":
            for kind, col, val in self.filters:
                if col == "id" and val in self.client.fail_ids:
                    raise FakeAPIError(f"update failed for {val}", code="PGRST301")
            for r in hits:
                r.update(self.payload)
            return SimpleNamespace(data=hits)
        if self.op == "delete":
            self.client.tables[self.table] = [r for r in rows if r not in hits]
            return SimpleNamespace(data=hits)
        if self.order_by:
            col, desc = self.order_by
            hits = sorted(hits, key=lambda r: r.get(col) or "", reverse=desc)
        if self.max_rows is not None:
            hits = hits[: self.max_rows]
        return SimpleNamespace(data=hits)


class FakeSupabase:
    def __init__(self) -> None:
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.calls: List[tuple] = []
        self.fail_ids: set = set()
        self.error: Optional[Exception] = None
        self.ids = itertools.count(1)

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)


@pytest.fixture
def fake_sb(monkeypatch) -> FakeSupabase:
    sb = FakeSupabase()
    monkeypatch.setattr(db, "_client", lambda service=False: sb)
    return sb


@pytest.fixture
def no_sb(monkeypatch) -> None:
    monkeypatch.setattr(db, "_client", lambda service=False: None)


def make_period(pid: str, *slots: tuple, name: Optional[str] = None) -> Period:
    """slots are (day_code, start, end)."""
    return Period(
        id=pid,
        name=name or f"Period {pid}",
        schedules=[ScheduleEntry(day_of_week=DayCode(d), start_time=s, end_time=e) for d, s, e in slots],
    )


def make_reminder(rid: str, **kw: Any) -> Reminder:
    days = kw.pop("days", [])
    return Reminder(id=rid, title=kw.pop("title", f"Reminder {rid}"), days=[DayCode(d) for d in days], **kw)

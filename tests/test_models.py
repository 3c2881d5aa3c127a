from planner.models import DayCode, Period, Reminder, SchoolSetup


def test_reminder_from_database_row():
    row = {
        "id": "abc",
        "title": "Collect permission slips",
        "period_id": "p1",
        "days": ["M", "Th", "Xx", "M"],
        "timing": "Start of Period",
        "type": "Task",
        "priority": "High",
        "category": "Admin",
        "recurrence": "Weekly",
        "due_date": None,
        "completed": None,
        "term_id": "fall",
        "created_at": "2026-10-01T12:00:00Z",
    }
    r = Reminder.from_row(row)
    assert r.days == [DayCode.MONDAY, DayCode.THURSDAY]
    assert r.completed is False
    assert r.is_recurring
    assert r.is_saved

    out = r.to_row("user-1")
    assert "id" not in out
    assert out["period_id"] == "p1"
    assert out["days"] == ["M", "Th"]
    assert out["user_id"] == "user-1"


def test_days_accept_postgres_array_literal():
    assert Reminder.from_row({"id": "x", "days": "{M,W,F}"}).days == [DayCode.MONDAY, DayCode.WEDNESDAY, DayCode.FRIDAY]


def test_recurrence_flags():
    for value in (None, "", "none", "Once", "once"):
        assert not Reminder(id="r", title="t", recurrence=value).is_recurring
    for value in ("Daily", "Weekly", "monthly", "bi-weekly", "Specific Days"):
        assert Reminder(id="r", title="t", recurrence=value).is_recurring


def test_local_ids_are_unsaved():
    assert not Reminder(id="local-123", title="t").is_saved
    assert not Reminder(id="", title="t").is_saved


def test_period_reads_legacy_schedule_key():
    p = Period.from_doc({
        "id": "p1",
        "name": "Biology",
        "schedule": [{"dayCode": "W", "startTime": "9:00 AM", "endTime": "9:50 AM"}, {"dayCode": "??"}],
    })
    assert len(p.schedules) == 1
    assert p.schedule_for(DayCode.WEDNESDAY).end_time == "9:50 AM"
    assert p.schedule_for(DayCode.MONDAY) is None


def test_school_setup_document_round_trip():
    doc = {
        "schoolName": "Lincoln High",
        "schoolYear": "2026-2027",
        "terms": [{"id": "fall", "name": "Fall", "startDate": "2026-08-20", "endDate": "2026-12-18"}],
        "periods": [{
            "id": "p1", "name": "Period 1", "startTime": "8:00 AM", "endTime": "8:50 AM",
            "schedules": [{"dayOfWeek": "M", "startTime": "8:00 AM", "endTime": "8:50 AM"}],
        }],
        "days": ["M", "T", "W", "Th", "F"],
        "categories": ["Grading"],
        "termId": "fall",
    }
    setup = SchoolSetup.from_doc(doc, user_id="u1")
    assert setup.user_id == "u1"
    assert setup.terms[0].end_date == "2026-12-18"
    assert setup.periods[0].schedules[0].day_of_week is DayCode.MONDAY
    assert setup.term_id == "fall"

    again = SchoolSetup.from_doc(setup.to_doc())
    assert again == setup


def test_school_setup_defaults_to_the_school_week():
    setup = SchoolSetup.from_doc({}, user_id="u1")
    assert setup.days == [DayCode.MONDAY, DayCode.TUESDAY, DayCode.WEDNESDAY, DayCode.THURSDAY, DayCode.FRIDAY]
    assert setup.periods == []

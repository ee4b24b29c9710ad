import logging
from datetime import date, time

import pytest

from src.summit_attendance.summit_attendance.core.enums import SessionKey
from src.summit_attendance.summit_attendance.core.exceptions import ValidationError
from src.summit_attendance.summit_attendance.schedules.model import SessionWindow
from src.summit_attendance.summit_attendance.schedules.registry import DAY1_DATE, DAY2_DATE, ScheduleRegistry


def _w(day, key, start, end, on=DAY1_DATE, display="x"):
    return SessionWindow(day=day, key=key, start=start, end=end, date=on, buffer_minutes=15, display=display)


def test_default_registry_has_two_days_of_three_sessions():
    registry = ScheduleRegistry()

    assert registry.days() == [1, 2]
    assert [s.key for s in registry.sessions_for_day(1)] == [SessionKey.MORNING, SessionKey.AFTERNOON, SessionKey.EVENING]
    assert len(registry.all_sessions()) == 6
    assert registry.event_date(1) == DAY1_DATE
    assert registry.event_date(2) == DAY2_DATE


def test_get_accepts_strings_and_rejects_unknown_keys():
    registry = ScheduleRegistry()

    afternoon = registry.get(1, "afternoon")
    assert afternoon.start == time(14, 30)
    assert afternoon.end == time(15, 17)
    assert registry.get("2", SessionKey.EVENING).display == "Evening 7:00 PM"
    assert registry.get(1, "night") is None
    assert registry.get(3, "morning") is None


def test_display_falls_back_for_missing_session():
    registry = ScheduleRegistry()

    assert registry.display(1, "morning") == "Morning 10:00 AM"
    assert registry.display(1, "") == "Not Marked"
    assert registry.display(2, None) == "Not Marked"


def test_duplicate_session_is_rejected():
    windows = [
        _w(1, SessionKey.MORNING, time(9, 0), time(10, 0)),
        _w(1, SessionKey.MORNING, time(11, 0), time(12, 0)),
    ]
    with pytest.raises(ValidationError):
        ScheduleRegistry(windows)


def test_overlapping_sessions_on_a_day_are_rejected():
    windows = [
        _w(1, SessionKey.MORNING, time(9, 0), time(11, 0)),
        _w(1, SessionKey.AFTERNOON, time(10, 30), time(12, 0)),
    ]
    with pytest.raises(ValidationError, match="overlap"):
        ScheduleRegistry(windows)


def test_day_spanning_two_dates_is_rejected():
    windows = [
        _w(1, SessionKey.MORNING, time(9, 0), time(10, 0), on=date(2025, 10, 25)),
        _w(1, SessionKey.EVENING, time(18, 0), time(19, 0), on=date(2025, 10, 26)),
    ]
    with pytest.raises(ValidationError):
        ScheduleRegistry(windows)


def test_malformed_window_is_kept_and_logged(caplog):
    caplog.set_level(logging.WARNING)
    windows = [
        _w(1, SessionKey.MORNING, time(9, 0), time(10, 0)),
        # Ends before it starts; must not count as an overlap.
        _w(1, SessionKey.AFTERNOON, time(15, 0), time(9, 30)),
    ]

    registry = ScheduleRegistry(windows)

    assert registry.get(1, "afternoon").is_malformed
    assert "ends before it starts" in caplog.text

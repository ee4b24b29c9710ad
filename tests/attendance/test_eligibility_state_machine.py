from datetime import datetime

import pytest

from src.summit_attendance.summit_attendance.attendance.eligibility import EligibilityStateMachine
from src.summit_attendance.summit_attendance.attendees.model import Attendee, DayAttendance
from src.summit_attendance.summit_attendance.common.datetime_utils import IST, FixedClock
from src.summit_attendance.summit_attendance.core.enums import EligibilityState, SessionKey
from src.summit_attendance.summit_attendance.core.exceptions import ValidationError
from src.summit_attendance.summit_attendance.schedules.evaluator import TimeWindowEvaluator
from src.summit_attendance.summit_attendance.schedules.registry import ScheduleRegistry


def _machine(now: datetime) -> EligibilityStateMachine:
    return EligibilityStateMachine(ScheduleRegistry(), TimeWindowEvaluator(FixedClock(now)))


def _attendee(day1=None, day2=None) -> Attendee:
    return Attendee(
        attendee_id=1,
        name="A",
        mobile="9876543210",
        designation="Teacher",
        zone="Poonch",
        day1=day1 or DayAttendance(),
        day2=day2 or DayAttendance(),
    )


def _by_key(options):
    return {(o.day, o.session.key): o for o in options}


def test_fresh_attendee_during_day1_morning():
    machine = _machine(datetime(2025, 10, 25, 10, 30, tzinfo=IST))

    opts = _by_key(machine.options(_attendee()))

    assert opts[(1, SessionKey.MORNING)].state == EligibilityState.AVAILABLE
    afternoon = opts[(1, SessionKey.AFTERNOON)]
    assert afternoon.state == EligibilityState.UNAVAILABLE_TIME
    assert afternoon.reason == "Starts at 14:30"
    for key in SessionKey:
        day2 = opts[(2, key)]
        assert day2.state == EligibilityState.LOCKED_PREREQUISITE
        assert day2.reason == "Complete Day 1 attendance first"


def test_attended_day_locks_every_session_of_that_day():
    machine = _machine(datetime(2025, 10, 25, 14, 45, tzinfo=IST))
    attendee = _attendee(day1=DayAttendance(attended=True, session=SessionKey.MORNING))

    opts = _by_key(machine.options(attendee))

    morning = opts[(1, SessionKey.MORNING)]
    assert morning.state == EligibilityState.LOCKED_COMPLETE
    assert morning.recorded
    assert morning.reason == "Attendance already recorded"

    afternoon = opts[(1, SessionKey.AFTERNOON)]
    assert afternoon.state == EligibilityState.LOCKED_COMPLETE
    assert not afternoon.recorded
    assert afternoon.reason == "Day 1 attendance already complete"


def test_day2_stays_locked_until_its_date():
    machine = _machine(datetime(2025, 10, 25, 18, 30, tzinfo=IST))
    attendee = _attendee(day1=DayAttendance(attended=True, session=SessionKey.MORNING))

    e = machine.evaluate(attendee, 2, "evening")

    assert e.state == EligibilityState.LOCKED_PREREQUISITE
    assert e.reason == "Day 2 check-in opens on 2025-10-26"


def test_day2_opens_on_its_date_after_day1():
    machine = _machine(datetime(2025, 10, 26, 14, 30, tzinfo=IST))
    attendee = _attendee(day1=DayAttendance(attended=True, session=SessionKey.EVENING))

    available = machine.available(attendee)

    assert [(e.day, e.session.key) for e in available] == [(2, SessionKey.AFTERNOON)]


def test_day2_without_day1_is_locked_even_when_open():
    machine = _machine(datetime(2025, 10, 26, 14, 30, tzinfo=IST))

    e = machine.evaluate(_attendee(), 2, SessionKey.AFTERNOON)

    assert e.state == EligibilityState.LOCKED_PREREQUISITE
    assert e.reason == "Complete Day 1 attendance first"
    assert e.evaluation.is_active


def test_nothing_available_between_sessions():
    machine = _machine(datetime(2025, 10, 25, 12, 0, tzinfo=IST))

    assert machine.available(_attendee()) == []


def test_now_override_wins_over_clock():
    machine = _machine(datetime(2025, 10, 25, 12, 0, tzinfo=IST))

    e = machine.evaluate(_attendee(), 1, "morning", now=datetime(2025, 10, 25, 10, 0, tzinfo=IST))

    assert e.is_available


@pytest.mark.parametrize("day,key", [(1, "night"), (3, "morning"), ("x", "morning")])
def test_unknown_session_is_rejected(day, key):
    machine = _machine(datetime(2025, 10, 25, 10, 30, tzinfo=IST))

    with pytest.raises(ValidationError):
        machine.session(day, key)

import logging
from datetime import datetime

import pytest

from src.summit_attendance.summit_attendance.attendance.eligibility import EligibilityStateMachine
from src.summit_attendance.summit_attendance.attendance.service import AttendanceRecorder
from src.summit_attendance.summit_attendance.attendees.model import DayAttendance
from src.summit_attendance.summit_attendance.common.datetime_utils import IST
from src.summit_attendance.summit_attendance.core.enums import EligibilityState, RecordingMode, SessionKey
from src.summit_attendance.summit_attendance.core.exceptions import NotFoundError, PreconditionFailed, ValidationError
from src.summit_attendance.summit_attendance.schedules.evaluator import TimeWindowEvaluator
from src.summit_attendance.summit_attendance.schedules.registry import ScheduleRegistry


def _at(day, hour, minute):
    return datetime(2025, 10, 24 + day, hour, minute, tzinfo=IST)


class RecordingNotifier:
    def __init__(self, fail=False):
        self.calls = []
        self.fail = fail

    def celebrate(self, attendee):
        self.calls.append(attendee.attendee_id)
        if self.fail:
            raise RuntimeError("confetti jammed")


def _recorder(attendees_repo, clock, notifier=None):
    machine = EligibilityStateMachine(ScheduleRegistry(), TimeWindowEvaluator(clock))
    return AttendanceRecorder(attendees_repo, machine, notifier=notifier)


def test_self_service_checkin_during_open_window(container, make_attendee, attendees_repo, clock):
    a = make_attendee()

    result = container.recorder.record(a.attendee_id, 1, "morning", RecordingMode.SELF_SERVICE)

    assert result.late_minutes == 0
    assert result.message == "Welcome Aisha Khan! Your attendance has been marked successfully."
    stored = attendees_repo.get_by_id(a.attendee_id).day1
    assert stored.attended
    assert stored.session == SessionKey.MORNING
    assert not stored.manual_entry
    assert stored.checkin_timestamp == clock.now()


def test_manual_entry_after_session_end_records_lateness(container, make_attendee, attendees_repo, clock):
    clock.instant = _at(1, 15, 40)
    a = make_attendee()

    result = container.recorder.record(a.attendee_id, 1, "afternoon", "manual", remarks="  stuck at the gate ")

    assert result.late_minutes == 23
    assert result.message == "Attendance marked successfully for Aisha Khan in Afternoon 2:30 PM. Late by 23 minutes."
    stored = attendees_repo.get_by_id(a.attendee_id).day1
    assert stored.manual_entry
    assert stored.manual_entry_time == "15:40"
    assert stored.remarks == "stuck at the gate"
    assert stored.session == SessionKey.AFTERNOON


def test_manual_entry_before_session_end_is_rejected(container, make_attendee):
    a = make_attendee()

    with pytest.raises(PreconditionFailed, match="after 11:10"):
        container.recorder.record(a.attendee_id, 1, "morning", RecordingMode.MANUAL)


def test_day2_without_day1_is_locked_for_self_service(container, make_attendee, attendees_repo, clock):
    clock.instant = _at(2, 14, 30)
    a = make_attendee()

    _, options = container.recorder.options(a.attendee_id)
    afternoon = next(o for o in options if o.day == 2 and o.session.key == SessionKey.AFTERNOON)
    assert afternoon.state == EligibilityState.LOCKED_PREREQUISITE

    with pytest.raises(PreconditionFailed, match="Complete Day 1 attendance first"):
        container.recorder.record(a.attendee_id, 2, "afternoon", RecordingMode.SELF_SERVICE)
    assert not attendees_repo.get_by_id(a.attendee_id).day2.attended


def test_manual_entry_may_skip_day1(container, make_attendee, attendees_repo, clock):
    clock.instant = _at(2, 17, 0)
    a = make_attendee()

    result = container.recorder.record(a.attendee_id, 2, "afternoon", RecordingMode.MANUAL)

    assert result.late_minutes == 15
    assert attendees_repo.get_by_id(a.attendee_id).day2.attended
    assert not attendees_repo.get_by_id(a.attendee_id).day1.attended


def test_completed_day_rejects_another_session(container, make_attendee, clock):
    a = make_attendee(day1=DayAttendance(attended=True, session=SessionKey.MORNING))
    clock.instant = _at(1, 14, 45)

    with pytest.raises(PreconditionFailed, match="Day 1 attendance already complete"):
        container.recorder.record(a.attendee_id, 1, "afternoon", RecordingMode.SELF_SERVICE)

    clock.instant = _at(1, 16, 0)
    with pytest.raises(PreconditionFailed, match="Aisha Khan already has Day 1 attendance"):
        container.recorder.record(a.attendee_id, 1, "afternoon", RecordingMode.MANUAL)


def test_second_checkin_for_same_session_is_rejected(container, make_attendee, attendees_repo):
    a = make_attendee()
    container.recorder.record(a.attendee_id, 1, "morning", RecordingMode.SELF_SERVICE)
    first = attendees_repo.get_by_id(a.attendee_id).day1

    with pytest.raises(PreconditionFailed, match="Attendance already recorded"):
        container.recorder.record(a.attendee_id, 1, "morning", RecordingMode.SELF_SERVICE)

    assert attendees_repo.get_by_id(a.attendee_id).day1 == first


def test_lost_conditional_write_is_reported(container, make_attendee, attendees_repo, monkeypatch):
    a = make_attendee()
    # Another request recorded the day between our read and write.
    monkeypatch.setattr(attendees_repo, "record_attendance", lambda **kwargs: False)

    with pytest.raises(PreconditionFailed, match="Day 1 attendance was already recorded"):
        container.recorder.record(a.attendee_id, 1, "morning", RecordingMode.SELF_SERVICE)


def test_invalid_mobile_fails_before_any_lookup(container, attendees_repo):
    with pytest.raises(ValidationError, match="valid 10-digit mobile number"):
        container.attendee_service.find_by_mobile("12345")

    assert attendees_repo.queries == 0


def test_request_validation_order(container):
    with pytest.raises(ValidationError, match="Unknown recording mode"):
        container.recorder.record(999, 1, "night", "bulk")
    with pytest.raises(ValidationError, match="Unknown session"):
        container.recorder.record(999, 1, "night", RecordingMode.SELF_SERVICE)
    with pytest.raises(NotFoundError):
        container.recorder.record(999, 1, "morning", RecordingMode.SELF_SERVICE)


def test_listeners_run_after_successful_recording(container, make_attendee):
    a = make_attendee()
    seen = []
    container.recorder.add_listener(seen.append)

    container.recorder.record(a.attendee_id, 1, "morning", RecordingMode.SELF_SERVICE)

    assert seen == [a.attendee_id]


def test_manual_entry_is_tracked_while_in_flight(container, make_attendee, attendees_repo, clock, monkeypatch):
    clock.instant = _at(1, 12, 0)
    a = make_attendee()
    seen = []
    write = attendees_repo.record_attendance

    def spy(**kwargs):
        seen.append(container.recorder.is_manual_in_flight(kwargs["attendee_id"]))
        return write(**kwargs)

    monkeypatch.setattr(attendees_repo, "record_attendance", spy)

    container.recorder.record(a.attendee_id, 1, "morning", RecordingMode.MANUAL)

    assert seen == [True]
    assert not container.recorder.is_manual_in_flight(a.attendee_id)


def test_notifier_fires_on_day1_self_service_only(make_attendee, attendees_repo, clock):
    notifier = RecordingNotifier()
    recorder = _recorder(attendees_repo, clock, notifier)
    first = make_attendee()
    second = make_attendee(name="Ravi", mobile="9000000001")

    recorder.record(first.attendee_id, 1, "morning", RecordingMode.SELF_SERVICE)
    clock.instant = _at(1, 12, 0)
    recorder.record(second.attendee_id, 1, "morning", RecordingMode.MANUAL)

    assert notifier.calls == [first.attendee_id]


def test_notifier_failure_does_not_undo_checkin(make_attendee, attendees_repo, clock, caplog):
    caplog.set_level(logging.WARNING)
    recorder = _recorder(attendees_repo, clock, RecordingNotifier(fail=True))
    a = make_attendee()

    result = recorder.record(a.attendee_id, 1, "morning", RecordingMode.SELF_SERVICE)

    assert result.attendee.day1.attended
    assert "Celebration notifier failed" in caplog.text

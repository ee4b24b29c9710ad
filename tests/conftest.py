from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional, Sequence

import pytest
from werkzeug.security import generate_password_hash

from src.summit_attendance.summit_attendance.attendees.model import Attendee, DayAttendance
from src.summit_attendance.summit_attendance.common.datetime_utils import IST, FixedClock
from src.summit_attendance.summit_attendance.container import assemble_container
from src.summit_attendance.summit_attendance.core.constants import DEFAULT_ZONES
from src.summit_attendance.summit_attendance.core.enums import FeedbackStatus, Role
from src.summit_attendance.summit_attendance.feedback.model import Feedback, NewFeedback
from src.summit_attendance.summit_attendance.users.model import AdminUser
from src.summit_attendance.summit_attendance.zones.model import ZoneSet


def ist(*args) -> datetime:
    return datetime(*args, tzinfo=IST)


class InMemoryAttendees:
    def __init__(self):
        self._items: dict[int, Attendee] = {}
        self._id = 0
        self.queries = 0

    def add(self, **kwargs) -> Attendee:
        self._id += 1
        a = Attendee(attendee_id=self._id, **kwargs)
        self._items[a.attendee_id] = a
        return a

    def get_by_id(self, attendee_id: int) -> Optional[Attendee]:
        self.queries += 1
        return self._items.get(attendee_id)

    def find_by_mobile(self, mobile: str) -> Optional[Attendee]:
        self.queries += 1
        for a in sorted(self._items.values(), key=lambda x: x.attendee_id):
            if a.mobile == mobile:
                return a
        return None

    def list_all(self) -> Sequence[Attendee]:
        return sorted(self._items.values(), key=lambda a: a.attendee_id, reverse=True)

    def create(self, *, name: str, mobile: str, designation: str, zone: str, registered_at: datetime) -> int:
        return self.add(name=name, mobile=mobile, designation=designation, zone=zone, registered_at=registered_at).attendee_id

    def update_profile(self, *, attendee_id: int, name: str, mobile: str, designation: str, zone: str) -> bool:
        a = self._items.get(attendee_id)
        if not a:
            return False
        self._items[attendee_id] = replace(a, name=name, mobile=mobile, designation=designation, zone=zone)
        return True

    def _write(self, attendee_id: int, day: int, attendance: DayAttendance, updated_at: datetime) -> None:
        a = self._items[attendee_id]
        field = "day1" if day == 1 else "day2"
        self._items[attendee_id] = replace(a, **{field: attendance, "last_updated": updated_at})

    def record_attendance(self, *, attendee_id: int, day: int, attendance: DayAttendance, updated_at: datetime) -> bool:
        a = self._items.get(attendee_id)
        if not a or a.day(day).attended:
            return False
        self._write(attendee_id, day, attendance, updated_at)
        return True

    def overwrite_day(self, *, attendee_id: int, day: int, attendance: DayAttendance, updated_at: datetime) -> bool:
        if attendee_id not in self._items:
            return False
        self._write(attendee_id, day, attendance, updated_at)
        return True

    def delete_by_id(self, attendee_id: int) -> bool:
        return self._items.pop(attendee_id, None) is not None


class InMemoryFeedback:
    def __init__(self):
        self._items: dict[int, Feedback] = {}
        self._id = 0

    def create(self, feedback: NewFeedback, *, status: FeedbackStatus) -> int:
        self._id += 1
        self._items[self._id] = Feedback(
            feedback_id=self._id,
            flow=feedback.flow,
            category=feedback.category,
            message=feedback.message,
            rating=feedback.rating,
            status=status,
            created_at=feedback.created_at,
            name=feedback.name,
            email=feedback.email,
            sentiment=feedback.sentiment,
            attendee_id=feedback.attendee_id,
            mobile=feedback.mobile,
            designation=feedback.designation,
            zone=feedback.zone,
        )
        return self._id

    def get_by_id(self, feedback_id: int) -> Optional[Feedback]:
        return self._items.get(feedback_id)

    def list_all(self) -> Sequence[Feedback]:
        return sorted(self._items.values(), key=lambda f: f.feedback_id, reverse=True)

    def update_status(self, *, feedback_id, expected, status, admin_reply=None, replied_at=None) -> bool:
        f = self._items.get(feedback_id)
        if not f or f.status != expected:
            return False
        changes = {"status": status}
        if admin_reply is not None:
            changes.update(admin_reply=admin_reply, replied_at=replied_at)
        self._items[feedback_id] = replace(f, **changes)
        return True

    def delete_by_id(self, feedback_id: int) -> bool:
        return self._items.pop(feedback_id, None) is not None


class InMemoryZones:
    def __init__(self, labels=DEFAULT_ZONES):
        self._set = ZoneSet(version=1, labels=tuple(labels))

    def load(self) -> ZoneSet:
        return self._set

    def save(self, labels, *, expected_version: int) -> bool:
        if expected_version != self._set.version:
            return False
        self._set = ZoneSet(version=self._set.version + 1, labels=tuple(labels))
        return True


class InMemoryAdmins:
    def __init__(self, admins=()):
        self._by_id = {a.admin_id: a for a in admins}

    def get_by_id(self, admin_id: int) -> Optional[AdminUser]:
        return self._by_id.get(admin_id)

    def get_by_email(self, email: str) -> Optional[AdminUser]:
        for a in self._by_id.values():
            if a.email.lower() == email.lower():
                return a
        return None


class FakeTimer:
    def __init__(self, interval, function, args=()):
        self.interval = interval
        self.function = function
        self.args = args
        self.daemon = False
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if not self.cancelled:
            self.function(*self.args)


class FakeTimerFactory:
    def __init__(self):
        self.created: list[FakeTimer] = []

    def __call__(self, interval, function, args=()):
        t = FakeTimer(interval, function, args)
        self.created.append(t)
        return t

    @property
    def last(self) -> FakeTimer:
        return self.created[-1]


@pytest.fixture
def clock():
    # Day 1, inside the morning window (09:45-11:10).
    return FixedClock(ist(2025, 10, 25, 10, 30))


@pytest.fixture
def attendees_repo():
    return InMemoryAttendees()


@pytest.fixture
def feedback_repo():
    return InMemoryFeedback()


@pytest.fixture
def zones_repo():
    return InMemoryZones()


@pytest.fixture
def admins_repo():
    return InMemoryAdmins(
        [
            AdminUser(
                admin_id=1,
                email="admin@test.local",
                full_name="Test Admin",
                password_hash=generate_password_hash("admin123"),
                role=Role.ADMIN,
            )
        ]
    )


@pytest.fixture
def timers():
    return FakeTimerFactory()


@pytest.fixture
def container(attendees_repo, feedback_repo, zones_repo, admins_repo, clock, timers):
    return assemble_container(
        attendees_repo=attendees_repo,
        feedback_repo=feedback_repo,
        zones_repo=zones_repo,
        admins_repo=admins_repo,
        clock=clock,
        timer_factory=timers,
    )


@pytest.fixture
def make_attendee(attendees_repo):
    def _make(name="Aisha Khan", mobile="9876543210", designation="Teacher", zone="Poonch", **kwargs) -> Attendee:
        kwargs.setdefault("registered_at", ist(2025, 10, 20, 9, 0))
        return attendees_repo.add(name=name, mobile=mobile, designation=designation, zone=zone, **kwargs)

    return _make

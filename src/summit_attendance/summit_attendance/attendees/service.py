from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, List, Optional

from ..common.datetime_utils import Clock, SystemClock
from ..common.validators import require_mobile, require_non_empty
from ..core.constants import DEFAULT_PAGE_SIZE, EVENT_DAYS
from ..core.enums import AttendanceFilter, SessionKey
from ..core.exceptions import NotFoundError, ValidationError
from ..zones.service import ZoneService
from .model import Attendee, AttendeeListFilter, DayAttendance
from .repository import AttendeeRepository

logger = logging.getLogger(__name__)

ChangeListener = Callable[[int], None]

_TRUE_WORDS = {"true", "1", "yes", "on"}
_FALSE_WORDS = {"false", "0", "no", "off", ""}


def _as_bool(value, field: str) -> bool:
    if value is None or isinstance(value, bool):
        return bool(value)
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    raise ValidationError(f"{field} must be true or false")


@dataclass(frozen=True)
class DayEdit:
    """Admin edit of one day's attendance fields."""

    attended: bool = False
    session: str = ""
    late_minutes: int = 0
    remarks: str = ""
    manual_entry: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "DayEdit":
        try:
            late = int(data.get("late_minutes") or 0)
        except (TypeError, ValueError):
            raise ValidationError("Late minutes must be a whole number")
        return cls(
            attended=_as_bool(data.get("attended"), "Attended"),
            session=str(data.get("session") or ""),
            late_minutes=late,
            remarks=str(data.get("remarks") or ""),
            manual_entry=_as_bool(data.get("manual_entry"), "Manual entry"),
        )


@dataclass(frozen=True)
class AttendeePage:
    items: List[Attendee]
    total: int
    page: int
    page_size: int

    @property
    def pages(self) -> int:
        return max(1, math.ceil(self.total / self.page_size))

    def to_dict(self) -> dict:
        return {
            "items": [a.to_dict() for a in self.items],
            "total": self.total,
            "page": self.page,
            "pages": self.pages,
            "page_size": self.page_size,
        }


def matches_attendance(a: Attendee, attendance: str) -> bool:
    try:
        f = AttendanceFilter(attendance or AttendanceFilter.ALL.value)
    except ValueError:
        raise ValidationError(f"Unknown attendance filter: {attendance}")

    if f == AttendanceFilter.DAY1:
        return a.day1.attended
    if f == AttendanceFilter.DAY2:
        return a.day2.attended
    if f == AttendanceFilter.BOTH:
        return a.day1.attended and a.day2.attended
    if f == AttendanceFilter.NONE:
        return not a.day1.attended and not a.day2.attended
    if f == AttendanceFilter.MANUAL:
        return a.day1.manual_entry or a.day2.manual_entry
    if f == AttendanceFilter.LATE:
        return a.day1.late_minutes > 0 or a.day2.late_minutes > 0
    return True


def _session_value(day: DayAttendance) -> str:
    return day.session.value if day.session else ""


def apply_filter(attendees: List[Attendee], f: AttendeeListFilter) -> List[Attendee]:
    out = list(attendees)

    search = (f.search or "").strip().lower()
    if search:
        out = [a for a in out if search in (a.name or "").lower() or search in (a.mobile or "")]

    if f.zone:
        out = [a for a in out if a.zone == f.zone]

    out = [a for a in out if matches_attendance(a, f.attendance)]

    if f.day1_session:
        out = [a for a in out if _session_value(a.day1) == f.day1_session]
    if f.day2_session:
        out = [a for a in out if _session_value(a.day2) == f.day2_session]

    return out


class AttendeeService:
    """Use case: registration, lookup and admin management of attendees."""

    def __init__(self, attendees: AttendeeRepository, zones: ZoneService, *, clock: Optional[Clock] = None):
        self._attendees = attendees
        self._zones = zones
        self._clock = clock or SystemClock()
        self._listeners: List[ChangeListener] = []

    def add_listener(self, listener: ChangeListener) -> None:
        """Called with the attendee id after an admin edit or delete."""
        self._listeners.append(listener)

    def _notify(self, attendee_id: int) -> None:
        for listener in list(self._listeners):
            listener(attendee_id)

    def register(self, *, name: str, mobile: str, designation: str, zone: str) -> Attendee:
        """Public registration: zone must be one of the managed zones."""

        name = require_non_empty(name, "Name")
        mobile = require_mobile(mobile)
        designation = require_non_empty(designation, "Designation")
        zone = self._zones.require_known(zone)
        return self._create(name=name, mobile=mobile, designation=designation, zone=zone)

    def create(self, *, name: str, mobile: str, designation: str, zone: str) -> Attendee:
        """Admin add: any non-empty zone label is accepted."""

        name = require_non_empty(name, "Name")
        mobile = require_mobile(mobile)
        designation = require_non_empty(designation, "Designation")
        zone = require_non_empty(zone, "Zone")
        return self._create(name=name, mobile=mobile, designation=designation, zone=zone)

    def _create(self, *, name: str, mobile: str, designation: str, zone: str) -> Attendee:
        attendee_id = self._attendees.create(
            name=name,
            mobile=mobile,
            designation=designation,
            zone=zone,
            registered_at=self._clock.now(),
        )
        logger.info("Registered attendee %s (%s)", attendee_id, zone)
        return self.get(attendee_id)

    def get(self, attendee_id: int) -> Attendee:
        attendee = self._attendees.get_by_id(int(attendee_id))
        if not attendee:
            raise NotFoundError("Attendee not found")
        return attendee

    def find_by_mobile(self, mobile: str) -> Attendee:
        mobile = require_mobile(mobile)
        attendee = self._attendees.find_by_mobile(mobile)
        if not attendee:
            raise NotFoundError("No registration found for this mobile number")
        return attendee

    def list_all(self) -> List[Attendee]:
        return list(self._attendees.list_all())

    def list_attendees(
        self,
        filters: Optional[AttendeeListFilter] = None,
        *,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> AttendeePage:
        rows = apply_filter(self.list_all(), filters or AttendeeListFilter())

        page_size = max(1, int(page_size))
        pages = max(1, math.ceil(len(rows) / page_size))
        page = min(max(1, int(page)), pages)
        start = (page - 1) * page_size
        return AttendeePage(items=rows[start:start + page_size], total=len(rows), page=page, page_size=page_size)

    def update(
        self,
        attendee_id: int,
        *,
        name: str,
        mobile: str,
        designation: str,
        zone: str,
        day1: Optional[DayEdit] = None,
        day2: Optional[DayEdit] = None,
    ) -> Attendee:
        """Admin edit of profile fields and, optionally, per-day attendance."""

        current = self.get(attendee_id)

        name = require_non_empty(name, "Name")
        mobile = require_mobile(mobile)
        designation = require_non_empty(designation, "Designation")
        zone = require_non_empty(zone, "Zone")

        edits = {1: day1, 2: day2}
        resolved = {d: self._apply_day_edit(d, current.day(d), e) for d, e in edits.items() if e is not None}

        self._attendees.update_profile(
            attendee_id=current.attendee_id,
            name=name,
            mobile=mobile,
            designation=designation,
            zone=zone,
        )
        now = self._clock.now()
        for day, attendance in resolved.items():
            self._attendees.overwrite_day(
                attendee_id=current.attendee_id,
                day=day,
                attendance=attendance,
                updated_at=now,
            )

        logger.info("Attendee %s updated by admin", current.attendee_id)
        self._notify(current.attendee_id)
        return self.get(current.attendee_id)

    def _apply_day_edit(self, day: int, existing: DayAttendance, edit: DayEdit) -> DayAttendance:
        if day not in EVENT_DAYS:
            raise ValidationError(f"Unknown event day: {day}")
        if edit.late_minutes < 0:
            raise ValidationError("Late minutes cannot be negative")

        if not edit.attended:
            # Toggling attendance off clears the session.
            if edit.late_minutes > 0:
                raise ValidationError(f"Day {day}: late minutes require attendance")
            return DayAttendance(remarks=edit.remarks)

        try:
            session = SessionKey(edit.session)
        except ValueError:
            raise ValidationError(f"Day {day}: choose a session for an attended day")

        return DayAttendance(
            attended=True,
            session=session,
            late_minutes=edit.late_minutes,
            remarks=edit.remarks,
            manual_entry=edit.manual_entry,
            checkin_timestamp=existing.checkin_timestamp or self._clock.now(),
            manual_entry_time=existing.manual_entry_time if edit.manual_entry else None,
        )

    def delete(self, attendee_id: int) -> None:
        if not self._attendees.delete_by_id(int(attendee_id)):
            raise NotFoundError("Attendee not found")
        logger.info("Attendee %s deleted", attendee_id)
        self._notify(int(attendee_id))

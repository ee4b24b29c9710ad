from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.enums import SessionKey


@dataclass(frozen=True)
class DayAttendance:
    """Attendance fields for one event day of one attendee."""

    attended: bool = False
    session: Optional[SessionKey] = None
    late_minutes: int = 0
    remarks: str = ""
    manual_entry: bool = False
    checkin_timestamp: Optional[datetime] = None
    manual_entry_time: Optional[str] = None

    @property
    def is_late(self) -> bool:
        return self.late_minutes > 0

    def to_dict(self) -> dict:
        return {
            "attended": self.attended,
            "session": self.session.value if self.session else "",
            "late_minutes": self.late_minutes,
            "remarks": self.remarks,
            "manual_entry": self.manual_entry,
            "checkin_timestamp": self.checkin_timestamp.isoformat() if self.checkin_timestamp else None,
            "manual_entry_time": self.manual_entry_time,
        }


@dataclass(frozen=True)
class Attendee:
    """Domain entity: a registered participant, tracked by mobile number."""

    attendee_id: int
    name: str
    mobile: str
    designation: str
    zone: str
    day1: DayAttendance = field(default_factory=DayAttendance)
    day2: DayAttendance = field(default_factory=DayAttendance)
    registered_at: Optional[datetime] = None
    last_updated: Optional[datetime] = None

    def day(self, day: int) -> DayAttendance:
        if int(day) == 1:
            return self.day1
        if int(day) == 2:
            return self.day2
        raise ValueError(f"Unknown event day: {day!r}")

    def to_dict(self) -> dict:
        return {
            "id": self.attendee_id,
            "name": self.name,
            "mobile": self.mobile,
            "designation": self.designation,
            "zone": self.zone,
            "day1": self.day1.to_dict(),
            "day2": self.day2.to_dict(),
            "registered_at": self.registered_at.isoformat() if self.registered_at else None,
            "last_updated": self.last_updated.isoformat() if self.last_updated else None,
        }


@dataclass(frozen=True)
class AttendeeListFilter:
    search: str = ""
    zone: str = ""
    attendance: str = "all"
    day1_session: str = ""
    day2_session: str = ""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from ..attendees.model import Attendee
from ..attendees.service import AttendeeService
from ..schedules.registry import ScheduleRegistry


@dataclass(frozen=True)
class Certificate:
    attendee: Attendee
    attendance: List[str]
    eligible: bool = True

    @property
    def number(self) -> str:
        return f"SUMMIT-{self.attendee.attendee_id:06d}"

    def to_dict(self) -> dict:
        return {
            "certificate_no": self.number,
            "eligible": self.eligible,
            "name": self.attendee.name,
            "mobile": self.attendee.mobile,
            "designation": self.attendee.designation,
            "zone": self.attendee.zone,
            "attendance": list(self.attendance),
        }


class CertificateService:
    """Every registered attendee may download a certificate; attendance is informational."""

    def __init__(self, attendees: AttendeeService, registry: ScheduleRegistry):
        self._attendees = attendees
        self._registry = registry

    def lookup(self, mobile: str) -> Certificate:
        attendee = self._attendees.find_by_mobile(mobile)

        lines = []
        for day in self._registry.days():
            record = attendee.day(day)
            if record.attended and record.session:
                lines.append(f"Day {day}: {self._registry.display(day, record.session.value)}")
            elif record.attended:
                lines.append(f"Day {day}: Attendance marked but session incomplete")
            else:
                lines.append(f"Day {day}: Not attended")
        return Certificate(attendee=attendee, attendance=lines)

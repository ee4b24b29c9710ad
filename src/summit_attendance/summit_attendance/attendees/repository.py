from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Attendee, DayAttendance


class AttendeeRepository(Protocol):
    """Attendee collection of the document store.

    Note (DIP): services depend on this interface, never on a concrete store.
    """

    def get_by_id(self, attendee_id: int) -> Optional[Attendee]:
        raise NotImplementedError

    def find_by_mobile(self, mobile: str) -> Optional[Attendee]:
        """First attendee registered with this mobile number."""

        raise NotImplementedError

    def list_all(self) -> Sequence[Attendee]:
        """All attendees, newest registration first."""

        raise NotImplementedError

    def create(self, *, name: str, mobile: str, designation: str, zone: str, registered_at: datetime) -> int:
        raise NotImplementedError

    def update_profile(self, *, attendee_id: int, name: str, mobile: str, designation: str, zone: str) -> bool:
        raise NotImplementedError

    def record_attendance(self, *, attendee_id: int, day: int, attendance: DayAttendance, updated_at: datetime) -> bool:
        """Conditional write: applies only while the day is not yet attended.

        Returns False when nothing was written (already attended or unknown id).
        """

        raise NotImplementedError

    def overwrite_day(self, *, attendee_id: int, day: int, attendance: DayAttendance, updated_at: datetime) -> bool:
        """Admin-only unconditional override of a day's attendance fields."""

        raise NotImplementedError

    def delete_by_id(self, attendee_id: int) -> bool:
        raise NotImplementedError

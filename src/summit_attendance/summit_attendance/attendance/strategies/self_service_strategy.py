from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...attendees.model import Attendee, DayAttendance
from ...core.enums import RecordingMode
from ...core.exceptions import PreconditionFailed
from ..model import SessionEligibility
from .base import RecordingDecision, RecordingStrategy


class SelfServiceStrategy(RecordingStrategy):
    """Attendee checks in during an open window; never late."""

    mode = RecordingMode.SELF_SERVICE

    def decide(
        self,
        *,
        attendee: Attendee,
        eligibility: SessionEligibility,
        now: datetime,
        remarks: Optional[str] = None,
    ) -> RecordingDecision:
        if not eligibility.is_available:
            raise PreconditionFailed(eligibility.reason or "This session is not open for check-in")

        return RecordingDecision(
            attendance=DayAttendance(
                attended=True,
                session=eligibility.session.key,
                late_minutes=0,
                remarks="",
                manual_entry=False,
                checkin_timestamp=now,
            ),
            message=f"Welcome {attendee.name}! Your attendance has been marked successfully.",
        )

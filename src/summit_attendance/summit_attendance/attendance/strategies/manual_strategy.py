from __future__ import annotations

from datetime import datetime, time
from typing import Optional

from ...attendees.model import Attendee, DayAttendance
from ...common.datetime_utils import format_hhmm, to_event_time
from ...core.enums import RecordingMode
from ...core.exceptions import PreconditionFailed
from ...schedules.evaluator import late_minutes
from ..model import SessionEligibility
from .base import RecordingDecision, RecordingStrategy


class ManualStrategy(RecordingStrategy):
    """Admin marks attendance after a session has closed.

    Day prerequisites do not apply here; the admin may record Day 2 without Day 1.
    """

    mode = RecordingMode.MANUAL

    def decide(
        self,
        *,
        attendee: Attendee,
        eligibility: SessionEligibility,
        now: datetime,
        remarks: Optional[str] = None,
    ) -> RecordingDecision:
        session = eligibility.session

        if attendee.day(session.day).attended:
            raise PreconditionFailed(f"{attendee.name} already has Day {session.day} attendance")
        if session.is_malformed:
            raise PreconditionFailed(f"{session.display} has an invalid time window and cannot be marked")
        if not eligibility.evaluation.has_ended:
            raise PreconditionFailed(
                f"This session has not ended yet. You can only mark attendance after {format_hhmm(session.end)}."
            )

        local = to_event_time(now)
        entry = time(local.hour, local.minute)
        late = late_minutes(session, entry)

        return RecordingDecision(
            attendance=DayAttendance(
                attended=True,
                session=session.key,
                late_minutes=late,
                remarks=(remarks or "").strip(),
                manual_entry=True,
                checkin_timestamp=now,
                manual_entry_time=format_hhmm(entry),
            ),
            message=(
                f"Attendance marked successfully for {attendee.name} in {session.display}. "
                f"Late by {late} minutes."
            ),
        )

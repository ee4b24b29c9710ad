from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Optional

from ..common.datetime_utils import Clock, SystemClock, minutes_since_midnight, to_event_time
from .model import SessionWindow

STATUS_ACTIVE = "Active Now"
STATUS_STARTING_SOON = "Starting Soon"
STATUS_JUST_ENDED = "Just Ended"
STATUS_ENDED = "Ended"
STATUS_NOT_TODAY = "Not today"
STATUS_UNAVAILABLE = "Unavailable"


@dataclass(frozen=True)
class WindowEvaluation:
    session: SessionWindow
    is_today: bool
    is_active: bool
    is_in_buffer: bool
    has_ended: bool
    start: datetime
    end: datetime
    buffer_start: datetime
    buffer_end: datetime
    status: str

    def to_dict(self) -> dict:
        return {
            "is_today": self.is_today,
            "is_active": self.is_active,
            "is_in_buffer": self.is_in_buffer,
            "has_ended": self.has_ended,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "status": self.status,
        }


def late_minutes(session: SessionWindow, entry_time: time) -> int:
    """Minutes between the session END and a manual entry time, never negative.

    Both values are wall-clock times of day in event time.
    """
    return max(0, minutes_since_midnight(entry_time) - minutes_since_midnight(session.end))


class TimeWindowEvaluator:
    def __init__(self, clock: Optional[Clock] = None):
        self._clock = clock or SystemClock()

    @property
    def clock(self) -> Clock:
        return self._clock

    def now(self) -> datetime:
        return to_event_time(self._clock.now())

    def evaluate(self, session: SessionWindow, now: Optional[datetime] = None) -> WindowEvaluation:
        now = to_event_time(now) if now is not None else self.now()

        start = session.start_at
        end = session.end_at
        buffer = timedelta(minutes=session.buffer_minutes)
        buffer_start = start - buffer
        buffer_end = end + buffer

        if session.is_malformed:
            return WindowEvaluation(
                session=session,
                is_today=now.date() == session.date,
                is_active=False,
                is_in_buffer=False,
                has_ended=False,
                start=start,
                end=end,
                buffer_start=buffer_start,
                buffer_end=buffer_end,
                status=STATUS_UNAVAILABLE,
            )

        has_ended = now > end

        if now.date() != session.date:
            return WindowEvaluation(
                session=session,
                is_today=False,
                is_active=False,
                is_in_buffer=False,
                has_ended=has_ended,
                start=start,
                end=end,
                buffer_start=buffer_start,
                buffer_end=buffer_end,
                status=STATUS_NOT_TODAY,
            )

        is_active = start <= now <= end
        is_in_buffer = (buffer_start <= now < start) or (end < now <= buffer_end)

        if is_active:
            status = STATUS_ACTIVE
        elif is_in_buffer:
            status = STATUS_STARTING_SOON if now < start else STATUS_JUST_ENDED
        elif now < buffer_start:
            status = f"Starts at {session.start.strftime('%H:%M')}"
        else:
            status = STATUS_ENDED

        return WindowEvaluation(
            session=session,
            is_today=True,
            is_active=is_active,
            is_in_buffer=is_in_buffer,
            has_ended=has_ended,
            start=start,
            end=end,
            buffer_start=buffer_start,
            buffer_end=buffer_end,
            status=status,
        )

    def has_ended(self, session: SessionWindow, now: Optional[datetime] = None) -> bool:
        return self.evaluate(session, now).has_ended

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time

from ..common.datetime_utils import event_datetime
from ..core.enums import SessionKey


@dataclass(frozen=True)
class SessionWindow:
    """Static definition of one session of an event day."""

    day: int
    key: SessionKey
    start: time
    end: time
    date: date
    buffer_minutes: int
    display: str

    @property
    def is_malformed(self) -> bool:
        """True when the window ends before it starts (a data-entry error)."""
        return self.end < self.start

    @property
    def start_at(self) -> datetime:
        return event_datetime(self.date, self.start)

    @property
    def end_at(self) -> datetime:
        return event_datetime(self.date, self.end)

    def overlaps(self, other: "SessionWindow") -> bool:
        if self.date != other.date:
            return False
        return self.start < other.end and other.start < self.end

    def to_dict(self) -> dict:
        return {
            "day": self.day,
            "session": self.key.value,
            "start": self.start.strftime("%H:%M"),
            "end": self.end.strftime("%H:%M"),
            "date": self.date.strftime("%Y-%m-%d"),
            "buffer_minutes": self.buffer_minutes,
            "display": self.display,
        }

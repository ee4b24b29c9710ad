from __future__ import annotations

import logging
from datetime import date, time
from typing import Iterable, Optional, Sequence

from ..core.constants import DEFAULT_BUFFER_MINUTES
from ..core.enums import SessionKey
from ..core.exceptions import ValidationError
from .model import SessionWindow

logger = logging.getLogger(__name__)


def _window(day: int, key: SessionKey, start: str, end: str, on: date, display: str) -> SessionWindow:
    h1, m1 = (int(p) for p in start.split(":"))
    h2, m2 = (int(p) for p in end.split(":"))
    return SessionWindow(
        day=day,
        key=key,
        start=time(h1, m1),
        end=time(h2, m2),
        date=on,
        buffer_minutes=DEFAULT_BUFFER_MINUTES,
        display=display,
    )


DAY1_DATE = date(2025, 10, 25)
DAY2_DATE = date(2025, 10, 26)

DEFAULT_WINDOWS: tuple[SessionWindow, ...] = (
    _window(1, SessionKey.MORNING, "09:45", "11:10", DAY1_DATE, "Morning 10:00 AM"),
    _window(1, SessionKey.AFTERNOON, "14:30", "15:17", DAY1_DATE, "Afternoon 2:30 PM"),
    _window(1, SessionKey.EVENING, "18:15", "18:50", DAY1_DATE, "Evening 6:20 PM"),
    _window(2, SessionKey.MORNING, "08:15", "08:45", DAY2_DATE, "Morning 8:30 AM"),
    _window(2, SessionKey.AFTERNOON, "14:15", "16:45", DAY2_DATE, "Afternoon 2:30 PM"),
    _window(2, SessionKey.EVENING, "18:30", "21:00", DAY2_DATE, "Evening 7:00 PM"),
)


class ScheduleRegistry:
    """Static lookup of session windows keyed by (day, session key)."""

    def __init__(self, windows: Iterable[SessionWindow] = DEFAULT_WINDOWS):
        self._windows: dict[tuple[int, SessionKey], SessionWindow] = {}
        for w in windows:
            if (w.day, w.key) in self._windows:
                raise ValidationError(f"Duplicate session: day {w.day} {w.key.value}")
            self._windows[(w.day, w.key)] = w
        self._validate()

    def _validate(self) -> None:
        for day in self.days():
            sessions = self.sessions_for_day(day)
            dates = {s.date for s in sessions}
            if len(dates) > 1:
                raise ValidationError(f"Day {day} sessions span more than one calendar date")

            well_formed = []
            for s in sessions:
                if s.is_malformed:
                    # Kept but never opens; see TimeWindowEvaluator.
                    logger.warning(
                        "Session day %s %s ends before it starts (%s-%s); treating as always closed",
                        s.day, s.key.value, s.start.strftime("%H:%M"), s.end.strftime("%H:%M"),
                    )
                    continue
                well_formed.append(s)

            for i, a in enumerate(well_formed):
                for b in well_formed[i + 1:]:
                    if a.overlaps(b):
                        raise ValidationError(
                            f"Day {day} sessions overlap: {a.key.value} and {b.key.value}"
                        )

    def get(self, day: int, key: SessionKey | str) -> Optional[SessionWindow]:
        try:
            key = SessionKey(key)
        except ValueError:
            return None
        return self._windows.get((int(day), key))

    def days(self) -> list[int]:
        return sorted({d for d, _ in self._windows})

    def sessions_for_day(self, day: int) -> Sequence[SessionWindow]:
        order = list(SessionKey)
        items = [w for (d, _), w in self._windows.items() if d == int(day)]
        return sorted(items, key=lambda w: order.index(w.key))

    def all_sessions(self) -> list[SessionWindow]:
        out: list[SessionWindow] = []
        for day in self.days():
            out.extend(self.sessions_for_day(day))
        return out

    def event_date(self, day: int) -> Optional[date]:
        sessions = self.sessions_for_day(day)
        return sessions[0].date if sessions else None

    def display(self, day: int, key: Optional[str]) -> str:
        if not key:
            return "Not Marked"
        w = self.get(day, key)
        return w.display if w else key

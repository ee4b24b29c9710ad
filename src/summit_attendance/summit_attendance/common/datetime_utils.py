from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Protocol

# All session times are Indian Standard Time; never the host's local zone.
IST = timezone(timedelta(hours=5, minutes=30), name="IST")


class Clock(Protocol):
    def now(self) -> datetime:
        raise NotImplementedError


class SystemClock:
    """Wall clock, always timezone-aware."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


@dataclass
class FixedClock:
    """Clock pinned to an instant. Used by tests and scripts."""

    instant: datetime

    def now(self) -> datetime:
        return self.instant

    def advance(self, **kwargs) -> None:
        self.instant = self.instant + timedelta(**kwargs)


def to_event_time(value: datetime) -> datetime:
    """Convert an instant to IST. Naive values are taken to already be IST."""
    if value.tzinfo is None:
        return value.replace(tzinfo=IST)
    return value.astimezone(IST)


def event_datetime(day: date, at: time) -> datetime:
    return datetime.combine(day, at, tzinfo=IST)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_hhmm(value: str) -> time:
    return datetime.strptime(value.strip(), "%H:%M").time()


def format_hhmm(value: time | datetime) -> str:
    return value.strftime("%H:%M")


def minutes_since_midnight(value: time) -> int:
    return value.hour * 60 + value.minute

from __future__ import annotations

from dataclasses import dataclass

from ..attendees.model import Attendee
from ..core.enums import EligibilityState, RecordingMode
from ..schedules.evaluator import WindowEvaluation
from ..schedules.model import SessionWindow


@dataclass(frozen=True)
class SessionEligibility:
    """Derived selectability of one (day, session) for one attendee."""

    session: SessionWindow
    state: EligibilityState
    evaluation: WindowEvaluation
    reason: str = ""
    recorded: bool = False

    @property
    def day(self) -> int:
        return self.session.day

    @property
    def is_available(self) -> bool:
        return self.state == EligibilityState.AVAILABLE

    def to_dict(self) -> dict:
        data = self.session.to_dict()
        data.update(
            {
                "state": self.state.value,
                "recorded": self.recorded,
                "reason": self.reason,
                "window": self.evaluation.to_dict(),
            }
        )
        return data


@dataclass(frozen=True)
class CheckinResult:
    attendee: Attendee
    session: SessionWindow
    mode: RecordingMode
    late_minutes: int
    message: str

    def to_dict(self) -> dict:
        return {
            "attendee": self.attendee.to_dict(),
            "day": self.session.day,
            "session": self.session.key.value,
            "display": self.session.display,
            "mode": self.mode.value,
            "late_minutes": self.late_minutes,
            "message": self.message,
        }

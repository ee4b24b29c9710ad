from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...attendees.model import Attendee, DayAttendance
from ...core.enums import RecordingMode
from ..model import SessionEligibility


@dataclass(frozen=True)
class RecordingDecision:
    attendance: DayAttendance
    message: str


class RecordingStrategy(ABC):
    """Strategy Pattern: encapsulate how a check-in is validated and what it writes."""

    mode: RecordingMode

    @abstractmethod
    def decide(
        self,
        *,
        attendee: Attendee,
        eligibility: SessionEligibility,
        now: datetime,
        remarks: Optional[str] = None,
    ) -> RecordingDecision:
        """Raise PreconditionFailed when the recording is not allowed."""

        raise NotImplementedError

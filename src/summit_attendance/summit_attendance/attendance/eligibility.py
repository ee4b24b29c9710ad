from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from ..attendees.model import Attendee
from ..common.datetime_utils import to_event_time
from ..core.enums import EligibilityState, SessionKey
from ..core.exceptions import ValidationError
from ..schedules.evaluator import TimeWindowEvaluator
from ..schedules.model import SessionWindow
from ..schedules.registry import ScheduleRegistry
from .model import SessionEligibility


class EligibilityStateMachine:
    """Derives which sessions an attendee may check into right now.

    Stateless: every call recomputes from the attendee record and the clock.
    Order of checks:
    1. day already attended -> LOCKED_COMPLETE
    2. an earlier day missing, or not the day's calendar date -> LOCKED_PREREQUISITE
    3. window active -> AVAILABLE
    4. otherwise -> UNAVAILABLE_TIME
    """

    def __init__(self, registry: ScheduleRegistry, evaluator: TimeWindowEvaluator):
        self._registry = registry
        self._evaluator = evaluator

    @property
    def registry(self) -> ScheduleRegistry:
        return self._registry

    @property
    def evaluator(self) -> TimeWindowEvaluator:
        return self._evaluator

    def session(self, day: int, key: SessionKey | str) -> SessionWindow:
        try:
            day = int(day)
        except (TypeError, ValueError):
            raise ValidationError(f"Unknown event day: {day}")
        window = self._registry.get(day, key)
        if not window:
            raise ValidationError(f"Unknown session: day {day} {key}")
        return window

    def evaluate(self, attendee: Attendee, day: int, key: SessionKey | str, now: Optional[datetime] = None) -> SessionEligibility:
        return self._evaluate(attendee, self.session(day, key), self._now(now))

    def options(self, attendee: Attendee, now: Optional[datetime] = None) -> List[SessionEligibility]:
        now = self._now(now)
        return [self._evaluate(attendee, s, now) for s in self._registry.all_sessions()]

    def available(self, attendee: Attendee, now: Optional[datetime] = None) -> List[SessionEligibility]:
        return [e for e in self.options(attendee, now) if e.is_available]

    def _now(self, now: Optional[datetime]) -> datetime:
        return to_event_time(now) if now is not None else self._evaluator.now()

    def _evaluate(self, attendee: Attendee, session: SessionWindow, now: datetime) -> SessionEligibility:
        evaluation = self._evaluator.evaluate(session, now)
        record = attendee.day(session.day)

        if record.attended:
            recorded = record.session == session.key
            reason = "Attendance already recorded" if recorded else f"Day {session.day} attendance already complete"
            return SessionEligibility(
                session=session,
                state=EligibilityState.LOCKED_COMPLETE,
                evaluation=evaluation,
                reason=reason,
                recorded=recorded,
            )

        missing = [d for d in self._registry.days() if d < session.day and not attendee.day(d).attended]
        if missing:
            return SessionEligibility(
                session=session,
                state=EligibilityState.LOCKED_PREREQUISITE,
                evaluation=evaluation,
                reason=f"Complete Day {missing[0]} attendance first",
            )
        if session.day != self._registry.days()[0] and now.date() != session.date:
            return SessionEligibility(
                session=session,
                state=EligibilityState.LOCKED_PREREQUISITE,
                evaluation=evaluation,
                reason=f"Day {session.day} check-in opens on {session.date.strftime('%Y-%m-%d')}",
            )

        if evaluation.is_active:
            return SessionEligibility(session=session, state=EligibilityState.AVAILABLE, evaluation=evaluation)

        return SessionEligibility(
            session=session,
            state=EligibilityState.UNAVAILABLE_TIME,
            evaluation=evaluation,
            reason=evaluation.status,
        )

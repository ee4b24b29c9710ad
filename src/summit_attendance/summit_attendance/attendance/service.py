from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from ..attendees.model import Attendee
from ..attendees.repository import AttendeeRepository
from ..common.datetime_utils import to_event_time
from ..core.enums import RecordingMode, SessionKey
from ..core.exceptions import NotFoundError, PreconditionFailed
from .eligibility import EligibilityStateMachine
from .factory import RecordingStrategyFactory
from .model import CheckinResult, SessionEligibility
from .notifier import CelebrationNotifier

logger = logging.getLogger(__name__)

RecordListener = Callable[[int], None]


class AttendanceRecorder:
    """Use case: record self-service and manual check-ins.

    At most one recording per (attendee, day): the repository write is
    conditional on the day still being unattended, so concurrent attempts
    cannot both succeed.
    """

    def __init__(
        self,
        attendees: AttendeeRepository,
        eligibility: EligibilityStateMachine,
        *,
        strategy_factory: Optional[RecordingStrategyFactory] = None,
        notifier: Optional[CelebrationNotifier] = None,
    ):
        self._attendees = attendees
        self._eligibility = eligibility
        self._factory = strategy_factory or RecordingStrategyFactory()
        self._notifier = notifier
        self._listeners: List[RecordListener] = []
        self._lock = threading.Lock()
        self._manual_in_flight: set[int] = set()

    @property
    def eligibility(self) -> EligibilityStateMachine:
        return self._eligibility

    def add_listener(self, listener: RecordListener) -> None:
        """Called with the attendee id after every successful recording."""
        self._listeners.append(listener)

    def is_manual_in_flight(self, attendee_id: int) -> bool:
        with self._lock:
            return int(attendee_id) in self._manual_in_flight

    def now(self) -> datetime:
        return self._eligibility.evaluator.now()

    def _get_attendee(self, attendee_id: int) -> Attendee:
        attendee = self._attendees.get_by_id(int(attendee_id))
        if not attendee:
            raise NotFoundError("Attendee not found")
        return attendee

    def options(self, attendee_id: int, *, now: Optional[datetime] = None) -> Tuple[Attendee, List[SessionEligibility]]:
        attendee = self._get_attendee(attendee_id)
        return attendee, self._eligibility.options(attendee, now)

    def record(
        self,
        attendee_id: int,
        day: int,
        session: SessionKey | str,
        mode: RecordingMode | str,
        *,
        now: Optional[datetime] = None,
        remarks: Optional[str] = None,
    ) -> CheckinResult:
        strategy = self._factory.for_mode(mode)
        window = self._eligibility.session(day, session)
        now = to_event_time(now) if now is not None else self.now()

        manual = strategy.mode == RecordingMode.MANUAL
        if manual:
            with self._lock:
                self._manual_in_flight.add(int(attendee_id))
        try:
            attendee = self._get_attendee(attendee_id)
            eligibility = self._eligibility.evaluate(attendee, window.day, window.key, now)
            decision = strategy.decide(attendee=attendee, eligibility=eligibility, now=now, remarks=remarks)

            written = self._attendees.record_attendance(
                attendee_id=attendee.attendee_id,
                day=window.day,
                attendance=decision.attendance,
                updated_at=now,
            )
            if not written:
                raise PreconditionFailed(f"Day {window.day} attendance was already recorded")
        finally:
            if manual:
                with self._lock:
                    self._manual_in_flight.discard(int(attendee_id))

        logger.info(
            "Recorded day %s %s for attendee %s (%s, late %s min)",
            window.day, window.key.value, attendee.attendee_id, strategy.mode.value, decision.attendance.late_minutes,
        )

        for listener in list(self._listeners):
            listener(attendee.attendee_id)

        if not manual and window.day == self._eligibility.registry.days()[0]:
            self._celebrate(attendee)

        return CheckinResult(
            attendee=self._get_attendee(attendee.attendee_id),
            session=window,
            mode=strategy.mode,
            late_minutes=decision.attendance.late_minutes,
            message=decision.message,
        )

    def _celebrate(self, attendee: Attendee) -> None:
        if not self._notifier:
            return
        try:
            self._notifier.celebrate(attendee)
        except Exception:
            logger.warning("Celebration notifier failed for attendee %s", attendee.attendee_id, exc_info=True)

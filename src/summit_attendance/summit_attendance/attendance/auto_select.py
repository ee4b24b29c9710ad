from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..core.constants import DEFAULT_AUTO_CHECKIN_DELAY_SECONDS
from ..core.enums import RecordingMode, SessionKey
from ..core.exceptions import DomainError
from .model import SessionEligibility
from .service import AttendanceRecorder

logger = logging.getLogger(__name__)

NO_SESSIONS_MESSAGE = "No sessions currently available"

TimerFactory = Callable[..., Any]


@dataclass(frozen=True)
class AutoSelection:
    available: List[SessionEligibility] = field(default_factory=list)
    selected: Optional[SessionEligibility] = None
    message: str = ""

    @property
    def should_auto_checkin(self) -> bool:
        return self.selected is not None

    def to_dict(self) -> dict:
        return {
            "available": [e.to_dict() for e in self.available],
            "selected": self.selected.to_dict() if self.selected else None,
            "auto_checkin": self.should_auto_checkin,
            "message": self.message,
        }


def choose(options: List[SessionEligibility]) -> AutoSelection:
    """Select the only available session; never pick among several."""

    available = [o for o in options if o.is_available]
    if not available:
        return AutoSelection(available=[], message=NO_SESSIONS_MESSAGE)
    if len(available) == 1:
        only = available[0]
        return AutoSelection(available=available, selected=only, message=f"Auto-selected {only.session.display}")
    return AutoSelection(available=available, message="Please choose a session")


@dataclass
class _Pending:
    day: int
    key: SessionKey
    timer: Any


class AutoCheckinCoordinator:
    """Schedules a delayed self-service check-in when exactly one session is open.

    A pending check-in is cancelled when the attendee's record changes before
    it fires, and is re-checked against fresh data when it does fire.
    """

    def __init__(
        self,
        recorder: AttendanceRecorder,
        *,
        delay_seconds: float = DEFAULT_AUTO_CHECKIN_DELAY_SECONDS,
        timer_factory: TimerFactory = threading.Timer,
    ):
        self._recorder = recorder
        self._delay = float(delay_seconds)
        self._timer_factory = timer_factory
        self._lock = threading.RLock()
        self._pending: Dict[int, _Pending] = {}
        recorder.add_listener(self.cancel)

    def propose(self, attendee_id: int, *, now: Optional[datetime] = None) -> Tuple[List[SessionEligibility], AutoSelection]:
        _, options = self._recorder.options(attendee_id, now=now)
        selection = choose(options)

        if not selection.should_auto_checkin:
            self.cancel(attendee_id)
            return options, selection

        if self._recorder.is_manual_in_flight(attendee_id):
            logger.info("Auto check-in for attendee %s skipped: manual entry in progress", attendee_id)
            return options, selection

        self._schedule(int(attendee_id), selection.selected)
        return options, selection

    def pending(self, attendee_id: int) -> Optional[Tuple[int, SessionKey]]:
        with self._lock:
            p = self._pending.get(int(attendee_id))
            return (p.day, p.key) if p else None

    def cancel(self, attendee_id: int) -> bool:
        with self._lock:
            p = self._pending.pop(int(attendee_id), None)
        if not p:
            return False
        p.timer.cancel()
        return True

    def _schedule(self, attendee_id: int, selected: SessionEligibility) -> None:
        with self._lock:
            current = self._pending.get(attendee_id)
            if current and (current.day, current.key) == (selected.day, selected.session.key):
                return
            if current:
                current.timer.cancel()

            timer = self._timer_factory(self._delay, self._fire, args=(attendee_id, selected.day, selected.session.key))
            timer.daemon = True
            self._pending[attendee_id] = _Pending(day=selected.day, key=selected.session.key, timer=timer)
        timer.start()

    def _fire(self, attendee_id: int, day: int, key: SessionKey) -> None:
        with self._lock:
            p = self._pending.get(attendee_id)
            if not p or (p.day, p.key) != (day, key):
                return
            del self._pending[attendee_id]

        if self._recorder.is_manual_in_flight(attendee_id):
            logger.info("Auto check-in for attendee %s dropped: manual entry in progress", attendee_id)
            return

        try:
            _, options = self._recorder.options(attendee_id)
            selection = choose(options)
            if not selection.selected or (selection.selected.day, selection.selected.session.key) != (day, key):
                logger.info("Auto check-in for attendee %s dropped: selection changed", attendee_id)
                return
            self._recorder.record(attendee_id, day, key, RecordingMode.SELF_SERVICE)
        except DomainError as e:
            logger.info("Auto check-in for attendee %s not recorded: %s", attendee_id, e)
        except Exception:
            logger.exception("Auto check-in for attendee %s failed", attendee_id)

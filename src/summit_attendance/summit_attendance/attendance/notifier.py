from __future__ import annotations

import logging
from typing import Protocol

from ..attendees.model import Attendee

logger = logging.getLogger(__name__)


class CelebrationNotifier(Protocol):
    """Cosmetic side effect after a successful Day 1 self check-in."""

    def celebrate(self, attendee: Attendee) -> None:
        raise NotImplementedError


class LoggingCelebrationNotifier:
    def celebrate(self, attendee: Attendee) -> None:
        logger.info("Welcome %s! Day 1 attendance recorded.", attendee.name)

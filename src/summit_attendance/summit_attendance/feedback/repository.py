from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import FeedbackStatus
from .model import Feedback, NewFeedback


class FeedbackRepository(Protocol):
    def create(self, feedback: NewFeedback, *, status: FeedbackStatus) -> int:
        raise NotImplementedError

    def get_by_id(self, feedback_id: int) -> Optional[Feedback]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Feedback]:
        """Newest first."""

        raise NotImplementedError

    def update_status(
        self,
        *,
        feedback_id: int,
        expected: FeedbackStatus,
        status: FeedbackStatus,
        admin_reply: Optional[str] = None,
        replied_at: Optional[datetime] = None,
    ) -> bool:
        """Conditional on the stored status still being ``expected``."""

        raise NotImplementedError

    def delete_by_id(self, feedback_id: int) -> bool:
        raise NotImplementedError

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, FrozenSet, Optional

from ..core.enums import FeedbackFlow, FeedbackStatus, Sentiment

# Allowed status moves per flow. GENERAL is one-way; ATTENDEE toggles.
TRANSITIONS: Dict[FeedbackFlow, Dict[FeedbackStatus, FrozenSet[FeedbackStatus]]] = {
    FeedbackFlow.GENERAL: {
        FeedbackStatus.NEW: frozenset({FeedbackStatus.REPLIED, FeedbackStatus.ARCHIVED}),
        FeedbackStatus.REPLIED: frozenset({FeedbackStatus.ARCHIVED}),
        FeedbackStatus.ARCHIVED: frozenset(),
    },
    FeedbackFlow.ATTENDEE: {
        FeedbackStatus.PENDING: frozenset({FeedbackStatus.REVIEWED}),
        FeedbackStatus.REVIEWED: frozenset({FeedbackStatus.PENDING}),
    },
}

INITIAL_STATUS = {
    FeedbackFlow.GENERAL: FeedbackStatus.NEW,
    FeedbackFlow.ATTENDEE: FeedbackStatus.PENDING,
}


def can_transition(flow: FeedbackFlow, current: FeedbackStatus, target: FeedbackStatus) -> bool:
    return target in TRANSITIONS[flow].get(current, frozenset())


@dataclass(frozen=True)
class Feedback:
    """One feedback record; ``flow`` decides which status vocabulary applies."""

    feedback_id: int
    flow: FeedbackFlow
    category: str
    message: str
    rating: int
    status: FeedbackStatus
    created_at: Optional[datetime] = None
    name: str = ""
    email: str = ""
    sentiment: Optional[Sentiment] = None
    attendee_id: Optional[int] = None
    mobile: str = ""
    designation: str = ""
    zone: str = ""
    admin_reply: str = ""
    replied_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.feedback_id,
            "flow": self.flow.value,
            "category": self.category,
            "message": self.message,
            "rating": self.rating,
            "status": self.status.value,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "name": self.name,
            "email": self.email,
            "sentiment": self.sentiment.value if self.sentiment else None,
            "attendee_id": self.attendee_id,
            "mobile": self.mobile,
            "designation": self.designation,
            "zone": self.zone,
            "admin_reply": self.admin_reply,
            "replied_at": self.replied_at.isoformat() if self.replied_at else None,
        }


@dataclass(frozen=True)
class NewFeedback:
    flow: FeedbackFlow
    category: str
    message: str
    rating: int
    created_at: datetime
    name: str = ""
    email: str = ""
    sentiment: Optional[Sentiment] = None
    attendee_id: Optional[int] = None
    mobile: str = ""
    designation: str = ""
    zone: str = ""


@dataclass(frozen=True)
class FeedbackListFilter:
    search: str = ""
    flow: str = ""
    status: str = ""
    sentiment: str = ""
    category: str = ""
    rating: str = ""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..attendees.service import AttendeeService
from ..common.datetime_utils import Clock, SystemClock
from ..common.validators import require_min_length, require_non_empty, require_rating
from ..core.constants import FEEDBACK_MIN_LENGTH, HIGH_RATING_MIN, LOW_RATING_MAX
from ..core.enums import FeedbackCategory, FeedbackFlow, FeedbackStatus, FeedbackType, Sentiment
from ..core.exceptions import NotFoundError, PreconditionFailed, ValidationError
from .model import INITIAL_STATUS, Feedback, FeedbackListFilter, NewFeedback, can_transition
from .repository import FeedbackRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeedbackStats:
    total: int = 0
    by_status: Dict[str, int] = field(default_factory=dict)
    positive: int = 0
    negative: int = 0
    high_rating: int = 0
    low_rating: int = 0
    average_rating: float = 0.0
    distribution: Dict[int, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "by_status": dict(self.by_status),
            "positive": self.positive,
            "negative": self.negative,
            "high_rating": self.high_rating,
            "low_rating": self.low_rating,
            "average_rating": self.average_rating,
            "distribution": {str(k): v for k, v in self.distribution.items()},
        }


def _parse_enum(enum_cls, value, label: str):
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError(f"Unknown {label}: {value}")


def _matches(f: Feedback, flt: FeedbackListFilter) -> bool:
    search = (flt.search or "").strip().lower()
    if search:
        haystack = (f.name, f.email, f.message, f.category)
        if not any(search in (h or "").lower() for h in haystack):
            return False
    if flt.flow and f.flow.value != flt.flow:
        return False
    if flt.status and f.status.value != flt.status:
        return False
    if flt.sentiment and (f.sentiment.value if f.sentiment else "") != flt.sentiment:
        return False
    if flt.category and f.category != flt.category:
        return False
    if flt.rating == "high" and f.rating < HIGH_RATING_MIN:
        return False
    if flt.rating == "low" and not (0 < f.rating <= LOW_RATING_MAX):
        return False
    return True


class FeedbackService:
    """Use case: collect feedback (public) and manage it (admin)."""

    def __init__(self, feedback: FeedbackRepository, attendees: AttendeeService, *, clock: Optional[Clock] = None):
        self._feedback = feedback
        self._attendees = attendees
        self._clock = clock or SystemClock()

    def submit_general(
        self,
        *,
        message: str,
        name: str = "",
        email: str = "",
        category: str = FeedbackCategory.GENERAL.value,
        rating: int = 0,
        sentiment: str = Sentiment.POSITIVE.value,
    ) -> Feedback:
        if not message or not message.strip():
            raise ValidationError("Please enter your feedback message.")

        new = NewFeedback(
            flow=FeedbackFlow.GENERAL,
            category=_parse_enum(FeedbackCategory, category or FeedbackCategory.GENERAL.value, "category").value,
            message=message.strip(),
            rating=require_rating(rating, allow_unset=True),
            created_at=self._clock.now(),
            name=(name or "").strip(),
            email=(email or "").strip(),
            sentiment=_parse_enum(Sentiment, sentiment or Sentiment.POSITIVE.value, "sentiment"),
        )
        return self._create(new)

    def submit_for_attendee(
        self,
        *,
        mobile: str,
        message: str,
        feedback_type: str = FeedbackType.GENERAL.value,
        rating: int = 5,
    ) -> Feedback:
        message = (message or "").strip()
        feedback_type = _parse_enum(FeedbackType, feedback_type or FeedbackType.GENERAL.value, "feedback type")
        rating = require_rating(rating)
        require_min_length(message, "Feedback", FEEDBACK_MIN_LENGTH)

        attendee = self._attendees.find_by_mobile(mobile)
        new = NewFeedback(
            flow=FeedbackFlow.ATTENDEE,
            category=feedback_type.value,
            message=message,
            rating=rating,
            created_at=self._clock.now(),
            name=attendee.name,
            attendee_id=attendee.attendee_id,
            mobile=attendee.mobile,
            designation=attendee.designation,
            zone=attendee.zone,
        )
        return self._create(new)

    def _create(self, new: NewFeedback) -> Feedback:
        feedback_id = self._feedback.create(new, status=INITIAL_STATUS[new.flow])
        logger.info("Feedback %s received (%s)", feedback_id, new.flow.value)
        return self.get(feedback_id)

    def get(self, feedback_id: int) -> Feedback:
        f = self._feedback.get_by_id(int(feedback_id))
        if not f:
            raise NotFoundError("Feedback not found")
        return f

    def list_feedback(self, filters: Optional[FeedbackListFilter] = None) -> List[Feedback]:
        flt = filters or FeedbackListFilter()
        return [f for f in self._feedback.list_all() if _matches(f, flt)]

    def reply(self, feedback_id: int, reply: str) -> Feedback:
        reply = require_non_empty(reply, "Reply")
        current = self.get(feedback_id)
        self._require_transition(current, FeedbackStatus.REPLIED)

        ok = self._feedback.update_status(
            feedback_id=current.feedback_id,
            expected=current.status,
            status=FeedbackStatus.REPLIED,
            admin_reply=reply,
            replied_at=self._clock.now(),
        )
        if not ok:
            raise PreconditionFailed("Feedback was changed by someone else. Please reload.")
        return self.get(current.feedback_id)

    def archive(self, feedback_id: int) -> Feedback:
        return self.set_status(feedback_id, FeedbackStatus.ARCHIVED.value)

    def set_status(self, feedback_id: int, status: str) -> Feedback:
        target = _parse_enum(FeedbackStatus, status, "status")
        current = self.get(feedback_id)
        if target == FeedbackStatus.REPLIED:
            raise ValidationError("Use reply to mark feedback as replied")
        self._require_transition(current, target)

        if not self._feedback.update_status(feedback_id=current.feedback_id, expected=current.status, status=target):
            raise PreconditionFailed("Feedback was changed by someone else. Please reload.")
        return self.get(current.feedback_id)

    def _require_transition(self, current: Feedback, target: FeedbackStatus) -> None:
        if not can_transition(current.flow, current.status, target):
            raise PreconditionFailed(
                f"Cannot change {current.flow.value} feedback from {current.status.value} to {target.value}"
            )

    def delete(self, feedback_id: int) -> None:
        if not self._feedback.delete_by_id(int(feedback_id)):
            raise NotFoundError("Feedback not found")

    def stats(self) -> FeedbackStats:
        items = list(self._feedback.list_all())
        by_status: Dict[str, int] = {}
        for f in items:
            by_status[f.status.value] = by_status.get(f.status.value, 0) + 1

        rated = [f.rating for f in items if f.rating > 0]
        return FeedbackStats(
            total=len(items),
            by_status=by_status,
            positive=sum(1 for f in items if f.sentiment == Sentiment.POSITIVE),
            negative=sum(1 for f in items if f.sentiment == Sentiment.NEGATIVE),
            high_rating=sum(1 for r in rated if r >= HIGH_RATING_MIN),
            low_rating=sum(1 for r in rated if r <= LOW_RATING_MAX),
            average_rating=round(sum(rated) / len(rated), 1) if rated else 0.0,
            distribution={star: sum(1 for r in rated if r == star) for star in range(1, 6)},
        )

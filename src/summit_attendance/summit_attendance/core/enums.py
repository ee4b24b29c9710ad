from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles used for authorization."""

    ADMIN = "admin"


class SessionKey(str, Enum):
    """The three fixed session slots of an event day."""

    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"


class EligibilityState(str, Enum):
    """Derived per (attendee, day, session) state; never persisted."""

    LOCKED_COMPLETE = "locked-complete"
    LOCKED_PREREQUISITE = "locked-prerequisite"
    AVAILABLE = "available"
    UNAVAILABLE_TIME = "unavailable-time"


class RecordingMode(str, Enum):
    SELF_SERVICE = "self_service"
    MANUAL = "manual"


class FeedbackFlow(str, Enum):
    """Which feedback lifecycle a record belongs to."""

    GENERAL = "general"
    ATTENDEE = "attendee"


class FeedbackStatus(str, Enum):
    """Status vocabulary of both feedback flows.

    GENERAL flow: NEW -> REPLIED -> ARCHIVED.
    ATTENDEE flow: PENDING <-> REVIEWED.
    """

    NEW = "new"
    REPLIED = "replied"
    ARCHIVED = "archived"
    PENDING = "pending"
    REVIEWED = "reviewed"


class FeedbackCategory(str, Enum):
    GENERAL = "general"
    EVENT_QUALITY = "event_quality"
    SPEAKERS = "speakers"
    VENUE = "venue"
    FOOD = "food"
    ORGANIZATION = "organization"
    TECHNICAL = "technical"
    SUGGESTIONS = "suggestions"


class Sentiment(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"


class AttendanceFilter(str, Enum):
    """Admin list / report filters over attendance fields."""

    ALL = "all"
    DAY1 = "day1"
    DAY2 = "day2"
    BOTH = "both"
    NONE = "none"
    MANUAL = "manual"
    LATE = "late"


class FeedbackType(str, Enum):
    """Feedback kinds offered after an attendee mobile lookup."""

    GENERAL = "general"
    SUGGESTION = "suggestion"
    COMPLAINT = "complaint"
    APPRECIATION = "appreciation"

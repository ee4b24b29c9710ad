import pytest

from src.summit_attendance.summit_attendance.core.enums import FeedbackFlow, FeedbackStatus, Sentiment
from src.summit_attendance.summit_attendance.core.exceptions import NotFoundError, PreconditionFailed, ValidationError
from src.summit_attendance.summit_attendance.feedback.model import FeedbackListFilter


def _general(container, **kwargs):
    data = {"message": "Great sessions overall", "name": "Visitor", "email": "v@example.com"}
    data.update(kwargs)
    return container.feedback_service.submit_general(**data)


def test_general_feedback_starts_new(container, clock):
    f = _general(container, category="venue", rating=4, sentiment="negative")

    assert f.flow == FeedbackFlow.GENERAL
    assert f.status == FeedbackStatus.NEW
    assert f.category == "venue"
    assert f.sentiment == Sentiment.NEGATIVE
    assert f.created_at == clock.now()


def test_general_feedback_rating_is_optional(container):
    assert _general(container).rating == 0


@pytest.mark.parametrize(
    "kwargs,message",
    [
        ({"message": "   "}, "Please enter your feedback message."),
        ({"category": "parking"}, "Unknown category"),
        ({"sentiment": "meh"}, "Unknown sentiment"),
        ({"rating": 6}, "Rating must be between 0 and 5"),
    ],
)
def test_general_feedback_validation(container, kwargs, message):
    with pytest.raises(ValidationError, match=message):
        _general(container, **kwargs)


def test_reply_then_archive(container):
    f = _general(container)

    replied = container.feedback_service.reply(f.feedback_id, "Thanks for writing in")
    assert replied.status == FeedbackStatus.REPLIED
    assert replied.admin_reply == "Thanks for writing in"
    assert replied.replied_at is not None

    with pytest.raises(PreconditionFailed):
        container.feedback_service.reply(f.feedback_id, "Again")

    archived = container.feedback_service.archive(f.feedback_id)
    assert archived.status == FeedbackStatus.ARCHIVED

    with pytest.raises(PreconditionFailed):
        container.feedback_service.archive(f.feedback_id)


def test_archived_feedback_is_terminal(container):
    f = _general(container)
    container.feedback_service.archive(f.feedback_id)

    with pytest.raises(PreconditionFailed):
        container.feedback_service.set_status(f.feedback_id, "new")
    with pytest.raises(PreconditionFailed):
        container.feedback_service.reply(f.feedback_id, "Late reply")


def test_replied_status_only_through_reply(container):
    f = _general(container)

    with pytest.raises(ValidationError):
        container.feedback_service.set_status(f.feedback_id, "replied")
    with pytest.raises(ValidationError):
        container.feedback_service.reply(f.feedback_id, "  ")


def test_attendee_feedback_flow(container, make_attendee):
    a = make_attendee()

    f = container.feedback_service.submit_for_attendee(
        mobile=a.mobile, message="Loved the afternoon panel", feedback_type="appreciation", rating=5
    )

    assert f.flow == FeedbackFlow.ATTENDEE
    assert f.status == FeedbackStatus.PENDING
    assert f.category == "appreciation"
    assert f.attendee_id == a.attendee_id
    assert f.name == a.name
    assert f.zone == a.zone

    reviewed = container.feedback_service.set_status(f.feedback_id, "reviewed")
    assert reviewed.status == FeedbackStatus.REVIEWED
    assert container.feedback_service.set_status(f.feedback_id, "pending").status == FeedbackStatus.PENDING

    with pytest.raises(PreconditionFailed):
        container.feedback_service.archive(f.feedback_id)


def test_attendee_feedback_validation(container, make_attendee):
    make_attendee()

    with pytest.raises(ValidationError, match="Feedback must be at least 10 characters long"):
        container.feedback_service.submit_for_attendee(mobile="9876543210", message="Too short")
    with pytest.raises(ValidationError, match="Unknown feedback type"):
        container.feedback_service.submit_for_attendee(
            mobile="9876543210", message="A long enough message", feedback_type="rant"
        )
    with pytest.raises(NotFoundError):
        container.feedback_service.submit_for_attendee(mobile="9000000000", message="A long enough message")


def test_list_filters(container, make_attendee):
    make_attendee()
    _general(container, message="Food was cold", category="food", rating=2, sentiment="negative")
    _general(container, message="Speakers were superb", category="speakers", rating=5)
    container.feedback_service.submit_for_attendee(mobile="9876543210", message="Please add more breaks")

    svc = container.feedback_service
    assert len(svc.list_feedback()) == 3
    assert [f.category for f in svc.list_feedback(FeedbackListFilter(flow="attendee"))] == ["general"]
    assert [f.message for f in svc.list_feedback(FeedbackListFilter(search="cold"))] == ["Food was cold"]
    assert [f.message for f in svc.list_feedback(FeedbackListFilter(rating="low"))] == ["Food was cold"]
    assert len(svc.list_feedback(FeedbackListFilter(rating="high"))) == 2
    assert [f.category for f in svc.list_feedback(FeedbackListFilter(sentiment="negative"))] == ["food"]


def test_stats(container):
    for rating in (5, 4, 2, 0, 1):
        _general(container, rating=rating, sentiment="negative" if rating and rating < 3 else "positive")

    stats = container.feedback_service.stats()

    assert stats.total == 5
    assert stats.by_status == {"new": 5}
    assert stats.high_rating == 2
    assert stats.low_rating == 2
    assert stats.average_rating == 3.0
    assert stats.distribution == {1: 1, 2: 1, 3: 0, 4: 1, 5: 1}
    assert stats.positive == 3
    assert stats.negative == 2


def test_delete(container):
    f = _general(container)

    container.feedback_service.delete(f.feedback_id)

    with pytest.raises(NotFoundError):
        container.feedback_service.get(f.feedback_id)

from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import FeedbackFlow, FeedbackStatus, Sentiment
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_db_datetime, to_db_datetime
from .model import Feedback, NewFeedback
from .repository import FeedbackRepository

_COLUMNS = """
    feedback_id, flow, category, message, rating, status, created_at,
    name, email, sentiment, attendee_id, mobile, designation, zone,
    admin_reply, replied_at
"""


def _row_to_feedback(r: dict) -> Feedback:
    return Feedback(
        feedback_id=int(r["feedback_id"]),
        flow=FeedbackFlow(r["flow"]),
        category=r.get("category") or "",
        message=r["message"],
        rating=int(r.get("rating") or 0),
        status=FeedbackStatus(r["status"]),
        created_at=from_db_datetime(r.get("created_at")),
        name=r.get("name") or "",
        email=r.get("email") or "",
        sentiment=Sentiment(r["sentiment"]) if r.get("sentiment") else None,
        attendee_id=int(r["attendee_id"]) if r.get("attendee_id") is not None else None,
        mobile=r.get("mobile") or "",
        designation=r.get("designation") or "",
        zone=r.get("zone") or "",
        admin_reply=r.get("admin_reply") or "",
        replied_at=from_db_datetime(r.get("replied_at")),
    )


class MySQLFeedbackRepository(FeedbackRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, feedback: NewFeedback, *, status: FeedbackStatus) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO feedback(
                    flow, category, message, rating, status, created_at,
                    name, email, sentiment, attendee_id, mobile, designation, zone
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    feedback.flow.value,
                    feedback.category,
                    feedback.message,
                    int(feedback.rating),
                    status.value,
                    to_db_datetime(feedback.created_at),
                    feedback.name,
                    feedback.email,
                    feedback.sentiment.value if feedback.sentiment else None,
                    feedback.attendee_id,
                    feedback.mobile,
                    feedback.designation,
                    feedback.zone,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, feedback_id: int) -> Optional[Feedback]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM feedback WHERE feedback_id=%s", (int(feedback_id),))
            r = fetchone(cur)
            return _row_to_feedback(r) if r else None

    def list_all(self) -> Sequence[Feedback]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM feedback ORDER BY created_at DESC, feedback_id DESC")
            return [_row_to_feedback(r) for r in fetchall(cur)]

    def update_status(
        self,
        *,
        feedback_id: int,
        expected: FeedbackStatus,
        status: FeedbackStatus,
        admin_reply: Optional[str] = None,
        replied_at: Optional[datetime] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            if admin_reply is None:
                cur.execute(
                    "UPDATE feedback SET status=%s WHERE feedback_id=%s AND status=%s",
                    (status.value, int(feedback_id), expected.value),
                )
            else:
                cur.execute(
                    """
                    UPDATE feedback
                    SET status=%s, admin_reply=%s, replied_at=%s
                    WHERE feedback_id=%s AND status=%s
                    """,
                    (status.value, admin_reply, to_db_datetime(replied_at), int(feedback_id), expected.value),
                )
            return cur.rowcount > 0

    def delete_by_id(self, feedback_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM feedback WHERE feedback_id=%s", (int(feedback_id),))
            return cur.rowcount > 0

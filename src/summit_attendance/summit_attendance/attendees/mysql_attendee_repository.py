from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.constants import EVENT_DAYS
from ..core.enums import SessionKey
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_db_datetime, to_db_datetime
from .model import Attendee, DayAttendance
from .repository import AttendeeRepository

_DAY_FIELDS = ("attended", "session", "late_minutes", "remarks", "manual_entry", "checkin_at", "manual_entry_time")

_COLUMNS = ", ".join(
    ["attendee_id", "name", "mobile", "designation", "zone", "registered_at", "last_updated"]
    + [f"day{d}_{f}" for d in EVENT_DAYS for f in _DAY_FIELDS]
)


def _day_prefix(day: int) -> str:
    day = int(day)
    if day not in EVENT_DAYS:
        raise ValueError(f"Unknown event day: {day!r}")
    return f"day{day}_"


def _parse_session(value) -> Optional[SessionKey]:
    if not value:
        return None
    try:
        return SessionKey(value)
    except ValueError:
        return None


def _row_to_day(r: dict, day: int) -> DayAttendance:
    p = _day_prefix(day)
    return DayAttendance(
        attended=bool(r.get(f"{p}attended")),
        session=_parse_session(r.get(f"{p}session")),
        late_minutes=int(r.get(f"{p}late_minutes") or 0),
        remarks=r.get(f"{p}remarks") or "",
        manual_entry=bool(r.get(f"{p}manual_entry")),
        checkin_timestamp=from_db_datetime(r.get(f"{p}checkin_at")),
        manual_entry_time=r.get(f"{p}manual_entry_time"),
    )


def _row_to_attendee(r: dict) -> Attendee:
    return Attendee(
        attendee_id=int(r["attendee_id"]),
        name=r["name"],
        mobile=r["mobile"],
        designation=r.get("designation") or "",
        zone=r.get("zone") or "",
        day1=_row_to_day(r, 1),
        day2=_row_to_day(r, 2),
        registered_at=from_db_datetime(r.get("registered_at")),
        last_updated=from_db_datetime(r.get("last_updated")),
    )


def _day_values(attendance: DayAttendance) -> tuple:
    return (
        1 if attendance.attended else 0,
        attendance.session.value if attendance.session else None,
        int(attendance.late_minutes),
        attendance.remarks or "",
        1 if attendance.manual_entry else 0,
        to_db_datetime(attendance.checkin_timestamp),
        attendance.manual_entry_time,
    )


class MySQLAttendeeRepository(AttendeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendee_id: int) -> Optional[Attendee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendees WHERE attendee_id=%s", (int(attendee_id),))
            row = fetchone(cur)
            return _row_to_attendee(row) if row else None

    def find_by_mobile(self, mobile: str) -> Optional[Attendee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendees
                WHERE mobile=%s
                ORDER BY attendee_id ASC
                LIMIT 1
                """,
                (mobile,),
            )
            row = fetchone(cur)
            return _row_to_attendee(row) if row else None

    def list_all(self) -> Sequence[Attendee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendees ORDER BY registered_at DESC, attendee_id DESC")
            return [_row_to_attendee(r) for r in fetchall(cur)]

    def create(self, *, name: str, mobile: str, designation: str, zone: str, registered_at: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendees(name, mobile, designation, zone, registered_at)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (name, mobile, designation, zone, to_db_datetime(registered_at)),
            )
            return int(cur.lastrowid)

    def update_profile(self, *, attendee_id: int, name: str, mobile: str, designation: str, zone: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendees
                SET name=%s, mobile=%s, designation=%s, zone=%s, last_updated=UTC_TIMESTAMP()
                WHERE attendee_id=%s
                """,
                (name, mobile, designation, zone, int(attendee_id)),
            )
            return cur.rowcount > 0

    def _write_day(self, *, attendee_id: int, day: int, attendance: DayAttendance, updated_at: datetime, conditional: bool) -> bool:
        p = _day_prefix(day)
        assignments = ", ".join(f"{p}{f}=%s" for f in _DAY_FIELDS)
        where = "attendee_id=%s"
        if conditional:
            where += f" AND {p}attended=0"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE attendees SET {assignments}, last_updated=%s WHERE {where}",
                _day_values(attendance) + (to_db_datetime(updated_at), int(attendee_id)),
            )
            return cur.rowcount > 0

    def record_attendance(self, *, attendee_id: int, day: int, attendance: DayAttendance, updated_at: datetime) -> bool:
        return self._write_day(attendee_id=attendee_id, day=day, attendance=attendance, updated_at=updated_at, conditional=True)

    def overwrite_day(self, *, attendee_id: int, day: int, attendance: DayAttendance, updated_at: datetime) -> bool:
        return self._write_day(attendee_id=attendee_id, day=day, attendance=attendance, updated_at=updated_at, conditional=False)

    def delete_by_id(self, attendee_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendees WHERE attendee_id=%s", (int(attendee_id),))
            return cur.rowcount > 0
